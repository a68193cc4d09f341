"""Three-step confirmation gate in front of any deletion.

The user has to type ``CONFIRM``, then the per-run token, then
``DESTROY``. A wrong answer at any step ends the run; there is no
second attempt.
"""

from __future__ import annotations

import hashlib
import logging
import secrets
from enum import Enum

log = logging.getLogger(__name__)

CONFIRM_PHRASE = "CONFIRM"
DESTROY_PHRASE = "DESTROY"
TOKEN_LENGTH = 8


class Stage(Enum):
    AWAIT_PHRASE = 0
    AWAIT_TOKEN = 1
    AWAIT_FINAL_PHRASE = 2
    DRY_RUN_COMPLETE = "dry_run_complete"
    BACKUP_PENDING = "backup_pending"
    ABORTED = "aborted"

    @property
    def is_terminal(self) -> bool:
        return not isinstance(self.value, int)


class Transition(Enum):
    """What a submitted answer did to the sequencer."""

    ADVANCED = "advanced"
    DRY_RUN_COMPLETE = "dry_run_complete"
    BACKUP_PENDING = "backup_pending"
    ABORTED = "aborted"


def generate_token() -> str:
    """Random 8-character hex token for the second confirmation step."""
    return hashlib.sha256(secrets.token_bytes(16)).hexdigest()[:TOKEN_LENGTH]


class ConfirmationSequencer:
    """Tracks progress through the confirmation steps for one run."""

    def __init__(self, token: str | None = None, dry_run: bool = True) -> None:
        self.token = token or generate_token()
        self.dry_run = dry_run
        self.stage = Stage.AWAIT_PHRASE

    @property
    def step(self) -> int | None:
        """0, 1 or 2 while awaiting input, None once finished."""
        return None if self.stage.is_terminal else self.stage.value

    @property
    def prompt(self) -> str:
        match self.stage:
            case Stage.AWAIT_PHRASE:
                return f"Type '{CONFIRM_PHRASE}' to proceed"
            case Stage.AWAIT_TOKEN:
                return f"Type hash: {self.token}"
            case Stage.AWAIT_FINAL_PHRASE:
                return f"Type '{DESTROY_PHRASE}' to proceed"
            case _:
                return ""

    def toggle_dry_run(self) -> bool:
        """Flip dry-run mode and return the new value."""
        if self.stage.is_terminal:
            raise RuntimeError(f"Cannot toggle dry-run after confirmation finished ({self.stage.value})")
        self.dry_run = not self.dry_run
        return self.dry_run

    def submit(self, text: str) -> Transition:
        """Feed one answer to the current step.

        Raises:
            RuntimeError: If the sequence already finished.
        """
        answer = text.strip()
        match self.stage:
            case Stage.AWAIT_PHRASE if answer.upper() == CONFIRM_PHRASE:
                self.stage = Stage.AWAIT_TOKEN
            case Stage.AWAIT_TOKEN if answer == self.token:
                self.stage = Stage.AWAIT_FINAL_PHRASE
            case Stage.AWAIT_FINAL_PHRASE if answer.upper() == DESTROY_PHRASE:
                if self.dry_run:
                    self.stage = Stage.DRY_RUN_COMPLETE
                    return Transition.DRY_RUN_COMPLETE
                self.stage = Stage.BACKUP_PENDING
                return Transition.BACKUP_PENDING
            case Stage.AWAIT_PHRASE | Stage.AWAIT_TOKEN | Stage.AWAIT_FINAL_PHRASE:
                log.debug("Confirmation mismatch at step %s", self.stage.value)
                self.stage = Stage.ABORTED
                return Transition.ABORTED
            case _:
                raise RuntimeError(f"Confirmation already finished ({self.stage.value})")
        return Transition.ADVANCED
