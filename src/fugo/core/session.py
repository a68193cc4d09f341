"""Control state machine for one interactive uninstall run.

The session is driven by a single thread: it consumes events (user
input, background results, ticks) and answers with a Command telling the
driver which background operation to start next, if any.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable

from fugo.audit import AuditLog
from fugo.core.backup import backup
from fugo.core.confirmation import ConfirmationSequencer, Transition
from fugo.core.guard import is_critical_path
from fugo.core.privileges import ELEVATE_HINT
from fugo.core.uninstaller import uninstall
from fugo.models.events import (
    BackupFinished,
    DeleteFinished,
    DiscoveryFinished,
    Event,
    Key,
    OperationFailed,
    Resize,
    Tick,
)
from fugo.models.installation import DiscoveryResult, Installation
from fugo.models.outcome import BackupOutcome, DeleteOutcome
from fugo.utils import bytes_to_human

log = logging.getLogger(__name__)

_STEP_NAMES = ("First", "Second", "Third")


class Phase(Enum):
    LOADING = "loading"
    NOTHING_FOUND = "nothing_found"
    CONFIRM = "confirm"
    CREATING_BACKUP = "creating_backup"
    DELETING = "deleting"
    DRY_RUN_COMPLETE = "dry_run_complete"
    COMPLETE = "complete"
    CANCELLED = "cancelled"
    FAILED = "failed"


TERMINAL_PHASES = frozenset({
    Phase.NOTHING_FOUND,
    Phase.DRY_RUN_COMPLETE,
    Phase.COMPLETE,
    Phase.CANCELLED,
    Phase.FAILED,
})


class Command(Enum):
    NONE = "none"
    RUN_BACKUP = "run_backup"
    RUN_DELETE = "run_delete"
    QUIT = "quit"


@dataclass(frozen=True, slots=True)
class ViewModel:
    """Immutable snapshot of everything the renderer needs."""

    phase: Phase
    installations: tuple[Installation, ...]
    primary_path: Path | None
    permissions_ok: bool
    dry_run: bool
    step: int | None
    prompt: str
    backup_dir: Path
    log_path: Path
    error: str
    deletion_complete: bool
    spinner_frame: int
    width: int
    targets: tuple[Path, ...] = ()
    removed: tuple[Path, ...] = ()


class UninstallSession:
    """Sequences discovery, confirmation, backup and removal for one run."""

    def __init__(
        self,
        audit: AuditLog,
        backup_dir: Path,
        dry_run: bool = True,
        token: str | None = None,
    ) -> None:
        self.audit = audit
        self.backup_dir = backup_dir
        self.sequencer = ConfirmationSequencer(token=token, dry_run=dry_run)
        self.phase = Phase.LOADING
        self.discovery: DiscoveryResult | None = None
        self.backup_outcome: BackupOutcome | None = None
        self.delete_outcome: DeleteOutcome | None = None
        self.error = ""
        self.spinner_frame = 0
        self.width = 80
        self.height = 24

    @property
    def finished(self) -> bool:
        return self.phase in TERMINAL_PHASES

    @property
    def awaiting_input(self) -> bool:
        return self.phase is Phase.CONFIRM

    @property
    def exit_code(self) -> int:
        return 1 if self.error else 0

    @property
    def installations(self) -> tuple[Installation, ...]:
        return self.discovery.installations if self.discovery else ()

    def dispatch(self, event: Event) -> Command:
        """Apply *event* and return the next command for the driver."""
        match event:
            case DiscoveryFinished(result=result):
                return self._on_discovery(result)
            case BackupFinished(outcome=outcome):
                return self._on_backup(outcome)
            case DeleteFinished(outcome=outcome):
                return self._on_delete(outcome)
            case OperationFailed(name=name, error=error):
                self.fail(f"{name} failed unexpectedly: {error}")
                return Command.NONE
            case Tick():
                self.spinner_frame += 1
                return Command.NONE
            case Resize(width=width, height=height):
                self.width, self.height = width, height
                return Command.NONE
            case Key(name="quit"):
                return self._on_quit()
            case Key(name="toggle"):
                self._on_toggle()
                return Command.NONE
            case Key(name="submit", text=text):
                if self.phase is Phase.CONFIRM:
                    return self._on_submit(text)
                return Command.NONE
            case _:
                log.debug("Ignoring event %r in phase %s", event, self.phase.value)
                return Command.NONE

    def fail(self, message: str) -> None:
        """End the run with a fatal error."""
        self.error = message
        self.phase = Phase.FAILED
        self.audit.error(message)

    def job_for(self, command: Command) -> tuple[str, Callable[[], Event]]:
        """Background work for *command*.

        The job closes over an immutable snapshot of the installations so
        the control thread can keep handling events meanwhile.
        """
        if self.discovery is None:
            raise RuntimeError("No discovery result to act on")
        installs = self.discovery.installations
        backup_dir = self.backup_dir

        if command is Command.RUN_BACKUP:
            return "backup", lambda: BackupFinished(backup(installs, backup_dir))
        if command is Command.RUN_DELETE:
            primary = self.discovery.primary_path
            secondary = self.discovery.version_manager_paths
            if primary is None or is_critical_path(primary):
                raise RuntimeError(f"Refusing to delete {primary}")
            return "delete", lambda: DeleteFinished(uninstall(primary, secondary))
        raise ValueError(f"No background job for {command}")

    def snapshot(self) -> ViewModel:
        return ViewModel(
            phase=self.phase,
            installations=self.installations,
            primary_path=self.discovery.primary_path if self.discovery else None,
            permissions_ok=self.discovery.permissions_ok if self.discovery else False,
            dry_run=self.sequencer.dry_run,
            step=self.sequencer.step,
            prompt=self.sequencer.prompt,
            backup_dir=self.backup_dir,
            log_path=self.audit.path,
            error=self.error,
            deletion_complete=bool(self.delete_outcome and self.delete_outcome.success),
            spinner_frame=self.spinner_frame,
            width=self.width,
            targets=self.discovery.removal_targets if self.discovery else (),
            removed=self._removed_paths(),
        )

    def _removed_paths(self) -> tuple[Path, ...]:
        outcome = self.delete_outcome
        if outcome is None or not outcome.success:
            return ()
        return (outcome.path, *outcome.removed_secondary)

    # ── event handlers ───────────────────────────────────────────────────

    def _unexpected(self, what: str) -> Command:
        self.fail(f"unexpected {what} while in state '{self.phase.value}'")
        return Command.NONE

    def _on_discovery(self, result: DiscoveryResult) -> Command:
        if self.phase is not Phase.LOADING:
            return self._unexpected("discovery result")
        if result.error:
            self.fail(result.error)
            return Command.NONE

        self.discovery = result
        self.audit.info(f"Found {len(result.installations)} Go installations")
        for install in result.installations:
            self.audit.info(
                f"Installation: {install.path} ({install.version}, {install.source.value}, "
                f"{bytes_to_human(install.size_bytes)}, {install.permissions})"
            )

        if not result.installations:
            self.phase = Phase.NOTHING_FOUND
            return Command.NONE

        if not result.permissions_ok:
            self.audit.warning(f"Insufficient permissions detected: {ELEVATE_HINT}")
        self.phase = Phase.CONFIRM
        return Command.NONE

    def _on_toggle(self) -> None:
        if self.phase is not Phase.CONFIRM:
            return
        dry_run = self.sequencer.toggle_dry_run()
        self.audit.info(f"Dry run mode: {str(dry_run).lower()}")

    def _on_submit(self, text: str) -> Command:
        step = self.sequencer.step or 0
        transition = self.sequencer.submit(text)

        match transition:
            case Transition.ADVANCED:
                self.audit.info(f"{_STEP_NAMES[step]} confirmation step passed")
                return Command.NONE
            case Transition.ABORTED:
                self.audit.info(f"Confirmation step {step + 1} not matched, operation cancelled")
                self.phase = Phase.CANCELLED
                return Command.QUIT
            case Transition.DRY_RUN_COMPLETE:
                self.audit.info("All confirmation steps passed, proceeding with operation")
                self.audit.success(
                    f"Dry run completed: {len(self.discovery.removal_targets)} director(ies) would be removed, "
                    "no files were deleted"
                )
                self.phase = Phase.DRY_RUN_COMPLETE
                return Command.NONE
            case Transition.BACKUP_PENDING:
                self.audit.info("All confirmation steps passed, proceeding with operation")
                self.phase = Phase.CREATING_BACKUP
                return Command.RUN_BACKUP
        return self._unexpected(f"confirmation transition {transition}")

    def _on_backup(self, outcome: BackupOutcome) -> Command:
        if self.phase is not Phase.CREATING_BACKUP:
            return self._unexpected("backup result")
        self.backup_outcome = outcome
        if not outcome.success:
            failed = f" ({outcome.failed_path})" if outcome.failed_path else ""
            self.error = f"backup failed{failed}: {outcome.error}"
            self.audit.error(f"Backup failed{failed}: {outcome.error}")
            self.phase = Phase.COMPLETE
            return Command.NONE

        self.audit.success(f"Backup created at: {outcome.backup_dir} ({len(outcome.archives)} archive(s))")
        self.phase = Phase.DELETING
        return Command.RUN_DELETE

    def _on_delete(self, outcome: DeleteOutcome) -> Command:
        if self.phase is not Phase.DELETING:
            return self._unexpected("deletion result")
        self.delete_outcome = outcome
        self.phase = Phase.COMPLETE
        if outcome.success:
            extra = f", plus {len(outcome.removed_secondary)} gvm version(s)" if outcome.removed_secondary else ""
            self.audit.success(f"Go uninstallation completed successfully: removed {outcome.path}{extra}")
        else:
            self.error = outcome.error
            self.audit.error(f"Go uninstallation failed: {outcome.error}")
        return Command.NONE

    def _on_quit(self) -> Command:
        if not self.finished:
            self.audit.info("User cancelled operation")
            self.phase = Phase.CANCELLED
        return Command.QUIT
