"""Events consumed by the interactive control loop."""

from __future__ import annotations

from dataclasses import dataclass

from fugo.models.installation import DiscoveryResult
from fugo.models.outcome import BackupOutcome, DeleteOutcome


@dataclass(frozen=True, slots=True)
class DiscoveryFinished:
    result: DiscoveryResult


@dataclass(frozen=True, slots=True)
class BackupFinished:
    outcome: BackupOutcome


@dataclass(frozen=True, slots=True)
class DeleteFinished:
    outcome: DeleteOutcome


@dataclass(frozen=True, slots=True)
class OperationFailed:
    """A background operation raised instead of returning its result."""

    name: str
    error: str


@dataclass(frozen=True, slots=True)
class Tick:
    """Spinner heartbeat while a background operation is pending."""


@dataclass(frozen=True, slots=True)
class Resize:
    width: int
    height: int


@dataclass(frozen=True, slots=True)
class Key:
    """User input.

    ``name`` is ``quit``, ``toggle`` or ``submit``; ``text`` carries the
    submitted line for ``submit``.
    """

    name: str
    text: str = ""


Event = DiscoveryFinished | BackupFinished | DeleteFinished | OperationFailed | Tick | Resize | Key
