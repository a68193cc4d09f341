"""Backup and deletion result dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(slots=True)
class BackupOutcome:
    """Result of archiving a batch of installations.

    Archives written before a failure are listed in ``archives`` and
    are left on disk.
    """

    backup_dir: Path
    archives: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)
    failed_path: Path | None = None
    error: str = ""

    @property
    def success(self) -> bool:
        return not self.error


@dataclass(slots=True)
class DeleteOutcome:
    """Result of removing an installation.

    ``error_kind`` is one of ``critical_path``, ``not_found``,
    ``permission_denied`` or ``remove_failed`` when the primary removal did
    not happen.
    """

    path: Path
    success: bool = False
    error_kind: str = ""
    error: str = ""
    removed_secondary: list[Path] = field(default_factory=list)
    failed_secondary: list[Path] = field(default_factory=list)
