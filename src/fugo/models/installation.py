"""Installation and discovery result dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

UNKNOWN_VERSION = "unknown version"
UNKNOWN_PERMISSIONS = "unknown"


class Source(str, Enum):
    """Where an installation came from."""

    OFFICIAL = "official"
    VERSION_MANAGER = "version-manager"
    PACKAGE_MANAGER = "package-manager"
    HOMEBREW = "homebrew"


@dataclass(frozen=True, slots=True)
class Installation:
    """Single Go toolchain found on disk."""

    path: Path
    version: str
    source: Source
    size_bytes: int = 0
    permissions: str = UNKNOWN_PERMISSIONS
    verified: bool = False


@dataclass(frozen=True, slots=True)
class DiscoveryResult:
    """Result of one discovery pass.

    When ``error`` is set the run must stop; the other fields are not
    meaningful.
    """

    installations: tuple[Installation, ...] = ()
    primary_path: Path | None = None
    permissions_ok: bool = False
    versions: tuple[str, ...] = ()
    error: str = ""

    @property
    def version_manager_paths(self) -> tuple[Path, ...]:
        return tuple(i.path for i in self.installations if i.source is Source.VERSION_MANAGER)

    @property
    def removal_targets(self) -> tuple[Path, ...]:
        """Directories a live run deletes: the primary root, then gvm versions."""
        if self.primary_path is None:
            return ()
        return (self.primary_path,) + tuple(p for p in self.version_manager_paths if p != self.primary_path)

    @property
    def total_bytes(self) -> int:
        return sum(i.size_bytes for i in self.installations)
