"""Well-known Go installation roots per OS family."""

from __future__ import annotations

import logging
import os
import platform
import shutil
from pathlib import Path, PurePosixPath, PureWindowsPath

from fugo.core.guard import is_critical_path
from fugo.models.installation import Source

log = logging.getLogger(__name__)

LINUX = "linux"
DARWIN = "darwin"
WINDOWS = "windows"

DEFAULT_ROOT = Path("/usr/local/go")

_OFFICIAL_POSIX = {
    LINUX: (Path("/usr/local/go"), Path("/opt/go"), Path("/usr/lib/go")),
    DARWIN: (Path("/usr/local/go"), Path("/opt/go")),
}
_PACKAGE_MANAGER_ROOTS = (Path("/usr/lib/golang"), Path("/usr/share/golang"))
HOMEBREW_CELLARS = (Path("/usr/local/Cellar/go"), Path("/opt/homebrew/Cellar/go"))


class DiscoveryError(Exception):
    """Raised when the install root cannot be trusted."""


def detect_os_family() -> str:
    """Return ``linux``, ``darwin`` or ``windows``.

    Anything that is neither Windows nor macOS is probed like Linux.
    """
    system = platform.system().lower()
    if system.startswith("win"):
        return WINDOWS
    if system == "darwin":
        return DARWIN
    return LINUX


def _windows_roots() -> tuple[Path, ...]:
    roots: list[Path] = []
    profile = os.environ.get("USERPROFILE")
    if profile:
        roots.append(Path(profile) / "go")
    program_files = os.environ.get("ProgramFiles")
    if program_files:
        roots.append(Path(program_files) / "Go")
    roots.append(Path("C:\\Go"))
    return tuple(roots)


def candidate_paths(
    os_family: str,
    extra: list[Path] | None = None,
    derived: Path | None = None,
) -> list[tuple[Path, Source]]:
    """Roots to probe for *os_family*, tagged with their source.

    *derived* is the root located from the active ``go`` binary; it is
    probed as an official root unless it is already listed. Homebrew
    entries are cellar directories; every child of a cellar is a
    separate installation.
    """
    candidates: list[tuple[Path, Source]] = []
    if os_family == WINDOWS:
        official = _windows_roots()
    else:
        official = _OFFICIAL_POSIX.get(os_family, _OFFICIAL_POSIX[LINUX])
    candidates.extend((p, Source.OFFICIAL) for p in official)
    candidates.extend((p, Source.OFFICIAL) for p in extra or ())

    static = {p for p, _ in candidates}
    static.update(_PACKAGE_MANAGER_ROOTS + HOMEBREW_CELLARS)
    if derived is not None and derived not in static:
        candidates.append((derived, Source.OFFICIAL))

    if os_family == LINUX:
        candidates.extend((p, Source.PACKAGE_MANAGER) for p in _PACKAGE_MANAGER_ROOTS)
    elif os_family == DARWIN:
        candidates.extend((p, Source.HOMEBREW) for p in HOMEBREW_CELLARS)
    return candidates


def version_manager_root() -> Path:
    """Directory where gvm keeps its Go versions."""
    return Path.home() / ".gvm" / "gos"


def find_go_binary() -> str | None:
    """Locate the active ``go`` executable on PATH."""
    return shutil.which("go")


def derive_install_root(binary_path: str) -> Path | None:
    """Strip the trailing ``bin/go`` from a binary path.

    Returns None when the binary does not live in a ``bin`` directory.
    """
    pure = PureWindowsPath(binary_path) if "\\" in binary_path else PurePosixPath(binary_path)
    if pure.name.lower() not in ("go", "go.exe") or pure.parent.name != "bin":
        return None
    return Path(str(pure.parent.parent))


def _check_derived_root(root: Path) -> Path:
    if is_critical_path(root):
        raise DiscoveryError(f"refusing to operate on critical system directory: {root}")
    if "go" not in str(root).lower():
        raise DiscoveryError(f"derived path does not appear to be a Go installation: {root}")
    return root


def primary_install_path(os_family: str) -> Path:
    """Choose the install root the deletion step targets.

    Raises:
        DiscoveryError: If the chosen or derived root is a critical
            directory, or the derived root does not look like Go.
    """
    if os_family == WINDOWS:
        roots = _windows_roots()
        primary = roots[0]
        if not primary.exists() and len(roots) > 1:
            primary = roots[1]
    elif os_family == DARWIN:
        primary = DEFAULT_ROOT
        if HOMEBREW_CELLARS[0].exists():
            primary = HOMEBREW_CELLARS[0]
    else:
        primary = DEFAULT_ROOT
        if Path("/usr/bin/go").exists():
            binary = find_go_binary()
            derived = derive_install_root(binary) if binary else None
            if derived is not None:
                log.debug("Derived install root %s from %s", derived, binary)
                primary = _check_derived_root(derived)

    if is_critical_path(primary):
        raise DiscoveryError(f"refusing to operate on critical system directory: {primary}")
    return primary
