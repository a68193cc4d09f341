"""Turn candidate directories into verified Installation records."""

from __future__ import annotations

import logging
import os
import stat
import subprocess
from pathlib import Path

from fugo.core.guard import is_critical_path
from fugo.core.prober import candidate_paths, detect_os_family, version_manager_root
from fugo.models.installation import (
    UNKNOWN_PERMISSIONS,
    UNKNOWN_VERSION,
    Installation,
    Source,
)
from fugo.utils import dir_size

log = logging.getLogger(__name__)

_VERSION_TIMEOUT = 10


def _go_executable(path: Path) -> Path:
    name = "go.exe" if os.name == "nt" else "go"
    return path / "bin" / name


def get_version(path: Path) -> str:
    """Report the Go version installed at *path*.

    Asks the toolchain itself first, then reads the ``VERSION`` file.
    Never raises.
    """
    go_exe = _go_executable(path)
    try:
        if go_exe.is_file():
            proc = subprocess.run(
                [str(go_exe), "version"],
                capture_output=True, text=True, timeout=_VERSION_TIMEOUT,
            )
            if proc.returncode == 0 and proc.stdout.strip():
                return proc.stdout.strip()
    except (OSError, subprocess.SubprocessError) as e:
        log.debug("Cannot run %s: %s", go_exe, e)

    try:
        content = (path / "VERSION").read_text(encoding="utf-8", errors="replace")
    except OSError:
        return UNKNOWN_VERSION
    # Newer releases append a "time ..." line after the version.
    first_line = content.strip().splitlines()[0].strip() if content.strip() else ""
    return f"go version {first_line}" if first_line else UNKNOWN_VERSION


def compute_size(path: Path) -> int:
    return dir_size(path)


def get_permissions(path: Path) -> str:
    """Mode string such as ``drwxr-xr-x``, or ``unknown``."""
    try:
        return stat.filemode(path.stat().st_mode)
    except OSError:
        return UNKNOWN_PERMISSIONS


def inspect(path: Path, source: Source) -> Installation | None:
    """Build an Installation for *path*, or None if it is not usable.

    Critical paths are rejected before anything else touches them.
    """
    if is_critical_path(path):
        log.warning("Skipping critical system directory: %s", path)
        return None
    try:
        if not path.is_dir():
            return None
    except OSError:
        return None

    return Installation(
        path=path,
        version=get_version(path),
        source=source,
        size_bytes=compute_size(path),
        permissions=get_permissions(path),
        verified=True,
    )


def _child_dirs(root: Path, prefix: str = "") -> list[Path]:
    try:
        children = sorted(root.iterdir())
    except OSError:
        return []
    result = []
    for child in children:
        try:
            if child.is_dir() and child.name.startswith(prefix):
                result.append(child)
        except OSError:
            log.debug("Cannot access: %s", child)
    return result


def version_manager_dirs() -> list[Path]:
    """gvm-managed version directories (``~/.gvm/gos/go*``)."""
    return _child_dirs(version_manager_root(), prefix="go")


def version_manager_installations() -> list[Installation]:
    found = []
    for path in version_manager_dirs():
        install = inspect(path, Source.VERSION_MANAGER)
        if install is not None:
            found.append(install)
    return found


def _real_key(path: Path) -> str:
    try:
        return os.path.realpath(path)
    except OSError:
        return str(path)


def detect_installations(
    os_family: str | None = None,
    extra_paths: list[Path] | None = None,
    derived: Path | None = None,
) -> list[Installation]:
    """Probe every known root and return what is actually installed.

    *derived* is the root located from the active ``go`` binary, if any.
    Order is official roots, gvm versions, package-manager roots, then
    Homebrew cellar entries. Paths that resolve to the same directory are
    listed once; the first probe to find them wins.
    """
    os_family = os_family or detect_os_family()
    candidates = candidate_paths(os_family, extra=extra_paths, derived=derived)

    found: list[Installation] = []
    for path, source in candidates:
        if source is not Source.OFFICIAL:
            continue
        if (install := inspect(path, source)) is not None:
            found.append(install)

    found.extend(version_manager_installations())

    for path, source in candidates:
        if source is Source.PACKAGE_MANAGER:
            if (install := inspect(path, source)) is not None:
                found.append(install)
        elif source is Source.HOMEBREW:
            for entry in _child_dirs(path):
                if (install := inspect(entry, source)) is not None:
                    found.append(install)

    unique: list[Installation] = []
    seen: set[str] = set()
    for install in found:
        key = _real_key(install.path)
        if key in seen:
            log.debug("Skipping duplicate installation %s (%s)", install.path, install.source.value)
            continue
        seen.add(key)
        unique.append(install)
    return unique


def reported_versions(primary: Path) -> list[str]:
    """Version strings for the summary view.

    The active toolchain's ``go version`` output plus one line per gvm
    version directory.
    """
    versions: list[str] = []
    active = _active_go_version()
    if active:
        versions.append(active)
    if primary.exists():
        versions.extend(f"go {p.name}" for p in version_manager_dirs())
    return versions


def _active_go_version() -> str:
    try:
        proc = subprocess.run(
            ["go", "version"], capture_output=True, text=True, timeout=_VERSION_TIMEOUT,
        )
    except (OSError, subprocess.SubprocessError):
        return ""
    return proc.stdout.strip() if proc.returncode == 0 else ""
