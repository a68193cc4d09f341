"""Shared utility functions."""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

log = logging.getLogger(__name__)


def xdg_config_home() -> Path:
    """Return XDG_CONFIG_HOME, defaulting to ~/.config."""
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


def xdg_data_home() -> Path:
    """Return XDG_DATA_HOME, defaulting to ~/.local/share."""
    return Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share"))


def fugo_data_dir() -> Path:
    """Directory holding per-user logs and backups."""
    return xdg_data_home() / "fugo"


def dir_size(path: Path | str) -> int:
    """Sum the sizes of all regular files under *path*.

    Uses GNU ``find`` (C-speed walk) when available, falling back to
    ``os.scandir`` on systems without it (BSD find has no ``-printf``).
    Unreadable entries are skipped; the walk never aborts.
    """
    try:
        return _dir_size_find(str(path))
    except (OSError, ValueError, subprocess.SubprocessError):
        return _dir_size_scandir(path)


def _dir_size_find(path_str: str) -> int:
    """Walk a directory tree using GNU find (pure C, no Python per-file overhead)."""
    proc = subprocess.run(
        ["find", path_str, "-type", "f", "-printf", "%s\n"],
        capture_output=True, timeout=60,
    )
    # find exits 1 on permission errors but still prints what it could read
    if proc.returncode != 0 and not proc.stdout:
        raise ValueError(f"find failed with exit {proc.returncode}")
    return sum(int(line) for line in proc.stdout.split(b"\n") if line)


def _dir_size_scandir(path: Path | str) -> int:
    """Walk a directory tree using os.scandir (pure Python fallback)."""
    total = 0
    stack: list[Path | str] = [path]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                for entry in it:
                    try:
                        if entry.is_file(follow_symlinks=False):
                            total += entry.stat(follow_symlinks=False).st_size
                        elif entry.is_dir(follow_symlinks=False):
                            stack.append(entry.path)
                    except OSError:
                        pass
        except OSError:
            log.debug("Cannot read directory: %s", current)
    return total


def bytes_to_human(size_bytes: int) -> str:
    """Convert byte count to a human-readable string."""
    if size_bytes < 0:
        return f"-{bytes_to_human(-size_bytes)}"
    if size_bytes == 0:
        return "0 B"

    units = ("B", "KB", "MB", "GB", "TB")
    value = float(size_bytes)
    for unit in units[:-1]:
        if abs(value) < 1024:
            return f"{value:.1f} {unit}" if unit != "B" else f"{int(value)} B"
        value /= 1024
    return f"{value:.1f} {units[-1]}"
