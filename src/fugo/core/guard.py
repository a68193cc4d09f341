"""Deny-list of directories that must never be treated as an install root."""

from __future__ import annotations

import ntpath
import posixpath
import re
from pathlib import PurePath

_POSIX_CRITICAL = frozenset({
    "/", "/usr", "/bin", "/sbin", "/lib", "/boot", "/etc", "/home", "/root", "/var", "/opt",
    "/usr/local", "/usr/lib", "/usr/bin", "/opt/homebrew",
    "/Users", "/System", "/Library",
})

# Compared case-insensitively, like the filesystems they live on.
_WINDOWS_CRITICAL = frozenset(p.casefold() for p in (
    "C:\\", "C:\\Windows", "C:\\Program Files", "C:\\Users",
))

_DRIVE_RE = re.compile(r"^[A-Za-z]:")
_UNC_PREFIX = "\\\\"


def _is_windows_path(path: str) -> bool:
    """Drive-letter or UNC paths; a backslash alone is a valid POSIX name character."""
    return bool(_DRIVE_RE.match(path)) or path.startswith(_UNC_PREFIX)


def normalize_path(path: str | PurePath) -> str:
    """Collapse ``.``/``..`` segments and trailing separators without touching disk."""
    raw = str(path)
    if _is_windows_path(raw):
        return ntpath.normpath(raw)
    normalized = posixpath.normpath(raw)
    # POSIX keeps a leading "//" as implementation-defined; treat it as root.
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    return normalized


def is_critical_path(path: str | PurePath) -> bool:
    """Return True if *path* is exactly one of the protected system roots.

    Only exact matches count: ``/usr/local/go`` is fine, ``/usr/local/``
    is not.
    """
    if not str(path):
        return False
    normalized = normalize_path(path)
    if _is_windows_path(normalized):
        return normalized.casefold() in _WINDOWS_CRITICAL
    return normalized in _POSIX_CRITICAL
