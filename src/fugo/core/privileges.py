"""Privilege checks for system-wide Go installations."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from fugo.core.prober import DEFAULT_ROOT, WINDOWS, detect_os_family

log = logging.getLogger(__name__)

ELEVATE_HINT = "run with sudo (or as Administrator) for system-wide Go installations"

_MARKER_NAME = "fugo-permission-test"


class PermissionCheckError(Exception):
    """Raised when the current user cannot modify an installation root."""


def is_root() -> bool:
    """Check if the current process is running as root."""
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def check_permissions(probe_root: Path = DEFAULT_ROOT, os_family: str | None = None) -> None:
    """Verify we could delete from *probe_root* without deleting anything.

    Writes and removes a marker file inside *probe_root*. Windows, root,
    and a missing *probe_root* all pass without probing.

    Raises:
        PermissionCheckError: If the marker cannot be written.
    """
    os_family = os_family or detect_os_family()
    if os_family == WINDOWS or is_root():
        return
    if not probe_root.exists():
        return

    marker = probe_root / _MARKER_NAME
    try:
        marker.write_bytes(b"test")
    except OSError as e:
        log.debug("Permission probe failed in %s: %s", probe_root, e)
        raise PermissionCheckError(f"insufficient permissions: {ELEVATE_HINT}") from e
    finally:
        try:
            marker.unlink(missing_ok=True)
        except OSError:
            log.debug("Could not remove permission marker %s", marker)


def permissions_ok(probe_root: Path = DEFAULT_ROOT, os_family: str | None = None) -> bool:
    """Boolean form of :func:`check_permissions` for display."""
    try:
        check_permissions(probe_root, os_family)
    except PermissionCheckError as e:
        log.info("%s", e)
        return False
    return True
