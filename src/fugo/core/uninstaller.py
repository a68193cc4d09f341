"""Recursive removal of an installation root and gvm leftovers."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Iterable

from fugo.core.guard import is_critical_path
from fugo.core.privileges import ELEVATE_HINT
from fugo.models.outcome import DeleteOutcome

log = logging.getLogger(__name__)

_PROBE_NAME = "fugo-test-file"


def write_probe(path: Path) -> None:
    """Create and delete a marker file inside *path*.

    Raises:
        OSError: If *path* is missing or not writable.
    """
    marker = path / _PROBE_NAME
    try:
        marker.write_bytes(b"test")
    finally:
        marker.unlink(missing_ok=True)


def uninstall(path: Path, secondary: Iterable[Path] = ()) -> DeleteOutcome:
    """Remove *path*, then every *secondary* directory.

    Nothing is deleted if *path* is critical or missing, or if the write
    probe fails. Secondary removals are best effort and never affect ``success``.
    """
    outcome = DeleteOutcome(path=path)

    if is_critical_path(path):
        outcome.error_kind = "critical_path"
        outcome.error = f"refusing to operate on critical system directory: {path}"
        return outcome

    if _missing(path):
        outcome.error_kind = "not_found"
        outcome.error = f"no Go installation at {path}"
        return outcome

    try:
        write_probe(path)
    except OSError as e:
        outcome.error_kind = "permission_denied"
        outcome.error = f"no write permission for {path}: {e.strerror or e}; {ELEVATE_HINT}"
        return outcome

    try:
        shutil.rmtree(path)
    except OSError as e:
        outcome.error_kind = "remove_failed"
        outcome.error = f"failed to remove {path}: {e}"
        return outcome

    outcome.success = True
    log.info("Removed %s", path)

    for extra in secondary:
        if extra == path or is_critical_path(extra):
            continue
        try:
            shutil.rmtree(extra)
        except FileNotFoundError:
            continue
        except OSError as e:
            log.debug("Could not remove %s: %s", extra, e)
            outcome.failed_secondary.append(extra)
            continue
        outcome.removed_secondary.append(extra)

    return outcome


def _missing(path: Path) -> bool:
    try:
        path.stat()
    except FileNotFoundError:
        return True
    except OSError:
        # Unreadable is not missing; the write probe reports it.
        return False
    return False
