"""Tarball snapshots of installations taken before deletion."""

from __future__ import annotations

import logging
import shutil
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Iterable

from fugo.models.installation import Installation
from fugo.models.outcome import BackupOutcome

log = logging.getLogger(__name__)

# A full Go tree is ~500 MB; gzip on a slow disk takes a while.
_TAR_TIMEOUT = 900


class BackupError(Exception):
    """Raised when an archive could not be written."""


def archive_name(timestamp: str, index: int, source: Path) -> str:
    return f"go_backup_{timestamp}_{index:02d}_{source.name or 'root'}.tar.gz"


def create_archive(source: Path, archive: Path) -> None:
    """Compress *source* into *archive* with an external ``tar``.

    Raises:
        BackupError: If tar is missing, fails, or times out.
    """
    tar = shutil.which("tar")
    if tar is None:
        raise BackupError("Could not find the 'tar' executable on PATH")

    try:
        proc = subprocess.run(
            [tar, "-czf", str(archive), "-C", str(source.parent), source.name],
            capture_output=True,
            text=True,
            timeout=_TAR_TIMEOUT,
        )
    except subprocess.TimeoutExpired:
        raise BackupError(f"Archiving {source} timed out after {_TAR_TIMEOUT // 60} minutes")
    except OSError as e:
        raise BackupError(f"Could not run tar: {e}")

    if proc.returncode != 0:
        stderr = proc.stderr.strip()
        raise BackupError(f"tar failed for {source} (exit {proc.returncode}): {stderr}")


def backup(
    installations: Iterable[Installation],
    backup_dir: Path,
    timestamp: str | None = None,
) -> BackupOutcome:
    """Archive every installation that still exists into *backup_dir*.

    Stops at the first failure. Archives already written for earlier
    installations are kept.
    """
    timestamp = timestamp or datetime.now().strftime("%Y%m%d_%H%M%S")
    outcome = BackupOutcome(backup_dir=backup_dir)

    try:
        backup_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        outcome.error = f"Could not create backup directory {backup_dir}: {e}"
        return outcome

    for index, install in enumerate(installations, 1):
        if not install.path.exists():
            log.info("Skipping backup of %s: no longer exists", install.path)
            outcome.skipped.append(install.path)
            continue

        archive = backup_dir / archive_name(timestamp, index, install.path)
        try:
            create_archive(install.path, archive)
        except BackupError as e:
            log.warning("Backup of %s failed: %s", install.path, e)
            outcome.failed_path = install.path
            outcome.error = str(e)
            return outcome

        log.info("Backed up %s to %s", install.path, archive)
        outcome.archives.append(archive)

    return outcome
