"""Per-run audit log of discovery, confirmation and removal events."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

log = logging.getLogger(__name__)

INFO = "INFO"
SUCCESS = "SUCCESS"
WARNING = "WARNING"
ERROR = "ERROR"


class AuditLog:
    """Append-only text log, one file per run.

    The directory and file are created on the first write. Write errors
    are reported to the diagnostic logger and otherwise ignored.
    """

    def __init__(self, log_dir: Path, started: datetime | None = None) -> None:
        self.log_dir = log_dir
        started = started or datetime.now()
        self.path = log_dir / f"fugo_{started.strftime('%Y%m%d_%H%M%S')}.log"

    def log(self, level: str, message: str) -> None:
        line = f"[{datetime.now().strftime('%Y-%m-%d %H:%M:%S')}] {level}: {message}\n"
        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(line)
        except OSError as e:
            log.debug("Could not write audit log %s: %s", self.path, e)

    def info(self, message: str) -> None:
        self.log(INFO, message)

    def success(self, message: str) -> None:
        self.log(SUCCESS, message)

    def warning(self, message: str) -> None:
        self.log(WARNING, message)

    def error(self, message: str) -> None:
        self.log(ERROR, message)
