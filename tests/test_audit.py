"""Tests for the per-run audit log."""

from __future__ import annotations

import re
from datetime import datetime

from fugo.audit import AuditLog

LINE_RE = re.compile(r"^\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\] (\w+): (.*)$")


class TestAuditLog:
    def test_file_named_by_start_time(self, tmp_path):
        audit = AuditLog(tmp_path / "logs", started=datetime(2024, 5, 1, 13, 4, 5))
        assert audit.path == tmp_path / "logs" / "fugo_20240501_130405.log"

    def test_lazy_creation(self, tmp_path):
        log_dir = tmp_path / "logs"
        audit = AuditLog(log_dir)
        assert not log_dir.exists()
        audit.info("hello")
        assert audit.path.exists()

    def test_appends_formatted_lines(self, tmp_path):
        audit = AuditLog(tmp_path)
        audit.info("first")
        audit.success("second")
        audit.error("third")

        lines = audit.path.read_text().splitlines()
        parsed = [LINE_RE.match(line).groups() for line in lines]
        assert parsed == [("INFO", "first"), ("SUCCESS", "second"), ("ERROR", "third")]

    def test_write_errors_swallowed(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")
        audit = AuditLog(blocker / "logs")
        audit.warning("lost")  # must not raise
        assert not (blocker / "logs").exists()
