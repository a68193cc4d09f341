"""Tests for the background operation runner."""

from __future__ import annotations

import threading

import pytest

from fugo.core.runner import BackgroundRunner
from fugo.models.events import Key, OperationFailed, Tick


def _wait_for(runner: BackgroundRunner, timeout: float = 5.0):
    """Next non-Tick event, failing the test after *timeout* seconds."""
    for _ in range(int(timeout / 0.05)):
        event = runner.next_event(timeout=0.05)
        if not isinstance(event, Tick):
            return event
    pytest.fail("background operation produced no event")


class TestBackgroundRunner:
    def test_result_is_queued(self):
        runner = BackgroundRunner()
        runner.start("probe", lambda: Key("submit", "done"))
        assert _wait_for(runner) == Key("submit", "done")
        assert not runner.busy

    def test_tick_when_idle(self):
        assert isinstance(BackgroundRunner().next_event(timeout=0.01), Tick)

    def test_one_operation_at_a_time(self):
        release = threading.Event()
        runner = BackgroundRunner()

        def slow():
            release.wait(5)
            return Key("quit")

        runner.start("slow", slow)
        assert runner.busy
        with pytest.raises(RuntimeError, match="another operation"):
            runner.start("second", slow)

        release.set()
        assert _wait_for(runner) == Key("quit")
        runner.start("third", lambda: Key("toggle"))
        assert _wait_for(runner) == Key("toggle")

    def test_crash_becomes_event(self):
        def boom():
            raise ValueError("disk on fire")

        runner = BackgroundRunner()
        runner.start("backup", boom)
        assert _wait_for(runner) == OperationFailed(name="backup", error="disk on fire")
        assert not runner.busy
