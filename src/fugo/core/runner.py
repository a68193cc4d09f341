"""Runs one blocking operation at a time off the control thread."""

from __future__ import annotations

import logging
import queue
import threading
from typing import Callable

from fugo.models.events import Event, OperationFailed, Tick

log = logging.getLogger(__name__)


class BackgroundRunner:
    """Executes blocking work on a daemon thread and queues its result event.

    Daemon threads let the process exit on quit without waiting for a
    pending backup or removal.
    """

    def __init__(self) -> None:
        self._events: queue.Queue[Event] = queue.Queue()
        self._thread: threading.Thread | None = None
        self._idle = threading.Event()
        self._idle.set()

    @property
    def busy(self) -> bool:
        return not self._idle.is_set()

    def start(self, name: str, work: Callable[[], Event]) -> None:
        """Run *work* in the background; its return value is queued.

        Raises:
            RuntimeError: If another operation is still running.
        """
        if self.busy:
            raise RuntimeError(f"Cannot start '{name}': another operation is still running")

        def _target() -> None:
            try:
                event = work()
            except Exception as e:
                log.exception("Background operation '%s' crashed", name)
                event = OperationFailed(name=name, error=str(e) or type(e).__name__)
            self._idle.set()
            self._events.put(event)

        self._idle.clear()
        self._thread = threading.Thread(target=_target, name=f"fugo-{name}", daemon=True)
        self._thread.start()
        log.debug("Started background operation '%s'", name)

    def next_event(self, timeout: float = 0.1) -> Event:
        """Next queued event, or a Tick if nothing arrives within *timeout*."""
        try:
            return self._events.get(timeout=timeout)
        except queue.Empty:
            return Tick()
