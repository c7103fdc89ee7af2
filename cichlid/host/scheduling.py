"""Schedulers for work that must run on the host's UI thread.

Build notifications can arrive on any thread, while menus and
dialogs must be touched from the main thread only.  Callers hand
UI work to a scheduler instead of running it directly.
"""

from __future__ import annotations

import queue
from collections.abc import Callable
from typing import Protocol

from cichlid.utils import errors, logger

log = logger.create_logger("Scheduler")


class UIScheduler(Protocol):
    """Runs callables on the UI thread."""

    def schedule(self, fn: Callable[[], None]) -> None: ...


class ImmediateScheduler:
    """Runs work inline.  For hosts without a separate UI thread (the CLI)."""

    def schedule(self, fn: Callable[[], None]) -> None:
        fn()


class QueueScheduler:
    """Queues work until the UI loop drains it with :meth:`run_pending`."""

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue[Callable[[], None]] = queue.SimpleQueue()

    def schedule(self, fn: Callable[[], None]) -> None:
        self._queue.put(fn)

    def pending(self) -> int:
        return self._queue.qsize()

    def run_pending(self) -> int:
        """Run everything queued so far.  Returns how many callables ran."""
        ran = 0
        while True:
            try:
                fn = self._queue.get_nowait()
            except queue.Empty:
                return ran
            try:
                fn()
            except Exception as exc:
                log.error("Scheduled UI work failed", {"error": errors.get_error_message(exc)})
            ran += 1
