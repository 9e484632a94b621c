"""Background thread that periodically deletes overdue stored responses."""

from __future__ import annotations

import sqlite3
import threading

from .db import ResponseStore
from .log import log


class RespondDrain:
    """Purges responses older than ``overdue`` seconds every ``period`` seconds."""

    def __init__(self, store: ResponseStore, overdue: float, period: float) -> None:
        self.store = store
        self.overdue = overdue
        self.period = period
        self._cond = threading.Condition()
        self._end = False
        self._started = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def started(self) -> bool:
        """Whether the drain loop has begun."""
        return self._started.is_set()

    def run(self) -> None:
        """Purge, then sleep for the period, until stopped."""
        log("INFO", "db respond drain thread is started")
        self._started.set()
        with self._cond:
            while not self._end:
                try:
                    self.store.purge(self.overdue)
                except sqlite3.Error:
                    pass
                self._cond.wait(self.period)
        log("INFO", "db respond drain thread is stopped")

    def start(self) -> None:
        """Run the drain in a new thread and wait until it has begun."""
        self._thread = threading.Thread(
            target=self.run, name="respond-drain", daemon=True
        )
        self._thread.start()
        self._started.wait()

    def stop(self) -> None:
        """Ask the loop to finish and wake it."""
        with self._cond:
            self._end = True
            self._cond.notify()

    def join(self, timeout: float | None = None) -> None:
        """Wait for the drain thread to finish."""
        if self._thread is not None:
            self._thread.join(timeout)

    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()