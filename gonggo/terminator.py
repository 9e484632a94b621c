"""Background thread that tears down the workers of proxies that died."""

from __future__ import annotations

import threading
from collections import deque

from .log import log
from .proxy import ProxyThreadKiller
from .proxynametable import ClientProxynameTable


class ProxyTerminator:
    """Kills the workers of each proxy handed to ``awake``, one at a time."""

    def __init__(
        self, killer: ProxyThreadKiller, proxyname_table: ClientProxynameTable
    ) -> None:
        self.killer = killer
        self.proxyname_table = proxyname_table
        self._cond = threading.Condition()
        self._queue: deque[str] = deque()
        self._end = False
        self._started = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def started(self) -> bool:
        """Whether the terminator loop has begun."""
        return self._started.is_set()

    def awake(self, proxy_name: str) -> None:
        """Queue ``proxy_name`` for tear-down and wake the loop."""
        with self._cond:
            self._queue.append(proxy_name)
            self._cond.notify()

    def _terminate(self, proxy_name: str) -> None:
        # Requests go back to unsent so they are redelivered when the proxy returns.
        self.proxyname_table.mark_unsent(proxy_name)
        log("INFO", f"proxy terminator thread kill {proxy_name} threads")
        self.killer.kill(proxy_name)
        self.killer.drop_terminating(proxy_name)

    def run(self) -> None:
        """Tear down queued proxies until stopped."""
        log("INFO", "starts proxy terminator")
        self._started.set()
        while True:
            with self._cond:
                self._cond.wait_for(lambda: self._queue or self._end)
                names = list(self._queue)
                self._queue.clear()
                end = self._end
            for proxy_name in names:
                self._terminate(proxy_name)
            if end:
                break
        log("INFO", "stops proxy terminator")

    def start(self) -> None:
        """Run the loop in a new thread and wait until it has begun."""
        self._thread = threading.Thread(
            target=self.run, name="proxy-terminator", daemon=True
        )
        self._thread.start()
        self._started.wait()

    def stop(self) -> None:
        """Ask the loop to finish and wake it."""
        with self._cond:
            self._end = True
            self._cond.notify()

    def join(self, timeout: float | None = None) -> None:
        """Wait for the loop thread to finish."""
        if self._thread is not None:
            self._thread.join(timeout)

    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()