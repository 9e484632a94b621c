"""Proxy protocol states, the channel wake-up context and the proxy thread killer."""

from __future__ import annotations

import threading
from enum import IntEnum

from .log import log
from .threadtables import ProxyThreadTable


class ProxyActivationState(IntEnum):
    """Activation handshake states shared with proxies."""

    INIT = 0
    IDLE = 1
    REQUEST = 2
    PROXY_DYING = 3
    FAILED = 4
    SUCCESS = 5
    DONE = 6
    TERMINATION = 99


class ProxyChannelState(IntEnum):
    """Request channel states shared with proxies."""

    INIT = 0
    IDLE = 1
    REQUEST = 2
    ACKNOWLEDGED = 3
    FAILS = 4
    DONE = 5
    STOP_REQUEST = 6
    TERMINATION = 99


class ProxySubscribeState(IntEnum):
    """Answer subscription states shared with proxies."""

    INIT = 0
    IDLE = 1
    ANSWER = 2
    FAILED = 3
    DONE = 4
    TERMINATION = 99


class ProxyChannelContext:
    """Wake-up point of a proxy channel worker.

    A wake that arrives while the worker is busy is remembered, so the next
    ``wait`` returns at once.
    """

    def __init__(self, proxy_name: str) -> None:
        self.proxy_name = proxy_name
        self._cond = threading.Condition()
        self._woken = False
        self._stopped = False

    @property
    def stopped(self) -> bool:
        """Whether ``stop`` has been called."""
        with self._cond:
            return self._stopped

    def wake(self) -> None:
        """Tell the worker there may be requests to send."""
        with self._cond:
            self._woken = True
            self._cond.notify()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until woken or stopped; return False if the timeout ran out."""
        with self._cond:
            signalled = self._cond.wait_for(
                lambda: self._woken or self._stopped, timeout
            )
            self._woken = False
            return bool(signalled)

    def stop(self) -> None:
        """Ask the worker to finish and wake it."""
        with self._cond:
            self._stopped = True
            self._cond.notify_all()


class ProxyThreadKiller:
    """Stops and reaps the subscribe, channel and alive workers of proxies.

    Each context in the tables must have a ``stop()`` method; each thread,
    if not None, a ``join()`` method.
    """

    def __init__(
        self,
        subscribe_table: ProxyThreadTable,
        channel_table: ProxyThreadTable,
        alive_table: ProxyThreadTable,
    ) -> None:
        self.subscribe_table = subscribe_table
        self.channel_table = channel_table
        self.alive_table = alive_table
        self._kill_lock = threading.Lock()
        self._zombie_lock = threading.Lock()
        self._terminating: dict[str, None] = {}

    def set_terminating(self, proxy_name: str) -> None:
        """Mark ``proxy_name`` as being torn down."""
        with self._zombie_lock:
            self._terminating.setdefault(proxy_name, None)

    def drop_terminating(self, proxy_name: str) -> None:
        """Clear the tear-down mark of ``proxy_name``."""
        with self._zombie_lock:
            self._terminating.pop(proxy_name, None)

    def is_zombie(self, proxy_name: str) -> bool:
        """Whether ``proxy_name`` is being torn down."""
        with self._zombie_lock:
            return proxy_name in self._terminating

    def kill(self, proxy_name: str) -> None:
        """Stop, join and forget every worker of ``proxy_name``."""
        tables = (
            ("subscribe", self.subscribe_table),
            ("channel", self.channel_table),
            ("alive", self.alive_table),
        )
        with self._kill_lock:
            entries = [(kind, table, table.get(proxy_name)) for kind, table in tables]
            for kind, _, entry in entries:
                if entry is not None and entry.ctx is not None:
                    log("INFO", f"proxy_thread_kill {proxy_name} proxy_{kind}_stop starts")
                    entry.ctx.stop()
                    log("INFO", f"proxy_thread_kill {proxy_name} proxy_{kind}_stop done")
            for kind, table, entry in entries:
                if entry is None:
                    continue
                log("INFO", f"proxy_thread_kill {proxy_name} {kind} joining")
                if entry.thread is not None:
                    entry.thread.join()
                log("INFO", f"proxy_thread_kill {proxy_name} {kind} joining done")
                table.remove(proxy_name)
        log("INFO", f"proxy_thread_kill {proxy_name} exit")

    def kill_all(self) -> None:
        """Kill the workers of every proxy that has an alive worker."""
        log("INFO", "proxy_thread_kill_all enter")
        for proxy_name in self.alive_table.keys():
            log("INFO", f"terminate thread proxy {proxy_name} starts")
            self.set_terminating(proxy_name)
            self.kill(proxy_name)
            self.drop_terminating(proxy_name)
            log("INFO", f"terminate thread proxy {proxy_name} done")
        log("INFO", "proxy_thread_kill_all exit")