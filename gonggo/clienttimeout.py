"""Background thread that expires client requests whose timeout has passed."""

from __future__ import annotations

import threading

from .clientreply import expired_reply
from .connectiontable import ClientConnectionTable
from .db import ResponseStore
from .log import log
from .proxynametable import ClientProxynameTable
from .requesttable import ClientRequestTable
from .servicetable import ClientServiceTable


class ClientTimeout:
    """Every ``period`` seconds, answers and forgets requests that timed out."""

    def __init__(
        self,
        period: float,
        request_table: ClientRequestTable,
        connection_table: ClientConnectionTable,
        service_table: ClientServiceTable,
        proxyname_table: ClientProxynameTable,
        store: ResponseStore | None,
    ) -> None:
        self.period = period
        self.request_table = request_table
        self.connection_table = connection_table
        self.service_table = service_table
        self.proxyname_table = proxyname_table
        self.store = store
        self._cond = threading.Condition()
        self._end = False
        self._started = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def started(self) -> bool:
        """Whether the timeout loop has begun."""
        return self._started.is_set()

    def sweep(self) -> list[str]:
        """Expire every timed-out request once; return their ids."""
        expired = self.request_table.expired()
        for request_uuid in expired:
            conn = self.request_table.get_conn(request_uuid, False, False)
            expired_reply(conn, request_uuid, self.store)
            self.request_table.remove(request_uuid)
            self.connection_table.drop(conn, request_uuid)
            self.service_table.remove(request_uuid)
            self.proxyname_table.drop_all(request_uuid)
        return expired

    def run(self) -> None:
        """Sweep, then sleep for the period, until stopped."""
        log("INFO", "db client timeout thread is started")
        self._started.set()
        with self._cond:
            while not self._end:
                self.sweep()
                self._cond.wait(self.period)
        log("INFO", "db client timeout thread is stopped")

    def start(self) -> None:
        """Run the loop in a new thread and wait until it has begun."""
        self._thread = threading.Thread(
            target=self.run, name="client-timeout", daemon=True
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