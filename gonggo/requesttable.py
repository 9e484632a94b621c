"""Table of pending client requests keyed by request id."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable


@dataclass
class RequestEntry:
    """Connection that sent a request, when it was last touched and its timeout."""

    conn: Any
    timestamp: int
    timeout: int


class ClientRequestTable:
    """Thread-safe map from request id to the client connection awaiting it."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[str, RequestEntry] = {}

    def _now(self) -> int:
        return int(self._clock())

    def set(self, request_uuid: str, conn: Any, timeout: int) -> None:
        """Record ``request_uuid`` for ``conn``, replacing any earlier record."""
        with self._lock:
            self._entries.pop(request_uuid, None)
            self._entries[request_uuid] = RequestEntry(conn, self._now(), int(timeout))

    def get_conn(
        self, request_uuid: str, update_time: bool = False, remove_request: bool = False
    ) -> Any:
        """Return the connection for ``request_uuid`` or None.

        With ``remove_request`` the record is removed; otherwise with
        ``update_time`` its timestamp is refreshed.
        """
        with self._lock:
            entry = self._entries.get(request_uuid)
            if entry is None:
                return None
            if remove_request:
                del self._entries[request_uuid]
            elif update_time:
                entry.timestamp = self._now()
            return entry.conn

    def remove(self, request_uuid: str) -> None:
        """Forget ``request_uuid``; unknown ids are ignored."""
        with self._lock:
            self._entries.pop(request_uuid, None)

    def expired(self, now: float | None = None) -> list[str]:
        """Return the ids whose timeout has passed; a timeout of 0 never expires."""
        with self._lock:
            current = self._now() if now is None else int(now)
            return [
                request_uuid
                for request_uuid, entry in self._entries.items()
                if entry.timeout > 0 and entry.timestamp + entry.timeout < current
            ]

    def __contains__(self, request_uuid: object) -> bool:
        with self._lock:
            return request_uuid in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)