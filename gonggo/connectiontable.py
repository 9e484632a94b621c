"""Table mapping each client connection to the request ids it has pending."""

from __future__ import annotations

import threading
from typing import Any


class ClientConnectionTable:
    """Thread-safe map from connection object to an ordered list of request ids."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._table: dict[Any, list[str]] = {}

    def similar(self) -> ClientConnectionTable:
        """Return a new, empty table of the same kind."""
        return ClientConnectionTable()

    def set(self, conn: Any, request_uuid: str) -> None:
        """Add ``request_uuid`` to ``conn`` unless it is already there."""
        with self._lock:
            uuids = self._table.setdefault(conn, [])
            if request_uuid not in uuids:
                uuids.append(request_uuid)

    def drop(self, conn: Any, request_uuid: str) -> None:
        """Remove ``request_uuid`` from ``conn``; forget ``conn`` when it empties."""
        with self._lock:
            uuids = self._table.get(conn)
            if uuids is None or request_uuid not in uuids:
                return
            uuids.remove(request_uuid)
            if not uuids:
                del self._table[conn]

    def requests(self, conn: Any) -> list[str] | None:
        """Return a copy of the request ids of ``conn``, or None if unknown."""
        with self._lock:
            uuids = self._table.get(conn)
            return list(uuids) if uuids is not None else None

    def remove(self, conn: Any) -> None:
        """Forget ``conn`` and all its request ids."""
        with self._lock:
            self._table.pop(conn, None)

    def items(self) -> list[tuple[Any, list[str]]]:
        """Return a snapshot of every connection with a copy of its request ids."""
        with self._lock:
            return [(conn, list(uuids)) for conn, uuids in self._table.items()]

    def __len__(self) -> int:
        with self._lock:
            return len(self._table)