"""Table mapping each proxy name to its pending requests and their sent flags."""

from __future__ import annotations

import threading


class ClientProxynameTable:
    """Thread-safe map from proxy name to ordered request ids with a sent flag each."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._table: dict[str, dict[str, bool]] = {}

    def similar(self) -> ClientProxynameTable:
        """Return a new, empty table of the same kind."""
        return ClientProxynameTable()

    def set(self, proxy_name: str, request_uuid: str) -> None:
        """Add ``request_uuid`` to ``proxy_name`` as not yet sent, unless present."""
        with self._lock:
            requests = self._table.setdefault(proxy_name, {})
            requests.setdefault(request_uuid, False)

    def mark_sent(self, proxy_name: str, request_uuid: str) -> None:
        """Flag ``request_uuid`` of ``proxy_name`` as delivered to the proxy."""
        with self._lock:
            requests = self._table.get(proxy_name)
            if requests is not None and request_uuid in requests:
                requests[request_uuid] = True

    def mark_unsent(self, proxy_name: str) -> None:
        """Flag every request of ``proxy_name`` as not delivered."""
        with self._lock:
            requests = self._table.get(proxy_name)
            if requests is not None:
                for request_uuid in requests:
                    requests[request_uuid] = False

    def _drop_locked(self, proxy_name: str, request_uuid: str) -> bool:
        requests = self._table.get(proxy_name)
        if requests is None or request_uuid not in requests:
            return False
        del requests[request_uuid]
        if not requests:
            del self._table[proxy_name]
        return True

    def drop(self, proxy_name: str, request_uuid: str) -> bool:
        """Remove ``request_uuid`` from ``proxy_name``; return whether it was there."""
        with self._lock:
            return self._drop_locked(proxy_name, request_uuid)

    def drop_all(self, request_uuid: str) -> None:
        """Remove ``request_uuid`` from the first proxy that holds it."""
        with self._lock:
            for proxy_name in list(self._table):
                if self._drop_locked(proxy_name, request_uuid):
                    break

    def requests(self, proxy_name: str, not_sent_only: bool = False) -> list[str] | None:
        """Return the request ids of ``proxy_name``, or None if the proxy is unknown."""
        with self._lock:
            requests = self._table.get(proxy_name)
            if requests is None:
                return None
            if not_sent_only:
                return [uuid for uuid, sent in requests.items() if not sent]
            return list(requests)

    def proxy_name_of(self, request_uuid: str) -> str | None:
        """Return the proxy holding ``request_uuid``, or None."""
        with self._lock:
            for proxy_name, requests in self._table.items():
                if request_uuid in requests:
                    return proxy_name
            return None

    def items(self) -> list[tuple[str, list[str]]]:
        """Return a snapshot of every proxy name with a copy of its request ids."""
        with self._lock:
            return [(name, list(requests)) for name, requests in self._table.items()]

    def __len__(self) -> int:
        with self._lock:
            return len(self._table)