"""Tables of the per-proxy worker threads and their contexts."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Callable


@dataclass
class ThreadEntry:
    """A running proxy worker thread and the context it works on."""

    thread: Any
    ctx: Any


class ProxyThreadTable:
    """Thread-safe map from proxy name to its worker thread entry.

    When an entry is replaced or removed, ``destroy`` (if given) is called
    with the context of the entry that goes away.
    """

    def __init__(self, destroy: Callable[[Any], None] | None = None) -> None:
        self._destroy = destroy
        self._lock = threading.Lock()
        self._table: dict[str, ThreadEntry] = {}

    def _release(self, entry: ThreadEntry | None) -> None:
        if entry is not None and entry.ctx is not None and self._destroy is not None:
            self._destroy(entry.ctx)

    def set(self, proxy_name: str, thread: Any, ctx: Any) -> None:
        """Record ``thread`` and ``ctx`` for ``proxy_name``, replacing any earlier entry."""
        with self._lock:
            old = self._table.pop(proxy_name, None)
            self._table[proxy_name] = ThreadEntry(thread, ctx)
        self._release(old)

    def get(self, proxy_name: str) -> ThreadEntry | None:
        """Return the entry of ``proxy_name`` or None."""
        with self._lock:
            return self._table.get(proxy_name)

    def remove(self, proxy_name: str) -> None:
        """Forget ``proxy_name``; unknown names are ignored."""
        with self._lock:
            old = self._table.pop(proxy_name, None)
        self._release(old)

    def keys(self) -> list[str]:
        """Return a snapshot of the proxy names in the table."""
        with self._lock:
            return list(self._table)

    def __contains__(self, proxy_name: object) -> bool:
        with self._lock:
            return proxy_name in self._table

    def __len__(self) -> int:
        with self._lock:
            return len(self._table)