"""Set of proxies whose channel must be stopped after a failed activation."""

from __future__ import annotations

import threading
from typing import Iterator


class ProxyTerminateSet:
    """Thread-safe, insertion-ordered set of proxy names."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._names: dict[str, None] = {}

    def add(self, proxy_name: str) -> None:
        """Add ``proxy_name`` unless it is already present."""
        with self._lock:
            self._names.setdefault(proxy_name, None)

    def discard(self, proxy_name: str) -> None:
        """Remove ``proxy_name`` if present."""
        with self._lock:
            self._names.pop(proxy_name, None)

    def __contains__(self, proxy_name: object) -> bool:
        with self._lock:
            return proxy_name in self._names

    def __len__(self) -> int:
        with self._lock:
            return len(self._names)

    def __iter__(self) -> Iterator[str]:
        with self._lock:
            return iter(list(self._names))