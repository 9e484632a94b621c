"""Table of the service name and payload of each pending request."""

from __future__ import annotations

import json
import threading
from typing import Any

from .constants import SERVICE_PAYLOAD_KEY, SERVICE_SERVICE_KEY


class ClientServiceTable:
    """Thread-safe map from request id to ``{"service": ..., "payload": ...}`` JSON text."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._table: dict[str, str] = {}

    def set(self, request_uuid: str, service_name: str, payload: Any = None) -> None:
        """Store the service and optional payload for ``request_uuid``."""
        document: dict[str, Any] = {SERVICE_SERVICE_KEY: service_name}
        if payload is not None:
            document[SERVICE_PAYLOAD_KEY] = payload
        text = json.dumps(document, separators=(",", ":"), ensure_ascii=False)
        with self._lock:
            self._table.pop(request_uuid, None)
            self._table[request_uuid] = text

    def get(self, request_uuid: str) -> str | None:
        """Return the stored JSON text for ``request_uuid`` or None."""
        with self._lock:
            return self._table.get(request_uuid)

    def remove(self, request_uuid: str) -> None:
        """Forget ``request_uuid``; unknown ids are ignored."""
        with self._lock:
            self._table.pop(request_uuid, None)

    def __contains__(self, request_uuid: object) -> bool:
        with self._lock:
            return request_uuid in self._table