"""Websocket server callbacks wired to the client service."""

from __future__ import annotations

from typing import Any

from .clientservice import ClientService
from .log import log

OPCODE_TEXT = 0x1


def _remote_addr(conn: Any) -> str:
    return getattr(conn, "remote_addr", "")


def _request_uri(conn: Any) -> str:
    return getattr(conn, "request_uri", "")


class WebSocketHandlers:
    """Connect, ready, data and close callbacks for websocket connections.

    A connection carries ``remote_addr`` and ``request_uri`` attributes and a
    ``send(text)`` method.
    """

    def __init__(self, service: ClientService) -> None:
        self.service = service

    def on_connect(self, conn: Any) -> int:
        """Accept a new connection; return 0 to keep it."""
        log("INFO", f"new connection {_remote_addr(conn)} with request uri {_request_uri(conn)}")
        return 0

    def on_ready(self, conn: Any) -> None:
        """Note that the client is ready to receive data."""
        log("INFO", f"client ready {_remote_addr(conn)}")

    def on_data(self, conn: Any, opcode: int, data: str | bytes) -> int:
        """Route text frames to the client service; return 1 to keep the connection."""
        log("INFO", f"data sent from {_remote_addr(conn)}")
        if opcode & 0xF == OPCODE_TEXT:
            self.service.route(_remote_addr(conn), _request_uri(conn), data, conn)
        return 1

    def on_close(self, conn: Any) -> None:
        """Forget the requests of a closing connection."""
        self.service.drop_conn(conn)
        log("INFO", f"disconnect {_remote_addr(conn)}")