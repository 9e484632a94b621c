"""JSON messages sent back to websocket clients.

A connection is any object with a ``send(text)`` method that writes one
text frame to the client.
"""

from __future__ import annotations

import copy
import json
import sqlite3
from typing import Any

from .connectiontable import ClientConnectionTable
from .constants import (
    CLIENTREPLY_HEADERS_KEY,
    CLIENTREPLY_PAYLOAD_KEY,
    CLIENTREPLY_REQUEST_STATUS_KEY,
    CLIENTREPLY_SERVICE_PROXY_KEY,
    CLIENTREPLY_SERVICE_RID_KEY,
    CLIENTREPLY_SERVICE_STATUS_KEY,
    ProxyServiceStatus,
    ServiceStatus,
)
from .db import ResponseStore
from .proxynametable import ClientProxynameTable
from .requesttable import ClientRequestTable


def _dump(document: Any) -> str:
    return json.dumps(document, separators=(",", ":"), ensure_ascii=False)


def _save(store: ResponseStore | None, rid: str | None, text: str) -> None:
    if store is not None and rid:
        try:
            store.insert(rid, text)
        except sqlite3.Error:
            pass


def parsing_status_reply(conn: Any, rid: str | None, status: int) -> str:
    """Tell ``conn`` how its request was parsed; return the text sent."""
    text = _dump(
        {
            CLIENTREPLY_HEADERS_KEY: {
                CLIENTREPLY_SERVICE_RID_KEY: rid if rid is not None else "",
                CLIENTREPLY_REQUEST_STATUS_KEY: int(status),
            }
        }
    )
    conn.send(text)
    return text


def service_reply(
    conn: Any,
    rid: str | None,
    proxy_headers: dict[str, Any],
    proxy_payload: Any,
    store: ResponseStore | None,
) -> str:
    """Send an answer, merging the proxy headers into the reply headers.

    With a ``store`` and a non-empty ``rid`` the reply is also saved. A
    ``conn`` of None only saves. Return the reply text.
    """
    headers: dict[str, Any] = {
        CLIENTREPLY_SERVICE_RID_KEY: rid,
        CLIENTREPLY_REQUEST_STATUS_KEY: int(ServiceStatus.ANSWERED),
    }
    headers.update(copy.deepcopy(proxy_headers))
    reply: dict[str, Any] = {CLIENTREPLY_HEADERS_KEY: headers}
    if proxy_payload is not None:
        reply[CLIENTREPLY_PAYLOAD_KEY] = proxy_payload
    text = _dump(reply)
    _save(store, rid, text)
    if conn is not None:
        conn.send(text)
    return text


def expired_reply(conn: Any, rid: str | None, store: ResponseStore | None) -> str:
    """Tell ``conn`` that request ``rid`` timed out; save like ``service_reply``."""
    text = _dump(
        {
            CLIENTREPLY_HEADERS_KEY: {
                CLIENTREPLY_SERVICE_RID_KEY: rid,
                CLIENTREPLY_REQUEST_STATUS_KEY: int(ServiceStatus.EXPIRED),
            }
        }
    )
    _save(store, rid, text)
    if conn is not None:
        conn.send(text)
    return text


def proxy_alive_notification(
    proxy_name: str,
    started: bool,
    proxyname_table: ClientProxynameTable,
    request_table: ClientRequestTable,
) -> None:
    """Notify every client with requests on ``proxy_name`` that it started or ended."""
    by_conn = ClientConnectionTable()
    for request_uuid in proxyname_table.requests(proxy_name, False) or []:
        conn = request_table.get_conn(request_uuid, False, False)
        if conn is not None:
            by_conn.set(conn, request_uuid)

    status = (
        ProxyServiceStatus.ALIVE_START if started else ProxyServiceStatus.ALIVE_TERMINATION
    )
    for conn, request_uuids in by_conn.items():
        text = _dump(
            {
                CLIENTREPLY_HEADERS_KEY: {
                    CLIENTREPLY_REQUEST_STATUS_KEY: int(
                        ServiceStatus.PROXY_ALIVE_NOTIFICATION
                    ),
                    CLIENTREPLY_SERVICE_STATUS_KEY: int(status),
                },
                CLIENTREPLY_PAYLOAD_KEY: {
                    CLIENTREPLY_SERVICE_PROXY_KEY: proxy_name,
                    CLIENTREPLY_SERVICE_RID_KEY: request_uuids,
                },
            }
        )
        conn.send(text)