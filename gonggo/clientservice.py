"""Routing of client websocket messages to built-in services and proxies."""

from __future__ import annotations

import json
import math
import sqlite3
from typing import Any

from .clientreply import parsing_status_reply, service_reply
from .connectiontable import ClientConnectionTable
from .constants import (
    CLIENTREPLY_SERVICE_STATUS_KEY,
    CLIENTREPLY_TIMEOUT_KEY,
    GONGGOSERVICE_REQUEST_DROP,
    RID_MAX_LENGTH,
    SERVICE_HEADERS_KEY,
    SERVICE_PAYLOAD_KEY,
    SERVICE_PROXY_KEY,
    SERVICE_RID_KEY,
    SERVICE_SERVICE_KEY,
    ResponseDumpStatus,
    ServiceStatus,
    TestStatus,
)
from .db import ResponseStore
from .log import log
from .proxynametable import ClientProxynameTable
from .requesttable import ClientRequestTable
from .servicetable import ClientServiceTable
from .threadtables import ProxyThreadTable
from .uuidgen import generate_uuid

TEST_SERVICE = "test"
RESPONSE_DUMP_SERVICE = "responseDump"

_MISSING = object()


def _field(obj: Any, key: str) -> Any:
    """Return ``obj[key]`` when ``obj`` is a JSON object holding it, else ``_MISSING``."""
    if isinstance(obj, dict) and key in obj:
        return obj[key]
    return _MISSING


def _string(obj: Any, key: str) -> str | None:
    value = _field(obj, key)
    return value if isinstance(value, str) else None


def _number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    return value


class ClientService:
    """Parses client requests, answers built-in services and queues proxy requests."""

    def __init__(
        self,
        gonggo_path: str | None,
        request_table: ClientRequestTable,
        connection_table: ClientConnectionTable,
        service_table: ClientServiceTable,
        proxyname_table: ClientProxynameTable,
        channel_table: ProxyThreadTable,
        alive_table: ProxyThreadTable,
        store: ResponseStore | None,
    ) -> None:
        self.gonggo_path = gonggo_path
        self.request_table = request_table
        self.connection_table = connection_table
        self.service_table = service_table
        self.proxyname_table = proxyname_table
        self.channel_table = channel_table
        self.alive_table = alive_table
        self.store = store

    def _wake_channel(self, proxy_name: str) -> bool:
        entry = self.channel_table.get(proxy_name)
        ctx = entry.ctx if entry is not None else None
        if ctx is None:
            return False
        ctx.wake()
        return True

    def route(self, remote_addr: str, uri: str, data: str | bytes, conn: Any) -> None:
        """Handle one text message ``data`` sent by ``conn`` to ``uri``."""
        if self.gonggo_path is None or uri != self.gonggo_path:
            return
        if isinstance(data, (bytes, bytearray)):
            data = bytes(data).decode("utf-8", errors="replace")
        try:
            root = json.loads(data)
        except ValueError:
            log("ERROR", f"{remote_addr} sends empty message")
            return

        headers = _field(root, SERVICE_HEADERS_KEY)
        if headers is _MISSING:
            log("ERROR", f"{remote_addr} message does not have headers")
            parsing_status_reply(conn, None, ServiceStatus.HEADERS_MISSING)
            return

        rid = _string(headers, SERVICE_RID_KEY)
        if not rid:
            log("ERROR", f"{remote_addr} message does not have request id")
            parsing_status_reply(conn, None, ServiceStatus.RID_MISSING)
            return
        if len(rid.encode("utf-8", errors="surrogateescape")) > RID_MAX_LENGTH:
            log("ERROR", f"{remote_addr} message request id length exceed {RID_MAX_LENGTH}")
            parsing_status_reply(conn, rid, ServiceStatus.RID_OVERLENGTH)
            return

        proxy_name = _string(headers, SERVICE_PROXY_KEY)
        service_name = _string(headers, SERVICE_SERVICE_KEY)
        if not service_name:
            log("ERROR", f"{remote_addr} message headers does not have service name")
            parsing_status_reply(conn, rid, ServiceStatus.SERVICE_MISSING)
            return
        if service_name == GONGGOSERVICE_REQUEST_DROP:
            log("ERROR", f"{remote_addr} message service name {service_name} is reserved")
            parsing_status_reply(conn, rid, ServiceStatus.SERVICE_RESERVED)
            return

        payload = _field(root, SERVICE_PAYLOAD_KEY)

        if proxy_name is None:
            self._route_builtin(remote_addr, conn, rid, service_name, payload)
            return

        timeout_value = _field(headers, CLIENTREPLY_TIMEOUT_KEY)
        if timeout_value is _MISSING:
            log("ERROR", f"{remote_addr} query message headers does not have timeout")
            parsing_status_reply(conn, rid, ServiceStatus.TIMEOUT_MISSING)
            return
        timeout = int(_number(timeout_value))
        if timeout < 1:
            log("ERROR", f"{remote_addr} query message headers contains invalid timeout {timeout}")
            parsing_status_reply(conn, rid, ServiceStatus.TIMEOUT_INVALID)
            return

        parsing_status_reply(conn, rid, ServiceStatus.ACKNOWLEDGED)
        self.request_table.set(rid, conn, timeout)
        self.connection_table.set(conn, rid)
        self.service_table.set(rid, service_name, None if payload is _MISSING else payload)
        self.proxyname_table.set(proxy_name, rid)
        self._wake_channel(proxy_name)

    def _route_builtin(
        self, remote_addr: str, conn: Any, rid: str, service_name: str, payload: Any
    ) -> None:
        if service_name == TEST_SERVICE:
            parsing_status_reply(conn, rid, ServiceStatus.ACKNOWLEDGED)
            self._test(rid, conn)
            return
        if service_name == RESPONSE_DUMP_SERVICE:
            if payload is _MISSING:
                log("ERROR", f"{remote_addr} query message does not have payload")
                parsing_status_reply(conn, rid, ServiceStatus.PAYLOAD_MISSING)
                return
            dump_rid = _string(payload, SERVICE_RID_KEY)
            start = _field(payload, "start")
            size = _field(payload, "size")
            start = int(_number(start)) if start is not _MISSING else 0
            size = int(_number(size)) if size is not _MISSING else 0
            if not dump_rid or start < 1 or size < 1:
                log("ERROR", f"{remote_addr} query message does not have valid payload")
                parsing_status_reply(conn, rid, ServiceStatus.PAYLOAD_INVALID)
                return
            parsing_status_reply(conn, rid, ServiceStatus.ACKNOWLEDGED)
            self._response_dump(rid, conn, dump_rid, start, size)
            return
        log("ERROR", f"{remote_addr} message headers contains invalid service name {service_name}")
        parsing_status_reply(conn, rid, ServiceStatus.GONGGO_SERVICE_INVALID)

    def _test(self, rid: str, conn: Any) -> None:
        headers = {CLIENTREPLY_SERVICE_STATUS_KEY: int(TestStatus.SUCCESS)}
        payload = {
            "services": [TEST_SERVICE, RESPONSE_DUMP_SERVICE],
            "proxies": self.alive_table.keys(),
        }
        service_reply(conn, rid, headers, payload, self.store)

    def _response_dump(
        self, rid: str, conn: Any, dump_rid: str, start: int, size: int
    ) -> None:
        payload: dict[str, Any] = {}
        status = ResponseDumpStatus.DB_ERROR
        if self.store is not None:
            try:
                result = self.store.query(dump_rid, start, size)
            except sqlite3.Error:
                result = None
            if result is not None:
                responses = []
                for text in result.responses:
                    try:
                        responses.append(json.loads(text))
                    except ValueError:
                        continue
                payload["responses"] = responses
                payload["stop"] = result.stop
                payload["more"] = result.more
                status = ResponseDumpStatus.SUCCESS
        headers = {CLIENTREPLY_SERVICE_STATUS_KEY: int(status)}
        service_reply(conn, rid, headers, payload, None)

    def drop_conn(self, conn: Any) -> None:
        """Forget every request of a closed ``conn`` and tell the proxies holding them."""
        request_uuids = self.connection_table.requests(conn)
        if request_uuids is None:
            return

        pending = self.proxyname_table.similar()
        for request_uuid in request_uuids:
            proxy_name = self.proxyname_table.proxy_name_of(request_uuid)
            if proxy_name is not None:
                pending.set(proxy_name, request_uuid)
            self.request_table.remove(request_uuid)
            self.service_table.remove(request_uuid)
            self.proxyname_table.drop_all(request_uuid)

        for proxy_name, dropped in pending.items():
            entry = self.channel_table.get(proxy_name)
            ctx = entry.ctx if entry is not None else None
            if ctx is None:
                continue
            for request_uuid in dropped:
                drop_rid = generate_uuid()
                self.service_table.set(
                    drop_rid, GONGGOSERVICE_REQUEST_DROP, {SERVICE_RID_KEY: request_uuid}
                )
                self.proxyname_table.set(proxy_name, drop_rid)
            ctx.wake()

        self.connection_table.remove(conn)