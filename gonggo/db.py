"""SQLite store of the responses delivered to clients, kept for later replay."""

from __future__ import annotations

import os
import pathlib
import sqlite3
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator

from .log import log

_CREATE_TABLE = (
    "CREATE TABLE IF NOT EXISTS request ("
    "id TEXT NOT NULL,"
    "num INTEGER NOT NULL,"
    "respond TEXT NOT NULL,"
    "ts DATETIME NOT NULL DEFAULT (datetime(CURRENT_TIMESTAMP, 'localtime')),"
    "PRIMARY KEY (id, num)"
    ");"
)


@dataclass
class RespondQueryResult:
    """A page of stored responses.

    ``stop`` is the sequence number of the last response returned (0 when
    none) and ``more`` the number of responses left after this page.
    """

    responses: list[str] = field(default_factory=list)
    stop: int = 0
    more: int = 0


class ResponseStore:
    """Numbered responses per request id in ``<path>/<name>.db``."""

    def __init__(self, name: str, path: str | os.PathLike) -> None:
        self.db_path = f"{os.fspath(path)}/{name}.db"
        self._lock = threading.Lock()

    @contextmanager
    def _connect(self, what: str, read_only: bool = False) -> Iterator[sqlite3.Connection]:
        try:
            if read_only:
                uri = pathlib.Path(self.db_path).absolute().as_uri() + "?mode=ro"
                conn = sqlite3.connect(uri, uri=True, isolation_level=None)
            else:
                conn = sqlite3.connect(self.db_path, isolation_level=None)
        except sqlite3.Error as exc:
            log("ERROR", f"db open for {what} is failed, {exc}")
            raise
        try:
            yield conn
        except sqlite3.Error as exc:
            log("ERROR", f"{what} is failed, {exc}")
            raise
        finally:
            conn.close()

    def ensure(self) -> None:
        """Create the response table if it does not exist."""
        with self._connect("table request create") as conn:
            conn.execute(_CREATE_TABLE)

    def purge(self, overdue: float) -> int:
        """Delete responses older than ``overdue`` seconds; return how many went."""
        cutoff = time.strftime(
            "%Y-%m-%d %H:%M:%S %Z", time.localtime(time.time() - overdue)
        )
        with self._lock, self._connect("overdue respond deletion") as conn:
            cursor = conn.execute("DELETE FROM request WHERE ts < ?", (cutoff,))
            return cursor.rowcount

    def insert(self, rid: str, respond: str) -> int:
        """Store ``respond`` as the next response of ``rid``; return its number."""
        with self._lock, self._connect("request insert") as conn:
            row = conn.execute(
                "SELECT MAX(num) FROM request WHERE id = ?", (rid,)
            ).fetchone()
            num = (row[0] or 0) + 1 if row is not None else 1
            conn.execute(
                "INSERT INTO request (id, num, respond) VALUES (?, ?, ?)",
                (rid, num, respond),
            )
            return num

    def query(self, rid: str, start: int, size: int) -> RespondQueryResult:
        """Return up to ``size`` responses of ``rid`` numbered from ``start`` on."""
        result = RespondQueryResult()
        with self._lock, self._connect("respond query", read_only=True) as conn:
            (total,) = conn.execute(
                "SELECT COUNT(*) FROM request WHERE id = ? AND num>= ?",
                (rid, start),
            ).fetchone()
            if total < 1:
                return result
            result.more = total - size if total > size else 0
            count = size if total > size else total
            rows = conn.execute(
                "SELECT num, respond FROM request WHERE id = ? AND num>= ? "
                "ORDER BY num LIMIT ?",
                (rid, start, count),
            ).fetchall()
        for num, respond in rows:
            result.stop = num
            result.responses.append(respond)
        return result