"""Daily rotating log file, one file per weekday."""

from __future__ import annotations

import os
import threading
import time


class DailyLog:
    """Writes lines to ``<path>/<name>-<weekday>.log``.

    A file left over from an earlier day with the same weekday is truncated
    before the first write of the new day.
    """

    def __init__(self, name: str, path: str | os.PathLike, pid: int) -> None:
        self.name = name
        self.path = os.fspath(path)
        self.pid = pid
        self._lock = threading.Lock()

    def _file_path(self, tm_now: time.struct_time) -> str:
        return f"{self.path}/{self.name}-{time.strftime('%a', tm_now)}.log"

    def write(self, level: str, message: str) -> None:
        """Append one ``timestamp [pid] LEVEL: message`` line."""
        with self._lock:
            tm_now = time.localtime()
            file_path = self._file_path(tm_now)
            mode = 0
            try:
                st = os.stat(file_path)
            except FileNotFoundError:
                flags = os.O_CREAT | os.O_APPEND
                mode = 0o600
            except OSError:
                return
            else:
                born = getattr(st, "st_birthtime", st.st_ctime)
                tm_file = time.localtime(born)
                same_day = (tm_now.tm_year, tm_now.tm_mon, tm_now.tm_mday) == (
                    tm_file.tm_year,
                    tm_file.tm_mon,
                    tm_file.tm_mday,
                )
                flags = os.O_APPEND if same_day else os.O_TRUNC | os.O_APPEND

            try:
                fd = os.open(file_path, flags | os.O_WRONLY, mode)
            except OSError:
                return
            try:
                if message:
                    stamp = time.strftime("%Y-%m-%d %H:%M:%S %Z", tm_now)
                    line = f"{stamp} [{self.pid}] {level}: {message}\n"
                    os.write(fd, line.encode("utf-8", errors="replace"))
            finally:
                os.close(fd)


_active: DailyLog | None = None


def configure(name: str, path: str | os.PathLike, pid: int) -> DailyLog:
    """Set up the process-wide log and return it."""
    global _active
    _active = DailyLog(name, path, pid)
    return _active


def reset() -> DailyLog | None:
    """Turn the process-wide log off and return the one that was active."""
    global _active
    previous, _active = _active, None
    return previous


def log(level: str, message: str) -> None:
    """Write to the process-wide log; does nothing when it is not set up."""
    logger = _active
    if logger is not None:
        logger.write(level, message)