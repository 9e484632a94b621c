import re
import threading
import time

import pytest

from gonggo import log as gonggo_log
from gonggo.log import DailyLog


def _log_file(tmp_path, name):
    return tmp_path / f"{name}-{time.strftime('%a')}.log"


@pytest.fixture(autouse=True)
def _clean_global():
    gonggo_log.reset()
    yield
    gonggo_log.reset()


def test_write_creates_file_with_formatted_line(tmp_path):
    DailyLog("gonggo", tmp_path, 7).write("ERROR", "boom")
    content = _log_file(tmp_path, "gonggo").read_text()
    assert content.endswith(" [7] ERROR: boom\n")
    assert re.match(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}", content)
    assert content.count("\n") == 1


def test_write_appends_on_same_day(tmp_path):
    logger = DailyLog("gonggo", tmp_path, 1)
    logger.write("INFO", "first")
    logger.write("INFO", "second")
    lines = _log_file(tmp_path, "gonggo").read_text().splitlines()
    assert [line.split(": ", 1)[1] for line in lines] == ["first", "second"]


def test_empty_message_writes_nothing(tmp_path):
    DailyLog("gonggo", tmp_path, 1).write("INFO", "")
    assert _log_file(tmp_path, "gonggo").read_text() == ""


def test_missing_directory_is_ignored(tmp_path):
    logger = DailyLog("gonggo", tmp_path / "nope", 1)
    logger.write("INFO", "lost")
    assert not (tmp_path / "nope").exists()


def test_module_log_uses_configured_logger(tmp_path):
    logger = gonggo_log.configure("svc", tmp_path, 42)
    gonggo_log.log("INFO", "started")
    assert logger.name == "svc"
    assert _log_file(tmp_path, "svc").read_text().endswith(" [42] INFO: started\n")


def test_module_log_after_reset_does_nothing(tmp_path):
    gonggo_log.configure("svc", tmp_path, 42)
    gonggo_log.reset()
    gonggo_log.log("INFO", "ignored")
    assert list(tmp_path.iterdir()) == []


def test_concurrent_writes_keep_lines_whole(tmp_path):
    logger = DailyLog("gonggo", tmp_path, 3)

    def worker(tag):
        for number in range(20):
            logger.write("INFO", f"{tag}-{number}")

    threads = [threading.Thread(target=worker, args=(tag,)) for tag in "abcd"]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    lines = _log_file(tmp_path, "gonggo").read_text().splitlines()
    assert len(lines) == 80
    assert all(" [3] INFO: " in line for line in lines)