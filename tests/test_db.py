import os
import sqlite3

import pytest

from gonggo.db import RespondQueryResult, ResponseStore


@pytest.fixture
def store(tmp_path):
    s = ResponseStore("gonggo", tmp_path)
    s.ensure()
    return s


def test_ensure_creates_database_file(tmp_path):
    s = ResponseStore("gonggo", tmp_path)
    s.ensure()
    assert os.path.exists(os.path.join(tmp_path, "gonggo.db"))
    assert s.db_path == f"{tmp_path}/gonggo.db"


def test_ensure_is_idempotent(store):
    store.insert("r", "x")
    store.ensure()
    assert store.query("r", 1, 10).responses == ["x"]


def test_ensure_fails_in_missing_directory(tmp_path):
    s = ResponseStore("gonggo", tmp_path / "missing" / "deeper")
    with pytest.raises(sqlite3.Error):
        s.ensure()


def test_insert_numbers_per_request_id(store):
    first = store.insert("a", "one")
    second = store.insert("a", "two")
    other = store.insert("b", "uno")
    assert second == first + 1
    assert other == first


def test_query_returns_in_order(store):
    texts = ["one", "two", "three"]
    for text in texts:
        store.insert("rid", text)
    result = store.query("rid", 1, 10)
    assert result.responses == texts
    assert result.more == 0
    assert result.stop == store.insert("rid", "four") - 1


def test_query_pages(store):
    texts = [f"r{i}" for i in range(5)]
    for text in texts:
        store.insert("rid", text)
    page = store.query("rid", 1, 2)
    assert page.responses == texts[:2]
    assert len(page.responses) + page.more == len(texts)
    rest = store.query("rid", page.stop + 1, 10)
    assert page.responses + rest.responses == texts
    assert rest.more == 0


def test_query_unknown_rid_is_empty(store):
    store.insert("rid", "x")
    assert store.query("other", 1, 5) == RespondQueryResult()


def test_query_start_beyond_end_is_empty(store):
    store.insert("rid", "x")
    result = store.query("rid", 100, 5)
    assert result.responses == []
    assert result.stop == 0 and result.more == 0


def test_query_without_database_raises(tmp_path):
    s = ResponseStore("nothing", tmp_path)
    with pytest.raises(sqlite3.Error):
        s.query("rid", 1, 1)


def test_purge_keeps_recent(store):
    store.insert("rid", "x")
    assert store.purge(3600) == 0
    assert store.query("rid", 1, 5).responses == ["x"]


def test_purge_removes_overdue(store):
    store.insert("rid", "x")
    store.insert("rid", "y")
    assert store.purge(-3600) == 2
    assert store.query("rid", 1, 5).responses == []