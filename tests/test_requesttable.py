import pytest

from gonggo.requesttable import ClientRequestTable


class FakeClock:
    def __init__(self, start):
        self.now = start

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock(1000)


@pytest.fixture
def table(clock):
    return ClientRequestTable(clock=clock)


def test_set_and_get_conn(table):
    conn = object()
    table.set("r1", conn, 10)
    assert table.get_conn("r1") is conn
    assert "r1" in table


def test_get_conn_unknown_returns_none(table):
    assert table.get_conn("missing") is None


def test_get_conn_remove_request(table):
    conn = object()
    table.set("r1", conn, 10)
    assert table.get_conn("r1", remove_request=True) is conn
    assert "r1" not in table
    assert table.get_conn("r1") is None


def test_set_replaces_existing(table):
    first, second = object(), object()
    table.set("r1", first, 10)
    table.set("r1", second, 10)
    assert table.get_conn("r1") is second
    assert len(table) == 1


def test_remove(table):
    table.set("r1", object(), 10)
    table.remove("r1")
    table.remove("never-there")
    assert len(table) == 0


def test_expired_strictly_after_timeout(table, clock):
    table.set("r1", object(), 10)
    assert table.expired(clock.now + 10) == []
    assert table.expired(clock.now + 11) == ["r1"]


def test_zero_timeout_never_expires(table, clock):
    table.set("forever", object(), 0)
    table.set("short", object(), 1)
    assert table.expired(clock.now + 100000) == ["short"]


def test_update_time_refreshes_timestamp(table, clock):
    conn = object()
    table.set("r1", conn, 10)
    start = clock.now
    clock.now = start + 8
    assert table.get_conn("r1", update_time=True) is conn
    assert table.expired(start + 11) == []
    assert table.expired(start + 19) == ["r1"]


def test_expired_uses_clock_by_default(table, clock):
    table.set("r1", object(), 5)
    clock.now += 6
    assert table.expired() == ["r1"]