from gonggo.connectiontable import ClientConnectionTable


def test_set_and_requests_keep_order():
    table = ClientConnectionTable()
    conn = object()
    table.set(conn, "a")
    table.set(conn, "b")
    assert table.requests(conn) == ["a", "b"]


def test_set_ignores_duplicates():
    table = ClientConnectionTable()
    conn = object()
    table.set(conn, "a")
    table.set(conn, "a")
    assert table.requests(conn) == ["a"]


def test_requests_unknown_is_none():
    assert ClientConnectionTable().requests(object()) is None


def test_requests_returns_copy():
    table = ClientConnectionTable()
    conn = object()
    table.set(conn, "a")
    copy = table.requests(conn)
    copy.append("x")
    assert table.requests(conn) == ["a"]


def test_drop_removes_connection_when_empty():
    table = ClientConnectionTable()
    conn = object()
    table.set(conn, "a")
    table.set(conn, "b")
    table.drop(conn, "a")
    assert table.requests(conn) == ["b"]
    table.drop(conn, "b")
    assert table.requests(conn) is None
    assert len(table) == 0


def test_drop_unknown_is_harmless():
    table = ClientConnectionTable()
    conn = object()
    table.set(conn, "a")
    table.drop(conn, "zzz")
    table.drop(object(), "a")
    assert table.requests(conn) == ["a"]


def test_connections_are_separate():
    table = ClientConnectionTable()
    one, two = object(), object()
    table.set(one, "a")
    table.set(two, "b")
    table.remove(one)
    assert table.requests(one) is None
    assert table.requests(two) == ["b"]


def test_similar_is_empty_and_independent():
    table = ClientConnectionTable()
    conn = object()
    table.set(conn, "a")
    other = table.similar()
    assert other.items() == []
    other.set(conn, "b")
    assert table.requests(conn) == ["a"]
    assert other.items() == [(conn, ["b"])]