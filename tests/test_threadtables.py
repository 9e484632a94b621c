from gonggo.threadtables import ProxyThreadTable, ThreadEntry


def test_get_returns_what_was_set():
    table = ProxyThreadTable()
    thread, ctx = object(), object()
    table.set("alpha", thread, ctx)
    entry = table.get("alpha")
    assert entry == ThreadEntry(thread, ctx)
    assert entry.thread is thread
    assert entry.ctx is ctx


def test_get_unknown_is_none():
    table = ProxyThreadTable()
    assert table.get("missing") is None


def test_replace_destroys_old_context():
    destroyed = []
    table = ProxyThreadTable(destroy=destroyed.append)
    table.set("alpha", "t1", "ctx1")
    table.set("alpha", "t2", "ctx2")
    assert destroyed == ["ctx1"]
    assert table.get("alpha").ctx == "ctx2"
    assert len(table) == 1


def test_remove_destroys_context_and_forgets():
    destroyed = []
    table = ProxyThreadTable(destroy=destroyed.append)
    table.set("alpha", "t1", "ctx1")
    table.remove("alpha")
    assert destroyed == ["ctx1"]
    assert "alpha" not in table
    assert table.get("alpha") is None


def test_remove_unknown_leaves_table_alone():
    destroyed = []
    table = ProxyThreadTable(destroy=destroyed.append)
    table.set("alpha", "t1", "ctx1")
    table.remove("beta")
    assert table.keys() == ["alpha"]
    assert destroyed == []


def test_keys_is_a_snapshot():
    table = ProxyThreadTable()
    table.set("alpha", None, None)
    table.set("beta", None, None)
    keys = table.keys()
    table.remove("alpha")
    assert sorted(keys) == ["alpha", "beta"]
    assert table.keys() == ["beta"]