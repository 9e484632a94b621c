from gonggo.proxynametable import ClientProxynameTable


def test_set_and_requests():
    table = ClientProxynameTable()
    table.set("p", "a")
    table.set("p", "b")
    table.set("p", "a")
    assert table.requests("p") == ["a", "b"]
    assert table.requests("unknown") is None


def test_not_sent_only_filters_sent():
    table = ClientProxynameTable()
    table.set("p", "a")
    table.set("p", "b")
    table.mark_sent("p", "a")
    assert table.requests("p", not_sent_only=True) == ["b"]
    assert table.requests("p") == ["a", "b"]


def test_mark_unsent_resets_all():
    table = ClientProxynameTable()
    table.set("p", "a")
    table.set("p", "b")
    table.mark_sent("p", "a")
    table.mark_sent("p", "b")
    assert table.requests("p", not_sent_only=True) == []
    table.mark_unsent("p")
    assert table.requests("p", not_sent_only=True) == ["a", "b"]


def test_set_again_keeps_sent_flag():
    table = ClientProxynameTable()
    table.set("p", "a")
    table.mark_sent("p", "a")
    table.set("p", "a")
    assert table.requests("p", not_sent_only=True) == []


def test_drop_reports_and_removes_empty_proxy():
    table = ClientProxynameTable()
    table.set("p", "a")
    assert table.drop("p", "missing") is False
    assert table.drop("other", "a") is False
    assert table.drop("p", "a") is True
    assert table.requests("p") is None
    assert len(table) == 0


def test_drop_keeps_flags_aligned():
    table = ClientProxynameTable()
    for uuid in ("a", "b", "c"):
        table.set("p", uuid)
    table.mark_sent("p", "c")
    table.drop("p", "a")
    assert table.requests("p", not_sent_only=True) == ["b"]


def test_drop_all_and_proxy_name_of():
    table = ClientProxynameTable()
    table.set("p1", "a")
    table.set("p2", "b")
    assert table.proxy_name_of("b") == "p2"
    assert table.proxy_name_of("zzz") is None
    table.drop_all("b")
    assert table.proxy_name_of("b") is None
    assert table.items() == [("p1", ["a"])]


def test_similar_is_empty_and_independent():
    table = ClientProxynameTable()
    table.set("p", "a")
    other = table.similar()
    assert other.items() == []
    other.set("q", "b")
    assert table.items() == [("p", ["a"])]
    assert other.items() == [("q", ["b"])]