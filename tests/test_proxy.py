import threading

import pytest

from gonggo.proxy import ProxyChannelContext, ProxyThreadKiller
from gonggo.threadtables import ProxyThreadTable


class FakeCtx:
    def __init__(self, kind, calls, killer_box=None, name=None):
        self.kind = kind
        self.calls = calls
        self.event = threading.Event()
        self.killer_box = killer_box
        self.name = name
        self.zombie_seen = None

    def stop(self):
        if self.killer_box:
            self.zombie_seen = self.killer_box[0].is_zombie(self.name)
        self.calls.append(self.kind)
        self.event.set()


def _start(ctx):
    thread = threading.Thread(target=ctx.event.wait, daemon=True)
    thread.start()
    return thread


def _setup(names, killer_box=None):
    calls = []
    destroyed = []
    tables = [ProxyThreadTable(destroy=destroyed.append) for _ in range(3)]
    ctxs = {}
    for name in names:
        for kind, table in zip(("subscribe", "channel", "alive"), tables):
            ctx = FakeCtx(kind, calls, killer_box, name)
            table.set(name, _start(ctx), ctx)
            ctxs[(name, kind)] = ctx
    killer = ProxyThreadKiller(*tables)
    if killer_box is not None:
        killer_box.append(killer)
    return killer, tables, calls, destroyed, ctxs


def test_channel_wake_before_wait_is_not_lost():
    ctx = ProxyChannelContext("alpha")
    ctx.wake()
    assert ctx.wait(0.01) is True
    assert ctx.wait(0.01) is False


def test_channel_stop_releases_wait():
    ctx = ProxyChannelContext("alpha")
    assert ctx.stopped is False
    ctx.stop()
    assert ctx.stopped is True
    assert ctx.wait(0.01) is True


def test_channel_wake_from_other_thread():
    ctx = ProxyChannelContext("alpha")
    timer = threading.Timer(0.05, ctx.wake)
    timer.start()
    assert ctx.wait(5) is True
    timer.join()


def test_terminating_marks():
    killer, *_ = _setup([])
    killer.set_terminating("alpha")
    killer.set_terminating("alpha")
    assert killer.is_zombie("alpha")
    killer.drop_terminating("alpha")
    assert not killer.is_zombie("alpha")


def test_kill_stops_joins_and_forgets_in_order():
    killer, tables, calls, destroyed, ctxs = _setup(["alpha", "beta"])
    killer.kill("alpha")
    assert calls == ["subscribe", "channel", "alive"]
    assert all("alpha" not in table for table in tables)
    assert all("beta" in table for table in tables)
    assert sorted(c.kind for c in destroyed) == ["alive", "channel", "subscribe"]
    assert all(c.name == "alpha" for c in destroyed)


def test_kill_unknown_proxy_changes_nothing():
    killer, tables, calls, destroyed, _ = _setup(["alpha"])
    killer.kill("nobody")
    assert calls == []
    assert destroyed == []
    assert all(table.keys() == ["alpha"] for table in tables)


def test_kill_all_marks_zombie_during_kill_and_clears_after():
    box = []
    killer, tables, calls, destroyed, ctxs = _setup(["alpha", "beta"], box)
    killer.kill_all()
    assert all(len(table) == 0 for table in tables)
    assert len(calls) == 6
    assert all(ctx.zombie_seen is True for ctx in ctxs.values())
    assert not killer.is_zombie("alpha")
    assert not killer.is_zombie("beta")


@pytest.mark.parametrize("missing", ["subscribe", "channel"])
def test_kill_with_partial_entries(missing):
    killer, tables, calls, destroyed, _ = _setup(["alpha"])
    index = ("subscribe", "channel", "alive").index(missing)
    tables[index].remove("alpha")
    calls.clear()
    killer.kill("alpha")
    assert missing not in calls
    assert all(len(table) == 0 for table in tables)