# SPDX-License-Identifier: GPL-3.0-or-later
# Tests for the refresh timer

import pytest

GLib = pytest.importorskip("gi.repository.GLib")

from panelstat import ticker  # noqa: E402


class FakeRegistry:
    def __init__(self, refresh_interval=1000):
        self.refresh_interval = refresh_interval
        self.ticks = 0

    def tick(self):
        self.ticks += 1

    def set_refresh_interval(self, interval_ms):
        self.refresh_interval = interval_ms


@pytest.fixture
def timers(monkeypatch):
    state = {'added': [], 'removed': []}

    def timeout_add(interval, callback):
        state['added'].append((interval, callback))
        return len(state['added'])

    monkeypatch.setattr(ticker.GLib, 'timeout_add', timeout_add)
    monkeypatch.setattr(ticker.GLib, 'source_remove', state['removed'].append)
    return state


def test_start_and_stop(timers):
    t = ticker.Ticker(FakeRegistry(2000))
    t.start()
    assert t.running
    assert timers['added'][0][0] == 2000
    t.stop()
    assert not t.running
    assert timers['removed'] == [1]


def test_callback_ticks_registry(timers):
    registry = FakeRegistry()
    t = ticker.Ticker(registry)
    t.start()
    callback = timers['added'][0][1]
    assert callback() == GLib.SOURCE_CONTINUE
    assert registry.ticks == 1


def test_set_interval_restarts(timers):
    registry = FakeRegistry(1000)
    t = ticker.Ticker(registry)
    t.set_interval(500)
    assert registry.refresh_interval == 500
    assert timers['added'] == []
    t.start()
    t.set_interval(250)
    assert [interval for interval, _ in timers['added']] == [500, 250]
    assert timers['removed'] == [1]
