import signal
import time

from conftest import FakeClient, ScriptedWaiter
from models import CHANGED, INITIAL, UNCHANGED, MonitorConfig
from monitor.lifecycle import (
    INTERRUPT,
    STOP_CHANGED,
    STOP_INTERRUPTED,
    TICK,
    Scheduler,
    TickWaiter,
    signal_stop,
)
from monitor.stores import RecordStore


def make_scheduler(scripts, events, **cfg):
    config = MonitorConfig(domains=list(scripts), **cfg)
    ticks = []
    scheduler = Scheduler(
        config,
        FakeClient(scripts),
        on_tick=lambda outcomes: ticks.append([o.kind for o in outcomes]),
        waiter=ScriptedWaiter(events),
    )
    return scheduler, ticks


def test_runs_until_interrupt():
    scheduler, ticks = make_scheduler(
        {"example.com": [["1.1.1.1"]]},
        [TICK, TICK, TICK, INTERRUPT],
    )
    assert scheduler.run() == STOP_INTERRUPTED
    assert ticks == [[INITIAL], [UNCHANGED], [UNCHANGED]]
    assert scheduler.ticks == 3


def test_interrupt_before_first_tick_runs_nothing():
    scheduler, ticks = make_scheduler({"example.com": [["1.1.1.1"]]}, [INTERRUPT])
    assert scheduler.run() == STOP_INTERRUPTED
    assert ticks == []


def test_until_change_stops_after_the_changing_tick():
    scheduler, ticks = make_scheduler(
        {
            "a.example": [["1.1.1.1"], ["1.1.1.1"], ["2.2.2.2"]],
            "b.example": [["9.9.9.9"]],
        },
        [TICK] * 10,
        until_change=True,
    )
    assert scheduler.run() == STOP_CHANGED
    # the changing tick completes for every domain
    assert ticks == [[INITIAL, INITIAL], [UNCHANGED, UNCHANGED], [CHANGED, UNCHANGED]]


def test_change_without_until_change_keeps_running():
    scheduler, ticks = make_scheduler(
        {"example.com": [["1.1.1.1"], ["2.2.2.2"], ["3.3.3.3"]]},
        [TICK, TICK, TICK, INTERRUPT],
    )
    assert scheduler.run() == STOP_INTERRUPTED
    assert ticks == [[INITIAL], [CHANGED], [CHANGED]]


def test_errors_do_not_stop_the_scheduler(lookup_failure):
    scheduler, ticks = make_scheduler(
        {"bad.example": [lookup_failure("bad.example")]},
        [TICK, TICK, INTERRUPT],
        until_change=True,
    )
    assert scheduler.run() == STOP_INTERRUPTED
    assert ticks == [["error"], ["error"]]


def test_scheduler_uses_given_store():
    store = RecordStore()
    config = MonitorConfig(domains=["example.com"], record_type="TXT")
    scheduler = Scheduler(config, FakeClient({"example.com": [["v=spf1 -all"]]}), on_tick=lambda o: None,
                          store=store, waiter=ScriptedWaiter([TICK]))
    scheduler.run()
    assert store.get("example.com:TXT").values == ("v=spf1 -all",)


def test_tick_waiter_elapses():
    waiter = TickWaiter(0.01)
    assert waiter.wait() == TICK


def test_tick_waiter_stop_wins_immediately():
    waiter = TickWaiter(3600)
    waiter.request_stop()
    started = time.monotonic()
    assert waiter.wait() == INTERRUPT
    assert time.monotonic() - started < 1


class FirstTickNow(TickWaiter):
    """Fires the first tick immediately, then behaves normally."""

    def __init__(self, interval):
        super().__init__(interval)
        self.waits = 0

    def wait(self):
        self.waits += 1
        if self.waits == 1:
            return TICK
        return super().wait()


def test_stop_requested_during_tick_ends_loop():
    config = MonitorConfig(domains=["example.com"], interval=3600)
    waiter = FirstTickNow(config.interval)
    seen = []

    def on_tick(outcomes):
        seen.append(outcomes)
        waiter.request_stop()

    scheduler = Scheduler(config, FakeClient({"example.com": [["1.1.1.1"]]}), on_tick=on_tick, waiter=waiter)
    assert scheduler.run() == STOP_INTERRUPTED
    assert len(seen) == 1


def test_signal_stop_installs_and_restores_handlers():
    before_int = signal.getsignal(signal.SIGINT)
    before_term = signal.getsignal(signal.SIGTERM)
    waiter = TickWaiter(1)

    with signal_stop(waiter):
        handler = signal.getsignal(signal.SIGINT)
        assert handler is not before_int
        handler(signal.SIGINT, None)
        assert waiter.stop_requested

    assert signal.getsignal(signal.SIGINT) is before_int
    assert signal.getsignal(signal.SIGTERM) is before_term
