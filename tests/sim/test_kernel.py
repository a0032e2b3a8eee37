# tests/sim/test_kernel.py
from dataclasses import dataclass

import pytest

from taxi_meter.sim.event import BaseEvent
from taxi_meter.sim.hooks import NoopHooks
from taxi_meter.sim.kernel import Kernel


# ---- demo domain events ----
@dataclass(order=True)
class Ping(BaseEvent):
    n: int = 0


@dataclass(order=True)
class Pong(BaseEvent):
    n: int = 0


@dataclass(order=True)
class Timer(BaseEvent):
    label: str = ""


# ---- demo handlers ----
def handle_ping(ev: Ping):
    out: list[BaseEvent] = [Pong(t=ev.t, n=ev.n)]
    if ev.n > 0:
        out.append(Ping(t=ev.t + 1.0, n=ev.n - 1))
    return out


def handle_pong(ev: Pong):
    return [Timer(t=ev.t + 0.5, label=f"after pong {ev.n}")]


def handle_timer(ev: Timer):
    return []


# --- test hook that records dispatch order & times ---
class TraceHooks(NoopHooks):
    def __init__(self):
        self.trace = []
        self.errors = []

    def dispatch_start(self, ev, *, seq, qsize, handlers):
        self.trace.append((ev.t, type(ev).__name__))

    def error(self, ev, *, reason, **kw):
        self.errors.append(reason)


def test_order_and_fan_out():
    hooks = TraceHooks()
    k = Kernel(hooks=hooks)
    k.on(Ping, handle_ping)
    k.on(Pong, handle_pong)
    k.on(Timer, handle_timer)

    k.schedule(Ping(t=0.0, n=2))
    processed = k.run(until=3.0)
    assert processed == 9
    names = [name for _, name in hooks.trace]
    times = [t for t, _ in hooks.trace]
    assert names == ["Ping", "Pong", "Timer", "Ping", "Pong", "Timer", "Ping", "Pong", "Timer"]
    assert times == [0.0, 0.0, 0.5, 1.0, 1.0, 1.5, 2.0, 2.0, 2.5]


def test_equal_times_are_fifo():
    k = Kernel()
    seen: list[int] = []
    k.on(Ping, lambda ev: seen.append(ev.n))
    for n in (3, 1, 2):
        k.schedule(Ping(t=5.0, n=n))
    k.run()
    assert seen == [3, 1, 2]


def test_max_events_gate():
    k = Kernel()
    k.on(Ping, handle_ping)
    k.schedule(Ping(t=0.0, n=10))
    assert k.run(max_events=1) == 1
    assert k.now == 0.0
    assert k.pending == 2


def test_scheduling_in_the_past_raises():
    hooks = TraceHooks()
    k = Kernel(hooks=hooks)
    k.on(Ping, lambda ev: [Ping(t=ev.t - 1.0, n=0)])
    k.schedule(Ping(t=1.0, n=0))
    with pytest.raises(RuntimeError):
        k.run()
    assert hooks.errors == ["scheduled_past"]


def test_handler_errors_reach_hooks_and_caller():
    hooks = TraceHooks()
    k = Kernel(hooks=hooks)

    def boom(ev):
        raise ValueError("bad")

    k.on(Ping, boom)
    k.schedule(Ping(t=0.0))
    with pytest.raises(ValueError, match="bad"):
        k.run()
    assert hooks.errors == ["handler_failed"]
