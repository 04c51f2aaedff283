from __future__ import annotations

import asyncio

import pytest

from event_mixin.emitter import EventEmitter
from event_mixin.scheduling import AsyncioScheduler, DeferredQueue, default_queue


def test_queue_runs_actions_in_fifo_order() -> None:
    queue = DeferredQueue()
    order = []
    for name in ("a", "b", "c"):
        queue.schedule(lambda name=name: order.append(name))

    assert len(queue) == 3
    assert queue.drain() == 3
    assert order == ["a", "b", "c"]
    assert queue.pending == 0


def test_drain_on_empty_queue_returns_zero() -> None:
    assert DeferredQueue().drain() == 0


def test_nested_drain_is_ignored() -> None:
    queue = DeferredQueue()
    nested = []
    queue.schedule(lambda: nested.append(queue.drain()))
    queue.schedule(lambda: nested.append("second"))

    assert queue.drain() == 2
    assert nested == [0, "second"]


def test_clear_discards_pending_actions() -> None:
    queue = DeferredQueue()
    ran = []
    queue.schedule(lambda: ran.append(1))
    queue.clear()
    assert queue.drain() == 0
    assert ran == []


def test_default_queue_is_shared() -> None:
    assert default_queue() is default_queue()
    assert EventEmitter().event_scheduler is default_queue()


def test_asyncio_scheduler_defers_until_loop_runs() -> None:
    async def scenario():
        scheduler = AsyncioScheduler()
        emitter = EventEmitter(scheduler=scheduler)
        order = []
        emitter.on("x", lambda value: order.append(("L1", value)))
        emitter.on("x", lambda value: order.append(("L2", value)))

        emitter.emit("x", 42)
        before = list(order)
        assert scheduler.pending == 2
        await scheduler.settle()
        return before, order

    before, after = asyncio.run(scenario())
    assert before == []
    assert after == [("L1", 42), ("L2", 42)]


def test_asyncio_scheduler_once_guard() -> None:
    async def scenario():
        scheduler = AsyncioScheduler()
        emitter = EventEmitter(scheduler=scheduler)
        calls = []
        emitter.once("y", calls.append)
        emitter.emit("y", 1).emit("y", 2)
        await scheduler.settle()
        return calls

    assert asyncio.run(scenario()) == [1]


def test_asyncio_scheduler_requires_running_loop() -> None:
    scheduler = AsyncioScheduler()
    with pytest.raises(RuntimeError):
        scheduler.schedule(lambda: None)
    assert scheduler.pending == 0


def test_asyncio_scheduler_with_explicit_loop() -> None:
    loop = asyncio.new_event_loop()
    try:
        scheduler = AsyncioScheduler(loop)
        ran = []
        scheduler.schedule(lambda: ran.append("done"))
        assert ran == []
        loop.run_until_complete(scheduler.settle())
        assert ran == ["done"]
    finally:
        loop.close()
