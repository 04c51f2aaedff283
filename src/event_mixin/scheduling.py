"""Deferred execution primitives used to dispatch listener invocations.

Emitting never calls a listener directly. Each invocation is wrapped in a
zero-argument action and handed to a :class:`Scheduler`, which runs actions
later, one at a time and in the order they were scheduled.
"""

from __future__ import annotations

import asyncio
from collections import deque
from typing import Callable, Deque, Protocol

from .logging import get_logger

LOGGER = get_logger("scheduling")

Action = Callable[[], object]


class Scheduler(Protocol):
    """Anything that can defer a zero-argument action in FIFO order."""

    def schedule(self, action: Action) -> None:  # pragma: no cover - Protocol
        ...


class DeferredQueue:
    """An explicit FIFO queue of pending actions, run on :meth:`drain`."""

    def __init__(self) -> None:
        self._actions: Deque[Action] = deque()
        self._draining = False

    def schedule(self, action: Action) -> None:
        self._actions.append(action)

    @property
    def pending(self) -> int:
        return len(self._actions)

    def __len__(self) -> int:
        return len(self._actions)

    def drain(self) -> int:
        """Run queued actions until the queue is empty and return how many ran.

        Actions scheduled while draining run in the same pass. An exception
        raised by an action propagates and leaves the rest of the queue intact.
        Calling ``drain`` from inside a running action does nothing.
        """

        if self._draining:
            return 0
        self._draining = True
        ran = 0
        try:
            while self._actions:
                action = self._actions.popleft()
                ran += 1
                action()
        finally:
            self._draining = False
        if ran:
            LOGGER.debug("drained %s deferred actions", ran)
        return ran

    def clear(self) -> None:
        self._actions.clear()


class AsyncioScheduler:
    """Schedules actions on an asyncio event loop with ``call_soon``."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop
        self._pending = 0

    @property
    def pending(self) -> int:
        return self._pending

    def _resolve_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        return asyncio.get_running_loop()

    def schedule(self, action: Action) -> None:
        loop = self._resolve_loop()
        self._pending += 1

        def _run() -> None:
            self._pending -= 1
            action()

        loop.call_soon(_run)

    async def settle(self) -> None:
        """Yield to the loop until every scheduled action has run."""

        while self._pending:
            await asyncio.sleep(0)


_DEFAULT_QUEUE = DeferredQueue()


def default_queue() -> DeferredQueue:
    """Return the process-wide queue shared by emitters without a scheduler."""

    return _DEFAULT_QUEUE


def drain() -> int:
    """Drain the process-wide default queue."""

    return _DEFAULT_QUEUE.drain()


__all__ = [
    "Action",
    "AsyncioScheduler",
    "DeferredQueue",
    "Scheduler",
    "default_queue",
    "drain",
]
