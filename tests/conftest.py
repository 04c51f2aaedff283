from __future__ import annotations

import sys
from pathlib import Path

import pytest


# Ensure src/ is importable for all tests (CI and local)
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
for p in (ROOT, SRC):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


@pytest.fixture(autouse=True)
def _clean_default_queue():
    """Invocations left on the process-wide queue must not leak between tests."""
    from event_mixin.scheduling import default_queue

    default_queue().clear()
    yield
    default_queue().clear()


@pytest.fixture
def queue():
    from event_mixin.scheduling import DeferredQueue

    return DeferredQueue()


@pytest.fixture
def emitter(queue):
    from event_mixin.emitter import EventEmitter

    return EventEmitter(scheduler=queue)


class Recorder:
    """Callable that remembers every call it receives."""

    def __init__(self, name: str = "listener") -> None:
        self.name = name
        self.calls: list[tuple] = []

    def __call__(self, *args, **kwargs):
        self.calls.append((args, kwargs))

    def __repr__(self) -> str:
        return f"Recorder({self.name})"


@pytest.fixture
def recorder():
    return Recorder


def pytest_collection_modifyitems(config, items):
    """Default all tests to 'unit' unless explicitly marked otherwise."""
    for item in items:
        marks = {m.name for m in item.iter_markers()}
        if not ("integ" in marks or "smoke" in marks or "unit" in marks):
            item.add_marker(pytest.mark.unit)
