"""Publish/subscribe capability for arbitrary Python objects."""

from .config import EmitterSettings, build_scheduler
from .emitter import EventEmitter, EventEmitterMixin
from .exceptions import (
    ConfigurationError,
    EmitterError,
    EventNameError,
    ListenerError,
    MultipleEventNamesError,
    ScenarioError,
)
from .listeners import UNSET
from .scheduling import AsyncioScheduler, DeferredQueue, default_queue, drain

__all__ = [
    "AsyncioScheduler",
    "ConfigurationError",
    "DeferredQueue",
    "EmitterError",
    "EmitterSettings",
    "EventEmitter",
    "EventEmitterMixin",
    "EventNameError",
    "ListenerError",
    "MultipleEventNamesError",
    "ScenarioError",
    "UNSET",
    "build_scheduler",
    "default_queue",
    "drain",
]
