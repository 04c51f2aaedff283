"""Publish/subscribe capability that any object can acquire.

:class:`EventEmitterMixin` can be mixed into any class::

    class Download(EventEmitterMixin):
        ...

    download = Download()
    download.on("progress", report).emit("progress", 0.5)

:class:`EventEmitter` is the same capability as a standalone object, for hosts
that prefer to hold an emitter and delegate to it.

Listeners never run inside :meth:`~EventEmitterMixin.emit`. Each invocation is
deferred to the emitter's scheduler (the process-wide
:func:`~event_mixin.scheduling.default_queue` unless configured otherwise) and
runs when that scheduler is drained.

A subscription is identified by its listener and its optional ``context``.
When a context is given, the listener is called with the context as its first
positional argument, which makes it possible to subscribe an unbound function
on behalf of an instance and remove exactly that subscription later::

    emitter.on("ready", Widget.on_ready, widget)
    emitter.off("ready", Widget.on_ready, widget)

Bound methods compare equal when they wrap the same function and instance, so
``emitter.off("ready", widget.on_ready)`` also removes a subscription made with
``emitter.on("ready", widget.on_ready)``. Wrapping a listener in a fresh
``functools.partial`` or ``lambda`` produces a new identity every time and
cannot be removed individually afterwards.
"""

from __future__ import annotations

from functools import partial
from typing import Any, Callable, Dict, List, Tuple

from .config import EmitterSettings, build_scheduler
from .exceptions import EventNameError, ListenerError, MultipleEventNamesError
from .listeners import UNSET, ListenerRecord, same_context
from .logging import get_logger, log_event
from .scheduling import Scheduler, default_queue
from .utils import find, reject

LOGGER = get_logger("emitter")

Listener = Callable[..., Any]
Registry = Dict[str, List[ListenerRecord]]


def _require_event_names(value: object, parameter: str = "event_names") -> str:
    if not isinstance(value, str):
        raise EventNameError(
            f"the {parameter} parameter must be a string, but was: {type(value).__name__}"
        )
    return value


def _require_listener(value: object) -> Listener:
    if not callable(value):
        raise ListenerError(
            f"the listener parameter must be callable, but was: {type(value).__name__}"
        )
    return value


class EventEmitterMixin:
    """Adds ``on``, ``once``, ``off`` and ``emit`` to the host class.

    The host does not need to call an ``__init__``: the registry is created on
    first use and stored on the instance. Set ``event_scheduler`` on the class
    or instance to dispatch through something other than the default queue,
    and ``event_settings`` to enable tracing.
    """

    event_scheduler: Scheduler | None = None
    event_settings: EmitterSettings | None = None

    # ----- Registry plumbing ------------------------------------------------
    def _ensure_listeners(self) -> Registry:
        registry = getattr(self, "_event_listeners", None)
        if registry is None:
            registry = {}
            self._event_listeners = registry
        return registry

    def _scheduler(self) -> Scheduler:
        scheduler = self.event_scheduler
        if scheduler is None:
            return default_queue()
        return scheduler

    def _find_event_listener(
        self, event_name: str, listener: Listener, context: object = UNSET
    ) -> ListenerRecord | None:
        registry = self._ensure_listeners()
        return find(registry.get(event_name), lambda record: record.matches(listener, context))

    def _add_event_listener(
        self,
        event_name: str,
        listener: Listener,
        context: object = UNSET,
        callback: Listener | None = None,
    ) -> ListenerRecord | None:
        """Append a record unless the (listener, context) pair is already registered."""

        registry = self._ensure_listeners()
        if self._find_event_listener(event_name, listener, context) is not None:
            return None
        record = ListenerRecord(listener=listener, context=context, callback=callback)
        registry.setdefault(event_name, []).append(record)
        LOGGER.debug(
            "listener added once=%s", record.is_once, extra={"event_name": event_name}
        )
        return record

    def _remove_event_listener(
        self,
        event_name: str,
        listener: Listener | None = None,
        context: object = UNSET,
        exact: bool = False,
    ) -> None:
        """Remove records for ``event_name``.

        Without ``listener`` every record goes. With ``listener`` only its
        records go, in any context unless ``context`` is given. ``exact``
        treats an unset ``context`` as a value to match rather than a wildcard.
        """

        registry = self._ensure_listeners()
        if listener is None:
            registry.pop(event_name, None)
            return

        def _matches(record: ListenerRecord) -> bool:
            if record.listener != listener:
                return False
            if context is UNSET and not exact:
                return True
            return same_context(record.context, context)

        remaining = reject(registry.get(event_name), _matches)
        if remaining:
            registry[event_name] = remaining
        else:
            registry.pop(event_name, None)

    # ----- Public API ---------------------------------------------------------
    def on(self, event_names: str, listener: Listener, context: object = UNSET):
        """Call ``listener`` every time any of the space separated events is emitted.

        Registering a (listener, context) pair that is already registered
        replaces the old record with a persistent one at the end of the list,
        so a pending :meth:`once` subscription becomes permanent.
        """

        _require_event_names(event_names)
        _require_listener(listener)
        names = event_names.split(" ")

        for event_name in names:
            self._remove_event_listener(event_name, listener, context, exact=True)
        for event_name in names:
            self._add_event_listener(event_name, listener, context)
        return self

    def once(self, event_name: str, listener: Listener, context: object = UNSET):
        """Call ``listener`` the first time ``event_name`` is emitted, then forget it.

        Only a single event name is accepted. If the (listener, context) pair
        is already registered for ``event_name`` this does nothing.
        """

        _require_event_names(event_name, "event_name")
        if " " in event_name:
            raise MultipleEventNamesError(
                "the event_name parameter cannot name more than one event and so it "
                f"must not contain a space, but was: {event_name!r}"
            )
        _require_listener(listener)

        def _once(*args: Any, **kwargs: Any) -> Any:
            # Several emissions can be queued before the first one runs, so
            # the registry is checked again at call time.
            current = self._find_event_listener(event_name, listener, context)
            if current is None:
                return None
            result = listener(*args, **kwargs)
            if current.is_once:
                self._remove_event_listener(event_name, listener, context, exact=True)
            # otherwise upgraded by on() after this emission was scheduled
            return result

        self._add_event_listener(event_name, listener, context, callback=_once)
        return self

    def off(
        self,
        event_names: str | None = None,
        listener: Listener | None = None,
        context: object = UNSET,
    ):
        """Remove listeners.

        * ``off()`` removes every listener for every event.
        * ``off("a b")`` removes every listener for ``a`` and ``b``.
        * ``off("a", fn)`` removes ``fn`` from ``a`` whatever its context.
        * ``off("a", fn, ctx)`` removes only the ``fn``/``ctx`` subscription.
        """

        if not event_names:
            self._event_listeners = {}
            LOGGER.debug("all listeners removed")
            return self
        _require_event_names(event_names)
        for event_name in event_names.split(" "):
            self._remove_event_listener(event_name, listener, context)
        return self

    def emit(self, event_names: str, *args: Any, **kwargs: Any):
        """Schedule every listener of each space separated event with ``args``."""

        _require_event_names(event_names)
        for event_name in event_names.split(" "):
            self._emit_event(event_name, args, kwargs)
        return self

    def _emit_event(self, event_name: str, args: Tuple[Any, ...], kwargs: Dict[str, Any]) -> None:
        records = self._ensure_listeners().get(event_name)
        if not records:
            return
        scheduler = self._scheduler()
        for record in tuple(records):
            scheduler.schedule(partial(record.invoke, args, kwargs))

        LOGGER.debug("scheduled %s listeners", len(records), extra={"event_name": event_name})
        settings = self.event_settings
        if settings is not None and settings.trace:
            log_event(LOGGER, "emit", {"event_name": event_name, "listeners": len(records)})

    # ----- Introspection ----------------------------------------------------
    def listeners(self, event_name: str) -> Tuple[Listener, ...]:
        """Return the listeners registered for ``event_name`` in dispatch order."""

        return tuple(record.listener for record in self._ensure_listeners().get(event_name, ()))

    def listener_count(self, event_name: str) -> int:
        return len(self._ensure_listeners().get(event_name, ()))

    def event_names(self) -> Tuple[str, ...]:
        return tuple(name for name, records in self._ensure_listeners().items() if records)


class EventEmitter(EventEmitterMixin):
    """Standalone emitter for hosts that hold one instead of inheriting."""

    def __init__(
        self,
        scheduler: Scheduler | None = None,
        settings: EmitterSettings | None = None,
    ) -> None:
        self.event_settings = settings or EmitterSettings()
        self.event_scheduler = scheduler if scheduler is not None else build_scheduler(self.event_settings)
        self._event_listeners: Registry = {}


__all__ = ["EventEmitter", "EventEmitterMixin", "Listener"]
