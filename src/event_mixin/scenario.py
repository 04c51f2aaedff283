"""Replay JSON scenarios against a fresh emitter.

A scenario is a list of steps such as::

    {"name": "double once", "steps": [
        {"op": "once", "event": "y", "listener": "L"},
        {"op": "emit", "event": "y", "args": [1]},
        {"op": "emit", "event": "y", "args": [2]},
        {"op": "drain"}
    ]}

Listener and context labels map to stable objects for the whole replay, so
subscribing the same label twice is the same subscription.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping

from jsonschema import Draft202012Validator, ValidationError

from .emitter import EventEmitter, Listener
from .exceptions import ScenarioError
from .listeners import UNSET
from .logging import get_logger, log_event
from .scheduling import DeferredQueue

LOGGER = get_logger("scenario")

OPERATIONS = ("on", "once", "off", "emit", "drain")

SCENARIO_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["steps"],
    "additionalProperties": False,
    "properties": {
        "name": {"type": "string"},
        "steps": {"type": "array", "items": {"$ref": "#/$defs/step"}},
    },
    "$defs": {
        "step": {
            "type": "object",
            "required": ["op"],
            "additionalProperties": False,
            "properties": {
                "op": {"enum": list(OPERATIONS)},
                "event": {"type": "string"},
                "listener": {"type": "string", "minLength": 1},
                "context": {"type": "string", "minLength": 1},
                "args": {"type": "array"},
            },
            "dependentRequired": {"context": ["listener"]},
            "allOf": [
                {
                    "if": {"properties": {"op": {"enum": ["on", "once", "emit"]}}},
                    "then": {"required": ["event"]},
                },
                {
                    "if": {"properties": {"op": {"enum": ["on", "once"]}}},
                    "then": {"required": ["listener"]},
                },
            ],
        }
    },
}


@dataclass(frozen=True)
class ScenarioContext:
    """Stable context object standing in for a context label."""

    label: str


@dataclass(frozen=True)
class Invocation:
    listener: str
    context: str | None
    args: List[Any]

    def to_dict(self) -> Dict[str, Any]:
        return {"listener": self.listener, "context": self.context, "args": list(self.args)}


@dataclass
class ReplayResult:
    """Outcome of a replay: ordered invocations and the emitter left behind."""

    name: str
    emitter: EventEmitter
    invocations: List[Invocation] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "invocations": [item.to_dict() for item in self.invocations],
            "events": {name: len(self.emitter.listeners(name)) for name in self.emitter.event_names()},
        }


def _sort_key(error: ValidationError) -> tuple:
    path = tuple(str(part) for part in error.absolute_path)
    return path + (error.message,)


def validate_scenario(document: Any) -> None:
    """Validate ``document`` and raise :class:`ScenarioError` listing every problem."""

    validator = Draft202012Validator(SCENARIO_SCHEMA)
    errors = sorted(validator.iter_errors(document), key=_sort_key)
    if errors:
        messages = []
        for error in errors:
            location = "/".join(str(p) for p in error.absolute_path) or "<root>"
            messages.append(f"{location}: {error.message}")
        raise ScenarioError("; ".join(messages))


def load_scenario(path: Path) -> Dict[str, Any]:
    """Load and validate a scenario file."""

    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ScenarioError(f"Scenario {path} is not UTF-8 text: {exc}") from exc
    except OSError as exc:
        raise ScenarioError(f"Scenario {path} cannot be read: {exc}") from exc
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ScenarioError(f"Scenario {path} is not valid JSON: {exc}") from exc
    validate_scenario(document)
    return document


class _Replay:
    def __init__(self, name: str) -> None:
        self.queue = DeferredQueue()
        self.result = ReplayResult(name=name, emitter=EventEmitter(scheduler=self.queue))
        self._listeners: Dict[str, Listener] = {}
        self._contexts: Dict[str, ScenarioContext] = {}

    def listener(self, label: str | None) -> Listener | None:
        if label is None:
            return None
        if label not in self._listeners:
            self._listeners[label] = self._recorder(label)
        return self._listeners[label]

    def context(self, label: str | None) -> Any:
        if label is None:
            return UNSET
        return self._contexts.setdefault(label, ScenarioContext(label))

    def _recorder(self, label: str) -> Listener:
        invocations = self.result.invocations

        def _record(*args: Any) -> None:
            context = None
            if args and isinstance(args[0], ScenarioContext):
                context, args = args[0].label, args[1:]
            invocations.append(Invocation(listener=label, context=context, args=list(args)))

        return _record

    def apply(self, step: Mapping[str, Any]) -> None:
        op = step["op"]
        emitter = self.result.emitter
        if op == "drain":
            self.queue.drain()
        elif op == "emit":
            emitter.emit(step["event"], *step.get("args", []))
        elif op == "on":
            emitter.on(step["event"], self.listener(step["listener"]), self.context(step.get("context")))
        elif op == "once":
            emitter.once(step["event"], self.listener(step["listener"]), self.context(step.get("context")))
        else:
            emitter.off(
                step.get("event"),
                self.listener(step.get("listener")),
                self.context(step.get("context")),
            )


def replay(document: Mapping[str, Any]) -> ReplayResult:
    """Run every step of ``document`` and drain pending invocations at the end."""

    validate_scenario(document)
    run = _Replay(str(document.get("name", "scenario")))
    for step in document["steps"]:
        run.apply(step)
    run.queue.drain()

    log_event(
        LOGGER,
        "scenario_replayed",
        {"name": run.result.name, "steps": len(document["steps"]), "invocations": len(run.result.invocations)},
    )
    return run.result


__all__ = [
    "Invocation",
    "ReplayResult",
    "SCENARIO_SCHEMA",
    "ScenarioContext",
    "load_scenario",
    "replay",
    "validate_scenario",
]
