"""Configuration models for event emitters."""
from __future__ import annotations

import os
from typing import Any, Dict, Literal, Mapping

from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigurationError
from .scheduling import AsyncioScheduler, DeferredQueue, Scheduler, default_queue

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


class EmitterSettings(BaseModel):
    """Settings that describe how an emitter dispatches its listeners."""

    scheduler: Literal["queue", "asyncio"] = Field(
        default="queue",
        description="Deferred execution backend used for listener invocations",
    )
    trace: bool = Field(
        default=False,
        description="If True every emission is written to the log as an event record.",
    )
    shared_queue: bool = Field(
        default=True,
        description="Use the process-wide default queue instead of a private one.",
    )

    @field_validator("scheduler", mode="before")
    @classmethod
    def normalize_scheduler(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "EmitterSettings":
        """Build settings from ``EVENT_MIXIN_*`` environment variables."""

        env = os.environ if environ is None else environ
        raw: Dict[str, Any] = {}
        if "EVENT_MIXIN_SCHEDULER" in env:
            raw["scheduler"] = env["EVENT_MIXIN_SCHEDULER"]
        for key, name in (("trace", "EVENT_MIXIN_TRACE"), ("shared_queue", "EVENT_MIXIN_SHARED_QUEUE")):
            if name in env:
                raw[key] = _parse_flag(name, env[name])
        return build_settings_from_dict(raw)


def _parse_flag(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    raise ConfigurationError(f"{name} must be a boolean flag, but was: {value!r}")


def build_settings_from_dict(raw: Mapping[str, Any]) -> EmitterSettings:
    """Utility helper to build :class:`EmitterSettings` from a plain mapping."""

    try:
        return EmitterSettings.model_validate(dict(raw))
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid emitter settings: {exc}") from exc


def build_scheduler(settings: EmitterSettings | None = None) -> Scheduler:
    """Return the scheduler described by ``settings``."""

    settings = settings or EmitterSettings()
    if settings.scheduler == "asyncio":
        return AsyncioScheduler()
    if settings.shared_queue:
        return default_queue()
    return DeferredQueue()


__all__ = [
    "EmitterSettings",
    "build_scheduler",
    "build_settings_from_dict",
]
