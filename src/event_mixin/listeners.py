"""Listener records stored in an emitter's registry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable


class _Unset:
    """Marker type for a context that was never supplied."""

    _instance: "_Unset | None" = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()

_PRIMITIVES = (str, bytes, int, float, bool, type(None))


def same_context(left: object, right: object) -> bool:
    """Compare two contexts by identity, or by value for primitive values."""

    if left is right:
        return True
    if isinstance(left, _PRIMITIVES) and isinstance(right, _PRIMITIVES):
        return type(left) is type(right) and left == right
    return False


@dataclass(slots=True, eq=False)
class ListenerRecord:
    """A single subscription: who to call, on behalf of what, and how."""

    listener: Callable[..., Any]
    context: object = UNSET
    callback: Callable[..., Any] | None = None

    def __post_init__(self) -> None:
        if self.callback is None:
            self.callback = self.listener

    @property
    def is_once(self) -> bool:
        return self.callback is not self.listener

    def matches(self, listener: Callable[..., Any], context: object = UNSET) -> bool:
        """Exact identity match on both ``listener`` and ``context``."""

        return self.listener == listener and same_context(self.context, context)

    def invoke(self, args: tuple, kwargs: dict) -> Any:
        if self.context is UNSET:
            return self.callback(*args, **kwargs)
        return self.callback(self.context, *args, **kwargs)


__all__ = ["ListenerRecord", "UNSET", "same_context"]
