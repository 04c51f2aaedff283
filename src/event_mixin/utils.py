"""Small list helpers shared by the registry."""

from __future__ import annotations

from typing import Callable, Iterable, List, Optional, TypeVar

T = TypeVar("T")


def find(items: Iterable[T] | None, predicate: Callable[[T], bool]) -> Optional[T]:
    """Return the first element of ``items`` satisfying ``predicate``, or ``None``."""

    for item in items or ():
        if predicate(item):
            return item
    return None


def reject(items: Iterable[T] | None, predicate: Callable[[T], bool]) -> List[T]:
    """Return a new list of the elements of ``items`` not satisfying ``predicate``."""

    return [item for item in items or () if not predicate(item)]
