from __future__ import annotations

from typing import Iterable, Sequence, TypeVar

from .tags import RESTRICTED_TAG, Tagged, normalize_tag

T = TypeVar("T", bound=Tagged)


def is_restricted(tags: Iterable[str]) -> bool:
    return any(normalize_tag(tag) == RESTRICTED_TAG for tag in tags)


def contains_restricted(items: Iterable[Tagged]) -> bool:
    return any(is_restricted(item.tags) for item in items)


def filter_restricted(items: Sequence[T], allowed: bool) -> list[T]:
    """Drop restricted items unless ``allowed``; order of the rest is kept."""
    if allowed:
        return list(items)
    return [item for item in items if not is_restricted(item.tags)]
