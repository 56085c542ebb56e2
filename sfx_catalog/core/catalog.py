"""
Curated tag catalog.

Administrators pick which tags appear in the browse-by-tag list. The curated
set is stored independently of the tags observed on sounds: a curated tag may
have no sounds, and most content tags are never curated. ``list_available``
is the set difference between the two and is always recomputed, never cached.
"""

from __future__ import annotations

from typing import Iterable

from ..models import DuplicateError, ValidationError
from .tags import normalize_tag


def _canonical_set(tags: Iterable[str]) -> tuple[str, ...]:
    seen: set[str] = set()
    for tag in tags:
        normalized = normalize_tag(tag)
        if normalized:
            seen.add(normalized)
    return tuple(sorted(seen))


def list_available(content_tags: Iterable[str], curated: Iterable[str]) -> list[str]:
    """Content tags that are not curated yet, sorted."""
    taken = set(_canonical_set(curated))
    return [tag for tag in _canonical_set(content_tags) if tag not in taken]


class CuratedTagCatalog:
    """
    Administrator-maintained, duplicate-free, sorted set of browse tags.

    Entries are kept normalized, so the case-insensitive uniqueness rule
    reduces to plain set membership. Mutations swap in a new tuple and return
    the resulting sorted list for the caller to persist.
    """

    def __init__(self, tags: Iterable[str] = ()) -> None:
        self._tags = _canonical_set(tags)

    def __len__(self) -> int:
        return len(self._tags)

    def __contains__(self, tag: object) -> bool:
        return isinstance(tag, str) and self.contains(tag)

    def contains(self, tag: str) -> bool:
        return normalize_tag(tag) in self._tags

    def list_curated(self) -> list[str]:
        return list(self._tags)

    def add(self, tag: str) -> list[str]:
        normalized = normalize_tag(tag)
        if not normalized:
            raise ValidationError("Tag cannot be empty")
        if normalized in self._tags:
            raise DuplicateError(f"Tag already exists: {normalized}")
        self._tags = tuple(sorted((*self._tags, normalized)))
        return self.list_curated()

    def remove(self, tag: str) -> list[str]:
        normalized = normalize_tag(tag)
        self._tags = tuple(t for t in self._tags if t != normalized)
        return self.list_curated()

    def available(self, content_tags: Iterable[str]) -> list[str]:
        return list_available(content_tags, self._tags)
