"""
Relevance search over a snapshot of sounds.

Matching is plain term containment:
- a query term found inside the lowercased title, or
- a query term found inside a normalized tag, or a tag found inside the term

The tag check runs both ways so that "doors" finds a sound tagged "door" and
"door" finds one tagged "doorbell". Short tags can over-match long terms;
that trade-off is accepted.

Ranking has three tiers and is stable within each tier:
0. some term equals the whole lowercased title
1. some term is contained in the title
2. everything else that matched (tag-only matches)

All functions are pure.
"""

from __future__ import annotations

from typing import Protocol, Sequence, TypeVar

from .tags import normalize_tag

EXACT_TITLE = 0
TITLE_MATCH = 1
TAG_MATCH = 2


class Searchable(Protocol):
    title: str
    tags: Sequence[str]


S = TypeVar("S", bound=Searchable)


def tokenize_query(query: str) -> list[str]:
    """Split a query into lowercase terms on runs of whitespace."""
    return [term for term in query.strip().lower().split() if term]


def matches_query(item: Searchable, terms: Sequence[str]) -> bool:
    title = item.title.lower()
    tags = [tag for tag in (normalize_tag(t) for t in item.tags) if tag]
    for term in terms:
        if term in title:
            return True
        for tag in tags:
            if term in tag or tag in term:
                return True
    return False


def relevance_tier(item: Searchable, terms: Sequence[str]) -> int:
    title = item.title.lower()
    if any(term == title for term in terms):
        return EXACT_TITLE
    if any(term in title for term in terms):
        return TITLE_MATCH
    return TAG_MATCH


def search_sounds(items: Sequence[S], query: str) -> list[S]:
    """
    Filter and rank ``items`` against ``query``.

    A blank query is the identity: every item comes back in input order.

    Args:
        items: Snapshot of sounds, in the caller's order
        query: Free text; terms are OR-ed together

    Returns:
        Matching items, exact-title hits first, then title hits, then the rest
    """
    terms = tokenize_query(query)
    if not terms:
        return list(items)
    matched = [item for item in items if matches_query(item, terms)]
    # sorted() is stable, so ties keep their input order
    return sorted(matched, key=lambda item: relevance_tier(item, terms))
