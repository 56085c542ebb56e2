"""
Tag canonicalization and display formatting.

Tags are compared in their normalized form (trimmed, lowercased). Display
formatting is a presentation concern and never feeds back into comparison.
"""

from __future__ import annotations

from typing import Iterable, Protocol, Sequence

RESTRICTED_TAG = "nsfw"


class Tagged(Protocol):
    tags: Sequence[str]


def normalize_tag(raw: str) -> str:
    """
    Canonical form of a tag: surrounding whitespace removed, lowercased.

    Total: an empty or blank input maps to ``""``; callers reject empties.
    """
    return raw.strip().lower()


def format_tag_for_display(tag: str) -> str:
    """
    Display label for a tag.

    Examples:
        "nsfw"  → "NSFW"
        "DOOR"  → "Door"
        "glass break" → "Glass break"
    """
    if normalize_tag(tag) == RESTRICTED_TAG:
        return RESTRICTED_TAG.upper()
    if not tag:
        return tag
    return tag[0].upper() + tag[1:].lower()


def capitalize_words(text: str) -> str:
    """Capitalize every space-separated word; used for titles and equipment, not tags."""
    return " ".join(
        word[:1].upper() + word[1:].lower() for word in text.split(" ")
    )


def extract_content_tags(items: Iterable[Tagged]) -> list[str]:
    """Union of all normalized tags observed on ``items``, sorted."""
    found: set[str] = set()
    for item in items:
        for tag in item.tags:
            normalized = normalize_tag(tag)
            if normalized:
                found.add(normalized)
    return sorted(found)
