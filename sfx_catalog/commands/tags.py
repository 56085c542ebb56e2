from __future__ import annotations

from ..app import CatalogApp
from ..core.tags import format_tag_for_display
from ..prompt_io import PromptIO


def _print_tags(io: PromptIO, title: str, tags: list[str]) -> None:
    io.print(f"{title} ({len(tags)})")
    for tag in tags:
        io.print(f"  {format_tag_for_display(tag)}")


def run_list(app: CatalogApp, io: PromptIO) -> None:
    _print_tags(io, "Current tags", app.curated_catalog().list_curated())


def run_available(app: CatalogApp, io: PromptIO) -> None:
    _print_tags(io, "All tags from library", app.available_tags())


def run_add(app: CatalogApp, io: PromptIO, tag: str) -> None:
    updated = app.add_curated_tag(tag)
    io.print(f'Added "{format_tag_for_display(tag.strip())}" to current tags')
    _print_tags(io, "Current tags", updated)


def run_remove(app: CatalogApp, io: PromptIO, tag: str) -> None:
    updated = app.remove_curated_tag(tag)
    io.print(f'Removed "{format_tag_for_display(tag.strip())}" from current tags')
    _print_tags(io, "Current tags", updated)
