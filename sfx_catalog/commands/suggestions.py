from __future__ import annotations

from ..app import CatalogApp
from ..prompt_io import PromptIO


def run_list(app: CatalogApp, io: PromptIO) -> None:
    suggestions = app.store.list_suggestions()
    unread = sum(1 for s in suggestions if not s.is_read)
    io.print(f"{len(suggestions)} suggestion(s), {unread} unread")
    for suggestion in suggestions:
        marker = " " if suggestion.is_read else "*"
        category = f" ({suggestion.category})" if suggestion.category else ""
        io.print(f"{marker} {suggestion.sound_name}{category}  [{suggestion.id}]")
        if suggestion.description:
            io.print(f"    {suggestion.description}")


def run_add(app: CatalogApp, io: PromptIO, sound_name: str, category: str, description: str) -> None:
    suggestion = app.store.create_suggestion(sound_name, category, description)
    io.print(f"Thank you for your suggestion! [{suggestion.id}]")


def run_mark_read(app: CatalogApp, io: PromptIO, suggestion_id: str, read: bool = True) -> None:
    app.store.mark_suggestion_read(suggestion_id, read)
    io.print(f"Marked {suggestion_id} as {'read' if read else 'unread'}")


def run_remove(app: CatalogApp, io: PromptIO, suggestion_id: str) -> None:
    app.store.delete_suggestion(suggestion_id)
    io.print(f"Deleted suggestion {suggestion_id}")
