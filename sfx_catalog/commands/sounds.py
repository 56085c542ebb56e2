from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from ..app import CatalogApp
from ..importer import import_folder
from ..models import ValidationError
from ..prompt_io import PromptIO
from ..store import ImportReport
from .output import sound_lines


def run_list(app: CatalogApp, io: PromptIO) -> None:
    sounds = app.store.list_sounds()
    io.print(f"{len(sounds)} sound(s) in library")
    for sound in sounds:
        for line in sound_lines(sound):
            io.print(line)


def run_add(
    app: CatalogApp,
    io: PromptIO,
    *,
    title: str,
    audio_url: str,
    tags: str = "",
    equipment: Optional[str] = None,
    format: Optional[str] = None,
) -> None:
    sound = app.store.create_sound(
        title=title,
        audio_url=audio_url,
        tags=tags.split(","),
        equipment=equipment,
        format=format,
    )
    io.print(f"Added {sound.title} [{sound.id}]")


def run_update(
    app: CatalogApp,
    io: PromptIO,
    sound_id: str,
    *,
    title: Optional[str] = None,
    audio_url: Optional[str] = None,
    tags: Optional[str] = None,
    equipment: Optional[str] = None,
    format: Optional[str] = None,
) -> None:
    changes: dict[str, object] = {}
    if title is not None:
        changes["title"] = title
    if audio_url is not None:
        changes["audio_url"] = audio_url
    if tags is not None:
        changes["tags"] = tags.split(",")
    if equipment is not None:
        changes["equipment"] = equipment
    if format is not None:
        changes["format"] = format
    if not changes:
        raise ValidationError("Nothing to update: pass at least one field option")
    sound = app.store.update_sound(sound_id, **changes)
    io.print(f"Updated sound {sound.id}")
    for line in sound_lines(sound):
        io.print(line)


def run_remove(app: CatalogApp, io: PromptIO, sound_id: str) -> None:
    app.store.delete_sound(sound_id)
    io.print(f"Deleted sound {sound_id}")


def run_import_json(app: CatalogApp, io: PromptIO, path: Path) -> ImportReport:
    try:
        records = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Invalid JSON format in {path}: {exc}") from exc
    report = app.store.import_records(records)
    _print_report(io, report)
    return report


def run_import_folder(app: CatalogApp, io: PromptIO, roots: list[Path]) -> ImportReport:
    report = import_folder(app.store, app.settings.importer, roots or None)
    _print_report(io, report)
    return report


def _print_report(io: PromptIO, report: ImportReport) -> None:
    failed = f" {report.failed} failed." if report.failed else ""
    io.print(f"Imported {report.imported} sound(s).{failed}")
    for line in report.errors:
        io.print(f" - {line}")
