from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional

from mutagen import File as MutagenFile

from .config import ImporterSettings
from .core.tags import capitalize_words
from .scanner import LibraryScanner
from .store import ImportReport, JsonRecordStore
from .models import ValidationError

logger = logging.getLogger(__name__)

TAG_SPLIT = re.compile(r"[,;/]")


@dataclass(slots=True)
class SoundDraft:
    path: Path
    title: str
    tags: List[str] = field(default_factory=list)
    format: Optional[str] = None


def read_draft(path: Path) -> SoundDraft:
    """Build a catalog draft from the embedded tags and stream info of ``path``."""
    try:
        audio = MutagenFile(path, easy=True)
    except Exception as exc:  # pragma: no cover - tag parsing failures
        logger.debug("Failed to read tags from %s: %s", path, exc)
        audio = None
    title = _first_tag(audio, ["title"]) or title_from_filename(path)
    raw_tags: list[str] = []
    for key in ("genre", "comment", "description"):
        for value in _all_tags(audio, key):
            raw_tags.extend(part for part in TAG_SPLIT.split(value) if part.strip())
    return SoundDraft(
        path=path,
        title=title.strip(),
        tags=raw_tags,
        format=describe_format(path, getattr(audio, "info", None)),
    )


def title_from_filename(path: Path) -> str:
    stem = re.sub(r"[_\-]+", " ", path.stem)
    return capitalize_words(re.sub(r"\s+", " ", stem).strip())


def describe_format(path: Path, info: Any) -> Optional[str]:
    """
    Short format label, e.g. "WAV 48kHz 24-bit" or "MP3 44.1kHz".

    Falls back to the bare container name when stream info is unavailable.
    """
    container = path.suffix.lstrip(".").upper()
    if not container:
        return None
    parts = [container]
    sample_rate = getattr(info, "sample_rate", None)
    if sample_rate:
        khz = sample_rate / 1000
        parts.append(f"{khz:g}kHz")
    bits = getattr(info, "bits_per_sample", None)
    if bits:
        parts.append(f"{bits}-bit")
    return " ".join(parts)


def import_folder(
    store: JsonRecordStore,
    settings: ImporterSettings,
    roots: Optional[List[Path]] = None,
) -> ImportReport:
    scanner = LibraryScanner(settings)
    report = ImportReport()
    for path in scanner.iter_files(roots):
        draft = read_draft(path)
        try:
            store.create_sound(
                title=draft.title,
                audio_url=audio_url_for(path, settings),
                tags=draft.tags,
                format=draft.format,
            )
        except ValidationError as exc:
            report.failed += 1
            report.errors.append(f"{path}: {exc}")
            logger.warning("Skipping %s: %s", path, exc)
            continue
        report.imported += 1
    logger.info("Folder import finished: %d imported, %d failed", report.imported, report.failed)
    return report


def audio_url_for(path: Path, settings: ImporterSettings) -> str:
    if not settings.url_prefix:
        return path.resolve().as_uri()
    for root in settings.roots:
        try:
            rel = path.resolve().relative_to(root)
        except ValueError:
            continue
        return f"{settings.url_prefix.rstrip('/')}/{rel.as_posix()}"
    return f"{settings.url_prefix.rstrip('/')}/{path.name}"


def _first_tag(audio: Any, keys: List[str]) -> Optional[str]:
    for key in keys:
        values = _all_tags(audio, key)
        if values:
            return values[0]
    return None


def _all_tags(audio: Any, key: str) -> List[str]:
    if not audio or not getattr(audio, "tags", None):
        return []
    try:
        values = audio.tags.get(key)
    except (KeyError, ValueError):
        return []
    if not values:
        return []
    if isinstance(values, list):
        return [str(value) for value in values if value]
    return [str(values)]
