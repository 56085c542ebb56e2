from __future__ import annotations

import json
import logging
import os
import secrets
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from threading import Lock
from typing import Any, Callable, Iterable, Optional, Protocol

from .core.tags import normalize_tag
from .models import NotFoundError, Sound, StoreError, Suggestion, ValidationError, to_millis

logger = logging.getLogger(__name__)

SOUNDS_PREFIX = "sound:"
SUGGESTIONS_PREFIX = "suggestion:"
TAGS_KEY = "sfx:tags"

SOUND_FIELDS = {"title", "audio_url", "tags", "equipment", "format"}


class RecordStore(Protocol):
    def list_sounds(self) -> list[Sound]: ...

    def get_curated_tags(self) -> list[str]: ...

    def set_curated_tags(self, tags: Iterable[str]) -> None: ...


@dataclass
class ImportReport:
    imported: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JsonRecordStore:
    """Key-value record store persisted as a single JSON document."""

    def __init__(self, path: Path, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._clock = clock
        self._lock = Lock()
        self._data: dict[str, Any] = self._read()

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Could not read record store %s: %s", self.path, exc)
            raise StoreError(f"Unreadable record store: {self.path}") from exc
        if not isinstance(raw, dict):
            raise StoreError(f"Record store must hold a JSON object: {self.path}")
        return raw

    def _flush(self, data: dict[str, Any]) -> None:
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
        os.replace(tmp, self.path)

    def _commit(self, updates: dict[str, Any], removals: Iterable[str] = ()) -> None:
        """Write a new snapshot to disk, then swap it in. Caller holds the lock."""
        data = dict(self._data)
        data.update(updates)
        for key in removals:
            data.pop(key, None)
        self._flush(data)
        self._data = data

    def _values(self, prefix: str) -> list[dict[str, Any]]:
        return [
            value
            for key, value in self._data.items()
            if key.startswith(prefix) and isinstance(value, dict)
        ]

    # Sounds

    def list_sounds(self) -> list[Sound]:
        with self._lock:
            records = self._values(SOUNDS_PREFIX)
        sounds = [Sound.from_record(record) for record in records]
        return sorted(sounds, key=lambda sound: sound.created_at, reverse=True)

    def get_sound(self, sound_id: str) -> Sound:
        with self._lock:
            record = self._data.get(f"{SOUNDS_PREFIX}{sound_id}")
        if not isinstance(record, dict):
            raise NotFoundError(f"Sound not found: {sound_id}")
        return Sound.from_record(record)

    def create_sound(
        self,
        title: str,
        audio_url: str,
        tags: Optional[Iterable[str]] = None,
        equipment: Optional[str] = None,
        format: Optional[str] = None,
    ) -> Sound:
        if not title or not title.strip() or not audio_url or not audio_url.strip():
            raise ValidationError("Missing required fields (title and audioUrl)")
        sound = Sound(
            id=str(uuid.uuid4()),
            title=title.strip(),
            audio_url=audio_url.strip(),
            tags=list(tags or []),
            equipment=equipment,
            format=format,
            created_at=to_millis(self._clock()),
        )
        with self._lock:
            self._commit({f"{SOUNDS_PREFIX}{sound.id}": sound.to_record()})
        logger.info("Created sound %s (%s)", sound.id, sound.title)
        return sound

    def update_sound(self, sound_id: str, **changes: Any) -> Sound:
        unknown = set(changes) - SOUND_FIELDS
        if unknown:
            raise ValidationError(f"Unknown sound fields: {', '.join(sorted(unknown))}")
        for name in ("title", "audio_url"):
            if name in changes:
                value = changes[name]
                if not isinstance(value, str) or not value.strip():
                    raise ValidationError("Title and audio URL cannot be empty")
        for name in ("equipment", "format"):
            if changes.get(name) is not None and not isinstance(changes[name], str):
                raise ValidationError(f"{name} must be a string")
        if "tags" in changes:
            tags = changes["tags"]
            # a bare string would otherwise become one tag per character
            if not isinstance(tags, (list, tuple, set, frozenset)):
                raise ValidationError("Tags must be a list of strings")
            changes["tags"] = [str(tag) for tag in tags]
        existing = self.get_sound(sound_id)
        # rebuilt through the constructor so tags are normalized again
        updated = Sound(
            id=existing.id,
            title=changes.get("title", existing.title).strip(),
            audio_url=changes.get("audio_url", existing.audio_url).strip(),
            tags=changes.get("tags", existing.tags),
            equipment=changes.get("equipment", existing.equipment),
            format=changes.get("format", existing.format),
            created_at=existing.created_at,
        )
        with self._lock:
            self._commit({f"{SOUNDS_PREFIX}{sound_id}": updated.to_record()})
        logger.info("Updated sound %s", sound_id)
        return updated

    def delete_sound(self, sound_id: str) -> None:
        key = f"{SOUNDS_PREFIX}{sound_id}"
        with self._lock:
            if key not in self._data:
                raise NotFoundError(f"Sound not found: {sound_id}")
            self._commit({}, removals=(key,))
        logger.info("Deleted sound %s", sound_id)

    def import_records(self, records: Any) -> ImportReport:
        """Create sounds from loosely-shaped records; failures are counted, not raised."""
        if not isinstance(records, list):
            raise ValidationError("Data must be an array of sounds")
        report = ImportReport()
        for index, record in enumerate(records):
            if not isinstance(record, dict):
                report.failed += 1
                report.errors.append(f"#{index}: not an object")
                continue
            tags = record.get("tags")
            try:
                self.create_sound(
                    title=str(record.get("title") or "Untitled"),
                    audio_url=str(record.get("audioUrl") or record.get("url") or ""),
                    tags=[str(tag) for tag in tags] if isinstance(tags, list) else [],
                    equipment=record.get("equipment"),
                    format=record.get("format"),
                )
            except ValidationError as exc:
                report.failed += 1
                report.errors.append(f"#{index}: {exc}")
                continue
            report.imported += 1
        return report

    # Suggestions

    def list_suggestions(self) -> list[Suggestion]:
        with self._lock:
            records = self._values(SUGGESTIONS_PREFIX)
        suggestions = [Suggestion.from_record(record) for record in records]
        epoch = datetime.min.replace(tzinfo=timezone.utc)
        suggestions.sort(key=lambda s: s.submitted_datetime() or epoch, reverse=True)
        # stable: unread stay newest-first within their group
        suggestions.sort(key=lambda s: s.is_read)
        return suggestions

    def create_suggestion(
        self, sound_name: str, category: str = "", description: str = ""
    ) -> Suggestion:
        if not sound_name or not sound_name.strip():
            raise ValidationError("Missing required field (soundName)")
        now = self._clock()
        suggestion = Suggestion(
            id=f"suggestion-{to_millis(now)}-{secrets.token_hex(3)}",
            sound_name=sound_name.strip(),
            category=(category or "").strip(),
            description=(description or "").strip(),
            submitted_at=now.isoformat(),
            is_read=False,
        )
        with self._lock:
            self._commit({f"{SUGGESTIONS_PREFIX}{suggestion.id}": suggestion.to_record()})
        logger.info("Created suggestion %s", suggestion.id)
        return suggestion

    def mark_suggestion_read(self, suggestion_id: str, read: bool = True) -> Suggestion:
        key = f"{SUGGESTIONS_PREFIX}{suggestion_id}"
        with self._lock:
            record = self._data.get(key)
            if not isinstance(record, dict):
                raise NotFoundError(f"Suggestion not found: {suggestion_id}")
            suggestion = Suggestion.from_record(record)
            suggestion.is_read = read
            self._commit({key: suggestion.to_record()})
        return suggestion

    def delete_suggestion(self, suggestion_id: str) -> None:
        key = f"{SUGGESTIONS_PREFIX}{suggestion_id}"
        with self._lock:
            if key not in self._data:
                raise NotFoundError(f"Suggestion not found: {suggestion_id}")
            self._commit({}, removals=(key,))
        logger.info("Deleted suggestion %s", suggestion_id)

    # Curated tags

    def get_curated_tags(self) -> list[str]:
        with self._lock:
            record = self._data.get(TAGS_KEY)
        if not isinstance(record, dict):
            return []
        tags = record.get("tags")
        if not isinstance(tags, list):
            return []
        return [str(tag) for tag in tags]

    def set_curated_tags(self, tags: Iterable[str]) -> None:
        cleaned = [normalize_tag(tag) for tag in tags]
        record = {
            "tags": [tag for tag in cleaned if tag],
            "updatedAt": self._clock().isoformat(),
        }
        with self._lock:
            self._commit({TAGS_KEY: record})
        logger.info("Updated curated tags (%d)", len(record["tags"]))
