from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .core.tags import normalize_tag

AFFIRMATION_KEY = "sfx_library_age_verified"


@dataclass(slots=True)
class Sound:
    id: str
    title: str
    audio_url: str
    tags: List[str] = field(default_factory=list)
    equipment: Optional[str] = None
    format: Optional[str] = None
    created_at: int = 0

    def __post_init__(self) -> None:
        normalized = [normalize_tag(tag) for tag in self.tags]
        self.tags = [tag for tag in normalized if tag]
        if self.equipment is not None and not self.equipment.strip():
            self.equipment = None
        if self.format is not None and not self.format.strip():
            self.format = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Sound":
        tags = record.get("tags")
        return cls(
            id=str(record.get("id") or ""),
            title=str(record.get("title") or ""),
            audio_url=str(record.get("audioUrl") or ""),
            tags=[str(tag) for tag in tags] if isinstance(tags, list) else [],
            equipment=_optional_str(record.get("equipment")),
            format=_optional_str(record.get("format")),
            created_at=_parse_int(record.get("createdAt")) or 0,
        )

    def to_record(self) -> Dict[str, object]:
        payload: Dict[str, object] = {
            "id": self.id,
            "title": self.title,
            "audioUrl": self.audio_url,
            "tags": list(self.tags),
            "createdAt": self.created_at,
        }
        if self.equipment is not None:
            payload["equipment"] = self.equipment
        if self.format is not None:
            payload["format"] = self.format
        return payload


@dataclass(slots=True)
class Suggestion:
    id: str
    sound_name: str
    category: str = ""
    description: str = ""
    submitted_at: str = ""
    is_read: bool = False

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Suggestion":
        return cls(
            id=str(record.get("id") or ""),
            sound_name=str(record.get("soundName") or ""),
            category=str(record.get("category") or ""),
            description=str(record.get("description") or ""),
            submitted_at=str(record.get("submittedAt") or ""),
            is_read=bool(record.get("isRead", False)),
        )

    def to_record(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "soundName": self.sound_name,
            "category": self.category,
            "description": self.description,
            "submittedAt": self.submitted_at,
            "isRead": self.is_read,
        }

    def submitted_datetime(self) -> Optional[datetime]:
        if not self.submitted_at:
            return None
        try:
            value = datetime.fromisoformat(self.submitted_at.replace("Z", "+00:00"))
        except ValueError:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


@dataclass(frozen=True, slots=True)
class AffirmationRecord:
    """Most recent age affirmation; ``timestamp`` is epoch milliseconds."""

    verified: bool
    timestamp: int

    @classmethod
    def issued(cls, now: datetime) -> "AffirmationRecord":
        return cls(verified=True, timestamp=to_millis(now))

    @classmethod
    def from_record(cls, record: Any) -> Optional["AffirmationRecord"]:
        if not isinstance(record, dict):
            return None
        verified = record.get("verified")
        timestamp = record.get("timestamp")
        if not isinstance(verified, bool):
            return None
        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
            return None
        return cls(verified=verified, timestamp=int(timestamp))

    def to_record(self) -> Dict[str, object]:
        return {"verified": self.verified, "timestamp": self.timestamp}

    @property
    def issued_at(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp / 1000, tz=timezone.utc)


class CatalogError(Exception):
    """Base class for value-level failures reported to the immediate caller."""


class ValidationError(CatalogError):
    """Raised for empty or otherwise invalid input."""


class DuplicateError(CatalogError):
    """Raised when a tag is already part of the curated catalog."""


class NotFoundError(CatalogError):
    """Raised by the record store when an id does not resolve to a record."""


class StoreError(CatalogError):
    """Raised when the record store cannot be read or is malformed."""


def to_millis(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)


def _optional_str(value: object) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_int(value: object) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        cleaned = value.strip()
        if cleaned.isdigit():
            return int(cleaned)
    return None
