from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ..core.tags import capitalize_words, format_tag_for_display
from ..models import Sound


@dataclass(frozen=True, slots=True)
class CheckLine:
    label: str
    status: str
    detail: Optional[str] = None

    def render(self) -> str:
        if self.detail:
            return f"{self.label}: {self.status} ({self.detail})"
        return f"{self.label}: {self.status}"


def ok(label: str, detail: Optional[str] = None) -> str:
    return CheckLine(label, "OK", detail).render()


def warning(label: str, detail: Optional[str] = None) -> str:
    return CheckLine(label, "WARNING", detail).render()


def error(label: str, detail: Optional[str] = None) -> str:
    return CheckLine(label, "ERROR", detail).render()


def sound_lines(sound: Sound) -> list[str]:
    lines = [f"{sound.title}  [{sound.id}]"]
    if sound.tags:
        lines.append("  Tags: " + ", ".join(format_tag_for_display(tag) for tag in sound.tags))
    if sound.equipment:
        items = [capitalize_words(item.strip()) for item in sound.equipment.split(",")]
        lines.append("  Equipment: " + ", ".join(items))
    if sound.format:
        lines.append(f"  Audio Format: {capitalize_words(sound.format)}")
    lines.append(f"  {sound.audio_url}")
    return lines


def results_lines(heading: str, sounds: Sequence[Sound]) -> list[str]:
    suffix = "" if len(sounds) == 1 else "s"
    lines = [heading, f"Found {len(sounds)} sound{suffix}", ""]
    if not sounds:
        lines.append("No results found")
        return lines
    for sound in sounds:
        lines.extend(sound_lines(sound))
    return lines
