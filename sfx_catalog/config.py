from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator


class StoreSettings(BaseModel):
    path: Path = Path("./data/records.json")

    @field_validator("path", mode="before")
    @classmethod
    def _expand_path(cls, value: str | Path) -> Path:
        return Path(value).expanduser().resolve()


class StateSettings(BaseModel):
    path: Path = Path("./data/client-state.sqlite3")

    @field_validator("path", mode="before")
    @classmethod
    def _expand_path(cls, value: str | Path) -> Path:
        return Path(value).expanduser().resolve()


class GateSettings(BaseModel):
    affirmation_validity_days: int = Field(default=30, ge=0)

    @property
    def validity(self) -> timedelta:
        return timedelta(days=self.affirmation_validity_days)


class ImporterSettings(BaseModel):
    roots: List[Path] = Field(default_factory=list)
    include_extensions: List[str] = Field(
        default_factory=lambda: [".wav", ".mp3", ".flac", ".ogg", ".aiff", ".m4a"]
    )
    exclude_patterns: List[str] = Field(default_factory=list)
    url_prefix: Optional[str] = None

    @field_validator("roots", mode="before")
    @classmethod
    def _expand_roots(cls, values: List[str]) -> List[Path]:
        return [Path(v).expanduser().resolve() for v in values or []]


class AdminSettings(BaseModel):
    password: Optional[str] = None


class Settings(BaseModel):
    store: StoreSettings = StoreSettings()
    state: StateSettings = StateSettings()
    gate: GateSettings = GateSettings()
    importer: ImporterSettings = ImporterSettings()
    admin: AdminSettings = AdminSettings()

    @classmethod
    def load(cls, path: Path) -> "Settings":
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
        return cls.model_validate(raw or {})


def find_config(explicit_path: Optional[Path]) -> Path:
    if explicit_path:
        return explicit_path
    cwd = Path.cwd()
    for candidate in (cwd / "config.yaml", cwd / "config.yml"):
        if candidate.exists():
            return candidate
    raise FileNotFoundError("Could not find config.yaml – pass --config explicitly.")
