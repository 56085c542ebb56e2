from __future__ import annotations

import fnmatch
from collections.abc import Iterator
from pathlib import Path

from .config import ImporterSettings


class LibraryScanner:
    """Walks the import roots and yields audio files eligible for the catalog."""

    def __init__(self, settings: ImporterSettings) -> None:
        self.settings = settings
        self._exts = {ext.lower() for ext in self.settings.include_extensions}

    def iter_files(self, roots: list[Path] | None = None) -> Iterator[Path]:
        for root in roots if roots is not None else self.settings.roots:
            if not root.exists():
                continue
            if root.is_file():
                if self._should_include(root):
                    yield root
                continue
            for file_path in sorted(root.rglob("*")):
                if not file_path.is_file():
                    continue
                if not self._should_include(file_path):
                    continue
                yield file_path

    def _should_include(self, path: Path) -> bool:
        if path.suffix.lower() not in self._exts:
            return False
        rel = str(path)
        for pattern in self.settings.exclude_patterns:
            if fnmatch.fnmatch(rel, pattern):
                return False
        return True
