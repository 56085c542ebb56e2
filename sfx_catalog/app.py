from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .config import Settings
from .core.catalog import CuratedTagCatalog, list_available
from .core.tags import extract_content_tags
from .session import DiscoverySession
from .state import ClientState
from .store import JsonRecordStore

logger = logging.getLogger(__name__)


@dataclass
class CatalogApp:
    settings: Settings
    store: JsonRecordStore
    state: ClientState
    _session: DiscoverySession | None = None

    @classmethod
    def create(cls, settings: Settings) -> "CatalogApp":
        store = JsonRecordStore(settings.store.path)
        state = ClientState(settings.state.path)
        return cls(settings=settings, store=store, state=state)

    def get_session(self, *, clock: Optional[Callable] = None) -> DiscoverySession:
        if self._session is None:
            kwargs = {"clock": clock} if clock is not None else {}
            self._session = DiscoverySession(
                self.store.list_sounds(),
                self.store.get_curated_tags(),
                self.state,
                validity=self.settings.gate.validity,
                **kwargs,
            )
        return self._session

    def curated_catalog(self) -> CuratedTagCatalog:
        return CuratedTagCatalog(self.store.get_curated_tags())

    def content_tags(self) -> list[str]:
        return extract_content_tags(self.store.list_sounds())

    def available_tags(self) -> list[str]:
        return list_available(self.content_tags(), self.store.get_curated_tags())

    def add_curated_tag(self, tag: str) -> list[str]:
        updated = self.curated_catalog().add(tag)
        self.store.set_curated_tags(updated)
        self._refresh_session()
        return updated

    def remove_curated_tag(self, tag: str) -> list[str]:
        updated = self.curated_catalog().remove(tag)
        self.store.set_curated_tags(updated)
        self._refresh_session()
        return updated

    def _refresh_session(self) -> None:
        if self._session is not None:
            self._session.reload(self.store.list_sounds(), self.store.get_curated_tags())

    def close(self) -> None:
        self.state.close()
