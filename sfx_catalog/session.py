from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Sequence

from .core import gate
from .core.catalog import CuratedTagCatalog
from .core.gate import GateContext, GateOutcome, GateState, PendingAction
from .core.tags import normalize_tag
from .models import Sound, ValidationError
from .state import ClientState

logger = logging.getLogger(__name__)

ALL_SOUNDS_TAG = "all sounds"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DiscoverySession:
    """
    One user's browse session over a snapshot of the library.

    Owns the gate context and is the only writer of the affirmation record
    in client-local state. Sounds and curated tags are snapshots supplied by
    the caller; ``reload`` swaps them in.
    """

    def __init__(
        self,
        sounds: Sequence[Sound],
        curated_tags: Sequence[str],
        state: ClientState,
        *,
        validity: timedelta = gate.AFFIRMATION_VALIDITY,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._sounds = list(sounds)
        self._curated = CuratedTagCatalog(curated_tags)
        self._state = state
        self._clock = clock
        self.context = GateContext(affirmation=state.get_affirmation(), validity=validity)
        self._sync_affirmation(self.context, gate.refresh_affirmation(self.context, clock()))

    @property
    def sounds(self) -> list[Sound]:
        return list(self._sounds)

    @property
    def state(self) -> GateState:
        return self.context.state

    @property
    def pending(self) -> Optional[PendingAction]:
        return self.context.pending

    def reload(self, sounds: Sequence[Sound], curated_tags: Sequence[str]) -> None:
        self._sounds = list(sounds)
        self._curated = CuratedTagCatalog(curated_tags)

    def is_verified(self) -> bool:
        now = self._clock()
        self._sync_affirmation(self.context, gate.refresh_affirmation(self.context, now))
        return self.context.is_verified(now)

    def browse_tags(self) -> list[str]:
        return [ALL_SOUNDS_TAG, *self._curated.list_curated()]

    def search(self, query: str) -> GateOutcome:
        if not query.strip():
            raise ValidationError("Search query cannot be empty")
        return self._request(PendingAction.query(query.strip()))

    def click_tag(self, tag: str) -> GateOutcome:
        normalized = normalize_tag(tag)
        if normalized == ALL_SOUNDS_TAG:
            return self.view_all()
        if not normalized:
            raise ValidationError("Tag cannot be empty")
        return self._request(PendingAction.tag(normalized))

    def view_all(self) -> GateOutcome:
        return self._request(PendingAction.view_all())

    def affirm(self) -> GateOutcome:
        outcome = gate.affirm(self.context, self._sounds, self._clock())
        self._apply(outcome)
        logger.debug(
            "Affirmed; resuming %s",
            outcome.action.describe() if outcome.action else "nothing",
        )
        return outcome

    def decline(self) -> GateOutcome:
        outcome = gate.decline(self.context, self._sounds)
        self._apply(outcome)
        logger.debug(
            "Declined; %s",
            f"showing filtered {outcome.action.describe()}" if outcome.results is not None else "no results",
        )
        return outcome

    def dismiss(self) -> GateOutcome:
        outcome = gate.dismiss(self.context, self._sounds)
        self._apply(outcome)
        logger.debug("Gate dismissed")
        return outcome

    def reset_affirmation(self) -> None:
        self.context = GateContext(pending=self.context.pending, validity=self.context.validity)
        self._state.clear_affirmation()
        logger.info("Age affirmation cleared")

    def _request(self, action: PendingAction) -> GateOutcome:
        outcome = gate.request(self.context, action, self._sounds, self._clock())
        self._apply(outcome)
        if outcome.replaced is not None:
            logger.debug("Pending %s replaced by %s", outcome.replaced.describe(), action.describe())
        if outcome.awaiting_affirmation:
            logger.debug("Gated %s pending age affirmation", action.describe())
        return outcome

    def _apply(self, outcome: GateOutcome) -> None:
        previous = self.context
        self.context = outcome.context
        self._sync_affirmation(previous, outcome.context)

    def _sync_affirmation(self, before: GateContext, after: GateContext) -> None:
        if before.affirmation == after.affirmation:
            self.context = after
            return
        self.context = after
        if after.affirmation is None:
            logger.info("Age affirmation no longer valid; clearing stored record")
            self._state.clear_affirmation()
        else:
            self._state.set_affirmation(after.affirmation)
