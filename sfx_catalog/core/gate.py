"""
Access gate for maturity-restricted content.

The gate decides whether a browse gesture (free-text query, tag click,
view-all) can show its results right away or has to wait for the user to
affirm their age. All state lives in an immutable ``GateContext`` that is
passed into every transition and returned inside a ``GateOutcome``:

    Idle ──request(restricted, unverified)──▶ AwaitingAffirmation(pending)
    AwaitingAffirmation ──affirm──▶ Idle (pending re-run unfiltered)
    AwaitingAffirmation ──decline/dismiss──▶ Idle (pending re-run filtered,
                                                   view-all dropped)

The context holds exactly one optional pending action, so a second gated
gesture replaces the first instead of queueing behind it.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional, Sequence, TypeVar

from ..models import AffirmationRecord, to_millis
from .maturity import contains_restricted, filter_restricted
from .search import Searchable, search_sounds

AFFIRMATION_VALIDITY = timedelta(days=30)

S = TypeVar("S", bound=Searchable)


class ActionKind(str, Enum):
    QUERY = "query"
    TAG = "tag"
    VIEW_ALL = "view_all"


class GateState(str, Enum):
    IDLE = "idle"
    AWAITING_AFFIRMATION = "awaiting_affirmation"


@dataclass(frozen=True, slots=True)
class PendingAction:
    kind: ActionKind
    value: str = ""

    @classmethod
    def query(cls, text: str) -> "PendingAction":
        return cls(ActionKind.QUERY, text)

    @classmethod
    def tag(cls, tag: str) -> "PendingAction":
        return cls(ActionKind.TAG, tag)

    @classmethod
    def view_all(cls) -> "PendingAction":
        return cls(ActionKind.VIEW_ALL)

    def describe(self) -> str:
        if self.kind is ActionKind.VIEW_ALL:
            return "view all"
        return f"{self.kind.value} {self.value!r}"


@dataclass(frozen=True, slots=True)
class GateContext:
    affirmation: Optional[AffirmationRecord] = None
    pending: Optional[PendingAction] = None
    validity: timedelta = AFFIRMATION_VALIDITY

    @property
    def state(self) -> GateState:
        if self.pending is None:
            return GateState.IDLE
        return GateState.AWAITING_AFFIRMATION

    def is_verified(self, now: datetime) -> bool:
        return is_affirmation_valid(self.affirmation, now, self.validity)


@dataclass(frozen=True, slots=True)
class GateOutcome:
    context: GateContext
    results: Optional[list[Searchable]]
    """Sounds to render, or None when nothing is shown"""

    action: Optional[PendingAction] = None
    """The gesture this outcome answers (or suspends)"""

    replaced: Optional[PendingAction] = None
    """A previously pending gesture discarded by this transition"""

    @property
    def awaiting_affirmation(self) -> bool:
        return self.context.state is GateState.AWAITING_AFFIRMATION


def is_affirmation_valid(
    record: Optional[AffirmationRecord],
    now: datetime,
    validity: timedelta = AFFIRMATION_VALIDITY,
) -> bool:
    if record is None or not record.verified:
        return False
    age_ms = to_millis(now) - record.timestamp
    return age_ms <= validity / timedelta(milliseconds=1)


def refresh_affirmation(context: GateContext, now: datetime) -> GateContext:
    """Drop a stored affirmation that is expired or not verified."""
    if context.affirmation is None:
        return context
    if is_affirmation_valid(context.affirmation, now, context.validity):
        return context
    return replace(context, affirmation=None)


def candidates_for(action: PendingAction, items: Sequence[S]) -> list[S]:
    if action.kind is ActionKind.VIEW_ALL:
        return list(items)
    return search_sounds(items, action.value)


def request(
    context: GateContext,
    action: PendingAction,
    items: Sequence[S],
    now: datetime,
) -> GateOutcome:
    """
    Run a browse gesture through the gate.

    Restricted candidates without a valid affirmation suspend the gesture as
    the (single) pending action. Otherwise the gesture resolves immediately
    and any earlier pending action is superseded.
    """
    context = refresh_affirmation(context, now)
    previous = context.pending
    candidates = candidates_for(action, items)
    verified = context.is_verified(now)
    if contains_restricted(candidates) and not verified:
        return GateOutcome(
            context=replace(context, pending=action),
            results=None,
            action=action,
            replaced=previous,
        )
    return GateOutcome(
        context=replace(context, pending=None),
        results=filter_restricted(candidates, verified),
        action=action,
        replaced=previous,
    )


def affirm(
    context: GateContext,
    items: Sequence[S],
    now: datetime,
) -> GateOutcome:
    record = AffirmationRecord.issued(now)
    pending = context.pending
    resolved = replace(context, affirmation=record, pending=None)
    if pending is None:
        return GateOutcome(context=resolved, results=None)
    return GateOutcome(
        context=resolved,
        results=candidates_for(pending, items),
        action=pending,
    )


def decline(context: GateContext, items: Sequence[S]) -> GateOutcome:
    pending = context.pending
    resolved = replace(context, pending=None)
    if pending is None or pending.kind is ActionKind.VIEW_ALL:
        return GateOutcome(context=resolved, results=None, action=pending)
    return GateOutcome(
        context=resolved,
        results=filter_restricted(candidates_for(pending, items), False),
        action=pending,
    )


def dismiss(context: GateContext, items: Sequence[S]) -> GateOutcome:
    """Closing the prompt without answering counts as a decline."""
    return decline(context, items)
