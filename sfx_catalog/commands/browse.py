from __future__ import annotations

from ..core.gate import ActionKind, GateOutcome
from ..prompt_io import PromptIO, ask_yes_no
from ..session import DiscoverySession
from .output import results_lines

AGE_PROMPT = "Some results contain mature (NSFW) content. Are you 18 or older? [y/N] "


def run_search(session: DiscoverySession, io: PromptIO, query: str) -> GateOutcome:
    return resolve(session, io, session.search(query))


def run_tag(session: DiscoverySession, io: PromptIO, tag: str) -> GateOutcome:
    return resolve(session, io, session.click_tag(tag))


def run_view_all(session: DiscoverySession, io: PromptIO) -> GateOutcome:
    return resolve(session, io, session.view_all())


def resolve(session: DiscoverySession, io: PromptIO, outcome: GateOutcome) -> GateOutcome:
    if outcome.awaiting_affirmation:
        answer = ask_yes_no(io, AGE_PROMPT)
        if answer is True:
            outcome = session.affirm()
        elif answer is False:
            outcome = session.decline()
        else:
            outcome = session.dismiss()
    render(io, outcome)
    return outcome


def render(io: PromptIO, outcome: GateOutcome) -> None:
    if outcome.results is None:
        if outcome.action is not None and outcome.action.kind is ActionKind.VIEW_ALL:
            io.print("Browsing all sounds requires age confirmation.")
        return
    action = outcome.action
    if action is None or action.kind is ActionKind.VIEW_ALL:
        heading = "All Sounds"
    else:
        heading = f'Search Results for "{action.value}"'
    for line in results_lines(heading, outcome.results):
        io.print(line)
