from __future__ import annotations

from ..app import CatalogApp
from ..prompt_io import PromptIO


def run_status(app: CatalogApp, io: PromptIO) -> bool:
    session = app.get_session()
    verified = session.is_verified()
    record = session.context.affirmation
    if verified and record is not None:
        io.print(f"Age affirmation: VALID (since {record.issued_at.isoformat(timespec='seconds')})")
    else:
        io.print("Age affirmation: NONE")
    return verified


def run_reset(app: CatalogApp, io: PromptIO) -> None:
    app.get_session().reset_affirmation()
    io.print("Age affirmation cleared.")
