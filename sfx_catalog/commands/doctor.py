from __future__ import annotations

from dataclasses import dataclass

from ..app import CatalogApp
from ..config import Settings
from ..core.catalog import list_available
from ..core.maturity import is_restricted
from ..models import CatalogError
from .output import error, ok as ok_line, warning


@dataclass(slots=True)
class DoctorReport:
    ok: bool
    checks: list[str]


def run(settings: Settings) -> DoctorReport:
    checks: list[str] = []
    ok = True

    try:
        app = CatalogApp.create(settings)
    except CatalogError as exc:
        return DoctorReport(ok=False, checks=[error("Record store", str(exc))])
    try:
        sounds = app.store.list_sounds()
        checks.append(ok_line("Record store", f"{settings.store.path} ({len(sounds)} sounds)"))

        missing_audio = [s.id for s in sounds if not s.audio_url]
        if missing_audio:
            ok = False
            checks.append(error("Sounds", f"{len(missing_audio)} without audio URL"))
        restricted = sum(1 for s in sounds if is_restricted(s.tags))
        checks.append(ok_line("Restricted sounds", f"{restricted} tagged NSFW"))

        curated = app.curated_catalog().list_curated()
        content = app.content_tags()
        unused = list_available(curated, content)
        if not curated:
            checks.append(warning("Curated tags", "none selected; browse-by-tag only offers 'all sounds'"))
        elif unused:
            checks.append(
                warning("Curated tags", f"{len(curated)} curated, no sounds for: {', '.join(unused)}")
            )
        else:
            checks.append(ok_line("Curated tags", f"{len(curated)} curated"))
        checks.append(ok_line("Available tags", f"{len(list_available(content, curated))} not curated"))

        unread = sum(1 for s in app.store.list_suggestions() if not s.is_read)
        checks.append(ok_line("Suggestions", f"{unread} unread"))

        checks.append(ok_line("Client state", str(settings.state.path)))
        if settings.gate.affirmation_validity_days != 30:
            checks.append(
                warning("Affirmation window", f"{settings.gate.affirmation_validity_days} days (default 30)")
            )
        if not settings.admin.password:
            checks.append(warning("Admin", "admin.password not set; admin commands are disabled"))
        else:
            checks.append(ok_line("Admin"))
    finally:
        app.close()

    return DoctorReport(ok=ok, checks=checks)
