from __future__ import annotations

import argparse
import hmac
import logging
from pathlib import Path
from typing import Optional, Sequence

from .app import CatalogApp
from .commands import browse as cmd_browse
from .commands import doctor as cmd_doctor
from .commands import sounds as cmd_sounds
from .commands import suggestions as cmd_suggestions
from .commands import tags as cmd_tags
from .commands import verify as cmd_verify
from .config import Settings, find_config
from .models import CatalogError
from .prompt_io import ConsolePromptIO, PromptIO

LOG_FORMAT = "%(levelname).1s | %(name)s | %(message)s"

C_RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",  # Cyan
    logging.INFO: "\033[37m",  # Light gray
    logging.WARNING: "\033[33m",  # Yellow
    logging.ERROR: "\033[31m",  # Red
    logging.CRITICAL: "\033[35m",  # Magenta
}

ADMIN_COMMANDS = {
    ("tags", "add"),
    ("tags", "remove"),
    ("sounds", "add"),
    ("sounds", "update"),
    ("sounds", "remove"),
    ("sounds", "import-json"),
    ("sounds", "import-folder"),
    ("suggestions", "list"),
    ("suggestions", "read"),
    ("suggestions", "unread"),
    ("suggestions", "remove"),
}


class ColorFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if not color:
            return message
        return f"{color}{message}{C_RESET}"


class WarningBufferHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.WARNING)
        self.records: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
        except Exception:  # pragma: no cover
            msg = record.getMessage()
        self.records.append(msg)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sound effects catalog")
    parser.add_argument("--config", type=Path, help="Path to config.yaml")
    parser.add_argument("--log-level", default="WARNING", help="Python logging level")
    parser.add_argument("--password", default=None, help="Admin password for catalog changes")

    subparsers = parser.add_subparsers(dest="command", required=True)
    search_parser = subparsers.add_parser("search", help="Search sounds by title or tag")
    search_parser.add_argument("query", nargs="+", help="Search terms")
    tag_parser = subparsers.add_parser("tag", help="Browse sounds for a tag")
    tag_parser.add_argument("tag", help="Tag to browse ('all sounds' lists everything)")
    subparsers.add_parser("all", help="List every sound in the library")

    tags_parser = subparsers.add_parser("tags", help="Browse-by-tag catalog")
    tags_sub = tags_parser.add_subparsers(dest="action", required=True)
    tags_sub.add_parser("list", help="Show curated tags")
    tags_sub.add_parser("available", help="Show library tags that are not curated")
    tags_add = tags_sub.add_parser("add", help="Curate a tag")
    tags_add.add_argument("tag")
    tags_remove = tags_sub.add_parser("remove", help="Remove a curated tag")
    tags_remove.add_argument("tag")

    sounds_parser = subparsers.add_parser("sounds", help="Manage sound records")
    sounds_sub = sounds_parser.add_subparsers(dest="action", required=True)
    sounds_sub.add_parser("list", help="List sound records, newest first")
    sounds_add = sounds_sub.add_parser("add", help="Add a sound")
    sounds_add.add_argument("title")
    sounds_add.add_argument("audio_url")
    sounds_add.add_argument("--tags", default="", help="Comma-separated tags")
    sounds_add.add_argument("--equipment", default=None)
    sounds_add.add_argument("--format", default=None)
    sounds_update = sounds_sub.add_parser("update", help="Edit fields of a sound")
    sounds_update.add_argument("sound_id")
    sounds_update.add_argument("--title", default=None)
    sounds_update.add_argument("--audio-url", dest="audio_url", default=None)
    sounds_update.add_argument("--tags", default=None, help="Comma-separated tags; replaces existing tags")
    sounds_update.add_argument("--equipment", default=None)
    sounds_update.add_argument("--format", default=None)
    sounds_remove = sounds_sub.add_parser("remove", help="Delete a sound")
    sounds_remove.add_argument("sound_id")
    import_json = sounds_sub.add_parser("import-json", help="Bulk import a JSON array of sounds")
    import_json.add_argument("path", type=Path)
    import_folder = sounds_sub.add_parser("import-folder", help="Import audio files from folders")
    import_folder.add_argument("roots", nargs="*", type=Path, help="Defaults to importer.roots")

    suggestions_parser = subparsers.add_parser("suggestions", help="Sound suggestions")
    suggestions_sub = suggestions_parser.add_subparsers(dest="action", required=True)
    suggestions_sub.add_parser("list", help="List suggestions, unread first")
    suggest_add = suggestions_sub.add_parser("add", help="Suggest a sound for the library")
    suggest_add.add_argument("sound_name")
    suggest_add.add_argument("--category", default="")
    suggest_add.add_argument("--description", default="")
    for name in ("read", "unread", "remove"):
        sub = suggestions_sub.add_parser(name, help=f"{name.capitalize()} a suggestion")
        sub.add_argument("suggestion_id")

    verify_parser = subparsers.add_parser("verify", help="Age affirmation status")
    verify_sub = verify_parser.add_subparsers(dest="action", required=True)
    verify_sub.add_parser("status", help="Show whether a valid affirmation is stored")
    verify_sub.add_parser("reset", help="Forget the stored affirmation")

    subparsers.add_parser("doctor", help="Run basic config/store checks")
    return parser


def configure_logging(level_name: str) -> WarningBufferHandler:
    log_level = getattr(logging, level_name.upper(), logging.WARNING)
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)

    color_handler = logging.StreamHandler()
    color_handler.setFormatter(ColorFormatter(LOG_FORMAT))
    root_logger.addHandler(color_handler)

    warn_buffer = WarningBufferHandler()
    warn_buffer.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(warn_buffer)
    return warn_buffer


def check_admin(settings: Settings, password: Optional[str]) -> None:
    expected = settings.admin.password
    if not expected:
        raise SystemExit("Admin commands are disabled: set admin.password in config.yaml")
    if password is None or not hmac.compare_digest(password, expected):
        raise SystemExit("Invalid admin password")


def dispatch(app: CatalogApp, args: argparse.Namespace, io: PromptIO) -> int:
    action = getattr(args, "action", None)
    if (args.command, action) in ADMIN_COMMANDS:
        check_admin(app.settings, args.password)
    match args.command, action:
        case "search", _:
            cmd_browse.run_search(app.get_session(), io, " ".join(args.query))
        case "tag", _:
            cmd_browse.run_tag(app.get_session(), io, args.tag)
        case "all", _:
            cmd_browse.run_view_all(app.get_session(), io)
        case "tags", "list":
            cmd_tags.run_list(app, io)
        case "tags", "available":
            cmd_tags.run_available(app, io)
        case "tags", "add":
            cmd_tags.run_add(app, io, args.tag)
        case "tags", "remove":
            cmd_tags.run_remove(app, io, args.tag)
        case "sounds", "list":
            cmd_sounds.run_list(app, io)
        case "sounds", "add":
            cmd_sounds.run_add(
                app,
                io,
                title=args.title,
                audio_url=args.audio_url,
                tags=args.tags,
                equipment=args.equipment,
                format=args.format,
            )
        case "sounds", "update":
            cmd_sounds.run_update(
                app,
                io,
                args.sound_id,
                title=args.title,
                audio_url=args.audio_url,
                tags=args.tags,
                equipment=args.equipment,
                format=args.format,
            )
        case "sounds", "remove":
            cmd_sounds.run_remove(app, io, args.sound_id)
        case "sounds", "import-json":
            cmd_sounds.run_import_json(app, io, args.path)
        case "sounds", "import-folder":
            cmd_sounds.run_import_folder(app, io, list(args.roots))
        case "suggestions", "list":
            cmd_suggestions.run_list(app, io)
        case "suggestions", "add":
            cmd_suggestions.run_add(app, io, args.sound_name, args.category, args.description)
        case "suggestions", "read":
            cmd_suggestions.run_mark_read(app, io, args.suggestion_id, True)
        case "suggestions", "unread":
            cmd_suggestions.run_mark_read(app, io, args.suggestion_id, False)
        case "suggestions", "remove":
            cmd_suggestions.run_remove(app, io, args.suggestion_id)
        case "verify", "status":
            cmd_verify.run_status(app, io)
        case "verify", "reset":
            cmd_verify.run_reset(app, io)
        case _:
            raise SystemExit(f"Unknown command: {args.command}")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    warn_buffer = configure_logging(args.log_level)
    config_path = find_config(args.config)
    settings = Settings.load(config_path)

    if args.command == "doctor":
        report = cmd_doctor.run(settings)
        for line in report.checks:
            print(line)
        if not report.ok:
            raise SystemExit(1)
        return

    io = ConsolePromptIO()
    app: CatalogApp | None = None
    try:
        app = CatalogApp.create(settings)
        dispatch(app, args, io)
    except CatalogError as exc:
        print(f"Error: {exc}")
        raise SystemExit(1) from exc
    finally:
        if app:
            app.close()
        if warn_buffer.records:
            print("\n\033[33mWarnings/Errors summary:\033[0m")
            for line in warn_buffer.records:
                print(f" - {line}")


if __name__ == "__main__":  # pragma: no cover
    main()
