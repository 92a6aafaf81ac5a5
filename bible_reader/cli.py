"""Command-line interface for the Bible reader.

WHY: Users need a simple way to download translations and read chapters from
the terminal. The CLI wires together the translation source, the local
store, the reading session and the layout engine behind one command.

HOW: Uses argparse with subcommands (download, translations, translation,
books, chapters, read, complete). Global options pick the data directory,
translation and UI language. The translation chosen with `translation` is
saved in the data directory and used until another is chosen. Each
subcommand builds a ReaderSession and prints its result. Downloads run
through asyncio.run(). Chapter text goes to stdout; status messages go to
stderr.

RULES:
- Chapter lines are written to stdout verbatim, one per line
- Status output (download progress, cursor line) goes to stderr
- Layout precedence: defaults < --preset < BIBLE_* env < explicit flags
- Known failures (missing translation/book/chapter, bad options, source
  errors) print "Error: ..." to stderr and exit 1
- --verbose enables logging at DEBUG level on stderr
- `complete` prints one match per line for shell completion scripts
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx
from verse_layout import PRESETS, resolve_preset

from bible_reader.api.client import BibleSourceClient, SourceAPIError
from bible_reader.config import DEFAULT_TRANSLATION, DEFAULT_UI_LANGUAGE, default_data_dir
from bible_reader.core.bible import BookNotFoundError, ChapterNotFoundError
from bible_reader.core.catalog import download_translation, index_entries, load_index
from bible_reader.core.session import ReaderSession
from bible_reader.core.store import (
    InvalidTranslationError,
    TranslationNotFoundError,
    TranslationStore,
)

_KNOWN_ERRORS = (
    BookNotFoundError,
    ChapterNotFoundError,
    TranslationNotFoundError,
    InvalidTranslationError,
    SourceAPIError,
    httpx.HTTPError,
    ValueError,
)


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not pollute stdout so chapter text can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


def _format_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Collect the layout flags that were given on the command line."""
    return {
        "max_line_length": getattr(args, "max_line_length", None),
        "indent_size": getattr(args, "indent_size", None),
        "verse_spacing": getattr(args, "verse_spacing", None),
        "chapter_header": getattr(args, "chapter_header", None),
        "break_verses": getattr(args, "break_verses", None),
    }


def _build_session(args: argparse.Namespace) -> ReaderSession:
    """Build the session for one invocation.

    RULES:
    - Translation: --translation, else the saved selection, else
      BIBLE_DEFAULT_TRANSLATION
    - An unsupported --language keeps the default and prints a notice
    """
    store = TranslationStore(Path(args.data_dir) if args.data_dir else default_data_dir())
    preset = getattr(args, "preset", None)
    base = resolve_preset(preset) if preset else None
    session = ReaderSession.from_env(
        store,
        overrides=_format_overrides(args),
        base=base,
        translation=args.translation or store.selected_translation() or DEFAULT_TRANSLATION,
    )
    if args.language and not session.set_language(args.language):
        _status(f"Unsupported UI language '{args.language}', using {session.language.value}")
    return session


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


async def _download(session: ReaderSession, abbreviation: Optional[str], refresh: bool) -> None:
    async with BibleSourceClient() as client:
        if not abbreviation:
            languages = await load_index(session.store, client, refresh=refresh, on_status=_status)
            print(session.messages.bible_translations)
            for entry in index_entries(languages):
                print("  {}".format(entry.display))
            return

        path = await download_translation(
            session.store, client, abbreviation, on_status=_status
        )
        _status("Successfully downloaded {} to {}".format(abbreviation, path))


def _cmd_download(session: ReaderSession, args: argparse.Namespace) -> None:
    asyncio.run(_download(session, args.abbreviation, args.refresh))


def _cmd_translations(session: ReaderSession, args: argparse.Namespace) -> None:
    available = session.store.available_translations()
    if not available:
        _status("No translations available. Use 'bible-reader download' to download translations.")
        return
    print(session.messages.bible_translations)
    for abbreviation in available:
        marker = "*" if abbreviation == session.translation else " "
        print("{} {}".format(marker, abbreviation.upper()))


def _cmd_translation(session: ReaderSession, args: argparse.Namespace) -> None:
    session.set_translation(args.abbreviation)
    session.store.save_selected_translation(session.translation)
    print(session.messages.changed_translation.format(session.translation.upper()))


def _cmd_books(session: ReaderSession, args: argparse.Namespace) -> None:
    books = session.list_books()
    if not books:
        raise InvalidTranslationError("No valid books found in translation")
    print(session.messages.bible_books)
    for book in books:
        print("{:>3}. {:<6} {}".format(
            book.index,
            book.abbrev,
            session.messages.book_format.format(book.name, book.chapter_count),
        ))


def _cmd_chapters(session: ReaderSession, args: argparse.Namespace) -> None:
    _, book = session.load_translation().find_book(args.book)
    if args.preview is not None:
        lines = session.preview_chapter(args.book, args.preview)
        print(session.messages.chapter_preview)
        for line in lines:
            print(line)
        return
    print(session.messages.select_chapter.format(book.name.upper()))
    for number in session.list_chapters(args.book):
        print("  {}".format(session.messages.chapter.format(number)))


def _cmd_complete(session: ReaderSession, args: argparse.Namespace) -> None:
    if args.kind == "books":
        matches = session.complete_books(args.prefix)
    else:
        matches = session.complete_translations(args.prefix)
    for match in matches:
        print(match)


def _cmd_read(session: ReaderSession, args: argparse.Namespace) -> None:
    view = session.open_chapter(args.book, args.chapter, args.verse)
    for line in view.lines:
        print(line)
    if args.verse is not None:
        _status("{}: verse {} at line {}".format(
            view.buffer_name, args.verse, view.cursor_line + 1
        ))


_COMMANDS = {
    "download": _cmd_download,
    "translations": _cmd_translations,
    "translation": _cmd_translation,
    "books": _cmd_books,
    "chapters": _cmd_chapters,
    "read": _cmd_read,
    "complete": _cmd_complete,
}


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def _add_format_flags(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("layout")
    group.add_argument(
        "--preset",
        default=None,
        choices=sorted(PRESETS.keys()),
        help="Named layout to start from (default: default).",
    )
    group.add_argument("--max-line-length", type=int, default=None,
                       help="Wrap width in characters (default: 80).")
    group.add_argument("--indent-size", type=int, default=None,
                       help="Spaces before every text line (default: 0).")
    group.add_argument("--verse-spacing", type=int, default=None,
                       help="Blank lines after the header and each verse (default: 0).")
    group.add_argument("--chapter-header", action=argparse.BooleanOptionalAction, default=None,
                       help="Show the centered chapter header (default: on).")
    group.add_argument("--break-verses", action=argparse.BooleanOptionalAction, default=None,
                       help="Start every verse on a new line (default: on).")


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable: tests can inspect the parser without touching the disk.
    """
    parser = argparse.ArgumentParser(
        prog="bible-reader",
        description="Download Bible translations and read chapters in the terminal.",
    )
    parser.add_argument(
        "--data-dir",
        default=None,
        help="Directory holding downloaded translations "
             "(default: {}).".format(default_data_dir()),
    )
    parser.add_argument(
        "--translation",
        default=None,
        help="Translation to read from (default: the one selected with 'translation', "
             "else {}).".format(DEFAULT_TRANSLATION),
    )
    parser.add_argument(
        "--language",
        default=None,
        help="UI language: en, pt_br, es, fr, de, it (default: {}).".format(DEFAULT_UI_LANGUAGE),
    )
    parser.add_argument("--verbose", action="store_true", help="Log debug output to stderr.")

    sub = parser.add_subparsers(dest="command", required=True)

    download = sub.add_parser("download", help="List or download translations.")
    download.add_argument("abbreviation", nargs="?", default=None,
                          help="Translation to download, e.g. en_kjv. Omit to list the catalog.")
    download.add_argument("--refresh", action="store_true",
                          help="Refetch the catalog instead of using the cached index.")

    sub.add_parser("translations", help="List downloaded translations.")

    translation = sub.add_parser("translation", help="Select a downloaded translation for later commands.")
    translation.add_argument("abbreviation")

    sub.add_parser("books", help="List the books of the current translation.")

    chapters = sub.add_parser("chapters", help="List the chapters of a book.")
    chapters.add_argument("book", help="Book name, abbreviation or number.")
    chapters.add_argument("--preview", type=int, default=None, metavar="CHAPTER",
                          help="Print a preview of one chapter instead of the list.")
    _add_format_flags(chapters)

    read = sub.add_parser("read", help="Print a chapter.")
    read.add_argument("book", help="Book name, abbreviation or number.")
    read.add_argument("chapter", type=int)
    read.add_argument("verse", type=int, nargs="?", default=None,
                      help="Verse to report the line of.")
    _add_format_flags(read)

    complete = sub.add_parser("complete", help="Print completions for shell integration.")
    complete.add_argument("kind", choices=["books", "translations"])
    complete.add_argument("prefix", nargs="?", default="",
                          help="Case-insensitive text the completion must contain.")

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    try:
        session = _build_session(args)
        _COMMANDS[args.command](session, args)
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        sys.exit(130)
    except _KNOWN_ERRORS as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
