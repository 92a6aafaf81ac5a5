"""Reading session: current translation, UI language, layout and open chapter.

WHY: Opening a chapter depends on which translation is selected, how text is
laid out and which chapter was open before (switching translation re-opens
it). Keeping that state in one explicit object, instead of module globals,
means the CLI, the HTTP API and tests each own their state and the layout
engine only ever sees the values passed to it.

HOW: ReaderSession holds a TranslationStore and the current selections.
open_chapter() loads the translation, resolves the book, renders the verses
through verse_layout.format_chapter(), finds the cursor line for a requested
verse and records the resulting ViewState. preview_chapter() renders without
touching the view.

RULES:
- format_config may be None; rendering then raises ConfigurationMissing
- set_translation() only accepts downloaded translations (case-insensitive)
  and re-opens the current chapter in the new translation
- cursor_line is 0-based; it is 0 when no verse was asked for or found
- Books are recorded by 1-based index so a translation switch finds the
  same book even when names differ between languages
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Mapping

from verse_layout import (
    ChapterContext,
    FormatConfig,
    format_chapter,
    locate_verse,
    merge_format_options,
)

from bible_reader.config import (
    BUFFER_NAME_TEMPLATE,
    DEFAULT_TRANSLATION,
    DEFAULT_UI_LANGUAGE,
    load_format_overrides,
)
from bible_reader.core.bible import Book, Translation
from bible_reader.core.store import TranslationNotFoundError, TranslationStore
from bible_reader.i18n import Language, Messages, find_language, get_messages, resolve_language

logger = logging.getLogger(__name__)


@dataclass
class ViewState:
    """What is currently open."""

    translation: str
    book: str
    book_index: int
    chapter: int
    verse: int | None = None


@dataclass
class ChapterView:
    """A rendered chapter ready to display.

    Attributes:
        state: The translation/book/chapter/verse that was opened.
        lines: Display lines from the layout engine.
        cursor_line: 0-based line to place the cursor on.
        buffer_name: Stable name, e.g. "bible://en_kjv/Genesis/1".
    """

    state: ViewState
    lines: list[str] = field(default_factory=list)
    cursor_line: int = 0
    buffer_name: str = ""


@dataclass
class BookSummary:
    """A book as shown in listings."""

    index: int
    abbrev: str
    name: str
    chapter_count: int


class ReaderSession:
    """Explicit reader state passed to every reading operation."""

    def __init__(
        self,
        store: TranslationStore,
        translation: str = DEFAULT_TRANSLATION,
        language: str | Language = DEFAULT_UI_LANGUAGE,
        format_config: FormatConfig | None = None,
    ) -> None:
        self.store = store
        self.translation = translation
        self.language = resolve_language(language)
        self.format_config = format_config
        self.current_view: ViewState | None = None

    @classmethod
    def from_env(
        cls,
        store: TranslationStore,
        overrides: Mapping[str, Any] | None = None,
        base: Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> ReaderSession:
        """Build a session with layout from base, then .env, then overrides."""
        session = cls(store, format_config=merge_format_options(load_format_overrides(), base=base), **kwargs)
        session.set_format_options(overrides or {})
        return session

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    @property
    def messages(self) -> Messages:
        return get_messages(self.language)

    def set_language(self, code: str) -> bool:
        """Switch UI language. Unknown codes are ignored and return False."""
        language = find_language(code)
        if language is None:
            return False
        self.language = language
        return True

    def set_format_options(self, overrides: Mapping[str, Any]) -> FormatConfig:
        """Merge overrides onto the current layout (or the defaults)."""
        base = asdict(self.format_config) if self.format_config is not None else None
        self.format_config = merge_format_options(overrides, base=base)
        return self.format_config

    def set_translation(self, abbreviation: str) -> ChapterView | None:
        """Select a downloaded translation and re-open the current chapter.

        Raises:
            TranslationNotFoundError: If the translation is not downloaded.
        """
        wanted = abbreviation.strip().lower()
        available = self.store.available_translations()
        match = next((t for t in available if t.lower() == wanted), None)
        if match is None:
            raise TranslationNotFoundError(
                "Translation '{}' is not downloaded. Available translations: {}".format(
                    wanted, ", ".join(available) or "none"
                )
            )

        self.translation = match
        logger.info("Changed translation to %s", match)

        if self.current_view is None:
            return None
        view = self.current_view
        return self.open_chapter(view.book_index, view.chapter, view.verse)

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def load_translation(self, translation: str | None = None) -> Translation:
        return self.store.load(translation or self.translation)

    def _render(self, book: Book, chapter: int) -> list[str]:
        verses = book.chapter_verses(chapter)
        ctx = ChapterContext(book_title=book.name, chapter_number=chapter)
        return format_chapter(verses, ctx, self.format_config)

    def open_chapter(
        self,
        book: str | int,
        chapter: int,
        verse: int | None = None,
        translation: str | None = None,
    ) -> ChapterView:
        """Render a chapter and make it the current view.

        Raises:
            TranslationNotFoundError, InvalidTranslationError: From the store.
            BookNotFoundError, ChapterNotFoundError: For bad references.
            ConfigurationMissing: If no layout is configured.
        """
        abbreviation = translation or self.translation
        book_index, book_data = self.load_translation(abbreviation).find_book(book)
        lines = self._render(book_data, chapter)

        cursor_line = 0
        if verse is not None:
            found = locate_verse(lines, verse)
            if found is not None:
                cursor_line = found

        state = ViewState(
            translation=abbreviation,
            book=book_data.name,
            book_index=book_index,
            chapter=chapter,
            verse=verse,
        )
        self.current_view = state
        return ChapterView(
            state=state,
            lines=lines,
            cursor_line=cursor_line,
            buffer_name=BUFFER_NAME_TEMPLATE.format(
                translation=abbreviation, book=book_data.name, chapter=chapter
            ),
        )

    def preview_chapter(self, book: str | int, chapter: int) -> list[str]:
        """Render a chapter without changing the current view."""
        _, book_data = self.load_translation().find_book(book)
        return self._render(book_data, chapter)

    # ------------------------------------------------------------------
    # Listings and completion
    # ------------------------------------------------------------------

    def list_books(self) -> list[BookSummary]:
        return [
            BookSummary(index=i, abbrev=b.abbrev, name=b.name, chapter_count=b.chapter_count)
            for i, b in enumerate(self.load_translation().books, start=1)
        ]

    def list_chapters(self, book: str | int) -> list[int]:
        _, book_data = self.load_translation().find_book(book)
        return list(range(1, book_data.chapter_count + 1))

    def complete_books(self, prefix: str) -> list[str]:
        """Book abbreviations containing prefix, case-insensitively."""
        needle = prefix.lower()
        return [b.abbrev for b in self.load_translation().books if needle in b.abbrev.lower()]

    def complete_translations(self, prefix: str) -> list[str]:
        needle = prefix.lower()
        return [t for t in self.store.available_translations() if needle in t.lower()]
