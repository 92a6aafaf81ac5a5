"""Translation data model: books, chapters, and verse lookup.

WHY: A translation file is a JSON list of books, each holding its chapters as
lists of verse strings. The session, CLI and HTTP API all need the same
lookups on it (find a book by name, abbreviation or position; pull a
chapter's verses in the shape the layout engine takes), so they live here
rather than being repeated at each call site.

HOW: Two dataclasses:
  Book        — abbreviation, display name, and chapters of verse strings
  Translation — an abbreviation and its ordered books
Translation.from_json() builds one from the decoded file. Lookups raise
BookNotFoundError / ChapterNotFoundError.

RULES:
- Chapters and verses are 1-based for callers, stored 0-based
- Book.name falls back to the upper-cased abbreviation when absent
- Book references: int or numeric string = 1-based position; any other
  string matches name or abbreviation case-insensitively
- Entries without an "abbrev" are skipped
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from verse_layout import Verse

logger = logging.getLogger(__name__)


class BookNotFoundError(LookupError):
    """Raised when a book reference matches no book in the translation."""


class ChapterNotFoundError(LookupError):
    """Raised when a chapter number is outside a book's range."""


@dataclass
class Book:
    """One book of a translation.

    RULES:
    - chapters[i] holds the verse strings of chapter i + 1, in order
    """

    abbrev: str
    name: str
    chapters: list[list[str]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> Book:
        abbrev = str(data["abbrev"])
        return cls(
            abbrev=abbrev,
            name=data.get("name") or abbrev.upper(),
            chapters=[[str(v) for v in chapter] for chapter in data.get("chapters", [])],
        )

    @property
    def chapter_count(self) -> int:
        return len(self.chapters)

    def chapter_verses(self, chapter: int) -> list[Verse]:
        """Return a chapter's verses numbered 1..n.

        Raises:
            ChapterNotFoundError: If chapter is not in 1..chapter_count.
        """
        if chapter < 1 or chapter > len(self.chapters):
            raise ChapterNotFoundError(
                f"Chapter not found: {chapter} ({self.name} has {len(self.chapters)} chapters)"
            )
        return [
            Verse(number=number, text=text)
            for number, text in enumerate(self.chapters[chapter - 1], start=1)
        ]


@dataclass
class Translation:
    """A loaded translation: its abbreviation and ordered books."""

    abbreviation: str
    books: list[Book] = field(default_factory=list)

    @classmethod
    def from_json(cls, abbreviation: str, data: list) -> Translation:
        """Build a Translation from a decoded translation file."""
        books: list[Book] = []
        for position, item in enumerate(data, start=1):
            if not isinstance(item, dict) or not item.get("abbrev"):
                logger.debug("Skipping entry %d in %s: no abbrev", position, abbreviation)
                continue
            books.append(Book.from_dict(item))
        return cls(abbreviation=abbreviation, books=books)

    def find_book(self, ref: str | int) -> tuple[int, Book]:
        """Find a book by 1-based position, name, or abbreviation.

        Returns:
            Tuple of (1-based book index, Book).

        Raises:
            BookNotFoundError: If nothing matches.
        """
        if isinstance(ref, int) or (isinstance(ref, str) and ref.strip().isdigit()):
            index = int(ref)
            if 1 <= index <= len(self.books):
                return index, self.books[index - 1]
        else:
            wanted = ref.strip().lower()
            for index, book in enumerate(self.books, start=1):
                if book.name.lower() == wanted or book.abbrev.lower() == wanted:
                    return index, book

        raise BookNotFoundError(f"Book not found: {ref} in translation {self.abbreviation}")
