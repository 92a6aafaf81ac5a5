"""Data models for the verse layout engine.

WHY: The layout engine turns a chapter of verses into display lines. Its
inputs (verses, chapter identity, layout policy) need a structured,
immutable representation so callers can build them once per call and the
engine can never mutate what it was given.

HOW: Three frozen dataclasses describe the inputs. FormatConfig carries the
five layout knobs with their documented defaults. ConfigurationMissing is
the single error the engine raises, when it is asked to format without a
layout policy.

RULES:
- Verse.text is sacred: the engine never rewrites, merges or drops words.
- Verses are ordered by the caller; the engine never reorders them.
- FormatConfig values are validated by verse_layout.presets.merge_format_options,
  not by the engine.
- A missing FormatConfig is a programming error, never a silent default.
"""

from dataclasses import dataclass


class ConfigurationMissing(RuntimeError):
    """Raised when a chapter is formatted before a FormatConfig is established.

    WHY: Guessing defaults here would produce text laid out differently from
    what the caller configured, with no indication anything went wrong.
    """


@dataclass(frozen=True)
class Verse:
    """One numbered unit of text within a chapter.

    Attributes:
        number: 1-based verse number, contiguous within a chapter.
        text: Raw translation text, no markup.
    """
    number: int
    text: str


@dataclass(frozen=True)
class ChapterContext:
    """Identity of the chapter being rendered. Used only for the header."""
    book_title: str
    chapter_number: int


@dataclass(frozen=True)
class FormatConfig:
    """Layout policy for one formatting call.

    Attributes:
        max_line_length: Soft wrap width in characters.
        indent_size: Spaces prepended to every flushed text line.
        verse_spacing: Blank lines after the header and after each verse
            (the latter only when break_verses is on).
        chapter_header: Emit a centered "BOOK N" header line first.
        break_verses: End each verse on its own line; when off, verses
            flow together and only wrap at max_line_length.
    """
    max_line_length: int = 80
    indent_size: int = 0
    verse_spacing: int = 0
    chapter_header: bool = True
    break_verses: bool = True
