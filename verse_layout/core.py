"""Core verse layout: superscript markers, chapter header, greedy word wrap.

WHY: A chapter arrives as a flat list of verse strings. Readers need it as
display lines: an optional centered header, each verse prefixed with a
superscript verse number, wrapped to a fixed width, with optional verse
breaks and spacing. Both the full chapter view and the chapter preview
render through this one function so they always agree.

HOW: The pipeline has three pieces:
  1. to_superscript() maps a verse number to Unicode superscript digits.
  2. build_header() centers "BOOK N" between runs of "═".
  3. format_lines() runs a greedy word wrap across the verses, flushing at
     the width limit and, when break_verses is on, at every verse end.
locate_verse() then finds the line holding a verse marker for cursor
placement.

RULES:
- ALL functions take explicit parameters. There is no module state, so
  concurrent calls with different configs are safe.
- Words are never split. A word wider than max_line_length sits alone on its
  line and overflows.
- Wrap triggers on current + added > max_line_length. A word that exactly
  fills the width stays on the line.
- Every flushed text line gets indent_size leading spaces. The header and
  blank spacing lines do not.
- In continuous mode the trailing buffer is flushed after the last verse.
"""

import json
from typing import Any, Dict, List, Optional, Sequence

from .models import ChapterContext, FormatConfig, Verse

SUPERSCRIPTS: Dict[str, str] = {
    "0": "⁰",
    "1": "¹",
    "2": "²",
    "3": "³",
    "4": "⁴",
    "5": "⁵",
    "6": "⁶",
    "7": "⁷",
    "8": "⁸",
    "9": "⁹",
}

HEADER_FILL = "═"


# =============================================================================
# Glyphs
# =============================================================================

def to_superscript(number: int) -> str:
    """Render a number with Unicode superscript digits (12 -> "¹²").

    Characters without a superscript form (e.g. "-") pass through unchanged.
    """
    return "".join(SUPERSCRIPTS.get(c, c) for c in str(number))


def verse_marker(number: int) -> str:
    """The marker that opens a verse on a display line: superscript plus space."""
    return to_superscript(number) + " "


# =============================================================================
# Header
# =============================================================================

def build_header(ctx: ChapterContext, max_line_length: int) -> str:
    """Build the centered chapter header line.

    WHY: The header identifies the chapter at the top of the view and
    visually fills the configured width.

    HOW: Header text is "BOOK N". Each side gets
    floor((max_line_length - len(text)) / 2) fill characters, clamped at
    zero, joined as "PAD text PAD".

    RULES:
    - A title wider than max_line_length gets no padding and overflows.
    """
    text = "{} {}".format(ctx.book_title.upper(), ctx.chapter_number)
    pad = HEADER_FILL * max(0, (max_line_length - len(text)) // 2)
    return "{} {} {}".format(pad, text, pad)


# =============================================================================
# Layout
# =============================================================================

def format_lines(
    verses: Sequence[Verse],
    ctx: ChapterContext,
    config: FormatConfig,
) -> List[str]:
    """Lay out a chapter as display lines.

    WHY: This is the layout engine. Callers write the returned lines verbatim
    into a terminal, an HTTP response or a file.

    HOW: Emits the header (plus spacing) when enabled, then prefixes each
    verse with its marker and feeds its words to a greedy accumulator: the
    buffer is flushed when the next word would push it past max_line_length.
    With break_verses on, each verse end flushes the buffer and adds
    verse_spacing blank lines; with it off the buffer carries into the next
    verse and is flushed once at the end.

    Args:
        verses: Verses in display order.
        ctx: Book title and chapter number for the header.
        config: Validated layout policy.

    Returns:
        Ordered list of display lines.
    """
    lines: List[str] = []
    indent = " " * config.indent_size
    max_length = config.max_line_length

    if config.chapter_header:
        lines.append(build_header(ctx, max_length))
        lines.extend([""] * config.verse_spacing)

    current: List[str] = []
    line_length = 0

    for verse in verses:
        words = "{}{}".format(verse_marker(verse.number), verse.text).split()

        for word in words:
            added = len(word) if not current else len(word) + 1
            if line_length + added > max_length and line_length > 0:
                lines.append(indent + " ".join(current))
                current = [word]
                line_length = len(word)
            else:
                current.append(word)
                line_length += added

        if config.break_verses:
            if current:
                lines.append(indent + " ".join(current))
                current = []
                line_length = 0
            lines.extend([""] * config.verse_spacing)

    # Continuous mode leaves the last run in the buffer
    if current:
        lines.append(indent + " ".join(current))

    return lines


def locate_verse(lines: Sequence[str], verse_number: int) -> Optional[int]:
    """Return the index of the first line containing the verse's marker.

    WHY: Opening a chapter at a given verse needs the line to put the cursor on.

    RULES:
    - Linear scan, first match wins, None when absent.
    - The marker is the superscript number followed by a space. Verse text
      that happens to contain the same sequence earlier will match first;
      this is accepted.
    """
    marker = verse_marker(verse_number)
    for index, line in enumerate(lines):
        if marker in line:
            return index
    return None


# =============================================================================
# Input Parsing
# =============================================================================

def parse_verses(data: Any) -> List[Verse]:
    """Parse chapter JSON into a list of Verse objects.

    WHY: The CLI accepts a chapter straight from a translation file (a list of
    verse strings) or an exported list of numbered verses.

    HOW: Accepts two input shapes:
      1. List of strings: verse numbers are assigned 1..n in order.
      2. List of objects with "text" and optional "verse"/"number".
    Items of any other shape are skipped.
    """
    verses: List[Verse] = []
    if not isinstance(data, list):
        return verses

    for position, item in enumerate(data, start=1):
        if isinstance(item, str):
            verses.append(Verse(number=position, text=item))
        elif isinstance(item, dict) and "text" in item:
            number = item.get("verse", item.get("number", position))
            verses.append(Verse(number=int(number), text=str(item["text"])))

    return verses


def load_verses(raw: str) -> List[Verse]:
    """Parse raw JSON text into verses.

    Raises:
        ValueError: If the text is not valid JSON.
    """
    # Translation files are sometimes saved with a BOM
    raw = raw.lstrip("\ufeff").strip()
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError("Could not parse JSON input: {}".format(e)) from e
    return parse_verses(data)
