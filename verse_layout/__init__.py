"""Verse layout library for rendering Bible chapters as text lines.

WHY: The reader shows the same chapter in several places (terminal, chapter
preview, HTTP API) and each must wrap, number and space the verses the same
way. This package is the single formatting core they all call. It holds no
state, so chapters with different layouts can be formatted concurrently.

HOW: The public entry point is format_chapter(verses, ctx, config). It checks
a layout policy was supplied and delegates to core.format_lines(). Presets
and merge_format_options() build FormatConfig values from partial options.

RULES:
- format_chapter() is the public API for producing display lines.
- A config of None raises ConfigurationMissing. Callers wanting defaults
  pass merge_format_options() explicitly.
- Verses are formatted in the order given; nothing is reordered or dropped.
"""

from typing import List, Optional, Sequence

from .core import build_header, locate_verse, to_superscript, verse_marker
from .models import ChapterContext, ConfigurationMissing, FormatConfig, Verse
from .presets import DEFAULT_FORMAT, PRESETS, merge_format_options, resolve_preset
from . import core

__all__ = [
    "format_chapter",
    "to_superscript",
    "locate_verse",
    "build_header",
    "verse_marker",
    "merge_format_options",
    "resolve_preset",
    "Verse",
    "ChapterContext",
    "FormatConfig",
    "ConfigurationMissing",
    "DEFAULT_FORMAT",
    "PRESETS",
]


def format_chapter(
    verses: Sequence[Verse],
    ctx: ChapterContext,
    config: Optional[FormatConfig],
) -> List[str]:
    """Format a chapter's verses into display lines.

    WHY: This is the single public entry point of the layout library. The
    chapter view and the chapter preview both call it with the same verses,
    differing only in where they write the result.

    HOW: Rejects a missing config, then runs core.format_lines().

    RULES:
    - config must be a FormatConfig. None raises ConfigurationMissing.
    - Identical inputs always produce identical output.

    Args:
        verses: Verses ordered by number.
        ctx: Book title and chapter number (used for the header).
        config: Layout policy.

    Returns:
        Ordered list of display lines.

    Raises:
        ConfigurationMissing: If config is None.
    """
    if config is None:
        raise ConfigurationMissing(
            "Format options not set. Build a FormatConfig with "
            "merge_format_options() before formatting."
        )
    return core.format_lines(verses, ctx, config)
