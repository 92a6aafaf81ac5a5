"""Layout presets and the explicit option merge.

WHY: Readers want a handful of named layouts (a narrow column, a spaced-out
study layout, continuous prose) without spelling out every field, and the
application layers (environment, CLI flags, HTTP query parameters) each
contribute partial overrides. Merging those by hand with fallback chains
hides which value won; a single merge function with a fully specified base
makes the outcome explicit.

HOW: Each preset is a plain dict of the five FormatConfig fields. PRESETS maps
preset names to those dicts. merge_format_options() copies a base dict,
applies every override whose value is not None, validates the result and
returns a frozen FormatConfig.

RULES:
- Presets are frozen constants. Never mutate them at runtime.
- An override of None means "not given" and keeps the base value.
- Unknown option names are rejected, not ignored.
- max_line_length must be > 0; indent_size and verse_spacing must be >= 0;
  chapter_header and break_verses must be real booleans.
"""

import copy
from typing import Any, Dict, Mapping, Optional

from .models import FormatConfig

DEFAULT_FORMAT: Dict[str, Any] = {
    "max_line_length": 80,
    "indent_size": 0,
    "verse_spacing": 0,
    "chapter_header": True,
    "break_verses": True,
}

# Narrow column for split windows and previews
PRESET_COMPACT: Dict[str, Any] = dict(DEFAULT_FORMAT, max_line_length=60)

# Indented verses separated by a blank line, for annotation
PRESET_STUDY: Dict[str, Any] = dict(DEFAULT_FORMAT, indent_size=2, verse_spacing=1)

# Paragraph-style reading, verses run on
PRESET_CONTINUOUS: Dict[str, Any] = dict(DEFAULT_FORMAT, break_verses=False)

PRESETS: Dict[str, Dict[str, Any]] = {
    "default": DEFAULT_FORMAT,
    "compact": PRESET_COMPACT,
    "study": PRESET_STUDY,
    "continuous": PRESET_CONTINUOUS,
}

_INT_FIELDS = {"max_line_length": 1, "indent_size": 0, "verse_spacing": 0}
_BOOL_FIELDS = ("chapter_header", "break_verses")


def resolve_preset(name: str) -> Dict[str, Any]:
    """Return a copy of the named preset.

    Raises:
        ValueError: If the preset name is not recognized.
    """
    key = name.strip().lower()
    if key not in PRESETS:
        raise ValueError(
            "Unknown preset '{}'. Available: {}".format(name, ", ".join(PRESETS.keys()))
        )
    return copy.deepcopy(PRESETS[key])


def merge_format_options(
    overrides: Optional[Mapping[str, Any]] = None,
    base: Optional[Mapping[str, Any]] = None,
) -> FormatConfig:
    """Merge per-field overrides onto a base layout and validate the result.

    WHY: Options arrive from several layers (environment, presets, flags,
    query parameters), each setting only some fields. The merge makes the
    per-field precedence explicit: a given value wins, None falls through.

    HOW: Copies base (DEFAULT_FORMAT when omitted), rejects unknown keys,
    replaces every field whose override is not None, then validates ranges
    and types before building the FormatConfig.

    Args:
        overrides: Partial mapping of FormatConfig field names to values.
        base: Full or partial base mapping. Missing fields fall back to
            DEFAULT_FORMAT.

    Returns:
        A validated, immutable FormatConfig.

    Raises:
        ValueError: On unknown option names or out-of-range values.
    """
    merged = copy.deepcopy(DEFAULT_FORMAT)
    for source in (base, overrides):
        if not source:
            continue
        unknown = sorted(set(source) - set(DEFAULT_FORMAT))
        if unknown:
            raise ValueError(
                "Unknown format option(s): {}. Available: {}".format(
                    ", ".join(unknown), ", ".join(DEFAULT_FORMAT.keys())
                )
            )
        for key, value in source.items():
            if value is not None:
                merged[key] = value

    _validate(merged)
    return FormatConfig(**merged)


def _validate(options: Dict[str, Any]) -> None:
    for key, minimum in _INT_FIELDS.items():
        value = options[key]
        # bool is an int subclass; True is not a line length
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError("{} must be an integer, got {!r}".format(key, value))
        if value < minimum:
            raise ValueError("{} must be >= {}, got {}".format(key, minimum, value))

    for key in _BOOL_FIELDS:
        if not isinstance(options[key], bool):
            raise ValueError("{} must be true or false, got {!r}".format(key, options[key]))
