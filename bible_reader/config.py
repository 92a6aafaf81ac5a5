"""Configuration constants, data locations, and .env loading.

WHY: Centralizes all configurable values so they are easy to find, update,
and override: where translations are downloaded from, where they are
stored, which translation and UI language a session starts with, and the
environment-level layout defaults.

HOW: python-dotenv loads the .env file on import. Constants are module-level
strings and paths read with os.getenv. load_format_overrides() turns the
BIBLE_* layout variables into a partial options dict for
verse_layout.merge_format_options().

RULES:
- Every default can be overridden via environment variables (or .env)
- The data directory follows XDG_DATA_HOME when set
- Layout variables that are unset are left out of the overrides, so the
  layout defaults (or a chosen preset) apply
- Malformed layout variables raise ValueError naming the variable
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Translation source
# ---------------------------------------------------------------------------

BIBLE_SOURCE_URL = os.getenv(
    "BIBLE_SOURCE_URL",
    "https://raw.githubusercontent.com/thiagobodruk/bible/master/json",
)
"""Base URL serving index.json and one <abbreviation>.json per translation."""

INDEX_FILENAME = "index.json"
SELECTION_FILENAME = "reader.env"
"""Per-data-directory state: the translation picked with `bible-reader translation`."""


# ---------------------------------------------------------------------------
# Local storage
# ---------------------------------------------------------------------------


def default_data_dir() -> Path:
    """Return the directory downloaded translations live in.

    RULES:
    - BIBLE_READER_DATA_DIR wins when set
    - Otherwise $XDG_DATA_HOME/bible-reader/data
    - Otherwise ~/.local/share/bible-reader/data
    """
    explicit = os.getenv("BIBLE_READER_DATA_DIR", "").strip()
    if explicit:
        return Path(explicit).expanduser()
    xdg_data = os.getenv("XDG_DATA_HOME", "").strip()
    base = Path(xdg_data).expanduser() if xdg_data else Path.home() / ".local" / "share"
    return base / "bible-reader" / "data"


# ---------------------------------------------------------------------------
# Session defaults
# ---------------------------------------------------------------------------

DEFAULT_TRANSLATION = os.getenv("BIBLE_DEFAULT_TRANSLATION", "en_kjv")
DEFAULT_UI_LANGUAGE = os.getenv("BIBLE_UI_LANGUAGE", "en")

BUFFER_NAME_TEMPLATE = "bible://{translation}/{book}/{chapter}"
"""Stable name for a rendered chapter, one per translation/book/chapter."""


# ---------------------------------------------------------------------------
# Layout overrides from the environment
# ---------------------------------------------------------------------------

_FORMAT_ENV_INT: dict[str, str] = {
    "max_line_length": "BIBLE_MAX_LINE_LENGTH",
    "indent_size": "BIBLE_INDENT_SIZE",
    "verse_spacing": "BIBLE_VERSE_SPACING",
}

_FORMAT_ENV_BOOL: dict[str, str] = {
    "chapter_header": "BIBLE_CHAPTER_HEADER",
    "break_verses": "BIBLE_BREAK_VERSES",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def load_format_overrides() -> dict[str, Any]:
    """Read layout overrides from the BIBLE_* environment variables.

    WHY: Users set a preferred width or spacing once in .env instead of
    passing flags on every invocation.

    HOW: Each variable that is set and non-empty is parsed (integers for
    sizes, true/false words for switches) and stored under its FormatConfig
    field name.

    RULES:
    - Unset or empty variables are omitted from the result
    - Range checks happen later, in merge_format_options()
    - Raises ValueError if a value cannot be parsed
    """
    overrides: dict[str, Any] = {}

    for field_name, var in _FORMAT_ENV_INT.items():
        raw = os.getenv(var, "").strip()
        if not raw:
            continue
        try:
            overrides[field_name] = int(raw)
        except ValueError:
            raise ValueError(f"{var} must be an integer, got {raw!r}") from None

    for field_name, var in _FORMAT_ENV_BOOL.items():
        raw = os.getenv(var, "").strip().lower()
        if not raw:
            continue
        if raw in _TRUE_VALUES:
            overrides[field_name] = True
        elif raw in _FALSE_VALUES:
            overrides[field_name] = False
        else:
            raise ValueError(f"{var} must be true or false, got {raw!r}")

    return overrides


# ---------------------------------------------------------------------------
# HTTP API
# ---------------------------------------------------------------------------

SERVER_HOST = os.getenv("BIBLE_READER_HOST", "127.0.0.1")
SERVER_PORT = int(os.getenv("BIBLE_READER_PORT", "8000"))
