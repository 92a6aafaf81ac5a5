"""On-disk translation store with an in-memory cache.

WHY: Translations are large JSON files downloaded once and read many times.
The session needs to list what is downloaded, load a translation quickly
after the first read, and recover cleanly from files that are empty,
truncated or not translations at all.

HOW: TranslationStore wraps a data directory holding <abbreviation>.json
files plus a cached index.json. load() reads the bytes, strips or decodes
byte-order marks, parses the JSON, validates its shape with jsonschema and
caches the resulting Translation per store instance.

RULES:
- available_translations() lists *.json stems except index.json, sorted
- A missing data directory is not an error: nothing is available
- Empty file → InvalidTranslationError (file kept)
- Undecodable JSON → the file is removed and InvalidTranslationError asks
  for a fresh download
- Valid JSON of the wrong shape, or with no books → InvalidTranslationError
  (file kept)
- Abbreviations are file stems: letters, digits, "_" and "-", never "index"
- The selected translation is kept in reader.env in the data directory
- invalidate() must be called after a translation file is replaced
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

import jsonschema
from dotenv import dotenv_values, set_key

from bible_reader.config import INDEX_FILENAME, SELECTION_FILENAME
from bible_reader.core.bible import Translation

logger = logging.getLogger(__name__)

_UTF8_BOM = b"\xef\xbb\xbf"
_UTF16_BOMS = (b"\xfe\xff", b"\xff\xfe")
_ABBREVIATION_RE = re.compile(r"^[A-Za-z0-9_-]+$")
_INDEX_STEM = Path(INDEX_FILENAME).stem

SELECTED_TRANSLATION_KEY = "BIBLE_TRANSLATION"

TRANSLATION_SCHEMA: dict = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "abbrev": {"type": "string"},
            "name": {"type": "string"},
            "chapters": {
                "type": "array",
                "items": {"type": "array", "items": {"type": "string"}},
            },
        },
        "required": ["abbrev", "chapters"],
    },
}
"""Shape of a translation file: a list of books with chapters of verse strings."""


class TranslationNotFoundError(LookupError):
    """Raised when a translation has not been downloaded."""


class InvalidTranslationError(ValueError):
    """Raised when a translation file exists but cannot be used."""


def check_abbreviation(abbreviation: str) -> str:
    """Return a usable translation abbreviation or raise ValueError.

    Abbreviations become file names in the data directory, so path
    separators and the index cache name are rejected.
    """
    value = abbreviation.strip()
    if not _ABBREVIATION_RE.match(value) or value.lower() == _INDEX_STEM:
        raise ValueError(f"Invalid translation abbreviation: {abbreviation!r}")
    return value


def decode_json_bytes(content: bytes) -> str:
    """Decode file bytes to text, honouring a UTF-8 or UTF-16 byte-order mark."""
    if content.startswith(_UTF8_BOM):
        return content[len(_UTF8_BOM):].decode("utf-8")
    if content.startswith(_UTF16_BOMS):
        return content.decode("utf-16")
    return content.decode("utf-8")


class TranslationStore:
    """Directory of downloaded translations.

    RULES:
    - One cache per store; tests get isolation by using a fresh store
    - Paths are <data_dir>/<abbreviation>.json
    """

    def __init__(self, data_dir: str | Path) -> None:
        self.data_dir = Path(data_dir)
        self._cache: dict[str, Translation] = {}

    @property
    def index_path(self) -> Path:
        return self.data_dir / INDEX_FILENAME

    def translation_path(self, abbreviation: str) -> Path:
        return self.data_dir / f"{abbreviation}.json"

    def ensure_data_dir(self) -> Path:
        """Create the data directory (and parents) if needed."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        return self.data_dir

    # ------------------------------------------------------------------
    # Translations
    # ------------------------------------------------------------------

    def available_translations(self) -> list[str]:
        """Return the abbreviations of downloaded translations."""
        if not self.data_dir.is_dir():
            return []
        return sorted(
            path.stem
            for path in self.data_dir.glob("*.json")
            if path.is_file() and path.name != INDEX_FILENAME
        )

    def load(self, abbreviation: str) -> Translation:
        """Load a translation, from cache after the first read.

        Raises:
            TranslationNotFoundError: If the file does not exist.
            InvalidTranslationError: If the file is empty, not JSON (the file
                is then removed), or not shaped like a translation.
        """
        cached = self._cache.get(abbreviation)
        if cached is not None:
            return cached

        path = self.translation_path(abbreviation)
        if not path.is_file():
            raise TranslationNotFoundError(f"Bible file does not exist: {path}")

        content = path.read_bytes()
        if not content:
            raise InvalidTranslationError(f"Bible file is empty: {path}")

        try:
            data = json.loads(decode_json_bytes(content))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            path.unlink(missing_ok=True)
            logger.warning("Removed invalid translation file %s: %s", path, e)
            raise InvalidTranslationError(
                f"Failed to parse Bible JSON for translation {abbreviation}: {e}. "
                "Invalid JSON file removed. Please try downloading again."
            ) from e

        try:
            jsonschema.validate(instance=data, schema=TRANSLATION_SCHEMA)
        except jsonschema.ValidationError as e:
            raise InvalidTranslationError(
                f"{path.name} is not a Bible translation: {e.message}"
            ) from e

        translation = Translation.from_json(abbreviation, data)
        if not translation.books:
            raise InvalidTranslationError(f"{path.name} contains no books")
        self._cache[abbreviation] = translation
        logger.debug("Loaded %s (%d books)", abbreviation, len(translation.books))
        return translation

    def invalidate(self, abbreviation: str) -> None:
        """Drop a translation from the cache so the next load re-reads it."""
        self._cache.pop(abbreviation, None)

    # ------------------------------------------------------------------
    # Index cache
    # ------------------------------------------------------------------

    def load_index(self) -> list | None:
        """Return the cached index.json, or None if absent or unreadable."""
        path = self.index_path
        if not path.is_file():
            return None
        try:
            data = json.loads(decode_json_bytes(path.read_bytes()))
        except (UnicodeDecodeError, json.JSONDecodeError):
            logger.warning("Ignoring unreadable index cache %s", path)
            return None
        return data if isinstance(data, list) else None

    def save_index(self, data: list) -> Path:
        """Write the index cache."""
        self.ensure_data_dir()
        self.index_path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
        return self.index_path

    # ------------------------------------------------------------------
    # Selected translation
    # ------------------------------------------------------------------

    @property
    def selection_path(self) -> Path:
        return self.data_dir / SELECTION_FILENAME

    def selected_translation(self) -> str | None:
        """Return the translation saved by save_selected_translation(), if any."""
        if not self.selection_path.is_file():
            return None
        value = dotenv_values(self.selection_path).get(SELECTED_TRANSLATION_KEY)
        return value or None

    def save_selected_translation(self, abbreviation: str) -> Path:
        """Remember the selected translation for later sessions."""
        self.ensure_data_dir()
        self.selection_path.touch(exist_ok=True)
        set_key(str(self.selection_path), SELECTED_TRANSLATION_KEY, abbreviation)
        logger.debug("Saved selected translation %s to %s", abbreviation, self.selection_path)
        return self.selection_path
