"""Translation index dataclasses.

WHY: The translation source publishes an index.json listing every available
translation grouped by language. Typed dataclasses make that structure
explicit for the catalog, the CLI and the HTTP API, and catch field
mismatches early.

HOW: Each dataclass maps 1:1 to a JSON object in index.json. Factory
methods (from_dict) parse raw dicts; parse_index() parses the whole
document.

RULES:
- index.json is a list of {"language": str, "versions": [{"name", "abbreviation"}]}
- A version's abbreviation is the translation's file stem (e.g. "en_kjv")
- Entries that are not objects are skipped
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class TranslationVersion:
    """One downloadable translation listed in the index.

    RULES:
    - abbreviation: file stem on the source and in the data directory
    - name: human-readable title, e.g. "King James Version"
    """

    name: str
    abbreviation: str

    @classmethod
    def from_dict(cls, data: dict) -> TranslationVersion:
        return cls(name=data["name"], abbreviation=data["abbreviation"])


@dataclass
class LanguageEntry:
    """A language and the translations available in it."""

    language: str
    versions: list[TranslationVersion] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> LanguageEntry:
        """Parse a LanguageEntry from a raw index dict.

        RULES:
        - language is required
        - versions defaults to an empty list; non-object versions are skipped
        """
        versions = [
            TranslationVersion.from_dict(v)
            for v in data.get("versions", [])
            if isinstance(v, dict)
        ]
        return cls(language=data["language"], versions=versions)


def parse_index(data: list) -> list[LanguageEntry]:
    """Parse the whole index.json document."""
    return [LanguageEntry.from_dict(item) for item in data if isinstance(item, dict)]
