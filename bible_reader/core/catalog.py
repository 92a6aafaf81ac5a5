"""Catalog of downloadable translations and the download step.

WHY: Picking a translation to download needs the source's index, which
rarely changes, so it is cached next to the translations. Downloading
needs the data directory to exist and the store's cache to forget any
previous copy of that translation.

HOW: load_index() prefers the store's index.json and only fetches (and
persists) it when missing. index_entries() flattens languages × versions
into display rows. download_translation() wires client and store together.

RULES:
- The cached index is used as-is when present; refresh=True refetches
- Catalog rows display as "{language} - {name} ({abbreviation})"
- After a download the store cache entry is invalidated
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from bible_reader.api.client import BibleSourceClient
from bible_reader.api.models import LanguageEntry, parse_index
from bible_reader.core.store import TranslationStore, check_abbreviation

logger = logging.getLogger(__name__)


@dataclass
class CatalogEntry:
    """One downloadable translation, flattened for listing."""

    language: str
    name: str
    abbreviation: str

    @property
    def display(self) -> str:
        return f"{self.language} - {self.name} ({self.abbreviation})"


async def load_index(
    store: TranslationStore,
    client: BibleSourceClient,
    refresh: bool = False,
    on_status: Callable[[str], None] | None = None,
) -> list[LanguageEntry]:
    """Return the translation index, from the local cache when possible."""
    if not refresh:
        cached = store.load_index()
        if cached is not None:
            return parse_index(cached)

    raw = await client.fetch_index_raw(on_status=on_status)
    store.save_index(raw)
    logger.info("Cached translation index (%d languages)", len(raw))
    return parse_index(raw)


def index_entries(languages: list[LanguageEntry]) -> list[CatalogEntry]:
    """Flatten the index into one entry per translation, in index order."""
    return [
        CatalogEntry(language=lang.language, name=version.name, abbreviation=version.abbreviation)
        for lang in languages
        for version in lang.versions
    ]


async def download_translation(
    store: TranslationStore,
    client: BibleSourceClient,
    abbreviation: str,
    on_status: Callable[[str], None] | None = None,
) -> Path:
    """Download a translation into the store's data directory.

    Raises:
        ValueError: If abbreviation is not a valid file stem (e.g. "index").
        SourceAPIError: If the source rejects the request.
    """
    abbreviation = check_abbreviation(abbreviation)
    store.ensure_data_dir()
    path = await client.download_translation(
        abbreviation, store.translation_path(abbreviation), on_status=on_status
    )
    store.invalidate(abbreviation)
    return path
