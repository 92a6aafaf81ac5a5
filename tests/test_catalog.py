"""Tests for catalog caching and downloads (bible_reader.core.catalog).

WHY: The catalog is fetched once and cached in the data directory; a new
download must replace any cached copy of the translation in the store.

HOW: A BibleSourceClient over httpx.MockTransport counts requests; the
store fixture supplies the data directory.
"""

import asyncio
import json

import httpx
import pytest

from bible_reader.api.client import BibleSourceClient
from bible_reader.core.catalog import CatalogEntry, download_translation, index_entries, load_index

INDEX = [
    {"language": "English", "versions": [{"name": "King James Version", "abbreviation": "en_kjv"}]},
    {"language": "Deutsch", "versions": [{"name": "Schlachter", "abbreviation": "de_schlachter"}]},
]


class _Source:
    """Fake translation source recording request paths."""

    def __init__(self, files):
        self.files = files
        self.requests = []

    def handler(self, request):
        self.requests.append(request.url.path)
        name = request.url.path.rsplit("/", 1)[-1]
        if name not in self.files:
            return httpx.Response(404, text="404: Not Found")
        return httpx.Response(200, content=self.files[name])

    def client(self):
        return BibleSourceClient(base_url="https://bibles.example", transport=httpx.MockTransport(self.handler))


def _load_index(store, source, **kwargs):
    async def go():
        async with source.client() as client:
            return await load_index(store, client, **kwargs)
    return asyncio.run(go())


class TestLoadIndex:

    def test_fetches_and_caches(self, store):
        source = _Source({"index.json": json.dumps(INDEX).encode("utf-8")})
        languages = _load_index(store, source)
        assert [lang.language for lang in languages] == ["English", "Deutsch"]
        assert store.load_index() == INDEX

        _load_index(store, source)
        assert source.requests == ["/index.json"]

    def test_refresh_refetches(self, store):
        store.save_index([{"language": "Old", "versions": []}])
        source = _Source({"index.json": json.dumps(INDEX).encode("utf-8")})
        languages = _load_index(store, source, refresh=True)
        assert languages[0].language == "English"
        assert source.requests == ["/index.json"]

    def test_cached_index_used_offline(self, store):
        store.save_index(INDEX)
        source = _Source({})
        assert _load_index(store, source)[1].versions[0].abbreviation == "de_schlachter"
        assert source.requests == []


class TestIndexEntries:

    def test_flattens_in_order(self, store):
        store.save_index(INDEX)
        entries = index_entries(_load_index(store, _Source({})))
        assert entries == [
            CatalogEntry(language="English", name="King James Version", abbreviation="en_kjv"),
            CatalogEntry(language="Deutsch", name="Schlachter", abbreviation="de_schlachter"),
        ]
        assert entries[0].display == "English - King James Version (en_kjv)"


class TestDownloadTranslation:

    def test_download_replaces_cached_translation(self, store):
        assert store.load("en_kjv").books[0].name == "Genesis"
        replacement = [{"abbrev": "ps", "name": "Psalms", "chapters": [["Blessed is the man."]]}]
        source = _Source({"en_kjv.json": json.dumps(replacement).encode("utf-8")})

        async def go():
            async with source.client() as client:
                return await download_translation(store, client, "en_kjv")

        path = asyncio.run(go())
        assert path == store.translation_path("en_kjv")
        assert store.load("en_kjv").books[0].name == "Psalms"

    def test_creates_data_directory(self, tmp_path):
        from bible_reader.core.store import TranslationStore

        store = TranslationStore(tmp_path / "fresh")
        source = _Source({"pt_nvi.json": b"[]"})

        async def go():
            async with source.client() as client:
                await download_translation(store, client, "pt_nvi")

        asyncio.run(go())
        assert store.available_translations() == ["pt_nvi"]

    def test_index_name_rejected(self, store):
        store.save_index(INDEX)
        source = _Source({"index.json": b"[]"})

        async def go():
            async with source.client() as client:
                await download_translation(store, client, "index")

        with pytest.raises(ValueError, match="Invalid translation abbreviation"):
            asyncio.run(go())
        assert source.requests == []
        assert store.load_index() == INDEX
