"""Tests for the translation source client (bible_reader.api.client).

WHY: Downloads are the only network traffic. A failed download must never
leave a half-written translation file behind, and source errors must arrive
as SourceAPIError so the CLI and the API can report them.

HOW: httpx.MockTransport stands in for the source. Async client methods run
inside asyncio.run() from ordinary sync tests.
"""

import asyncio
import threading
import json

import httpx
import pytest

from bible_reader.api.client import BibleSourceClient, SourceAPIError
from bible_reader.api.models import LanguageEntry, TranslationVersion, parse_index

BASE_URL = "https://bibles.example/json"

INDEX = [
    {
        "language": "English",
        "versions": [
            {"name": "King James Version", "abbreviation": "en_kjv"},
            {"name": "Basic English", "abbreviation": "en_bbe"},
        ],
    },
    {"language": "Português", "versions": [{"name": "Nova Versão Internacional", "abbreviation": "pt_nvi"}]},
]


def _client(handler):
    return BibleSourceClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))


def _run(coro):
    return asyncio.run(coro)


class TestIndexModels:

    def test_parse_index(self):
        languages = parse_index(INDEX)
        assert languages[0] == LanguageEntry(
            language="English",
            versions=[
                TranslationVersion(name="King James Version", abbreviation="en_kjv"),
                TranslationVersion(name="Basic English", abbreviation="en_bbe"),
            ],
        )

    def test_non_objects_skipped(self):
        languages = parse_index([{"language": "Deutsch", "versions": ["x"]}, "junk"])
        assert languages == [LanguageEntry(language="Deutsch", versions=[])]


class TestFetchIndex:

    def test_requests_index_under_base_url(self):
        seen = []

        def handler(request):
            seen.append(request.url.path)
            return httpx.Response(200, json=INDEX)

        async def go():
            async with _client(handler) as client:
                return await client.fetch_index()

        languages = _run(go())
        assert seen == ["/json/index.json"]
        assert [v.abbreviation for v in languages[0].versions] == ["en_kjv", "en_bbe"]

    def test_status_callback(self):
        messages = []

        async def go():
            async with _client(lambda r: httpx.Response(200, json=INDEX)) as client:
                await client.fetch_index_raw(on_status=messages.append)

        _run(go())
        assert messages == ["Fetching translation index..."]

    def test_error_status(self):
        async def go():
            async with _client(lambda r: httpx.Response(503, text="busy")) as client:
                await client.fetch_index_raw()

        with pytest.raises(SourceAPIError) as exc:
            _run(go())
        assert exc.value.status_code == 503
        assert str(exc.value) == "Translation source error 503: busy"

    @pytest.mark.parametrize("body,message", [
        (b"<html>", "Index is not valid JSON"),
        (b'{"English": []}', "Index is not a list of languages"),
    ])
    def test_malformed_index(self, body, message):
        async def go():
            async with _client(lambda r: httpx.Response(200, content=body)) as client:
                await client.fetch_index_raw()

        with pytest.raises(SourceAPIError, match=message):
            _run(go())

    def test_outside_context_manager(self):
        client = _client(lambda r: httpx.Response(200, json=INDEX))
        with pytest.raises(RuntimeError, match="async context manager"):
            _run(client.fetch_index_raw())


class TestDownloadTranslation:

    def test_writes_file(self, tmp_path):
        payload = json.dumps([{"abbrev": "gn", "chapters": [["In the beginning."]]}]).encode("utf-8")

        def handler(request):
            assert request.url.path == "/json/en_kjv.json"
            return httpx.Response(200, content=b"\xef\xbb\xbf" + payload)

        async def go():
            async with _client(handler) as client:
                return await client.download_translation("en_kjv", tmp_path / "en_kjv.json")

        path = _run(go())
        assert path == tmp_path / "en_kjv.json"
        assert path.read_bytes().endswith(payload)
        assert not (tmp_path / "en_kjv.json.part").exists()

    def test_not_found_writes_nothing(self, tmp_path):
        async def go():
            async with _client(lambda r: httpx.Response(404, text="404: Not Found")) as client:
                await client.download_translation("xx_none", tmp_path / "xx_none.json")

        with pytest.raises(SourceAPIError) as exc:
            _run(go())
        assert exc.value.status_code == 404
        assert list(tmp_path.iterdir()) == []

    def test_replaces_existing_file(self, tmp_path):
        dest = tmp_path / "en_kjv.json"
        dest.write_text("old", encoding="utf-8")

        async def go():
            async with _client(lambda r: httpx.Response(200, content=b"[]")) as client:
                await client.download_translation("en_kjv", dest)

        _run(go())
        assert dest.read_bytes() == b"[]"

    def test_chunks_written_off_the_event_loop(self, tmp_path, monkeypatch):
        from bible_reader.api import client as client_module

        threads = []
        write_chunk = client_module._write_chunk

        def recording_write(f, chunk):
            threads.append(threading.current_thread())
            write_chunk(f, chunk)

        monkeypatch.setattr(client_module, "_write_chunk", recording_write)

        async def go():
            async with _client(lambda r: httpx.Response(200, content=b"[]")) as client:
                await client.download_translation("en_kjv", tmp_path / "en_kjv.json")

        _run(go())
        assert threads
        assert threading.main_thread() not in threads
        assert (tmp_path / "en_kjv.json").read_bytes() == b"[]"
