"""Async HTTP client for the Bible translation source.

WHY: The reader needs to list the translations the source publishes and
download translation files into the local data directory. This module
encapsulates that behind a single client class so callers (CLI, HTTP API,
tests) don't need to know HTTP details.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. BibleSourceClient is an
async context manager — enter it to get a configured client, exit to close
the connection pool. fetch_index() returns the parsed index;
download_translation() streams a translation's JSON to disk.

RULES:
- Always use the async context manager (async with BibleSourceClient() as client:)
- Redirects are followed (raw GitHub URLs may redirect)
- Non-200 responses raise SourceAPIError with the status and body
- Downloads are written to a temporary sibling file, then renamed, so a
  failed download never leaves a truncated translation behind
- Status callback (on_status) is optional; when provided, called with status strings
- File writes run in the default executor so the event loop never blocks on disk
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path

import httpx

from bible_reader.api.models import LanguageEntry, parse_index
from bible_reader.config import BIBLE_SOURCE_URL, INDEX_FILENAME

logger = logging.getLogger(__name__)


def _write_chunk(f, chunk: bytes) -> None:
    f.write(chunk)


class SourceAPIError(Exception):
    """Raised when the translation source returns an error response.

    WHY: Callers need a typed exception to distinguish source errors (unknown
    translation, rate limiting) from network errors or local failures.

    RULES:
    - Always include status_code and message
    - message is the response body text or a summary
    """

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"Translation source error {status_code}: {message}")


class BibleSourceClient:
    """Async client for the translation source.

    HOW: Wraps httpx.AsyncClient with the source base URL. Use as an async
    context manager so the connection pool is closed.

    RULES:
    - Use as: async with BibleSourceClient() as client: ...
    - base_url defaults to BIBLE_SOURCE_URL from config
    - transport is for tests (httpx.MockTransport)
    """

    def __init__(
        self,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = (base_url or BIBLE_SOURCE_URL).rstrip("/")
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> BibleSourceClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            follow_redirects=True,
            timeout=httpx.Timeout(120.0, connect=30.0),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "BibleSourceClient must be used as an async context manager: "
                "async with BibleSourceClient() as client: ..."
            )
        return self._client

    # ------------------------------------------------------------------
    # Index
    # ------------------------------------------------------------------

    async def fetch_index_raw(
        self,
        on_status: Callable[[str], None] | None = None,
    ) -> list:
        """Fetch index.json as served (a list of language dicts).

        RULES:
        - Raises SourceAPIError on non-200 responses
        - Raises SourceAPIError if the body is not a JSON list
        """
        client = self._ensure_client()
        if on_status:
            on_status("Fetching translation index...")

        resp = await client.get(f"/{INDEX_FILENAME}")
        if resp.status_code != 200:
            raise SourceAPIError(resp.status_code, resp.text)

        try:
            data = resp.json()
        except ValueError:
            raise SourceAPIError(resp.status_code, "Index is not valid JSON") from None
        if not isinstance(data, list):
            raise SourceAPIError(resp.status_code, "Index is not a list of languages")
        return data

    async def fetch_index(
        self,
        on_status: Callable[[str], None] | None = None,
    ) -> list[LanguageEntry]:
        """Fetch and parse the translation index."""
        return parse_index(await self.fetch_index_raw(on_status=on_status))

    # ------------------------------------------------------------------
    # Translations
    # ------------------------------------------------------------------

    async def download_translation(
        self,
        abbreviation: str,
        dest: Path,
        on_status: Callable[[str], None] | None = None,
    ) -> Path:
        """Download a translation's JSON file to dest.

        WHY: Translations are read from disk; the source is only contacted
        when the user asks for a new translation.

        HOW: Streams GET /{abbreviation}.json into dest with a ".part" suffix,
        then renames it into place.

        RULES:
        - Raises SourceAPIError on non-200 responses (nothing is written)
        - dest's parent directory must exist
        - Returns dest

        Args:
            abbreviation: Translation identifier, e.g. "en_kjv".
            dest: Final path of the JSON file.
            on_status: Optional callback for status updates.
        """
        client = self._ensure_client()
        if on_status:
            on_status(f"Downloading {abbreviation}...")

        dest = Path(dest)
        partial = dest.with_name(dest.name + ".part")

        async with client.stream("GET", f"/{abbreviation}.json") as resp:
            if resp.status_code != 200:
                body = (await resp.aread()).decode("utf-8", errors="replace")
                raise SourceAPIError(resp.status_code, body)

            try:
                loop = asyncio.get_running_loop()
                with open(partial, "wb") as f:
                    async for chunk in resp.aiter_bytes():
                        await loop.run_in_executor(None, _write_chunk, f, chunk)
            except BaseException:
                partial.unlink(missing_ok=True)
                raise

        partial.replace(dest)
        logger.info("Downloaded %s to %s", abbreviation, dest)
        if on_status:
            on_status(f"Saved {dest.name}")
        return dest
