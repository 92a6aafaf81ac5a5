"""FastAPI application serving translations and rendered chapters.

WHY: Editors, web front ends and scripts need the same chapter text the CLI
prints, without shelling out. An HTTP API exposes the reader's catalog,
downloads, book listings and chapter rendering, with automatic OpenAPI
documentation and query validation.

HOW: A single FastAPI app exposes endpoints grouped by tags. The translation
store is a module-level singleton provided through the get_store dependency;
the source client is created per request through get_source_client. Every
chapter request builds its own ReaderSession, so layout options in one
request never leak into another.

RULES:
- Error responses use a consistent ErrorResponse schema
- 404: translation not downloaded, unknown book, chapter out of range
- 400: invalid layout options or unknown preset
- 422: translation file present but unusable
- 502: the translation source failed
- Layout precedence per request: defaults < preset < BIBLE_* env < query
- Store-bound endpoints are plain functions (run in the threadpool);
  source-bound endpoints are async
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Annotated, List, Optional

import httpx
from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.responses import PlainTextResponse

from verse_layout import resolve_preset

from bible_reader import __version__
from bible_reader.api.client import BibleSourceClient, SourceAPIError
from bible_reader.config import (
    DEFAULT_TRANSLATION,
    SERVER_HOST,
    SERVER_PORT,
    default_data_dir,
)
from bible_reader.core.bible import BookNotFoundError, ChapterNotFoundError
from bible_reader.core.catalog import download_translation, index_entries, load_index
from bible_reader.core.session import ChapterView, ReaderSession
from bible_reader.core.store import (
    InvalidTranslationError,
    TranslationNotFoundError,
    TranslationStore,
)
from bible_reader.i18n import get_messages
from bible_reader.server.models import (
    BookInfo,
    BookListResponse,
    CatalogEntryResponse,
    ChapterResponse,
    DownloadResponse,
    ErrorResponse,
    HealthResponse,
    PreviewResponse,
    TranslationInfo,
    TranslationListResponse,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# App and dependencies
# ---------------------------------------------------------------------------

translation_store = TranslationStore(default_data_dir())


def get_store() -> TranslationStore:
    return translation_store


def get_source_client() -> BibleSourceClient:
    return BibleSourceClient()


StoreDep = Annotated[TranslationStore, Depends(get_store)]
ClientDep = Annotated[BibleSourceClient, Depends(get_source_client)]
LanguageQuery = Annotated[
    Optional[str],
    Query(description="UI language for titles: en, pt_br, es, fr, de, it."),
]

app = FastAPI(
    title="Bible Reader API",
    description=(
        "Browse downloaded Bible translations and read chapters rendered as "
        "word-wrapped, verse-numbered text lines. Translations are downloaded "
        "on request from the public translation source."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

_NOT_FOUND = (TranslationNotFoundError, BookNotFoundError, ChapterNotFoundError)


def _http_error(exc: Exception) -> HTTPException:
    """Map a reader exception to the HTTP status it is reported with."""
    if isinstance(exc, _NOT_FOUND):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, InvalidTranslationError):
        return HTTPException(status_code=422, detail=str(exc))
    if isinstance(exc, SourceAPIError):
        return HTTPException(status_code=502, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))


_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid layout options"},
    404: {"model": ErrorResponse, "description": "Translation, book or chapter not found"},
    422: {"model": ErrorResponse, "description": "Translation file is unusable"},
}


# ---------------------------------------------------------------------------
# Endpoints: Translations
# ---------------------------------------------------------------------------


@app.get(
    "/translations",
    response_model=TranslationListResponse,
    tags=["translations"],
    summary="List downloaded translations",
)
def list_translations(store: StoreDep, language: LanguageQuery = None) -> TranslationListResponse:
    selected = store.selected_translation() or DEFAULT_TRANSLATION
    return TranslationListResponse(
        title=get_messages(language).bible_translations,
        translations=[
            TranslationInfo(abbreviation=t, current=(t == selected))
            for t in store.available_translations()
        ],
    )


@app.get(
    "/catalog",
    response_model=List[CatalogEntryResponse],
    tags=["translations"],
    summary="List downloadable translations",
    description="Translations published by the source. The index is cached after the first fetch.",
    responses={502: {"model": ErrorResponse, "description": "Translation source failed"}},
)
async def list_catalog(
    store: StoreDep,
    client: ClientDep,
    refresh: Annotated[bool, Query(description="Refetch the index from the source.")] = False,
) -> List[CatalogEntryResponse]:
    try:
        async with client:
            languages = await load_index(store, client, refresh=refresh)
    except SourceAPIError as e:
        raise _http_error(e) from e
    except httpx.HTTPError as e:
        logger.exception("Catalog fetch failed")
        raise HTTPException(status_code=502, detail=f"Translation source unreachable: {e}") from e
    return [
        CatalogEntryResponse(
            language=entry.language,
            name=entry.name,
            abbreviation=entry.abbreviation,
            display=entry.display,
        )
        for entry in index_entries(languages)
    ]


@app.post(
    "/translations/{abbreviation}",
    response_model=DownloadResponse,
    status_code=201,
    tags=["translations"],
    summary="Download a translation",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid translation abbreviation"},
        502: {"model": ErrorResponse, "description": "Translation source failed"},
    },
)
async def create_translation(
    abbreviation: str,
    store: StoreDep,
    client: ClientDep,
) -> DownloadResponse:
    try:
        async with client:
            path = await download_translation(store, client, abbreviation)
    except ValueError as e:
        raise _http_error(e) from e
    except SourceAPIError as e:
        logger.warning("Download of %s failed: %s", abbreviation, e)
        raise _http_error(e) from e
    except httpx.HTTPError as e:
        logger.exception("Download of %s failed", abbreviation)
        raise HTTPException(status_code=502, detail=f"Translation source unreachable: {e}") from e
    return DownloadResponse(abbreviation=abbreviation, filename=path.name, size=path.stat().st_size)


# ---------------------------------------------------------------------------
# Endpoints: Books and chapters
# ---------------------------------------------------------------------------


@app.get(
    "/translations/{abbreviation}/books",
    response_model=BookListResponse,
    tags=["books"],
    summary="List the books of a translation",
    responses=_ERROR_RESPONSES,
)
def list_books(
    abbreviation: str,
    store: StoreDep,
    language: LanguageQuery = None,
) -> BookListResponse:
    session = ReaderSession(store, translation=abbreviation, language=language)
    try:
        books = session.list_books()
    except (*_NOT_FOUND, InvalidTranslationError) as e:
        raise _http_error(e) from e
    messages = session.messages
    return BookListResponse(
        translation=abbreviation,
        title=messages.bible_books,
        books=[
            BookInfo(
                index=b.index,
                abbrev=b.abbrev,
                name=b.name,
                chapter_count=b.chapter_count,
                display=messages.book_format.format(b.name, b.chapter_count),
            )
            for b in books
        ],
    )


def _render_chapter(
    store: TranslationStore,
    abbreviation: str,
    book: str,
    chapter: int,
    verse: Optional[int],
    language: Optional[str],
    preset: Optional[str],
    overrides: dict,
) -> tuple[ReaderSession, ChapterView]:
    try:
        base = resolve_preset(preset) if preset else None
        session = ReaderSession.from_env(
            store, overrides=overrides, base=base, translation=abbreviation, language=language
        )
        return session, session.open_chapter(book, chapter, verse)
    except (*_NOT_FOUND, InvalidTranslationError, ValueError) as e:
        raise _http_error(e) from e


@dataclass
class ChapterOptions:
    """Query parameters shared by the chapter endpoints."""

    verse: Optional[int]
    language: Optional[str]
    preset: Optional[str]
    overrides: dict


def chapter_options(
    verse: Annotated[Optional[int], Query(ge=1, description="Verse to place the cursor on.")] = None,
    language: LanguageQuery = None,
    preset: Annotated[Optional[str], Query(description="Named layout: default, compact, study, continuous.")] = None,
    max_line_length: Annotated[Optional[int], Query(description="Wrap width in characters.")] = None,
    indent_size: Annotated[Optional[int], Query(description="Spaces before every text line.")] = None,
    verse_spacing: Annotated[Optional[int], Query(description="Blank lines after the header and each verse.")] = None,
    chapter_header: Annotated[Optional[bool], Query(description="Show the chapter header.")] = None,
    break_verses: Annotated[Optional[bool], Query(description="Start every verse on a new line.")] = None,
) -> ChapterOptions:
    return ChapterOptions(
        verse=verse,
        language=language,
        preset=preset,
        overrides={
            "max_line_length": max_line_length,
            "indent_size": indent_size,
            "verse_spacing": verse_spacing,
            "chapter_header": chapter_header,
            "break_verses": break_verses,
        },
    )


ChapterOptionsDep = Annotated[ChapterOptions, Depends(chapter_options)]


@app.get(
    "/translations/{abbreviation}/books/{book}/chapters/{chapter}",
    response_model=ChapterResponse,
    tags=["chapters"],
    summary="Render a chapter",
    description=(
        "Renders the chapter through the layout engine. Book may be a name, "
        "an abbreviation or a 1-based position."
    ),
    responses=_ERROR_RESPONSES,
)
def read_chapter(
    abbreviation: str,
    book: str,
    chapter: int,
    store: StoreDep,
    query: ChapterOptionsDep,
) -> ChapterResponse:
    session, view = _render_chapter(
        store, abbreviation, book, chapter,
        query.verse, query.language, query.preset, query.overrides,
    )
    return ChapterResponse(
        translation=view.state.translation,
        book=view.state.book,
        book_index=view.state.book_index,
        chapter=view.state.chapter,
        verse=view.state.verse,
        title=session.messages.chapter.format(view.state.chapter),
        buffer_name=view.buffer_name,
        cursor_line=view.cursor_line,
        lines=view.lines,
    )


@app.get(
    "/translations/{abbreviation}/books/{book}/chapters/{chapter}/text",
    response_class=PlainTextResponse,
    tags=["chapters"],
    summary="Render a chapter as plain text",
    responses=_ERROR_RESPONSES,
)
def read_chapter_text(
    abbreviation: str,
    book: str,
    chapter: int,
    store: StoreDep,
    query: ChapterOptionsDep,
) -> PlainTextResponse:
    _, view = _render_chapter(
        store, abbreviation, book, chapter,
        query.verse, query.language, query.preset, query.overrides,
    )
    return PlainTextResponse("\n".join(view.lines) + "\n")


@app.get(
    "/translations/{abbreviation}/books/{book}/chapters/{chapter}/preview",
    response_model=PreviewResponse,
    tags=["chapters"],
    summary="Preview a chapter",
    description=(
        "Renders a chapter for a picker preview pane. Same layout options as "
        "the chapter endpoint; nothing about the reader's position is returned."
    ),
    responses=_ERROR_RESPONSES,
)
def read_chapter_preview(
    abbreviation: str,
    book: str,
    chapter: int,
    store: StoreDep,
    query: ChapterOptionsDep,
) -> PreviewResponse:
    try:
        base = resolve_preset(query.preset) if query.preset else None
        session = ReaderSession.from_env(
            store, overrides=query.overrides, base=base,
            translation=abbreviation, language=query.language,
        )
        lines = session.preview_chapter(book, chapter)
    except (*_NOT_FOUND, InvalidTranslationError, ValueError) as e:
        raise _http_error(e) from e
    return PreviewResponse(title=session.messages.chapter_preview, lines=lines)


# ---------------------------------------------------------------------------
# Endpoints: Health
# ---------------------------------------------------------------------------


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
)
def health_check(store: StoreDep) -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=__version__,
        translations=len(store.available_translations()),
    )


def serve() -> None:
    """Run the API under uvicorn (``python -m bible_reader --serve``)."""
    import uvicorn
    uvicorn.run(app, host=SERVER_HOST, port=SERVER_PORT)


if __name__ == "__main__":
    serve()
