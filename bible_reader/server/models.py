"""Pydantic response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for response serialization and
automatic OpenAPI documentation. Pydantic models enforce field types at
runtime and generate JSON Schema that appears in the /docs UI.

HOW: Each endpoint has its own response model. All models include Field
descriptions for rich OpenAPI docs.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Response models never expose store or session internals
- cursor_line is 0-based, matching ChapterView
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class TranslationInfo(BaseModel):
    """A downloaded translation."""

    abbreviation: str = Field(description="Translation identifier, e.g. 'en_kjv'.")
    current: bool = Field(description="True for the server's default translation.")


class TranslationListResponse(BaseModel):
    """Downloaded translations with the localized listing title."""

    title: str = Field(description="Localized heading, e.g. 'Bible Translations'.")
    translations: List[TranslationInfo] = Field(description="Downloaded translations.")


class CatalogEntryResponse(BaseModel):
    """One downloadable translation from the source index."""

    language: str = Field(description="Language name as listed by the source.")
    name: str = Field(description="Translation title.")
    abbreviation: str = Field(description="Identifier to download, e.g. 'en_kjv'.")
    display: str = Field(description="'{language} - {name} ({abbreviation})'.")


class DownloadResponse(BaseModel):
    """Result of a translation download."""

    abbreviation: str = Field(description="The downloaded translation.")
    filename: str = Field(description="File name in the data directory.")
    size: int = Field(description="File size in bytes.")


class BookInfo(BaseModel):
    """A book of a translation."""

    index: int = Field(description="1-based position in the translation.")
    abbrev: str = Field(description="Book abbreviation, e.g. 'gn'.")
    name: str = Field(description="Book name, e.g. 'Genesis'.")
    chapter_count: int = Field(description="Number of chapters.")
    display: str = Field(description="Localized listing text, e.g. 'Genesis (50 chapters)'.")


class BookListResponse(BaseModel):
    """Books of a translation with the localized listing title."""

    translation: str = Field(description="Translation identifier.")
    title: str = Field(description="Localized heading, e.g. 'Bible Books'.")
    books: List[BookInfo] = Field(description="Books in canonical order.")


class ChapterResponse(BaseModel):
    """A rendered chapter.

    RULES:
    - lines are exactly what the layout engine produced
    - cursor_line is 0 when no verse was requested or it was not found
    """

    translation: str = Field(description="Translation identifier.")
    book: str = Field(description="Book name.")
    book_index: int = Field(description="1-based book position.")
    chapter: int = Field(description="Chapter number.")
    verse: Optional[int] = Field(default=None, description="Requested verse, if any.")
    title: str = Field(description="Localized chapter title, e.g. 'Chapter 3'.")
    buffer_name: str = Field(description="Stable chapter name, e.g. 'bible://en_kjv/John/3'.")
    cursor_line: int = Field(description="0-based line holding the requested verse.")
    lines: List[str] = Field(description="Display lines.")

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "translation": "en_kjv",
                "book": "John",
                "book_index": 43,
                "chapter": 3,
                "verse": 16,
                "title": "Chapter 3",
                "buffer_name": "bible://en_kjv/John/3",
                "cursor_line": 17,
                "lines": ["═══ JOHN 3 ═══", "¹ There was a man of the Pharisees..."],
            }
        ]
    }}


class PreviewResponse(BaseModel):
    """A chapter rendered for a preview pane."""

    title: str = Field(description="Localized heading, e.g. 'Chapter Preview'.")
    lines: List[str] = Field(description="Display lines.")


class ErrorResponse(BaseModel):
    """Standard error response body.

    RULES:
    - detail is always a human-readable error message
    """

    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
    translations: int = Field(description="Number of downloaded translations.")
