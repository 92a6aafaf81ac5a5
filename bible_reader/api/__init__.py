"""Translation source package — async HTTP interface to the Bible JSON source.

WHY: The reader downloads its translations from a public repository of JSON
files. This package keeps all of that network access behind one client.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. Index data is parsed into
typed dataclasses defined in models.py.

RULES:
- All requests to the source go through BibleSourceClient
"""

from bible_reader.api.client import BibleSourceClient, SourceAPIError
from bible_reader.api.models import LanguageEntry, TranslationVersion

__all__ = ["BibleSourceClient", "SourceAPIError", "LanguageEntry", "TranslationVersion"]
