"""Bible Reader — download Bible translations and read them as formatted text.

WHY: Translation data is published as large JSON files of bare verse
strings. Reading them needs the files fetched and cached, books and
chapters looked up, and chapters laid out as numbered, word-wrapped lines
for a terminal or any other text surface.

HOW: Three layers — the source client (api) downloads translations, the
core (store, catalog, session) loads them and tracks what is open, and the
verse_layout library renders chapters. The CLI and the HTTP API are thin
shells over the session.

RULES:
- All layout goes through verse_layout.format_chapter()
- Reader state lives in an explicit ReaderSession, never in module globals
"""

__version__ = "0.1.0"
