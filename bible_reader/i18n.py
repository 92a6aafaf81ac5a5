"""UI message tables for the supported interface languages.

WHY: Headings and listings ("Bible Books", "Genesis (50 chapters)") are shown
in the reader's language. Looking strings up by arbitrary keys in nested
dicts fails late and silently; a closed set of languages mapped to a typed
record of templates fails at import time instead, and the fallback for an
unknown language is stated once, here.

HOW: Language is a str Enum of the supported codes. Messages is a frozen
dataclass of str.format templates. MESSAGES maps every Language to its
Messages. resolve_language() normalizes a user-supplied code and falls back
to English.

RULES:
- Every Language member has an entry in MESSAGES
- Templates use positional "{}" placeholders:
    changed_translation(translation), chapter(number), select_chapter(book),
    book_format(name, chapter_count)
- Unknown codes resolve to Language.EN (logged at debug level)
- Codes are matched case-insensitively, "pt-BR" == "pt_br"
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class Language(str, enum.Enum):
    """Supported UI languages."""

    EN = "en"
    PT_BR = "pt_br"
    ES = "es"
    FR = "fr"
    DE = "de"
    IT = "it"


FALLBACK_LANGUAGE = Language.EN


@dataclass(frozen=True)
class Messages:
    """UI string templates for one language."""

    bible_translations: str
    changed_translation: str
    chapter: str
    chapter_preview: str
    select_chapter: str
    bible_books: str
    book_format: str


MESSAGES: dict[Language, Messages] = {
    Language.EN: Messages(
        bible_translations="Bible Translations",
        changed_translation="Changed translation to {}",
        chapter="Chapter {}",
        chapter_preview="Chapter Preview",
        select_chapter="{} - Select Chapter",
        bible_books="Bible Books",
        book_format="{} ({} chapters)",
    ),
    Language.PT_BR: Messages(
        bible_translations="Traduções da Bíblia",
        changed_translation="Mudou a tradução para {}",
        chapter="Capítulo {}",
        chapter_preview="Prévia do Capítulo",
        select_chapter="{} - Selecionar Capítulo",
        bible_books="Livros da Bíblia",
        book_format="{} ({} capítulos)",
    ),
    Language.ES: Messages(
        bible_translations="Traducciones de la Biblia",
        changed_translation="Cambiada la traducción a {}",
        chapter="Capítulo {}",
        chapter_preview="Vista previa del capítulo",
        select_chapter="{} - Seleccionar capítulo",
        bible_books="Libros de la Biblia",
        book_format="{} ({} capítulos)",
    ),
    Language.FR: Messages(
        bible_translations="Traductions de la Bible",
        changed_translation="Changé la traduction à {}",
        chapter="Chapitre {}",
        chapter_preview="Aperçu du chapitre",
        select_chapter="{} - Sélectionner le chapitre",
        bible_books="Livres de la Bible",
        book_format="{} ({} chapitres)",
    ),
    Language.DE: Messages(
        bible_translations="Bibelübersetzungen",
        changed_translation="Übersetzung geändert zu {}",
        chapter="Kapitel {}",
        chapter_preview="Kapitelvorschau",
        select_chapter="{} - Kapitel auswählen",
        bible_books="Bücher der Bibel",
        book_format="{} ({} Kapitel)",
    ),
    Language.IT: Messages(
        bible_translations="Traduzioni della Bibbia",
        changed_translation="Traduzione cambiata in {}",
        chapter="Capitolo {}",
        chapter_preview="Anteprima del capitolo",
        select_chapter="{} - Seleziona capitolo",
        bible_books="Libri della Bibbia",
        book_format="{} ({} capitoli)",
    ),
}


def find_language(code: str | None) -> Language | None:
    """Return the Language for a code, or None if it is not supported."""
    if not code:
        return None
    normalized = code.strip().lower().replace("-", "_")
    try:
        return Language(normalized)
    except ValueError:
        return None


def resolve_language(code: str | Language | None) -> Language:
    """Return the Language for a code, falling back to English."""
    if isinstance(code, Language):
        return code
    language = find_language(code)
    if language is None:
        logger.debug("Unsupported UI language %r, using %s", code, FALLBACK_LANGUAGE.value)
        return FALLBACK_LANGUAGE
    return language


def get_messages(code: str | Language | None = None) -> Messages:
    """Return the message templates for a language code (English fallback)."""
    return MESSAGES[resolve_language(code)]
