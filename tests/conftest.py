"""Shared test fixtures for the bible_reader and verse_layout test suites.

WHY: Most test modules need the same small translation on disk: a store
pointed at it and a session reading from it. Centralizing the sample data
here keeps every test working from the same verses.

HOW: SAMPLE_TRANSLATION mirrors the shape of a real translation file (a
list of books with chapters of verse strings) with the KJV text of a few
verses. Fixtures write it to tmp_path, with a UTF-8 BOM as the published
files have, and build a TranslationStore and ReaderSession over it.

RULES:
- BIBLE_* layout variables are cleared for every test so the developer's
  .env never changes expected output.
- Each test gets its own tmp_path store (no shared cache).
"""

import json
from typing import Any, Dict, List

import pytest

from verse_layout import Verse, merge_format_options


GENESIS_1: List[str] = [
    "In the beginning God created the heaven and the earth.",
    "And the earth was without form, and void; and darkness was upon the face of the deep.",
    "And God said, Let there be light: and there was light.",
]

GENESIS_2: List[str] = [
    "Thus the heavens and the earth were finished, and all the host of them.",
]

JOHN_3: List[str] = [
    "There was a man of the Pharisees, named Nicodemus, a ruler of the Jews:",
    "The same came to Jesus by night, and said unto him, Rabbi, we know that thou art a teacher come from God.",
    "Jesus answered and said unto him, Verily, verily, I say unto thee, Except a man be born again, he cannot see the kingdom of God.",
    "Nicodemus saith unto him, How can a man be born when he is old?",
    "Jesus answered, Verily, verily, I say unto thee, Except a man be born of water and of the Spirit, he cannot enter into the kingdom of God.",
]

SAMPLE_TRANSLATION: List[Dict[str, Any]] = [
    {"abbrev": "gn", "name": "Genesis", "chapters": [GENESIS_1, GENESIS_2]},
    {"abbrev": "jo", "name": "John", "chapters": [["In the beginning was the Word."], ["And the third day."], JOHN_3]},
]

_FORMAT_ENV_VARS = (
    "BIBLE_MAX_LINE_LENGTH",
    "BIBLE_INDENT_SIZE",
    "BIBLE_VERSE_SPACING",
    "BIBLE_CHAPTER_HEADER",
    "BIBLE_BREAK_VERSES",
)


@pytest.fixture(autouse=True)
def _clean_format_env(monkeypatch):
    """Keep layout environment variables out of every test."""
    for var in _FORMAT_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


def write_translation(data_dir, abbreviation, data=None, bom=True):
    """Write a translation file the way the source publishes it."""
    data_dir.mkdir(parents=True, exist_ok=True)
    payload = json.dumps(SAMPLE_TRANSLATION if data is None else data).encode("utf-8")
    path = data_dir / "{}.json".format(abbreviation)
    path.write_bytes((b"\xef\xbb\xbf" if bom else b"") + payload)
    return path


@pytest.fixture
def data_dir(tmp_path):
    """Data directory holding en_kjv (with BOM) and pt_nvi."""
    directory = tmp_path / "data"
    write_translation(directory, "en_kjv")
    write_translation(directory, "pt_nvi", bom=False)
    return directory


@pytest.fixture
def store(data_dir):
    from bible_reader.core.store import TranslationStore
    return TranslationStore(data_dir)


@pytest.fixture
def session(store):
    from bible_reader.core.session import ReaderSession
    return ReaderSession(store, translation="en_kjv", format_config=merge_format_options())


@pytest.fixture
def genesis_verses():
    return [Verse(number=i, text=t) for i, t in enumerate(GENESIS_1, start=1)]


@pytest.fixture
def put_translation(data_dir):
    """Write another translation file into data_dir."""
    def _put(abbreviation, data=None, bom=True):
        return write_translation(data_dir, abbreviation, data=data, bom=bom)
    return _put
