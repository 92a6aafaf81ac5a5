"""Tests for the local translation store (bible_reader.core.store).

WHY: Published translation files carry a byte-order mark, downloads can be
cut short, and a stray .json in the data directory may not be a Bible at
all. The store has to read the first, clean up the second and reject the
third with a message the user can act on.

HOW: Each test writes files into its own tmp_path and builds a fresh
TranslationStore over them.

RULES:
- Corrupt JSON is deleted; well-formed JSON of the wrong shape is kept.
"""

import json

import pytest

from bible_reader.core.store import (
    InvalidTranslationError,
    TranslationNotFoundError,
    TranslationStore,
    check_abbreviation,
    decode_json_bytes,
)


class TestDecodeJsonBytes:

    def test_utf8_bom(self):
        assert decode_json_bytes(b"\xef\xbb\xbf[1]") == "[1]"

    def test_plain_utf8(self):
        assert decode_json_bytes('["Gênesis"]'.encode("utf-8")) == '["Gênesis"]'

    def test_utf16_bom(self):
        assert decode_json_bytes('["a"]'.encode("utf-16")) == '["a"]'


class TestAvailableTranslations:

    def test_lists_sorted_without_index(self, store, data_dir):
        (data_dir / "index.json").write_text("[]", encoding="utf-8")
        (data_dir / "notes.txt").write_text("x", encoding="utf-8")
        assert store.available_translations() == ["en_kjv", "pt_nvi"]

    def test_missing_directory(self, tmp_path):
        assert TranslationStore(tmp_path / "nowhere").available_translations() == []


class TestLoad:

    def test_reads_file_with_bom(self, store):
        translation = store.load("en_kjv")
        assert [b.abbrev for b in translation.books] == ["gn", "jo"]
        assert translation.books[0].chapters[0][0].startswith("In the beginning")

    def test_reads_file_without_bom(self, store):
        assert store.load("pt_nvi").abbreviation == "pt_nvi"

    def test_cached_after_first_read(self, store, data_dir):
        first = store.load("en_kjv")
        (data_dir / "en_kjv.json").unlink()
        assert store.load("en_kjv") is first

    def test_invalidate_forces_reread(self, store, put_translation):
        store.load("en_kjv")
        put_translation("en_kjv", data=[{"abbrev": "ps", "name": "Psalms", "chapters": [["Blessed."]]}])
        store.invalidate("en_kjv")
        assert store.load("en_kjv").books[0].name == "Psalms"

    def test_missing_translation(self, store):
        with pytest.raises(TranslationNotFoundError, match="Bible file does not exist"):
            store.load("de_schlachter")

    def test_empty_file(self, store, data_dir):
        (data_dir / "empty.json").write_bytes(b"")
        with pytest.raises(InvalidTranslationError, match="Bible file is empty"):
            store.load("empty")

    def test_corrupt_json_is_removed(self, store, data_dir):
        path = data_dir / "broken.json"
        path.write_bytes(b'[{"abbrev": "gn", "chapters": [["In the')
        with pytest.raises(InvalidTranslationError, match="Invalid JSON file removed"):
            store.load("broken")
        assert not path.exists()

    def test_wrong_shape_is_kept(self, store, data_dir):
        path = data_dir / "settings.json"
        path.write_text(json.dumps({"theme": "dark"}), encoding="utf-8")
        with pytest.raises(InvalidTranslationError, match="settings.json is not a Bible translation"):
            store.load("settings")
        assert path.exists()

    def test_chapters_must_hold_strings(self, store, put_translation):
        put_translation("numbers", data=[{"abbrev": "gn", "chapters": [[1, 2]]}])
        with pytest.raises(InvalidTranslationError):
            store.load("numbers")

    def test_books_need_abbrev(self, store, put_translation):
        put_translation("noabbrev", data=[{"name": "Genesis", "chapters": [["In the beginning."]]}])
        with pytest.raises(InvalidTranslationError, match="noabbrev.json is not a Bible translation"):
            store.load("noabbrev")

    def test_no_books(self, store, put_translation):
        put_translation("hollow", data=[])
        with pytest.raises(InvalidTranslationError, match="hollow.json contains no books"):
            store.load("hollow")


class TestIndexCache:

    def test_absent(self, store):
        assert store.load_index() is None

    def test_round_trip(self, store):
        index = [{"language": "English", "versions": [{"name": "King James", "abbreviation": "en_kjv"}]}]
        path = store.save_index(index)
        assert path.name == "index.json"
        assert store.load_index() == index

    def test_save_creates_directory(self, tmp_path):
        store = TranslationStore(tmp_path / "new" / "data")
        store.save_index([])
        assert (tmp_path / "new" / "data" / "index.json").is_file()

    def test_unreadable_index_ignored(self, store, data_dir):
        (data_dir / "index.json").write_text("{not json", encoding="utf-8")
        assert store.load_index() is None

    def test_non_list_index_ignored(self, store, data_dir):
        (data_dir / "index.json").write_text('{"a": 1}', encoding="utf-8")
        assert store.load_index() is None


class TestSelectedTranslation:

    def test_nothing_saved(self, store):
        assert store.selected_translation() is None

    def test_saved_selection_survives_new_store(self, store, data_dir):
        path = store.save_selected_translation("pt_nvi")
        assert path == data_dir / "reader.env"
        assert TranslationStore(data_dir).selected_translation() == "pt_nvi"

    def test_overwrite_selection(self, store):
        store.save_selected_translation("pt_nvi")
        store.save_selected_translation("en_kjv")
        assert store.selected_translation() == "en_kjv"

    def test_selection_file_is_not_a_translation(self, store):
        store.save_selected_translation("pt_nvi")
        assert store.available_translations() == ["en_kjv", "pt_nvi"]


class TestCheckAbbreviation:

    def test_valid(self):
        assert check_abbreviation(" en_kjv ") == "en_kjv"
        assert check_abbreviation("pt-br") == "pt-br"

    @pytest.mark.parametrize("abbreviation", ["index", "INDEX", "", "../en_kjv", "en kjv", "a/b"])
    def test_rejected(self, abbreviation):
        with pytest.raises(ValueError, match="Invalid translation abbreviation"):
            check_abbreviation(abbreviation)
