"""Tests for environment configuration (bible_reader.config).

WHY: The BIBLE_* variables set layout defaults for every session. A typo in
.env must fail with the variable's name instead of silently using defaults.

HOW: monkeypatch sets and clears variables; functions are called directly.
Module-level constants are read at import and are not re-tested here.
"""

from pathlib import Path

import pytest

from bible_reader.config import default_data_dir, load_format_overrides


class TestLoadFormatOverrides:

    def test_nothing_set(self):
        assert load_format_overrides() == {}

    def test_integers_and_switches(self, monkeypatch):
        monkeypatch.setenv("BIBLE_MAX_LINE_LENGTH", "60")
        monkeypatch.setenv("BIBLE_INDENT_SIZE", " 2 ")
        monkeypatch.setenv("BIBLE_CHAPTER_HEADER", "off")
        monkeypatch.setenv("BIBLE_BREAK_VERSES", "Yes")
        assert load_format_overrides() == {
            "max_line_length": 60,
            "indent_size": 2,
            "chapter_header": False,
            "break_verses": True,
        }

    def test_empty_values_are_ignored(self, monkeypatch):
        monkeypatch.setenv("BIBLE_VERSE_SPACING", "")
        monkeypatch.setenv("BIBLE_BREAK_VERSES", "  ")
        assert load_format_overrides() == {}

    def test_bad_integer_names_variable(self, monkeypatch):
        monkeypatch.setenv("BIBLE_VERSE_SPACING", "two")
        with pytest.raises(ValueError, match="BIBLE_VERSE_SPACING must be an integer"):
            load_format_overrides()

    def test_bad_switch_names_variable(self, monkeypatch):
        monkeypatch.setenv("BIBLE_CHAPTER_HEADER", "maybe")
        with pytest.raises(ValueError, match="BIBLE_CHAPTER_HEADER must be true or false"):
            load_format_overrides()


class TestDefaultDataDir:

    def test_explicit_directory(self, monkeypatch, tmp_path):
        monkeypatch.setenv("BIBLE_READER_DATA_DIR", str(tmp_path / "bibles"))
        assert default_data_dir() == tmp_path / "bibles"

    def test_xdg_data_home(self, monkeypatch, tmp_path):
        monkeypatch.delenv("BIBLE_READER_DATA_DIR", raising=False)
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))
        assert default_data_dir() == tmp_path / "bible-reader" / "data"

    def test_home_fallback(self, monkeypatch):
        monkeypatch.delenv("BIBLE_READER_DATA_DIR", raising=False)
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)
        assert default_data_dir() == Path.home() / ".local" / "share" / "bible-reader" / "data"
