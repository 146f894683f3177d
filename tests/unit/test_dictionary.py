"""Tests for spelling dictionaries and replacement rules."""

import pytest

from ocrstats.exceptions import ConfigurationError
from ocrstats.ocr.dictionary import (
    SpellDictionary,
    aggregate_length_summary,
    load_dictionaries,
    load_dictionary,
)
from ocrstats.ocr.replacements import load_replacement_rules, parse_replacement_rules

# =============================================================================
# DICTIONARY TESTS
# =============================================================================


class TestSpellDictionary:
    """Tests for SpellDictionary."""

    def test_known_words(self, dictionary):
        """Words in the list should be recognized."""
        assert dictionary.is_correct("cat")
        assert "philosophy" in dictionary
        assert not dictionary.is_correct("tbe")

    def test_case_insensitive(self, dictionary):
        """Lookup ignores case."""
        assert dictionary.is_correct("CAT")
        assert dictionary.is_correct("Hello")

    def test_load_from_file(self, dictionary_file):
        """A dictionary file is named after its stem."""
        dictionary = load_dictionary(dictionary_file)
        assert dictionary.name == "eng"
        assert dictionary.is_correct("world")
        assert len(dictionary) == 10

    def test_length_summary_counts_every_line(self, tmp_path):
        """Blank lines count toward the length summary."""
        path = tmp_path / "odd.txt"
        path.write_text("abc\n\nabcde\n", encoding="utf-8")
        dictionary = load_dictionary(path)
        assert dictionary.length_summary.n == 3
        assert dictionary.length_summary.mean == pytest.approx(8 / 3)
        assert len(dictionary) == 2

    def test_word_length_distribution(self):
        """Words are counted by length."""
        dictionary = SpellDictionary.from_words("d", ["ab", "cd", "efg"])
        assert dictionary.word_length_distribution() == {2: 2, 3: 1}

    def test_missing_file(self, tmp_path):
        """A missing dictionary file raises OSError."""
        with pytest.raises(OSError):
            load_dictionary(tmp_path / "missing.dict")

    def test_load_dictionaries_keeps_order(self, dictionary_file, tmp_path):
        """Dictionaries load in the order given."""
        other = tmp_path / "latin.txt"
        other.write_text("et\nin\n", encoding="utf-8")
        dictionaries = load_dictionaries([other, dictionary_file])
        assert [d.name for d in dictionaries] == ["latin", "eng"]

    def test_aggregate_length_summary(self):
        """Length summaries of several dictionaries are pooled."""
        summary = aggregate_length_summary(
            [
                SpellDictionary.from_words("a", ["abc"]),
                SpellDictionary.from_words("b", ["abcde", "abcdefg"]),
            ]
        )
        assert summary.n == 3
        assert summary.mean == pytest.approx(5)
        assert summary.stdev == pytest.approx(2)


# =============================================================================
# REPLACEMENT RULE TESTS
# =============================================================================


class TestReplacementRules:
    """Tests for replacement-rule parsing."""

    def test_parse(self):
        """Rules map the target back to its source."""
        assert parse_replacement_rules("ſ=f; vv=w;") == {"f": "ſ", "w": "vv"}

    def test_whitespace_and_empty_entries(self):
        """Whitespace and empty entries are skipped."""
        assert parse_replacement_rules("  ;\n a = b ;;\n") == {"b": "a"}

    @pytest.mark.parametrize("text", ["abc", "a=b=c", "a=b;c"])
    def test_invalid_rules(self, text):
        """Malformed rules should raise ConfigurationError."""
        with pytest.raises(ConfigurationError):
            parse_replacement_rules(text)

    def test_later_files_win(self, tmp_path):
        """Rules from later files override earlier ones."""
        first = tmp_path / "first.txt"
        second = tmp_path / "second.txt"
        first.write_text("a=x;b=y", encoding="utf-8")
        second.write_text("c=x", encoding="utf-8")
        assert load_replacement_rules([first, second]) == {"x": "c", "y": "b"}

    def test_no_files(self):
        """No rule files give no rules."""
        assert load_replacement_rules([]) == {}
