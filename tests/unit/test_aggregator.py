"""Tests for per-page statistics aggregation."""

import math

import pytest

from ocrstats.models import Bin, Token
from ocrstats.ocr.aggregator import PageStatsAggregator
from ocrstats.ocr.dictionary import SpellDictionary
from ocrstats.ocr.linebreak import LineBreakStats, join_line_break_hyphens
from ocrstats.readers.txt_reader import tokenize


def tokens(*texts):
    return [Token(t) for t in texts]


# =============================================================================
# LINE-BREAK TESTS
# =============================================================================


class TestJoinLineBreakHyphens:
    """Tests for join_line_break_hyphens."""

    def test_joins_hyphen_at_line_end(self):
        """A hyphen ending a line should join with the next token."""
        stats = LineBreakStats()
        result = list(join_line_break_hyphens([Token("inter-", True), Token("esting")], stats))
        assert result == ["interesting"]
        assert stats.candidates_joined == 1

    def test_hyphen_not_at_line_end(self):
        """Hyphens inside a line are left alone."""
        result = list(join_line_break_hyphens([Token("inter-"), Token("esting")]))
        assert result == ["inter-", "esting"]

    def test_hyphen_on_last_token_of_page(self):
        """A trailing hyphen with nothing after it stays as is."""
        assert list(join_line_break_hyphens([Token("inter-", True)])) == ["inter-"]

    def test_joined_token_is_not_joined_again(self):
        """A joined token is never joined a second time."""
        result = list(
            join_line_break_hyphens(
                [Token("a-", True), Token("b-", True), Token("c")],
            )
        )
        assert result == ["ab-", "c"]


# =============================================================================
# AGGREGATOR TESTS
# =============================================================================


class TestPageStatsAggregator:
    """Tests for PageStatsAggregator.calculate_statistics."""

    @pytest.fixture
    def aggregator(self, bins, dictionary):
        return PageStatsAggregator(bins, [dictionary], {"the": "tbe"})

    def test_empty_page(self, aggregator):
        """An empty page should have zero counts and NaN scores."""
        stats = aggregator.calculate_statistics([], page_number=7)
        assert stats.page_number == 7
        assert stats.token_count == 0
        assert stats.correct_count == 0
        assert math.isnan(stats.percent_correct)
        assert math.isnan(stats.quality_score)
        assert math.isnan(stats.correctability_score)

    def test_number_object_is_ignored(self, aggregator):
        """Numbers count as ignored and are never spell-checked."""
        stats = aggregator.calculate_statistics(tokens("123.45"))
        assert stats.token_count == 1
        assert stats.number_objects_count == 1
        assert stats.ignored_count == 1
        assert stats.correct_count == 0
        assert stats.incorrect_count == 0
        assert stats.misspelling_counts == {}

    def test_line_break_join_before_classification(self, aggregator):
        """Hyphenated line breaks should be joined before classification."""
        stats = aggregator.calculate_statistics([Token("inter-", True), Token("esting")])
        assert stats.token_count == 1
        assert stats.correct_count == 1
        assert stats.token_lengths == {11: 1}

    def test_apostrophe_word_is_correct(self, aggregator):
        """Contractions with an apostrophe should be recognized."""
        stats = aggregator.calculate_statistics(tokens("don't"))
        assert stats.one_non_alpha_count == 1
        assert stats.clean_one_non_alpha_count == 1
        assert stats.correct_count == 1
        assert stats.correctable_char_counts["'"] == 1
        assert stats.correctable_char_counts["d"] == 1

    def test_counts_on_mixed_page(self, aggregator):
        """Counters and scores on a page mixing words, numbers and noise."""
        page = tokens("The", "cat", "sat", "on", "tbe", "mat", ".", "12", "a", "tbe", "~~*")
        stats = aggregator.calculate_statistics(page, page_number=1)

        assert stats.token_count == 11
        assert stats.punct_count == 1
        assert stats.number_objects_count == 1
        assert stats.single_letter_count == 1
        assert stats.ignored_count == 3

        assert stats.correct_count == 5
        assert stats.incorrect_count == 3
        assert stats.misspelling_counts == {"tbe": 2, "~~*": 1}
        assert stats.dictionary_matches == {"eng": 5}

        assert stats.unique_count == 10
        assert stats.unique_correct_count == 5
        assert stats.unique_incorrect_count == 2

        assert stats.applicable_replacements_count == 1
        assert stats.len_gt1_non_alpha_count == 1
        assert stats.clean_short_word_count == 2
        assert stats.clean_all_alpha_count == 6
        assert stats.clean_three_or_more_non_alpha_count == 0

        assert stats.char_counts["t"] == 6
        assert stats.char_counts["."] == 1
        assert stats.char_counts["~"] == 2

        assert stats.percent_correct == pytest.approx(5 / 8)
        assert stats.quality_score == pytest.approx(1 - 1 / 8)
        assert stats.correctability_score == pytest.approx(1.0)

    def test_conservation(self, aggregator):
        """Every non-ignored token is either correct or incorrect."""
        text = "It's 10 o'clock... The c@t sat on tbe m4t, 1,000 times!!! a b c wwwwword"
        stats = aggregator.calculate_statistics(tokens(*tokenize(text)) + tokens("x1y2z3w", "$5"))
        assert stats.correct_count + stats.incorrect_count == stats.token_count - stats.ignored_count

    def test_ignored_tokens_only_touch_ignored_counters(self, aggregator):
        """Ignored tokens should not reach the word-level counters."""
        stats = aggregator.calculate_statistics(tokens(",", "42", "z"))
        assert stats.ignored_count == 3
        assert stats.ge3_repeated_count == 0
        assert stats.applicable_replacements_count == 0
        assert stats.clean_short_word_count == 0
        assert sum(stats.correctable_char_counts.values()) == 0
        assert sum(stats.correctable_token_lengths.values()) == 0
        assert stats.dictionary_matches == {"eng": 0}

    def test_raw_and_correctable_bins(self, aggregator):
        """Raw and cleaned lengths land in their own histograms."""
        stats = aggregator.calculate_statistics(tokens("(hello)"))
        assert stats.bin_token_lengths[Bin(5, 7)] == 1
        assert stats.correctable_token_lengths[Bin(3, 5)] == 1
        assert sum(stats.bin_token_lengths.values()) == 1

    def test_digit_co_occurrence(self, aggregator):
        """Tokens mixing digits and letters are counted by digit group."""
        stats = aggregator.calculate_statistics(tokens("a1", "a1b2", "a1b2c3", "a1b2c3d4", "abcdefgh1"))
        assert stats.one_num_alpha_count == 2
        assert stats.two_num_alpha_count == 1
        assert stats.three_num_alpha_count == 1
        assert stats.lt_half_num_alpha_count == 1

    def test_repeated_characters(self, aggregator):
        """Runs of three and four repeated characters are counted."""
        stats = aggregator.calculate_statistics(tokens("helllo", "heeeello"))
        assert stats.ge3_repeated_count == 2
        assert stats.ge4_repeated_count == 1
        assert stats.clean_all_alpha_count == 1

    def test_multiple_dictionaries(self, bins, dictionary):
        """A token is correct if any dictionary knows it."""
        latin = SpellDictionary.from_words("lat", ["cat", "et"])
        aggregator = PageStatsAggregator(bins, [dictionary, latin])
        stats = aggregator.calculate_statistics(tokens("cat", "et", "hello"))
        assert stats.dictionary_matches == {"eng": 2, "lat": 2}
        assert stats.correct_count == 3
