"""
Per-page statistics aggregation.

PageStatsAggregator runs every token of one page through the
TokenClassifier and folds the classifications into a PageStatistics
record. All mutable state lives in the statistics object built by a
single calculate_statistics() call, so one aggregator can be shared by
concurrent page workers.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

from ocrstats.models import Bin, NonAlphaProfile, PageStatistics, Token, TokenCategory
from ocrstats.ocr.classifier import Dictionary, TokenClassification, TokenClassifier
from ocrstats.ocr.linebreak import LineBreakStats, join_line_break_hyphens

logger = logging.getLogger(__name__)


RAW_PROFILE_FIELDS = {
    NonAlphaProfile.ALL_ALPHA: "all_alpha_count",
    NonAlphaProfile.ONE_NON_ALPHA: "one_non_alpha_count",
    NonAlphaProfile.TWO_NON_ALPHA: "two_non_alpha_count",
    NonAlphaProfile.THREE_OR_MORE_NON_ALPHA: "three_or_more_non_alpha_count",
    NonAlphaProfile.ALL_NON_ALPHA: "all_non_alpha_count",
}

CLEAN_PROFILE_FIELDS = {
    NonAlphaProfile.ALL_ALPHA: "clean_all_alpha_count",
    NonAlphaProfile.ONE_NON_ALPHA: "clean_one_non_alpha_count",
    NonAlphaProfile.TWO_NON_ALPHA: "clean_two_non_alpha_count",
    NonAlphaProfile.THREE_OR_MORE_NON_ALPHA: "clean_three_or_more_non_alpha_count",
}

IGNORED_FIELDS = {
    TokenCategory.PUNCTUATION: "punct_count",
    TokenCategory.NUMBER_OBJECT: "number_objects_count",
    TokenCategory.SINGLE_LETTER: "single_letter_count",
}

DIGIT_GROUP_FIELDS = {
    1: "one_num_alpha_count",
    2: "two_num_alpha_count",
    3: "three_num_alpha_count",
}


def _increment(counts: dict, key, amount: int = 1) -> None:
    counts[key] = counts.get(key, 0) + amount


def _count_chars(counts: dict[str, int], text: str) -> None:
    for char in text:
        if char in counts:
            counts[char] += 1


class PageStatsAggregator:
    """
    Builds PageStatistics from a page's token stream.

    Attributes:
        bins: Length bins shared by raw and correctable histograms.
        classifier: TokenClassifier used for every token.
        dictionary_names: Names of the dictionaries, in lookup order.

    Example:
        >>> from ocrstats.ocr.bins import bins_from_statistics
        >>> aggregator = PageStatsAggregator(bins_from_statistics(5, 2), [])
        >>> stats = aggregator.calculate_statistics([Token("123.45")], page_number=1)
        >>> stats.number_objects_count, stats.ignored_count
        (1, 1)
    """

    def __init__(
        self,
        bins: Sequence[Bin],
        dictionaries: Sequence[Dictionary],
        replacement_rules: Mapping[str, str] | None = None,
    ):
        self.bins = tuple(bins)
        self.dictionary_names = [d.name for d in dictionaries]
        self.classifier = TokenClassifier(self.bins, dictionaries, replacement_rules)

    def calculate_statistics(
        self,
        tokens: Iterable[Token],
        page_number: int | None = None,
    ) -> PageStatistics:
        """
        Classify and count every token of one page.

        Args:
            tokens: The page's token stream, in reading order.
            page_number: Page number reported by the reader (may be None).

        Returns:
            Fully populated PageStatistics.
        """
        stats = PageStatistics.empty(page_number, self.bins, self.dictionary_names)
        unique_tokens: set[str] = set()
        unique_correct: set[str] = set()
        linebreaks = LineBreakStats()

        for text in join_line_break_hyphens(tokens, linebreaks):
            result = self.classifier.classify(text)
            if result is None:
                continue
            unique_tokens.add(result.normalized)
            self._accumulate(stats, result, unique_correct)

        stats.unique_count = len(unique_tokens)
        stats.unique_correct_count = len(unique_correct)
        stats.unique_incorrect_count = len(stats.misspelling_counts)

        logger.debug(
            "Page %s: %d tokens, %d correct, %d misspelled, %d line-break joins",
            page_number,
            stats.token_count,
            stats.correct_count,
            stats.incorrect_count,
            linebreaks.candidates_joined,
        )
        return stats

    def _accumulate(
        self,
        stats: PageStatistics,
        result: TokenClassification,
        unique_correct: set[str],
    ) -> None:
        stats.token_count += 1

        # A: every token
        field_name = RAW_PROFILE_FIELDS[result.raw_profile]
        setattr(stats, field_name, getattr(stats, field_name) + 1)
        if result.garbage:
            stats.len_gt1_non_alpha_count += 1

        _count_chars(stats.char_counts, result.normalized)
        _increment(stats.token_lengths, result.length)
        if result.raw_bin is not None:
            stats.bin_token_lengths[result.raw_bin] += 1

        # B: ignored tokens stop here
        if result.is_ignored:
            field_name = IGNORED_FIELDS[result.category]
            setattr(stats, field_name, getattr(stats, field_name) + 1)
            return

        # C: words
        if result.has_repeat3:
            stats.ge3_repeated_count += 1
        if result.has_long_repeat:
            stats.ge4_repeated_count += 1

        if result.cleaned is None:
            stats.clean_short_word_count += 1
        elif result.clean_profile in CLEAN_PROFILE_FIELDS:
            field_name = CLEAN_PROFILE_FIELDS[result.clean_profile]
            setattr(stats, field_name, getattr(stats, field_name) + 1)

            if result.is_correctable:
                _count_chars(stats.correctable_char_counts, result.cleaned)
                if result.clean_bin is not None:
                    stats.correctable_token_lengths[result.clean_bin] += 1

        if result.digit_groups is not None:
            field_name = DIGIT_GROUP_FIELDS.get(result.digit_groups)
            if field_name is not None:
                setattr(stats, field_name, getattr(stats, field_name) + 1)
            if result.lt_half_digits:
                stats.lt_half_num_alpha_count += 1

        if result.replacement_applicable:
            stats.applicable_replacements_count += 1

        for name in result.matched_dictionaries:
            stats.dictionary_matches[name] += 1

        if result.is_correct:
            stats.correct_count += 1
            unique_correct.add(result.checked_form)
        else:
            stats.incorrect_count += 1
            _increment(stats.misspelling_counts, result.checked_form)
