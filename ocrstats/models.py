"""
Data models for ocrstats.

These models carry tokens into the classification engine and page
statistics out of it. PageStatistics also owns the CSV column layout so
that every page of a run serializes with the same key order.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# Characters tracked by the character-frequency counters (case-insensitive)
LETTERS = tuple("abcdefghijklmnopqrstuvwxyz")
PUNCTUATION_CHARS = tuple("`~!@#$%^&*()-_=+[]{}\\|;:'\",<.>/?")
TRACKED_CHARS = LETTERS + PUNCTUATION_CHARS

CORRECTABLE_PREFIX = "C_"

# Scalar columns, in export order
SCALAR_COLUMNS = (
    "page",
    "quality",
    "score",
    "tokens",
    "ignored",
    "numberObjects",
    "punct",
    "singleLetter",
    "correct",
    "correctP",
    "misspelled",
    "misspelledP",
    "cleanOneNonAlphaNoRep",
    "cleanTwoNonAlphaNoRep",
    "cleanAllAlphaNoRep",
    "lenGt1NonAlpha",
    "cleanThreeOrMoreNonAlpha",
    "cleanShortWord",
    "ge3RepChars",
    "ge4RepChars",
    "unique",
    "uniqueCorrect",
    "uniqueCorrectP",
    "uniqueMisspelled",
    "uniqueMisspelledP",
    "oneNonAlpha",
    "twoNonAlpha",
    "threeOrMoreNonAlpha",
    "allNonAlpha",
    "allAlpha",
    "1nAlpha",
    "2nAlpha",
    "3nAlpha",
    "ltHalfNAlpha",
    "applicableReplacements",
)

# Extra columns contributed by markup (hOCR) pages, placed after "page"
LAYOUT_COLUMNS = ("paragraphs", "lines")


class NonAlphaProfile(Enum):
    """Composition of a token by number of non-letter characters."""

    ALL_ALPHA = "all_alpha"
    ONE_NON_ALPHA = "one_non_alpha"
    TWO_NON_ALPHA = "two_non_alpha"
    THREE_OR_MORE_NON_ALPHA = "three_or_more_non_alpha"
    ALL_NON_ALPHA = "all_non_alpha"


class TokenCategory(Enum):
    """Exclusive token category; everything but WORD is ignored for spell-checking."""

    PUNCTUATION = "punctuation"
    NUMBER_OBJECT = "number_object"
    SINGLE_LETTER = "single_letter"
    WORD = "word"


@dataclass(frozen=True)
class Token:
    """A unit of text produced by a page's tokenizer."""

    text: str
    is_last_on_line: bool = False


@dataclass(frozen=True)
class Bin:
    """
    Half-open interval (min, max] used to histogram token lengths.

    None on either side means unbounded in that direction.

    Example:
        >>> Bin(3, 5).contains(5)
        True
        >>> Bin(3, 5).name
        '3_to_5'
        >>> Bin(None, -1).name
        '*_to_-1'
    """

    min: int | None
    max: int | None

    def contains(self, value: float) -> bool:
        return (self.min is None or value > self.min) and (self.max is None or value <= self.max)

    @property
    def name(self) -> str:
        low = "*" if self.min is None else str(self.min)
        high = "*" if self.max is None else str(self.max)
        return f"{low}_to_{high}"

    def __str__(self) -> str:
        return self.name


def find_bin(bins: tuple[Bin, ...] | list[Bin], value: float) -> Bin | None:
    """Return the first bin containing value, in construction order."""
    for bin_ in bins:
        if bin_.contains(value):
            return bin_
    return None


def ratio(numerator: float, denominator: float) -> float:
    """
    Divide with IEEE-754 semantics.

    0/0 is NaN and x/0 is an infinity carrying the sign of x. Undefined
    ratios are reported as such rather than clamped.
    """
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator)
    return numerator / denominator


def distinct_bins(bins: tuple[Bin, ...] | list[Bin]) -> list[Bin]:
    """
    Bins in construction order with repeats dropped.

    A small stdev can round several boundaries to the same length, which
    yields repeated empty bins such as (5, 5]. Each one gets a single
    histogram slot and a single column.

    Example:
        >>> distinct_bins([Bin(None, 5), Bin(5, 5), Bin(5, 5), Bin(5, None)])
        [Bin(min=None, max=5), Bin(min=5, max=5), Bin(min=5, max=None)]
    """
    return list(dict.fromkeys(bins))


def csv_columns(
    bins: tuple[Bin, ...] | list[Bin],
    dictionary_names: list[str] | tuple[str, ...],
    include_layout: bool = False,
) -> list[str]:
    """Build the export header for a run; repeated bins and dictionary names appear once."""
    columns = list(SCALAR_COLUMNS)
    if include_layout:
        columns[1:1] = LAYOUT_COLUMNS
    columns.extend(b.name for b in distinct_bins(bins))
    columns.extend(TRACKED_CHARS)
    columns.extend(CORRECTABLE_PREFIX + b.name for b in distinct_bins(bins))
    columns.extend(CORRECTABLE_PREFIX + c for c in TRACKED_CHARS)
    columns.extend(dict.fromkeys(dictionary_names))
    return columns


@dataclass
class PageStatistics:
    """
    Token statistics for a single page.

    Built by PageStatsAggregator. Only the layout fields (paragraphs,
    lines) are filled in afterwards, by markup readers.
    """

    page_number: int | None = None

    # Number of...
    token_count: int = 0  # tokens on page
    correct_count: int = 0  # tokens found in at least one dictionary
    incorrect_count: int = 0  # spell-checked tokens found in no dictionary
    unique_count: int = 0  # distinct normalized tokens
    unique_correct_count: int = 0
    unique_incorrect_count: int = 0
    one_non_alpha_count: int = 0
    two_non_alpha_count: int = 0
    three_or_more_non_alpha_count: int = 0
    all_non_alpha_count: int = 0
    all_alpha_count: int = 0
    one_num_alpha_count: int = 0  # letters plus exactly 1 digit group
    two_num_alpha_count: int = 0
    three_num_alpha_count: int = 0
    lt_half_num_alpha_count: int = 0  # digits present but fewer than half the chars
    ge3_repeated_count: int = 0
    ge4_repeated_count: int = 0
    applicable_replacements_count: int = 0
    number_objects_count: int = 0
    punct_count: int = 0
    len_gt1_non_alpha_count: int = 0  # "garbage"
    clean_one_non_alpha_count: int = 0
    clean_two_non_alpha_count: int = 0
    clean_three_or_more_non_alpha_count: int = 0
    clean_all_alpha_count: int = 0
    clean_short_word_count: int = 0
    single_letter_count: int = 0

    char_counts: dict[str, int] = field(default_factory=dict)
    correctable_char_counts: dict[str, int] = field(default_factory=dict)
    misspelling_counts: dict[str, int] = field(default_factory=dict)
    token_lengths: dict[int, int] = field(default_factory=dict)
    dictionary_matches: dict[str, int] = field(default_factory=dict)
    bin_token_lengths: dict[Bin, int] = field(default_factory=dict)
    correctable_token_lengths: dict[Bin, int] = field(default_factory=dict)

    # Late-bound layout fields (markup pages only)
    paragraphs: int | None = None
    lines: int | None = None

    @classmethod
    def empty(
        cls,
        page_number: int | None,
        bins: tuple[Bin, ...] | list[Bin],
        dictionary_names: list[str] | tuple[str, ...],
    ) -> PageStatistics:
        """Create statistics with every map pre-populated with zeros, in export order."""
        return cls(
            page_number=page_number,
            char_counts=dict.fromkeys(TRACKED_CHARS, 0),
            correctable_char_counts=dict.fromkeys(TRACKED_CHARS, 0),
            dictionary_matches=dict.fromkeys(dictionary_names, 0),
            bin_token_lengths=dict.fromkeys(distinct_bins(bins), 0),
            correctable_token_lengths=dict.fromkeys(distinct_bins(bins), 0),
        )

    # -------------------------------------------------------------------------
    # Derived metrics
    # -------------------------------------------------------------------------

    @property
    def ignored_count(self) -> int:
        """Tokens excluded from spell-checking."""
        return self.number_objects_count + self.punct_count + self.single_letter_count

    @property
    def percent_correct(self) -> float:
        return ratio(self.correct_count, self.token_count - self.ignored_count)

    @property
    def percent_incorrect(self) -> float:
        return ratio(self.incorrect_count, self.token_count - self.ignored_count)

    @property
    def percent_unique_correct(self) -> float:
        return ratio(self.unique_correct_count, self.unique_count)

    @property
    def percent_unique_incorrect(self) -> float:
        return ratio(self.unique_incorrect_count, self.unique_count)

    @property
    def quality_score(self) -> float:
        """1 minus the share of garbage-looking tokens among non-ignored tokens."""
        garbage = self.len_gt1_non_alpha_count + self.clean_three_or_more_non_alpha_count
        return 1.0 - ratio(garbage, self.token_count - self.ignored_count)

    @property
    def correctability_score(self) -> float:
        """Share of potentially correctable tokens that match the correctable profile."""
        correctable = (
            self.clean_one_non_alpha_count
            + self.clean_two_non_alpha_count
            + self.clean_all_alpha_count
        )
        return ratio(
            correctable,
            self.token_count - self.ignored_count - self.clean_short_word_count,
        )

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def to_csv_entry(self) -> dict[str, Any]:
        """Flatten to an ordered column -> value mapping."""
        entry: dict[str, Any] = {"page": self.page_number}

        if self.paragraphs is not None or self.lines is not None:
            entry["paragraphs"] = self.paragraphs
            entry["lines"] = self.lines

        entry.update(
            {
                "quality": self.quality_score,
                "score": self.correctability_score,
                "tokens": self.token_count,
                "ignored": self.ignored_count,
                "numberObjects": self.number_objects_count,
                "punct": self.punct_count,
                "singleLetter": self.single_letter_count,
                "correct": self.correct_count,
                "correctP": self.percent_correct,
                "misspelled": self.incorrect_count,
                "misspelledP": self.percent_incorrect,
                "cleanOneNonAlphaNoRep": self.clean_one_non_alpha_count,
                "cleanTwoNonAlphaNoRep": self.clean_two_non_alpha_count,
                "cleanAllAlphaNoRep": self.clean_all_alpha_count,
                "lenGt1NonAlpha": self.len_gt1_non_alpha_count,
                "cleanThreeOrMoreNonAlpha": self.clean_three_or_more_non_alpha_count,
                "cleanShortWord": self.clean_short_word_count,
                "ge3RepChars": self.ge3_repeated_count,
                "ge4RepChars": self.ge4_repeated_count,
                "unique": self.unique_count,
                "uniqueCorrect": self.unique_correct_count,
                "uniqueCorrectP": self.percent_unique_correct,
                "uniqueMisspelled": self.unique_incorrect_count,
                "uniqueMisspelledP": self.percent_unique_incorrect,
                "oneNonAlpha": self.one_non_alpha_count,
                "twoNonAlpha": self.two_non_alpha_count,
                "threeOrMoreNonAlpha": self.three_or_more_non_alpha_count,
                "allNonAlpha": self.all_non_alpha_count,
                "allAlpha": self.all_alpha_count,
                "1nAlpha": self.one_num_alpha_count,
                "2nAlpha": self.two_num_alpha_count,
                "3nAlpha": self.three_num_alpha_count,
                "ltHalfNAlpha": self.lt_half_num_alpha_count,
                "applicableReplacements": self.applicable_replacements_count,
            }
        )

        for bin_, count in self.bin_token_lengths.items():
            entry[bin_.name] = count
        for char, count in self.char_counts.items():
            entry[char] = count
        for bin_, count in self.correctable_token_lengths.items():
            entry[CORRECTABLE_PREFIX + bin_.name] = count
        for char, count in self.correctable_char_counts.items():
            entry[CORRECTABLE_PREFIX + char] = count
        for name, count in self.dictionary_matches.items():
            entry[name] = count

        return entry

    def available_columns(self) -> list[str]:
        return list(self.to_csv_entry())
