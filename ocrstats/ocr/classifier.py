"""
Token classification for OCR quality statistics.

Each token runs through a fixed cascade:

A. Always: non-letter composition of the raw token, character counts,
   raw length bin.
B. Exclusive short-circuit: single punctuation, number-like object,
   single letter. These are "ignored" tokens and are never spell-checked.
C. Everything else: repeated-character runs, the correctable profile of
   the cleaned token, digit co-occurrence, replacement-rule matches and
   the dictionary lookup.

The classifier is a pure function of the token text, the bins, the
replacement rules and the dictionaries. It never rewrites the token.
"""

from __future__ import annotations

import itertools
import logging
import re
import string
import unicodedata
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol

from ocrstats.models import Bin, NonAlphaProfile, TokenCategory, find_bin

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# Cleaning removes at most this much punctuation from each end
MAX_LEADING_PUNCT_TO_REMOVE = 1
MAX_TRAILING_PUNCT_TO_REMOVE = 3

# A cleaned token shorter than this has no cleaned form
CLEAN_TOKEN_LEN_THRESHOLD = 3

# Repeated-character run lengths that are tallied
REPEAT_RUN_SHORT = 3
REPEAT_RUN_LONG = 4

# ASCII punctuation (POSIX [:punct:])
PUNCTUATION = frozenset(string.punctuation)

# Number/date/money objects are matched on a "shape" of the token where
# every currency symbol becomes "$" and every numeric character becomes "9".
# Consecutive digit groups without a separator collapse into one "9+", which
# keeps the pattern free of nested ambiguous quantifiers.
NUMBER_SEPARATORS = ".,/%-"
NUMBER_SHAPE_PATTERN = re.compile(r"^\$?[.,/\-]?9+(?:[.,/%\-]9+)*[.,/%\-]?\$?$")

# Cleaned-token profiles that count as "likely fixable by spelling correction"
CORRECTABLE_PROFILES = frozenset(
    {
        NonAlphaProfile.ALL_ALPHA,
        NonAlphaProfile.ONE_NON_ALPHA,
        NonAlphaProfile.TWO_NON_ALPHA,
    }
)


# =============================================================================
# CHARACTER HELPERS
# =============================================================================


def is_numeric_char(char: str) -> bool:
    """True for any Unicode number (Nd, Nl, No)."""
    return unicodedata.category(char).startswith("N")


def count_non_alpha(text: str) -> int:
    """Number of characters that are not Unicode letters."""
    return sum(1 for c in text if not c.isalpha())


def non_alpha_profile(text: str) -> NonAlphaProfile | None:
    """
    Classify a token by how many of its characters are not letters.

    Example:
        >>> non_alpha_profile("don't")
        <NonAlphaProfile.ONE_NON_ALPHA: 'one_non_alpha'>
        >>> non_alpha_profile("...")
        <NonAlphaProfile.ALL_NON_ALPHA: 'all_non_alpha'>
    """
    length = len(text)
    if length == 0:
        return None

    non_alpha = count_non_alpha(text)
    if non_alpha == 0:
        return NonAlphaProfile.ALL_ALPHA
    if non_alpha == length:
        return NonAlphaProfile.ALL_NON_ALPHA
    if non_alpha == 1:
        return NonAlphaProfile.ONE_NON_ALPHA
    if non_alpha == 2:
        return NonAlphaProfile.TWO_NON_ALPHA
    return NonAlphaProfile.THREE_OR_MORE_NON_ALPHA


def is_punctuation(text: str) -> bool:
    """Exactly one ASCII punctuation character."""
    return len(text) == 1 and text in PUNCTUATION


def _shape_char(char: str) -> str:
    if unicodedata.category(char) == "Sc":
        return "$"
    if is_numeric_char(char):
        return "9"
    if char in NUMBER_SEPARATORS:
        return char
    return "x"


def is_number_object(text: str) -> bool:
    """
    Whether the token looks like a number, date, amount of money or identifier.

    Optional leading currency symbol, optional separator, digit groups
    optionally followed by one of . , / % -, optional trailing currency.

    Example:
        >>> is_number_object("123.45")
        True
        >>> is_number_object("$1,000")
        True
        >>> is_number_object("12/05/1999")
        True
        >>> is_number_object("1st")
        False
    """
    if not text:
        return False
    shape = "".join(_shape_char(c) for c in text)
    return NUMBER_SHAPE_PATTERN.match(shape) is not None


def is_single_letter(text: str) -> bool:
    return len(text) == 1 and text.isalpha()


def longest_repeat_run(text: str) -> int:
    """Length of the longest run of one repeated non-numeric character."""
    longest = 0
    for char, run in itertools.groupby(text):
        if is_numeric_char(char):
            continue
        longest = max(longest, sum(1 for _ in run))
    return longest


def count_digit_groups(text: str) -> int:
    """Number of maximal runs of numeric characters."""
    return sum(1 for is_digit, _ in itertools.groupby(text, key=is_numeric_char) if is_digit)


def clean_token(normalized: str) -> str | None:
    """
    Strip bounded leading/trailing ASCII punctuation from a normalized token.

    At most 1 leading and 3 trailing punctuation characters are removed.
    Returns None when fewer than 3 characters remain.

    Example:
        >>> clean_token('"hello!!!')
        'hello'
        >>> clean_token("(a)")
        >>> clean_token("don't")
        "don't"
    """
    start = 0
    while start < MAX_LEADING_PUNCT_TO_REMOVE and start < len(normalized):
        if normalized[start] not in PUNCTUATION:
            break
        start += 1
    remainder = normalized[start:]

    end = len(remainder)
    while len(remainder) - end < MAX_TRAILING_PUNCT_TO_REMOVE and end > 0:
        if remainder[end - 1] not in PUNCTUATION:
            break
        end -= 1
    cleaned = remainder[:end]

    if len(cleaned) < CLEAN_TOKEN_LEN_THRESHOLD:
        return None
    return cleaned


# =============================================================================
# DATA STRUCTURES
# =============================================================================


class Dictionary(Protocol):
    """Anything that can tell whether a word is spelled correctly."""

    name: str

    def is_correct(self, word: str) -> bool: ...


@dataclass(frozen=True)
class TokenClassification:
    """Everything the aggregator needs to know about one token."""

    text: str  # trimmed raw token
    normalized: str  # lower-cased text
    cleaned: str | None  # normalized text with bounded punctuation stripped
    raw_profile: NonAlphaProfile
    garbage: bool  # length > 1, no letters, not number-shaped
    raw_bin: Bin | None
    category: TokenCategory

    # Only populated for TokenCategory.WORD
    repeated_run: int = 0
    clean_profile: NonAlphaProfile | None = None
    clean_bin: Bin | None = None
    digit_groups: int | None = None  # None when the token has no letters
    lt_half_digits: bool = False
    replacement_applicable: bool = False
    checked_form: str | None = None
    matched_dictionaries: tuple[str, ...] = ()

    @property
    def length(self) -> int:
        return len(self.text)

    @property
    def is_ignored(self) -> bool:
        return self.category is not TokenCategory.WORD

    @property
    def has_repeat3(self) -> bool:
        return self.repeated_run >= REPEAT_RUN_SHORT

    @property
    def has_long_repeat(self) -> bool:
        return self.repeated_run >= REPEAT_RUN_LONG

    @property
    def is_correctable(self) -> bool:
        """Cleaned, no long repeat, at most 2 non-letters and at least one letter."""
        return self.clean_profile in CORRECTABLE_PROFILES

    @property
    def is_correct(self) -> bool | None:
        """None for ignored tokens, which are never spell-checked."""
        if self.checked_form is None:
            return None
        return bool(self.matched_dictionaries)


# =============================================================================
# TOKEN CLASSIFIER
# =============================================================================


class TokenClassifier:
    """
    Classifies single tokens against the lexical-shape taxonomy.

    Attributes:
        bins: Length bins, in construction order.
        dictionaries: Dictionaries consulted for spell-checking.
        replacement_rules: Mapping of target -> source; only used for counting.

    Example:
        >>> from ocrstats.ocr.bins import bins_from_statistics
        >>> classifier = TokenClassifier(bins_from_statistics(5, 2), [])
        >>> classifier.classify("123.45").category
        <TokenCategory.NUMBER_OBJECT: 'number_object'>
    """

    def __init__(
        self,
        bins: Sequence[Bin],
        dictionaries: Sequence[Dictionary],
        replacement_rules: Mapping[str, str] | None = None,
    ):
        self.bins = tuple(bins)
        self.dictionaries = tuple(dictionaries)
        self.replacement_rules = dict(replacement_rules or {})

    def classify(self, text: str) -> TokenClassification | None:
        """
        Classify one token.

        Args:
            text: Raw token text (already joined across a line-break hyphen).

        Returns:
            TokenClassification, or None if the token is blank.
        """
        text = text.strip()
        if not text:
            return None

        normalized = text.lower()
        cleaned = clean_token(normalized)
        number_shaped = is_number_object(text)

        raw_profile = non_alpha_profile(text)
        garbage = (
            raw_profile is NonAlphaProfile.ALL_NON_ALPHA and len(text) > 1 and not number_shaped
        )
        raw_bin = find_bin(self.bins, len(text))

        base = {
            "text": text,
            "normalized": normalized,
            "cleaned": cleaned,
            "raw_profile": raw_profile,
            "garbage": garbage,
            "raw_bin": raw_bin,
        }

        if is_punctuation(text):
            return TokenClassification(category=TokenCategory.PUNCTUATION, **base)
        if number_shaped:
            return TokenClassification(category=TokenCategory.NUMBER_OBJECT, **base)
        if is_single_letter(text):
            return TokenClassification(category=TokenCategory.SINGLE_LETTER, **base)

        repeated_run = longest_repeat_run(normalized)

        clean_profile = None
        clean_bin = None
        if cleaned is not None and repeated_run < REPEAT_RUN_LONG:
            clean_profile = non_alpha_profile(cleaned)
            if clean_profile in CORRECTABLE_PROFILES:
                clean_bin = find_bin(self.bins, len(cleaned))

        digit_groups = None
        lt_half_digits = False
        if any(c.isalpha() for c in normalized):
            digit_groups = count_digit_groups(normalized)
            digit_count = sum(1 for c in normalized if is_numeric_char(c))
            lt_half_digits = 0 < digit_count < len(normalized) // 2

        replacement_applicable = text in self.replacement_rules or (
            cleaned is not None and cleaned in self.replacement_rules
        )

        checked_form = cleaned if cleaned is not None else normalized
        matched = tuple(d.name for d in self.dictionaries if d.is_correct(checked_form))

        return TokenClassification(
            category=TokenCategory.WORD,
            repeated_run=repeated_run,
            clean_profile=clean_profile,
            clean_bin=clean_bin,
            digit_groups=digit_groups,
            lt_half_digits=lt_half_digits,
            replacement_applicable=replacement_applicable,
            checked_form=checked_form,
            matched_dictionaries=matched,
            **base,
        )
