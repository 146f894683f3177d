"""
Spelling dictionaries for OCR statistics.

Each dictionary wraps a pyspellchecker SpellChecker loaded from a word
list (one word per line) or from one of pyspellchecker's bundled language
frequency lists. Besides lookups, a dictionary keeps the word-length
statistics that the adaptive length bins are computed from.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from spellchecker import SpellChecker

from ocrstats.ocr.bins import LengthSummary

logger = logging.getLogger(__name__)


# =============================================================================
# SPELL DICTIONARY
# =============================================================================


@dataclass
class SpellDictionary:
    """
    A named word list answering "is this word spelled correctly?".

    Lookups are case-insensitive. The word-length summary covers every
    entry as it was read, including blank lines of a word-list file.

    Attributes:
        name: Dictionary name (used as CSV column for dictionary matches).
        spell: SpellChecker holding the words.
        length_summary: Count/mean/variance of word lengths.
        length_counts: Number of entries per word length.

    Example:
        >>> d = SpellDictionary.from_words("tiny", ["the", "cat", "sat"])
        >>> d.is_correct("The")
        True
        >>> d.is_correct("dog")
        False
    """

    name: str
    spell: SpellChecker
    length_summary: LengthSummary = field(default_factory=LengthSummary)
    length_counts: dict[int, int] = field(default_factory=dict)

    @classmethod
    def from_words(cls, name: str, words: Iterable[str]) -> SpellDictionary:
        """Build a dictionary from an iterable of words."""
        words = list(words)
        spell = SpellChecker(language=None)
        spell.word_frequency.load_words([w for w in words if w])

        lengths = [len(w) for w in words]
        return cls(
            name=name,
            spell=spell,
            length_summary=LengthSummary.from_values(lengths),
            length_counts=dict(sorted(Counter(lengths).items())),
        )

    @classmethod
    def from_file(cls, path: str | Path, name: str | None = None) -> SpellDictionary:
        """
        Load a word-list file (UTF-8, one word per line).

        Args:
            path: Word-list file.
            name: Dictionary name; defaults to the file name without extension.

        Raises:
            OSError: If the file cannot be read.
        """
        path = Path(path)
        logger.info("Loading dictionary: %s", path)

        with open(path, encoding="utf-8") as f:
            words = [line.rstrip("\r\n") for line in f]

        dictionary = cls.from_words(name or path.stem, words)
        logger.debug("Loaded %d words into dictionary '%s'", len(dictionary), dictionary.name)
        return dictionary

    @classmethod
    def from_language(cls, language: str, name: str | None = None) -> SpellDictionary:
        """Use one of pyspellchecker's bundled word-frequency lists (e.g. "en")."""
        spell = SpellChecker(language=language)
        lengths = [len(w) for w in spell.word_frequency.keys()]
        logger.info("Loaded pyspellchecker dictionary '%s' (%d words)", language, len(lengths))
        return cls(
            name=name or language,
            spell=spell,
            length_summary=LengthSummary.from_values(lengths),
            length_counts=dict(sorted(Counter(lengths).items())),
        )

    def is_correct(self, word: str) -> bool:
        return word in self.spell

    def __contains__(self, word: str) -> bool:
        return self.is_correct(word)

    def __len__(self) -> int:
        return len(self.spell.word_frequency.dictionary)

    def word_length_distribution(self) -> dict[int, int]:
        """Word length -> number of entries with that length."""
        return dict(self.length_counts)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def load_dictionary(path: str | Path) -> SpellDictionary:
    """Load a word-list dictionary named after its file."""
    return SpellDictionary.from_file(path)


def load_dictionaries(
    paths: Iterable[str | Path] = (),
    languages: Iterable[str] = (),
) -> list[SpellDictionary]:
    """Load word-list files first, then bundled languages, preserving order."""
    dictionaries = [load_dictionary(p) for p in paths]
    dictionaries.extend(SpellDictionary.from_language(lang) for lang in languages)
    return dictionaries


def aggregate_length_summary(dictionaries: Iterable[SpellDictionary]) -> LengthSummary:
    """Pool the word-length statistics of several dictionaries."""
    return LengthSummary.aggregate(d.length_summary for d in dictionaries)
