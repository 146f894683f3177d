"""
Statistics pipeline orchestrator.

Wires together the pieces needed to turn pages into statistics:
1. Dictionaries (spell-check lookups and the word-length summary)
2. Length bins (computed once from the dictionaries)
3. Replacement rules (counted, never applied)
4. PageStatsAggregator (per-page classification and counting)

A pipeline is read-only after construction, so one instance can be
shared by worker threads processing different pages.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ocrstats.exceptions import ConfigurationError
from ocrstats.models import Bin, PageStatistics, csv_columns
from ocrstats.ocr.aggregator import PageStatsAggregator
from ocrstats.ocr.bins import compute_length_bins
from ocrstats.ocr.dictionary import SpellDictionary, aggregate_length_summary, load_dictionaries
from ocrstats.ocr.document import OCRDocument
from ocrstats.ocr.replacements import load_replacement_rules
from ocrstats.readers.base import OCRPage

logger = logging.getLogger(__name__)

# Formats whose pages carry the paragraphs/lines columns
LAYOUT_FORMATS = frozenset({"hocr"})


# =============================================================================
# STATS PIPELINE
# =============================================================================


@dataclass
class StatsPipeline:
    """
    Computes page statistics with a fixed set of dictionaries and rules.

    Attributes:
        dictionaries: Dictionaries in lookup order (at least one).
        replacement_rules: target -> source rules counted on each page.
        bins: Length bins; computed from the dictionaries when not given.

    Example:
        >>> from ocrstats.ocr.dictionary import SpellDictionary
        >>> from ocrstats.readers import TxtPage
        >>> pipeline = StatsPipeline([SpellDictionary.from_words("tiny", ["the", "cat"])])
        >>> stats = pipeline.process_page(TxtPage.from_text("the cat", page_number=1))
        >>> stats.correct_count
        2
    """

    dictionaries: Sequence[SpellDictionary]
    replacement_rules: dict[str, str] = field(default_factory=dict)
    bins: tuple[Bin, ...] | None = None

    def __post_init__(self) -> None:
        if not self.dictionaries:
            raise ConfigurationError("At least one dictionary is required")

        if self.bins is None:
            summary = aggregate_length_summary(self.dictionaries)
            try:
                self.bins = compute_length_bins(summary)
            except ValueError as e:
                raise ConfigurationError(f"Cannot compute length bins: {e}") from e
            logger.debug(
                "Dictionary word lengths: n=%d min=%s max=%s mean=%.4f stdev=%.4f",
                summary.n,
                summary.min,
                summary.max,
                summary.mean,
                summary.stdev,
            )
            logger.debug("Length bins: %s", ", ".join(str(b) for b in self.bins))

        self.aggregator = PageStatsAggregator(self.bins, self.dictionaries, self.replacement_rules)

    @property
    def dictionary_names(self) -> list[str]:
        return [d.name for d in self.dictionaries]

    def process_page(self, page: OCRPage) -> PageStatistics:
        """
        Compute the statistics of one page.

        Args:
            page: Any reader page (txt, hocr, pdf).

        Returns:
            PageStatistics including format-specific layout fields.
        """
        stats = self.aggregator.calculate_statistics(page.tokens(), page.page_number)
        return page.annotate_statistics(stats)

    def process_pages(self, doc_id: str, pages: Iterable[OCRPage]) -> OCRDocument:
        """Compute statistics for several pages of one document."""
        document = OCRDocument(doc_id)
        for page in pages:
            document.add_page(self.process_page(page))
        return document

    def csv_columns(self, fmt: str = "txt") -> list[str]:
        """Export header for pages of the given input format."""
        return csv_columns(self.bins, self.dictionary_names, include_layout=fmt in LAYOUT_FORMATS)

    def get_info(self) -> dict[str, Any]:
        """Get pipeline configuration information."""
        return {
            "dictionaries": {d.name: len(d) for d in self.dictionaries},
            "replacement_rules": len(self.replacement_rules),
            "bins": [b.name for b in self.bins],
        }


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def create_pipeline(
    dictionary_paths: Iterable[str | Path] = (),
    replacement_paths: Iterable[str | Path] = (),
    languages: Iterable[str] = (),
) -> StatsPipeline:
    """
    Create a pipeline from dictionary and replacement-rule files.

    Args:
        dictionary_paths: Word-list files, one word per line.
        replacement_paths: Replacement-rule files; later files win.
        languages: pyspellchecker language codes appended after the files.

    Returns:
        Configured StatsPipeline.

    Raises:
        ConfigurationError: If no dictionary is given or a rule is invalid.
    """
    dictionaries = load_dictionaries(dictionary_paths, languages)
    rules = load_replacement_rules(replacement_paths)
    return StatsPipeline(dictionaries=dictionaries, replacement_rules=rules)
