"""
OCR statistics core.

This package turns token streams into page statistics:
- Adaptive word-length bins from dictionary word lengths
- Token classification (non-alpha profiles, number objects, cleaning)
- Line-break hyphenation rejoining
- Spell-check lookups against one or more dictionaries
- Replacement-rule applicability counting

Example:
    >>> from ocrstats.ocr import create_pipeline
    >>> pipeline = create_pipeline(["words.txt"])
    >>> pipeline.csv_columns("txt")[:3]
    ['page', 'quality', 'score']
"""

from ocrstats.ocr.aggregator import PageStatsAggregator
from ocrstats.ocr.bins import LengthSummary, bins_from_statistics, compute_length_bins
from ocrstats.ocr.classifier import TokenClassification, TokenClassifier, clean_token
from ocrstats.ocr.dictionary import SpellDictionary, load_dictionaries, load_dictionary
from ocrstats.ocr.document import OCRDocument
from ocrstats.ocr.linebreak import LineBreakStats, join_line_break_hyphens
from ocrstats.ocr.pipeline import StatsPipeline, create_pipeline
from ocrstats.ocr.replacements import load_replacement_rules, parse_replacement_rules

__all__ = [
    # Pipeline
    "StatsPipeline",
    "create_pipeline",
    # Bins
    "LengthSummary",
    "compute_length_bins",
    "bins_from_statistics",
    # Classification
    "TokenClassifier",
    "TokenClassification",
    "clean_token",
    # Aggregation
    "PageStatsAggregator",
    "OCRDocument",
    # Dictionary
    "SpellDictionary",
    "load_dictionary",
    "load_dictionaries",
    # Line-break
    "LineBreakStats",
    "join_line_break_hyphens",
    # Replacement rules
    "parse_replacement_rules",
    "load_replacement_rules",
]
