"""
ocrstats: Page-level quality statistics for OCR output.

Reads OCR output (plain text, hOCR or searchable PDF), classifies every
token against one or more spelling dictionaries, and writes one row of
statistics per page: token profiles, spell-check results, character
frequencies, length histograms and derived quality scores.

Example:
    >>> import ocrstats
    >>> pipeline = ocrstats.create_pipeline(["eng.dict"])
    >>> document = pipeline.process_pages("book", ocrstats.read_pages("pages/0001.txt"))
    >>> for stats in document:
    ...     print(stats.page_number, stats.quality_score)
"""

from ocrstats.collect import (
    collect_documents,
    detect_format,
    document_id,
    iter_matching_files,
    read_pages,
    run,
)
from ocrstats.config import StatsConfig
from ocrstats.exceptions import (
    ConfigurationError,
    DocumentIdError,
    OCRStatsError,
    PageParseError,
    UnsupportedFormatError,
)
from ocrstats.models import Bin, PageStatistics, Token
from ocrstats.ocr import OCRDocument, SpellDictionary, StatsPipeline, create_pipeline

__version__ = "0.1.0"

__all__ = [
    # Main API
    "run",
    "create_pipeline",
    "StatsPipeline",
    "collect_documents",
    "read_pages",
    "detect_format",
    "document_id",
    "iter_matching_files",
    # Configuration
    "StatsConfig",
    # Models
    "Token",
    "Bin",
    "PageStatistics",
    "OCRDocument",
    "SpellDictionary",
    # Exceptions
    "OCRStatsError",
    "UnsupportedFormatError",
    "PageParseError",
    "DocumentIdError",
    "ConfigurationError",
    # Version
    "__version__",
]
