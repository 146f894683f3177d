"""
Base contract shared by all page readers.

Every format-specific page exposes a token stream and a page number.
The classification core only ever sees this contract.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Iterator
from pathlib import Path

from ocrstats.models import PageStatistics, Token

# Leading digits of a file name, e.g. "000123.txt" -> 123
PAGE_NUMBER_PATTERN = re.compile(r"^\d+")


def page_number_from_path(path: str | Path) -> int | None:
    """
    Recover a page number from the leading digits of a file name.

    Example:
        >>> page_number_from_path("/data/book/000042.html")
        42
        >>> page_number_from_path("cover.txt") is None
        True
    """
    match = PAGE_NUMBER_PATTERN.match(Path(path).name)
    if match is None:
        return None
    return int(match.group())


class OCRPage(ABC):
    """A single page of OCR output."""

    @abstractmethod
    def tokens(self) -> Iterator[Token]:
        """Yield the page's tokens in reading order. Restartable."""

    @property
    @abstractmethod
    def page_number(self) -> int | None:
        """Page number, or None if it cannot be recovered."""

    @property
    def has_layout(self) -> bool:
        """Whether this page contributes paragraph/line columns."""
        return False

    def annotate_statistics(self, stats: PageStatistics) -> PageStatistics:
        """Fill in format-specific fields after aggregation."""
        return stats

    def __str__(self) -> str:
        return f"Page {self.page_number}"
