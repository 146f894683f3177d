"""
Document-level collection of page statistics.
"""

from __future__ import annotations

import bisect
import csv
import logging
from collections.abc import Iterator
from typing import TextIO

from ocrstats.export import CSV_DIALECT, format_row
from ocrstats.models import PageStatistics

logger = logging.getLogger(__name__)


def _page_sort_key(stats: PageStatistics) -> tuple[bool, int]:
    # Pages without a recoverable number sort first
    return (stats.page_number is not None, stats.page_number or 0)


class OCRDocument:
    """
    Page statistics of one logical document, ordered by page number.

    Pages with the same number are all kept, in insertion order. A
    document has a single owner: add_page() is not meant for concurrent
    writers.

    Example:
        >>> doc = OCRDocument("book-1")
        >>> doc.add_page(PageStatistics(page_number=2))
        >>> doc.add_page(PageStatistics(page_number=1))
        >>> [p.page_number for p in doc]
        [1, 2]
    """

    def __init__(self, doc_id: str):
        self.doc_id = doc_id
        self._pages: list[PageStatistics] = []

    def add_page(self, stats: PageStatistics) -> None:
        bisect.insort_right(self._pages, stats, key=_page_sort_key)

    @property
    def pages(self) -> tuple[PageStatistics, ...]:
        return tuple(self._pages)

    def __iter__(self) -> Iterator[PageStatistics]:
        return iter(self._pages)

    def __len__(self) -> int:
        return len(self._pages)

    def columns(self) -> list[str]:
        """Header shared by all pages: the first page's column set."""
        if not self._pages:
            return []
        return self._pages[0].available_columns()

    def write_csv(self, stream: TextIO, include_header: bool = True) -> bool:
        """
        Write one CSV row per page.

        Args:
            stream: Text stream opened with newline="".
            include_header: Whether to write the header row first.

        Returns:
            False (and nothing written) if the document has no pages.
        """
        if not self._pages:
            logger.warning("Document %s contains 0 pages - no stats CSV will be created", self.doc_id)
            return False

        header = self.columns()
        writer = csv.writer(stream, dialect=CSV_DIALECT)
        if include_header:
            writer.writerow(header)
        for stats in self._pages:
            writer.writerow(format_row(stats.to_csv_entry(), header))
        return True

    def __repr__(self) -> str:
        return f"OCRDocument({self.doc_id!r}, pages={len(self._pages)})"

    def __str__(self) -> str:
        return self.doc_id
