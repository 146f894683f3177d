"""
PDF text-layer reader using PyMuPDF (fitz).

Reads the text layer of searchable (OCRed) PDFs. Each PDF page becomes
one OCRPage numbered from 1. Words come from PyMuPDF's
get_text("words"), grouped by (block, line) so that the last word of
each line can be flagged for hyphenation rejoining.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

import fitz  # PyMuPDF

from ocrstats.exceptions import PageParseError
from ocrstats.models import Token
from ocrstats.readers.base import OCRPage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PDFWord:
    """A word from PyMuPDF's words output.

    Format of get_text("words"): (x0, y0, x1, y1, word, block_no, line_no, word_no)
    """

    text: str
    x0: float
    y0: float
    x1: float
    y1: float
    block: int
    line: int
    word: int


def _words_to_tokens(words: list[PDFWord]) -> list[Token]:
    """Order words by block, line, word and flag the last word of each line."""
    ordered = sorted(words, key=lambda w: (w.block, w.line, w.word))
    tokens = []
    for i, word in enumerate(ordered):
        following = ordered[i + 1] if i + 1 < len(ordered) else None
        is_last = following is None or (following.block, following.line) != (word.block, word.line)
        tokens.append(Token(word.text, is_last_on_line=is_last))
    return tokens


class PDFPage(OCRPage):
    """One page of a PDF text layer."""

    def __init__(self, page_number: int, words: list[PDFWord], label: str = ""):
        self._page_number = page_number
        self._tokens = _words_to_tokens(words)
        self.label = label

    @classmethod
    def from_fitz_page(cls, page: fitz.Page) -> PDFPage:
        words = [
            PDFWord(
                text=w[4],
                x0=w[0],
                y0=w[1],
                x1=w[2],
                y1=w[3],
                block=w[5],
                line=w[6],
                word=w[7],
            )
            for w in page.get_text("words")
        ]
        return cls(page.number + 1, words, label=page.get_label() or "")

    def tokens(self) -> Iterator[Token]:
        return iter(self._tokens)

    @property
    def page_number(self) -> int:
        return self._page_number


class PDFReader:
    """Extracts pages from PDF text layers using PyMuPDF.

    Usage:
        reader = PDFReader()
        for page in reader.read("/path/to/scan.pdf"):
            ...
    """

    def read(self, path: str | Path) -> list[PDFPage]:
        """Read every page of a PDF file.

        Args:
            path: Path to PDF file.

        Returns:
            One PDFPage per PDF page, in document order.

        Raises:
            PageParseError: If the file doesn't exist, is not a valid PDF, or a
                page's text layer cannot be extracted.
        """
        path = Path(path)
        if not path.exists():
            raise PageParseError(f"PDF not found: {path}")

        try:
            doc = fitz.open(path)
        except Exception as e:
            raise PageParseError(f"Failed to open PDF {path}: {e}") from e

        try:
            pages = [PDFPage.from_fitz_page(page) for page in doc]
        except Exception as e:
            raise PageParseError(f"Failed to read text layer of {path}: {e}") from e
        finally:
            doc.close()

        logger.debug("Read %d pages from %s", len(pages), path)
        return pages
