"""
Plain-text page reader.

Text is split into runs of letters, runs of digits, and runs of one
repeated other character ("..." stays one token, "a." becomes "a" and
"."). Plain text carries no reliable line layout, so no token is flagged
as last on its line and line-break hyphens are never rejoined.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from pathlib import Path

from ocrstats.exceptions import PageParseError
from ocrstats.models import Token
from ocrstats.readers.base import OCRPage, page_number_from_path

logger = logging.getLogger(__name__)

TOKEN_PATTERN = re.compile(r"[^\W\d_]+|\d+|([^\w\s]|_)\1*")


def tokenize(text: str) -> list[str]:
    """
    Split text on character-class changes.

    Example:
        >>> tokenize("It's 10 o'clock...")
        ['It', "'", 's', '10', 'o', "'", 'clock', '...']
    """
    return [match.group(0) for match in TOKEN_PATTERN.finditer(text)]


class TxtPage(OCRPage):
    """A page of plain OCR text."""

    def __init__(self, page_number: int | None, tokens: list[str]):
        self._page_number = page_number
        self._tokens = tokens

    @classmethod
    def from_text(cls, text: str, page_number: int | None = None) -> TxtPage:
        return cls(page_number, tokenize(text))

    @classmethod
    def parse(cls, path: str | Path) -> TxtPage:
        """
        Read and tokenize a UTF-8 text page.

        Raises:
            PageParseError: If the file cannot be read or decoded.
        """
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Txt parser error: %s", e)
            raise PageParseError(f"Cannot read text page {path}: {e}") from e

        return cls.from_text(text, page_number_from_path(path))

    def tokens(self) -> Iterator[Token]:
        for text in self._tokens:
            yield Token(text)

    @property
    def page_number(self) -> int | None:
        return self._page_number
