"""
hOCR page reader.

hOCR is XHTML in which OCR engines mark up layout with class names:
``ocr_page`` > ``ocr_par`` > ``ocr_line`` > ``ocrx_word``. Words are
read line by line, so the last word of every line carries the
last-on-line flag used for hyphenation rejoining.

Element lookups match on class attributes only, so documents with or
without the XHTML namespace are handled the same way.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from lxml import etree

from ocrstats.exceptions import PageParseError
from ocrstats.models import PageStatistics, Token
from ocrstats.readers.base import OCRPage, page_number_from_path

logger = logging.getLogger(__name__)


XPATH_PAGE = etree.XPath("//*[@class='ocr_page']")
XPATH_PARAGRAPHS = etree.XPath("descendant::*[@class='ocr_par']")
XPATH_LINES = etree.XPath("descendant::*[@class='ocr_line']")
XPATH_WORDS = etree.XPath("descendant::*[@class='ocrx_word']")
XPATH_META = etree.XPath("//*[local-name()='meta'][@name=$name]/@content")


def parse_title_properties(title: str) -> dict[str, str]:
    """
    Parse an hOCR title attribute into its properties.

    Example:
        >>> parse_title_properties("bbox 10 20 30 40; x_wconf 93")
        {'bbox': '10 20 30 40', 'x_wconf': '93'}
    """
    properties = {}
    for prop in title.split(";"):
        prop = prop.strip()
        if not prop:
            continue
        name, _, value = prop.partition(" ")
        properties[name] = value.strip()
    return properties


@dataclass(frozen=True)
class HOCRToken(Token):
    """A word from an hOCR line, with its title properties."""

    token_id: str | None = None
    properties: dict[str, str] = field(default_factory=dict, compare=False, hash=False)

    @property
    def confidence(self) -> float | None:
        """Word confidence (x_wconf), 0-100, if the engine reported one."""
        value = self.properties.get("x_wconf")
        try:
            return float(value) if value is not None else None
        except ValueError:
            return None


def _element_text(element: etree._Element) -> str:
    return "".join(element.itertext())


class HOCRPage(OCRPage):
    """
    A single hOCR page.

    Attributes:
        page_id: id attribute of the ocr_page element.
        ocr_engine: Content of the ocr-system meta tag.
        ocr_capabilities: Content of the ocr-capabilities meta tag.
    """

    def __init__(
        self,
        page_id: str,
        page_number: int | None,
        page_element: etree._Element,
        ocr_engine: str = "",
        ocr_capabilities: frozenset[str] = frozenset(),
    ):
        self.page_id = page_id
        self._page_number = page_number
        self._page_element = page_element
        self.ocr_engine = ocr_engine
        self.ocr_capabilities = ocr_capabilities

        self.lines_per_paragraph: list[int] = []
        self.tokens_per_line: list[int] = []
        for paragraph in XPATH_PARAGRAPHS(page_element):
            lines = XPATH_LINES(paragraph)
            self.lines_per_paragraph.append(len(lines))
            self.tokens_per_line.extend(len(XPATH_WORDS(line)) for line in lines)

    @classmethod
    def from_tree(cls, tree: etree._ElementTree, page_number: int | None = None) -> HOCRPage:
        pages = XPATH_PAGE(tree)
        if not pages:
            raise PageParseError("No ocr_page element found")
        page_element = pages[0]

        engine = XPATH_META(tree, name="ocr-system")
        capabilities = XPATH_META(tree, name="ocr-capabilities")
        return cls(
            page_id=page_element.get("id", ""),
            page_number=page_number,
            page_element=page_element,
            ocr_engine=str(engine[0]) if engine else "",
            ocr_capabilities=frozenset(str(capabilities[0]).split()) if capabilities else frozenset(),
        )

    @classmethod
    def from_bytes(cls, data: bytes, page_number: int | None = None) -> HOCRPage:
        """
        Parse hOCR markup.

        Raises:
            PageParseError: If the markup is malformed or has no ocr_page.
        """
        parser = etree.XMLParser(load_dtd=False, no_network=True, resolve_entities=False)
        try:
            root = etree.fromstring(data, parser)
        except etree.XMLSyntaxError as e:
            logger.error("hOCR parser error: %s", e)
            raise PageParseError(f"Malformed hOCR: {e}") from e
        return cls.from_tree(root.getroottree(), page_number)

    @classmethod
    def parse(cls, path: str | Path) -> HOCRPage:
        """
        Read an hOCR file; the page number comes from the file name.

        Raises:
            PageParseError: If the file cannot be read or parsed.
        """
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise PageParseError(f"Cannot read hOCR page {path}: {e}") from e

        try:
            return cls.from_bytes(data, page_number_from_path(path))
        except PageParseError as e:
            raise PageParseError(f"{path}: {e}") from e

    def tokens(self) -> Iterator[HOCRToken]:
        for line in XPATH_LINES(self._page_element):
            words = XPATH_WORDS(line)
            last = len(words) - 1
            for index, word in enumerate(words):
                yield HOCRToken(
                    text=_element_text(word),
                    is_last_on_line=index == last,
                    token_id=word.get("id"),
                    properties=parse_title_properties(word.get("title", "")),
                )

    @property
    def page_number(self) -> int | None:
        return self._page_number

    @property
    def paragraph_count(self) -> int:
        return len(self.lines_per_paragraph)

    @property
    def line_count(self) -> int:
        return len(self.tokens_per_line)

    @property
    def has_layout(self) -> bool:
        return True

    def annotate_statistics(self, stats: PageStatistics) -> PageStatistics:
        stats.paragraphs = self.paragraph_count
        stats.lines = self.line_count
        return stats
