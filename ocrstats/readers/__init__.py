"""Page readers: format-specific token sources.

Each reader turns one input file into OCRPage objects exposing a token
stream and a page number.
"""

from ocrstats.readers.base import OCRPage, page_number_from_path
from ocrstats.readers.hocr_reader import HOCRPage, HOCRToken, parse_title_properties
from ocrstats.readers.pdf_reader import PDFPage, PDFReader
from ocrstats.readers.txt_reader import TxtPage, tokenize

__all__ = [
    # Base contract
    "OCRPage",
    "page_number_from_path",
    # Plain text
    "TxtPage",
    "tokenize",
    # hOCR
    "HOCRPage",
    "HOCRToken",
    "parse_title_properties",
    # PDF
    "PDFPage",
    "PDFReader",
]
