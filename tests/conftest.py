"""
Pytest configuration and fixtures for ocrstats tests.
"""

from pathlib import Path

import pytest

from ocrstats.ocr.bins import bins_from_statistics
from ocrstats.ocr.dictionary import SpellDictionary

SAMPLE_WORDS = [
    "the",
    "cat",
    "sat",
    "on",
    "mat",
    "interesting",
    "hello",
    "world",
    "don't",
    "philosophy",
]


@pytest.fixture(scope="session")
def bins():
    """Bins for mean word length 5 and stdev 2."""
    return bins_from_statistics(5, 2)


@pytest.fixture
def dictionary() -> SpellDictionary:
    """Small in-memory English word list."""
    return SpellDictionary.from_words("eng", SAMPLE_WORDS)


@pytest.fixture
def dictionary_file(tmp_path) -> Path:
    """Word-list file with the same words as the dictionary fixture."""
    path = tmp_path / "eng.dict"
    path.write_text("\n".join(SAMPLE_WORDS) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def hocr_bytes() -> bytes:
    """Two paragraphs, three lines, one line-break hyphenation."""
    return b"""<?xml version="1.0" encoding="UTF-8"?>
<html xmlns="http://www.w3.org/1999/xhtml" xml:lang="en" lang="en">
 <head>
  <title></title>
  <meta http-equiv="Content-Type" content="text/html;charset=utf-8"/>
  <meta name="ocr-system" content="tesseract 5.3.0"/>
  <meta name="ocr-capabilities" content="ocr_page ocr_carea ocr_par ocr_line ocrx_word"/>
 </head>
 <body>
  <div class="ocr_page" id="page_1" title="image &quot;p.png&quot;; bbox 0 0 100 100">
   <p class="ocr_par" id="par_1_1">
    <span class="ocr_line" id="line_1_1" title="bbox 0 0 100 10">
     <span class="ocrx_word" id="word_1_1" title="bbox 0 0 10 10; x_wconf 95">The</span>
     <span class="ocrx_word" id="word_1_2" title="bbox 10 0 20 10; x_wconf 91">cat</span>
     <span class="ocrx_word" id="word_1_3" title="bbox 20 0 30 10; x_wconf 87">inter-</span>
    </span>
    <span class="ocr_line" id="line_1_2" title="bbox 0 10 100 20">
     <span class="ocrx_word" id="word_1_4" title="bbox 0 10 10 20; x_wconf 90">esting</span>
     <span class="ocrx_word" id="word_1_5" title="bbox 10 10 20 20; x_wconf 60">tbe</span>
    </span>
   </p>
   <p class="ocr_par" id="par_1_2">
    <span class="ocr_line" id="line_1_3" title="bbox 0 20 100 30">
     <span class="ocrx_word" id="word_1_6" title="bbox 0 20 10 30; x_wconf 93"><strong>mat</strong></span>
     <span class="ocrx_word" id="word_1_7" title="bbox 10 20 20 30; x_wconf 99">12</span>
    </span>
   </p>
  </div>
 </body>
</html>
"""
