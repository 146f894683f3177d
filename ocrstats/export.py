"""
CSV export of page statistics.

All files use the Excel CSV dialect (comma separated, double-quote
quoting, CRLF line endings) and UTF-8. Floating point cells that are not
finite are written as the literals ``NaN``, ``Infinity`` and
``-Infinity``; an undefined ratio is never written as an empty cell.
Empty cells only appear for values that are genuinely absent, such as
a page number that could not be recovered.
"""

from __future__ import annotations

import csv
import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any, TextIO

if TYPE_CHECKING:
    from ocrstats.ocr.dictionary import SpellDictionary
    from ocrstats.ocr.document import OCRDocument

logger = logging.getLogger(__name__)


CSV_DIALECT = "excel"
DOC_ID_COLUMN = "docId"
WORD_LENGTH_COLUMN = "wordLength"

NAN_TEXT = "NaN"
POSITIVE_INFINITY_TEXT = "Infinity"
NEGATIVE_INFINITY_TEXT = "-Infinity"


def format_value(value: Any) -> str:
    """
    Render one cell.

    Example:
        >>> format_value(float("nan"))
        'NaN'
        >>> format_value(0.25)
        '0.25'
        >>> format_value(None)
        ''
    """
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return NAN_TEXT
        if math.isinf(value):
            return POSITIVE_INFINITY_TEXT if value > 0 else NEGATIVE_INFINITY_TEXT
        return repr(value)
    return str(value)


def format_row(entry: Mapping[str, Any], header: Sequence[str]) -> list[str]:
    """Project an entry onto a header; missing columns become empty cells."""
    return [format_value(entry.get(column)) for column in header]


def write_documents_csv(
    documents: Iterable[OCRDocument],
    stream: TextIO,
    header: Sequence[str],
) -> int:
    """
    Write the pages of several documents to one CSV with a leading docId column.

    Documents without pages contribute no rows.

    Args:
        documents: Documents in output order.
        stream: Text stream opened with newline="".
        header: Page columns (without docId), usually StatsPipeline.csv_columns().

    Returns:
        Number of page rows written.
    """
    full_header = [DOC_ID_COLUMN, *header]
    writer = csv.writer(stream, dialect=CSV_DIALECT)
    writer.writerow(full_header)

    rows = 0
    for document in documents:
        if not len(document):
            logger.warning("Document %s contains 0 pages - skipped", document.doc_id)
            continue
        for stats in document:
            entry = {DOC_ID_COLUMN: document.doc_id, **stats.to_csv_entry()}
            writer.writerow(format_row(entry, full_header))
            rows += 1
    return rows


def write_document_files(documents: Iterable[OCRDocument], directory: str | Path) -> list[Path]:
    """Write one <docId>.csv per non-empty document; returns the files written."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    written = []
    for document in documents:
        path = directory / f"{document.doc_id}.csv"
        with open(path, "w", encoding="utf-8", newline="") as f:
            created = document.write_csv(f)
        if created:
            written.append(path)
        else:
            path.unlink()
    return written


def write_length_distribution_csv(
    dictionaries: Sequence[SpellDictionary],
    stream: TextIO,
) -> None:
    """
    Write word-length frequencies per dictionary.

    One row per length from 1 to the longest word of any dictionary, one
    column per dictionary.
    """
    distributions = {d.name: d.word_length_distribution() for d in dictionaries}
    max_length = max((max(dist, default=0) for dist in distributions.values()), default=0)

    writer = csv.writer(stream, dialect=CSV_DIALECT)
    writer.writerow([WORD_LENGTH_COLUMN, *distributions])
    for length in range(1, max_length + 1):
        writer.writerow([length, *(dist.get(length, 0) for dist in distributions.values())])
