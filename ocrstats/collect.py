"""
Run orchestrator.

This module provides `run()`, which turns a directory of OCR output
into statistics CSV files by wiring together:
- File discovery (recursive walk + filter regex -> document ids)
- Page readers (txt, hocr, pdf)
- StatsPipeline (per-page statistics)
- Export (combined CSV, per-document CSVs, dictionary word lengths)
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from ocrstats.config import SUPPORTED_FORMATS, StatsConfig
from ocrstats.exceptions import DocumentIdError, PageParseError, UnsupportedFormatError
from ocrstats.export import write_document_files, write_documents_csv, write_length_distribution_csv
from ocrstats.models import PageStatistics
from ocrstats.ocr.document import OCRDocument
from ocrstats.ocr.pipeline import StatsPipeline, create_pipeline
from ocrstats.readers import HOCRPage, OCRPage, PDFReader, TxtPage

logger = logging.getLogger(__name__)

DOC_ID_SEPARATOR = "-"


# =============================================================================
# FILE DISCOVERY
# =============================================================================


def detect_format(path: str | Path) -> str:
    """
    Detect page format from file extension and magic bytes.

    Args:
        path: Path to an input file.

    Returns:
        Format string: "txt", "hocr" or "pdf".

    Raises:
        UnsupportedFormatError: If format cannot be detected or isn't supported
    """
    path = Path(path)

    ext = path.suffix.lower()
    ext_map = {
        ".txt": "txt",
        ".hocr": "hocr",
        ".html": "hocr",
        ".xhtml": "hocr",
        ".pdf": "pdf",
    }

    if ext in ext_map:
        return ext_map[ext]

    # Try magic bytes for PDF
    try:
        with open(path, "rb") as f:
            header = f.read(8)
            if header.startswith(b"%PDF"):
                return "pdf"
    except OSError:
        pass

    raise UnsupportedFormatError(f"Cannot detect format for: {path}")


def document_id(match: re.Match[str]) -> str:
    """
    Build a document id from the capture groups of a filter match.

    Groups that did not participate in the match contribute an empty string.

    Example:
        >>> document_id(re.search(r"(\\w+)/(\\w+)/\\d+\\.txt$", "/data/vol1/book2/0001.txt"))
        'vol1-book2'

    Raises:
        DocumentIdError: If the filter has no capture groups.
    """
    groups = match.groups()
    if not groups:
        raise DocumentIdError(
            f"No groups matched the file filter {match.re.pattern!r} - cannot compute document id"
        )
    return DOC_ID_SEPARATOR.join(g or "" for g in groups)


def iter_matching_files(
    directory: str | Path,
    pattern: str | re.Pattern[str],
) -> Iterator[tuple[Path, re.Match[str]]]:
    """
    Walk a directory recursively and yield files whose absolute path matches.

    The pattern is searched anywhere in the path. Files are yielded in
    sorted path order.
    """
    if isinstance(pattern, str):
        pattern = re.compile(pattern)

    root = Path(directory).absolute()
    for path in sorted(p for p in root.rglob("*") if p.is_file()):
        match = pattern.search(str(path))
        if match is not None:
            yield path, match


# =============================================================================
# PAGE PROCESSING
# =============================================================================


def read_pages(path: str | Path, fmt: str | None = None) -> list[OCRPage]:
    """
    Read the pages of one input file.

    Text and hOCR files hold a single page; a PDF holds one page per PDF page.

    Args:
        path: Input file.
        fmt: "txt", "hocr" or "pdf"; detected from the file when None.

    Raises:
        PageParseError: If the file cannot be parsed.
        UnsupportedFormatError: If the format is unknown.
    """
    fmt = fmt or detect_format(path)
    if fmt == "txt":
        return [TxtPage.parse(path)]
    if fmt == "hocr":
        return [HOCRPage.parse(path)]
    if fmt == "pdf":
        return list(PDFReader().read(path))
    raise UnsupportedFormatError(f"Unsupported format {fmt!r}, expected one of {SUPPORTED_FORMATS}")


def _process_file(pipeline: StatsPipeline, path: Path, fmt: str) -> list[PageStatistics] | None:
    try:
        pages = read_pages(path, fmt)
    except PageParseError as e:
        logger.error("Error processing page %s: %s", path, e)
        return None
    return [pipeline.process_page(page) for page in pages]


def collect_documents(
    pipeline: StatsPipeline,
    directory: str | Path,
    file_filter: str | re.Pattern[str],
    fmt: str,
    max_workers: int = 1,
) -> dict[str, OCRDocument]:
    """
    Compute statistics for every matching file, grouped into documents.

    Files are processed on up to `max_workers` threads; results are
    merged into documents on the calling thread, in file order.

    Args:
        pipeline: Pipeline shared by all files.
        directory: Root directory to walk.
        file_filter: Regex whose capture groups form the document id.
        fmt: Input format.
        max_workers: Number of worker threads.

    Returns:
        Documents keyed by id, in the order they were first seen.

    Raises:
        DocumentIdError: If the filter has no capture groups.
    """
    files = [(path, document_id(match)) for path, match in iter_matching_files(directory, file_filter)]

    documents: dict[str, OCRDocument] = {}
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        results = executor.map(lambda item: _process_file(pipeline, item[0], fmt), files)
        for count, ((path, doc_id), page_stats) in enumerate(zip(files, results), start=1):
            logger.info("%d: %s", count, path)
            document = documents.setdefault(doc_id, OCRDocument(doc_id))
            for stats in page_stats or ():
                document.add_page(stats)

    return documents


# =============================================================================
# RUN
# =============================================================================


def run(config: StatsConfig) -> dict[str, OCRDocument]:
    """
    Execute a full statistics run and write its CSV outputs.

    Args:
        config: Validated run configuration.

    Returns:
        The collected documents.

    Raises:
        ConfigurationError: If dictionaries or replacement rules are invalid.
        DocumentIdError: If the filter has no capture groups.
    """
    logger.info("Using data directory: %s", config.directory)
    pipeline = create_pipeline(config.dictionaries, config.replacements, config.languages)

    if config.length_distribution_output:
        with open(config.length_distribution_output, "w", encoding="utf-8", newline="") as f:
            write_length_distribution_csv(pipeline.dictionaries, f)
        logger.info("Word length distribution: %s", config.length_distribution_output)

    documents = collect_documents(
        pipeline,
        config.directory,
        config.filter,
        config.format,
        max_workers=config.max_workers,
    )

    logger.info("Output file: %s", config.output)
    with open(config.output, "w", encoding="utf-8", newline="") as f:
        rows = write_documents_csv(documents.values(), f, pipeline.csv_columns(config.format))
    logger.info("Wrote %d pages from %d documents", rows, len(documents))

    if config.per_document_dir:
        written = write_document_files(documents.values(), config.per_document_dir)
        logger.info("Wrote %d per-document files to %s", len(written), config.per_document_dir)

    logger.info("Finished")
    return documents
