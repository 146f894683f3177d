"""Command-line interface for ocrstats.

Usage:
    ocrstats pages/ -d eng.dict -f txt -x "(\\w+)/\\d+\\.txt$" -o stats.csv
    ocrstats pages/ -d eng.dict -r rules.txt -f hocr -x "(\\w+)/(\\w+)/" -o stats.csv \\
        --per-document per_doc/ --workers 4 --summary
    ocrstats --config run.yaml -v
"""

from __future__ import annotations

import argparse
import logging
import math
import sys
from collections.abc import Iterable

from tabulate import tabulate

from ocrstats import __version__
from ocrstats.collect import run
from ocrstats.config import SUPPORTED_FORMATS, StatsConfig
from ocrstats.exceptions import ConfigurationError, DocumentIdError
from ocrstats.ocr.document import OCRDocument

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _mean(values: Iterable[float]) -> float:
    finite = [v for v in values if not math.isnan(v)]
    return sum(finite) / len(finite) if finite else math.nan


def generate_summary(documents: Iterable[OCRDocument]) -> str:
    """Generate a terminal table of page count and mean scores per document.

    NaN page scores (pages without any spell-checked token) are left out
    of the means.
    """
    headers = ["Document", "Pages", "Quality", "Score"]
    rows = []
    for document in documents:
        rows.append(
            [
                document.doc_id,
                len(document),
                _mean(p.quality_score for p in document),
                _mean(p.correctability_score for p in document),
            ]
        )
    return tabulate(rows, headers=headers, tablefmt="simple", floatfmt=".3f")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ocrstats",
        description="Compute OCR quality statistics for pages of OCR output",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "directory",
        nargs="?",
        help="Directory searched recursively for input files",
    )
    parser.add_argument(
        "--dictionary",
        "-d",
        dest="dictionaries",
        action="append",
        metavar="DICT",
        help="Word-list dictionary file, one word per line (repeatable)",
    )
    parser.add_argument(
        "--language",
        dest="languages",
        action="append",
        metavar="LANG",
        help="pyspellchecker language to use as an additional dictionary (repeatable)",
    )
    parser.add_argument(
        "--replacements",
        "-r",
        action="append",
        metavar="RULES",
        help="Replacement rule file with 'source=target;' entries (repeatable)",
    )
    parser.add_argument(
        "--format",
        "-f",
        choices=SUPPORTED_FORMATS,
        help="Input format (default: txt)",
    )
    parser.add_argument(
        "--filter",
        "-x",
        help="Regex searched in each file path; its groups form the document id",
    )
    parser.add_argument(
        "--output",
        "-o",
        help="Output CSV file",
    )
    parser.add_argument(
        "--per-document",
        dest="per_document_dir",
        metavar="DIR",
        help="Also write one CSV file per document into DIR",
    )
    parser.add_argument(
        "--length-distribution",
        dest="length_distribution_output",
        metavar="CSV",
        help="Write the word-length distribution of each dictionary to CSV",
    )
    parser.add_argument(
        "--workers",
        dest="max_workers",
        type=int,
        help="Number of worker threads (default: 1)",
    )
    parser.add_argument(
        "--config",
        help="YAML configuration file; command-line options override it",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print a per-document summary table",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def load_config(args: argparse.Namespace) -> StatsConfig:
    """Build the run configuration from parsed arguments."""
    options = {
        "directory": args.directory,
        "dictionaries": args.dictionaries,
        "languages": args.languages,
        "replacements": args.replacements,
        "format": args.format,
        "filter": args.filter,
        "output": args.output,
        "per_document_dir": args.per_document_dir,
        "max_workers": args.max_workers,
        "length_distribution_output": args.length_distribution_output,
    }
    if args.config:
        return StatsConfig.from_yaml(args.config, **options)
    return StatsConfig(**{key: value for key, value in options.items() if value is not None})


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
    )

    try:
        config = load_config(args)
        documents = run(config)
    except (ConfigurationError, DocumentIdError, OSError) as e:
        logger.error("%s", e)
        return 1

    if args.summary:
        print(generate_summary(documents.values()))

    return 0


if __name__ == "__main__":
    sys.exit(main())
