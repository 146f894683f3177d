"""
Integration tests for the run orchestrator and command line.

These tests build a small directory tree of OCR pages and run the
whole pipeline end to end.
"""

import csv
import re

import pytest

from ocrstats import StatsConfig, run
from ocrstats.cli import main
from ocrstats.collect import collect_documents, document_id, iter_matching_files
from ocrstats.exceptions import DocumentIdError
from ocrstats.ocr.pipeline import create_pipeline

FILTER = r"(vol\d+)/(\w+)/\d+\.txt$"


def read_rows(path):
    with open(path, encoding="utf-8", newline="") as f:
        return list(csv.DictReader(f))


@pytest.fixture
def pages_dir(tmp_path):
    """Two documents with txt pages, plus files the filter ignores."""
    root = tmp_path / "pages"
    book = root / "vol1" / "book"
    other = root / "vol1" / "other"
    book.mkdir(parents=True)
    other.mkdir(parents=True)

    (book / "0002.txt").write_text("The cat sat on tbe mat.", encoding="utf-8")
    (book / "0001.txt").write_text("hello world", encoding="utf-8")
    (book / "0003.txt").write_bytes(b"\xff\xfe broken")
    (other / "0001.txt").write_text("", encoding="utf-8")
    (other / "notes.md").write_text("not a page", encoding="utf-8")
    return root


@pytest.fixture
def pipeline(dictionary_file):
    return create_pipeline([dictionary_file])


class TestDocumentIds:
    """Tests for file discovery and document ids."""

    def test_document_id_joins_groups(self):
        """Filter groups are joined with dashes."""
        match = re.search(FILTER, "/x/vol1/book/0001.txt")
        assert document_id(match) == "vol1-book"

    def test_document_id_requires_groups(self):
        """A filter without groups cannot name documents."""
        match = re.search(r"\d+\.txt$", "/x/0001.txt")
        with pytest.raises(DocumentIdError):
            document_id(match)

    def test_iter_matching_files_sorted(self, pages_dir):
        """Matching files are found recursively in sorted order."""
        names = [p.relative_to(pages_dir).as_posix() for p, _ in iter_matching_files(pages_dir, FILTER)]
        assert names == [
            "vol1/book/0001.txt",
            "vol1/book/0002.txt",
            "vol1/book/0003.txt",
            "vol1/other/0001.txt",
        ]


class TestCollectDocuments:
    """Tests for collect_documents."""

    def test_groups_pages_into_documents(self, pipeline, pages_dir):
        """Pages are grouped by document id."""
        documents = collect_documents(pipeline, pages_dir, FILTER, "txt")
        assert list(documents) == ["vol1-book", "vol1-other"]

        book = documents["vol1-book"]
        assert [p.page_number for p in book] == [1, 2]
        assert book.pages[1].correct_count == 5

        # An empty page is still a page
        other = documents["vol1-other"]
        assert len(other) == 1
        assert other.pages[0].token_count == 0

    def test_parse_errors_are_skipped(self, pipeline, pages_dir, caplog):
        """Unreadable files are logged and skipped."""
        documents = collect_documents(pipeline, pages_dir, FILTER, "txt")
        assert len(documents["vol1-book"]) == 2
        assert "0003.txt" in caplog.text

    def test_thread_pool_gives_same_result(self, pipeline, pages_dir):
        """Worker threads should not change the result."""
        serial = collect_documents(pipeline, pages_dir, FILTER, "txt")
        threaded = collect_documents(pipeline, pages_dir, FILTER, "txt", max_workers=4)
        assert list(serial) == list(threaded)
        for doc_id in serial:
            assert serial[doc_id].pages == threaded[doc_id].pages

    def test_filter_without_groups_halts(self, pipeline, pages_dir):
        """A filter without groups stops the run."""
        with pytest.raises(DocumentIdError):
            collect_documents(pipeline, pages_dir, r"\d+\.txt$", "txt")


class TestRun:
    """Tests for a full run."""

    def test_outputs(self, pages_dir, dictionary_file, tmp_path):
        """A run writes the combined, per-document and length files."""
        config = StatsConfig(
            directory=pages_dir,
            dictionaries=[dictionary_file],
            filter=FILTER,
            output=tmp_path / "stats.csv",
            per_document_dir=tmp_path / "docs",
            length_distribution_output=tmp_path / "lengths.csv",
        )
        documents = run(config)
        assert len(documents) == 2

        rows = read_rows(tmp_path / "stats.csv")
        assert [(r["docId"], r["page"]) for r in rows] == [
            ("vol1-book", "1"),
            ("vol1-book", "2"),
            ("vol1-other", "1"),
        ]
        assert rows[1]["tokens"] == "7"
        assert rows[2]["quality"] == "NaN"

        per_doc = read_rows(tmp_path / "docs" / "vol1-book.csv")
        assert "docId" not in per_doc[0]
        assert len(per_doc) == 2

        lengths = read_rows(tmp_path / "lengths.csv")
        assert list(lengths[0]) == ["wordLength", "eng"]


class TestCommandLine:
    """Tests for the ocrstats command."""

    def test_main(self, pages_dir, dictionary_file, tmp_path, capsys):
        """A full run from the command line."""
        output = tmp_path / "stats.csv"
        status = main(
            [
                str(pages_dir),
                "-d",
                str(dictionary_file),
                "-f",
                "txt",
                "-x",
                FILTER,
                "-o",
                str(output),
                "--workers",
                "2",
                "--summary",
            ]
        )
        assert status == 0
        assert len(read_rows(output)) == 3
        assert "vol1-book" in capsys.readouterr().out

    def test_options_before_directory(self, pages_dir, dictionary_file, tmp_path):
        """Repeatable options placed before the directory should not consume it."""
        extra = tmp_path / "extra.dict"
        extra.write_text("tbe\n", encoding="utf-8")
        output = tmp_path / "stats.csv"
        status = main(
            [
                "-d",
                str(dictionary_file),
                "-d",
                str(extra),
                str(pages_dir),
                "-x",
                FILTER,
                "-o",
                str(output),
            ]
        )
        assert status == 0
        assert len(read_rows(output)) == 3

    def test_filter_without_groups_exits_1(self, pages_dir, dictionary_file, tmp_path):
        """A filter without groups gives exit status 1."""
        status = main(
            [
                str(pages_dir),
                "-d",
                str(dictionary_file),
                "-x",
                r"\d+\.txt$",
                "-o",
                str(tmp_path / "stats.csv"),
            ]
        )
        assert status == 1

    def test_missing_dictionary_exits_1(self, pages_dir, tmp_path):
        """A missing dictionary gives exit status 1."""
        status = main(
            [
                str(pages_dir),
                "-d",
                str(tmp_path / "missing.dict"),
                "-x",
                FILTER,
                "-o",
                str(tmp_path / "stats.csv"),
            ]
        )
        assert status == 1

    def test_config_file(self, pages_dir, dictionary_file, tmp_path):
        """Options can come from a YAML file."""
        config = tmp_path / "run.yaml"
        config.write_text(
            f"directory: {pages_dir.as_posix()}\n"
            f"dictionaries: [{dictionary_file.as_posix()}]\n"
            f"filter: '{FILTER}'\n",
            encoding="utf-8",
        )
        output = tmp_path / "from_config.csv"
        assert main(["--config", str(config), "-o", str(output)]) == 0
        assert output.exists()
