"""
Configuration for ocrstats runs.

A run can be configured from command-line options, from a YAML file, or
both (command-line values override the file).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from ocrstats.exceptions import ConfigurationError

SUPPORTED_FORMATS = ("txt", "hocr", "pdf")

# Keys holding a single path
_PATH_KEYS = ("directory", "output", "per_document_dir", "length_distribution_output")


def _as_list(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, (str, Path)):
        return [value]
    return list(value)


@dataclass
class StatsConfig:
    """
    Configuration for a statistics run.

    Attributes:
        directory: Root directory searched recursively for input files.
        dictionaries: Word-list files, one word per line.
        languages: pyspellchecker language codes used as extra dictionaries.
        replacements: Replacement-rule files.
        format: Input format, one of txt, hocr, pdf.
        filter: Regex searched in each file path; its groups, joined by
            "-", form the document id.
        output: Combined CSV file.
        per_document_dir: Optional directory for one CSV per document.
        max_workers: Number of threads reading and processing files.
        length_distribution_output: Optional CSV of dictionary word lengths.

    Example:
        >>> config = StatsConfig(
        ...     directory="pages",
        ...     dictionaries=["eng.dict"],
        ...     filter=r"(\\w+)/\\d+\\.txt$",
        ...     output="stats.csv",
        ... )
    """

    directory: Path | None = None
    dictionaries: list[Path] = field(default_factory=list)
    languages: list[str] = field(default_factory=list)
    replacements: list[Path] = field(default_factory=list)
    format: str = "txt"
    filter: str | None = None
    output: Path | None = None
    per_document_dir: Path | None = None
    max_workers: int = 1
    length_distribution_output: Path | None = None

    def __post_init__(self):
        """Validate configuration."""
        self.dictionaries = [Path(p) for p in _as_list(self.dictionaries)]
        self.replacements = [Path(p) for p in _as_list(self.replacements)]
        self.languages = [str(lang) for lang in _as_list(self.languages)]
        for key in _PATH_KEYS:
            value = getattr(self, key)
            if value is not None:
                setattr(self, key, Path(value))

        if self.directory is None:
            raise ConfigurationError("An input directory is required")
        if self.output is None:
            raise ConfigurationError("An output file is required")
        if not self.dictionaries and not self.languages:
            raise ConfigurationError("At least one dictionary or language is required")

        if self.format not in SUPPORTED_FORMATS:
            raise ConfigurationError(
                f"format must be one of {SUPPORTED_FORMATS}, got {self.format!r}"
            )

        if not self.filter:
            raise ConfigurationError("A file filter is required")
        try:
            re.compile(self.filter)
        except re.error as e:
            raise ConfigurationError(f"Invalid file filter {self.filter!r}: {e}") from e

        if self.max_workers < 1:
            raise ConfigurationError(f"max_workers must be >= 1, got {self.max_workers}")

    @classmethod
    def from_yaml(cls, path: str | Path, **overrides: Any) -> StatsConfig:
        """
        Load configuration from a YAML mapping.

        Keys are the attribute names of StatsConfig. Overrides with a None
        value are ignored, so unset command-line options keep the file's
        values.

        Raises:
            ConfigurationError: If the file cannot be read or has unknown keys.
        """
        path = Path(path)
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration {path} must be a mapping")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys in {path}: {', '.join(unknown)}")

        data.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**data)
