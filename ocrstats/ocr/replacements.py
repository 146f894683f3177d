"""
Replacement rules.

Rules are written as ``source=target`` entries separated by ``;`` and are
stored as a mapping of target -> source. They are only used to count how
many tokens on a page a rule would apply to; no text is ever rewritten.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from ocrstats.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

RULE_SEPARATOR = ";"
RULE_ASSIGNMENT = "="


def parse_replacement_rules(text: str) -> dict[str, str]:
    """
    Parse replacement rules from text.

    Args:
        text: Rules separated by ';', each of the form 'source=target'.

    Returns:
        Mapping of target -> source.

    Raises:
        ConfigurationError: If an entry does not contain exactly one '='.

    Example:
        >>> parse_replacement_rules("ſ=f; vv=w")
        {'f': 'ſ', 'w': 'vv'}
    """
    rules: dict[str, str] = {}
    for raw_rule in text.split(RULE_SEPARATOR):
        rule = raw_rule.strip()
        if not rule:
            continue

        if rule.count(RULE_ASSIGNMENT) != 1:
            raise ConfigurationError(f"Invalid replacement rule: {rule}")

        source, target = rule.split(RULE_ASSIGNMENT)
        rules[target.strip()] = source.strip()

    return rules


def load_replacement_rules(paths: Iterable[str | Path]) -> dict[str, str]:
    """
    Load and merge replacement rules from files; later files win.

    Raises:
        ConfigurationError: If a file contains an invalid rule.
        OSError: If a file cannot be read.
    """
    rules: dict[str, str] = {}
    for path in paths:
        path = Path(path)
        logger.info("Loading replacement rules: %s", path)
        rules.update(parse_replacement_rules(path.read_text(encoding="utf-8")))

    logger.debug("Loaded %d replacement rules", len(rules))
    return rules
