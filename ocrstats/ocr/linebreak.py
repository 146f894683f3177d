"""
Line-break hyphenation rejoiner.

A word split across lines ("inter-" at the end of one line, "esting" at
the start of the next) is counted as the single word "interesting".
The join happens on the token stream, before any classification, and
relies only on the reader's last-on-line flag.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from ocrstats.models import Token

logger = logging.getLogger(__name__)


HYPHEN = "-"


@dataclass
class LineBreakStats:
    """Statistics for line-break processing."""

    tokens_seen: int = 0
    candidates_joined: int = 0


def join_line_break_hyphens(
    tokens: Iterable[Token],
    stats: LineBreakStats | None = None,
) -> Iterator[str]:
    """
    Yield trimmed token texts with line-break hyphenations rejoined.

    A token flagged last-on-line whose trimmed text ends with a hyphen is
    merged with the next token: the hyphen is dropped and the next token's
    trimmed text appended. The merged token is not considered for another
    join. Blank texts are yielded as-is (empty) and left to the caller.

    Args:
        tokens: Token stream for one page.
        stats: Optional statistics collector.

    Yields:
        Token texts, one per (possibly joined) token.

    Example:
        >>> list(join_line_break_hyphens([Token("inter-", True), Token("esting")]))
        ['interesting']
    """
    iterator = iter(tokens)
    for token in iterator:
        text = token.text.strip()
        if stats is not None:
            stats.tokens_seen += 1

        if token.is_last_on_line and text.endswith(HYPHEN):
            following = next(iterator, None)
            if following is not None:
                text = text[: -len(HYPHEN)] + following.text.strip()
                if stats is not None:
                    stats.tokens_seen += 1
                    stats.candidates_joined += 1
                logger.debug("Joined line-break hyphenation: %s", text)

        yield text
