"""
Adaptive word-length bins derived from dictionary statistics.

Bins are centered on the mean dictionary word length and are one
standard deviation wide, so token lengths are histogrammed relative to
what "normal" words look like in the reference vocabularies.

Example:
    >>> summary = LengthSummary.from_values([3, 5, 7])
    >>> [b.name for b in compute_length_bins(summary)]
    ['*_to_-1', '-1_to_1', '1_to_3', '3_to_5', '5_to_7', '7_to_9', '9_to_11', '11_to_*']
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass

from ocrstats.models import Bin

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# Boundaries at mean + i * stdev for i in this range
STDEV_STEPS = range(-3, 4)
BIN_COUNT = len(STDEV_STEPS) + 1


# =============================================================================
# SUMMARY STATISTICS
# =============================================================================


@dataclass(frozen=True)
class LengthSummary:
    """
    Count, mean and sum of squared deviations of a set of word lengths.

    Summaries of several dictionaries are merged with the pairwise
    (Chan et al.) update, which keeps the combined variance exact without
    going back to the word lists.
    """

    n: int = 0
    mean: float = math.nan
    m2: float = 0.0
    min: float = math.nan
    max: float = math.nan

    @classmethod
    def from_values(cls, values: Iterable[float]) -> LengthSummary:
        """Build a summary with Welford's streaming algorithm."""
        n = 0
        mean = 0.0
        m2 = 0.0
        low = math.inf
        high = -math.inf
        for value in values:
            n += 1
            delta = value - mean
            mean += delta / n
            m2 += delta * (value - mean)
            low = min(low, value)
            high = max(high, value)

        if n == 0:
            return cls()
        return cls(n=n, mean=mean, m2=m2, min=low, max=high)

    @classmethod
    def aggregate(cls, summaries: Iterable[LengthSummary]) -> LengthSummary:
        """Merge summaries as if their values had been pooled."""
        result = cls()
        for summary in summaries:
            result = result.combine(summary)
        return result

    def combine(self, other: LengthSummary) -> LengthSummary:
        if other.n == 0:
            return self
        if self.n == 0:
            return other

        n = self.n + other.n
        delta = other.mean - self.mean
        mean = self.mean + delta * other.n / n
        m2 = self.m2 + other.m2 + delta * delta * self.n * other.n / n
        return LengthSummary(
            n=n,
            mean=mean,
            m2=m2,
            min=min(self.min, other.min),
            max=max(self.max, other.max),
        )

    @property
    def variance(self) -> float:
        """Sample variance (n - 1 denominator); 0.0 for a single value."""
        if self.n == 0:
            return math.nan
        if self.n == 1:
            return 0.0
        return self.m2 / (self.n - 1)

    @property
    def stdev(self) -> float:
        return math.sqrt(self.variance)


# =============================================================================
# BIN CALCULATION
# =============================================================================


def _ceil(value: float | None) -> int | None:
    return None if value is None else math.ceil(value)


def compute_length_bins(summary: LengthSummary) -> tuple[Bin, ...]:
    """
    Compute the 8 contiguous length bins for a length summary.

    Boundaries are mean + i * stdev for i in -3..3. The first bin is
    unbounded below and the last one unbounded above. Edges are rounded
    up to whole lengths only when each bin is built.

    Args:
        summary: Aggregated word-length summary.

    Returns:
        Tuple of 8 bins in ascending order.

    Raises:
        ValueError: If the summary is empty (mean or stdev undefined).
    """
    if summary.n == 0:
        raise ValueError("Cannot compute length bins from an empty summary")
    return bins_from_statistics(summary.mean, summary.stdev)


def bins_from_statistics(mean: float, stdev: float) -> tuple[Bin, ...]:
    """Compute the 8 length bins directly from a mean and standard deviation."""
    if math.isnan(mean) or math.isnan(stdev):
        raise ValueError("mean and stdev must be numbers")
    if stdev < 0:
        raise ValueError(f"stdev must be >= 0, got {stdev}")

    bins = []
    low: float | None = None
    for step in STDEV_STEPS:
        high = mean + step * stdev
        bins.append(Bin(_ceil(low), _ceil(high)))
        low = high
    bins.append(Bin(_ceil(low), None))

    logger.debug("Computed %d length bins: %s", len(bins), ",".join(b.name for b in bins))
    return tuple(bins)
