"""
Equal-width histogram binning.

Bins are contiguous and cover [min, max] of the finite inputs inclusive:
the maximum value lands in the last bin instead of overflowing.

Usage:
    from src.stats.histogram import histogram
    h = histogram(column_values(rows, "odd_1"))
    h.counts    # [12, 40, ...]
    h.edges     # [1.01, 1.35, ...]
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable

from src.stats.columns import finite_values

MIN_DEFAULT_BINS = 5
MAX_DEFAULT_BINS = 30

# Relative width used when every value is identical
_ZERO_RANGE_EPS = 1e-9


@dataclass(frozen=True)
class Bin:
    lower: float
    upper: float
    count: int


@dataclass(frozen=True)
class Histogram:
    bins: list[Bin] = field(default_factory=list)

    @property
    def counts(self) -> list[int]:
        return [b.count for b in self.bins]

    @property
    def edges(self) -> list[float]:
        """bin_count + 1 edges, or [] for an empty histogram."""
        if not self.bins:
            return []
        return [b.lower for b in self.bins] + [self.bins[-1].upper]

    @property
    def total(self) -> int:
        return sum(self.counts)


def default_bin_count(n: int) -> int:
    """Sturges' rule, round(log2(n) + 1), clamped to [5, 30]."""
    if n < 1:
        return MIN_DEFAULT_BINS
    k = round(math.log2(n) + 1)
    return max(MIN_DEFAULT_BINS, min(MAX_DEFAULT_BINS, k))


def histogram(values: Iterable[Any], bin_count: int | None = None) -> Histogram:
    """
    Bin the finite values of `values` into `bin_count` equal-width bins.

    bin_count=None → default_bin_count(n).
    No finite values → Histogram with no bins.
    """
    if bin_count is not None and (
        isinstance(bin_count, bool) or not isinstance(bin_count, int) or bin_count < 1
    ):
        raise ValueError(f"bin_count must be a positive integer, got {bin_count!r}")

    xs = finite_values(values)
    if not xs:
        return Histogram()

    k = bin_count if bin_count is not None else default_bin_count(len(xs))
    lo, hi = min(xs), max(xs)
    if hi == lo:
        hi = lo + max(abs(lo), 1.0) * _ZERO_RANGE_EPS
    # halved operands: hi - lo overflows for ranges near the float limit
    half_range = hi / 2 - lo / 2

    counts = [0] * k
    for x in xs:
        idx = int(math.floor((x / 2 - lo / 2) / half_range * k))
        counts[max(0, min(k - 1, idx))] += 1

    def edge(i: int) -> float:
        if i == k:
            return hi
        t = i / k
        return lo * (1 - t) + hi * t

    bins = [Bin(lower=edge(i), upper=edge(i + 1), count=c) for i, c in enumerate(counts)]
    return Histogram(bins=bins)
