"""
Pairwise Pearson correlation over row-aligned numeric columns.

Each unordered pair is filtered independently: only rows where both columns
coerce to a number contribute. Population moments are used throughout.

Undefined coefficients (too few pairs, zero variance) are NaN, so callers
can tell them apart from a genuine 0 correlation.

Usage:
    from src.stats.correlation import correlation_matrix
    m = correlation_matrix(rows, ["odd_1", "odd_2", "p_implied"])
    m["odd_1"]["odd_2"]   # -0.71
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Mapping, Sequence

from src.stats.columns import column_values, paired_values, to_number

MIN_PAIRED_OBSERVATIONS = 3

NAN = float("nan")


def pearson(xs: Sequence[float], ys: Sequence[float], min_paired: int = MIN_PAIRED_OBSERVATIONS) -> float:
    """
    Pearson r of two aligned sequences.

    NaN when there are fewer than min_paired observations or when either
    side has zero variance. The result is clamped to [-1, 1].
    """
    if len(xs) != len(ys):
        raise ValueError(f"paired sequences differ in length: {len(xs)} vs {len(ys)}")
    n = len(xs)
    if n < min_paired or n == 0:
        return NAN

    mx = sum(xs) / n
    my = sum(ys) / n
    # constant float columns leave ~1e-34 of variance behind, so compare extrema
    if min(xs) == max(xs) or min(ys) == max(ys):
        return NAN
    sxx = sum((x - mx) ** 2 for x in xs) / n
    syy = sum((y - my) ** 2 for y in ys) / n
    cov = sum((x - mx) * (y - my) for x, y in zip(xs, ys)) / n
    r = cov / (math.sqrt(sxx) * math.sqrt(syy))
    return max(-1.0, min(1.0, r))


def correlation_matrix(
    rows: Iterable[Mapping[str, Any]],
    columns: Sequence[str],
    min_paired: int = MIN_PAIRED_OBSERVATIONS,
) -> dict[str, dict[str, float]]:
    """
    Symmetric {col_a: {col_b: r}} over `columns`, in the given order.

    Diagonal is 1.0 whenever the column has at least one finite value,
    NaN otherwise.
    """
    if not columns:
        raise ValueError("columns must not be empty")
    if len(set(columns)) != len(columns):
        raise ValueError(f"duplicate column names in {list(columns)!r}")
    if isinstance(min_paired, bool) or not isinstance(min_paired, int) or min_paired < 1:
        raise ValueError(f"min_paired must be a positive integer, got {min_paired!r}")

    rows = list(rows)
    matrix: dict[str, dict[str, float]] = {c: {} for c in columns}

    for i, a in enumerate(columns):
        matrix[a][a] = 1.0 if column_values(rows, a) else NAN
        for b in columns[i + 1:]:
            xs, ys = paired_values(rows, a, b)
            r = pearson(xs, ys, min_paired=min_paired)
            matrix[a][b] = r
            matrix[b][a] = r

    # restore caller's column order in every inner dict
    return {a: {b: matrix[a][b] for b in columns} for a in columns}


def numeric_columns(
    rows: Iterable[Mapping[str, Any]],
    exclude: Iterable[str] = (),
    limit: int | None = None,
) -> list[str]:
    """
    Columns holding at least one numeric cell, in first-seen order.

    `limit` caps the result (wide matrices stop being readable quickly).
    """
    skip = set(exclude)
    seen: list[str] = []
    numeric: set[str] = set()
    for row in rows:
        for key, value in row.items():
            if key in skip:
                continue
            if key not in numeric and to_number(value) is not None:
                numeric.add(key)
                seen.append(key)
    return seen[:limit] if limit is not None else seen
