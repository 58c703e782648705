"""
Numeric coercion and column extraction over loosely typed rows.

CSV cells arrive as text ("1,234", " 62.5% ", "") or as numbers. Everything
the statistics layer consumes goes through to_number(), which never turns a
bad cell into 0; it returns None and the caller skips it.

Usage:
    from src.stats.columns import column_values, paired_values
    xs = column_values(rows, "odd_1")
    xs, ys = paired_values(rows, "odd_1", "odd_2")
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Mapping

Row = Mapping[str, Any]


def to_number(value: Any) -> float | None:
    """
    Coerce a cell to a finite float, or None when it is missing/unparseable.

    Strips whitespace, percent signs and thousands separators before parsing.
    Booleans are not numbers here.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        x = float(value)
    else:
        text = str(value).strip().replace("%", "").replace(",", "").strip()
        if not text:
            return None
        try:
            x = float(text)
        except ValueError:
            return None
    return x if math.isfinite(x) else None


def finite_values(values: Iterable[Any]) -> list[float]:
    """Keep only the values that coerce to finite numbers."""
    out = []
    for v in values:
        x = to_number(v)
        if x is not None:
            out.append(x)
    return out


def column_values(rows: Iterable[Row], column: str) -> list[float]:
    """Ordered numeric values of one column, missing cells skipped."""
    return finite_values(row.get(column) for row in rows)


def paired_values(
    rows: Iterable[Row], col_a: str, col_b: str
) -> tuple[list[float], list[float]]:
    """
    Values of two columns taken only from rows where BOTH coerce.

    The two lists always have the same length and stay row-aligned.
    """
    xs: list[float] = []
    ys: list[float] = []
    for row in rows:
        x = to_number(row.get(col_a))
        if x is None:
            continue
        y = to_number(row.get(col_b))
        if y is None:
            continue
        xs.append(x)
        ys.append(y)
    return xs, ys
