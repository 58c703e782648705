"""
Bookmaker odds → pre-match win probability.

Decimal odds carry the bookmaker's margin (1/o1 + 1/o2 > 1). Normalising
the two inverse odds removes it and gives a probability that sums to 1
across both players.

Usage:
    from src.predictions.odds import implied_prob, prediction_pairs
    implied_prob(1.50, 2.60)      # 0.634
    labels, scores, dates = prediction_pairs(rows)
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Mapping

from src.stats.columns import to_number


def implied_prob(odd_1: Any, odd_2: Any) -> float | None:
    """
    P(player_1 wins) implied by a pair of decimal odds, overround removed.

    None when either odd is missing, non-numeric or not positive.
    """
    o1 = to_number(odd_1)
    o2 = to_number(odd_2)
    if o1 is None or o2 is None or o1 <= 0 or o2 <= 0:
        return None
    p1, p2 = 1.0 / o1, 1.0 / o2
    return p1 / (p1 + p2)


def favourite_is_player_1(odd_1: Any, odd_2: Any) -> bool | None:
    """True if player_1 has the shorter (or equal) odd; None without both odds."""
    o1 = to_number(odd_1)
    o2 = to_number(odd_2)
    if o1 is None or o2 is None:
        return None
    return o1 <= o2


def prediction_pairs(
    rows: Iterable[Mapping[str, Any]],
    label: str = "y",
    score: str = "p_implied",
) -> tuple[list[int], list[float], list[str | None]]:
    """
    Aligned (labels, scores, dates) for every row that has both a label and
    a score. Feeds metrics.evaluate() and the calibration chart.
    """
    labels: list[int] = []
    scores: list[float] = []
    dates: list[str | None] = []
    for r in rows:
        y = r.get(label)
        p = r.get(score)
        if y is None or p is None:
            continue
        if isinstance(p, float) and math.isnan(p):
            continue
        labels.append(int(y))
        scores.append(float(p))
        dates.append(r.get("date"))
    return labels, scores, dates


def class_balance(labels: list[int]) -> float:
    """Share of label 1 (player_1 wins); NaN for no labels."""
    if not labels:
        return float("nan")
    return sum(labels) / len(labels)
