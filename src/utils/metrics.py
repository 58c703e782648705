"""
Evaluation of probabilistic binary forecasts.

Here a forecast is the bookmaker-implied probability that player_1 wins.
The outcome is the match label y (1 = player_1 won).

  - ROC curve / AUC: ranking quality, independent of calibration.
  - Log loss and Brier score: proper scoring rules, lower is better.
  - Calibration bins: observed win rate per predicted-probability bucket.

Degenerate inputs (nothing to score, only one class present) give NaN,
never a plausible-looking 0.5 or 0.

Usage:
    from src.utils.metrics import evaluate
    ev = evaluate(labels, scores)
    print(ev.auc, ev.log_loss, ev.brier)
"""

from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Sequence

EPS = 1e-15
NAN = float("nan")

Pair = tuple[float, int]   # (predicted probability, outcome)


@dataclass(frozen=True)
class RocPoint:
    threshold: float   # inf for the (0, 0) anchor
    fpr: float
    tpr: float


@dataclass(frozen=True)
class Evaluation:
    n: int
    base_rate: float
    auc: float
    log_loss: float
    brier: float
    roc_curve: list[RocPoint] = field(default_factory=list)
    calibration: list[dict] = field(default_factory=list)


def _is_missing(v: Any) -> bool:
    return v is None or (isinstance(v, float) and math.isnan(v))


def make_pairs(labels: Sequence[Any], scores: Sequence[Any]) -> list[Pair]:
    """
    Zip labels and scores into (p, y) pairs.

    A pair is dropped when either side is None/NaN. A present label that is
    not 0/1, or a present score outside [0, 1], is a caller error.
    """
    if len(labels) != len(scores):
        raise ValueError(
            f"labels and scores differ in length: {len(labels)} vs {len(scores)}"
        )
    pairs: list[Pair] = []
    for i, (y, p) in enumerate(zip(labels, scores)):
        if _is_missing(y) or _is_missing(p):
            continue
        if y not in (0, 1):
            raise ValueError(f"label at position {i} must be 0 or 1, got {y!r}")
        p = float(p)
        if not 0.0 <= p <= 1.0:
            raise ValueError(f"score at position {i} must be in [0, 1], got {p!r}")
        pairs.append((p, int(y)))
    return pairs


def log_loss(predictions: list[Pair], eps: float = EPS) -> float:
    """
    Average log loss (cross-entropy) over (prob, outcome) pairs.

    Formula per match:  −[y·log(p) + (1−y)·log(1−p)]

    The probability given to the observed outcome is floored at eps, so a
    confidently wrong 0/1 forecast costs −log(eps) instead of infinity and a
    correct one costs exactly 0.
    """
    if not predictions:
        return NAN
    total = 0.0
    for p, y in predictions:
        q = p if y == 1 else 1.0 - p
        total += -math.log(max(eps, q))
    return total / len(predictions)


def brier_score(predictions: list[Pair]) -> float:
    """
    Average Brier score (mean squared error on probabilities).

    Perfect model: 0. Coin-flip baseline: 0.25.
    """
    if not predictions:
        return NAN
    return sum((p - y) ** 2 for p, y in predictions) / len(predictions)


def roc_curve(predictions: list[Pair]) -> list[RocPoint]:
    """
    ROC points from a descending threshold sweep.

    Starts at the (0, 0) anchor and adds one point per distinct score, after
    every pair tied at that score has been counted. The last point is (1, 1).
    Returns [] when either class is absent.
    """
    n_pos = sum(y for _, y in predictions)
    n_neg = len(predictions) - n_pos
    if n_pos == 0 or n_neg == 0:
        return []

    ranked = sorted(predictions, key=lambda x: x[0], reverse=True)
    points = [RocPoint(math.inf, 0.0, 0.0)]
    tp = fp = 0
    i = 0
    while i < len(ranked):
        score = ranked[i][0]
        while i < len(ranked) and ranked[i][0] == score:
            if ranked[i][1] == 1:
                tp += 1
            else:
                fp += 1
            i += 1
        points.append(RocPoint(score, fp / n_neg, tp / n_pos))
    return points


def roc_auc(predictions: list[Pair]) -> float:
    """Trapezoidal area under roc_curve(); NaN when only one class is present."""
    curve = roc_curve(predictions)
    if not curve:
        return NAN
    area = 0.0
    for prev, cur in zip(curve, curve[1:]):
        area += (cur.fpr - prev.fpr) * (cur.tpr + prev.tpr) / 2.0
    return area


def calibration_bins(predictions: list[Pair], n_bins: int = 10) -> list[dict]:
    """
    Group predictions into equal-width probability buckets.

    Returns a list of dicts, empty buckets omitted:
        {"bin_mid": 0.25, "predicted_avg": 0.24, "observed": 0.26, "n": 142}

    A well-calibrated model has observed ≈ bin_mid in every bin.
    """
    if isinstance(n_bins, bool) or not isinstance(n_bins, int) or n_bins < 1:
        raise ValueError(f"n_bins must be a positive integer, got {n_bins!r}")

    bins: dict[int, list] = defaultdict(list)
    for p, y in predictions:
        b = min(int(p * n_bins), n_bins - 1)
        bins[b].append((p, y))

    result = []
    for b in range(n_bins):
        items = bins.get(b, [])
        if not items:
            continue
        ps = [x[0] for x in items]
        ys = [x[1] for x in items]
        result.append(
            {
                "bin_mid": (b + 0.5) / n_bins,
                "predicted_avg": sum(ps) / len(ps),
                "observed": sum(ys) / len(ys),
                "n": len(items),
            }
        )
    return result


def evaluate(
    labels: Sequence[Any], scores: Sequence[Any], n_bins: int = 10
) -> Evaluation:
    """
    Compute every metric for aligned labels/scores.

    Missing pairs are dropped first; an empty remainder yields NaN scalars
    and empty curve/calibration lists.
    """
    preds = make_pairs(labels, scores)
    return Evaluation(
        n=len(preds),
        base_rate=(sum(y for _, y in preds) / len(preds)) if preds else NAN,
        auc=roc_auc(preds),
        log_loss=log_loss(preds),
        brier=brier_score(preds),
        roc_curve=roc_curve(preds),
        calibration=calibration_bins(preds, n_bins=n_bins),
    )
