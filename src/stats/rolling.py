"""
Rolling win rate over an ordered outcome sequence.

The caller orders the outcomes (usually by match date); nothing is sorted
here. Output is aligned with the input so it can be plotted against a
parallel list of dates.

Usage:
    from src.stats.rolling import rolling_rate
    rolling_rate([1, 0, 1, 1, 0, 1], window=5)
    # [None, None, None, None, 0.6, 0.6]
"""

from __future__ import annotations

from collections import deque
from typing import Iterable


def rolling_rate(outcomes: Iterable[int], window: int) -> list[float | None]:
    """
    Mean of the last `window` outcomes at every position.

    None until `window` outcomes have been seen.
    """
    if isinstance(window, bool) or not isinstance(window, int) or window < 1:
        raise ValueError(f"window must be a positive integer, got {window!r}")

    buf: deque[int] = deque()
    wins = 0
    out: list[float | None] = []
    for i, y in enumerate(outcomes):
        if y not in (0, 1):
            raise ValueError(f"outcome at position {i} must be 0 or 1, got {y!r}")
        y = int(y)
        buf.append(y)
        wins += y
        if len(buf) > window:
            wins -= buf.popleft()
        out.append(wins / window if len(buf) == window else None)
    return out
