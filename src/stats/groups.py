"""
Win rate of player_1 (label y) grouped by year, month or surface.

Usage:
    from src.stats.groups import win_rate_by
    for g in win_rate_by(rows, "surface"):
        print(g.key, g.total, f"{g.rate:.1%}")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable

GROUP_KEYS: dict[str, Callable[[dict], object]] = {
    "year":    lambda r: r.get("year"),
    "month":   lambda r: r["date"][:7] if r.get("date") else None,
    "surface": lambda r: r.get("surface") or None,
}


@dataclass(frozen=True)
class GroupRate:
    key: object
    wins: int
    total: int

    @property
    def rate(self) -> float:
        return self.wins / self.total


def win_rate_by(rows: Iterable[dict], key: str) -> list[GroupRate]:
    """
    One GroupRate per distinct key value, sorted by key.

    Rows without a label or without a key value are left out.
    """
    if key not in GROUP_KEYS:
        raise ValueError(f"key must be one of {sorted(GROUP_KEYS)}, got {key!r}")
    get = GROUP_KEYS[key]

    wins: dict[object, int] = {}
    totals: dict[object, int] = {}
    for r in rows:
        y = r.get("y")
        k = get(r)
        if y is None or k is None:
            continue
        totals[k] = totals.get(k, 0) + 1
        wins[k] = wins.get(k, 0) + int(y)

    return [GroupRate(k, wins[k], totals[k]) for k in sorted(totals, key=str)]


def recent_matches(rows: Iterable[dict], n: int = 20) -> list[dict]:
    """The n most recent matches, newest first."""
    dated = [r for r in rows if r.get("date")]
    return sorted(dated, key=lambda r: r["date"], reverse=True)[:n]
