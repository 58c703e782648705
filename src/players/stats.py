"""
Per-player match counts, win rates and outcome series.

Wins are counted from the winner column; matches from both player
columns. A player's outcome series is read from the canonical label
(y = 1 means player_1 won), flipped when the player was player_2.

Usage:
    from src.players.stats import player_table, top_by_win_rate, player_outcomes
    table = player_table(rows)
    leaders = top_by_win_rate(table, n=10, min_matches=20)
    dates, outcomes = player_outcomes(rows, "swiatek")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

MIN_MATCHES = 20   # for the win-rate leaderboard


@dataclass
class PlayerRecord:
    name: str
    matches: int = 0
    wins: int = 0

    @property
    def win_rate(self) -> float:
        return self.wins / self.matches if self.matches else float("nan")


def player_table(rows: Iterable[dict]) -> dict[str, PlayerRecord]:
    """{name: PlayerRecord} over every player who appears in rows."""
    table: dict[str, PlayerRecord] = {}

    def rec(name: str) -> PlayerRecord:
        if name not in table:
            table[name] = PlayerRecord(name)
        return table[name]

    for r in rows:
        p1, p2, winner = r.get("player_1"), r.get("player_2"), r.get("winner")
        if p1:
            rec(p1).matches += 1
        if p2:
            rec(p2).matches += 1
        if winner and winner in (p1, p2):
            rec(winner).wins += 1
    return table


def top_by_matches(table: dict[str, PlayerRecord], n: int = 10) -> list[PlayerRecord]:
    return sorted(table.values(), key=lambda p: (-p.matches, p.name))[:n]


def top_by_win_rate(
    table: dict[str, PlayerRecord],
    n: int = 10,
    min_matches: int = MIN_MATCHES,
) -> list[PlayerRecord]:
    """Best win rates among players with at least min_matches matches."""
    eligible = [p for p in table.values() if p.matches >= min_matches]
    return sorted(eligible, key=lambda p: (-p.win_rate, -p.matches, p.name))[:n]


def player_outcomes(rows: Iterable[dict], query: str) -> tuple[list[str], list[int]]:
    """
    (dates, outcomes) for matches of the player matching `query`.

    Matching is a case-insensitive substring on either player column.
    Sorted by date; matches without a date or label are skipped.
    Outcome 1 = that player won.
    """
    q = query.strip().lower()
    if not q:
        return [], []

    found = []
    for r in rows:
        y = r.get("y")
        if y is None or not r.get("date"):
            continue
        p1 = str(r.get("player_1") or "").lower()
        p2 = str(r.get("player_2") or "").lower()
        if q in p1:
            found.append((r["date"], int(y)))
        elif q in p2:
            found.append((r["date"], 1 - int(y)))

    found.sort(key=lambda x: x[0])
    return [d for d, _ in found], [o for _, o in found]
