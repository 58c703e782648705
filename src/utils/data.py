"""
Load a tennis match CSV into canonical rows.

Source files disagree on headers ("Player_1" vs "P1", "Date" vs
"tourney_date", ...) and on what the label means. Both are settled here so
the statistics layer only ever sees one schema:

    {
        "date":       "2023-01-15",      # ISO text, or None
        "year":       2023,
        "tournament": "Adelaide",
        "surface":    "Hard",
        "player_1":   "Sabalenka A.",
        "player_2":   "Noskova L.",
        "winner":     "Sabalenka A.",
        "y":          1,                 # 1 = player_1 won, always
        "odd_1":      1.14,
        "odd_2":      5.50,
        "p_implied":  0.828,
        ...                              # other columns, untouched
    }

Usage:
    from src.utils.data import load_matches, filter_matches
    rows = load_matches("data/wta_data.csv", label_convention="player_1")
    clay = filter_matches(rows, year=2023, surface="Clay")

Remote files are cached in cache_dir so subsequent runs skip the download.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable
from urllib.parse import urlparse

import pandas as pd
import requests

from src.predictions.odds import favourite_is_player_1, implied_prob
from src.stats.columns import to_number

# canonical name -> accepted headers, first match wins
COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "date":       ("date", "Date", "DATE", "tourney_date", "match_date"),
    "year":       ("year", "Year", "season"),
    "tournament": ("tournament", "Tournament", "tourney_name", "tny_name"),
    "surface":    ("surface", "Surface", "court_surface"),
    "player_1":   ("player_1", "Player_1", "Player1", "player1", "P1"),
    "player_2":   ("player_2", "Player_2", "Player2", "player2", "P2"),
    "winner":     ("winner", "Winner", "winner_name"),
    "y":          ("y", "Y", "label", "target", "p1_won"),
    "odd_1":      ("odd_1", "Odd_1", "odds_1", "Odds_1", "B365_1", "PS_1"),
    "odd_2":      ("odd_2", "Odd_2", "odds_2", "Odds_2", "B365_2", "PS_2"),
}

REQUIRED = ("date", "player_1", "player_2")

# What y means in the source file
LABEL_CONVENTIONS = ("player_1", "favourite")


# ── Reading ──────────────────────────────────────────────────────────────────

def fetch_csv(
    url: str,
    cache_dir: str | Path = "data/raw",
    verbose: bool = True,
) -> Path:
    """Download a CSV once and return the cached local path."""
    cache = Path(cache_dir)
    cache.mkdir(parents=True, exist_ok=True)
    name = Path(urlparse(url).path).name or "matches.csv"
    target = cache / name

    if target.exists():
        if verbose:
            print(f"  using cached {target}", flush=True)
        return target

    r = requests.get(url, timeout=30)
    r.raise_for_status()
    target.write_bytes(r.content)
    if verbose:
        print(f"  downloaded {url} → {target} ({len(r.content):,} bytes)", flush=True)
    return target


def read_frame(path: str | Path) -> pd.DataFrame:
    """Every cell as stripped text; blanks stay as ""."""
    df = pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8-sig")
    df.columns = [str(c).strip() for c in df.columns]
    return df.apply(lambda s: s.str.strip())


def read_rows(path: str | Path) -> list[dict[str, Any]]:
    """Raw rows with blank cells as None."""
    return [
        {k: (v if v != "" else None) for k, v in rec.items()}
        for rec in read_frame(path).to_dict("records")
    ]


def resolve_columns(header: Iterable[str]) -> dict[str, str]:
    """
    Map source headers to canonical names.

    Returns {source_header: canonical_name} for the headers that matched an
    alias. Headers without an alias are left out (they keep their name).
    """
    header = list(header)
    present = set(header)
    mapping: dict[str, str] = {}
    for canonical, aliases in COLUMN_ALIASES.items():
        for alias in aliases:
            if alias in present and alias not in mapping:
                mapping[alias] = canonical
                break
    return mapping


# ── Label handling ───────────────────────────────────────────────────────────

def _binary(value: Any) -> int | None:
    x = to_number(value)
    if x is None or x not in (0.0, 1.0):
        return None
    return int(x)


def _label_from_winner(row: dict) -> int | None:
    winner = row.get("winner")
    if not winner:
        return None
    if winner == row.get("player_1"):
        return 1
    if winner == row.get("player_2"):
        return 0
    return None


def orient_label(row: dict, label_convention: str = "player_1") -> int | None:
    """
    Return y from player_1's point of view.

    "player_1":  y already means player_1 won.
    "favourite": y means the shorter-priced player won; flip it when
                 player_2 was the favourite. Needs both odds.
    A missing y falls back to the winner column in either case.
    """
    if label_convention not in LABEL_CONVENTIONS:
        raise ValueError(
            f"label_convention must be one of {LABEL_CONVENTIONS}, "
            f"got {label_convention!r}"
        )
    raw = _binary(row.get("y"))
    if raw is None:
        return _label_from_winner(row)
    if label_convention == "player_1":
        return raw
    fav_p1 = favourite_is_player_1(row.get("odd_1"), row.get("odd_2"))
    if fav_p1 is None:
        return None
    return raw if fav_p1 else 1 - raw


# ── Loading ──────────────────────────────────────────────────────────────────

def parse_dates(values: pd.Series, dayfirst: bool = False) -> pd.Series:
    """ISO date text per cell, "" where the cell does not parse."""
    # format is guessed from the first parseable cell and held for the column
    parsed = pd.to_datetime(values, errors="coerce", dayfirst=dayfirst)
    return parsed.dt.strftime("%Y-%m-%d").fillna("")


def load_matches(
    path: str | Path,
    label_convention: str = "player_1",
    dayfirst: bool = False,
    verbose: bool = True,
) -> list[dict[str, Any]]:
    """
    Read a match CSV and return canonical rows (see module docstring).

    Rows without a parseable date or without both player names are dropped.
    One date format is inferred for the whole column (dayfirst settles
    01/02 vs 02/01); cells that do not fit it count as unparseable.
    """
    if label_convention not in LABEL_CONVENTIONS:
        raise ValueError(
            f"label_convention must be one of {LABEL_CONVENTIONS}, "
            f"got {label_convention!r}"
        )

    df = read_frame(path)
    df = df.rename(columns=resolve_columns(df.columns))
    if "date" in df.columns:
        df["date"] = parse_dates(df["date"], dayfirst=dayfirst)

    rows: list[dict[str, Any]] = []
    skipped = 0
    for rec in df.to_dict("records"):
        row = {k: (v if v != "" else None) for k, v in rec.items()}
        if any(not row.get(c) for c in REQUIRED):
            skipped += 1
            continue

        row["year"] = int(row["date"][:4])
        row["odd_1"] = to_number(row.get("odd_1"))
        row["odd_2"] = to_number(row.get("odd_2"))
        row["y"] = orient_label(row, label_convention)
        row["p_implied"] = implied_prob(row["odd_1"], row["odd_2"])
        rows.append(row)

    if verbose:
        print(f"  {len(rows):,} matches loaded from {Path(path).name}"
              f"  ({skipped:,} skipped: no date or players)", flush=True)
    return rows


# ── Filtering ────────────────────────────────────────────────────────────────

def filter_matches(
    rows: Iterable[dict],
    year: int | str | None = None,
    surface: str | None = None,
) -> list[dict]:
    """Subset by year and/or surface; None or "All" disables a filter."""
    want_year = None if year in (None, "All") else int(year)
    want_surface = None if surface in (None, "All") else str(surface)
    return [
        r for r in rows
        if (want_year is None or r.get("year") == want_year)
        and (want_surface is None or str(r.get("surface")) == want_surface)
    ]


def years(rows: Iterable[dict]) -> list[int]:
    return sorted({r["year"] for r in rows if r.get("year") is not None})


def surfaces(rows: Iterable[dict]) -> list[str]:
    return sorted({str(r["surface"]) for r in rows if r.get("surface")})


def coverage(rows: list[dict]) -> dict:
    """First/last match date and row count."""
    dates = sorted(r["date"] for r in rows if r.get("date"))
    return {
        "first": dates[0] if dates else None,
        "last": dates[-1] if dates else None,
        "n_rows": len(rows),
    }
