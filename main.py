"""
Tennis Match EDA
================
Loads a match CSV (one row per match, decimal odds for both players),
computes distributions, correlations, forecast-quality metrics of the
bookmaker-implied probability and rolling form, then writes a static
HTML report.

Run:
    python main.py data/wta_data.csv
    python main.py data/wta_data.csv --year 2023 --surface Clay --player swiatek
    python main.py --url https://example.org/wta_data.csv

Downloaded files are cached in data/raw/ so subsequent runs are instant.
"""

import argparse
import math
from pathlib import Path

import pandas as pd

from src.players.stats import MIN_MATCHES, player_outcomes, player_table, top_by_matches, top_by_win_rate
from src.predictions.odds import prediction_pairs
from src.report.figures import (
    plotly_calibration,
    plotly_correlation,
    plotly_counts_bar,
    plotly_group_rates,
    plotly_histogram,
    plotly_players_bar,
    plotly_roc,
    plotly_rolling,
)
from src.report.html import Section, write_report
from src.stats.columns import column_values
from src.stats.config import EngineConfig
from src.stats.correlation import correlation_matrix, numeric_columns
from src.stats.groups import recent_matches, win_rate_by
from src.stats.histogram import histogram
from src.stats.rolling import rolling_rate
from src.utils.data import LABEL_CONVENTIONS, coverage, fetch_csv, filter_matches, load_matches
from src.utils.metrics import evaluate

# ── Configuration ────────────────────────────────────────────────────────────

CACHE_DIR   = "data/raw"
REPORT_PATH = "reports/index.html"

MAX_CORR_COLUMNS = 10     # matrix width cap
TOP_N            = 10     # players per leaderboard
RECENT_N         = 20     # rows in the recent-matches table

# Never treated as features: labels and calendar columns
NON_FEATURES = ("y", "year")


# ── Helpers ──────────────────────────────────────────────────────────────────

def fmt(x: float, n: int = 4) -> str:
    return f"{x:.{n}f}" if x is not None and math.isfinite(x) else "n/a"


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Exploratory statistics for a tennis match CSV.")
    p.add_argument("csv", nargs="?", help="local match CSV")
    p.add_argument("--url", help="download the CSV from here instead (cached)")
    p.add_argument("--year", default=None, help="only this year")
    p.add_argument("--surface", default=None, help="only this surface")
    p.add_argument("--player", default="", help="player name (substring) for rolling form")
    p.add_argument("--label-convention", choices=LABEL_CONVENTIONS, default="player_1",
                   help="what y means in the file: player_1 won, or the favourite won")
    p.add_argument("--dayfirst", action="store_true",
                   help="read slashed dates as DD/MM/YYYY")
    p.add_argument("--bins", type=int, default=None, help="histogram bins (default: Sturges)")
    p.add_argument("--window", type=int, default=10, help="rolling win-rate window")
    p.add_argument("--calibration-buckets", type=int, default=10)
    p.add_argument("--min-paired", type=int, default=3,
                   help="minimum paired observations for a correlation")
    p.add_argument("--out", default=REPORT_PATH, help="HTML report path")
    return p


# ── Main pipeline ─────────────────────────────────────────────────────────────

def main(argv: list[str] | None = None) -> Path:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.csv and not args.url:
        parser.error("give a CSV path or --url")
    try:
        cfg = EngineConfig(
            bin_count=args.bins,
            calibration_buckets=args.calibration_buckets,
            rolling_window=args.window,
            min_paired_observations=args.min_paired,
        )
    except ValueError as exc:
        parser.error(str(exc))

    # 1. Load
    print("=" * 60)
    print("TENNIS MATCH EDA")
    print("=" * 60)
    print("\n[1/5] Loading matches ...")
    path = fetch_csv(args.url, cache_dir=CACHE_DIR) if args.url else Path(args.csv)
    if not path.exists():
        parser.error(f"no such file: {path}")
    all_rows = load_matches(path, label_convention=args.label_convention,
                            dayfirst=args.dayfirst)
    rows = filter_matches(all_rows, year=args.year, surface=args.surface)
    cov = coverage(rows)
    print(f"      {cov['n_rows']:,} matches after filters  "
          f"({cov['first']} → {cov['last']})\n")

    # 2. Distributions + correlations
    print("[2/5] Distributions and correlations ...")
    features = numeric_columns(rows, exclude=NON_FEATURES)
    hists = {c: histogram(column_values(rows, c), cfg.bin_count) for c in features}
    corr_cols = features[:MAX_CORR_COLUMNS]
    corr = (correlation_matrix(rows, corr_cols, min_paired=cfg.min_paired_observations)
            if corr_cols else {})
    print(f"      {len(features)} numeric columns, "
          f"{len(corr_cols)} in the correlation matrix.\n")

    # 3. Forecast quality of the implied probability
    print("[3/5] Evaluating implied probabilities ...")
    labels, scores, _ = prediction_pairs(rows)
    ev = evaluate(labels, scores, n_bins=cfg.calibration_buckets)
    print(f"      {ev.n:,} matches with odds and a result.\n")

    # 4. Groups and players
    print("[4/5] Win rates by year, month, surface and player ...")
    by_year    = win_rate_by(rows, "year")
    by_month   = win_rate_by(rows, "month")
    by_surface = win_rate_by(rows, "surface")
    table      = player_table(rows)
    most       = top_by_matches(table, TOP_N)
    best       = top_by_win_rate(table, TOP_N, MIN_MATCHES)
    dates, outcomes = player_outcomes(all_rows, args.player) if args.player else ([], [])
    form = rolling_rate(outcomes, cfg.rolling_window)
    print(f"      {len(table):,} players, {len(outcomes)} matches for "
          f"{args.player or '(no player selected)'}.\n")

    # 5. Report
    print("[5/5] Writing report ...")
    sections = [
        Section("Forecast quality", figures=[plotly_roc(ev), plotly_calibration(ev.calibration)],
                notes=[f"AUC {fmt(ev.auc, 3)} · log loss {fmt(ev.log_loss)} · "
                       f"Brier {fmt(ev.brier)} · player_1 win share {fmt(ev.base_rate, 3)} · "
                       f"n = {ev.n:,}"]),
        Section("Over time", figures=[plotly_group_rates(by_year, "Year"),
                                      plotly_group_rates(by_month, "Month")]),
        Section("Distributions", figures=[plotly_histogram(h, c) for c, h in hists.items() if h.bins]),
        Section("Correlations", figures=[plotly_correlation(corr)] if corr else [],
                notes=["n/a = fewer than "
                       f"{cfg.min_paired_observations} paired values or zero variance"]),
        Section("Players", figures=[plotly_players_bar(most, "matches"),
                                    plotly_players_bar(best, "win_rate")]),
        Section("Surfaces", figures=[
            plotly_counts_bar([str(g.key) for g in by_surface], [g.total for g in by_surface], "Surface"),
            plotly_group_rates(by_surface, "Surface", kind="bar"),
        ]),
        Section("Recent matches", tables=[pd.DataFrame(
            [{k: r.get(k) for k in ("date", "tournament", "surface", "player_1",
                                    "player_2", "winner", "odd_1", "odd_2")}
             for r in recent_matches(rows, RECENT_N)]
        )]),
    ]
    if args.player:
        sections.append(Section(
            f"Rolling form: {args.player}",
            figures=[plotly_rolling(dates, form, f"Rolling win% ({cfg.rolling_window})")],
        ))
    out = write_report(args.out, "Tennis Match EDA", sections,
                       subtitle=f"Coverage: {cov['first']} → {cov['last']} | {cov['n_rows']:,} rows")
    print(f"      wrote {out}\n")

    # ── Output ────────────────────────────────────────────────────────────────

    print("=" * 60)
    print("IMPLIED PROBABILITY  (forecast quality)")
    print("=" * 60)
    print(f"  Matches evaluated : {ev.n:,}")
    print(f"  AUC               : {fmt(ev.auc, 3)}")
    print(f"  Log loss          : {fmt(ev.log_loss)}")
    print(f"  Brier score       : {fmt(ev.brier)}")
    print(f"  Player_1 win share: {fmt(ev.base_rate, 3)}")

    print("\n" + "=" * 60)
    print("CALIBRATION  (observed player_1 win rate per bucket)")
    print("=" * 60)
    print(f"{'Bucket':<10} {'Avg pred':>9} {'Observed':>9} {'N':>8}")
    print("-" * 40)
    half = 0.5 / cfg.calibration_buckets
    for b in ev.calibration:
        print(f"{b['bin_mid'] - half:.0%}–{b['bin_mid'] + half:.0%}   "
              f"{b['predicted_avg']:>8.1%} {b['observed']:>8.1%} {b['n']:>8,}")

    if corr:
        print("\n" + "=" * 60)
        print("CORRELATIONS (Pearson, pairwise complete)")
        print("=" * 60)
        print(pd.DataFrame(corr).round(2).to_string(na_rep="n/a"))

    print("\n" + "=" * 60)
    print(f"MOST MATCHES  Top {TOP_N}")
    print("=" * 60)
    for rank, p in enumerate(most, start=1):
        print(f"{rank:<4} {p.name[:30]:<30} {p.matches:>6,}  {p.win_rate:>6.1%}")

    if args.player and form:
        last = next((r for r in reversed(form) if r is not None), None)
        print(f"\n  Current rolling win% for {args.player}: "
              f"{fmt(last, 3) if last is not None else 'n/a (not enough matches)'}")

    print("\nDone.")
    return out


if __name__ == "__main__":
    main()
