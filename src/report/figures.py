"""
Plotly figures for every statistics output.

Each builder takes an already-computed result (Histogram, correlation dict,
Evaluation, rolling list, ...) and only draws it; no statistics happen here.
"""

from __future__ import annotations

import math

import plotly.graph_objects as go

from src.players.stats import PlayerRecord
from src.stats.groups import GroupRate
from src.stats.histogram import Histogram
from src.utils.metrics import Evaluation

# Nord colour palette constants
NORD = {
    "bg3":     "#4C566A",   # Nord3  (subtle borders / muted text)
    "snow0":   "#D8DEE9",   # Nord4
    "frost1":  "#88C0D0",   # Nord8  (light blue)
    "frost3":  "#5E81AC",   # Nord10 (dark blue)
    "red":     "#BF616A",   # Nord11
    "orange":  "#D08770",   # Nord12
    "green":   "#A3BE8C",   # Nord14
    "purple":  "#B48EAD",   # Nord15
}

_LAYOUT = dict(
    plot_bgcolor="rgba(0,0,0,0)",
    paper_bgcolor="rgba(0,0,0,0)",
    font=dict(size=12),
)


def _finite(v: float) -> bool:
    return v is not None and not (isinstance(v, float) and math.isnan(v))


def plotly_histogram(hist: Histogram, column: str, color: str = NORD["frost1"]) -> go.Figure:
    mids   = [(b.lower + b.upper) / 2 for b in hist.bins]
    widths = [b.upper - b.lower for b in hist.bins]
    fig = go.Figure(go.Bar(
        x=mids,
        y=hist.counts,
        width=widths,
        marker_color=color,
        customdata=[[b.lower, b.upper] for b in hist.bins],
        hovertemplate="[%{customdata[0]:.3g}, %{customdata[1]:.3g}]: %{y}<extra></extra>",
    ))
    fig.update_layout(
        xaxis_title=column,
        yaxis_title="Count",
        bargap=0.02,
        height=300,
        margin=dict(l=50, r=10, t=10, b=40),
        **_LAYOUT,
    )
    return fig


def plotly_correlation(matrix: dict[str, dict[str, float]]) -> go.Figure:
    """Heatmap; undefined coefficients are left blank and labelled n/a."""
    cols = list(matrix)
    z    = [[matrix[a][b] if _finite(matrix[a][b]) else None for b in cols] for a in cols]
    text = [[f"{v:.2f}" if v is not None else "n/a" for v in row] for row in z]
    fig = go.Figure(go.Heatmap(
        z=z,
        x=cols,
        y=cols,
        text=text,
        texttemplate="%{text}",
        zmin=-1,
        zmax=1,
        colorscale="RdBu",
        hoverongaps=False,
        hovertemplate="%{y} × %{x}: %{text}<extra></extra>",
    ))
    fig.update_layout(
        yaxis=dict(autorange="reversed"),
        height=max(320, len(cols) * 48),
        margin=dict(l=120, r=20, t=10, b=120),
        **_LAYOUT,
    )
    return fig


def plotly_roc(ev: Evaluation, color: str = NORD["frost1"]) -> go.Figure:
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=[0, 1], y=[0, 1],
        mode="lines",
        line=dict(color=NORD["bg3"], dash="dash", width=1),
        name="Chance",
        hoverinfo="skip",
    ))
    auc = f"{ev.auc:.3f}" if _finite(ev.auc) else "n/a"
    fig.add_trace(go.Scatter(
        x=[pt.fpr for pt in ev.roc_curve],
        y=[pt.tpr for pt in ev.roc_curve],
        mode="lines",
        line=dict(color=color, width=2),
        name=f"Implied probability (AUC {auc})",
        hovertemplate="FPR: %{x:.2f}<br>TPR: %{y:.2f}<extra></extra>",
    ))
    fig.update_layout(
        xaxis=dict(title="False positive rate", range=[0, 1]),
        yaxis=dict(title="True positive rate",  range=[0, 1]),
        legend=dict(x=0.4, y=0.05),
        height=340,
        margin=dict(l=60, r=20, t=10, b=50),
        **_LAYOUT,
    )
    return fig


def plotly_calibration(cal_bins: list[dict], color: str = NORD["frost1"]) -> go.Figure:
    mids = [b["bin_mid"]  for b in cal_bins]
    obs  = [b["observed"] for b in cal_bins]
    ns   = [b["n"]        for b in cal_bins]

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=[0, 1], y=[0, 1],
        mode="lines",
        line=dict(color=NORD["bg3"], dash="dash", width=1),
        name="Perfect calibration",
        hoverinfo="skip",
    ))
    fig.add_trace(go.Scatter(
        x=mids, y=obs,
        mode="markers+lines",
        marker=dict(size=[max(6, min(24, n / 20)) for n in ns], color=color, opacity=0.8),
        line=dict(color=color, width=2),
        name="Observed",
        customdata=ns,
        hovertemplate="Bucket: %{x:.0%}<br>Observed: %{y:.0%}<br>n = %{customdata}<extra></extra>",
    ))
    fig.update_layout(
        xaxis=dict(tickformat=".0%", title="Predicted probability", range=[0, 1]),
        yaxis=dict(tickformat=".0%", title="Observed frequency",    range=[0, 1]),
        legend=dict(x=0.02, y=0.98),
        height=340,
        margin=dict(l=60, r=20, t=10, b=50),
        **_LAYOUT,
    )
    return fig


def plotly_rolling(dates: list[str], rates: list[float | None], label: str,
                   color: str = NORD["purple"]) -> go.Figure:
    fig = go.Figure(go.Scatter(
        x=dates,
        y=rates,
        mode="lines",
        line=dict(color=color, width=2),
        name=label,
        connectgaps=False,
        hovertemplate="%{x}: %{y:.0%}<extra></extra>",
    ))
    fig.update_layout(
        yaxis=dict(tickformat=".0%", range=[0, 1], title=label),
        height=300,
        margin=dict(l=60, r=10, t=10, b=40),
        **_LAYOUT,
    )
    return fig


def plotly_group_rates(groups: list[GroupRate], title: str, kind: str = "line",
                       color: str = NORD["frost1"]) -> go.Figure:
    """Win rate per group as a line (years, months) or bars (surfaces)."""
    keys  = [str(g.key) for g in groups]
    rates = [g.rate for g in groups]
    totals = [g.total for g in groups]
    if kind == "bar":
        trace = go.Bar(x=keys, y=rates, marker_color=color, customdata=totals,
                       hovertemplate="%{x}: %{y:.1%} (%{customdata} matches)<extra></extra>")
    else:
        trace = go.Scatter(x=keys, y=rates, mode="lines+markers",
                           line=dict(color=color, width=2), customdata=totals,
                           hovertemplate="%{x}: %{y:.1%} (%{customdata} matches)<extra></extra>")
    fig = go.Figure(trace)
    fig.update_layout(
        xaxis_title=title,
        yaxis=dict(tickformat=".0%", range=[0, 1], title="Player_1 win rate"),
        height=300,
        margin=dict(l=60, r=10, t=10, b=40),
        **_LAYOUT,
    )
    return fig


def plotly_counts_bar(labels: list[str], counts: list[int], title: str,
                      color: str = NORD["frost3"]) -> go.Figure:
    fig = go.Figure(go.Bar(x=labels, y=counts, marker_color=color,
                           hovertemplate="%{x}: %{y:,}<extra></extra>"))
    fig.update_layout(
        xaxis_title=title,
        yaxis_title="Matches",
        height=300,
        margin=dict(l=60, r=10, t=10, b=40),
        **_LAYOUT,
    )
    return fig


def plotly_players_bar(players: list[PlayerRecord], metric: str = "matches",
                       color: str = NORD["green"]) -> go.Figure:
    """Horizontal leaderboard; metric is "matches" or "win_rate"."""
    names  = [p.name for p in players]
    values = [getattr(p, metric) for p in players]
    is_rate = metric == "win_rate"
    fig = go.Figure(go.Bar(
        x=values,
        y=names,
        orientation="h",
        marker_color=color,
        text=[f"{v:.1%}" if is_rate else f"{v:,}" for v in values],
        textposition="outside",
        hovertemplate="%{y}: %{text}<extra></extra>",
    ))
    fig.update_layout(
        xaxis=dict(tickformat=".0%" if is_rate else ",", range=[0, 1] if is_rate else None,
                   title="Win rate" if is_rate else "Matches"),
        yaxis=dict(autorange="reversed"),
        margin=dict(l=180, r=60, t=10, b=30),
        height=max(300, len(names) * 26),
        **_LAYOUT,
    )
    return fig
