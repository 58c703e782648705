import pandas as pd

from src.report.figures import (
    plotly_calibration,
    plotly_correlation,
    plotly_histogram,
    plotly_players_bar,
    plotly_roc,
    plotly_rolling,
)
from src.report.html import Section, render_report, write_report
from src.players.stats import PlayerRecord
from src.stats.histogram import histogram
from src.utils.metrics import evaluate


def test_histogram_figure_matches_bins():
    h = histogram([1, 2, 3, 4, 5, 6, 7, 8, 9, 10], bin_count=5)
    fig = plotly_histogram(h, "odd_1")
    assert list(fig.data[0].y) == [2, 2, 2, 2, 2]
    assert fig.layout.xaxis.title.text == "odd_1"


def test_undefined_correlation_is_not_drawn_as_zero():
    nan = float("nan")
    fig = plotly_correlation({"a": {"a": 1.0, "b": nan}, "b": {"a": nan, "b": 1.0}})
    z = [list(row) for row in fig.data[0].z]
    assert z == [[1.0, None], [None, 1.0]]
    assert [list(row) for row in fig.data[0].text] == [["1.00", "n/a"], ["n/a", "1.00"]]


def test_roc_and_calibration_figures():
    ev = evaluate([1, 1, 0, 0], [0.9, 0.8, 0.2, 0.1])
    roc = plotly_roc(ev)
    assert "AUC 1.000" in roc.data[1].name
    assert list(roc.data[1].x) == [pt.fpr for pt in ev.roc_curve]

    cal = plotly_calibration(ev.calibration)
    assert list(cal.data[1].x) == [b["bin_mid"] for b in ev.calibration]


def test_degenerate_roc_is_labelled():
    ev = evaluate([1, 1], [0.6, 0.7])
    assert "n/a" in plotly_roc(ev).data[1].name


def test_rolling_and_player_figures():
    fig = plotly_rolling(["2023-01-01", "2023-01-02"], [None, 0.5], "Rolling win% (2)")
    assert list(fig.data[0].y) == [None, 0.5]

    fig = plotly_players_bar([PlayerRecord("A", 10, 7)], "win_rate")
    assert list(fig.data[0].text) == ["70.0%"]


def test_write_report(tmp_path):
    sections = [
        Section("Forecast quality", figures=[plotly_roc(evaluate([1, 0], [0.7, 0.2]))],
                notes=["AUC 1.000 <ok>"]),
        Section("Recent matches", tables=[pd.DataFrame([{"date": "2023-01-01", "odd_1": None}])]),
    ]
    out = write_report(tmp_path / "nested" / "report.html", "Tennis Match EDA", sections)

    page = out.read_text(encoding="utf-8")
    assert page.startswith("<!doctype html>")
    assert page.count("cdn.plot.ly") == 1
    assert "<h2>Forecast quality</h2>" in page
    assert "AUC 1.000 &lt;ok&gt;" in page
    assert "n/a" in page


def test_missing_table_cells_render_as_na():
    table = pd.DataFrame([
        {"player": "A", "odd_1": 1.5, "winner": None},
        {"player": None, "odd_1": float("nan"), "winner": "B"},
    ])
    html = Section("Recent matches", tables=[table]).render()
    assert html.count("<td>n/a</td>") == 3
    assert "None" not in html
    assert "NaN" not in html
    assert "<td>1.500</td>" in html


def test_render_report_escapes_title():
    page = render_report("Odds <1.5>", [])
    assert "<title>Odds &lt;1.5&gt;</title>" in page
