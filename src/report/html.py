"""
Static HTML report: one page, one block per section.

A section is a title plus any mix of plotly figures, pandas tables and
short text lines:

    Section("Calibration", figures=[fig], notes=["n = 4,120"])

plotly.js is pulled from the CDN once, in the page head.
"""

from __future__ import annotations

import html as _html
from dataclasses import dataclass, field
from pathlib import Path

import pandas as pd
import plotly.graph_objects as go

_PAGE = """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>{title}</title>
  <script src="https://cdn.plot.ly/plotly-2.35.2.min.js"></script>
  <style>
    body {{ font-family: system-ui, -apple-system, "Segoe UI", sans-serif;
           background: #2E3440; color: #D8DEE9; margin: 0; padding: 1.5rem; }}
    h1, h2 {{ margin: 0 0 0.5rem; color: #ECEFF4; }}
    section {{ background: #3B4252; border: 1px solid #4C566A;
              border-radius: 8px; padding: 1rem; margin-bottom: 1.2rem; }}
    .grid {{ display: grid; grid-template-columns: repeat(auto-fit, minmax(480px, 1fr));
            gap: 1rem; }}
    table {{ border-collapse: collapse; font-size: 13px; }}
    th, td {{ border: 1px solid #4C566A; padding: 4px 8px; text-align: right; }}
    th {{ background: #434C5E; }}
    .note {{ color: #88C0D0; margin: 0.2rem 0; }}
  </style>
</head>
<body>
  <h1>{title}</h1>
  <p class="note">{subtitle}</p>
{sections}
</body>
</html>
"""


@dataclass
class Section:
    title: str
    figures: list[go.Figure] = field(default_factory=list)
    tables: list[pd.DataFrame] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)

    def render(self) -> str:
        parts = [f"  <section>\n    <h2>{_html.escape(self.title)}</h2>"]
        for note in self.notes:
            parts.append(f'    <p class="note">{_html.escape(note)}</p>')
        if self.figures:
            parts.append('    <div class="grid">')
            for fig in self.figures:
                parts.append(fig.to_html(full_html=False, include_plotlyjs=False))
            parts.append("    </div>")
        for df in self.tables:
            # None in object columns is not covered by na_rep
            cells = df.astype(object).where(df.notna(), "n/a")
            parts.append(cells.to_html(float_format=lambda v: f"{v:.3f}"))
        parts.append("  </section>")
        return "\n".join(parts)


def render_report(title: str, sections: list[Section], subtitle: str = "") -> str:
    return _PAGE.format(
        title=_html.escape(title),
        subtitle=_html.escape(subtitle),
        sections="\n".join(s.render() for s in sections),
    )


def write_report(path: str | Path, title: str, sections: list[Section],
                 subtitle: str = "") -> Path:
    """Render and write the page; parent directories are created."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(render_report(title, sections, subtitle), encoding="utf-8")
    return out
