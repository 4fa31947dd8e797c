from __future__ import annotations

import tempfile
from datetime import date
from typing import Any

import numpy as np
import plotly.graph_objects as go
import plotly.io as pio

from pcs.categories import CATEGORY_COLORS
from pcs.formatting import format_amount
from pcs.metrics.productivity import WeeklyProductivity
from pcs.metrics.spending import CategoryTotal

THEME: dict[str, Any] = {
    "colors": {
        "primary": "#06b6d4",
        "secondary": "#8b5cf6",
        "productive": "#22c55e",
        "wasted": "#ef4444",
        "trend_line": "#f59e0b",
        "grid": "#E5E5E5",
        "background": "#FAFAFA",
        "text": "#2D3436",
    },
    "font": {
        "family": "Inter, sans-serif",
        "size": 13,
        "title_size": 16,
    },
    "size": {
        "width": 800,
        "height": 500,
        "scale": 2,
    },
    "margin": {"l": 60, "r": 30, "t": 60, "b": 50},
}

_custom_template = pio.templates["plotly_white"]
_custom_template.layout.font = dict(
    family=THEME["font"]["family"],
    size=THEME["font"]["size"],
    color=THEME["colors"]["text"],
)
_custom_template.layout.title = dict(
    font=dict(size=THEME["font"]["title_size"], color=THEME["colors"]["text"]),
    x=0.5,
    xanchor="center",
)
_custom_template.layout.plot_bgcolor = THEME["colors"]["background"]
_custom_template.layout.xaxis = dict(gridcolor=THEME["colors"]["grid"])
_custom_template.layout.yaxis = dict(gridcolor=THEME["colors"]["grid"])
pio.templates["pcs"] = _custom_template
pio.templates.default = "pcs"


def _base_layout() -> dict[str, Any]:
    return {
        "margin": THEME["margin"],
        "width": THEME["size"]["width"],
        "height": THEME["size"]["height"],
    }


def _save(fig: go.Figure) -> str:
    tmp = tempfile.NamedTemporaryFile(suffix=".png", delete=False)  # noqa: SIM115
    tmp.close()
    fig.write_image(tmp.name, scale=THEME["size"]["scale"])
    return tmp.name


async def spending_by_category_chart(data: list[CategoryTotal]) -> str | None:
    if not data:
        return None

    labels = [row.category.value for row in data]
    totals = [row.total for row in data]

    fig = go.Figure(
        go.Pie(
            labels=labels,
            values=totals,
            marker=dict(colors=[CATEGORY_COLORS[row.category] for row in data]),
            textinfo="label+percent",
            texttemplate="%{label}<br>%{percent:.0%}",
            hovertemplate="%{label}: %{value:,.2f}<extra></extra>",
            hole=0.35,
            sort=False,
        )
    )
    fig.update_layout(
        **_base_layout(),
        title="Spending by Category",
        showlegend=False,
    )
    fig.add_annotation(
        text=format_amount(sum(totals), 0),
        x=0.5,
        y=0.5,
        showarrow=False,
        font=dict(size=18, color=THEME["colors"]["text"]),
    )
    return _save(fig)


async def daily_spending_chart(data: list[tuple[date, float]], budget: float | None = None) -> str | None:
    if not data:
        return None

    days = [d.isoformat() for d, _ in data]
    totals = [total for _, total in data]

    fig = go.Figure()
    fig.add_trace(
        go.Bar(
            x=days,
            y=totals,
            marker_color=THEME["colors"]["secondary"],
            hovertemplate="%{x}: %{y:,.2f}<extra></extra>",
            name="Daily total",
        )
    )

    cumulative = np.cumsum(totals)
    fig.add_trace(
        go.Scatter(
            x=days,
            y=cumulative.tolist(),
            mode="lines+markers",
            line=dict(color=THEME["colors"]["primary"], width=2),
            marker=dict(size=4),
            name="Cumulative",
            yaxis="y2",
            hovertemplate="%{x}: %{y:,.2f}<extra></extra>",
        )
    )

    if len(totals) >= 5:
        x_idx = list(range(len(totals)))
        z = np.polyfit(x_idx, totals, 1)
        trend = np.polyval(z, x_idx)
        fig.add_trace(
            go.Scatter(
                x=days,
                y=trend.tolist(),
                mode="lines",
                line=dict(color=THEME["colors"]["trend_line"], width=2, dash="dash"),
                name="Trend",
                hoverinfo="skip",
            )
        )

    if budget is not None and budget > 0:
        fig.add_hline(
            y=budget,
            line_dash="dot",
            line_color=THEME["colors"]["wasted"],
            annotation_text=f"Budget: {format_amount(budget, 0)}",
            annotation_position="top left",
            yref="y2",
        )

    fig.update_layout(
        **_base_layout(),
        title="Daily Spending",
        yaxis2=dict(title="Cumulative", overlaying="y", side="right", showgrid=False),
        showlegend=True,
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
    )
    return _save(fig)


async def weekly_time_chart(week: WeeklyProductivity) -> str | None:
    if not week.days_logged:
        return None

    days = [d.day.strftime("%a %d") for d in week.days]
    productive = [d.productive for d in week.days]
    wasted = [max(0.0, d.screen - d.productive) for d in week.days]

    fig = go.Figure()
    fig.add_trace(
        go.Bar(
            x=days,
            y=productive,
            marker_color=THEME["colors"]["productive"],
            name="Productive",
            hovertemplate="%{x}: %{y:.1f} h<extra></extra>",
        )
    )
    fig.add_trace(
        go.Bar(
            x=days,
            y=wasted,
            marker_color=THEME["colors"]["wasted"],
            name="Wasted",
            hovertemplate="%{x}: %{y:.1f} h<extra></extra>",
        )
    )
    fig.update_layout(
        **_base_layout(),
        title="Screen Time This Week",
        barmode="stack",
        yaxis_title="Hours",
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
    )
    return _save(fig)
