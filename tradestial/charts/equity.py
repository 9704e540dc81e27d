# tradestial/charts/equity.py
from typing import Optional

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from tradestial.theme import AXIS_WEAK, BG, GREEN, GREEN_FILL, RED, RED_FILL


def plot_equity(curve: pd.DataFrame, *, value_col: str = "cumulative", baseline: float = 0.0, height: Optional[int] = None) -> go.Figure:
    """
    Cumulative P&L (or account balance) line, one point per trade.
    Area is green when the last point is above baseline, red otherwise.
    """
    fig = go.Figure()
    fig.update_layout(
        height=int(height or 260),
        margin=dict(l=8, r=8, t=0, b=0),
        paper_bgcolor=BG,
        plot_bgcolor=BG,
        showlegend=False,
    )
    if curve is None or curve.empty:
        return fig

    x = pd.to_datetime(curve["date"])
    y = pd.to_numeric(curve[value_col], errors="coerce").astype(float)
    up = float(y.iloc[-1]) >= baseline

    fig.add_hline(y=float(baseline), line_width=1, line_dash="dot", line_color=AXIS_WEAK, opacity=0.5)
    fig.add_scatter(
        x=x,
        y=y,
        mode="lines",
        line=dict(width=2, color=GREEN if up else RED),
        fill="tozeroy" if baseline == 0 else None,
        fillcolor=GREEN_FILL if up else RED_FILL,
        hovertemplate="%{x|%b %d, %Y}<br>$%{y:,.2f}<extra></extra>",
    )

    ymin, ymax = float(np.nanmin(y)), float(np.nanmax(y))
    ymin, ymax = min(ymin, baseline), max(ymax, baseline)
    pad = max(20.0, (ymax - ymin) * 0.06)
    fig.update_yaxes(range=[ymin - pad, ymax + pad], tickformat="$,.0f", showgrid=False)
    fig.update_xaxes(type="date", showgrid=False, zeroline=False, tickformat="%b %d")
    return fig


def plot_wins_losses(series: pd.DataFrame, *, height: int = 260) -> go.Figure:
    """Cumulative winning P&L against cumulative |losing| P&L by day."""
    fig = go.Figure()
    fig.update_layout(
        height=height,
        margin=dict(l=8, r=8, t=0, b=0),
        paper_bgcolor=BG,
        plot_bgcolor=BG,
        legend=dict(orientation="h", y=1.02, x=0),
    )
    if series is None or series.empty:
        return fig

    x = pd.to_datetime(series["date"])
    for col, name, color, fill in (("wins", "Wins", GREEN, GREEN_FILL), ("losses", "Losses", RED, RED_FILL)):
        fig.add_scatter(
            x=x,
            y=pd.to_numeric(series[col], errors="coerce"),
            name=name,
            mode="lines",
            line=dict(width=2, color=color),
            fill="tozeroy",
            fillcolor=fill,
            hovertemplate="%{x|%b %d, %Y}<br>$%{y:,.2f}<extra></extra>",
        )
    fig.update_yaxes(tickformat="$,.0f", showgrid=False)
    fig.update_xaxes(type="date", showgrid=False, zeroline=False, tickformat="%b %d")
    return fig
