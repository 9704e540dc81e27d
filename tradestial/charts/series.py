from __future__ import annotations

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from tradestial.theme import BG, BLUE, GREEN, GRID_WEAK, RED

# drawn as bars; everything else is a line
_BAR_KINDS = {
    "dailyPnL",
    "dailyVolume",
    "dailyTradeCount",
    "dailyActiveDays",
    "dailyAvgWin",
    "dailyAvgLoss",
    "dailyAvgWinLoss",
    "dailyAvgNetTradePnl",
    "dailyMaxWin",
    "dailyMaxLoss",
    "dailyBreakevenTrades",
    "dailyBreakevenDays",
    "dailyLongTrades",
    "dailyShortTrades",
    "dailyLongWinningTrades",
    "dailyShortWinningTrades",
    "dailyLongLosingTrades",
    "dailyShortLosingTrades",
    "symbolPerformance",
    "hourlyPerformance",
}


def _xy(data: pd.DataFrame):
    x_col = next(c for c in ("date", "symbol", "hour") if c in data.columns)
    y_col = next(c for c in ("value", "pnl", "cumulative", "equity", "drawdown") if c in data.columns)
    return data[x_col], pd.to_numeric(data[y_col], errors="coerce")


def plot_series(kind: str, data: pd.DataFrame, *, title: str = "", height: int = 260) -> go.Figure:
    """Render any chart_data() result; signed P&L bars are coloured by sign."""
    fig = go.Figure()
    fig.update_layout(
        title=title or None,
        height=height,
        margin=dict(l=10, r=10, t=30 if title else 8, b=10),
        paper_bgcolor=BG,
        plot_bgcolor=BG,
        showlegend=False,
    )
    if data is None or data.empty:
        return fig

    x, y = _xy(data)
    # plotly cannot draw inf
    y = y.replace([np.inf, -np.inf], np.nan)
    if kind in _BAR_KINDS:
        signed = (y < 0).any()
        colors = [GREEN if v >= 0 else RED for v in y.fillna(0)] if signed else BLUE
        fig.add_bar(x=x, y=y, marker=dict(color=colors))
    else:
        fig.add_scatter(x=x, y=y, mode="lines", line=dict(color=BLUE, width=2))
    fig.update_yaxes(showgrid=True, gridcolor=GRID_WEAK)
    fig.update_xaxes(showgrid=False)
    return fig
