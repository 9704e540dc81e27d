from __future__ import annotations

import pandas as pd
import plotly.graph_objects as go

from tradestial.theme import BAR_STROKE, BG, GREEN, GRID_WEAK, RED


def plot_pnl(daily: pd.DataFrame, *, mode: str = "Daily", height: int = 250) -> go.Figure:
    """
    Bar chart of realized P&L. Expects daily_pnl() output ([date, pnl]).
    mode="Weekly" sums into Sunday-ending weeks.
    """
    fig = go.Figure()
    fig.update_layout(
        height=height,
        margin=dict(l=16, r=16, t=8, b=10),
        paper_bgcolor=BG,
        plot_bgcolor=BG,
        showlegend=False,
    )
    if daily is None or daily.empty:
        return fig

    s = pd.Series(daily["pnl"].to_numpy(), index=pd.to_datetime(daily["date"]))
    if mode == "Weekly":
        s = s.resample("W-SUN").sum()
        hover = "Week ending %{x|%b %d, %Y}<br>P&L: $%{y:,.2f}<extra></extra>"
    else:
        hover = "%{x|%b %d, %Y}<br>P&L: $%{y:,.2f}<extra></extra>"

    fig.add_bar(
        x=s.index,
        y=s.values,
        marker=dict(color=[GREEN if v >= 0 else RED for v in s.values], line=dict(color=BAR_STROKE, width=1)),
        hovertemplate=hover,
    )
    fig.add_hline(y=0, line_width=1, line_color="rgba(255,255,255,0.25)")
    fig.update_yaxes(zeroline=False, showgrid=True, gridcolor=GRID_WEAK, tickprefix="$", separatethousands=True)
    fig.update_xaxes(showgrid=False, tickangle=-35, tickformat="%m/%d/%Y")
    return fig
