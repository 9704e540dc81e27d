# tradestial/charts/drawdown.py
from typing import Any, Dict, Optional, Tuple

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from tradestial.theme import BG, RED


def plot_underwater(dd: pd.DataFrame, *, height: Optional[int] = None) -> Tuple[go.Figure, Dict[str, Any]]:
    """
    Underwater chart from daily_drawdown() output ([date, drawdown <= 0]).

    Returns (fig, stats) where stats contains:
      - current_dd (float, $)
      - max_dd (float, $, <= 0)
      - recovered (bool)
      - recover_msg (str)
    """
    h = int(height) if height is not None else 220

    if dd is None or dd.empty:
        fig_empty = go.Figure().update_layout(
            height=h, paper_bgcolor=BG, plot_bgcolor=BG, margin=dict(l=10, r=10, t=10, b=10)
        )
        return fig_empty, {"current_dd": 0.0, "max_dd": 0.0, "recovered": True, "recover_msg": "No trades to compute drawdown."}

    frame = dd.reset_index(drop=True).copy()
    frame["point"] = range(1, len(frame) + 1)
    idx_min = int(frame["drawdown"].idxmin())
    max_dd = float(frame.loc[idx_min, "drawdown"])

    after = frame.loc[idx_min + 1 :, "drawdown"]
    back = after[after >= -1e-9]
    if max_dd >= 0:
        recovered, recover_msg = True, "No drawdown so far."
    elif len(back):
        recovered = True
        recover_msg = f"Recovered from max drawdown in **{int(back.index[0] - idx_min)} trades**."
    else:
        recovered, recover_msg = False, "Not yet recovered from max drawdown."

    fig = px.area(
        frame,
        x="point",
        y="drawdown",
        labels={"point": "Trade #", "drawdown": "Drawdown ($)"},
        custom_data=["date"],
    )
    fig.update_traces(
        line_color=RED,
        hovertemplate="Trade #%{x}<br>Date: %{customdata[0]}<br>Drawdown: $%{y:,.2f}<extra></extra>",
        showlegend=False,
    )
    fig.update_yaxes(range=[min(-1.0, max_dd * 1.1), 0], tickprefix="$", separatethousands=True)
    fig.add_hline(y=0, line_width=1, line_dash="dot", opacity=0.6)
    if max_dd < 0:
        fig.add_scatter(
            x=[idx_min + 1],
            y=[max_dd],
            mode="markers",
            marker=dict(size=8, color=RED),
            hovertemplate="Max drawdown: $%{y:,.2f}<extra></extra>",
            showlegend=False,
        )
    fig.update_layout(height=h, margin=dict(l=10, r=10, t=10, b=10), paper_bgcolor=BG, plot_bgcolor=BG)

    stats = dict(
        current_dd=float(frame["drawdown"].iloc[-1]),
        max_dd=max_dd,
        recovered=recovered,
        recover_msg=recover_msg,
    )
    return fig, stats
