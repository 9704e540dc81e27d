# tradestial/views/compare.py
from __future__ import annotations

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from tradestial.compare import SIDES, FilterGroup, compare_groups, symbol_options, tag_options
from tradestial.metrics import PNL_METRICS, Metrics
from tradestial.theme import BG, GREEN, PURPLE
from tradestial.utils import fmt_money, fmt_ratio


def _group_form(label: str, key: str, symbols, tags) -> FilterGroup:
    st.markdown(f"**{label}**")
    symbol = st.selectbox("Symbol", [""] + symbols, key=f"{key}_symbol", format_func=lambda s: s or "All symbols")
    picked = st.multiselect("Tags (all must match)", tags, key=f"{key}_tags")
    c1, c2 = st.columns(2)
    side = c1.selectbox("Side", SIDES, key=f"{key}_side")
    metric = c2.selectbox("P&L", PNL_METRICS, key=f"{key}_metric")
    c1, c2 = st.columns(2)
    start = c1.date_input("From", value=None, key=f"{key}_start")
    end = c2.date_input("To", value=None, key=f"{key}_end")
    return FilterGroup(
        symbol=symbol,
        tags=",".join(picked),
        side=side,
        pnl_metric=metric,
        start_date=start.isoformat() if start else "",
        end_date=end.isoformat() if end else "",
    )


def _table(m1: Metrics, m2: Metrics) -> pd.DataFrame:
    rows = [
        ("Total trades", m1.total_trades, m2.total_trades, str),
        ("Total P&L", m1.total_pnl, m2.total_pnl, fmt_money),
        ("Avg P&L", m1.avg_pnl, m2.avg_pnl, fmt_money),
        ("Win rate", m1.win_rate, m2.win_rate, lambda v: f"{v:.1f}%"),
        ("Winners", m1.winners, m2.winners, str),
        ("Losers", m1.losers, m2.losers, str),
        ("Avg win", m1.avg_win, m2.avg_win, fmt_money),
        ("Avg loss", m1.avg_loss, m2.avg_loss, fmt_money),
        ("Profit factor", m1.profit_factor, m2.profit_factor, fmt_ratio),
    ]
    return pd.DataFrame(
        [{"Metric": name, "Group 1": fmt(a), "Group 2": fmt(b)} for name, a, b, fmt in rows]
    ).set_index("Metric")


def render(df: pd.DataFrame) -> None:
    st.subheader("Compare")
    st.caption("Compare performance across different symbols, tags, sides and date ranges.")

    symbols, tags = symbol_options(df), tag_options(df)
    left, right = st.columns(2)
    with left:
        g1 = _group_form("Group #1", "cmp1", symbols, tags)
    with right:
        g2 = _group_form("Group #2", "cmp2", symbols, tags)

    m1, m2 = compare_groups(df, g1, g2)
    st.dataframe(_table(m1, m2), use_container_width=True)

    fig = go.Figure()
    labels = ["Total P&L", "Avg win", "Avg loss"]
    fig.add_bar(name="Group 1", x=labels, y=[m1.total_pnl, m1.avg_win, -m1.avg_loss], marker_color=GREEN)
    fig.add_bar(name="Group 2", x=labels, y=[m2.total_pnl, m2.avg_win, -m2.avg_loss], marker_color=PURPLE)
    fig.update_layout(barmode="group", height=280, paper_bgcolor=BG, plot_bgcolor=BG, margin=dict(l=10, r=10, t=10, b=10))
    fig.update_yaxes(tickprefix="$", separatethousands=True)
    st.plotly_chart(fig, use_container_width=True, key="cmp_bars")
