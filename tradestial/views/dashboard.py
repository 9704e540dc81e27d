# tradestial/views/dashboard.py
from __future__ import annotations

from typing import Iterable

import pandas as pd
import streamlit as st

from tradestial.charts.drawdown import plot_underwater
from tradestial.charts.equity import plot_equity
from tradestial.charts.pnl import plot_pnl
from tradestial.components.last_trades import render_last_trades
from tradestial.components.monthly_stats import render_monthly_stats
from tradestial.components.winstreak import render_winstreak
from tradestial.data.equity import cumulative_pnl, daily_drawdown, daily_pnl
from tradestial.metrics import streaks, trade_metrics
from tradestial.styles import inject_kpi_css
from tradestial.utils import fmt_money, fmt_ratio


def _current_run(outcomes: Iterable[bool]) -> int:
    """Length of the trailing run of True values."""
    run = 0
    for won in outcomes:
        run = run + 1 if won else 0
    return run


def _kpi(label: str, value: str, sign: float = 0.0) -> None:
    cls = "kpi-pos" if sign > 0 else ("kpi-neg" if sign < 0 else "")
    st.markdown(
        f"<div class='kpi-card'><p class='kpi-label'>{label}</p><p class='kpi-number {cls}'>{value}</p></div>",
        unsafe_allow_html=True,
    )


def render(df: pd.DataFrame) -> None:
    inject_kpi_css()
    st.subheader("Dashboard")

    if df is None or df.empty:
        st.info("No trades yet. Upload a CSV from the sidebar to get started.")
        return

    m = trade_metrics(df)
    c1, c2, c3, c4, c5 = st.columns(5)
    with c1:
        _kpi("Net P&L", fmt_money(m.net_cumulative_pnl), m.net_cumulative_pnl)
    with c2:
        _kpi("Trade win %", f"{m.win_rate:.1f}%")
        w = m.win_rate
        st.markdown(
            f"<div class='pillbar'><span class='win' style='width:{w:.1f}%'></span>"
            f"<span class='loss' style='width:{100 - w:.1f}%'></span></div>",
            unsafe_allow_html=True,
        )
    with c3:
        _kpi("Profit factor", fmt_ratio(m.profit_factor))
    with c4:
        _kpi("Avg win / loss", fmt_ratio(m.risk_reward_ratio))
    with c5:
        _kpi("Expectancy", fmt_money(m.expectancy), m.expectancy)

    daily = daily_pnl(df)
    day_wins = (daily["pnl"] > 0).tolist()
    best_days, worst_days = streaks(day_wins)
    trade_wins = (df["status"] == "WIN").tolist()
    render_winstreak(
        days_streak=_current_run(day_wins),
        trades_streak=_current_run(trade_wins),
        best_days_streak=best_days,
        worst_days_streak=worst_days,
        best_trades_streak=m.consecutive_wins,
        worst_trades_streak=m.consecutive_losses,
    )

    left, right = st.columns(2)
    with left:
        st.markdown("**Daily net cumulative P&L**")
        st.plotly_chart(plot_equity(cumulative_pnl(df)), use_container_width=True, key="dash_cum")
    with right:
        mode = st.radio("Net daily P&L", ["Daily", "Weekly"], key="_dpnl_mode", horizontal=True)
        st.plotly_chart(plot_pnl(daily, mode=mode), use_container_width=True, key="dash_pnl")

    left, right = st.columns(2)
    with left:
        st.markdown("**Drawdown**")
        fig, dd = plot_underwater(daily_drawdown(df))
        st.plotly_chart(fig, use_container_width=True, key="dash_dd")
        st.caption(f"Max drawdown {fmt_money(dd['max_dd'])}. {dd['recover_msg']}")
    with right:
        render_last_trades(df)

    render_monthly_stats(df)
