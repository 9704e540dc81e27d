# tradestial/views/reports.py
from __future__ import annotations

import pandas as pd
import streamlit as st

from tradestial.charts.equity import plot_wins_losses
from tradestial.charts.series import plot_series
from tradestial.data.groups import (
    hourly_performance,
    model_performance,
    side_performance,
    symbol_performance,
    weekday_performance,
    wins_losses_report,
)
from tradestial.data.series import KINDS, chart_data
from tradestial.utils import fmt_money

_BREAKDOWNS = {
    "Symbol": symbol_performance,
    "Side": side_performance,
    "Hour of day": hourly_performance,
    "Day of week": weekday_performance,
    "Model": model_performance,
}


def _side_table(side: dict, label: str, streak: int) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "": [
                "Total P&L",
                "Average daily volume",
                f"Average {label} trade",
                f"Number of {label} trades",
                "Total commissions",
                "Max consecutive " + ("wins" if label == "winning" else "losses"),
            ],
            "Value": [
                fmt_money(abs(side["total_pnl"])),
                f"{side['avg_daily_volume']:.2f}",
                fmt_money(side["avg_trade"]) if side["trades"] else "N/A",
                str(side["trades"]),
                fmt_money(side["commissions"]),
                str(streak),
            ],
        }
    )


def _render_wins_losses(df: pd.DataFrame, metric: str) -> None:
    st.markdown("#### Wins vs losses")
    rep = wins_losses_report(df, metric)
    st.plotly_chart(plot_wins_losses(rep.series), use_container_width=True, key="rep_wins_losses")
    c1, c2 = st.columns(2)
    with c1:
        st.caption(f"Wins ({rep.wins['trades']})")
        st.dataframe(_side_table(rep.wins, "winning", rep.max_consecutive_wins), use_container_width=True, hide_index=True)
    with c2:
        st.caption(f"Losses ({rep.losses['trades']})")
        st.dataframe(_side_table(rep.losses, "losing", rep.max_consecutive_losses), use_container_width=True, hide_index=True)


def render(df: pd.DataFrame, *, starting_balance: float = 10_000.0) -> None:
    st.subheader("Reports")

    kind = st.selectbox("Chart", KINDS, key="_chart_kind")
    data = chart_data(kind, df, startingBalance=starting_balance)
    st.plotly_chart(plot_series(kind, data), use_container_width=True, key="rep_series")

    metric = st.session_state.get("_pnl_metric", "NET")
    st.divider()
    _render_wins_losses(df, metric)

    st.divider()
    by = st.radio("Breakdown", list(_BREAKDOWNS), horizontal=True, key="rep_breakdown")
    table = _BREAKDOWNS[by](df, metric)
    if table.empty:
        st.info("Nothing to break down yet.")
        return
    st.dataframe(table.round(2), use_container_width=True, hide_index=True)
