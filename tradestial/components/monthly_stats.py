# tradestial/components/monthly_stats.py
from __future__ import annotations

import calendar
from typing import List

import pandas as pd
import streamlit as st

from tradestial.data.calendar import PeriodSummary, month_summary, trading_data, year_summary
from tradestial.theme import FG_MUTED, GREEN, RED
from tradestial.utils import fmt_money


def _val_class(x: float) -> str:
    if x > 0:
        return "ms-pos"
    if x < 0:
        return "ms-neg"
    return "ms-zero"


def _cell(s: PeriodSummary) -> str:
    if not s.trading_days:
        return "<div class='ms-cell ms-empty'></div>"
    return (
        "<div class='ms-cell'>"
        f"<span class='ms-line {_val_class(s.total_pnl)}'>{fmt_money(s.total_pnl)}</span>"
        f"<span class='ms-line ms-zero'>{s.win_rate:.0f}% days</span>"
        f"<span class='ms-line ms-zero'>{s.total_trades} trades</span>"
        "</div>"
    )


def render_monthly_stats(
    df: pd.DataFrame,
    *,
    years_back: int = 2,
    title: str = "Monthly Stats",
    cell_height: int = 64,
) -> None:
    """
    Year x month grid of calendar summaries, most recent year first,
    with a Total column. Months without trades render blank.
    """
    with st.container(border=True):
        st.markdown(f"**{title}**")
        if df is None or df.empty:
            st.info("No monthly data yet.")
            return

        last_year = int(pd.to_datetime(df["open_date"], errors="coerce").dt.year.max())
        years = list(range(last_year, last_year - max(1, years_back), -1))

        st.markdown(
            f"""
<style>
.ms-grid {{ display:grid; grid-template-columns: 70px repeat(12, 1fr) 110px; gap:6px; }}
.ms-head, .ms-cell, .ms-year {{
  background: rgba(255,255,255,0.04); border:1px solid rgba(255,255,255,0.06);
  border-radius:6px; padding:6px 8px;
}}
.ms-head {{ font-weight:700; color:{FG_MUTED}; text-align:center; }}
.ms-year {{ color:{FG_MUTED}; display:flex; align-items:center; justify-content:center; min-height:{cell_height}px; }}
.ms-cell {{ min-height:{cell_height}px; display:flex; flex-direction:column; gap:3px; font-size:12px; }}
.ms-pos  {{ color:{GREEN}; font-weight:600; }}
.ms-neg  {{ color:{RED}; font-weight:600; }}
.ms-zero {{ color:{FG_MUTED}; }}
.ms-empty {{ background: rgba(255,255,255,0.02); }}
</style>
""",
            unsafe_allow_html=True,
        )

        html: List[str] = ["<div class='ms-head'>Year</div>"]
        html += [f"<div class='ms-head'>{calendar.month_abbr[m]}</div>" for m in range(1, 13)]
        html.append("<div class='ms-head'>Total</div>")
        for y in years:
            data = trading_data(df, y)
            html.append(f"<div class='ms-year'>{y}</div>")
            html += [_cell(month_summary(data, y, m)) for m in range(1, 13)]
            html.append(_cell(year_summary(data, y)))

        st.markdown("<div class='ms-grid'>" + "".join(html) + "</div>", unsafe_allow_html=True)
