# tradestial/views/calendar.py
from __future__ import annotations

import calendar as pycal

import pandas as pd
import streamlit as st

from tradestial.data.calendar import PeriodSummary, calendar_days, month_summary, pnl_band, trading_data, year_summary
from tradestial.styles import inject_calendar_css
from tradestial.utils import fmt_compact, fmt_money

_WEEKDAYS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


def _shift_month(delta: int) -> None:
    y, m = st.session_state["_cal_year"], st.session_state["_cal_month"] + delta
    if m < 1:
        y, m = y - 1, 12
    elif m > 12:
        y, m = y + 1, 1
    st.session_state["_cal_year"], st.session_state["_cal_month"] = y, m


def _summary_row(label: str, s: PeriodSummary) -> None:
    st.markdown(f"**{label}**")
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Net P&L", fmt_money(s.total_pnl))
    c2.metric("Trades", s.total_trades)
    c3.metric("Day win %", f"{s.win_rate:.0f}%", help=f"{s.winning_days} of {s.trading_days} trading days green")
    c4.metric("Avg daily P&L", fmt_money(s.avg_daily_pnl))


def _grid_html(cells) -> str:
    html = [f"<div class='cal-head'>{d}</div>" for d in _WEEKDAYS]
    for cell in cells:
        if cell is None:
            html.append("<div class='cal-cell cal-blank'></div>")
            continue
        band = pnl_band(cell.pnl, cell.has_data)
        body = ""
        if cell.has_data:
            body = (
                f"<div class='cal-pnl'>{fmt_compact(cell.pnl)}</div>"
                f"<div class='cal-trades'>{cell.trades} trade{'s' if cell.trades != 1 else ''}</div>"
            )
        html.append(f"<div class='cal-cell cal-{band}' title='{cell.date_key}'><div class='cal-day'>{cell.day}</div>{body}</div>")
    return "<div class='cal-grid'>" + "".join(html) + "</div>"


def render(df: pd.DataFrame) -> None:
    """Month heatmap of daily P&L keyed by the day each trade was opened."""
    inject_calendar_css()
    st.subheader("Calendar")

    prev, title, nxt = st.columns([1, 4, 1])
    prev.button("◀", key="cal_prev", on_click=_shift_month, args=(-1,))
    nxt.button("▶", key="cal_next", on_click=_shift_month, args=(1,))
    year, month = st.session_state["_cal_year"], st.session_state["_cal_month"]
    title.markdown(f"<h4 style='text-align:center;margin:0'>{pycal.month_name[month]} {year}</h4>", unsafe_allow_html=True)

    data = trading_data(df, year)
    st.markdown(_grid_html(calendar_days(data, year, month)), unsafe_allow_html=True)

    st.divider()
    _summary_row(f"{pycal.month_name[month]} {year}", month_summary(data, year, month))
    _summary_row(f"Year {year}", year_summary(data, year))
