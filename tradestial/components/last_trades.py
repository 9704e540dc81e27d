# tradestial/components/last_trades.py
from __future__ import annotations

import pandas as pd
import streamlit as st

from tradestial.theme import GREEN, RED
from tradestial.utils import fmt_money


def _side_badge(side: str) -> str:
    side = side.upper() if isinstance(side, str) else ""
    if side == "LONG":
        bg, fg = "rgba(16,185,129,.18)", GREEN
    elif side == "SHORT":
        bg, fg = "rgba(239,68,68,.18)", RED
    else:
        bg, fg, side = "rgba(255,255,255,.08)", "#cbd5e1", "N/A"
    return f"<span style='padding:2px 8px;border-radius:10px;background:{bg};color:{fg};font-size:.75rem;font-weight:600'>{side}</span>"


def _fmt_range(a: pd.Timestamp, b: pd.Timestamp) -> str:
    if pd.isna(b) or a.date() == b.date():
        return a.strftime("%A, %d %b %Y")
    return f"{a.strftime('%a, %d %b %Y')} to {b.strftime('%a, %d %b %Y')}"


def render_last_trades(df: pd.DataFrame, *, n: int = 5, title: str = "Recent Trades") -> None:
    """Most recently closed trades: symbol, side, model, dates, ROI and net P&L."""
    st.markdown(f"<div style='font-weight:600;margin:0 0 8px 4px;'>{title}</div>", unsafe_allow_html=True)
    st.markdown("<hr style='opacity:.12;margin:6px 0 10px'>", unsafe_allow_html=True)

    if df is None or df.empty:
        st.info("No trades yet. Your latest closed trades will appear here.")
        return

    recent = df.sort_values(["close_date", "open_date"], ascending=False, kind="stable").head(n)
    for i, (_, t) in enumerate(recent.iterrows()):
        pnl = float(t["net_pnl"])
        roi = float(t.get("net_roi") or 0.0)
        color = GREEN if pnl >= 0 else RED

        left, r_roi, r_pnl = st.columns([5, 1.2, 1.6], gap="small")
        with left:
            st.markdown(
                f"<div style='display:flex;align-items:center;gap:10px'>"
                f"<span style='font-weight:700'>{t['symbol']}</span>{_side_badge(t.get('side'))}</div>",
                unsafe_allow_html=True,
            )
            if t.get("model"):
                st.caption(t["model"])
            st.caption(_fmt_range(pd.Timestamp(t["open_date"]), pd.Timestamp(t["close_date"])))
        with r_roi:
            st.markdown(f"<div style='text-align:right;color:{color};opacity:.9'>{roi:.2f}%</div>", unsafe_allow_html=True)
        with r_pnl:
            st.markdown(
                f"<div style='text-align:right;color:{color};font-weight:700'>{fmt_money(pnl)}</div>",
                unsafe_allow_html=True,
            )
        if i < len(recent) - 1:
            st.markdown("<hr style='opacity:.12;margin:12px 0'>", unsafe_allow_html=True)
