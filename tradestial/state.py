# tradestial/state.py
from __future__ import annotations

import pandas as pd
import streamlit as st


def ensure_defaults() -> None:
    """Initialize Streamlit session_state defaults once."""
    today = pd.Timestamp.today().normalize()
    if "_page" not in st.session_state:
        st.session_state["_page"] = "Dashboard"
    if "_pnl_metric" not in st.session_state:
        st.session_state["_pnl_metric"] = "NET"
    if "_dpnl_mode" not in st.session_state:
        st.session_state["_dpnl_mode"] = "Daily"
    # Calendar cursor (month is 1..12)
    if "_cal_year" not in st.session_state:
        st.session_state["_cal_year"] = int(today.year)
    if "_cal_month" not in st.session_state:
        st.session_state["_cal_month"] = int(today.month)
    if "_tags_top_n" not in st.session_state:
        st.session_state["_tags_top_n"] = 10
    if "_chart_kind" not in st.session_state:
        st.session_state["_chart_kind"] = "dailyPnL"
