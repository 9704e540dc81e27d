# app.py
import logging

import pandas as pd
import streamlit as st

from tradestial.config import load_settings
from tradestial.io import TRADE_COLS, get_all_trades, load_trades, save_trades
from tradestial.state import ensure_defaults
from tradestial.storage import JsonStore
from tradestial.strategies import ModelStatsService
from tradestial.tags import TagCatalog
from tradestial.views.calendar import render as render_calendar
from tradestial.views.compare import render as render_compare
from tradestial.views.dashboard import render as render_dashboard
from tradestial.views.models import render as render_models
from tradestial.views.reports import render as render_reports
from tradestial.views.tags import render as render_tags

settings = load_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("tradestial.app")

st.set_page_config(
    page_title="Tradestial",
    page_icon="📈",
    layout="wide",
    initial_sidebar_state="expanded",
)
ensure_defaults()


@st.cache_resource
def _store(path: str) -> JsonStore:
    return JsonStore(path)


store = _store(str(settings.store_path))
store.reload()

# ===================== SIDEBAR =====================
with st.sidebar:
    st.markdown("## Tradestial")

    _options = ["Dashboard", "Calendar", "Compare", "Tags", "Models", "Reports"]
    nav = st.radio("Go to:", _options, key="_page", label_visibility="collapsed")

    st.divider()
    upload = st.file_uploader("Import trades", type=["csv", "json"], key="_upload")
    if upload is not None and st.button("Replace trades with this file", key="_import"):
        try:
            imported = load_trades(upload)
        except ValueError as e:
            st.error(f"Could not read that file: {e}")
        else:
            save_trades(store, imported)
            st.success(f"Imported {len(imported)} trades.")

# ===================== TRADES =====================
df = pd.DataFrame(columns=TRADE_COLS)
try:
    df = get_all_trades(store)
    if df.empty and settings.trades_csv is not None:
        df = load_trades(settings.trades_csv)
        save_trades(store, df)
except (OSError, ValueError) as e:
    logger.warning("Failed to load trades: %s", e)
    st.error("Failed to load trades")

# ===================== MAIN =====================
if nav == "Dashboard":
    render_dashboard(df)
elif nav == "Calendar":
    render_calendar(df)
elif nav == "Compare":
    render_compare(df)
elif nav == "Tags":
    render_tags(df, TagCatalog(store))
elif nav == "Models":
    render_models(df, ModelStatsService(store, max_cache_age=settings.stats_cache_seconds))
elif nav == "Reports":
    render_reports(df, starting_balance=settings.starting_balance)
