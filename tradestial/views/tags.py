# tradestial/views/tags.py
from __future__ import annotations

import pandas as pd
import plotly.express as px
import streamlit as st

from tradestial.data.groups import tag_report
from tradestial.metrics import PNL_METRICS
from tradestial.tags import TagCatalog
from tradestial.theme import BG, GREEN, RED


def _daily_fig(daily: pd.DataFrame, col: str, label: str, color: str):
    fig = px.line(daily, x="date", y=col, labels={"date": "", col: label})
    fig.update_traces(line_color=color)
    fig.update_layout(height=220, paper_bgcolor=BG, plot_bgcolor=BG, margin=dict(l=10, r=10, t=10, b=10))
    return fig


def _catalog_editor(catalog: TagCatalog) -> None:
    with st.expander("Manage tags"):
        for cat in catalog.get_categories():
            tags = catalog.get_tags(cat.id)
            st.markdown(f"<span style='color:{cat.color};font-weight:700'>{cat.name}</span>: {', '.join(tags) or '-'}", unsafe_allow_html=True)
        with st.form("tag_add", clear_on_submit=True):
            cats = catalog.get_categories()
            c1, c2 = st.columns(2)
            cat_id = c1.selectbox("Category", [c.id for c in cats], format_func=lambda i: catalog.get_category(i).name)
            tag = c2.text_input("Tag")
            if st.form_submit_button("Add tag") and tag.strip():
                catalog.add_tag(cat_id, tag.strip())
                st.rerun()
        with st.form("cat_add", clear_on_submit=True):
            c1, c2 = st.columns([3, 1])
            name = c1.text_input("New category")
            color = c2.color_picker("Colour", "#3AA4EB")
            if st.form_submit_button("Add category") and name.strip():
                catalog.add_category(name.strip(), color)
                st.rerun()


def render(df: pd.DataFrame, catalog: TagCatalog) -> None:
    st.subheader("Tags report")

    c1, c2 = st.columns(2)
    top_n = c1.number_input("Top tags", min_value=1, max_value=100, key="_tags_top_n")
    metric = c2.selectbox("P&L", PNL_METRICS, key="_pnl_metric")
    report = tag_report(df, top_n=int(top_n), metric=metric)

    if report.rows.empty:
        st.info("No tagged trades yet.")
    else:
        st.dataframe(
            report.rows.rename(
                columns={
                    "tag": "Tag",
                    "win_rate": "Win %",
                    "net_pnl": "Net P&L",
                    "trade_count": "Trades",
                    "avg_daily_volume": "Avg daily volume",
                    "avg_win": "Avg win",
                    "avg_loss": "Avg loss",
                }
            ),
            use_container_width=True,
            hide_index=True,
        )
        left, right = st.columns(2)
        left.plotly_chart(_daily_fig(report.daily, "cumulative", "Cumulative P&L", GREEN), use_container_width=True, key="tags_cum")
        right.plotly_chart(_daily_fig(report.daily, "drawdown", "Drawdown", RED), use_container_width=True, key="tags_dd")

    _catalog_editor(catalog)
