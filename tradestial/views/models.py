# tradestial/views/models.py
from __future__ import annotations

import pandas as pd
import streamlit as st

from tradestial.strategies import ModelStatsService
from tradestial.utils import fmt_money, fmt_ratio


def _summary_cards(service: ModelStatsService, df: pd.DataFrame) -> None:
    summary = service.summary(df)
    labels = {
        "best_performing": "Best performing",
        "least_performing": "Least performing",
        "most_active": "Most active",
        "best_win_rate": "Best win rate",
    }
    cols = st.columns(4)
    for col, (key, label) in zip(cols, labels.items()):
        r = summary[key]
        if r is None:
            col.metric(label, "-")
        elif key == "most_active":
            col.metric(label, r.name, f"{r.stats.total} trades")
        elif key == "best_win_rate":
            col.metric(label, r.name, f"{r.stats.win_rate:.0f}%")
        else:
            col.metric(label, r.name, fmt_money(r.stats.net_pnl))


def render(df: pd.DataFrame, service: ModelStatsService) -> None:
    st.subheader("Models")

    with st.form("model_new", clear_on_submit=True):
        c1, c2 = st.columns([1, 2])
        name = c1.text_input("Model name")
        desc = c2.text_input("Description")
        if st.form_submit_button("Create model"):
            try:
                service.create_strategy(name, desc)
            except ValueError as e:
                st.error(str(e))
            else:
                st.rerun()

    strategies = service.list_strategies()
    if not strategies:
        st.info("Create a model to start assigning trades.")
        return

    _summary_cards(service, df)

    rows = []
    for s in strategies:
        stats = service.get_model_stats(s.id, df)
        rows.append(
            {
                "Model": s.name,
                "Trades": stats.total,
                "Win %": round(stats.win_rate, 1),
                "Net P&L": fmt_money(stats.net_pnl),
                "Avg winner": fmt_money(stats.avg_winner),
                "Avg loser": fmt_money(stats.avg_loser),
                "Profit factor": fmt_ratio(stats.profit_factor),
                "Expectancy": fmt_money(stats.expectancy),
            }
        )
    st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)

    if df is None or df.empty:
        return

    st.markdown("**Assign trades**")
    by_id = {s.id: s.name for s in strategies}
    c1, c2, c3 = st.columns([2, 2, 1])
    trade_id = c1.selectbox(
        "Trade",
        df["trade_id"].tolist(),
        format_func=lambda t: f"{t} {df.loc[df['trade_id'] == t, 'symbol'].iloc[0]}",
        key="mdl_trade",
    )
    current = service.trade_model(trade_id)
    c1.caption(f"Currently: {by_id.get(current, 'unassigned')}")
    model_id = c2.selectbox("Model", list(by_id), format_func=by_id.get, key="mdl_model")
    if c3.button("Assign", key="mdl_assign"):
        service.assign_trade_to_model(trade_id, model_id)
        st.rerun()
    if current and c3.button("Unassign", key="mdl_unassign"):
        service.remove_trade_from_model(trade_id, current)
        st.rerun()
