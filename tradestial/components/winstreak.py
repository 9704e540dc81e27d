import streamlit as st

from tradestial.styles import inject_winstreak_css


def render_winstreak(
    *,
    days_streak: int,
    trades_streak: int,
    best_days_streak: int,
    worst_days_streak: int,
    best_trades_streak: int,
    worst_trades_streak: int,
    title: str = "Winstreak",
) -> None:
    """Current run of green days / winning trades, with best-win and worst-loss runs as pills."""
    inject_winstreak_css()

    def _col(big: int, good: int, bad: int, foot: str) -> str:
        return f"""
            <div class="ws-col">
              <div class="ws-main">
                <span class="ws-big">{big}</span>
                <span class="ws-badges">
                  <span class="ws-pill ws-good">{good}</span>
                  <span class="ws-pill ws-bad">{bad}</span>
                </span>
              </div>
              <div class="ws-foot">{foot}</div>
            </div>"""

    st.markdown(
        f"""
        <div class="ws-wrap">
          <div class="ws-title">{title}</div>
          <div class="ws-row">
            {_col(days_streak, best_days_streak, worst_days_streak, "Days")}
            {_col(trades_streak, best_trades_streak, worst_trades_streak, "Trades")}
          </div>
        </div>
        """,
        unsafe_allow_html=True,
    )
