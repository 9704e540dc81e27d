# tradestial/styles.py
import streamlit as st

from tradestial.theme import BAND_COLORS, CARD_BG, FG_MUTED, GREEN, RED


def inject_kpi_css() -> None:
    st.markdown(
        f"""
    <style>
      .kpi-card{{ background:{CARD_BG}; border-radius:12px; padding:14px 16px; min-height:96px;
                 display:flex; flex-direction:column; justify-content:center; gap:6px; }}
      .kpi-label{{ font-size:13px; color:{FG_MUTED}; margin:0; }}
      .kpi-number{{ font-size:26px; font-weight:800; line-height:1.2; margin:0; }}
      .kpi-pos{{ color:{GREEN}; }}
      .kpi-neg{{ color:{RED}; }}

      /* win/loss pill bar */
      .pillbar{{ width:100%; height:10px; background:#1b2433; border-radius:999px; overflow:hidden; margin-top:4px; }}
      .pillbar .win{{  height:100%; background:{GREEN}; display:inline-block; }}
      .pillbar .loss{{ height:100%; background:{RED}; display:inline-block; }}
    </style>
    """,
        unsafe_allow_html=True,
    )


def inject_winstreak_css(brand_color: str = GREEN) -> None:
    st.markdown(
        f"""
    <style>
      .ws-wrap {{ --brand:{brand_color}; }}
      .ws-title{{ font-weight:800; font-size:18px; margin:0 0 8px 0; }}
      .ws-row{{ display:flex; gap:28px; justify-content:space-between; }}
      .ws-col{{ flex:1; display:flex; flex-direction:column; align-items:center; }}
      .ws-main{{ display:flex; align-items:center; gap:10px; }}
      .ws-big{{ font-size:34px; font-weight:800; color:var(--brand); line-height:1; }}
      .ws-badges{{ display:flex; flex-direction:column; gap:6px; margin-left:6px; }}
      .ws-pill{{ min-width:36px; padding:2px 8px; border-radius:10px; text-align:center;
                 font-size:12px; font-weight:700; color:{FG_MUTED}; }}
      .ws-pill.ws-good{{ background:rgba(16,185,129,.25); border:1px solid rgba(16,185,129,.4); }}
      .ws-pill.ws-bad{{  background:rgba(239,68,68,.25);  border:1px solid rgba(239,68,68,.4); }}
      .ws-foot{{ margin-top:6px; font-size:13px; color:{FG_MUTED}; }}
    </style>
    """,
        unsafe_allow_html=True,
    )


def inject_calendar_css() -> None:
    bands = "\n".join(f"      .cal-{name}{{ background:{color}; }}" for name, color in BAND_COLORS.items())
    st.markdown(
        f"""
    <style>
      .cal-grid{{ display:grid; grid-template-columns:repeat(7, 1fr); gap:6px; }}
      .cal-head{{ text-align:center; font-size:12px; font-weight:700; color:{FG_MUTED}; padding:4px 0; }}
      .cal-cell{{ min-height:74px; border-radius:8px; padding:6px 8px; display:flex; flex-direction:column;
                  justify-content:space-between; border:1px solid rgba(255,255,255,0.06); }}
      .cal-blank{{ background:transparent; border:none; }}
      .cal-day{{ font-size:12px; color:{FG_MUTED}; }}
      .cal-pnl{{ font-size:14px; font-weight:700; text-align:right; }}
      .cal-trades{{ font-size:11px; color:{FG_MUTED}; text-align:right; }}
{bands}
    </style>
    """,
        unsafe_allow_html=True,
    )
