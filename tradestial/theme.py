# tradestial/theme.py
# ---- Surfaces ----
BG = "#0b0f19"  # app background / panels
CARD_BG = "#0E1624"
FG = "#e5e7eb"  # primary text
FG_MUTED = "#cbd5e1"  # captions, labels

# ---- Outcome hues ----
GREEN = "#10b981"  # profit bars, win pills
GREEN_FILL = "rgba(16,185,129,0.18)"
RED = "#ef4444"  # loss bars, drawdown
RED_FILL = "rgba(239,68,68,0.18)"
FLAT = "#64748b"  # breakeven

# ---- Brand ----
BLUE = "#3AA4EB"  # neutral series (counts, rates)
BLUE_LIGHT = "#9ecbff"
PURPLE = "#8b5cf6"  # second comparison group

# ---- Grid / axes ----
GRID_WEAK = "rgba(255,255,255,0.06)"
AXIS_WEAK = "rgba(255,255,255,0.1)"
BAR_STROKE = "rgba(255,255,255,0.12)"

# Calendar day-cell backgrounds, keyed by data.calendar.pnl_band
BAND_COLORS = {
    "empty": "#111827",
    "flat": "#1f2937",
    "profit-2": "rgba(16,185,129,0.25)",
    "profit-3": "rgba(16,185,129,0.45)",
    "profit-4": "rgba(16,185,129,0.65)",
    "profit-5": "rgba(16,185,129,0.85)",
    "loss-2": "rgba(239,68,68,0.25)",
    "loss-3": "rgba(239,68,68,0.45)",
    "loss-4": "rgba(239,68,68,0.65)",
    "loss-5": "rgba(239,68,68,0.85)",
}
