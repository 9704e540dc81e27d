from __future__ import annotations

import math
import re
from datetime import datetime
from typing import Any, Optional

import pandas as pd

# ===== Number parsing =====
_NUM_RE = re.compile(r"[-+]?[\d,.]*\.?\d+(?:[eE][-+]?\d+)?")


def to_number(x: Any) -> Optional[float]:
    """
    Convert messy strings like '4.51 K USDT', '100.00 USDT', '24.7%', '$1,234.56'
    into floats. Returns None if it can't parse.
    Rules:
      - removes currency/unit text (USDT, USD, $, %)
      - handles commas
      - handles 'K'/'k' multiplier (x1000) when appears as a separate token
      - accounting negatives like '($125.00)'
    """
    if x is None:
        return None
    if isinstance(x, bool):
        return float(x)
    if isinstance(x, (int, float)):
        return None if isinstance(x, float) and math.isnan(x) else float(x)

    s = str(x).strip()
    if not s:
        return None

    neg = s.startswith("(") and s.endswith(")")

    mult = 1.0
    if re.search(r"\b[kK]\b", s):
        mult = 1000.0

    m = _NUM_RE.search(s.replace(",", ""))
    if not m:
        return None
    try:
        val = float(m.group(0))
    except ValueError:
        return None
    val *= mult
    return -abs(val) if neg else val


# ===== Durations =====
_ISO_DUR = re.compile(r"^P(?:T(?:(\d+(?:\.\d+)?)H)?(?:(\d+(?:\.\d+)?)M)?(?:(\d+(?:\.\d+)?)S)?)$")
_HMS = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")
_PLAIN_MIN = re.compile(r"^(\d+(?:\.\d+)?)(?:\s*M)?$")


def parse_duration_hours(dur: Any) -> float:
    """
    Duration text -> hours. Accepts:
      'PT1H30M45S', '01:30' / '01:30:15', '1H 20M', '90M', '45S', '90' (minutes).
    Returns 0.0 when nothing matches.
    """
    if dur is None:
        return 0.0
    s = str(dur).strip().upper()
    if not s:
        return 0.0

    m = _ISO_DUR.match(s)
    if m and any(m.groups()):
        h, mi, sec = (float(g or 0) for g in m.groups())
        return h + mi / 60 + sec / 3600

    m = _HMS.match(s)
    if m:
        h, mi, sec = (float(g or 0) for g in m.groups())
        return h + mi / 60 + sec / 3600

    m = _PLAIN_MIN.match(s)
    if m:
        return float(m.group(1)) / 60

    total = 0.0
    for pat, div in ((r"(\d+(?:\.\d+)?)\s*H", 1), (r"(\d+(?:\.\d+)?)\s*M", 60), (r"(\d+(?:\.\d+)?)\s*S", 3600)):
        hit = re.search(pat, s)
        if hit:
            total += float(hit.group(1)) / div
    return total


def _at_time(day: Any, clock: Any) -> Optional[pd.Timestamp]:
    if day is None or pd.isna(day):
        return None
    base = pd.Timestamp(day)
    if clock and isinstance(clock, str) and clock.strip():
        t = pd.to_datetime(f"{base.strftime('%Y-%m-%d')} {clock.strip()}", errors="coerce")
        if pd.notna(t):
            return t
    return base


def trade_duration_hours(trade: Any) -> float:
    """
    Hours between entry and exit for one trade row (Series or dict).
    Uses open/close dates combined with entry/exit clock times when present,
    falling back to the 'duration' text when the timestamps give zero.
    """
    get = trade.get
    start = _at_time(get("open_date"), get("entry_time"))
    close = get("close_date")
    if close is None or pd.isna(close):
        close = get("open_date")
    end = _at_time(close, get("exit_time"))

    hours = 0.0
    if start is not None and end is not None:
        hours = (end - start).total_seconds() / 3600.0
        if not math.isfinite(hours) or hours < 0:
            hours = 0.0

    if hours == 0.0 and get("duration"):
        parsed = parse_duration_hours(get("duration"))
        if parsed > 0:
            hours = parsed
    return hours


# ===== Formatting =====
def fmt_money(x: float) -> str:
    sign = "-" if x < 0 else ""
    return f"{sign}${abs(x):,.2f}"


def fmt_compact(x: float) -> str:
    """$1.23M / $4.50k / $12.00 with a leading minus for losses."""
    sign = "-" if x < 0 else ""
    v = abs(x)
    if v >= 1_000_000:
        return f"{sign}${v / 1_000_000:.2f}M"
    if v >= 1_000:
        return f"{sign}${v / 1_000:.2f}k"
    return f"{sign}${v:.2f}"


def fmt_ratio(x: float) -> str:
    if math.isinf(x):
        return "∞"
    return f"{x:.2f}"


def slugify(name: str) -> str:
    """Turn 'My Strategy Name' into 'my-strategy-name'."""
    s = re.sub(r"[^A-Za-z0-9_-]+", "-", name.strip()).strip("-").lower()
    return s or f"item-{int(datetime.now().timestamp())}"
