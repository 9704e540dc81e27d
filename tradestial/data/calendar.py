# tradestial/data/calendar.py
from __future__ import annotations

import calendar as pycal
from dataclasses import dataclass
from typing import Dict, List, Optional

import pandas as pd

from tradestial.config import PNL_THRESHOLDS


@dataclass
class DayCell:
    pnl: float = 0.0
    trades: int = 0


@dataclass
class CalendarDay:
    day: int
    date_key: str
    pnl: float
    trades: int
    has_data: bool


@dataclass
class PeriodSummary:
    total_pnl: float = 0.0
    total_trades: int = 0
    trading_days: int = 0
    winning_days: int = 0
    win_rate: float = 0.0
    avg_daily_pnl: float = 0.0


def _key(year: int, month: int, day: int) -> str:
    return f"{year:04d}-{month:02d}-{day:02d}"


def trading_data(df: pd.DataFrame, year: int) -> Dict[str, DayCell]:
    """
    Heatmap data for one year: 'YYYY-MM-DD' -> DayCell(pnl, trades).
    Trades are placed on the day they were opened.
    """
    data: Dict[str, DayCell] = {}
    if df is None or df.empty:
        return data

    opened = pd.to_datetime(df["open_date"], errors="coerce")
    mask = opened.dt.year == year
    if not mask.any():
        return data

    tmp = pd.DataFrame(
        {
            "key": opened[mask].dt.strftime("%Y-%m-%d"),
            "pnl": pd.to_numeric(df.loc[mask, "net_pnl"], errors="coerce").fillna(0.0),
        }
    )
    agg = tmp.groupby("key").agg(pnl=("pnl", "sum"), trades=("pnl", "size"))
    for key, row in agg.iterrows():
        data[str(key)] = DayCell(pnl=float(row["pnl"]), trades=int(row["trades"]))
    return data


def calendar_days(data: Dict[str, DayCell], year: int, month: int) -> List[Optional[CalendarDay]]:
    """
    Sunday-first month grid: leading None blanks, then one CalendarDay per date.
    month is 1..12.
    """
    # pycal.weekday: Monday=0 .. Sunday=6 -> shift so Sunday=0
    first = (pycal.weekday(year, month, 1) + 1) % 7
    days_in_month = pycal.monthrange(year, month)[1]

    out: List[Optional[CalendarDay]] = [None] * first
    for d in range(1, days_in_month + 1):
        key = _key(year, month, d)
        cell = data.get(key)
        out.append(
            CalendarDay(
                day=d,
                date_key=key,
                pnl=cell.pnl if cell else 0.0,
                trades=cell.trades if cell else 0,
                has_data=cell is not None,
            )
        )
    return out


def _summarize(cells: List[DayCell]) -> PeriodSummary:
    total_pnl = sum(c.pnl for c in cells)
    trading_days = len(cells)
    winning_days = sum(1 for c in cells if c.pnl > 0)
    return PeriodSummary(
        total_pnl=total_pnl,
        total_trades=sum(c.trades for c in cells),
        trading_days=trading_days,
        winning_days=winning_days,
        win_rate=(winning_days / trading_days) * 100.0 if trading_days else 0.0,
        avg_daily_pnl=total_pnl / trading_days if trading_days else 0.0,
    )


def month_summary(data: Dict[str, DayCell], year: int, month: int) -> PeriodSummary:
    days_in_month = pycal.monthrange(year, month)[1]
    cells = [data[k] for k in (_key(year, month, d) for d in range(1, days_in_month + 1)) if k in data]
    return _summarize(cells)


def year_summary(data: Dict[str, DayCell], year: int) -> PeriodSummary:
    cells: List[DayCell] = []
    for month in range(1, 13):
        days_in_month = pycal.monthrange(year, month)[1]
        cells.extend(data[k] for k in (_key(year, month, d) for d in range(1, days_in_month + 1)) if k in data)
    return _summarize(cells)


def pnl_band(pnl: float, has_data: bool = True) -> str:
    """Colour intensity band for a day cell."""
    t = PNL_THRESHOLDS
    if not has_data:
        return "empty"
    if pnl > t["high_profit"]:
        return "profit-5"
    if pnl > t["medium_profit"]:
        return "profit-4"
    if pnl > t["low_profit"]:
        return "profit-3"
    if pnl > t["breakeven"]:
        return "profit-2"
    if pnl == t["breakeven"]:
        return "flat"
    if pnl > t["low_loss"]:
        return "loss-2"
    if pnl > t["medium_loss"]:
        return "loss-3"
    if pnl > t["high_loss"]:
        return "loss-4"
    return "loss-5"
