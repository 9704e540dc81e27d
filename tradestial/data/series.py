# tradestial/data/series.py
from __future__ import annotations

from typing import Callable, Dict, Optional

import numpy as np
import pandas as pd

from tradestial.config import BREAKEVEN_EPSILON
from tradestial.metrics import profit_factor
from tradestial.utils import trade_duration_hours

from .equity import cumulative_pnl, daily_drawdown, daily_pnl, equity_curve, net_account_balance
from .groups import group_by_day

VALUE_COLS = ["date", "value"]


def _per_day(df: pd.DataFrame, fn: Callable[[pd.DataFrame], float]) -> pd.DataFrame:
    """Apply fn to each open-date bucket -> [date, value], oldest first."""
    days = group_by_day(df, "open_date")
    if not days:
        return pd.DataFrame(columns=VALUE_COLS)
    return pd.DataFrame({"date": list(days), "value": [float(fn(g)) for g in days.values()]})


def _pnl(g: pd.DataFrame) -> pd.Series:
    return pd.to_numeric(g["net_pnl"], errors="coerce").fillna(0.0)


def _wins(g: pd.DataFrame) -> pd.Series:
    return _pnl(g)[g["status"] == "WIN"]


def _losses(g: pd.DataFrame) -> pd.Series:
    return _pnl(g)[g["status"] == "LOSS"]


# ---------- activity ----------
def daily_volume(df):
    # rows without a size count as one contract
    return _per_day(df, lambda g: pd.to_numeric(g["contracts_traded"], errors="coerce").fillna(1.0).sum())


def daily_trade_count(df):
    return _per_day(df, len)


def daily_active_days(df):
    return _per_day(df, lambda g: 1 if len(g) else 0)


# ---------- win rates ----------
def win_rate_over_time(df, side: Optional[str] = None):
    def rate(g):
        if side:
            g = g[g["side"] == side]
        return (g["status"] == "WIN").sum() / len(g) * 100.0 if len(g) else 0.0

    return _per_day(df, rate)


# ---------- P&L stats ----------
def daily_avg_win(df):
    return _per_day(df, lambda g: _wins(g).mean() if len(_wins(g)) else 0.0)


def daily_avg_loss(df):
    """Average losing trade per day, drawn below zero."""

    def avg(g):
        losses = _losses(g)
        return -abs(losses.sum()) / len(losses) if len(losses) else 0.0

    return _per_day(df, avg)


def daily_avg_win_loss(df):
    def spread(g):
        pnl = _pnl(g)
        wins, losses = pnl[pnl > 0], pnl[pnl < 0]
        avg_win = wins.mean() if len(wins) else 0.0
        avg_loss = abs(losses.sum()) / len(losses) if len(losses) else 0.0
        return avg_win - avg_loss

    return _per_day(df, spread)


def daily_avg_net_trade_pnl(df):
    return _per_day(df, lambda g: _pnl(g).mean() if len(g) else 0.0)


def daily_max_win(df):
    return _per_day(df, lambda g: _pnl(g)[_pnl(g) > 0].max() if (_pnl(g) > 0).any() else 0.0)


def daily_max_loss(df):
    return _per_day(df, lambda g: _pnl(g)[_pnl(g) < 0].min() if (_pnl(g) < 0).any() else 0.0)


# ---------- breakeven ----------
def daily_breakeven_trades(df):
    return _per_day(df, lambda g: int((_pnl(g).abs() < BREAKEVEN_EPSILON).sum()))


def daily_breakeven_days(df):
    """1 on realized days whose net P&L rounds to zero, else 0."""
    daily = daily_pnl(df)
    if daily.empty:
        return pd.DataFrame(columns=VALUE_COLS)
    return pd.DataFrame(
        {"date": daily["date"], "value": (daily["pnl"].abs() < BREAKEVEN_EPSILON).astype(int)}
    )


# ---------- side counts ----------
def daily_side_count(df, side: str, status: Optional[str] = None):
    def count(g):
        mask = g["side"] == side
        if status:
            mask &= g["status"] == status
        return int(mask.sum())

    return _per_day(df, count)


# ---------- hold time ----------
def _durations(g: pd.DataFrame) -> np.ndarray:
    vals = np.array([trade_duration_hours(r) for _, r in g.iterrows()], dtype="float64")
    return vals[~np.isnan(vals)]


def daily_avg_hold_hours(df):
    return _per_day(df, lambda g: _durations(g).mean() if _durations(g).size else 0.0)


def daily_max_hold_hours(df):
    return _per_day(df, lambda g: _durations(g).max() if _durations(g).size else 0.0)


# ---------- risk / return ----------
def profit_factor_over_time(df):
    return _per_day(df, lambda g: profit_factor(_pnl(g)))


def expectancy_over_time(df):
    def exp(g):
        total = len(g)
        if not total:
            return 0.0
        wins, losses = _wins(g), _losses(g)
        p_win = len(wins) / total
        avg_win = wins.mean() if len(wins) else 0.0
        avg_loss = abs(losses.sum()) / len(losses) if len(losses) else 0.0
        return p_win * avg_win - (1.0 - p_win) * avg_loss

    return _per_day(df, exp)


# ---------- streaks ----------
def _running_max_streak(signs):
    """signs: +1 extends a win run, -1 a loss run, 0 leaves both untouched."""
    cur_w = cur_l = best_w = best_l = 0
    out_w, out_l = [], []
    for s in signs:
        if s > 0:
            cur_w, cur_l = cur_w + 1, 0
        elif s < 0:
            cur_w, cur_l = 0, cur_l + 1
        best_w, best_l = max(best_w, cur_w), max(best_l, cur_l)
        out_w.append(best_w)
        out_l.append(best_l)
    return out_w, out_l


def max_consecutive_days_over_time(df, winning: bool = True):
    """Best run of green (or red) realized days up to each day; flat days keep the run."""
    daily = daily_pnl(df)
    if daily.empty:
        return pd.DataFrame(columns=VALUE_COLS)
    w, l = _running_max_streak(np.sign(daily["pnl"].to_numpy()))
    return pd.DataFrame({"date": daily["date"], "value": w if winning else l})


def max_consecutive_trades_over_time(df, winning: bool = True):
    """Best run of winning (or losing) trades, walked in open-date order, sampled per day."""
    days = group_by_day(df, "open_date")
    if not days:
        return pd.DataFrame(columns=VALUE_COLS)
    cur_w = cur_l = best_w = best_l = 0
    rows = []
    for date, g in days.items():
        for pnl, status in zip(_pnl(g), g["status"]):
            if pnl > 0 or status == "WIN":
                cur_w, cur_l = cur_w + 1, 0
            elif pnl < 0 or status == "LOSS":
                cur_w, cur_l = 0, cur_l + 1
            best_w, best_l = max(best_w, cur_w), max(best_l, cur_l)
        rows.append({"date": date, "value": best_w if winning else best_l})
    return pd.DataFrame(rows, columns=VALUE_COLS)


# ---------- breakdowns ----------
def symbol_series(df):
    """[symbol, pnl, trades] in first-seen order."""
    if df is None or df.empty:
        return pd.DataFrame(columns=["symbol", "pnl", "trades"])
    g = pd.DataFrame({"symbol": df["symbol"], "pnl": _pnl(df)}).groupby("symbol", sort=False)
    return g.agg(pnl=("pnl", "sum"), trades=("pnl", "size")).reset_index()


def hourly_series(df):
    """[hour, pnl, trades] by entry hour; trades without an entry time are skipped."""
    if df is None or df.empty or "entry_time" not in df.columns:
        return pd.DataFrame(columns=["hour", "pnl", "trades"])
    hours = pd.to_datetime(df["entry_time"], format="%H:%M:%S", errors="coerce").dt.hour
    tmp = pd.DataFrame({"hour": hours, "pnl": _pnl(df)}).dropna(subset=["hour"])
    tmp["hour"] = tmp["hour"].astype(int)
    return tmp.groupby("hour").agg(pnl=("pnl", "sum"), trades=("pnl", "size")).reset_index()


_SERIES: Dict[str, Callable[..., pd.DataFrame]] = {
    "dailyPnL": lambda df, **_: daily_pnl(df),
    "cumulativePnL": lambda df, **_: cumulative_pnl(df),
    "equityCurve": lambda df, **_: equity_curve(df),
    "netAccountBalance": lambda df, startingBalance=10_000.0, **_: net_account_balance(df, startingBalance),
    "dailyDrawdown": lambda df, **_: daily_drawdown(df),
    "symbolPerformance": lambda df, **_: symbol_series(df),
    "hourlyPerformance": lambda df, **_: hourly_series(df),
    "dailyVolume": lambda df, **_: daily_volume(df),
    "dailyTradeCount": lambda df, **_: daily_trade_count(df),
    "dailyActiveDays": lambda df, **_: daily_active_days(df),
    "winRateOverTime": lambda df, **_: win_rate_over_time(df),
    "longWinRateOverTime": lambda df, **_: win_rate_over_time(df, "LONG"),
    "shortWinRateOverTime": lambda df, **_: win_rate_over_time(df, "SHORT"),
    "dailyAvgWin": lambda df, **_: daily_avg_win(df),
    "dailyAvgLoss": lambda df, **_: daily_avg_loss(df),
    "dailyAvgWinLoss": lambda df, **_: daily_avg_win_loss(df),
    "dailyAvgNetTradePnl": lambda df, **_: daily_avg_net_trade_pnl(df),
    "dailyMaxWin": lambda df, **_: daily_max_win(df),
    "dailyMaxLoss": lambda df, **_: daily_max_loss(df),
    "dailyBreakevenTrades": lambda df, **_: daily_breakeven_trades(df),
    "dailyBreakevenDays": lambda df, **_: daily_breakeven_days(df),
    "dailyLongTrades": lambda df, **_: daily_side_count(df, "LONG"),
    "dailyShortTrades": lambda df, **_: daily_side_count(df, "SHORT"),
    "dailyLongWinningTrades": lambda df, **_: daily_side_count(df, "LONG", "WIN"),
    "dailyShortWinningTrades": lambda df, **_: daily_side_count(df, "SHORT", "WIN"),
    "dailyLongLosingTrades": lambda df, **_: daily_side_count(df, "LONG", "LOSS"),
    "dailyShortLosingTrades": lambda df, **_: daily_side_count(df, "SHORT", "LOSS"),
    "dailyAvgHoldTimeHours": lambda df, **_: daily_avg_hold_hours(df),
    "dailyMaxHoldTimeHours": lambda df, **_: daily_max_hold_hours(df),
    "profitFactorOverTime": lambda df, **_: profit_factor_over_time(df),
    "expectancyOverTime": lambda df, **_: expectancy_over_time(df),
    "maxConsecutiveWinningDaysOverTime": lambda df, **_: max_consecutive_days_over_time(df, True),
    "maxConsecutiveLosingDaysOverTime": lambda df, **_: max_consecutive_days_over_time(df, False),
    "maxConsecutiveWinsOverTime": lambda df, **_: max_consecutive_trades_over_time(df, True),
    "maxConsecutiveLossesOverTime": lambda df, **_: max_consecutive_trades_over_time(df, False),
}

# older names still found in saved layouts
ALIASES = {
    "Net account balance": "netAccountBalance",
    "breakevenTradesOverTime": "dailyBreakevenTrades",
    "breakevenDaysOverTime": "dailyBreakevenDays",
}

KINDS = tuple(_SERIES)


def chart_data(kind: str, df: pd.DataFrame, **config) -> pd.DataFrame:
    """
    Compute the named chart series for a trade selection.

    Per-day series bucket trades by open date and return [date, value];
    the P&L/equity family returns its own columns (see data.equity).
    """
    fn = _SERIES.get(ALIASES.get(kind, kind))
    if fn is None:
        raise ValueError(f"Unknown chart kind {kind!r}")
    if df is None:
        df = pd.DataFrame(columns=["open_date", "close_date", "net_pnl", "status", "side", "symbol"])
    return fn(df, **config)
