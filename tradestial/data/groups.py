# tradestial/data/groups.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np
import pandas as pd

from tradestial.metrics import pick_pnl, profit_factor

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
UNTAGGED = "None"

_GROUP_COLS = ["pnl", "trades", "wins", "losses", "win_rate", "avg_win", "avg_loss", "profit_factor"]


def group_by_day(df: pd.DataFrame, date_col: str = "open_date") -> Dict[str, pd.DataFrame]:
    """'YYYY-MM-DD' -> trades of that day, keys in ascending order."""
    if df is None or df.empty:
        return {}
    keys = pd.to_datetime(df[date_col], errors="coerce").dt.strftime("%Y-%m-%d")
    return {str(k): g for k, g in df.groupby(keys, sort=True)}


def _stats(pnl: pd.Series) -> dict:
    wins = pnl[pnl > 0]
    losses = pnl[pnl < 0]
    n = len(pnl)
    return {
        "pnl": float(pnl.sum()),
        "trades": int(n),
        "wins": int(len(wins)),
        "losses": int(len(losses)),
        "win_rate": len(wins) / n * 100.0 if n else 0.0,
        "avg_win": float(wins.mean()) if len(wins) else 0.0,
        "avg_loss": float(abs(losses.mean())) if len(losses) else 0.0,
        "profit_factor": profit_factor(pnl),
    }


def _grouped(df: pd.DataFrame, keys: pd.Series, name: str, metric: str = "NET") -> pd.DataFrame:
    pnl = pick_pnl(df, metric)
    rows = []
    for key, idx in pnl.groupby(keys.to_numpy(), sort=True).groups.items():
        rows.append({name: key, **_stats(pnl.loc[idx])})
    return pd.DataFrame(rows, columns=[name] + _GROUP_COLS)


def symbol_performance(df: pd.DataFrame, metric: str = "NET") -> pd.DataFrame:
    """Per-symbol P&L, trade count and win stats, best P&L first."""
    if df is None or df.empty:
        return pd.DataFrame(columns=["symbol"] + _GROUP_COLS)
    out = _grouped(df, df["symbol"], "symbol", metric)
    return out.sort_values("pnl", ascending=False, kind="stable").reset_index(drop=True)


def side_performance(df: pd.DataFrame, metric: str = "NET") -> pd.DataFrame:
    if df is None or df.empty:
        return pd.DataFrame(columns=["side"] + _GROUP_COLS)
    return _grouped(df, df["side"].fillna("UNKNOWN"), "side", metric)


def hourly_performance(df: pd.DataFrame, metric: str = "NET") -> pd.DataFrame:
    """Bucket by entry hour; trades without an entry time are left out."""
    if df is None or df.empty or "entry_time" not in df.columns:
        return pd.DataFrame(columns=["hour"] + _GROUP_COLS)
    hours = pd.to_datetime(df["entry_time"], format="%H:%M:%S", errors="coerce").dt.hour
    have = hours.notna()
    if not have.any():
        return pd.DataFrame(columns=["hour"] + _GROUP_COLS)
    out = _grouped(df.loc[have], hours[have].astype(int), "hour", metric)
    out["hour"] = out["hour"].astype(int)
    return out


def weekday_performance(df: pd.DataFrame, metric: str = "NET") -> pd.DataFrame:
    """Bucket by the weekday the trade was opened, Monday first."""
    if df is None or df.empty:
        return pd.DataFrame(columns=["weekday"] + _GROUP_COLS)
    dow = pd.to_datetime(df["open_date"], errors="coerce").dt.dayofweek
    have = dow.notna()
    out = _grouped(df.loc[have], dow[have].astype(int), "weekday", metric)
    out["weekday"] = out["weekday"].map(lambda i: WEEKDAYS[int(i)])
    return out


def model_performance(df: pd.DataFrame, metric: str = "NET") -> pd.DataFrame:
    """Bucket by the model label stored on each trade ('' -> 'Unassigned')."""
    if df is None or df.empty:
        return pd.DataFrame(columns=["model"] + _GROUP_COLS)
    labels = df["model"].fillna("").astype(str).str.strip().replace("", "Unassigned")
    out = _grouped(df, labels, "model", metric)
    return out.sort_values("pnl", ascending=False, kind="stable").reset_index(drop=True)


# ================ Tags report ================
@dataclass
class TagReport:
    rows: pd.DataFrame  # tag, win_rate, net_pnl, trade_count, avg_daily_volume, avg_win, avg_loss
    daily: pd.DataFrame  # date, net, cumulative, drawdown, win_rate, trades, max_losing_streak


_TAG_COLS = ["tag", "win_rate", "net_pnl", "trade_count", "avg_daily_volume", "avg_win", "avg_loss"]
_DAILY_COLS = ["date", "net", "cumulative", "drawdown", "win_rate", "trades", "max_losing_streak"]


def _realized_day(df: pd.DataFrame) -> pd.Series:
    when = pd.to_datetime(df["close_date"], errors="coerce").fillna(
        pd.to_datetime(df["open_date"], errors="coerce")
    )
    return when.dt.strftime("%Y-%m-%d")


def _tag_daily(df: pd.DataFrame, pnl: pd.Series) -> pd.DataFrame:
    day = _realized_day(df)
    base = pd.DataFrame({"date": day, "pnl": pnl, "win": (df["status"] == "WIN").astype(int)})
    g = base.groupby("date", sort=True).agg(net=("pnl", "sum"), trades=("pnl", "size"), wins=("win", "sum"))
    daily = g.reset_index()
    daily["cumulative"] = daily["net"].cumsum()
    daily["drawdown"] = daily["cumulative"] - daily["cumulative"].cummax()
    daily["win_rate"] = np.where(daily["trades"] > 0, daily["wins"] / daily["trades"] * 100.0, 0.0)

    streak = best = 0
    best_so_far = []
    for v in daily["net"]:
        streak = streak + 1 if v < 0 else 0
        best = max(best, streak)
        best_so_far.append(best)
    daily["max_losing_streak"] = best_so_far
    return daily[_DAILY_COLS]


def tag_report(df: pd.DataFrame, top_n: Optional[int] = None, metric: str = "NET") -> TagReport:
    """
    Per-tag summary rows (a trade counts for every tag it carries; untagged
    trades land under 'None'), sorted by net P&L desc, plus a daily series
    across all trades for the report charts.
    """
    if df is None or df.empty:
        return TagReport(
            rows=pd.DataFrame(columns=_TAG_COLS),
            daily=pd.DataFrame(columns=_DAILY_COLS),
        )

    pnl = pick_pnl(df, metric)
    daily = _tag_daily(df, pnl)

    exploded = pd.DataFrame(
        {
            "tag": [list(t) if isinstance(t, (list, tuple)) and len(t) else [UNTAGGED] for t in df["tags"]],
            "pnl": pnl.to_numpy(),
            "status": df["status"].to_numpy(),
            "day": _realized_day(df).to_numpy(),
            "volume": pd.to_numeric(df["contracts_traded"], errors="coerce").fillna(0.0).to_numpy(),
        }
    ).explode("tag")

    rows = []
    for tag, g in exploded.groupby("tag", sort=False):
        total = len(g)
        wins = g.loc[g["status"] == "WIN", "pnl"]
        losses = g.loc[g["status"] == "LOSS", "pnl"]
        vol_by_day = g.groupby("day")["volume"].sum()
        rows.append(
            {
                "tag": tag,
                "win_rate": len(wins) / total * 100.0 if total else 0.0,
                "net_pnl": float(g["pnl"].sum()),
                "trade_count": int(total),
                "avg_daily_volume": float(vol_by_day.mean()) if len(vol_by_day) else 0.0,
                "avg_win": float(wins.mean()) if len(wins) else 0.0,
                "avg_loss": float(abs(losses.sum())) / len(losses) if len(losses) else 0.0,
            }
        )

    out = pd.DataFrame(rows, columns=_TAG_COLS)
    out = out.sort_values("net_pnl", ascending=False, kind="stable").reset_index(drop=True)
    if top_n is not None:
        out = out.head(int(top_n)).reset_index(drop=True)
    return TagReport(rows=out, daily=daily)


# ================ Wins vs losses ================
@dataclass
class WinsLossesReport:
    series: pd.DataFrame  # date, wins, losses (both cumulative, losses as magnitude)
    wins: dict  # total_pnl, avg_daily_volume, avg_trade, trades, commissions
    losses: dict
    max_consecutive_wins: int = 0
    max_consecutive_losses: int = 0


_WL_SERIES_COLS = ["date", "wins", "losses"]


def _side_summary(g: pd.DataFrame) -> dict:
    vol_by_day = g.groupby("day")["volume"].sum()
    n = len(g)
    return {
        "total_pnl": float(g["pnl"].sum()),
        "avg_daily_volume": float(vol_by_day.mean()) if len(vol_by_day) else 0.0,
        "avg_trade": float(abs(g["pnl"].sum())) / n if n else 0.0,
        "trades": int(n),
        "commissions": float(g["commissions"].sum()),
    }


def wins_losses_report(df: pd.DataFrame, metric: str = "NET") -> WinsLossesReport:
    """
    Winners (selected P&L > 0) against losers (< 0). Days and volume use the
    realized day; streaks walk trades by open date and skip flat trades.
    """
    if df is None or df.empty:
        empty = _side_summary(pd.DataFrame(columns=["day", "pnl", "volume", "commissions"]))
        return WinsLossesReport(
            series=pd.DataFrame(columns=_WL_SERIES_COLS),
            wins=empty,
            losses=dict(empty),
        )

    pnl = pick_pnl(df, metric)
    base = pd.DataFrame(
        {
            "day": _realized_day(df),
            "open": pd.to_datetime(df["open_date"], errors="coerce"),
            "pnl": pnl,
            "volume": pd.to_numeric(df["contracts_traded"], errors="coerce").fillna(0.0),
            "commissions": pd.to_numeric(df["commissions"], errors="coerce").fillna(0.0),
        }
    )
    won = base[base["pnl"] > 0]
    lost = base[base["pnl"] < 0]

    per_day = pd.DataFrame(
        {
            "wins": won.groupby("day")["pnl"].sum(),
            "losses": lost.groupby("day")["pnl"].sum().abs(),
        }
    ).fillna(0.0).sort_index()
    series = per_day.cumsum().rename_axis("date").reset_index()

    best_w = best_l = cur_w = cur_l = 0
    for v in base.sort_values("open", kind="stable")["pnl"]:
        if v > 0:
            cur_w, cur_l = cur_w + 1, 0
        elif v < 0:
            cur_w, cur_l = 0, cur_l + 1
        best_w = max(best_w, cur_w)
        best_l = max(best_l, cur_l)

    return WinsLossesReport(
        series=series[_WL_SERIES_COLS],
        wins=_side_summary(won),
        losses=_side_summary(lost),
        max_consecutive_wins=best_w,
        max_consecutive_losses=best_l,
    )
