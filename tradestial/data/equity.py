# tradestial/data/equity.py
from __future__ import annotations

import numpy as np
import pandas as pd


def _realized_date(df: pd.DataFrame) -> pd.Series:
    """Close date when known, open date otherwise (realized P&L timing)."""
    when = pd.to_datetime(df.get("close_date"), errors="coerce")
    if "open_date" in df.columns:
        opened = pd.to_datetime(df["open_date"], errors="coerce")
        when = opened if when is None else when.fillna(opened)
    return when


def build_equity(
    df: pd.DataFrame,
    start_equity: float,
    *,
    pnl_col: str = "net_pnl",
    date_col: str | None = None,
) -> pd.DataFrame:
    """
    Returns a copy of df with:
      - cum_pnl, equity, peak, dd_abs (≤0), dd_pct (≤0, percent)
      - _date (Timestamp) if date_col is provided
    The running peak never drops below start_equity.
    """
    out = df.copy().reset_index(drop=True)

    pnl = pd.to_numeric(out.get(pnl_col, 0.0), errors="coerce")
    pnl = pd.Series(pnl, index=out.index, dtype="float64").fillna(0.0)
    out["cum_pnl"] = pnl.cumsum()
    out["equity"] = float(start_equity) + out["cum_pnl"]
    out["peak"] = out["equity"].cummax().clip(lower=float(start_equity))
    out["dd_abs"] = out["equity"] - out["peak"]  # ≤ 0

    with np.errstate(invalid="ignore", divide="ignore"):
        out["dd_pct"] = np.where(
            out["peak"] > 0,
            (out["equity"] / out["peak"] - 1.0) * 100.0,  # percent
            0.0,
        )

    if date_col and date_col in out.columns:
        out["_date"] = pd.to_datetime(out[date_col], errors="coerce")

    return out


def resample_equity_daily(
    df: pd.DataFrame,
    start_equity: float,
    *,
    date_col: str,
    pnl_col: str = "net_pnl",
) -> pd.DataFrame:
    """
    Aggregate P&L to calendar days and build equity on the daily series.
    If date_col is missing/empty, falls back to build_equity on the raw df.
    """
    if date_col not in df.columns or len(df) == 0:
        return build_equity(df, start_equity, pnl_col=pnl_col, date_col=None)

    dt = pd.to_datetime(df[date_col], errors="coerce")
    pnl = pd.to_numeric(df[pnl_col], errors="coerce").fillna(0.0) if pnl_col in df.columns else 0.0

    tmp = pd.DataFrame({"_date": dt.dt.floor("D"), "pnl": pnl}).dropna(subset=["_date"])
    daily = (
        tmp.groupby("_date", as_index=False)["pnl"]
        .sum()
        .sort_values("_date")
        .reset_index(drop=True)
    )
    return build_equity(daily, start_equity, pnl_col="pnl", date_col="_date")


def daily_pnl(df: pd.DataFrame) -> pd.DataFrame:
    """Net P&L per realized day -> columns [date, pnl], oldest first."""
    if df is None or df.empty:
        return pd.DataFrame(columns=["date", "pnl"])
    tmp = pd.DataFrame(
        {
            "date": _realized_date(df).dt.strftime("%Y-%m-%d"),
            "pnl": pd.to_numeric(df["net_pnl"], errors="coerce").fillna(0.0),
        }
    ).dropna(subset=["date"])
    return tmp.groupby("date", as_index=False)["pnl"].sum().sort_values("date").reset_index(drop=True)


def cumulative_pnl(df: pd.DataFrame) -> pd.DataFrame:
    """One point per trade (no per-day collapsing) -> [date, cumulative]."""
    if df is None or df.empty:
        return pd.DataFrame(columns=["date", "cumulative"])
    when = _realized_date(df)
    tmp = pd.DataFrame(
        {"when": when, "pnl": pd.to_numeric(df["net_pnl"], errors="coerce").fillna(0.0)}
    ).dropna(subset=["when"])
    tmp = tmp.sort_values("when", kind="stable")
    return pd.DataFrame(
        {"date": tmp["when"].dt.strftime("%Y-%m-%d").to_numpy(), "cumulative": tmp["pnl"].cumsum().to_numpy()}
    )


def equity_curve(df: pd.DataFrame) -> pd.DataFrame:
    """Cumulative P&L under the name the charts use -> [date, equity]."""
    return cumulative_pnl(df).rename(columns={"cumulative": "equity"})


def net_account_balance(df: pd.DataFrame, starting_balance: float = 10_000.0) -> pd.DataFrame:
    """starting_balance + cumulative P&L -> [date, value]."""
    cum = cumulative_pnl(df)
    return pd.DataFrame({"date": cum["date"], "value": float(starting_balance) + cum["cumulative"]})


def daily_drawdown(df: pd.DataFrame) -> pd.DataFrame:
    """Equity minus its running peak (peak starts at 0) -> [date, drawdown ≤ 0]."""
    eq = equity_curve(df)
    if eq.empty:
        return pd.DataFrame(columns=["date", "drawdown"])
    peak = eq["equity"].cummax().clip(lower=0.0)
    return pd.DataFrame({"date": eq["date"], "drawdown": eq["equity"] - peak})
