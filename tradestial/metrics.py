from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Iterable, Tuple

import numpy as np
import pandas as pd

from .utils import trade_duration_hours

PNL_METRICS = ("NET", "GROSS")


def _num(df: pd.DataFrame, col: str, default: float = 0.0) -> pd.Series:
    """Numeric column with NaN -> default; a missing column is all default."""
    if col not in df.columns:
        return pd.Series(default, index=df.index, dtype="float64")
    return pd.to_numeric(df[col], errors="coerce").fillna(default)


def pick_pnl(df: pd.DataFrame, metric: str = "NET") -> pd.Series:
    """NET -> net_pnl; GROSS -> gross_pnl, row-wise falling back to net_pnl."""
    metric = (metric or "NET").upper()
    if metric not in PNL_METRICS:
        raise ValueError(f"Unknown P&L metric {metric!r}; expected one of {PNL_METRICS}")
    net = _num(df, "net_pnl")
    if metric == "GROSS" and "gross_pnl" in df.columns:
        gross = pd.to_numeric(df["gross_pnl"], errors="coerce")
        return gross.fillna(net)
    return net


def profit_factor(pnl: Iterable[float], unbounded: bool = False) -> float:
    """
    Gross wins / gross losses. Without losses the ratio is 0, or inf when
    unbounded is set and there is at least one win.
    """
    s = pd.Series(list(pnl), dtype="float64")
    wins = float(s[s > 0].sum())
    losses = float(abs(s[s < 0].sum()))
    if losses > 0:
        return wins / losses
    return float("inf") if unbounded and wins > 0 else 0.0


def streaks(outcomes: Iterable[bool]) -> Tuple[int, int]:
    """(longest run of True, longest run of False)."""
    best_w = best_l = cur_w = cur_l = 0
    for won in outcomes:
        if won:
            cur_w += 1
            cur_l = 0
            best_w = max(best_w, cur_w)
        else:
            cur_l += 1
            cur_w = 0
            best_l = max(best_l, cur_l)
    return best_w, best_l


def max_drawdown(pnl: Iterable[float]) -> float:
    """Largest drop of cumulative P&L from its running peak (peak starts at 0). >= 0."""
    cum = pd.Series(list(pnl), dtype="float64").fillna(0.0).cumsum()
    if cum.empty:
        return 0.0
    peak = cum.cummax().clip(lower=0.0)
    return float((peak - cum).max())


def _sort_by_close(df: pd.DataFrame) -> pd.DataFrame:
    if "close_date" not in df.columns:
        return df
    when = pd.to_datetime(df["close_date"], errors="coerce")
    if "open_date" in df.columns:
        when = when.fillna(pd.to_datetime(df["open_date"], errors="coerce"))
    return df.assign(_when=when).sort_values("_when", kind="stable").drop(columns="_when")


# ================ Compare metrics ================
@dataclass
class Metrics:
    total_trades: int = 0
    total_pnl: float = 0.0
    avg_pnl: float = 0.0
    win_rate: float = 0.0
    winners: int = 0
    losers: int = 0
    avg_win: float = 0.0
    avg_loss: float = 0.0
    profit_factor: float = 0.0

    def as_dict(self) -> dict:
        return asdict(self)


def compute_metrics(df: pd.DataFrame, metric: str = "NET") -> Metrics:
    """
    Summary for one trade selection; a trade wins when the chosen P&L is > 0.
    Profit factor here is avg win / avg loss.
    """
    if df is None or df.empty:
        return Metrics()
    pnl = pick_pnl(df, metric)
    total = int(len(pnl))
    wins = pnl[pnl > 0]
    losses = pnl[pnl < 0]
    total_pnl = float(pnl.sum())
    avg_win = float(wins.mean()) if len(wins) else 0.0
    avg_loss = float(abs(losses.sum())) / len(losses) if len(losses) else 0.0
    return Metrics(
        total_trades=total,
        total_pnl=total_pnl,
        avg_pnl=total_pnl / total,
        win_rate=len(wins) / total * 100.0,
        winners=int(len(wins)),
        losers=int(len(losses)),
        avg_win=avg_win,
        avg_loss=avg_loss,
        profit_factor=avg_win / avg_loss if avg_loss > 0 else 0.0,
    )


def expectancy(df: pd.DataFrame) -> float:
    """p(win) * avg win - p(loss) * |avg loss|, using WIN/LOSS status."""
    if df is None or df.empty:
        return 0.0
    pnl = _num(df, "net_pnl")
    is_win = df["status"] == "WIN"
    is_loss = df["status"] == "LOSS"
    total = len(df)
    avg_win = float(pnl[is_win].mean()) if is_win.any() else 0.0
    avg_loss = float(abs(pnl[is_loss].sum())) / int(is_loss.sum()) if is_loss.any() else 0.0
    p_win = int(is_win.sum()) / total
    return p_win * avg_win - (1.0 - p_win) * avg_loss


# ================ Dashboard metrics ================
@dataclass
class TradeMetrics:
    total_trades: int = 0
    net_cumulative_pnl: float = 0.0
    winning_trades: int = 0
    losing_trades: int = 0
    win_rate: float = 0.0
    avg_win_amount: float = 0.0
    avg_loss_amount: float = 0.0
    profit_factor: float = 0.0
    total_win_amount: float = 0.0
    total_loss_amount: float = 0.0
    gross_pnl: float = 0.0
    total_commissions: float = 0.0
    avg_roi: float = 0.0
    max_win: float = 0.0
    max_loss: float = 0.0
    consecutive_wins: int = 0
    consecutive_losses: int = 0
    avg_trade_duration_hours: float = 0.0
    max_drawdown: float = 0.0
    profitability_index: float = 0.0
    risk_reward_ratio: float = 0.0
    expectancy: float = 0.0

    def as_dict(self) -> dict:
        return asdict(self)


def trade_metrics(df: pd.DataFrame) -> TradeMetrics:
    """
    Full KPI set for the dashboard. Wins/losses follow the trade status,
    order-dependent figures (streaks, drawdown) walk trades by close date.
    """
    if df is None or df.empty:
        return TradeMetrics()

    df = _sort_by_close(df)
    pnl = _num(df, "net_pnl")
    is_win = (df["status"] == "WIN").to_numpy()
    is_loss = (df["status"] == "LOSS").to_numpy()

    total = int(len(df))
    n_win = int(is_win.sum())
    n_loss = int(is_loss.sum())
    total_win = float(pnl[is_win].sum())
    total_loss = float(abs(pnl[is_loss].sum()))
    avg_win = total_win / n_win if n_win else 0.0
    avg_loss = total_loss / n_loss if n_loss else 0.0
    win_rate = n_win / total * 100.0

    pf = total_win / total_loss if total_loss > 0 else 0.0

    gross = pick_pnl(df, "GROSS")
    commissions = _num(df, "commissions")
    roi = _num(df, "net_roi")

    best_w, best_l = streaks(is_win)
    durations = [trade_duration_hours(r) for _, r in df.iterrows()]

    return TradeMetrics(
        total_trades=total,
        net_cumulative_pnl=float(pnl.sum()),
        winning_trades=n_win,
        losing_trades=n_loss,
        win_rate=win_rate,
        avg_win_amount=avg_win,
        avg_loss_amount=avg_loss,
        profit_factor=pf,
        total_win_amount=total_win,
        total_loss_amount=total_loss,
        gross_pnl=float(gross.sum()),
        total_commissions=float(np.sum(commissions)),
        avg_roi=float(np.mean(roi)),
        max_win=float(pnl[is_win].max()) if n_win else 0.0,
        max_loss=float(pnl[is_loss].min()) if n_loss else 0.0,
        consecutive_wins=best_w,
        consecutive_losses=best_l,
        avg_trade_duration_hours=float(np.mean(durations)) if durations else 0.0,
        max_drawdown=max_drawdown(pnl),
        profitability_index=win_rate / 100.0,
        risk_reward_ratio=avg_win / avg_loss if avg_loss > 0 else 0.0,
        expectancy=(win_rate / 100.0) * avg_win - ((100.0 - win_rate) / 100.0) * avg_loss,
    )
