from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import pandas as pd

from .metrics import Metrics, compute_metrics

SIDES = ("ALL", "LONG", "SHORT")


@dataclass
class FilterGroup:
    symbol: str = ""
    tags: str = ""  # comma separated
    side: str = "ALL"
    pnl_metric: str = "NET"
    start_date: str = ""  # yyyy-mm-dd, inclusive
    end_date: str = ""  # yyyy-mm-dd, inclusive

    def tag_list(self) -> List[str]:
        return [t.strip().lower() for t in (self.tags or "").split(",") if t.strip()]


def _day(s: str):
    if not s:
        return None
    t = pd.to_datetime(s, errors="coerce")
    if pd.isna(t):
        raise ValueError(f"Invalid date {s!r}; expected YYYY-MM-DD")
    return t.normalize()


def filter_trades(df: pd.DataFrame, group: FilterGroup) -> pd.DataFrame:
    """Rows of df matching every criterion set on group (blank criteria match all)."""
    if df is None or df.empty:
        return df
    side = (group.side or "ALL").upper()
    if side not in SIDES:
        raise ValueError(f"side must be one of {SIDES}, got {group.side!r}")

    mask = pd.Series(True, index=df.index)
    if group.symbol:
        mask &= df["symbol"] == group.symbol
    if side != "ALL":
        mask &= df["side"] == side

    wanted = group.tag_list()
    if wanted:
        have = df["tags"].map(lambda ts: {str(t).lower() for t in ts} if isinstance(ts, (list, tuple)) else set())
        mask &= have.map(lambda s: all(w in s for w in wanted))

    opened = pd.to_datetime(df["open_date"], errors="coerce").dt.normalize()
    start, end = _day(group.start_date), _day(group.end_date)
    if start is not None:
        mask &= opened >= start
    if end is not None:
        mask &= opened <= end

    return df.loc[mask]


def compare_groups(df: pd.DataFrame, group1: FilterGroup, group2: FilterGroup) -> Tuple[Metrics, Metrics]:
    return (
        compute_metrics(filter_trades(df, group1), group1.pnl_metric),
        compute_metrics(filter_trades(df, group2), group2.pnl_metric),
    )


def symbol_options(df: pd.DataFrame) -> List[str]:
    if df is None or df.empty:
        return []
    return sorted(df["symbol"].dropna().astype(str).unique().tolist())


def tag_options(df: pd.DataFrame) -> List[str]:
    if df is None or df.empty:
        return []
    seen = set()
    for ts in df["tags"]:
        if isinstance(ts, (list, tuple)):
            seen.update(str(t) for t in ts)
    return sorted(seen)
