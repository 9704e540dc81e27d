from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Tuple

import numpy as np
import pandas as pd

from .config import TRADES_KEY
from .storage import JsonStore
from .utils import to_number

logger = logging.getLogger(__name__)

# Our normalized, 1-row-per-trade schema
TRADE_COLS = [
    "trade_id",
    "symbol",
    "side",
    "open_date",
    "close_date",
    "entry_price",
    "exit_price",
    "net_pnl",
    "gross_pnl",
    "net_roi",
    "commissions",
    "contracts_traded",
    "tags",
    "model",
    "status",
    "entry_time",
    "exit_time",
    "duration",
]

REQUIRED_COLS = ["symbol", "open_date", "net_pnl"]

_ALIAS_MAP = {
    # ids
    "id": "trade_id",
    "tradeid": "trade_id",
    "trade #": "trade_id",
    "ticker": "symbol",
    "instrument": "symbol",
    "asset": "symbol",
    # dates
    "opendate": "open_date",
    "open date": "open_date",
    "date": "open_date",
    "entry_date": "open_date",
    "closedate": "close_date",
    "close date": "close_date",
    "exit_date": "close_date",
    # prices
    "entryprice": "entry_price",
    "entry price": "entry_price",
    "entry": "entry_price",
    "exitprice": "exit_price",
    "exit price": "exit_price",
    "exit": "exit_price",
    # pnl
    "netpnl": "net_pnl",
    "net p&l": "net_pnl",
    "net pnl": "net_pnl",
    "pnl": "net_pnl",
    "p/l": "net_pnl",
    "profit": "net_pnl",
    "grosspnl": "gross_pnl",
    "gross p&l": "gross_pnl",
    "netroi": "net_roi",
    "roi": "net_roi",
    "commission": "commissions",
    "fees": "commissions",
    "fee": "commissions",
    # size
    "contractstraded": "contracts_traded",
    "contracts": "contracts_traded",
    "quantity": "contracts_traded",
    "qty": "contracts_traded",
    "size": "contracts_traded",
    # labels
    "direction": "side",
    "strategy": "model",
    "setup": "model",
    "entrytime": "entry_time",
    "entry time": "entry_time",
    "opentime": "entry_time",
    "exittime": "exit_time",
    "exit time": "exit_time",
    "closetime": "exit_time",
}

_SIDE_MAP = {
    "buy": "LONG",
    "long": "LONG",
    "l": "LONG",
    "sell": "SHORT",
    "short": "SHORT",
    "s": "SHORT",
}


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    out = df.copy()
    out.columns = [str(c).strip() for c in out.columns]
    renames = {}
    taken = {c.lower() for c in out.columns}
    for c in out.columns:
        low = c.lower()
        if low in TRADE_COLS:
            renames[c] = low
            continue
        new = _ALIAS_MAP.get(low)
        if new and new not in taken:
            renames[c] = new
            taken.add(new)
    return out.rename(columns=renames)


def parse_tags(value) -> List[str]:
    """'a, b' / 'a;b' / 'a|b' / ['a', 'b'] -> ['a', 'b'] (order kept, blanks dropped)."""
    if value is None:
        return []
    if isinstance(value, (list, tuple, set, np.ndarray)):
        items = [str(v) for v in value]
    else:
        if isinstance(value, float) and np.isnan(value):
            return []
        s = str(value).strip()
        if s.startswith("["):
            try:
                return parse_tags(json.loads(s))
            except ValueError:
                pass
        for sep in (";", "|"):
            s = s.replace(sep, ",")
        items = s.split(",")
    out: List[str] = []
    for t in items:
        t = t.strip()
        if t and t not in out:
            out.append(t)
    return out


def _clock(value) -> object:
    """Keep HH:MM[:SS] strings; anything else becomes None."""
    if value is None or (isinstance(value, float) and np.isnan(value)):
        return None
    s = str(value).strip()
    if not s:
        return None
    t = pd.to_datetime(s, errors="coerce")
    if pd.isna(t):
        return None
    return t.strftime("%H:%M:%S")


def _fresh_ids(taken: set, count: int) -> List[str]:
    """count ids of the form T<n>, skipping any already in taken."""
    out: List[str] = []
    n = 0
    while len(out) < count:
        n += 1
        tid = f"T{n}"
        if tid not in taken:
            out.append(tid)
    return out


def normalize_trades(raw: pd.DataFrame) -> Tuple[pd.DataFrame, List[str]]:
    """
    Turn an arbitrary trades table into the canonical schema (TRADE_COLS).
    Returns (df, issues); rows that fail minimal checks are dropped and counted.
    """
    issues: List[str] = []
    if raw is None or raw.empty:
        return pd.DataFrame(columns=TRADE_COLS), ["Empty file"]

    df = _normalize_columns(raw)

    missing = [c for c in ["symbol", "open_date"] if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")

    # Dates
    df["open_date"] = pd.to_datetime(df["open_date"], errors="coerce")
    if "close_date" in df.columns:
        df["close_date"] = pd.to_datetime(df["close_date"], errors="coerce")
        df["close_date"] = df["close_date"].fillna(df["open_date"])
    else:
        df["close_date"] = df["open_date"]

    # Numerics (broker exports carry '$', ',' and '(...)')
    for c in ["entry_price", "exit_price", "net_pnl", "gross_pnl", "net_roi", "commissions", "contracts_traded"]:
        if c in df.columns:
            df[c] = pd.to_numeric(df[c].map(to_number), errors="coerce")
        else:
            df[c] = np.nan

    # Side
    if "side" in df.columns:
        df["side"] = df["side"].astype(str).str.strip().str.lower().map(_SIDE_MAP)
    else:
        df["side"] = np.nan

    df["commissions"] = df["commissions"].fillna(0.0)
    df["net_roi"] = df["net_roi"].fillna(0.0)

    # If net P&L missing but we have components, compute it
    need = df["net_pnl"].isna()
    has_components = df["entry_price"].notna() & df["exit_price"].notna() & df["contracts_traded"].notna()
    fill = need & has_components & df["side"].notna()
    if fill.any():
        sign = df.loc[fill, "side"].map({"LONG": 1.0, "SHORT": -1.0})
        gross = (df.loc[fill, "exit_price"] - df.loc[fill, "entry_price"]) * df.loc[fill, "contracts_traded"] * sign
        df.loc[fill, "gross_pnl"] = df.loc[fill, "gross_pnl"].fillna(gross)
        df.loc[fill, "net_pnl"] = gross - df.loc[fill, "commissions"]

    # Drop rows that lack the absolute minimum fields
    keep = df["symbol"].notna() & df["open_date"].notna() & df["net_pnl"].notna()
    dropped = int((~keep).sum())
    if dropped:
        issues.append(f"Dropped {dropped} rows that failed minimal checks")
    df = df.loc[keep].copy()

    df["symbol"] = df["symbol"].astype(str).str.strip().str.upper()

    if "trade_id" not in df.columns:
        df["trade_id"] = np.nan
    blank = df["trade_id"].isna() | df["trade_id"].astype(str).str.strip().isin(["", "nan", "None", "<NA>"])
    ids = df["trade_id"].astype(str).str.strip().astype(object)
    ids.loc[blank] = _fresh_ids(set(ids[~blank]), int(blank.sum()))
    df["trade_id"] = ids
    dupes = df["trade_id"].duplicated()
    if dupes.any():
        issues.append(f"Duplicate trade ids: {sorted(set(df.loc[dupes, 'trade_id']))[:5]}")

    # Status: explicit WIN/LOSS wins, otherwise derived from net P&L
    derived = np.where(df["net_pnl"] >= 0, "WIN", "LOSS")
    if "status" in df.columns:
        status = df["status"].astype(str).str.strip().str.upper()
        df["status"] = status.where(status.isin(["WIN", "LOSS"]), derived)
    else:
        df["status"] = derived

    df["tags"] = df["tags"].map(parse_tags) if "tags" in df.columns else [[] for _ in range(len(df))]
    df["model"] = df["model"].fillna("").astype(str).str.strip() if "model" in df.columns else ""

    for c in ["entry_time", "exit_time"]:
        df[c] = df[c].map(_clock) if c in df.columns else None
    if "duration" not in df.columns:
        df["duration"] = None

    df = df[TRADE_COLS].sort_values(["close_date", "open_date"], kind="stable").reset_index(drop=True)
    return df, issues


def load_trades(file_or_path) -> pd.DataFrame:
    """
    Load trades from a CSV/JSON path or file-like object and normalize into our schema.
    JSON must be a list of trade records.
    """
    name = str(getattr(file_or_path, "name", file_or_path)).lower()
    if name.endswith(".json"):
        if hasattr(file_or_path, "read"):
            records = json.loads(file_or_path.read())
        else:
            records = json.loads(Path(file_or_path).read_text())
        raw = pd.DataFrame.from_records(records)
    else:
        raw = pd.read_csv(file_or_path)

    df, issues = normalize_trades(raw)
    for msg in issues:
        logger.warning("load_trades(%s): %s", name, msg)
    if df.empty:
        raise ValueError("No usable trades found in file.")
    return df


def validate(df: pd.DataFrame) -> List[str]:
    """Return a list of human-readable issues. Empty list means valid."""
    issues: List[str] = []

    missing = [c for c in TRADE_COLS if c not in df.columns]
    if missing:
        issues.append(f"Missing required columns: {missing}")
        return issues

    for c in REQUIRED_COLS:
        if df[c].isna().any():
            issues.append(f"Null values in column '{c}'")

    bad_side = df["side"].notna() & ~df["side"].isin(["LONG", "SHORT"])
    if bad_side.any():
        issues.append(f"Invalid 'side' values at rows: {list(df.index[bad_side])[:5]}...")

    bad_status = ~df["status"].isin(["WIN", "LOSS"])
    if bad_status.any():
        issues.append(f"Invalid 'status' values at rows: {list(df.index[bad_status])[:5]}...")

    bad_time = df["close_date"] < df["open_date"]
    if bad_time.any():
        issues.append(f"close_date < open_date at rows: {list(df.index[bad_time])[:5]}...")

    if (df["commissions"] < 0).any():
        issues.append("commissions must be >= 0")

    if df["trade_id"].duplicated().any():
        issues.append("trade_id values must be unique")

    return issues


# ===== Store round trip =====
def _to_records(df: pd.DataFrame) -> list:
    out = df.copy()
    for c in ["open_date", "close_date"]:
        out[c] = pd.to_datetime(out[c], errors="coerce").dt.strftime("%Y-%m-%dT%H:%M:%S")
    out = out.astype(object).where(out.notna(), None)
    out["tags"] = [list(t) if isinstance(t, (list, tuple)) else [] for t in df["tags"]]
    return out.to_dict(orient="records")


def save_trades(store: JsonStore, df: pd.DataFrame) -> None:
    """Persist the current trades snapshot under the trades key."""
    store.set(TRADES_KEY, _to_records(df))
    logger.info("Saved %d trades to store", len(df))


def get_all_trades(store: JsonStore) -> pd.DataFrame:
    """Read the trades snapshot back; corrupt or missing payloads give an empty frame."""
    records = store.get(TRADES_KEY)
    if not records:
        return pd.DataFrame(columns=TRADE_COLS)
    if not isinstance(records, list):
        logger.warning("Stored trades are not a list; ignoring")
        return pd.DataFrame(columns=TRADE_COLS)
    try:
        df, issues = normalize_trades(pd.DataFrame.from_records(records))
    except ValueError as e:
        logger.warning("Stored trades could not be read: %s", e)
        return pd.DataFrame(columns=TRADE_COLS)
    for msg in issues:
        logger.warning("get_all_trades: %s", msg)
    return df
