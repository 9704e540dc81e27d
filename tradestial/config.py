# tradestial/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

# Folder: data/tradestial/
DEFAULT_DATA_DIR = Path("data/tradestial")
# Store file inside the data folder
STORE_FILENAME = "store.json"

# ---- Store keys ----
TRADES_KEY = "tradestial:trades"
STRATEGIES_KEY = "tradestial:strategies"
ASSIGNMENTS_KEY = "tradestial:strategy-assignments"
STATS_CACHE_KEY = "tradestial:model-stats-cache"
TAGS_KEY = "tradestial:tags"

# ---- Calendar colour bands (daily net P&L, $) ----
PNL_THRESHOLDS = {
    "high_profit": 500,
    "medium_profit": 200,
    "low_profit": 50,
    "breakeven": 0,
    "low_loss": -50,
    "medium_loss": -200,
    "high_loss": -500,
}

# |pnl| below this counts as breakeven in the daily series
BREAKEVEN_EPSILON = 0.01


@dataclass(frozen=True)
class Settings:
    data_dir: Path = DEFAULT_DATA_DIR
    trades_csv: Optional[Path] = None
    starting_balance: float = 10_000.0
    stats_cache_seconds: float = 300.0
    log_level: str = "INFO"

    @property
    def store_path(self) -> Path:
        return self.data_dir / STORE_FILENAME


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


def load_settings() -> Settings:
    """Build Settings from TRADESTIAL_* environment variables (defaults otherwise)."""
    csv = os.environ.get("TRADESTIAL_TRADES_CSV", "").strip()
    return Settings(
        data_dir=Path(os.environ.get("TRADESTIAL_DATA_DIR", "").strip() or DEFAULT_DATA_DIR),
        trades_csv=Path(csv) if csv else None,
        starting_balance=_env_float("TRADESTIAL_STARTING_BALANCE", 10_000.0),
        stats_cache_seconds=_env_float("TRADESTIAL_STATS_CACHE_SECONDS", 300.0),
        log_level=os.environ.get("TRADESTIAL_LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )
