from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass, field
from typing import Callable, Dict, List, Optional

import pandas as pd

from .config import ASSIGNMENTS_KEY, STATS_CACHE_KEY, STRATEGIES_KEY
from .metrics import profit_factor
from .storage import JsonStore
from .utils import slugify

logger = logging.getLogger(__name__)


@dataclass
class Strategy:
    id: str
    name: str = "Unnamed Strategy"
    description: Optional[str] = None


@dataclass
class ModelStats:
    total: int = 0
    wins: int = 0
    losses: int = 0
    win_rate: float = 0.0
    net_pnl: float = 0.0
    avg_winner: float = 0.0
    avg_loser: float = 0.0  # <= 0
    profit_factor: float = 0.0
    expectancy: float = 0.0
    last_updated: float = field(default=0.0)

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass
class ModelRanking:
    model_id: str
    name: str
    stats: ModelStats


class ModelStatsService:
    """
    Trading models (strategies), which trades belong to them, and their stats.

    A trade belongs to at most one model. Stats computed through
    get_model_stats are cached in the store for max_cache_age seconds;
    assigning or removing a trade drops that model's cached entry.
    """

    def __init__(
        self,
        store: JsonStore,
        max_cache_age: float = 300.0,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.max_cache_age = float(max_cache_age)
        self._clock = clock
        self.assignments: Dict[str, List[str]] = {}
        self.stats_cache: Dict[str, ModelStats] = {}
        self._load()

    # ---------- persistence ----------
    def _load(self) -> None:
        raw = self.store.get(ASSIGNMENTS_KEY) or {}
        if isinstance(raw, dict) and all(isinstance(v, list) for v in raw.values()):
            self.assignments = {str(k): [str(t) for t in v] for k, v in raw.items()}
        else:
            logger.warning("Invalid assignments format, resetting")
            self.assignments = {}

        cache = self.store.get(STATS_CACHE_KEY) or {}
        self.stats_cache = {}
        if isinstance(cache, dict):
            for model_id, payload in cache.items():
                try:
                    self.stats_cache[model_id] = ModelStats(**payload)
                except TypeError:
                    logger.warning("Dropping unreadable cached stats for model %s", model_id)

    def _save(self) -> None:
        self.store.set(ASSIGNMENTS_KEY, self.assignments)
        self.store.set(STATS_CACHE_KEY, {k: v.as_dict() for k, v in self.stats_cache.items()})

    # ---------- strategies ----------
    def list_strategies(self) -> List[Strategy]:
        raw = self.store.get(STRATEGIES_KEY) or []
        if not isinstance(raw, list):
            logger.warning("Stored strategies are not a list; ignoring")
            return []
        return [
            Strategy(
                id=str(item["id"]),
                name=item.get("name") or "Unnamed Strategy",
                description=item.get("description") or None,
            )
            for item in raw
            if isinstance(item, dict) and item.get("id")
        ]

    def create_strategy(self, name: str, description: Optional[str] = None) -> Strategy:
        name = (name or "").strip()
        if not name:
            raise ValueError("Strategy name is required")
        existing = self.list_strategies()
        taken = {s.id for s in existing}
        base = slugify(name)
        sid, n = base, 2
        while sid in taken:
            sid, n = f"{base}-{n}", n + 1
        strategy = Strategy(id=sid, name=name, description=description or None)
        self.store.set(STRATEGIES_KEY, [asdict(s) for s in existing + [strategy]])
        logger.info("Created strategy %s", sid)
        return strategy

    def delete_strategy(self, model_id: str) -> None:
        remaining = [s for s in self.list_strategies() if s.id != model_id]
        self.store.set(STRATEGIES_KEY, [asdict(s) for s in remaining])
        self.assignments.pop(model_id, None)
        self.stats_cache.pop(model_id, None)
        self._save()

    # ---------- assignments ----------
    def assign_trade_to_model(self, trade_id: str, model_id: str) -> None:
        trade_id = str(trade_id)
        for other, ids in self.assignments.items():
            if other != model_id and trade_id in ids:
                ids.remove(trade_id)
                self.stats_cache.pop(other, None)
                logger.debug("Removed trade %s from model %s", trade_id, other)
        ids = self.assignments.setdefault(model_id, [])
        if trade_id not in ids:
            ids.append(trade_id)
            logger.debug("Added trade %s to model %s (%d assigned)", trade_id, model_id, len(ids))
        self.stats_cache.pop(model_id, None)
        self._save()

    def remove_trade_from_model(self, trade_id: str, model_id: str) -> None:
        ids = self.assignments.get(model_id)
        if ids is None:
            return
        self.assignments[model_id] = [t for t in ids if t != str(trade_id)]
        self.stats_cache.pop(model_id, None)
        self._save()

    def model_trades(self, model_id: str) -> List[str]:
        return list(self.assignments.get(model_id, []))

    def trade_model(self, trade_id: str) -> Optional[str]:
        for model_id, ids in self.assignments.items():
            if str(trade_id) in ids:
                return model_id
        return None

    def all_assignments(self) -> Dict[str, List[str]]:
        return {k: list(v) for k, v in self.assignments.items()}

    # ---------- stats ----------
    def calculate_model_stats(self, model_id: str, df: pd.DataFrame, cache_results: bool = False) -> ModelStats:
        """Stats over the trades assigned to model_id; a win is net P&L > 0."""
        ids = set(self.assignments.get(model_id, []))
        if df is None or df.empty or not ids:
            pnl = pd.Series(dtype="float64")
        else:
            rows = df[df["trade_id"].astype(str).isin(ids)]
            pnl = pd.to_numeric(rows["net_pnl"], errors="coerce").fillna(0.0)

        total = len(pnl)
        wins = pnl[pnl > 0]
        losses = pnl[pnl < 0]
        avg_winner = float(wins.mean()) if len(wins) else 0.0
        avg_loser = -float(abs(losses.sum())) / len(losses) if len(losses) else 0.0
        stats = ModelStats(
            total=total,
            wins=len(wins),
            losses=len(losses),
            win_rate=len(wins) / total * 100.0 if total else 0.0,
            net_pnl=float(pnl.sum()),
            avg_winner=avg_winner,
            avg_loser=avg_loser,
            profit_factor=profit_factor(pnl, unbounded=True),
            expectancy=(len(wins) / total) * avg_winner + (len(losses) / total) * avg_loser if total else 0.0,
            last_updated=self._clock(),
        )
        if cache_results:
            self.stats_cache[model_id] = stats
        return stats

    def get_model_stats(self, model_id: str, df: pd.DataFrame) -> ModelStats:
        cached = self.stats_cache.get(model_id)
        if cached is not None and self._clock() - cached.last_updated < self.max_cache_age:
            return cached
        stats = self.calculate_model_stats(model_id, df, cache_results=True)
        self._save()
        return stats

    def clear_stats_cache(self) -> None:
        self.stats_cache = {}
        self._save()

    def summary(self, df: pd.DataFrame) -> Dict[str, Optional[ModelRanking]]:
        """Best/least performing, most active and best win rate among models with trades."""
        ranked = []
        for s in self.list_strategies():
            stats = self.get_model_stats(s.id, df)
            if stats.total > 0:
                ranked.append(ModelRanking(model_id=s.id, name=s.name, stats=stats))
        if not ranked:
            return {"best_performing": None, "least_performing": None, "most_active": None, "best_win_rate": None}
        # max/min keep the first of equals, matching list order
        return {
            "best_performing": max(ranked, key=lambda r: r.stats.net_pnl),
            "least_performing": min(ranked, key=lambda r: r.stats.net_pnl),
            "most_active": max(ranked, key=lambda r: r.stats.total),
            "best_win_rate": max(ranked, key=lambda r: r.stats.win_rate),
        }
