from pathlib import Path
from unittest import TestCase

from tradestial.config import ASSIGNMENTS_KEY, STATS_CACHE_KEY
from tradestial.io import load_trades
from tradestial.storage import MemoryStore
from tradestial.strategies import ModelStatsService

DATA = Path(__file__).resolve().parent / "data"


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


class ModelStatsServiceTests(TestCase):
    @classmethod
    def setUpClass(cls):
        super().setUpClass()
        cls.df = load_trades(DATA / "trades.csv")

    def setUp(self):
        self.store = MemoryStore()
        self.clock = FakeClock()
        self.service = ModelStatsService(self.store, max_cache_age=300, clock=self.clock)
        self.orb = self.service.create_strategy("Opening Range", "first 30 minutes")
        self.rev = self.service.create_strategy("Reversal")

    def test_create_and_delete_strategies(self):
        self.assertEqual([s.id for s in self.service.list_strategies()], ["opening-range", "reversal"])
        dup = self.service.create_strategy("Reversal")
        self.assertEqual(dup.id, "reversal-2")
        with self.assertRaises(ValueError):
            self.service.create_strategy("  ")
        self.service.assign_trade_to_model("T1", "reversal")
        self.service.delete_strategy("reversal")
        self.assertNotIn("reversal", [s.id for s in self.service.list_strategies()])
        self.assertIsNone(self.service.trade_model("T1"))

    def test_trade_belongs_to_one_model(self):
        self.service.assign_trade_to_model("T1", self.orb.id)
        self.service.assign_trade_to_model("T1", self.rev.id)
        self.service.assign_trade_to_model("T1", self.rev.id)
        self.assertEqual(self.service.model_trades(self.orb.id), [])
        self.assertEqual(self.service.model_trades(self.rev.id), ["T1"])
        self.assertEqual(self.service.trade_model("T1"), self.rev.id)
        self.assertEqual(self.store.get(ASSIGNMENTS_KEY), {self.orb.id: [], self.rev.id: ["T1"]})

        self.service.remove_trade_from_model("T1", self.rev.id)
        self.assertIsNone(self.service.trade_model("T1"))

    def test_stats(self):
        for t in ("T1", "T2", "T5"):
            self.service.assign_trade_to_model(t, self.orb.id)
        stats = self.service.calculate_model_stats(self.orb.id, self.df)
        self.assertEqual((stats.total, stats.wins, stats.losses), (3, 1, 1))
        self.assertAlmostEqual(stats.net_pnl, 300.0)
        self.assertAlmostEqual(stats.win_rate, 100.0 / 3)
        self.assertAlmostEqual(stats.avg_loser, -200.0)
        self.assertAlmostEqual(stats.profit_factor, 2.5)
        self.assertAlmostEqual(stats.expectancy, (500.0 - 200.0) / 3)
        self.assertEqual(self.service.calculate_model_stats(self.rev.id, self.df).total, 0)

    def test_stats_without_losses_have_unbounded_profit_factor(self):
        self.service.assign_trade_to_model("T6", self.rev.id)
        stats = self.service.calculate_model_stats(self.rev.id, self.df)
        self.assertEqual(stats.losses, 0)
        self.assertEqual(stats.profit_factor, float("inf"))

    def test_cache_expires_and_is_invalidated(self):
        self.service.assign_trade_to_model("T1", self.orb.id)
        first = self.service.get_model_stats(self.orb.id, self.df)
        self.assertIn(self.orb.id, self.store.get(STATS_CACHE_KEY))

        self.clock.now += 100
        self.assertIs(self.service.get_model_stats(self.orb.id, self.df.iloc[0:0]), first)

        self.clock.now += 300
        self.assertEqual(self.service.get_model_stats(self.orb.id, self.df.iloc[0:0]).total, 0)

        self.service.get_model_stats(self.orb.id, self.df)
        self.service.assign_trade_to_model("T6", self.orb.id)
        self.assertEqual(self.service.get_model_stats(self.orb.id, self.df).total, 2)

        self.service.clear_stats_cache()
        self.assertEqual(self.store.get(STATS_CACHE_KEY), {})

    def test_state_survives_reload(self):
        self.service.assign_trade_to_model("T4", self.rev.id)
        again = ModelStatsService(self.store, clock=self.clock)
        self.assertEqual(again.trade_model("T4"), self.rev.id)

    def test_summary(self):
        for t in ("T1", "T2", "T5"):
            self.service.assign_trade_to_model(t, self.orb.id)
        for t in ("T4", "T6"):
            self.service.assign_trade_to_model(t, self.rev.id)
        idle = self.service.create_strategy("Idle")
        summary = self.service.summary(self.df)
        self.assertEqual(summary["best_performing"].model_id, self.rev.id)
        self.assertEqual(summary["least_performing"].model_id, self.orb.id)
        self.assertEqual(summary["most_active"].model_id, self.orb.id)
        self.assertEqual(summary["best_win_rate"].model_id, self.rev.id)
        self.assertNotIn(idle.id, [r.model_id for r in summary.values()])

    def test_summary_without_trades(self):
        self.assertEqual(set(self.service.summary(self.df).values()), {None})
