import math
from pathlib import Path
from unittest import TestCase

import pandas as pd

from tradestial.io import load_trades
from tradestial.metrics import compute_metrics, expectancy, max_drawdown, pick_pnl, profit_factor, streaks, trade_metrics

DATA = Path(__file__).resolve().parent / "data"


class AggregateHelperTests(TestCase):
    def test_profit_factor_edges(self):
        self.assertAlmostEqual(profit_factor([100, -50]), 2.0)
        self.assertEqual(profit_factor([10, 0]), 0.0)
        self.assertTrue(math.isinf(profit_factor([10, 0], unbounded=True)))
        self.assertEqual(profit_factor([0, 0], unbounded=True), 0.0)
        self.assertEqual(profit_factor([0, 0]), 0.0)
        self.assertEqual(profit_factor([]), 0.0)

    def test_streaks(self):
        self.assertEqual(streaks([True, False, False, True, True, True]), (3, 2))
        self.assertEqual(streaks([]), (0, 0))

    def test_max_drawdown_peak_starts_at_zero(self):
        self.assertEqual(max_drawdown([-100, 50]), 100.0)
        self.assertEqual(max_drawdown([500, -200, -150, 300]), 350.0)
        self.assertEqual(max_drawdown([]), 0.0)


class TradeSetMetricsTests(TestCase):
    @classmethod
    def setUpClass(cls):
        super().setUpClass()
        cls.df = load_trades(DATA / "trades.csv")

    def test_dashboard_metrics(self):
        m = trade_metrics(self.df)
        self.assertEqual(m.total_trades, 6)
        self.assertAlmostEqual(m.net_cumulative_pnl, 1450.0)
        self.assertEqual((m.winning_trades, m.losing_trades), (4, 2))
        self.assertAlmostEqual(m.win_rate, 400.0 / 6)
        self.assertAlmostEqual(m.avg_win_amount, 450.0)
        self.assertAlmostEqual(m.avg_loss_amount, 175.0)
        self.assertAlmostEqual(m.profit_factor, 1800.0 / 350.0)
        self.assertEqual((m.max_win, m.max_loss), (1000.0, -200.0))
        self.assertEqual((m.consecutive_wins, m.consecutive_losses), (3, 2))
        self.assertAlmostEqual(m.max_drawdown, 350.0)
        self.assertAlmostEqual(m.gross_pnl, 1500.0)
        self.assertAlmostEqual(m.total_commissions, 50.0)
        self.assertAlmostEqual(m.avg_trade_duration_hours, (0.5 + 0.5 + 1.5 + 19.5 + 1 / 6 + 1.0) / 6)
        self.assertAlmostEqual(m.expectancy, expectancy(self.df))

    def test_empty_selection_is_all_zero(self):
        m = trade_metrics(self.df.iloc[0:0])
        self.assertEqual(m.total_trades, 0)
        self.assertEqual(m.win_rate, 0.0)
        self.assertEqual(compute_metrics(self.df.iloc[0:0]).total_pnl, 0.0)

    def test_compare_metrics_use_pnl_sign(self):
        m = compute_metrics(self.df)
        self.assertEqual((m.winners, m.losers), (3, 2))
        self.assertAlmostEqual(m.win_rate, 50.0)
        self.assertAlmostEqual(m.avg_win, 600.0)
        self.assertAlmostEqual(m.avg_loss, 175.0)

    def test_gross_metric_falls_back_to_net(self):
        df = pd.DataFrame({"net_pnl": [10.0, -5.0], "gross_pnl": [12.0, None]})
        self.assertEqual(pick_pnl(df, "GROSS").tolist(), [12.0, -5.0])
        self.assertAlmostEqual(compute_metrics(load_trades(DATA / "trades.csv"), "GROSS").total_pnl, 1500.0)
        with self.assertRaises(ValueError):
            pick_pnl(df, "R")

    def test_compare_profit_factor_is_average_ratio(self):
        df = pd.DataFrame({"net_pnl": [100.0, 100.0, -100.0]})
        self.assertAlmostEqual(compute_metrics(df).profit_factor, 1.0)
        self.assertEqual(compute_metrics(df.iloc[:2]).profit_factor, 0.0)

    def test_dashboard_profit_factor_without_losses_is_zero(self):
        winners = self.df[self.df["net_pnl"] > 0]
        m = trade_metrics(winners)
        self.assertEqual(m.losing_trades, 0)
        self.assertEqual(m.profit_factor, 0.0)
