from pathlib import Path
from unittest import TestCase

from tradestial.data.groups import (
    group_by_day,
    hourly_performance,
    model_performance,
    side_performance,
    symbol_performance,
    tag_report,
    weekday_performance,
    wins_losses_report,
)
from tradestial.io import load_trades

DATA = Path(__file__).resolve().parent / "data"


class BreakdownTests(TestCase):
    @classmethod
    def setUpClass(cls):
        super().setUpClass()
        cls.df = load_trades(DATA / "trades.csv")

    def test_group_by_day(self):
        days = group_by_day(self.df)
        self.assertEqual(list(days), ["2025-03-03", "2025-03-04", "2025-03-05", "2025-03-07", "2025-04-01"])
        self.assertEqual(len(days["2025-03-03"]), 2)

    def test_symbol_performance_best_first(self):
        out = symbol_performance(self.df)
        self.assertEqual(out["symbol"].tolist(), ["NQ", "ES", "CL"])
        self.assertEqual(out["pnl"].tolist(), [800.0, 350.0, 300.0])
        self.assertEqual(out["trades"].tolist(), [2, 3, 1])

    def test_side_hour_weekday(self):
        side = side_performance(self.df).set_index("side")
        self.assertEqual(side.loc["LONG", "trades"], 4)
        self.assertAlmostEqual(side.loc["SHORT", "pnl"], 100.0)

        hours = hourly_performance(self.df).set_index("hour")
        self.assertEqual(sorted(hours.index), [9, 10, 11, 13, 14])
        self.assertAlmostEqual(hours.loc[9, "pnl"], 500.0)

        days = weekday_performance(self.df)
        self.assertEqual(days["weekday"].tolist(), ["Monday", "Tuesday", "Wednesday", "Friday"])
        self.assertAlmostEqual(days.set_index("weekday").loc["Tuesday", "pnl"], 850.0)

    def test_model_performance_labels_unassigned(self):
        out = model_performance(self.df)
        self.assertEqual(out["model"].tolist(), ["Reversal", "ORB", "Unassigned"])
        self.assertEqual(out["pnl"].tolist(), [1300.0, 300.0, -150.0])

    def test_empty_frames_keep_columns(self):
        empty = self.df.iloc[0:0]
        self.assertIn("win_rate", symbol_performance(empty).columns)
        self.assertTrue(hourly_performance(empty).empty)


class TagReportTests(TestCase):
    @classmethod
    def setUpClass(cls):
        super().setUpClass()
        cls.df = load_trades(DATA / "trades.csv")

    def test_rows_count_every_tag_and_untagged(self):
        rows = tag_report(self.df).rows.set_index("tag")
        self.assertEqual(list(rows.index), ["breakout", "Reviewed", "None", "fomo"])
        self.assertAlmostEqual(rows.loc["breakout", "net_pnl"], 1500.0)
        self.assertAlmostEqual(rows.loc["breakout", "win_rate"], 100.0)
        self.assertEqual(rows.loc["Reviewed", "trade_count"], 2)
        self.assertAlmostEqual(rows.loc["fomo", "avg_loss"], 175.0)
        self.assertAlmostEqual(rows.loc["fomo", "avg_daily_volume"], 1.5)

    def test_top_n(self):
        self.assertEqual(tag_report(self.df, top_n=2).rows["tag"].tolist(), ["breakout", "Reviewed"])

    def test_daily_series(self):
        daily = tag_report(self.df).daily
        self.assertEqual(daily["net"].tolist(), [300.0, -150.0, 300.0, 0.0, 1000.0])
        self.assertEqual(daily["cumulative"].tolist(), [300.0, 150.0, 450.0, 450.0, 1450.0])
        self.assertTrue((daily["drawdown"] <= 0).all())
        self.assertEqual(daily["drawdown"].tolist(), [0.0, -150.0, 0.0, 0.0, 0.0])
        self.assertEqual(daily["max_losing_streak"].tolist(), [0, 1, 1, 1, 1])

    def test_losing_first_day_has_no_drawdown(self):
        daily = tag_report(self.df[self.df["trade_id"].isin(["T3", "T6"])]).daily
        self.assertEqual(daily["cumulative"].tolist(), [-150.0, 850.0])
        self.assertEqual(daily["drawdown"].tolist(), [0.0, 0.0])

    def test_empty(self):
        report = tag_report(self.df.iloc[0:0])
        self.assertTrue(report.rows.empty)
        self.assertTrue(report.daily.empty)


class WinsLossesReportTests(TestCase):
    @classmethod
    def setUpClass(cls):
        super().setUpClass()
        cls.df = load_trades(DATA / "trades.csv")

    def test_cumulative_series_by_realized_day(self):
        series = wins_losses_report(self.df).series
        self.assertEqual(series["date"].tolist(), ["2025-03-03", "2025-03-04", "2025-03-06", "2025-04-01"])
        self.assertEqual(series["wins"].tolist(), [500.0, 500.0, 800.0, 1800.0])
        self.assertEqual(series["losses"].tolist(), [200.0, 350.0, 350.0, 350.0])

    def test_side_summaries(self):
        rep = wins_losses_report(self.df)
        self.assertEqual(rep.wins["trades"], 3)
        self.assertAlmostEqual(rep.wins["total_pnl"], 1800.0)
        self.assertAlmostEqual(rep.wins["avg_trade"], 600.0)
        self.assertAlmostEqual(rep.wins["avg_daily_volume"], 5.0 / 3)
        self.assertAlmostEqual(rep.wins["commissions"], 30.0)

        self.assertEqual(rep.losses["trades"], 2)
        self.assertAlmostEqual(rep.losses["total_pnl"], -350.0)
        self.assertAlmostEqual(rep.losses["avg_trade"], 175.0)
        self.assertAlmostEqual(rep.losses["avg_daily_volume"], 1.5)
        self.assertAlmostEqual(rep.losses["commissions"], 15.0)

    def test_streaks_skip_flat_trades(self):
        rep = wins_losses_report(self.df)
        self.assertEqual((rep.max_consecutive_wins, rep.max_consecutive_losses), (2, 2))

    def test_gross_metric(self):
        rep = wins_losses_report(self.df, "GROSS")
        self.assertEqual((rep.wins["trades"], rep.losses["trades"]), (4, 2))
        self.assertAlmostEqual(rep.wins["total_pnl"], 1835.0)
        self.assertAlmostEqual(rep.losses["total_pnl"], -335.0)
        self.assertEqual(rep.max_consecutive_wins, 3)

    def test_empty(self):
        rep = wins_losses_report(self.df.iloc[0:0])
        self.assertTrue(rep.series.empty)
        self.assertEqual(rep.wins["trades"], 0)
        self.assertEqual(rep.losses["total_pnl"], 0.0)
