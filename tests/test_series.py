from pathlib import Path
from unittest import TestCase

from tradestial.data.series import KINDS, chart_data
from tradestial.io import load_trades

DATA = Path(__file__).resolve().parent / "data"


class ChartSeriesTests(TestCase):
    @classmethod
    def setUpClass(cls):
        super().setUpClass()
        cls.df = load_trades(DATA / "trades.csv")

    def _values(self, kind, **config):
        out = chart_data(kind, self.df, **config)
        return dict(zip(out["date"], out["value"]))

    def test_every_kind_handles_trades_and_empty_input(self):
        for kind in KINDS:
            with self.subTest(kind=kind):
                self.assertFalse(chart_data(kind, self.df).empty)
                self.assertTrue(chart_data(kind, self.df.iloc[0:0]).empty)

    def test_unknown_kind_raises(self):
        with self.assertRaises(ValueError):
            chart_data("sharpeOverTime", self.df)

    def test_activity_counts_by_open_date(self):
        self.assertEqual(
            self._values("dailyTradeCount"),
            {"2025-03-03": 2, "2025-03-04": 1, "2025-03-05": 1, "2025-03-07": 1, "2025-04-01": 1},
        )
        self.assertEqual(self._values("dailyVolume")["2025-03-04"], 2.0)
        self.assertEqual(self._values("dailyLongTrades")["2025-03-03"], 1)
        self.assertEqual(self._values("dailyShortWinningTrades")["2025-03-05"], 1)

    def test_pnl_stats(self):
        self.assertAlmostEqual(self._values("winRateOverTime")["2025-03-03"], 50.0)
        self.assertAlmostEqual(self._values("shortWinRateOverTime")["2025-03-03"], 0.0)
        self.assertAlmostEqual(self._values("dailyAvgLoss")["2025-03-03"], -200.0)
        self.assertAlmostEqual(self._values("dailyAvgWinLoss")["2025-03-03"], 300.0)
        self.assertAlmostEqual(self._values("dailyMaxLoss")["2025-03-04"], -150.0)
        self.assertAlmostEqual(self._values("profitFactorOverTime")["2025-03-03"], 2.5)
        self.assertAlmostEqual(self._values("profitFactorOverTime")["2025-03-07"], 0.0)
        self.assertEqual(self._values("profitFactorOverTime")["2025-04-01"], 0.0)
        self.assertAlmostEqual(self._values("expectancyOverTime")["2025-03-03"], 150.0)

    def test_breakeven(self):
        trades = self._values("dailyBreakevenTrades")
        self.assertEqual(trades["2025-03-07"], 1)
        self.assertEqual(sum(trades.values()), 1)
        days = self._values("breakevenDaysOverTime")
        self.assertEqual(days, {"2025-03-03": 0, "2025-03-04": 0, "2025-03-06": 0, "2025-03-07": 1, "2025-04-01": 0})

    def test_hold_time(self):
        self.assertAlmostEqual(self._values("dailyMaxHoldTimeHours")["2025-03-05"], 19.5)
        self.assertAlmostEqual(self._values("dailyAvgHoldTimeHours")["2025-03-03"], 0.5)

    def test_running_streaks(self):
        self.assertEqual(list(self._values("maxConsecutiveWinningDaysOverTime").values()), [1, 1, 1, 1, 2])
        self.assertEqual(list(self._values("maxConsecutiveLosingDaysOverTime").values()), [0, 1, 1, 1, 1])
        self.assertEqual(list(self._values("maxConsecutiveWinsOverTime").values()), [1, 1, 1, 2, 3])
        self.assertEqual(list(self._values("maxConsecutiveLossesOverTime").values()), [1, 2, 2, 2, 2])

    def test_balance_and_breakdowns(self):
        bal = chart_data("Net account balance", self.df, startingBalance=2000)
        self.assertEqual(bal["value"].iloc[-1], 3450.0)
        self.assertEqual(chart_data("symbolPerformance", self.df)["symbol"].tolist(), ["ES", "NQ", "CL"])
        hourly = chart_data("hourlyPerformance", self.df).set_index("hour")
        self.assertEqual(hourly.loc[9, "trades"], 2)
