from pathlib import Path
from unittest import TestCase

from tradestial.data.calendar import DayCell, calendar_days, month_summary, pnl_band, trading_data, year_summary
from tradestial.io import load_trades

DATA = Path(__file__).resolve().parent / "data"


class CalendarTests(TestCase):
    @classmethod
    def setUpClass(cls):
        super().setUpClass()
        cls.data = trading_data(load_trades(DATA / "trades.csv"), 2025)

    def test_days_keyed_by_open_date(self):
        self.assertEqual(sorted(self.data), ["2025-03-03", "2025-03-04", "2025-03-05", "2025-03-07", "2025-04-01"])
        self.assertEqual(self.data["2025-03-03"], DayCell(pnl=300.0, trades=2))
        self.assertEqual(trading_data(load_trades(DATA / "trades.csv"), 2024), {})

    def test_month_grid_is_sunday_first(self):
        cells = calendar_days(self.data, 2025, 3)
        # 1 March 2025 is a Saturday
        self.assertEqual(cells[:6], [None] * 6)
        self.assertEqual(len(cells), 6 + 31)
        third = cells[6 + 2]
        self.assertEqual((third.day, third.date_key, third.trades, third.has_data), (3, "2025-03-03", 2, True))
        self.assertFalse(cells[6].has_data)

    def test_summaries(self):
        march = month_summary(self.data, 2025, 3)
        self.assertEqual((march.total_pnl, march.total_trades, march.trading_days, march.winning_days), (450.0, 5, 4, 2))
        self.assertAlmostEqual(march.win_rate, 50.0)
        self.assertAlmostEqual(march.avg_daily_pnl, 112.5)

        year = year_summary(self.data, 2025)
        months = [month_summary(self.data, 2025, m) for m in range(1, 13)]
        self.assertAlmostEqual(year.total_pnl, sum(m.total_pnl for m in months))
        self.assertEqual(year.total_trades, sum(m.total_trades for m in months))
        self.assertAlmostEqual(year.win_rate, 60.0)

        empty = month_summary(self.data, 2025, 1)
        self.assertEqual((empty.trading_days, empty.win_rate, empty.avg_daily_pnl), (0, 0.0, 0.0))

    def test_pnl_bands(self):
        self.assertEqual(pnl_band(0.0, has_data=False), "empty")
        self.assertEqual(pnl_band(1000.0), "profit-5")
        self.assertEqual(pnl_band(300.0), "profit-4")
        self.assertEqual(pnl_band(10.0), "profit-2")
        self.assertEqual(pnl_band(0.0), "flat")
        self.assertEqual(pnl_band(-150.0), "loss-3")
        self.assertEqual(pnl_band(-800.0), "loss-5")
