import io
import json
from pathlib import Path
from unittest import TestCase

import pandas as pd

from tradestial.io import TRADE_COLS, get_all_trades, load_trades, normalize_trades, parse_tags, save_trades, validate
from tradestial.storage import MemoryStore
from tradestial.strategies import ModelStatsService

DATA = Path(__file__).resolve().parent / "data"


class LoadTradesTests(TestCase):
    @classmethod
    def setUpClass(cls):
        super().setUpClass()
        cls.df = load_trades(DATA / "trades.csv")

    def test_columns_are_canonical(self):
        self.assertEqual(list(self.df.columns), TRADE_COLS)
        self.assertEqual(len(self.df), 6)
        self.assertEqual(validate(self.df), [])

    def test_values_are_normalized(self):
        row = self.df.set_index("trade_id")
        self.assertEqual(row.loc["T2", "symbol"], "NQ")
        self.assertEqual(row.loc["T2", "side"], "SHORT")
        self.assertEqual(row.loc["T2", "net_pnl"], -200.0)
        self.assertEqual(row.loc["T6", "net_pnl"], 1000.0)
        self.assertEqual(row.loc["T3", "tags"], ["fomo", "Reviewed"])
        self.assertEqual(row.loc["T4", "tags"], [])
        self.assertEqual(row.loc["T3", "model"], "")
        self.assertEqual(row.loc["T1", "entry_time"], "09:35:00")

    def test_status_is_derived_from_net_pnl(self):
        status = self.df.set_index("trade_id")["status"].to_dict()
        self.assertEqual(status, {"T1": "WIN", "T2": "LOSS", "T3": "LOSS", "T4": "WIN", "T5": "WIN", "T6": "WIN"})

    def test_sorted_by_close_date(self):
        self.assertEqual(self.df["trade_id"].tolist(), ["T1", "T2", "T3", "T4", "T5", "T6"])

    def test_json_records(self):
        records = [{"id": "a", "symbol": "ES", "openDate": "2025-01-02", "netPnl": 12.5, "side": "LONG"}]
        buf = io.StringIO(json.dumps(records))
        buf.name = "trades.json"
        df = load_trades(buf)
        self.assertEqual(df.loc[0, "trade_id"], "a")
        self.assertEqual(df.loc[0, "net_pnl"], 12.5)


class NormalizeTests(TestCase):
    def test_missing_required_columns_raise(self):
        with self.assertRaisesRegex(ValueError, "Missing required columns"):
            normalize_trades(pd.DataFrame({"symbol": ["ES"], "pnl": [1.0]}))

    def test_empty_input_reports_issue(self):
        df, issues = normalize_trades(pd.DataFrame())
        self.assertTrue(df.empty)
        self.assertEqual(issues, ["Empty file"])

    def test_pnl_computed_from_prices_and_bad_rows_dropped(self):
        raw = pd.DataFrame(
            {
                "symbol": ["ES", "NQ", None],
                "open_date": ["2025-01-02", "2025-01-02", "2025-01-02"],
                "side": ["short", "long", "long"],
                "entry_price": [100.0, 10.0, 1.0],
                "exit_price": [90.0, 12.0, 2.0],
                "contracts_traded": [2, 1, 1],
                "commissions": [1.0, 0.0, 0.0],
            }
        )
        df, issues = normalize_trades(raw)
        self.assertEqual(len(df), 2)
        self.assertEqual(issues, ["Dropped 1 rows that failed minimal checks"])
        pnl = df.set_index("symbol")["net_pnl"]
        self.assertEqual(pnl["ES"], 19.0)
        self.assertEqual(pnl["NQ"], 2.0)

    def test_parse_tags(self):
        self.assertEqual(parse_tags("a; b|a, c"), ["a", "b", "c"])
        self.assertEqual(parse_tags('["x", "y"]'), ["x", "y"])
        self.assertEqual(parse_tags(float("nan")), [])


class StoreRoundTripTests(TestCase):
    def test_save_and_read_back(self):
        store = MemoryStore()
        df = load_trades(DATA / "trades.csv")
        save_trades(store, df)
        back = get_all_trades(store)
        self.assertEqual(back["trade_id"].tolist(), df["trade_id"].tolist())
        self.assertAlmostEqual(back["net_pnl"].sum(), 1450.0)
        self.assertEqual(back.set_index("trade_id").loc["T1", "tags"], ["breakout", "Reviewed"])

    def test_corrupt_payload_gives_empty_frame(self):
        store = MemoryStore({"tradestial:trades": {"not": "a list"}})
        with self.assertLogs("tradestial.io", level="WARNING"):
            df = get_all_trades(store)
        self.assertTrue(df.empty)


class TradeIdTests(TestCase):
    CSV = (
        "Trade #,Symbol,Side,Open Date,Net P&L\n"
        "T2,ES,Long,2025-03-03,100\n"
        ",NQ,Short,2025-03-04,-50\n"
        "   ,CL,Long,2025-03-05,25\n"
    )

    def test_blank_ids_get_unused_ids(self):
        buf = io.StringIO(self.CSV)
        buf.name = "trades.csv"
        df = load_trades(buf)
        self.assertEqual(df["trade_id"].tolist(), ["T2", "T1", "T3"])
        self.assertEqual(df["trade_id"].nunique(), 3)
        self.assertFalse(df["trade_id"].isna().any())

    def test_blank_id_trade_can_be_assigned_to_a_model(self):
        buf = io.StringIO(self.CSV)
        buf.name = "trades.csv"
        df = load_trades(buf)
        service = ModelStatsService(MemoryStore())
        service.assign_trade_to_model("T2", "orb")
        stats = service.calculate_model_stats("orb", df)
        self.assertEqual(stats.total, 1)
        self.assertAlmostEqual(stats.net_pnl, 100.0)
