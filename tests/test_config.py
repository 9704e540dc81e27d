import os
from pathlib import Path
from unittest import TestCase, mock

from tradestial.config import DEFAULT_DATA_DIR, load_settings


class SettingsTests(TestCase):
    def test_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            s = load_settings()
        self.assertEqual(s.data_dir, DEFAULT_DATA_DIR)
        self.assertIsNone(s.trades_csv)
        self.assertEqual(s.starting_balance, 10_000.0)
        self.assertEqual(s.stats_cache_seconds, 300.0)
        self.assertEqual(s.log_level, "INFO")
        self.assertEqual(s.store_path, DEFAULT_DATA_DIR / "store.json")

    def test_environment_overrides(self):
        env = {
            "TRADESTIAL_DATA_DIR": "/tmp/ts",
            "TRADESTIAL_TRADES_CSV": "trades.csv",
            "TRADESTIAL_STARTING_BALANCE": "25000",
            "TRADESTIAL_LOG_LEVEL": "debug",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            s = load_settings()
        self.assertEqual(s.data_dir, Path("/tmp/ts"))
        self.assertEqual(s.trades_csv, Path("trades.csv"))
        self.assertEqual(s.starting_balance, 25_000.0)
        self.assertEqual(s.log_level, "DEBUG")

    def test_bad_number_raises(self):
        with mock.patch.dict(os.environ, {"TRADESTIAL_STARTING_BALANCE": "lots"}, clear=True):
            with self.assertRaisesRegex(ValueError, "TRADESTIAL_STARTING_BALANCE"):
                load_settings()
