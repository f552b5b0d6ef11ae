import tempfile
import unittest
from pathlib import Path

from engine import config
from engine.cards import HARD, MEDIUM


class ConfigTestCase(unittest.TestCase):
    def test_missing_file_gives_defaults(self):
        with tempfile.TemporaryDirectory() as td:
            cfg = config.load_config(Path(td) / "missing.ini")
        self.assertEqual(config.GameConfig(), cfg)

    def test_load_reads_game_section(self):
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "spider.ini"
            path.write_text(
                "[game]\n"
                "difficulty = Hard\n"
                "seed = 20260210\n"
                "log_level = debug\n",
                encoding="utf-8",
            )
            cfg = config.load_config(path)
        self.assertEqual(HARD, cfg.difficulty)
        self.assertEqual(20260210, cfg.seed)
        self.assertEqual("DEBUG", cfg.log_level)

    def test_invalid_values_fall_back_field_by_field(self):
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "spider.ini"
            path.write_text(
                "[game]\n"
                "difficulty = medium\n"
                "seed = not-a-number\n"
                "log_level = LOUD\n",
                encoding="utf-8",
            )
            cfg = config.load_config(str(path))
        self.assertEqual(MEDIUM, cfg.difficulty)
        self.assertIsNone(cfg.seed)
        self.assertEqual("WARNING", cfg.log_level)

    def test_percent_sign_in_value_is_read_literally(self):
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "spider.ini"
            path.write_text(
                "[game]\n"
                "difficulty = hard\n"
                "seed = 5%\n",
                encoding="utf-8",
            )
            cfg = config.load_config(path)
        self.assertEqual(config.GameConfig(difficulty=HARD), cfg)

    def test_missing_section_gives_defaults(self):
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "spider.ini"
            path.write_text("[ui]\ntheme_name = Forest\n", encoding="utf-8")
            cfg = config.load_config(path)
        self.assertEqual(config.GameConfig(), cfg)

    def test_malformed_file_gives_defaults(self):
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "spider.ini"
            path.write_text("difficulty = hard\n", encoding="utf-8")
            with self.assertLogs("engine.config", level="WARNING"):
                cfg = config.load_config(path)
        self.assertEqual(config.GameConfig(), cfg)

    def test_make_rng_is_seeded(self):
        cfg = config.GameConfig(seed=5)
        self.assertEqual(cfg.make_rng().random(), cfg.make_rng().random())


if __name__ == "__main__":
    unittest.main()
