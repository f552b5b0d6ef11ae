import configparser
import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from engine.cards import DIFFICULTY_ORDER, EASY

SECTION = "game"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

DEFAULT_SETTINGS = {
    "difficulty": EASY,
    "seed": "",
    "log_level": "WARNING",
}

logger = logging.getLogger(__name__)


@dataclass
class GameConfig:
    difficulty: str = EASY
    seed: Optional[int] = None
    log_level: str = "WARNING"

    def make_rng(self) -> random.Random:
        return random.Random(self.seed)


def _sanitize(settings) -> GameConfig:
    data = dict(DEFAULT_SETTINGS)
    data.update(settings)

    difficulty = str(data.get("difficulty", "")).strip().lower()
    if difficulty not in DIFFICULTY_ORDER:
        difficulty = DEFAULT_SETTINGS["difficulty"]

    raw_seed = str(data.get("seed", "")).strip()
    try:
        seed = int(raw_seed) if raw_seed else None
    except ValueError:
        seed = None

    log_level = str(data.get("log_level", "")).strip().upper()
    if log_level not in LOG_LEVELS:
        log_level = DEFAULT_SETTINGS["log_level"]

    return GameConfig(difficulty=difficulty, seed=seed, log_level=log_level)


def load_config(path) -> GameConfig:
    path = Path(path)
    if not path.exists():
        return GameConfig()
    parser = configparser.ConfigParser(interpolation=None)
    try:
        parser.read(path, encoding="utf-8")
    except (configparser.Error, OSError, UnicodeDecodeError) as exc:
        logger.warning("ignoring unreadable config %s: %s", path, exc)
        return GameConfig()
    if SECTION not in parser:
        return GameConfig()
    return _sanitize(dict(parser[SECTION]))
