"""
Runtime settings for the word chains engine.
Every value can be overridden from the environment (or a .env file next to the repo).
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent / ".env")

DATA_DIR = Path(__file__).resolve().parent.parent / "data"
DEFAULT_DB_PATH = DATA_DIR / "word_chains.duckdb"
DEFAULT_LENGTHS = (3, 4, 5)
QUEUE_SIZE = 20
DISTANCE_CACHE_SIZE = 100
MINIMUM_CHAIN_LENGTH = 5
MAX_UNDO_STEPS = 10


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


def _lengths_env(name: str, default: tuple[int, ...]) -> tuple[int, ...]:
    raw = os.environ.get(name)
    if not raw:
        return default
    return tuple(int(part) for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    word_list: Path | None = None
    db_path: Path = DEFAULT_DB_PATH
    lengths: tuple[int, ...] = DEFAULT_LENGTHS
    queue_size: int = QUEUE_SIZE
    distance_cache_size: int = DISTANCE_CACHE_SIZE
    minimum_length: int = MINIMUM_CHAIN_LENGTH
    workers: int | None = None

    @classmethod
    def load(cls) -> "Settings":
        """Snapshot of the current environment."""
        word_list = os.environ.get("WORD_LIST")
        workers = os.environ.get("WORD_CHAINS_WORKERS")
        return cls(
            word_list=Path(word_list) if word_list else None,
            db_path=Path(os.environ.get("WORD_CHAINS_DB", DEFAULT_DB_PATH.as_posix())),
            lengths=_lengths_env("WORD_CHAINS_LENGTHS", DEFAULT_LENGTHS),
            queue_size=_int_env("WORD_CHAINS_QUEUE_SIZE", QUEUE_SIZE),
            distance_cache_size=_int_env("WORD_CHAINS_DISTANCE_CACHE", DISTANCE_CACHE_SIZE),
            minimum_length=_int_env("WORD_CHAINS_MIN_LENGTH", MINIMUM_CHAIN_LENGTH),
            workers=int(workers) if workers else None,
        )
