"""
Session store (DuckDB): in-flight puzzle state and pending puzzle queues per word length.
The engine itself never touches this; the session layer saves and restores through it.
"""
from __future__ import annotations

import json
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import duckdb

from .config import DEFAULT_DB_PATH
from .puzzle import Puzzle

MEMORY_DB = ":memory:"


def get_connection(path: Path | str | None = None) -> duckdb.DuckDBPyConnection:
    path = path or DEFAULT_DB_PATH
    if str(path) != MEMORY_DB:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
    return duckdb.connect(str(path))


def init_db(conn: duckdb.DuckDBPyConnection) -> None:
    # One row per word length: the puzzle being played and the player's progress
    conn.execute("""
        CREATE TABLE IF NOT EXISTS session_states (
            word_length INTEGER PRIMARY KEY,
            chain VARCHAR NOT NULL,
            user_word VARCHAR NOT NULL,
            is_completed BOOLEAN NOT NULL,
            changes_made INTEGER NOT NULL
        )
    """)

    # Pre-generated puzzles not yet served, in queue order
    conn.execute("""
        CREATE TABLE IF NOT EXISTS puzzle_queue (
            word_length INTEGER NOT NULL,
            seq INTEGER NOT NULL,
            puzzle VARCHAR NOT NULL,
            PRIMARY KEY (word_length, seq)
        )
    """)


class SessionStore:
    def __init__(self, conn: duckdb.DuckDBPyConnection | None = None, path: Path | str | None = None):
        self.conn = conn or get_connection(path)
        # DuckDB connections are not safe to share between threads without serializing.
        self._lock = threading.Lock()
        init_db(self.conn)

    @contextmanager
    def _transaction(self):
        with self._lock:
            self.conn.begin()
            try:
                yield self.conn
            except Exception:
                self.conn.rollback()
                raise
            self.conn.commit()

    def save_states(self, states: dict[int, dict[str, Any]]) -> None:
        with self._transaction() as conn:
            for length, state in states.items():
                conn.execute(
                    """
                    INSERT INTO session_states (word_length, chain, user_word, is_completed, changes_made)
                    VALUES (?, ?, ?, ?, ?)
                    ON CONFLICT (word_length) DO UPDATE SET
                        chain = excluded.chain,
                        user_word = excluded.user_word,
                        is_completed = excluded.is_completed,
                        changes_made = excluded.changes_made
                    """,
                    (
                        int(length),
                        json.dumps(list(state.get("chain", []))),
                        state.get("user_word", ""),
                        bool(state.get("is_completed", False)),
                        int(state.get("changes_made", 0)),
                    ),
                )

    def load_states(self) -> dict[int, dict[str, Any]]:
        with self._lock:
            rows = self.conn.execute(
                "SELECT word_length, chain, user_word, is_completed, changes_made FROM session_states ORDER BY word_length"
            ).fetchall()
        return {
            int(length): {
                "chain": json.loads(chain),
                "user_word": user_word,
                "is_completed": bool(is_completed),
                "changes_made": int(changes_made),
            }
            for length, chain, user_word, is_completed, changes_made in rows
        }

    def save_queue(self, length: int, puzzles: list[Puzzle]) -> None:
        with self._transaction() as conn:
            conn.execute("DELETE FROM puzzle_queue WHERE word_length = ?", (length,))
            for seq, puzzle in enumerate(puzzles):
                conn.execute(
                    "INSERT INTO puzzle_queue (word_length, seq, puzzle) VALUES (?, ?, ?)",
                    (length, seq, json.dumps(puzzle.to_dict())),
                )

    def load_queue(self, length: int) -> list[Puzzle]:
        with self._lock:
            rows = self.conn.execute(
                "SELECT puzzle FROM puzzle_queue WHERE word_length = ? ORDER BY seq", (length,)
            ).fetchall()
        puzzles = [Puzzle.from_dict(json.loads(data)) for (data,) in rows]
        return [p for p in puzzles if p.chain]

    def clear(self) -> None:
        with self._transaction() as conn:
            conn.execute("DELETE FROM session_states")
            conn.execute("DELETE FROM puzzle_queue")

    def close(self) -> None:
        with self._lock:
            self.conn.close()
