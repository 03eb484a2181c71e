"""
Session layer: per-length game state on top of the puzzle cache.

Tracks the puzzle being played for each word length, the player's current word, undo
history and hint state, and saves in-flight progress through an optional SessionStore.
"""
from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from .cache import PuzzleCache
from .config import DEFAULT_LENGTHS, MAX_UNDO_STEPS
from .db import SessionStore
from .distances import UNKNOWN_DISTANCE, DistanceMap
from .engine import WordChainEngine
from .puzzle import Puzzle
from .words import normalize_word

logger = logging.getLogger(__name__)

RETRY_ATTEMPTS = 3
RETRY_DELAY = 0.5


@dataclass
class ChainState:
    chain: list[str] = field(default_factory=list)
    user_word: str = ""
    is_completed: bool = False
    changes_made: int = 0
    undo_stack: list[str] = field(default_factory=list)
    hint_active: bool = False
    hint_distance: int | None = None

    @property
    def start(self) -> str:
        return self.chain[0] if self.chain else ""

    @property
    def target(self) -> str:
        return self.chain[-1] if self.chain else ""

    def to_dict(self) -> dict[str, Any]:
        """Persisted fields only; undo history and hints are per-run."""
        return {
            "chain": list(self.chain),
            "user_word": self.user_word,
            "is_completed": self.is_completed,
            "changes_made": self.changes_made,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ChainState":
        return cls(
            chain=list(data.get("chain") or []),
            user_word=data.get("user_word", ""),
            is_completed=bool(data.get("is_completed", False)),
            changes_made=int(data.get("changes_made", 0)),
        )


class SessionController:
    def __init__(
        self,
        cache: PuzzleCache,
        store: SessionStore | None = None,
        lengths: Iterable[int] = DEFAULT_LENGTHS,
        max_undo_steps: int = MAX_UNDO_STEPS,
        retry_attempts: int = RETRY_ATTEMPTS,
        retry_delay: float = RETRY_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.cache = cache
        self.store = store
        self.lengths = tuple(lengths)
        if not self.lengths:
            raise ValueError("at least one word length is required")
        self.max_undo_steps = max_undo_steps
        self.retry_attempts = retry_attempts
        self.retry_delay = retry_delay
        self._sleep = sleep
        self.current_length = 4 if 4 in self.lengths else self.lengths[0]
        self.states: dict[int, ChainState] = {}
        self._distance_maps: dict[int, DistanceMap] = {}
        self._lock = threading.RLock()

    # --- Accessors ---

    def engine(self, length: int | None = None) -> WordChainEngine:
        return self.cache.engine(length or self.current_length)

    @property
    def current_state(self) -> ChainState:
        with self._lock:
            return self.states.setdefault(self.current_length, ChainState())

    @property
    def can_undo(self) -> bool:
        return bool(self.current_state.undo_stack)

    @property
    def minimum_changes_needed(self) -> int:
        chain = self.current_state.chain
        return len(chain) - 1 if len(chain) >= 2 else 0

    # --- Puzzle lifecycle ---

    def set_word_length(self, length: int) -> ChainState:
        if length not in self.lengths:
            raise ValueError(f"Unsupported word length: {length}")
        with self._lock:
            self.current_length = length
            has_state = bool(self.states.get(length, ChainState()).chain)
        if not has_state:
            self.new_puzzle(length)
        elif self.cache.size(length) < self.cache.capacity:
            self.cache.refill_cache(length)
        self.clear_hint(length)
        return self.current_state

    def new_puzzle(self, length: int | None = None) -> Puzzle | None:
        """Next puzzle from the cache; on a miss, generate directly with a bounded retry-with-delay."""
        length = length or self.current_length
        puzzle = self.cache.get_puzzle(length)
        if puzzle is None:
            logger.info("Queue empty for %d-letter puzzles, generating directly", length)
            engine = self.engine(length)
            for attempt in range(self.retry_attempts):
                puzzle = engine.generate_puzzle()
                if puzzle is not None:
                    break
                if attempt + 1 < self.retry_attempts:
                    self._sleep(self.retry_delay)
        if puzzle is None:
            logger.warning("No %d-letter puzzle available after %d attempts", length, self.retry_attempts)
            return None
        with self._lock:
            self.states[length] = ChainState(chain=list(puzzle.chain), user_word=puzzle.start)
            self._distance_maps.pop(length, None)
        self._persist()
        return puzzle

    def reset_puzzle(self) -> ChainState:
        """Back to the start word of the current puzzle (new puzzle when there is none)."""
        with self._lock:
            state = self.states.get(self.current_length)
            has_chain = state is not None and bool(state.chain)
            if has_chain:
                state.user_word = state.start
                state.is_completed = False
                state.changes_made = 0
                state.undo_stack.clear()
        if not has_chain:
            self.new_puzzle()
        self.clear_hint(self.current_length)
        self._persist()
        return self.current_state

    # --- Play ---

    def update_user_word(self, word: str) -> ChainState:
        word = normalize_word(word)
        engine = self.engine()
        with self._lock:
            state = self.current_state
            if state.user_word != word:
                state.undo_stack.append(state.user_word)
                if len(state.undo_stack) > self.max_undo_steps:
                    del state.undo_stack[0]
                state.changes_made += 1
            state.user_word = word
            if state.chain and word == state.target and engine.is_valid_word(word):
                state.is_completed = True
            self._refresh_hint(state)
        self._persist()
        return state

    def undo(self) -> bool:
        with self._lock:
            state = self.current_state
            if not state.undo_stack:
                return False
            state.user_word = state.undo_stack.pop()
            state.changes_made = max(0, state.changes_made - 1)
            self._refresh_hint(state)
        self._persist()
        return True

    def hint(self) -> int:
        """Steps left from the current word to the target (-1 when unreachable)."""
        engine = self.engine()
        with self._lock:
            state = self.current_state
            if not state.chain:
                return UNKNOWN_DISTANCE
            distance_map = engine.precompute_distances(state.target)
            if distance_map is None:
                return UNKNOWN_DISTANCE
            self._distance_maps[self.current_length] = distance_map
            state.hint_active = True
            state.hint_distance = engine.distance_to(state.user_word, distance_map)
            return state.hint_distance

    def clear_hint(self, length: int | None = None) -> None:
        with self._lock:
            state = self.states.get(length or self.current_length)
            if state is not None:
                state.hint_active = False
                state.hint_distance = None

    def _refresh_hint(self, state: ChainState) -> None:
        if not state.hint_active:
            return
        distance_map = self._distance_maps.get(self.current_length)
        if distance_map is None or distance_map.target != state.target:
            state.hint_distance = UNKNOWN_DISTANCE
            return
        state.hint_distance = distance_map.distance_to(state.user_word)

    # --- Persistence ---

    def export_states(self) -> dict[int, dict[str, Any]]:
        with self._lock:
            return {length: state.to_dict() for length, state in self.states.items() if state.chain}

    def import_states(self, data: dict[int, dict[str, Any]]) -> None:
        with self._lock:
            for length, payload in data.items():
                length = int(length)
                if length not in self.lengths:
                    continue
                state = ChainState.from_dict(payload)
                if any(len(w) != length for w in state.chain):
                    logger.warning("Dropping saved %d-letter state with mismatched words", length)
                    continue
                self.states[length] = state

    def _persist(self) -> None:
        if self.store is not None:
            self.store.save_states(self.export_states())

    def save(self) -> None:
        """Save game states and the unserved puzzle queues."""
        if self.store is None:
            return
        self._persist()
        for length in self.lengths:
            self.store.save_queue(length, self.cache.snapshot(length))

    def restore(self) -> int:
        """Load saved states and re-queue saved puzzles. Returns the number of puzzles re-queued."""
        if self.store is None:
            return 0
        self.import_states(self.store.load_states())
        restored = 0
        for length in self.lengths:
            puzzles = [p for p in self.store.load_queue(length) if p.word_length == length]
            restored += self.cache.seed(length, puzzles)
        logger.info("Restored %d states and %d queued puzzles", len(self.states), restored)
        return restored
