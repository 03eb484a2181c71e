"""
Pre-generated puzzles, one bounded FIFO queue per word length.

get_puzzle serves instantly from the queue and tops it up in the background once it drops
below half capacity. Each length has its own lock, cancellation token and at most one refill
task; lengths never contend with each other.
"""
from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Callable, Iterable
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass, field

from .config import QUEUE_SIZE
from .engine import WordChainEngine
from .puzzle import Puzzle

logger = logging.getLogger(__name__)

EngineFactory = Callable[[int], WordChainEngine]

# Consecutive empty generation rounds before a refill gives up (caller retries later).
MAX_FAILED_ROUNDS = 3


@dataclass
class _LengthSlot:
    queue: deque[Puzzle] = field(default_factory=deque)
    lock: threading.Lock = field(default_factory=threading.Lock)
    engine_lock: threading.Lock = field(default_factory=threading.Lock)
    cancel: threading.Event = field(default_factory=threading.Event)
    engine: WordChainEngine | None = None
    future: Future | None = None


class PuzzleCache:
    def __init__(
        self,
        engine_factory: EngineFactory,
        capacity: int = QUEUE_SIZE,
        executor: Executor | None = None,
        max_workers: int | None = None,
        max_failed_rounds: int = MAX_FAILED_ROUNDS,
    ):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self.max_failed_rounds = max_failed_rounds
        self._engine_factory = engine_factory
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="puzzle-refill")
        self._slots: dict[int, _LengthSlot] = {}
        self._registry_lock = threading.Lock()
        self._closed = False

    def __enter__(self) -> "PuzzleCache":
        return self

    def __exit__(self, *exc) -> None:
        self.shutdown()

    def _slot(self, length: int) -> _LengthSlot:
        with self._registry_lock:
            slot = self._slots.get(length)
            if slot is None:
                slot = self._slots[length] = _LengthSlot()
            return slot

    def engine(self, length: int) -> WordChainEngine:
        """Engine for length, built on first use and reused afterwards."""
        slot = self._slot(length)
        with slot.engine_lock:
            if slot.engine is None:
                slot.engine = self._engine_factory(length)
                logger.info("Built %d-letter engine (%d words)", length, len(slot.engine.graph))
            return slot.engine

    def get_puzzle(self, length: int) -> Puzzle | None:
        """Oldest queued puzzle for length, or None when the queue is empty."""
        slot = self._slot(length)
        with slot.lock:
            puzzle = slot.queue.popleft() if slot.queue else None
            remaining = len(slot.queue)
        if remaining < self.capacity // 2 or remaining == 0:
            self.refill_cache(length)
        return puzzle

    def refill_cache(self, length: int) -> Future | None:
        """Start (or join) the background refill for length. None once the cache is shut down."""
        slot = self._slot(length)
        with slot.lock:
            if slot.future is not None and not slot.future.done():
                return slot.future
            if self._closed:
                return None
            slot.cancel = threading.Event()
            slot.future = self._executor.submit(self._refill, length, slot, slot.cancel)
            return slot.future

    def _refill(self, length: int, slot: _LengthSlot, cancel: threading.Event) -> int:
        try:
            engine = self.engine(length)
            added = 0
            failures = 0
            logger.info("Refilling %d-letter queue (%d/%d)", length, self.size(length), self.capacity)
            while not cancel.is_set():
                with slot.lock:
                    if len(slot.queue) >= self.capacity:
                        break
                puzzle = engine.generate_puzzle(cancel=cancel)
                if puzzle is None:
                    if cancel.is_set():
                        break
                    failures += 1
                    if failures >= self.max_failed_rounds:
                        logger.warning("Refill for %d-letter queue made no progress, stopping", length)
                        break
                    continue
                failures = 0
                with slot.lock:
                    if len(slot.queue) >= self.capacity:
                        break
                    slot.queue.append(puzzle)
                    added += 1
                logger.debug("Queued %d-letter puzzle %s -> %s", length, puzzle.start, puzzle.end)
            if cancel.is_set():
                logger.info("Refill for %d-letter queue cancelled after %d puzzles", length, added)
            else:
                logger.info("Refill for %d-letter queue added %d puzzles", length, added)
            return added
        except Exception:
            logger.exception("Refill for %d-letter queue failed", length)
            raise

    def prime(self, lengths: Iterable[int]) -> dict[int, Future | None]:
        return {length: self.refill_cache(length) for length in lengths}

    def cancel(self, length: int) -> None:
        """Ask the running refill for length to stop after its current attempt."""
        self._slot(length).cancel.set()

    def cancel_all(self) -> None:
        with self._registry_lock:
            slots = list(self._slots.values())
        for slot in slots:
            slot.cancel.set()

    def is_refilling(self, length: int) -> bool:
        future = self._slot(length).future
        return future is not None and not future.done()

    def size(self, length: int) -> int:
        slot = self._slot(length)
        with slot.lock:
            return len(slot.queue)

    def status(self) -> dict[int, int]:
        with self._registry_lock:
            lengths = sorted(self._slots)
        return {length: self.size(length) for length in lengths}

    def snapshot(self, length: int) -> list[Puzzle]:
        slot = self._slot(length)
        with slot.lock:
            return list(slot.queue)

    def seed(self, length: int, puzzles: Iterable[Puzzle]) -> int:
        """Queue previously generated puzzles (e.g. restored from storage) up to capacity."""
        slot = self._slot(length)
        added = 0
        with slot.lock:
            for puzzle in puzzles:
                if len(slot.queue) >= self.capacity:
                    break
                slot.queue.append(puzzle)
                added += 1
        return added

    def clear(self, length: int | None = None) -> None:
        with self._registry_lock:
            slots = list(self._slots.values()) if length is None else [self._slots.get(length)]
        for slot in slots:
            if slot is None:
                continue
            with slot.lock:
                slot.queue.clear()

    def shutdown(self, wait: bool = True) -> None:
        with self._registry_lock:
            self._closed = True
        self.cancel_all()
        if self._owns_executor:
            self._executor.shutdown(wait=wait)
