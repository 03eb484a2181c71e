"""
Puzzle generator: pick a start/target pair whose shortest chain lands in the difficulty band.

Strategy: start from a "hub" word (many neighbors), keep sampled targets at a good distance,
then materialize the chain. Falls back to random pairs, and finally gives up (None) so the
caller can retry later instead of looping forever.
"""
from __future__ import annotations

import logging
import random
import threading
from dataclasses import dataclass

import numpy as np

from .config import MINIMUM_CHAIN_LENGTH
from .distances import DistanceOracle
from .graph import WordGraph
from .pathfinder import PathFinder
from .puzzle import Puzzle

logger = logging.getLogger(__name__)

HUB_STRATEGY = "hub"
RANDOM_STRATEGY = "random"


@dataclass(frozen=True)
class GeneratorConfig:
    minimum_length: int = MINIMUM_CHAIN_LENGTH
    maximum_length: int | None = None
    min_connections: int = 6
    hub_scan_limit: int = 200
    hub_attempts: int = 30
    sample_size: int = 100
    max_candidates: int = 20
    fallback_attempts: int = 20
    random_attempts: int = 100
    distance_window: int = 3

    @classmethod
    def for_length(cls, length: int, minimum_length: int = MINIMUM_CHAIN_LENGTH) -> "GeneratorConfig":
        """Tuning per word length: 5-letter chains are capped at 8 words and need fewer hub connections."""
        if length == 5:
            return cls(minimum_length=minimum_length, maximum_length=8, min_connections=5)
        return cls(minimum_length=minimum_length)

    def length_band(self) -> tuple[int, int]:
        """Chain lengths (in words) the hub strategy aims for."""
        high = self.minimum_length + self.distance_window
        if self.maximum_length is not None:
            high = min(high, self.maximum_length)
        return self.minimum_length, high


def _cancelled(cancel: threading.Event | None) -> bool:
    return cancel is not None and cancel.is_set()


class PuzzleGenerator:
    def __init__(
        self,
        graph: WordGraph,
        config: GeneratorConfig | None = None,
        rng: random.Random | None = None,
        pathfinder: PathFinder | None = None,
        oracle: DistanceOracle | None = None,
    ):
        self.graph = graph
        self.config = config or GeneratorConfig.for_length(graph.length)
        self.rng = rng or random.Random()
        self.pathfinder = pathfinder or PathFinder(graph)
        # Own oracle so sampling hub distances does not evict the maps hints rely on.
        self.oracle = oracle or DistanceOracle(graph, cache_size=32, pathfinder=self.pathfinder)
        self._hubs: list[str] | None = None

    def is_acceptable(self, chain: list[str] | tuple[str, ...]) -> bool:
        if len(chain) < self.config.minimum_length:
            return False
        return self.config.maximum_length is None or len(chain) <= self.config.maximum_length

    def find_hub_words(self) -> list[str]:
        """Words with at least `min_connections` neighbors, capped at `hub_scan_limit`."""
        if self._hubs is None:
            indices = np.flatnonzero(self.graph.degrees() >= self.config.min_connections)
            self._hubs = [self.graph.words[i] for i in indices[: self.config.hub_scan_limit]]
            logger.debug("%d hub words for %d-letter graph", len(self._hubs), self.graph.length)
        return self._hubs

    def find_distant_words(self, start: str) -> list[str]:
        """Sampled words whose shortest chain from start falls in the length band."""
        distance_map = self.oracle.precompute(start)
        if distance_map is None:
            return []
        low, high = self.config.length_band()
        words = self.graph.words
        sampled = self.rng.sample(words, min(self.config.sample_size, len(words)))
        candidates: list[str] = []
        for word in sampled:
            if word == start:
                continue
            steps = distance_map.distance_to(word)
            if steps >= 0 and low <= steps + 1 <= high:
                candidates.append(word)
                if len(candidates) >= self.config.max_candidates:
                    break
        return candidates

    def _puzzle_for(self, start: str, end: str) -> Puzzle | None:
        chain = self.pathfinder.shortest_chain(start, end)
        if chain and self.is_acceptable(chain):
            return Puzzle.from_chain(chain)
        return None

    def hub_attempt(self) -> Puzzle | None:
        """One try of the hub strategy."""
        hubs = self.find_hub_words()
        if not hubs:
            return None
        start = self.rng.choice(hubs)
        ends = self.find_distant_words(start)
        if not ends:
            return None
        return self._puzzle_for(start, self.rng.choice(ends))

    def random_attempt(self, forced_start: str | None = None) -> Puzzle | None:
        """One try with a uniformly random pair."""
        start = forced_start or self.graph.random_word(self.rng)
        end = self.graph.random_word(self.rng)
        if start is None or end is None or start == end:
            return None
        return self._puzzle_for(start, end)

    def random_chain(self, forced_start: str | None = None, cancel: threading.Event | None = None) -> Puzzle | None:
        if not len(self.graph) or (forced_start is not None and forced_start not in self.graph):
            return None
        for _ in range(self.config.random_attempts):
            if _cancelled(cancel):
                return None
            puzzle = self.random_attempt(forced_start)
            if puzzle is not None:
                return puzzle
        return None

    def chain_from_word(self, start: str) -> Puzzle | None:
        return self.random_chain(forced_start=start)

    def generate(self, cancel: threading.Event | None = None) -> Puzzle | None:
        """Hub strategy first, then random pairs. None when every attempt missed the band."""
        for _ in range(self.config.hub_attempts):
            if _cancelled(cancel):
                return None
            puzzle = self.hub_attempt()
            if puzzle is not None:
                return puzzle

        for _ in range(self.config.fallback_attempts):
            if _cancelled(cancel):
                return None
            puzzle = self.random_chain(cancel=cancel)
            if puzzle is not None:
                return puzzle

        logger.warning("Generation exhausted for %d-letter words", self.graph.length)
        return None

    def generate_with_strategy(self, strategy: str) -> Puzzle | None:
        """Single attempt with the named strategy ("hub" or "random")."""
        if strategy == HUB_STRATEGY:
            return self.hub_attempt()
        if strategy == RANDOM_STRATEGY:
            return self.random_attempt()
        raise ValueError(f"Unknown strategy: {strategy!r}")
