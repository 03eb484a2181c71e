"""
Per-length engine: the operations the session layer calls.
Inputs are normalized (case-insensitive); results follow the soft error convention
([] chain, -1 distance, None puzzle).
"""
from __future__ import annotations

import random
import threading
from collections.abc import Iterable

from .config import DISTANCE_CACHE_SIZE, MINIMUM_CHAIN_LENGTH
from .distances import DistanceMap, DistanceOracle
from .generator import GeneratorConfig, PuzzleGenerator
from .graph import WordGraph
from .pathfinder import PathFinder
from .puzzle import Puzzle
from .words import normalize_word


class WordChainEngine:
    def __init__(
        self,
        graph: WordGraph,
        config: GeneratorConfig | None = None,
        rng: random.Random | None = None,
        distance_cache_size: int = DISTANCE_CACHE_SIZE,
    ):
        self.graph = graph
        self.pathfinder = PathFinder(graph)
        self.oracle = DistanceOracle(graph, cache_size=distance_cache_size, pathfinder=self.pathfinder)
        self.generator = PuzzleGenerator(graph, config=config, rng=rng, pathfinder=self.pathfinder)

    @classmethod
    def for_words(cls, words: Iterable[str], length: int, **kwargs) -> "WordChainEngine":
        return cls(WordGraph(words, length), **kwargs)

    @property
    def word_length(self) -> int:
        return self.graph.length

    def is_valid_word(self, word: str) -> bool:
        return normalize_word(word) in self.graph

    def find_shortest_chain(self, start: str, end: str) -> list[str]:
        return self.pathfinder.shortest_chain(normalize_word(start), normalize_word(end))

    def precompute_distances(self, target: str) -> DistanceMap | None:
        return self.oracle.precompute(normalize_word(target))

    def distance_to(self, word: str, distance_map: DistanceMap | None = None) -> int:
        return self.oracle.distance_to(normalize_word(word), distance_map)

    def minimum_steps(self, start: str, end: str) -> int:
        return self.oracle.minimum_steps(normalize_word(start), normalize_word(end))

    def generate_puzzle(self, cancel: threading.Event | None = None) -> Puzzle | None:
        return self.generator.generate(cancel=cancel)

    def generate_random_chain(self, forced_start: str | None = None) -> Puzzle | None:
        return self.generator.random_chain(normalize_word(forced_start) if forced_start else None)

    def generate_chain_from_word(self, start: str) -> Puzzle | None:
        return self.generator.chain_from_word(normalize_word(start))

    def clear_cache(self) -> None:
        self.oracle.clear()


def make_engine_factory(
    words: Iterable[str] | None = None,
    path: str | None = None,
    minimum_length: int | None = None,
    distance_cache_size: int = DISTANCE_CACHE_SIZE,
    seed: int | None = None,
):
    """Build `length -> WordChainEngine` from an in-memory word list, or the word list file when none is given."""
    word_list = list(words) if words is not None else None

    def factory(length: int) -> WordChainEngine:
        if word_list is not None:
            graph = WordGraph(word_list, length)
        else:
            graph = WordGraph.from_file(length, path=path)
        config = GeneratorConfig.for_length(length, minimum_length=minimum_length or MINIMUM_CHAIN_LENGTH)
        rng = random.Random(seed + length) if seed is not None else None
        return WordChainEngine(graph, config=config, rng=rng, distance_cache_size=distance_cache_size)

    return factory
