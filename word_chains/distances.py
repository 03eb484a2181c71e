"""
Distance-to-target maps for hints.

One single-source BFS from the target gives the distance of every reachable word, so
re-asking "how far is this word from the target" on every edit is a lookup. Maps are kept
in an LRU cache keyed by target; the cache size bounds the oracle's memory.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np

from .config import DISTANCE_CACHE_SIZE
from .graph import WordGraph
from .lru import LRUCache
from .pathfinder import UNREACHABLE, PathFinder, bfs_distances

logger = logging.getLogger(__name__)

UNKNOWN_DISTANCE = UNREACHABLE


@dataclass(frozen=True, eq=False)
class DistanceMap:
    """Distances from every word of `graph` to `target` (-1 = unreachable)."""

    target: str
    graph: WordGraph = field(repr=False)
    distances: np.ndarray = field(repr=False)

    def __post_init__(self) -> None:
        self.distances.setflags(write=False)

    def distance_to(self, word: str) -> int:
        i = self.graph.index_of(word)
        if i < 0:
            return UNKNOWN_DISTANCE
        return int(self.distances[i])

    @property
    def reachable_count(self) -> int:
        return int(np.count_nonzero(self.distances >= 0))

    def farthest(self) -> tuple[str, int] | None:
        """A word at maximum distance from the target, with that distance."""
        if not len(self.distances):
            return None
        i = int(np.argmax(self.distances))
        if self.distances[i] <= 0:
            return None
        return self.graph.words[i], int(self.distances[i])


class DistanceOracle:
    def __init__(self, graph: WordGraph, cache_size: int = DISTANCE_CACHE_SIZE, pathfinder: PathFinder | None = None):
        self.graph = graph
        self.cache: LRUCache[str, DistanceMap] = LRUCache(cache_size)
        self.pathfinder = pathfinder or PathFinder(graph)
        self.bfs_runs = 0
        self._active: DistanceMap | None = None

    def precompute(self, target: str) -> DistanceMap | None:
        """Distance map for target, from the cache when resident. None for unknown words."""
        if target not in self.graph:
            return None
        distance_map = self.cache.get(target)
        if distance_map is None:
            self.bfs_runs += 1
            distance_map = DistanceMap(target, self.graph, bfs_distances(self.graph, target))
            self.cache.put(target, distance_map)
            logger.debug("Computed distances to %s (%d reachable)", target, distance_map.reachable_count)
        self._active = distance_map
        return distance_map

    @property
    def active(self) -> DistanceMap | None:
        """The map returned by the most recent precompute."""
        return self._active

    def distance_to(self, word: str, distance_map: DistanceMap | None = None) -> int:
        distance_map = distance_map or self._active
        if distance_map is None:
            return UNKNOWN_DISTANCE
        return distance_map.distance_to(word)

    def minimum_steps(self, start: str, end: str) -> int:
        """Edges on a shortest chain between the words; -1 when there is none."""
        if start not in self.graph or end not in self.graph:
            return UNKNOWN_DISTANCE
        if start == end:
            return 0
        # The graph is undirected, so a map for either endpoint answers the question.
        for target, word in ((end, start), (start, end)):
            cached = self.cache.get(target)
            if cached is not None:
                return cached.distance_to(word)
        chain = self.pathfinder.shortest_chain(start, end)
        return len(chain) - 1 if chain else UNKNOWN_DISTANCE

    def clear(self) -> None:
        self.cache.clear()
        self._active = None
