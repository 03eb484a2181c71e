"""
Shortest chains over a WordGraph.

Bidirectional BFS: one frontier grows from the start word, one from the end word,
and the smaller frontier is always the one expanded next. Frontiers are expanded a
whole level at a time; the best meeting found in that level is spliced into the chain.
"""
from __future__ import annotations

from collections import deque

import numpy as np

from .graph import WordGraph

UNREACHABLE = -1


def _walk(parents: dict[str, str | None], word: str) -> list[str]:
    out: list[str] = []
    node: str | None = word
    while node is not None:
        out.append(node)
        node = parents[node]
    return out


def _expand_level(
    graph: WordGraph,
    queue: deque[str],
    parents: dict[str, str | None],
    depths: dict[str, int],
    other_depths: dict[str, int],
) -> str | None:
    """Expand every queued node of the current depth. Returns the best meeting word, if any."""
    best: str | None = None
    best_total = 0
    for _ in range(len(queue)):
        word = queue.popleft()
        next_depth = depths[word] + 1
        for neighbor in graph.iter_neighbors(word):
            if neighbor in parents:
                continue
            parents[neighbor] = word
            depths[neighbor] = next_depth
            if neighbor in other_depths:
                total = next_depth + other_depths[neighbor]
                if best is None or total < best_total:
                    best, best_total = neighbor, total
                continue
            queue.append(neighbor)
    return best


class PathFinder:
    def __init__(self, graph: WordGraph):
        self.graph = graph
        self.searches = 0

    def shortest_chain(self, start: str, end: str) -> list[str]:
        """Shortest chain from start to end, [] when either word is unknown or no path exists."""
        if start not in self.graph or end not in self.graph:
            return []
        if start == end:
            return [start]
        self.searches += 1

        forward_queue: deque[str] = deque([start])
        backward_queue: deque[str] = deque([end])
        forward_parents: dict[str, str | None] = {start: None}
        backward_parents: dict[str, str | None] = {end: None}
        forward_depths = {start: 0}
        backward_depths = {end: 0}

        while forward_queue and backward_queue:
            if len(forward_queue) <= len(backward_queue):
                meet = _expand_level(self.graph, forward_queue, forward_parents, forward_depths, backward_depths)
            else:
                meet = _expand_level(self.graph, backward_queue, backward_parents, backward_depths, forward_depths)
            if meet is not None:
                prefix = _walk(forward_parents, meet)
                prefix.reverse()
                return prefix + _walk(backward_parents, meet)[1:]
        return []


def bfs_distances(graph: WordGraph, source: str) -> np.ndarray:
    """Single-source BFS. Distances are aligned with graph.words; -1 marks unreachable words."""
    distances = np.full(len(graph), UNREACHABLE, dtype=np.int32)
    origin = graph.index_of(source)
    if origin < 0:
        return distances
    distances[origin] = 0
    queue = deque([source])
    while queue:
        word = queue.popleft()
        d = distances[graph.index_of(word)] + 1
        for neighbor in graph.iter_neighbors(word):
            i = graph.index_of(neighbor)
            if distances[i] == UNREACHABLE:
                distances[i] = d
                queue.append(neighbor)
    return distances
