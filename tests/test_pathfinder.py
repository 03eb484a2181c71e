import random
from collections import deque

import pytest

from word_chains.graph import WordGraph, are_one_letter_apart
from word_chains.pathfinder import UNREACHABLE, PathFinder, bfs_distances

from conftest import random_words


def brute_force_steps(words, start, end):
    """Plain BFS over pairwise comparisons; None when unreachable."""
    seen = {start: 0}
    queue = deque([start])
    while queue:
        word = queue.popleft()
        if word == end:
            return seen[word]
        for other in words:
            if other not in seen and are_one_letter_apart(word, other):
                seen[other] = seen[word] + 1
                queue.append(other)
    return None


def assert_valid_chain(graph, chain, start, end):
    assert chain[0] == start
    assert chain[-1] == end
    assert all(word in graph for word in chain)
    for a, b in zip(chain, chain[1:]):
        assert are_one_letter_apart(a, b)


def test_scenario_chain(scenario_graph):
    chain = PathFinder(scenario_graph).shortest_chain("CAT", "DOG")
    assert len(chain) == 4
    assert chain in (["CAT", "COT", "COG", "DOG"], ["CAT", "COT", "DOT", "DOG"])


def test_same_word(scenario_graph):
    assert PathFinder(scenario_graph).shortest_chain("CAT", "CAT") == ["CAT"]


def test_unknown_words(scenario_graph):
    finder = PathFinder(scenario_graph)
    assert finder.shortest_chain("CAT", "XYZ") == []
    assert finder.shortest_chain("XYZ", "CAT") == []
    assert finder.searches == 0


def test_disconnected():
    graph = WordGraph(["CAT", "COT", "DOG", "DIG"], 3)
    assert PathFinder(graph).shortest_chain("CAT", "DIG") == []


@pytest.mark.parametrize("seed", range(8))
def test_minimal_against_brute_force(seed):
    rng = random.Random(seed)
    words = random_words(rng, 45)
    graph = WordGraph(words, 3)
    finder = PathFinder(graph)
    for _ in range(40):
        start, end = rng.choice(words), rng.choice(words)
        chain = finder.shortest_chain(start, end)
        expected = brute_force_steps(graph.words, start, end)
        if expected is None:
            assert chain == []
            continue
        assert_valid_chain(graph, chain, start, end)
        assert len(chain) - 1 == expected
        assert len(finder.shortest_chain(end, start)) == len(chain)


def test_bfs_distances(scenario_graph):
    distances = bfs_distances(scenario_graph, "DOG")
    by_word = dict(zip(scenario_graph.words, distances.tolist()))
    assert by_word["DOG"] == 0
    assert by_word["DOT"] == by_word["COG"] == 1
    assert by_word["COT"] == 2
    assert by_word["CAT"] == 3
    assert by_word["CAB"] == 4


def test_bfs_distances_unknown_source(scenario_graph):
    assert (bfs_distances(scenario_graph, "XYZ") == UNREACHABLE).all()


def test_bfs_distances_agree_with_chains():
    rng = random.Random(11)
    graph = WordGraph(random_words(rng, 50), 3)
    finder = PathFinder(graph)
    target = graph.words[0]
    distances = bfs_distances(graph, target)
    for word, d in zip(graph.words, distances.tolist()):
        chain = finder.shortest_chain(word, target)
        assert d == (len(chain) - 1 if chain else UNREACHABLE)
