import random
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from word_chains.cache import PuzzleCache
from word_chains.engine import WordChainEngine, make_engine_factory
from word_chains.graph import WordGraph

from conftest import LINE_WORDS, cube_words, line_config


class GatedEngine(WordChainEngine):
    """Generation blocks until the test opens the gate."""

    def __init__(self, graph, gate):
        super().__init__(graph)
        self.gate = gate

    def generate_puzzle(self, cancel=None):
        self.gate.wait(timeout=10)
        return super().generate_puzzle(cancel=cancel)


def test_empty_cache_returns_none_and_starts_refill(cube_cache):
    assert cube_cache.get_puzzle(5) is None
    future = cube_cache.refill_cache(5)
    assert future.result(timeout=30) >= 0
    assert cube_cache.size(5) == cube_cache.capacity


def test_refill_then_serve(cube_cache):
    assert cube_cache.refill_cache(5).result(timeout=30) == 4
    graph = cube_cache.engine(5).graph
    puzzle = cube_cache.get_puzzle(5)
    assert puzzle is not None
    assert puzzle.start in graph and puzzle.end in graph
    assert 5 <= len(puzzle.chain) <= 8


def test_fifo_order(cube_cache):
    cube_cache.refill_cache(5).result(timeout=30)
    queued = cube_cache.snapshot(5)
    assert cube_cache.get_puzzle(5) is queued[0]
    assert cube_cache.get_puzzle(5) is queued[1]


def test_no_puzzle_served_twice(cube_cache):
    served = []
    for _ in range(12):
        puzzle = cube_cache.get_puzzle(5)
        if puzzle is None:
            cube_cache.refill_cache(5).result(timeout=30)
            continue
        served.append(puzzle)
    assert len({id(p) for p in served}) == len(served)


def test_refills_are_coalesced():
    gate = threading.Event()
    graph = WordGraph(cube_words(), 5)
    with PuzzleCache(lambda length: GatedEngine(graph, gate), capacity=2) as cache:
        first = cache.refill_cache(5)
        second = cache.refill_cache(5)
        assert first is second
        assert cache.is_refilling(5)
        gate.set()
        assert first.result(timeout=30) == 2
        assert not cache.is_refilling(5)


def test_cancel_stops_refill():
    gate = threading.Event()
    graph = WordGraph(cube_words(), 5)
    with PuzzleCache(lambda length: GatedEngine(graph, gate), capacity=3) as cache:
        future = cache.refill_cache(5)
        cache.cancel(5)
        gate.set()
        assert future.result(timeout=30) == 0
        assert cache.size(5) == 0


def test_failing_refill_can_be_retried():
    calls = []

    def factory(length):
        calls.append(length)
        raise RuntimeError("no words")

    with PuzzleCache(factory, capacity=2) as cache:
        with pytest.raises(RuntimeError):
            cache.refill_cache(4).result(timeout=30)
        assert not cache.is_refilling(4)
        with pytest.raises(RuntimeError):
            cache.refill_cache(4).result(timeout=30)
        assert calls == [4, 4]


def test_unproductive_refill_gives_up():
    graph = WordGraph(["AAA", "BBB", "CCC"], 3)
    with PuzzleCache(lambda length: WordChainEngine(graph), capacity=2, max_failed_rounds=2) as cache:
        assert cache.refill_cache(3).result(timeout=60) == 0
        assert cache.size(3) == 0


def test_capacity_holds_under_concurrency(cube_factory):
    with PuzzleCache(cube_factory, capacity=5) as cache:
        sizes = []

        def hammer():
            for _ in range(25):
                cache.get_puzzle(5)
                cache.refill_cache(5)
                sizes.append(cache.size(5))

        with ThreadPoolExecutor(max_workers=6) as pool:
            for f in [pool.submit(hammer) for _ in range(6)]:
                f.result(timeout=60)
        future = cache.refill_cache(5)
        if future is not None:
            future.result(timeout=30)
        assert max(sizes) <= 5
        assert cache.size(5) <= 5


def test_lengths_are_independent():
    factory = make_engine_factory(words=cube_words(4) + cube_words(5), seed=2)
    with PuzzleCache(factory, capacity=2) as cache:
        futures = cache.prime([4, 5])
        futures[5].result(timeout=30)
        futures[4].result(timeout=30)
        assert cache.status() == {4: 2, 5: 2}
        cache.clear(4)
        assert cache.status() == {4: 0, 5: 2}


def test_seed_respects_capacity(cube_cache):
    cube_cache.refill_cache(5).result(timeout=30)
    puzzles = cube_cache.snapshot(5)
    cube_cache.clear()
    assert cube_cache.seed(5, puzzles + puzzles) == 4
    assert cube_cache.size(5) == 4


def test_shutdown_rejects_new_refills(cube_factory):
    cache = PuzzleCache(cube_factory, capacity=2)
    cache.shutdown()
    assert cache.refill_cache(5) is None
    assert cache.get_puzzle(5) is None


def test_invalid_capacity(cube_factory):
    with pytest.raises(ValueError):
        PuzzleCache(cube_factory, capacity=0)


def test_refilled_puzzles_respect_maximum_length():
    graph = WordGraph(LINE_WORDS, 4)

    def factory(length):
        return WordChainEngine(graph, config=line_config(), rng=random.Random(length))

    with PuzzleCache(factory, capacity=6) as cache:
        assert cache.refill_cache(4).result(timeout=30) == 6
        for puzzle in cache.snapshot(4):
            assert 5 <= len(puzzle.chain) <= 6
