import dataclasses
import itertools
import random

import pytest

from word_chains.cache import PuzzleCache
from word_chains.engine import make_engine_factory
from word_chains.generator import GeneratorConfig
from word_chains.graph import WordGraph

SCENARIO_WORDS = ["CAT", "COT", "DOT", "DOG", "COG", "CAP", "CAR", "CAB"]

# A path: each word differs from the next in one letter and from every other word in at least two.
LINE_WORDS = [
    "AAAA", "BAAA", "BBAA", "BBBA", "BBBB", "CBBB",
    "CCBB", "CCCB", "CCCC", "DCCC", "DDCC", "DDDC",
]


def cube_words(length: int = 5) -> list[str]:
    """Every word over {A, B}: a hypercube where each word has `length` neighbors."""
    return ["".join(p) for p in itertools.product("AB", repeat=length)]


def random_words(rng: random.Random, count: int, length: int = 3, alphabet: str = "ABCDE") -> list[str]:
    pool = ["".join(p) for p in itertools.product(alphabet, repeat=length)]
    return rng.sample(pool, count)


def line_config(**overrides) -> GeneratorConfig:
    """Band of 5-6 words with a small hub budget, sized for LINE_WORDS."""
    config = GeneratorConfig(
        minimum_length=5,
        maximum_length=6,
        min_connections=2,
        hub_attempts=3,
        fallback_attempts=5,
        random_attempts=100,
    )
    return dataclasses.replace(config, **overrides)


@pytest.fixture
def scenario_graph():
    return WordGraph(SCENARIO_WORDS, 3)


@pytest.fixture
def line_graph():
    return WordGraph(LINE_WORDS, 4)


@pytest.fixture
def cube_graph():
    return WordGraph(cube_words(), 5)


@pytest.fixture
def cube_factory():
    return make_engine_factory(words=cube_words(), seed=7)


@pytest.fixture
def cube_cache(cube_factory):
    with PuzzleCache(cube_factory, capacity=4) as cache:
        yield cache
