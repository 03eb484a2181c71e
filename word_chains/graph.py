"""
Word graph for one word length.
Nodes are equal-length words; an edge joins two words that differ in exactly one position.
Neighbors are found through wildcard buckets ("C_T" -> CAT, COT, CUT) instead of scanning the whole list.
"""
from __future__ import annotations

import random
from collections.abc import Iterable, Iterator
from pathlib import Path

import numpy as np

from .words import load_words, normalize_word

WILDCARD = "_"


def are_one_letter_apart(w1: str, w2: str) -> bool:
    """True iff the words have equal length and differ in exactly one position."""
    if len(w1) != len(w2):
        return False
    diffs = 0
    for c1, c2 in zip(w1, w2):
        if c1 != c2:
            diffs += 1
            if diffs > 1:
                return False
    return diffs == 1


def _bucket_keys(word: str) -> list[str]:
    return [word[:i] + WILDCARD + word[i + 1 :] for i in range(len(word))]


class WordGraph:
    """Immutable view over the words of a single length."""

    def __init__(self, words: Iterable[str], length: int):
        if length < 1:
            raise ValueError("length must be positive")
        self.length = length
        cleaned = (normalize_word(w) for w in words)
        self._words: tuple[str, ...] = tuple(dict.fromkeys(w for w in cleaned if len(w) == length and w.isalpha()))
        self._index: dict[str, int] = {w: i for i, w in enumerate(self._words)}
        self._buckets: dict[str, list[str]] = {}
        for w in self._words:
            for key in _bucket_keys(w):
                self._buckets.setdefault(key, []).append(w)
        # A neighbor shares exactly one bucket with the word, so bucket sizes add up to the degree.
        self._degrees = np.fromiter(
            (sum(len(self._buckets[key]) - 1 for key in _bucket_keys(w)) for w in self._words),
            dtype=np.int32,
            count=len(self._words),
        )
        self._degrees.setflags(write=False)

    @classmethod
    def from_file(cls, length: int, path: Path | str | None = None) -> "WordGraph":
        return cls(load_words(length=length, path=path), length)

    def __len__(self) -> int:
        return len(self._words)

    def __iter__(self) -> Iterator[str]:
        return iter(self._words)

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and word in self._index

    def __repr__(self) -> str:
        return f"WordGraph(length={self.length}, words={len(self._words)})"

    @property
    def words(self) -> tuple[str, ...]:
        return self._words

    def contains(self, word: str) -> bool:
        return word in self._index

    def index_of(self, word: str) -> int:
        """Position of word in `words`, or -1 for non-members."""
        return self._index.get(word, -1)

    def iter_neighbors(self, word: str) -> Iterator[str]:
        """Neighbors in bucket order (position first, then word list order)."""
        if word not in self._index:
            return
        for key in _bucket_keys(word):
            for other in self._buckets[key]:
                if other != word:
                    yield other

    def neighbors(self, word: str) -> set[str]:
        return set(self.iter_neighbors(word))

    def is_adjacent(self, w1: str, w2: str) -> bool:
        return w1 in self._index and w2 in self._index and are_one_letter_apart(w1, w2)

    def degree(self, word: str) -> int:
        i = self._index.get(word)
        return 0 if i is None else int(self._degrees[i])

    def degrees(self) -> np.ndarray:
        """Neighbor counts aligned with `words` (read-only)."""
        return self._degrees

    def random_word(self, rng: random.Random | None = None) -> str | None:
        if not self._words:
            return None
        return (rng or random).choice(self._words)
