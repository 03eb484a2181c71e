"""
Print a shortest word chain. Run: python -m word_chains.ladder COLD WARM
"""
from __future__ import annotations

import sys

from .graph import WordGraph
from .pathfinder import PathFinder
from .words import normalize_word


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 2:
        print("Usage: python -m word_chains.ladder START END")
        return 2
    start, end = (normalize_word(a) for a in args)
    if len(start) != len(end):
        print("Start and end must have the same length.")
        return 2
    graph = WordGraph.from_file(len(start))
    for word in (start, end):
        if word not in graph:
            print(f"{word} is not in the word list.")
            return 1
    chain = PathFinder(graph).shortest_chain(start, end)
    if not chain:
        print(f"No chain from {start} to {end}.")
        return 1
    for word in chain:
        print(f"  {word}")
    print(f"({len(chain) - 1} changes)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
