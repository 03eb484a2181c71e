"""
Graph and generator statistics for one word length.
Run: python -m word_chains.stats --length 4 --trials 200
"""
from __future__ import annotations

import random

import numpy as np

from .config import MINIMUM_CHAIN_LENGTH
from .generator import HUB_STRATEGY, RANDOM_STRATEGY, GeneratorConfig, PuzzleGenerator
from .graph import WordGraph


def acceptance_rates(generator: PuzzleGenerator, trials: int) -> dict[str, float]:
    """Share of single attempts per strategy that produce an acceptable puzzle."""
    rates = {}
    for strategy in (HUB_STRATEGY, RANDOM_STRATEGY):
        hits = sum(generator.generate_with_strategy(strategy) is not None for _ in range(trials))
        rates[strategy] = hits / trials if trials else 0.0
    return rates


def main(argv: list[str] | None = None) -> None:
    import argparse
    p = argparse.ArgumentParser(description="Print word graph and puzzle generator statistics.")
    p.add_argument("--length", type=int, default=4, help="Word length")
    p.add_argument("--trials", type=int, default=100, help="Attempts per strategy")
    p.add_argument("--min-length", type=int, default=MINIMUM_CHAIN_LENGTH, help="Minimum chain length in words")
    p.add_argument("--seed", type=int, default=None, help="Random seed")
    p.add_argument("--word-list", default=None, help="Word list path (defaults to WORD_LIST or the system dict)")
    args = p.parse_args(argv)

    print("Loading words...")
    graph = WordGraph.from_file(args.length, path=args.word_list)
    degrees = graph.degrees()
    print(f"  {len(graph)} {args.length}-letter words")
    if not len(graph):
        return
    print(f"  Edges: {int(degrees.sum()) // 2}")
    print(f"  Degree: mean={degrees.mean():.2f} median={np.median(degrees):.0f} max={degrees.max()}")
    print(f"  Isolated words: {int(np.count_nonzero(degrees == 0))}")

    config = GeneratorConfig.for_length(args.length, minimum_length=args.min_length)
    generator = PuzzleGenerator(graph, config=config, rng=random.Random(args.seed))
    print(f"  Hub words (>= {config.min_connections} neighbors): {len(generator.find_hub_words())}")

    # Eccentricity of the best-connected word
    center = graph.words[int(np.argmax(degrees))]
    distance_map = generator.oracle.precompute(center)
    farthest = distance_map.farthest()
    print(f"  {center} reaches {distance_map.reachable_count} words")
    if farthest is not None:
        print(f"  Farthest from {center}: {farthest[0]} ({farthest[1]} changes)")

    print(f"Sampling {args.trials} attempts per strategy...")
    for strategy, rate in acceptance_rates(generator, args.trials).items():
        print(f"  {strategy}: {rate:.1%} acceptable")


if __name__ == "__main__":
    main()
