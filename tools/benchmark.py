"""Performance benchmark for duplicate detection.

Generates synthetic search results (several indexers reporting overlapping
releases with jittered titles, sizes and publish times) and times
``DuplicateDetector.detect`` on increasing input sizes.

Usage:
    python tools/benchmark.py --sizes 100 1000 5000 --indexers 8 --runs 3

Example:
    python tools/benchmark.py --sizes 2000 --titles-per-release 1 --seed 7
"""

import argparse
import json
import random
import sys
import time
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List

sys.path.insert(0, str(Path(__file__).parent.parent))

from dupefinder.dedup import DuplicateDetector, Thresholds
from dupefinder.models import Indexer, ResultItem

_SEPARATORS = [".", " ", "-", "_"]
_GROUPS = ["NTb", "FLUX", "SPARKS", "DON", None]


def generate_results(
    count: int,
    indexers: int,
    rng: random.Random,
    titles_per_release: int = 2,
) -> List[ResultItem]:
    """Build ``count`` result items spread over ``indexers`` back-ends.

    Args:
        count: Number of result items to produce
        indexers: Number of distinct indexers
        rng: Random source (seed it for reproducible runs)
        titles_per_release: Separator variants used for a release title

    Returns:
        Shuffled list of result items
    """
    backends = [Indexer(f"indexer-{i}") for i in range(indexers)]
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    items: List[ResultItem] = []
    release = 0
    while len(items) < count:
        release += 1
        base_size = rng.randint(200, 8000) * 1024 * 1024
        published = now - timedelta(minutes=rng.randint(0, 60 * 24 * 30))
        group = rng.choice(_GROUPS)
        separator = rng.choice(_SEPARATORS[:titles_per_release])
        for backend in rng.sample(backends, rng.randint(1, indexers)):
            if len(items) >= count:
                break
            sep = separator if rng.random() < 0.8 else rng.choice(_SEPARATORS)
            items.append(ResultItem(
                title=f"Release{sep}{release}{sep}1080p{sep}{group or 'x264'}",
                indexer=backend,
                pub_date=published + timedelta(minutes=rng.randint(0, 90)),
                size=int(base_size * (1 + rng.uniform(-0.004, 0.004))),
                group=group if rng.random() < 0.7 else None,
                poster=None,
            ))
    rng.shuffle(items)
    return items


def run_benchmark(
    size: int,
    indexers: int,
    runs: int,
    seed: int,
    thresholds: Thresholds,
    titles_per_release: int = 2,
) -> Dict[str, Any]:
    """Time detection for one input size.

    Returns:
        Dictionary with timing and grouping statistics
    """
    durations = []
    clusters = duplicates = 0
    for run in range(runs):
        items = generate_results(size, indexers, random.Random(seed + run), titles_per_release)
        detector = DuplicateDetector(thresholds, annotate=False)
        start_time = time.perf_counter()
        result = detector.detect(items)
        durations.append(time.perf_counter() - start_time)
        clusters = len(result.clusters)
        duplicates = result.duplicates_detected

    return {
        "size": size,
        "runs": runs,
        "avg_ms": round(sum(durations) * 1000 / len(durations), 2),
        "max_ms": round(max(durations) * 1000, 2),
        "clusters": clusters,
        "duplicates": duplicates,
    }


def print_results(results: List[Dict[str, Any]]):
    """Print benchmark results in a formatted table."""
    print("\n" + "=" * 70)
    print("BENCHMARK RESULTS")
    print("=" * 70)
    print(f"\n{'Results':<10} {'Runs':<6} {'Avg (ms)':<12} {'Max (ms)':<12} {'Clusters':<10} {'Duplicates'}")
    print("-" * 70)
    for r in results:
        print(f"{r['size']:<10} {r['runs']:<6} {r['avg_ms']:<12} {r['max_ms']:<12} {r['clusters']:<10} {r['duplicates']}")


def main():
    parser = argparse.ArgumentParser(description="Benchmark duplicate detection on synthetic results.")
    parser.add_argument('--sizes', type=int, nargs='+', default=[100, 1000, 5000], help='Input sizes to time.')
    parser.add_argument('--indexers', type=int, default=6, help='Number of synthetic indexers.')
    parser.add_argument('--runs', type=int, default=3, help='Runs per size.')
    parser.add_argument('--titles-per-release', type=int, default=2, choices=range(1, 5), help='Separator variants per release title.')
    parser.add_argument('--seed', type=int, default=42, help='Random seed.')
    parser.add_argument('--age-threshold', type=float, default=2.0, help='Age threshold in hours.')
    parser.add_argument('--size-threshold', type=float, default=1.0, help='Size threshold in percent.')
    parser.add_argument('--output', type=str, help='Write results as JSON to this file.')
    args = parser.parse_args()

    thresholds = Thresholds(age_hours=args.age_threshold, size_percent=args.size_threshold)
    results = [run_benchmark(size, args.indexers, args.runs, args.seed, thresholds, args.titles_per_release) for size in args.sizes]
    print_results(results)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as fh:
            json.dump({"settings": vars(args), "results": results}, fh, indent=2)
        print(f"\nResults written to {args.output}")


if __name__ == "__main__":
    main()
