#!/usr/bin/env python3
"""
Min-Batch Throughput Benchmark

Measures how fast the batching adapter regroups an in-memory async stream of
integers, each weighted by its own value, for increasing stream sizes.

Usage:
    python min_batch_benchmark.py --help
    python min_batch_benchmark.py --min-batch-weight 1000 --rounds 5 --output results.json
"""

import argparse
import asyncio
import json
import statistics
import time
from datetime import datetime
from typing import Any, AsyncIterator, Dict, List

from minbatch import min_batch

DEFAULT_SIZES = [10, 100, 1000, 10_000, 100_000]


async def _numbers(size: int) -> AsyncIterator[int]:
    for i in range(size):
        yield i


async def _run_once(size: int, min_batch_weight: int) -> int:
    batches = 0
    async for _ in min_batch(_numbers(size), min_batch_weight, int):
        batches += 1
    return batches


async def benchmark_size(size: int, min_batch_weight: int, rounds: int) -> Dict[str, Any]:
    """Runs the adapter over a stream of ``size`` elements ``rounds`` times."""
    durations: List[float] = []
    batches = 0
    for _ in range(rounds):
        start = time.perf_counter()
        batches = await _run_once(size, min_batch_weight)
        durations.append(time.perf_counter() - start)

    mean = statistics.mean(durations)
    return {
        "size": size,
        "batches": batches,
        "mean_seconds": mean,
        "stdev_seconds": statistics.stdev(durations) if len(durations) > 1 else 0.0,
        "elements_per_second": size / mean if mean > 0 else 0.0,
    }


async def run_benchmark(sizes: List[int], min_batch_weight: int, rounds: int) -> Dict[str, Any]:
    results = []
    for size in sizes:
        result = await benchmark_size(size, min_batch_weight, rounds)
        print(
            f"size={size:>7}  batches={result['batches']:>6}  "
            f"mean={result['mean_seconds'] * 1000:.3f}ms  "
            f"throughput={result['elements_per_second']:.0f}/s"
        )
        results.append(result)

    return {
        "benchmark": "min_batch",
        "timestamp": datetime.now().isoformat(),
        "min_batch_weight": min_batch_weight,
        "rounds": rounds,
        "results": results,
    }


def main():
    parser = argparse.ArgumentParser(description="Min-batch throughput benchmark")
    parser.add_argument(
        "--sizes",
        type=int,
        nargs="+",
        default=DEFAULT_SIZES,
        help="Stream sizes to benchmark",
    )
    parser.add_argument(
        "--min-batch-weight", type=int, default=1000, help="Weight floor for each batch"
    )
    parser.add_argument("--rounds", type=int, default=5, help="Runs per stream size")
    parser.add_argument("--output", type=str, help="Write the JSON summary to this file")

    args = parser.parse_args()

    summary = asyncio.run(run_benchmark(args.sizes, args.min_batch_weight, args.rounds))

    if args.output:
        with open(args.output, "w") as f:
            json.dump(summary, f, indent=2)
        print(f"Results saved to {args.output}")
    else:
        print(json.dumps(summary, indent=2))


if __name__ == "__main__":
    main()
