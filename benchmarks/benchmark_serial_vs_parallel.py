#!/usr/bin/env python3
"""
Benchmark Script: Serial vs Process-Pool Diagram Computation

This script measures how the half-plane Voronoi builder scales with the
number of sites and how much the process pool helps:

1. Serial: compute_voronoi_diagram, one cell after another
2. Parallel: parallel_voronoi_diagram, one task per cell on a process pool
3. Cached: a warm DiagramCache lookup for the same inputs

Usage:
    python benchmarks/benchmark_serial_vs_parallel.py
    python benchmarks/benchmark_serial_vs_parallel.py --sizes 50,100,200 --trials 5

Output:
    - Console table with timing results
    - CSV file with detailed results

Expected Behavior:
    Serial time grows roughly as n² · h. The pool only pays off once
    the per-cell work outweighs process startup and pickling, which
    happens somewhere in the low hundreds of sites.
"""

import argparse
import csv
import sys
from pathlib import Path
from typing import List, Dict, Any, Optional

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from halfplane_voronoi.config import DiagramConfig
from halfplane_voronoi.geometry.cache import DiagramCache
from halfplane_voronoi.geometry.voronoi_cells import compute_voronoi_diagram
from halfplane_voronoi.hpc.parallel import parallel_voronoi_diagram, default_worker_count
from halfplane_voronoi.hpc.timing import benchmark_function, compute_speedup
from halfplane_voronoi.synthetic_data import generate_scenario


def run_benchmark_suite(
    sizes: List[int],
    n_trials: int = 3,
    workers: Optional[int] = None,
    verbose: bool = True
) -> List[Dict[str, Any]]:
    """
    Run the benchmark for several site counts.

    Args:
        sizes: Site counts to test
        n_trials: Number of timing trials per benchmark
        workers: Pool size for the parallel runs
        verbose: Print progress information

    Returns:
        List of result dictionaries
    """
    workers = workers or default_worker_count()
    pool_config = DiagramConfig(parallel_threshold=1)
    results = []

    for size in sizes:
        if verbose:
            print(f"\n{'='*60}")
            print(f"Benchmarking size: {size}")
            print('='*60)

        sites, region = generate_scenario(count=size, width=1000, height=1000, seed=42 + size)

        serial = benchmark_function(
            compute_voronoi_diagram, sites, region, n_trials=n_trials, name="serial"
        )
        if verbose:
            print(f"  Serial:   {serial.summary()}")

        parallel = benchmark_function(
            parallel_voronoi_diagram, sites, region, n_trials=n_trials, name="parallel",
            workers=workers, max_workers=workers, config=pool_config
        )
        if verbose:
            print(f"  Parallel: {parallel.summary()}")

        # The warmup run fills the cache
        cached = benchmark_function(DiagramCache().get, sites, region, n_trials=n_trials, name="cached")
        if verbose:
            print(f"  Cached:   {cached.summary()}")

        row = {'num_sites': serial.num_sites}
        for result in (serial, parallel, cached):
            row.update(result.as_row())
        row.update({
            'speedup_parallel': compute_speedup(serial.mean_ms, parallel.mean_ms),
            'speedup_cached': compute_speedup(serial.mean_ms, cached.mean_ms)
        })
        results.append(row)

    return results


def save_results_csv(results: List[Dict[str, Any]], filepath: str):
    """Save benchmark results to CSV file."""
    if not results:
        return

    with open(filepath, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=list(results[0].keys()))
        writer.writeheader()
        writer.writerows(results)

    print(f"\nResults saved to: {filepath}")


def print_results_table(results: List[Dict[str, Any]]):
    """Print formatted results table."""
    print("\n" + "=" * 70)
    print("BENCHMARK RESULTS SUMMARY")
    print("=" * 70)
    print(f"{'Sites':>8} {'Serial(ms)':>12} {'Parallel(ms)':>14} {'Cached(ms)':>12} {'Speedup':>10}")
    print("-" * 70)

    for r in results:
        print(f"{r['num_sites']:>8} {r['serial_ms']:>12.2f} {r['parallel_ms']:>14.2f} "
              f"{r['cached_ms']:>12.4f} {r['speedup_parallel']:>9.2f}×")

    print("=" * 70)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='Benchmark serial vs parallel half-plane Voronoi computation'
    )
    parser.add_argument(
        '--sizes', type=str, default='25,50,100,200,400',
        help='Comma-separated site counts (default: 25,50,100,200,400)'
    )
    parser.add_argument(
        '--trials', type=int, default=3,
        help='Number of timing trials per benchmark (default: 3)'
    )
    parser.add_argument(
        '--workers', type=int, default=None,
        help='Pool size (default: all available CPUs)'
    )
    parser.add_argument(
        '--output', type=str, default='benchmarks/benchmark_results.csv',
        help='Output CSV file path'
    )
    parser.add_argument(
        '--quiet', '-q', action='store_true',
        help='Minimal output'
    )

    args = parser.parse_args()
    sizes = [int(s.strip()) for s in args.sizes.split(',')]

    if not args.quiet:
        print("=" * 60)
        print("  HALF-PLANE VORONOI BENCHMARK")
        print("  Serial vs Process Pool vs Cache")
        print("=" * 60)
        print(f"\nSite counts: {sizes}")
        print(f"Trials per size: {args.trials}")

    results = run_benchmark_suite(sizes, args.trials, args.workers, verbose=not args.quiet)
    print_results_table(results)

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    save_results_csv(results, str(output_path))

    return 0


if __name__ == "__main__":
    sys.exit(main())
