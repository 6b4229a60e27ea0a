"""
Main Entry Point for Half-Plane Voronoi

This script provides a command-line interface for computing bounded
Voronoi diagrams. It orchestrates:

1. Site generation (seeded) or loading from JSON
2. Diagram computation (serial or process pool)
3. Optional property validation
4. Optional JSON export of the diagram

Usage:
    # Random sites in an 800×600 rectangle
    python -m halfplane_voronoi.main --num-sites 50 --seed 7

    # Sites from a file, diagram written back out
    python -m halfplane_voronoi.main --input data/sites.json --output data/diagram.json

    # Serial vs parallel timings
    python -m halfplane_voronoi.main --benchmark --sizes 50,100,200
"""

import argparse
import sys
from typing import List, Optional

import structlog

from .config import DiagramConfig, DuplicatePolicy
from .data_models import VoronoiDiagram
from .exceptions import DuplicateSiteError, InvalidBoundingRegionError
from .geometry.properties import polygon_area, validate_diagram
from .geometry.voronoi_cells import compute_voronoi_diagram
from .hpc.parallel import parallel_voronoi_diagram, default_worker_count
from .hpc.timing import Timer, benchmark_function, compute_speedup
from .logging_setup import configure_logging
from .synthetic_data import generate_scenario, load_sites_from_json

logger = structlog.get_logger(__name__)


def print_header():
    """Print application header."""
    print("=" * 70)
    print("  HALF-PLANE VORONOI")
    print("  Bounded Voronoi Diagrams by Iterative Half-Plane Clipping")
    print("=" * 70)
    print()


def build_config(args) -> DiagramConfig:
    """Map command line arguments onto a DiagramConfig."""
    return DiagramConfig(
        tolerance=args.tolerance,
        on_duplicate=DuplicatePolicy(args.on_duplicate),
        validate_bounding_region=True,
        parallel_threshold=args.parallel_threshold
    )


def load_or_generate(args):
    """Return (sites, bounding region) from --input or from the generator."""
    if args.input:
        logger.info("loading_sites", path=args.input)
        return load_sites_from_json(args.input)
    return generate_scenario(
        count=args.num_sites,
        width=args.width,
        height=args.height,
        seed=args.seed,
        layout=args.layout,
        spacing=args.spacing
    )


def compute(args, config: DiagramConfig) -> VoronoiDiagram:
    """Run the diagram computation selected by the arguments."""
    sites, region = load_or_generate(args)

    with Timer("diagram", num_sites=len(sites)) as timer:
        if args.workers == 1:
            cells = compute_voronoi_diagram(sites, region, config)
        else:
            cells = parallel_voronoi_diagram(
                sites, region, max_workers=args.workers, config=config
            )

    logger.info(
        "diagram_ready",
        num_sites=len(sites),
        elapsed_ms=round(timer.elapsed_ms, 3)
    )
    return VoronoiDiagram(sites=list(sites), bounding_region=region, cells=cells)


def print_diagram_summary(diagram: VoronoiDiagram, verbose: bool = False):
    """Print a short description of the computed diagram."""
    print("Diagram Summary:")
    print("-" * 40)
    print(f"  Sites:           {diagram.num_sites}")
    print(f"  Bounding region: {len(diagram.bounding_region)} vertices, "
          f"area {polygon_area(diagram.bounding_region):.3f}")
    empty = sum(1 for c in diagram.cells if c.is_empty)
    print(f"  Empty cells:     {empty}")
    if diagram.cells:
        sizes = [len(c) for c in diagram.cells]
        print(f"  Cell vertices:   min {min(sizes)}, max {max(sizes)}")

    if verbose:
        print()
        for i, (site, cell) in enumerate(diagram):
            print(f"  {i:4d}. site ({site.x:.3f}, {site.y:.3f})  "
                  f"{len(cell)} vertices, area {polygon_area(cell):.3f}")
    print()


def run_benchmark(args, config: DiagramConfig) -> None:
    """Time the serial builder against the process pool."""
    sizes = [int(s.strip()) for s in args.sizes.split(',') if s.strip()]
    print("Running Performance Benchmarks...")
    print("-" * 40)
    print(f"  Problem sizes: {sizes}")
    print(f"  Trials per size: {args.trials}")
    print()

    # Force the pool regardless of size so both paths are measured
    pool_config = DiagramConfig(
        tolerance=config.tolerance,
        on_duplicate=config.on_duplicate,
        parallel_threshold=1
    )
    # A single worker would just rerun the serial path
    workers = args.workers if args.workers > 1 else None

    print(f"{'Sites':>8} {'Workers':>8} {'Serial(ms)':>12} {'Parallel(ms)':>14} {'Speedup':>10}")
    print("-" * 57)
    for size in sizes:
        sites, region = generate_scenario(
            count=size, width=args.width, height=args.height, seed=args.seed + size
        )
        serial = benchmark_function(
            compute_voronoi_diagram, sites, region,
            n_trials=args.trials, name="serial", config=config
        )
        parallel = benchmark_function(
            parallel_voronoi_diagram, sites, region,
            n_trials=args.trials, name="parallel",
            workers=workers or default_worker_count(),
            max_workers=workers, config=pool_config
        )
        speedup = compute_speedup(serial.mean_ms, parallel.mean_ms)
        print(f"{parallel.num_sites:>8} {parallel.workers:>8} {serial.mean_ms:>12.2f} "
              f"{parallel.mean_ms:>14.2f} {speedup:>9.2f}×")
    print()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description='Bounded Voronoi diagrams by iterative half-plane clipping',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m halfplane_voronoi.main --num-sites 50 --seed 7 --validate
  python -m halfplane_voronoi.main --input data/sites.json --output data/diagram.json
  python -m halfplane_voronoi.main --benchmark --sizes 50,100,200 --workers 4
        """
    )

    data_group = parser.add_argument_group('Sites')
    data_group.add_argument('--input', '-i', type=str,
                            help='JSON file with sites and bounding_region')
    data_group.add_argument('--num-sites', '-n', type=int, default=20,
                            help='Number of generated sites (default: 20)')
    data_group.add_argument('--width', type=float, default=800.0,
                            help='Bounding rectangle width (default: 800)')
    data_group.add_argument('--height', type=float, default=600.0,
                            help='Bounding rectangle height (default: 600)')
    data_group.add_argument('--layout', type=str, default='random',
                            choices=['random', 'grid'],
                            help='Site layout (default: random)')
    data_group.add_argument('--spacing', type=float, default=None,
                            help='Grid spacing for the grid layout')
    data_group.add_argument('--seed', type=int, default=42,
                            help='Random seed (default: 42)')

    proc_group = parser.add_argument_group('Processing')
    proc_group.add_argument('--workers', '-w', type=int, default=1,
                            help='Worker processes (default: 1, serial)')
    proc_group.add_argument('--parallel-threshold', type=int, default=64,
                            help='Minimum sites before the pool is used (default: 64)')
    proc_group.add_argument('--on-duplicate', type=str, default='first',
                            choices=[p.value for p in DuplicatePolicy],
                            help='Coincident site policy (default: first)')
    proc_group.add_argument('--tolerance', type=float, default=1e-9,
                            help='Geometric tolerance (default: 1e-9)')

    bench_group = parser.add_argument_group('Benchmarking')
    bench_group.add_argument('--benchmark', '-b', action='store_true',
                             help='Run performance benchmarks')
    bench_group.add_argument('--sizes', type=str, default='25,50,100,200',
                             help='Comma-separated site counts (default: 25,50,100,200)')
    bench_group.add_argument('--trials', type=int, default=3,
                             help='Number of timing trials (default: 3)')

    out_group = parser.add_argument_group('Output')
    out_group.add_argument('--output', '-o', type=str,
                           help='Write the diagram to this JSON file')
    out_group.add_argument('--validate', action='store_true',
                           help='Check diagram properties and print a report')
    out_group.add_argument('--verbose', '-v', action='store_true',
                           help='List every cell')
    out_group.add_argument('--quiet', '-q', action='store_true',
                           help='Minimal output')
    out_group.add_argument('--log-level', type=str.upper, default='WARNING',
                           choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                           help='Log level for stderr (default: WARNING)')
    out_group.add_argument('--log-format', type=str, default='console',
                           choices=['console', 'json'],
                           help='Log format (default: console)')

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    configure_logging(args.log_level, args.log_format)

    if not args.quiet:
        print_header()

    try:
        config = build_config(args)
        if args.benchmark:
            run_benchmark(args, config)
            return 0

        diagram = compute(args, config)
    except (DuplicateSiteError, InvalidBoundingRegionError) as e:
        logger.error("diagram_failed", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (OSError, ValueError, KeyError) as e:
        logger.error("input_failed", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not args.quiet:
        print_diagram_summary(diagram, verbose=args.verbose)

    if args.validate:
        report = validate_diagram(diagram.sites, diagram.bounding_region, diagram.cells)
        print(report.summary())
        print()

    if args.output:
        try:
            diagram.save_to_json(args.output)
        except OSError as e:
            logger.error("output_failed", path=args.output, error=str(e))
            print(f"Error: {e}", file=sys.stderr)
            return 1
        if not args.quiet:
            print(f"Diagram saved to: {args.output}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
