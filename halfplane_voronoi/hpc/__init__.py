"""
High-Performance Computing Module

This module provides parallel diagram computation and performance
measurement.

Components:
- parallel: process-pool cell computation
- timing: wall-clock timing of the diagram builders
"""

from .parallel import parallel_voronoi_diagram, default_worker_count
from .timing import (
    Timer,
    compute_speedup,
    benchmark_function,
    BenchmarkResult
)

__all__ = [
    'parallel_voronoi_diagram',
    'default_worker_count',
    'Timer',
    'compute_speedup',
    'benchmark_function',
    'BenchmarkResult'
]
