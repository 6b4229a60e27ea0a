"""
Diagram Timing

Wall-clock measurement for the diagram builders. Every builder in the
package takes (sites, bounding_region, ...) as its leading arguments,
so a benchmark here is always "this builder on these sites", and each
result remembers how many sites and workers it was measured with.

Example:
    >>> result = benchmark_function(compute_voronoi_diagram, sites, box, n_trials=5)
    >>> print(result.summary())
    compute_voronoi_diagram [200 sites, 1 worker]: 41.07 ± 0.52 ms (best 40.51, 5 runs)
"""

import statistics
import time
from dataclasses import dataclass, field
from typing import Optional, Callable, Any, List, Dict, Sequence

import structlog

logger = structlog.get_logger(__name__)


class Timer:
    """
    Context manager around time.perf_counter().

    When named, the elapsed time is logged at debug level on exit,
    together with any extra keyword context.

    Example:
        >>> with Timer("diagram", num_sites=len(sites)) as t:
        ...     cells = compute_voronoi_diagram(sites, box)
        >>> t.elapsed_ms
    """

    def __init__(self, name: Optional[str] = None, **context: Any):
        self.name = name
        self.context = context
        self._start = 0.0
        self.elapsed = 0.0

    def __enter__(self) -> 'Timer':
        self._start = time.perf_counter()
        return self

    def __exit__(self, *exc_info) -> None:
        self.elapsed = time.perf_counter() - self._start
        if self.name:
            logger.debug("timed", operation=self.name,
                         elapsed_ms=round(self.elapsed_ms, 3), **self.context)

    @property
    def elapsed_ms(self) -> float:
        return self.elapsed * 1000


def compute_speedup(baseline_ms: float, candidate_ms: float) -> float:
    """
    How many times faster candidate ran than baseline.

    Example:
        >>> compute_speedup(100.0, 25.0)
        4.0
    """
    if candidate_ms <= 0:
        return float('inf')
    return baseline_ms / candidate_ms


@dataclass
class BenchmarkResult:
    """
    Repeated timings of one builder on one site set.

    Attributes:
        name: Label of the builder ("serial", "parallel", "cached", ...)
        num_sites: Number of sites the builder was given
        workers: Worker processes used (1 for the serial builder)
        times_ms: Wall-clock time of each run
    """
    name: str
    num_sites: int
    workers: int = 1
    times_ms: List[float] = field(default_factory=list)

    @property
    def mean_ms(self) -> float:
        return statistics.mean(self.times_ms) if self.times_ms else 0.0

    @property
    def std_ms(self) -> float:
        return statistics.stdev(self.times_ms) if len(self.times_ms) > 1 else 0.0

    @property
    def best_ms(self) -> float:
        return min(self.times_ms) if self.times_ms else 0.0

    def summary(self) -> str:
        plural = "" if self.workers == 1 else "s"
        return (f"{self.name} [{self.num_sites} sites, {self.workers} worker{plural}]: "
                f"{self.mean_ms:.2f} ± {self.std_ms:.2f} ms "
                f"(best {self.best_ms:.2f}, {len(self.times_ms)} runs)")

    def as_row(self) -> Dict[str, Any]:
        """Columns for a CSV row, prefixed with the result's name."""
        return {
            f'{self.name}_ms': self.mean_ms,
            f'{self.name}_std': self.std_ms,
            f'{self.name}_workers': self.workers,
        }


def benchmark_function(
    builder: Callable,
    sites: Sequence[Any],
    bounding_region: Any,
    n_trials: int = 3,
    warmup: int = 1,
    name: Optional[str] = None,
    workers: int = 1,
    **kwargs: Any
) -> BenchmarkResult:
    """
    Time builder(sites, bounding_region, **kwargs) over several runs.

    Args:
        builder: Diagram builder, e.g. compute_voronoi_diagram
        sites: Sites passed to every run
        bounding_region: Region passed to every run
        n_trials: Timed runs
        warmup: Untimed runs first (pool start-up, cache fill)
        name: Label for the result, defaults to the builder's name
        workers: Worker count to record; not passed to the builder
        **kwargs: Extra keyword arguments for the builder

    Returns:
        BenchmarkResult tagged with the site and worker counts
    """
    if n_trials < 1:
        raise ValueError(f"n_trials must be at least 1, got {n_trials}")

    result = BenchmarkResult(
        name=name or builder.__name__,
        num_sites=len(sites),
        workers=workers
    )

    for _ in range(warmup):
        builder(sites, bounding_region, **kwargs)

    for _ in range(n_trials):
        with Timer() as t:
            builder(sites, bounding_region, **kwargs)
        result.times_ms.append(t.elapsed_ms)

    logger.debug("benchmarked", builder=result.name, num_sites=result.num_sites,
                 workers=result.workers, mean_ms=round(result.mean_ms, 3))
    return result
