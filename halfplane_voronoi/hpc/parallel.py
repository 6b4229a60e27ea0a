"""
Parallel Cell Computation

Each cell depends only on the read-only site list and bounding region,
so the per-site loop has no shared state and can be split across
worker processes with nothing to coordinate beyond collecting results
in input order.

Process startup dominates for small inputs, so the pool is used only
once the site count reaches DiagramConfig.parallel_threshold.
"""

import os
from concurrent.futures import ProcessPoolExecutor
from typing import List, Optional, Sequence, Tuple, Union, Iterable

import structlog

from ..config import DiagramConfig
from ..data_models import Polygon, Point, PointLike
from ..geometry.voronoi_cells import (
    compute_voronoi_cell,
    compute_voronoi_diagram,
    prepare_inputs
)

logger = structlog.get_logger(__name__)

_CellTask = Tuple[int, Tuple[Point, ...], Polygon]


def _compute_cell_task(task: _CellTask) -> Polygon:
    index, sites, region = task
    return compute_voronoi_cell(sites[index], sites, region, skip_index=index)


def default_worker_count() -> int:
    """Number of CPUs available to this process."""
    if hasattr(os, "sched_getaffinity"):
        return max(1, len(os.sched_getaffinity(0)))
    return max(1, os.cpu_count() or 1)


def parallel_voronoi_diagram(
    sites: Sequence[PointLike],
    bounding_region: Union[Polygon, Iterable[PointLike]],
    max_workers: Optional[int] = None,
    config: Optional[DiagramConfig] = None
) -> List[Polygon]:
    """
    Compute the diagram with one task per owning site on a process pool.

    Args:
        sites: Ordered generator points
        bounding_region: Convex bounding polygon
        max_workers: Pool size; defaults to the available CPU count
        config: Optional DiagramConfig

    Returns:
        List of cells identical to compute_voronoi_diagram's output

    Note:
        Falls back to the serial builder when max_workers is 1 or the
        input is smaller than config.parallel_threshold.
    """
    if config is None:
        config = DiagramConfig()
    if max_workers is None:
        max_workers = default_worker_count()
    if max_workers < 1:
        raise ValueError(f"max_workers must be at least 1, got {max_workers}")

    site_points, region, owners = prepare_inputs(sites, bounding_region, config)
    if max_workers == 1 or len(site_points) < config.parallel_threshold:
        return compute_voronoi_diagram(site_points, region, config)

    shared_sites = tuple(site_points)
    tasks = [(i, shared_sites, region) for i in range(len(site_points)) if owners[i] == i]
    chunksize = max(1, len(tasks) // (max_workers * 4))

    logger.debug(
        "parallel_diagram_started",
        num_sites=len(site_points),
        workers=max_workers,
        chunksize=chunksize
    )

    cells: List[Polygon] = [Polygon() for _ in site_points]
    with ProcessPoolExecutor(max_workers=max_workers) as executor:
        results = executor.map(_compute_cell_task, tasks, chunksize=chunksize)
        for (index, _, _), cell in zip(tasks, results):
            cells[index] = cell
    return cells
