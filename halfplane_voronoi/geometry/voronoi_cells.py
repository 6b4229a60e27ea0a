"""
Voronoi Cells by Iterative Half-Plane Intersection

This module builds a bounded Voronoi diagram one cell at a time. The
cell of a site is the set of points at least as close to it as to any
other site, clipped to a convex bounding region. Each "closer to site
than to other" condition is a half-plane, so the cell is the bounding
region intersected with n - 1 half-planes.

Mathematical Background:
    For sites p and q, ||x - p||² <= ||x - q||² expands to

        2(p.x - q.x)·x + 2(p.y - q.y)·y + (|q|² - |p|²) >= 0

    The boundary is the perpendicular bisector of pq. Evaluated at p
    the left side equals ||p - q||², so the kept side always contains
    p; the orientation check below keeps that true under rounding.

Implementation Strategy:
    1. Seed the running polygon with the bounding region
    2. For every other site, clip the running polygon to its bisector
    3. Stop early once the polygon is empty

Complexity:
    O(n) clips per site, each O(h) in the current cell size,
    so O(n² · h) for the whole diagram. This targets tens to low
    hundreds of sites; it is not meant to compete with Fortune's sweep.

Duplicate sites:
    Coincident sites give a degenerate bisector (a = b = c = 0) whose
    clip is a no-op. DiagramConfig.on_duplicate decides what happens:
    the first copy owns the cell (default), copies share overlapping
    cells, or DuplicateSiteError is raised.

Reference:
    Aurenhammer, F. (1991). Voronoi diagrams—a survey of a fundamental
    geometric data structure. ACM Computing Surveys, 23(3), 345-405.
"""

from typing import Dict, List, Optional, Sequence, Tuple, Union, Iterable

import structlog

from ..config import DiagramConfig, DuplicatePolicy
from ..data_models import Point, Polygon, HalfPlane, VoronoiDiagram, PointLike
from ..exceptions import DuplicateSiteError
from .clipping import clip_polygon
from .properties import validate_bounding_region

logger = structlog.get_logger(__name__)


def bisector_half_plane(site: PointLike, other: PointLike) -> HalfPlane:
    """
    Half-plane of points at least as close to site as to other.

    Args:
        site: The generator whose side is kept
        other: The competing generator

    Returns:
        HalfPlane(a, b, c) with a·site.x + b·site.y + c >= 0

    Example:
        >>> bisector_half_plane((0, 5), (10, 5))    # keeps x <= 5
        HalfPlane(a=-20.0, b=0.0, c=100.0)
    """
    p = Point.coerce(site)
    q = Point.coerce(other)

    a = 2.0 * (p.x - q.x)
    b = 2.0 * (p.y - q.y)
    c = q.x ** 2 + q.y ** 2 - p.x ** 2 - p.y ** 2

    # Keep the side containing site
    if a * p.x + b * p.y + c < 0:
        a, b, c = -a, -b, -c
    return HalfPlane(a, b, c)


def compute_voronoi_cell(
    site: PointLike,
    others: Sequence[PointLike],
    bbox: Union[Polygon, Iterable[PointLike]],
    skip_index: Optional[int] = None
) -> Polygon:
    """
    Compute the Voronoi cell of one site.

    Args:
        site: Generator of the cell
        others: The full site sequence; site itself may appear in it
        bbox: Convex bounding region the cell is clipped into
        skip_index: Position of site within others. When omitted,
            entries equal to site are skipped instead.

    Returns:
        Polygon: The cell, possibly empty

    Complexity:
        O(n · h) for n others and cell size h
    """
    p = Point.coerce(site)
    poly = Polygon.coerce(bbox)

    for j, raw_other in enumerate(others):
        if skip_index is not None:
            if j == skip_index:
                continue
            other = Point.coerce(raw_other)
        else:
            other = Point.coerce(raw_other)
            if other == p:
                continue

        half_plane = bisector_half_plane(p, other)
        poly = clip_polygon(poly, half_plane.a, half_plane.b, half_plane.c)
        if not poly.vertices:
            break

    return poly


def resolve_site_owners(
    sites: Sequence[Point],
    policy: DuplicatePolicy = DuplicatePolicy.FIRST
) -> List[int]:
    """
    Map every site index to the index of the site that owns its cell.

    Under FIRST, a repeated coordinate maps to its first occurrence.
    Under ALLOW, every site owns its own cell.

    Raises:
        DuplicateSiteError: Under RAISE, on the first repeated coordinate
    """
    if policy == DuplicatePolicy.ALLOW:
        return list(range(len(sites)))

    first_seen: Dict[Tuple[float, float], int] = {}
    owners: List[int] = []
    for i, site in enumerate(sites):
        key = site.as_tuple()
        if key in first_seen:
            if policy == DuplicatePolicy.RAISE:
                raise DuplicateSiteError(first_seen[key], i, site.x, site.y)
            owners.append(first_seen[key])
        else:
            first_seen[key] = i
            owners.append(i)
    return owners


def prepare_inputs(
    sites: Sequence[PointLike],
    bounding_region: Union[Polygon, Iterable[PointLike]],
    config: DiagramConfig
) -> Tuple[List[Point], Polygon, List[int]]:
    """
    Coerce inputs and apply the configured precondition checks.

    Returns:
        Tuple of (site points, bounding polygon, owner index per site)
    """
    site_points = [Point.coerce(s) for s in sites]
    region = Polygon.coerce(bounding_region)
    if config.validate_bounding_region:
        validate_bounding_region(region, config.tolerance)
    owners = resolve_site_owners(site_points, config.on_duplicate)
    return site_points, region, owners


def compute_voronoi_diagram(
    sites: Sequence[PointLike],
    bounding_region: Union[Polygon, Iterable[PointLike]],
    config: Optional[DiagramConfig] = None
) -> List[Polygon]:
    """
    Compute the bounded Voronoi diagram of a set of sites.

    Args:
        sites: Ordered generator points (Points or (x, y) pairs)
        bounding_region: Convex polygon with at least 3 vertices
        config: Optional DiagramConfig; defaults are used when omitted

    Returns:
        List with one Polygon per site, in input order. An empty input
        gives an empty list. A site that ends with no area (a later
        duplicate under the FIRST policy) gets an empty Polygon.

    Raises:
        DuplicateSiteError: Coincident sites under DuplicatePolicy.RAISE
        InvalidBoundingRegionError: Bad region when validation is enabled

    Example:
        >>> box = Polygon.rectangle(10, 10)
        >>> cells = compute_voronoi_diagram([(0, 5), (10, 5)], box)
        >>> [len(c) for c in cells]
        [4, 4]
    """
    if config is None:
        config = DiagramConfig()

    site_points, region, owners = prepare_inputs(sites, bounding_region, config)
    if not site_points:
        return []

    cells: List[Polygon] = []
    for i, site in enumerate(site_points):
        if owners[i] != i:
            cells.append(Polygon())
            continue
        cells.append(compute_voronoi_cell(site, site_points, region, skip_index=i))

    logger.debug(
        "voronoi_diagram_computed",
        num_sites=len(site_points),
        empty_cells=sum(1 for c in cells if c.is_empty),
        on_duplicate=config.on_duplicate.value
    )
    return cells


def build_voronoi_diagram(
    sites: Sequence[PointLike],
    bounding_region: Union[Polygon, Iterable[PointLike]],
    config: Optional[DiagramConfig] = None
) -> VoronoiDiagram:
    """Compute the diagram and wrap it with its inputs in a VoronoiDiagram."""
    site_points = [Point.coerce(s) for s in sites]
    region = Polygon.coerce(bounding_region)
    cells = compute_voronoi_diagram(site_points, region, config)
    return VoronoiDiagram(sites=site_points, bounding_region=region, cells=cells)
