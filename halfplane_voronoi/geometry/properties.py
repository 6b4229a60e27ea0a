"""
Geometric Properties and Diagram Validation

Checks that a computed diagram has the properties a Voronoi diagram
must have. They are used by the test suite, by the command-line
report, and by callers who want to verify output before handing it
to a renderer.

Checked properties:
- Partition: cell areas sum to the bounding region's area
- Convexity: every cell is convex
- Containment: each site lies in its own cell and strictly inside no other
- Ownership: each cell's centroid is nearest to the cell's generator
- Disjointness (optional, O(n² · h²)): no two cells overlap in area

Nearest-site queries use scipy's cKDTree, since in the Euclidean plane
"which cell contains q" and "which site is nearest to q" are the same
question.
"""

from dataclasses import dataclass, field
from typing import List, Tuple, Sequence, Optional, Union

import numpy as np
from scipy.spatial import cKDTree

from ..data_models import Point, Polygon, HalfPlane, PointLike
from ..exceptions import InvalidBoundingRegionError
from .clipping import clip_polygon_by_half_planes


def signed_polygon_area(polygon: Polygon) -> float:
    """
    Shoelace area. Positive for counter-clockwise winding (y-up).

    Complexity: O(h)
    """
    pts = Polygon.coerce(polygon).as_array()
    if len(pts) < 3:
        return 0.0
    x = pts[:, 0]
    y = pts[:, 1]
    return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y))


def polygon_area(polygon: Polygon) -> float:
    """Unsigned area of a polygon."""
    return abs(signed_polygon_area(polygon))


def polygon_centroid(polygon: Polygon) -> Optional[Point]:
    """
    Area centroid of a polygon.

    Returns the vertex mean for degenerate polygons with vertices,
    and None for an empty polygon.
    """
    pts = Polygon.coerce(polygon).as_array()
    if len(pts) == 0:
        return None
    area = signed_polygon_area(polygon)
    if area == 0:
        mean = pts.mean(axis=0)
        return Point(mean[0], mean[1])

    x = pts[:, 0]
    y = pts[:, 1]
    x_next = np.roll(x, -1)
    y_next = np.roll(y, -1)
    cross = x * y_next - x_next * y
    cx = float(np.sum((x + x_next) * cross)) / (6.0 * area)
    cy = float(np.sum((y + y_next) * cross)) / (6.0 * area)
    return Point(cx, cy)


def _orientation(polygon: Polygon) -> int:
    area = signed_polygon_area(polygon)
    if area > 0:
        return 1
    if area < 0:
        return -1
    return 0


def is_convex(polygon: Polygon, tol: float = 1e-9) -> bool:
    """
    Check that the cross products of consecutive edges never change sign.

    Zero-length edges and collinear turns (|cross| <= tol · |e1| · |e2|)
    are ignored. Degenerate polygons count as convex.
    """
    vertices = Polygon.coerce(polygon).vertices
    n = len(vertices)
    if n < 3:
        return True

    sign = 0
    for i in range(n):
        p0 = vertices[i]
        p1 = vertices[(i + 1) % n]
        p2 = vertices[(i + 2) % n]
        e1x, e1y = p1.x - p0.x, p1.y - p0.y
        e2x, e2y = p2.x - p1.x, p2.y - p1.y
        cross = e1x * e2y - e1y * e2x
        scale = np.hypot(e1x, e1y) * np.hypot(e2x, e2y)
        if abs(cross) <= tol * max(scale, 1.0):
            continue
        turn = 1 if cross > 0 else -1
        if sign == 0:
            sign = turn
        elif turn != sign:
            return False
    return True


def point_in_polygon(point: PointLike, polygon: Polygon, tol: float = 1e-9) -> bool:
    """
    Test whether a point lies in a convex polygon.

    The point is accepted when its signed distance to every edge line is
    at least -tol, so a positive tol includes the boundary and a
    negative tol asks for strict interior with a margin of |tol|.
    Degenerate polygons contain nothing.
    """
    p = Point.coerce(point)
    vertices = Polygon.coerce(polygon).vertices
    orientation = _orientation(Polygon(vertices))
    if len(vertices) < 3 or orientation == 0:
        return False

    n = len(vertices)
    for i in range(n):
        v0 = vertices[i]
        v1 = vertices[(i + 1) % n]
        ex, ey = v1.x - v0.x, v1.y - v0.y
        length = np.hypot(ex, ey)
        if length == 0:
            continue
        distance = orientation * (ex * (p.y - v0.y) - ey * (p.x - v0.x)) / length
        if distance < -tol:
            return False
    return True


def edge_half_planes(polygon: Polygon) -> List[HalfPlane]:
    """
    Half-planes whose intersection is the given convex polygon.

    Each edge contributes the half-plane on the polygon's interior side,
    whichever way the polygon is wound.
    """
    vertices = Polygon.coerce(polygon).vertices
    orientation = _orientation(Polygon(vertices))
    if orientation == 0:
        return []

    planes = []
    n = len(vertices)
    for i in range(n):
        v0 = vertices[i]
        v1 = vertices[(i + 1) % n]
        dx, dy = v1.x - v0.x, v1.y - v0.y
        if dx == 0 and dy == 0:
            continue
        a = -dy * orientation
        b = dx * orientation
        c = -(a * v0.x + b * v0.y)
        planes.append(HalfPlane(a, b, c))
    return planes


def convex_intersection(first: Polygon, second: Polygon) -> Polygon:
    """Intersection of two convex polygons, by clipping first to second's edges."""
    return clip_polygon_by_half_planes(first, edge_half_planes(second))


def nearest_site_indices(
    points: Union[np.ndarray, Sequence[PointLike]],
    sites: Union[np.ndarray, Sequence[PointLike]]
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Index of and distance to the nearest site for every query point.

    Args:
        points: Array of shape (m, 2) or sequence of points
        sites: Array of shape (n, 2) or sequence of points, n >= 1

    Returns:
        Tuple of (indices, distances), each of shape (m,)

    Complexity:
        O(n log n) to build the tree, O(m log n) for the queries
    """
    point_array = _as_array(points)
    site_array = _as_array(sites)
    if len(site_array) == 0:
        raise ValueError("At least one site is required for nearest-site queries")
    if len(point_array) == 0:
        return np.array([], dtype=np.int64), np.array([], dtype=np.float64)

    tree = cKDTree(site_array)
    distances, indices = tree.query(point_array, k=1)
    return np.asarray(indices, dtype=np.int64), np.asarray(distances, dtype=np.float64)


def _as_array(points) -> np.ndarray:
    if isinstance(points, np.ndarray):
        return np.asarray(points, dtype=np.float64).reshape(-1, 2)
    coords = [Point.coerce(p).as_tuple() for p in points]
    if not coords:
        return np.empty((0, 2), dtype=np.float64)
    return np.array(coords, dtype=np.float64)


def validate_bounding_region(region: Polygon, tol: float = 1e-9) -> Polygon:
    """
    Check that region is a convex polygon with at least 3 vertices and
    positive area.

    Returns:
        The region, coerced to a Polygon

    Raises:
        InvalidBoundingRegionError: If any of the conditions fails
    """
    region = Polygon.coerce(region)
    if len(region) < 3:
        raise InvalidBoundingRegionError(
            f"Bounding region needs at least 3 vertices, got {len(region)}"
        )
    if polygon_area(region) <= tol:
        raise InvalidBoundingRegionError("Bounding region has zero area")
    if not is_convex(region, tol):
        raise InvalidBoundingRegionError("Bounding region is not convex")
    return region


@dataclass
class DiagramReport:
    """
    Outcome of validate_diagram.

    Attributes:
        region_area: Area of the bounding region
        total_cell_area: Sum of cell areas
        empty_cells: Indices of cells with no area
        non_convex_cells: Indices of cells that fail the convexity check
        uncontained_sites: Sites (inside the region) missing from their own cell
        foreign_sites: (cell_index, site_index) pairs where another site lies
            strictly inside the cell
        ownership_violations: Cells whose centroid is nearer another site
        overlapping_pairs: (i, j) pairs of cells sharing positive area
    """
    region_area: float
    total_cell_area: float
    empty_cells: List[int] = field(default_factory=list)
    non_convex_cells: List[int] = field(default_factory=list)
    uncontained_sites: List[int] = field(default_factory=list)
    foreign_sites: List[Tuple[int, int]] = field(default_factory=list)
    ownership_violations: List[int] = field(default_factory=list)
    overlapping_pairs: List[Tuple[int, int]] = field(default_factory=list)
    area_rtol: float = 1e-6

    @property
    def area_error(self) -> float:
        """Relative difference between total cell area and region area."""
        if self.region_area == 0:
            return 0.0 if self.total_cell_area == 0 else float('inf')
        return abs(self.total_cell_area - self.region_area) / self.region_area

    @property
    def is_valid(self) -> bool:
        return (
            self.area_error <= self.area_rtol
            and not self.non_convex_cells
            and not self.uncontained_sites
            and not self.foreign_sites
            and not self.ownership_violations
            and not self.overlapping_pairs
        )

    def summary(self) -> str:
        """Generate human-readable summary."""
        lines = [
            "Diagram Validation Report",
            "=" * 40,
            f"Region area:        {self.region_area:.6f}",
            f"Total cell area:    {self.total_cell_area:.6f}",
            f"Relative error:     {self.area_error:.2e}",
            f"Empty cells:        {len(self.empty_cells)}",
            f"Non-convex cells:   {len(self.non_convex_cells)}",
            f"Uncontained sites:  {len(self.uncontained_sites)}",
            f"Foreign sites:      {len(self.foreign_sites)}",
            f"Ownership errors:   {len(self.ownership_violations)}",
            f"Overlapping pairs:  {len(self.overlapping_pairs)}",
            "-" * 40,
            f"Valid: {self.is_valid}"
        ]
        return "\n".join(lines)


def validate_diagram(
    sites: Sequence[PointLike],
    bounding_region: Polygon,
    cells: Sequence[Polygon],
    tol: float = 1e-7,
    area_rtol: float = 1e-6,
    check_overlaps: bool = False
) -> DiagramReport:
    """
    Verify the Voronoi properties of a computed diagram.

    Args:
        sites: Generator points, aligned with cells
        bounding_region: Region the cells were clipped into
        cells: Computed cells
        tol: Distance tolerance for containment and ownership checks
        area_rtol: Relative tolerance for the partition check
        check_overlaps: Also test every pair of cells for shared area

    Returns:
        DiagramReport describing every violation found

    Complexity:
        O(n² · h) without the overlap check, O(n² · h²) with it
    """
    site_points = [Point.coerce(s) for s in sites]
    region = Polygon.coerce(bounding_region)
    cell_polygons = [Polygon.coerce(c) for c in cells]
    if len(site_points) != len(cell_polygons):
        raise ValueError(
            f"Got {len(site_points)} sites but {len(cell_polygons)} cells"
        )

    areas = [polygon_area(c) for c in cell_polygons]
    report = DiagramReport(
        region_area=polygon_area(region),
        total_cell_area=float(sum(areas)),
        area_rtol=area_rtol
    )
    if not site_points:
        return report

    for i, (site, cell) in enumerate(zip(site_points, cell_polygons)):
        if cell.is_empty or areas[i] <= tol * tol:
            report.empty_cells.append(i)
            continue
        if not is_convex(cell):
            report.non_convex_cells.append(i)
        if point_in_polygon(site, region, tol) and not point_in_polygon(site, cell, tol):
            report.uncontained_sites.append(i)
        for j, other in enumerate(site_points):
            if j != i and other != site and point_in_polygon(other, cell, -tol):
                report.foreign_sites.append((i, j))

    # A centroid nearer another site than its own generator means the cell is wrong
    non_empty = [i for i in range(len(cell_polygons)) if i not in report.empty_cells]
    if non_empty:
        centroids = [polygon_centroid(cell_polygons[i]) for i in non_empty]
        _, nearest_dist = nearest_site_indices(centroids, site_points)
        for k, i in enumerate(non_empty):
            own_dist = float(np.hypot(
                centroids[k].x - site_points[i].x,
                centroids[k].y - site_points[i].y
            ))
            if own_dist - nearest_dist[k] > tol:
                report.ownership_violations.append(i)

    if check_overlaps:
        for a_idx, i in enumerate(non_empty):
            for j in non_empty[a_idx + 1:]:
                shared = convex_intersection(cell_polygons[i], cell_polygons[j])
                if polygon_area(shared) > area_rtol * max(report.region_area, 1.0):
                    report.overlapping_pairs.append((i, j))

    return report


def shared_vertices(
    first: Polygon,
    second: Polygon,
    tol: float = 1e-7
) -> List[Point]:
    """
    Vertices of first that coincide (within tol) with a vertex of second.

    Near-duplicate results are merged, so an edge shared by two
    adjacent cells yields exactly its two endpoints.
    """
    matches: List[Point] = []
    for v in Polygon.coerce(first):
        if any(np.hypot(v.x - w.x, v.y - w.y) <= tol for w in Polygon.coerce(second)):
            if not any(np.hypot(v.x - m.x, v.y - m.y) <= tol for m in matches):
                matches.append(v)
    return matches
