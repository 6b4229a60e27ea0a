"""
Half-Plane Polygon Clipping

This module clips a convex polygon against a single closed half-plane
a·x + b·y + c >= 0. It is the single-plane variant of the
Sutherland-Hodgman algorithm and the only numerical kernel in the
package: every Voronoi cell is produced by repeated calls to it.

Algorithm:
    Walk every edge (curr, next) of the polygon, wrapping from the
    last vertex back to the first.

    1. If curr is inside, keep it.
    2. If curr and next lie strictly on opposite sides of the boundary
       line, keep the point where the edge crosses the line. A vertex
       lying on the line is kept once, by step 1, and never again as
       a crossing point.

    The crossing parameter along the edge is

        t = f(curr) / (f(curr) - f(next)),   f(p) = a·p.x + b·p.y + c

    which equals -f(curr) / (a·dx + b·dy). The side test runs before
    the division, and the division only happens when one of f(curr),
    f(next) is > 0 and the other < 0, so the denominator is never zero.

Complexity:
    O(h) time and space for a polygon with h vertices.

Reference:
    Sutherland, I. E., & Hodgman, G. W. (1974). Reentrant polygon
    clipping. Communications of the ACM, 17(1), 32-42.
"""

from typing import List, Union, Iterable

from ..data_models import Point, Polygon, HalfPlane, PointLike


def clip_polygon(
    polygon: Union[Polygon, Iterable[PointLike]],
    a: float,
    b: float,
    c: float
) -> Polygon:
    """
    Clip a convex polygon to the half-plane a·x + b·y + c >= 0.

    Args:
        polygon: Convex polygon (or sequence of points) to clip
        a, b, c: Coefficients of the boundary line

    Returns:
        Polygon: The clipped polygon. It is empty when the input lies
        entirely outside, and has the input's vertices unchanged when
        the input lies entirely inside or on the boundary.

    Example:
        >>> box = Polygon.rectangle(10, 10)
        >>> clip_polygon(box, -1.0, 0.0, 5.0).vertices   # keep x <= 5
        (Point(x=0.0, y=0.0), Point(x=5.0, y=0.0), Point(x=5.0, y=10.0), Point(x=0.0, y=10.0))
    """
    vertices = Polygon.coerce(polygon).vertices
    n = len(vertices)
    if n == 0:
        return Polygon()

    clipped: List[Point] = []
    for i in range(n):
        curr = vertices[i]
        nxt = vertices[(i + 1) % n]

        curr_value = a * curr.x + b * curr.y + c
        next_value = a * nxt.x + b * nxt.y + c
        if curr_value >= 0:
            clipped.append(curr)

        # Strict crossings only: an endpoint on the line is emitted as
        # itself, and the denominator is non-zero
        if (curr_value > 0 and next_value < 0) or (curr_value < 0 and next_value > 0):
            t = curr_value / (curr_value - next_value)
            clipped.append(Point(
                curr.x + t * (nxt.x - curr.x),
                curr.y + t * (nxt.y - curr.y)
            ))

    return Polygon(tuple(clipped))


def clip_polygon_by_half_plane(
    polygon: Union[Polygon, Iterable[PointLike]],
    half_plane: HalfPlane
) -> Polygon:
    """Clip polygon to a HalfPlane. See clip_polygon."""
    return clip_polygon(polygon, half_plane.a, half_plane.b, half_plane.c)


def clip_polygon_by_half_planes(
    polygon: Union[Polygon, Iterable[PointLike]],
    half_planes: Iterable[HalfPlane]
) -> Polygon:
    """
    Intersect polygon with several half-planes in sequence.

    Stops early once the running polygon is empty, since clipping an
    empty polygon can only give an empty polygon.
    """
    result = Polygon.coerce(polygon)
    for half_plane in half_planes:
        if not result.vertices:
            break
        result = clip_polygon_by_half_plane(result, half_plane)
    return result
