"""
Geometry Module for Half-Plane Voronoi Diagrams

This module provides the computational geometry of the package:
- Half-plane clipping of convex polygons (Sutherland-Hodgman)
- Voronoi cell construction by bisector clipping
- Memoized diagram computation
- Property checks for computed diagrams
"""

from .clipping import (
    clip_polygon,
    clip_polygon_by_half_plane,
    clip_polygon_by_half_planes
)
from .voronoi_cells import (
    bisector_half_plane,
    compute_voronoi_cell,
    compute_voronoi_diagram,
    build_voronoi_diagram,
    resolve_site_owners
)
from .cache import DiagramCache, cached_voronoi_diagram
from .properties import (
    polygon_area,
    polygon_centroid,
    is_convex,
    point_in_polygon,
    validate_diagram,
    validate_bounding_region,
    DiagramReport
)

__all__ = [
    'clip_polygon',
    'clip_polygon_by_half_plane',
    'clip_polygon_by_half_planes',
    'bisector_half_plane',
    'compute_voronoi_cell',
    'compute_voronoi_diagram',
    'build_voronoi_diagram',
    'resolve_site_owners',
    'DiagramCache',
    'cached_voronoi_diagram',
    'polygon_area',
    'polygon_centroid',
    'is_convex',
    'point_in_polygon',
    'validate_diagram',
    'validate_bounding_region',
    'DiagramReport'
]
