"""
Half-Plane Voronoi

This package computes planar Voronoi diagrams for small site sets
(tens to low hundreds of sites) by intersecting half-planes: each
cell starts as a convex bounding region and is clipped by the
perpendicular bisector against every other site.

Main modules:
- data_models: Point, Polygon, HalfPlane and VoronoiDiagram value types
- config: DiagramConfig and the duplicate-site policy
- geometry: half-plane clipping, cell construction, caching, validation
- hpc: process-pool computation and timing utilities
- synthetic_data: seeded site generation and JSON persistence
"""

from .config import DiagramConfig, DuplicatePolicy
from .data_models import Point, Polygon, HalfPlane, VoronoiDiagram
from .exceptions import DuplicateSiteError, InvalidBoundingRegionError
from .geometry.clipping import clip_polygon
from .geometry.voronoi_cells import (
    compute_voronoi_cell,
    compute_voronoi_diagram,
    build_voronoi_diagram
)
from .geometry.cache import DiagramCache, cached_voronoi_diagram

__version__ = "1.0.0"

__all__ = [
    'DiagramConfig',
    'DuplicatePolicy',
    'Point',
    'Polygon',
    'HalfPlane',
    'VoronoiDiagram',
    'DuplicateSiteError',
    'InvalidBoundingRegionError',
    'clip_polygon',
    'compute_voronoi_cell',
    'compute_voronoi_diagram',
    'build_voronoi_diagram',
    'DiagramCache',
    'cached_voronoi_diagram'
]
