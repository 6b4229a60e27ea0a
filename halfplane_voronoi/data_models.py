"""
Data Models for the Half-Plane Voronoi Package

This module defines the value types shared by every other module.
All geometric values are immutable: clipping and cell construction
always return new objects instead of editing their inputs.

Data Flow:
    Point (site)      →
    Polygon (bbox)    → HalfPlane clips → Polygon (cell) → VoronoiDiagram
"""

from dataclasses import dataclass, field
from typing import List, Dict, Tuple, Iterable, Iterator, Union, Any
import json
import math
import numpy as np


PointLike = Union["Point", Tuple[float, float], List[float]]


@dataclass(frozen=True)
class Point:
    """
    A point in the plane with finite real coordinates.

    Attributes:
        x: Horizontal coordinate
        y: Vertical coordinate

    Points compare and hash by coordinates, so two sites built
    separately at the same position are equal.
    """
    x: float
    y: float

    def __post_init__(self):
        x = float(self.x)
        y = float(self.y)
        if not (math.isfinite(x) and math.isfinite(y)):
            raise ValueError(f"Point coordinates must be finite, got ({x}, {y})")
        object.__setattr__(self, "x", x)
        object.__setattr__(self, "y", y)

    @classmethod
    def coerce(cls, value: PointLike) -> "Point":
        """Build a Point from a Point or an (x, y) pair."""
        if isinstance(value, Point):
            return value
        x, y = value
        return cls(x, y)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def as_array(self) -> np.ndarray:
        """Return coordinates as numpy array for vectorized operations."""
        return np.array([self.x, self.y], dtype=np.float64)

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary for JSON serialization."""
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Point":
        """Create from dictionary (JSON deserialization)."""
        return cls(float(data["x"]), float(data["y"]))


@dataclass(frozen=True)
class Polygon:
    """
    An ordered, implicitly closed sequence of vertices.

    An edge joins the last vertex back to the first. Fewer than three
    vertices describe a degenerate polygon with no area, which is how
    an empty Voronoi cell is represented.

    Attributes:
        vertices: Tuple of Points in winding order

    Example:
        >>> box = Polygon.rectangle(10, 10)
        >>> len(box)
        4
    """
    vertices: Tuple[Point, ...] = ()

    def __post_init__(self):
        object.__setattr__(
            self, "vertices", tuple(Point.coerce(v) for v in self.vertices)
        )

    @classmethod
    def coerce(cls, value: Union["Polygon", Iterable[PointLike]]) -> "Polygon":
        """Build a Polygon from a Polygon or any iterable of points."""
        if isinstance(value, Polygon):
            return value
        return cls(tuple(value))

    @classmethod
    def rectangle(
        cls,
        width: float,
        height: float,
        x0: float = 0.0,
        y0: float = 0.0
    ) -> "Polygon":
        """
        Axis-aligned rectangle (x0, y0)-(x0+width, y0+height).

        Vertices are listed counter-clockwise in a y-up frame,
        starting at the lower-left corner.
        """
        return cls((
            Point(x0, y0),
            Point(x0 + width, y0),
            Point(x0 + width, y0 + height),
            Point(x0, y0 + height),
        ))

    def __len__(self) -> int:
        return len(self.vertices)

    def __iter__(self) -> Iterator[Point]:
        return iter(self.vertices)

    def __getitem__(self, index: int) -> Point:
        return self.vertices[index]

    @property
    def is_empty(self) -> bool:
        """True when the polygon encloses no area (fewer than 3 vertices)."""
        return len(self.vertices) < 3

    def as_array(self) -> np.ndarray:
        """Return vertices as an (n, 2) float64 array."""
        if not self.vertices:
            return np.empty((0, 2), dtype=np.float64)
        return np.array([v.as_tuple() for v in self.vertices], dtype=np.float64)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"vertices": [v.to_dict() for v in self.vertices]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Polygon":
        """Create from dictionary (JSON deserialization)."""
        return cls(tuple(Point.from_dict(v) for v in data.get("vertices", [])))


@dataclass(frozen=True)
class HalfPlane:
    """
    The closed half-plane a·x + b·y + c >= 0.

    The boundary line itself counts as inside. When a == b == 0 the
    half-plane is degenerate: for c >= 0 it is the whole plane.
    """
    a: float
    b: float
    c: float

    def evaluate(self, point: Point) -> float:
        """Signed value of the line function at point."""
        return self.a * point.x + self.b * point.y + self.c

    def contains(self, point: Point) -> bool:
        return self.evaluate(point) >= 0

    def flipped(self) -> "HalfPlane":
        """The complementary half-plane (same boundary line)."""
        return HalfPlane(-self.a, -self.b, -self.c)

    @property
    def is_degenerate(self) -> bool:
        return self.a == 0 and self.b == 0


@dataclass
class VoronoiDiagram:
    """
    Result of a diagram computation.

    Attributes:
        sites: Generator points, in input order
        bounding_region: Convex polygon every cell was clipped into
        cells: One Polygon per site, positionally aligned with sites

    Usage:
        >>> for site, cell in diagram:
        ...     print(site, len(cell))
    """
    sites: List[Point]
    bounding_region: Polygon
    cells: List[Polygon] = field(default_factory=list)

    @property
    def num_sites(self) -> int:
        return len(self.sites)

    def cell_for(self, index: int) -> Polygon:
        """Cell generated by the site at index."""
        return self.cells[index]

    def __iter__(self) -> Iterator[Tuple[Point, Polygon]]:
        return iter(zip(self.sites, self.cells))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "sites": [s.to_dict() for s in self.sites],
            "bounding_region": self.bounding_region.to_dict(),
            "cells": [c.to_dict() for c in self.cells]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VoronoiDiagram":
        """Create from dictionary (JSON deserialization)."""
        return cls(
            sites=[Point.from_dict(s) for s in data["sites"]],
            bounding_region=Polygon.from_dict(data["bounding_region"]),
            cells=[Polygon.from_dict(c) for c in data.get("cells", [])]
        )

    def save_to_json(self, filepath: str) -> None:
        """Save diagram to JSON file."""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load_from_json(cls, filepath: str) -> "VoronoiDiagram":
        """Load diagram from JSON file."""
        with open(filepath, 'r') as f:
            data = json.load(f)
        return cls.from_dict(data)
