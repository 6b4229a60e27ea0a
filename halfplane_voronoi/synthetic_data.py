"""
Synthetic Site Generator for Voronoi Diagrams

This module generates site sets and bounding regions for demos, tests
and benchmarks. The randomness source is always an explicit
numpy.random.Generator, either passed in or built from a seed, so every
generated diagram is reproducible.

Key Features:
- Uniform random sites inside a rectangle
- Jittered grid sites (even coverage without visible regularity)
- JSON export and import of (sites, bounding region) pairs

Example Usage:
    >>> from halfplane_voronoi.synthetic_data import generate_scenario
    >>> sites, box = generate_scenario(count=20, width=800, height=600, seed=42)
    >>> save_sites_to_json(sites, box, "data/sites.json")
"""

import json
from pathlib import Path
from typing import List, Tuple, Optional, Sequence

import numpy as np

from .data_models import Point, Polygon


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Create a seedable random generator."""
    return np.random.default_rng(seed)


def _resolve_rng(rng: Optional[np.random.Generator], seed: Optional[int]) -> np.random.Generator:
    if rng is not None and seed is not None:
        raise ValueError("Pass either rng or seed, not both")
    if rng is not None:
        return rng
    return make_rng(seed)


def generate_random_sites(
    count: int,
    width: float,
    height: float,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
    margin: float = 0.0
) -> List[Point]:
    """
    Generate uniformly distributed sites in a rectangle.

    Args:
        count: Number of sites
        width: Rectangle width
        height: Rectangle height
        rng: Random generator to draw from
        seed: Seed for a fresh generator when rng is not given
        margin: Keep sites at least this far from the rectangle edges

    Returns:
        List of count Points in [margin, width - margin] × [margin, height - margin]

    Complexity:
        Time: O(count)
    """
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    if width <= 2 * margin or height <= 2 * margin:
        raise ValueError("Rectangle is too small for the requested margin")

    rng = _resolve_rng(rng, seed)
    xs = rng.uniform(margin, width - margin, size=count)
    ys = rng.uniform(margin, height - margin, size=count)
    return [Point(x, y) for x, y in zip(xs, ys)]


def generate_jittered_grid_sites(
    width: float,
    height: float,
    spacing: float,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
    jitter: float = 0.5
) -> List[Point]:
    """
    Generate one site per grid square, displaced randomly within it.

    Args:
        width: Rectangle width
        height: Rectangle height
        spacing: Grid square size
        rng: Random generator to draw from
        seed: Seed for a fresh generator when rng is not given
        jitter: Displacement as a fraction of spacing (0 gives a regular grid,
            values up to 0.5 keep each site inside its square)

    Returns:
        List of Points, row by row from the lower-left corner
    """
    if spacing <= 0:
        raise ValueError(f"spacing must be positive, got {spacing}")
    if not 0.0 <= jitter <= 0.5:
        raise ValueError(f"jitter must be in [0, 0.5], got {jitter}")

    rng = _resolve_rng(rng, seed)
    cols = max(1, int(width // spacing))
    rows = max(1, int(height // spacing))
    radius = jitter * spacing

    sites = []
    for row in range(rows):
        for col in range(cols):
            cx = (col + 0.5) * spacing
            cy = (row + 0.5) * spacing
            dx, dy = rng.uniform(-radius, radius, size=2) if radius > 0 else (0.0, 0.0)
            sites.append(Point(min(max(cx + dx, 0.0), width), min(max(cy + dy, 0.0), height)))
    return sites


def generate_scenario(
    count: int = 20,
    width: float = 800.0,
    height: float = 600.0,
    seed: Optional[int] = None,
    layout: str = "random",
    spacing: Optional[float] = None
) -> Tuple[List[Point], Polygon]:
    """
    Generate sites and their rectangular bounding region.

    Args:
        count: Number of sites for the random layout
        width: Region width
        height: Region height
        seed: Random seed for reproducibility
        layout: "random" or "grid"
        spacing: Grid spacing for the grid layout; derived from count
            when omitted

    Returns:
        Tuple of (sites, bounding rectangle)
    """
    rng = make_rng(seed)
    if layout == "random":
        sites = generate_random_sites(count, width, height, rng=rng)
    elif layout == "grid":
        if spacing is None:
            spacing = float(np.sqrt(width * height / max(count, 1)))
        sites = generate_jittered_grid_sites(width, height, spacing, rng=rng)
    else:
        raise ValueError(f"Unknown layout: {layout}")
    return sites, Polygon.rectangle(width, height)


def save_sites_to_json(
    sites: Sequence[Point],
    bounding_region: Polygon,
    filepath: str
) -> str:
    """
    Save a site set and its bounding region to JSON.

    Returns:
        str: Path of the written file
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = {
        "sites": [Point.coerce(s).to_dict() for s in sites],
        "bounding_region": Polygon.coerce(bounding_region).to_dict()
    }
    with open(path, 'w') as f:
        json.dump(data, f, indent=2)
    return str(path)


def load_sites_from_json(filepath: str) -> Tuple[List[Point], Polygon]:
    """
    Load a site set and bounding region from JSON.

    Diagram files written by VoronoiDiagram.save_to_json are accepted;
    their cells are ignored.
    """
    with open(filepath, 'r') as f:
        data = json.load(f)
    sites = [Point.from_dict(s) for s in data["sites"]]
    region = Polygon.from_dict(data["bounding_region"])
    return sites, region
