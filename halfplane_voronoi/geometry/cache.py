"""
Memoized diagram computation.

A diagram is a pure function of (sites, bounding region, config), so
callers that redraw often can reuse the last result until an input
actually changes. Keys are built from coordinate tuples, which makes
equal inputs share an entry even when they are different objects.
"""

from collections import OrderedDict
from typing import Hashable, Iterable, Optional, Sequence, Tuple, Union

import structlog

from ..config import DiagramConfig
from ..data_models import Point, Polygon, PointLike
from .voronoi_cells import compute_voronoi_diagram

logger = structlog.get_logger(__name__)

DiagramKey = Tuple[Tuple[Tuple[float, float], ...], Tuple[Tuple[float, float], ...], Hashable]


def diagram_key(
    sites: Sequence[PointLike],
    bounding_region: Union[Polygon, Iterable[PointLike]],
    config: Optional[DiagramConfig] = None
) -> DiagramKey:
    """Structural key for a diagram computation."""
    site_key = tuple(Point.coerce(s).as_tuple() for s in sites)
    region_key = tuple(v.as_tuple() for v in Polygon.coerce(bounding_region))
    return (site_key, region_key, config or DiagramConfig())


class DiagramCache:
    """
    Least-recently-used cache of computed diagrams.

    Results are stored and returned as tuples of immutable Polygons,
    so a cached diagram cannot be changed by the caller.

    Example:
        >>> cache = DiagramCache(maxsize=4)
        >>> cells = cache.get(sites, box)      # computed
        >>> cells = cache.get(sites, box)      # reused
        >>> cache.hits, cache.misses
        (1, 1)
    """

    def __init__(self, maxsize: int = 32, config: Optional[DiagramConfig] = None):
        """
        Initialize cache.

        Args:
            maxsize: Maximum number of diagrams kept
            config: Config used when get() is called without one
        """
        if maxsize < 1:
            raise ValueError(f"maxsize must be at least 1, got {maxsize}")
        self.maxsize = maxsize
        self.config = config or DiagramConfig()
        self._entries: "OrderedDict[DiagramKey, Tuple[Polygon, ...]]" = OrderedDict()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: DiagramKey) -> bool:
        return key in self._entries

    def get(
        self,
        sites: Sequence[PointLike],
        bounding_region: Union[Polygon, Iterable[PointLike]],
        config: Optional[DiagramConfig] = None
    ) -> Tuple[Polygon, ...]:
        """Return the cached diagram for these inputs, computing it on a miss."""
        config = config or self.config
        key = diagram_key(sites, bounding_region, config)

        if key in self._entries:
            self.hits += 1
            self._entries.move_to_end(key)
            return self._entries[key]

        self.misses += 1
        cells = tuple(compute_voronoi_diagram(sites, bounding_region, config))
        self._entries[key] = cells
        if len(self._entries) > self.maxsize:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("diagram_cache_evicted", num_sites=len(evicted[0]))
        return cells

    def invalidate(self) -> None:
        """Drop every cached diagram and reset the counters."""
        self._entries.clear()
        self.hits = 0
        self.misses = 0


_default_cache = DiagramCache()


def cached_voronoi_diagram(
    sites: Sequence[PointLike],
    bounding_region: Union[Polygon, Iterable[PointLike]],
    config: Optional[DiagramConfig] = None
) -> Tuple[Polygon, ...]:
    """compute_voronoi_diagram through a process-wide DiagramCache."""
    return _default_cache.get(sites, bounding_region, config)
