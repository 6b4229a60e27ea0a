"""
Configuration for diagram computation.

DiagramConfig collects the knobs that change how a diagram is built.
It is frozen so it can take part in cache keys.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any


class DuplicatePolicy(Enum):
    """How coincident sites are handled."""
    FIRST = "first"    # First occurrence owns the cell, later copies get an empty cell
    ALLOW = "allow"    # Degenerate bisector is a no-op, copies share overlapping cells
    RAISE = "raise"    # Reject with DuplicateSiteError


@dataclass(frozen=True)
class DiagramConfig:
    """
    Options for compute_voronoi_diagram and its wrappers.

    Attributes:
        tolerance: Absolute tolerance used by geometric checks
        on_duplicate: Policy for coincident sites
        validate_bounding_region: Check that the region is convex with
            at least 3 vertices before computing
        parallel_threshold: Minimum site count before the process pool
            is used by parallel_voronoi_diagram
    """
    tolerance: float = 1e-9
    on_duplicate: DuplicatePolicy = DuplicatePolicy.FIRST
    validate_bounding_region: bool = False
    parallel_threshold: int = 64

    def __post_init__(self):
        if self.tolerance < 0:
            raise ValueError(f"tolerance must be non-negative, got {self.tolerance}")
        if self.parallel_threshold < 1:
            raise ValueError(
                f"parallel_threshold must be at least 1, got {self.parallel_threshold}"
            )
        if not isinstance(self.on_duplicate, DuplicatePolicy):
            object.__setattr__(self, "on_duplicate", DuplicatePolicy(self.on_duplicate))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "tolerance": self.tolerance,
            "on_duplicate": self.on_duplicate.value,
            "validate_bounding_region": self.validate_bounding_region,
            "parallel_threshold": self.parallel_threshold
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DiagramConfig":
        """Create from dictionary, falling back to defaults for missing keys."""
        defaults = cls()
        return cls(
            tolerance=float(data.get("tolerance", defaults.tolerance)),
            on_duplicate=DuplicatePolicy(
                data.get("on_duplicate", defaults.on_duplicate.value)
            ),
            validate_bounding_region=bool(
                data.get("validate_bounding_region", defaults.validate_bounding_region)
            ),
            parallel_threshold=int(
                data.get("parallel_threshold", defaults.parallel_threshold)
            )
        )
