"""Errors raised when diagram preconditions are violated."""


class DuplicateSiteError(ValueError):
    """Two sites share the same coordinates under DuplicatePolicy.RAISE."""

    def __init__(self, first_index: int, duplicate_index: int, x: float, y: float):
        self.first_index = first_index
        self.duplicate_index = duplicate_index
        super().__init__(
            f"Site {duplicate_index} duplicates site {first_index} at ({x}, {y})"
        )


class InvalidBoundingRegionError(ValueError):
    """The bounding region is not a convex polygon with positive area."""
