"""
Tests for Voronoi Cell Construction

This module tests the bisector math and the diagram builder, checking
the properties every bounded Voronoi diagram must have.

Test Categories:
1. Bisector half-planes
2. Concrete scenarios (one site, two sites, three sites)
3. Partition, convexity and containment on random inputs
4. Order independence
5. Duplicate sites and precondition checks

Key property: a cell is the bounding region intersected with the
half-planes "closer to this site than to that one".

Run with: pytest tests/test_voronoi_cells.py -v
"""

import pytest
import numpy as np

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from halfplane_voronoi.config import DiagramConfig, DuplicatePolicy
from halfplane_voronoi.data_models import Point, Polygon, HalfPlane, VoronoiDiagram
from halfplane_voronoi.exceptions import DuplicateSiteError, InvalidBoundingRegionError
from halfplane_voronoi.geometry.voronoi_cells import (
    bisector_half_plane,
    compute_voronoi_cell,
    compute_voronoi_diagram,
    build_voronoi_diagram,
    resolve_site_owners
)
from halfplane_voronoi.geometry.properties import (
    polygon_area,
    is_convex,
    point_in_polygon,
    convex_intersection,
    shared_vertices,
    validate_diagram
)
from halfplane_voronoi.synthetic_data import generate_random_sites


BOX = Polygon.rectangle(10, 10)


def _same_region(first: Polygon, second: Polygon, tol: float = 1e-7) -> bool:
    """Two convex polygons cover the same region if each contains the other's vertices."""
    return (
        all(point_in_polygon(v, second, tol) for v in first)
        and all(point_in_polygon(v, first, tol) for v in second)
        and polygon_area(first) == pytest.approx(polygon_area(second), rel=1e-9, abs=1e-9)
    )


class TestBisector:
    """Tests for bisector half-plane derivation."""

    def test_vertical_bisector(self):
        """Test sites (0, 5) and (10, 5) give the line x = 5, kept side x <= 5."""
        plane = bisector_half_plane((0, 5), (10, 5))

        assert plane == HalfPlane(-20.0, 0.0, 100.0)

    def test_keeps_site_side(self):
        """Test the site is always on the kept side and the other is not."""
        rng = np.random.default_rng(3)
        for _ in range(100):
            p = Point(*rng.uniform(-50, 50, size=2))
            q = Point(*rng.uniform(-50, 50, size=2))

            plane = bisector_half_plane(p, q)

            assert plane.contains(p)
            assert plane.evaluate(q) < 0

    def test_midpoint_on_boundary(self):
        """Test the midpoint of the two sites lies on the bisector."""
        p, q = Point(1, 2), Point(7, -4)
        mid = Point((p.x + q.x) / 2, (p.y + q.y) / 2)

        assert bisector_half_plane(p, q).evaluate(mid) == pytest.approx(0.0, abs=1e-12)

    def test_swapped_sites_flip(self):
        """Test swapping the sites gives the complementary half-plane."""
        forward = bisector_half_plane((1, 2), (4, 6))
        backward = bisector_half_plane((4, 6), (1, 2))

        assert backward.a == pytest.approx(-forward.a)
        assert backward.b == pytest.approx(-forward.b)
        assert backward.c == pytest.approx(-forward.c)

    def test_coincident_sites_degenerate(self):
        """Test coincident sites give the degenerate half-plane 0 >= 0."""
        plane = bisector_half_plane((3, 3), (3, 3))

        assert plane.is_degenerate
        assert plane.contains(Point(100, -100))


class TestConcreteScenarios:
    """Tests with hand-checked diagrams."""

    def test_single_site_returns_box(self):
        """Test one site inside the box gets exactly the box."""
        cells = compute_voronoi_diagram([(5, 5)], BOX)

        assert cells == [BOX]

    def test_single_site_outside_box(self):
        """Test one site outside the box still gets exactly the box."""
        cells = compute_voronoi_diagram([(50, -20)], BOX)

        assert cells == [BOX]

    def test_two_sites_split(self):
        """Test two sites split the box along x = 5."""
        cells = compute_voronoi_diagram([(0, 5), (10, 5)], BOX)

        assert len(cells) == 2
        assert _same_region(cells[0], Polygon([(0, 0), (5, 0), (5, 10), (0, 10)]))
        assert _same_region(cells[1], Polygon([(5, 0), (10, 0), (10, 10), (5, 10)]))

    def test_three_sites_meet_at_one_point(self):
        """Test three cells meet at the circumcenter of their sites."""
        sites = [Point(3, 3), Point(7, 3), Point(5, 6.5)]
        circumcenter = Point(5.0, 29.25 / 7.0)

        cells = compute_voronoi_diagram(sites, BOX)

        shared = {}
        for i, j in [(0, 1), (0, 2), (1, 2)]:
            shared[(i, j)] = shared_vertices(cells[i], cells[j])
            assert len(shared[(i, j)]) == 2

        for pair_vertices in shared.values():
            distances = [np.hypot(v.x - circumcenter.x, v.y - circumcenter.y)
                         for v in pair_vertices]
            assert min(distances) < 1e-9

    def test_empty_sites(self):
        """Test no sites gives no cells."""
        assert compute_voronoi_diagram([], BOX) == []

    def test_site_outside_box_collapses(self):
        """Test a site outside the box on the far side of the bisector gets no area."""
        cells = compute_voronoi_diagram([(-5, 5), (5, 5)], BOX)

        assert polygon_area(cells[0]) == pytest.approx(0.0)
        assert polygon_area(cells[1]) == pytest.approx(100.0)


class TestDiagramProperties:
    """Tests of partition, convexity and containment on random sites."""

    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_partition(self, seed):
        """Test cell areas sum to the box area."""
        sites = generate_random_sites(30, 10, 10, seed=seed, margin=0.1)

        cells = compute_voronoi_diagram(sites, BOX)

        total = sum(polygon_area(c) for c in cells)
        assert total == pytest.approx(100.0, rel=1e-6)

    def test_convexity(self):
        """Test every cell is convex."""
        sites = generate_random_sites(40, 10, 10, seed=5)

        cells = compute_voronoi_diagram(sites, BOX)

        assert all(is_convex(c) for c in cells)

    def test_containment(self):
        """Test each site is in its own cell and strictly inside no other."""
        sites = generate_random_sites(25, 10, 10, seed=8)

        cells = compute_voronoi_diagram(sites, BOX)

        for i, cell in enumerate(cells):
            assert point_in_polygon(sites[i], cell)
            for j, other in enumerate(sites):
                if j != i:
                    assert not point_in_polygon(other, cell, tol=-1e-9)

    def test_full_validation(self):
        """Test the combined validator reports no violations, overlaps included."""
        sites = generate_random_sites(15, 10, 10, seed=21, margin=0.5)

        cells = compute_voronoi_diagram(sites, BOX)
        report = validate_diagram(sites, BOX, cells, check_overlaps=True)

        assert report.is_valid, report.summary()

    def test_no_pairwise_overlap(self):
        """Test neighboring cells share at most an edge."""
        sites = generate_random_sites(10, 10, 10, seed=4)

        cells = compute_voronoi_diagram(sites, BOX)

        for i in range(len(cells)):
            for j in range(i + 1, len(cells)):
                assert polygon_area(convex_intersection(cells[i], cells[j])) < 1e-9

    def test_non_rectangular_region(self):
        """Test a convex hexagonal region is tiled exactly."""
        hexagon = Polygon([
            (5 + 5 * np.cos(k * np.pi / 3), 5 + 5 * np.sin(k * np.pi / 3))
            for k in range(6)
        ])
        sites = generate_random_sites(20, 10, 10, seed=9)
        inside = [s for s in sites if point_in_polygon(s, hexagon, tol=-1e-6)]

        cells = compute_voronoi_diagram(inside, hexagon)

        total = sum(polygon_area(c) for c in cells)
        assert total == pytest.approx(polygon_area(hexagon), rel=1e-6)

    def test_output_aligned_with_input(self):
        """Test cell i belongs to site i."""
        sites = [(1, 1), (9, 9), (1, 9), (9, 1)]

        cells = compute_voronoi_diagram(sites, BOX)

        for site, cell in zip(sites, cells):
            assert point_in_polygon(site, cell)
            assert polygon_area(cell) == pytest.approx(25.0)


class TestOrderIndependence:
    """Tests that clipping order does not change the cell."""

    def test_permuted_others(self):
        """Test permuting the other sites yields the same cell."""
        rng = np.random.default_rng(12)
        sites = generate_random_sites(20, 10, 10, rng=rng)
        site = sites[0]

        reference = compute_voronoi_cell(site, sites, BOX)
        for _ in range(5):
            order = rng.permutation(len(sites))
            shuffled = [sites[k] for k in order]

            assert _same_region(compute_voronoi_cell(site, shuffled, BOX), reference)

    def test_skip_by_equality(self):
        """Test the site itself is skipped when no index is given."""
        cell = compute_voronoi_cell((0, 5), [(0, 5), (10, 5)], BOX)

        assert _same_region(cell, Polygon([(0, 0), (5, 0), (5, 10), (0, 10)]))

    def test_skip_by_index(self):
        """Test skip_index matches skip-by-equality for distinct sites."""
        sites = [Point(2, 3), Point(6, 7), Point(8, 1)]

        by_index = compute_voronoi_cell(sites[1], sites, BOX, skip_index=1)
        by_value = compute_voronoi_cell(sites[1], sites, BOX)

        assert by_index == by_value


class TestDuplicateSites:
    """Tests for each duplicate-site policy."""

    SITES = [(2, 2), (2, 2), (8, 8)]

    def test_first_policy_default(self):
        """Test the first copy owns the cell and later copies are empty."""
        cells = compute_voronoi_diagram(self.SITES, BOX)

        assert not cells[0].is_empty
        assert cells[1] == Polygon()
        report = validate_diagram(self.SITES, BOX, cells, check_overlaps=True)
        assert report.is_valid
        assert report.empty_cells == [1]

    def test_allow_policy_overlaps(self):
        """Test copies share identical cells under ALLOW."""
        config = DiagramConfig(on_duplicate=DuplicatePolicy.ALLOW)

        cells = compute_voronoi_diagram(self.SITES, BOX, config)

        assert cells[0] == cells[1]
        total = sum(polygon_area(c) for c in cells)
        assert total > 100.0

    def test_raise_policy(self):
        """Test RAISE rejects the duplicate and names both indices."""
        config = DiagramConfig(on_duplicate=DuplicatePolicy.RAISE)

        with pytest.raises(DuplicateSiteError) as exc_info:
            compute_voronoi_diagram(self.SITES, BOX, config)

        assert exc_info.value.first_index == 0
        assert exc_info.value.duplicate_index == 1
        assert isinstance(exc_info.value, ValueError)

    def test_resolve_owners(self):
        """Test owner mapping for each policy."""
        sites = [Point(0, 0), Point(1, 1), Point(0, 0), Point(1, 1)]

        assert resolve_site_owners(sites, DuplicatePolicy.FIRST) == [0, 1, 0, 1]
        assert resolve_site_owners(sites, DuplicatePolicy.ALLOW) == [0, 1, 2, 3]


class TestPreconditions:
    """Tests for optional bounding region validation."""

    def test_unchecked_by_default(self):
        """Test a bad region is not rejected unless validation is enabled."""
        cells = compute_voronoi_diagram([(1, 1)], [(0, 0), (1, 1)])

        assert len(cells) == 1

    def test_too_few_vertices(self):
        """Test a two-vertex region is rejected when validated."""
        config = DiagramConfig(validate_bounding_region=True)

        with pytest.raises(InvalidBoundingRegionError):
            compute_voronoi_diagram([(1, 1)], [(0, 0), (1, 1)], config)

    def test_non_convex_region(self):
        """Test an L-shaped region is rejected when validated."""
        l_shape = [(0, 0), (10, 0), (10, 5), (5, 5), (5, 10), (0, 10)]
        config = DiagramConfig(validate_bounding_region=True)

        with pytest.raises(InvalidBoundingRegionError):
            compute_voronoi_diagram([(1, 1)], l_shape, config)


class TestBuildDiagram:
    """Tests for the VoronoiDiagram wrapper."""

    def test_wrapper_fields(self):
        """Test the wrapper keeps sites, region and cells aligned."""
        diagram = build_voronoi_diagram([(0, 5), (10, 5)], BOX)

        assert isinstance(diagram, VoronoiDiagram)
        assert diagram.num_sites == 2
        assert diagram.bounding_region == BOX
        assert diagram.cell_for(1) == diagram.cells[1]
        assert [site for site, _ in diagram] == [Point(0, 5), Point(10, 5)]

    def test_json_round_trip(self, tmp_path):
        """Test a saved diagram loads back equal."""
        diagram = build_voronoi_diagram(generate_random_sites(6, 10, 10, seed=2), BOX)
        path = tmp_path / "diagram.json"

        diagram.save_to_json(str(path))
        loaded = VoronoiDiagram.load_from_json(str(path))

        assert loaded.sites == diagram.sites
        assert loaded.cells == diagram.cells
        assert loaded.bounding_region == diagram.bounding_region


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
