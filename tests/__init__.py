"""
Test Suite for Half-Plane Voronoi

This package contains unit tests and integration tests for:
- Half-plane clipping correctness
- Voronoi cell construction and diagram properties
- Caching, parallel computation and site generation
- The command-line interface

Run tests with: pytest -v
"""
