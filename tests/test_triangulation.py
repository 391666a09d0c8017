"""Tests for the half-edge triangulation adapter."""

import pytest
import numpy as np
from scipy.spatial import ConvexHull
from stained_glass.core.triangulation import (
    NO_NEIGHBOR, DelaunayTriangulator, Triangulation, next_halfedge, prev_halfedge
)


def _check_halfedge_contract(tri: Triangulation):
    """Opposites are an involution and run in reverse direction."""
    triangles = tri.triangles
    halfedges = tri.halfedges
    for e in range(len(triangles)):
        opposite = halfedges[e]
        if opposite == NO_NEIGHBOR:
            continue
        assert halfedges[opposite] == e
        assert triangles[opposite] == triangles[next_halfedge(e)]
        assert triangles[next_halfedge(opposite)] == triangles[e]


def _signed_areas(points, tri: Triangulation):
    t = tri.triangles.reshape(-1, 3)
    a, b, c = points[t[:, 0]], points[t[:, 1]], points[t[:, 2]]
    return (b[:, 0] - a[:, 0]) * (c[:, 1] - a[:, 1]) - (b[:, 1] - a[:, 1]) * (c[:, 0] - a[:, 0])


class TestHalfedgeNavigation:
    """Test index arithmetic within a triangle."""

    @pytest.mark.parametrize("e,nxt,prv", [
        (0, 1, 2), (1, 2, 0), (2, 0, 1),
        (3, 4, 5), (4, 5, 3), (5, 3, 4),
    ])
    def test_next_and_prev(self, e, nxt, prv):
        """Test that next/prev wrap inside their own triangle."""
        assert next_halfedge(e) == nxt
        assert prev_halfedge(e) == prv

    def test_prev_undoes_next(self):
        """Test that prev(next(e)) == e."""
        for e in range(30):
            assert prev_halfedge(next_halfedge(e)) == e


class TestTriangulation:
    """Test the container's shape validation."""

    def test_length_mismatch(self):
        """Test that triangles and halfedges must align."""
        with pytest.raises(ValueError):
            Triangulation(triangles=np.array([0, 1, 2]), halfedges=np.array([-1, -1]))

    def test_not_multiple_of_three(self):
        """Test that a partial triangle is rejected."""
        with pytest.raises(ValueError):
            Triangulation(triangles=np.array([0, 1, 2, 3]), halfedges=np.array([-1, -1, -1, -1]))

    def test_counts(self):
        """Test triangle and hull edge counts."""
        tri = Triangulation(
            triangles=np.array([0, 1, 2, 0, 2, 3]),
            halfedges=np.array([-1, -1, 3, 2, -1, -1]),
        )
        assert tri.triangle_count == 2
        assert tri.hull_edge_count == 4


class TestDelaunayTriangulator:
    """Test the scipy Delaunay adapter."""

    def test_square_with_center(self):
        """Test a fan of 4 triangles around a center point."""
        points = np.array([
            [5.0, 5.0],
            [0.0, 0.0],
            [10.0, 0.0],
            [10.0, 10.0],
            [0.0, 10.0],
        ])
        tri = DelaunayTriangulator().triangulate(points)

        assert tri.triangle_count == 4
        assert tri.hull_edge_count == 4
        assert np.count_nonzero(tri.triangles == 0) == 4
        _check_halfedge_contract(tri)

    def test_all_triangles_counter_clockwise(self):
        """Test that every output triangle has positive orientation."""
        rng = np.random.default_rng(7)
        points = rng.random((60, 2)) * 100
        tri = DelaunayTriangulator().triangulate(points)

        assert np.all(_signed_areas(points, tri) > 0)

    @pytest.mark.parametrize("seed,n", [(0, 10), (1, 50), (2, 200)])
    def test_random_points_contract(self, seed, n):
        """Test the adjacency contract on random point sets."""
        rng = np.random.default_rng(seed)
        points = rng.random((n, 2)) * 500
        tri = DelaunayTriangulator().triangulate(points)

        _check_halfedge_contract(tri)
        # One hull half-edge per convex hull edge
        assert tri.hull_edge_count == len(ConvexHull(points).vertices)
        # Every input point is used
        assert set(tri.triangles.tolist()) == set(range(n))

    def test_rejects_bad_shape(self):
        """Test that non-2D input is rejected."""
        with pytest.raises(ValueError):
            DelaunayTriangulator().triangulate(np.zeros((5, 3)))
