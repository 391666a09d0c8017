"""
Triangulation adapter for Voronoi cell reconstruction.

The cell builder only needs a flat half-edge view of a triangulation:

- ``triangles[3t:3t+3]`` are the point indices of triangle ``t``
- half-edge ``e`` runs from ``triangles[e]`` to ``triangles[next_halfedge(e)]``
- ``halfedges[e]`` is the opposite half-edge in the neighbouring triangle,
  or ``NO_NEIGHBOR`` on the convex hull

Any triangulator that produces this form can be plugged in. The default
adapter converts scipy's Qhull-based Delaunay output.
"""

from dataclasses import dataclass
from typing import Protocol

import numpy as np
import structlog
from scipy.spatial import Delaunay

logger = structlog.get_logger()

NO_NEIGHBOR = -1


def next_halfedge(e: int) -> int:
    """Next half-edge within the same triangle."""
    return e - 2 if e % 3 == 2 else e + 1


def prev_halfedge(e: int) -> int:
    """Previous half-edge within the same triangle."""
    return e + 2 if e % 3 == 0 else e - 1


@dataclass(frozen=True)
class Triangulation:
    """Flat triangle list plus half-edge adjacency."""
    triangles: np.ndarray  # (3T,) point indices
    halfedges: np.ndarray  # (3T,) opposite half-edge or NO_NEIGHBOR

    def __post_init__(self):
        if len(self.triangles) != len(self.halfedges):
            raise ValueError(
                f"triangles and halfedges differ in length: "
                f"{len(self.triangles)} vs {len(self.halfedges)}"
            )
        if len(self.triangles) % 3 != 0:
            raise ValueError("triangles length must be a multiple of 3")

    @property
    def triangle_count(self) -> int:
        return len(self.triangles) // 3

    @property
    def hull_edge_count(self) -> int:
        return int(np.count_nonzero(self.halfedges == NO_NEIGHBOR))


class Triangulator(Protocol):
    """Anything that can triangulate a point set into half-edge form."""

    def triangulate(self, points: np.ndarray) -> Triangulation:
        ...


class DelaunayTriangulator:
    """
    Adapter from scipy.spatial.Delaunay to the half-edge form.

    Qhull does not guarantee a consistent winding, so every simplex is first
    turned counter-clockwise (swapping its neighbour slots along with its
    vertices). With a consistent winding, the opposite of a half-edge a->b
    is the half-edge b->a of the neighbouring triangle.
    """

    def triangulate(self, points: np.ndarray) -> Triangulation:
        points = np.asarray(points, dtype=np.float64)
        if points.ndim != 2 or points.shape[1] != 2:
            raise ValueError("points must be (N,2)")

        tri = Delaunay(points)
        simplices = tri.simplices.astype(np.int64)
        neighbors = tri.neighbors.astype(np.int64)

        # Orient counter-clockwise; neighbors[t, k] is opposite vertex k.
        a = points[simplices[:, 0]]
        b = points[simplices[:, 1]]
        c = points[simplices[:, 2]]
        cross = (b[:, 0] - a[:, 0]) * (c[:, 1] - a[:, 1]) - (b[:, 1] - a[:, 1]) * (c[:, 0] - a[:, 0])
        flip = cross < 0
        simplices[flip] = simplices[flip][:, [0, 2, 1]]
        neighbors[flip] = neighbors[flip][:, [0, 2, 1]]

        n_tri = len(simplices)
        halfedges = np.full(3 * n_tri, NO_NEIGHBOR, dtype=np.int64)

        for t in range(n_tri):
            for j in range(3):
                e = 3 * t + j
                if halfedges[e] != NO_NEIGHBOR:
                    continue
                # Edge j -> j+1 lies opposite vertex j+2.
                u = neighbors[t, (j + 2) % 3]
                if u == -1:
                    continue
                start = simplices[t, (j + 1) % 3]
                for k in range(3):
                    if simplices[u, k] == start:
                        opposite = 3 * u + k
                        halfedges[e] = opposite
                        halfedges[opposite] = e
                        break

        triangulation = Triangulation(
            triangles=simplices.reshape(-1),
            halfedges=halfedges,
        )
        logger.debug("Delaunay triangulation built",
                     points=len(points),
                     triangles=triangulation.triangle_count,
                     hull_edges=triangulation.hull_edge_count,
                     flipped=int(np.count_nonzero(flip)))
        return triangulation
