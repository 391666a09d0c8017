"""Voronoi cell generation for the stained-glass overlay."""

import math
from dataclasses import dataclass
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np
import structlog

from .mulberry_prng import Mulberry32PRNG, create_prng
from .polygon import Point, clip_polygon_to_rect, point_in_polygon, polygon_area, polygon_centroid
from .triangulation import NO_NEIGHBOR, DelaunayTriangulator, Triangulator, prev_halfedge

logger = structlog.get_logger()

DEFAULT_CELL_COUNT = 120
JITTER_FRACTION = 0.35       # max offset from grid-cell center, per axis
PADDING_FACTOR = 3           # padding distance as a multiple of max(width, height)
MAX_WALK_STEPS = 200
DEGENERATE_EPSILON = 1e-10


class CellConfig(NamedTuple):
    """Configuration for one tessellation."""
    width: float
    height: float
    num_cells: int


@dataclass(frozen=True)
class VoronoiCell:
    """One clipped Voronoi cell.

    ``id`` is the index of the cell's site in generation order, which is
    stable for a given (width, height, num_cells, seed).
    """
    id: int
    seed: Point
    vertices: Tuple[Point, ...]

    def area(self) -> float:
        return polygon_area(self.vertices)

    def centroid(self) -> Point:
        return polygon_centroid(self.vertices)

    def contains(self, x: float, y: float) -> bool:
        return point_in_polygon(x, y, self.vertices)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "seed": {"x": self.seed.x, "y": self.seed.y},
            "vertices": [{"x": v.x, "y": v.y} for v in self.vertices],
        }


def _round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; the layout needs x.5 -> up.
    return int(math.floor(value + 0.5))


def _check_dimensions(width: float, height: float) -> None:
    for name, value in (("width", width), ("height", height)):
        if not math.isfinite(value) or value <= 0:
            raise ValueError(f"{name} must be a finite number > 0, got {value!r}")


def _check_config(config: CellConfig) -> None:
    _check_dimensions(config.width, config.height)
    n = config.num_cells
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)):
        raise ValueError(f"num_cells must be an integer, got {n!r}")
    if n < 1:
        raise ValueError(f"num_cells must be >= 1, got {n}")


def get_jittered_sites(width: float, height: float, num_cells: int,
                       prng: Mulberry32PRNG) -> np.ndarray:
    """
    Generate exactly ``num_cells`` jittered grid sites.

    The rectangle is tiled into a cols x rows grid matching its aspect ratio;
    each grid cell gets one site at its center, offset by up to 35% of the
    cell size on each axis. Sites are clamped to [1, width-1] x [1, height-1].
    If rounding leaves the grid short, the rest are placed uniformly at random.

    Random values are consumed x then y, row-major, which makes the order
    (and therefore every site id) reproducible from the seed.

    Args:
        width: Rectangle width
        height: Rectangle height
        num_cells: Number of sites wanted
        prng: Generator owned by this generation

    Returns:
        Array of [x, y] site coordinates, shape (num_cells, 2)
    """
    _check_config(CellConfig(width, height, num_cells))

    aspect = width / height
    cols = max(1, _round_half_up(math.sqrt(num_cells * aspect)))
    rows = max(1, _round_half_up(num_cells / cols))
    cell_w = width / cols
    cell_h = height / rows
    spread = 2 * JITTER_FRACTION

    sites = []
    for r in range(rows):
        for c in range(cols):
            if len(sites) >= num_cells:
                break
            x = (c + 0.5) * cell_w + (prng.random() - 0.5) * cell_w * spread
            y = (r + 0.5) * cell_h + (prng.random() - 0.5) * cell_h * spread
            sites.append([max(1.0, min(width - 1, x)), max(1.0, min(height - 1, y))])

    grid_count = len(sites)
    while len(sites) < num_cells:
        x = prng.random() * (width - 2) + 1
        y = prng.random() * (height - 2) + 1
        sites.append([x, y])

    logger.debug("Sites sampled", cols=cols, rows=rows,
                 grid_sites=grid_count, random_sites=len(sites) - grid_count)

    return np.array(sites[:num_cells], dtype=np.float64)


def get_boundary_points(width: float, height: float) -> np.ndarray:
    """
    Generate the 8 far-away padding points.

    Corners and edge midpoints of a box pushed 3 * max(width, height)
    outside the rectangle on every side. With these in the point set every
    real site is strictly inside the convex hull, so its ring of triangles
    is closed and its Voronoi cell is finite.

    Args:
        width: Rectangle width
        height: Rectangle height

    Returns:
        Array of 8 [x, y] coordinates
    """
    _check_dimensions(width, height)
    pad = max(width, height) * PADDING_FACTOR
    return np.array([
        [-pad, -pad],
        [width / 2, -pad],
        [width + pad, -pad],
        [width + pad, height / 2],
        [width + pad, height + pad],
        [width / 2, height + pad],
        [-pad, height + pad],
        [-pad, height / 2],
    ], dtype=np.float64)


def circumcenter(a: Sequence[float], b: Sequence[float], c: Sequence[float]) -> Point:
    """Circumcenter of triangle abc, or its centroid if abc is (nearly) collinear."""
    ax, ay = a
    dx, dy = b[0] - ax, b[1] - ay
    ex, ey = c[0] - ax, c[1] - ay
    bl = dx * dx + dy * dy
    cl = ex * ex + ey * ey
    det = dx * ey - dy * ex

    if abs(det) < DEGENERATE_EPSILON:
        return Point((ax + b[0] + c[0]) / 3, (ay + b[1] + c[1]) / 3)

    d = 0.5 / det
    return Point(ax + (ey * bl - dy * cl) * d, ay + (dx * cl - ex * bl) * d)


def compute_circumcenters(points: np.ndarray, triangles: np.ndarray) -> np.ndarray:
    """
    Compute one Voronoi vertex per triangle.

    Vectorised form of :func:`circumcenter`, same arithmetic and the same
    centroid fallback for degenerate triangles.

    Args:
        points: Array of [x, y] coordinates
        triangles: Flat triangle vertex indices, length 3T

    Returns:
        Array of [x, y] circumcenters, shape (T, 2)
    """
    tri = np.asarray(triangles, dtype=np.int64).reshape(-1, 3)
    a = points[tri[:, 0]]
    b = points[tri[:, 1]]
    c = points[tri[:, 2]]

    dx = b[:, 0] - a[:, 0]
    dy = b[:, 1] - a[:, 1]
    ex = c[:, 0] - a[:, 0]
    ey = c[:, 1] - a[:, 1]
    bl = dx * dx + dy * dy
    cl = ex * ex + ey * ey
    det = dx * ey - dy * ex

    degenerate = np.abs(det) < DEGENERATE_EPSILON
    d = 0.5 / np.where(degenerate, 1.0, det)

    centers = np.column_stack([
        a[:, 0] + (ey * bl - dy * cl) * d,
        a[:, 1] + (dx * cl - ex * bl) * d,
    ])
    if np.any(degenerate):
        centroids = (a + b + c) / 3
        centers[degenerate] = centroids[degenerate]
        logger.debug("Degenerate triangles replaced by centroids",
                     count=int(np.count_nonzero(degenerate)))
    return centers


def find_incident_halfedges(triangles: Sequence[int], halfedges: Sequence[int],
                            n_points: int) -> List[int]:
    """
    Pick one outgoing half-edge per point.

    The first half-edge seen wins, except that a hull half-edge (no
    neighbour) always replaces it, so a hull vertex starts its walk on the
    boundary and the fan is not cut short.

    Args:
        triangles: Flat triangle vertex indices
        halfedges: Opposite half-edge per half-edge
        n_points: Total number of points

    Returns:
        Half-edge index per point, NO_NEIGHBOR where the point has none
    """
    incident = [NO_NEIGHBOR] * n_points
    for e, (p, opposite) in enumerate(zip(triangles, halfedges)):
        if incident[p] == NO_NEIGHBOR or opposite == NO_NEIGHBOR:
            incident[p] = e
    return incident


def walk_cell_ring(start_edge: int, halfedges: Sequence[int], circumcenters: Sequence[Point],
                   max_steps: int = MAX_WALK_STEPS) -> Tuple[List[Point], bool]:
    """
    Collect the circumcenters of all triangles around the start point.

    From ``start_edge`` repeatedly step to ``halfedges[prev_halfedge(e)]``,
    which is the next half-edge leaving the same point.

    Args:
        start_edge: A half-edge leaving the point
        halfedges: Opposite half-edge per half-edge
        circumcenters: Circumcenter per triangle
        max_steps: Loop guard against malformed adjacency

    Returns:
        Tuple of (ring vertices, closed) where closed is True when the walk
        got back to ``start_edge``
    """
    vertices = []
    e = start_edge
    steps = 0
    while True:
        vertices.append(circumcenters[e // 3])
        opposite = halfedges[prev_halfedge(e)]
        if opposite == NO_NEIGHBOR:
            return vertices, False
        e = opposite
        steps += 1
        if steps > max_steps:
            return vertices, False
        if e == start_edge:
            return vertices, True


def reconstruct_cell(site_index: int, incident: Sequence[int], halfedges: Sequence[int],
                     circumcenters: Sequence[Point]) -> Optional[List[Point]]:
    """Unclipped Voronoi polygon of one site, or None if it cannot form one."""
    start = incident[site_index]
    if start == NO_NEIGHBOR:
        logger.debug("Cell dropped", cell=site_index, reason="no_incident_edge")
        return None

    ring, closed = walk_cell_ring(start, halfedges, circumcenters)
    if not closed:
        logger.debug("Open cell ring", cell=site_index, vertices=len(ring))
    if len(ring) < 3:
        logger.debug("Cell dropped", cell=site_index, reason="too_few_vertices")
        return None
    return ring


def generate_voronoi_cells(width: float, height: float, num_cells: int = DEFAULT_CELL_COUNT,
                           seed: Optional[str] = None,
                           triangulator: Optional[Triangulator] = None) -> List[VoronoiCell]:
    """
    Generate ``num_cells`` Voronoi cells that tile the given rectangle.

    When ``seed`` is given the layout is deterministic: the same arguments
    always produce the same cells, ids and vertex order included. Cells that
    cannot be built (open rings, fewer than 3 vertices after clipping) are
    left out, so the result may be shorter than ``num_cells``.

    Args:
        width: Rectangle width
        height: Rectangle height
        num_cells: Target number of cells
        seed: Optional seed string
        triangulator: Half-edge triangulator, scipy Delaunay by default

    Returns:
        Cells in ascending id order
    """
    config = CellConfig(width=width, height=height, num_cells=num_cells)
    _check_config(config)
    if triangulator is None:
        triangulator = DelaunayTriangulator()

    logger.info("Generating Voronoi cells",
                width=width, height=height, num_cells=num_cells, seeded=seed is not None)

    prng = create_prng(seed)
    sites = get_jittered_sites(width, height, num_cells, prng)
    boundary = get_boundary_points(width, height)
    all_points = np.vstack([sites, boundary])

    triangulation = triangulator.triangulate(all_points)
    triangles = triangulation.triangles.tolist()
    halfedges = triangulation.halfedges.tolist()

    centers = compute_circumcenters(all_points, triangulation.triangles)
    circumcenters = [Point(x, y) for x, y in centers.tolist()]
    incident = find_incident_halfedges(triangles, halfedges, len(all_points))

    logger.info("Triangulation complete",
                sites=len(sites), boundary_points=len(boundary),
                triangles=triangulation.triangle_count)

    cells = []
    for i in range(num_cells):
        ring = reconstruct_cell(i, incident, halfedges, circumcenters)
        if ring is None:
            continue

        clipped = clip_polygon_to_rect(ring, width, height)
        if len(clipped) < 3:
            logger.debug("Cell dropped", cell=i, reason="clipped_away")
            continue

        seed_point = Point(float(sites[i, 0]), float(sites[i, 1]))
        cells.append(VoronoiCell(id=i, seed=seed_point, vertices=tuple(clipped)))

    logger.info("Voronoi cells generated", cells=len(cells), dropped=num_cells - len(cells))
    return cells


def find_cell_at(x: float, y: float, cells: Sequence[VoronoiCell]) -> Optional[int]:
    """
    Find the id of the cell containing the given coordinates.

    Cells are scanned in id order and the first hit wins.

    Args:
        x, y: Coordinates to test
        cells: Generated cells

    Returns:
        Cell id, or None when no cell contains the point
    """
    for cell in cells:
        if cell.contains(x, y):
            return cell.id
    return None
