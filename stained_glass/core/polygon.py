"""Planar polygon helpers: rectangle clipping, area, centroid and hit-testing."""

from typing import Callable, List, NamedTuple, Sequence, Tuple


class Point(NamedTuple):
    """A 2D point in image coordinates."""
    x: float
    y: float


def _clip_edge(
    polygon: List[Point],
    inside: Callable[[Point], bool],
    intersect: Callable[[Point, Point], Point],
) -> List[Point]:
    """One Sutherland-Hodgman pass against a single half-plane."""
    output: List[Point] = []
    if not polygon:
        return output

    prev = polygon[-1]
    for curr in polygon:
        if inside(curr):
            if not inside(prev):
                output.append(intersect(prev, curr))
            output.append(curr)
        elif inside(prev):
            output.append(intersect(prev, curr))
        prev = curr
    return output


def clip_polygon_to_rect(polygon: Sequence[Point], width: float, height: float) -> List[Point]:
    """
    Clip a polygon to the rectangle [0, width] x [0, height].

    Sutherland-Hodgman against x >= 0, x <= width, y >= 0, y <= height, in
    that order. Vertices already inside are passed through untouched. The
    result may have fewer than 3 vertices; callers decide what to do with it.

    Args:
        polygon: Polygon vertices, closing edge implied
        width: Rectangle width
        height: Rectangle height

    Returns:
        Clipped polygon vertices (possibly empty)
    """
    def left(a: Point, b: Point) -> Point:
        t = -a.x / (b.x - a.x)
        return Point(0.0, a.y + t * (b.y - a.y))

    def right(a: Point, b: Point) -> Point:
        t = (width - a.x) / (b.x - a.x)
        return Point(float(width), a.y + t * (b.y - a.y))

    def bottom(a: Point, b: Point) -> Point:
        t = -a.y / (b.y - a.y)
        return Point(a.x + t * (b.x - a.x), 0.0)

    def top(a: Point, b: Point) -> Point:
        t = (height - a.y) / (b.y - a.y)
        return Point(a.x + t * (b.x - a.x), float(height))

    clips = [
        (lambda p: p.x >= 0, left),
        (lambda p: p.x <= width, right),
        (lambda p: p.y >= 0, bottom),
        (lambda p: p.y <= height, top),
    ]

    output = [Point(float(p[0]), float(p[1])) for p in polygon]
    for inside, intersect in clips:
        if not output:
            break
        output = _clip_edge(output, inside, intersect)

    return output


def polygon_area(vertices: Sequence[Tuple[float, float]]) -> float:
    """Absolute polygon area by the shoelace formula."""
    n = len(vertices)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += vertices[i][0] * vertices[j][1] - vertices[j][0] * vertices[i][1]
    return abs(area) * 0.5


def polygon_centroid(vertices: Sequence[Tuple[float, float]]) -> Point:
    """Compute the centroid of a polygon.

    Falls back to the vertex mean for degenerate (near-zero area) polygons.

    Args:
        vertices: Sequence of (x, y) vertex coordinates

    Returns:
        Centroid point
    """
    n = len(vertices)
    if n == 0:
        raise ValueError("Cannot take the centroid of an empty polygon")

    mean = Point(sum(v[0] for v in vertices) / n, sum(v[1] for v in vertices) / n)
    if n < 3:
        return mean

    area = 0.0
    cx = 0.0
    cy = 0.0

    for i in range(n):
        j = (i + 1) % n
        a = vertices[i][0] * vertices[j][1] - vertices[j][0] * vertices[i][1]
        area += a
        cx += (vertices[i][0] + vertices[j][0]) * a
        cy += (vertices[i][1] + vertices[j][1]) * a

    if abs(area) < 1e-10:
        return mean

    area *= 0.5
    return Point(cx / (6.0 * area), cy / (6.0 * area))


def point_in_polygon(x: float, y: float, vertices: Sequence[Tuple[float, float]]) -> bool:
    """Even-odd ray casting test."""
    inside = False
    n = len(vertices)
    j = n - 1
    for i in range(n):
        xi, yi = vertices[i][0], vertices[i][1]
        xj, yj = vertices[j][0], vertices[j][1]
        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
            inside = not inside
        j = i
    return inside

