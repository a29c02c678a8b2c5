"""
Pure polygon / segment geometry used by the placer.

Polygons are vertex lists (closing edge implied); loops are lists of
directed segments whose endpoints chain.
"""

from __future__ import annotations

import math
from typing import Literal, Sequence

from .point import Point, Rect, Segment

CONNECT_EPS = 1e-9
BOUNDARY_EPS = 1e-9

Containment = Literal["inside", "outside", "boundary"]


# ── core primitives ─────────────────────────────────────────────────


def cross3(o: Point, a: Point, b: Point) -> float:
    """Cross product of (a - o) and (b - o)."""
    return (a.x - o.x) * (b.y - o.y) - (a.y - o.y) * (b.x - o.x)


def signed_area(points: Sequence[Point]) -> float:
    """Signed area via shoelace formula (positive = CCW)."""
    n = len(points)
    if n < 3:
        return 0.0
    area = 0.0
    for i in range(n):
        p0 = points[i]
        p1 = points[(i + 1) % n]
        area += p0.x * p1.y - p1.x * p0.y
    return area / 2.0


def loop_signed_area(segments: Sequence[Segment]) -> float:
    """Shoelace over directed segments; no closing edge is assumed."""
    area = 0.0
    for a, b in segments:
        area += a.x * b.y - b.x * a.y
    return area / 2.0


def ensure_ccw(points: Sequence[Point]) -> list[Point]:
    """Return a copy with counter-clockwise winding."""
    if signed_area(points) < 0:
        return list(reversed(points))
    return list(points)


def points_to_segments(points: Sequence[Point]) -> list[Segment]:
    """Closed polygon vertex list to chained directed segments."""
    n = len(points)
    return [(points[i], points[(i + 1) % n]) for i in range(n)]


def segments_bounds(segments: Sequence[Segment]) -> Rect:
    xs = [p.x for seg in segments for p in seg]
    ys = [p.y for seg in segments for p in seg]
    return Rect(min(xs), min(ys), max(xs), max(ys))


def polygon_centroid(points: Sequence[Point]) -> Point:
    """Area-weighted centroid, vertex average for degenerate polygons."""
    n = len(points)
    if n == 0:
        raise ValueError("Centroid of an empty polygon")
    a = signed_area(points)
    if abs(a) < 1e-12:
        return Point(
            sum(p.x for p in points) / n,
            sum(p.y for p in points) / n,
        )
    cx = cy = 0.0
    for i in range(n):
        p0 = points[i]
        p1 = points[(i + 1) % n]
        f = p0.x * p1.y - p1.x * p0.y
        cx += (p0.x + p1.x) * f
        cy += (p0.y + p1.y) * f
    return Point(cx / (6 * a), cy / (6 * a))


def convex_hull(points: Sequence[Point]) -> list[Point]:
    """Andrew's monotone chain.  Returns the hull CCW, collinear points dropped."""
    pts = sorted({(p.x, p.y) for p in points})
    if len(pts) <= 2:
        return [Point(x, y) for x, y in pts]
    hull_pts = [Point(x, y) for x, y in pts]

    lower: list[Point] = []
    for p in hull_pts:
        while len(lower) >= 2 and cross3(lower[-2], lower[-1], p) <= 0:
            lower.pop()
        lower.append(p)

    upper: list[Point] = []
    for p in reversed(hull_pts):
        while len(upper) >= 2 and cross3(upper[-2], upper[-1], p) <= 0:
            upper.pop()
        upper.append(p)

    return lower[:-1] + upper[:-1]


# ── containment ────────────────────────────────────────────────────


def point_in_polygon(p: Point, polygon: Sequence[Point]) -> bool:
    """Ray-casting point-in-polygon test (even-odd)."""
    n = len(polygon)
    inside = False
    j = n - 1
    for i in range(n):
        pi, pj = polygon[i], polygon[j]
        if ((pi.y > p.y) != (pj.y > p.y)) and (
            p.x < (pj.x - pi.x) * (p.y - pi.y) / (pj.y - pi.y) + pi.x
        ):
            inside = not inside
        j = i
    return inside


def point_in_outline(p: Point, segments: Sequence[Segment]) -> Containment:
    """Classify *p* against a closed loop given as directed segments."""
    if not segments:
        return "outside"
    bb = segments_bounds(segments)
    if not bb.contains_point(p, BOUNDARY_EPS):
        return "outside"

    for a, b in segments:
        if distance_point_to_segment(p, a, b) < BOUNDARY_EPS:
            return "boundary"

    inside = False
    for a, b in segments:
        if (a.y > p.y) != (b.y > p.y):
            x_cross = a.x + (p.y - a.y) * (b.x - a.x) / (b.y - a.y)
            if p.x < x_cross:
                inside = not inside
    return "inside" if inside else "outside"


# ── segments ───────────────────────────────────────────────────────


def project_point_onto_segment(p: Point, a: Point, b: Point) -> tuple[Point, float]:
    """Closest point on segment a-b to p, with its parameter t ∈ [0, 1]."""
    d = b - a
    len_sq = d.dot(d)
    if len_sq < 1e-24:
        return a, 0.0
    t = max(0.0, min(1.0, (p - a).dot(d) / len_sq))
    return a + d * t, t


def distance_point_to_segment(p: Point, a: Point, b: Point) -> float:
    q, _ = project_point_onto_segment(p, a, b)
    return p.distance_to(q)


def _on_segment(a: Point, q: Point, b: Point, tolerance: float = 0.0) -> bool:
    band = max(tolerance, 1e-12)
    return (min(a.x, b.x) - band <= q.x <= max(a.x, b.x) + band and
            min(a.y, b.y) - band <= q.y <= max(a.y, b.y) + band)


def segments_intersect(
    a1: Point, a2: Point, b1: Point, b2: Point, tolerance: float = 0.0,
) -> bool:
    """True if the closed segments share at least one point.

    Cross products within *tolerance* of zero count as collinear, so
    segments that miss each other by less than that still touch.
    """
    d1 = cross3(b1, b2, a1)
    d2 = cross3(b1, b2, a2)
    d3 = cross3(a1, a2, b1)
    d4 = cross3(a1, a2, b2)

    if ((d1 > tolerance and d2 < -tolerance) or (d1 < -tolerance and d2 > tolerance)) and \
       ((d3 > tolerance and d4 < -tolerance) or (d3 < -tolerance and d4 > tolerance)):
        return True

    if abs(d1) <= tolerance and _on_segment(b1, a1, b2, tolerance):
        return True
    if abs(d2) <= tolerance and _on_segment(b1, a2, b2, tolerance):
        return True
    if abs(d3) <= tolerance and _on_segment(a1, b1, a2, tolerance):
        return True
    if abs(d4) <= tolerance and _on_segment(a1, b2, a2, tolerance):
        return True
    return False


def closest_points_between_segments(
    a1: Point, a2: Point, b1: Point, b2: Point,
) -> tuple[Point, Point]:
    """Closest pair (on a, on b) between two segments."""
    if segments_intersect(a1, a2, b1, b2):
        da = a2 - a1
        db = b2 - b1
        denom = da.cross(db)
        if abs(denom) > 1e-12:
            t = (b1 - a1).cross(db) / denom
            hit = a1 + da * max(0.0, min(1.0, t))
            return hit, hit

    best: tuple[Point, Point] | None = None
    best_d = math.inf
    for p, (s, e), on_a in (
        (a1, (b1, b2), True), (a2, (b1, b2), True),
        (b1, (a1, a2), False), (b2, (a1, a2), False),
    ):
        q, _ = project_point_onto_segment(p, s, e)
        d = p.distance_to(q)
        if d < best_d:
            best_d = d
            best = (p, q) if on_a else (q, p)
    assert best is not None
    return best


# ── loops ──────────────────────────────────────────────────────────


def _connected(p: Point, q: Point) -> bool:
    return abs(p.x - q.x) < CONNECT_EPS and abs(p.y - q.y) < CONNECT_EPS


def _collinear_continuation(
    start: Point, end: Point, nxt: Point, tolerance: float,
) -> bool:
    cp = cross3(start, end, nxt)
    len1 = start.distance_to(end)
    len2 = end.distance_to(nxt)
    if abs(cp) >= max(tolerance, tolerance * len1 * len2):
        return False
    # a reversal (spike) is collinear but must not be merged
    return (end - start).dot(nxt - end) >= 0


def simplify_collinear_segments(
    segments: Sequence[Segment], tolerance: float = 1e-10,
) -> list[Segment]:
    """Merge chained collinear segments, including across the wraparound."""
    if len(segments) <= 1:
        return list(segments)

    simplified: list[Segment] = []
    cur_start, cur_end = segments[0]

    for nxt_start, nxt_end in segments[1:]:
        if _connected(cur_end, nxt_start) and _collinear_continuation(
            cur_start, cur_end, nxt_end, tolerance,
        ):
            cur_end = nxt_end
            continue
        simplified.append((cur_start, cur_end))
        cur_start, cur_end = nxt_start, nxt_end

    if len(segments) > 2 and simplified:
        first_start, first_end = simplified[0]
        if _connected(cur_end, first_start) and _collinear_continuation(
            cur_start, cur_end, first_end, tolerance,
        ):
            simplified[0] = (cur_start, first_end)
            return simplified

    simplified.append((cur_start, cur_end))
    return simplified


def loop_points(segments: Sequence[Segment]) -> list[Point]:
    """Start points of a chained loop, i.e. its polygon vertices."""
    return [a for a, _ in segments]
