"""Outline builder — free/forbidden boundary loops around placed footprints.

Every loop is directed so that forbidden space lies to the LEFT of each
segment.  Classification is by signed area alone:

  * CCW (area > 0)  outer boundary of a forbidden island
  * CW  (area < 0)  boundary of a free pocket (a hole in the forbidden
                    region, or the inner edge of the allowed ``bounds``)

The outward (free-facing) normal of a segment is therefore always its
right-hand normal.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, Sequence

from shapely.geometry import MultiPolygon, Polygon, box as shapely_box
from shapely.geometry.base import BaseGeometry
from shapely.geometry.polygon import orient
from shapely.ops import unary_union

from padpack.config import PACK_RULES
from padpack.geometry import (
    Point, Rect, Segment,
    distance_point_to_segment, loop_points, loop_signed_area, point_in_outline,
    points_to_segments, segments_bounds, simplify_collinear_segments,
)

from .footprint import component_bounds
from .models import GeometryDegenerate, Obstacle, PackedComponent

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Loop:
    """A closed chain of directed segments with forbidden space on the left."""

    segments: tuple[Segment, ...]
    signed_area: float

    @property
    def is_hole(self) -> bool:
        return self.signed_area < 0

    @property
    def points(self) -> list[Point]:
        return loop_points(self.segments)

    @property
    def bounds(self) -> Rect:
        return segments_bounds(self.segments)


@dataclass(frozen=True)
class Outline:
    """All loops of one forbidden region.

    ``outside_forbidden`` is set when an allowed region (``bounds``)
    encloses the free space, so the far field is forbidden as well.
    ``region`` is the shapely geometry the loops were traced from: the
    forbidden area, or the free area when ``outside_forbidden`` is set.
    """

    loops: tuple[Loop, ...]
    outside_forbidden: bool = False
    region: BaseGeometry | None = field(default=None, compare=False)

    def __iter__(self) -> Iterator[Loop]:
        return iter(self.loops)

    def __len__(self) -> int:
        return len(self.loops)

    def segments(self) -> list[Segment]:
        return [seg for loop in self.loops for seg in loop.segments]

    def bounds(self) -> Rect | None:
        if not self.loops:
            return None
        return segments_bounds(self.segments())

    def classify(self, p: Point) -> str:
        """"inside" (forbidden), "outside" (free) or "boundary"."""
        parity = False
        for loop in self.loops:
            where = point_in_outline(p, loop.segments)
            if where == "boundary":
                return "boundary"
            if where == "inside":
                parity = not parity
        forbidden = parity != self.outside_forbidden
        return "inside" if forbidden else "outside"

    def distance_to_boundary(self, p: Point) -> float:
        best = float("inf")
        for a, b in self.segments():
            best = min(best, distance_point_to_segment(p, a, b))
        return best

    def forbidden_overlap(self, rect: Rect) -> BaseGeometry | None:
        """Part of *rect* lying in forbidden space (None if unknown or empty)."""
        if self.region is None:
            return None
        probe = _rect_polygon(rect)
        if self.outside_forbidden:
            overlap = probe.difference(self.region)
        else:
            overlap = probe.intersection(self.region)
        if overlap.is_empty or overlap.area <= PACK_RULES.min_loop_area:
            return None
        return overlap


def loop_from_points(points: Sequence[Point]) -> Loop:
    """Wrap an already-oriented vertex list as a Loop (no normalization)."""
    segments = tuple(points_to_segments(points))
    return Loop(segments=segments, signed_area=loop_signed_area(segments))


# ── Forbidden region ───────────────────────────────────────────────


def _rect_polygon(rect: Rect) -> Polygon:
    return shapely_box(rect.min_x, rect.min_y, rect.max_x, rect.max_y)


def forbidden_shapes(
    placed: Sequence[PackedComponent],
    obstacles: Sequence[Obstacle],
    min_gap: float,
    bounds_outline: Sequence[Point] | None = None,
) -> list[BaseGeometry]:
    """Half-gap expanded footprints, obstacles and the keep-out outline."""
    half = PACK_RULES.half_gap(min_gap)
    shapes: list[BaseGeometry] = []
    for comp in placed:
        rect = component_bounds(comp).expanded(half)
        if rect.width > 0 and rect.height > 0:
            shapes.append(_rect_polygon(rect))
    for obs in obstacles:
        rect = obs.rect.expanded(half)
        if rect.width > 0 and rect.height > 0:
            shapes.append(_rect_polygon(rect))
    if bounds_outline is not None and len(bounds_outline) >= 3:
        poly = Polygon([p.as_tuple() for p in bounds_outline])
        if not poly.is_valid:
            poly = poly.buffer(0)
        if half > 0:
            poly = poly.buffer(half, join_style="mitre")
        if not poly.is_empty:
            shapes.append(poly)
    return shapes


def _polygons(geom: BaseGeometry) -> list[Polygon]:
    if geom.is_empty:
        return []
    if isinstance(geom, Polygon):
        return [geom]
    if isinstance(geom, MultiPolygon):
        return list(geom.geoms)
    return [g for g in getattr(geom, "geoms", []) if isinstance(g, Polygon)]


def _ring_to_loop(coords: Sequence[tuple[float, float]]) -> Loop | None:
    pts = [Point(float(x), float(y)) for x, y in coords]
    if len(pts) > 1 and pts[0].almost_equals(pts[-1]):
        pts = pts[:-1]
    if len(pts) < 3:
        return None
    segments = [(pts[i], pts[(i + 1) % len(pts)]) for i in range(len(pts))]
    segments = [s for s in segments if not s[0].almost_equals(s[1])]
    segments = simplify_collinear_segments(segments)
    area = loop_signed_area(segments)
    if abs(area) < PACK_RULES.min_loop_area:
        log.debug("Dropping degenerate loop (area %.3g)", area)
        return None
    return Loop(segments=tuple(segments), signed_area=area)


# ── Main entry point ───────────────────────────────────────────────


def build_outline(
    placed: Sequence[PackedComponent],
    obstacles: Sequence[Obstacle],
    min_gap: float,
    bounds: Rect | None = None,
    bounds_outline: Sequence[Point] | None = None,
) -> Outline:
    """Compute the free-space boundary loops around everything forbidden.

    Parameters
    ----------
    placed : sequence of PackedComponent
        Components already committed; each contributes its pad bounding
        box expanded by ``min_gap / 2``.
    obstacles : sequence of Obstacle
        Fixed rectangles, expanded the same way.
    min_gap : float
        Required clearance between any two expanded footprints.
    bounds : Rect, optional
        Allowed region.  When given, free space is this box minus
        everything forbidden, so expanded footprints stay inside it.
    bounds_outline : sequence of Point, optional
        Keep-out polygon, expanded by ``min_gap / 2``.

    Returns
    -------
    Outline
        Loops with forbidden space to the left of every segment.  Never
        raises; an empty region yields a synthetic box around the origin.
        With *bounds* and nothing placed the single loop is the bounds
        box traversed clockwise, since the forbidden side lies outside it.
    """
    shapes = forbidden_shapes(placed, obstacles, min_gap, bounds_outline)

    if bounds is not None:
        if bounds.width <= 0 or bounds.height <= 0:
            log.warning("Bounds %s leave no free space", bounds)
            return Outline(loops=(), outside_forbidden=True, region=Polygon())
        free = _rect_polygon(bounds)
        if shapes:
            free = free.difference(unary_union(shapes))
        # free polygons oriented CW put forbidden space on the left
        rings = []
        for poly in _polygons(free):
            poly = orient(poly, sign=-1.0)
            rings.append(poly.exterior.coords)
            rings.extend(r.coords for r in poly.interiors)
        loops = [lp for lp in (_ring_to_loop(r) for r in rings) if lp is not None]
        log.debug("Outline: %d loop(s) inside bounds", len(loops))
        return Outline(loops=tuple(loops), outside_forbidden=True, region=free)

    if not shapes:
        s = max(min_gap, PACK_RULES.synthetic_box_half_size)
        loop = _ring_to_loop([(-s, -s), (s, -s), (s, s), (-s, s)])
        return Outline(loops=(loop,), region=Polygon([(-s, -s), (s, -s), (s, s), (-s, s)]))

    region = unary_union(shapes)
    rings = []
    for poly in _polygons(region):
        poly = orient(poly, sign=1.0)
        rings.append(poly.exterior.coords)
        rings.extend(r.coords for r in poly.interiors)
    loops = [lp for lp in (_ring_to_loop(r) for r in rings) if lp is not None]
    log.debug("Outline: %d loop(s) from %d shape(s)", len(loops), len(shapes))
    return Outline(loops=tuple(loops), region=region)


# ── Outward normal ─────────────────────────────────────────────────


def outward_normal(
    segment: Segment, loop: Loop, outline: Outline | None = None,
) -> Point | GeometryDegenerate:
    """Unit normal of *segment* pointing into free space.

    Forbidden space is on the left of each directed segment, so the
    right-hand normal faces free space: the geometric exterior of a CCW
    loop and the interior of a CW loop.  Loops with no usable area are
    resolved by probing both sides against *outline*.
    """
    a, b = segment
    d = b - a
    length = d.length()
    if length < 1e-12:
        return GeometryDegenerate("zero-length segment")
    right = Point(d.y / length, -d.x / length)

    if abs(loop.signed_area) >= PACK_RULES.min_loop_area:
        return right

    if outline is not None:
        mid = (a + b) * 0.5
        probe = PACK_RULES.normal_probe
        right_side = outline.classify(mid + right * probe)
        left_side = outline.classify(mid - right * probe)
        if right_side == "outside" and left_side == "inside":
            return right
        if left_side == "outside" and right_side == "inside":
            return -right
    log.warning("Cannot resolve outward normal for segment %s -> %s", a, b)
    return GeometryDegenerate("unresolved outward normal", recoverable=False)
