"""Hard constraints a placed component must satisfy."""

from __future__ import annotations

from typing import Sequence

from padpack.config import PACK_RULES
from padpack.geometry import (
    Point, Rect, point_in_outline, points_to_segments, segments_intersect,
)

from .footprint import aabb_gap, component_bounds
from .models import Obstacle, PackedComponent
from .outline import Outline

EPS = 1e-9


def does_component_violate_bounds_outline(
    component: PackedComponent,
    outline: Sequence[Point] | None,
    min_gap: float,
) -> bool:
    """True if any pad, expanded by *min_gap*, touches or enters the keep-out outline."""
    if not outline or len(outline) < 3:
        return False
    pts = list(outline)
    if pts[0].almost_equals(pts[-1]):
        pts = pts[:-1]
    if len(pts) < 3:
        return False
    outline_segments = points_to_segments(pts)

    for pad in component.pads:
        rect = pad.rect.expanded(min_gap)
        corners = rect.corners()
        if any(point_in_outline(c, outline_segments) == "inside" for c in corners):
            return True
        if any(rect.contains_point(v, EPS) for v in pts):
            return True
        for a, b in outline_segments:
            for r1, r2 in rect.edges():
                if segments_intersect(a, b, r1, r2, tolerance=EPS):
                    return True
    return False


def placement_violation(
    candidate: PackedComponent,
    placed: Sequence[PackedComponent],
    obstacles: Sequence[Obstacle],
    min_gap: float,
    *,
    outline: Outline | None = None,
    bounds: Rect | None = None,
    bounds_outline: Sequence[Point] | None = None,
) -> str | None:
    """Return why *candidate* is illegal, or None if it can be committed."""
    half = PACK_RULES.half_gap(min_gap)
    tol = PACK_RULES.gap_tolerance
    box = component_bounds(candidate)
    expanded = box.expanded(half)

    if outline is not None:
        for corner in expanded.corners():
            if outline.classify(corner) == "inside":
                return f"corner ({corner.x:.3f}, {corner.y:.3f}) in forbidden space"

    for other in placed:
        gap = aabb_gap(box, component_bounds(other))
        if gap < min_gap - tol:
            return f"gap {gap:.3f} to '{other.component_id}' below {min_gap:g}"

    for obs in obstacles:
        gap = aabb_gap(box, obs.rect)
        if gap < min_gap - tol:
            return f"gap {gap:.3f} to obstacle '{obs.obstacle_id}' below {min_gap:g}"

    if bounds is not None and not bounds.contains_rect(expanded, tol):
        return "outside bounds"

    if does_component_violate_bounds_outline(candidate, bounds_outline, min_gap - tol):
        return "violates bounds outline"

    return None
