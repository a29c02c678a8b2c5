"""shortest_connection_along_outline — closest approach to connected pads.

Works in component-centre space: every target pad rectangle is shifted
by the rotated offset of the own pad that wants to reach it, so "centre
on the segment" and "pad on the target" become the same question.
"""

from __future__ import annotations

import math
from collections import defaultdict

from padpack.geometry import Point, Segment, closest_points_between_segments

from .nets import NetworkTarget


def nearest_connection_sum(center: Point, targets: list[NetworkTarget]) -> float:
    """Σ over own pads of the distance to their nearest same-network target."""
    best: dict[tuple[Point, str], float] = defaultdict(lambda: math.inf)
    for t in targets:
        key = (t.own_offset, t.network_id)
        d = (center + t.own_offset).distance_to(t.point)
        if d < best[key]:
            best[key] = d
    return sum(best.values())


def shortest_connection_point(
    segment: Segment, targets: list[NetworkTarget],
) -> Point:
    """Point on *segment* whose nearest connections are shortest in total.

    Candidates are the closest approaches between the segment and each
    shifted target pad edge; the segment midpoint is also considered.
    """
    a, b = segment
    candidates = [(a + b) * 0.5]
    for t in targets:
        if t.rect is None:
            edges = [(t.point, t.point)]
        else:
            edges = t.rect.edges()
        for e0, e1 in edges:
            on_seg, _ = closest_points_between_segments(
                a, b, e0 - t.own_offset, e1 - t.own_offset,
            )
            candidates.append(on_seg)
    if not targets:
        return candidates[0]
    return min(candidates, key=lambda c: nearest_connection_sum(c, targets))
