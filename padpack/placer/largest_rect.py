"""Largest free axis-aligned rectangle containing an anchor point.

Scan at the anchor's height for the free interval around it, cut that
interval into vertical slabs at every vertex x inside it, find the
nearest edge above and below in each slab, then take the best run of
contiguous slabs that includes the anchor's slab.
"""

from __future__ import annotations

import math
from typing import Sequence

from padpack.geometry import Point, Rect, Segment
from padpack.visualize import GraphicsSnapshot, SnapPoint, SnapRect, loop_line

from .outline import Loop, Outline
from .solver import BaseSolver

EPS = 1e-9


def _as_outline(loops: Outline | Sequence[Loop]) -> Outline:
    if isinstance(loops, Outline):
        return loops
    return Outline(loops=tuple(loops))


def _y_at(seg: Segment, x: float) -> float:
    a, b = seg
    if abs(b.x - a.x) < EPS:
        return min(a.y, b.y)
    t = (x - a.x) / (b.x - a.x)
    t = max(0.0, min(1.0, t))
    return a.y + t * (b.y - a.y)


def free_interval(
    y: float, outline: Outline, global_bounds: Rect,
) -> list[tuple[float, float]]:
    """Free x-intervals of the horizontal line at *y* (even-odd rule)."""
    xs: list[float] = []
    for a, b in outline.segments():
        if a.y == b.y:
            continue
        lo, hi = (a, b) if a.y < b.y else (b, a)
        if lo.y <= y < hi.y:
            xs.append(lo.x + (y - lo.y) * (hi.x - lo.x) / (hi.y - lo.y))
    xs.sort()

    edges = [-math.inf] + xs + [math.inf]
    free = not outline.outside_forbidden
    intervals: list[tuple[float, float]] = []
    for i in range(len(edges) - 1):
        if free:
            lo = max(edges[i], global_bounds.min_x)
            hi = min(edges[i + 1], global_bounds.max_x)
            if hi > lo:
                intervals.append((lo, hi))
        free = not free
    return intervals


def _slab_limits(
    sl: float, sr: float, y0: float,
    segments: list[Segment], global_bounds: Rect,
) -> tuple[float, float]:
    """(bottom, top) of free space above/below y0 across slab [sl, sr]."""
    top = global_bounds.max_y
    bot = global_bounds.min_y
    xm = (sl + sr) / 2
    for seg in segments:
        a, b = seg
        if abs(a.x - b.x) < EPS:
            continue
        x_lo, x_hi = min(a.x, b.x), max(a.x, b.x)
        if x_lo > sl + EPS or x_hi < sr - EPS:
            continue
        ym = _y_at(seg, xm)
        y_l = _y_at(seg, sl)
        y_r = _y_at(seg, sr)
        if ym > y0:
            top = min(top, y_l, y_r)
        elif ym < y0:
            bot = max(bot, y_l, y_r)
        else:
            return (y0, y0)
    return (bot, top)


def largest_rect(
    anchor: Point,
    loops: Outline | Sequence[Loop],
    global_bounds: Rect,
) -> Rect | None:
    """Maximal free axis-aligned rectangle containing *anchor*.

    Returns None when the anchor is not in free space (or outside
    *global_bounds*).  Free space is clipped to *global_bounds*.
    """
    outline = _as_outline(loops)
    if not global_bounds.contains_point(anchor):
        return None
    y0 = anchor.y

    interval = None
    for lo, hi in free_interval(y0, outline, global_bounds):
        if lo - EPS <= anchor.x <= hi + EPS:
            interval = (lo, hi)
            break
    if interval is None:
        return None
    lo, hi = interval

    segments = outline.segments()
    cuts = sorted({
        p.x for seg in segments for p in seg
        if lo + EPS < p.x < hi - EPS
    })
    xs = [lo] + cuts + [hi]
    slabs = [(xs[i], xs[i + 1]) for i in range(len(xs) - 1)]

    s0 = 0
    for i, (sl, sr) in enumerate(slabs):
        if sl - EPS <= anchor.x <= sr + EPS:
            s0 = i
            break

    limits = [_slab_limits(sl, sr, y0, segments, global_bounds) for sl, sr in slabs]

    best: Rect | None = None
    best_area = 0.0
    bot_left = -math.inf
    top_left = math.inf
    for i in range(s0, -1, -1):
        bot_left = max(bot_left, limits[i][0])
        top_left = min(top_left, limits[i][1])
        if top_left - bot_left <= 0:
            break
        bot = bot_left
        top = top_left
        for j in range(s0, len(slabs)):
            if j > s0:
                bot = max(bot, limits[j][0])
                top = min(top, limits[j][1])
            height = top - bot
            if height <= 0:
                break
            area = (slabs[j][1] - slabs[i][0]) * height
            if area > best_area:
                best_area = area
                best = Rect(slabs[i][0], bot, slabs[j][1], top)
    return best


class LargestRectSolver(BaseSolver):
    """Single-step wrapper so the rectangle search can be inspected."""

    def __init__(
        self, anchor: Point, outline: Outline, global_bounds: Rect,
    ) -> None:
        super().__init__()
        self.anchor = anchor
        self.outline = outline
        self.global_bounds = global_bounds

    def _step(self) -> None:
        rect = largest_rect(self.anchor, self.outline, self.global_bounds)
        if rect is None:
            self.fail(f"anchor ({self.anchor.x:.3f}, {self.anchor.y:.3f}) is not in free space")
        else:
            self.succeed(rect)

    def visualize(self) -> GraphicsSnapshot:
        snap = GraphicsSnapshot(title="LargestRectSolver")
        for loop in self.outline:
            snap.lines.append(loop_line(loop.points, "hole" if loop.is_hole else "outline"))
        snap.points.append(SnapPoint(self.anchor, "marker", "anchor"))
        snap.rects.append(SnapRect(self.global_bounds, "grid", "global bounds"))
        if self.solved:
            snap.rects.append(SnapRect(self.result, "free_rect", "largest rect"))
        return snap
