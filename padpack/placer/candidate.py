"""Candidate segment solver — best point on one outline segment.

For one (segment, rotation) pair:

  1. Resolve the outward normal and anchor just outside the segment.
  2. Search the largest free rectangle at the anchor; the component
     must fit in it.
  3. Extend the segment by its own length on each side and clamp it to
     the part of that rectangle where the centre keeps the footprint
     inside (only on the axes the segment runs along).
  4. Iteratively reweighted least squares towards the network targets,
     re-applying the constraint (project onto the segment, then push out
     of forbidden space) after every iteration.  The closest-target
     strategy follows with a second pass against only the target nearest
     the least-squares result.
"""

from __future__ import annotations

import logging
from typing import Callable

from padpack.config import PACK_RULES
from padpack.geometry import Point, Rect, Segment, project_point_onto_segment
from padpack.visualize import GraphicsSnapshot, SnapLine, SnapPoint, SnapRect

from .footprint import local_bounds, translated
from .largest_rect import largest_rect
from .models import Component, GeometryDegenerate, PlacementStrategy
from .nets import NetworkTarget
from .outline import Loop, Outline, outward_normal
from .shortest import shortest_connection_point
from .solver import BaseSolver, Evaluating

log = logging.getLogger(__name__)

Constraint = Callable[[Point], Point]


# ── IRLS ───────────────────────────────────────────────────────────


def irls_weight(distance: float, strategy: PlacementStrategy) -> float:
    """1 for least squares, 1/d (floored) for the geometric median."""
    if strategy in (PlacementStrategy.MINIMUM_SUM_SQUARED_DISTANCE,
                    PlacementStrategy.MINIMUM_CLOSEST_SUM_SQUARED_DISTANCE):
        return 1.0
    return 1.0 / max(distance, PACK_RULES.irls_weight_floor)


def irls_iteration(
    position: Point,
    targets: list[Point],
    strategy: PlacementStrategy,
    constraint: Constraint,
) -> Point:
    """One reweighting step: weighted mean of targets, then constrain."""
    sw = 0.0
    sx = 0.0
    sy = 0.0
    for t in targets:
        w = irls_weight(position.distance_to(t), strategy)
        sw += w
        sx += w * t.x
        sy += w * t.y
    return constraint(Point(sx / sw, sy / sw))


def closest_target(position: Point, targets: list[Point]) -> Point:
    """The first of *targets* nearest to *position*."""
    return min(targets, key=position.distance_to)


def _iterate(
    position: Point,
    targets: list[Point],
    strategy: PlacementStrategy,
    constraint: Constraint,
) -> Point:
    for _ in range(PACK_RULES.irls_max_iterations):
        nxt = irls_iteration(position, targets, strategy, constraint)
        moved = nxt.distance_to(position)
        position = nxt
        if moved < PACK_RULES.irls_epsilon:
            return position
    log.debug("IRLS did not converge in %d iterations", PACK_RULES.irls_max_iterations)
    return position


def solve_segment(
    segment: Segment,
    targets: list[Point],
    constraint: Constraint,
    strategy: PlacementStrategy,
) -> Point:
    """Minimize (squared) distance to *targets* over the constrained segment.

    The closest-target strategy runs least squares first, then solves
    again against only the target nearest that result.  Non-convergence
    within the iteration cap is not an error; the last position is
    returned.
    """
    a, b = segment
    position = constraint((a + b) * 0.5)
    if not targets:
        return position
    position = _iterate(position, targets, strategy, constraint)
    if strategy == PlacementStrategy.MINIMUM_CLOSEST_SUM_SQUARED_DISTANCE:
        position = _iterate(position, [closest_target(position, targets)],
                            PlacementStrategy.MINIMUM_SUM_DISTANCE, constraint)
    return position


# ── Constraint ─────────────────────────────────────────────────────


def push_out_of_forbidden(
    center: Point,
    footprint: Rect,
    outline: Outline,
    normal: Point,
) -> Point:
    """Push *center* along *normal* until the footprint is clear.

    *footprint* is relative to the centre and already expanded by the
    half gap.  Each pass moves by the deepest penetration plus a buffer.
    """
    q = center
    for _ in range(PACK_RULES.push_passes):
        depth = penetration_depth(translated(footprint, q), outline, normal)
        if depth <= 0:
            break
        q = q + normal * (depth + PACK_RULES.push_buffer)
    return q


def penetration_depth(rect: Rect, outline: Outline, normal: Point) -> float:
    """How far *rect* reaches into forbidden space, measured along *normal*.

    Corners strictly inside count by their distance to the nearest loop
    edge.  Overlap without a corner inside (a rect straddling a loop
    edge) counts by the extent of the overlap along the normal.
    """
    corners = rect.corners()
    depth = 0.0
    violating = [c for c in corners if outline.classify(c) == "inside"]
    if violating:
        depth = max(outline.distance_to_boundary(c) for c in violating)
    overlap = outline.forbidden_overlap(rect)
    if overlap is not None:
        back = min(c.dot(normal) for c in corners)
        minx, miny, maxx, maxy = overlap.bounds
        front = max(Point(x, y).dot(normal)
                    for x in (minx, maxx) for y in (miny, maxy))
        depth = max(depth, front - back)
    return depth


def viable_bounds(
    rect: Rect, footprint: Rect, segment: Segment,
) -> Rect | None:
    """Centre positions inside *rect* that keep *footprint* inside it.

    Only the axes the segment runs along are shrunk; the normal axis is
    left to the push-out step.
    """
    a, b = segment
    min_x, max_x = rect.min_x, rect.max_x
    min_y, max_y = rect.min_y, rect.max_y
    if abs(b.x - a.x) > 1e-9:
        min_x, max_x = rect.min_x - footprint.min_x, rect.max_x - footprint.max_x
    if abs(b.y - a.y) > 1e-9:
        min_y, max_y = rect.min_y - footprint.min_y, rect.max_y - footprint.max_y
    if max_x < min_x - 1e-9 or max_y < min_y - 1e-9:
        return None
    return Rect(min_x, min_y, max(min_x, max_x), max(min_y, max_y))


def viable_segment(segment: Segment, bounds: Rect) -> Segment:
    """The segment extended by its own length each way, clamped to *bounds*."""
    a, b = segment
    d = b - a

    def clamp(p: Point) -> Point:
        return Point(
            min(max(p.x, bounds.min_x), bounds.max_x),
            min(max(p.y, bounds.min_y), bounds.max_y),
        )

    return clamp(a - d), clamp(b + d)


# ── Stepping solver ────────────────────────────────────────────────


class CandidateSegmentSolver(BaseSolver):
    """Finds the best centre for one (segment, rotation) pair.

    Constructed fresh for every pair; one IRLS iteration per step.
    """

    def __init__(
        self,
        component: Component,
        rotation: float,
        segment: Segment,
        loop: Loop,
        outline: Outline,
        targets: list[NetworkTarget],
        strategy: PlacementStrategy,
        min_gap: float,
        global_bounds: Rect,
    ) -> None:
        super().__init__()
        self.component = component
        self.rotation = rotation
        self.segment = segment
        self.loop = loop
        self.outline = outline
        self.targets = targets
        self.strategy = strategy
        self.min_gap = min_gap
        self.global_bounds = global_bounds

        self.degenerate: GeometryDegenerate | None = None
        self.normal: Point | None = None
        self.anchor: Point | None = None
        self.free_rect: Rect | None = None
        self.viable: Segment | None = None
        self.position: Point | None = None
        self.irls_iterations = 0
        self.closest: Point | None = None
        self.footprint = local_bounds(component, rotation).expanded(
            PACK_RULES.half_gap(min_gap))

    def constrain(self, p: Point) -> Point:
        assert self.viable is not None and self.normal is not None
        q, _ = project_point_onto_segment(p, *self.viable)
        return push_out_of_forbidden(q, self.footprint, self.outline, self.normal)

    @property
    def center_targets(self) -> list[Point]:
        return [t.center_target for t in self.targets]

    def _setup(self) -> None:
        normal = outward_normal(self.segment, self.loop, self.outline)
        if isinstance(normal, GeometryDegenerate):
            self.degenerate = normal
            self.fail(normal.reason)
            return
        self.normal = normal

        a, b = self.segment
        mid = (a + b) * 0.5
        self.anchor = mid + normal * PACK_RULES.anchor_nudge
        self.free_rect = largest_rect(self.anchor, self.outline, self.global_bounds)
        if self.free_rect is None:
            self.fail("anchor is not in free space")
            return

        bounds = viable_bounds(self.free_rect, self.footprint, self.segment)
        if bounds is None:
            self.fail("component does not fit next to segment")
            return
        self.viable = viable_segment(self.segment, bounds)

        if self.strategy == PlacementStrategy.SHORTEST_CONNECTION_ALONG_OUTLINE:
            self.succeed(self.constrain(shortest_connection_point(self.viable, self.targets)))
            return
        self.position = self.constrain(mid)
        if not self.targets:
            self.succeed(self.position)
            return
        self.state = Evaluating(label="irls")

    def _step(self) -> None:
        assert self.position is not None
        if self.closest is None:
            targets, strategy = self.center_targets, self.strategy
        else:
            targets, strategy = [self.closest], PlacementStrategy.MINIMUM_SUM_DISTANCE
        nxt = irls_iteration(self.position, targets, strategy, self.constrain)
        moved = nxt.distance_to(self.position)
        self.position = nxt
        self.irls_iterations += 1
        if moved >= PACK_RULES.irls_epsilon:
            if self.irls_iterations < PACK_RULES.irls_max_iterations:
                return
            log.debug("IRLS on %s did not converge; keeping last position",
                      self.component.component_id)
        if (self.strategy == PlacementStrategy.MINIMUM_CLOSEST_SUM_SQUARED_DISTANCE
                and self.closest is None):
            self._start_closest_phase()
            return
        self.succeed(nxt)

    def _start_closest_phase(self) -> None:
        """Re-solve against only the target nearest the least-squares result."""
        assert self.position is not None
        self.closest = closest_target(self.position, self.center_targets)
        self.irls_iterations = 0
        self.state = Evaluating(label="irls-closest")

    def visualize(self) -> GraphicsSnapshot:
        snap = GraphicsSnapshot(title=f"Candidate {self.component.component_id} rot={self.rotation:g}")
        snap.lines.append(SnapLine(self.segment, "outline", "segment"))
        if self.viable is not None:
            snap.lines.append(SnapLine(self.viable, "candidate", "viable"))
        if self.free_rect is not None:
            snap.rects.append(SnapRect(self.free_rect, "free_rect", "largest rect"))
        for t in self.targets:
            snap.points.append(SnapPoint(t.point, "pad", t.network_id))
        if self.closest is not None:
            snap.points.append(SnapPoint(self.closest, "marker", "closest"))
        pos = self.result if self.solved else self.position
        if pos is not None:
            snap.points.append(SnapPoint(pos, "best", "position"))
            snap.rects.append(SnapRect(translated(self.footprint, pos), "candidate"))
        return snap
