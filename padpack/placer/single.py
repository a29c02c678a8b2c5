"""Single-component placer — tries every (segment, rotation) pair."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from padpack.config import PACK_RULES
from padpack.geometry import Point, Rect, Segment
from padpack.visualize import GraphicsSnapshot, SnapPoint, SnapRect, loop_line

from .candidate import CandidateSegmentSolver
from .collision import placement_violation
from .footprint import component_bounds, local_bounds, place_component
from .models import (
    Component, Obstacle, PackDirection, PackedComponent, PlacementStrategy,
)
from .nets import nearest_pad_distance_sum, network_targets, shared_networks
from .outline import Loop, Outline
from .shortest import nearest_connection_sum
from .solver import BaseSolver, Evaluating

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Attempt:
    """One (segment, rotation) pair, in enumeration order."""

    segment_index: int
    segment: Segment
    loop: Loop
    rotation_index: int
    rotation: float


@dataclass(frozen=True)
class Candidate:
    """The outcome of one attempt."""

    attempt: Attempt
    packed: PackedComponent | None
    score: float
    valid: bool
    reason: str = ""

    @property
    def center(self) -> Point | None:
        return self.packed.center if self.packed is not None else None


def direction_score(
    center: Point, placed: Sequence[PackedComponent], direction: PackDirection,
) -> float:
    """Lower is better: distance short of the extreme in *direction*.

    Measured against the bounds of the already placed footprints (the
    origin when nothing is placed).
    """
    if placed:
        ref = component_bounds(placed[0])
        for comp in placed[1:]:
            ref = ref.union(component_bounds(comp))
    else:
        ref = Rect(0.0, 0.0, 0.0, 0.0)

    if direction == PackDirection.RIGHT:
        return ref.max_x - center.x
    if direction == PackDirection.LEFT:
        return center.x - ref.min_x
    if direction == PackDirection.UP:
        return ref.max_y - center.y
    if direction == PackDirection.DOWN:
        return center.y - ref.min_y
    if placed:
        cx = sum(c.center.x for c in placed) / len(placed)
        cy = sum(c.center.y for c in placed) / len(placed)
        return center.distance_to(Point(cx, cy))
    return center.length()


class SingleComponentPlacer(BaseSolver):
    """Places one component against the current outline.

    Each step advances the active CandidateSegmentSolver by one step,
    creating the next one when the previous finished.  Solved with the
    best valid candidate once every pair has been tried.
    """

    def __init__(
        self,
        component: Component,
        placed: Sequence[PackedComponent],
        outline: Outline,
        *,
        min_gap: float,
        strategy: PlacementStrategy,
        obstacles: Sequence[Obstacle] = (),
        bounds: Rect | None = None,
        bounds_outline: Sequence[Point] | None = None,
        direction: PackDirection = PackDirection(PACK_RULES.default_pack_direction),
    ) -> None:
        super().__init__()
        self.component = component
        self.placed = list(placed)
        self.outline = outline
        self.min_gap = min_gap
        self.strategy = strategy
        self.obstacles = list(obstacles)
        self.bounds = bounds
        self.bounds_outline = bounds_outline
        self.direction = direction

        self.attempts: list[Attempt] = []
        self.candidates: list[Candidate] = []
        self.best: Candidate | None = None
        self.connected = False
        self._cursor = 0
        self._global_bounds = Rect(0.0, 0.0, 0.0, 0.0)
        self._targets: dict[float, list] = {}

    # ── setup ──

    def _setup(self) -> None:
        rotations = self.component.available_rotations or (0,)
        seg_index = 0
        for loop in self.outline:
            for seg in loop.segments:
                for rot_index, rot in enumerate(rotations):
                    self.attempts.append(Attempt(seg_index, seg, loop, rot_index, rot))
                seg_index += 1

        if not self.attempts:
            self.fail("no outline segments to place against")
            return

        extent = max(
            max(local_bounds(self.component, r).width, local_bounds(self.component, r).height)
            for r in rotations
        )
        margin = PACK_RULES.outer_margin(self.min_gap, extent)
        self._global_bounds = self.outline.bounds().expanded(margin)
        self._targets = {
            rot: network_targets(self.component, rot, self.placed) for rot in rotations
        }
        self.connected = bool(shared_networks(self.component, self.placed))
        # every attempt takes at most one setup step plus two IRLS phases;
        # a cap passed to solve() is left alone
        if not self._explicit_cap:
            budget = len(self.attempts) * (2 * PACK_RULES.irls_max_iterations + 1) + 1
            self.max_iterations = max(self.max_iterations, budget)
        self.state = Evaluating(label="candidates")

    # ── stepping ──

    def _step(self) -> None:
        child = self.active_child
        if child is None:
            if self._cursor >= len(self.attempts):
                self._finish()
                return
            attempt = self.attempts[self._cursor]
            self._cursor += 1
            child = CandidateSegmentSolver(
                self.component, attempt.rotation, attempt.segment, attempt.loop,
                self.outline, self._targets[attempt.rotation], self.strategy,
                self.min_gap, self._global_bounds,
            )
            self.state = Evaluating(child, f"segment {attempt.segment_index} rot={attempt.rotation:g}")

        child.step()
        if not child.done:
            return

        attempt = self.attempts[self._cursor - 1]
        if child.degenerate is not None and not child.degenerate.recoverable:
            self.fail(f"degenerate geometry at segment {attempt.segment_index}: "
                      f"{child.degenerate.reason}")
            return
        self._record(attempt, child)
        self.state = Evaluating(label="candidates")

    def _record(self, attempt: Attempt, child: CandidateSegmentSolver) -> None:
        if child.failed:
            self.candidates.append(Candidate(
                attempt, None, float("inf"), False, child.failure_reason or ""))
            return

        packed = place_component(self.component, child.result, attempt.rotation)
        reason = placement_violation(
            packed, self.placed, self.obstacles, self.min_gap,
            outline=self.outline, bounds=self.bounds, bounds_outline=self.bounds_outline,
        )
        score = self.score(packed)
        cand = Candidate(attempt, packed, score, reason is None, reason or "")
        self.candidates.append(cand)
        if reason is not None:
            log.debug("Reject %s at (%.3f, %.3f) rot=%g: %s",
                      self.component.component_id, packed.center.x, packed.center.y,
                      attempt.rotation, reason)
            return
        if self.best is None or score < self.best.score - PACK_RULES.score_epsilon:
            self.best = cand

    def _finish(self) -> None:
        if self.best is None:
            self.fail(f"no valid position among {len(self.candidates)} candidates")
            return
        self.succeed(self.best.packed)

    # ── scoring ──

    def score(self, packed: PackedComponent) -> float:
        """Objective for a candidate; lower is better."""
        if not self.connected:
            return direction_score(packed.center, self.placed, self.direction)
        if self.strategy in (PlacementStrategy.MINIMUM_SUM_SQUARED_DISTANCE,
                             PlacementStrategy.MINIMUM_CLOSEST_SUM_SQUARED_DISTANCE):
            return nearest_pad_distance_sum(packed, self.placed, squared=True)
        if self.strategy == PlacementStrategy.SHORTEST_CONNECTION_ALONG_OUTLINE:
            return nearest_connection_sum(packed.center, self._targets[packed.rotation])
        return nearest_pad_distance_sum(packed, self.placed)

    # ── debug ──

    def visualize(self) -> GraphicsSnapshot:
        snap = GraphicsSnapshot(title=f"Place {self.component.component_id}")
        for loop in self.outline:
            snap.lines.append(loop_line(loop.points, "hole" if loop.is_hole else "outline"))
        for comp in self.placed:
            snap.rects.append(SnapRect(component_bounds(comp), "component", comp.component_id))
        for obs in self.obstacles:
            snap.rects.append(SnapRect(obs.rect, "obstacle", obs.obstacle_id))
        for cand in self.candidates:
            if cand.center is not None:
                color = "free_rect" if cand.valid else "outline"
                snap.points.append(SnapPoint(cand.center, color, f"{cand.score:.2f}"))
        if self.best is not None and self.best.packed is not None:
            snap.rects.append(SnapRect(component_bounds(self.best.packed), "best", "best"))
        child = self.active_child
        if child is not None:
            snap = snap.merge(child.visualize())
        return snap
