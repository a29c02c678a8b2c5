"""Pack engine — queue-driven, one component at a time."""

from __future__ import annotations

import logging
from collections import deque

from padpack.config import PACK_RULES
from padpack.geometry import Point
from padpack.visualize import GraphicsSnapshot, SnapRect

from .collision import placement_violation
from .footprint import component_bounds, footprint_area, place_component
from .models import (
    Component, InvalidPackInputError, NoValidPlacementError,
    OrderStrategy, PackedComponent, PackInput, PackOutput,
)
from .outline import build_outline
from .single import SingleComponentPlacer
from .solver import BaseSolver, Evaluating
from .validation import validate_pack_input

log = logging.getLogger(__name__)


def sort_component_queue(
    components: list[Component],
    order: OrderStrategy,
    pack_first: list[str] | None = None,
) -> list[Component]:
    """Order the queue: ``pack_first`` ids in the given order, then the rest.

    The rest are ordered by footprint area, then pad count (largest
    first for LARGEST_TO_SMALLEST).  Ties keep input order.
    """
    pack_first = pack_first or []
    by_id = {c.component_id: c for c in components}
    head = [by_id[cid] for cid in pack_first if cid in by_id]
    head_ids = {c.component_id for c in head}
    rest = [c for c in components if c.component_id not in head_ids]
    rest = sorted(
        rest,
        key=lambda c: (footprint_area(c), len(c.pads)),
        reverse=(order == OrderStrategy.LARGEST_TO_SMALLEST),
    )
    return head + rest


class PackEngine(BaseSolver):
    """Places every input component, or fails on the first that cannot be placed.

    The head of the queue goes at the origin.  Each following component
    gets a freshly built outline and its own SingleComponentPlacer, which
    is advanced one step per engine step.
    """

    def __init__(self, pack_input: PackInput) -> None:
        super().__init__()
        self.input = pack_input
        self.queue: deque[Component] = deque()
        self.packed: list[PackedComponent] = []
        self.failed_component_id: str | None = None
        self.component_failure: str | None = None
        self.max_iterations = PACK_RULES.max_iterations_per_component * max(
            1, len(pack_input.components))

    def _setup(self) -> None:
        inp = self.input
        self.queue = deque(sort_component_queue(
            inp.components, inp.order_strategy, inp.pack_first))
        if not self.queue:
            self.succeed(self._output())
            return

        for comp in self.queue:
            if not comp.pads:
                log.warning("Component %s has no pads; placing it as a point", comp.component_id)

        head = self.queue[0]
        rotation = head.available_rotations[0] if head.available_rotations else 0
        first = place_component(head, Point(0.0, 0.0), rotation)
        reason = placement_violation(
            first, [], inp.obstacles, inp.min_gap,
            bounds=inp.bounds, bounds_outline=inp.bounds_outline,
        )
        if reason is None:
            self.queue.popleft()
            self.packed.append(first)
            log.info("Packed %s at origin rot=%g°", head.component_id, rotation)
        else:
            log.info("Origin is not usable for %s (%s); searching", head.component_id, reason)
        self.state = Evaluating(label="packing")

    def _step(self) -> None:
        child = self.active_child
        if child is None:
            if not self.queue:
                self.succeed(self._output())
                return
            comp = self.queue.popleft()
            inp = self.input
            outline = build_outline(
                self.packed, inp.obstacles, inp.min_gap,
                bounds=inp.bounds, bounds_outline=inp.bounds_outline,
            )
            log.debug("Outline for %s: %d loop(s)", comp.component_id, len(outline))
            child = SingleComponentPlacer(
                comp, self.packed, outline,
                min_gap=inp.min_gap,
                strategy=inp.placement_strategy,
                obstacles=inp.obstacles,
                bounds=inp.bounds,
                bounds_outline=inp.bounds_outline,
                direction=inp.disconnected_direction,
            )
            self.state = Evaluating(child, comp.component_id)

        child.step()
        if child.solved:
            placed = child.result
            self.packed.append(placed)
            log.info("Packed %s at (%.2f, %.2f) rot=%g° score=%.3f",
                     placed.component_id, placed.center.x, placed.center.y,
                     placed.rotation, child.best.score)
            self.state = Evaluating(label="packing")
        elif child.failed:
            self.failed_component_id = child.component.component_id
            self.component_failure = child.failure_reason
            log.warning("Cannot place %s: %s", self.failed_component_id, child.failure_reason)
            self.fail(f"Cannot place '{self.failed_component_id}': {child.failure_reason}")

    def _output(self) -> PackOutput:
        return PackOutput(
            components=list(self.packed),
            min_gap=self.input.min_gap,
            obstacles=list(self.input.obstacles),
        )

    def visualize(self) -> GraphicsSnapshot:
        child = self.active_child
        if child is not None:
            return child.visualize()
        snap = GraphicsSnapshot(title="PackEngine")
        for comp in self.packed:
            snap.rects.append(SnapRect(component_bounds(comp), "component", comp.component_id))
            for pad in comp.pads:
                snap.rects.append(SnapRect(pad.rect, "pad", pad.pad_id))
        for obs in self.input.obstacles:
            snap.rects.append(SnapRect(obs.rect, "obstacle", obs.obstacle_id))
        if self.input.bounds is not None:
            snap.rects.append(SnapRect(self.input.bounds, "grid", "bounds"))
        return snap


def pack(pack_input: PackInput) -> PackOutput:
    """Run the pack engine to completion.

    Parameters
    ----------
    pack_input : PackInput
        Components, clearance, strategies and optional obstacles/bounds.

    Returns
    -------
    PackOutput
        Every component with a center, rotation and absolute pad centers.

    Raises
    ------
    InvalidPackInputError
        If the input fails validation.
    NoValidPlacementError
        If some component has no collision-free position.
    """
    errors = validate_pack_input(pack_input)
    if errors:
        raise InvalidPackInputError(errors)

    engine = PackEngine(pack_input)
    engine.solve()
    if engine.failed:
        component_id = engine.failed_component_id or "_engine"
        reason = engine.component_failure or engine.failure_reason or "unknown failure"
        raise NoValidPlacementError(component_id, reason)
    return engine.result
