"""Shared numeric rules for the packer.

The outline builder, the candidate solvers and the pack engine all read
their tolerances and iteration limits from this single source of truth.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PackRules:
    """Tolerances, iteration caps and defaults used while packing.

    All distances are in board units (the same units as pad sizes).
    """

    irls_epsilon: float = 1e-6
    """IRLS stops once the position moves less than this between iterations."""

    irls_max_iterations: int = 50
    """Hard cap on IRLS iterations; the last position is accepted."""

    irls_weight_floor: float = 1e-6
    """Lower bound on the distance used for 1/d weights."""

    push_buffer: float = 0.1
    """Extra distance added when pushing a candidate out of forbidden space."""

    push_passes: int = 4
    """Maximum push-out repetitions inside one constraint application."""

    anchor_nudge: float = 1e-4
    """Offset along the outward normal used to anchor the free-rectangle search."""

    normal_probe: float = 1e-3
    """Probe distance when resolving the outward normal of an unclassified loop."""

    synthetic_box_half_size: float = 1.0
    """Half size of the placeholder loop returned when nothing is forbidden."""

    min_loop_area: float = 1e-9
    """Loops with smaller |signed area| are discarded as degenerate."""

    gap_tolerance: float = 1e-6
    """Allowed numeric shortfall when checking clearance between boxes."""

    score_epsilon: float = 1e-9
    """A candidate must beat the current best by this much to replace it."""

    max_iterations_per_component: int = 1_000_000
    """Step budget per placed component for the engine's solve loop."""

    default_pack_direction: str = "right"
    """Where a component without shared networks is pushed."""

    default_order_strategy: str = "largest_to_smallest"
    default_placement_strategy: str = "minimum_sum_squared_distance_to_network"

    # ── Derived helpers ────────────────────────────────────────────

    def half_gap(self, min_gap: float) -> float:
        """Expansion applied to each side so two footprints end up min_gap apart."""
        return min_gap / 2.0

    def outer_margin(self, min_gap: float, extent: float) -> float:
        """Margin around the forbidden region's bounds for the rectangle search.

        Room for one component of the given extent plus clearance on each side.
        """
        return 2 * extent + 2 * min_gap


# Shared instance read by every placer module.
PACK_RULES = PackRules()
