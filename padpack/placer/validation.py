"""Pack input validation — check a PackInput before running the engine."""

from __future__ import annotations

import math

from .models import PackInput


def _finite(*values: float) -> bool:
    return all(isinstance(v, (int, float)) and math.isfinite(v) for v in values)


def validate_pack_input(inp: PackInput) -> list[str]:
    """Validate a PackInput. Returns error messages (empty = valid)."""
    errors: list[str] = []

    # ── Clearance ──
    if not _finite(inp.min_gap) or inp.min_gap < 0:
        errors.append(f"minGap must be a finite non-negative number, got {inp.min_gap!r}")

    # ── Component IDs must be unique ──
    seen_ids: set[str] = set()
    for comp in inp.components:
        if comp.component_id in seen_ids:
            errors.append(f"Duplicate componentId '{comp.component_id}'")
        seen_ids.add(comp.component_id)

    # ── Pads ──
    for comp in inp.components:
        pad_ids: set[str] = set()
        for pad in comp.pads:
            if pad.pad_id in pad_ids:
                errors.append(f"Component '{comp.component_id}': duplicate padId '{pad.pad_id}'")
            pad_ids.add(pad.pad_id)
            if not _finite(pad.size.x, pad.size.y) or pad.size.x <= 0 or pad.size.y <= 0:
                errors.append(
                    f"Pad '{pad.pad_id}' of '{comp.component_id}': "
                    f"size must be finite and positive, got ({pad.size.x}, {pad.size.y})"
                )
            if not _finite(pad.offset.x, pad.offset.y):
                errors.append(f"Pad '{pad.pad_id}' of '{comp.component_id}': non-finite offset")
            if pad.shape != "rect":
                errors.append(
                    f"Pad '{pad.pad_id}' of '{comp.component_id}': "
                    f"unsupported shape '{pad.shape}'"
                )
        for rot in comp.available_rotations:
            if not _finite(rot):
                errors.append(f"Component '{comp.component_id}': non-finite rotation {rot!r}")

    # ── packFirst references ──
    for cid in inp.pack_first:
        if cid not in seen_ids:
            errors.append(f"packFirst references unknown component '{cid}'")

    # ── Obstacles ──
    for obs in inp.obstacles:
        if not _finite(obs.center.x, obs.center.y, obs.width, obs.height) \
                or obs.width <= 0 or obs.height <= 0:
            errors.append(f"Obstacle '{obs.obstacle_id}': invalid geometry")

    # ── Bounds ──
    if inp.bounds is not None:
        b = inp.bounds
        if not _finite(b.min_x, b.min_y, b.max_x, b.max_y) or b.width <= 0 or b.height <= 0:
            errors.append("bounds must be a finite box with positive width and height")
    if inp.bounds_outline is not None and len(inp.bounds_outline) < 3:
        errors.append("boundsOutline needs at least 3 points")

    return errors
