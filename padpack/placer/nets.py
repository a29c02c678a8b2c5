"""Network lookups: targets for the IRLS solver and pad-pair scoring."""

from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import dataclass

from padpack.geometry import Point, Rect

from .models import Component, PackedComponent, PackedPad


@dataclass(frozen=True)
class NetworkTarget:
    """A placed pad that one of the new component's pads wants to reach.

    ``own_offset`` is the rotated offset of the pulling pad, so the
    component centre that puts that pad on the target is
    ``point - own_offset``.
    """

    point: Point
    own_offset: Point
    network_id: str
    rect: Rect | None = None

    @property
    def center_target(self) -> Point:
        return self.point - self.own_offset


def is_connected(network_id: str | None) -> bool:
    return bool(network_id)


def placed_pads_by_network(
    placed: list[PackedComponent],
) -> dict[str, list[PackedPad]]:
    """Map network id -> placed pads on that network."""
    by_net: dict[str, list[PackedPad]] = defaultdict(list)
    for comp in placed:
        for pad in comp.pads:
            if is_connected(pad.network_id):
                by_net[pad.network_id].append(pad)
    return dict(by_net)


def shared_networks(component: Component, placed: list[PackedComponent]) -> set[str]:
    """Networks of *component* that already have a placed pad."""
    by_net = placed_pads_by_network(placed)
    return {
        p.network_id for p in component.pads
        if is_connected(p.network_id) and p.network_id in by_net
    }


def network_targets(
    component: Component,
    rotation: float,
    placed: list[PackedComponent],
) -> list[NetworkTarget]:
    """One target per (own pad, placed pad) pair on a shared network."""
    by_net = placed_pads_by_network(placed)
    targets: list[NetworkTarget] = []
    for pad in component.pads:
        if not is_connected(pad.network_id):
            continue
        own_offset = pad.offset.rotated(rotation)
        for other in by_net.get(pad.network_id, ()):
            targets.append(NetworkTarget(
                point=other.absolute_center,
                own_offset=own_offset,
                network_id=pad.network_id,
                rect=other.rect,
            ))
    return targets


def nearest_pad_distance_sum(
    candidate: PackedComponent,
    placed: list[PackedComponent],
    *,
    squared: bool = False,
) -> float:
    """Sum over the candidate's networked pads of the distance to the
    nearest placed pad on the same network.

    Pads whose network has nothing placed yet contribute 0.
    """
    by_net = placed_pads_by_network(placed)
    total = 0.0
    for pad in candidate.pads:
        others = by_net.get(pad.network_id) if is_connected(pad.network_id) else None
        if not others:
            continue
        best = math.inf
        for other in others:
            d = pad.absolute_center.distance_to(other.absolute_center)
            best = min(best, d * d if squared else d)
        total += best
    return total
