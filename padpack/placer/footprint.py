"""Low-level footprint helpers: rotation, bounding boxes and AABB gaps."""

from __future__ import annotations

from functools import reduce

from padpack.geometry import Point, Rect

from .models import Component, PackedComponent, PackedPad, rotated_extent


def pad_world_xy(offset: Point, center: Point, rotation: float) -> Point:
    """Transform a component-local pad offset to world coordinates."""
    return center + offset.rotated(rotation)


def place_component(
    component: Component, center: Point, rotation: float,
) -> PackedComponent:
    """Instantiate *component* at *center* with a CCW *rotation* in degrees."""
    pads = tuple(
        PackedPad(
            pad_id=p.pad_id,
            network_id=p.network_id,
            offset=p.offset,
            size=p.size,
            absolute_center=pad_world_xy(p.offset, center, rotation),
            rotation=rotation,
        )
        for p in component.pads
    )
    return PackedComponent(
        component_id=component.component_id,
        center=center,
        rotation=rotation,
        pads=pads,
    )


def local_bounds(component: Component, rotation: float) -> Rect:
    """Bounding box of the rotated pads relative to the component centre."""
    if not component.pads:
        return Rect(0.0, 0.0, 0.0, 0.0)
    rects = []
    for p in component.pads:
        w, h = rotated_extent(p.size, rotation)
        rects.append(Rect.from_center(p.offset.rotated(rotation), w, h))
    return reduce(Rect.union, rects)


def component_bounds(packed: PackedComponent) -> Rect:
    """World-space bounding box of a placed component's pads."""
    if not packed.pads:
        return Rect(packed.center.x, packed.center.y, packed.center.x, packed.center.y)
    return reduce(Rect.union, (p.rect for p in packed.pads))


def footprint_area(component: Component) -> float:
    """Unrotated bounding-box area, used for queue ordering."""
    return local_bounds(component, 0).area


def translated(rect: Rect, center: Point) -> Rect:
    return Rect(rect.min_x + center.x, rect.min_y + center.y,
                rect.max_x + center.x, rect.max_y + center.y)


def aabb_gap(a: Rect, b: Rect) -> float:
    """Clearance between two boxes (negative when they overlap).

    Boxes that are apart on either axis are separated by the larger of
    the two axis gaps.
    """
    gap_x = max(b.min_x - a.max_x, a.min_x - b.max_x)
    gap_y = max(b.min_y - a.max_y, a.min_y - b.max_y)
    return max(gap_x, gap_y)
