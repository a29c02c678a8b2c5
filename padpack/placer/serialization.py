"""Pack input/output serialization — JSON conversion."""

from __future__ import annotations

from padpack.config import PACK_RULES
from padpack.geometry import Point, Rect

from .models import (
    Component, Obstacle, OrderStrategy, Pad, PackDirection,
    PackedComponent, PackedPad, PackInput, PackOutput, PlacementStrategy,
)


def _point(data: dict) -> Point:
    return Point(float(data["x"]), float(data["y"]))


def _xy(p: Point) -> dict:
    return {"x": p.x, "y": p.y}


def parse_pack_input(data: dict) -> PackInput:
    """Parse a raw dict (from JSON) into a PackInput."""
    components = [
        Component(
            component_id=c["componentId"],
            pads=tuple(
                Pad(
                    pad_id=p["padId"],
                    network_id=p.get("networkId") or None,
                    offset=_point(p["offset"]),
                    size=_point(p["size"]),
                    shape=p.get("type", "rect"),
                )
                for p in c.get("pads", [])
            ),
            available_rotations=tuple(
                float(r) for r in (c.get("availableRotationDegrees") or [0])
            ),
        )
        for c in data["components"]
    ]

    obstacles = [
        Obstacle(
            obstacle_id=o["obstacleId"],
            center=_point(o["absoluteCenter"]),
            width=float(o["width"]),
            height=float(o["height"]),
        )
        for o in data.get("obstacles", [])
    ]

    bounds = None
    if data.get("bounds"):
        b = data["bounds"]
        bounds = Rect(float(b["minX"]), float(b["minY"]), float(b["maxX"]), float(b["maxY"]))

    bounds_outline = None
    if data.get("boundsOutline"):
        bounds_outline = [_point(p) for p in data["boundsOutline"]]

    return PackInput(
        components=components,
        min_gap=float(data.get("minGap", 0.0)),
        order_strategy=OrderStrategy(
            data.get("packOrderStrategy", PACK_RULES.default_order_strategy)),
        placement_strategy=PlacementStrategy(
            data.get("packPlacementStrategy", PACK_RULES.default_placement_strategy)),
        obstacles=obstacles,
        bounds=bounds,
        bounds_outline=bounds_outline,
        pack_first=list(data.get("packFirst", [])),
        disconnected_direction=PackDirection(
            data.get("disconnectedPackDirection", PACK_RULES.default_pack_direction)),
    )


def _pad_to_dict(p: PackedPad) -> dict:
    return {
        "padId": p.pad_id,
        "networkId": p.network_id,
        "type": "rect",
        "offset": _xy(p.offset),
        "size": _xy(p.size),
        "absoluteCenter": _xy(p.absolute_center),
    }


def packed_component_to_dict(c: PackedComponent) -> dict:
    return {
        "componentId": c.component_id,
        "center": _xy(c.center),
        "ccwRotationOffset": c.rotation,
        "pads": [_pad_to_dict(p) for p in c.pads],
    }


def pack_output_to_dict(out: PackOutput) -> dict:
    """Serialize a PackOutput to a JSON-safe dict."""
    return {
        "components": [packed_component_to_dict(c) for c in out.components],
        "minGap": out.min_gap,
        "obstacles": [
            {
                "obstacleId": o.obstacle_id,
                "absoluteCenter": _xy(o.center),
                "width": o.width,
                "height": o.height,
            }
            for o in out.obstacles
        ],
    }


def parse_pack_output(data: dict) -> PackOutput:
    """Parse a pack output dict back into a PackOutput."""
    components = []
    for c in data["components"]:
        rotation = float(c["ccwRotationOffset"])
        components.append(PackedComponent(
            component_id=c["componentId"],
            center=_point(c["center"]),
            rotation=rotation,
            pads=tuple(
                PackedPad(
                    pad_id=p["padId"],
                    network_id=p.get("networkId"),
                    offset=_point(p["offset"]),
                    size=_point(p["size"]),
                    absolute_center=_point(p["absoluteCenter"]),
                    rotation=rotation,
                )
                for p in c["pads"]
            ),
        ))
    obstacles = [
        Obstacle(
            obstacle_id=o["obstacleId"],
            center=_point(o["absoluteCenter"]),
            width=float(o["width"]),
            height=float(o["height"]),
        )
        for o in data.get("obstacles", [])
    ]
    return PackOutput(
        components=components,
        min_gap=float(data.get("minGap", 0.0)),
        obstacles=obstacles,
    )
