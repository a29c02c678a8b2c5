"""Placer input/output dataclasses, strategy enums and errors."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from padpack.config import PACK_RULES
from padpack.geometry import Point, Rect


# ── Strategies ─────────────────────────────────────────────────────


class OrderStrategy(str, Enum):
    LARGEST_TO_SMALLEST = "largest_to_smallest"
    SMALLEST_TO_LARGEST = "smallest_to_largest"


class PlacementStrategy(str, Enum):
    MINIMUM_SUM_DISTANCE = "minimum_sum_distance_to_network"
    MINIMUM_SUM_SQUARED_DISTANCE = "minimum_sum_squared_distance_to_network"
    SHORTEST_CONNECTION_ALONG_OUTLINE = "shortest_connection_along_outline"
    MINIMUM_CLOSEST_SUM_SQUARED_DISTANCE = "minimum_closest_sum_squared_distance"


class PackDirection(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    NEAREST_TO_CENTER = "nearest_to_center"


def rotated_extent(size: Point, rotation: float) -> tuple[float, float]:
    """Width and height of the bounding box of a rotated (w, h) rectangle."""
    a = Point(size.x / 2, size.y / 2).rotated(rotation)
    b = Point(size.x / 2, -size.y / 2).rotated(rotation)
    return (2 * max(abs(a.x), abs(b.x)), 2 * max(abs(a.y), abs(b.y)))


# ── Input dataclasses ──────────────────────────────────────────────


@dataclass(frozen=True)
class Pad:
    """A rectangular pad, offset from its component centre before rotation."""

    pad_id: str
    network_id: str | None
    offset: Point
    size: Point          # (width, height)
    shape: str = "rect"


@dataclass(frozen=True)
class Component:
    """An unplaced component."""

    component_id: str
    pads: tuple[Pad, ...]
    available_rotations: tuple[float, ...] = (0,)


@dataclass(frozen=True)
class Obstacle:
    """Fixed forbidden rectangle."""

    obstacle_id: str
    center: Point
    width: float
    height: float

    @property
    def rect(self) -> Rect:
        return Rect.from_center(self.center, self.width, self.height)


@dataclass
class PackInput:
    components: list[Component]
    min_gap: float
    order_strategy: OrderStrategy = OrderStrategy(PACK_RULES.default_order_strategy)
    placement_strategy: PlacementStrategy = PlacementStrategy(
        PACK_RULES.default_placement_strategy)
    obstacles: list[Obstacle] = field(default_factory=list)
    bounds: Rect | None = None
    bounds_outline: list[Point] | None = None
    pack_first: list[str] = field(default_factory=list)
    disconnected_direction: PackDirection = PackDirection(PACK_RULES.default_pack_direction)


# ── Output dataclasses ─────────────────────────────────────────────


@dataclass(frozen=True)
class PackedPad:
    pad_id: str
    network_id: str | None
    offset: Point
    size: Point
    absolute_center: Point
    rotation: float = 0

    @property
    def rect(self) -> Rect:
        """World-space bounding box of the rotated pad."""
        w, h = rotated_extent(self.size, self.rotation)
        return Rect.from_center(self.absolute_center, w, h)


@dataclass(frozen=True)
class PackedComponent:
    """A component with a resolved center and counter-clockwise rotation."""

    component_id: str
    center: Point
    rotation: float
    pads: tuple[PackedPad, ...]


@dataclass
class PackOutput:
    components: list[PackedComponent]
    min_gap: float
    obstacles: list[Obstacle] = field(default_factory=list)


# ── Errors ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class GeometryDegenerate:
    """Returned in place of a result when the geometry cannot be resolved.

    A recoverable degeneracy only invalidates the candidate being
    evaluated; an unrecoverable one fails the whole placement.
    """

    reason: str
    recoverable: bool = True


class PackError(Exception):
    """Base class for packer errors."""


class NoValidPlacementError(PackError):
    """Raised when a component has no collision-free position."""

    def __init__(self, component_id: str, reason: str) -> None:
        self.component_id = component_id
        self.reason = reason
        super().__init__(f"Cannot place '{component_id}': {reason}")


class InvalidPackInputError(PackError):
    """Raised by pack() when the input fails validation."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__("Invalid pack input: " + "; ".join(errors))
