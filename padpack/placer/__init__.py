"""Placer — packs components one at a time around what is already placed.

Submodules:
  models        Input/output dataclasses, strategy enums and errors.
  footprint     Rotation, bounding boxes and AABB gaps.
  nets          Network targets and pad-pair distance scoring.
  outline       Free/forbidden boundary loops (shapely boolean ops).
  largest_rect  Largest free rectangle around an anchor point.
  candidate     Per-segment IRLS search with push-out constraint.
  shortest      shortest_connection_along_outline strategy.
  collision     Hard placement constraints.
  solver        Cooperative stepping base class and states.
  single        Single-component placer (segment × rotation search).
  engine        Queue-driven pack engine and pack().
  validation    Input checks (validate_pack_input).
  serialization JSON conversion (parse_pack_input, pack_output_to_dict).
"""

from .models import (
    Pad, Component, Obstacle, PackInput, PackedPad, PackedComponent, PackOutput,
    OrderStrategy, PlacementStrategy, PackDirection,
    GeometryDegenerate, PackError, NoValidPlacementError, InvalidPackInputError,
)
from .engine import PackEngine, pack, sort_component_queue
from .single import SingleComponentPlacer
from .outline import Loop, Outline, build_outline, outward_normal
from .largest_rect import largest_rect
from .candidate import CandidateSegmentSolver, solve_segment
from .collision import does_component_violate_bounds_outline, placement_violation
from .validation import validate_pack_input
from .serialization import parse_pack_input, pack_output_to_dict, parse_pack_output
from .footprint import aabb_gap, component_bounds, place_component

__all__ = [
    # Models
    "Pad", "Component", "Obstacle", "PackInput", "PackedPad", "PackedComponent",
    "PackOutput", "OrderStrategy", "PlacementStrategy", "PackDirection",
    "GeometryDegenerate", "PackError", "NoValidPlacementError", "InvalidPackInputError",
    # Solvers
    "PackEngine", "pack", "sort_component_queue", "SingleComponentPlacer",
    "CandidateSegmentSolver", "solve_segment",
    # Outline
    "Loop", "Outline", "build_outline", "outward_normal", "largest_rect",
    # Checks
    "does_component_violate_bounds_outline", "placement_violation", "validate_pack_input",
    # Serialization
    "parse_pack_input", "pack_output_to_dict", "parse_pack_output",
    # Footprint helpers (used by tests)
    "aabb_gap", "component_bounds", "place_component",
]
