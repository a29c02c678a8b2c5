"""Geometry kernel — Point value type and pure polygon/segment helpers."""

from .point import Point, Rect, Segment
from .polygon import (
    signed_area, loop_signed_area, ensure_ccw, points_to_segments,
    segments_bounds, polygon_centroid, convex_hull,
    point_in_polygon, point_in_outline,
    project_point_onto_segment, distance_point_to_segment,
    segments_intersect, closest_points_between_segments,
    simplify_collinear_segments, loop_points,
)

__all__ = [
    "Point", "Rect", "Segment",
    "signed_area", "loop_signed_area", "ensure_ccw", "points_to_segments",
    "segments_bounds", "polygon_centroid", "convex_hull",
    "point_in_polygon", "point_in_outline",
    "project_point_onto_segment", "distance_point_to_segment",
    "segments_intersect", "closest_points_between_segments",
    "simplify_collinear_segments", "loop_points",
]
