"""Tests for the geometry kernel (padpack.geometry).

Validates:
  - Point vector operations and exact quarter-turn rotation
  - Signed area / winding helpers
  - point_in_outline three-way classification
  - Convex hull convexity, containment and minimality
  - Segment projection, intersection and closest points
  - Collinear segment merging, including wraparound
"""

from __future__ import annotations

import unittest

from padpack.geometry import (
    Point, Rect,
    signed_area, ensure_ccw, points_to_segments, polygon_centroid, convex_hull,
    point_in_polygon, point_in_outline,
    project_point_onto_segment, distance_point_to_segment,
    segments_intersect, closest_points_between_segments,
    simplify_collinear_segments,
)
from padpack.geometry.polygon import cross3


def P(x: float, y: float) -> Point:
    return Point(float(x), float(y))


UNIT_SQUARE = [P(0, 0), P(1, 0), P(1, 1), P(0, 1)]


class TestPoint(unittest.TestCase):
    """Point value type."""

    def test_arithmetic(self):
        a = P(1, 2)
        b = P(3, -1)
        self.assertEqual(a + b, P(4, 1))
        self.assertEqual(b - a, P(2, -3))
        self.assertEqual(a * 2, P(2, 4))
        self.assertEqual(2 * a, P(2, 4))
        self.assertEqual(-a, P(-1, -2))

    def test_dot_cross(self):
        self.assertAlmostEqual(P(1, 0).dot(P(0, 1)), 0.0)
        self.assertAlmostEqual(P(1, 0).cross(P(0, 1)), 1.0)
        self.assertAlmostEqual(P(0, 1).cross(P(1, 0)), -1.0)

    def test_quarter_turns_are_exact(self):
        """Rotating by multiples of 90° introduces no float noise."""
        p = P(3, 1)
        self.assertEqual(p.rotated(90), P(-1, 3))
        self.assertEqual(p.rotated(180), P(-3, -1))
        self.assertEqual(p.rotated(270), P(1, -3))
        self.assertEqual(p.rotated(-90), P(1, -3))
        self.assertEqual(p.rotated(360), p)

    def test_arbitrary_rotation(self):
        p = P(1, 0).rotated(45)
        self.assertAlmostEqual(p.x, 2 ** -0.5)
        self.assertAlmostEqual(p.y, 2 ** -0.5)

    def test_normalize(self):
        n = P(3, 4).normalized()
        self.assertAlmostEqual(n.length(), 1.0)
        with self.assertRaises(ValueError):
            P(0, 0).normalized()


class TestAreaAndContainment(unittest.TestCase):

    def test_signed_area_sign(self):
        """CCW winding is positive, CW negative."""
        self.assertAlmostEqual(signed_area(UNIT_SQUARE), 1.0)
        self.assertAlmostEqual(signed_area(list(reversed(UNIT_SQUARE))), -1.0)

    def test_ensure_ccw(self):
        cw = list(reversed(UNIT_SQUARE))
        self.assertGreater(signed_area(ensure_ccw(cw)), 0)
        self.assertEqual(ensure_ccw(UNIT_SQUARE), UNIT_SQUARE)

    def test_point_in_outline_unit_square(self):
        segs = points_to_segments(UNIT_SQUARE)
        self.assertEqual(point_in_outline(P(0.5, 0.5), segs), "inside")
        self.assertEqual(point_in_outline(P(2, 2), segs), "outside")
        self.assertEqual(point_in_outline(P(0, 0.5), segs), "boundary")

    def test_point_in_outline_ignores_orientation(self):
        """Even-odd classification does not depend on winding."""
        segs = points_to_segments(list(reversed(UNIT_SQUARE)))
        self.assertEqual(point_in_outline(P(0.5, 0.5), segs), "inside")
        self.assertEqual(point_in_outline(P(1, 1), segs), "boundary")

    def test_point_in_outline_concave(self):
        # U shape: notch between x=1 and x=2 above y=1
        u = [P(0, 0), P(3, 0), P(3, 3), P(2, 3), P(2, 1), P(1, 1), P(1, 3), P(0, 3)]
        segs = points_to_segments(u)
        self.assertEqual(point_in_outline(P(1.5, 2), segs), "outside")
        self.assertEqual(point_in_outline(P(0.5, 2), segs), "inside")
        self.assertEqual(point_in_outline(P(1.5, 0.5), segs), "inside")

    def test_point_in_polygon(self):
        self.assertTrue(point_in_polygon(P(0.5, 0.5), UNIT_SQUARE))
        self.assertFalse(point_in_polygon(P(1.5, 0.5), UNIT_SQUARE))

    def test_centroid(self):
        sq = [P(0, 0), P(2, 0), P(2, 2), P(0, 2)]
        c = polygon_centroid(sq)
        self.assertAlmostEqual(c.x, 1.0)
        self.assertAlmostEqual(c.y, 1.0)

    def test_centroid_degenerate_falls_back_to_average(self):
        line = [P(0, 0), P(1, 0), P(2, 0)]
        c = polygon_centroid(line)
        self.assertAlmostEqual(c.x, 1.0)
        self.assertAlmostEqual(c.y, 0.0)


class TestConvexHull(unittest.TestCase):

    POINTS = [
        P(0, 0), P(4, 0), P(4, 4), P(0, 4),   # corners
        P(2, 0), P(4, 2),                      # on edges
        P(1, 1), P(2, 3), P(3, 1),             # interior
    ]

    def test_hull_is_minimal(self):
        """Collinear edge points and interior points are dropped."""
        hull = convex_hull(self.POINTS)
        self.assertEqual(len(hull), 4)
        self.assertEqual(set(hull), {P(0, 0), P(4, 0), P(4, 4), P(0, 4)})

    def test_hull_is_convex_and_ccw(self):
        hull = convex_hull(self.POINTS)
        n = len(hull)
        for i in range(n):
            self.assertGreater(cross3(hull[i], hull[(i + 1) % n], hull[(i + 2) % n]), 0)

    def test_hull_contains_all_points(self):
        hull = convex_hull(self.POINTS)
        segs = points_to_segments(hull)
        for p in self.POINTS:
            self.assertNotEqual(point_in_outline(p, segs), "outside", f"{p} outside hull")

    def test_small_inputs(self):
        self.assertEqual(convex_hull([]), [])
        self.assertEqual(convex_hull([P(1, 1), P(1, 1)]), [P(1, 1)])


class TestSegments(unittest.TestCase):

    def test_projection_clamps(self):
        q, t = project_point_onto_segment(P(5, 3), P(0, 0), P(10, 0))
        self.assertEqual((q, t), (P(5, 0), 0.5))
        q, t = project_point_onto_segment(P(-4, 1), P(0, 0), P(10, 0))
        self.assertEqual((q, t), (P(0, 0), 0.0))
        q, t = project_point_onto_segment(P(14, 1), P(0, 0), P(10, 0))
        self.assertEqual((q, t), (P(10, 0), 1.0))

    def test_distance_to_segment(self):
        self.assertAlmostEqual(distance_point_to_segment(P(5, 3), P(0, 0), P(10, 0)), 3.0)
        self.assertAlmostEqual(distance_point_to_segment(P(13, 4), P(0, 0), P(10, 0)), 5.0)

    def test_segments_intersect(self):
        self.assertTrue(segments_intersect(P(0, 0), P(2, 2), P(0, 2), P(2, 0)))
        self.assertTrue(segments_intersect(P(0, 0), P(1, 0), P(1, 0), P(1, 1)))  # touching
        self.assertFalse(segments_intersect(P(0, 0), P(1, 0), P(0, 1), P(1, 1)))

    def test_segments_intersect_tolerance(self):
        a1, a2 = P(0, 0), P(1, 0)
        b1, b2 = P(0.5, 1e-12), P(0.5, 1)
        self.assertFalse(segments_intersect(a1, a2, b1, b2))
        self.assertTrue(segments_intersect(a1, a2, b1, b2, tolerance=1e-9))
        self.assertFalse(segments_intersect(a1, a2, P(0.5, 1e-6), b2, tolerance=1e-9))

    def test_closest_points_crossing(self):
        pa, pb = closest_points_between_segments(P(0, 0), P(2, 0), P(1, -1), P(1, 1))
        self.assertAlmostEqual(pa.x, 1.0)
        self.assertAlmostEqual(pa.y, 0.0)
        self.assertEqual(pa, pb)

    def test_closest_points_parallel(self):
        pa, pb = closest_points_between_segments(P(0, 0), P(2, 0), P(1, 1), P(3, 1))
        self.assertAlmostEqual(pa.distance_to(pb), 1.0)
        self.assertAlmostEqual(pa.y, 0.0)
        self.assertAlmostEqual(pb.y, 1.0)


class TestSimplifyCollinear(unittest.TestCase):

    def test_merges_collinear_run(self):
        """Three collinear unit segments merge into one."""
        segs = [
            (P(0, 0), P(1, 0)),
            (P(1, 0), P(2, 0)),
            (P(2, 0), P(3, 0)),
            (P(3, 0), P(3, 1)),
        ]
        out = simplify_collinear_segments(segs)
        self.assertEqual(out, [(P(0, 0), P(3, 0)), (P(3, 0), P(3, 1))])

    def test_three_collinear_only(self):
        segs = [(P(0, 0), P(1, 0)), (P(1, 0), P(2, 0)), (P(2, 0), P(3, 0))]
        self.assertEqual(simplify_collinear_segments(segs), [(P(0, 0), P(3, 0))])

    def test_rectangle_with_split_edges(self):
        segs = [
            (P(0, 0), P(1, 0)), (P(1, 0), P(2, 0)),
            (P(2, 0), P(2, 1)), (P(2, 1), P(2, 2)),
            (P(2, 2), P(1, 2)), (P(1, 2), P(0, 2)),
            (P(0, 2), P(0, 1)), (P(0, 1), P(0, 0)),
        ]
        out = simplify_collinear_segments(segs)
        self.assertEqual(len(out), 4)
        for seg in [(P(0, 0), P(2, 0)), (P(2, 0), P(2, 2)),
                    (P(2, 2), P(0, 2)), (P(0, 2), P(0, 0))]:
            self.assertIn(seg, out)

    def test_wraparound_merge(self):
        """Last edge collinear with the first merges across the seam (3, not 4)."""
        segs = [
            (P(0, 0), P(2, 0)),
            (P(2, 0), P(1, 2)),
            (P(1, 2), P(-1, 0)),
            (P(-1, 0), P(0, 0)),
        ]
        out = simplify_collinear_segments(segs)
        self.assertEqual(len(out), 3)
        self.assertEqual(out[0], (P(-1, 0), P(2, 0)))
        self.assertEqual(out[1], (P(2, 0), P(1, 2)))
        self.assertEqual(out[2], (P(1, 2), P(-1, 0)))

    def test_preserves_non_collinear(self):
        segs = [(P(0, 0), P(1, 0)), (P(1, 0), P(1, 1)), (P(1, 1), P(0.5, 1.5))]
        self.assertEqual(simplify_collinear_segments(segs), segs)

    def test_tolerance(self):
        segs = [(P(0, 0), P(1, 0)), (P(1, 0), P(2, 0.001))]
        out = simplify_collinear_segments(segs, 0.01)
        self.assertEqual(out, [(P(0, 0), P(2, 0.001))])

    def test_disconnected_segments_kept(self):
        segs = [(P(0, 0), P(1, 0)), (P(2, 0), P(3, 0))]
        self.assertEqual(simplify_collinear_segments(segs), segs)

    def test_reversal_not_merged(self):
        """A spike that doubles back is collinear but not a continuation."""
        segs = [(P(0, 0), P(2, 0)), (P(2, 0), P(1, 0))]
        self.assertEqual(len(simplify_collinear_segments(segs)), 2)

    def test_trivial_inputs(self):
        self.assertEqual(simplify_collinear_segments([]), [])
        one = [(P(0, 0), P(1, 1))]
        self.assertEqual(simplify_collinear_segments(one), one)


class TestRect(unittest.TestCase):

    def test_from_center_and_expand(self):
        r = Rect.from_center(P(1, 1), 2, 4)
        self.assertEqual(r, Rect(0, -1, 2, 3))
        self.assertEqual(r.expanded(0.5), Rect(-0.5, -1.5, 2.5, 3.5))
        self.assertAlmostEqual(r.area, 8.0)
        self.assertEqual(r.center, P(1, 1))

    def test_contains(self):
        outer = Rect(0, 0, 10, 10)
        self.assertTrue(outer.contains_rect(Rect(1, 1, 9, 9)))
        self.assertFalse(outer.contains_rect(Rect(-1, 1, 9, 9)))
        self.assertTrue(outer.contains_point(P(10, 5)))


if __name__ == "__main__":
    unittest.main()
