"""Tests for the largest free rectangle search (padpack.placer.largest_rect)."""

from __future__ import annotations

import unittest

from padpack.geometry import Point, Rect
from padpack.placer import build_outline, largest_rect
from padpack.placer.largest_rect import LargestRectSolver, free_interval
from padpack.placer.outline import Outline, loop_from_points
from tests.pack_fixtures import make_obstacle


def P(x: float, y: float) -> Point:
    return Point(float(x), float(y))


SQUARE = loop_from_points([P(100, 100), P(200, 100), P(200, 200), P(100, 200)])

# L-shaped island: 4×2 foot with a 2×2 column on its left
L_SHAPE = loop_from_points([P(0, 0), P(4, 0), P(4, 2), P(2, 2), P(2, 4), P(0, 4)])


class TestLargestRect(unittest.TestCase):

    def test_left_of_square(self):
        """Free space left of an island, clipped to the global bounds."""
        rect = largest_rect(P(50, 150), [SQUARE], Rect(0, 0, 300, 300))
        self.assertEqual(rect, Rect(0, 0, 100, 300))

    def test_anchor_inside_forbidden(self):
        self.assertIsNone(largest_rect(P(150, 150), [SQUARE], Rect(0, 0, 300, 300)))

    def test_anchor_outside_global_bounds(self):
        self.assertIsNone(largest_rect(P(400, 150), [SQUARE], Rect(0, 0, 300, 300)))

    def test_beside_l_shape(self):
        rect = largest_rect(P(5, 1), [L_SHAPE], Rect(-10, -10, 10, 10))
        self.assertEqual(rect, Rect(4, -10, 10, 10))

    def test_above_l_foot(self):
        """Anchored in the notch, the rectangle sits on the foot and runs right."""
        rect = largest_rect(P(3, 3), [L_SHAPE], Rect(-10, -10, 10, 10))
        self.assertEqual(rect, Rect(2, 2, 10, 10))

    def test_hole_of_frame(self):
        outline = build_outline([], [
            make_obstacle("L", -4.5, 0, 1, 10),
            make_obstacle("R", 4.5, 0, 1, 10),
            make_obstacle("B", 0, -4.5, 8, 1),
            make_obstacle("T", 0, 4.5, 8, 1),
        ], 0.0)
        rect = largest_rect(P(0, 0), outline, Rect(-20, -20, 20, 20))
        self.assertEqual(rect, Rect(-4, -4, 4, 4))

    def test_inside_bounds(self):
        outline = build_outline([], [], 1.0, bounds=Rect(-10, -10, 10, 10))
        rect = largest_rect(P(0, 0), outline, Rect(-20, -20, 20, 20))
        self.assertEqual(rect, Rect(-10, -10, 10, 10))

    def test_result_contains_anchor(self):
        anchor = P(3, 3)
        rect = largest_rect(anchor, [L_SHAPE], Rect(-10, -10, 10, 10))
        self.assertTrue(rect.contains_point(anchor))


class TestFreeInterval(unittest.TestCase):

    def test_intervals_around_square(self):
        outline = Outline(loops=(SQUARE,))
        self.assertEqual(
            free_interval(150, outline, Rect(0, 0, 300, 300)),
            [(0, 100), (200, 300)],
        )

    def test_interval_inside_bounds(self):
        outline = build_outline([], [], 0.0, bounds=Rect(-10, -10, 10, 10))
        self.assertEqual(free_interval(0, outline, Rect(-20, -20, 20, 20)), [(-10, 10)])


class TestLargestRectSolver(unittest.TestCase):

    def test_solves_in_one_step(self):
        solver = LargestRectSolver(P(50, 150), Outline(loops=(SQUARE,)), Rect(0, 0, 300, 300))
        solver.solve()
        self.assertTrue(solver.solved)
        self.assertEqual(solver.iterations, 1)
        self.assertEqual(solver.result, Rect(0, 0, 100, 300))
        self.assertFalse(solver.visualize().is_empty())

    def test_fails_in_forbidden_space(self):
        solver = LargestRectSolver(P(150, 150), Outline(loops=(SQUARE,)), Rect(0, 0, 300, 300))
        solver.solve()
        self.assertTrue(solver.failed)
        self.assertIn("not in free space", solver.failure_reason)


if __name__ == "__main__":
    unittest.main()
