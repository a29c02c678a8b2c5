"""Tests for JSON conversion of pack inputs and outputs."""

from __future__ import annotations

import json
import unittest

from padpack.geometry import Point, Rect
from padpack.placer import (
    OrderStrategy, PackDirection, PlacementStrategy,
    pack, pack_output_to_dict, parse_pack_input, parse_pack_output,
)
from tests.pack_fixtures import make_input_dict


class TestParsePackInput(unittest.TestCase):

    def test_full_input(self):
        inp = parse_pack_input(make_input_dict())
        self.assertEqual([c.component_id for c in inp.components], ["U1", "U2"])
        self.assertEqual(inp.min_gap, 2.0)
        self.assertEqual(inp.order_strategy, OrderStrategy.LARGEST_TO_SMALLEST)
        self.assertEqual(inp.placement_strategy, PlacementStrategy.MINIMUM_SUM_DISTANCE)
        self.assertEqual(inp.pack_first, ["U1"])
        self.assertEqual(inp.bounds, Rect(-50, -50, 50, 50))
        self.assertIsNone(inp.bounds_outline)
        self.assertEqual(inp.disconnected_direction, PackDirection.RIGHT)

        u1, u2 = inp.components
        self.assertEqual(u1.available_rotations, (0.0, 90.0))
        self.assertEqual(u1.pads[0].offset, Point(-5, 2))
        self.assertEqual(u1.pads[0].size, Point(1, 1))
        self.assertEqual(u1.pads[0].network_id, "VCC")
        self.assertEqual(u2.available_rotations, (0.0,))

    def test_empty_network_is_unconnected(self):
        u2 = parse_pack_input(make_input_dict()).components[1]
        self.assertIsNone(u2.pads[1].network_id)

    def test_obstacles(self):
        obs = parse_pack_input(make_input_dict()).obstacles
        self.assertEqual(len(obs), 1)
        self.assertEqual(obs[0].obstacle_id, "H1")
        self.assertEqual(obs[0].rect, Rect(18.5, -1.5, 21.5, 1.5))

    def test_defaults(self):
        inp = parse_pack_input({"components": []})
        self.assertEqual(inp.min_gap, 0.0)
        self.assertEqual(inp.order_strategy, OrderStrategy.LARGEST_TO_SMALLEST)
        self.assertEqual(inp.placement_strategy, PlacementStrategy.MINIMUM_SUM_SQUARED_DISTANCE)
        self.assertEqual(inp.obstacles, [])
        self.assertIsNone(inp.bounds)

    def test_bounds_outline_and_direction(self):
        data = make_input_dict()
        data["boundsOutline"] = [{"x": 0, "y": 0}, {"x": 1, "y": 0}, {"x": 0, "y": 1}]
        data["disconnectedPackDirection"] = "nearest_to_center"
        inp = parse_pack_input(data)
        self.assertEqual(inp.bounds_outline, [Point(0, 0), Point(1, 0), Point(0, 1)])
        self.assertEqual(inp.disconnected_direction, PackDirection.NEAREST_TO_CENTER)

    def test_closest_strategy(self):
        data = make_input_dict()
        data["packPlacementStrategy"] = "minimum_closest_sum_squared_distance"
        self.assertEqual(parse_pack_input(data).placement_strategy,
                         PlacementStrategy.MINIMUM_CLOSEST_SUM_SQUARED_DISTANCE)

    def test_unknown_strategy(self):
        data = make_input_dict()
        data["packPlacementStrategy"] = "random"
        with self.assertRaises(ValueError):
            parse_pack_input(data)


class TestPackOutput(unittest.TestCase):

    def setUp(self):
        self.out = pack(parse_pack_input(make_input_dict()))

    def test_output_shape(self):
        data = pack_output_to_dict(self.out)
        json.dumps(data)
        self.assertEqual(data["minGap"], 2.0)
        self.assertEqual(data["obstacles"][0]["obstacleId"], "H1")
        first = data["components"][0]
        self.assertEqual(first["componentId"], "U1")
        self.assertEqual(first["center"], {"x": 0.0, "y": 0.0})
        self.assertEqual(first["ccwRotationOffset"], 0.0)
        self.assertEqual(first["pads"][0]["absoluteCenter"], {"x": -5.0, "y": 2.0})

    def test_round_trip(self):
        back = parse_pack_output(json.loads(json.dumps(pack_output_to_dict(self.out))))
        self.assertEqual(back.components, self.out.components)
        self.assertEqual(back.min_gap, self.out.min_gap)
        self.assertEqual(back.obstacles, self.out.obstacles)


if __name__ == "__main__":
    unittest.main()
