#!/usr/bin/env python3
"""
Tests for distance and orientation helpers.
"""

from __future__ import annotations

import math
import unittest

import numpy as np

from sim.entity import Point, Quaternion
from sim.geometry import (
    distance,
    is_within_range,
    kmh_to_mps,
    offset_position,
    rotation_matrix,
    yaw_to_quaternion,
)


class GeometryTests(unittest.TestCase):
    def test_distance_is_three_dimensional(self) -> None:
        self.assertEqual(distance(Point(0, 0, 0), Point(2, 3, 6)), 7.0)

    def test_range_is_inclusive(self) -> None:
        self.assertTrue(is_within_range(Point(), Point(3, 4, 0), 5.0))
        self.assertFalse(is_within_range(Point(), Point(3, 4, 0.01), 5.0))

    def test_identity_and_degenerate_quaternions(self) -> None:
        np.testing.assert_allclose(rotation_matrix(Quaternion()), np.eye(3))
        np.testing.assert_allclose(rotation_matrix(Quaternion(0, 0, 0, 0)), np.eye(3))

    def test_yaw_rotation(self) -> None:
        moved = offset_position(Point(1, 1, 0), yaw_to_quaternion(math.pi), Point(2, 0, 0))
        self.assertAlmostEqual(moved.x, -1.0)
        self.assertAlmostEqual(moved.y, 1.0)

    def test_kmh_conversion_clamps_negative(self) -> None:
        self.assertAlmostEqual(kmh_to_mps(36.0), 10.0)
        self.assertEqual(kmh_to_mps(-5.0), 0.0)


if __name__ == "__main__":
    unittest.main()
