#!/usr/bin/env python3
"""
sim/geometry.py
===============
Low-level geometry helpers used by :mod:`sensor.detection_sensor` and the
demo driver.

Keeping these in a separate module avoids circular imports and makes unit
testing straightforward.
"""

from __future__ import annotations

import math

import numpy as np

from sim.entity import Point, Quaternion


def kmh_to_mps(speed_kmh: float) -> float:
    """Convert km/h to m/s, clamping negatives to zero."""
    return max(0.0, float(speed_kmh)) / 3.6


def distance(a: Point, b: Point) -> float:
    """3-D Euclidean distance between two points."""
    return math.sqrt((a.x - b.x) ** 2 + (a.y - b.y) ** 2 + (a.z - b.z) ** 2)


def is_within_range(a: Point, b: Point, range_m: float) -> bool:
    """True when *a* and *b* are at most *range_m* apart (inclusive)."""
    return distance(a, b) <= range_m


def rotation_matrix(q: Quaternion) -> np.ndarray:
    """3×3 rotation matrix of a unit quaternion.

    The quaternion is normalised first; a zero quaternion is treated as
    the identity rotation.
    """
    norm = math.sqrt(q.x * q.x + q.y * q.y + q.z * q.z + q.w * q.w)
    if norm == 0.0:
        return np.eye(3)
    x, y, z, w = q.x / norm, q.y / norm, q.z / norm, q.w / norm
    return np.array([
        [1 - 2 * (y * y + z * z), 2 * (x * y - z * w),     2 * (x * z + y * w)],
        [2 * (x * y + z * w),     1 - 2 * (x * x + z * z), 2 * (y * z - x * w)],
        [2 * (x * z - y * w),     2 * (y * z + x * w),     1 - 2 * (x * x + y * y)],
    ])


def yaw_to_quaternion(yaw: float) -> Quaternion:
    """Quaternion for a rotation of *yaw* radians about +z."""
    return Quaternion(z=math.sin(yaw / 2.0), w=math.cos(yaw / 2.0))


def offset_position(position: Point, orientation: Quaternion, local: Point) -> Point:
    """World position of *local* (given in the body frame) for a body at
    *position* with *orientation*."""
    rotated = rotation_matrix(orientation) @ np.array([local.x, local.y, local.z])
    return Point(
        x=position.x + float(rotated[0]),
        y=position.y + float(rotated[1]),
        z=position.z + float(rotated[2]),
    )
