"""
sim/entity.py
=============
Ground-truth entity records making up one world-state snapshot.

The host rebuilds the snapshot every tick; sensors only read it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict


class EntityType(Enum):
    """Role of an entity in the scenario."""
    EGO = 0
    VEHICLE = 1
    PEDESTRIAN = 2
    MISC_OBJECT = 3


class EntitySubtype(Enum):
    """Object category used for perception classification."""
    UNKNOWN = 0
    CAR = 1
    TRUCK = 2
    BUS = 3
    TRAILER = 4
    MOTORCYCLE = 5
    BICYCLE = 6
    PEDESTRIAN = 7


@dataclass(frozen=True)
class Point:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass(frozen=True)
class Vector3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass(frozen=True)
class Quaternion:
    """Orientation as a unit quaternion; the default is the identity."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0


@dataclass(frozen=True)
class Pose:
    position: Point = field(default_factory=Point)
    orientation: Quaternion = field(default_factory=Quaternion)


@dataclass(frozen=True)
class Twist:
    linear: Vector3 = field(default_factory=Vector3)
    angular: Vector3 = field(default_factory=Vector3)


@dataclass(frozen=True)
class BoundingBox:
    """Box centre (in the entity frame) and full dimensions in metres."""
    center: Point = field(default_factory=Point)
    dimensions: Vector3 = field(default_factory=lambda: Vector3(4.5, 2.0, 1.5))


@dataclass(frozen=True)
class EntityStatus:
    """Ground truth for one entity at one tick.

    Attributes
    ----------
    name : str
        Unique entity name (matches the scenario's ScenarioObject name).
    type : EntityType
        EGO / VEHICLE / PEDESTRIAN / MISC_OBJECT.
    subtype : EntitySubtype
        Category used for perception classification.
    pose, twist, bounding_box
        Kinematic state and extent.
    """

    name: str
    type: EntityType = EntityType.VEHICLE
    subtype: EntitySubtype = EntitySubtype.CAR
    pose: Pose = field(default_factory=Pose)
    twist: Twist = field(default_factory=Twist)
    bounding_box: BoundingBox = field(default_factory=BoundingBox)

    def as_dict(self) -> Dict[str, Any]:
        """Flat dict for logs and the inspection API."""
        p = self.pose.position
        return {
            "name": self.name,
            "type": self.type.name,
            "subtype": self.subtype.name,
            "x": p.x,
            "y": p.y,
            "z": p.z,
            "speed": self.twist.linear.x,
        }
