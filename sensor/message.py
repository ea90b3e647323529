"""
Perception messages produced by the detection sensor.

:class:`DetectedObjects` is what a perception stack would publish;
:class:`TrackedObjects` carries the same objects as ground truth for
evaluation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple

import numpy as np

from sim.entity import Pose, Twist, Vector3

# Row-major 6×6 covariance over (x, y, z, roll, pitch, yaw).
IDENTITY_COVARIANCE: Tuple[float, ...] = tuple(float(v) for v in np.eye(6).ravel())


class ObjectLabel(Enum):
    UNKNOWN = 0
    CAR = 1
    TRUCK = 2
    BUS = 3
    TRAILER = 4
    MOTORCYCLE = 5
    BICYCLE = 6
    PEDESTRIAN = 7


class OrientationAvailability(Enum):
    UNAVAILABLE = 0
    SIGN_UNKNOWN = 1
    AVAILABLE = 2


@dataclass
class Header:
    """
    Attributes:
        stamp (float): Clock timestamp (epoch seconds) of the producing tick.
        frame_id (str): Coordinate frame of every pose in the message.
    """
    stamp: float
    frame_id: str = "map"


@dataclass
class ObjectClassification:
    label: ObjectLabel = ObjectLabel.UNKNOWN
    probability: float = 1.0


@dataclass
class PoseWithCovariance:
    pose: Pose
    covariance: Tuple[float, ...] = IDENTITY_COVARIANCE


@dataclass
class TwistWithCovariance:
    twist: Twist
    covariance: Tuple[float, ...] = IDENTITY_COVARIANCE


@dataclass
class ObjectKinematics:
    pose_with_covariance: PoseWithCovariance
    twist_with_covariance: TwistWithCovariance
    orientation_availability: OrientationAvailability = OrientationAvailability.UNAVAILABLE


@dataclass
class Shape:
    """Bounding-box extent; ``type`` is always ``"BOUNDING_BOX"`` here."""
    dimensions: Vector3
    type: str = "BOUNDING_BOX"


@dataclass
class DetectedObject:
    """
    Represents one object as seen by the perception stack.

    Attributes:
        classification (list): Candidate classes, most likely first.
        kinematics (ObjectKinematics): Pose and twist with covariance.
        shape (Shape): Object extent.
        existence_probability (float): Confidence that the object exists.
    """
    classification: List[ObjectClassification]
    kinematics: ObjectKinematics
    shape: Shape
    existence_probability: float = 1.0


@dataclass
class TrackedObject:
    """Ground-truth counterpart of :class:`DetectedObject` with a stable id."""
    object_id: str
    classification: List[ObjectClassification]
    kinematics: ObjectKinematics
    shape: Shape
    existence_probability: float = 1.0


@dataclass
class DetectedObjects:
    header: Header
    objects: List[DetectedObject] = field(default_factory=list)


@dataclass
class TrackedObjects:
    header: Header
    objects: List[TrackedObject] = field(default_factory=list)
