"""
Utility functions for the detection sensor:
    - object ID generation
    - loss sampling
    - position noise
"""

import uuid
import logging
from dataclasses import replace
from typing import Optional

import numpy as np

from sensor.message import DetectedObject
from sim.entity import Point

log = logging.getLogger(__name__)

# ---------- ID Helpers ----------
def new_namespace(seed_key: Optional[str] = None) -> uuid.UUID:
    """
    Generate a namespace for name-based object IDs.

    Args:
        seed_key (str, optional): When given, the namespace is derived from
            it, so seeded runs reproduce the same object IDs.

    Returns:
        uuid.UUID: Namespace that one sensor uses for all of its objects.
    """
    if seed_key is None:
        return uuid.uuid4()
    return uuid.uuid5(uuid.NAMESPACE_URL, seed_key)

def object_id(namespace: uuid.UUID, entity_name: str) -> str:
    """
    Derive a tracked-object ID from an entity name.

    The same (namespace, name) pair always yields the same ID, so an
    entity keeps its ID across ticks.

    Args:
        namespace (uuid.UUID): Per-sensor namespace from :func:`new_namespace`.
        entity_name (str): Name of the ground-truth entity.

    Returns:
        str: UUID string.
    """
    return str(uuid.uuid5(namespace, entity_name))

# ---------- Loss / Noise Helpers ----------
def maybe_lost(rng: np.random.Generator, probability_of_lost: float) -> bool:
    """
    Decide whether one detected object is lost in this output.

    A uniform sample in [0, 1) is drawn for every call; the object
    survives when the sample is below ``1 - probability_of_lost``.

    Args:
        rng (np.random.Generator): The sensor's private generator.
        probability_of_lost (float): Loss probability (0.0–1.0).

    Returns:
        bool: True if the object should be dropped.
    """
    result = rng.random() >= 1.0 - probability_of_lost
    if result:
        log.debug("Object dropped by utils.maybe_lost")
    return result

def apply_position_noise(
    obj: DetectedObject, rng: np.random.Generator, stddev: float,
) -> DetectedObject:
    """
    Return a copy of *obj* with zero-mean Gaussian noise on x and y.

    Args:
        obj (DetectedObject): Object taken from the delay queue (left untouched).
        rng (np.random.Generator): The sensor's private generator.
        stddev (float): Noise standard deviation in metres.

    Returns:
        DetectedObject: Noised copy.
    """
    pose_with_covariance = obj.kinematics.pose_with_covariance
    position = pose_with_covariance.pose.position
    noised = Point(
        x=position.x + float(rng.normal(0.0, stddev)),
        y=position.y + float(rng.normal(0.0, stddev)),
        z=position.z,
    )
    pose = replace(pose_with_covariance.pose, position=noised)
    kinematics = replace(
        obj.kinematics,
        pose_with_covariance=replace(pose_with_covariance, pose=pose),
    )
    return replace(obj, kinematics=kinematics)
