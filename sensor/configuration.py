#!/usr/bin/env python3
"""
sensor/configuration.py
=======================
Per-sensor parameters for the detection sensor.  Every constant lives in
the frozen :class:`DetectionSensorConfiguration` dataclass so that
experiments can swap sensor models without touching code.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import config


@dataclass(frozen=True)
class DetectionSensorConfiguration:
    """Immutable bag of detection-sensor parameters.

    Groups: attachment, geometry, timing, degradation.
    """

    # ── Attachment ────────────────────────────────────────────────────────
    entity: str
    """Name of the (ego) entity the sensor is mounted on."""

    topic_name: str = config.DEFAULT_DETECTION_TOPIC
    """Output topic the perception stack subscribes to."""

    # ── Geometry ──────────────────────────────────────────────────────────
    range: float = config.DEFAULT_DETECTION_RANGE_M
    """Detection radius in metres (3-D, inclusive)."""

    detect_all_objects_in_range: bool = True
    """``True``: every entity within :attr:`range` is a candidate.
    ``False``: candidates come from an external ray-cast list."""

    # ── Timing ────────────────────────────────────────────────────────────
    update_duration: float = config.DEFAULT_DETECTION_UPDATE_S
    """Minimum simulated seconds between two sensor outputs."""

    object_recognition_delay: float = 0.0
    """Latency of the detections channel (seconds)."""

    object_recognition_ground_truth_delay: float = 0.0
    """Latency of the ground-truth channel (seconds)."""

    # ── Degradation ───────────────────────────────────────────────────────
    pos_noise_stddev: float = 0.0
    """Std-dev (metres) of Gaussian noise added to detected x and y."""

    probability_of_lost: float = 0.0
    """Probability that a detected object is dropped from one output."""

    random_seed: Optional[int] = None
    """Seed of the sensor's private RNG; ``None`` draws fresh entropy."""


def make_detection_sensor_configuration(
    entity: str,
    topic_name: str = config.DEFAULT_DETECTION_TOPIC,
    update_duration: float = config.DEFAULT_DETECTION_UPDATE_S,
) -> DetectionSensorConfiguration:
    """Ideal sensor (no delay, noise or loss) for *entity*."""
    return DetectionSensorConfiguration(
        entity=entity,
        topic_name=topic_name,
        update_duration=update_duration,
    )
