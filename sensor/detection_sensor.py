"""
DetectionSensor: turns ground truth into delayed, lossy, noisy perception.

Supports:
    - Update throttling to a configured period
    - Range-based or ray-cast-list candidate selection
    - Independent delay queues for detections and ground truth
    - Per-object loss and Gaussian position noise on detections
    - Logging of events

Intended usage:
    - The host calls ``update()`` once per tick, after the clock advanced
      and the world was mutated, with the tick's snapshot
    - The returned :class:`SensorOutput` is what the system under test
      receives on ``configuration.topic_name`` for that tick
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Iterable, List, NamedTuple, Optional, Sequence, Set, Tuple

import numpy as np

from sensor.configuration import DetectionSensorConfiguration
from sensor.message import (
    DetectedObject,
    DetectedObjects,
    Header,
    ObjectClassification,
    ObjectKinematics,
    ObjectLabel,
    OrientationAvailability,
    PoseWithCovariance,
    Shape,
    TrackedObject,
    TrackedObjects,
    TwistWithCovariance,
)
from sensor.metrics import SensorMetrics
from sensor.utils import apply_position_noise, maybe_lost, new_namespace, object_id
from sim.entity import EntityStatus, EntitySubtype, EntityType, Pose
from sim.errors import SensorAttachmentError, SensorRuntimeError
from sim.geometry import is_within_range, offset_position

log = logging.getLogger("detection_sensor")

# Slack on the update period so tick-rate jitter does not skip an output.
UPDATE_TOLERANCE_S = 0.002
# Float slack on delay comparisons (accumulated tick sums).
DELAY_EPSILON_S = 1e-9

_LABELS = {subtype: ObjectLabel[subtype.name] for subtype in EntitySubtype}


class SensorOutput(NamedTuple):
    """Delayed output of one sensor tick; ``None`` where nothing was due."""
    detections: Optional[DetectedObjects]
    ground_truth: Optional[TrackedObjects]


# ── message construction ──────────────────────────────────────────────────────

def make_detected_object(status: EntityStatus) -> DetectedObject:
    """Perception-style object for one entity (no noise)."""
    pose = Pose(
        position=offset_position(
            status.pose.position, status.pose.orientation, status.bounding_box.center,
        ),
        orientation=status.pose.orientation,
    )
    if status.subtype in (EntitySubtype.BICYCLE, EntitySubtype.MOTORCYCLE):
        availability = OrientationAvailability.SIGN_UNKNOWN
    else:
        availability = OrientationAvailability.UNAVAILABLE
    return DetectedObject(
        classification=[ObjectClassification(label=_LABELS[status.subtype], probability=1.0)],
        kinematics=ObjectKinematics(
            pose_with_covariance=PoseWithCovariance(pose=pose),
            twist_with_covariance=TwistWithCovariance(twist=status.twist),
            orientation_availability=availability,
        ),
        shape=Shape(dimensions=status.bounding_box.dimensions),
    )


def make_tracked_object(detected: DetectedObject, tracked_id: str) -> TrackedObject:
    return TrackedObject(
        object_id=tracked_id,
        classification=list(detected.classification),
        kinematics=detected.kinematics,
        shape=detected.shape,
        existence_probability=detected.existence_probability,
    )


# ── sensor ────────────────────────────────────────────────────────────────────

class DetectionSensor:
    """
    Detection sensor attached to one ego entity.

    Attributes:
        configuration (DetectionSensorConfiguration): Sensor parameters.
        metrics (SensorMetrics): Counters for this instance.
        latest_output (SensorOutput or None): Output of the last productive tick.
    """

    def __init__(self, configuration: DetectionSensorConfiguration):
        """
        Initialize a DetectionSensor instance.

        Args:
            configuration (DetectionSensorConfiguration): Sensor parameters;
                ``random_seed`` seeds the private RNG and the object-ID namespace.
        """
        self.configuration = configuration
        self.metrics = SensorMetrics()
        self.latest_output: Optional[SensorOutput] = None

        seed = configuration.random_seed
        self._rng = np.random.default_rng(seed)
        self._namespace = new_namespace(
            None if seed is None else f"{configuration.topic_name}/{configuration.entity}/{seed}"
        )
        self._previous_update_time: Optional[float] = None
        self._detections_queue: Deque[Tuple[DetectedObjects, float]] = deque()
        self._ground_truth_queue: Deque[Tuple[TrackedObjects, float]] = deque()
        self._attachment_error: Optional[SensorAttachmentError] = None

    @property
    def entity(self) -> str:
        return self.configuration.entity

    def pending(self) -> Tuple[int, int]:
        """Queued (detections, ground truth) messages not yet released."""
        return len(self._detections_queue), len(self._ground_truth_queue)

    # ── public API ────────────────────────────────────────────────────────

    def update(
        self,
        current_simulation_time: float,
        statuses: Sequence[EntityStatus],
        current_time: Optional[float] = None,
        lidar_detected_entities: Optional[Iterable[str]] = None,
    ) -> Optional[SensorOutput]:
        """
        Run one sensor tick.

        Args:
            current_simulation_time (float): Simulated seconds (throttling, delays).
            statuses (Sequence[EntityStatus]): World snapshot; read only.
            current_time (float, optional): Header stamp; defaults to
                ``current_simulation_time``.
            lidar_detected_entities (Iterable[str], optional): Ray-cast
                candidates, used when ``detect_all_objects_in_range`` is off.

        Returns:
            Optional[SensorOutput]: Delayed output, or None when throttled.

        Raises:
            SensorAttachmentError: The owning entity is missing or not ego.
            SensorRuntimeError: A ray-cast candidate is not in the snapshot.
        """
        t = current_simulation_time
        if not self._due(t):
            self.metrics.skipped += 1
            return None

        sensor_pose = self._sensor_pose(statuses)
        detected = self._detected_entities(statuses, sensor_pose, lidar_detected_entities)
        self._previous_update_time = t

        header = Header(stamp=t if current_time is None else current_time)
        msg = DetectedObjects(header=header)
        ground_truth_msg = TrackedObjects(header=Header(header.stamp, header.frame_id))
        for status in statuses:
            if status.name in detected:
                obj = make_detected_object(status)
                msg.objects.append(obj)
                ground_truth_msg.objects.append(
                    make_tracked_object(obj, object_id(self._namespace, status.name))
                )

        self._detections_queue.append((msg, t))
        self._ground_truth_queue.append((ground_truth_msg, t))
        self.metrics.updates += 1
        self.metrics.objects_detected += len(msg.objects)

        delayed = self._pop_due(
            self._detections_queue, t, self.configuration.object_recognition_delay,
        )
        delayed_ground_truth = self._pop_due(
            self._ground_truth_queue, t, self.configuration.object_recognition_ground_truth_delay,
        )

        output = SensorOutput(
            detections=None if delayed is None else self._degrade(delayed),
            ground_truth=delayed_ground_truth,
        )
        if output.detections is not None:
            self.metrics.detections_published += 1
        if output.ground_truth is not None:
            self.metrics.ground_truth_published += 1

        log.debug(
            "update entity=%s t=%.3f detected=%d queued=%s published=(%s, %s)",
            self.entity, t, len(msg.objects), self.pending(),
            output.detections is not None, output.ground_truth is not None,
        )
        self.latest_output = output
        return output

    # ── internal helpers ──────────────────────────────────────────────────

    def _due(self, t: float) -> bool:
        if self._previous_update_time is None:
            return True
        elapsed = t - self._previous_update_time
        return elapsed - self.configuration.update_duration >= -UPDATE_TOLERANCE_S

    def _sensor_pose(self, statuses: Sequence[EntityStatus]) -> Pose:
        if self._attachment_error is not None:
            raise self._attachment_error
        for status in statuses:
            if status.name == self.entity:
                if status.type is EntityType.EGO:
                    return status.pose
                self._attachment_error = SensorAttachmentError(
                    f"Detection sensor can be attached only to an ego entity, "
                    f"{self.entity!r} is {status.type.name}"
                )
                break
        else:
            self._attachment_error = SensorAttachmentError(
                f"Detection sensor owner {self.entity!r} is not in the world snapshot"
            )
        log.error("attachment failed: %s", self._attachment_error)
        raise self._attachment_error

    def _detected_entities(
        self,
        statuses: Sequence[EntityStatus],
        sensor_pose: Pose,
        lidar_detected_entities: Optional[Iterable[str]],
    ) -> Set[str]:
        by_name = {status.name: status for status in statuses}
        if self.configuration.detect_all_objects_in_range:
            names: List[str] = list(by_name)
        else:
            names = list(lidar_detected_entities or ())

        detected: Set[str] = set()
        for name in names:
            status = by_name.get(name)
            if status is None:
                log.error("ray-cast candidate %s missing from snapshot", name)
                raise SensorRuntimeError(
                    f"Entity {name!r} detected by the lidar model is not in the world snapshot"
                )
            if name != self.entity and is_within_range(
                status.pose.position, sensor_pose.position, self.configuration.range,
            ):
                detected.add(name)
        return detected

    @staticmethod
    def _pop_due(queue: Deque, t: float, delay: float):
        if queue and t - queue[0][1] >= delay - DELAY_EPSILON_S:
            return queue.popleft()[0]
        return None

    def _degrade(self, msg: DetectedObjects) -> DetectedObjects:
        noised = DetectedObjects(header=msg.header)
        for obj in msg.objects:
            if maybe_lost(self._rng, self.configuration.probability_of_lost):
                self.metrics.objects_lost += 1
                continue
            noised.objects.append(
                apply_position_noise(obj, self._rng, self.configuration.pos_noise_stddev)
            )
        return noised
