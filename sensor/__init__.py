"""
sensor — Simulated perception sensors
=====================================

Turns ground-truth world snapshots into the delayed, lossy and noisy
object lists a real perception stack would publish, plus a matching
ground-truth channel for evaluation.

Modules
-------
configuration
    :class:`DetectionSensorConfiguration` frozen parameter set.
detection_sensor
    :class:`DetectionSensor` throttle / delay-queue / degradation pipeline.
message
    :class:`DetectedObjects` and :class:`TrackedObjects` output messages.
metrics
    :class:`SensorMetrics` counter snapshot.
utils
    Object-ID generation, loss sampling, position noise.
"""

from .configuration import DetectionSensorConfiguration, make_detection_sensor_configuration
from .detection_sensor import DetectionSensor, SensorOutput
from .message import DetectedObjects, TrackedObjects
from .metrics import SensorMetrics
from .utils import apply_position_noise, maybe_lost, new_namespace, object_id

__all__ = [
    "DetectionSensorConfiguration",
    "make_detection_sensor_configuration",
    "DetectionSensor",
    "SensorOutput",
    "DetectedObjects",
    "TrackedObjects",
    "SensorMetrics",
    "apply_position_noise",
    "maybe_lost",
    "new_namespace",
    "object_id",
]
