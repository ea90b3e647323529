"""
SensorMetrics: Tracks simple statistics for one detection sensor.
"""

class SensorMetrics:
    """
    Tracks sensor updates, detected / lost objects and published outputs.

    Attributes:
        updates (int): Ticks on which the sensor recomputed its output.
        skipped (int): Ticks throttled away by the update period.
        objects_detected (int): Candidate objects put into the delay queue.
        objects_lost (int): Objects dropped by loss sampling.
        detections_published (int): Delayed detections messages released.
        ground_truth_published (int): Delayed ground-truth messages released.
    """

    def __init__(self):
        """Initialize all counters to zero."""
        self.updates = 0
        self.skipped = 0
        self.objects_detected = 0
        self.objects_lost = 0
        self.detections_published = 0
        self.ground_truth_published = 0

    def report(self) -> dict:
        """
        Return a snapshot of current metrics.

        Returns:
            dict: Dictionary with one entry per counter.
        """
        return {
            "updates": self.updates,
            "skipped": self.skipped,
            "objects_detected": self.objects_detected,
            "objects_lost": self.objects_lost,
            "detections_published": self.detections_published,
            "ground_truth_published": self.ground_truth_published,
        }
