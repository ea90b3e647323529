#!/usr/bin/env python3
"""
Tests for the optional REST inspection server.
"""

from __future__ import annotations

import unittest

from fastapi.testclient import TestClient

from sensor.configuration import DetectionSensorConfiguration
from sim.api import create_app
from sim.clock import SimulationClock
from sim.entity import EntityStatus, EntityType, Point, Pose
from sim.host import SimulationHost


class InspectionApiTests(unittest.TestCase):
    def setUp(self) -> None:
        self.host = SimulationHost(SimulationClock(frame_rate=10.0))
        self.host.spawn(EntityStatus(name="ego", type=EntityType.EGO))
        self.host.spawn(EntityStatus(name="npc", pose=Pose(position=Point(12.0, 1.0, 0.0))))
        self.host.attach_detection_sensor(DetectionSensorConfiguration(
            entity="ego", object_recognition_delay=0.2, random_seed=3,
        ))
        self.client = TestClient(create_app(self.host))

    def test_clock_before_start(self) -> None:
        body = self.client.get("/clock").json()
        self.assertFalse(body["started"])
        self.assertIsNone(body["scenario_time"])
        self.assertEqual(body["simulation_time"], 0.0)

    def test_tick_and_latest_output(self) -> None:
        result = self.client.post("/tick").json()
        self.assertEqual(result["tick_count"], 1)
        self.assertEqual(result["outputs"], ["ego"])

        latest = self.client.get("/sensors/ego/latest").json()
        self.assertIsNone(latest["detections"])
        self.assertEqual(latest["ground_truth"]["frame_id"], "map")
        self.assertEqual(latest["ground_truth"]["objects"][0]["label"], "CAR")
        self.assertEqual(latest["ground_truth"]["objects"][0]["x"], 12.0)

        self.client.post("/tick")
        self.client.post("/tick")
        latest = self.client.get("/sensors/ego/latest").json()
        self.assertEqual(len(latest["detections"]["objects"]), 1)

    def test_sensor_listing_and_metrics(self) -> None:
        sensors = self.client.get("/sensors").json()
        self.assertEqual([s["entity"] for s in sensors], ["ego"])
        self.assertEqual(sensors[0]["object_recognition_delay"], 0.2)

        self.client.post("/tick")
        metrics = self.client.get("/sensors/ego/metrics").json()
        self.assertEqual(metrics["updates"], 1)

    def test_unknown_sensor_is_404(self) -> None:
        self.assertEqual(self.client.get("/sensors/npc/latest").status_code, 404)
        self.assertEqual(self.client.get("/sensors/npc/metrics").status_code, 404)

    def test_tick_failure_is_409(self) -> None:
        self.host.despawn("ego")
        self.assertEqual(self.client.post("/tick").status_code, 409)


if __name__ == "__main__":
    unittest.main()
