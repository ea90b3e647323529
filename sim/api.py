"""
sim/api.py
==========
Optional FastAPI server that exposes a running
:class:`~sim.host.SimulationHost` for inspection.

Start the server::

    python -m sim.api          # → http://localhost:8000/clock

Endpoints: ``GET /clock``, ``GET /sensors``, ``GET /sensors/{entity}/metrics``,
``GET /sensors/{entity}/latest`` and ``POST /tick``.

.. note::

   This server is **not** required to run a scenario.
   It exists for external integrations and testing.
"""

from __future__ import annotations

import math
from typing import Dict, List, Optional, Union

import uvicorn
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

import config
from sensor.detection_sensor import DetectionSensor
from sensor.message import DetectedObjects, TrackedObjects
from sim.clock import SimulationClock
from sim.errors import SensorAttachmentError, SimulationError
from sim.host import SimulationHost

# ── Pydantic response schemas ────────────────────────────────────────────────


class ClockState(BaseModel):
    """Clock snapshot returned by ``/clock``."""
    simulation_time: float
    scenario_time: Optional[float]
    started: bool
    current_time: float
    realtime_factor: float
    frame_rate: float


class SensorSummary(BaseModel):
    """One attached detection sensor."""
    entity: str
    topic_name: str
    range: float
    update_duration: float
    object_recognition_delay: float
    object_recognition_ground_truth_delay: float
    probability_of_lost: float
    pos_noise_stddev: float


class ObjectPosition(BaseModel):
    """Label and map-frame position of one perceived object."""
    label: str
    x: float
    y: float
    z: float
    object_id: Optional[str] = None


class ChannelOutput(BaseModel):
    stamp: float
    frame_id: str
    objects: List[ObjectPosition]


class SensorLatest(BaseModel):
    """Last delayed output of one sensor; ``None`` where nothing was due."""
    entity: str
    detections: Optional[ChannelOutput]
    ground_truth: Optional[ChannelOutput]


class TickResult(BaseModel):
    tick_count: int
    simulation_time: float
    outputs: List[str]


# ── conversions ──────────────────────────────────────────────────────────────


def _clock_state(clock: SimulationClock) -> ClockState:
    scenario_time = clock.scenario_time
    return ClockState(
        simulation_time=clock.simulation_time,
        scenario_time=None if math.isnan(scenario_time) else scenario_time,
        started=clock.started,
        current_time=clock.current_time(),
        realtime_factor=clock.realtime_factor,
        frame_rate=clock.frame_rate,
    )


def _sensor_summary(sensor: DetectionSensor) -> SensorSummary:
    c = sensor.configuration
    return SensorSummary(
        entity=c.entity,
        topic_name=c.topic_name,
        range=c.range,
        update_duration=c.update_duration,
        object_recognition_delay=c.object_recognition_delay,
        object_recognition_ground_truth_delay=c.object_recognition_ground_truth_delay,
        probability_of_lost=c.probability_of_lost,
        pos_noise_stddev=c.pos_noise_stddev,
    )


def _channel(msg: Union[DetectedObjects, TrackedObjects, None]) -> Optional[ChannelOutput]:
    if msg is None:
        return None
    objects = []
    for obj in msg.objects:
        position = obj.kinematics.pose_with_covariance.pose.position
        objects.append(ObjectPosition(
            label=obj.classification[0].label.name,
            x=position.x,
            y=position.y,
            z=position.z,
            object_id=getattr(obj, "object_id", None),
        ))
    return ChannelOutput(stamp=msg.header.stamp, frame_id=msg.header.frame_id, objects=objects)


# ── FastAPI application ──────────────────────────────────────────────────────


def create_app(host: SimulationHost) -> FastAPI:
    """Build an inspection API bound to *host*."""
    app = FastAPI(
        title="Scenario Simulation Inspection API",
        description="Clock state and detection-sensor outputs of a running scenario.",
        version="1.0",
    )

    def _sensor(entity: str) -> DetectionSensor:
        try:
            return host.sensor(entity)
        except SensorAttachmentError as exc:
            raise HTTPException(status_code=404, detail=str(exc))

    @app.get("/clock", response_model=ClockState)
    def get_clock():
        return _clock_state(host.clock)

    @app.get("/sensors", response_model=List[SensorSummary])
    def list_sensors():
        return [_sensor_summary(s) for s in host.sensors()]

    @app.get("/sensors/{entity}/metrics")
    def sensor_metrics(entity: str) -> Dict[str, int]:
        return _sensor(entity).metrics.report()

    @app.get("/sensors/{entity}/latest", response_model=SensorLatest)
    def sensor_latest(entity: str):
        sensor = _sensor(entity)
        latest = sensor.latest_output
        return SensorLatest(
            entity=entity,
            detections=None if latest is None else _channel(latest.detections),
            ground_truth=None if latest is None else _channel(latest.ground_truth),
        )

    @app.post("/tick", response_model=TickResult)
    def tick():
        try:
            outputs = host.tick()
        except SimulationError as exc:
            raise HTTPException(status_code=409, detail=str(exc))
        return TickResult(
            tick_count=host.tick_count,
            simulation_time=host.clock.simulation_time,
            outputs=sorted(outputs),
        )

    return app


# ── Standalone entry point ───────────────────────────────────────────────────

if __name__ == "__main__":
    from main import build_demo_host

    print(f"Starting inspection server on http://{config.API_HOST}:{config.API_PORT} …")
    uvicorn.run(create_app(build_demo_host()), host=config.API_HOST, port=config.API_PORT)
