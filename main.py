#!/usr/bin/env python3
"""
main.py
=======
Demo driver: declares a small cut-in scenario in a :class:`Scope`, spawns
its entities into a :class:`SimulationHost`, attaches a degraded detection
sensor to the ego vehicle and runs a fixed number of ticks.

Environment overrides: ``SIM_FRAME_RATE``, ``SIM_REALTIME_FACTOR``,
``SIM_TICKS``, ``SIM_SEED``, ``SIM_LOG_LEVEL``.
"""

import logging
import math
import os
from typing import Dict, Optional

import config
from interpreter.element import Element
from interpreter.scope import Scope
from logging_setup import setup_logging
from sensor.configuration import DetectionSensorConfiguration
from sensor.detection_sensor import SensorOutput
from sim.clock import SimulationClock
from sim.entity import EntityStatus, EntitySubtype, EntityType, Point, Pose, Twist, Vector3
from sim.geometry import kmh_to_mps, yaw_to_quaternion
from sim.host import SimulationHost

log = logging.getLogger("main")

_NPC_SUBTYPES = (EntitySubtype.CAR, EntitySubtype.TRUCK, EntitySubtype.BICYCLE, EntitySubtype.PEDESTRIAN)


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    return default if raw is None else float(raw)


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.environ.get(name)
    return default if raw is None else int(raw)


def _moved(status: EntityStatus, dt: float) -> EntityStatus:
    """Constant-velocity step along the entity's heading."""
    q = status.pose.orientation
    yaw = 2.0 * math.atan2(q.z, q.w)
    v = status.twist.linear.x
    p = status.pose.position
    position = Point(p.x + math.cos(yaw) * v * dt, p.y + math.sin(yaw) * v * dt, p.z)
    return EntityStatus(
        name=status.name,
        type=status.type,
        subtype=status.subtype,
        pose=Pose(position=position, orientation=q),
        twist=status.twist,
        bounding_box=status.bounding_box,
    )


def declare_scenario(scope: Scope, npc_count: int) -> Dict[str, EntityStatus]:
    """Bind ego and NPC entities in *scope* and return their initial state."""
    statuses: Dict[str, EntityStatus] = {
        "ego": EntityStatus(
            name="ego",
            type=EntityType.EGO,
            pose=Pose(position=Point(0.0, 0.0, 0.0)),
            twist=Twist(linear=Vector3(x=kmh_to_mps(50.0))),
        )
    }
    for i in range(npc_count):
        subtype = _NPC_SUBTYPES[i % len(_NPC_SUBTYPES)]
        entity_type = EntityType.PEDESTRIAN if subtype is EntitySubtype.PEDESTRIAN else EntityType.VEHICLE
        name = f"npc_{i}"
        statuses[name] = EntityStatus(
            name=name,
            type=entity_type,
            subtype=subtype,
            pose=Pose(
                position=Point(20.0 + 25.0 * i, 3.5 * (-1) ** i, 0.0),
                orientation=yaw_to_quaternion(0.0 if i % 2 else math.pi / 36),
            ),
            twist=Twist(linear=Vector3(x=kmh_to_mps(30.0 + 5.0 * i))),
        )

    for name, status in statuses.items():
        element = Element.scenario_object(name, status)
        scope.insert(name, element)
        scope.global_environment.add_entity(name, element)
    return statuses


def build_demo_host(seed: Optional[int] = None) -> SimulationHost:
    """Clock, scope, entities and an ego detection sensor, ready to tick."""
    clock = SimulationClock(
        use_sim_time=config.DEFAULT_USE_SIM_TIME,
        realtime_factor=_env_float("SIM_REALTIME_FACTOR", config.DEFAULT_REALTIME_FACTOR),
        frame_rate=_env_float("SIM_FRAME_RATE", config.DEFAULT_FRAME_RATE),
    )
    host = SimulationHost(clock)

    root = Scope(os.path.abspath(__file__), name="OpenSCENARIO")
    storyboard = root.make_child_scope("Storyboard")
    entities = declare_scenario(root, config.DEFAULT_NPC_COUNT)
    storyboard.actors.extend(entities)
    storyboard.insert("cut_in_speed", Element.parameter("cut_in_speed", kmh_to_mps(40.0)))

    for status in entities.values():
        host.spawn(status)

    host.attach_detection_sensor(DetectionSensorConfiguration(
        entity="ego",
        range=80.0,
        object_recognition_delay=0.3,
        object_recognition_ground_truth_delay=0.1,
        pos_noise_stddev=0.2,
        probability_of_lost=0.1,
        random_seed=seed,
    ))

    def evaluate(h: SimulationHost) -> None:
        # Stand-in for the interpreter: resolve actors, move them.
        if not h.clock.started:
            h.clock.start()
        for name in storyboard.actors:
            if not storyboard.global_environment.is_added_entity(name):
                continue
            current = h.status(storyboard.find_element(name).name)
            h.set_status(_moved(current, h.clock.step_time))

    host.add_tick_callback(evaluate)
    return host


def main() -> None:
    level_name = os.environ.get("SIM_LOG_LEVEL", "INFO").upper()
    setup_logging(getattr(logging, level_name, logging.INFO))
    log.info("Starting scenario demo...")

    host = build_demo_host(seed=_env_int("SIM_SEED", None))
    ticks = _env_int("SIM_TICKS", config.DEFAULT_TICKS)

    def report(entity: str, output: SensorOutput) -> None:
        if output.detections is not None:
            log.info("%s detections=%d stamp=%.3f",
                     entity, len(output.detections.objects), output.detections.header.stamp)

    try:
        host.run(ticks, on_output=report)
    except KeyboardInterrupt:
        log.info("Shutting down...")

    for sensor in host.sensors():
        log.info("sensor %s metrics: %s", sensor.entity, sensor.metrics.report())


if __name__ == "__main__":
    main()
