"""
sim/host.py
===========
Synchronous tick driver tying :class:`~sim.clock.SimulationClock`, the
world-state snapshot and every attached
:class:`~sensor.detection_sensor.DetectionSensor` together.

One :meth:`SimulationHost.tick` is:

1. ``clock.update()``, exactly once, before anything reads the time;
2. tick callbacks: the interpreter evaluates the scenario and mutates
   the world through :meth:`spawn` / :meth:`set_status` / :meth:`despawn`;
3. one ``update()`` per sensor with the same snapshot and timestamp.

Public API consumed by :mod:`sim.api` and :mod:`main`
-----------------------------------------------------
* ``spawn(status)`` / ``despawn(name)`` / ``set_status(status)``
* ``snapshot()``                        → ``List[EntityStatus]``
* ``attach_detection_sensor(config)``   → ``DetectionSensor``
* ``sensor(entity)``                    → ``DetectionSensor``
* ``tick()``                            → ``Dict[str, SensorOutput]``
* ``run(ticks)``                        → ``int``
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Callable, Dict, Iterable, List, Optional

from sensor.configuration import DetectionSensorConfiguration
from sensor.detection_sensor import DetectionSensor, SensorOutput
from sim.clock import SimulationClock
from sim.entity import EntityStatus
from sim.errors import SensorAttachmentError, SimulationError

log = logging.getLogger("host")

TickCallback = Callable[["SimulationHost"], None]


class SimulationHost:
    """Single-threaded simulation orchestrator.

    Parameters
    ----------
    clock : SimulationClock
        Clock advanced once per :meth:`tick`.
    """

    def __init__(self, clock: SimulationClock) -> None:
        self.clock = clock
        self._entities: "OrderedDict[str, EntityStatus]" = OrderedDict()
        self._sensors: Dict[str, DetectionSensor] = {}
        self._lidar_detected: Dict[str, List[str]] = {}
        self._callbacks: List[TickCallback] = []
        self.tick_count = 0

    # ── World state ───────────────────────────────────────────────────────────

    def spawn(self, status: EntityStatus) -> None:
        if status.name in self._entities:
            raise SimulationError(f"Entity {status.name!r} is already spawned")
        self._entities[status.name] = status
        log.info("spawn name=%s type=%s", status.name, status.type.name)

    def despawn(self, name: str) -> None:
        if self._entities.pop(name, None) is None:
            raise SimulationError(f"Entity {name!r} is not spawned")
        log.info("despawn name=%s", name)

    def set_status(self, status: EntityStatus) -> None:
        """Replace the ground truth of an already spawned entity."""
        if status.name not in self._entities:
            raise SimulationError(f"Entity {status.name!r} is not spawned")
        self._entities[status.name] = status

    def status(self, name: str) -> EntityStatus:
        try:
            return self._entities[name]
        except KeyError:
            raise SimulationError(f"Entity {name!r} is not spawned") from None

    def entity_names(self) -> List[str]:
        return list(self._entities)

    def snapshot(self) -> List[EntityStatus]:
        """Ordered copy of the world state; safe to hand to sensors."""
        return list(self._entities.values())

    # ── Sensors ───────────────────────────────────────────────────────────────

    def attach_detection_sensor(
        self, configuration: DetectionSensorConfiguration,
    ) -> DetectionSensor:
        """Attach a sensor to ``configuration.entity``.

        The owner is checked against the world on the sensor's first
        update, so a sensor may be attached before its entity spawns.
        """
        if configuration.entity in self._sensors:
            raise SensorAttachmentError(
                f"A detection sensor is already attached to {configuration.entity!r}"
            )
        sensor = DetectionSensor(configuration)
        self._sensors[configuration.entity] = sensor
        log.info("detection sensor attached entity=%s topic=%s range=%.1f period=%.3f",
                 configuration.entity, configuration.topic_name,
                 configuration.range, configuration.update_duration)
        return sensor

    def sensor(self, entity: str) -> DetectionSensor:
        try:
            return self._sensors[entity]
        except KeyError:
            raise SensorAttachmentError(f"No detection sensor on {entity!r}") from None

    def sensors(self) -> List[DetectionSensor]:
        return list(self._sensors.values())

    def set_lidar_detected_entities(self, entity: str, names: Iterable[str]) -> None:
        """Ray-cast candidates for the sensor on *entity* (next ticks)."""
        self._lidar_detected[entity] = list(names)

    # ── Tick ──────────────────────────────────────────────────────────────────

    def add_tick_callback(self, callback: TickCallback) -> None:
        """Run *callback(host)* every tick after the clock update."""
        self._callbacks.append(callback)

    def tick(self) -> Dict[str, SensorOutput]:
        """Advance one step; return the outputs of sensors that ran."""
        self.clock.update()
        self.tick_count += 1

        for callback in self._callbacks:
            callback(self)

        statuses = self.snapshot()
        t = self.clock.simulation_time
        stamp = self.clock.current_time()
        outputs: Dict[str, SensorOutput] = {}
        for entity, sensor in self._sensors.items():
            output = sensor.update(
                t, statuses, stamp, self._lidar_detected.get(entity),
            )
            if output is not None:
                outputs[entity] = output
        return outputs

    def run(self, ticks: int, on_output: Optional[Callable[[str, SensorOutput], None]] = None) -> int:
        """Run *ticks* ticks; return the number of sensor outputs produced."""
        produced = 0
        for _ in range(ticks):
            for entity, output in self.tick().items():
                produced += 1
                if on_output is not None:
                    on_output(entity, output)
        log.info("run finished ticks=%d outputs=%d t=%.3f",
                 ticks, produced, self.clock.simulation_time)
        return produced
