#!/usr/bin/env python3
"""
sim/clock.py
============
Simulation clock shared by the interpreter, the host and every sensor.

The clock runs in one of two modes, chosen at construction and never
mixed within a run:

* **simulation time** (``use_sim_time=True``): ``current_time()`` is the
  wall-clock instant the clock was created plus the simulated duration.
* **raw** (``use_sim_time=False``): ``current_time()`` is ``time.time()``.

``update()`` advances simulated time by ``realtime_factor / frame_rate``
seconds and is called exactly once per tick by the driver, before any
component reads the time for that tick.
"""

from __future__ import annotations

import logging
import math
import time
from typing import Optional

from sim.errors import ClockLifecycleError

log = logging.getLogger("clock")


class SimulationClock:
    """Tick-driven clock.

    Parameters
    ----------
    use_sim_time : bool
        ``False`` selects raw wall-clock mode.
    realtime_factor : float
        Simulated seconds per real second.
    frame_rate : float
        Ticks per simulated-at-realtime second.
    """

    def __init__(
        self,
        use_sim_time: bool = True,
        realtime_factor: float = 1.0,
        frame_rate: float = 30.0,
    ) -> None:
        if frame_rate <= 0.0:
            raise ValueError(f"frame_rate must be positive, got {frame_rate}")
        if realtime_factor <= 0.0:
            raise ValueError(f"realtime_factor must be positive, got {realtime_factor}")

        self.use_raw_clock = not use_sim_time
        self.realtime_factor = float(realtime_factor)
        self.frame_rate = float(frame_rate)
        self.time_on_initialize = time.time()

        self.simulation_time = 0.0
        self.time_offset: Optional[float] = None

    # ── state ─────────────────────────────────────────────────────────────

    @property
    def started(self) -> bool:
        return self.time_offset is not None

    @property
    def step_time(self) -> float:
        """Simulated seconds added by one :meth:`update`."""
        return self.realtime_factor / self.frame_rate

    @property
    def scenario_time(self) -> float:
        """Seconds since :meth:`start`; ``nan`` while not started."""
        if self.time_offset is None:
            return math.nan
        return self.simulation_time - self.time_offset

    # ── transitions ───────────────────────────────────────────────────────

    def start(self) -> None:
        """Mark the scenario as running from the current simulation time.

        Raises
        ------
        ClockLifecycleError
            If the clock has already been started.
        """
        if self.started:
            log.error("start() called on a running clock at t=%.3f", self.simulation_time)
            raise ClockLifecycleError(
                "Simulation clock is already started. "
                "Check that the clock instance of the previous run was destroyed."
            )
        self.time_offset = self.simulation_time
        log.info("clock started offset=%.3f rtf=%.2f fps=%.1f",
                 self.time_offset, self.realtime_factor, self.frame_rate)

    def update(self) -> None:
        """Advance simulated time by one step."""
        self.simulation_time += self.step_time
        log.debug("clock update t=%.6f", self.simulation_time)

    # ── queries ───────────────────────────────────────────────────────────

    def current_time(self) -> float:
        """Timestamp (epoch seconds) comparable with the wall clock."""
        if self.use_raw_clock:
            return time.time()
        return self.time_on_initialize + self.simulation_time
