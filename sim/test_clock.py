#!/usr/bin/env python3
"""
Lifecycle and time-reporting tests for the simulation clock.
"""

from __future__ import annotations

import math
import unittest
from unittest import mock

from sim.clock import SimulationClock
from sim.errors import ClockLifecycleError, SimulationError


class SimulationClockTests(unittest.TestCase):
    def test_start_twice_fails(self) -> None:
        clock = SimulationClock()
        clock.start()
        with self.assertRaises(ClockLifecycleError):
            clock.start()
        self.assertTrue(issubclass(ClockLifecycleError, SimulationError))

    def test_update_advances_by_realtime_factor_over_frame_rate(self) -> None:
        clock = SimulationClock(realtime_factor=2.0, frame_rate=50.0)
        n = 137
        for _ in range(n):
            clock.update()
        self.assertAlmostEqual(clock.simulation_time, n * 2.0 / 50.0, places=9)
        self.assertAlmostEqual(clock.step_time, 0.04)

    def test_update_is_legal_before_start(self) -> None:
        clock = SimulationClock(frame_rate=10.0)
        clock.update()
        clock.update()
        self.assertFalse(clock.started)
        self.assertTrue(math.isnan(clock.scenario_time))
        self.assertAlmostEqual(clock.simulation_time, 0.2)

    def test_start_records_offset(self) -> None:
        clock = SimulationClock(frame_rate=10.0)
        for _ in range(3):
            clock.update()
        clock.start()
        self.assertAlmostEqual(clock.time_offset, 0.3)
        self.assertAlmostEqual(clock.scenario_time, 0.0)
        clock.update()
        self.assertAlmostEqual(clock.scenario_time, 0.1)

    def test_sim_time_mode_adds_simulated_duration_to_initial_instant(self) -> None:
        with mock.patch("sim.clock.time.time", return_value=1_000.0):
            clock = SimulationClock(use_sim_time=True, frame_rate=20.0)
        for _ in range(10):
            clock.update()
        with mock.patch("sim.clock.time.time", return_value=5_000.0):
            self.assertAlmostEqual(clock.current_time(), 1_000.5)

    def test_raw_mode_reports_wall_clock(self) -> None:
        clock = SimulationClock(use_sim_time=False)
        clock.update()
        with mock.patch("sim.clock.time.time", return_value=4_242.0):
            self.assertEqual(clock.current_time(), 4_242.0)

    def test_invalid_rates_are_rejected(self) -> None:
        with self.assertRaises(ValueError):
            SimulationClock(frame_rate=0.0)
        with self.assertRaises(ValueError):
            SimulationClock(realtime_factor=-1.0)


if __name__ == "__main__":
    unittest.main()
