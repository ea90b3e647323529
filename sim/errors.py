"""
sim/errors.py
=============
Runtime errors raised by the clock, the host and attached sensors.
"""

from __future__ import annotations


class SimulationError(RuntimeError):
    """Base class for simulation-side failures."""


class ClockLifecycleError(SimulationError):
    """The simulation clock was used out of order (e.g. started twice)."""


class SensorAttachmentError(SimulationError):
    """A sensor cannot be attached to, or locate, its owning entity."""


class SensorRuntimeError(SimulationError):
    """A sensor received input it cannot interpret."""
