"""
sim — Simulation core
=====================

Modules
-------
clock
    :class:`SimulationClock` simulated / wall-clock time.
host
    :class:`SimulationHost` synchronous tick driver.
entity
    :class:`EntityStatus` ground-truth snapshot records.
geometry
    Distance, range and quaternion helpers.
errors
    :class:`SimulationError` and its subclasses.
api
    Optional FastAPI inspection server.
"""
