#!/usr/bin/env python3
"""
config.py
=========
Application-wide configuration constants.

Values can be overridden via environment variables (see :mod:`main`).
This module is a thin, import-safe leaf: it never imports from
other project packages.
"""

# ── Clock defaults ───────────────────────────────────────────────────────────
DEFAULT_FRAME_RATE: float = 30.0
DEFAULT_REALTIME_FACTOR: float = 1.0
DEFAULT_USE_SIM_TIME: bool = True

# ── Detection sensor defaults ────────────────────────────────────────────────
DEFAULT_DETECTION_TOPIC: str = "/perception/object_recognition/objects"
DEFAULT_DETECTION_RANGE_M: float = 300.0
DEFAULT_DETECTION_UPDATE_S: float = 0.1

# ── Demo run defaults ────────────────────────────────────────────────────────
DEFAULT_TICKS: int = 90
DEFAULT_NPC_COUNT: int = 4

# ── Inspection API ───────────────────────────────────────────────────────────
API_HOST: str = "0.0.0.0"
API_PORT: int = 8000
