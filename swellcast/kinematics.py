"""
Storm motion and per-tick time stepping.

Storm headings here use the math convention (0 = east / +x, 90 = +y which
is down on screen), not the compass convention of angles.bearing_from_north.
"""

import math
from typing import Tuple

import numpy as np

from .constants import MAX_DELTA_HOURS, MAX_RADIUS_KM, MS_PER_HOUR, STORM_REF_SPEED_KMH
from .data_types import Storm


def _non_negative(value) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        return 0.0
    return value if math.isfinite(value) and value > 0.0 else 0.0


def compute_storm_delta_units(speed_units: float, heading_deg: float, dt_hours: float) -> Tuple[float, float]:
    """
    Map displacement of a storm over dt_hours.

    distance_km = speed_units * STORM_REF_SPEED_KMH * dt_hours, converted to
    normalized units via MAX_RADIUS_KM. Negative or invalid speed and time
    are clamped to 0.

    Returns:
        (dx, dy) in normalized map units
    """
    speed = _non_negative(speed_units)
    hours = _non_negative(dt_hours)
    distance_units = speed * STORM_REF_SPEED_KMH * hours / MAX_RADIUS_KM

    try:
        heading = float(heading_deg)
    except (TypeError, ValueError):
        heading = 0.0
    if not math.isfinite(heading):
        heading = 0.0

    heading_rad = math.radians(heading)
    return math.cos(heading_rad) * distance_units, math.sin(heading_rad) * distance_units


def advance_storm(storm: Storm, dt_hours: float):
    """Move an active storm along its heading, clamped to the map"""
    if not storm.active:
        return
    dx, dy = compute_storm_delta_units(storm.speed_units, storm.heading_deg, dt_hours)
    storm.position = np.clip(storm.position + np.array([dx, dy]), 0.0, 1.0)


def compute_clamped_delta_hours(
    delta_ms: float,
    base_time_acceleration: float,
    max_delta_hours: float = MAX_DELTA_HOURS,
) -> float:
    """
    Convert wall-clock milliseconds to simulated hours for one tick.

    Capped at max_delta_hours so a long pause (backgrounded process) does
    not inject a huge simulated jump. Negative or invalid input yields 0.
    """
    safe_ms = _non_negative(delta_ms)
    accel = _non_negative(base_time_acceleration)
    raw_hours = (safe_ms / MS_PER_HOUR) * accel
    if not math.isfinite(raw_hours):
        return 0.0
    return min(raw_hours, max_delta_hours)


def clamp_step_hours(delta_hours: float, max_delta_hours: float = MAX_DELTA_HOURS) -> float:
    """Clamp a simulated-hours step into [0, max_delta_hours]"""
    return min(_non_negative(delta_hours), max_delta_hours)
