"""
Storm construction and edit helpers.

Normalizes storm data coming from placement, edits and scenario files:
fills defaults, clamps numeric fields, and keeps storms off land.
"""

import math
from typing import Optional

import numpy as np

from .angles import normalize_degrees
from .constants import MAX_STORM_POWER, STORM_DEFAULTS, STORM_NAME_MAX_LENGTH
from .data_types import Storm


def _is_finite_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def clamp_unit(value: float) -> float:
    return min(max(value, 0.0), 1.0)


def is_over_land(x: float, y: float) -> bool:
    """Land exclusion zones: the Hawaiian islands box and the far-north strip"""
    near_hawaii = 0.65 < x < 0.85 and 0.65 < y < 0.9
    far_north = y < 0.05
    return near_hawaii or far_north


def storm_from_dict(data: dict, storm_id: str, fallback_name: str) -> Storm:
    """
    Build a Storm from partial data.

    Missing or non-finite fields take STORM_DEFAULTS; position is clamped
    into the map and moved to the centre if it lands on land.

    Args:
        data: Raw storm fields (x, y, heading_deg, speed_units, power, ...)
        storm_id: Id used when data has none
        fallback_name: Name used when data has none
    """
    def number(key: str, default: float) -> float:
        value = data.get(key)
        return float(value) if _is_finite_number(value) else default

    x = clamp_unit(number('x', 0.5))
    y = clamp_unit(number('y', 0.5))
    if is_over_land(x, y):
        x, y = 0.5, 0.5

    name = data.get('name')
    if not isinstance(name, str) or not name.strip():
        name = fallback_name

    return Storm(
        storm_id=str(data.get('id') or data.get('storm_id') or storm_id),
        name=name[:STORM_NAME_MAX_LENGTH],
        position=np.array([x, y], dtype=np.float64),
        heading_deg=normalize_degrees(number('heading_deg', STORM_DEFAULTS['heading_deg'])),
        speed_units=max(0.0, number('speed_units', STORM_DEFAULTS['speed_units'])),
        power=min(max(number('power', STORM_DEFAULTS['power']), 0.0), MAX_STORM_POWER),
        wind_kts=max(0.0, number('wind_kts', STORM_DEFAULTS['wind_kts'])),
        radius_km=max(0.0, number('radius_km', STORM_DEFAULTS['radius_km'])),
        active=bool(data.get('active', STORM_DEFAULTS['active'])),
        storm_type=str(data.get('type') or data.get('storm_type') or 'custom'),
    )


def update_storm(storm: Storm, updates: dict) -> Storm:
    """
    Apply a partial edit to a storm in place.

    Only finite numbers are applied. A position change is applied as a
    whole and rejected if the new position is over land.
    """
    new_x: Optional[float] = updates.get('x')
    new_y: Optional[float] = updates.get('y')
    if _is_finite_number(new_x) or _is_finite_number(new_y):
        x = clamp_unit(float(new_x)) if _is_finite_number(new_x) else storm.x
        y = clamp_unit(float(new_y)) if _is_finite_number(new_y) else storm.y
        if not is_over_land(x, y):
            storm.position = np.array([x, y], dtype=np.float64)

    if _is_finite_number(updates.get('heading_deg')):
        storm.heading_deg = normalize_degrees(float(updates['heading_deg']))
    if _is_finite_number(updates.get('speed_units')):
        storm.speed_units = max(0.0, float(updates['speed_units']))
    if _is_finite_number(updates.get('power')):
        storm.power = min(max(float(updates['power']), 0.0), MAX_STORM_POWER)
    if _is_finite_number(updates.get('wind_kts')):
        storm.wind_kts = max(0.0, float(updates['wind_kts']))
    if _is_finite_number(updates.get('radius_km')):
        storm.radius_km = max(0.0, float(updates['radius_km']))
    if isinstance(updates.get('active'), bool):
        storm.active = updates['active']

    name = updates.get('name')
    if isinstance(name, str) and name.strip():
        storm.name = name[:STORM_NAME_MAX_LENGTH]
    return storm
