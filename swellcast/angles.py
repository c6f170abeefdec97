"""
Angular geometry for directional swell weighting.

Pure functions, no simulation state. Two rotational references coexist
in this package and are kept apart on purpose:

- Compass bearings (bearing_from_north, spot preferred windows,
  ring sector headings): 0 = north (up), 90 = east (right).
- Storm motion (kinematics.compute_storm_delta_units): 0 = east, 90 = down.
"""

import math

from .constants import DIRECTIONAL_FALLOFF_DEG, MIN_FALLOFF_HALF_WIDTH_DEG


def normalize_degrees(angle: float) -> float:
    """Wrap angle into [0, 360). Non-finite input maps to 0."""
    if not math.isfinite(angle):
        return 0.0
    wrapped = math.fmod(angle, 360.0)
    if wrapped < 0.0:
        wrapped += 360.0
    # fmod of tiny negatives can round up to exactly 360
    return 0.0 if wrapped >= 360.0 else wrapped


def angular_difference(a: float, b: float) -> float:
    """Minimal circular distance between two angles, in [0, 180]"""
    diff = abs(normalize_degrees(a) - normalize_degrees(b))
    return 360.0 - diff if diff > 180.0 else diff


def directional_weight(bearing: float, pref_min: float, pref_max: float) -> float:
    """
    Match of an incoming swell direction against a preferred window.

    Trapezoid over the circle: 1 within the window, linear shoulder down to
    0 across DIRECTIONAL_FALLOFF_DEG beyond either edge, 0 past that.
    Windows with pref_min > pref_max wrap through north (e.g. 350 -> 10).

    Args:
        bearing: Incoming swell direction (compass degrees)
        pref_min: Window start (compass degrees)
        pref_max: Window end (compass degrees)

    Returns:
        Weight in [0, 1]
    """
    direction = normalize_degrees(bearing)
    low = normalize_degrees(pref_min)
    high = normalize_degrees(pref_max)

    if low <= high:
        center = (low + high) / 2.0
        width = high - low
    else:
        center = ((low + high + 360.0) / 2.0) % 360.0
        width = 360.0 - low + high

    half_width = width / 2.0
    distance = angular_difference(direction, center)

    if distance <= half_width:
        return 1.0
    overshoot = distance - half_width
    if overshoot >= DIRECTIONAL_FALLOFF_DEG:
        return 0.0
    return 1.0 - overshoot / DIRECTIONAL_FALLOFF_DEG


def directional_falloff(angle: float, center: float, half_width: float) -> float:
    """
    Gaussian concentration of ring energy around its heading.

    sigma = max(5, half_width) / sqrt(2). The tail never reaches zero, so
    angles far off the heading still get a vanishing share.

    Returns:
        Weight in (0, 1]
    """
    if not math.isfinite(half_width):
        half_width = MIN_FALLOFF_HALF_WIDTH_DEG
    sigma = max(MIN_FALLOFF_HALF_WIDTH_DEG, half_width) / math.sqrt(2.0)
    diff = angular_difference(angle, center)
    return math.exp(-(diff * diff) / (2.0 * sigma * sigma))


def bearing_from_north(dx: float, dy: float) -> float:
    """
    Screen-space offset to compass bearing.

    dx grows right, dy grows down. 0 = up (north), 90 = right (east).
    """
    return normalize_degrees(math.degrees(math.atan2(dx, -dy)))
