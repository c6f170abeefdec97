"""
Spot sampler: ring energy observed at coastal spots.

A ring contributes to a spot when the spot lies within the sampling band
around the ring's current radius. The contribution is scaled by how well
the spot sits inside the ring's energy sector and by how well the incoming
swell direction matches the spot's preferred window.

All distances are compared in pixel-equivalent units of the given canvas.
Both map axes share one scale (the longer canvas side), so rings stay
circular on non-square canvases; spot offset, ring radius and tolerance
band all scale together, so the result depends neither on canvas
resolution nor on aspect ratio.
"""

import math
from typing import Iterable, Optional

from .angles import bearing_from_north, directional_falloff, directional_weight
from .config import SimConfig
from .constants import (
    HEIGHT_THRESHOLD_FUN,
    HEIGHT_THRESHOLD_SOLID,
    HEIGHT_THRESHOLD_XL,
    MAX_RADIUS_KM,
    MIN_DIRECTIONAL_WEIGHT,
    MIN_SAMPLE_RADIUS_KM,
    MIN_SECTOR_HALF_WIDTH_DEG,
    REFERENCE_CANVAS_WIDTH_PX,
    SECTOR_WEIGHT_EPSILON,
)
from .data_types import CanvasSize, HeightClass, Ring, SampleDebugInfo, Spot
from .energy_cache import EnergyCache
from .rings import compute_ring_energy


def _canvas_dimension(value) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        return 1.0
    return value if math.isfinite(value) and value >= 1.0 else 1.0


def sample_spot_energy(
    spot: Spot,
    rings: Iterable[Ring],
    canvas_size: CanvasSize,
    config: SimConfig,
    cache: Optional[EnergyCache] = None,
    debug_info: Optional[SampleDebugInfo] = None,
) -> float:
    """
    Total swell energy reaching a spot this tick.

    Args:
        spot: Observation point
        rings: Candidate rings (inactive rings are skipped)
        canvas_size: Pixel dimensions the map is projected onto
        config: Active simulation config
        cache: Per-tick energy cache; energies computed directly if None
        debug_info: Filled with the largest single contribution if given

    Returns:
        Summed energy, capped at config.spot_energy_cap
    """
    width = _canvas_dimension(canvas_size.width)
    height = _canvas_dimension(canvas_size.height)

    # One isotropic map scale; km -> px matches storm motion on both axes
    scale = max(width, height)
    px_per_km = scale / MAX_RADIUS_KM
    tolerance_px = config.ring_sample_tolerance_px * (scale / REFERENCE_CANVAS_WIDTH_PX)
    sector_half_width = max(MIN_SECTOR_HALF_WIDTH_DEG, config.ring_sector_width_deg / 2.0)

    total = 0.0
    for ring in rings:
        if not ring.active or ring.radius_km < MIN_SAMPLE_RADIUS_KM:
            continue

        dx_px = (spot.position[0] - ring.origin[0]) * scale
        dy_px = (spot.position[1] - ring.origin[1]) * scale
        distance_px = math.hypot(dx_px, dy_px)
        radius_px = ring.radius_km * px_per_km
        if abs(distance_px - radius_px) > tolerance_px:
            continue

        bearing = bearing_from_north(dx_px, dy_px)
        sector_weight = directional_falloff(bearing, ring.heading_deg, sector_half_width)
        if sector_weight < SECTOR_WEIGHT_EPSILON:
            continue

        # Swell arrives FROM the opposite of its travel direction
        incoming = (bearing + 180.0) % 360.0
        preferred_weight = max(
            MIN_DIRECTIONAL_WEIGHT,
            directional_weight(incoming, spot.preferred_min, spot.preferred_max),
        )

        energy = cache.get(ring) if cache is not None else compute_ring_energy(ring)
        contribution = energy * sector_weight * preferred_weight
        total += contribution

        if debug_info is not None:
            debug_info.contributing_rings += 1
            if contribution > debug_info.top_contribution:
                debug_info.top_contribution = contribution
                debug_info.top_ring_id = ring.ring_id
                debug_info.top_storm_id = ring.storm_id

    return min(total, config.spot_energy_cap)


def classify_height(energy: float) -> HeightClass:
    """
    Quality bucket for an energy value.

    Thresholds are inclusive lower bounds: 1.0 is Fun, 2.5 is Solid,
    5.0 is XL. Anything below 1.0 (or non-finite) is Flat.
    """
    if not math.isfinite(energy) or energy < HEIGHT_THRESHOLD_FUN:
        return HeightClass.FLAT
    if energy < HEIGHT_THRESHOLD_SOLID:
        return HeightClass.FUN
    if energy < HEIGHT_THRESHOLD_XL:
        return HeightClass.SOLID
    return HeightClass.XL


def apply_ema(previous: float, next_value: float, alpha: float) -> float:
    """
    Exponential moving average step.

    alpha is clamped to [0, 1]: 0 keeps previous, 1 tracks next_value
    exactly. Non-finite next_value counts as 0; a non-finite previous
    value restarts the average at the target.
    """
    weight = _clamp_unit(alpha)
    target = next_value if _is_finite(next_value) else 0.0
    if not _is_finite(previous):
        return target
    if weight <= 0.0:
        return previous
    if weight >= 1.0:
        return target
    return weight * target + (1.0 - weight) * previous


def _is_finite(value) -> bool:
    try:
        return math.isfinite(value)
    except TypeError:
        return False


def _clamp_unit(value) -> float:
    if not _is_finite(value):
        return 0.0
    return min(max(float(value), 0.0), 1.0)
