"""
Ring engine: emission, propagation, decay and capacity control.

Rings are created at a storm's current position, expand at a speed fixed
by storm power, and lose energy exponentially with radius. A ring is
retired (active=False) once it outgrows the map or its energy drops below
the configured floor; retired rings are never revived.
"""

import math
from typing import Callable, List, Optional

import numpy as np

from .config import SimConfig
from .constants import (
    BASE_ENERGY_MULTIPLIER,
    EMISSION_INTERVAL_HOURS,
    MAX_ACTIVE_RINGS,
    MAX_RADIUS_KM,
    MAX_STORM_POWER,
    REFERENCE_STORM_RADIUS_KM,
    REFERENCE_WIND_KTS,
    SIZE_FACTOR_RANGE,
    SPEED_POWER_OFFSET,
    WIND_FACTOR_RANGE,
)
from .data_types import Ring, RingId, Storm


def _finite_or(value, default: float) -> float:
    """Return value as float, or default for None/NaN/inf/non-numeric"""
    try:
        value = float(value)
    except (TypeError, ValueError):
        return default
    return value if math.isfinite(value) else default


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def compute_base_energy(power: float, wind_kts: float, radius_km: float) -> float:
    """
    Initial ring energy from storm strength.

    power * multiplier * wind_factor * size_factor, with both factors
    clamped ratios against a 40 kt / 400 km reference storm.
    """
    power = _clamp(_finite_or(power, 0.0), 0.0, MAX_STORM_POWER)
    wind_factor = _clamp(_finite_or(wind_kts, 0.0) / REFERENCE_WIND_KTS, *WIND_FACTOR_RANGE)
    size_factor = _clamp(_finite_or(radius_km, 0.0) / REFERENCE_STORM_RADIUS_KM, *SIZE_FACTOR_RANGE)
    return power * BASE_ENERGY_MULTIPLIER * wind_factor * size_factor


def create_ring(storm: Storm, current_hours: float, config: SimConfig, sequence: int = 0) -> Ring:
    """
    Emit a new ring at the storm's current position and heading.

    Speed, base energy and decay rate are frozen here; later config
    changes do not affect rings already in flight.

    Args:
        storm: Source storm
        current_hours: Simulated hour of emission
        config: Active simulation config
        sequence: Per-storm emission sequence number (ring identity)

    Returns:
        New active ring with radius 0
    """
    power = _clamp(_finite_or(storm.power, 0.0), 0.0, MAX_STORM_POWER)
    propagation_speed = config.ring_propagation_speed_kmh * (SPEED_POWER_OFFSET + power / MAX_STORM_POWER)

    return Ring(
        ring_id=RingId(storm.storm_id, int(sequence)),
        storm_id=storm.storm_id,
        emitted_at=_finite_or(current_hours, 0.0),
        origin=storm.position.copy(),
        heading_deg=_finite_or(storm.heading_deg, 0.0),
        propagation_speed=propagation_speed,
        base_energy=compute_base_energy(power, storm.wind_kts, storm.radius_km),
        decay_rate=config.ring_decay_rate_per_km,
        radius_km=0.0,
        active=True,
    )


def should_emit_ring(storm: Storm, current_hours: float, last_emission: Optional[float]) -> bool:
    """
    Emission cadence check.

    An active storm emits immediately if it never has, then once every
    EMISSION_INTERVAL_HOURS of simulated time.
    """
    if not storm.active:
        return False
    if last_emission is None:
        return True
    return current_hours - last_emission >= EMISSION_INTERVAL_HOURS


def compute_ring_energy(ring: Ring) -> float:
    """base_energy * exp(-decay_rate * radius_km); never negative"""
    return max(0.0, ring.base_energy) * math.exp(-ring.decay_rate * max(0.0, ring.radius_km))


def advance_ring(ring: Ring, dt_hours: float, min_active_energy: float) -> float:
    """
    Grow a ring by one time step and retire it if spent.

    Negative or non-finite dt is treated as 0, so the radius never shrinks.
    Retired rings are left untouched.

    Args:
        ring: Ring to advance (mutated)
        dt_hours: Simulated hours elapsed
        min_active_energy: Retirement energy floor

    Returns:
        Ring energy after the step
    """
    if not ring.active:
        return compute_ring_energy(ring)

    dt_hours = max(0.0, _finite_or(dt_hours, 0.0))
    ring.radius_km += ring.propagation_speed * dt_hours

    energy = compute_ring_energy(ring)
    if ring.radius_km > MAX_RADIUS_KM or energy < min_active_energy:
        ring.active = False
    return energy


def trim_rings(
    rings: List[Ring],
    energy_of: Callable[[Ring], float],
    max_rings: int = MAX_ACTIVE_RINGS,
) -> List[Ring]:
    """
    Enforce the active ring ceiling.

    When over capacity, keeps the max_rings strongest rings ordered by
    descending energy (stable for ties). Under capacity the list is
    returned unchanged.

    Args:
        rings: Current ring set
        energy_of: Energy lookup (normally EnergyCache.get)
        max_rings: Capacity ceiling

    Returns:
        Ring list of length <= max_rings
    """
    if len(rings) <= max_rings:
        return rings

    energies = np.fromiter((energy_of(r) for r in rings), dtype=np.float64, count=len(rings))
    order = np.argsort(-energies, kind='stable')[:max_rings]
    return [rings[i] for i in order]
