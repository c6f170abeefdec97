"""
Runtime data types for the swell simulation.

Storms, rings and spots are plain dataclasses; the physics modules read
them and write derived fields back. Positions are float64 numpy arrays
[x, y] in normalized map space (x right, y down, both in [0, 1]).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional

import numpy as np


def _as_position(value) -> np.ndarray:
    """Coerce to a float64 [x, y] array"""
    if not isinstance(value, np.ndarray):
        return np.array(value, dtype=np.float64)
    return value.astype(np.float64, copy=False)


# ============================================================================
# Storm
# ============================================================================

@dataclass
class Storm:
    """
    Swell-generating storm.

    Attributes:
        storm_id: Unique identifier
        name: Display name (also used for spot attribution)
        position: [x, y] normalized map position
        heading_deg: Direction of travel [0, 360), 0 = east (see kinematics)
        speed_units: Abstract speed (1 unit ~ STORM_REF_SPEED_KMH)
        power: Storm strength [0, 10]
        wind_kts: Sustained wind (knots)
        radius_km: Storm size (km)
        active: Inactive storms do not emit
        last_emission: Simulated hour of the last emitted ring (None = never)
        storm_type: "custom" (user placed) or "preset" (scenario)
    """
    storm_id: str
    name: str
    position: np.ndarray  # [x, y] float64
    heading_deg: float = 300.0
    speed_units: float = 0.6
    power: float = 5.0
    wind_kts: float = 40.0
    radius_km: float = 400.0
    active: bool = True
    last_emission: Optional[float] = None
    storm_type: str = "custom"

    def __post_init__(self):
        self.position = _as_position(self.position)

    @property
    def x(self) -> float:
        return float(self.position[0])

    @property
    def y(self) -> float:
        return float(self.position[1])

    def to_dict(self) -> dict:
        return {
            'storm_id': self.storm_id,
            'name': self.name,
            'position': self.position.tolist(),
            'heading_deg': float(self.heading_deg),
            'speed_units': float(self.speed_units),
            'power': float(self.power),
            'wind_kts': float(self.wind_kts),
            'radius_km': float(self.radius_km),
            'active': bool(self.active),
            'last_emission': self.last_emission,
            'storm_type': self.storm_type,
        }


# ============================================================================
# Ring
# ============================================================================

class RingId(NamedTuple):
    """Composite ring identity: source storm + per-storm emission sequence"""
    storm_id: str
    sequence: int

    def __str__(self) -> str:
        return f"{self.storm_id}#{self.sequence}"


@dataclass
class Ring:
    """
    Expanding swell wavefront emitted by a storm.

    Everything except radius_km and active is fixed at emission. The ring
    keeps only the id of its storm; it outlives the storm if the storm is
    removed.

    Attributes:
        ring_id: Composite identity (storm_id, sequence)
        storm_id: Source storm (non-owning reference)
        emitted_at: Simulated hour of emission
        origin: [x, y] storm position at emission
        heading_deg: Storm heading at emission (sector centre)
        propagation_speed: km per simulated hour
        base_energy: Energy at radius 0
        decay_rate: Exponential decay per km
        radius_km: Current radius (only grows)
        active: False once retired; never reactivated
    """
    ring_id: RingId
    storm_id: str
    emitted_at: float
    origin: np.ndarray  # [x, y] float64
    heading_deg: float
    propagation_speed: float
    base_energy: float
    decay_rate: float
    radius_km: float = 0.0
    active: bool = True

    def __post_init__(self):
        self.origin = _as_position(self.origin)

    def to_dict(self) -> dict:
        return {
            'ring_id': str(self.ring_id),
            'storm_id': self.storm_id,
            'emitted_at': float(self.emitted_at),
            'origin': self.origin.tolist(),
            'heading_deg': float(self.heading_deg),
            'propagation_speed': float(self.propagation_speed),
            'base_energy': float(self.base_energy),
            'decay_rate': float(self.decay_rate),
            'radius_km': float(self.radius_km),
            'active': bool(self.active),
        }


# ============================================================================
# Spot
# ============================================================================

class HeightClass(str, Enum):
    """Ordinal surf quality buckets"""
    FLAT = "Flat"
    FUN = "Fun"
    SOLID = "Solid"
    XL = "XL"


@dataclass
class Spot:
    """
    Coastal observation point.

    Geometry (position, preferred window) is static; the energy, quality and
    top_contributor fields are rewritten every tick by the simulation.

    Attributes:
        spot_id: Unique identifier
        name: Display name
        position: [x, y] normalized map position
        preferred_min: Start of preferred swell window (compass degrees)
        preferred_max: End of preferred swell window; may be < preferred_min (wraps 0/360)
        current_energy: Last raw sampled energy
        smoothed_energy: EMA of sampled energy
        quality: Label classified from the raw current_energy (smoothed_energy is
            a display trend only and does not drive the label)
        top_contributor: Name of the storm behind the largest single contribution
    """
    spot_id: str
    name: str
    position: np.ndarray  # [x, y] float64
    preferred_min: float
    preferred_max: float
    current_energy: float = 0.0
    smoothed_energy: float = 0.0
    quality: HeightClass = HeightClass.FLAT
    top_contributor: Optional[str] = None

    def __post_init__(self):
        self.position = _as_position(self.position)

    @property
    def preferred_direction(self) -> str:
        return f"{self.preferred_min:.0f}°-{self.preferred_max:.0f}°"

    def to_dict(self) -> dict:
        return {
            'spot_id': self.spot_id,
            'name': self.name,
            'position': self.position.tolist(),
            'preferred_min': float(self.preferred_min),
            'preferred_max': float(self.preferred_max),
            'current_energy': float(self.current_energy),
            'smoothed_energy': float(self.smoothed_energy),
            'quality': self.quality.value,
            'top_contributor': self.top_contributor,
        }


# ============================================================================
# Sampling Support
# ============================================================================

class CanvasSize(NamedTuple):
    """Pixel dimensions of the surface the map is projected onto"""
    width: float
    height: float


@dataclass
class SampleDebugInfo:
    """Attribution for the single largest ring contribution at a spot"""
    top_ring_id: Optional[RingId] = None
    top_storm_id: Optional[str] = None
    top_contribution: float = 0.0
    contributing_rings: int = 0


# ============================================================================
# Scenario
# ============================================================================

@dataclass
class Scenario:
    """Preset storm layout"""
    scenario_id: str
    name: str
    storms: List[Dict[str, Any]]  # raw storm dicts, normalized on load into the simulation
    initial_time_hours: float = 0.0
    description: Optional[str] = None
