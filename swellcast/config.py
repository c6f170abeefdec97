"""
Tunable simulation parameters.

SimConfig holds the scalars the physics core reads every tick. Every field
has a documented valid range; values outside it (or non-finite values) are
rejected and the last-known-good value is kept, so NaN never reaches the
ring or sampling math.
"""

import math
import numbers
from dataclasses import dataclass, fields
from typing import Any, Callable, Dict, Optional


def _finite(value: Any) -> Optional[float]:
    """Return value as float if it is a finite real number, else None"""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return None
    value = float(value)
    return value if math.isfinite(value) else None


def _positive(value: Any) -> Optional[float]:
    value = _finite(value)
    return value if value is not None and value > 0 else None


def _in_range(low: float, high: float) -> Callable[[Any], Optional[float]]:
    def validate(value: Any) -> Optional[float]:
        value = _finite(value)
        if value is None or value < low or value > high:
            return None
        return value
    return validate


DEFAULTS: Dict[str, float] = {
    'base_time_acceleration': 3600.0,
    'ring_sector_width_deg': 120.0,
    'ring_sample_tolerance_px': 40.0,
    'ring_propagation_speed_kmh': 60.0,
    'ring_decay_rate_per_km': 0.001,
    'ring_min_active_energy': 0.05,
    'spot_energy_cap': 10.0,
    'spot_energy_smoothing_alpha': 0.25,
}

# Field name -> validator returning the accepted float or None
VALIDATORS: Dict[str, Callable[[Any], Optional[float]]] = {
    'base_time_acceleration': _positive,
    'ring_sector_width_deg': _in_range(10.0, 360.0),
    'ring_sample_tolerance_px': _in_range(5.0, 200.0),
    'ring_propagation_speed_kmh': _positive,
    'ring_decay_rate_per_km': _positive,
    'ring_min_active_energy': _positive,
    'spot_energy_cap': _positive,
    'spot_energy_smoothing_alpha': _in_range(0.0, 1.0),
}


@dataclass
class SimConfig:
    """
    Range-validated simulation configuration.

    Attributes:
        base_time_acceleration: Simulated seconds per wall-clock second (> 0)
        ring_sector_width_deg: Full width of a ring's energy sector [10, 360]
        ring_sample_tolerance_px: Ring "reached" band at the reference canvas size (longer side) [5, 200]
        ring_propagation_speed_kmh: Base ring speed before power scaling (> 0)
        ring_decay_rate_per_km: Exponential energy decay per km of radius (> 0)
        ring_min_active_energy: Rings below this energy are retired (> 0)
        spot_energy_cap: Maximum sampled energy at a spot (> 0)
        spot_energy_smoothing_alpha: EMA weight of the newest sample [0, 1]

    Mutate through set_value() or the named setters; direct attribute
    assignment skips validation.
    """
    base_time_acceleration: float = DEFAULTS['base_time_acceleration']
    ring_sector_width_deg: float = DEFAULTS['ring_sector_width_deg']
    ring_sample_tolerance_px: float = DEFAULTS['ring_sample_tolerance_px']
    ring_propagation_speed_kmh: float = DEFAULTS['ring_propagation_speed_kmh']
    ring_decay_rate_per_km: float = DEFAULTS['ring_decay_rate_per_km']
    ring_min_active_energy: float = DEFAULTS['ring_min_active_energy']
    spot_energy_cap: float = DEFAULTS['spot_energy_cap']
    spot_energy_smoothing_alpha: float = DEFAULTS['spot_energy_smoothing_alpha']

    def __post_init__(self):
        """Replace any invalid constructor value with its default"""
        for f in fields(self):
            accepted = VALIDATORS[f.name](getattr(self, f.name))
            setattr(self, f.name, accepted if accepted is not None else DEFAULTS[f.name])

    def set_value(self, name: str, value: Any) -> bool:
        """
        Set a field if value is valid.

        Args:
            name: Field name (see DEFAULTS)
            value: Candidate value

        Returns:
            True if applied, False if rejected (unknown field or invalid value)
        """
        validator = VALIDATORS.get(name)
        if validator is None:
            return False
        accepted = validator(value)
        if accepted is None:
            return False
        setattr(self, name, accepted)
        return True

    def set_base_time_acceleration(self, value: Any) -> bool:
        return self.set_value('base_time_acceleration', value)

    def set_ring_sector_width_deg(self, value: Any) -> bool:
        return self.set_value('ring_sector_width_deg', value)

    def set_ring_sample_tolerance_px(self, value: Any) -> bool:
        return self.set_value('ring_sample_tolerance_px', value)

    def set_ring_propagation_speed_kmh(self, value: Any) -> bool:
        return self.set_value('ring_propagation_speed_kmh', value)

    def set_ring_decay_rate_per_km(self, value: Any) -> bool:
        return self.set_value('ring_decay_rate_per_km', value)

    def set_ring_min_active_energy(self, value: Any) -> bool:
        return self.set_value('ring_min_active_energy', value)

    def set_spot_energy_cap(self, value: Any) -> bool:
        return self.set_value('spot_energy_cap', value)

    def set_spot_energy_smoothing_alpha(self, value: Any) -> bool:
        return self.set_value('spot_energy_smoothing_alpha', value)

    def reset(self):
        """Restore every field to its default"""
        for name, value in DEFAULTS.items():
            setattr(self, name, value)

    def to_dict(self) -> Dict[str, float]:
        return {f.name: float(getattr(self, f.name)) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'SimConfig':
        """
        Build config from persisted settings.

        Missing, unknown and invalid entries are ignored; each field falls
        back to its default independently.
        """
        config = cls()
        if not isinstance(data, dict):
            return config
        for name in DEFAULTS:
            if name in data:
                config.set_value(name, data[name])
        return config
