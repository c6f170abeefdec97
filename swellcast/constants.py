"""
Central configuration constants for swell simulation.

Fixed values shared across modules. Tunable parameters live in
config.SimConfig; everything here is a hard model constant.
"""

# ============================================================================
# Ring Emission & Lifetime
# ============================================================================

# Simulated hours between consecutive rings from the same storm
EMISSION_INTERVAL_HOURS = 3.0

# Map scale: one normalized map unit spans this many km
MAX_RADIUS_KM = 6000.0

# Hard ceiling on simultaneously active rings (lowest-energy rings evicted)
MAX_ACTIVE_RINGS = 1000


# ============================================================================
# Ring Energy Model
# ============================================================================

BASE_ENERGY_MULTIPLIER = 1.0

# Reference storm used to scale wind and size factors
REFERENCE_WIND_KTS = 40.0
REFERENCE_STORM_RADIUS_KM = 400.0

# (min, max) clamps on wind and size factors
WIND_FACTOR_RANGE = (0.5, 3.0)
SIZE_FACTOR_RANGE = (0.5, 2.0)

# Propagation speed = base * (SPEED_POWER_OFFSET + power / MAX_STORM_POWER)
SPEED_POWER_OFFSET = 0.4
MAX_STORM_POWER = 10.0


# ============================================================================
# Directional Weighting
# ============================================================================

# Linear shoulder beyond a spot's preferred window (degrees)
DIRECTIONAL_FALLOFF_DEG = 45.0

# Floor on preferred-direction weight once a ring reaches a spot
MIN_DIRECTIONAL_WEIGHT = 0.15

# Sector half-width never narrower than this (degrees)
MIN_SECTOR_HALF_WIDTH_DEG = 10.0

# Gaussian sigma floor (degrees, before the sqrt(2) division)
MIN_FALLOFF_HALF_WIDTH_DEG = 5.0

# Sector weights below this are treated as zero (ring skipped)
SECTOR_WEIGHT_EPSILON = 1e-3


# ============================================================================
# Spot Sampling
# ============================================================================

# Rings smaller than this are not sampled (near-origin artifacts)
MIN_SAMPLE_RADIUS_KM = 50.0

# Canvas size (longer side) at which ring_sample_tolerance_px is specified
REFERENCE_CANVAS_WIDTH_PX = 1000.0

# Quality label thresholds (inclusive lower bounds)
HEIGHT_THRESHOLD_FUN = 1.0
HEIGHT_THRESHOLD_SOLID = 2.5
HEIGHT_THRESHOLD_XL = 5.0


# ============================================================================
# Storm Kinematics
# ============================================================================

# One storm speed unit ~ 40 km/h
STORM_REF_SPEED_KMH = 40.0

# Storm defaults for placement and partially specified scenario data
STORM_DEFAULTS = {
    'heading_deg': 300.0,
    'speed_units': 0.6,
    'power': 5.0,
    'wind_kts': 40.0,
    'radius_km': 400.0,
    'active': True,
}

STORM_NAME_MAX_LENGTH = 40


# ============================================================================
# Clock & Time Step
# ============================================================================

# Ceiling on simulated hours applied in a single tick
MAX_DELTA_HOURS = 6.0

MS_PER_HOUR = 3_600_000.0

MIN_CLOCK_MULTIPLIER = 0.1


# ============================================================================
# Performance Configuration
# ============================================================================

# Tick timing window for rolling average
TICK_TIME_WINDOW = 100

# Default tick summary interval (print every N ticks)
TICK_SUMMARY_INTERVAL = 50
