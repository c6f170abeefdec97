import math

import numpy as np
import pytest

from swellcast.config import SimConfig
from swellcast.constants import MAX_RADIUS_KM, MIN_DIRECTIONAL_WEIGHT
from swellcast.data_types import CanvasSize, HeightClass, Ring, RingId, SampleDebugInfo, Spot
from swellcast.energy_cache import EnergyCache
from swellcast.sampler import apply_ema, classify_height, sample_spot_energy

CANVAS = CanvasSize(1000.0, 1000.0)


def make_ring(heading_deg=0.0, radius_km=600.0, origin=(0.5, 0.5), base_energy=5.0,
              storm_id='s1', sequence=0, active=True) -> Ring:
    return Ring(
        ring_id=RingId(storm_id, sequence),
        storm_id=storm_id,
        emitted_at=0.0,
        origin=list(origin),
        heading_deg=heading_deg,
        propagation_speed=54.0,
        base_energy=base_energy,
        decay_rate=0.001,
        radius_km=radius_km,
        active=active,
    )


def north_spot(radius_km=600.0, pref=(300.0, 320.0)) -> Spot:
    """Spot due north of (0.5, 0.5), exactly on a ring of radius_km"""
    return Spot(
        spot_id='north',
        name='North',
        position=[0.5, 0.5 - radius_km / MAX_RADIUS_KM],
        preferred_min=pref[0],
        preferred_max=pref[1],
    )


def test_aligned_heading_contributes_more_than_opposite():
    spot = north_spot()
    config = SimConfig()

    toward = sample_spot_energy(spot, [make_ring(heading_deg=0.0)], CANVAS, config)
    away = sample_spot_energy(spot, [make_ring(heading_deg=180.0)], CANVAS, config)

    assert toward > away
    assert toward > 0.0


def test_preferred_weight_floor():
    # incoming direction is 180; window 300-320 is far off -> floored weight
    config = SimConfig()
    energy = sample_spot_energy(north_spot(), [make_ring()], CANVAS, config)
    expected = 5.0 * math.exp(-0.001 * 600.0) * MIN_DIRECTIONAL_WEIGHT
    assert energy == pytest.approx(expected)


def test_matching_window_gets_full_weight():
    config = SimConfig()
    ring = make_ring()
    off = sample_spot_energy(north_spot(), [ring], CANVAS, config)
    on = sample_spot_energy(north_spot(pref=(170.0, 190.0)), [ring], CANVAS, config)
    assert on == pytest.approx(off / MIN_DIRECTIONAL_WEIGHT)


def test_resolution_independent():
    config = SimConfig()
    # offset (50 px, -50 px) at scale 1000 -> ~70.7 px vs ring 58.3 px, bearing 45 deg
    spot = Spot(spot_id='sp', name='Off Axis', position=[0.45, 0.35],
                preferred_min=200.0, preferred_max=260.0)
    ring = make_ring(heading_deg=60.0, radius_km=350.0, origin=(0.40, 0.40))

    base = sample_spot_energy(spot, [ring], CanvasSize(1000.0, 600.0), config)
    doubled = sample_spot_energy(spot, [ring], CanvasSize(2000.0, 1200.0), config)

    assert base > 0.0
    assert np.isclose(base, doubled, rtol=1e-12, atol=0.0)


def test_aspect_ratio_independent():
    config = SimConfig()
    spot = north_spot()
    ring = make_ring()

    square = sample_spot_energy(spot, [ring], CanvasSize(1000.0, 1000.0), config)
    wide = sample_spot_energy(spot, [ring], CanvasSize(1000.0, 500.0), config)
    tall = sample_spot_energy(spot, [ring], CanvasSize(500.0, 1000.0), config)

    assert square > 0.0
    assert wide == pytest.approx(square)
    assert tall == pytest.approx(square)


def test_energy_capped():
    config = SimConfig(spot_energy_cap=10.0)
    spot = north_spot(pref=(170.0, 190.0))
    rings = [make_ring(base_energy=60.0, sequence=i) for i in range(20)]

    energy = sample_spot_energy(spot, rings, CANVAS, config)
    assert energy == 10.0

    config.set_spot_energy_cap(2.0)
    assert sample_spot_energy(spot, rings, CANVAS, config) == 2.0


def test_skips_small_inactive_and_distant_rings():
    config = SimConfig()
    # ring below the 50 km sampling floor, spot exactly on it
    assert sample_spot_energy(north_spot(radius_km=30.0), [make_ring(radius_km=30.0)], CANVAS, config) == 0.0
    # inactive ring
    assert sample_spot_energy(north_spot(), [make_ring(active=False)], CANVAS, config) == 0.0
    # ring far from the spot (600 km ring vs spot at 1800 km)
    assert sample_spot_energy(north_spot(radius_km=1800.0), [make_ring()], CANVAS, config) == 0.0


def test_debug_info_tracks_top_contributor():
    config = SimConfig()
    spot = north_spot(pref=(170.0, 190.0))
    weak = make_ring(base_energy=1.0, storm_id='weak')
    strong = make_ring(base_energy=4.0, storm_id='strong')
    debug = SampleDebugInfo()

    sample_spot_energy(spot, [weak, strong], CANVAS, config, debug_info=debug)

    assert debug.contributing_rings == 2
    assert debug.top_storm_id == 'strong'
    assert debug.top_ring_id == RingId('strong', 0)
    assert debug.top_contribution == pytest.approx(4.0 * math.exp(-0.6))


def test_uses_energy_cache():
    config = SimConfig()
    cache = EnergyCache()
    spot = north_spot()
    rings = [make_ring(sequence=0), make_ring(sequence=1)]

    first = sample_spot_energy(spot, rings, CANVAS, config, cache=cache)
    second = sample_spot_energy(spot, rings, CANVAS, config, cache=cache)

    assert first == second
    assert cache.misses == 2
    assert cache.hits == 2


def test_classify_height_boundaries():
    assert classify_height(0.1) == HeightClass.FLAT
    assert classify_height(0.5) == HeightClass.FLAT
    assert classify_height(0.999) == HeightClass.FLAT
    assert classify_height(1.0) == HeightClass.FUN
    assert classify_height(2.49) == HeightClass.FUN
    assert classify_height(2.5) == HeightClass.SOLID
    assert classify_height(3.0) == HeightClass.SOLID
    assert classify_height(5.0) == HeightClass.XL
    assert classify_height(50.0) == HeightClass.XL
    assert classify_height(float('nan')) == HeightClass.FLAT
    assert classify_height(1.0).value == "Fun"


def test_apply_ema():
    assert apply_ema(2.0, 4.0, 0.0) == 2.0
    assert apply_ema(2.0, 4.0, 1.0) == 4.0
    assert apply_ema(0.0, 4.0, 0.25) == pytest.approx(1.0)
    assert apply_ema(2.0, 4.0, 7.0) == 4.0
    assert apply_ema(2.0, float('nan'), 0.5) == pytest.approx(1.0)
    assert apply_ema(float('nan'), 3.0, 0.5) == 3.0
    assert apply_ema(2.0, 4.0, float('nan')) == 2.0
