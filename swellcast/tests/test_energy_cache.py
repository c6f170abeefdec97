import pytest

from swellcast.config import SimConfig
from swellcast.data_types import Storm
from swellcast.energy_cache import EnergyCache
from swellcast.rings import compute_ring_energy, create_ring


@pytest.fixture
def ring():
    storm = Storm(storm_id='s1', name='Cache Storm', position=[0.2, 0.2], power=6.0)
    r = create_ring(storm, 0.0, SimConfig())
    r.radius_km = 300.0
    return r


def test_first_read_is_miss_then_hits(ring):
    cache = EnergyCache()
    first = cache.get(ring)
    assert cache.misses == 1 and cache.hits == 0
    assert first == compute_ring_energy(ring)

    for expected_hits in range(1, 4):
        assert cache.get(ring) == first
        assert cache.hits == expected_hits
        assert cache.misses == 1


def test_cached_value_is_not_recomputed_until_invalidated(ring):
    cache = EnergyCache()
    first = cache.get(ring)

    # radius changes mid-window are not seen until invalidation
    ring.radius_km += 1000.0
    assert cache.get(ring) == first

    cache.invalidate()
    assert len(cache) == 0
    refreshed = cache.get(ring)
    assert refreshed < first
    assert cache.misses == 2


def test_reset_stats_keeps_values(ring):
    cache = EnergyCache()
    cache.get(ring)
    cache.get(ring)
    cache.reset_stats()

    assert cache.hits == 0 and cache.misses == 0
    assert ring.ring_id in cache
    cache.get(ring)
    assert cache.hits == 1 and cache.misses == 0


def test_discard_forgets_ring(ring):
    cache = EnergyCache()
    cache.get(ring)
    cache.discard([ring.ring_id])
    assert ring.ring_id not in cache
    cache.get(ring)
    assert cache.misses == 2


def test_stats(ring):
    cache = EnergyCache()
    assert cache.stats() == {'hits': 0, 'misses': 0, 'hit_rate': 0.0, 'size': 0}

    cache.get(ring)
    cache.get(ring)
    cache.get(ring)
    cache.get(ring)
    stats = cache.stats()
    assert stats['hits'] == 3
    assert stats['misses'] == 1
    assert stats['hit_rate'] == pytest.approx(0.75)
    assert stats['size'] == 1
