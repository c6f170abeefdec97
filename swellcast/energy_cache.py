"""
Per-tick ring energy cache.

Side table keyed by ring identity. The simulation invalidates it once per
tick before any sampling; the first read of a ring afterwards computes and
stores its energy (miss), later reads in the same tick return the stored
value (hit). Hit/miss counters are independent of the cached values and
can be reset on their own.
"""

from typing import Dict, Iterable

from .data_types import Ring, RingId
from .rings import compute_ring_energy


class EnergyCache:
    """Memoized ring energies for one tick"""

    def __init__(self):
        self._values: Dict[RingId, float] = {}
        self.hits: int = 0
        self.misses: int = 0

    def get(self, ring: Ring) -> float:
        """Cached energy for ring, computing it on first access this tick"""
        value = self._values.get(ring.ring_id)
        if value is not None:
            self.hits += 1
            return value

        self.misses += 1
        value = compute_ring_energy(ring)
        self._values[ring.ring_id] = value
        return value

    def invalidate(self):
        """Drop all cached energies (start of tick)"""
        self._values.clear()

    def discard(self, ring_ids: Iterable[RingId]):
        """Forget specific rings (e.g. evicted by the capacity ceiling)"""
        for ring_id in ring_ids:
            self._values.pop(ring_id, None)

    def reset_stats(self):
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, ring_id: RingId) -> bool:
        return ring_id in self._values

    def stats(self) -> dict:
        """
        Cache counters.

        Returns:
            Dict with hits, misses, hit_rate (0.0 when no lookups), size
        """
        lookups = self.hits + self.misses
        return {
            'hits': self.hits,
            'misses': self.misses,
            'hit_rate': self.hits / lookups if lookups else 0.0,
            'size': len(self._values),
        }
