"""
Swell simulation kernel.

Main simulation class that owns storms, rings, spots, the clock, the
config and the per-tick energy cache, and runs the fixed tick ordering.
"""

import os
import time
from pathlib import Path
from typing import Dict, List, Optional

from .clock import SimClock
from .config import SimConfig
from .constants import MAX_ACTIVE_RINGS, TICK_TIME_WINDOW
from .data_types import CanvasSize, Ring, SampleDebugInfo, Scenario, Spot, Storm
from .energy_cache import EnergyCache
from .kinematics import advance_storm, clamp_step_hours, compute_clamped_delta_hours
from .loader import load_all_data, load_sim_config
from .rings import advance_ring, create_ring, should_emit_ring, trim_rings
from .sampler import apply_ema, classify_height, sample_spot_energy
from .storms import storm_from_dict, update_storm

DEFAULT_CANVAS = CanvasSize(1000.0, 1000.0)


class SwellSimulation:
    """
    Headless swell forecast simulation.

    Storms and spots are plain data the kernel reads each tick; rings are
    created, advanced and retired here. The energy cache is owned by the
    simulation and scoped to one tick.
    """

    def __init__(
        self,
        spots: Optional[List[Spot]] = None,
        config: Optional[SimConfig] = None,
        scenarios: Optional[Dict[str, Scenario]] = None,
        max_rings: int = MAX_ACTIVE_RINGS,
    ):
        """
        Args:
            spots: Observation points (static geometry)
            config: Simulation config (defaults if None)
            scenarios: Scenario presets available to load_scenario()
            max_rings: Active ring ceiling
        """
        self.config: SimConfig = config if config is not None else SimConfig()
        self.clock = SimClock()
        self.spots: List[Spot] = list(spots) if spots else []
        self.scenarios: Dict[str, Scenario] = dict(scenarios) if scenarios else {}
        self.active_scenario_id: Optional[str] = None
        self.max_rings = max_rings

        # Simulation state
        self.storms: List[Storm] = []
        self.rings: List[Ring] = []
        self.energy_cache = EnergyCache()
        self.tick_count: int = 0
        self.rings_evicted: int = 0

        # storm_id -> next emission sequence; never reset, keeps ring ids unique
        self._emission_seq: Dict[str, int] = {}
        self._storm_counter: int = 1

        # Performance metrics
        self._tick_times: List[float] = []
        self._tick_time_sum: float = 0.0
        self._tick_time_window: int = TICK_TIME_WINDOW

    @classmethod
    def from_data_pack(
        cls,
        data_root: Optional[Path] = None,
        config_path: Optional[Path] = None,
    ) -> 'SwellSimulation':
        """
        Build simulation from YAML data pack.

        Args:
            data_root: Data directory (bundled data if None)
            config_path: Optional settings file overriding the pack's sim_config.yaml
        """
        print("Loading data pack...")
        data = load_all_data(data_root)
        config = data['config']
        if config_path is not None:
            config = load_sim_config(config_path)

        sim = cls(spots=data['spots'], config=config, scenarios=data['scenarios'])
        print(f"[OK] Simulation initialized: {len(sim.spots)} spots, "
              f"{len(sim.scenarios)} scenarios")
        return sim

    # ------------------------------------------------------------------
    # Storm management
    # ------------------------------------------------------------------

    def _next_storm_name(self) -> str:
        name = f"Storm {self._storm_counter}"
        self._storm_counter += 1
        return name

    def _unique_storm_id(self) -> str:
        existing = {s.storm_id for s in self.storms}
        index = len(self.storms) + 1
        while f"storm-{index:04d}" in existing or f"storm-{index:04d}" in self._emission_seq:
            index += 1
        return f"storm-{index:04d}"

    def get_storm(self, storm_id: str) -> Optional[Storm]:
        for storm in self.storms:
            if storm.storm_id == storm_id:
                return storm
        return None

    def add_storm_at(self, x: float, y: float, **fields) -> Storm:
        """Place a custom storm (defaults for unspecified fields)"""
        storm = storm_from_dict(
            dict(fields, x=x, y=y, type='custom'),
            storm_id=self._unique_storm_id(),
            fallback_name=self._next_storm_name(),
        )
        self.storms.append(storm)
        return storm

    def update_storm(self, storm_id: str, updates: dict) -> Optional[Storm]:
        storm = self.get_storm(storm_id)
        if storm is None:
            return None
        return update_storm(storm, updates)

    def remove_storm(self, storm_id: str) -> bool:
        """
        Delete a storm. Rings it already emitted keep propagating.

        Returns:
            True if a storm was removed
        """
        before = len(self.storms)
        self.storms = [s for s in self.storms if s.storm_id != storm_id]
        return len(self.storms) < before

    def replace_storms(self, storm_dicts: List[dict]):
        """Swap in a new storm set (scenario load)"""
        self.storms = []
        self._storm_counter = 1
        for data in storm_dicts:
            self.storms.append(storm_from_dict(
                data,
                storm_id=self._unique_storm_id(),
                fallback_name=self._next_storm_name(),
            ))

    # ------------------------------------------------------------------
    # Scenario & clock control
    # ------------------------------------------------------------------

    def load_scenario(self, scenario_id: str) -> Optional[Scenario]:
        """
        Load a preset: replace storms, clear rings, set clock, pause.

        Returns:
            The scenario, or None (nothing changed) if the id is unknown
        """
        scenario = self.scenarios.get(scenario_id)
        if scenario is None:
            return None

        self.replace_storms(scenario.storms)
        self._clear_rings()
        self.clock.set_hours(scenario.initial_time_hours)
        self.clock.pause()
        self.active_scenario_id = scenario.scenario_id
        return scenario

    def reset(self):
        """Rewind clock to 0 and clear rings; storms stay in place"""
        self.clock.reset()
        self._clear_rings()
        for storm in self.storms:
            storm.last_emission = None

    def set_clock_hours(self, hours: float) -> bool:
        """
        Jump the clock. Moving backwards clears emission bookkeeping.

        Returns:
            False (clock unchanged) if hours is non-finite
        """
        previous = self.clock.hours
        if not self.clock.set_hours(hours):
            return False
        if self.clock.hours < previous:
            for storm in self.storms:
                storm.last_emission = None
        return True

    def _clear_rings(self):
        self.rings = []
        self.energy_cache.invalidate()

    # ------------------------------------------------------------------
    # Tick loop
    # ------------------------------------------------------------------

    def tick(self, delta_ms: float, canvas_size: CanvasSize = DEFAULT_CANVAS) -> float:
        """
        Advance by one frame of wall-clock time.

        Wall time is converted to simulated hours using the configured base
        acceleration and the clock multiplier, capped at MAX_DELTA_HOURS.
        Nothing happens while the clock is paused.

        Returns:
            Simulated hours applied
        """
        if not self.clock.playing:
            return 0.0
        accel = self.config.base_time_acceleration * self.clock.multiplier
        delta_hours = compute_clamped_delta_hours(delta_ms, accel)
        self.step_hours(delta_hours, canvas_size)
        return delta_hours

    def step_hours(self, delta_hours: float, canvas_size: CanvasSize = DEFAULT_CANVAS):
        """
        Advance simulation by delta_hours of simulated time.

        TICK ORDERING (Critical Invariant):
        1. Clamp dt to [0, MAX_DELTA_HOURS] and advance the clock
        2. Move storms
        3. Advance and cull existing rings, then emit new rings at the
           post-move storm positions
        4. Invalidate the energy cache, enforce the ring ceiling
        5. Sample every spot against the current ring set

        Spots therefore always see rings and storms from the same tick.
        Runs regardless of the clock's play state.
        """
        start_time = time.perf_counter()

        # 1. Time step
        dt = clamp_step_hours(delta_hours)
        self.clock.advance(dt, force=True)
        now = self.clock.hours

        # 2. Storm kinematics
        for storm in self.storms:
            advance_storm(storm, dt)

        # 3. Ring propagation & emission
        min_energy = self.config.ring_min_active_energy
        for ring in self.rings:
            advance_ring(ring, dt, min_energy)
        self.rings = [r for r in self.rings if r.active]

        for storm in self.storms:
            if should_emit_ring(storm, now, storm.last_emission):
                sequence = self._emission_seq.get(storm.storm_id, 0)
                self._emission_seq[storm.storm_id] = sequence + 1
                storm.last_emission = now
                self.rings.append(create_ring(storm, now, self.config, sequence))

        # 4. Energy cache & capacity ceiling
        self.energy_cache.invalidate()
        if len(self.rings) > self.max_rings:
            kept = trim_rings(self.rings, self.energy_cache.get, self.max_rings)
            kept_ids = {r.ring_id for r in kept}
            evicted = [r.ring_id for r in self.rings if r.ring_id not in kept_ids]
            self.energy_cache.discard(evicted)
            self.rings_evicted += len(evicted)
            self.rings = kept

        # 5. Spot sampling
        self._update_spots(canvas_size)

        self.tick_count += 1
        self._record_tick_time(time.perf_counter() - start_time)

        if os.getenv('SIM_DEBUG_INVARIANTS') == '1':
            assert len(self.rings) <= self.max_rings, \
                f"ring count {len(self.rings)} exceeds ceiling {self.max_rings}"
            assert all(r.active and r.radius_km >= 0.0 for r in self.rings), \
                "inactive or negative-radius ring survived culling"

    def _update_spots(self, canvas_size: CanvasSize):
        """Sample each spot and write back energy, smoothing, quality and attribution"""
        names = {s.storm_id: s.name for s in self.storms}
        alpha = self.config.spot_energy_smoothing_alpha

        for spot in self.spots:
            debug = SampleDebugInfo()
            energy = sample_spot_energy(
                spot, self.rings, canvas_size, self.config,
                cache=self.energy_cache, debug_info=debug,
            )
            spot.current_energy = energy
            spot.smoothed_energy = apply_ema(spot.smoothed_energy, energy, alpha)
            spot.quality = classify_height(energy)
            if debug.top_storm_id is not None:
                # Orphaned rings fall back to their storm id
                spot.top_contributor = names.get(debug.top_storm_id, debug.top_storm_id)
            else:
                spot.top_contributor = None

    # ------------------------------------------------------------------
    # Stats & snapshots
    # ------------------------------------------------------------------

    def get_tick_stats(self) -> dict:
        """
        Get current tick timing statistics.

        Returns:
            Dict with tick_count, avg_tick_time_ms, last_tick_time_ms
        """
        if not self._tick_times:
            return {
                'tick_count': self.tick_count,
                'avg_tick_time_ms': 0.0,
                'last_tick_time_ms': 0.0
            }

        avg_time = self._tick_time_sum / len(self._tick_times)
        last_time = self._tick_times[-1]

        return {
            'tick_count': self.tick_count,
            'avg_tick_time_ms': avg_time * 1000.0,
            'last_tick_time_ms': last_time * 1000.0
        }

    def _record_tick_time(self, elapsed: float):
        self._tick_times.append(elapsed)
        self._tick_time_sum += elapsed

        # Maintain rolling window
        if len(self._tick_times) > self._tick_time_window:
            removed = self._tick_times.pop(0)
            self._tick_time_sum -= removed

    def get_snapshot(self) -> dict:
        """
        Get complete simulation state snapshot.

        Returns:
            JSON-compatible dict with clock, storms, rings, spots, cache and timing
        """
        return {
            'tick_count': self.tick_count,
            'clock': self.clock.to_dict(),
            'active_scenario_id': self.active_scenario_id,
            'storms': [s.to_dict() for s in self.storms],
            'rings': [r.to_dict() for r in self.rings],
            'spots': [s.to_dict() for s in self.spots],
            'rings_evicted': self.rings_evicted,
            'cache': self.energy_cache.stats(),
            'timing': self.get_tick_stats()
        }

    def print_tick_summary(self):
        """Print tick summary to console (lightweight monitoring)"""
        stats = self.get_tick_stats()
        cache = self.energy_cache.stats()
        print(f"Tick {stats['tick_count']:5d} | "
              f"T+{self.clock.hours:7.1f} h | "
              f"Avg: {stats['avg_tick_time_ms']:6.3f} ms | "
              f"Last: {stats['last_tick_time_ms']:6.3f} ms | "
              f"Rings: {len(self.rings)} | "
              f"Cache hit: {cache['hit_rate']:.0%}")
