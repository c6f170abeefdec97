"""
Headless forecast runner.

Loads the bundled data pack, plays a scenario for a number of simulated
hours and prints tick summaries plus a final spot table.

Usage:
    python scripts/run_forecast.py --scenario historic-major --hours 72
"""

import argparse
import sys
import time

from swellcast.constants import TICK_SUMMARY_INTERVAL
from swellcast.simulation import SwellSimulation


def run_forecast(scenario_id: str, hours: float, step_hours: float, summary_every: int) -> SwellSimulation:
    """
    Run a scenario headlessly.

    Args:
        scenario_id: Scenario to load
        hours: Simulated hours to run
        step_hours: Simulated hours per tick
        summary_every: Print tick summary every N ticks (0 = never)

    Returns:
        Simulation after the run
    """
    sim = SwellSimulation.from_data_pack()
    if sim.load_scenario(scenario_id) is None:
        raise SystemExit(f"Unknown scenario '{scenario_id}'. "
                         f"Available: {', '.join(sim.scenarios)}")

    sim.clock.play()
    end_hours = sim.clock.hours + hours
    start = time.perf_counter()

    while sim.clock.hours < end_hours:
        sim.step_hours(min(step_hours, end_hours - sim.clock.hours))
        if summary_every and sim.tick_count % summary_every == 0:
            sim.print_tick_summary()

    elapsed = time.perf_counter() - start
    print(f"\n[OK] {sim.tick_count} ticks in {elapsed:.2f}s "
          f"({len(sim.rings)} active rings, {sim.rings_evicted} evicted)")
    return sim


def print_spot_table(sim: SwellSimulation):
    print(f"\n{'Spot':<12} {'Window':<12} {'Energy':>7} {'Smoothed':>9}  {'Quality':<6} Top storm")
    print("-" * 70)
    for spot in sim.spots:
        print(f"{spot.name:<12} {spot.preferred_direction:<12} "
              f"{spot.current_energy:7.2f} {spot.smoothed_energy:9.2f}  "
              f"{spot.quality.value:<6} {spot.top_contributor or '--'}")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Run a headless swell forecast")
    parser.add_argument('--scenario', default='historic-major', help='Scenario id')
    parser.add_argument('--hours', type=float, default=72.0, help='Simulated hours to run')
    parser.add_argument('--step-hours', type=float, default=0.5, help='Simulated hours per tick')
    parser.add_argument('--summary-every', type=int, default=TICK_SUMMARY_INTERVAL,
                        help='Print tick summary every N ticks (0 = never)')
    args = parser.parse_args(argv)

    if args.step_hours <= 0:
        parser.error("--step-hours must be positive")

    sim = run_forecast(args.scenario, args.hours, args.step_hours, args.summary_every)
    print_spot_table(sim)
    return 0


if __name__ == '__main__':
    sys.exit(main())
