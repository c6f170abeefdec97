"""
Simulated clock.

Hours advance only while playing; the multiplier speeds up or slows down
simulated time relative to the configured base acceleration. Non-finite
inputs are ignored and the last good value is kept.
"""

import math
from dataclasses import dataclass

from .constants import MIN_CLOCK_MULTIPLIER


def _finite(value) -> bool:
    try:
        return math.isfinite(value)
    except TypeError:
        return False


@dataclass
class SimClock:
    """Scenario clock in simulated hours"""
    hours: float = 0.0
    playing: bool = False
    multiplier: float = 1.0

    def set_multiplier(self, value: float) -> bool:
        if not _finite(value):
            return False
        self.multiplier = max(MIN_CLOCK_MULTIPLIER, float(value))
        return True

    def play(self):
        self.playing = True

    def pause(self):
        self.playing = False

    def toggle_play(self) -> bool:
        self.playing = not self.playing
        return self.playing

    def reset(self):
        self.hours = 0.0
        self.playing = False

    def set_hours(self, hours: float) -> bool:
        """Jump to an absolute hour; returns False (unchanged) if non-finite"""
        if not _finite(hours):
            return False
        self.hours = float(hours)
        return True

    def advance(self, delta_hours: float, force: bool = False):
        """
        Add already-scaled simulated hours.

        No-op while paused unless force is set (the simulation's explicit
        step), and for negative or non-finite deltas.
        """
        if not (self.playing or force):
            return
        if not _finite(delta_hours) or delta_hours <= 0.0:
            return
        self.hours += float(delta_hours)

    def to_dict(self) -> dict:
        return {
            'hours': float(self.hours),
            'playing': self.playing,
            'multiplier': float(self.multiplier),
        }
