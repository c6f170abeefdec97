"""
Swellcast Forecast Simulation

A deterministic, headless swell propagation simulator. Storms emit expanding
swell rings across a normalized ocean map; coastal spots sample the rings
that reach them and report a smoothed energy and a surf quality label.

Architecture: the simulation is the source of truth. Rendering and UI are consumers.
"""

__version__ = "0.1.0"
