import math

import numpy as np

from swellcast.angles import (
    angular_difference,
    bearing_from_north,
    directional_falloff,
    directional_weight,
    normalize_degrees,
)


def test_normalize_degrees_wraps_into_range():
    assert normalize_degrees(-10.0) == 350.0
    assert normalize_degrees(720.0) == 0.0
    assert normalize_degrees(370.0) == 10.0
    assert normalize_degrees(float('nan')) == 0.0


def test_angular_difference_is_minimal():
    assert np.isclose(angular_difference(350.0, 10.0), 20.0)
    assert np.isclose(angular_difference(0.0, 180.0), 180.0)
    assert np.isclose(angular_difference(90.0, -90.0), 180.0)


def test_directional_weight_inside_window():
    assert directional_weight(310.0, 300.0, 320.0) == 1.0
    assert directional_weight(301.0, 300.0, 320.0) == 1.0
    assert directional_weight(319.5, 300.0, 320.0) == 1.0


def test_directional_weight_zero_beyond_falloff_band():
    # centre 310, half-width 10 -> zero past 55 degrees from centre
    assert directional_weight(30.0, 300.0, 320.0) == 0.0
    assert directional_weight(310.0 + 55.0, 300.0, 320.0) == 0.0
    assert directional_weight(310.0 - 70.0, 300.0, 320.0) == 0.0


def test_directional_weight_linear_shoulder():
    # 22.5 degrees past the window edge is halfway down the 45 degree shoulder
    assert np.isclose(directional_weight(342.5, 300.0, 320.0), 0.5)
    assert np.isclose(directional_weight(277.5, 300.0, 320.0), 0.5)


def test_directional_weight_wrapping_window():
    assert directional_weight(0.0, 350.0, 10.0) == 1.0
    assert directional_weight(355.0, 350.0, 10.0) == 1.0
    assert directional_weight(180.0, 350.0, 10.0) == 0.0
    assert np.isclose(directional_weight(20.0, 350.0, 10.0), 1.0 - 10.0 / 45.0)


def test_directional_falloff_peaks_at_heading():
    assert directional_falloff(45.0, 45.0, 60.0) == 1.0


def test_directional_falloff_gaussian_shape():
    # sigma = 60 / sqrt(2) -> 2 * sigma^2 = 3600
    assert np.isclose(directional_falloff(90.0, 0.0, 60.0), math.exp(-8100.0 / 3600.0))
    # circular: 350 vs 10 is a 20 degree offset
    assert np.isclose(directional_falloff(350.0, 10.0, 60.0), math.exp(-400.0 / 3600.0))


def test_directional_falloff_never_reaches_zero():
    weight = directional_falloff(180.0, 0.0, 60.0)
    assert 0.0 < weight < 1e-3


def test_directional_falloff_half_width_floor():
    # half-width below 5 degrees uses 5 -> 2 * sigma^2 = 25
    assert np.isclose(directional_falloff(10.0, 0.0, 1.0), math.exp(-4.0))


def test_bearing_from_north_compass_points():
    assert np.isclose(bearing_from_north(0.0, -1.0), 0.0)
    assert np.isclose(bearing_from_north(1.0, 0.0), 90.0)
    assert np.isclose(bearing_from_north(0.0, 1.0), 180.0)
    assert np.isclose(bearing_from_north(-1.0, 0.0), 270.0)
    assert np.isclose(bearing_from_north(1.0, -1.0), 45.0)
