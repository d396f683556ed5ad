# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for the cylindrical shadow model."""
import pytest

from orbitwright.domain.eclipse import (
    eclipse_fraction,
    in_cylindrical_shadow,
    orbit_position_sunlit,
)
from orbitwright.domain.errors import ValidationError

SUN_X = (1.0, 0.0, 0.0)


class TestCylindricalShadow:

    def test_behind_earth(self):
        assert in_cylindrical_shadow((-7.0e6, 0.0, 0.0), SUN_X)

    def test_sun_side(self):
        assert not in_cylindrical_shadow((7.0e6, 0.0, 0.0), SUN_X)

    def test_outside_cylinder(self):
        assert not in_cylindrical_shadow((-7.0e6, 7.0e6, 0.0), SUN_X)

    def test_custom_radius(self):
        assert in_cylindrical_shadow((-2.0, 0.5, 0.0), SUN_X, radius=1.0)
        assert not in_cylindrical_shadow((-2.0, 1.5, 0.0), SUN_X, radius=1.0)


class TestEclipseFraction:

    def test_leo_zero_beta(self):
        assert eclipse_fraction(500.0) == pytest.approx(0.378, abs=0.002)

    def test_decreases_with_beta(self):
        fractions = [eclipse_fraction(500.0, beta) for beta in (0, 20, 40, 60)]
        assert fractions == sorted(fractions, reverse=True)

    def test_no_eclipse_beyond_critical_beta(self):
        assert eclipse_fraction(500.0, 70.0) == 0.0
        assert eclipse_fraction(500.0, -70.0) == 0.0

    def test_decreases_with_altitude(self):
        assert eclipse_fraction(35786.0) < eclipse_fraction(2000.0) < eclipse_fraction(400.0)

    def test_bounded(self):
        for alt in (200.0, 800.0, 20200.0):
            assert 0.0 <= eclipse_fraction(alt) < 0.5

    def test_rejects_altitude(self):
        with pytest.raises(ValidationError):
            eclipse_fraction(0.0)


class TestOrbitPositionSunlit:

    def test_mid_eclipse(self):
        assert not orbit_position_sunlit(180.0, 0.35)
        assert orbit_position_sunlit(0.0, 0.35)

    def test_arc_half_width(self):
        # f = 0.35 shades 63° either side of the centre
        assert not orbit_position_sunlit(120.0, 0.35)
        assert orbit_position_sunlit(110.0, 0.35)

    def test_zero_fraction_always_sunlit(self):
        assert all(orbit_position_sunlit(float(p), 0.0) for p in range(0, 360, 10))

    def test_custom_centre(self):
        assert not orbit_position_sunlit(0.0, 0.3, centre_deg=0.0)
        assert orbit_position_sunlit(180.0, 0.3, centre_deg=0.0)
