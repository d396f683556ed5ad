# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for orbit lifetime, deorbit Δv and disposal compliance."""
import pytest

from orbitwright.domain.atmosphere import SolarActivity
from orbitwright.domain.errors import ValidationError
from orbitwright.domain.lifetime import (
    LIFETIME_CAP_YEARS,
    ComplianceResult,
    LifetimeEstimate,
    check_compliance,
    compute_ballistic_coefficient,
    compute_deorbit_delta_v,
    estimate_lifetime,
    max_compliant_altitude_km,
)

BC_3U = 2.2 * 0.03 / 4.0


class TestBallisticCoefficient:

    def test_formula(self):
        assert compute_ballistic_coefficient(4.0, 0.03) == pytest.approx(BC_3U)
        assert compute_ballistic_coefficient(4.0, 0.03, 2.0) == pytest.approx(0.015)

    @pytest.mark.parametrize("mass,area,cd", [(0.0, 0.03, 2.2), (4.0, -0.03, 2.2), (4.0, 0.03, 0.0)])
    def test_rejects(self, mass, area, cd):
        with pytest.raises(ValidationError):
            compute_ballistic_coefficient(mass, area, cd)

    @pytest.mark.parametrize("field,values,increasing", [
        ("drag_coefficient", [1.8, 2.0, 2.2, 2.6], True),
        ("cross_section_m2", [0.01, 0.03, 0.06, 0.1], True),
        ("mass_kg", [1.0, 4.0, 12.0, 50.0], False),
    ])
    def test_monotonic_in_each_input(self, field, values, increasing):
        base = {"mass_kg": 4.0, "cross_section_m2": 0.03, "drag_coefficient": 2.2}
        bcs = [compute_ballistic_coefficient(**{**base, field: v}) for v in values]
        pairs = list(zip(bcs, bcs[1:]))
        if increasing:
            assert all(a < b for a, b in pairs)
        else:
            assert all(a > b for a, b in pairs)


class TestEstimateLifetime:

    def test_low_orbit_decays_within_a_year(self):
        est = estimate_lifetime(300.0, BC_3U)
        assert isinstance(est, LifetimeEstimate)
        assert 0.0 < est.years < 1.0
        assert not est.exceeds_threshold
        assert est.days == pytest.approx(est.years * 365.25)

    def test_mid_leo_several_years(self):
        est = estimate_lifetime(550.0, BC_3U)
        assert 5.0 < est.years < 25.0

    def test_grows_with_altitude(self):
        years = [estimate_lifetime(h, BC_3U).years for h in (250.0, 350.0, 450.0, 550.0)]
        assert years == sorted(years)

    def test_solar_activity_shortens_life(self):
        low = estimate_lifetime(450.0, BC_3U, SolarActivity.LOW).years
        high = estimate_lifetime(450.0, BC_3U, SolarActivity.HIGH).years
        assert high < low

    def test_denser_satellite_lives_longer(self):
        assert estimate_lifetime(400.0, BC_3U / 2).years == pytest.approx(
            2 * estimate_lifetime(400.0, BC_3U).years, rel=1e-9,
        )

    def test_capped_at_sentinel(self):
        est = estimate_lifetime(1000.0, BC_3U)
        assert est.exceeds_threshold
        assert est.years == LIFETIME_CAP_YEARS

    def test_above_density_model(self):
        est = estimate_lifetime(20200.0, BC_3U)
        assert est.exceeds_threshold

    def test_at_reentry_altitude(self):
        est = estimate_lifetime(100.0, BC_3U)
        assert est == LifetimeEstimate(0.0, 0.0, False)

    @pytest.mark.parametrize("altitude,bc", [(0.0, BC_3U), (-5.0, BC_3U), (400.0, 0.0)])
    def test_rejects(self, altitude, bc):
        with pytest.raises(ValidationError):
            estimate_lifetime(altitude, bc)


class TestDeorbitDeltaV:

    def test_leo(self):
        assert compute_deorbit_delta_v(500.0) == pytest.approx(120.8, abs=0.5)

    def test_grows_with_altitude(self):
        assert compute_deorbit_delta_v(800.0) > compute_deorbit_delta_v(500.0)

    def test_already_low(self):
        assert compute_deorbit_delta_v(80.0) == 0.0
        assert compute_deorbit_delta_v(60.0) == 0.0

    def test_rejects_altitude(self):
        with pytest.raises(ValidationError):
            compute_deorbit_delta_v(0.0)


class TestMaxCompliantAltitude:

    def test_within_threshold(self):
        alt = max_compliant_altitude_km(BC_3U, 5.0)
        assert 300.0 < alt < 550.0
        assert estimate_lifetime(alt, BC_3U).years <= 5.0

    def test_longer_threshold_allows_higher_orbit(self):
        assert max_compliant_altitude_km(BC_3U, 25.0) > max_compliant_altitude_km(BC_3U, 5.0)


class TestCompliance:

    def test_compliant(self):
        result = check_compliance(300.0, BC_3U)
        assert isinstance(result, ComplianceResult)
        assert result.lifetime_25_year and result.lifetime_5_year
        assert result.recommendation.startswith("Compliant")

    def test_fails_only_short_horizon(self):
        result = check_compliance(550.0, BC_3U)
        assert result.lifetime_25_year
        assert not result.lifetime_5_year
        assert result.recommendation.startswith("Fails the 5-year rule")
        assert "deorbit device" in result.recommendation
        assert f"{result.deorbit_delta_v_ms:.1f} m/s" in result.recommendation

    def test_capped_fails_both(self):
        result = check_compliance(1000.0, BC_3U)
        assert result.exceeds_threshold
        assert not result.lifetime_25_year
        assert not result.lifetime_5_year
        assert "exceeds 100 years" in result.recommendation
        assert "to meet 25 years" in result.recommendation.lower()
        assert "at least" in result.recommendation

    def test_carries_inputs(self):
        result = check_compliance(400.0, BC_3U, SolarActivity.HIGH)
        assert result.ballistic_coefficient == BC_3U
        assert result.solar_activity is SolarActivity.HIGH
        assert result.deorbit_delta_v_ms == pytest.approx(compute_deorbit_delta_v(400.0))

    def test_repeated_calls_identical(self):
        assert check_compliance(550.0, BC_3U, SolarActivity.LOW) == check_compliance(
            550.0, BC_3U, SolarActivity.LOW,
        )
