# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for force models and the RK4 integrator."""
import logging
import math
from datetime import datetime, timedelta, timezone

import numpy as np
import pytest

from orbitwright.domain import numerical_propagation
from orbitwright.domain.errors import ValidationError
from orbitwright.domain.numerical_propagation import (
    MAX_STEPS,
    P_SRP,
    AtmosphericDragForce,
    ForceModel,
    J2Perturbation,
    SolarRadiationPressureForce,
    TrajectorySample,
    TwoBodyGravity,
    ZonalHarmonics,
    effective_step,
    propagate_numerical,
    rk4_step,
)
from orbitwright.domain.orbital_mechanics import OrbitalConstants
from orbitwright.domain.solar import sun_position_eci

EPOCH = datetime(2026, 3, 20, 12, 0, 0, tzinfo=timezone.utc)
MU = OrbitalConstants.MU_EARTH
R_EQ = OrbitalConstants.R_EARTH_EQUATORIAL
R_LEO = R_EQ + 500e3
V_LEO = math.sqrt(MU / R_LEO)


def _norm(v) -> float:
    return float(np.linalg.norm(v))


# ── Force models ─────────────────────────────────────────────────────

class TestTwoBodyGravity:

    def test_inverse_square(self):
        ax, ay, az = TwoBodyGravity().acceleration(EPOCH, (R_LEO, 0.0, 0.0), (0.0, V_LEO, 0.0))
        assert ax == pytest.approx(-MU / R_LEO**2)
        assert ay == 0.0 and az == 0.0

    def test_protocol(self):
        for model in (TwoBodyGravity(), J2Perturbation(), ZonalHarmonics(),
                      AtmosphericDragForce(0.01), SolarRadiationPressureForce(1.2, 0.03, 4.0)):
            assert isinstance(model, ForceModel)


class TestJ2Perturbation:

    def test_equatorial_extra_pull(self):
        ax, ay, az = J2Perturbation().acceleration(EPOCH, (R_LEO, 0.0, 0.0), (0.0, V_LEO, 0.0))
        expected = -1.5 * OrbitalConstants.J2_EARTH * MU * R_EQ**2 / R_LEO**4
        assert ax == pytest.approx(expected)
        assert az == 0.0

    def test_polar_push_outward_along_axis(self):
        _, _, az = J2Perturbation().acceleration(EPOCH, (0.0, 0.0, R_LEO), (V_LEO, 0.0, 0.0))
        assert az > 0

    def test_magnitude_relative_to_central(self):
        j2 = _norm(J2Perturbation().acceleration(EPOCH, (R_LEO, 0.0, 0.0), (0.0, V_LEO, 0.0)))
        assert 1e-4 < j2 / (MU / R_LEO**2) < 1e-2


class TestZonalHarmonics:

    def test_unsupported_degree(self):
        with pytest.raises(ValueError):
            ZonalHarmonics(degrees=(2,))

    def test_j3_equatorial_is_axial(self):
        ax, ay, az = ZonalHarmonics(degrees=(3,)).acceleration(
            EPOCH, (R_LEO, 0.0, 0.0), (0.0, V_LEO, 0.0),
        )
        assert abs(ax) < 1e-15 and abs(ay) < 1e-15
        expected = 1.5 * MU * OrbitalConstants.J3_EARTH * R_EQ**3 / R_LEO**5
        assert az == pytest.approx(expected)

    def test_much_smaller_than_j2(self):
        pos = (R_LEO * 0.6, 0.0, R_LEO * 0.8)
        hi = _norm(ZonalHarmonics().acceleration(EPOCH, pos, (0.0, V_LEO, 0.0)))
        j2 = _norm(J2Perturbation().acceleration(EPOCH, pos, (0.0, V_LEO, 0.0)))
        assert 0 < hi < 0.05 * j2


class TestAtmosphericDrag:

    def test_opposes_relative_velocity(self):
        pos = (R_EQ + 400e3, 0.0, 0.0)
        vel = (0.0, 7670.0, 0.0)
        a = AtmosphericDragForce(0.0165).acceleration(EPOCH, pos, vel)
        omega = OrbitalConstants.EARTH_ROTATION_RATE
        v_rel = (vel[0] + omega * pos[1], vel[1] - omega * pos[0], vel[2])
        assert float(np.dot(a, v_rel)) < 0
        assert _norm(np.cross(a, v_rel)) == pytest.approx(0.0, abs=1e-12)

    def test_zero_above_density_ceiling(self):
        drag = AtmosphericDragForce(0.0165)
        assert drag.acceleration(EPOCH, (R_EQ + 3000e3, 0.0, 0.0), (0.0, 6000.0, 0.0)) == (0.0, 0.0, 0.0)

    def test_held_at_floor_density_below_100_km(self):
        drag = AtmosphericDragForce(0.0165)
        vel = (0.0, 7800.0, 0.0)
        below = _norm(drag.acceleration(EPOCH, (R_EQ + 80e3, 0.0, 0.0), vel))
        at_floor = _norm(drag.acceleration(EPOCH, (R_EQ + 100e3, 0.0, 0.0), vel))
        assert below > 0.0
        # same density, slightly lower co-rotation speed at the smaller radius
        assert below == pytest.approx(at_floor, rel=1e-2)

    def test_scales_with_ballistic_coefficient(self):
        pos, vel = (R_EQ + 400e3, 0.0, 0.0), (0.0, 7670.0, 0.0)
        a1 = _norm(AtmosphericDragForce(0.01).acceleration(EPOCH, pos, vel))
        a2 = _norm(AtmosphericDragForce(0.02).acceleration(EPOCH, pos, vel))
        assert a2 == pytest.approx(2 * a1)


class TestSolarRadiationPressure:

    def _sun_hat(self):
        sun = np.array(sun_position_eci(EPOCH).position_eci_m)
        return sun / np.linalg.norm(sun)

    def test_sunlit_magnitude(self):
        pos = tuple(float(c) for c in self._sun_hat() * R_LEO)
        a = SolarRadiationPressureForce(1.2, 0.03, 4.0).acceleration(EPOCH, pos, (0.0, 0.0, 0.0))
        assert _norm(a) == pytest.approx(1.2 * P_SRP * 0.03 / 4.0, rel=0.05)

    def test_points_away_from_sun(self):
        pos = tuple(float(c) for c in self._sun_hat() * R_LEO)
        a = SolarRadiationPressureForce(1.2, 0.03, 4.0).acceleration(EPOCH, pos, (0.0, 0.0, 0.0))
        assert float(np.dot(a, self._sun_hat())) < 0

    def test_zero_in_earth_shadow(self):
        pos = tuple(float(c) for c in -self._sun_hat() * R_LEO)
        a = SolarRadiationPressureForce(1.2, 0.03, 4.0).acceleration(EPOCH, pos, (0.0, 0.0, 0.0))
        assert a == (0.0, 0.0, 0.0)


# ── Integrator ───────────────────────────────────────────────────────

class TestRk4Step:

    def test_exponential_growth(self):
        t, state = rk4_step(0.0, (1.0,), 0.1, lambda t, y: (y[0],))
        assert t == pytest.approx(0.1)
        assert state[0] == pytest.approx(math.exp(0.1), abs=1e-6)

    def test_returns_floats(self):
        _, state = rk4_step(0.0, (1.0, 2.0), 1.0, lambda t, y: (0.0, 0.0))
        assert all(type(x) is float for x in state)


class TestEffectiveStep:

    def test_requested_step_kept(self):
        assert effective_step(6000.0, 30.0) == 30.0

    def test_widened_beyond_cap(self):
        duration = 10.0 * MAX_STEPS
        assert effective_step(duration, 1.0) == pytest.approx(10.0)


class TestPropagateNumerical:

    def _circular(self):
        return (R_LEO, 0.0, 0.0), (0.0, V_LEO, 0.0)

    def test_samples_and_final_time(self):
        pos, vel = self._circular()
        samples = propagate_numerical(pos, vel, EPOCH, 95.0, 30.0, [TwoBodyGravity()])
        assert isinstance(samples[0], TrajectorySample)
        assert [s.offset_s for s in samples] == [0.0, 30.0, 60.0, 90.0, 95.0]
        assert samples[-1].time == EPOCH + timedelta(seconds=95.0)

    def test_first_sample_is_initial_state(self):
        pos, vel = self._circular()
        samples = propagate_numerical(pos, vel, EPOCH, 60.0, 30.0, [TwoBodyGravity()])
        assert samples[0].position_eci == pos
        assert samples[0].velocity_eci == vel

    def test_energy_conserved_two_body(self):
        pos, vel = self._circular()
        period = 2 * math.pi * math.sqrt(R_LEO**3 / MU)
        samples = propagate_numerical(pos, vel, EPOCH, period, 10.0, [TwoBodyGravity()])

        def energy(s):
            return 0.5 * _norm(s.velocity_eci) ** 2 - MU / _norm(s.position_eci)

        assert energy(samples[-1]) == pytest.approx(energy(samples[0]), rel=1e-6)
        assert math.dist(samples[-1].position_eci, pos) < 10.0

    @pytest.mark.parametrize("duration,step", [(0.0, 30.0), (-10.0, 30.0), (100.0, 0.0), (math.inf, 30.0)])
    def test_invalid_span(self, duration, step):
        pos, vel = self._circular()
        with pytest.raises(ValidationError):
            propagate_numerical(pos, vel, EPOCH, duration, step, [TwoBodyGravity()])

    def test_step_widening_logged(self, monkeypatch, caplog):
        monkeypatch.setattr(numerical_propagation, "MAX_STEPS", 10)
        pos, vel = self._circular()
        with caplog.at_level(logging.INFO, logger="orbitwright.domain.numerical_propagation"):
            samples = propagate_numerical(pos, vel, EPOCH, 600.0, 1.0, [TwoBodyGravity()])
        assert len(samples) == 11
        assert "Step widened" in caplog.text

    def test_deterministic(self):
        pos, vel = self._circular()
        models = [TwoBodyGravity(), J2Perturbation(), AtmosphericDragForce(0.02)]
        a = propagate_numerical(pos, vel, EPOCH, 600.0, 20.0, models)
        b = propagate_numerical(pos, vel, EPOCH, 600.0, 20.0, models)
        assert a == b
