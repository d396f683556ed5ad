# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Numerical orbit propagation with RK4 and pluggable force models.

Fixed-step 4th-order Runge-Kutta integrator over a sum of force models.
The step policy depends only on the inputs: the requested step is used
unless the span would need more than ``MAX_STEPS`` steps, in which case
the step widens to span / MAX_STEPS.
"""
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Protocol, Sequence, runtime_checkable

import numpy as np

from orbitwright.domain.atmosphere import (
    DENSITY_CEILING_KM,
    REENTRY_ALTITUDE_KM,
    SolarActivity,
    atmospheric_density,
)
from orbitwright.domain.eclipse import in_cylindrical_shadow
from orbitwright.domain.errors import ValidationError
from orbitwright.domain.orbital_mechanics import OrbitalConstants
from orbitwright.domain.solar import AU_METERS, sun_position_eci

logger = logging.getLogger(__name__)

MAX_STEPS = 50_000

# N/m², solar radiation pressure at 1 AU
P_SRP = 4.56e-6

_ZONAL_COEFFS = {
    3: OrbitalConstants.J3_EARTH,
    4: OrbitalConstants.J4_EARTH,
    5: OrbitalConstants.J5_EARTH,
    6: OrbitalConstants.J6_EARTH,
}


# --- Types ---

@runtime_checkable
class ForceModel(Protocol):
    """Structural typing port for pluggable force models."""

    def acceleration(
        self,
        epoch: datetime,
        position: tuple[float, float, float],
        velocity: tuple[float, float, float],
    ) -> tuple[float, float, float]: ...


@dataclass(frozen=True)
class TrajectorySample:
    """Single state sample of a trajectory."""
    time: datetime
    offset_s: float
    position_eci: tuple[float, float, float]
    velocity_eci: tuple[float, float, float]


# --- Force models ---

class TwoBodyGravity:
    """Central body gravitational acceleration: a = -mu * r / |r|^3."""

    def acceleration(
        self,
        epoch: datetime,
        position: tuple[float, float, float],
        velocity: tuple[float, float, float],
    ) -> tuple[float, float, float]:
        pos = np.array(position)
        r = float(np.linalg.norm(pos))
        a = (-OrbitalConstants.MU_EARTH / (r * r * r)) * pos
        return (float(a[0]), float(a[1]), float(a[2]))


class J2Perturbation:
    """J2 oblateness acceleration."""

    def acceleration(
        self,
        epoch: datetime,
        position: tuple[float, float, float],
        velocity: tuple[float, float, float],
    ) -> tuple[float, float, float]:
        x, y, z = position
        r2 = x * x + y * y + z * z
        r = math.sqrt(r2)
        c = OrbitalConstants
        coeff = -1.5 * c.J2_EARTH * c.MU_EARTH * c.R_EARTH_EQUATORIAL**2 / (r2 * r2 * r)
        z2_r2 = z * z / r2
        return (
            coeff * x * (1.0 - 5.0 * z2_r2),
            coeff * y * (1.0 - 5.0 * z2_r2),
            coeff * z * (3.0 - 5.0 * z2_r2),
        )


def _legendre_with_derivative(n_max: int, s: float) -> tuple[list[float], list[float]]:
    """Legendre polynomials P_n(s) and P_n'(s) for n = 0..n_max."""
    p = [1.0, s]
    dp = [0.0, 1.0]
    for n in range(2, n_max + 1):
        p.append(((2 * n - 1) * s * p[n - 1] - (n - 1) * p[n - 2]) / n)
        dp.append(dp[n - 2] + (2 * n - 1) * p[n - 1])
    return p, dp


class ZonalHarmonics:
    """Zonal harmonics J3..J6 as the gradient of the axisymmetric geopotential.

    a_n = μ·J_n·Re^n / r^(n+2) · [((n+1)·P_n(s) + s·P_n'(s))·r̂ − P_n'(s)·ẑ],
    s = z/r. The same expression for n = 2 reproduces J2Perturbation.
    """

    def __init__(self, degrees: Sequence[int] = (3, 4, 5, 6)) -> None:
        for n in degrees:
            if n not in _ZONAL_COEFFS:
                raise ValueError(f"Unsupported zonal degree {n}; expected 3-6")
        self._degrees = tuple(degrees)

    def acceleration(
        self,
        epoch: datetime,
        position: tuple[float, float, float],
        velocity: tuple[float, float, float],
    ) -> tuple[float, float, float]:
        pos = np.array(position)
        r = float(np.linalg.norm(pos))
        r_hat = pos / r
        s = float(r_hat[2])
        p, dp = _legendre_with_derivative(max(self._degrees), s)

        mu = OrbitalConstants.MU_EARTH
        re = OrbitalConstants.R_EARTH_EQUATORIAL
        z_hat = np.array([0.0, 0.0, 1.0])

        total = np.zeros(3)
        for n in self._degrees:
            scale = mu * _ZONAL_COEFFS[n] * re**n / r ** (n + 2)
            radial = (n + 1) * p[n] + s * dp[n]
            total += scale * (radial * r_hat - dp[n] * z_hat)
        return (float(total[0]), float(total[1]), float(total[2]))


class AtmosphericDragForce:
    """Atmospheric drag acceleration with co-rotating atmosphere.

    a = -0.5 * rho * B * |v_rel| * v_rel, B = Cd·A/m.
    Density is held at the 100 km value below the table floor; zero
    above the density ceiling.
    """

    def __init__(
        self,
        ballistic_coefficient: float,
        solar_activity: SolarActivity = SolarActivity.MODERATE,
    ) -> None:
        self._bc = ballistic_coefficient
        self._activity = solar_activity

    def acceleration(
        self,
        epoch: datetime,
        position: tuple[float, float, float],
        velocity: tuple[float, float, float],
    ) -> tuple[float, float, float]:
        x, y, z = position
        vx, vy, vz = velocity

        r = math.sqrt(x * x + y * y + z * z)
        alt_km = (r - OrbitalConstants.R_EARTH_EQUATORIAL) / 1000.0
        if alt_km > DENSITY_CEILING_KM:
            return (0.0, 0.0, 0.0)
        rho = atmospheric_density(max(alt_km, REENTRY_ALTITUDE_KM), self._activity)

        omega_e = OrbitalConstants.EARTH_ROTATION_RATE
        vr = np.array([vx + omega_e * y, vy - omega_e * x, vz])
        v_rel = float(np.linalg.norm(vr))
        if v_rel < 1e-10:
            return (0.0, 0.0, 0.0)

        a = (-0.5 * rho * self._bc * v_rel) * vr
        return (float(a[0]), float(a[1]), float(a[2]))


class SolarRadiationPressureForce:
    """Cannonball solar radiation pressure with a cylindrical Earth shadow.

    a = -Cr * P * (A/m) * (AU/|d|)^2 * d_hat, d = r_sun - r_sat.
    """

    def __init__(self, cr: float, area_m2: float, mass_kg: float) -> None:
        self._cr = cr
        self._am_ratio = area_m2 / mass_kg

    def acceleration(
        self,
        epoch: datetime,
        position: tuple[float, float, float],
        velocity: tuple[float, float, float],
    ) -> tuple[float, float, float]:
        sun = np.array(sun_position_eci(epoch).position_eci_m)
        d = sun - np.array(position)
        d_mag = float(np.linalg.norm(d))
        d_hat = d / d_mag

        if in_cylindrical_shadow(position, (float(d_hat[0]), float(d_hat[1]), float(d_hat[2]))):
            return (0.0, 0.0, 0.0)

        coeff = -self._cr * P_SRP * self._am_ratio * (AU_METERS / d_mag) ** 2
        a = coeff * d_hat
        return (float(a[0]), float(a[1]), float(a[2]))


# --- RK4 integrator ---

def rk4_step(
    t_s: float,
    state: tuple[float, ...],
    h: float,
    deriv_fn: Callable[[float, tuple[float, ...]], tuple[float, ...]],
) -> tuple[float, tuple[float, ...]]:
    """Single 4th-order Runge-Kutta integration step.

    Args:
        t_s: Current time (seconds).
        state: Current state vector.
        h: Step size (seconds).
        deriv_fn: Derivative function f(t, state) -> d(state)/dt.

    Returns:
        (t_new, state_new)
    """
    sv = np.array(state)
    k1 = np.array(deriv_fn(t_s, state))
    k2 = np.array(deriv_fn(t_s + 0.5 * h, tuple((sv + 0.5 * h * k1).tolist())))
    k3 = np.array(deriv_fn(t_s + 0.5 * h, tuple((sv + 0.5 * h * k2).tolist())))
    k4 = np.array(deriv_fn(t_s + h, tuple((sv + h * k3).tolist())))

    state_new = sv + (h / 6.0) * (k1 + 2.0 * k2 + 2.0 * k3 + k4)
    return (t_s + h, tuple(float(x) for x in state_new))


def effective_step(duration_s: float, step_s: float) -> float:
    """Step actually used for a span: widened when MAX_STEPS would be exceeded."""
    if math.ceil(duration_s / step_s) > MAX_STEPS:
        return duration_s / MAX_STEPS
    return step_s


# --- Main propagation function ---

def propagate_numerical(
    position: tuple[float, float, float],
    velocity: tuple[float, float, float],
    epoch: datetime,
    duration_s: float,
    step_s: float,
    force_models: Sequence[ForceModel],
) -> tuple[TrajectorySample, ...]:
    """Integrate an ECI state under the summed force models.

    The final step is shortened so the last sample lands exactly at
    ``duration_s``.

    Raises:
        ValidationError: non-positive or non-finite duration/step.
    """
    if not math.isfinite(duration_s) or duration_s <= 0:
        raise ValidationError(f"duration_s must be positive, got {duration_s}")
    if not math.isfinite(step_s) or step_s <= 0:
        raise ValidationError(f"step_s must be positive, got {step_s}")

    h = effective_step(duration_s, step_s)
    if h != step_s:
        logger.info(
            "Step widened from %.3f s to %.3f s to stay within %d steps",
            step_s, h, MAX_STEPS,
        )

    def deriv_fn(t_s: float, sv: tuple[float, ...]) -> tuple[float, ...]:
        current_epoch = epoch + timedelta(seconds=t_s)
        p = (sv[0], sv[1], sv[2])
        v = (sv[3], sv[4], sv[5])
        ax_total, ay_total, az_total = 0.0, 0.0, 0.0
        for fm in force_models:
            ax, ay, az = fm.acceleration(current_epoch, p, v)
            ax_total += ax
            ay_total += ay
            az_total += az
        return (v[0], v[1], v[2], ax_total, ay_total, az_total)

    pos0 = (float(position[0]), float(position[1]), float(position[2]))
    vel0 = (float(velocity[0]), float(velocity[1]), float(velocity[2]))
    state_vec: tuple[float, ...] = pos0 + vel0
    samples = [TrajectorySample(epoch, 0.0, pos0, vel0)]
    num_steps = math.ceil(duration_s / h - 1e-9)
    t = 0.0
    for i in range(num_steps):
        dt = h if i < num_steps - 1 else duration_s - t
        t, state_vec = rk4_step(t, state_vec, dt, deriv_fn)
        if i == num_steps - 1:
            t = duration_s
        samples.append(TrajectorySample(
            time=epoch + timedelta(seconds=t),
            offset_s=t,
            position_eci=(state_vec[0], state_vec[1], state_vec[2]),
            velocity_eci=(state_vec[3], state_vec[4], state_vec[5]),
        ))

    return tuple(samples)
