# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Classical orbital element model.

Element sets are expressed in km and degrees; Cartesian states in SI
(m, m/s) in the Earth-centred inertial frame.
"""
import math
from dataclasses import dataclass

from orbitwright.domain.errors import ValidationError
from orbitwright.domain.orbital_mechanics import (
    R_EARTH_KM,
    cartesian_to_kepler,
    kepler_to_cartesian,
    orbital_period_s,
)


@dataclass(frozen=True)
class OrbitalElements:
    """Keplerian element set (km, deg)."""
    semi_major_axis_km: float
    eccentricity: float
    inclination_deg: float
    raan_deg: float
    arg_perigee_deg: float
    true_anomaly_deg: float

    @property
    def perigee_altitude_km(self) -> float:
        return self.semi_major_axis_km * (1.0 - self.eccentricity) - R_EARTH_KM

    @property
    def apogee_altitude_km(self) -> float:
        return self.semi_major_axis_km * (1.0 + self.eccentricity) - R_EARTH_KM

    @property
    def mean_altitude_km(self) -> float:
        return self.semi_major_axis_km - R_EARTH_KM

    @property
    def period_s(self) -> float:
        return orbital_period_s(self.semi_major_axis_km * 1000.0)


@dataclass(frozen=True)
class StateVector:
    """ECI Cartesian state (m, m/s)."""
    position_eci: tuple[float, float, float]
    velocity_eci: tuple[float, float, float]


def circular_elements(
    altitude_km: float,
    inclination_deg: float,
    raan_deg: float = 0.0,
    true_anomaly_deg: float = 0.0,
) -> OrbitalElements:
    """Circular orbit at the given altitude above the equatorial radius."""
    return OrbitalElements(
        semi_major_axis_km=R_EARTH_KM + altitude_km,
        eccentricity=0.0,
        inclination_deg=inclination_deg,
        raan_deg=raan_deg % 360.0,
        arg_perigee_deg=0.0,
        true_anomaly_deg=true_anomaly_deg % 360.0,
    )


def validate_elements(elements: OrbitalElements) -> None:
    """
    Reject element sets that cannot describe a closed orbit.

    Raises:
        ValidationError: non-finite values, non-positive semi-major axis,
            eccentricity outside [0, 1), or inclination outside [0, 180].
    """
    values = (
        elements.semi_major_axis_km,
        elements.eccentricity,
        elements.inclination_deg,
        elements.raan_deg,
        elements.arg_perigee_deg,
        elements.true_anomaly_deg,
    )
    if not all(math.isfinite(v) for v in values):
        raise ValidationError(f"orbital elements must be finite, got {elements}")
    if elements.semi_major_axis_km <= 0:
        raise ValidationError(
            f"semi_major_axis_km must be positive, got {elements.semi_major_axis_km}"
        )
    if not 0.0 <= elements.eccentricity < 1.0:
        raise ValidationError(
            f"eccentricity must be in [0, 1) for a closed orbit, got {elements.eccentricity}"
        )
    if not 0.0 <= elements.inclination_deg <= 180.0:
        raise ValidationError(
            f"inclination_deg must be in [0, 180], got {elements.inclination_deg}"
        )


def elements_to_state(elements: OrbitalElements) -> StateVector:
    """Convert an element set to an ECI state vector."""
    validate_elements(elements)
    pos, vel = kepler_to_cartesian(
        a=elements.semi_major_axis_km * 1000.0,
        e=elements.eccentricity,
        i_rad=math.radians(elements.inclination_deg),
        omega_big_rad=math.radians(elements.raan_deg),
        omega_small_rad=math.radians(elements.arg_perigee_deg),
        nu_rad=math.radians(elements.true_anomaly_deg),
    )
    return StateVector(
        position_eci=(pos[0], pos[1], pos[2]),
        velocity_eci=(vel[0], vel[1], vel[2]),
    )


def state_to_elements(state: StateVector) -> OrbitalElements:
    """
    Convert an ECI state vector to an element set.

    Circular orbits report argument of perigee 0 with the true anomaly
    measured from the ascending node; equatorial orbits report RAAN 0.
    Hyperbolic or parabolic states raise ValidationError.
    """
    r = math.sqrt(sum(c * c for c in state.position_eci))
    if r == 0.0:
        raise ValidationError("position vector must be non-zero")
    a, e, inc, raan, argp, nu = cartesian_to_kepler(
        state.position_eci, state.velocity_eci,
    )
    if a <= 0 or e >= 1.0:
        raise ValidationError(f"state does not describe a closed orbit (e={e:.6f})")
    return OrbitalElements(
        semi_major_axis_km=a / 1000.0,
        eccentricity=e,
        inclination_deg=math.degrees(inc),
        raan_deg=math.degrees(raan) % 360.0,
        arg_perigee_deg=math.degrees(argp) % 360.0,
        true_anomaly_deg=math.degrees(nu) % 360.0,
    )
