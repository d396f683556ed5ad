# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Lunar transfer mission analysis.

Patched-conic estimates for trans-lunar injection (TLI), lunar orbit
insertion (LOI), transfer time, departure phase angle and propellant
via the Tsiolkovsky equation. The Moon is on a circular orbit at its
mean distance; all burns are impulsive.
"""
import math
from dataclasses import dataclass
from enum import Enum

from orbitwright.domain.errors import ValidationError
from orbitwright.domain.link_budget import SPEED_OF_LIGHT
from orbitwright.domain.orbital_mechanics import OrbitalConstants
from orbitwright.domain.third_body import MU_MOON

_MU = OrbitalConstants.MU_EARTH
_G0 = 9.80665  # standard gravity m/s²

R_MOON = 1_737_400.0                      # m — mean lunar radius
MOON_SEMI_MAJOR_AXIS = 384_400_000.0      # m
MOON_SIDEREAL_PERIOD_S = 27.321661 * 86400.0

# LOI arrival speed is taken from a transfer leaving this parking altitude.
LOI_REFERENCE_PARKING_ALT_KM = 400.0
# Deorbit from low lunar orbit plus powered descent.
LUNAR_DESCENT_DELTA_V_MS = 1700.0


class LunarMissionType(Enum):
    ORBIT = "orbit"
    FLYBY = "flyby"
    LANDING = "landing"
    FREE_RETURN = "free-return"


class LunarTransferType(Enum):
    """Transfer family with its nominal time of flight (days)."""
    HOHMANN = "hohmann"
    LOW_ENERGY = "low-energy"
    GRAVITY_ASSIST = "gravity-assist"

    @property
    def transfer_days(self) -> float:
        return _TRANSFER_DAYS[self]


_TRANSFER_DAYS = {
    LunarTransferType.HOHMANN: 4.5,
    LunarTransferType.LOW_ENERGY: 100.0,      # weak-stability-boundary capture
    LunarTransferType.GRAVITY_ASSIST: 14.0,
}


@dataclass(frozen=True)
class LunarParams:
    """Lunar mission inputs."""
    mission_type: LunarMissionType = LunarMissionType.ORBIT
    transfer_type: LunarTransferType = LunarTransferType.HOHMANN
    departure_alt_km: float = 200.0       # circular Earth parking orbit
    target_orbit_alt_km: float = 100.0    # circular lunar orbit
    spacecraft_mass_kg: float = 1000.0    # dry mass
    isp_s: float = 320.0


@dataclass(frozen=True)
class LunarResult:
    tli_delta_v_ms: float
    loi_delta_v_ms: float
    total_delta_v_ms: float
    transfer_time_days: float
    lunar_orbit_period_min: float
    propellant_required_kg: float
    phase_angle_deg: float
    comm_delay_s: float
    free_return_period_days: float


def _positive(name: str, value: float) -> None:
    if not math.isfinite(value) or value <= 0:
        raise ValidationError(f"{name} must be a positive finite number, got {value}")


def compute_tli_delta_v(departure_alt_km: float) -> float:
    """TLI burn from a circular parking orbit (m/s).

    Raises the apogee of the parking orbit to the lunar distance; the
    burn is the vis-viva perigee speed of that ellipse minus the
    circular speed.

    Raises:
        ValidationError: non-positive altitude.
    """
    _positive("departure_alt_km", departure_alt_km)
    r_park = OrbitalConstants.R_EARTH_EQUATORIAL + departure_alt_km * 1000.0
    a_transfer = 0.5 * (r_park + MOON_SEMI_MAJOR_AXIS)
    v_circ = math.sqrt(_MU / r_park)
    v_perigee = math.sqrt(_MU * (2.0 / r_park - 1.0 / a_transfer))
    return v_perigee - v_circ


def compute_loi_delta_v(target_orbit_alt_km: float) -> float:
    """LOI burn into a circular lunar orbit (m/s).

    v∞ is the difference between the Moon's orbital speed and the
    transfer-ellipse apogee speed; the burn circularises the resulting
    hyperbola at periselene.

    Raises:
        ValidationError: non-positive target altitude.
    """
    _positive("target_orbit_alt_km", target_orbit_alt_km)
    r_target = R_MOON + target_orbit_alt_km * 1000.0
    r_park = OrbitalConstants.R_EARTH_EQUATORIAL + LOI_REFERENCE_PARKING_ALT_KM * 1000.0
    a_transfer = 0.5 * (r_park + MOON_SEMI_MAJOR_AXIS)

    v_arrival = math.sqrt(_MU * (2.0 / MOON_SEMI_MAJOR_AXIS - 1.0 / a_transfer))
    v_moon = math.sqrt(_MU / MOON_SEMI_MAJOR_AXIS)
    v_inf = abs(v_moon - v_arrival)

    v_periselene = math.sqrt(v_inf * v_inf + 2.0 * MU_MOON / r_target)
    v_circ = math.sqrt(MU_MOON / r_target)
    return v_periselene - v_circ


def compute_lunar_transfer_time(transfer_type: LunarTransferType) -> float:
    """Nominal time of flight (days)."""
    return transfer_type.transfer_days


def compute_lunar_phase_angle(transfer_time_days: float) -> float:
    """Moon lead angle at departure (deg, [0, 360)).

    The Moon must arrive at apogee, 180° from the departure point, after
    moving for the whole time of flight.
    """
    rate_deg_per_day = 360.0 / (MOON_SIDEREAL_PERIOD_S / 86400.0)
    return (180.0 - rate_deg_per_day * transfer_time_days) % 360.0


def compute_propellant_mass(
    total_delta_v_ms: float,
    dry_mass_kg: float,
    isp_s: float,
) -> float:
    """Propellant for a total Δv: m_dry · (exp(Δv / (Isp·g0)) − 1).

    Raises:
        ValidationError: negative Δv, non-positive mass or Isp.
    """
    if not math.isfinite(total_delta_v_ms) or total_delta_v_ms < 0:
        raise ValidationError(f"total_delta_v_ms must be >= 0, got {total_delta_v_ms}")
    _positive("dry_mass_kg", dry_mass_kg)
    _positive("isp_s", isp_s)
    return dry_mass_kg * math.expm1(total_delta_v_ms / (isp_s * _G0))


def lunar_orbit_period_min(target_orbit_alt_km: float) -> float:
    r = R_MOON + target_orbit_alt_km * 1000.0
    return 2.0 * math.pi * math.sqrt(r**3 / MU_MOON) / 60.0


def compute_lunar_result(params: LunarParams) -> LunarResult:
    """
    Full lunar mission budget.

    Orbit missions pay LOI; landings pay LOI plus the descent; flyby and
    free-return trajectories need no insertion. The free-return loop
    takes twice the outbound flight plus a day around the Moon.

    Raises:
        ValidationError: any non-positive altitude, mass or Isp.
    """
    _positive("target_orbit_alt_km", params.target_orbit_alt_km)
    tli = compute_tli_delta_v(params.departure_alt_km)
    transfer_days = compute_lunar_transfer_time(params.transfer_type)

    loi = 0.0
    period_min = 0.0
    free_return_days = 0.0
    if params.mission_type is LunarMissionType.ORBIT:
        loi = compute_loi_delta_v(params.target_orbit_alt_km)
        period_min = lunar_orbit_period_min(params.target_orbit_alt_km)
    elif params.mission_type is LunarMissionType.LANDING:
        loi = compute_loi_delta_v(params.target_orbit_alt_km) + LUNAR_DESCENT_DELTA_V_MS
    elif params.mission_type is LunarMissionType.FREE_RETURN:
        free_return_days = 2.0 * transfer_days + 1.0

    total = tli + loi
    return LunarResult(
        tli_delta_v_ms=tli,
        loi_delta_v_ms=loi,
        total_delta_v_ms=total,
        transfer_time_days=transfer_days,
        lunar_orbit_period_min=period_min,
        propellant_required_kg=compute_propellant_mass(
            total, params.spacecraft_mass_kg, params.isp_s,
        ),
        phase_angle_deg=compute_lunar_phase_angle(transfer_days),
        comm_delay_s=MOON_SEMI_MAJOR_AXIS / SPEED_OF_LIGHT,
        free_return_period_days=free_return_days,
    )
