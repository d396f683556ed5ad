# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Orbit lifetime, deorbit cost and disposal-rule compliance.

Circular-orbit decay da/dt = −ρ·√(μa)·B integrated in 1 km altitude
steps from the initial altitude down to the 100 km re-entry altitude.
Lifetimes are capped at 100 years and flagged rather than extrapolated.
"""
import math
from dataclasses import dataclass

from orbitwright.domain.atmosphere import (
    DENSITY_CEILING_KM,
    REENTRY_ALTITUDE_KM,
    SolarActivity,
    semi_major_axis_decay_rate,
)
from orbitwright.domain.errors import ValidationError
from orbitwright.domain.orbital_mechanics import R_EARTH_KM, OrbitalConstants

DAYS_PER_YEAR = 365.25
LIFETIME_CAP_YEARS = 100.0
ALTITUDE_STEP_KM = 1.0
DEORBIT_TARGET_PERIGEE_KM = 80.0

LONG_HORIZON_RULE_YEARS = 25.0
SHORT_HORIZON_RULE_YEARS = 5.0

_BISECTION_TOLERANCE_KM = 0.5


@dataclass(frozen=True)
class LifetimeEstimate:
    """Decay lifetime; capped at the sentinel when ``exceeds_threshold``."""
    days: float
    years: float
    exceeds_threshold: bool


@dataclass(frozen=True)
class ComplianceResult:
    lifetime_years: float
    lifetime_days: float
    exceeds_threshold: bool
    deorbit_delta_v_ms: float
    lifetime_25_year: bool
    lifetime_5_year: bool
    recommendation: str
    ballistic_coefficient: float
    solar_activity: SolarActivity


def compute_ballistic_coefficient(
    mass_kg: float,
    cross_section_m2: float,
    drag_coefficient: float = 2.2,
) -> float:
    """B = Cd·A/m (m²/kg).

    Raises:
        ValidationError: any input non-positive or non-finite.
    """
    for name, value in (
        ("mass_kg", mass_kg),
        ("cross_section_m2", cross_section_m2),
        ("drag_coefficient", drag_coefficient),
    ):
        if not math.isfinite(value) or value <= 0:
            raise ValidationError(f"{name} must be a positive finite number, got {value}")
    return drag_coefficient * cross_section_m2 / mass_kg


def _validate_inputs(altitude_km: float, ballistic_coefficient: float) -> None:
    if not math.isfinite(altitude_km) or altitude_km <= 0:
        raise ValidationError(f"altitude_km must be positive, got {altitude_km}")
    if not math.isfinite(ballistic_coefficient) or ballistic_coefficient <= 0:
        raise ValidationError(
            f"ballistic_coefficient must be positive, got {ballistic_coefficient}"
        )


def _capped() -> LifetimeEstimate:
    return LifetimeEstimate(
        days=LIFETIME_CAP_YEARS * DAYS_PER_YEAR,
        years=LIFETIME_CAP_YEARS,
        exceeds_threshold=True,
    )


def estimate_lifetime(
    altitude_km: float,
    ballistic_coefficient: float,
    solar_activity: SolarActivity = SolarActivity.MODERATE,
) -> LifetimeEstimate:
    """
    Time for a circular orbit to decay to the re-entry altitude.

    Each 1 km altitude step takes Δa / |da/dt| with the decay rate taken
    at the step's mid-altitude. Summation stops as soon as the running
    total passes the 100-year cap.

    Args:
        altitude_km: Mean altitude above the equatorial radius.
        ballistic_coefficient: B = Cd·A/m (m²/kg).
        solar_activity: Activity tier.

    Returns:
        LifetimeEstimate; orbits at or below 100 km return zero.

    Raises:
        ValidationError: non-positive altitude or ballistic coefficient.
    """
    _validate_inputs(altitude_km, ballistic_coefficient)
    if altitude_km <= REENTRY_ALTITUDE_KM:
        return LifetimeEstimate(days=0.0, years=0.0, exceeds_threshold=False)
    if altitude_km > DENSITY_CEILING_KM:
        return _capped()

    cap_s = LIFETIME_CAP_YEARS * DAYS_PER_YEAR * 86400.0
    total_s = 0.0
    h = altitude_km
    while h > REENTRY_ALTITUDE_KM:
        h_next = max(REENTRY_ALTITUDE_KM, h - ALTITUDE_STEP_KM)
        a_mid = (R_EARTH_KM + 0.5 * (h + h_next)) * 1000.0
        rate = semi_major_axis_decay_rate(a_mid, ballistic_coefficient, solar_activity)
        total_s += (h - h_next) * 1000.0 / -rate
        if total_s > cap_s:
            return _capped()
        h = h_next

    days = total_s / 86400.0
    return LifetimeEstimate(days=days, years=days / DAYS_PER_YEAR, exceeds_threshold=False)


def compute_deorbit_delta_v(
    altitude_km: float,
    target_perigee_km: float = DEORBIT_TARGET_PERIGEE_KM,
) -> float:
    """
    Single retrograde impulse lowering perigee from a circular orbit.

    First burn of a Hohmann transfer: Δv = v_circ − v_apo of the
    transfer ellipse with apogee at the current radius and perigee at
    ``target_perigee_km``. Zero if the orbit is already that low.

    Returns:
        Δv in m/s.
    """
    if not math.isfinite(altitude_km) or altitude_km <= 0:
        raise ValidationError(f"altitude_km must be positive, got {altitude_km}")
    if target_perigee_km >= altitude_km:
        return 0.0
    mu = OrbitalConstants.MU_EARTH
    r1 = (R_EARTH_KM + altitude_km) * 1000.0
    rp = (R_EARTH_KM + target_perigee_km) * 1000.0
    a_transfer = 0.5 * (r1 + rp)
    v_circ = math.sqrt(mu / r1)
    v_apo = math.sqrt(mu * (2.0 / r1 - 1.0 / a_transfer))
    return v_circ - v_apo


def max_compliant_altitude_km(
    ballistic_coefficient: float,
    threshold_years: float,
    solar_activity: SolarActivity = SolarActivity.MODERATE,
) -> float:
    """Highest altitude whose natural lifetime stays within ``threshold_years``.

    Lifetime grows monotonically with altitude, so bisection between the
    re-entry altitude and the density ceiling converges to within 0.5 km.
    """
    lo, hi = REENTRY_ALTITUDE_KM, DENSITY_CEILING_KM
    if estimate_lifetime(hi, ballistic_coefficient, solar_activity).years <= threshold_years:
        return hi
    while hi - lo > _BISECTION_TOLERANCE_KM:
        mid = 0.5 * (lo + hi)
        est = estimate_lifetime(mid, ballistic_coefficient, solar_activity)
        if not est.exceeds_threshold and est.years <= threshold_years:
            lo = mid
        else:
            hi = mid
    return lo


def _levers(
    estimate: LifetimeEstimate,
    ballistic_coefficient: float,
    threshold_years: float,
    solar_activity: SolarActivity,
) -> str:
    alt = max_compliant_altitude_km(ballistic_coefficient, threshold_years, solar_activity)
    multiplier = estimate.years / threshold_years
    bound = "at least " if estimate.exceeds_threshold else ""
    return (
        f"to meet {threshold_years:g} years lower altitude to {alt:.0f} km or below, "
        f"or increase drag area (Cd·A/m) by {bound}{multiplier:.1f}x"
    )


def check_compliance(
    altitude_km: float,
    ballistic_coefficient: float,
    solar_activity: SolarActivity = SolarActivity.MODERATE,
) -> ComplianceResult:
    """
    Evaluate the 25-year and 5-year disposal rules.

    The two verdicts are independent; a lifetime capped at the sentinel
    fails both. The recommendation names each failing rule with its
    remedies: a lower altitude, a larger drag area, or a deorbit device
    delivering the reported Δv.
    """
    estimate = estimate_lifetime(altitude_km, ballistic_coefficient, solar_activity)
    delta_v = compute_deorbit_delta_v(altitude_km)

    pass_25 = not estimate.exceeds_threshold and estimate.years <= LONG_HORIZON_RULE_YEARS
    pass_5 = not estimate.exceeds_threshold and estimate.years <= SHORT_HORIZON_RULE_YEARS

    if estimate.exceeds_threshold:
        decay = f"natural decay exceeds {LIFETIME_CAP_YEARS:g} years"
    else:
        decay = f"natural decay in {estimate.years:.1f} years"

    if pass_5:
        recommendation = f"Compliant with the 25-year and 5-year rules ({decay})."
    else:
        failing = "the 25-year and 5-year rules" if not pass_25 else "the 5-year rule"
        remedies = []
        if not pass_25:
            remedies.append(_levers(
                estimate, ballistic_coefficient, LONG_HORIZON_RULE_YEARS, solar_activity,
            ))
        remedies.append(_levers(
            estimate, ballistic_coefficient, SHORT_HORIZON_RULE_YEARS, solar_activity,
        ))
        recommendation = (
            f"Fails {failing} ({decay}). "
            + "; ".join(r[0].upper() + r[1:] for r in remedies)
            + f". Alternatively add a deorbit device providing {delta_v:.1f} m/s "
            f"to lower perigee to {DEORBIT_TARGET_PERIGEE_KM:g} km."
        )

    return ComplianceResult(
        lifetime_years=estimate.years,
        lifetime_days=estimate.days,
        exceeds_threshold=estimate.exceeds_threshold,
        deorbit_delta_v_ms=delta_v,
        lifetime_25_year=pass_25,
        lifetime_5_year=pass_5,
        recommendation=recommendation,
        ballistic_coefficient=ballistic_coefficient,
        solar_activity=solar_activity,
    )
