# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Atmospheric density model.

Piecewise exponential density (Vallado 4th ed. Table 8-4, moderate
solar activity) scaled linearly by the F10.7 solar flux proxy. Above
the last table entry the 1000 km scale height is carried upward to
the model ceiling.
"""
import math
from enum import Enum

from orbitwright.domain.errors import ValidationError
from orbitwright.domain.orbital_mechanics import OrbitalConstants


class SolarActivity(Enum):
    """Solar activity tier, valued by its F10.7 proxy (sfu)."""
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"

    @property
    def f107(self) -> float:
        return _F107[self]


_F107 = {
    SolarActivity.LOW: 70.0,
    SolarActivity.MODERATE: 150.0,
    SolarActivity.HIGH: 250.0,
}

# Flux the reference table corresponds to
REFERENCE_F107 = 150.0

REENTRY_ALTITUDE_KM = 100.0
DENSITY_CEILING_KM = 2500.0

# (base altitude km, base density kg/m³, scale height km)
_DENSITY_TABLE: tuple[tuple[float, float, float], ...] = (
    (100, 5.297e-07, 5.877),
    (110, 9.661e-08, 7.263),
    (120, 2.438e-08, 9.473),
    (130, 8.484e-09, 12.636),
    (140, 3.845e-09, 16.149),
    (150, 2.070e-09, 22.523),
    (180, 5.464e-10, 29.740),
    (200, 2.789e-10, 37.105),
    (250, 7.248e-11, 45.546),
    (300, 2.418e-11, 53.628),
    (350, 9.518e-12, 53.298),
    (400, 3.725e-12, 58.515),
    (450, 1.585e-12, 60.828),
    (500, 6.967e-13, 63.822),
    (600, 1.454e-13, 71.835),
    (700, 3.614e-14, 88.667),
    (800, 1.170e-14, 124.64),
    (900, 5.245e-15, 181.05),
    (1000, 3.019e-15, 268.00),
)


def parse_solar_activity(value: "str | SolarActivity") -> SolarActivity:
    """Accept an enum member or its case-insensitive name."""
    if isinstance(value, SolarActivity):
        return value
    try:
        return SolarActivity(str(value).strip().lower())
    except ValueError:
        names = ", ".join(a.value for a in SolarActivity)
        raise ValidationError(f"Unknown solar activity {value!r}; expected one of {names}") from None


def atmospheric_density(
    altitude_km: float,
    solar_activity: SolarActivity = SolarActivity.MODERATE,
) -> float:
    """Atmospheric density at altitude using the piecewise exponential model.

    Binary-searches the table for the altitude bracket, then
    rho = rho_base * exp(-(h - h_base) / H) * F10.7 / 150.

    Args:
        altitude_km: Altitude above the equatorial radius in km.
        solar_activity: Activity tier controlling the density scale.

    Returns:
        Atmospheric density in kg/m³.

    Raises:
        ValueError: If altitude is outside [100, 2500] km.
    """
    table = _DENSITY_TABLE
    if altitude_km < table[0][0] or altitude_km > DENSITY_CEILING_KM:
        raise ValueError(
            f"Altitude {altitude_km} km outside valid range "
            f"[{table[0][0]}, {DENSITY_CEILING_KM}] km"
        )

    lo, hi = 0, len(table) - 1
    if altitude_km >= table[hi][0]:
        lo = hi
    while lo < hi - 1:
        mid = (lo + hi) // 2
        if table[mid][0] <= altitude_km:
            lo = mid
        else:
            hi = mid

    h_base, rho_base, scale_height = table[lo]
    rho = rho_base * math.exp(-(altitude_km - h_base) / scale_height)
    return rho * solar_activity.f107 / REFERENCE_F107


def semi_major_axis_decay_rate(
    a: float,
    ballistic_coefficient: float,
    solar_activity: SolarActivity = SolarActivity.MODERATE,
) -> float:
    """Rate of semi-major axis decay of a circular orbit due to drag.

    da/dt = -rho(h) * sqrt(mu * a) * B

    Args:
        a: Semi-major axis in meters.
        ballistic_coefficient: B = Cd·A/m (m²/kg).
        solar_activity: Activity tier.

    Returns:
        da/dt in m/s (negative).
    """
    h_km = (a - OrbitalConstants.R_EARTH_EQUATORIAL) / 1000.0
    rho = atmospheric_density(h_km, solar_activity)
    return -rho * math.sqrt(OrbitalConstants.MU_EARTH * a) * ballistic_coefficient
