# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Analytical solar ephemeris.

Low-precision geocentric Sun position (Meeus Ch. 25 simplified), good
to about 0.01° in longitude: adequate for shadow tests, radiation
pressure and third-body gravity.
"""
import math
from dataclasses import dataclass
from datetime import datetime

import numpy as np

from orbitwright.domain.coordinate_frames import days_since_j2000

AU_METERS: float = 1.495978707e11  # Astronomical unit in meters
SOLAR_CONSTANT_W_M2: float = 1361.0  # Total solar irradiance at 1 AU


@dataclass(frozen=True)
class SunPosition:
    """Sun position at a given epoch."""
    position_eci_m: tuple[float, float, float]
    ecliptic_longitude_rad: float
    distance_m: float


def julian_centuries_j2000(epoch: datetime) -> float:
    """Julian centuries since J2000.0 (naive epochs read as UTC)."""
    return days_since_j2000(epoch) / 36525.0


def obliquity_rad(t_centuries: float) -> float:
    """Mean obliquity of the ecliptic."""
    return math.radians(23.439291 - 0.0130042 * t_centuries)


def ecliptic_to_eci(
    lon_rad: float,
    lat_rad: float,
    distance_m: float,
    eps_rad: float,
) -> tuple[float, float, float]:
    """Rotate ecliptic spherical coordinates into the equatorial frame."""
    ecl = distance_m * np.array([
        math.cos(lat_rad) * math.cos(lon_rad),
        math.cos(lat_rad) * math.sin(lon_rad),
        math.sin(lat_rad),
    ])
    c, s = math.cos(eps_rad), math.sin(eps_rad)
    rot = np.array([
        [1.0, 0.0, 0.0],
        [0.0, c, -s],
        [0.0, s, c],
    ])
    eq = rot @ ecl
    return (float(eq[0]), float(eq[1]), float(eq[2]))


def sun_position_eci(epoch: datetime) -> SunPosition:
    """Geocentric Sun position in ECI (m)."""
    t = julian_centuries_j2000(epoch)
    mean_lon = (280.46646 + 36000.76983 * t) % 360.0
    mean_anom = math.radians((357.52911 + 35999.05029 * t) % 360.0)
    centre = ((1.914602 - 0.004817 * t) * math.sin(mean_anom)
              + 0.019993 * math.sin(2.0 * mean_anom))
    lon = math.radians(mean_lon + centre)

    r_au = 1.00014 - 0.01671 * math.cos(mean_anom) - 0.00014 * math.cos(2.0 * mean_anom)
    distance_m = r_au * AU_METERS

    return SunPosition(
        position_eci_m=ecliptic_to_eci(lon, 0.0, distance_m, obliquity_rad(t)),
        ecliptic_longitude_rad=lon % (2.0 * math.pi),
        distance_m=distance_m,
    )
