# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Coordinate frame conversions.

ECI (inertial), ECEF (Earth-fixed) and geodetic (WGS84) frames. The
ECI→ECEF rotation is a Z-axis rotation by Greenwich Mean Sidereal Time;
polar motion and nutation are ignored.
"""
import math
from datetime import datetime, timezone

import numpy as np

from orbitwright.domain.orbital_mechanics import OrbitalConstants

J2000 = datetime(2000, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def as_utc(epoch: datetime) -> datetime:
    """Attach UTC to naive datetimes; aware datetimes are converted."""
    if epoch.tzinfo is None:
        return epoch.replace(tzinfo=timezone.utc)
    return epoch.astimezone(timezone.utc)


def days_since_j2000(epoch: datetime) -> float:
    return (as_utc(epoch) - J2000).total_seconds() / 86400.0


def gmst_rad(epoch: datetime) -> float:
    """
    Greenwich Mean Sidereal Time for a UTC epoch.

    GMST(°) = 280.46061837 + 360.98564736629·d + 0.000387933·T² − T³/38710000,
    with d days and T Julian centuries since J2000.0.

    Returns:
        GMST in radians, in [0, 2π).
    """
    d = days_since_j2000(epoch)
    t = d / 36525.0
    gmst_deg = (
        280.46061837
        + 360.98564736629 * d
        + 0.000387933 * t**2
        - t**3 / 38710000.0
    ) % 360.0
    return math.radians(gmst_deg)


def _rotation_z(theta: float) -> np.ndarray:
    c, s = math.cos(theta), math.sin(theta)
    return np.array([
        [c, s, 0.0],
        [-s, c, 0.0],
        [0.0, 0.0, 1.0],
    ])


def eci_to_ecef(
    pos_eci: tuple[float, float, float],
    vel_eci: tuple[float, float, float],
    gmst_angle_rad: float,
) -> tuple[tuple[float, float, float], tuple[float, float, float]]:
    """
    Rotate an ECI state into the Earth-fixed frame.

    Velocity is rotated only; the ω×r transport term is not applied, so
    the returned velocity is the inertial velocity in ECEF axes.
    """
    rot = _rotation_z(gmst_angle_rad)
    p = rot @ np.asarray(pos_eci, dtype=float)
    v = rot @ np.asarray(vel_eci, dtype=float)
    return (float(p[0]), float(p[1]), float(p[2])), (float(v[0]), float(v[1]), float(v[2]))


def ecef_to_geodetic(
    pos_ecef: tuple[float, float, float],
) -> tuple[float, float, float]:
    """
    ECEF position to geodetic (lat_deg, lon_deg, alt_m) on WGS84.

    Latitude by fixed-point iteration on the prime-vertical radius;
    ten passes are well below a millimetre at orbital altitudes.
    """
    c = OrbitalConstants
    a = c.R_EARTH_EQUATORIAL
    e2 = c.E_SQUARED

    x, y, z = pos_ecef
    p = math.hypot(x, y)
    lon = math.atan2(y, x)

    lat = math.atan2(z, p * (1.0 - e2))
    for _ in range(10):
        sin_lat = math.sin(lat)
        n = a / math.sqrt(1.0 - e2 * sin_lat**2)
        lat = math.atan2(z + e2 * n * sin_lat, p)

    sin_lat = math.sin(lat)
    cos_lat = math.cos(lat)
    n = a / math.sqrt(1.0 - e2 * sin_lat**2)
    if abs(cos_lat) > 1e-10:
        alt = p / cos_lat - n
    else:
        alt = abs(z) - c.R_EARTH_POLAR

    return math.degrees(lat), math.degrees(lon), alt


def geodetic_to_ecef(
    lat_deg: float,
    lon_deg: float,
    alt_m: float = 0.0,
) -> tuple[float, float, float]:
    """Geodetic coordinates on WGS84 to an ECEF position (m)."""
    c = OrbitalConstants
    e2 = c.E_SQUARED
    lat = math.radians(lat_deg)
    lon = math.radians(lon_deg)
    n = c.R_EARTH_EQUATORIAL / math.sqrt(1.0 - e2 * math.sin(lat) ** 2)
    return (
        (n + alt_m) * math.cos(lat) * math.cos(lon),
        (n + alt_m) * math.cos(lat) * math.sin(lon),
        (n * (1.0 - e2) + alt_m) * math.sin(lat),
    )


def sub_satellite_point(
    pos_eci: tuple[float, float, float],
    epoch: datetime,
) -> tuple[float, float, float]:
    """Geodetic (lat_deg, lon_deg, alt_m) directly below an ECI position."""
    pos_ecef, _ = eci_to_ecef(pos_eci, (0.0, 0.0, 0.0), gmst_rad(epoch))
    return ecef_to_geodetic(pos_ecef)
