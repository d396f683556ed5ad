# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Third-body perturbations (solar and lunar).

Truncated lunar ephemeris and the tidal acceleration a third body
exerts on a satellite relative to the Earth's centre.
"""
import math
from dataclasses import dataclass
from datetime import datetime

import numpy as np

from orbitwright.domain.solar import (
    ecliptic_to_eci,
    julian_centuries_j2000,
    obliquity_rad,
    sun_position_eci,
)

MU_SUN = 1.32712440018e20   # m³/s²
MU_MOON = 4.9048695e12      # m³/s²


@dataclass(frozen=True)
class MoonPosition:
    """Moon position at a given epoch."""
    position_eci_m: tuple[float, float, float]
    distance_m: float


def moon_position_eci(epoch: datetime) -> MoonPosition:
    """Geocentric Moon position in ECI (m), roughly 1° accurate.

    Leading terms of the lunar theory: equation of the centre, evection,
    variation and the main latitude term.
    """
    t = julian_centuries_j2000(epoch)
    mean_lon = (218.3165 + 481267.8813 * t) % 360.0
    elong = math.radians((297.8502 + 445267.1115 * t) % 360.0)
    m_moon = math.radians((134.9634 + 477198.8676 * t) % 360.0)
    arg_lat = math.radians((93.2720 + 483202.0175 * t) % 360.0)

    lon_deg = (
        mean_lon
        + 6.289 * math.sin(m_moon)
        - 1.274 * math.sin(2.0 * elong - m_moon)
        + 0.658 * math.sin(2.0 * elong)
    )
    lat_deg = 5.128 * math.sin(arg_lat)
    distance_km = (
        385001.0
        - 20905.0 * math.cos(m_moon)
        - 3699.0 * math.cos(2.0 * elong - m_moon)
        - 2956.0 * math.cos(2.0 * elong)
    )
    distance_m = distance_km * 1000.0

    pos = ecliptic_to_eci(
        math.radians(lon_deg), math.radians(lat_deg), distance_m, obliquity_rad(t),
    )
    return MoonPosition(position_eci_m=pos, distance_m=distance_m)


def third_body_acceleration(
    mu_body: float,
    r_body: tuple[float, float, float],
    r_sat: tuple[float, float, float],
) -> tuple[float, float, float]:
    """Direct minus indirect term: a = μ·(d/|d|³ − r_b/|r_b|³), d = r_b − r_sat."""
    rb = np.asarray(r_body, dtype=float)
    d = rb - np.asarray(r_sat, dtype=float)
    d_mag = float(np.linalg.norm(d))
    rb_mag = float(np.linalg.norm(rb))
    a = mu_body * (d / d_mag**3 - rb / rb_mag**3)
    return (float(a[0]), float(a[1]), float(a[2]))


class SolarThirdBodyForce:
    """Solar gravity as a ForceModel."""

    def acceleration(
        self,
        epoch: datetime,
        position: tuple[float, float, float],
        velocity: tuple[float, float, float],
    ) -> tuple[float, float, float]:
        sun = sun_position_eci(epoch)
        return third_body_acceleration(MU_SUN, sun.position_eci_m, position)


class LunarThirdBodyForce:
    """Lunar gravity as a ForceModel."""

    def acceleration(
        self,
        epoch: datetime,
        position: tuple[float, float, float],
        velocity: tuple[float, float, float],
    ) -> tuple[float, float, float]:
        moon = moon_position_eci(epoch)
        return third_body_acceleration(MU_MOON, moon.position_eci_m, position)
