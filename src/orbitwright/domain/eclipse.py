# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Eclipse and shadow prediction.

Cylindrical shadow model: a point is eclipsed when it lies on the
anti-Sun side of the Earth within the shadow cylinder's radius.
"""
import math

import numpy as np

from orbitwright.domain.errors import ValidationError
from orbitwright.domain.orbital_mechanics import R_EARTH_KM, OrbitalConstants

DEFAULT_ECLIPSE_CENTRE_DEG = 180.0


def in_cylindrical_shadow(
    position: tuple[float, float, float],
    sun_direction: tuple[float, float, float],
    radius: float = OrbitalConstants.R_EARTH_EQUATORIAL,
) -> bool:
    """True if ``position`` lies in the anti-Sun cylinder of ``radius``.

    ``sun_direction`` must be a unit vector; units of ``position`` and
    ``radius`` must match.
    """
    pos = np.asarray(position, dtype=float)
    along = float(np.dot(pos, np.asarray(sun_direction, dtype=float)))
    if along >= 0.0:
        return False
    perp_sq = float(np.dot(pos, pos)) - along * along
    return perp_sq < radius * radius


def eclipse_fraction(altitude_km: float, beta_deg: float = 0.0) -> float:
    """Fraction of a circular orbit spent in the cylindrical shadow.

    f = arccos(√(h² + 2Rh) / ((R + h)·cos β)) / π when |β| is below the
    critical angle arcsin(R / (R + h)), zero otherwise.
    """
    if not altitude_km > 0:
        raise ValidationError(f"altitude_km must be positive, got {altitude_km}")
    r = R_EARTH_KM + altitude_km
    beta = math.radians(abs(beta_deg))
    if beta >= math.asin(R_EARTH_KM / r):
        return 0.0
    ratio = math.sqrt(altitude_km**2 + 2.0 * R_EARTH_KM * altitude_km) / (r * math.cos(beta))
    return math.acos(min(1.0, ratio)) / math.pi


def orbit_position_sunlit(
    position_deg: float,
    fraction: float,
    centre_deg: float = DEFAULT_ECLIPSE_CENTRE_DEG,
) -> bool:
    """Sunlit test for a point on a circular orbit with the Sun in-plane.

    The Sun lies opposite ``centre_deg``. The shadow cylinder's radius is
    r·sin(π·fraction), so the eclipsed arc spans exactly ``fraction`` of
    the orbit, centred on ``centre_deg``. Positions are on the unit circle.
    """
    theta = math.radians(position_deg)
    sun_angle = math.radians(centre_deg + 180.0)
    pos = (math.cos(theta), math.sin(theta), 0.0)
    sun_dir = (math.cos(sun_angle), math.sin(sun_angle), 0.0)
    return not in_cylindrical_shadow(pos, sun_dir, radius=math.sin(math.pi * fraction))
