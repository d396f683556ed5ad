# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Orbital mechanics functions.

Physical constants and pure two-body conversions between classical
elements and ECI Cartesian state. Lengths are SI (m, m/s) here; the
element model in ``elements`` wraps these in km/deg.
"""
import math
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class _OrbitalConstants:
    """Standard orbital constants (IAU/WGS84 values)."""
    MU_EARTH: float = 3.986004418e14   # m³/s² — gravitational parameter
    R_EARTH: float = 6_371_000          # m — mean radius
    J2_EARTH: float = 1.08263e-3        # J2 zonal harmonic coefficient
    J3_EARTH: float = -2.53266e-6       # J3 zonal harmonic coefficient
    J4_EARTH: float = -1.61988e-6       # J4 zonal harmonic coefficient
    J5_EARTH: float = -2.27e-7          # J5 zonal harmonic coefficient
    J6_EARTH: float = 5.407e-7          # J6 zonal harmonic coefficient
    EARTH_ROTATION_RATE: float = 7.2921159e-5  # rad/s — sidereal rotation rate
    # WGS84 ellipsoid
    R_EARTH_EQUATORIAL: float = 6_378_137.0       # m — semi-major axis
    R_EARTH_POLAR: float = 6_356_752.3142         # m — semi-minor axis
    FLATTENING: float = 1.0 / 298.257223563       # WGS84 flattening
    E_SQUARED: float = 0.00669437999014           # first eccentricity squared


OrbitalConstants: _OrbitalConstants = _OrbitalConstants()

# Reference radius for altitudes throughout the engine (km).
R_EARTH_KM: float = OrbitalConstants.R_EARTH_EQUATORIAL / 1000.0

_SMALL = 1e-11


def kepler_to_cartesian(
    a: float,
    e: float,
    i_rad: float,
    omega_big_rad: float,
    omega_small_rad: float,
    nu_rad: float,
) -> tuple[list[float], list[float]]:
    """
    Convert Keplerian orbital elements to ECI Cartesian position/velocity.

    Args:
        a: Semi-major axis (m)
        e: Eccentricity (0 for circular)
        i_rad: Inclination (radians)
        omega_big_rad: RAAN / longitude of ascending node (radians)
        omega_small_rad: Argument of perigee (radians)
        nu_rad: True anomaly (radians)

    Returns:
        (position_eci [x,y,z] in m, velocity_eci [vx,vy,vz] in m/s)
    """
    mu = OrbitalConstants.MU_EARTH

    cos_nu = float(np.cos(nu_rad))
    sin_nu = float(np.sin(nu_rad))

    p = a * (1 - e**2)
    r = p / (1 + e * cos_nu)

    p_factor = float(np.sqrt(mu / p))
    pos_pqw = np.array([r * cos_nu, r * sin_nu, 0.0])
    vel_pqw = np.array([
        -p_factor * sin_nu,
        p_factor * (e + cos_nu),
        0.0,
    ])

    cO = float(np.cos(omega_big_rad))
    sO = float(np.sin(omega_big_rad))
    co = float(np.cos(omega_small_rad))
    so = float(np.sin(omega_small_rad))
    ci = float(np.cos(i_rad))
    si = float(np.sin(i_rad))

    rotation = np.array([
        [cO * co - sO * so * ci, -cO * so - sO * co * ci, sO * si],
        [sO * co + cO * so * ci, -sO * so + cO * co * ci, -cO * si],
        [so * si, co * si, ci],
    ])

    pos_eci_arr = rotation @ pos_pqw
    vel_eci_arr = rotation @ vel_pqw

    pos_eci = [float(pos_eci_arr[0]), float(pos_eci_arr[1]), float(pos_eci_arr[2])]
    vel_eci = [float(vel_eci_arr[0]), float(vel_eci_arr[1]), float(vel_eci_arr[2])]

    return pos_eci, vel_eci


def cartesian_to_kepler(
    position: tuple[float, float, float],
    velocity: tuple[float, float, float],
    mu: float = OrbitalConstants.MU_EARTH,
) -> tuple[float, float, float, float, float, float]:
    """
    Convert an ECI state to classical elements.

    Degenerate geometry is resolved without division by zero:
    equatorial orbits report RAAN = 0, circular orbits report argument
    of perigee = 0 and measure the true anomaly from the ascending node
    (or from the x-axis when also equatorial).

    Args:
        position: ECI position (m).
        velocity: ECI velocity (m/s).
        mu: Gravitational parameter (m³/s²).

    Returns:
        (a [m], e, i [rad], raan [rad], arg_perigee [rad], true_anomaly [rad]),
        angles in [0, 2π).
    """
    r = np.array(position, dtype=float)
    v = np.array(velocity, dtype=float)
    r_mag = float(np.linalg.norm(r))
    v_mag = float(np.linalg.norm(v))

    h = np.cross(r, v)
    h_mag = float(np.linalg.norm(h))

    node = np.array([-h[1], h[0], 0.0])
    n_mag = float(np.linalg.norm(node))

    e_vec = np.cross(v, h) / mu - r / r_mag
    e = float(np.linalg.norm(e_vec))

    energy = 0.5 * v_mag * v_mag - mu / r_mag
    a = -mu / (2.0 * energy) if energy != 0.0 else math.inf

    inc = math.acos(max(-1.0, min(1.0, float(h[2]) / h_mag)))

    raan = 0.0
    if n_mag > _SMALL * h_mag:
        raan = math.acos(max(-1.0, min(1.0, float(node[0]) / n_mag)))
        if node[1] < 0:
            raan = 2.0 * math.pi - raan

    two_pi = 2.0 * math.pi
    if e > _SMALL:
        if n_mag > _SMALL * h_mag:
            argp = math.acos(max(-1.0, min(1.0, float(np.dot(node, e_vec)) / (n_mag * e))))
            if e_vec[2] < 0:
                argp = two_pi - argp
        else:
            # Equatorial: longitude of perigee from the x-axis
            argp = math.atan2(float(e_vec[1]), float(e_vec[0])) % two_pi
            if h[2] < 0:
                argp = (two_pi - argp) % two_pi
        nu = math.acos(max(-1.0, min(1.0, float(np.dot(e_vec, r)) / (e * r_mag))))
        if float(np.dot(r, v)) < 0:
            nu = two_pi - nu
    else:
        argp = 0.0
        if n_mag > _SMALL * h_mag:
            # Argument of latitude
            nu = math.acos(max(-1.0, min(1.0, float(np.dot(node, r)) / (n_mag * r_mag))))
            if r[2] < 0:
                nu = two_pi - nu
        else:
            # True longitude
            nu = math.atan2(float(r[1]), float(r[0])) % two_pi
            if h[2] < 0:
                nu = (two_pi - nu) % two_pi

    return a, e, inc, raan % two_pi, argp % two_pi, nu % two_pi


def mean_motion(a: float) -> float:
    """Two-body mean motion n = √(μ/a³) in rad/s for a in meters."""
    return math.sqrt(OrbitalConstants.MU_EARTH / a**3)


def orbital_period_s(a: float) -> float:
    """Kepler's third law: T = 2π·√(a³/μ), a in meters."""
    return 2.0 * math.pi / mean_motion(a)


def j2_raan_rate(n: float, a: float, e: float, i_rad: float) -> float:
    """
    J2 secular rate of RAAN (longitude of ascending node).

    dΩ/dt = -3/2 · n · J2 · (R_E/a)² · cos(i) / (1-e²)²

    Args:
        n: Mean motion (rad/s).
        a: Semi-major axis (m).
        e: Eccentricity.
        i_rad: Inclination (radians).

    Returns:
        RAAN rate in rad/s. Negative for prograde, positive for retrograde.
    """
    c = OrbitalConstants
    p_ratio = (c.R_EARTH_EQUATORIAL / a) ** 2
    return float(-1.5 * n * c.J2_EARTH * p_ratio * np.cos(i_rad) / (1 - e**2) ** 2)


def j2_arg_perigee_rate(n: float, a: float, e: float, i_rad: float) -> float:
    """
    J2 secular rate of argument of perigee.

    dω/dt = 3/4 · n · J2 · (R_E/a)² · (4 - 5·sin²i) / (1-e²)²

    Zero at the critical inclination (~63.4°).
    """
    c = OrbitalConstants
    p_ratio = (c.R_EARTH_EQUATORIAL / a) ** 2
    return float(0.75 * n * c.J2_EARTH * p_ratio * (4 - 5 * np.sin(i_rad) ** 2) / (1 - e**2) ** 2)
