# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Anomaly relations and Kepler's equation.

All angles in radians. Eccentricity exactly zero takes the circular
branch, where mean, eccentric and true anomaly coincide.
"""
import logging
import math

logger = logging.getLogger(__name__)

_TWO_PI = 2.0 * math.pi

KEPLER_TOLERANCE_RAD = 1e-8
KEPLER_MAX_ITERATIONS = 50


def _wrap(angle: float) -> float:
    return angle % _TWO_PI


def solve_kepler_equation(
    mean_anomaly: float,
    e: float,
    tol: float = KEPLER_TOLERANCE_RAD,
    max_iter: int = KEPLER_MAX_ITERATIONS,
) -> float:
    """
    Solve M = E - e·sin(E) for E by Newton-Raphson.

    If the iteration does not converge within ``max_iter`` steps the last
    iterate is returned and a warning is logged; the call never raises.

    Args:
        mean_anomaly: Mean anomaly M (radians).
        e: Eccentricity in [0, 1).
        tol: Convergence tolerance on |ΔE| (radians).
        max_iter: Iteration cap.

    Returns:
        Eccentric anomaly E (radians), in [0, 2π).
    """
    m = _wrap(mean_anomaly)
    if e == 0.0:
        return m

    ecc_anom = m if e < 0.8 else math.pi
    for _ in range(max_iter):
        f = ecc_anom - e * math.sin(ecc_anom) - m
        f_prime = 1.0 - e * math.cos(ecc_anom)
        delta = f / f_prime
        ecc_anom -= delta
        if abs(delta) < tol:
            return _wrap(ecc_anom)

    logger.warning(
        "Kepler equation did not converge in %d iterations (M=%.6f, e=%.6f)",
        max_iter, m, e,
    )
    return _wrap(ecc_anom)


def eccentric_to_true(ecc_anom: float, e: float) -> float:
    """Eccentric anomaly to true anomaly (radians, [0, 2π))."""
    if e == 0.0:
        return _wrap(ecc_anom)
    nu = 2.0 * math.atan2(
        math.sqrt(1.0 + e) * math.sin(ecc_anom / 2.0),
        math.sqrt(1.0 - e) * math.cos(ecc_anom / 2.0),
    )
    return _wrap(nu)


def true_to_eccentric(nu: float, e: float) -> float:
    """True anomaly to eccentric anomaly (radians, [0, 2π))."""
    if e == 0.0:
        return _wrap(nu)
    ecc_anom = 2.0 * math.atan2(
        math.sqrt(1.0 - e) * math.sin(nu / 2.0),
        math.sqrt(1.0 + e) * math.cos(nu / 2.0),
    )
    return _wrap(ecc_anom)


def eccentric_to_mean(ecc_anom: float, e: float) -> float:
    """Kepler's equation in the forward direction: M = E - e·sin(E)."""
    return _wrap(ecc_anom - e * math.sin(ecc_anom))


def mean_to_eccentric(mean_anomaly: float, e: float) -> float:
    return solve_kepler_equation(mean_anomaly, e)


def mean_to_true(mean_anomaly: float, e: float) -> float:
    return eccentric_to_true(solve_kepler_equation(mean_anomaly, e), e)


def true_to_mean(nu: float, e: float) -> float:
    return eccentric_to_mean(true_to_eccentric(nu, e), e)
