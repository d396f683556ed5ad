# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Walker constellation generation.

Builds Walker Delta (planes over 360°) and Walker Star (planes over
180°) patterns of circular orbits and derives aggregate metrics.
"""
import math
from dataclasses import dataclass
from enum import Enum

from orbitwright.domain.elements import OrbitalElements
from orbitwright.domain.errors import ValidationError
from orbitwright.domain.orbital_mechanics import R_EARTH_KM, orbital_period_s


class WalkerType(Enum):
    DELTA = "delta"
    STAR = "star"

    @property
    def raan_span_deg(self) -> float:
        return 360.0 if self is WalkerType.DELTA else 180.0


@dataclass(frozen=True)
class WalkerParams:
    """Walker pattern i:T/P/F at a single altitude."""
    walker_type: WalkerType
    total_sats: int
    planes: int
    phasing: int
    altitude_km: float
    inclination_deg: float
    raan_offset_deg: float = 0.0

    @property
    def sats_per_plane(self) -> int:
        return self.total_sats // self.planes

    @property
    def semi_major_axis_km(self) -> float:
        return R_EARTH_KM + self.altitude_km


@dataclass(frozen=True)
class Satellite:
    """One generated constellation member (0-indexed)."""
    id: int
    plane: int
    index_in_plane: int
    name: str
    elements: OrbitalElements


@dataclass(frozen=True)
class ConstellationMetrics:
    total_satellites: int
    sats_per_plane: int
    total_mass_kg: float
    orbital_period_min: float
    coverage_lat_min_deg: float
    coverage_lat_max_deg: float
    raan_spacing_deg: float
    phase_offset_deg: float
    walker_notation: str


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_walker_params(params: WalkerParams) -> None:
    """Raise ValidationError unless ``params`` describes a valid pattern."""
    if not isinstance(params.walker_type, WalkerType):
        raise ValidationError(f"walker_type must be a WalkerType, got {params.walker_type!r}")
    for name in ("total_sats", "planes", "phasing"):
        if not _is_int(getattr(params, name)):
            raise ValidationError(f"{name} must be an integer, got {getattr(params, name)!r}")
    t, p, f = params.total_sats, params.planes, params.phasing
    if t < 3:
        raise ValidationError(f"total_sats must be >= 3, got {t}")
    if not 1 <= p <= t:
        raise ValidationError(f"planes must be in [1, {t}], got {p}")
    if t % p != 0:
        raise ValidationError(f"total_sats ({t}) must be divisible by planes ({p})")
    if not 0 <= f <= p - 1:
        raise ValidationError(f"phasing must be in [0, {p - 1}], got {f}")
    if not math.isfinite(params.altitude_km) or params.altitude_km <= 0:
        raise ValidationError(f"altitude_km must be positive, got {params.altitude_km}")
    if not 0.0 <= params.inclination_deg <= 180.0:
        raise ValidationError(f"inclination_deg must be in [0, 180], got {params.inclination_deg}")
    if not math.isfinite(params.raan_offset_deg):
        raise ValidationError(f"raan_offset_deg must be finite, got {params.raan_offset_deg}")


def plane_raan_deg(params: WalkerParams, plane: int) -> float:
    """RAAN of a plane: offset + p·span/P, span 360° (Delta) or 180° (Star)."""
    spacing = params.walker_type.raan_span_deg / params.planes
    return (params.raan_offset_deg + plane * spacing) % 360.0


def true_anomaly_deg(params: WalkerParams, plane: int, index: int) -> float:
    """In-plane slot plus the inter-plane phase stagger p·F·360/T."""
    nu = (
        index * 360.0 / params.sats_per_plane
        + plane * params.phasing * 360.0 / params.total_sats
    )
    return nu % 360.0


def generate_walker_constellation(
    params: WalkerParams,
    name_prefix: str = "Walker",
) -> tuple[Satellite, ...]:
    """
    Generate every satellite of a Walker pattern.

    Args:
        params: Pattern parameters; validated first.
        name_prefix: Prefix of the generated satellite names.

    Returns:
        Exactly ``total_sats`` satellites ordered plane by plane.

    Raises:
        ValidationError: invalid or non-divisible parameters.
    """
    validate_walker_params(params)
    sma = params.semi_major_axis_km
    satellites: list[Satellite] = []

    for plane in range(params.planes):
        raan = plane_raan_deg(params, plane)
        for index in range(params.sats_per_plane):
            sat_id = plane * params.sats_per_plane + index
            satellites.append(Satellite(
                id=sat_id,
                plane=plane,
                index_in_plane=index,
                name=f"{name_prefix}-Plane{plane + 1}-Sat{index + 1}",
                elements=OrbitalElements(
                    semi_major_axis_km=sma,
                    eccentricity=0.0,
                    inclination_deg=params.inclination_deg,
                    raan_deg=raan,
                    arg_perigee_deg=0.0,
                    true_anomaly_deg=true_anomaly_deg(params, plane, index),
                ),
            ))

    return tuple(satellites)


def coverage_latitude_band(inclination_deg: float) -> tuple[float, float]:
    """Latitude band (min, max) reached by the ground track.

    Symmetric about the equator with bound min(i, 180 − i), so a
    retrograde orbit covers the same band as its prograde mirror.
    """
    bound = min(inclination_deg, 180.0 - inclination_deg)
    return (0.0 - bound, bound)


def walker_notation(params: WalkerParams) -> str:
    return f"{params.inclination_deg:g}:{params.total_sats}/{params.planes}/{params.phasing}"


def compute_constellation_metrics(
    params: WalkerParams,
    sat_mass_kg: float,
) -> ConstellationMetrics:
    """Aggregate metrics of a Walker pattern.

    Raises:
        ValidationError: invalid parameters or non-positive unit mass.
    """
    validate_walker_params(params)
    if not math.isfinite(sat_mass_kg) or sat_mass_kg <= 0:
        raise ValidationError(f"sat_mass_kg must be positive, got {sat_mass_kg}")

    lat_min, lat_max = coverage_latitude_band(params.inclination_deg)
    period_s = orbital_period_s(params.semi_major_axis_km * 1000.0)

    return ConstellationMetrics(
        total_satellites=params.total_sats,
        sats_per_plane=params.sats_per_plane,
        total_mass_kg=sat_mass_kg * params.total_sats,
        orbital_period_min=period_s / 60.0,
        coverage_lat_min_deg=lat_min,
        coverage_lat_max_deg=lat_max,
        raan_spacing_deg=params.walker_type.raan_span_deg / params.planes,
        phase_offset_deg=params.phasing * 360.0 / params.total_sats,
        walker_notation=walker_notation(params),
    )


CONSTELLATION_PRESETS: dict[str, WalkerParams] = {
    "starlink-like": WalkerParams(WalkerType.DELTA, 72, 6, 1, 550.0, 53.0),
    "gps-like": WalkerParams(WalkerType.DELTA, 24, 6, 1, 20200.0, 55.0),
    "iridium-like": WalkerParams(WalkerType.STAR, 66, 6, 2, 780.0, 86.4),
    "small-sso": WalkerParams(WalkerType.DELTA, 12, 4, 1, 500.0, 97.4),
}
