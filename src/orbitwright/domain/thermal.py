# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""One-orbit thermal heat balance.

Single-node Stefan-Boltzmann balance of direct solar, Earth albedo and
Earth IR heating plus internal dissipation against radiation from the
whole bus surface. The orbit is sampled at a fixed angular resolution;
the sunlit state of every sample comes from a cylindrical shadow test.
"""
import math
from dataclasses import dataclass

from orbitwright.domain.eclipse import DEFAULT_ECLIPSE_CENTRE_DEG, orbit_position_sunlit
from orbitwright.domain.errors import ValidationError
from orbitwright.domain.orbital_mechanics import R_EARTH_KM, orbital_period_s
from orbitwright.domain.solar import SOLAR_CONSTANT_W_M2
from orbitwright.domain.spacecraft import BusGeometry, BusSize

STEFAN_BOLTZMANN = 5.670374419e-8  # W/(m²·K⁴)
EARTH_IR_W_M2 = 240.0              # W/m² — Earth infrared emission
EARTH_ALBEDO = 0.3                 # Earth average albedo fraction
SPECIFIC_HEAT_J_KG_K = 900.0       # aluminium
MIN_TEMPERATURE_K = 3.0

_KELVIN = 273.15

HOT_CRITICAL_C = 60.0
HOT_WARNING_C = 50.0
COLD_CRITICAL_C = -20.0
COLD_WARNING_C = -10.0
COLD_CASE_INTERNAL_FACTOR = 0.5


@dataclass(frozen=True)
class SurfaceMaterial:
    """Optical surface properties."""
    name: str
    absorptivity: float  # alpha — solar absorptance (0-1)
    emissivity: float    # epsilon — IR emittance (0-1)


SURFACE_MATERIALS: dict[str, SurfaceMaterial] = {
    "black-anodized": SurfaceMaterial("Black Anodized Aluminum", 0.86, 0.86),
    "solar-cells": SurfaceMaterial("Solar Cells", 0.75, 0.82),
    "white-paint": SurfaceMaterial("White Paint", 0.20, 0.90),
    "bare-aluminum": SurfaceMaterial("Bare Aluminum", 0.15, 0.05),
    "gold-foil": SurfaceMaterial("Gold Foil", 0.25, 0.04),
    "mli": SurfaceMaterial("MLI Blanket", 0.10, 0.03),
}

DEFAULT_MATERIAL = "black-anodized"


@dataclass(frozen=True)
class SteadyStateResult:
    """Equilibrium at a single illumination condition."""
    temperature_k: float
    temperature_c: float
    solar_flux_w: float
    earth_ir_flux_w: float
    albedo_flux_w: float
    internal_flux_w: float
    total_absorbed_w: float


@dataclass(frozen=True)
class ThermalSample:
    """Temperature and absorbed fluxes at one orbital position."""
    position_deg: float
    time_min: float
    temperature_c: float
    solar_flux_w: float
    earth_ir_flux_w: float
    albedo_flux_w: float
    in_sunlight: bool


@dataclass(frozen=True)
class EclipseInterval:
    """Contiguous eclipse arc; ``end_deg`` exceeds 360 when it wraps."""
    start_deg: float
    end_deg: float
    wraps: bool = False


@dataclass(frozen=True)
class ThermalSummary:
    hot_case_c: float
    cold_case_c: float
    hot_case_status: str
    cold_case_status: str
    recommendation: str


def get_material(key: str) -> SurfaceMaterial:
    try:
        return SURFACE_MATERIALS[key]
    except KeyError:
        names = ", ".join(SURFACE_MATERIALS)
        raise ValidationError(f"Unknown surface material {key!r}; expected one of {names}") from None


def _resolve_geometry(geometry: "BusGeometry | BusSize | None") -> BusGeometry:
    if geometry is None:
        return BusSize.U3.geometry
    if isinstance(geometry, BusSize):
        return geometry.geometry
    return geometry


def _validate(material: SurfaceMaterial, altitude_km: float, internal_w: float,
              geometry: BusGeometry) -> None:
    if not 0.0 <= material.absorptivity <= 1.0:
        raise ValidationError(f"absorptivity must be 0-1, got {material.absorptivity}")
    if not 0.0 < material.emissivity <= 1.0:
        raise ValidationError(f"emissivity must be (0,1], got {material.emissivity}")
    if not math.isfinite(altitude_km) or altitude_km <= 0:
        raise ValidationError(f"altitude_km must be positive, got {altitude_km}")
    if not math.isfinite(internal_w) or internal_w < 0:
        raise ValidationError(f"internal power must be >= 0, got {internal_w}")
    if geometry.total_area_m2 <= 0:
        raise ValidationError(f"total_area_m2 must be > 0, got {geometry.total_area_m2}")
    if geometry.sun_facing_area_m2 < 0 or geometry.earth_facing_area_m2 < 0:
        raise ValidationError("facing areas must be >= 0")


def earth_view_factor(altitude_km: float) -> float:
    """F = 1 − √(1 − (Re/(Re+h))²); falls toward zero with altitude."""
    ratio = R_EARTH_KM / (R_EARTH_KM + altitude_km)
    return 1.0 - math.sqrt(1.0 - ratio * ratio)


def _absorbed_fluxes(
    material: SurfaceMaterial,
    view_factor: float,
    in_sunlight: bool,
    geometry: BusGeometry,
) -> tuple[float, float, float]:
    """(solar, earth_ir, albedo) absorbed power in W."""
    solar = (material.absorptivity * SOLAR_CONSTANT_W_M2 * geometry.sun_facing_area_m2
             if in_sunlight else 0.0)
    earth_ir = material.emissivity * EARTH_IR_W_M2 * view_factor * geometry.earth_facing_area_m2
    albedo = (material.absorptivity * SOLAR_CONSTANT_W_M2 * EARTH_ALBEDO * view_factor
              * geometry.earth_facing_area_m2 if in_sunlight else 0.0)
    return solar, earth_ir, albedo


def compute_steady_state(
    material: SurfaceMaterial,
    altitude_km: float,
    in_sunlight: bool,
    internal_w: float = 0.0,
    geometry: "BusGeometry | BusSize | None" = None,
) -> SteadyStateResult:
    """Equilibrium temperature from Q_absorbed = ε·σ·A·T⁴.

    T = (Q / (ε·σ·A))^¼, the single positive real root. Earth IR is
    absorbed in sunlight and eclipse; albedo only in sunlight.
    """
    geom = _resolve_geometry(geometry)
    _validate(material, altitude_km, internal_w, geom)

    solar, earth_ir, albedo = _absorbed_fluxes(
        material, earth_view_factor(altitude_km), in_sunlight, geom,
    )
    total = solar + earth_ir + albedo + internal_w
    temperature_k = (total / (material.emissivity * STEFAN_BOLTZMANN * geom.total_area_m2)) ** 0.25

    return SteadyStateResult(
        temperature_k=temperature_k,
        temperature_c=temperature_k - _KELVIN,
        solar_flux_w=solar,
        earth_ir_flux_w=earth_ir,
        albedo_flux_w=albedo,
        internal_flux_w=internal_w,
        total_absorbed_w=total,
    )


def compute_thermal_profile(
    material: SurfaceMaterial,
    altitude_km: float,
    eclipse_fraction: float,
    internal_power_w: float = 0.0,
    geometry: "BusGeometry | BusSize | None" = None,
    mass_kg: float = 4.0,
    steps: int = 360,
    transient: bool = False,
    eclipse_centre_deg: float = DEFAULT_ECLIPSE_CENTRE_DEG,
) -> tuple[ThermalSample, ...]:
    """Temperature profile over exactly one orbit.

    Samples sit at position i·360/steps for i in [0, steps). By default
    each sample is the instantaneous equilibrium. With ``transient`` the
    bus is a lumped thermal mass (mass·900 J/kg/K) started at the sunlit
    equilibrium and stepped forward in time, clamped at 3 K.

    Args:
        material: Surface optical properties.
        altitude_km: Circular orbit altitude.
        eclipse_fraction: Fraction of the orbit in shadow, [0, 0.5].
        internal_power_w: Internal dissipation.
        geometry: Bus geometry or standard size (default 3U).
        mass_kg: Bus mass, used by the transient mode.
        steps: Number of samples per orbit.
        transient: Integrate thermal inertia instead of equilibrium.
        eclipse_centre_deg: Orbital position at mid-eclipse.

    Raises:
        ValidationError: invalid material, geometry or orbit inputs.
    """
    geom = _resolve_geometry(geometry)
    _validate(material, altitude_km, internal_power_w, geom)
    if not 0.0 <= eclipse_fraction <= 0.5:
        raise ValidationError(f"eclipse_fraction must be in [0, 0.5], got {eclipse_fraction}")
    if not isinstance(steps, int) or steps < 2:
        raise ValidationError(f"steps must be an integer >= 2, got {steps!r}")
    if transient and (not math.isfinite(mass_kg) or mass_kg <= 0):
        raise ValidationError(f"mass_kg must be positive, got {mass_kg}")

    period_s = orbital_period_s((R_EARTH_KM + altitude_km) * 1000.0)
    view_factor = earth_view_factor(altitude_km)
    radiating = material.emissivity * STEFAN_BOLTZMANN * geom.total_area_m2
    dt = period_s / steps
    thermal_mass = mass_kg * SPECIFIC_HEAT_J_KG_K

    temp_k = compute_steady_state(
        material, altitude_km, True, internal_power_w, geom,
    ).temperature_k

    samples: list[ThermalSample] = []
    for i in range(steps):
        position = i * 360.0 / steps
        sunlit = orbit_position_sunlit(position, eclipse_fraction, eclipse_centre_deg)
        solar, earth_ir, albedo = _absorbed_fluxes(material, view_factor, sunlit, geom)
        absorbed = solar + earth_ir + albedo + internal_power_w

        if transient:
            net_w = absorbed - radiating * temp_k**4
            temp_k = max(MIN_TEMPERATURE_K, temp_k + net_w * dt / thermal_mass)
        else:
            temp_k = (absorbed / radiating) ** 0.25

        samples.append(ThermalSample(
            position_deg=position,
            time_min=i * dt / 60.0,
            temperature_c=temp_k - _KELVIN,
            solar_flux_w=solar,
            earth_ir_flux_w=earth_ir,
            albedo_flux_w=albedo,
            in_sunlight=sunlit,
        ))

    return tuple(samples)


def extract_eclipse_intervals(
    samples: "tuple[ThermalSample, ...] | list[ThermalSample]",
) -> tuple[EclipseInterval, ...]:
    """Contiguous eclipse arcs of a one-orbit profile.

    A run ends at the position of the first sunlit sample after it; a run
    still open at the last sample ends at 360°. When the profile both
    starts and ends in eclipse the two partial runs are one eclipse that
    crosses 0°, reported as a single wrapping interval whose end is
    360° plus the leading run's end.
    """
    intervals: list[EclipseInterval] = []
    start: float | None = None
    for s in samples:
        if not s.in_sunlight and start is None:
            start = s.position_deg
        elif s.in_sunlight and start is not None:
            intervals.append(EclipseInterval(start, s.position_deg))
            start = None
    if start is not None:
        intervals.append(EclipseInterval(start, 360.0))

    if (
        len(intervals) >= 2
        and not samples[0].in_sunlight
        and not samples[-1].in_sunlight
    ):
        leading, trailing = intervals[0], intervals[-1]
        merged = EclipseInterval(trailing.start_deg, 360.0 + leading.end_deg, wraps=True)
        intervals = intervals[1:-1] + [merged]

    return tuple(intervals)


def _hot_status(temp_c: float) -> str:
    if temp_c > HOT_CRITICAL_C:
        return "critical"
    if temp_c > HOT_WARNING_C:
        return "warning"
    return "nominal"


def _cold_status(temp_c: float) -> str:
    if temp_c < COLD_CRITICAL_C:
        return "critical"
    if temp_c < COLD_WARNING_C:
        return "warning"
    return "nominal"


def compute_thermal_summary(
    material: SurfaceMaterial,
    altitude_km: float,
    internal_power_w: float = 0.0,
    geometry: "BusGeometry | BusSize | None" = None,
) -> ThermalSummary:
    """Hot case (sunlit) and cold case (eclipse, half dissipation) bounds."""
    hot = compute_steady_state(material, altitude_km, True, internal_power_w, geometry)
    cold = compute_steady_state(
        material, altitude_km, False,
        internal_power_w * COLD_CASE_INTERNAL_FACTOR, geometry,
    )

    recommendations = []
    if cold.temperature_c < COLD_WARNING_C:
        recommendations.append("Consider heater or MLI for cold survival")
    if hot.temperature_c > HOT_WARNING_C:
        recommendations.append("Consider radiator or white paint coating")
    if not recommendations:
        recommendations.append("Thermal environment within typical CubeSat limits")

    return ThermalSummary(
        hot_case_c=hot.temperature_c,
        cold_case_c=cold.temperature_c,
        hot_case_status=_hot_status(hot.temperature_c),
        cold_case_status=_cold_status(cold.temperature_c),
        recommendation=". ".join(recommendations),
    )
