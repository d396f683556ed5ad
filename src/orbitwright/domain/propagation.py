# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Trajectory propagation.

Two interchangeable strategies selected by ``PropagationMode``: closed-form
Keplerian motion, and RK4 integration over the force models enabled in a
``PerturbationConfig``. Both produce a ``Trajectory`` of ECI samples.
"""
import bisect
import math
from dataclasses import dataclass, fields, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import Mapping

from orbitwright.domain.anomaly import mean_to_true, true_to_mean
from orbitwright.domain.atmosphere import SolarActivity, parse_solar_activity
from orbitwright.domain.coordinate_frames import sub_satellite_point
from orbitwright.domain.elements import (
    OrbitalElements,
    StateVector,
    elements_to_state,
    validate_elements,
)
from orbitwright.domain.errors import ValidationError
from orbitwright.domain.numerical_propagation import (
    AtmosphericDragForce,
    ForceModel,
    J2Perturbation,
    SolarRadiationPressureForce,
    TrajectorySample,
    TwoBodyGravity,
    ZonalHarmonics,
    effective_step,
    propagate_numerical,
)
from orbitwright.domain.orbital_mechanics import kepler_to_cartesian, mean_motion
from orbitwright.domain.spacecraft import (
    DEFAULT_SPACECRAFT,
    SpacecraftProperties,
    validate_spacecraft,
)
from orbitwright.domain.third_body import LunarThirdBodyForce, SolarThirdBodyForce

DEFAULT_STEP_S = 30.0
DEFAULT_NUM_ORBITS = 10


class PropagationMode(Enum):
    KEPLERIAN = "keplerian"
    NUMERICAL_J2 = "numerical-j2"
    NUMERICAL_FULL = "numerical-full"


@dataclass(frozen=True)
class PerturbationConfig:
    """Independently toggled perturbation sources.

    All toggles off means two-body motion only.
    """
    j2: bool = False
    j3_j6: bool = False
    drag: bool = False
    srp: bool = False
    third_body_sun: bool = False
    third_body_moon: bool = False
    solar_activity: SolarActivity = SolarActivity.MODERATE

    @property
    def enabled(self) -> tuple[str, ...]:
        return tuple(
            f.name for f in fields(self)
            if f.name != "solar_activity" and getattr(self, f.name)
        )


_MODE_DEFAULTS = {
    PropagationMode.KEPLERIAN: PerturbationConfig(),
    PropagationMode.NUMERICAL_J2: PerturbationConfig(j2=True),
    PropagationMode.NUMERICAL_FULL: PerturbationConfig(
        j2=True, j3_j6=True, drag=True, srp=True,
        third_body_sun=True, third_body_moon=True,
    ),
}


def config_for_mode(
    mode: PropagationMode,
    overrides: Mapping[str, object] | None = None,
) -> PerturbationConfig:
    """Default perturbation set for a mode, optionally overridden per field.

    Keplerian mode is always unperturbed and ignores overrides.

    Raises:
        ValidationError: an override names an unknown field.
    """
    config = _MODE_DEFAULTS[mode]
    if mode is PropagationMode.KEPLERIAN or not overrides:
        return config
    known = {f.name for f in fields(PerturbationConfig)}
    unknown = set(overrides) - known
    if unknown:
        raise ValidationError(f"Unknown perturbation fields: {', '.join(sorted(unknown))}")
    values = {
        name: parse_solar_activity(value) if name == "solar_activity" else bool(value)
        for name, value in overrides.items()
    }
    return replace(config, **values)


@dataclass(frozen=True)
class Trajectory:
    """Time-ordered propagation result."""
    samples: tuple[TrajectorySample, ...]
    mode: PropagationMode
    force_model_names: tuple[str, ...]

    @property
    def epoch(self) -> datetime:
        return self.samples[0].time

    @property
    def duration_s(self) -> float:
        return self.samples[-1].offset_s


@dataclass(frozen=True)
class GroundTrackPoint:
    time: datetime
    lat_deg: float
    lon_deg: float
    alt_km: float


def _validate_span(duration_s: float, step_s: float) -> None:
    if not math.isfinite(duration_s) or duration_s <= 0:
        raise ValidationError(f"duration_s must be positive, got {duration_s}")
    if not math.isfinite(step_s) or step_s <= 0:
        raise ValidationError(f"step_s must be positive, got {step_s}")


def _sample_offsets(duration_s: float, step_s: float) -> list[float]:
    h = effective_step(duration_s, step_s)
    n = math.ceil(duration_s / h - 1e-9)
    return [i * h for i in range(n)] + [duration_s]


def propagate_keplerian(
    elements: OrbitalElements,
    epoch: datetime,
    duration_s: float,
    step_s: float = DEFAULT_STEP_S,
) -> Trajectory:
    """Closed-form two-body propagation.

    Mean anomaly advances linearly with mean motion; each sample is
    computed independently so there is no accumulated error.
    """
    validate_elements(elements)
    _validate_span(duration_s, step_s)

    a_m = elements.semi_major_axis_km * 1000.0
    e = elements.eccentricity
    n = mean_motion(a_m)
    m0 = true_to_mean(math.radians(elements.true_anomaly_deg), e)
    i_rad = math.radians(elements.inclination_deg)
    raan = math.radians(elements.raan_deg)
    argp = math.radians(elements.arg_perigee_deg)

    samples = []
    for t in _sample_offsets(duration_s, step_s):
        nu = mean_to_true(m0 + n * t, e)
        pos, vel = kepler_to_cartesian(a_m, e, i_rad, raan, argp, nu)
        samples.append(TrajectorySample(
            time=epoch + timedelta(seconds=t),
            offset_s=t,
            position_eci=(pos[0], pos[1], pos[2]),
            velocity_eci=(vel[0], vel[1], vel[2]),
        ))
    return Trajectory(
        samples=tuple(samples),
        mode=PropagationMode.KEPLERIAN,
        force_model_names=("Keplerian",),
    )


def build_force_models(
    config: PerturbationConfig,
    spacecraft: SpacecraftProperties,
) -> list[ForceModel]:
    """Two-body gravity plus every perturbation enabled in ``config``."""
    models: list[ForceModel] = [TwoBodyGravity()]
    if config.j2:
        models.append(J2Perturbation())
    if config.j3_j6:
        models.append(ZonalHarmonics())
    if config.drag:
        models.append(AtmosphericDragForce(
            spacecraft.ballistic_coefficient, config.solar_activity,
        ))
    if config.srp:
        models.append(SolarRadiationPressureForce(
            spacecraft.reflectivity_coefficient,
            spacecraft.cross_section_m2,
            spacecraft.mass_kg,
        ))
    if config.third_body_sun:
        models.append(SolarThirdBodyForce())
    if config.third_body_moon:
        models.append(LunarThirdBodyForce())
    return models


def propagate_perturbed(
    elements: OrbitalElements,
    epoch: datetime,
    duration_s: float,
    perturbations: PerturbationConfig,
    spacecraft: SpacecraftProperties | None = None,
    step_s: float = DEFAULT_STEP_S,
    mode: PropagationMode = PropagationMode.NUMERICAL_FULL,
) -> Trajectory:
    """RK4 integration of the enabled force models."""
    validate_elements(elements)
    _validate_span(duration_s, step_s)
    sc = spacecraft if spacecraft is not None else DEFAULT_SPACECRAFT
    if perturbations.drag or perturbations.srp:
        validate_spacecraft(sc)

    models = build_force_models(perturbations, sc)
    state = elements_to_state(elements)
    samples = propagate_numerical(
        state.position_eci, state.velocity_eci, epoch, duration_s, step_s, models,
    )
    return Trajectory(
        samples=samples,
        mode=mode,
        force_model_names=tuple(type(m).__name__ for m in models),
    )


def propagate(
    elements: OrbitalElements,
    epoch: datetime,
    duration_s: float,
    mode: PropagationMode = PropagationMode.KEPLERIAN,
    perturbations: PerturbationConfig | None = None,
    spacecraft: SpacecraftProperties | None = None,
    step_s: float = DEFAULT_STEP_S,
) -> Trajectory:
    """Propagate an element set over ``duration_s`` seconds.

    Keplerian mode ignores ``perturbations``. Numerical modes use
    ``perturbations`` when given, otherwise the mode's defaults.
    All input validation happens before the first step.
    """
    if mode is PropagationMode.KEPLERIAN:
        return propagate_keplerian(elements, epoch, duration_s, step_s)
    config = perturbations if perturbations is not None else config_for_mode(mode)
    return propagate_perturbed(
        elements, epoch, duration_s, config,
        spacecraft=spacecraft, step_s=step_s, mode=mode,
    )


def propagate_orbits(
    elements: OrbitalElements,
    epoch: datetime,
    num_orbits: float = DEFAULT_NUM_ORBITS,
    mode: PropagationMode = PropagationMode.KEPLERIAN,
    perturbations: PerturbationConfig | None = None,
    spacecraft: SpacecraftProperties | None = None,
    step_s: float = DEFAULT_STEP_S,
) -> Trajectory:
    """Propagate over a whole number of two-body periods."""
    validate_elements(elements)
    if not num_orbits > 0:
        raise ValidationError(f"num_orbits must be positive, got {num_orbits}")
    return propagate(
        elements, epoch, elements.period_s * num_orbits, mode,
        perturbations=perturbations, spacecraft=spacecraft, step_s=step_s,
    )


def interpolate_trajectory(
    trajectory: Trajectory,
    at: datetime | float,
) -> StateVector:
    """State at an arbitrary time by linear interpolation.

    ``at`` is a datetime or an offset in seconds from the trajectory
    epoch. Times outside the span clamp to the first or last sample.
    """
    samples = trajectory.samples
    offset = (at - trajectory.epoch).total_seconds() if isinstance(at, datetime) else float(at)

    if offset <= samples[0].offset_s:
        s = samples[0]
        return StateVector(s.position_eci, s.velocity_eci)
    if offset >= samples[-1].offset_s:
        s = samples[-1]
        return StateVector(s.position_eci, s.velocity_eci)

    offsets = [s.offset_s for s in samples]
    hi = bisect.bisect_right(offsets, offset)
    p0, p1 = samples[hi - 1], samples[hi]
    frac = (offset - p0.offset_s) / (p1.offset_s - p0.offset_s)

    def lerp(a: tuple[float, float, float], b: tuple[float, float, float]) -> tuple[float, float, float]:
        return (
            a[0] + frac * (b[0] - a[0]),
            a[1] + frac * (b[1] - a[1]),
            a[2] + frac * (b[2] - a[2]),
        )

    return StateVector(
        lerp(p0.position_eci, p1.position_eci),
        lerp(p0.velocity_eci, p1.velocity_eci),
    )


def ground_track(trajectory: Trajectory) -> tuple[GroundTrackPoint, ...]:
    """Sub-satellite points for every trajectory sample."""
    points = []
    for s in trajectory.samples:
        lat, lon, alt_m = sub_satellite_point(s.position_eci, s.time)
        points.append(GroundTrackPoint(s.time, lat, lon, alt_m / 1000.0))
    return tuple(points)
