# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Ground-station pass prediction.

The satellite is advanced analytically: mean anomaly at the two-body
mean motion, RAAN and argument of perigee drifting at their J2 secular
rates. Each station samples elevation on a fixed time grid; a pass
opens on the first sample at or above the station's minimum elevation
and closes on the first sample below it.
"""
import math
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Sequence

import numpy as np

from orbitwright.domain.anomaly import mean_to_true, true_to_mean
from orbitwright.domain.coordinate_frames import eci_to_ecef, geodetic_to_ecef, gmst_rad
from orbitwright.domain.elements import OrbitalElements, validate_elements
from orbitwright.domain.errors import ValidationError
from orbitwright.domain.link_budget import CommConfig, PassLinkResult, compute_pass_link_budget
from orbitwright.domain.orbital_mechanics import (
    j2_arg_perigee_rate,
    j2_raan_rate,
    kepler_to_cartesian,
    mean_motion,
)

SECONDS_PER_DAY = 86400.0
MIN_PASS_DURATION_S = 60.0
LINK_EFFICIENCY = 0.7

_QUALITY_GRADES = ((60.0, "A"), (30.0, "B"), (10.0, "C"))


@dataclass(frozen=True)
class GroundStation:
    """A ground station with its operational elevation mask."""
    name: str
    lat_deg: float
    lon_deg: float
    alt_m: float = 0.0
    min_elevation_deg: float = 10.0


@dataclass(frozen=True)
class Observation:
    """Topocentric observation: azimuth, elevation, slant range."""
    azimuth_deg: float
    elevation_deg: float
    slant_range_m: float


@dataclass(frozen=True)
class TrackPoint:
    offset_s: float
    azimuth_deg: float
    elevation_deg: float


@dataclass(frozen=True)
class Pass:
    """One visibility window of the satellite over a station."""
    station_name: str
    aos: datetime
    los: datetime
    tca: datetime
    max_elevation_deg: float
    aos_azimuth_deg: float
    los_azimuth_deg: float
    duration_s: float
    quality: str
    track: tuple[TrackPoint, ...] = ()
    link: PassLinkResult | None = None

    @property
    def data_volume_mb(self) -> float | None:
        return None if self.link is None else self.link.data_volume_mb


@dataclass(frozen=True)
class PassMetrics:
    passes_per_day: float
    avg_pass_duration_min: float
    max_gap_hours: float
    daily_contact_min: float
    daily_data_mb: float
    total_contact_min: float
    total_passes: int


@dataclass(frozen=True)
class ContactGap:
    start: datetime
    end: datetime
    duration_hours: float
    is_longest: bool = False


def _ecef_to_enu(
    range_ecef: np.ndarray,
    lat_rad: float,
    lon_rad: float,
) -> tuple[float, float, float]:
    sin_lat, cos_lat = math.sin(lat_rad), math.cos(lat_rad)
    sin_lon, cos_lon = math.sin(lon_rad), math.cos(lon_rad)
    rot = np.array([
        [-sin_lon, cos_lon, 0.0],
        [-sin_lat * cos_lon, -sin_lat * sin_lon, cos_lat],
        [cos_lat * cos_lon, cos_lat * sin_lon, sin_lat],
    ])
    enu = rot @ range_ecef
    return float(enu[0]), float(enu[1]), float(enu[2])


def compute_observation(
    station: GroundStation,
    satellite_ecef: tuple[float, float, float],
) -> Observation:
    """
    Topocentric azimuth, elevation and slant range of a satellite.

    Args:
        station: Ground station with geodetic coordinates.
        satellite_ecef: Satellite ECEF position (m).

    Returns:
        Observation with azimuth in [0, 360) measured from north through
        east, elevation in [-90, 90] and slant range in meters.
    """
    station_ecef = geodetic_to_ecef(station.lat_deg, station.lon_deg, station.alt_m)
    range_vec = np.asarray(satellite_ecef, dtype=float) - np.asarray(station_ecef)
    e, n, u = _ecef_to_enu(
        range_vec, math.radians(station.lat_deg), math.radians(station.lon_deg),
    )
    slant = math.sqrt(e * e + n * n + u * u)
    return Observation(
        azimuth_deg=math.degrees(math.atan2(e, n)) % 360.0,
        elevation_deg=math.degrees(math.atan2(u, math.hypot(e, n))),
        slant_range_m=slant,
    )


def pass_quality(max_elevation_deg: float) -> str:
    """Grade A (≥60°), B (≥30°), C (≥10°), otherwise D."""
    for threshold, grade in _QUALITY_GRADES:
        if max_elevation_deg >= threshold:
            return grade
    return "D"


class _SecularOrbit:
    """Keplerian motion with J2 secular drift of RAAN and perigee."""

    def __init__(self, elements: OrbitalElements) -> None:
        self._a = elements.semi_major_axis_km * 1000.0
        self._e = elements.eccentricity
        self._i = math.radians(elements.inclination_deg)
        self._raan0 = math.radians(elements.raan_deg)
        self._argp0 = math.radians(elements.arg_perigee_deg)
        self._m0 = true_to_mean(math.radians(elements.true_anomaly_deg), self._e)
        self._n = mean_motion(self._a)
        self._raan_dot = j2_raan_rate(self._n, self._a, self._e, self._i)
        self._argp_dot = j2_arg_perigee_rate(self._n, self._a, self._e, self._i)

    def position_eci(self, t_s: float) -> tuple[float, float, float]:
        nu = mean_to_true(self._m0 + self._n * t_s, self._e)
        pos, _ = kepler_to_cartesian(
            self._a, self._e, self._i,
            self._raan0 + self._raan_dot * t_s,
            self._argp0 + self._argp_dot * t_s,
            nu,
        )
        return (pos[0], pos[1], pos[2])


def _validate_station(station: GroundStation) -> None:
    if not -90.0 <= station.lat_deg <= 90.0:
        raise ValidationError(f"{station.name}: lat_deg must be in [-90, 90], got {station.lat_deg}")
    if not -90.0 <= station.min_elevation_deg < 90.0:
        raise ValidationError(
            f"{station.name}: min_elevation_deg must be in [-90, 90), got {station.min_elevation_deg}"
        )


def predict_passes(
    elements: OrbitalElements,
    epoch: datetime,
    stations: Sequence[GroundStation],
    duration_days: float,
    step_s: float = 30.0,
    record_track: bool = False,
) -> tuple[Pass, ...]:
    """
    Predict passes over each station within ``duration_days`` of ``epoch``.

    LOS is the first sample below the mask, so durations are multiples
    of ``step_s``. Passes shorter than 60 s are dropped, as is a pass
    still open when the window ends.

    Returns:
        Passes from all stations sorted by AOS.

    Raises:
        ValidationError: invalid elements, station, duration or step.
    """
    validate_elements(elements)
    if not math.isfinite(duration_days) or duration_days <= 0:
        raise ValidationError(f"duration_days must be positive, got {duration_days}")
    if not math.isfinite(step_s) or step_s <= 0:
        raise ValidationError(f"step_s must be positive, got {step_s}")
    for station in stations:
        _validate_station(station)

    orbit = _SecularOrbit(elements)
    total_s = duration_days * SECONDS_PER_DAY
    n_samples = int(math.floor(total_s / step_s + 1e-9)) + 1

    samples = []
    for k in range(n_samples):
        t = k * step_s
        pos_ecef, _ = eci_to_ecef(
            orbit.position_eci(t), (0.0, 0.0, 0.0),
            gmst_rad(epoch + timedelta(seconds=t)),
        )
        samples.append((t, pos_ecef))

    passes = []
    for station in stations:
        passes.extend(_station_passes(station, epoch, samples, record_track))

    passes.sort(key=lambda p: p.aos)
    return tuple(passes)


def _station_passes(
    station: GroundStation,
    epoch: datetime,
    samples: list[tuple[float, tuple[float, float, float]]],
    record_track: bool,
) -> list[Pass]:
    passes = []
    in_pass = False
    start_t = start_az = last_az = max_el = max_el_t = 0.0
    track: list[TrackPoint] = []

    for t, pos_ecef in samples:
        obs = compute_observation(station, pos_ecef)
        el, az = obs.elevation_deg, obs.azimuth_deg
        if el >= station.min_elevation_deg:
            if not in_pass:
                in_pass = True
                start_t, start_az = t, az
                max_el, max_el_t = el, t
                track = []
            if el > max_el:
                max_el, max_el_t = el, t
            last_az = az
            if record_track:
                track.append(TrackPoint(t - start_t, az, el))
        elif in_pass:
            in_pass = False
            duration = t - start_t
            if duration >= MIN_PASS_DURATION_S:
                passes.append(Pass(
                    station_name=station.name,
                    aos=epoch + timedelta(seconds=start_t),
                    los=epoch + timedelta(seconds=t),
                    tca=epoch + timedelta(seconds=max_el_t),
                    max_elevation_deg=max_el,
                    aos_azimuth_deg=start_az,
                    los_azimuth_deg=last_az,
                    duration_s=duration,
                    quality=pass_quality(max_el),
                    track=tuple(track),
                ))
    return passes


def enrich_passes_with_link_budget(
    passes: Sequence[Pass],
    comm: CommConfig,
    altitude_km: float,
) -> tuple[Pass, ...]:
    """Attach the peak-elevation link budget to each pass."""
    return tuple(
        replace(p, link=compute_pass_link_budget(
            comm, altitude_km, min(90.0, max(0.0, p.max_elevation_deg)), p.duration_s,
        ))
        for p in passes
    )


def _uncovered_spans(passes: Sequence[Pass]) -> list[tuple[datetime, datetime]]:
    """(start, end) spans between AOS-ordered passes that no pass covers.

    A pass nested inside a longer one (another station) does not end the
    contact; coverage runs to the latest LOS seen so far.
    """
    ordered = sorted(passes, key=lambda p: p.aos)
    spans = []
    covered_until = ordered[0].los
    for p in ordered[1:]:
        if p.aos > covered_until:
            spans.append((covered_until, p.aos))
        covered_until = max(covered_until, p.los)
    return spans


def compute_pass_metrics(
    passes: Sequence[Pass],
    duration_days: float,
    data_rate_kbps: float,
) -> PassMetrics:
    """
    Contact statistics over a prediction window.

    Daily data volume sums the per-pass link volumes when any pass carries
    a link budget; otherwise it assumes ``data_rate_kbps`` at 70% link
    efficiency over the daily contact time.
    """
    if not passes:
        return PassMetrics(
            passes_per_day=0.0,
            avg_pass_duration_min=0.0,
            max_gap_hours=duration_days * 24.0,
            daily_contact_min=0.0,
            daily_data_mb=0.0,
            total_contact_min=0.0,
            total_passes=0,
        )

    days = max(1.0, duration_days)
    total_contact_s = sum(p.duration_s for p in passes)
    daily_contact_s = total_contact_s / days

    max_gap_s = max(
        ((end - start).total_seconds() for start, end in _uncovered_spans(passes)),
        default=0.0,
    )

    if any(p.link is not None for p in passes):
        daily_data_mb = sum(p.data_volume_mb or 0.0 for p in passes) / days
    else:
        bits = data_rate_kbps * 1000.0 * daily_contact_s * LINK_EFFICIENCY
        daily_data_mb = bits / 8.0 / (1024.0 * 1024.0)

    return PassMetrics(
        passes_per_day=len(passes) / days,
        avg_pass_duration_min=total_contact_s / len(passes) / 60.0,
        max_gap_hours=max_gap_s / 3600.0,
        daily_contact_min=daily_contact_s / 60.0,
        daily_data_mb=daily_data_mb,
        total_contact_min=total_contact_s / 60.0,
        total_passes=len(passes),
    )


def compute_contact_gaps(passes: Sequence[Pass]) -> tuple[ContactGap, ...]:
    """Positive gaps between consecutive passes, the longest one flagged."""
    if len(passes) < 2:
        return ()
    gaps = [
        ContactGap(start, end, (end - start).total_seconds() / 3600.0)
        for start, end in _uncovered_spans(passes)
    ]
    if not gaps:
        return ()
    longest = max(range(len(gaps)), key=lambda k: (gaps[k].duration_hours, -k))
    gaps[longest] = replace(gaps[longest], is_longest=True)
    return tuple(gaps)
