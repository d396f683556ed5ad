# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
JSON mission file I/O adapter.

Reads a mission description into engine input records and writes
analysis results. A mission file looks like::

    {
      "epoch": "2026-03-20T00:00:00Z",
      "orbit": {"altitude_km": 500, "inclination_deg": 97.4},
      "spacecraft": {"mass_kg": 4.0, "cross_section_m2": 0.03, "size": "3U"},
      "solar_activity": "moderate",
      "constellation": {"preset": "small-sso"},
      "ground_stations": [{"name": "Svalbard", "lat_deg": 78.23, "lon_deg": 15.39}],
      "comm": {"preset": "CubeSat UHF"},
      "thermal": {"material": "black-anodized", "internal_power_w": 2.0}
    }

Only ``orbit`` is required; every other section falls back to defaults.
"""
import dataclasses
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from orbitwright.domain.atmosphere import SolarActivity, parse_solar_activity
from orbitwright.domain.constellation import CONSTELLATION_PRESETS, WalkerParams, WalkerType
from orbitwright.domain.coordinate_frames import as_utc
from orbitwright.domain.elements import OrbitalElements, circular_elements
from orbitwright.domain.errors import ValidationError
from orbitwright.domain.link_budget import (
    COMM_PRESETS,
    CommConfig,
    FrequencyBand,
    Modulation,
)
from orbitwright.domain.passes import GroundStation
from orbitwright.domain.spacecraft import (
    DEFAULT_SPACECRAFT,
    SpacecraftProperties,
    parse_bus_size,
)
from orbitwright.domain.thermal import DEFAULT_MATERIAL
from orbitwright.ports import MissionReader, ResultWriter


@dataclass(frozen=True)
class MissionDescription:
    """Engine inputs assembled from a mission file."""
    epoch: datetime
    elements: OrbitalElements
    spacecraft: SpacecraftProperties = DEFAULT_SPACECRAFT
    solar_activity: SolarActivity = SolarActivity.MODERATE
    walker: WalkerParams | None = None
    ground_stations: tuple[GroundStation, ...] = ()
    comm: CommConfig = field(default_factory=CommConfig)
    material: str = DEFAULT_MATERIAL
    internal_power_w: float = 0.0


class JsonMissionReader(MissionReader):
    """Reads mission descriptions from JSON files."""

    def read_mission(self, path: str) -> dict[str, Any]:
        with open(path, encoding='utf-8') as f:
            return json.load(f)


class JsonResultWriter(ResultWriter):
    """Writes analysis results to JSON files."""

    def write_result(self, result: dict[str, Any], path: str) -> None:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(to_jsonable(result), f, indent=2, ensure_ascii=False)


def to_jsonable(value: Any) -> Any:
    """Dataclasses, enums, datetimes and tuples to JSON-compatible values."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, float) and value == float('inf'):
        return None
    return value


def _require(data: dict, key: str, section: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValidationError(f"{section}: missing required field '{key}'") from None


def _enum_value(enum_cls: type[Enum], value: Any, section: str) -> Any:
    try:
        return enum_cls(value)
    except ValueError:
        names = ", ".join(str(m.value) for m in enum_cls)
        raise ValidationError(f"{section}: unknown value {value!r}; expected one of {names}") from None


def parse_epoch(text: str | None) -> datetime:
    """ISO 8601 epoch; a trailing 'Z' is accepted. Defaults to now (UTC)."""
    if text is None:
        return datetime.now(timezone.utc).replace(microsecond=0)
    try:
        return as_utc(datetime.fromisoformat(text.replace('Z', '+00:00')))
    except ValueError:
        raise ValidationError(f"epoch: cannot parse {text!r} as ISO 8601") from None


def elements_from_dict(data: dict) -> OrbitalElements:
    """Full element set, or a circular orbit from ``altitude_km``."""
    if 'semi_major_axis_km' in data:
        return OrbitalElements(
            semi_major_axis_km=float(data['semi_major_axis_km']),
            eccentricity=float(data.get('eccentricity', 0.0)),
            inclination_deg=float(_require(data, 'inclination_deg', 'orbit')),
            raan_deg=float(data.get('raan_deg', 0.0)),
            arg_perigee_deg=float(data.get('arg_perigee_deg', 0.0)),
            true_anomaly_deg=float(data.get('true_anomaly_deg', 0.0)),
        )
    return circular_elements(
        altitude_km=float(_require(data, 'altitude_km', 'orbit')),
        inclination_deg=float(_require(data, 'inclination_deg', 'orbit')),
        raan_deg=float(data.get('raan_deg', 0.0)),
        true_anomaly_deg=float(data.get('true_anomaly_deg', 0.0)),
    )


def spacecraft_from_dict(data: dict) -> SpacecraftProperties:
    d = DEFAULT_SPACECRAFT
    return SpacecraftProperties(
        mass_kg=float(data.get('mass_kg', d.mass_kg)),
        cross_section_m2=float(data.get('cross_section_m2', d.cross_section_m2)),
        drag_coefficient=float(data.get('drag_coefficient', d.drag_coefficient)),
        reflectivity_coefficient=float(
            data.get('reflectivity_coefficient', d.reflectivity_coefficient)
        ),
        size=parse_bus_size(data.get('size', d.size)),
    )


def walker_from_dict(data: dict) -> WalkerParams:
    """A named preset, optionally overridden field by field, or explicit fields."""
    base: dict[str, Any] = {}
    if 'preset' in data:
        try:
            base = dataclasses.asdict(CONSTELLATION_PRESETS[data['preset']])
        except KeyError:
            names = ", ".join(CONSTELLATION_PRESETS)
            raise ValidationError(
                f"constellation: unknown preset {data['preset']!r}; expected one of {names}"
            ) from None
    merged = {**base, **{k: v for k, v in data.items() if k != 'preset'}}
    walker_type = merged.get('walker_type', WalkerType.DELTA)
    if not isinstance(walker_type, WalkerType):
        walker_type = _enum_value(WalkerType, str(walker_type).lower(), 'constellation')
    return WalkerParams(
        walker_type=walker_type,
        total_sats=_require(merged, 'total_sats', 'constellation'),
        planes=_require(merged, 'planes', 'constellation'),
        phasing=merged.get('phasing', 0),
        altitude_km=float(_require(merged, 'altitude_km', 'constellation')),
        inclination_deg=float(_require(merged, 'inclination_deg', 'constellation')),
        raan_offset_deg=float(merged.get('raan_offset_deg', 0.0)),
    )


def station_from_dict(data: dict) -> GroundStation:
    return GroundStation(
        name=str(_require(data, 'name', 'ground_stations')),
        lat_deg=float(_require(data, 'lat_deg', 'ground_stations')),
        lon_deg=float(_require(data, 'lon_deg', 'ground_stations')),
        alt_m=float(data.get('alt_m', 0.0)),
        min_elevation_deg=float(data.get('min_elevation_deg', 10.0)),
    )


def comm_from_dict(data: dict) -> CommConfig:
    """A named preset (default ``CubeSat UHF``) with field overrides."""
    preset = data.get('preset', 'CubeSat UHF')
    try:
        base = COMM_PRESETS[preset]
    except KeyError:
        names = ", ".join(COMM_PRESETS)
        raise ValidationError(f"comm: unknown preset {preset!r}; expected one of {names}") from None
    overrides: dict[str, Any] = {}
    for f in dataclasses.fields(CommConfig):
        if f.name not in data:
            continue
        value = data[f.name]
        if f.name == 'frequency_band':
            value = _enum_value(FrequencyBand, value, 'comm')
        elif f.name == 'modulation':
            value = _enum_value(Modulation, value, 'comm')
        else:
            value = float(value)
        overrides[f.name] = value
    return dataclasses.replace(base, **overrides)


def mission_from_dict(data: dict) -> MissionDescription:
    """Assemble a MissionDescription; raises ValidationError on bad fields."""
    thermal = data.get('thermal', {})
    walker = data.get('constellation')
    return MissionDescription(
        epoch=parse_epoch(data.get('epoch')),
        elements=elements_from_dict(_require(data, 'orbit', 'mission')),
        spacecraft=spacecraft_from_dict(data.get('spacecraft', {})),
        solar_activity=parse_solar_activity(data.get('solar_activity', 'moderate')),
        walker=None if walker is None else walker_from_dict(walker),
        ground_stations=tuple(station_from_dict(s) for s in data.get('ground_stations', [])),
        comm=comm_from_dict(data.get('comm', {})),
        material=str(thermal.get('material', DEFAULT_MATERIAL)),
        internal_power_w=float(thermal.get('internal_power_w', 0.0)),
    )


def load_mission(path: str, reader: MissionReader | None = None) -> MissionDescription:
    """Read and assemble a mission file. File errors propagate."""
    reader = reader or JsonMissionReader()
    return mission_from_dict(reader.read_mission(path))
