# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Spacecraft physical properties and bus geometry.

Mass, drag and radiation-pressure properties used by the propagator and
lifetime model, plus the surface-area breakdown the thermal model needs.
"""
import math
from dataclasses import dataclass
from enum import Enum

from orbitwright.domain.errors import ValidationError


@dataclass(frozen=True)
class BusGeometry:
    """Surface areas relevant to radiative heat exchange (m²)."""
    total_area_m2: float
    sun_facing_area_m2: float
    earth_facing_area_m2: float


class BusSize(Enum):
    """Standard CubeSat form factors."""
    U1 = "1U"
    U1_5 = "1.5U"
    U2 = "2U"
    U3 = "3U"
    U6 = "6U"
    U12 = "12U"

    @property
    def geometry(self) -> BusGeometry:
        return _CUBESAT_GEOMETRY[self]


# 10 cm unit faces; 6U is 10x20x30 cm, 12U is 20x20x30 cm.
_CUBESAT_GEOMETRY: dict[BusSize, BusGeometry] = {
    BusSize.U1: BusGeometry(6 * 0.01, 0.01, 0.01),
    BusSize.U1_5: BusGeometry(2 * 0.01 + 4 * 0.015, 0.01, 0.01),
    BusSize.U2: BusGeometry(2 * 0.01 + 4 * 0.02, 0.01, 0.01),
    BusSize.U3: BusGeometry(2 * 0.01 + 4 * 0.03, 0.01, 0.01),
    BusSize.U6: BusGeometry(2 * 0.02 + 2 * 0.06 + 2 * 0.03, 0.02, 0.02),
    BusSize.U12: BusGeometry(2 * 0.04 + 2 * 0.06 + 2 * 0.06, 0.04, 0.04),
}


def parse_bus_size(value: "str | BusSize") -> BusSize:
    """Accept an enum member or a label such as ``"3U"``."""
    if isinstance(value, BusSize):
        return value
    label = str(value).strip().upper()
    for size in BusSize:
        if size.value == label:
            return size
    labels = ", ".join(s.value for s in BusSize)
    raise ValidationError(f"Unknown bus size {value!r}; expected one of {labels}")


def geometry_for_cube(edge_m: float) -> BusGeometry:
    """Geometry of a cube with the given edge length (m)."""
    if not edge_m > 0:
        raise ValidationError(f"edge_m must be > 0, got {edge_m}")
    face = edge_m * edge_m
    return BusGeometry(
        total_area_m2=6.0 * face,
        sun_facing_area_m2=face,
        earth_facing_area_m2=face,
    )


@dataclass(frozen=True)
class SpacecraftProperties:
    """Spacecraft mass and aerodynamic/optical properties."""
    mass_kg: float
    cross_section_m2: float
    drag_coefficient: float = 2.2
    reflectivity_coefficient: float = 1.2
    size: BusSize = BusSize.U3

    @property
    def ballistic_coefficient(self) -> float:
        """B = Cd·A/m (m²/kg)."""
        return self.drag_coefficient * self.cross_section_m2 / self.mass_kg

    @property
    def area_to_mass(self) -> float:
        return self.cross_section_m2 / self.mass_kg

    @property
    def geometry(self) -> BusGeometry:
        return self.size.geometry


def validate_spacecraft(props: SpacecraftProperties) -> None:
    """Raise ValidationError for non-positive or non-finite properties."""
    fields = {
        "mass_kg": props.mass_kg,
        "cross_section_m2": props.cross_section_m2,
        "drag_coefficient": props.drag_coefficient,
    }
    for name, value in fields.items():
        if not math.isfinite(value) or value <= 0:
            raise ValidationError(f"{name} must be a positive finite number, got {value}")
    if not math.isfinite(props.reflectivity_coefficient) or props.reflectivity_coefficient < 0:
        raise ValidationError(
            f"reflectivity_coefficient must be >= 0, got {props.reflectivity_coefficient}"
        )


# Typical 3U CubeSat
DEFAULT_SPACECRAFT = SpacecraftProperties(mass_kg=4.0, cross_section_m2=0.03)
