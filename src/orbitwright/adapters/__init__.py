# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Adapters for mission file I/O and tabular export.

External dependencies (json, csv, file I/O) are confined to this layer.
"""
from orbitwright.adapters.csv_exporter import CsvConstellationExporter, CsvPassExporter
from orbitwright.adapters.json_io import (
    JsonMissionReader,
    JsonResultWriter,
    MissionDescription,
    load_mission,
)

__all__ = [
    "CsvConstellationExporter",
    "CsvPassExporter",
    "JsonMissionReader",
    "JsonResultWriter",
    "MissionDescription",
    "load_mission",
]
