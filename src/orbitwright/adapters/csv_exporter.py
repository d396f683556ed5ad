# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
CSV exporters.

Writes constellation element tables and pass schedules as CSV.
External dependencies (csv, file I/O) are confined to this adapter.
"""
import csv
import logging
from typing import Sequence

from orbitwright.domain.constellation import Satellite
from orbitwright.domain.passes import Pass
from orbitwright.ports.export import PassExporter, SatelliteExporter

logger = logging.getLogger(__name__)

CONSTELLATION_HEADER = [
    'Sat ID', 'Plane', 'Index', 'SMA (km)', 'Ecc', 'Inc (deg)',
    'RAAN (deg)', 'AoP (deg)', 'True Anomaly (deg)',
]

PASS_HEADER = [
    'Station', 'AOS (UTC)', 'LOS (UTC)', 'TCA (UTC)', 'Duration (s)',
    'Max El (deg)', 'AOS Az (deg)', 'LOS Az (deg)', 'Quality',
    'Margin (dB)', 'Data (MB)',
]


def constellation_row(sat: Satellite) -> list:
    """One CSV row; ids, planes and in-plane indices are 1-indexed."""
    el = sat.elements
    return [
        sat.id + 1,
        sat.plane + 1,
        sat.index_in_plane + 1,
        f'{el.semi_major_axis_km:.3f}',
        f'{el.eccentricity:.6f}',
        f'{el.inclination_deg:.4f}',
        f'{el.raan_deg:.4f}',
        f'{el.arg_perigee_deg:.4f}',
        f'{el.true_anomaly_deg:.4f}',
    ]


class CsvConstellationExporter(SatelliteExporter):
    """Exports constellation orbital elements to CSV."""

    def export(self, satellites: Sequence[Satellite], path: str) -> int:
        with open(path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(CONSTELLATION_HEADER)
            for sat in satellites:
                writer.writerow(constellation_row(sat))

        logger.info("Exported %d satellites to %s", len(satellites), path)
        return len(satellites)


class CsvPassExporter(PassExporter):
    """Exports a pass schedule to CSV; link columns are blank when absent."""

    def export_passes(self, passes: Sequence[Pass], path: str) -> int:
        with open(path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(PASS_HEADER)
            for p in passes:
                link = p.link
                writer.writerow([
                    p.station_name,
                    p.aos.isoformat(),
                    p.los.isoformat(),
                    p.tca.isoformat(),
                    f'{p.duration_s:.0f}',
                    f'{p.max_elevation_deg:.2f}',
                    f'{p.aos_azimuth_deg:.2f}',
                    f'{p.los_azimuth_deg:.2f}',
                    p.quality,
                    '' if link is None else f'{link.link_margin_db:.2f}',
                    '' if link is None else f'{link.data_volume_mb:.3f}',
                ])

        logger.info("Exported %d passes to %s", len(passes), path)
        return len(passes)
