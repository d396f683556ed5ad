# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interfaces for tabular export.

Adapters implement these to write generated constellations and
predicted passes to files.
"""
from typing import Protocol, Sequence, runtime_checkable

from orbitwright.domain.constellation import Satellite
from orbitwright.domain.passes import Pass


@runtime_checkable
class SatelliteExporter(Protocol):
    """Port for exporting constellation members to file."""

    def export(self, satellites: Sequence[Satellite], path: str) -> int:
        """
        Export the orbital elements of each satellite.

        Args:
            satellites: Generated constellation members.
            path: Output file path.

        Returns:
            Number of satellites exported.
        """
        ...


@runtime_checkable
class PassExporter(Protocol):
    """Port for exporting predicted passes to file."""

    def export_passes(self, passes: Sequence[Pass], path: str) -> int:
        """Export one row per pass; returns the number written."""
        ...
