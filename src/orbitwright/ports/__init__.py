# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interfaces for mission file I/O.

Adapters implement these to handle different file formats.
"""
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class MissionReader(Protocol):
    """Port for reading a mission description."""

    def read_mission(self, path: str) -> dict[str, Any]:
        """Read and parse a mission file."""
        ...


@runtime_checkable
class ResultWriter(Protocol):
    """Port for writing analysis results."""

    def write_result(self, result: dict[str, Any], path: str) -> None:
        """Write a result document to an output file."""
        ...
