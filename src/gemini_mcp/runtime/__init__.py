"""Runtime module for subprocess management and stream pumping.

This module provides isolated process execution with reliable termination
and concurrent stdout/stderr line reading.
"""

from __future__ import annotations

from .process_runner import ProcessRunner, ProcessSpec, pump_streams

__all__ = [
    "ProcessRunner",
    "ProcessSpec",
    "pump_streams",
]
