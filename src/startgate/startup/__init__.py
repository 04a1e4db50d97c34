"""Startgate Startup System.

One-shot dependency validation run before a service binds its listener.
"""

from __future__ import annotations

from startgate.startup.coordinator import ValidationCoordinator
from startgate.startup.probes import Probe, ProbeResult, ProbeStatus, ValidationReport
from startgate.startup.runner import ProbeRunner

__all__ = [
    "Probe",
    "ProbeResult",
    "ProbeRunner",
    "ProbeStatus",
    "ValidationCoordinator",
    "ValidationReport",
]
