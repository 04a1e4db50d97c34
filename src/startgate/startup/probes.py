"""Startgate probe model.

A probe is one named, independently timed dependency check. Running it yields
exactly one ``ProbeResult``; a run over many probes yields one
``ValidationReport``.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import StrEnum
import math
from typing import Any

from startgate.core.exceptions import ProbeDefinitionError

DEFAULT_PROBE_TIMEOUT = 10.0

ProbeCheck = Callable[[], Awaitable[bool]]


class ProbeStatus(StrEnum):
    """Outcome of a single probe."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class Probe:
    """A named dependency check.

    ``check`` resolves ``True`` when the dependency is healthy, ``False`` when
    it answered but is not usable, and raises when something unexpected
    happened. ``timeout`` is in seconds; ``None`` means the runner default.
    """

    name: str
    check: ProbeCheck = field(repr=False)
    critical: bool = True
    timeout: float | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            msg = "Probe name must be a non-empty string"
            raise ProbeDefinitionError(msg)
        if not isinstance(self.critical, bool):
            msg = f"Probe '{self.name}': critical must be a bool"
            raise ProbeDefinitionError(msg, self.name)
        if not callable(self.check):
            msg = f"Probe '{self.name}': check must be callable"
            raise ProbeDefinitionError(msg, self.name)
        if self.timeout is not None:
            if isinstance(self.timeout, bool) or not isinstance(
                self.timeout, int | float
            ):
                msg = f"Probe '{self.name}': timeout must be a number of seconds"
                raise ProbeDefinitionError(msg, self.name)
            if not math.isfinite(self.timeout) or self.timeout <= 0:
                msg = f"Probe '{self.name}': timeout must be positive, got {self.timeout}"
                raise ProbeDefinitionError(msg, self.name)

    def effective_timeout(self, default: float = DEFAULT_PROBE_TIMEOUT) -> float:
        """Timeout in seconds, falling back to ``default``."""
        return float(self.timeout) if self.timeout is not None else default


@dataclass(frozen=True)
class ProbeResult:
    """Result of running one probe."""

    name: str
    status: ProbeStatus
    critical: bool
    duration_ms: float
    error: str | None = None

    def is_healthy(self) -> bool:
        """Check if the probe passed."""
        return self.status == ProbeStatus.HEALTHY

    def blocks_startup(self) -> bool:
        """A critical probe that did not pass blocks startup."""
        return self.critical and not self.is_healthy()

    def failure_reason(self) -> str:
        """Reason shown in reports: the error, or the bare status."""
        return self.error or self.status.value

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "status": self.status.value,
            "critical": self.critical,
            "duration_ms": round(self.duration_ms, 3),
        }
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass(frozen=True)
class ValidationReport:
    """Aggregated verdict of one validation run.

    ``results`` follows probe input order. ``success`` is true exactly when
    ``critical_failures`` is empty.
    """

    results: tuple[ProbeResult, ...]
    critical_failures: tuple[str, ...]
    total_duration_ms: float = 0.0

    @classmethod
    def from_results(
        cls, results: list[ProbeResult], total_duration_ms: float = 0.0
    ) -> ValidationReport:
        """Build a report, deriving the critical failures from ``results``."""
        critical_failures = tuple(
            f"{result.name}: {result.failure_reason()}"
            for result in results
            if result.blocks_startup()
        )
        return cls(
            results=tuple(results),
            critical_failures=critical_failures,
            total_duration_ms=total_duration_ms,
        )

    @property
    def success(self) -> bool:
        return not self.critical_failures

    def _count(self, status: ProbeStatus) -> int:
        return sum(1 for result in self.results if result.status == status)

    @property
    def healthy_count(self) -> int:
        return self._count(ProbeStatus.HEALTHY)

    @property
    def unhealthy_count(self) -> int:
        return self._count(ProbeStatus.UNHEALTHY)

    @property
    def timeout_count(self) -> int:
        return self._count(ProbeStatus.TIMEOUT)

    def get_result(self, name: str) -> ProbeResult | None:
        """First result with ``name``, if any."""
        return next((r for r in self.results if r.name == name), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "results": [result.to_dict() for result in self.results],
            "critical_failures": list(self.critical_failures),
            "total_duration_ms": round(self.total_duration_ms, 3),
        }
