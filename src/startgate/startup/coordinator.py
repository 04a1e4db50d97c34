"""Startgate Validation Coordinator.

Fans a set of probes out concurrently, waits for every one of them, and turns
the results into a single ``ValidationReport``. The coordinator never decides
what happens to the process; that is the bootstrap's job.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
import time

from startgate.core.logging_config import StructuredLogger, get_logger
from startgate.startup.probes import DEFAULT_PROBE_TIMEOUT, Probe, ValidationReport
from startgate.startup.runner import ProbeRunner


class ValidationCoordinator:
    """Runs all probes of a validation run and renders the verdict."""

    def __init__(
        self,
        logger: StructuredLogger | None = None,
        *,
        default_timeout: float = DEFAULT_PROBE_TIMEOUT,
        runner: ProbeRunner | None = None,
    ) -> None:
        """Initialize validation coordinator.

        Args:
            logger: Structured logger; the coordinator logs under a
                ``startup-validation`` component
            default_timeout: Timeout in seconds for probes that declare none
            runner: Probe runner (creates default if not provided)
        """
        base_logger = logger or get_logger(__name__)
        self.logger = base_logger.child(component="startup-validation")
        self.runner = runner or ProbeRunner(
            self.logger, default_timeout=default_timeout
        )

    async def validate_all(self, probes: Sequence[Probe]) -> ValidationReport:
        """Run every probe concurrently and return the aggregated report.

        All probes run to completion or timeout even when an early one has
        already failed, so the report is always complete.
        """
        self.logger.info(
            "Starting dependency validation",
            extra={"total_dependencies": len(probes)},
        )
        start_time = time.monotonic()

        results = await asyncio.gather(*(self.runner.run(probe) for probe in probes))

        total_duration_ms = (time.monotonic() - start_time) * 1000
        report = ValidationReport.from_results(list(results), total_duration_ms)

        summary = {
            "total_duration_ms": round(total_duration_ms, 1),
            "healthy": report.healthy_count,
            "unhealthy": report.unhealthy_count,
            "timeouts": report.timeout_count,
        }
        if report.success:
            self.logger.info(
                "All critical dependencies are healthy - startup can proceed",
                extra={**summary, "critical_failures": 0},
            )
        else:
            self.logger.fatal(
                "Critical dependencies failed - startup aborted: %s",
                "; ".join(report.critical_failures),
                extra={**summary, "critical_failures": list(report.critical_failures)},
            )
        return report
