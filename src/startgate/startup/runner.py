"""Startgate Probe Runner.

Runs one probe against its own deadline and folds every outcome (pass,
``False``, exception, deadline expiry) into a ``ProbeResult``.
"""

from __future__ import annotations

import asyncio
import time

from startgate.core.logging_config import StructuredLogger, get_logger
from startgate.startup.probes import (
    DEFAULT_PROBE_TIMEOUT,
    Probe,
    ProbeResult,
    ProbeStatus,
)

RETURNED_FALSE_MESSAGE = "Health check returned false"
TIMEOUT_MESSAGE = "Health check timeout"


def _describe_exception(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


class ProbeRunner:
    """Executes a single probe with a bounded deadline. Never raises."""

    def __init__(
        self,
        logger: StructuredLogger | None = None,
        *,
        default_timeout: float = DEFAULT_PROBE_TIMEOUT,
    ) -> None:
        """Initialize probe runner.

        Args:
            logger: Structured logger for probe events
            default_timeout: Timeout in seconds for probes that declare none
        """
        if default_timeout <= 0:
            msg = f"default_timeout must be positive, got {default_timeout}"
            raise ValueError(msg)
        self.logger = logger or get_logger(__name__)
        self.default_timeout = default_timeout

    async def run(self, probe: Probe) -> ProbeResult:
        """Run ``probe`` and return its result.

        On deadline expiry the check is cancelled; whatever it does afterwards
        cannot reach the returned result.
        """
        timeout = probe.effective_timeout(self.default_timeout)
        log = self.logger.child(dependency=probe.name)
        log.debug(
            "Checking dependency health",
            extra={"critical": probe.critical, "timeout_s": timeout},
        )

        start_time = time.monotonic()
        status = ProbeStatus.HEALTHY
        error: str | None = None

        try:
            async with asyncio.timeout(timeout) as deadline:
                outcome = await probe.check()
        except TimeoutError as e:
            if deadline.expired():
                status, error = ProbeStatus.TIMEOUT, TIMEOUT_MESSAGE
            else:
                # The check's own timeout, not ours: it answered, unhealthily.
                status, error = ProbeStatus.UNHEALTHY, _describe_exception(e)
        except asyncio.CancelledError as e:
            task = asyncio.current_task()
            if task is not None and task.cancelling():
                raise
            # Cancellation raised inside the check while this run was not cancelled.
            status, error = ProbeStatus.UNHEALTHY, _describe_exception(e)
        except Exception as e:  # noqa: BLE001 - Probe failures become results
            status, error = ProbeStatus.UNHEALTHY, _describe_exception(e)
        else:
            if deadline.expired():
                # The check swallowed its cancellation; the deadline still wins.
                status, error = ProbeStatus.TIMEOUT, TIMEOUT_MESSAGE
            elif outcome is False:
                status, error = ProbeStatus.UNHEALTHY, RETURNED_FALSE_MESSAGE
            elif outcome is not True:
                status = ProbeStatus.UNHEALTHY
                error = (
                    "Health check returned non-boolean value: "
                    f"{type(outcome).__name__}"
                )

        duration_ms = (time.monotonic() - start_time) * 1000
        result = ProbeResult(
            name=probe.name,
            status=status,
            critical=probe.critical,
            duration_ms=duration_ms,
            error=error,
        )

        fields = {"duration_ms": round(duration_ms, 1), "critical": probe.critical}
        if result.is_healthy():
            log.info("Dependency is healthy", extra=fields)
        else:
            log.error(
                "Dependency check %s: %s",
                status.value,
                error,
                extra={**fields, "error": error},
            )
        return result
