"""Tests for the startgate probe model."""

from __future__ import annotations

import pytest

from startgate.core.exceptions import ProbeDefinitionError
from startgate.startup.probes import (
    DEFAULT_PROBE_TIMEOUT,
    Probe,
    ProbeResult,
    ProbeStatus,
    ValidationReport,
)


async def _ok() -> bool:
    return True


class TestProbeDefinition:
    """Test probe construction rules."""

    def test_defaults(self) -> None:
        probe = Probe(name="database", check=_ok)

        assert probe.critical is True
        assert probe.timeout is None
        assert probe.effective_timeout() == DEFAULT_PROBE_TIMEOUT
        assert probe.effective_timeout(3.0) == 3.0

    def test_explicit_timeout_wins_over_default(self) -> None:
        probe = Probe(name="database", check=_ok, timeout=0.5)
        assert probe.effective_timeout(30.0) == 0.5

    @pytest.mark.parametrize("timeout", [0, 0.0, -1, -0.001, float("inf"), float("nan")])
    def test_rejects_non_positive_or_non_finite_timeout(self, timeout: float) -> None:
        with pytest.raises(ProbeDefinitionError, match="timeout must be positive"):
            Probe(name="database", check=_ok, timeout=timeout)

    def test_rejects_non_numeric_timeout(self) -> None:
        with pytest.raises(ProbeDefinitionError, match="number of seconds"):
            Probe(name="database", check=_ok, timeout="5")  # type: ignore[arg-type]

    def test_rejects_bool_timeout(self) -> None:
        with pytest.raises(ProbeDefinitionError):
            Probe(name="database", check=_ok, timeout=True)

    @pytest.mark.parametrize("name", ["", "   "])
    def test_rejects_blank_name(self, name: str) -> None:
        with pytest.raises(ProbeDefinitionError, match="name"):
            Probe(name=name, check=_ok)

    def test_rejects_non_callable_check(self) -> None:
        with pytest.raises(ProbeDefinitionError, match="callable"):
            Probe(name="database", check=True)  # type: ignore[arg-type]

    def test_rejects_non_bool_critical(self) -> None:
        with pytest.raises(ProbeDefinitionError, match="critical"):
            Probe(name="database", check=_ok, critical="yes")  # type: ignore[arg-type]

    def test_definition_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            Probe(name="database", check=_ok, timeout=0)

    def test_probe_is_immutable(self) -> None:
        probe = Probe(name="database", check=_ok)
        with pytest.raises(AttributeError):
            probe.name = "other"  # type: ignore[misc]


class TestValidationReport:
    """Test report aggregation rules."""

    def test_success_iff_no_critical_failures(self) -> None:
        report = ValidationReport.from_results(
            [
                ProbeResult("database", ProbeStatus.HEALTHY, True, 3.0),
                ProbeResult(
                    "external-service-docs",
                    ProbeStatus.TIMEOUT,
                    False,
                    8000.0,
                    "Health check timeout",
                ),
            ]
        )

        assert report.success is True
        assert report.critical_failures == ()
        assert report.timeout_count == 1

    def test_critical_failure_formatting(self) -> None:
        report = ValidationReport.from_results(
            [
                ProbeResult(
                    "jwt-secrets",
                    ProbeStatus.UNHEALTHY,
                    True,
                    0.1,
                    "JWT_SECRET must be at least 32 characters long",
                ),
                ProbeResult("database", ProbeStatus.TIMEOUT, True, 5000.0),
            ]
        )

        assert report.success is False
        assert report.critical_failures == (
            "jwt-secrets: JWT_SECRET must be at least 32 characters long",
            "database: timeout",
        )

    def test_empty_report_is_successful(self) -> None:
        report = ValidationReport.from_results([])
        assert report.success is True
        assert report.results == ()

    def test_to_dict(self) -> None:
        report = ValidationReport.from_results(
            [
                ProbeResult("database", ProbeStatus.HEALTHY, True, 1.23456),
                ProbeResult(
                    "cloudflare-r2",
                    ProbeStatus.UNHEALTHY,
                    True,
                    2.0,
                    "Health check returned false",
                ),
            ],
            total_duration_ms=4.5,
        )

        data = report.to_dict()

        assert data["success"] is False
        assert data["critical_failures"] == [
            "cloudflare-r2: Health check returned false"
        ]
        assert data["results"][0] == {
            "name": "database",
            "status": "healthy",
            "critical": True,
            "duration_ms": 1.235,
        }
        assert "error" not in data["results"][0]
        assert data["results"][1]["error"] == "Health check returned false"

    def test_get_result(self) -> None:
        report = ValidationReport.from_results(
            [ProbeResult("database", ProbeStatus.HEALTHY, True, 1.0)]
        )
        assert report.get_result("database") is report.results[0]
        assert report.get_result("missing") is None
