"""Tests for the validation report printer."""

from __future__ import annotations

import io

from startgate.startup.probes import ProbeResult, ProbeStatus, ValidationReport
from startgate.startup.report_printer import ValidationReportPrinter


def _failed_report() -> ValidationReport:
    return ValidationReport.from_results(
        [
            ProbeResult("environment", ProbeStatus.HEALTHY, True, 0.2),
            ProbeResult(
                "jwt-secrets",
                ProbeStatus.UNHEALTHY,
                True,
                0.1,
                "JWT_SECRET must be at least 32 characters long",
            ),
            ProbeResult(
                "database", ProbeStatus.TIMEOUT, True, 5000.0, "Health check timeout"
            ),
            ProbeResult(
                "external-service-docs",
                ProbeStatus.UNHEALTHY,
                False,
                12.0,
                "Health check returned false",
            ),
        ],
        total_duration_ms=5001.0,
    )


class TestValidationReportPrinter:
    """Test report rendering."""

    def setup_method(self) -> None:
        """Set up test fixtures."""
        self.output = io.StringIO()
        self.printer = ValidationReportPrinter(self.output)

    def test_colors_disabled_for_non_tty(self) -> None:
        assert self.printer.enable_colors is False
        assert "\033[" not in self.printer.create_report_text(_failed_report())

    def test_successful_report(self) -> None:
        report = ValidationReport.from_results(
            [ProbeResult("database", ProbeStatus.HEALTHY, True, 3.0)],
            total_duration_ms=3.0,
        )

        text = self.printer.create_report_text(report)

        assert "Startup Dependency Validation Report" in text
        assert "Dependencies (1):" in text
        assert "database: healthy (3ms, critical)" in text
        assert "STARTUP CAN PROCEED" in text
        assert "Critical Failures:" not in text

    def test_failed_report_lists_reasons_and_hints(self) -> None:
        text = self.printer.create_report_text(_failed_report())

        assert "Healthy: 1  Unhealthy: 2  Timeouts: 1  Total: 5001ms" in text
        assert "Reason: JWT_SECRET must be at least 32 characters long" in text
        assert "  • jwt-secrets: JWT_SECRET must be at least 32 characters long" in text
        assert "Hint: CONFIG_002" in text
        assert "Hint: NET_001" in text
        assert "STARTUP BLOCKED" in text

    def test_optional_failure_not_in_critical_section(self) -> None:
        text = self.printer.create_report_text(_failed_report())
        critical_section = text.split("Critical Failures:")[1]

        assert "external-service-docs" not in critical_section
        assert "external-service-docs: unhealthy (12ms, optional)" in text

    def test_summary_section(self) -> None:
        text = self.printer.create_report_text(
            _failed_report(), {"environment": "testing", "port": 3000}
        )

        assert "Configuration Summary:" in text
        assert "  • environment: testing" in text

    def test_print_report_writes_to_output(self) -> None:
        self.printer.print_report(_failed_report())
        assert "STARTUP BLOCKED" in self.output.getvalue()

    def test_hints_only_without_explain(self) -> None:
        text = self.printer.create_report_text(_failed_report())
        assert "Remediation:" not in text

    def test_explain_appends_help_per_code(self) -> None:
        printer = ValidationReportPrinter(self.output, explain=True)

        text = printer.create_report_text(_failed_report())
        remediation = text.split("Remediation:")[1]

        assert "[CONFIG_002] Weak or Reused Token Secret" in remediation
        assert "  Affected: jwt-secrets" in remediation
        assert "[NET_001] Dependency Did Not Answer In Time" in remediation
        assert "  Affected: database" in remediation
        assert remediation.index("[CONFIG_002]") < remediation.index("STARTUP BLOCKED")

    def test_explain_on_successful_report_adds_nothing(self) -> None:
        printer = ValidationReportPrinter(self.output, explain=True)
        report = ValidationReport.from_results(
            [ProbeResult("database", ProbeStatus.HEALTHY, True, 3.0)]
        )

        assert "Remediation:" not in printer.create_report_text(report)
