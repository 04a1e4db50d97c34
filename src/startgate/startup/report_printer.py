"""Startgate Validation Report Printer.

Renders a ``ValidationReport`` for a terminal: one line per probe, a
remediation hint per critical failure, and the final verdict.
"""

from __future__ import annotations

import sys
from typing import Any, TextIO

from startgate.startup.error_catalog import StartupErrorCatalog, error_catalog
from startgate.startup.probes import ProbeResult, ProbeStatus, ValidationReport

STATUS_SYMBOLS = {
    ProbeStatus.HEALTHY: "✅",
    ProbeStatus.UNHEALTHY: "❌",
    ProbeStatus.TIMEOUT: "⏱️",
}
STATUS_COLORS = {
    ProbeStatus.HEALTHY: "green",
    ProbeStatus.UNHEALTHY: "red",
    ProbeStatus.TIMEOUT: "yellow",
}


class ValidationReportPrinter:
    """Prints validation reports with optional colors."""

    def __init__(
        self,
        output: TextIO | None = None,
        *,
        enable_colors: bool = True,
        catalog: StartupErrorCatalog | None = None,
        explain: bool = False,
    ) -> None:
        """Initialize report printer.

        Args:
            output: Output stream (defaults to stdout)
            enable_colors: Whether to use colored output on a TTY
            catalog: Error catalog used for remediation hints
            explain: Append full remediation help for each critical failure code
        """
        self.output = output or sys.stdout
        self.enable_colors = (
            enable_colors and hasattr(self.output, "isatty") and self.output.isatty()
        )
        self.catalog = catalog or error_catalog
        self.explain = explain

        self.colors = (
            {
                "reset": "\033[0m",
                "bold": "\033[1m",
                "green": "\033[32m",
                "yellow": "\033[33m",
                "red": "\033[31m",
                "gray": "\033[90m",
            }
            if self.enable_colors
            else dict.fromkeys(["reset", "bold", "green", "yellow", "red", "gray"], "")
        )

    def _colorize(self, text: str, color: str) -> str:
        return f"{self.colors[color]}{text}{self.colors['reset']}"

    def _format_result(self, result: ProbeResult) -> list[str]:
        symbol = STATUS_SYMBOLS[result.status]
        name = self._colorize(result.name, STATUS_COLORS[result.status])
        flag = "critical" if result.critical else "optional"
        duration = self._colorize(f"({result.duration_ms:.0f}ms, {flag})", "gray")

        line = f"  {symbol} {name}: {result.status.value} {duration}"
        lines = [line]
        if result.error:
            lines.append(f"      {self._colorize('Reason:', 'red')} {result.error}")
        return lines

    def create_report_text(
        self, report: ValidationReport, summary: dict[str, Any] | None = None
    ) -> str:
        """Render ``report`` as text; ``summary`` is an optional config summary."""
        lines = [
            self._colorize("Startup Dependency Validation Report", "bold"),
            "=" * 50,
            "",
        ]

        if summary:
            lines.append("Configuration Summary:")
            lines.extend(f"  • {key}: {value}" for key, value in summary.items())
            lines.append("")

        lines.append(f"Dependencies ({len(report.results)}):")
        for result in report.results:
            lines.extend(self._format_result(result))
        lines.extend(
            (
                "",
                f"Healthy: {report.healthy_count}  "
                f"Unhealthy: {report.unhealthy_count}  "
                f"Timeouts: {report.timeout_count}  "
                f"Total: {report.total_duration_ms:.0f}ms",
                "",
            )
        )

        if report.critical_failures:
            lines.append(self._colorize("Critical Failures:", "red"))
            affected: dict[str, list[str]] = {}
            for result in report.results:
                if not result.blocks_startup():
                    continue
                lines.append(f"  • {result.name}: {result.failure_reason()}")
                code = self.catalog.suggest_error_code(result.failure_reason())
                info = self.catalog.get_error_info(code) if code else None
                if info:
                    affected.setdefault(info.code, []).append(result.name)
                    hint = f"{info.code} {info.title}: {info.solutions[0].description}"
                    lines.append(f"    {self._colorize('Hint:', 'yellow')} {hint}")
            if self.explain and affected:
                lines.extend(("", "Remediation:"))
                for code, dependencies in affected.items():
                    lines.extend(
                        ("", self.catalog.format_error_help(code, dependencies))
                    )
            lines.extend(("", self._colorize("🚨 STARTUP BLOCKED", "red")))
        else:
            lines.append(self._colorize("✅ STARTUP CAN PROCEED", "green"))

        return "\n".join(lines)

    def print_report(
        self, report: ValidationReport, summary: dict[str, Any] | None = None
    ) -> None:
        """Write the rendered report to the output stream."""
        print(self.create_report_text(report, summary), file=self.output, flush=True)
