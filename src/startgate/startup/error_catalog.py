"""Startgate Startup Error Catalog.

Catalog of the ways a startup validation run fails, with remediation steps an
operator can follow without reproducing the run.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum


class ErrorCategory(StrEnum):
    """Error categories for organization."""

    CONFIGURATION = "configuration"
    CREDENTIALS = "credentials"
    NETWORKING = "networking"
    RESOURCES = "resources"


class ErrorSeverity(StrEnum):
    """Error severity levels."""

    CRITICAL = "critical"  # Prevents startup
    HIGH = "high"  # Blocks startup when the probe is critical


@dataclass
class ErrorSolution:
    """Suggested solution for an error."""

    description: str
    steps: list[str]


@dataclass
class StartupErrorInfo:
    """Comprehensive error information."""

    code: str
    title: str
    description: str
    category: ErrorCategory
    severity: ErrorSeverity
    solutions: list[ErrorSolution]
    common_causes: list[str]
    related_errors: list[str] = field(default_factory=list)


class StartupErrorCatalog:
    """Catalog of startup errors with solutions."""

    def __init__(self) -> None:
        self.errors: dict[str, StartupErrorInfo] = self._build_error_catalog()

    def _build_error_catalog(self) -> dict[str, StartupErrorInfo]:
        errors = {}

        errors["CONFIG_001"] = StartupErrorInfo(
            code="CONFIG_001",
            title="Missing Required Environment Variable",
            description="A required environment variable is not set or is blank.",
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.CRITICAL,
            common_causes=[
                "Environment variable not set in deployment",
                "Typo in environment variable name",
                "Variable set but value is empty or whitespace",
            ],
            solutions=[
                ErrorSolution(
                    description="Set the missing environment variable",
                    steps=[
                        "Check the variable name in the failure reason",
                        "Set the variable in the deployment or in .env",
                        "Restart the service",
                    ],
                ),
            ],
            related_errors=["CONFIG_002"],
        )

        errors["CONFIG_002"] = StartupErrorInfo(
            code="CONFIG_002",
            title="Weak or Reused Token Secret",
            description=(
                "A token signing secret is shorter than 32 characters or both "
                "secrets share the same value."
            ),
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.CRITICAL,
            common_causes=[
                "Placeholder secret copied from an example file",
                "Access and refresh secrets set from the same source",
            ],
            solutions=[
                ErrorSolution(
                    description="Generate two independent strong secrets",
                    steps=[
                        "Generate each secret separately, e.g. "
                        "'python -c \"import secrets; print(secrets.token_urlsafe(48))\"'",
                        "Set JWT_SECRET and JWT_REFRESH_SECRET to different values",
                        "Restart the service",
                    ],
                ),
            ],
            related_errors=["CONFIG_001"],
        )

        errors["NET_001"] = StartupErrorInfo(
            code="NET_001",
            title="Dependency Did Not Answer In Time",
            description="A dependency check exceeded its timeout.",
            category=ErrorCategory.NETWORKING,
            severity=ErrorSeverity.HIGH,
            common_causes=[
                "Dependency is down or overloaded",
                "Firewall silently dropping packets",
                "DNS resolution hanging",
            ],
            solutions=[
                ErrorSolution(
                    description="Verify the dependency answers from this host",
                    steps=[
                        "Reach the dependency from the same network (curl, psql)",
                        "Check firewall and security group rules",
                        "Raise STARTUP_PROBE_TIMEOUT only if the dependency is slow but healthy",
                    ],
                ),
            ],
            related_errors=["NET_002"],
        )

        errors["NET_002"] = StartupErrorInfo(
            code="NET_002",
            title="Dependency Unreachable",
            description="A connection to a dependency could not be established.",
            category=ErrorCategory.NETWORKING,
            severity=ErrorSeverity.HIGH,
            common_causes=[
                "Wrong host, port or URL",
                "Dependency not running",
                "TLS or proxy misconfiguration",
            ],
            solutions=[
                ErrorSolution(
                    description="Check the dependency address and status",
                    steps=[
                        "Compare the configured URL with the dependency's address",
                        "Confirm the dependency is running",
                        "Check outbound proxy and TLS settings",
                    ],
                ),
            ],
            related_errors=["NET_001"],
        )

        errors["RES_001"] = StartupErrorInfo(
            code="RES_001",
            title="Resource Not Found",
            description="A required bucket or other resource does not exist.",
            category=ErrorCategory.RESOURCES,
            severity=ErrorSeverity.HIGH,
            common_causes=[
                "Bucket not created in this account",
                "Bucket name typo",
                "Wrong account ID",
            ],
            solutions=[
                ErrorSolution(
                    description="Create or reference the correct resource",
                    steps=[
                        "Check R2_BUCKET_NAME and R2_ACCOUNT_ID",
                        "Create the bucket if it is missing",
                    ],
                ),
            ],
        )

        errors["CRED_001"] = StartupErrorInfo(
            code="CRED_001",
            title="Credentials Rejected",
            description="A dependency rejected the configured credentials.",
            category=ErrorCategory.CREDENTIALS,
            severity=ErrorSeverity.HIGH,
            common_causes=[
                "Expired or revoked API key",
                "Access key without permission on the bucket",
            ],
            solutions=[
                ErrorSolution(
                    description="Rotate and re-deploy the credentials",
                    steps=[
                        "Issue a new key in the provider's console",
                        "Update the environment variable",
                        "Restart the service",
                    ],
                ),
            ],
        )

        return errors

    def get_error_info(self, error_code: str) -> StartupErrorInfo | None:
        """Get error information by code."""
        return self.errors.get(error_code)

    def suggest_error_code(self, error_message: str) -> str | None:
        """Suggest error code based on a failure reason."""
        error_message_lower = error_message.lower()

        if "missing required environment variable" in error_message_lower:
            return "CONFIG_001"
        if "secret" in error_message_lower and (
            "characters long" in error_message_lower
            or "must be different" in error_message_lower
        ):
            return "CONFIG_002"
        if "timeout" in error_message_lower or "timed out" in error_message_lower:
            return "NET_001"
        if "not found" in error_message_lower or "nosuchbucket" in error_message_lower:
            return "RES_001"
        if (
            "unauthorized" in error_message_lower
            or "forbidden" in error_message_lower
            or "credentials" in error_message_lower
            or "http 401" in error_message_lower
            or "http 403" in error_message_lower
        ):
            return "CRED_001"
        if "unreachable" in error_message_lower:
            return "NET_002"
        return None

    def format_error_help(
        self, error_code: str, dependencies: Sequence[str] = ()
    ) -> str:
        """Render remediation help for ``error_code``.

        ``dependencies`` names the probes that failed with this code.
        """
        info = self.get_error_info(error_code)
        if info is None:
            return f"Unknown error code: {error_code}"

        lines = [
            f"[{info.code}] {info.title} "
            f"({info.category.value}, {info.severity.value})",
            f"  {info.description}",
        ]
        if dependencies:
            lines.append(f"  Affected: {', '.join(dependencies)}")

        lines.append("  Likely causes:")
        lines.extend(f"    - {cause}" for cause in info.common_causes)
        for solution in info.solutions:
            lines.append(f"  Fix: {solution.description}")
            lines.extend(
                f"    {number}. {step}"
                for number, step in enumerate(solution.steps, 1)
            )

        related = [
            self.errors[code] for code in info.related_errors if code in self.errors
        ]
        if related:
            lines.append(
                "  See also: " + ", ".join(f"{r.code} {r.title}" for r in related)
            )
        return "\n".join(lines)


# Global error catalog instance
error_catalog = StartupErrorCatalog()
