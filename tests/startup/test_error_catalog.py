"""Tests for the startup error catalog."""

from __future__ import annotations

import pytest

from startgate.startup.error_catalog import (
    ErrorCategory,
    ErrorSeverity,
    StartupErrorCatalog,
    error_catalog,
)


class TestStartupErrorCatalog:
    """Test error catalog functionality."""

    def setup_method(self) -> None:
        """Set up test fixtures."""
        self.catalog = StartupErrorCatalog()

    def test_catalog_initialization(self) -> None:
        assert set(self.catalog.errors) == {
            "CONFIG_001",
            "CONFIG_002",
            "NET_001",
            "NET_002",
            "RES_001",
            "CRED_001",
        }

    def test_get_error_info(self) -> None:
        error_info = self.catalog.get_error_info("CONFIG_001")

        assert error_info is not None
        assert error_info.code == "CONFIG_001"
        assert error_info.category == ErrorCategory.CONFIGURATION
        assert error_info.severity == ErrorSeverity.CRITICAL
        assert error_info.solutions

    def test_get_nonexistent_error(self) -> None:
        assert self.catalog.get_error_info("NONEXISTENT_001") is None

    @pytest.mark.parametrize(
        ("reason", "expected_code"),
        [
            ("Missing required environment variable: DATABASE_URL", "CONFIG_001"),
            ("JWT_SECRET must be at least 32 characters long", "CONFIG_002"),
            ("JWT_SECRET and JWT_REFRESH_SECRET must be different", "CONFIG_002"),
            ("Health check timeout", "NET_001"),
            ("timeout", "NET_001"),
            ("R2 error (NoSuchBucket): The specified bucket does not exist", "RES_001"),
            ("OpenRouter returned HTTP 401", "CRED_001"),
            ("R2 error (403): Forbidden", "CRED_001"),
            ("External service auth is unreachable: connection refused", "NET_002"),
            ("Health check returned false", None),
        ],
    )
    def test_suggest_error_code(self, reason: str, expected_code: str | None) -> None:
        assert self.catalog.suggest_error_code(reason) == expected_code

    def test_format_error_help(self) -> None:
        help_text = self.catalog.format_error_help("CONFIG_002", ["jwt-secrets"])

        assert help_text.startswith(
            "[CONFIG_002] Weak or Reused Token Secret (configuration, critical)"
        )
        assert "  Affected: jwt-secrets" in help_text
        assert "  Likely causes:" in help_text
        assert "  Fix: Generate two independent strong secrets" in help_text
        assert "    2. Set JWT_SECRET and JWT_REFRESH_SECRET to different values" in help_text
        assert "See also: CONFIG_001 Missing Required Environment Variable" in help_text

    def test_format_error_help_without_dependencies(self) -> None:
        help_text = self.catalog.format_error_help("RES_001")

        assert "Affected:" not in help_text
        assert "See also:" not in help_text

    def test_format_unknown_error(self) -> None:
        assert self.catalog.format_error_help("NOPE") == "Unknown error code: NOPE"

    def test_global_catalog(self) -> None:
        assert isinstance(error_catalog, StartupErrorCatalog)
        assert error_catalog.get_error_info("NET_001") is not None
