"""Exception hierarchy for startgate.

Probe failures are never raised past the probe runner; these exceptions cover
the places where raising is the contract: invalid probe definitions, settings
that cannot be loaded, and collaborator adapters reporting an unreachable
dependency to the runner.
"""

from __future__ import annotations


class StartgateError(Exception):
    """Base exception for all startgate errors."""


class ProbeDefinitionError(StartgateError, ValueError):
    """A probe was constructed with an invalid shape."""

    def __init__(self, message: str, probe_name: str | None = None) -> None:
        super().__init__(message)
        self.probe_name = probe_name


class ConfigurationError(StartgateError):
    """Settings could not be loaded from the environment."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class DependencyCheckError(StartgateError):
    """A dependency could not be reached during a check."""

    def __init__(self, message: str, dependency: str | None = None) -> None:
        super().__init__(message)
        self.dependency = dependency
