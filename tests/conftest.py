"""Shared test fixtures for the startgate test suite."""

from __future__ import annotations

from collections.abc import Callable, Iterator
import os
from unittest.mock import patch

import pytest

from startgate.core.config import StartgateConfig
from startgate.core.logging_config import StructuredLogger, get_logger
from tests.helpers import VALID_ENV


@pytest.fixture
def clean_env() -> Iterator[None]:
    """Run with an empty process environment."""
    with patch.dict(os.environ, {}, clear=True):
        yield


@pytest.fixture
def make_config(clean_env: None) -> Callable[..., StartgateConfig]:
    """Build a config from the valid baseline environment plus overrides.

    Overrides use environment variable names, e.g. ``JWT_SECRET="short"``.
    """

    def _make(**overrides: str) -> StartgateConfig:
        env = {**VALID_ENV, **overrides}
        with patch.dict(os.environ, env, clear=True):
            return StartgateConfig(_env_file=None)

    return _make


@pytest.fixture
def test_logger() -> StructuredLogger:
    return get_logger("startgate.tests")
