"""Global pytest configuration for logging setup.

Keeps caplog able to see startgate records regardless of what an earlier test
did to the logger tree (``setup_logging`` turns propagation off).
"""

import logging

import pytest

LOGGERS_TO_CONFIGURE = [
    "startgate",
    "startgate.startup",
    "startgate.services",
    "startgate.core",
]


@pytest.fixture(autouse=True)
def setup_logging() -> None:
    """Ensure startgate loggers propagate to the root logger at DEBUG."""
    for logger_name in LOGGERS_TO_CONFIGURE:
        logger = logging.getLogger(logger_name)
        logger.setLevel(logging.DEBUG)
        logger.propagate = True

    logging.getLogger().setLevel(logging.DEBUG)


@pytest.fixture(autouse=True)
def configure_caplog(caplog: pytest.LogCaptureFixture) -> None:
    """Capture DEBUG records from all startgate modules."""
    caplog.set_level(logging.DEBUG)
    caplog.set_level(logging.DEBUG, logger="startgate")
