"""Standard startup probes.

One constructor per dependency kind. Each closes over the configuration or
collaborator it needs and builds any client fresh inside ``check``.
"""

from __future__ import annotations

import httpx

from startgate.core.config import StartgateConfig
from startgate.core.exceptions import DependencyCheckError
from startgate.core.logging_config import StructuredLogger
from startgate.services.database import DatabasePinger
from startgate.services.openrouter import OpenRouterClient
from startgate.services.r2_storage import R2StorageClient
from startgate.startup.probes import Probe

# Constants
MIN_SECRET_LENGTH = 32
CONFIG_PROBE_TIMEOUT = 1.0
DATABASE_PROBE_TIMEOUT = 5.0
EXTERNAL_PROBE_TIMEOUT = 8.0
# Leaves the transport room to fail on its own before the probe deadline.
TRANSPORT_TIMEOUT_MARGIN = 1.0

REQUIRED_ENVIRONMENT_VARIABLES = {
    "DATABASE_URL": "database_url",
    "JWT_SECRET": "jwt_secret",
    "JWT_REFRESH_SECRET": "jwt_refresh_secret",
}


def create_environment_probe(config: StartgateConfig) -> Probe:
    """Required settings must be present and non-blank."""

    async def check() -> bool:
        for env_name, field_name in REQUIRED_ENVIRONMENT_VARIABLES.items():
            value = getattr(config, field_name, None)
            if not value or (isinstance(value, str) and not value.strip()):
                msg = f"Missing required environment variable: {env_name}"
                raise ValueError(msg)
        return True

    return Probe(
        name="environment",
        critical=True,
        timeout=CONFIG_PROBE_TIMEOUT,
        check=check,
    )


def create_jwt_secret_probe(config: StartgateConfig) -> Probe:
    """Both token secrets must be long enough and different from each other."""

    async def check() -> bool:
        if len(config.jwt_secret) < MIN_SECRET_LENGTH:
            msg = f"JWT_SECRET must be at least {MIN_SECRET_LENGTH} characters long"
            raise ValueError(msg)
        if len(config.jwt_refresh_secret) < MIN_SECRET_LENGTH:
            msg = (
                f"JWT_REFRESH_SECRET must be at least {MIN_SECRET_LENGTH} "
                "characters long"
            )
            raise ValueError(msg)
        if config.jwt_secret == config.jwt_refresh_secret:
            msg = "JWT_SECRET and JWT_REFRESH_SECRET must be different"
            raise ValueError(msg)
        return True

    return Probe(
        name="jwt-secrets",
        critical=True,
        timeout=CONFIG_PROBE_TIMEOUT,
        check=check,
    )


def create_database_probe(database: DatabasePinger) -> Probe:
    """Round-trip query against the application database."""
    return Probe(
        name="database",
        critical=True,
        timeout=DATABASE_PROBE_TIMEOUT,
        check=database.ping,
    )


def create_external_service_probe(
    service_name: str,
    url: str,
    critical: bool = False,  # noqa: FBT001, FBT002
    *,
    timeout: float = EXTERNAL_PROBE_TIMEOUT,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Probe:
    """HEAD request against an external service; healthy on any 2xx."""
    transport_timeout = max(timeout - TRANSPORT_TIMEOUT_MARGIN, timeout / 2)

    async def check() -> bool:
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(transport_timeout), transport=transport
            ) as client:
                response = await client.head(url)
        except httpx.HTTPError as e:
            msg = f"External service {service_name} is unreachable: {e!s}"
            raise DependencyCheckError(msg, service_name) from e
        return response.is_success

    return Probe(
        name=f"external-service-{service_name}",
        critical=critical,
        timeout=timeout,
        check=check,
    )


def create_openrouter_probe(
    config: StartgateConfig, logger: StructuredLogger
) -> Probe:
    """LLM provider connectivity with a fresh client per run."""

    async def check() -> bool:
        client = OpenRouterClient(
            config.openrouter_api_key,
            logger=logger.child(component="openrouter-health"),
            site_url=config.site_url,
            site_name=config.site_name,
            base_url=config.openrouter_base_url,
            model=config.openrouter_model,
            timeout=EXTERNAL_PROBE_TIMEOUT - TRANSPORT_TIMEOUT_MARGIN,
        )
        return await client.test_connection()

    return Probe(
        name="openrouter-api",
        critical=True,
        timeout=EXTERNAL_PROBE_TIMEOUT,
        check=check,
    )


def create_r2_probe(config: StartgateConfig, logger: StructuredLogger) -> Probe:
    """Object storage bucket existence with a fresh client per run."""

    async def check() -> bool:
        client = R2StorageClient(
            access_key_id=config.r2_access_key_id,
            secret_access_key=config.r2_secret_access_key,
            bucket_name=config.r2_bucket_name,
            account_id=config.r2_account_id,
            logger=logger.child(component="r2-health"),
            timeout=EXTERNAL_PROBE_TIMEOUT - TRANSPORT_TIMEOUT_MARGIN,
        )
        return await client.test_connection()

    return Probe(
        name="cloudflare-r2",
        critical=True,
        timeout=EXTERNAL_PROBE_TIMEOUT,
        check=check,
    )
