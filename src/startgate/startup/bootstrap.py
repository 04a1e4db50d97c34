"""Startgate Bootstrap.

Builds the standard probe set from configuration, runs it, and turns the
verdict into a process decision: serve, or exit non-zero before any listener
is bound. Also hosts the ``startgate`` command-line entry point.
"""

from __future__ import annotations

import argparse
import asyncio
from collections.abc import Awaitable, Callable, Collection
import functools
import json
import logging
import sys

import uvicorn

from startgate.core.config import StartgateConfig, load_config
from startgate.core.exceptions import ConfigurationError
from startgate.core.logging_config import StructuredLogger, get_logger, setup_logging
from startgate.services.database import DatabasePinger, PostgresDatabase
from startgate.startup.coordinator import ValidationCoordinator
from startgate.startup.probes import Probe, ValidationReport
from startgate.startup.report_printer import ValidationReportPrinter
from startgate.startup.standard_probes import (
    create_database_probe,
    create_environment_probe,
    create_external_service_probe,
    create_jwt_secret_probe,
    create_openrouter_probe,
    create_r2_probe,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

ServeHook = Callable[[], Awaitable[None]]


def build_startup_probes(
    config: StartgateConfig,
    database: DatabasePinger,
    logger: StructuredLogger,
) -> list[Probe]:
    """Standard probe set, in reporting order."""
    probes = [
        create_environment_probe(config),
        create_jwt_secret_probe(config),
        create_database_probe(database),
        create_openrouter_probe(config, logger),
        create_r2_probe(config, logger),
    ]
    probes.extend(
        create_external_service_probe(service.name, service.url, service.critical)
        for service in config.external_services
    )
    return probes


def _without_skipped(
    probes: list[Probe], skip_probes: Collection[str], log: StructuredLogger
) -> list[Probe]:
    if not skip_probes:
        return probes

    known = {probe.name for probe in probes}
    for name in sorted(set(skip_probes) - known):
        log.warning("Unknown probe in skip list: %s", name)
    for name in sorted(set(skip_probes) & known):
        log.info("Skipping dependency check: %s", name)
    return [probe for probe in probes if probe.name not in skip_probes]


async def perform_startup_validation(
    config: StartgateConfig,
    database: DatabasePinger,
    logger: StructuredLogger,
    *,
    skip_probes: Collection[str] = (),
) -> ValidationReport:
    """Run the standard probe set and return the report."""
    probes = _without_skipped(
        build_startup_probes(config, database, logger), skip_probes, logger
    )
    coordinator = ValidationCoordinator(logger, default_timeout=config.probe_timeout)
    return await coordinator.validate_all(probes)


async def run_startup_gate(
    config: StartgateConfig,
    logger: StructuredLogger,
    *,
    serve: ServeHook | None = None,
    database: DatabasePinger | None = None,
    skip_probes: Collection[str] = (),
) -> tuple[int, ValidationReport]:
    """Validate dependencies, then serve only if the verdict allows it.

    Returns:
        Tuple of (exit status, report). ``serve`` is never awaited when the
        report is not successful.
    """
    owned_database: PostgresDatabase | None = None
    if database is None:
        owned_database = PostgresDatabase(
            config.database_url,
            min_size=config.db_pool_min,
            max_size=config.db_pool_max,
        )
        database = owned_database

    logger.info("Performing startup dependency validation")
    try:
        report = await perform_startup_validation(
            config, database, logger, skip_probes=skip_probes
        )
    finally:
        if owned_database is not None:
            await owned_database.close()

    if not report.success:
        logger.error(
            "STARTUP FAILED: critical dependencies are not available, "
            "no listener was bound",
            extra={"critical_failures": list(report.critical_failures)},
        )
        return EXIT_FAILURE, report

    logger.info(
        "All critical dependencies validated successfully",
        extra={
            "dependencies_checked": len(report.results),
            "healthy_dependencies": report.healthy_count,
        },
    )
    if serve is not None:
        await serve()
    return EXIT_OK, report


async def serve_uvicorn(
    app_path: str, config: StartgateConfig, host: str = "127.0.0.1"
) -> None:
    """Serve an ASGI application given as ``module:attribute``."""
    server = uvicorn.Server(
        uvicorn.Config(app_path, host=host, port=config.port, log_config=None)
    )
    logger.info("Starting HTTP server on %s:%d", host, config.port)
    await server.serve()


# CLI entry point functions


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="startgate", description="Startup dependency validation"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate dependencies and print the report without serving",
    )
    parser.add_argument(
        "--app",
        help="ASGI application (module:attribute) to serve when validation passes",
    )
    parser.add_argument(
        "--host", default="127.0.0.1", help="Host to bind when serving --app"
    )
    parser.add_argument(
        "--skip", nargs="*", default=[], metavar="NAME", help="Probes to skip"
    )
    parser.add_argument(
        "--json", action="store_true", help="Print the report as JSON"
    )
    parser.add_argument(
        "--explain",
        action="store_true",
        help="Print the report with remediation help for each critical failure",
    )
    return parser


async def _run_cli(args: argparse.Namespace, config: StartgateConfig) -> int:
    gate_logger = get_logger("startgate", environment=config.environment.value)

    serve: ServeHook | None = None
    if args.app and not args.dry_run:
        serve = functools.partial(serve_uvicorn, args.app, config, args.host)

    exit_code, report = await run_startup_gate(
        config, gate_logger, serve=serve, skip_probes=set(args.skip)
    )

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))  # noqa: T201
    elif args.dry_run or args.explain:
        ValidationReportPrinter(explain=args.explain).print_report(
            report, config.get_startup_summary()
        )
    return exit_code


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = _build_parser().parse_args(argv)

    setup_logging()
    try:
        config = load_config()
    except ConfigurationError:
        logger.critical("Configuration validation failed - startup aborted")
        return EXIT_FAILURE
    setup_logging(config.log_level.value)

    try:
        return asyncio.run(_run_cli(args, config))
    except KeyboardInterrupt:
        print("\n❌ Startup validation cancelled")  # noqa: T201
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
