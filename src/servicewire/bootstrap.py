from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError
from pydantic_settings import SettingsError

from servicewire.container import Container
from servicewire.exceptions import ConfigurationError, ServiceWireError
from servicewire.settings import BootstrapSettings

logger = logging.getLogger(__name__)

_DESCRIPTION = "Discover services under one or more packages and build a top-level service."


def build_container(settings: BootstrapSettings) -> Container:
    """Create a container scanning every configured root."""
    container = Container(*settings.roots)
    logger.info(
        "Container ready: %d services from %d roots",
        len(container.service_names()),
        len(settings.roots),
    )
    return container


def run(settings: BootstrapSettings, container: Container | None = None) -> Any:
    """Build the configured service and call its entrypoint, if any.

    Exceptions raised by service constructors or by the entrypoint itself
    propagate unchanged.

    Returns:
        The built service, or the entrypoint's return value when one is
        configured.

    Raises:
        ConfigurationError: When no service is configured, or the built
            service has no callable entrypoint of the configured name.

    """
    if settings.service is None:
        msg = "No service configured; pass SERVICE or set SERVICEWIRE_SERVICE."
        raise ConfigurationError(msg)

    container = container if container is not None else build_container(settings)
    service = container.get(settings.service)
    logger.info("Built %s", settings.service)

    if settings.entrypoint is None:
        return service
    if not callable(getattr(type(service), settings.entrypoint, None)):
        msg = f"Service '{settings.service}' has no callable entrypoint '{settings.entrypoint}'."
        raise ConfigurationError(msg)
    entrypoint = getattr(service, settings.entrypoint)
    logger.info("Calling %s.%s()", settings.service, settings.entrypoint)
    return entrypoint()


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="servicewire", description=_DESCRIPTION)
    parser.add_argument(
        "service",
        nargs="?",
        default=None,
        help="Identifier of the service to build (module.QualName).",
    )
    parser.add_argument(
        "--root",
        dest="roots",
        action="append",
        default=None,
        help="Package to scan; repeat for several roots.",
    )
    parser.add_argument(
        "--call",
        dest="entrypoint",
        default=None,
        help="Method to call on the built service, for example 'listen'.",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="Print discovered service identifiers and exit.",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: INFO).")
    return parser.parse_args(argv)


def settings_from_args(args: argparse.Namespace, base: BootstrapSettings | None = None) -> BootstrapSettings:
    """Overlay command-line values on environment settings.

    Raises:
        ConfigurationError: When the ``SERVICEWIRE_*`` environment cannot be
            parsed into settings.

    """
    try:
        settings = base if base is not None else BootstrapSettings()
    except (SettingsError, ValidationError) as exc:
        msg = f"Invalid SERVICEWIRE_* settings: {exc}"
        raise ConfigurationError(msg) from exc
    overrides = {
        key: value
        for key, value in (
            ("roots", args.roots),
            ("service", args.service),
            ("entrypoint", args.entrypoint),
            ("log_level", args.log_level),
        )
        if value is not None
    }
    return settings.model_copy(update=overrides)


def configure_logging(level_name: str) -> None:
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        msg = f"Unknown log level '{level_name}'."
        raise ConfigurationError(msg)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entrypoint.

    Library errors, configuration errors included, are reported on stderr with
    exit status 1. Errors raised by user code propagate with their traceback.
    """
    args = parse_args(argv)

    try:
        settings = settings_from_args(args)
        configure_logging(settings.log_level)
        container = build_container(settings)
        if args.list:
            for name in container.service_names():
                sys.stdout.write(f"{name}\n")
            return 0
        run(settings, container)
    except ServiceWireError as exc:
        logger.error("%s", exc)
        sys.stderr.write(f"servicewire: {exc}\n")
        return 1
    return 0
