"""
Process start-up for the logging pipeline.

Builds the sinks the settings ask for, routes them all at the root category,
and installs the registry as the process registry. A backend whose URL or DSN
is missing is not registered at all.
"""

from __future__ import annotations

import atexit
from typing import Any, Optional

import httpx

from logtrail.config import Settings, settings as default_settings
from logtrail.observability.sentry import init_sentry

from .delivery import HttpDelivery
from .exceptions import ConfigurationError
from .interceptors import configure_structlog, install_exception_hooks, intercept_stdlib_logging
from .logger import get_logger
from .registry import LoggerRegistry, RegistryEntry, get_process_registry, set_process_registry
from .relay import LogRelay
from .sinks import (
    BaseSink,
    BatchingNetworkSink,
    ConsoleSink,
    FilteringForwardSink,
    RateLimitedAlertSink,
)

_atexit_registered = False
_hooks_installed = False


def build_sinks(
    settings: Settings,
    *,
    transport: Optional[httpx.BaseTransport] = None,
    sentry_client: Any = None,
) -> dict[str, BaseSink]:
    """Create one sink per configured backend, keyed by sink name.

    Raises:
        ConfigurationError: if a backend cannot be set up; sinks already
            built for this call are closed first
    """
    sinks: dict[str, BaseSink] = {}
    try:
        if settings.logging.console_enabled:
            sinks["console"] = ConsoleSink(fmt=settings.logging.console_format.value)

        loki = settings.loki
        if loki.enabled:
            sinks["loki"] = BatchingNetworkSink(
                loki.url,
                api_key=loki.api_key.get_secret_value() if loki.api_key else None,
                labels={
                    "service": settings.environment.service_name,
                    "environment": settings.environment.env,
                },
                job=loki.job,
                batch_size=loki.batch_size,
                flush_interval_ms=loki.flush_interval_ms,
                timeout=loki.timeout,
                transport=transport,
            )

        discord = settings.discord
        if discord.enabled:
            sinks["discord"] = RateLimitedAlertSink(
                discord.webhook_url.get_secret_value(),
                username=discord.username,
                rate_limit_ms=discord.rate_limit_ms,
                timeout=discord.timeout,
                transport=transport,
            )

        if settings.sentry.enabled:
            if sentry_client is None:
                init_sentry(settings.sentry, settings.environment)
                sinks["sentry"] = FilteringForwardSink()
            else:
                sinks["sentry"] = FilteringForwardSink(sentry_client)
    except Exception as exc:
        _close_sinks(sinks)
        if isinstance(exc, ConfigurationError):
            raise
        raise ConfigurationError(
            f"Failed to set up log sinks: {exc}",
            details={"built": sorted(sinks), "error": type(exc).__name__},
        ) from exc

    return sinks


def build_relay(settings: Settings, *, transport: Optional[httpx.BaseTransport] = None) -> LogRelay:
    """Create the browser log relay for the configured aggregator.

    Without ``LOKI_URL`` the relay still validates input but forwards nothing.
    """
    loki = settings.loki
    delivery = HttpDelivery("relay", timeout=loki.timeout, transport=transport) if loki.enabled else None
    return LogRelay(
        loki.url,
        api_key=loki.api_key.get_secret_value() if loki.api_key else None,
        service=settings.environment.service_name,
        environment=settings.environment.env,
        delivery=delivery,
    )


def _close_sinks(sinks: dict[str, BaseSink]) -> None:
    for sink in sinks.values():
        try:
            sink.close()
        except Exception:
            pass


def configure_logging(
    settings: Optional[Settings] = None,
    *,
    registry: Optional[LoggerRegistry] = None,
    transport: Optional[httpx.BaseTransport] = None,
    sentry_client: Any = None,
) -> LoggerRegistry:
    """
    Configure the logging pipeline once for this process.

    Calling it again after a successful run returns the existing registry.
    If configuration fails, the sinks built for the attempt are closed, the
    error propagates, and a later call may retry.

    Args:
        settings: Settings to read (defaults to the module singleton)
        registry: Registry to configure (defaults to the process registry)
        transport: httpx transport for the network sinks (tests)
        sentry_client: Stand-in for ``sentry_sdk``; skips SDK initialization

    Raises:
        ConfigurationError: if a backend cannot be set up or the registry
            rejects the routing entries
    """
    global _atexit_registered, _hooks_installed

    settings = settings or default_settings
    registry = registry or get_process_registry() or LoggerRegistry()
    if registry.is_configured:
        set_process_registry(registry)
        return registry

    root_category = tuple(part for part in settings.logging.root_category.split(".") if part)
    sinks = build_sinks(settings, transport=transport, sentry_client=sentry_client)
    entries = [RegistryEntry(category=root_category, sinks=frozenset(sinks), lowest_level=settings.log_level)]

    try:
        registry.configure(sinks, entries)
    except Exception:
        _close_sinks(sinks)
        raise

    installed = registry.sinks
    if any(installed.get(name) is not sink for name, sink in sinks.items()):
        # A concurrent call configured the registry first; its sinks stay
        _close_sinks(sinks)
        set_process_registry(registry)
        return registry

    set_process_registry(registry)
    configure_structlog(registry)

    if settings.logging.intercept_stdlib:
        intercept_stdlib_logging(registry)

    if settings.logging.exception_hooks and not _hooks_installed:
        install_exception_hooks(get_logger(*(root_category or ("app",)), "runtime"))
        _hooks_installed = True

    if not _atexit_registered:
        atexit.register(shutdown_logging)
        _atexit_registered = True

    return registry


def shutdown_logging() -> None:
    """Best-effort flush and close of the process registry."""
    registry = get_process_registry()
    if registry is not None:
        registry.close()
