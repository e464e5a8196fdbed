"""
Structured logging for inav-arbitrage.

Every entry is an event name plus keyword context. A quote fetch retry looks
like this once rendered as JSON:

    {
        "app": "inav-arbitrage",
        "layer": "ingestion",
        "component": "nse-client",
        "upstream": "nse",
        "symbol": "GOLDBEES",
        "attempt": 1,
        "event": "auth_rejected",
        "severity": "WARNING",
        ...
    }

Layers:
    - infrastructure: config loading, logging setup
    - ingestion: session cookies, quote/index fetches, batching
    - storage: in-memory quote cache
    - analytics: premium/discount signals
    - service: surface consumed by the dashboard / API layer
"""

import logging
import sys
from typing import Any, Literal, TextIO

import structlog
from structlog.types import EventDict, Processor

APP_NAME = "inav-arbitrage"

Layer = Literal["infrastructure", "ingestion", "storage", "analytics", "service"]

_handler: logging.Handler | None = None

_SEVERITY = {
    "debug": "DEBUG",
    "info": "INFO",
    "warning": "WARNING",
    "error": "ERROR",
    "critical": "CRITICAL",
}


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict["app"] = APP_NAME
    return event_dict


def add_severity_level(
    logger: Any, method_name: str, event_dict: EventDict
) -> EventDict:
    """Mirror the structlog level as an upper-case `severity` for log collectors."""
    level = event_dict.get("level")
    if level:
        event_dict["severity"] = _SEVERITY.get(level, "INFO")
    return event_dict


def _renderer(json_logs: bool) -> Processor:
    if json_logs:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=True,
        exception_formatter=structlog.dev.plain_traceback,
    )


def setup_logging(
    level: str = "INFO",
    json_logs: bool = True,
    include_timestamp: bool = True,
    stream: TextIO | None = None,
) -> None:
    """
    Configure structlog on top of the stdlib root logger.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL (case-insensitive);
            anything else falls back to INFO
        json_logs: JSON lines when True, coloured console output otherwise
        include_timestamp: Prefix entries with an ISO timestamp
        stream: Destination for log lines (default: stdout)

    Usage:
        >>> setup_logging(level="DEBUG", json_logs=False, stream=sys.stderr)
    """
    global _handler

    log_level = getattr(logging, level.upper(), logging.INFO)

    # Replace the handler from a previous call, leave foreign handlers alone.
    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)
    _handler = logging.StreamHandler(stream or sys.stdout)
    _handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(_handler)
    root.setLevel(log_level)

    processors: list[Processor] = []
    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))
    processors += [
        structlog.contextvars.merge_contextvars,
        add_app_context,
        structlog.stdlib.add_log_level,
        add_severity_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        _renderer(json_logs),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(
    name: str | None = None,
    layer: Layer | None = None,
    component: str | None = None,
    **initial_context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Logger carrying layer/component/module context.

    The returned logger is a lazy proxy: loggers created at import time still
    honour a setup_logging() call made later.

    Usage:
        >>> log = get_logger(__name__, layer="ingestion", component="nse-client")
        >>> log.info("quote_fetched", symbol="GOLDBEES", attempt=1)
    """
    context: dict[str, Any] = {}
    if layer:
        context["layer"] = layer
    if component:
        context["component"] = component
    if name:
        context["module"] = name
    context.update(initial_context)
    return structlog.get_logger(name, **context)


def _layer_logger(layer: Layer, component: str, **context: Any):
    return get_logger(layer, layer=layer, component=component, **context)


# ============================================================================
# Layer-Specific Logger Factories
# ============================================================================


def get_infrastructure_logger(component: str, **context: Any):
    """Config loading and other cross-cutting plumbing."""
    return _layer_logger("infrastructure", component, **context)


def get_ingestion_logger(component: str, upstream: str | None = None, **context: Any):
    """
    Upstream acquisition: session manager, NSE client, batch orchestrator.

    Usage:
        >>> log = get_ingestion_logger("nse-client", upstream="nse")
        >>> log.warning("auth_rejected", symbol="GOLDBEES", status=401)
    """
    if upstream:
        context = {"upstream": upstream, **context}
    return _layer_logger("ingestion", component, **context)


def get_storage_logger(component: str, **context: Any):
    return _layer_logger("storage", component, **context)


def get_analytics_logger(component: str, **context: Any):
    return _layer_logger("analytics", component, **context)


def get_service_logger(component: str = "arbitrage-service", **context: Any):
    """Public service surface."""
    return _layer_logger("service", component, **context)
