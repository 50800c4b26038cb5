"""
List-Curation-Service - Structured Logging

structlog setup for the service. Every event is tagged with the service
name and deployment environment so curation logs from several deployments
can share one sink.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.typing import EventDict, Processor

SERVICE_NAME = "list-curation-service"

_configured: bool = False


def service_context(service: str = SERVICE_NAME, environment: str | None = None) -> Processor:
    """Build a processor that stamps service (and environment) on each event."""

    def _stamp(_logger: Any, _method: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", service)
        if environment is not None:
            event_dict.setdefault("environment", environment)
        return event_dict

    return _stamp


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = True,
    environment: str | None = None,
) -> None:
    """Configure structlog once per process.

    Repeated calls are ignored until reset_logging().

    Args:
        log_level: Logging level name; unknown names fall back to INFO
        json_output: JSON lines when True, colored console output otherwise
        environment: Deployment environment added to every event
    """
    global _configured

    if _configured:
        return

    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    renderer: Processor = (
        structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            service_context(SERVICE_NAME, environment),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _configured = True


def get_logger(name: str) -> Any:
    """Return a structlog logger bound to ``name``."""
    return structlog.get_logger(name)


def reset_logging() -> None:
    """Forget the configuration (tests only)."""
    global _configured
    _configured = False
    structlog.reset_defaults()
