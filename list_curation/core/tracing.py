"""
List-Curation-Service - OpenTelemetry Tracing

One tracer provider per process, plus a helper that writes curation stage
counts onto a span under the ``curation.`` namespace.
"""

from collections.abc import Mapping
from typing import Any

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor, SpanExporter

SERVICE_NAME = "list-curation-service"
ATTRIBUTE_PREFIX = "curation."

_configured: bool = False


def configure_tracing(
    service_name: str = SERVICE_NAME,
    service_version: str = "0.1.0",
    environment: str | None = None,
    console_export: bool = False,
    exporter: SpanExporter | None = None,
) -> TracerProvider | None:
    """Install the global tracer provider once.

    Args:
        service_name: ``service.name`` resource attribute
        service_version: ``service.version`` resource attribute
        environment: ``deployment.environment`` resource attribute, if set
        console_export: Print finished spans to stdout
        exporter: Extra exporter for finished spans

    Returns:
        The installed provider, or None if tracing was already configured
    """
    global _configured

    if _configured:
        return None

    attributes: dict[str, Any] = {
        "service.name": service_name,
        "service.version": service_version,
    }
    if environment is not None:
        attributes["deployment.environment"] = environment

    provider = TracerProvider(resource=Resource.create(attributes))
    if console_export:
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))
    if exporter is not None:
        provider.add_span_processor(SimpleSpanProcessor(exporter))

    trace.set_tracer_provider(provider)
    _configured = True
    return provider


def get_tracer(name: str) -> Any:
    """Return a tracer from the global provider."""
    return trace.get_tracer(name)


def record_counts(span: Any, counts: Mapping[str, int]) -> None:
    """Set each count as a ``curation.<name>`` span attribute."""
    for name, value in counts.items():
        span.set_attribute(f"{ATTRIBUTE_PREFIX}{name}", value)


def reset_tracing() -> None:
    """Forget the configuration (tests only)."""
    global _configured
    _configured = False
