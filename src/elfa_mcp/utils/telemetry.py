"""OpenTelemetry tracing for the JSON-RPC router.

The router always creates spans through :func:`get_tracer`; until
:func:`configure_telemetry` installs an SDK provider those spans are the
API's no-op implementation.

Usage::

    from elfa_mcp.utils.telemetry import ATTR_TOOL_NAME, get_tracer

    _tracer = get_tracer(__name__)

    with _tracer.start_as_current_span("mcp.tool.ta_rsi") as span:
        span.set_attribute(ATTR_TOOL_NAME, "ta_rsi")

The SDK and exporters ship in the ``otel`` extra (``pip install elfa-mcp[otel]``).
Stdout carries the JSON-RPC stream, so the console exporter writes to stderr.
"""

from __future__ import annotations

import sys
from typing import Any

from opentelemetry import trace

ATTR_RPC_METHOD = "elfa_mcp.rpc.method"
ATTR_TOOL_NAME = "elfa_mcp.tool.name"
ATTR_TOOL_IS_ERROR = "elfa_mcp.tool.is_error"

_INSTRUMENTATION_NAME = "elfa_mcp"
_INSTALL_HINT = "Install it with: pip install elfa-mcp[otel]"


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Return a tracer for *name*; a no-op tracer until the SDK is configured."""
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


def configure_telemetry(
    *,
    service_name: str = "elfa-mcp",
    export_to_console: bool = True,
    otlp_endpoint: str | None = None,
) -> None:
    """Install an SDK tracer provider with the requested exporters.

    Parameters
    ----------
    service_name:
        The ``service.name`` resource attribute.
    export_to_console:
        If ``True``, print each finished span as JSON on stderr.
    otlp_endpoint:
        If set, batch spans to this OTLP/gRPC collector.

    Raises
    ------
    ImportError
        If ``opentelemetry-sdk`` (or, for OTLP, ``opentelemetry-exporter-otlp``)
        is not installed.
    """
    try:
        from opentelemetry.sdk.resources import Resource  # pyright: ignore[reportMissingImports,reportUnknownVariableType]
        from opentelemetry.sdk.trace import TracerProvider  # pyright: ignore[reportMissingImports,reportUnknownVariableType]
    except ImportError as exc:
        msg = f"opentelemetry-sdk is required for configure_telemetry(). {_INSTALL_HINT}"
        raise ImportError(msg) from exc

    processors = _span_processors(export_to_console=export_to_console, otlp_endpoint=otlp_endpoint)
    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))  # pyright: ignore[reportUnknownVariableType,reportUnknownMemberType]
    for processor in processors:
        provider.add_span_processor(processor)  # pyright: ignore[reportUnknownMemberType]
    trace.set_tracer_provider(provider)  # pyright: ignore[reportUnknownArgumentType]


def _span_processors(*, export_to_console: bool, otlp_endpoint: str | None) -> list[Any]:
    """Console spans are flushed one by one; OTLP spans are batched."""
    from opentelemetry.sdk.trace.export import (  # pyright: ignore[reportMissingImports,reportUnknownVariableType]
        BatchSpanProcessor,
        ConsoleSpanExporter,
        SimpleSpanProcessor,
    )

    processors: list[Any] = []
    if export_to_console:
        processors.append(SimpleSpanProcessor(ConsoleSpanExporter(out=sys.stderr)))
    if otlp_endpoint:
        try:
            from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter  # pyright: ignore[reportMissingImports,reportUnknownVariableType]
        except ImportError as exc:
            msg = f"opentelemetry-exporter-otlp is required for OTLP export. {_INSTALL_HINT}"
            raise ImportError(msg) from exc
        processors.append(BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint)))
    return processors
