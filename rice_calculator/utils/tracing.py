"""OpenTelemetry tracing for webhook recalculations."""

from contextlib import contextmanager
from typing import Iterator, Optional

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter, SpanExporter

from rice_calculator.config import settings

SERVICE_NAME = "favro-rice-calculator"
RECALCULATE_SPAN = "rice_score.recalculate"
CARD_ID_ATTRIBUTE = "favro.card_id"
OUTCOME_ATTRIBUTE = "rice.outcome"


def setup_tracing(exporter: Optional[SpanExporter] = None, force: bool = False) -> Optional[TracerProvider]:
    """Install a tracer provider tagged with the service name.

    Spans go to stdout unless another exporter is given. Nothing is
    installed while ``FAVRO_ENABLE_TRACING`` is off, unless ``force`` is set.

    Returns:
        The installed provider, or None when tracing stays disabled.
    """
    if not (settings.enable_tracing or force):
        return None
    provider = TracerProvider(resource=Resource.create({"service.name": SERVICE_NAME}))
    provider.add_span_processor(BatchSpanProcessor(exporter or ConsoleSpanExporter()))
    trace.set_tracer_provider(provider)
    return provider


def get_tracer(name: str = SERVICE_NAME):
    return trace.get_tracer(name)


@contextmanager
def recalculation_span(card_id: str, tracer=None) -> Iterator[trace.Span]:
    """Span around one card's recalculation, tagged with the card id.

    Callers record the terminal outcome with ``record_outcome``.
    """
    tracer = tracer or get_tracer()
    with tracer.start_as_current_span(RECALCULATE_SPAN) as span:
        span.set_attribute(CARD_ID_ATTRIBUTE, card_id)
        yield span


def record_outcome(span: trace.Span, outcome: str) -> None:
    span.set_attribute(OUTCOME_ATTRIBUTE, outcome)


def get_trace_id() -> str:
    """Hex trace id of the current span, or "" outside a recorded span."""
    context = trace.get_current_span().get_span_context()
    if not context.is_valid:
        return ""
    return format(context.trace_id, "032x")
