"""
Logging and OpenTelemetry wiring for the GrubDash service.

The tracer and meter are taken from the global providers, so they are no-ops
until `setup_otel` installs real ones. Handlers can therefore open spans and
bump counters unconditionally.
"""

import logging

from opentelemetry import metrics, trace
from pythonjsonlogger import jsonlogger

from grubdash.config import Settings

LOGGER_NAME = "grubdash"

logger = logging.getLogger(LOGGER_NAME)
tracer = trace.get_tracer(LOGGER_NAME)
meter = metrics.get_meter(LOGGER_NAME)

rejections_counter = meter.create_counter(
    name="pipeline_rejections_total",
    description="Requests halted by a validation pipeline stage",
)


# ─── Logging ──────────────────────────────────────────────────────────────────
handler = logging.StreamHandler()
handler.setFormatter(
    jsonlogger.JsonFormatter(
        fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
        rename_fields={"asctime": "timestamp", "levelname": "level"},
    )
)


def setup_logging(settings: Settings) -> logging.Logger:
    if handler not in logger.handlers:
        logger.addHandler(handler)
    logger.setLevel(settings.LOG_LEVEL)
    return logger


# ─── OpenTelemetry Setup ───────────────────────────────────────────────────────
def setup_otel(settings: Settings):
    """Install OTLP-exporting tracer and meter providers.

    Returns the (tracer_provider, meter_provider) pair so the caller can shut
    them down on exit.
    """
    from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
    from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
    from opentelemetry.sdk.metrics import MeterProvider
    from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor

    endpoint = settings.OTEL_EXPORTER_OTLP_ENDPOINT
    resource = Resource.create({"service.name": settings.SERVICE_NAME})

    tracer_provider = TracerProvider(resource=resource)
    tracer_provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint, insecure=True)))
    trace.set_tracer_provider(tracer_provider)

    metric_reader = PeriodicExportingMetricReader(OTLPMetricExporter(endpoint=endpoint, insecure=True))
    meter_provider = MeterProvider(resource=resource, metric_readers=[metric_reader])
    metrics.set_meter_provider(meter_provider)

    logger.info("OpenTelemetry export enabled", extra={"endpoint": endpoint})
    return tracer_provider, meter_provider
