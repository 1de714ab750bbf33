"""OpenTelemetry and structlog setup for the NotesVault API."""

import logging
import os

import structlog
from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import ConsoleMetricExporter, PeriodicExportingMetricReader
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

# Service identification
SERVICE_NAME_VALUE = os.getenv("OTEL_SERVICE_NAME", "notesvault-api")
SERVICE_VERSION_VALUE = os.getenv("OTEL_SERVICE_VERSION", "0.1.0")
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")


def _enabled(flag: str) -> bool:
    return os.getenv(flag, "true").lower() == "true"


def get_resource() -> Resource:
    """Create OpenTelemetry resource with service attributes."""
    return Resource.create(
        {
            SERVICE_NAME: SERVICE_NAME_VALUE,
            SERVICE_VERSION: SERVICE_VERSION_VALUE,
            "deployment.environment": ENVIRONMENT,
        }
    )


def configure_tracing() -> TracerProvider:
    """Configure OpenTelemetry tracing.

    ``OTEL_TRACES_EXPORTER`` picks ``otlp``, ``console`` or ``none``.
    """
    provider = TracerProvider(resource=get_resource())

    if not _enabled("OTEL_ENABLE_TRACES"):
        print("[OTEL] Tracing disabled via OTEL_ENABLE_TRACES=false")
        trace.set_tracer_provider(provider)
        return provider

    exporter_type = os.getenv("OTEL_TRACES_EXPORTER", "console")
    otlp_endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    span_exporter = None

    if exporter_type == "otlp" and otlp_endpoint:
        span_exporter = OTLPSpanExporter(endpoint=otlp_endpoint)
        print(f"[OTEL] Using OTLP span exporter: {otlp_endpoint}")
    elif exporter_type == "otlp":
        print("[OTEL] OTLP endpoint not configured, traces disabled")
    elif exporter_type == "console":
        span_exporter = ConsoleSpanExporter()
        print("[OTEL] Using console span exporter for development")
    else:
        print("[OTEL] Trace export disabled")

    if span_exporter is not None:
        provider.add_span_processor(BatchSpanProcessor(span_exporter))

    trace.set_tracer_provider(provider)
    return provider


def configure_metrics() -> MeterProvider:
    """Configure OpenTelemetry metrics.

    ``OTEL_METRICS_EXPORTER`` picks ``otlp``, ``console`` or ``none``.
    """
    metric_readers = []

    if _enabled("OTEL_ENABLE_METRICS"):
        exporter_type = os.getenv("OTEL_METRICS_EXPORTER", "console")
        otlp_endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
        metric_exporter = None

        if exporter_type == "otlp" and otlp_endpoint:
            metric_exporter = OTLPMetricExporter(endpoint=otlp_endpoint)
            print(f"[OTEL] Using OTLP metric exporter: {otlp_endpoint}")
        elif exporter_type == "otlp":
            print("[OTEL] OTLP endpoint not configured, metrics disabled")
        elif exporter_type == "console":
            metric_exporter = ConsoleMetricExporter()
            print("[OTEL] Using console metric exporter for development")
        else:
            print("[OTEL] Metric export disabled")

        if metric_exporter is not None:
            metric_readers.append(
                PeriodicExportingMetricReader(
                    metric_exporter,
                    export_interval_millis=int(os.getenv("OTEL_METRIC_EXPORT_INTERVAL", "60000")),
                )
            )
    else:
        print("[OTEL] Metrics disabled via OTEL_ENABLE_METRICS=false")

    provider = MeterProvider(resource=get_resource(), metric_readers=metric_readers)
    metrics.set_meter_provider(provider)
    return provider


def add_otel_context(logger, method_name, event_dict):
    """Add OpenTelemetry trace context to log events."""
    span = trace.get_current_span()
    if span and span.is_recording():
        ctx = span.get_span_context()
        event_dict["trace_id"] = format(ctx.trace_id, "032x")
        event_dict["span_id"] = format(ctx.span_id, "016x")
    else:
        event_dict["trace_id"] = "0" * 32
        event_dict["span_id"] = "0" * 16
    return event_dict


def configure_logging():
    """Configure structlog with OpenTelemetry integration."""
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    log_format = os.getenv("LOG_FORMAT", "json").lower()  # json or console

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, log_level),
    )

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_otel_context,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
    ]

    if log_format == "json":
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.processors.ExceptionRenderer(),
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger()
    logger.info("logging_configured", log_level=log_level, log_format=log_format)


def initialize_observability():
    """Initialize logging, tracing and metrics."""
    configure_logging()

    logger = structlog.get_logger()
    logger.info("initializing_observability")

    tracer_provider = configure_tracing()
    meter_provider = configure_metrics()

    logger.info(
        "observability_initialized",
        service_name=SERVICE_NAME_VALUE,
        service_version=SERVICE_VERSION_VALUE,
        environment=ENVIRONMENT,
    )

    return tracer_provider, meter_provider


def get_tracer(name: str = __name__) -> trace.Tracer:
    """Get a tracer instance for creating spans."""
    return trace.get_tracer(name, SERVICE_VERSION_VALUE)


def get_meter(name: str = __name__) -> metrics.Meter:
    """Get a meter instance for creating metrics."""
    return metrics.get_meter(name, SERVICE_VERSION_VALUE)


class AppMetrics:
    """Note store metrics."""

    def __init__(self):
        meter = get_meter("notesvault.metrics")

        self.notes_saved = meter.create_counter(
            name="notes.saved", description="Total number of note upserts", unit="1"
        )

        self.notes_deleted = meter.create_counter(
            name="notes.deleted", description="Total number of deleted notes", unit="1"
        )

        self.links_removed = meter.create_counter(
            name="notes.links_removed",
            description="Link rows removed by cascading deletes",
            unit="1",
        )

        self.graphs_materialized = meter.create_counter(
            name="graph.materialized", description="Graphs built for the map view", unit="1"
        )

        self.db_query_duration = meter.create_histogram(
            name="db.query.duration",
            description="Database query duration in milliseconds",
            unit="ms",
        )


# Global metrics instance
app_metrics: AppMetrics | None = None


def get_app_metrics() -> AppMetrics:
    """Get the global application metrics instance."""
    global app_metrics
    if app_metrics is None:
        app_metrics = AppMetrics()
    return app_metrics
