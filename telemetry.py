"""Process-wide logging and OpenTelemetry setup.

Call `setup_logging` then `setup_telemetry` once, before the app is served.
"""

import atexit
import logging

from opentelemetry import metrics, propagate, trace
from opentelemetry._logs import set_logger_provider
from opentelemetry.baggage.propagation import W3CBaggagePropagator
from opentelemetry.exporter.otlp.proto.http._log_exporter import OTLPLogExporter
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.instrumentation.starlette import StarletteInstrumentor
from opentelemetry.propagators.b3 import B3MultiFormat
from opentelemetry.propagators.composite import CompositePropagator
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator
from rich.logging import RichHandler
from starlette.applications import Starlette


logger = logging.getLogger(__name__)


_configured = False
_handler: LoggingHandler | None = None
_providers: list[TracerProvider | MeterProvider | LoggerProvider] = []


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
        force=True,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def setup_telemetry(
    app: Starlette,
    *,
    service_name: str,
    service_version: str = "0.1.0",
    endpoint: str = "http://localhost:4318",
) -> bool:
    """Wire traces, metrics and logs to an OTLP/HTTP collector.

    Instruments `app` and every httpx client. Returns False when telemetry was
    already set up in this process.
    """
    global _configured, _handler
    if _configured:
        return False

    resource = Resource.create(
        {SERVICE_NAME: service_name, SERVICE_VERSION: service_version}
    )
    endpoint = endpoint.rstrip("/")

    tracer_provider = TracerProvider(resource=resource, shutdown_on_exit=False)
    tracer_provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=f"{endpoint}/v1/traces"))
    )
    trace.set_tracer_provider(tracer_provider)

    reader = PeriodicExportingMetricReader(
        OTLPMetricExporter(endpoint=f"{endpoint}/v1/metrics")
    )
    meter_provider = MeterProvider(
        resource=resource, metric_readers=[reader], shutdown_on_exit=False
    )
    metrics.set_meter_provider(meter_provider)

    logger_provider = LoggerProvider(resource=resource, shutdown_on_exit=False)
    logger_provider.add_log_record_processor(
        BatchLogRecordProcessor(OTLPLogExporter(endpoint=f"{endpoint}/v1/logs"))
    )
    set_logger_provider(logger_provider)
    _handler = LoggingHandler(logger_provider=logger_provider)
    logging.getLogger().addHandler(_handler)

    propagate.set_global_textmap(
        CompositePropagator(
            [
                TraceContextTextMapPropagator(),
                W3CBaggagePropagator(),
                B3MultiFormat(),
            ]
        )
    )

    StarletteInstrumentor.instrument_app(app)
    HTTPXClientInstrumentor().instrument()

    _providers[:] = [tracer_provider, meter_provider, logger_provider]
    _configured = True
    atexit.register(shutdown_telemetry)
    logger.info("Telemetry for %s exporting to %s", service_name, endpoint)
    return True


def shutdown_telemetry() -> bool:
    """Flush and stop exporters set up by `setup_telemetry`.

    The OTel log handler leaves the root logger before its provider stops.
    Returns False when there was nothing to stop.
    """
    global _configured, _handler
    if not _configured:
        return False

    if _handler is not None:
        logging.getLogger().removeHandler(_handler)
        _handler = None
    HTTPXClientInstrumentor().uninstrument()
    for provider in reversed(_providers):
        provider.shutdown()
    _providers.clear()
    atexit.unregister(shutdown_telemetry)

    _configured = False
    return True
