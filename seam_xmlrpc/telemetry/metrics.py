"""
OpenTelemetry Metrics Collection

Counters and latency histograms for XML-RPC calls. Without a configured
MeterProvider the OpenTelemetry API is a no-op, so recording is always safe.
"""

import logging
import threading
from typing import Dict, Any, Optional, Tuple

from opentelemetry import metrics
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import (
    ConsoleMetricExporter,
    PeriodicExportingMetricReader
)
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter

logger = logging.getLogger(__name__)

COUNTER = "counter"
HISTOGRAM = "histogram"

# Descriptions for the instruments the client records
DESCRIPTIONS = {
    "xmlrpc.client.requests": "XML-RPC calls started",
    "xmlrpc.client.success": "XML-RPC calls completed with a value",
    "xmlrpc.client.faults": "XML-RPC calls completed with a fault",
    "xmlrpc.client.errors": "XML-RPC calls that failed before a result was decoded",
    "xmlrpc.client.latency": "Round-trip time of the HTTP POST",
    "xmlrpc.transport.errors": "HTTP requests that raised or returned an error status",
    "xmlrpc.transport.latency": "Duration of a single HTTP POST",
}

_instruments: Dict[Tuple[str, str], Any] = {}
_lock = threading.Lock()

def setup_metrics(service_name: str, otlp_endpoint: str = "localhost:4317",
                  export_interval_ms: int = 5000, console: bool = False):
    """Configure OpenTelemetry metrics collection

    Args:
        service_name: Service name
        otlp_endpoint: OTLP receiver address
        export_interval_ms: Metrics export interval in milliseconds
        console: Also export to the console (development debugging)
    """
    readers = [
        PeriodicExportingMetricReader(
            OTLPMetricExporter(endpoint=otlp_endpoint),
            export_interval_millis=export_interval_ms
        )
    ]
    if console:
        readers.append(PeriodicExportingMetricReader(
            ConsoleMetricExporter(),
            export_interval_millis=export_interval_ms
        ))

    provider = MeterProvider(metric_readers=readers)
    metrics.set_meter_provider(provider)
    meter = metrics.get_meter(service_name)

    logger.info(f"OpenTelemetry metrics configured, service name: {service_name}, OTLP endpoint: {otlp_endpoint}")

    return meter

def instrument(kind: str, name: str, unit: Optional[str] = None):
    """Return the counter or histogram registered under ``name``

    Created on first use from the global meter and reused afterwards.

    Args:
        kind: ``COUNTER`` or ``HISTOGRAM``
        name: Instrument name
        unit: Unit; "1" for counters and "ms" for histograms when omitted
    """
    key = (kind, name)
    with _lock:
        found = _instruments.get(key)
        if found is None:
            meter = metrics.get_meter(__name__)
            create = meter.create_counter if kind == COUNTER else meter.create_histogram
            found = _instruments[key] = create(
                name=name,
                description=DESCRIPTIONS.get(name, name),
                unit=unit or ("1" if kind == COUNTER else "ms"),
            )
        return found

def increment_counter(name: str, amount: int = 1, attributes: Dict[str, Any] = None):
    instrument(COUNTER, name).add(amount, attributes or {})

def record_latency(name: str, value_ms: float, attributes: Dict[str, Any] = None):
    instrument(HISTOGRAM, name).record(value_ms, attributes or {})
