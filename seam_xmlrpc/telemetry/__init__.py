"""
OpenTelemetry Integration Module

- tracer: client spans and trace-context header injection
- metrics: request/fault/error counters and latency histograms
"""

from .tracer import (
    setup_tracer,
    inject_trace_headers,
    create_span
)
from .metrics import (
    setup_metrics,
    increment_counter,
    record_latency
)

__all__ = [
    "setup_tracer",
    "inject_trace_headers",
    "create_span",
    "setup_metrics",
    "increment_counter",
    "record_latency"
]
