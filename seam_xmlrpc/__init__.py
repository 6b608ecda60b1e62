"""
seam_xmlrpc - XML-RPC client

Marshals a method name and typed parameters into an XML-RPC request, sends it
over HTTP POST and classifies the response:

1. Value codec: bool, int, double, string, dateTime.iso8601, base64, array, struct
2. Call outcomes: Success, Fault, TransportError (exactly one per call)
3. Transport: requests-based HttpTransport adapter, replaceable

Calls emit OpenTelemetry spans and metrics and propagate W3C trace context
in the request headers.
"""

from .client import XmlRpcClient
from .config import ClientConfig, DecodePolicy
from .errors import (
    CallFailedError,
    FaultError,
    ProtocolError,
    UnsupportedTypeError,
    XmlRpcError,
)
from .outcome import CallOutcome, Fault, Success, TransportError

__version__ = "0.1.0"

__all__ = [
    "XmlRpcClient",
    "ClientConfig",
    "DecodePolicy",
    "CallOutcome",
    "Success",
    "Fault",
    "TransportError",
    "XmlRpcError",
    "ProtocolError",
    "UnsupportedTypeError",
    "CallFailedError",
    "FaultError",
]
