"""
HTTP Transport Adapters

- transport_interface: HttpTransport interface and HttpResponse
- requests_transport: requests-based implementation
"""

from .transport_interface import HttpResponse, HttpTransport
from .requests_transport import RequestsTransport

__all__ = [
    "HttpResponse",
    "HttpTransport",
    "RequestsTransport",
]
