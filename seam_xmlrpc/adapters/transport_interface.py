"""
HTTP transport interface

Defines the interface every HTTP transport used by XmlRpcClient implements.
The client only needs a blocking POST; it runs transports on its own worker
pool so each call is asynchronous from the caller's side.
"""

import abc
from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class HttpResponse:
    """Completed HTTP exchange as seen by the client"""
    ok: bool
    content: Optional[bytes] = None
    status_code: Optional[int] = None
    reason: str = ""


class HttpTransport(abc.ABC):
    """HTTP transport interface"""

    @abc.abstractmethod
    def post(self, url: str, body: bytes,
             headers: Optional[Dict[str, str]] = None) -> HttpResponse:
        """Send a POST request and wait for the response

        Args:
            url: Destination URL
            body: Raw request body
            headers: Extra request headers

        Returns:
            HttpResponse: ``ok`` is False for connection failures and non-2xx
            statuses; implementations must not raise for those
        """
        pass

    def close(self) -> None:
        """Release connections held by the transport"""
        pass
