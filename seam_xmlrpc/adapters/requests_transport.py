"""
requests HTTP transport

HttpTransport implementation on top of a requests.Session.
"""

import time
import logging
import threading
from typing import Dict, Optional

import requests

from seam_xmlrpc.adapters.transport_interface import HttpResponse, HttpTransport
from seam_xmlrpc.telemetry.metrics import increment_counter, record_latency

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Content-Type": "text/xml",
    "Accept": "text/xml",
}


class RequestsTransport(HttpTransport):
    """
    HTTP transport backed by requests
    Sessions are kept per thread since requests.Session is not thread-safe
    """

    def __init__(self,
                 timeout_seconds: Optional[float] = 30.0,
                 user_agent: str = "seam-xmlrpc/0.1.0",
                 verify: bool = True):
        """Initialize the transport

        Args:
            timeout_seconds: Connect/read timeout passed to requests
            user_agent: User-Agent header value
            verify: Verify TLS certificates
        """
        self.timeout_seconds = timeout_seconds
        self.user_agent = user_agent
        self.verify = verify
        self._local = threading.local()
        self._sessions = []
        self._lock = threading.Lock()

    def _session(self) -> requests.Session:
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            session.headers.update(DEFAULT_HEADERS)
            session.headers["User-Agent"] = self.user_agent
            self._local.session = session
            with self._lock:
                self._sessions.append(session)
        return session

    def post(self, url: str, body: bytes,
             headers: Optional[Dict[str, str]] = None) -> HttpResponse:
        start_time = time.time()
        try:
            response = self._session().post(
                url,
                data=body,
                headers=headers,
                timeout=self.timeout_seconds,
                verify=self.verify,
            )
        except requests.Timeout as e:
            logger.error(f"POST {url} timed out after {self.timeout_seconds}s")
            increment_counter("xmlrpc.transport.errors", 1, {"type": "timeout"})
            return HttpResponse(ok=False, reason=f"Timeout: {e}")
        except requests.RequestException as e:
            logger.error(f"POST {url} failed: {e}")
            increment_counter("xmlrpc.transport.errors", 1, {"type": "connection"})
            return HttpResponse(ok=False, reason=str(e))

        latency_ms = (time.time() - start_time) * 1000
        record_latency("xmlrpc.transport.latency", latency_ms, {"status": str(response.status_code)})
        logger.debug(f"POST {url} -> {response.status_code} in {latency_ms:.2f}ms")

        return HttpResponse(
            ok=response.ok,
            content=response.content,
            status_code=response.status_code,
            reason=response.reason or "",
        )

    def close(self) -> None:
        with self._lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()
