"""
XML-RPC client

Builds a methodCall document, POSTs it through an HttpTransport and
classifies the response as Success, Fault or TransportError. Each call runs
on the client's worker pool; the outcome is delivered exactly once, through
the returned Future and the optional callback.
"""

import time
import logging
import contextvars
from concurrent.futures import Future, ThreadPoolExecutor
from contextlib import nullcontext
from typing import Any, Callable, Iterable, Optional

from lxml import etree

from seam_xmlrpc.adapters.requests_transport import RequestsTransport
from seam_xmlrpc.adapters.transport_interface import HttpResponse, HttpTransport
from seam_xmlrpc.codec.documents import dumps_request, parse_response
from seam_xmlrpc.codec.values import Diagnostics, decode_value, element_children
from seam_xmlrpc.config import ClientConfig
from seam_xmlrpc.errors import ProtocolError, UnsupportedTypeError
from seam_xmlrpc.outcome import CallOutcome, Fault, Success, TransportError
from seam_xmlrpc.telemetry.metrics import increment_counter, record_latency
from seam_xmlrpc.telemetry.tracer import create_span, inject_trace_headers

logger = logging.getLogger(__name__)

BAD_RESPONSE = "Bad response"

CallBack = Callable[[CallOutcome], None]


class XmlRpcClient:
    """
    XML-RPC client bound to one endpoint location
    Holds no per-call state; concurrent calls are independent
    """

    def __init__(self,
                 location: Optional[str] = None,
                 transport: Optional[HttpTransport] = None,
                 config: Optional[ClientConfig] = None,
                 diagnostics: Optional[Diagnostics] = None):
        """Initialize the client

        Args:
            location: Endpoint URL; defaults to ``config.location``
            transport: HTTP transport; a RequestsTransport is created if omitted
            config: Client configuration
            diagnostics: Sink for codec anomaly reports (module logger if omitted)

        Raises:
            ValueError: No endpoint location given
        """
        self.config = config or ClientConfig()
        self.location = location or self.config.location
        if not self.location:
            raise ValueError("XML-RPC endpoint location is required")

        self._owns_transport = transport is None
        self.transport = transport or RequestsTransport(
            timeout_seconds=self.config.timeout_seconds,
            user_agent=self.config.user_agent,
        )
        self.diagnostics = diagnostics
        self._executor = ThreadPoolExecutor(
            max_workers=self.config.max_workers,
            thread_name_prefix="xmlrpc-call",
        )
        logger.info(f"XML-RPC client created for {self.location}, policy: {self.config.decode_policy.value}")

    def __enter__(self) -> "XmlRpcClient":
        return self

    def __exit__(self, exc_type, exc_value, tb) -> None:
        self.close()

    def close(self) -> None:
        """Wait for in-flight calls, then release the worker pool and transport"""
        self._executor.shutdown(wait=True)
        if self._owns_transport:
            self.transport.close()

    def call(self, method: str, params: Iterable[Any] = (),
             callback: Optional[CallBack] = None) -> "Future[CallOutcome]":
        """Call a remote method

        Args:
            method: Remote method name
            params: Ordered method parameters
            callback: Invoked once with the CallOutcome, on a worker thread

        Returns:
            Future: Resolves to the CallOutcome; never resolves to an exception

        Raises:
            UnsupportedTypeError: In strict mode, before anything is sent
        """
        try:
            body = dumps_request(method, list(params), self.config.strict, self.diagnostics)
        except UnsupportedTypeError as e:
            # lenient mode degrades parameters, so only the method name gets here
            if self.config.strict:
                raise
            (self.diagnostics or logger.warning)(f"XMLRPC: {e}")
            increment_counter("xmlrpc.client.errors", 1, {"type": "request"})
            future = Future()
            future.set_result(TransportError(method, 0, str(e)))
            if callback is not None:
                future.add_done_callback(lambda f: self._deliver(callback, f))
            return future

        logger.debug(f"Sending request: {body[:200]!r}...")
        increment_counter("xmlrpc.client.requests", 1, {"method": method})

        # Worker threads do not inherit the caller's context, so carry it
        # over for span parenting.
        ctx = contextvars.copy_context()
        future = self._executor.submit(ctx.run, self._execute, method, body)
        if callback is not None:
            future.add_done_callback(lambda f: self._deliver(callback, f))
        return future

    def call_sync(self, method: str, params: Iterable[Any] = (),
                  timeout: Optional[float] = None) -> CallOutcome:
        """Call a remote method and wait for its outcome"""
        return self.call(method, params).result(timeout=timeout)

    def _deliver(self, callback: CallBack, future: "Future[CallOutcome]") -> None:
        try:
            callback(future.result())
        except Exception:
            logger.exception("XML-RPC completion callback raised")

    def _execute(self, method: str, body: bytes) -> CallOutcome:
        span = create_span(f"xmlrpc {method}", {
            "rpc.system": "xmlrpc",
            "rpc.method": method,
            "server.address": self.location,
        }) if self.config.enable_tracing else nullcontext()

        with span:
            headers = inject_trace_headers() if self.config.enable_tracing else None
            start_time = time.time()
            try:
                response = self.transport.post(self.location, body, headers)
            except Exception as e:
                logger.error(f"Transport raised while calling {method}: {e}")
                response = HttpResponse(ok=False, reason=str(e))
            latency_ms = (time.time() - start_time) * 1000
            record_latency("xmlrpc.client.latency", latency_ms, {"method": method})

            outcome = self.handle_response(method, response)

        if isinstance(outcome, Success):
            increment_counter("xmlrpc.client.success", 1, {"method": method})
        elif isinstance(outcome, Fault):
            logger.info(f"{method} returned fault {outcome.fault_code}: {outcome.fault_string}")
            increment_counter("xmlrpc.client.faults", 1, {"method": method})
        else:
            logger.error(f"XML-RPC call failed: {outcome.readable_description}")
            increment_counter("xmlrpc.client.errors", 1, {"method": method, "type": "transport"})
        return outcome

    def handle_response(self, method: str, response: HttpResponse) -> CallOutcome:
        """Classify a completed HTTP exchange

        Args:
            method: Method name, carried into TransportError
            response: Transport result

        Returns:
            CallOutcome: Success when ``params/param`` has exactly one child,
            else Fault when ``fault`` has exactly one child, else
            TransportError("Bad response")
        """
        status = response.status_code or 0
        if not response.ok:
            return TransportError(method, status, response.reason)

        try:
            root = parse_response(response.content)
        except (etree.XMLSyntaxError, ValueError) as e:
            return TransportError(method, status, f"Invalid XML response: {e}")

        logger.debug(f"Received response: {response.content[:200]!r}...")

        e_param = root.find("params/param")
        e_fault = root.find("fault")
        strict = self.config.strict
        try:
            if e_param is not None:
                children = element_children(e_param)
                if len(children) == 1:
                    return Success(decode_value(children[0], strict, self.diagnostics))
            if e_fault is not None:
                children = element_children(e_fault)
                if len(children) == 1:
                    return Fault(decode_value(children[0], strict, self.diagnostics))
        except ProtocolError as e:
            return TransportError(method, status, f"Protocol error: {e}")

        return TransportError(method, status, BAD_RESPONSE)
