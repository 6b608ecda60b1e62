"""
XML-RPC client exceptions

Faults and transport failures normally travel as call outcomes; these
exceptions are raised by the codec in strict mode and by ``unwrap()``.
"""


class XmlRpcError(Exception):
    """Base class for all seam_xmlrpc errors."""


class ProtocolError(XmlRpcError):
    """Raised when well-formed XML does not have the XML-RPC shape."""


class UnsupportedTypeError(XmlRpcError, TypeError):
    """Raised when a value has no XML-RPC encoding rule."""

    def __init__(self, value, message=None):
        self.value = value
        super().__init__(message or f"Value type not supported: {type(value).__name__}")


class CallFailedError(XmlRpcError):
    """Raised by ``TransportError.unwrap()``."""

    def __init__(self, outcome):
        self.outcome = outcome
        super().__init__(outcome.readable_description)


class FaultError(XmlRpcError):
    """Raised by ``Fault.unwrap()``."""

    def __init__(self, outcome):
        self.outcome = outcome
        self.fault_code = outcome.fault_code
        self.fault_string = outcome.fault_string
        super().__init__(f"<Fault {self.fault_code}: {self.fault_string!r}>")
