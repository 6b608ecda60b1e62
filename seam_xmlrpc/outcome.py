"""
Call outcomes

Every call produces exactly one of:

- Success(value): the method returned normally
- Fault(value): the server answered with an XML-RPC fault struct
- TransportError(method, http_status, reason): HTTP failure, unparsable
  body or a response with neither branch
"""

from dataclasses import dataclass
from typing import Any, Optional, Union

from seam_xmlrpc.errors import CallFailedError, FaultError


@dataclass(frozen=True)
class Success:
    value: Any

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> Any:
        return self.value


@dataclass(frozen=True)
class Fault:
    """Application-level fault; ``value`` is the decoded fault struct as sent."""
    value: Any

    @property
    def ok(self) -> bool:
        return False

    @property
    def fault_code(self) -> Optional[Any]:
        if isinstance(self.value, dict):
            return self.value.get("faultCode")
        return None

    @property
    def fault_string(self) -> Optional[Any]:
        if isinstance(self.value, dict):
            return self.value.get("faultString")
        return None

    def unwrap(self) -> Any:
        raise FaultError(self)


@dataclass(frozen=True)
class TransportError:
    method: str
    http_status: int = 0
    reason: str = ""

    @property
    def ok(self) -> bool:
        return False

    @property
    def readable_description(self) -> str:
        return f"{self.method}: [{self.http_status}] {self.reason}"

    def unwrap(self) -> Any:
        raise CallFailedError(self)


CallOutcome = Union[Success, Fault, TransportError]
