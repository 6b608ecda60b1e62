"""
Configuration settings for the XML-RPC client
"""
import os
from typing import Dict, Any, Optional
from dataclasses import dataclass
from enum import Enum


class DecodePolicy(Enum):
    """How the codec treats malformed values"""
    LENIENT = "lenient"  # sentinel / empty value plus a diagnostic
    STRICT = "strict"    # raise ProtocolError / UnsupportedTypeError


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"Invalid boolean for {name}: {raw!r}")


def _env_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        raise ValueError(f"Invalid number for {name}: {raw!r}")


@dataclass
class ClientConfig:
    """Configuration for XmlRpcClient"""
    location: Optional[str] = None
    timeout_seconds: float = 30.0
    max_workers: int = 4
    decode_policy: DecodePolicy = DecodePolicy.LENIENT
    user_agent: str = "seam-xmlrpc/0.1.0"

    # Tracing configuration
    enable_tracing: bool = True
    service_name: str = "seam.xmlrpc"
    otlp_endpoint: Optional[str] = None  # export spans and metrics when set

    def __post_init__(self):
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {self.timeout_seconds}")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")

    @property
    def strict(self) -> bool:
        return self.decode_policy is DecodePolicy.STRICT

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Create config from environment variables"""
        policy = os.getenv("XMLRPC_DECODE_POLICY", DecodePolicy.LENIENT.value)
        try:
            decode_policy = DecodePolicy(policy.strip().lower())
        except ValueError:
            raise ValueError(f"Unsupported decode policy: {policy}")

        return cls(
            location=os.getenv("XMLRPC_LOCATION"),
            timeout_seconds=_env_number("XMLRPC_TIMEOUT", 30.0, float),
            max_workers=_env_number("XMLRPC_MAX_WORKERS", 4, int),
            decode_policy=decode_policy,
            user_agent=os.getenv("XMLRPC_USER_AGENT", "seam-xmlrpc/0.1.0"),
            enable_tracing=_env_bool("XMLRPC_ENABLE_TRACING", True),
            service_name=os.getenv("XMLRPC_SERVICE_NAME", "seam.xmlrpc"),
            otlp_endpoint=os.getenv("XMLRPC_OTLP_ENDPOINT") or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "location": self.location,
            "timeout_seconds": self.timeout_seconds,
            "max_workers": self.max_workers,
            "decode_policy": self.decode_policy.value,
            "user_agent": self.user_agent,
            "enable_tracing": self.enable_tracing,
            "service_name": self.service_name,
            "otlp_endpoint": self.otlp_endpoint,
        }
