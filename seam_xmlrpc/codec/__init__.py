"""
XML-RPC Codec Module

- values: <value> element encoding/decoding for the classic XML-RPC types
- documents: methodCall construction and response parsing
"""

from .values import (
    DATETIME_FORMAT,
    LENIENT_SENTINEL,
    decode_value,
    element_children,
    encode_value,
)
from .documents import (
    build_request,
    dumps_request,
    parse_response,
    serialize_request,
)

__all__ = [
    "DATETIME_FORMAT",
    "LENIENT_SENTINEL",
    "decode_value",
    "element_children",
    "encode_value",
    "build_request",
    "dumps_request",
    "parse_response",
    "serialize_request",
]
