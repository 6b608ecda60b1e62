"""
XML-RPC value codec

Converts between native Python values and XML-RPC ``<value>`` elements:

- bool       <-> <boolean>
- int        <-> <int> / <i4>
- float      <-> <double>
- str        <-> <string>
- datetime   <-> <dateTime.iso8601>
- bytes      <-> <base64>
- list       <-> <array><data>
- dict       <-> <struct>

Both directions are pure. Anomalies go to a diagnostic callable (the module
logger by default); in strict mode they raise instead.
"""

import re
import base64
import binascii
import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from lxml import etree

from seam_xmlrpc.errors import ProtocolError, UnsupportedTypeError

logger = logging.getLogger(__name__)

# yyyyMMdd'T'HH:mm:ss, no timezone, no fractional seconds
DATETIME_FORMAT = "%Y%m%dT%H:%M:%S"

# Returned in lenient mode for a <value> node that could not be decoded
LENIENT_SENTINEL = 0

Diagnostics = Callable[[str], None]

NOT_XML_TEXT = "not supported: contains characters not allowed in XML"

_INT_PATTERN = re.compile(r"^[+-]?\d+$")

_BOOLEAN_LITERALS = {
    "1": True,
    "0": False,
    "true": True,
    "false": False,
}


def _report(message: str) -> None:
    logger.warning(message)


def element_children(element) -> List[Any]:
    """Return the element children of ``element``, skipping comments and PIs."""
    return [child for child in element if isinstance(child.tag, str)]


def _text(element) -> str:
    return element.text or ""


# Encoding

def encode_value(value: Any, strict: bool = False,
                 diagnostics: Optional[Diagnostics] = None):
    """Encode a native value as an XML-RPC ``<value>`` element

    Args:
        value: Value to encode
        strict: Raise instead of degrading on unsupported types
        diagnostics: Sink for anomaly reports

    Returns:
        lxml Element named ``value``; empty if the type is unsupported
        in lenient mode

    Raises:
        UnsupportedTypeError: In strict mode, when no encoding rule exists
    """
    report = diagnostics or _report
    e_value = etree.Element("value")

    if isinstance(value, bool):
        etree.SubElement(e_value, "boolean").text = "1" if value else "0"
    elif isinstance(value, int):
        etree.SubElement(e_value, "int").text = str(int(value))
    elif isinstance(value, float):
        etree.SubElement(e_value, "double").text = repr(float(value))
    elif isinstance(value, str):
        try:
            etree.SubElement(e_value, "string").text = value
        except ValueError:
            # Control characters are not representable in XML 1.0
            del e_value[:]
            _unsupported(value, strict, report, f"String value {NOT_XML_TEXT}")
    elif isinstance(value, datetime):
        etree.SubElement(e_value, "dateTime.iso8601").text = value.strftime(DATETIME_FORMAT)
    elif isinstance(value, (bytes, bytearray)):
        etree.SubElement(e_value, "base64").text = base64.b64encode(bytes(value)).decode("ascii")
    elif isinstance(value, (list, tuple)):
        e_data = etree.SubElement(etree.SubElement(e_value, "array"), "data")
        for item in value:
            e_data.append(encode_value(item, strict, report))
    elif isinstance(value, dict) and all(isinstance(k, str) for k in value):
        e_struct = etree.SubElement(e_value, "struct")
        for key, item in value.items():
            e_name = etree.Element("name")
            try:
                e_name.text = key
            except ValueError:
                # the member is dropped
                _unsupported(key, strict, report, f"Struct member name {NOT_XML_TEXT}")
                continue
            e_member = etree.SubElement(e_struct, "member")
            e_member.append(e_name)
            e_member.append(encode_value(item, strict, report))
    else:
        _unsupported(value, strict, report)

    return e_value


def _unsupported(value: Any, strict: bool, report: Diagnostics,
                 message: Optional[str] = None) -> None:
    error = UnsupportedTypeError(value, message)
    if strict:
        raise error
    report(f"XMLRPC: {error}")


# Decoding

def decode_value(node, strict: bool = False,
                 diagnostics: Optional[Diagnostics] = None) -> Any:
    """Decode an XML-RPC ``<value>`` element into a native value

    Args:
        node: The ``value`` element
        strict: Propagate ProtocolError instead of substituting placeholders
        diagnostics: Sink for anomaly reports

    Returns:
        Decoded value; ``LENIENT_SENTINEL`` for an undecodable node in
        lenient mode

    Raises:
        ProtocolError: In strict mode, when the node is not valid XML-RPC
    """
    report = diagnostics or _report
    try:
        return _decode_typed(node, strict, report)
    except ProtocolError as e:
        if strict:
            raise
        report(f"XMLRPC: {e}")
        return LENIENT_SENTINEL


def _decode_typed(node, strict: bool, report: Diagnostics) -> Any:
    children = element_children(node)
    if not children:
        raise ProtocolError("Value element has no typed child")

    e_node = children[0]
    decoder = _DECODERS.get(e_node.tag)
    if decoder is None:
        raise ProtocolError(f"Unexpected value type: {e_node.tag}")
    return decoder(e_node, strict, report)


def _decode_boolean(element, strict, report) -> bool:
    text = _text(element).strip().lower()
    if text not in _BOOLEAN_LITERALS:
        raise ProtocolError(f"Invalid boolean literal: {_text(element)!r}")
    return _BOOLEAN_LITERALS[text]


def _decode_int(element, strict, report) -> int:
    text = _text(element).strip()
    if not _INT_PATTERN.match(text):
        raise ProtocolError(f"Invalid integer literal: {_text(element)!r}")
    return int(text)


def _decode_double(element, strict, report) -> float:
    try:
        return float(_text(element).strip())
    except ValueError:
        raise ProtocolError(f"Invalid double literal: {_text(element)!r}")


def _decode_string(element, strict, report) -> str:
    return _text(element)


def _decode_datetime(element, strict, report) -> datetime:
    try:
        return datetime.strptime(_text(element).strip(), DATETIME_FORMAT)
    except ValueError:
        raise ProtocolError(f"Invalid dateTime.iso8601 literal: {_text(element)!r}")


def _decode_base64(element, strict, report) -> bytes:
    payload = "".join(_text(element).split())
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        if strict:
            raise ProtocolError("Malformed base64 payload")
        report("XMLRPC: Malformed base64 payload, decoded as empty bytes")
        return b""


def _decode_array(element, strict, report) -> List[Any]:
    e_data = element.find("data")
    if e_data is None:
        return []
    return [decode_value(e_item, strict, report) for e_item in e_data.findall("value")]


def _decode_struct(element, strict, report) -> Dict[str, Any]:
    result = {}
    for e_member in element.findall("member"):
        e_name = e_member.find("name")
        if e_name is None:
            raise ProtocolError("Struct member without name")
        e_value = e_member.find("value")
        if e_value is None:
            raise ProtocolError(f"Struct member {_text(e_name)!r} without value")
        # duplicate names: last one wins
        result[_text(e_name)] = decode_value(e_value, strict, report)
    return result


_DECODERS = {
    "boolean": _decode_boolean,
    "int": _decode_int,
    "i4": _decode_int,
    "double": _decode_double,
    "string": _decode_string,
    "dateTime.iso8601": _decode_datetime,
    "base64": _decode_base64,
    "array": _decode_array,
    "struct": _decode_struct,
}
