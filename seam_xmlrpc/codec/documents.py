"""
XML-RPC document construction and parsing

Request:  <?xml version="1.0" encoding="UTF-8"?><methodCall>...</methodCall>
Response: <methodResponse> with params/param/value or fault/value
"""

from typing import Any, Iterable, Optional

from lxml import etree

from seam_xmlrpc.codec.values import NOT_XML_TEXT, Diagnostics, encode_value
from seam_xmlrpc.errors import UnsupportedTypeError

XML_DECLARATION = b'<?xml version="1.0" encoding="UTF-8"?>'


def build_request(method: str, params: Iterable[Any] = (), strict: bool = False,
                  diagnostics: Optional[Diagnostics] = None):
    """Build a ``methodCall`` element tree

    Args:
        method: Remote method name
        params: Ordered parameters, each encoded with ``encode_value``
        strict: Raise UnsupportedTypeError instead of degrading
        diagnostics: Sink for anomaly reports

    Returns:
        Root ``methodCall`` element

    Raises:
        UnsupportedTypeError: The method name cannot be written as XML text,
            in either mode; or a parameter is unsupported in strict mode
    """
    e_method_call = etree.Element("methodCall")
    try:
        etree.SubElement(e_method_call, "methodName").text = method
    except (TypeError, ValueError):
        raise UnsupportedTypeError(method, f"Method name {NOT_XML_TEXT}: {method!r}")
    e_params = etree.SubElement(e_method_call, "params")
    for param in params:
        e_param = etree.SubElement(e_params, "param")
        e_param.append(encode_value(param, strict, diagnostics))
    return e_method_call


def serialize_request(root) -> bytes:
    """Serialize a request tree as UTF-8 bytes with the XML 1.0 declaration."""
    return XML_DECLARATION + etree.tostring(root, encoding="UTF-8", xml_declaration=False)


def dumps_request(method: str, params: Iterable[Any] = (), strict: bool = False,
                  diagnostics: Optional[Diagnostics] = None) -> bytes:
    return serialize_request(build_request(method, params, strict, diagnostics))


def parse_response(content: Optional[bytes]):
    """Parse a response body into its root element

    Entity resolution and network access are disabled.

    Raises:
        lxml.etree.XMLSyntaxError: If the body is not well-formed XML
    """
    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    return etree.fromstring(content or b"", parser)
