"""
JSON serialization tools

Converts between decoded XML-RPC values and JSON for command-line use.
"""

import json
import base64
from datetime import datetime
from typing import Any

from seam_xmlrpc.codec.values import DATETIME_FORMAT
from seam_xmlrpc.outcome import CallOutcome, Fault, Success

def to_jsonable(value: Any) -> Any:
    """Convert a decoded value to JSON-compatible data

    bytes become base64 text and datetimes use the XML-RPC wire format.

    Args:
        value: Decoded XML-RPC value

    Returns:
        JSON-compatible equivalent
    """
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, datetime):
        return value.strftime(DATETIME_FORMAT)
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    if isinstance(value, dict):
        return {key: to_jsonable(item) for key, item in value.items()}
    return value

def outcome_to_dict(outcome: CallOutcome) -> dict:
    """Convert a call outcome to a dictionary

    Args:
        outcome: Success, Fault or TransportError

    Returns:
        Dict: ``status`` plus the outcome's fields
    """
    if isinstance(outcome, Success):
        return {"status": "success", "result": to_jsonable(outcome.value)}
    if isinstance(outcome, Fault):
        return {
            "status": "fault",
            "fault_code": to_jsonable(outcome.fault_code),
            "fault_string": to_jsonable(outcome.fault_string),
            "fault": to_jsonable(outcome.value),
        }
    return {
        "status": "error",
        "method": outcome.method,
        "http_status": outcome.http_status,
        "reason": outcome.reason,
    }

def parse_cli_param(text: str) -> Any:
    """Parse a command-line parameter

    JSON literals (numbers, booleans, arrays, objects, quoted strings) are
    decoded; anything else is passed through as a plain string.
    """
    try:
        return json.loads(text)
    except ValueError:
        return text
