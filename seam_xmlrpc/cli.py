"""
Command-line XML-RPC caller

    seam-xmlrpc http://localhost:8000/RPC2 echo true 42 '"hi"'
"""
import argparse
import json
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from .client import XmlRpcClient
from .config import ClientConfig, DecodePolicy
from .errors import UnsupportedTypeError
from .outcome import Fault, Success
from .telemetry import setup_metrics, setup_tracer
from .utils.serialization import outcome_to_dict, parse_cli_param

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAULT = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="seam-xmlrpc", description="Call an XML-RPC method")
    parser.add_argument("location", help="Endpoint URL")
    parser.add_argument("method", help="Remote method name")
    parser.add_argument("params", nargs="*",
                        help="Parameters as JSON literals; other text is sent as a string")
    parser.add_argument("--timeout", type=float, help="Request timeout in seconds")
    parser.add_argument("--strict", action="store_true",
                        help="Fail on malformed values instead of substituting placeholders")
    parser.add_argument("--no-tracing", action="store_true", help="Disable OpenTelemetry spans")
    parser.add_argument("--otlp-endpoint", help="Export spans and metrics to this OTLP receiver")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    overrides = {"location": args.location}
    if args.timeout is not None:
        overrides["timeout_seconds"] = args.timeout
    if args.strict:
        overrides["decode_policy"] = DecodePolicy.STRICT
    if args.no_tracing:
        overrides["enable_tracing"] = False
    if args.otlp_endpoint:
        overrides["otlp_endpoint"] = args.otlp_endpoint
    try:
        config = replace(ClientConfig.from_env(), **overrides)
    except ValueError as e:
        parser.error(str(e))

    if config.otlp_endpoint:
        if config.enable_tracing:
            setup_tracer(config.service_name, config.otlp_endpoint)
        setup_metrics(config.service_name, config.otlp_endpoint)

    params = [parse_cli_param(p) for p in args.params]
    logger.debug(f"Calling {args.method} on {args.location} with {params}")

    with XmlRpcClient(config=config) as client:
        try:
            outcome = client.call_sync(args.method, params)
        except UnsupportedTypeError as e:
            print(f"error: {e}", file=sys.stderr)
            return EXIT_ERROR

    print(json.dumps(outcome_to_dict(outcome), indent=2))
    if isinstance(outcome, Success):
        return EXIT_SUCCESS
    if isinstance(outcome, Fault):
        return EXIT_FAULT
    return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
