#!/usr/bin/env python3
"""
Bitly Diagnostic - Main Entry Point
Command-line interface

Sends one shorten request to the Bitly API and prints the full response,
which helps track down 400 errors.

Usage:
    python -m bitly_diagnostic <API_KEY> [LONG_URL]
"""

import argparse
import sys
from typing import List, Optional

import requests

from .models import (
    DEFAULT_HOSTNAME,
    DEFAULT_LONG_URL,
    DEFAULT_PATH,
    DEFAULT_PORT,
    ProbeConfig,
)
from .request_runner import RequestRunner
from .report import DiagnosticReport
from .logger import setup_logging
from .exceptions import (
    BitlyDiagnosticError,
    ConfigurationError,
    TransportError,
    UsageError,
)

__version__ = "1.0.0"

PROG = "bitly-diagnostic"


def create_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Send one request to the Bitly shorten API and print the full response",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s "your-bitly-api-key"
  %(prog)s "your-bitly-api-key" "https://example.com/page?param=value"
  %(prog)s "your-bitly-api-key" --host localhost --port 8443 -v
        """
    )

    # Checked by hand so a missing key exits with 1 and our own usage text
    parser.add_argument(
        "api_key",
        nargs="?",
        metavar="API_KEY",
        help="Bitly access token, sent as a bearer token"
    )
    parser.add_argument(
        "long_url",
        nargs="?",
        default=DEFAULT_LONG_URL,
        metavar="LONG_URL",
        help=f"URL to shorten, default: {DEFAULT_LONG_URL}"
    )

    # Endpoint
    parser.add_argument(
        "--host",
        default=DEFAULT_HOSTNAME,
        metavar="HOST",
        help=f"API host, default: {DEFAULT_HOSTNAME}"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=DEFAULT_PORT,
        metavar="PORT",
        help=f"HTTPS port, default: {DEFAULT_PORT}"
    )
    parser.add_argument(
        "--path",
        default=DEFAULT_PATH,
        metavar="PATH",
        help=f"shorten endpoint path, default: {DEFAULT_PATH}"
    )

    # Logging
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="log request progress to stderr (DEBUG level)"
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="only log errors"
    )
    parser.add_argument(
        "--log-file",
        metavar="FILE",
        help="also append log records to FILE"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    return parser


def create_config_from_args(args: argparse.Namespace) -> ProbeConfig:
    """Build and validate the run configuration.

    Raises:
        UsageError: API key missing or empty
        ConfigurationError: an option value is invalid
    """
    if not args.api_key:
        raise UsageError("API key is required", argument="API_KEY")

    if args.verbose:
        log_level = "DEBUG"
    elif args.quiet:
        log_level = "ERROR"
    else:
        log_level = "WARNING"

    config = ProbeConfig(
        api_key=args.api_key,
        long_url=args.long_url,
        hostname=args.host,
        port=args.port,
        path=args.path,
        log_level=log_level,
        log_file=args.log_file,
    )
    config.validate()
    return config


def print_usage(file=None) -> None:
    file = file or sys.stderr
    print(f"Usage: {PROG} <API_KEY> [LONG_URL]", file=file)
    print("", file=file)
    print("Example:", file=file)
    print(f'  {PROG} "your-bitly-api-key" "https://example.com/page?param=value"', file=file)


def main(
    args: Optional[List[str]] = None,
    session: Optional[requests.Session] = None
) -> int:
    """
    Args:
        args: argument list, None for sys.argv
        session: HTTP session to send through, None for a fresh one

    Returns:
        exit code (0 = report printed, 1 = usage, config or transport error)
    """
    parser = create_argument_parser()
    parsed_args = parser.parse_args(args)

    try:
        config = create_config_from_args(parsed_args)
    except UsageError:
        print_usage()
        return 1
    except ConfigurationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    logger = setup_logging(config.log_level, config.log_file)
    report = DiagnosticReport()

    try:
        with RequestRunner(config, session=session, logger=logger) as runner:
            request = runner.build_request()
            report.print_preflight(config, request)
            response = runner.send(request)
            report.render(response)
            return 0

    except TransportError as e:
        report.print_transport_error(e.message)
        return 1

    except BitlyDiagnosticError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 1

    finally:
        logger.close()


if __name__ == "__main__":
    sys.exit(main())
