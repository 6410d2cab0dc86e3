#!/usr/bin/env python3
"""
Bitly Diagnostic - Report Printer
Human-readable console report for one shorten call.

Sections, in order:
    === Bitly API Test ===     request summary (stdout)
    === Response ===           status, headers, raw and parsed body (stdout)
    === ERROR ANALYSIS ===     only for status >= 400 (stdout)
    Request error: ...         transport failure (stderr)
"""

import sys
from typing import Optional, TextIO

from .models import (
    ErrorSummary,
    ProbeConfig,
    ProbeResponse,
    ShortenRequest,
    preview_api_key,
    pretty_json,
)


class DiagnosticReport:
    """Prints the report sections to the given streams."""

    def __init__(self, out: Optional[TextIO] = None, err: Optional[TextIO] = None):
        self._out = out
        self._err = err

    @property
    def out(self) -> TextIO:
        return self._out or sys.stdout

    @property
    def err(self) -> TextIO:
        return self._err or sys.stderr

    def _line(self, *parts) -> None:
        print(*parts, file=self.out)

    def print_preflight(self, config: ProbeConfig, request: ShortenRequest) -> None:
        self._line("=== Bitly API Test ===")
        self._line("URL to shorten:", config.long_url)
        self._line("API Key (first 8 chars):", preview_api_key(config.api_key))
        self._line()
        self._line("Request body:", request.body)
        self._line()

    def print_response(self, response: ProbeResponse) -> None:
        self._line("=== Response ===")
        self._line("Status Code:", response.status_code)
        self._line("Status Message:", response.status_message)
        self._line()
        self._line("Headers:", pretty_json(response.headers))
        self._line()
        self._line("Body (raw):", response.body)
        self._line()

    def print_parsed_body(self, response: ProbeResponse) -> None:
        ok, parsed = response.parse_json()
        if ok:
            self._line("Body (parsed):", pretty_json(parsed))
        else:
            self._line("Body is not valid JSON")

    def print_error_analysis(self, response: ProbeResponse) -> None:
        """Extract message/description/errors from the body, if any."""
        self._line()
        self._line("=== ERROR ANALYSIS ===")
        summary = ErrorSummary.from_body(response.body)
        if summary is None:
            self._line("Could not parse error response")
            return
        if summary.message is not None:
            self._line("Error Message:", summary.message)
        if summary.description is not None:
            self._line("Error Description:", summary.description)
        if summary.errors is not None:
            self._line("Detailed Errors:", pretty_json(summary.errors))

    def print_transport_error(self, message: str) -> None:
        print("Request error:", message, file=self.err)

    def render(self, response: ProbeResponse) -> None:
        """Everything printed once the response stream has ended."""
        self.print_response(response)
        self.print_parsed_body(response)
        if response.is_error:
            self.print_error_analysis(response)
