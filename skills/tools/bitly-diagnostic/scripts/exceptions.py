#!/usr/bin/env python3
"""
Bitly Diagnostic - Exception Classes
Exception hierarchy for the diagnostic tool.
"""

from typing import Optional


class BitlyDiagnosticError(Exception):
    """Base class for every error raised by the diagnostic tool."""

    def __init__(self, message: str, context: str = ""):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.context:
            return f"[{self.context}] {self.message}"
        return self.message


class UsageError(BitlyDiagnosticError):
    """A required command-line argument is missing.

    Examples:
        - API key not given
        - API key given as an empty string
    """

    def __init__(self, message: str, argument: str = ""):
        self.argument = argument
        super().__init__(message, context="usage")


class TransportError(BitlyDiagnosticError):
    """The HTTP exchange itself failed before a complete response was read.

    Examples:
        - DNS resolution failure
        - Connection refused or reset
        - TLS handshake failure
    """

    def __init__(
        self,
        message: str,
        url: str = "",
        original_error: Optional[Exception] = None
    ):
        self.url = url
        self.original_error = original_error
        super().__init__(message, context="transport")


class ConfigurationError(BitlyDiagnosticError):
    """An option value is out of range or malformed.

    Examples:
        - Port outside 1..65535
        - Path not starting with '/'
        - Unknown log level
    """

    def __init__(self, message: str, param_name: str = ""):
        self.param_name = param_name
        super().__init__(message, context="config")
