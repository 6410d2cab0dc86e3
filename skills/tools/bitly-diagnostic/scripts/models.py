#!/usr/bin/env python3
"""
Bitly Diagnostic - Data Models
Request, response and configuration records for a single shorten call.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .exceptions import ConfigurationError
from .logger import get_logger

logger = get_logger("models")


# ============================================================================
# Defaults
# ============================================================================

DEFAULT_LONG_URL = "https://example.com/test"
DEFAULT_HOSTNAME = "api-ssl.bitly.com"
DEFAULT_PORT = 443
DEFAULT_PATH = "/v4/shorten"
DEFAULT_LOG_LEVEL = "WARNING"

KEY_PREVIEW_LENGTH = 8

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ============================================================================
# JSON Helpers
# ============================================================================

def build_request_body(long_url: str) -> str:
    """Serialize the shorten payload compactly: {"long_url":"..."}"""
    return json.dumps({"long_url": long_url}, separators=(",", ":"), ensure_ascii=False)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Unexpected token {name} in JSON")


def parse_json_body(body: str) -> Any:
    """Parse a response body as strict JSON.

    NaN and Infinity literals are rejected, so only bodies a strict JSON
    parser accepts count as valid.

    Raises:
        ValueError: body is not valid JSON
    """
    return json.loads(body, parse_constant=_reject_constant)


def pretty_json(value: Any) -> str:
    """Indented JSON for the report."""
    return json.dumps(value, indent=2, ensure_ascii=False)


def preview_api_key(api_key: str) -> str:
    """First 8 characters of the key followed by '...'."""
    return api_key[:KEY_PREVIEW_LENGTH] + "..."


# ============================================================================
# Configuration
# ============================================================================

@dataclass(frozen=True)
class ProbeConfig:
    """Invocation arguments plus the endpoint the request goes to."""
    api_key: str
    long_url: str = DEFAULT_LONG_URL
    hostname: str = DEFAULT_HOSTNAME     # API host
    port: int = DEFAULT_PORT             # HTTPS port
    path: str = DEFAULT_PATH             # shorten endpoint path
    log_level: str = DEFAULT_LOG_LEVEL   # console log level
    log_file: Optional[str] = None       # extra log file, None = console only

    def validate(self) -> None:
        """Check option values.

        Raises:
            ConfigurationError: a value is out of range or malformed
        """
        if not self.hostname:
            raise ConfigurationError("hostname must not be empty", param_name="hostname")
        if not 1 <= self.port <= 65535:
            raise ConfigurationError(
                f"port must be between 1 and 65535, got {self.port}",
                param_name="port"
            )
        if not self.path.startswith("/"):
            raise ConfigurationError(
                f"path must start with '/', got {self.path!r}",
                param_name="path"
            )
        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigurationError(
                f"unknown log level {self.log_level!r}",
                param_name="log_level"
            )

    @property
    def endpoint_url(self) -> str:
        if self.port == DEFAULT_PORT:
            return f"https://{self.hostname}{self.path}"
        return f"https://{self.hostname}:{self.port}{self.path}"


# ============================================================================
# Request / Response
# ============================================================================

@dataclass
class ShortenRequest:
    """The one POST sent per invocation."""
    url: str
    body: str
    headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def build(cls, config: ProbeConfig) -> "ShortenRequest":
        body = build_request_body(config.long_url)
        headers = {
            "Authorization": f"Bearer {config.api_key}",
            "Content-Type": "application/json",
            "Content-Length": str(len(body.encode("utf-8"))),
        }
        return cls(url=config.endpoint_url, body=body, headers=headers)

    @property
    def content(self) -> bytes:
        return self.body.encode("utf-8")

    @property
    def content_length(self) -> int:
        return len(self.content)


@dataclass
class ProbeResponse:
    """Everything captured from the response once the stream has ended."""
    status_code: int
    status_message: str
    headers: Dict[str, Any] = field(default_factory=dict)
    body: str = ""
    chunk_count: int = 0

    @classmethod
    def from_chunks(
        cls,
        status_code: int,
        status_message: str,
        headers: Dict[str, Any],
        chunks: List[bytes],
        encoding: Optional[str] = None
    ) -> "ProbeResponse":
        """Join chunks in arrival order, then decode the whole buffer once."""
        raw = b"".join(chunks)
        try:
            body = raw.decode(encoding or "utf-8", errors="replace")
        except LookupError:
            logger.warning(f"Unknown charset {encoding!r}, decoding body as UTF-8")
            body = raw.decode("utf-8", errors="replace")
        return cls(
            status_code=status_code,
            status_message=status_message,
            headers=headers,
            body=body,
            chunk_count=len(chunks),
        )

    @property
    def is_error(self) -> bool:
        return self.status_code >= 400

    def parse_json(self) -> Tuple[bool, Any]:
        """Returns (True, value) when the body parses, else (False, None)."""
        try:
            return True, parse_json_body(self.body)
        except ValueError:
            return False, None


def _is_present(value: Any) -> bool:
    # Empty containers still count as present; empty strings, zero and null do not.
    if value is None or value is False:
        return False
    if isinstance(value, str):
        return value != ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value != 0
    return True


@dataclass
class ErrorSummary:
    """Fields of a Bitly error body worth showing."""
    message: Optional[Any] = None
    description: Optional[Any] = None
    errors: Optional[Any] = None

    @classmethod
    def from_body(cls, body: str) -> Optional["ErrorSummary"]:
        """Extract message/description/errors from an error body.

        Returns None when the body cannot be parsed, or parses to null.
        Non-object JSON yields an empty summary.
        """
        try:
            parsed = parse_json_body(body)
        except ValueError:
            return None
        if parsed is None:
            return None
        if not isinstance(parsed, dict):
            return cls()

        summary = cls()
        for name in ("message", "description", "errors"):
            value = parsed.get(name)
            if _is_present(value):
                setattr(summary, name, value)
        return summary

    def is_empty(self) -> bool:
        return self.message is None and self.description is None and self.errors is None
