# Bitly Diagnostic
# Sends one shorten request to the Bitly API and prints the full response

from .exceptions import (
    BitlyDiagnosticError,
    UsageError,
    TransportError,
    ConfigurationError,
)

from .models import (
    ProbeConfig,
    ShortenRequest,
    ProbeResponse,
    ErrorSummary,
    build_request_body,
    parse_json_body,
    preview_api_key,
)

from .logger import (
    LogEntry,
    ProbeLogger,
    get_logger,
    setup_logging,
)
from .request_runner import RequestRunner
from .report import DiagnosticReport
from .main import (
    create_argument_parser,
    create_config_from_args,
    main,
)

__all__ = [
    # Exceptions
    'BitlyDiagnosticError',
    'UsageError',
    'TransportError',
    'ConfigurationError',
    # Models
    'ProbeConfig',
    'ShortenRequest',
    'ProbeResponse',
    'ErrorSummary',
    'build_request_body',
    'parse_json_body',
    'preview_api_key',
    # Logger
    'LogEntry',
    'ProbeLogger',
    'get_logger',
    'setup_logging',
    # Runner
    'RequestRunner',
    # Report
    'DiagnosticReport',
    # Main
    'create_argument_parser',
    'create_config_from_args',
    'main',
]
