#!/usr/bin/env python3
"""
Bitly Diagnostic - Logger Module
Logging for the diagnostic tool.

Log records go to stderr so they never interleave with the report on stdout.
"""

import logging
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional


# ============================================================================
# Log Entry Model
# ============================================================================

@dataclass
class LogEntry:
    """A log record kept in memory alongside the handler output."""
    timestamp: str
    level: str
    message: str
    context: str = ""
    error_type: Optional[str] = None
    error_details: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "timestamp": self.timestamp,
            "level": self.level,
            "message": self.message,
        }
        if self.context:
            result["context"] = self.context
        if self.error_type:
            result["error_type"] = self.error_type
        if self.error_details:
            result["error_details"] = self.error_details
        return result


# ============================================================================
# Probe Logger
# ============================================================================

class ProbeLogger:
    """Logger for one diagnostic run.

    Provides:
    - a console handler on stderr with timestamp, level and context
    - an optional log file
    - an in-memory list of entries for inspection after the run
    """

    LOGGER_NAME = "BitlyDiagnostic"
    LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

    def __init__(
        self,
        log_level: str = "WARNING",
        log_file: Optional[str] = None,
        stream=None
    ):
        """
        Args:
            log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
            log_file: extra file to append records to, None for console only
            stream: console stream, defaults to sys.stderr
        """
        self.log_level = getattr(logging, log_level.upper(), logging.WARNING)
        self.log_file = log_file
        self._log_entries: List[LogEntry] = []

        self.logger = logging.getLogger(self.LOGGER_NAME)
        self.logger.setLevel(self.log_level)
        self.logger.propagate = False
        self.close()

        formatter = logging.Formatter(self.LOG_FORMAT, self.DATE_FORMAT)

        console_handler = logging.StreamHandler(stream or sys.stderr)
        console_handler.setLevel(self.log_level)
        console_handler.setFormatter(formatter)
        self.logger.addHandler(console_handler)

        if log_file:
            self._setup_file_handler(log_file, formatter)

    def _setup_file_handler(self, log_file: str, formatter: logging.Formatter) -> None:
        try:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(str(log_path), encoding="utf-8", mode="a")
            file_handler.setLevel(self.log_level)
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)
        except OSError as e:
            # Fall back to the console handler only
            self.logger.warning(f"Cannot open log file {log_file}: {e}")
            self.log_file = None

    # ========================================================================
    # Core Logging Methods
    # ========================================================================

    def _create_entry(
        self,
        level: str,
        message: str,
        context: str = "",
        error_type: Optional[str] = None,
        error_details: Optional[Dict[str, Any]] = None
    ) -> LogEntry:
        entry = LogEntry(
            timestamp=datetime.now().isoformat(),
            level=level,
            message=message,
            context=context,
            error_type=error_type,
            error_details=error_details
        )
        self._log_entries.append(entry)
        return entry

    @staticmethod
    def _format(message: str, context: str) -> str:
        return f"[{context}] {message}" if context else message

    def debug(self, message: str, context: str = "") -> None:
        self._create_entry("DEBUG", message, context)
        self.logger.debug(self._format(message, context))

    def info(self, message: str, context: str = "") -> None:
        self._create_entry("INFO", message, context)
        self.logger.info(self._format(message, context))

    def warning(
        self,
        message: str,
        context: str = "",
        error: Optional[Exception] = None
    ) -> None:
        error_type = type(error).__name__ if error else None
        details = {"exception_message": str(error)} if error else None
        self._create_entry("WARNING", message, context, error_type, details)
        self.logger.warning(self._format(message, context))

    def error(
        self,
        message: str,
        context: str = "",
        error: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Log at ERROR, recording the exception's simple attributes as details."""
        error_type = type(error).__name__ if error else None
        error_details = dict(details or {})

        if error:
            error_details["exception_message"] = str(error)
            for key, value in vars(error).items():
                if not key.startswith("_") and isinstance(value, (str, int, float, bool)):
                    error_details[key] = value

        self._create_entry("ERROR", message, context, error_type, error_details)
        self.logger.error(self._format(message, context), exc_info=error is not None)

    # ========================================================================
    # Entries
    # ========================================================================

    def get_log_entries(self) -> List[LogEntry]:
        return self._log_entries.copy()

    def get_error_entries(self) -> List[LogEntry]:
        return [e for e in self._log_entries if e.level in ("ERROR", "CRITICAL")]

    def clear_logs(self) -> None:
        self._log_entries.clear()

    def close(self) -> None:
        """Detach and close every handler on the named logger."""
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()


def setup_logging(
    log_level: str = "WARNING",
    log_file: Optional[str] = None,
    stream=None
) -> ProbeLogger:
    """Configure the tool's logger for this run and return it."""
    return ProbeLogger(log_level=log_level, log_file=log_file, stream=stream)


def get_logger(name: str) -> logging.Logger:
    """Child of the tool's logger, for modules that only need plain records."""
    return logging.getLogger(f"{ProbeLogger.LOGGER_NAME}.{name}")
