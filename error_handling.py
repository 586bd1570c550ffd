"""
Standardized error handling for the common kit helpers.

Provides the error classification used by every template, the structured
errors returned from ``start()`` calls, and the diagnostic sink that prints
failures to standard error.
"""

import sqlite3
import sys
import traceback
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, Optional, TextIO, Union

from logging_config import get_logger

logger = get_logger()


class ErrorSeverity(Enum):
    """Error severity levels for classification and handling."""
    LOW = "low"          # Recovered locally, e.g. a re-prompt
    MEDIUM = "medium"    # The current call failed, the caller may continue
    HIGH = "high"        # A resource could not be acquired at all
    FATAL = "fatal"      # The helper cannot be used any further


class ErrorCategory(Enum):
    """Error categories for better classification and handling."""
    ENCODING = "encoding"            # Unknown character encoding names
    FILE = "file"                    # Missing or unopenable files
    IO = "io"                        # Read/write failures mid-operation
    DATABASE = "database"            # Driver, connection and statement errors
    INPUT = "input"                  # Console input that cannot be read
    VALIDATION = "validation"        # Values of the wrong shape
    EXTERNAL = "external"            # Anything raised by foreign code


@dataclass
class ErrorInfo:
    """Structured error information container."""
    category: ErrorCategory
    severity: ErrorSeverity
    message: str
    details: Optional[Dict[str, Any]] = None
    timestamp: Optional[datetime] = None
    recoverable: bool = True

    def __post_init__(self):
        if self.timestamp is None:
            self.timestamp = datetime.now()


class KitError(Exception):
    """Base exception class for all common kit errors."""

    def __init__(self, error_info: ErrorInfo, original_exception: Optional[BaseException] = None):
        self.error_info = error_info
        self.original_exception = original_exception
        super().__init__(error_info.message)

    @property
    def category(self) -> ErrorCategory:
        return self.error_info.category

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            'category': self.error_info.category.value,
            'severity': self.error_info.severity.value,
            'message': self.error_info.message,
            'details': self.error_info.details,
            'timestamp': self.error_info.timestamp.isoformat(),
            'recoverable': self.error_info.recoverable,
            'original_exception': str(self.original_exception) if self.original_exception else None
        }


class EncodingError(KitError):
    """The requested character encoding does not exist."""
    pass


class FileAccessError(KitError):
    """The file could not be opened."""
    pass


class StreamError(KitError):
    """Reading or writing failed after the stream was opened."""
    pass


class DatabaseError(KitError):
    """Database-related errors (driver lookup, connection, statements)."""
    pass


class NoSuitableDriverError(DatabaseError):
    """No registered driver understands the connection URL."""
    pass


class InputError(KitError):
    """Console input could not be read."""
    pass


class ValidationError(KitError):
    """Validation-related errors."""
    pass


class ExternalError(KitError):
    """Errors raised by code outside the kit."""
    pass


# Ordered: the first matching entry wins, so subclasses come first
EXCEPTION_MAPPING = (
    (LookupError, ErrorCategory.ENCODING),
    (FileNotFoundError, ErrorCategory.FILE),
    (IsADirectoryError, ErrorCategory.FILE),
    (NotADirectoryError, ErrorCategory.FILE),
    (PermissionError, ErrorCategory.FILE),
    (sqlite3.Error, ErrorCategory.DATABASE),
    (UnicodeError, ErrorCategory.IO),
    (OSError, ErrorCategory.IO),
    (EOFError, ErrorCategory.IO),
    (ValueError, ErrorCategory.VALIDATION),
    (TypeError, ErrorCategory.VALIDATION),
)

EXCEPTION_CLASSES = {
    ErrorCategory.ENCODING: EncodingError,
    ErrorCategory.FILE: FileAccessError,
    ErrorCategory.IO: StreamError,
    ErrorCategory.DATABASE: DatabaseError,
    ErrorCategory.INPUT: InputError,
    ErrorCategory.VALIDATION: ValidationError,
    ErrorCategory.EXTERNAL: ExternalError,
}


class ErrorHandler:
    """Centralized error classification and statistics."""

    def __init__(self):
        self.error_stats = {
            'total_errors': 0,
            'errors_by_category': {cat.value: 0 for cat in ErrorCategory},
            'errors_by_severity': {sev.value: 0 for sev in ErrorSeverity},
            'recoverable_errors': 0,
            'fatal_errors': 0
        }

    def classify_exception(self, exception: BaseException) -> ErrorInfo:
        """Automatically classify an exception into structured error info."""
        if isinstance(exception, KitError):
            return exception.error_info

        category = ErrorCategory.EXTERNAL
        for exc_type, cat in EXCEPTION_MAPPING:
            if isinstance(exception, exc_type):
                category = cat
                break

        severity = self._determine_severity(category, exception)

        return ErrorInfo(
            category=category,
            severity=severity,
            message=str(exception) or type(exception).__name__,
            details={
                'exception_type': type(exception).__name__,
                'traceback': ''.join(traceback.format_exception(
                    type(exception), exception, exception.__traceback__)),
            },
            recoverable=severity != ErrorSeverity.FATAL
        )

    def _determine_severity(self, category: ErrorCategory, exception: BaseException) -> ErrorSeverity:
        """Determine error severity based on category and exception details."""
        if category in (ErrorCategory.ENCODING, ErrorCategory.FILE):
            return ErrorSeverity.HIGH

        elif category == ErrorCategory.DATABASE:
            if isinstance(exception, sqlite3.OperationalError):
                error_msg = str(exception).lower()
                if 'unable to open' in error_msg:
                    return ErrorSeverity.HIGH
                return ErrorSeverity.MEDIUM
            elif isinstance(exception, sqlite3.IntegrityError):
                return ErrorSeverity.LOW  # Usually constraint violations
            return ErrorSeverity.MEDIUM

        elif category == ErrorCategory.VALIDATION:
            return ErrorSeverity.LOW

        return ErrorSeverity.MEDIUM

    def to_kit_error(self, exception: BaseException) -> KitError:
        """Wrap an exception in the KitError subclass matching its category."""
        if isinstance(exception, KitError):
            return exception
        error_info = self.classify_exception(exception)
        exception_class = EXCEPTION_CLASSES.get(error_info.category, KitError)
        return exception_class(error_info, exception)

    def handle_error(self, error_info: ErrorInfo, context: str = "") -> None:
        """Record and log an error."""
        self._update_stats(error_info)

        log_data = {
            'context': context,
            'category': error_info.category.value,
            'severity': error_info.severity.value,
            'message': error_info.message,
            'recoverable': error_info.recoverable,
        }

        if error_info.severity in (ErrorSeverity.FATAL, ErrorSeverity.HIGH):
            logger.error(f"ERROR_HANDLER: {log_data}")
        elif error_info.severity == ErrorSeverity.MEDIUM:
            logger.warning(f"ERROR_HANDLER: {log_data}")
        else:
            logger.debug(f"ERROR_HANDLER: {log_data}")

    def _update_stats(self, error_info: ErrorInfo):
        """Update error statistics."""
        self.error_stats['total_errors'] += 1
        self.error_stats['errors_by_category'][error_info.category.value] += 1
        self.error_stats['errors_by_severity'][error_info.severity.value] += 1

        if error_info.recoverable:
            self.error_stats['recoverable_errors'] += 1

        if error_info.severity == ErrorSeverity.FATAL:
            self.error_stats['fatal_errors'] += 1

    def get_stats(self) -> Dict[str, Any]:
        """Get error handling statistics."""
        return self.error_stats.copy()


# Global error handler instance
_error_handler = ErrorHandler()


def get_error_handler() -> ErrorHandler:
    """Get the global error handler instance."""
    return _error_handler


class DiagnosticSink:
    """
    Destination for the diagnostics the helpers print on failure.

    Messages are written one per line, followed by the stack trace of the
    exception when there is one. With no explicit stream the process's
    current ``sys.stderr`` is used, so redirections made after construction
    (pytest's capsys, contextlib.redirect_stderr) are honoured.
    """

    def __init__(self, stream: Optional[TextIO] = None, handler: Optional[ErrorHandler] = None):
        self._stream = stream
        self._handler = handler

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stderr

    @property
    def handler(self) -> ErrorHandler:
        return self._handler if self._handler is not None else get_error_handler()

    def report(
        self,
        messages: Union[str, Iterable[str]],
        exception: Optional[BaseException] = None,
        context: str = "",
    ) -> Optional[KitError]:
        """Print the diagnostic and return the structured error, if any."""
        if isinstance(messages, str):
            messages = (messages,)
        stream = self.stream
        for message in messages:
            print(message, file=stream)
        if exception is None:
            stream.flush()
            return None

        traceback.print_exception(
            type(exception), exception, exception.__traceback__, file=stream
        )
        stream.flush()

        error = self.handler.to_kit_error(exception)
        self.handler.handle_error(error.error_info, context)
        return error


_diagnostic_sink = DiagnosticSink()


def get_diagnostic_sink() -> DiagnosticSink:
    """Get the default diagnostic sink."""
    return _diagnostic_sink


def set_diagnostic_sink(sink: DiagnosticSink) -> DiagnosticSink:
    """Replace the default diagnostic sink, returning the previous one."""
    global _diagnostic_sink
    previous = _diagnostic_sink
    _diagnostic_sink = sink
    return previous
