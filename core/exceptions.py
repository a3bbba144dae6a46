"""
Custom exceptions for data extraction with structured error context.

Every public extraction and telemetry operation reports failure by raising
one of these exceptions. Each carries a context dictionary for debugging
and, where a lower-level error triggered it, the original exception
(also chained as ``__cause__``).

Exception Hierarchy:
    ETLException (base)
    ├── ExtractionError
    │   ├── TransportError          (retryable: connect/send/read failed)
    │   ├── RequestBuildError       (non-retryable: request template invalid)
    │   ├── DecodeError             (non-retryable: structured parse failed)
    │   └── ExtractOperationError   (operation semantics, e.g. empty body)
    │       └── UnsupportedOperationError
    ├── StorageError                (pass-through from SQL/object storage)
    └── RetryableError / NonRetryableError (mixins)

Nothing in this package retries. The mixins only classify errors for
callers that want to layer their own retry policy on top.
"""

from typing import Optional, Dict, Any
from datetime import datetime, timezone


class ETLException(Exception):
    """
    Base exception for all extraction and telemetry errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information (source, url, status, etc.)
        original_exception: The original exception that was caught (if any)
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception
        self.timestamp = datetime.now(timezone.utc)

        # Add timestamp to context
        self.context["error_timestamp"] = self.timestamp.isoformat()

        # Chain original exception if provided
        super().__init__(message)
        if original_exception:
            self.__cause__ = original_exception

    def __str__(self) -> str:
        """Format error message with context."""
        base_msg = f"{self.__class__.__name__}: {self.message}"

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/storage."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "original_error": str(self.original_exception) if self.original_exception else None
        }


# ============================================================================
# Retry Classification Mixins
# ============================================================================

class RetryableError(ETLException):
    """
    Mixin for transient errors a caller may choose to retry.

    Examples:
    - Connection refused / DNS failure
    - Timeouts while sending or reading
    """
    pass


class NonRetryableError(ETLException):
    """
    Mixin for permanent errors that will fail the same way on retry.

    Examples:
    - Malformed request template (invalid URL, bad header value)
    - Response body that does not match the requested shape
    """
    pass


# ============================================================================
# Extraction Errors
# ============================================================================

class ExtractionError(ETLException):
    """Base exception for data extraction failures."""
    pass


class TransportError(RetryableError, ExtractionError):
    """
    Raised when a request could not be sent or its response not read.

    Context should include:
        - url: The target URL
        - method: HTTP method
        - source_name: Name of the extractor
    """
    pass


class RequestBuildError(NonRetryableError, ExtractionError):
    """
    Raised when the request template cannot be turned into a request.

    This is a programming error (bad URL, unencodable header), not a
    transient condition.
    """
    pass


class DecodeError(NonRetryableError, ExtractionError):
    """
    Raised when a response body cannot be decoded into the requested shape.

    The message always embeds the underlying decode error and a bounded
    snippet of the raw body.

    Context should include:
        - url: The target URL
        - status_code: HTTP status code of the response
        - body_length: Full length of the body in characters
    """
    pass


class ExtractOperationError(ExtractionError):
    """
    Raised when an extraction operation violates its own semantics.

    Examples: empty response body for a structured decode.
    """
    pass


class UnsupportedOperationError(ExtractOperationError):
    """
    Raised when an extractor is asked for something it does not support.

    Examples: setting a checkpoint on a non-incremental source,
    requesting metadata from an adapter that has none, or requesting
    an output format outside ``supported_formats()``.
    """
    pass


# ============================================================================
# Storage Errors
# ============================================================================

class StorageError(ETLException):
    """
    Raised when a storage backend (SQL database, object store, local file)
    fails underneath an extractor or the execution log store.

    The backend's own exception is always preserved as ``original_exception``.

    Context should include:
        - operation: What was being attempted (save, get, ensure_table)
        - table_name: Table involved (if applicable)
    """
    pass
