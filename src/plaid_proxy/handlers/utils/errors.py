"""
Error types raised by the dispatch layer.

Every error that reaches the caller is rendered as an error envelope with
HTTP status 500. The classes below only distinguish how the request failed
so the dispatcher can log caller mistakes apart from upstream failures.
"""

from enum import Enum


class ErrorCategory(str, Enum):
    """Error categories for classification."""
    UNSUPPORTED_OPERATION = "UNSUPPORTED_OPERATION"
    MALFORMED_REQUEST = "MALFORMED_REQUEST"
    UPSTREAM = "UPSTREAM"


class ProxyError(Exception):
    """Base exception class for errors raised before the provider is called."""

    category: ErrorCategory = ErrorCategory.UPSTREAM

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnsupportedOperationError(ProxyError):
    """Raised when the requested operation is not in the registry or client."""

    category = ErrorCategory.UNSUPPORTED_OPERATION

    def __init__(self, operation_name: str | None):
        super().__init__(f"A function named {operation_name} is not available.")
        self.operation_name = operation_name


class MalformedParametersError(ProxyError):
    """Raised when the request body cannot be used as a parameter bag."""

    category = ErrorCategory.MALFORMED_REQUEST
