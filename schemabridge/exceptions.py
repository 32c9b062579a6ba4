"""
Custom exceptions for schemabridge.
"""
from typing import Optional, Dict, Any, List


class SchemaBridgeError(Exception):
    """Base exception for all schema translation errors."""

    def __init__(
        self,
        message: str,
        *,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            context: Additional context about the error
            original_exception: The original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception


class SchemaValidationError(SchemaBridgeError):
    """Raised when input data does not satisfy a schema."""

    def __init__(
        self,
        message: str,
        *,
        errors: Optional[List[Dict[str, Any]]] = None,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ) -> None:
        super().__init__(message, context=context, original_exception=original_exception)
        self.errors = errors or []


class UnsupportedSchemaError(SchemaBridgeError):
    """Raised when a schema kind cannot be translated."""
    pass
