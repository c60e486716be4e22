"""
Standardized Exception Hierarchy for TodoManager

This module provides the exception hierarchy used across the todo model,
the task store and every persistence strategy.

Exception Categories:
- Configuration Errors: Issues with settings or environment
- Validation Errors: Rejected todo input (empty title, title too long, ...)
- Storage Errors: One class per storage error kind (network-error,
  permission-error, quota-exceeded, invalid-data, service-unavailable,
  unknown-error)

Usage:
    from todo_manager.utils.exceptions import (
        ValidationError,
        StorageError,
        StorageErrorCode,
    )

    if not title.strip():
        raise ValidationError("title", "Todo title is required")

    try:
        await storage.save_todos(todos)
    except StorageError as e:
        if e.code == StorageErrorCode.QUOTA_EXCEEDED:
            ...
"""

import errno
import json
from enum import Enum
from typing import Optional, Any, Dict, Type


# ============================================================================
# Base Exception
# ============================================================================

class TodoManagerError(Exception):
    """
    Base exception for all TodoManager errors.

    All custom exceptions inherit from this class to enable
    centralized error handling and logging.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize base exception.

        Args:
            message: Human-readable error message
            error_code: Optional error code for categorization
            details: Optional dictionary with additional error context
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# ============================================================================
# Configuration Errors
# ============================================================================

class ConfigurationError(TodoManagerError):
    """Raised when there's an issue with configuration or settings."""

    def __init__(
        self,
        setting_name: str,
        message: str,
        expected_value: Optional[Any] = None,
        actual_value: Optional[Any] = None
    ):
        details = {"setting_name": setting_name}
        if expected_value is not None:
            details["expected_value"] = str(expected_value)
        if actual_value is not None:
            details["actual_value"] = str(actual_value)

        super().__init__(
            message=f"Configuration error for '{setting_name}': {message}",
            error_code="CONFIG_ERROR",
            details=details
        )
        self.setting_name = setting_name


# ============================================================================
# Validation Errors
# ============================================================================

VALIDATION_ERROR_CODE = "validation-error"


class ValidationError(TodoManagerError):
    """
    Raised when todo input is rejected before any state change.

    Always carries the ``validation-error`` code so callers can present it
    next to storage errors without type checks.
    """

    def __init__(
        self,
        field_name: str,
        message: str,
        actual_value: Optional[Any] = None
    ):
        details = {"field": field_name}
        if actual_value is not None:
            details["actual_value"] = str(actual_value)

        super().__init__(
            message=message,
            error_code=VALIDATION_ERROR_CODE,
            details=details
        )
        self.field_name = field_name


class InvalidParameterError(ValidationError):
    """Raised when a parameter value is outside its allowed set."""

    def __init__(
        self,
        parameter_name: str,
        message: str,
        expected: Optional[str] = None,
        actual_value: Optional[Any] = None
    ):
        full_message = f"Invalid parameter '{parameter_name}': {message}"
        if expected:
            full_message += f" (expected {expected})"
        super().__init__(parameter_name, full_message, actual_value=actual_value)
        self.parameter_name = parameter_name


class TodoNotFoundError(ValidationError):
    """Raised by the task store when an operation targets an unknown id."""

    def __init__(self, todo_id: str):
        super().__init__("id", f"Todo '{todo_id}' not found", actual_value=todo_id)
        self.todo_id = todo_id


# ============================================================================
# Storage Errors
# ============================================================================

class StorageErrorCode(str, Enum):
    """Error kinds shared by every persistence strategy."""
    NETWORK_ERROR = "network-error"
    PERMISSION_ERROR = "permission-error"
    QUOTA_EXCEEDED = "quota-exceeded"
    INVALID_DATA = "invalid-data"
    SERVICE_UNAVAILABLE = "service-unavailable"
    UNKNOWN_ERROR = "unknown-error"


class StorageError(TodoManagerError):
    """Base class for persistence failures. ``code`` names the error kind."""

    code: StorageErrorCode = StorageErrorCode.UNKNOWN_ERROR

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        strategy: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        details = dict(details or {})
        if strategy:
            details["strategy"] = strategy
        if cause is not None:
            details["cause"] = f"{type(cause).__name__}: {cause}"

        super().__init__(
            message=message,
            error_code=self.code.value,
            details=details
        )
        self.cause = cause
        self.strategy = strategy
        if cause is not None:
            self.__cause__ = cause


class NetworkError(StorageError):
    """Raised when a remote call cannot complete (timeout, connection loss)."""
    code = StorageErrorCode.NETWORK_ERROR


class StoragePermissionError(StorageError):
    """Raised when the medium or the server refuses access."""
    code = StorageErrorCode.PERMISSION_ERROR


class QuotaExceededError(StorageError):
    """Raised when the medium has no room for the snapshot."""
    code = StorageErrorCode.QUOTA_EXCEEDED


class InvalidDataError(StorageError):
    """Raised when a stored or received snapshot cannot be decoded."""
    code = StorageErrorCode.INVALID_DATA


class ServiceUnavailableError(StorageError):
    """Raised when a strategy is unavailable or the endpoint is gone."""
    code = StorageErrorCode.SERVICE_UNAVAILABLE


class UnknownStorageError(StorageError):
    """Raised for failures that fit no other kind."""
    code = StorageErrorCode.UNKNOWN_ERROR


_ERROR_CLASSES: Dict[StorageErrorCode, Type[StorageError]] = {
    StorageErrorCode.NETWORK_ERROR: NetworkError,
    StorageErrorCode.PERMISSION_ERROR: StoragePermissionError,
    StorageErrorCode.QUOTA_EXCEEDED: QuotaExceededError,
    StorageErrorCode.INVALID_DATA: InvalidDataError,
    StorageErrorCode.SERVICE_UNAVAILABLE: ServiceUnavailableError,
    StorageErrorCode.UNKNOWN_ERROR: UnknownStorageError,
}

_QUOTA_ERRNOS = {errno.ENOSPC, getattr(errno, "EDQUOT", errno.ENOSPC)}


# ============================================================================
# Convenience Functions
# ============================================================================

def storage_error_for(
    code: StorageErrorCode,
    message: str,
    cause: Optional[BaseException] = None,
    strategy: Optional[str] = None
) -> StorageError:
    """Build the StorageError subclass matching ``code``."""
    return _ERROR_CLASSES[StorageErrorCode(code)](message, cause=cause, strategy=strategy)


def wrap_storage_exception(
    original_error: BaseException,
    operation: str,
    strategy: Optional[str] = None
) -> StorageError:
    """
    Wrap a generic exception in the matching StorageError subclass.

    Args:
        original_error: The exception raised by the medium or transport
        operation: The operation that was being performed (read/write/clear)
        strategy: Name of the strategy that failed

    Returns:
        A StorageError subclass carrying the original error as its cause
    """
    if isinstance(original_error, StorageError):
        return original_error

    if isinstance(original_error, (json.JSONDecodeError, UnicodeDecodeError)):
        return InvalidDataError(
            f"Invalid data during {operation}", cause=original_error, strategy=strategy
        )

    if isinstance(original_error, PermissionError):
        return StoragePermissionError(
            f"Permission denied during {operation}", cause=original_error, strategy=strategy
        )

    if isinstance(original_error, OSError) and original_error.errno in _QUOTA_ERRNOS:
        return QuotaExceededError(
            "Storage quota exceeded", cause=original_error, strategy=strategy
        )

    return UnknownStorageError(
        f"Failed to {operation}", cause=original_error, strategy=strategy
    )


__all__ = [
    # Base
    "TodoManagerError",

    # Configuration
    "ConfigurationError",

    # Validation
    "VALIDATION_ERROR_CODE",
    "ValidationError",
    "InvalidParameterError",
    "TodoNotFoundError",

    # Storage
    "StorageErrorCode",
    "StorageError",
    "NetworkError",
    "StoragePermissionError",
    "QuotaExceededError",
    "InvalidDataError",
    "ServiceUnavailableError",
    "UnknownStorageError",

    # Utilities
    "storage_error_for",
    "wrap_storage_exception",
]
