"""
Utilities module - Logging, error hierarchy and snapshot serialization
"""

from .logger import get_logger, configure_logging
from .serialization import utc_now, format_timestamp, parse_timestamp, dumps_todos, loads_todo_dicts

# Exception hierarchy
from .exceptions import (
    # Base
    TodoManagerError,

    # Configuration / validation
    ConfigurationError,
    ValidationError,
    InvalidParameterError,
    TodoNotFoundError,
    VALIDATION_ERROR_CODE,

    # Storage
    StorageErrorCode,
    StorageError,
    NetworkError,
    StoragePermissionError,
    QuotaExceededError,
    InvalidDataError,
    ServiceUnavailableError,
    UnknownStorageError,

    # Helpers
    storage_error_for,
    wrap_storage_exception,
)

__all__ = [
    'get_logger',
    'configure_logging',
    'utc_now',
    'format_timestamp',
    'parse_timestamp',
    'dumps_todos',
    'loads_todo_dicts',
    'TodoManagerError',
    'ConfigurationError',
    'ValidationError',
    'InvalidParameterError',
    'TodoNotFoundError',
    'VALIDATION_ERROR_CODE',
    'StorageErrorCode',
    'StorageError',
    'NetworkError',
    'StoragePermissionError',
    'QuotaExceededError',
    'InvalidDataError',
    'ServiceUnavailableError',
    'UnknownStorageError',
    'storage_error_for',
    'wrap_storage_exception',
]
