"""
Exceptions package
Centralized exception definitions and handlers
"""

from finetune_studio.app.exceptions.base import (
    ConfigurationError,
    FileNotReadyError,
    FinetuneStudioException,
    InvalidFormatError,
    ProviderError,
    ServiceException,
    ValidationException,
)
from finetune_studio.app.exceptions.handlers import (
    configuration_error_handler,
    file_not_ready_handler,
    generic_exception_handler,
    invalid_format_handler,
    provider_error_handler,
    service_exception_handler,
    validation_exception_handler,
)

__all__ = [
    # Base exceptions
    "FinetuneStudioException",
    "ConfigurationError",
    "ValidationException",
    "ServiceException",
    "ProviderError",
    "FileNotReadyError",
    "InvalidFormatError",
    # Handlers
    "configuration_error_handler",
    "file_not_ready_handler",
    "generic_exception_handler",
    "invalid_format_handler",
    "provider_error_handler",
    "service_exception_handler",
    "validation_exception_handler",
]
