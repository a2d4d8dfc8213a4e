"""
Base exceptions for the application
"""

from typing import Any, Optional


class FinetuneStudioException(Exception):
    """Base exception for all Finetune Studio errors"""


class ConfigurationError(FinetuneStudioException):
    """Exception raised for configuration errors (missing API key, missing training file)"""


class ValidationException(FinetuneStudioException):
    """Exception raised when request input is rejected before reaching the provider"""


class ServiceException(FinetuneStudioException):
    """Exception raised by service layer"""


class ProviderError(ServiceException):
    """The provider rejected a request or could not be reached.

    ``status_code``, ``reason`` and ``body`` are set when the provider answered.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        reason: Optional[str] = None,
        body: Any = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason
        self.body = body


class FileNotReadyError(ServiceException):
    """An uploaded file did not reach the ``processed`` state in time"""

    def __init__(self, file_id: str, message: Optional[str] = None):
        super().__init__(message or f"File {file_id} is not ready yet. Please try again in a few moments.")
        self.file_id = file_id


class InvalidFormatError(ServiceException):
    """The provider refused the training data because of its shape"""
