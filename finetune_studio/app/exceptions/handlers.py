"""
HTTP exception handlers for FastAPI
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from finetune_studio.app.exceptions.base import (
    ConfigurationError,
    FileNotReadyError,
    InvalidFormatError,
    ProviderError,
    ServiceException,
    ValidationException,
)
from finetune_studio.utils.logging import get_logger

logger = get_logger(__name__)

FILE_NOT_READY_HINT = "The provider is still processing the uploaded file. Wait a minute and submit the job again."


def _error_response(request: Request, status_code: int, error: str, message: str, **extra) -> JSONResponse:
    content = {
        "success": False,
        "error": error,
        "message": message,
        "path": request.url.path,
    }
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


async def validation_exception_handler(request: Request, exc: ValidationException) -> JSONResponse:
    """Handle ValidationException"""
    return _error_response(request, status.HTTP_400_BAD_REQUEST, "ValidationError", str(exc))


async def file_not_ready_handler(request: Request, exc: FileNotReadyError) -> JSONResponse:
    """Handle FileNotReadyError; the client is expected to retry"""
    logger.warning(f"File {exc.file_id} not ready: {exc}")
    return _error_response(request, status.HTTP_409_CONFLICT, "FileNotReady", str(exc), hint=FILE_NOT_READY_HINT)


async def invalid_format_handler(request: Request, exc: InvalidFormatError) -> JSONResponse:
    """Handle InvalidFormatError"""
    return _error_response(request, status.HTTP_400_BAD_REQUEST, "InvalidFormat", str(exc))


async def provider_error_handler(request: Request, exc: ProviderError) -> JSONResponse:
    """Handle ProviderError"""
    return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "ProviderError", str(exc))


async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    """Handle ConfigurationError"""
    logger.error(f"Configuration error: {exc}")
    return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "ConfigurationError", str(exc))


async def service_exception_handler(request: Request, exc: ServiceException) -> JSONResponse:
    """Handle ServiceException"""
    return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "ServiceError", str(exc))


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle generic exceptions"""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _error_response(
        request, status.HTTP_500_INTERNAL_SERVER_ERROR, "InternalServerError", "An unexpected error occurred"
    )
