from collections.abc import Callable
from contextlib import _AsyncGeneratorContextManager
from typing import Any

from fastapi import APIRouter, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from finetune_studio.app.exceptions import (
    ConfigurationError,
    FileNotReadyError,
    InvalidFormatError,
    ProviderError,
    ServiceException,
    ValidationException,
    configuration_error_handler,
    file_not_ready_handler,
    generic_exception_handler,
    invalid_format_handler,
    provider_error_handler,
    service_exception_handler,
    validation_exception_handler,
)
from finetune_studio.app.middleware import LoggingMiddleware
from finetune_studio.utils.config import serving_settings


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed form fields and query parameters as 400"""
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'][1:]) or 'request'}: {error['msg']}" for error in exc.errors()
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "error": "ValidationError",
            "message": problems,
            "path": request.url.path,
        },
    )


def create_application(
    router: APIRouter,
    lifespan: Callable[[FastAPI], _AsyncGeneratorContextManager[Any]] | None = None,
) -> FastAPI:

    app = FastAPI(
        title=serving_settings.API_TITLE,
        description=serving_settings.API_DESCRIPTION,
        version=serving_settings.API_VERSION,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=serving_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=serving_settings.CORS_METHODS,
        allow_headers=serving_settings.CORS_HEADERS,
    )
    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ValidationException, validation_exception_handler)
    app.add_exception_handler(FileNotReadyError, file_not_ready_handler)
    app.add_exception_handler(InvalidFormatError, invalid_format_handler)
    app.add_exception_handler(ProviderError, provider_error_handler)
    app.add_exception_handler(ServiceException, service_exception_handler)
    app.add_exception_handler(ConfigurationError, configuration_error_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(router, prefix=serving_settings.API_V1_PREFIX)

    return app
