"""
Health check endpoints
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from finetune_studio.app.api.dependencies import get_log_store, get_provider_config
from finetune_studio.app.exceptions import ConfigurationError
from finetune_studio.utils.config import serving_settings

router = APIRouter()


@router.get("", status_code=status.HTTP_200_OK)
async def health_check():
    """
    Basic health check endpoint

    Returns:
        Health status with service information
    """
    try:
        config = get_provider_config()
        provider = {"configured": True, "base_url": config.base_url}
    except ConfigurationError as e:
        provider = {"configured": False, "error": str(e)}

    return {
        "status": "healthy",
        "service": serving_settings.API_TITLE,
        "version": serving_settings.API_VERSION,
        "provider": provider,
        "log_store_enabled": get_log_store().enabled,
    }


@router.get("/ready", status_code=status.HTTP_200_OK)
async def readiness_check():
    """
    Readiness check - the provider API key must be configured

    Returns:
        Readiness status
    """
    try:
        get_provider_config()
    except ConfigurationError as e:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"status": "not_ready", "error": str(e)}
        )
    return {"status": "ready", "service": serving_settings.API_TITLE}


@router.get("/live", status_code=status.HTTP_200_OK)
async def liveness_check():
    """
    Liveness check - indicates if service is running

    Returns:
        Simple liveness status
    """
    return {"status": "alive", "service": serving_settings.API_TITLE}
