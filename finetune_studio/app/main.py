"""
Main FastAPI application for Finetune Studio
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from finetune_studio.app.api.dependencies import close_dependencies, get_log_store
from finetune_studio.app.api.setup import create_application
from finetune_studio.app.api.v1 import api_router as api_v1_router
from finetune_studio.utils import logger
from finetune_studio.utils.config import serving_settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info(f"Starting {serving_settings.API_TITLE} v{serving_settings.API_VERSION}")
    _ = get_log_store()
    yield
    logger.info("Shutting down application")
    await close_dependencies()


app = create_application(router=api_v1_router, lifespan=lifespan)


@app.get("/", tags=["root"])
async def root():
    """Root endpoint"""
    return {
        "service": serving_settings.API_TITLE,
        "version": serving_settings.API_VERSION,
        "docs": "/docs",
        "health": f"{serving_settings.API_V1_PREFIX}/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "finetune_studio.app.main:app",
        host=serving_settings.HOST,
        port=serving_settings.PORT,
        reload=serving_settings.RELOAD,
        log_level=serving_settings.LOG_LEVEL.lower(),
    )
