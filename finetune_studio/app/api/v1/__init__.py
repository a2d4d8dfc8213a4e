"""
API v1 Router
"""

from fastapi import APIRouter

from finetune_studio.app.api.v1.endpoints import fine_tune, health, logs

api_router = APIRouter()

# Include routers
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(fine_tune.router, prefix="/fine-tune", tags=["fine-tune"])
api_router.include_router(logs.router, prefix="/logs", tags=["logs"])
