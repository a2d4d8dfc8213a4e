"""
Logs Router - read entries stored in the generation log store
"""

from fastapi import APIRouter, Depends, Query

from finetune_studio.app.api.dependencies import get_log_store
from finetune_studio.app.schemas import LogsResponse
from finetune_studio.core import GenerationLogStore

router = APIRouter()


@router.get("", response_model=LogsResponse, response_model_exclude_none=True)
async def get_logs(
    request_id: str = Query(..., alias="requestId", min_length=1),
    log_store: GenerationLogStore = Depends(get_log_store),
):
    """
    Get every log entry recorded for one request

    Args:
        request_id: Id returned when the job was created

    Returns:
        Log rows, oldest first
    """
    rows = await log_store.get_events(request_id)
    message = None if log_store.enabled else "Generation log store is not configured"
    return LogsResponse(
        request_id=request_id,
        logs=rows,
        count=len(rows),
        store_enabled=log_store.enabled,
        message=message,
    )
