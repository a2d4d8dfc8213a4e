"""API response schemas"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from finetune_studio.schema import Checkpoint, FineTuningStatus, JobEvent


class ApiResponse(BaseModel):
    """Common envelope, serialised in camelCase"""

    success: bool = True

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class JobCreatedResponse(ApiResponse):
    """Response for a newly created job"""

    message: str
    request_id: str = Field(..., description="Id the request's log entries are stored under")
    job: FineTuningStatus


class JobStatusResponse(ApiResponse):
    status: FineTuningStatus


class JobEventsResponse(ApiResponse):
    events: List[JobEvent]


class JobCheckpointsResponse(ApiResponse):
    checkpoints: List[Checkpoint]


class CheckpointDownloadResponse(ApiResponse):
    file_path: str


class LogsResponse(ApiResponse):
    """Stored log rows of one request"""

    request_id: str
    logs: List[Dict[str, Any]]
    count: int
    store_enabled: bool
    message: Optional[str] = None
