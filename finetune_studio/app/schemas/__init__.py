"""Schemas for API responses"""

from .response import (
    ApiResponse,
    CheckpointDownloadResponse,
    JobCheckpointsResponse,
    JobCreatedResponse,
    JobEventsResponse,
    JobStatusResponse,
    LogsResponse,
)

__all__ = [
    "ApiResponse",
    "JobCreatedResponse",
    "JobStatusResponse",
    "JobEventsResponse",
    "JobCheckpointsResponse",
    "CheckpointDownloadResponse",
    "LogsResponse",
]
