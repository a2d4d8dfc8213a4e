"""Domain models for provider files and fine-tuning jobs"""

from finetune_studio.schema.fine_tuning import (
    Checkpoint,
    FileObject,
    FineTuningParams,
    FineTuningStatus,
    GenerationLogEntry,
    Hyperparameters,
    JobEvent,
    JobStatus,
    LogStatus,
    UploadedFile,
)

__all__ = [
    "JobStatus",
    "LogStatus",
    "UploadedFile",
    "Hyperparameters",
    "FineTuningParams",
    "FineTuningStatus",
    "JobEvent",
    "Checkpoint",
    "FileObject",
    "GenerationLogEntry",
]
