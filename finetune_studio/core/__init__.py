"""
Core package - provider clients and fine-tuning orchestration
"""

from finetune_studio.core.client import ProviderClient
from finetune_studio.core.files import FileStoreClient
from finetune_studio.core.finetune import FineTuningService, build_job_request, map_hyperparameters
from finetune_studio.core.logstore import GenerationLogStore
from finetune_studio.core.retry import RetryOutcome, RetryPolicy
from finetune_studio.core.validation import ValidationReport, validate_jsonl, validate_jsonl_file

__all__ = [
    "ProviderClient",
    "FileStoreClient",
    "FineTuningService",
    "build_job_request",
    "map_hyperparameters",
    "GenerationLogStore",
    "RetryPolicy",
    "RetryOutcome",
    "ValidationReport",
    "validate_jsonl",
    "validate_jsonl_file",
]
