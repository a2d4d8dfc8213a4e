from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from finetune_studio.utils.utils import epoch_to_iso


class JobStatus(str, Enum):
    """Status of a provider fine-tuning job"""

    VALIDATING_FILES = "validating_files"
    QUEUED = "queued"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.SUCCEEDED, JobStatus.FAILED, JobStatus.CANCELLED)


class LogStatus(str, Enum):
    """Status recorded in the generation log store"""

    STARTED = "started"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class UploadedFile(BaseModel):
    """A file received from the client, held in memory until it is uploaded"""

    filename: str = Field(..., min_length=1, description="Original file name")
    content: bytes = Field(..., repr=False, description="Raw file bytes")

    @property
    def size(self) -> int:
        return len(self.content)


class Hyperparameters(BaseModel):
    """Training hyperparameters, named the way callers send them"""

    batch_size: Optional[int] = Field(default=None, gt=0, description="Training batch size")
    learning_rate: Optional[float] = Field(default=None, gt=0, description="Learning rate multiplier")
    n_epochs: Optional[int] = Field(default=None, gt=0, description="Number of training epochs")
    warmup_ratio: Optional[float] = Field(default=None, ge=0, description="Fraction of steps used for warmup")
    weight_decay: Optional[float] = Field(default=None, ge=0, description="Weight decay")
    lora: Optional[bool] = Field(default=None, description="Train a LoRA adapter instead of full weights")
    lora_r: Optional[int] = Field(default=None, gt=0, description="LoRA rank")
    lora_alpha: Optional[int] = Field(default=None, gt=0, description="LoRA alpha")
    lora_dropout: Optional[float] = Field(default=None, ge=0, description="LoRA dropout")
    packing: Optional[bool] = Field(default=None, description="Pack short examples into one sequence")
    max_grad_norm: Optional[float] = Field(default=None, gt=0, description="Gradient clipping norm")


class FineTuningParams(BaseModel):
    """Everything needed to start a fine-tuning job"""

    model: str = Field(..., min_length=1, description="Base model identifier")
    training_file: Optional[UploadedFile] = Field(default=None, description="Training dataset (JSONL)")
    validation_file: Optional[UploadedFile] = Field(default=None, description="Validation dataset (JSONL)")
    hyperparameters: Optional[Hyperparameters] = None
    wandb_api_key: Optional[str] = Field(default=None, repr=False, description="Weights & Biases API key")
    wandb_project: Optional[str] = Field(default=None, description="Weights & Biases project name")


class FineTuningStatus(BaseModel):
    """Client-side view of a provider job, serialised in camelCase for the UI"""

    job_id: str
    status: JobStatus
    model: str
    created_at: str
    finished_at: Optional[str] = None
    fine_tuned_model: Optional[str] = None
    trained_tokens: Optional[int] = None
    error: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, value: Any) -> Any:
        if isinstance(value, str) and value not in JobStatus._value2member_map_:
            return JobStatus.UNKNOWN
        return value

    @classmethod
    def from_provider(cls, data: Dict[str, Any]) -> "FineTuningStatus":
        """
        Map a provider job object (epoch-second timestamps) to a status

        Args:
            data: Job JSON as returned by ``fine_tuning/jobs``

        Returns:
            FineTuningStatus with ISO-8601 timestamps
        """
        error = data.get("error")
        return cls(
            job_id=data["id"],
            status=data.get("status") or JobStatus.UNKNOWN,
            model=data.get("model", ""),
            created_at=epoch_to_iso(data.get("created_at")) or "",
            finished_at=epoch_to_iso(data.get("finished_at")) if data.get("finished_at") else None,
            fine_tuned_model=data.get("fine_tuned_model"),
            trained_tokens=data.get("trained_tokens"),
            error=error if isinstance(error, dict) and error else None,
        )


class JobEvent(BaseModel):
    """One entry of a job's event log; provider fields beyond these pass through"""

    id: str
    created_at: int
    level: str = "info"
    message: str = ""
    data: Optional[Any] = None

    model_config = ConfigDict(extra="allow")


class Checkpoint(BaseModel):
    """A saved training artifact and the files it is made of"""

    id: str
    created_at: int
    result_files: List[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="allow")


class FileObject(BaseModel):
    """Provider record for an uploaded file"""

    id: str
    status: Optional[str] = None
    filename: Optional[str] = None
    size: Optional[int] = Field(default=None, alias="bytes")
    purpose: Optional[str] = None
    created_at: Optional[int] = None

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class GenerationLogEntry(BaseModel):
    """Row written to the generation log store"""

    request_id: str
    user_id: str = "anonymous"
    prompt: str
    status: LogStatus
    step: str
    details: Optional[Dict[str, Any]] = None
    image_url: Optional[str] = None
    created_at: Optional[str] = None
