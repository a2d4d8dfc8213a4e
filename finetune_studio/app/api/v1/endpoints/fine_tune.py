"""
Fine-tune Router - create provider jobs and read their state
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from pydantic import ValidationError

from finetune_studio.app.api.dependencies import get_fine_tuning_service, get_log_store
from finetune_studio.app.exceptions import FinetuneStudioException, ValidationException
from finetune_studio.app.schemas import (
    CheckpointDownloadResponse,
    JobCheckpointsResponse,
    JobCreatedResponse,
    JobEventsResponse,
    JobStatusResponse,
)
from finetune_studio.core import FineTuningService, GenerationLogStore
from finetune_studio.core.validation import has_dataset_extension, validate_jsonl_bytes
from finetune_studio.schema import FineTuningParams, GenerationLogEntry, Hyperparameters, LogStatus, UploadedFile
from finetune_studio.utils import generate_request_id, logger, settings

router = APIRouter()

ACTIONS = ("status", "events", "checkpoints", "download")


async def _read_dataset(upload: UploadFile, label: str) -> UploadedFile:
    """Read an uploaded dataset after checking its extension and, if enabled, its content"""
    if not has_dataset_extension(upload.filename or ""):
        raise ValidationException(f"{label} file must be in JSONL format with .jsonl extension")

    content = await upload.read()
    if settings.VALIDATE_UPLOADS:
        report = validate_jsonl_bytes(content)
        if not report.is_valid:
            shown = "; ".join(report.errors[:5])
            raise ValidationException(f"{label} file is not a valid chat dataset ({report.summary()}): {shown}")

    return UploadedFile(filename=upload.filename, content=content)


@router.post("", response_model=JobCreatedResponse, response_model_exclude_none=True)
async def create_job(
    model: Optional[str] = Form(None),
    training_file: Optional[UploadFile] = File(None, alias="trainingFile"),
    validation_file: Optional[UploadFile] = File(None, alias="validationFile"),
    batch_size: Optional[int] = Form(None, alias="batchSize"),
    learning_rate: Optional[float] = Form(None, alias="learningRate"),
    n_epochs: Optional[int] = Form(None, alias="nEpochs"),
    warmup_ratio: Optional[float] = Form(None, alias="warmupRatio"),
    weight_decay: Optional[float] = Form(None, alias="weightDecay"),
    lora: Optional[bool] = Form(None),
    lora_r: Optional[int] = Form(None, alias="loraR"),
    lora_alpha: Optional[int] = Form(None, alias="loraAlpha"),
    lora_dropout: Optional[float] = Form(None, alias="loraDropout"),
    packing: Optional[bool] = Form(None),
    max_grad_norm: Optional[float] = Form(None, alias="maxGradNorm"),
    wandb_api_key: Optional[str] = Form(None, alias="wandbApiKey"),
    wandb_project: Optional[str] = Form(None, alias="wandbProject"),
    service: FineTuningService = Depends(get_fine_tuning_service),
    log_store: GenerationLogStore = Depends(get_log_store),
):
    """
    Upload the datasets and start a fine-tuning job

    Returns:
        Created job, plus the request id its log entries are stored under
    """
    if not model:
        raise ValidationException("Model is required")
    if training_file is None:
        raise ValidationException("Training file is required")

    training = await _read_dataset(training_file, "Training")
    validation = await _read_dataset(validation_file, "Validation") if validation_file is not None else None

    try:
        hyperparameters = Hyperparameters(
            batch_size=batch_size,
            learning_rate=learning_rate,
            n_epochs=n_epochs,
            warmup_ratio=warmup_ratio,
            weight_decay=weight_decay,
            lora=lora,
            lora_r=lora_r,
            lora_alpha=lora_alpha,
            lora_dropout=lora_dropout,
            packing=packing,
            max_grad_norm=max_grad_norm,
        )
    except ValidationError as e:
        raise ValidationException(f"Invalid hyperparameters: {e}") from e

    params = FineTuningParams(
        model=model,
        training_file=training,
        validation_file=validation,
        hyperparameters=hyperparameters if hyperparameters.model_dump(exclude_none=True) else None,
        wandb_api_key=wandb_api_key or None,
        wandb_project=wandb_project or None,
    )

    request_id = generate_request_id()
    prompt = f"fine-tune {model} on {training.filename}"
    await log_store.log_event(
        GenerationLogEntry(
            request_id=request_id,
            prompt=prompt,
            status=LogStatus.STARTED,
            step="create_fine_tuning_job",
            details={"model": model, "training_file": training.filename, "training_bytes": training.size},
        )
    )

    logger.info("Creating fine-tuning job...")
    try:
        job = await service.create_fine_tuning_job(params)
    except FinetuneStudioException as e:
        logger.error(f"Error creating fine-tuning job: {e}")
        await log_store.log_event(
            GenerationLogEntry(
                request_id=request_id,
                prompt=prompt,
                status=LogStatus.FAILED,
                step="create_fine_tuning_job",
                details={"error": str(e), "kind": type(e).__name__},
            )
        )
        raise

    await log_store.log_event(
        GenerationLogEntry(
            request_id=request_id,
            prompt=prompt,
            status=LogStatus.COMPLETED,
            step="create_fine_tuning_job",
            details=job.model_dump(mode="json", by_alias=True),
        )
    )
    return JobCreatedResponse(
        message=f"Fine-tuning job '{job.job_id}' created successfully",
        request_id=request_id,
        job=job,
    )


@router.get("")
async def read_job(
    job_id: Optional[str] = Query(None, alias="jobId"),
    action: Optional[str] = Query(None, description=f"One of {', '.join(ACTIONS)}"),
    file_id: Optional[str] = Query(None, alias="fileId"),
    filename: Optional[str] = Query(None),
    service: FineTuningService = Depends(get_fine_tuning_service),
):
    """
    Read job status, events or checkpoints, or download a checkpoint file

    Returns:
        Envelope holding the requested data
    """
    if not job_id:
        raise ValidationException("Job ID is required")

    if action == "status":
        return JobStatusResponse(status=await service.get_job_status(job_id))
    if action == "events":
        return JobEventsResponse(events=await service.list_job_events(job_id))
    if action == "checkpoints":
        return JobCheckpointsResponse(checkpoints=await service.list_job_checkpoints(job_id))
    if action == "download" and file_id and filename:
        file_path = await service.download_checkpoint_file(file_id, filename)
        return CheckpointDownloadResponse(file_path=str(file_path))

    raise ValidationException("Invalid action")
