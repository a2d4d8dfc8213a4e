"""
Fine-tuning job orchestration: create jobs, read their state, download checkpoints
"""

import asyncio
import json
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional

from pydantic import ValidationError

from finetune_studio.app.exceptions import (
    ConfigurationError,
    FileNotReadyError,
    InvalidFormatError,
    ProviderError,
)
from finetune_studio.core.client import ProviderClient, provider_error_message
from finetune_studio.core.files import FileStoreClient
from finetune_studio.core.retry import RetryPolicy
from finetune_studio.schema import (
    Checkpoint,
    FineTuningParams,
    FineTuningStatus,
    Hyperparameters,
    JobEvent,
    UploadedFile,
)
from finetune_studio.utils.constants import (
    FILE_STATUS_PROCESSED,
    FORMAT_ERROR_KEYWORDS,
    HYPERPARAMETER_WIRE_NAMES,
    JOB_POLL_DELAY_MS,
    JOB_POLL_MAX_ATTEMPTS,
    RECHECK_WAIT_DELAY_MS,
    RECHECK_WAIT_MAX_RETRIES,
)
from finetune_studio.utils.logging import get_logger
from finetune_studio.utils.utils import remove_temp_file, temp_file_path

logger = get_logger(__name__)

JOB_CREATE_ERROR = "Error creating fine-tuning job"


def map_hyperparameters(hyperparameters: Optional[Hyperparameters]) -> Dict[str, Any]:
    """
    Translate hyperparameters to the provider's wire names

    Only fields that were supplied are included.

    Args:
        hyperparameters: Caller supplied hyperparameters

    Returns:
        Mapping ready for the job-create body, empty if nothing was supplied
    """
    if hyperparameters is None:
        return {}
    supplied = hyperparameters.model_dump(exclude_none=True)
    return {HYPERPARAMETER_WIRE_NAMES[name]: value for name, value in supplied.items()}


def build_job_request(
    params: FineTuningParams,
    training_file_id: str,
    validation_file_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Build the body for ``POST fine_tuning/jobs``

    Args:
        params: Job parameters
        training_file_id: Provider id of the uploaded training file
        validation_file_id: Provider id of the uploaded validation file

    Returns:
        Request body; optional keys are left out rather than sent empty
    """
    body: Dict[str, Any] = {"training_file": training_file_id, "model": params.model}

    hyperparameters = map_hyperparameters(params.hyperparameters)
    if hyperparameters:
        body["hyperparameters"] = hyperparameters

    if validation_file_id:
        body["validation_file"] = validation_file_id

    if params.wandb_api_key:
        wandb: Dict[str, Any] = {"api_key": params.wandb_api_key}
        if params.wandb_project:
            wandb["project"] = params.wandb_project
        body["integrations"] = [{"type": "wandb", "wandb": wandb}]

    return body


def redact_request(body: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of a job request that is safe to log or echo back"""
    redacted = json.loads(json.dumps(body))
    for integration in redacted.get("integrations", []):
        if "api_key" in integration.get("wandb", {}):
            integration["wandb"]["api_key"] = "***"
    return redacted


def classify_job_error(message: str) -> Exception:
    """
    Turn a job-create failure message into a tagged error

    Messages that talk about the data shape become InvalidFormatError, anything else
    stays a ProviderError.
    """
    lowered = message.lower()
    if any(keyword in lowered for keyword in FORMAT_ERROR_KEYWORDS):
        return InvalidFormatError(message)
    return ProviderError(message)


def parse_job_status(data: Any, context: str) -> FineTuningStatus:
    """
    Map a provider job object to a status, treating a malformed object as a provider failure

    Args:
        data: Decoded job JSON
        context: What was being done, prefixed to the error message

    Returns:
        FineTuningStatus with ISO-8601 timestamps
    """
    try:
        return FineTuningStatus.from_provider(data)
    except (KeyError, TypeError, AttributeError, ValidationError) as e:
        logger.error(f"{context}: unexpected job object {data!r}")
        raise ProviderError(f"{context}: provider returned an unexpected job object", body=data) from e


class FineTuningService:
    """Orchestrates provider fine-tuning jobs"""

    def __init__(
        self,
        client: ProviderClient,
        files: Optional[FileStoreClient] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """
        Initialize fine-tuning service

        Args:
            client: Provider HTTP client
            files: File store client; built from ``client`` when omitted
            sleep: Coroutine used between polls
        """
        self.client = client
        self._sleep = sleep
        self.files = files or FileStoreClient(client, strict=client.config.strict_file_processing, sleep=sleep)

    async def _ensure_file_processed(self, file_id: str) -> None:
        """Re-check a file and give it one more, slower wait before a job uses it"""
        record = await self.files.get_file(file_id)

        if record.status == FILE_STATUS_PROCESSED:
            return

        logger.info("File still not processed. Waiting additional time...")
        processed = await self.files.wait_for_file_processing(
            file_id, max_retries=RECHECK_WAIT_MAX_RETRIES, delay_ms=RECHECK_WAIT_DELAY_MS
        )
        if not processed:
            raise FileNotReadyError(
                file_id, "Training file is not ready yet. Please try again in a few moments."
            )

    async def create_fine_tuning_job(self, params: FineTuningParams) -> FineTuningStatus:
        """
        Upload the datasets and start a fine-tuning job

        Files are uploaded one after the other, training file first. Calling this
        twice uploads twice and creates two jobs.

        Args:
            params: Job parameters

        Returns:
            Status of the created job

        Raises:
            ConfigurationError: No training file given
            FileNotReadyError: Training file still unprocessed after both waits
            InvalidFormatError: Provider rejected the data shape
            ProviderError: Any other provider or network failure
        """
        if params.training_file is None:
            raise ConfigurationError("Training file is required")

        training_file_id = await self._upload(params.training_file)
        logger.info(f"Training file uploaded with ID: {training_file_id}")

        validation_file_id = None
        if params.validation_file is not None:
            validation_file_id = await self._upload(params.validation_file)
            logger.info(f"Validation file uploaded with ID: {validation_file_id}")

        await self._ensure_file_processed(training_file_id)

        body = build_job_request(params, training_file_id, validation_file_id)
        logger.info(f"Creating fine-tuning job with params: {json.dumps(redact_request(body), indent=2)}")

        try:
            data = await self.client.post_json("fine_tuning/jobs", body, context=JOB_CREATE_ERROR)
        except ProviderError as e:
            raise classify_job_error(self._job_error_message(e, params, body)) from e

        logger.info(f"Fine-tuning job created successfully: {data}")
        return parse_job_status(data, JOB_CREATE_ERROR)

    async def _upload(self, file: UploadedFile) -> str:
        """Upload one dataset; a provider rejection is classified like a job-create failure"""
        try:
            return await self.files.upload_file(file)
        except ProviderError as e:
            if e.status_code is None:
                raise
            raise classify_job_error(str(e)) from e

    @staticmethod
    def _job_error_message(error: ProviderError, params: FineTuningParams, body: Dict[str, Any]) -> str:
        """Build the diagnostic message for a failed job-create call"""
        if error.status_code is None:
            # Never got an answer, the error text already names the transport problem
            return str(error)

        detail = provider_error_message(error.body)
        if detail:
            return f"{JOB_CREATE_ERROR}: {detail}"

        return (
            f"{JOB_CREATE_ERROR}: {error.status_code} {error.reason}"
            f"\nRequest params: {json.dumps(redact_request(body))}"
            f'\nPlease verify that the model "{params.model}" supports fine-tuning.'
            "\nEnsure your training file is in the correct JSONL format with 'messages' array "
            "containing 'role' and 'content' fields."
        )

    async def get_job_status(self, job_id: str) -> FineTuningStatus:
        """
        Get the current status of a job

        Args:
            job_id: Provider job id

        Returns:
            FineTuningStatus with ISO-8601 timestamps
        """
        context = "Error getting fine-tuning job status"
        data = await self.client.get_json(f"fine_tuning/jobs/{job_id}", context=context)
        return parse_job_status(data, context)

    async def list_job_events(self, job_id: str) -> List[JobEvent]:
        """
        List the event log of a job

        Args:
            job_id: Provider job id

        Returns:
            Events as the provider returned them
        """
        data = await self.client.get_json(
            f"fine_tuning/jobs/{job_id}/events", context="Error listing fine-tuning job events"
        )
        return [JobEvent.model_validate(event) for event in data.get("data") or []]

    async def list_job_checkpoints(self, job_id: str) -> List[Checkpoint]:
        """
        List the checkpoints saved by a job

        Args:
            job_id: Provider job id

        Returns:
            Checkpoints with their result file ids
        """
        data = await self.client.get_json(
            f"fine_tuning/jobs/{job_id}/checkpoints", context="Error listing fine-tuning job checkpoints"
        )
        return [Checkpoint.model_validate(checkpoint) for checkpoint in data.get("data") or []]

    async def wait_for_job_completion(
        self, job_id: str, policy: Optional[RetryPolicy] = None
    ) -> FineTuningStatus:
        """
        Poll a job until it succeeds, fails or is cancelled

        Args:
            job_id: Provider job id
            policy: Polling policy; defaults to a fixed 10s interval for an hour

        Returns:
            Last status seen, terminal unless the policy ran out

        Raises:
            ProviderError: Every poll failed
        """
        policy = policy or RetryPolicy.fixed(JOB_POLL_MAX_ATTEMPTS, JOB_POLL_DELAY_MS, sleep=self._sleep)
        outcome = await policy.run(
            lambda: self.get_job_status(job_id),
            lambda status: status.status.is_terminal,
            description=f"fine-tuning job {job_id}",
        )
        if outcome.last_result is None:
            raise ProviderError(f"Could not read status of fine-tuning job {job_id}: {outcome.last_error}")
        if not outcome.succeeded:
            logger.warning(
                f"Fine-tuning job {job_id} still {outcome.last_result.status.value} after {outcome.attempts} checks"
            )
        return outcome.last_result

    async def download_checkpoint_file(self, file_id: str, filename: str) -> Path:
        """
        Download a checkpoint result file into a fresh temporary directory

        The bytes are streamed to disk as received; the file is not removed afterwards.

        Args:
            file_id: Provider file id of the result file
            filename: Name for the local file

        Returns:
            Path of the written file
        """
        file_path = await asyncio.to_thread(temp_file_path, filename)
        try:
            size = await self.files.download_file(file_id, file_path)
        except Exception:
            await asyncio.to_thread(remove_temp_file, file_path)
            raise
        logger.info(f"Checkpoint file {file_id} saved to {file_path} ({size} bytes)")
        return file_path
