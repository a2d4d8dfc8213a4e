"""
Remote file store: upload datasets and wait until the provider has processed them
"""

import asyncio
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

from finetune_studio.app.exceptions import FileNotReadyError, ProviderError, ValidationException
from finetune_studio.core.client import ProviderClient, response_body
from finetune_studio.core.retry import RetryPolicy
from finetune_studio.schema import FileObject, UploadedFile
from finetune_studio.utils.constants import (
    DEFAULT_FILE_PURPOSE,
    FILE_PURPOSES,
    FILE_STATUS_PROCESSED,
    UPLOAD_CONTENT_TYPE,
    UPLOAD_WAIT_DELAY_MS,
    UPLOAD_WAIT_MAX_RETRIES,
)
from finetune_studio.utils.logging import get_logger
from finetune_studio.utils.utils import remove_temp_file, write_temp_file

logger = get_logger(__name__)


class FileStoreClient:
    """Upload files to the provider and track their processing state"""

    def __init__(
        self,
        client: ProviderClient,
        strict: bool = False,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """
        Args:
            client: Provider HTTP client
            strict: Raise FileNotReadyError when an upload is not processed after the first wait
            sleep: Coroutine used between polls
        """
        self.client = client
        self.strict = strict
        self._sleep = sleep

    async def get_file(self, file_id: str) -> FileObject:
        """
        Fetch the provider record of a file

        Args:
            file_id: Provider file id

        Returns:
            FileObject with the current processing status
        """
        data = await self.client.get_json(f"files/{file_id}", context="Error checking file status")
        return FileObject.model_validate(data)

    async def get_file_content(self, file_id: str) -> bytes:
        """Raw bytes of a stored file"""
        return await self.client.get_bytes(f"files/{file_id}/content", context="Error downloading file")

    async def download_file(self, file_id: str, destination: Path) -> int:
        """
        Stream a stored file to disk without holding it in memory

        Args:
            file_id: Provider file id
            destination: Local path to write; parent directory must exist

        Returns:
            Number of bytes written
        """
        written = 0
        path = f"files/{file_id}/content"
        async with self.client.stream("GET", path, context="Error downloading file") as response:
            fh = await asyncio.to_thread(open, destination, "wb")
            try:
                async for chunk in response.aiter_bytes():
                    await asyncio.to_thread(fh.write, chunk)
                    written += len(chunk)
            finally:
                await asyncio.to_thread(fh.close)
        return written

    async def wait_for_file_processing(
        self,
        file_id: str,
        max_retries: int = UPLOAD_WAIT_MAX_RETRIES,
        delay_ms: int = UPLOAD_WAIT_DELAY_MS,
    ) -> bool:
        """
        Poll the file until the provider reports it as processed

        Errors while polling count as a failed attempt.

        Args:
            file_id: Provider file id
            max_retries: Maximum number of status checks
            delay_ms: Fixed delay between checks

        Returns:
            True once the file is processed, False if the checks ran out
        """
        logger.info(f"Waiting for file {file_id} to be processed...")
        policy = RetryPolicy.fixed(max_retries, delay_ms, sleep=self._sleep)

        async def check() -> Optional[str]:
            record = await self.get_file(file_id)
            logger.info(f"File {file_id} status: {record.status}")
            return record.status

        outcome = await policy.run(
            check,
            lambda status: status == FILE_STATUS_PROCESSED,
            description=f"processing of file {file_id}",
        )
        return outcome.succeeded

    async def upload_file(self, file: UploadedFile, purpose: str = DEFAULT_FILE_PURPOSE) -> str:
        """
        Upload a file and wait for the provider to process it

        The in-memory content is written to a temporary file which is removed once
        the upload request finishes. A failed processing wait only logs a warning
        unless the store is strict.

        Args:
            file: File received from the client
            purpose: Provider file purpose

        Returns:
            Provider file id
        """
        if purpose not in FILE_PURPOSES:
            raise ValidationException(f"Unsupported file purpose '{purpose}'. Expected one of {FILE_PURPOSES}")

        file_path = await asyncio.to_thread(write_temp_file, file.content, file.filename)
        logger.info(f"File path: {file_path}")
        try:
            logger.info(f"Uploading file to {self.client.config.base_url}files")
            content = await asyncio.to_thread(file_path.read_bytes)
            response = await self.client.request(
                "POST",
                "files",
                context="Error uploading file",
                data={"purpose": purpose},
                files={"file": (file_path.name, content, UPLOAD_CONTENT_TYPE)},
            )
        finally:
            await asyncio.to_thread(remove_temp_file, file_path)

        body = response_body(response)
        file_id = body.get("id") if isinstance(body, dict) else None
        if not file_id:
            logger.error(f"Upload response without a file id: {body}")
            raise ProviderError(
                "Error uploading file: provider response has no file id",
                status_code=response.status_code,
                reason=response.reason_phrase,
                body=body,
            )
        logger.info(f"File uploaded with ID: {file_id}")

        if not await self.wait_for_file_processing(file_id):
            if self.strict:
                raise FileNotReadyError(file_id)
            logger.warning(
                f"File {file_id} is not fully processed yet. Fine-tuning may fail if started too soon."
            )

        return file_id
