"""
Generation log store backed by the hosted Supabase database (PostgREST API)
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx

from finetune_studio.app.exceptions import ServiceException
from finetune_studio.core.client import response_body
from finetune_studio.schema import GenerationLogEntry
from finetune_studio.utils.constants import GENERATION_LOGS_TABLE, MISSING_TABLE_CODE
from finetune_studio.utils.logging import get_logger

logger = get_logger(__name__)


class GenerationLogStore:
    """Append and read request log rows; a store without credentials does nothing"""

    def __init__(
        self,
        url: Optional[str],
        key: Optional[str],
        table: str = GENERATION_LOGS_TABLE,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.table = table
        self._client: Optional[httpx.AsyncClient] = None

        if not url or not key:
            logger.warning("Supabase credentials are missing. Generation logs will not be stored.")
            return

        self._client = httpx.AsyncClient(
            base_url=f"{url.rstrip('/')}/rest/v1/",
            headers={"apikey": key, "Authorization": f"Bearer {key}"},
            timeout=10.0,
            transport=transport,
        )

    @property
    def enabled(self) -> bool:
        return self._client is not None

    async def log_event(self, entry: GenerationLogEntry) -> None:
        """
        Insert one log row; failures are logged and never raised

        Args:
            entry: Row to store. ``created_at`` defaults to now.
        """
        if self._client is None:
            return

        row = entry.model_dump(mode="json")
        row["created_at"] = row.get("created_at") or datetime.now(timezone.utc).isoformat()

        try:
            response = await self._client.post(self.table, json=row, headers={"Prefer": "return=minimal"})
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Error logging to Supabase: {e}")

    async def get_events(self, request_id: str) -> List[Dict[str, Any]]:
        """
        Read every row of one request, oldest first

        Args:
            request_id: Request id the rows were stored under

        Returns:
            Rows as stored; empty if the store is disabled or the table does not exist
        """
        if self._client is None:
            return []

        try:
            response = await self._client.get(
                self.table,
                params={"select": "*", "request_id": f"eq.{request_id}", "order": "created_at.asc"},
            )
        except httpx.HTTPError as e:
            logger.error(f"Error fetching logs from Supabase: {e}")
            raise ServiceException(f"Failed to fetch logs: {e}") from e

        if response.is_success:
            return response.json()

        body = response_body(response)
        if isinstance(body, dict) and body.get("code") == MISSING_TABLE_CODE:
            logger.warning(f"The {self.table} table does not exist in Supabase.")
            return []

        logger.error(f"Error fetching logs from Supabase: {response.status_code} {body}")
        raise ServiceException(f"Failed to fetch logs: {response.status_code} {response.reason_phrase}")

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
