"""
Async HTTP client for the OpenAI-compatible provider API
"""

import json
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, NoReturn, Optional

import httpx

from finetune_studio.app.exceptions import ProviderError
from finetune_studio.utils.config import ProviderConfig
from finetune_studio.utils.logging import get_logger

logger = get_logger(__name__)


def response_body(response: httpx.Response) -> Any:
    """Decoded JSON body if there is one, otherwise the raw text"""
    try:
        return response.json()
    except ValueError:
        return response.text


def provider_error_message(body: Any) -> Optional[str]:
    """
    Pull the provider's own error message out of a response body

    Args:
        body: Decoded response body

    Returns:
        ``error.message`` when present, the serialised ``error`` object otherwise,
        or None if the body carries no error
    """
    if not isinstance(body, dict) or not body.get("error"):
        return None
    error = body["error"]
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if isinstance(error, str):
        return error
    return json.dumps(error)


class ProviderClient:
    """Thin wrapper around ``httpx.AsyncClient`` with bearer auth and error logging"""

    def __init__(self, config: ProviderConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize provider client

        Args:
            config: Provider connection parameters
            transport: Optional transport, used by tests to fake the provider
        """
        self.config = config
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            headers={"Authorization": f"Bearer {config.api_key}"},
            timeout=config.timeout,
            transport=transport,
        )
        logger.info(f"Using API endpoint: {config.base_url}")

    async def request(self, method: str, path: str, context: str, **kwargs) -> httpx.Response:
        """
        Send a request and raise ``ProviderError`` on transport errors or non-2xx answers

        Args:
            method: HTTP method
            path: Path relative to the configured base URL
            context: What was being done, prefixed to error messages
            **kwargs: Passed to ``httpx.AsyncClient.request``

        Returns:
            Successful response
        """
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{context}: {e!r}")
            raise ProviderError(f"{context}: {e}") from e

        if response.is_success:
            return response

        self._raise_for_response(response, context)

    @asynccontextmanager
    async def stream(self, method: str, path: str, context: str, **kwargs) -> AsyncIterator[httpx.Response]:
        """
        Open a streamed request; the body is read by the caller, chunk by chunk

        Args:
            method: HTTP method
            path: Path relative to the configured base URL
            context: What was being done, prefixed to error messages
            **kwargs: Passed to ``httpx.AsyncClient.stream``

        Yields:
            Successful response whose body has not been read yet
        """
        try:
            async with self._client.stream(method, path, **kwargs) as response:
                if not response.is_success:
                    await response.aread()
                    self._raise_for_response(response, context)
                yield response
        except httpx.HTTPError as e:
            logger.error(f"{context}: {e!r}")
            raise ProviderError(f"{context}: {e}") from e

    @staticmethod
    def _raise_for_response(response: httpx.Response, context: str) -> NoReturn:
        body = response_body(response)
        logger.error(f"{context}")
        logger.error(f"Status: {response.status_code}")
        logger.error(f"Status Text: {response.reason_phrase}")
        logger.error(f"Response Data: {body}")

        detail = provider_error_message(body) or f"{response.status_code} {response.reason_phrase}"
        raise ProviderError(
            f"{context}: {detail}",
            status_code=response.status_code,
            reason=response.reason_phrase,
            body=body,
        )

    async def get_json(self, path: str, context: str, **kwargs) -> Dict[str, Any]:
        response = await self.request("GET", path, context, **kwargs)
        return response.json()

    async def post_json(self, path: str, payload: Dict[str, Any], context: str) -> Dict[str, Any]:
        response = await self.request("POST", path, context, json=payload)
        return response.json()

    async def get_bytes(self, path: str, context: str) -> bytes:
        response = await self.request("GET", path, context)
        return response.content

    async def close(self) -> None:
        """Close the underlying connection pool"""
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
