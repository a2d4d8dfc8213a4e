"""
Shared fixtures: a fake provider behind ``httpx.MockTransport``
"""

import json
import re
from typing import Any, Dict, List, Optional, Union

import httpx
import pytest

from finetune_studio.core import FileStoreClient, FineTuningService, ProviderClient
from finetune_studio.schema import UploadedFile
from finetune_studio.utils.config import ProviderConfig

BASE_URL = "https://provider.test/v1/"
API_KEY = "test-key"

VALID_JSONL = (
    b'{"messages": [{"role": "user", "content": "Hi"}, {"role": "assistant", "content": "Hello!"}]}\n'
    b'{"messages": [{"role": "system", "content": "Be brief"}, {"role": "user", "content": "2+2?"}, '
    b'{"role": "assistant", "content": "4"}]}\n'
)

# A status entry is either a provider status string or an HTTP error code to answer with
StatusEntry = Union[str, int]


class FakeProvider:
    """In-memory stand-in for the provider's files and fine-tuning APIs"""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.uploads: List[Dict[str, Any]] = []
        self.job_bodies: List[Dict[str, Any]] = []
        self.file_statuses: Dict[str, List[StatusEntry]] = {}
        self.default_file_status: StatusEntry = "processed"
        self.file_contents: Dict[str, bytes] = {}
        self.upload_error: Optional[httpx.Response] = None
        self.job_error: Optional[httpx.Response] = None
        self.job_response: Dict[str, Any] = {
            "id": "ftjob-1",
            "status": "validating_files",
            "model": "m1",
            "created_at": 1700000000,
            "finished_at": None,
        }
        self.job_statuses: List[StatusEntry] = ["running"]
        self.events: List[Dict[str, Any]] = []
        self.checkpoints: List[Dict[str, Any]] = []

    # Helpers for assertions
    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method and self._path(r) == path]

    def status_polls(self, file_id: str) -> int:
        return len(self.calls("GET", f"files/{file_id}"))

    @staticmethod
    def _path(request: httpx.Request) -> str:
        return request.url.path.removeprefix("/v1/")

    @staticmethod
    def _next(queue: List[StatusEntry], default: StatusEntry) -> StatusEntry:
        if not queue:
            return default
        return queue.pop(0) if len(queue) > 1 else queue[0]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = self._path(request)

        if request.method == "POST" and path == "files":
            if self.upload_error is not None:
                return self.upload_error
            content = request.content
            file_id = f"file-{len(self.uploads) + 1}"
            filename = re.search(rb'filename="([^"]+)"', content).group(1).decode()
            purpose = re.search(rb'name="purpose"\r\n\r\n([^\r]+)\r\n', content).group(1).decode()
            self.uploads.append({"id": file_id, "filename": filename, "purpose": purpose, "raw": content})
            return httpx.Response(200, json={"id": file_id, "object": "file", "status": "uploaded"})

        match = re.fullmatch(r"files/([^/]+)", path)
        if request.method == "GET" and match:
            file_id = match.group(1)
            status = self._next(self.file_statuses.get(file_id, []), self.default_file_status)
            if isinstance(status, int):
                return httpx.Response(status, json={"error": {"message": "temporarily unavailable"}})
            return httpx.Response(200, json={"id": file_id, "status": status, "bytes": 42})

        match = re.fullmatch(r"files/([^/]+)/content", path)
        if request.method == "GET" and match:
            if match.group(1) not in self.file_contents:
                return httpx.Response(404, json={"error": {"message": "No such file"}})
            return httpx.Response(200, content=self.file_contents[match.group(1)])

        if request.method == "POST" and path == "fine_tuning/jobs":
            self.job_bodies.append(json.loads(request.content))
            if self.job_error is not None:
                return self.job_error
            return httpx.Response(200, json=self.job_response)

        match = re.fullmatch(r"fine_tuning/jobs/([^/]+)(/events|/checkpoints)?", path)
        if request.method == "GET" and match:
            job_id, suffix = match.groups()
            if suffix == "/events":
                return httpx.Response(200, json={"object": "list", "data": self.events})
            if suffix == "/checkpoints":
                return httpx.Response(200, json={"object": "list", "data": self.checkpoints})
            status = self._next(self.job_statuses, "running")
            if isinstance(status, int):
                return httpx.Response(status, json={"error": {"message": "job lookup failed"}})
            return httpx.Response(
                200,
                json={
                    "id": job_id,
                    "status": status,
                    "model": "m1",
                    "created_at": 1700000000,
                    "finished_at": 1700003600 if status in ("succeeded", "failed", "cancelled") else None,
                },
            )

        if request.method == "GET" and path in ("models", "fine_tuning/jobs", "files"):
            return httpx.Response(200, json={"object": "list", "data": [{"id": "m1"}, {"id": "m2"}]})

        return httpx.Response(404, json={"error": {"message": f"Unknown route {request.method} {path}"}})


class SleepRecorder:
    """Replacement for asyncio.sleep that records delays instead of waiting"""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def provider_config():
    return ProviderConfig(api_key=API_KEY, base_url=BASE_URL)


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def sleeps():
    return SleepRecorder()


@pytest.fixture
def provider_client(provider_config, fake_provider):
    return ProviderClient(provider_config, transport=httpx.MockTransport(fake_provider.handler))


@pytest.fixture
def file_store(provider_client, sleeps):
    return FileStoreClient(provider_client, sleep=sleeps)


@pytest.fixture
def service(provider_client, file_store, sleeps):
    return FineTuningService(provider_client, files=file_store, sleep=sleeps)


@pytest.fixture
def training_file():
    return UploadedFile(filename="train.jsonl", content=VALID_JSONL)


@pytest.fixture
def validation_file():
    return UploadedFile(filename="valid.jsonl", content=VALID_JSONL)
