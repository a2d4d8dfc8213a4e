"""Tests for data models, config and helpers"""

import pytest
from pydantic import ValidationError

from finetune_studio.app.exceptions import ConfigurationError
from finetune_studio.schema import FileObject, FineTuningStatus, Hyperparameters, JobStatus, UploadedFile
from finetune_studio.utils import epoch_to_iso, remove_temp_file, safe_filename, write_temp_file
from finetune_studio.utils.config import DEFAULT_BASE_URL, ProviderConfig, Settings


class TestFineTuningStatus:
    def test_from_provider(self):
        status = FineTuningStatus.from_provider(
            {
                "id": "ftjob-1",
                "object": "fine_tuning.job",
                "status": "succeeded",
                "model": "m1",
                "created_at": 1700000000,
                "finished_at": 1700003600,
                "fine_tuned_model": "m1:ft-1",
                "trained_tokens": 1234,
                "error": {},
            }
        )

        assert status.job_id == "ftjob-1"
        assert status.status is JobStatus.SUCCEEDED
        assert status.created_at == "2023-11-14T22:13:20.000Z"
        assert status.finished_at == "2023-11-14T23:13:20.000Z"
        assert status.fine_tuned_model == "m1:ft-1"
        assert status.error is None

    def test_unfinished_job(self):
        status = FineTuningStatus.from_provider({"id": "ftjob-1", "status": "running", "model": "m1", "created_at": 0})

        assert status.created_at == "1970-01-01T00:00:00.000Z"
        assert status.finished_at is None
        assert not status.status.is_terminal

    def test_unknown_status(self):
        status = FineTuningStatus.from_provider({"id": "ftjob-1", "status": "paused", "model": "m1", "created_at": 0})

        assert status.status is JobStatus.UNKNOWN

    def test_camel_case_dump(self):
        status = FineTuningStatus(job_id="ftjob-1", status="queued", model="m1", created_at="x")

        assert status.model_dump(by_alias=True, exclude_none=True, mode="json") == {
            "jobId": "ftjob-1",
            "status": "queued",
            "model": "m1",
            "createdAt": "x",
        }

    @pytest.mark.parametrize("value", ["succeeded", "failed", "cancelled"])
    def test_terminal_statuses(self, value):
        assert JobStatus(value).is_terminal


def test_epoch_to_iso_keeps_milliseconds():
    assert epoch_to_iso(1700000000.5) == "2023-11-14T22:13:20.500Z"
    assert epoch_to_iso(None) is None


def test_file_object_reads_bytes_field():
    file = FileObject.model_validate({"id": "file-1", "status": "processed", "bytes": 42, "object": "file"})

    assert file.size == 42
    assert file.status == "processed"


def test_uploaded_file_size():
    assert UploadedFile(filename="train.jsonl", content=b"abc").size == 3


@pytest.mark.parametrize(
    "field, value",
    [("batch_size", 0), ("learning_rate", -0.1), ("n_epochs", 0), ("warmup_ratio", -0.5), ("lora_r", 0)],
)
def test_hyperparameters_reject_out_of_range(field, value):
    with pytest.raises(ValidationError):
        Hyperparameters(**{field: value})


def test_hyperparameters_allow_zero_ratios():
    params = Hyperparameters(warmup_ratio=0, weight_decay=0, lora_dropout=0)

    assert params.model_dump(exclude_none=True) == {"warmup_ratio": 0, "weight_decay": 0, "lora_dropout": 0}


class TestProviderConfig:
    def test_requires_api_key(self):
        with pytest.raises(ConfigurationError, match="NEBIUS_API_KEY environment variable is not set"):
            ProviderConfig.from_settings(Settings(NEBIUS_API_KEY=""))

    def test_adds_trailing_slash(self):
        config = ProviderConfig.from_settings(
            Settings(NEBIUS_API_KEY="key", NEBIUS_API_ENDPOINT="https://provider.test/v1")
        )

        assert config.api_key == "key"
        assert config.base_url == "https://provider.test/v1/"

    def test_defaults(self):
        config = ProviderConfig.from_settings(
            Settings(NEBIUS_API_KEY="key", NEBIUS_API_ENDPOINT=DEFAULT_BASE_URL, STRICT_FILE_PROCESSING=True)
        )

        assert config.base_url == "https://api.studio.nebius.com/v1/"
        assert config.strict_file_processing is True

    def test_is_frozen(self):
        config = ProviderConfig(api_key="key")

        with pytest.raises(ValidationError):
            config.api_key = "other"


@pytest.mark.parametrize(
    "name, expected",
    [("ckpt.bin", "ckpt.bin"), ("../../etc/passwd", "passwd"), ("a\\b\\c.txt", "c.txt"), ("..", "file"), ("", "file")],
)
def test_safe_filename(name, expected):
    assert safe_filename(name) == expected


def test_temp_file_round_trip():
    path = write_temp_file(b"data", "../train.jsonl")

    assert path.name == "train.jsonl"
    assert path.read_bytes() == b"data"

    remove_temp_file(path)
    assert not path.exists()
    assert not path.parent.exists()
