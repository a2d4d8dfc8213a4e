"""Tests for the command line entry point"""

import httpx
import pytest

from finetune_studio.cli import build_parser, check_connection, main
from finetune_studio.utils.config import settings
from tests.conftest import VALID_JSONL


def test_validate_valid_file(tmp_path, capsys):
    path = tmp_path / "train.jsonl"
    path.write_bytes(VALID_JSONL)

    assert main(["validate", str(path)]) == 0
    out = capsys.readouterr().out
    assert "Valid examples: 2" in out
    assert "Success!" in out


def test_validate_invalid_file(tmp_path, capsys):
    path = tmp_path / "train.jsonl"
    path.write_text('{"messages": [{"role": "user", "content": "Hi"}]}\n{broken\n')

    assert main(["validate", str(path)]) == 1
    out = capsys.readouterr().out
    assert "Errors found: 2" in out
    assert "- Line 2: Invalid JSON" in out


def test_validate_missing_file(tmp_path, capsys):
    assert main(["validate", str(tmp_path / "absent.jsonl")]) == 1
    assert "File not found" in capsys.readouterr().err


def test_check_connection_without_api_key(monkeypatch):
    monkeypatch.setattr(settings, "NEBIUS_API_KEY", None)

    assert main(["check-connection"]) == 1


def test_serve_defaults():
    args = build_parser().parse_args(["serve", "--port", "9000"])

    assert args.port == 9000
    assert args.command == "serve"


def test_command_is_required():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


@pytest.mark.asyncio
async def test_check_connection(provider_config, fake_provider):
    results = await check_connection(provider_config, transport=httpx.MockTransport(fake_provider.handler))

    assert [result.name for result in results] == ["models", "fine-tuning", "files"]
    assert all(result.ok for result in results)
    assert results[0].items == ["m1", "m2"]
    assert results[1].count == 2
    assert results[2].items is None


@pytest.mark.asyncio
async def test_check_connection_keeps_probing_after_failure(provider_config, fake_provider):
    def handler(request):
        if request.url.path.endswith("/models"):
            return httpx.Response(403, json={"error": {"message": "Forbidden"}})
        return fake_provider.handler(request)

    results = await check_connection(provider_config, transport=httpx.MockTransport(handler))

    assert [result.ok for result in results] == [False, True, True]
    assert "Error accessing models API" in results[0].error


def test_validate_undecodable_file(tmp_path, capsys):
    path = tmp_path / "train.jsonl"
    path.write_bytes(b"\xff\xfe" + VALID_JSONL)

    assert main(["validate", str(path)]) == 1
    out = capsys.readouterr().out
    assert "Valid examples: 1" in out
    assert "- Line 1: Invalid JSON" in out
