"""
Command line entry point: run the API, validate datasets, check provider access
"""

import argparse
import asyncio
import sys
from dataclasses import dataclass
from typing import List, Optional

import httpx

from finetune_studio.app.exceptions import ConfigurationError, ProviderError
from finetune_studio.core.client import ProviderClient
from finetune_studio.core.validation import validate_jsonl_file
from finetune_studio.utils import logger, set_level
from finetune_studio.utils.config import ProviderConfig, serving_settings, settings

# (label, path) pairs probed by check-connection
CONNECTION_PROBES = (
    ("models", "models"),
    ("fine-tuning", "fine_tuning/jobs"),
    ("files", "files"),
)


@dataclass
class ProbeResult:
    """Outcome of one connection probe"""

    name: str
    ok: bool
    count: int = 0
    items: Optional[List[str]] = None
    error: Optional[str] = None


async def check_connection(
    config: ProviderConfig, transport: Optional[httpx.AsyncBaseTransport] = None
) -> List[ProbeResult]:
    """
    List models, fine-tuning jobs and files to see which provider APIs are reachable

    Args:
        config: Provider connection parameters
        transport: Optional transport, used by tests to fake the provider

    Returns:
        One result per probe; a failing probe does not stop the others
    """
    results = []
    async with ProviderClient(config, transport=transport) as client:
        for name, path in CONNECTION_PROBES:
            try:
                data = await client.get_json(path, context=f"Error accessing {name} API")
            except ProviderError as e:
                results.append(ProbeResult(name=name, ok=False, error=str(e)))
                continue
            entries = data.get("data") or []
            results.append(
                ProbeResult(
                    name=name,
                    ok=True,
                    count=len(entries),
                    items=[entry.get("id") for entry in entries] if name == "models" else None,
                )
            )
    return results


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run(
        "finetune_studio.app.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=serving_settings.LOG_LEVEL.lower(),
    )
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    try:
        report = validate_jsonl_file(args.path)
    except FileNotFoundError:
        print(f"File not found: {args.path}", file=sys.stderr)
        return 1

    print(f"Validating file: {args.path}")
    print("\nValidation Results:")
    print(report.summary())

    if report.errors:
        print("\nErrors:")
        for error in report.errors:
            print(f"- {error}")
        print("\nPlease fix these errors before using this file for fine-tuning.")
        return 1

    print("\nSuccess! This file is valid for fine-tuning.")
    return 0


def cmd_check_connection(args: argparse.Namespace) -> int:
    try:
        config = ProviderConfig.from_settings(settings)
    except ConfigurationError as e:
        logger.error(str(e))
        return 1

    print(f"Using API endpoint: {config.base_url}")
    results = asyncio.run(check_connection(config))

    for result in results:
        if result.ok:
            print(f"{result.name} API accessible: {result.count} entries")
            if result.items:
                print("  " + ", ".join(str(item) for item in result.items))
        else:
            print(f"{result.name} API failed: {result.error}")

    return 0 if all(result.ok for result in results) else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="finetune-studio", description="Provider fine-tuning orchestration")
    parser.add_argument("--log-level", type=str, default=None, help="Override the log level")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", type=str, default=serving_settings.HOST, help="Bind address")
    serve.add_argument("--port", type=int, default=serving_settings.PORT, help="Bind port")
    serve.add_argument("--reload", action="store_true", default=serving_settings.RELOAD, help="Reload on change")
    serve.set_defaults(func=cmd_serve)

    validate = subparsers.add_parser("validate", help="Validate a JSONL chat dataset")
    validate.add_argument("path", type=str, help="Path to the dataset file (JSONL)")
    validate.set_defaults(func=cmd_validate)

    check = subparsers.add_parser("check-connection", help="Check that the provider API is reachable")
    check.set_defaults(func=cmd_check_connection)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.log_level:
        set_level(args.log_level)

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
