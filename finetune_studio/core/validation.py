"""
Check that a JSONL dataset is in chat format before it is sent for fine-tuning
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Union

from finetune_studio.utils.constants import DATASET_EXTENSION, VALID_MESSAGE_ROLES


@dataclass
class ValidationReport:
    """Outcome of validating a dataset"""

    total_lines: int = 0
    valid_examples: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors and self.valid_examples > 0

    def summary(self) -> str:
        return (
            f"Total lines: {self.total_lines}\n"
            f"Valid examples: {self.valid_examples}\n"
            f"Errors found: {len(self.errors)}"
        )


def has_dataset_extension(filename: str) -> bool:
    return filename.lower().endswith(DATASET_EXTENSION)


def _check_example(data: object, line_number: int) -> List[str]:
    """Errors for one parsed line; empty when the example is usable"""
    if not isinstance(data, dict) or not isinstance(data.get("messages"), list):
        return [f"Line {line_number}: Missing or invalid 'messages' array"]

    messages = data["messages"]
    if len(messages) < 2:
        return [f"Line {line_number}: 'messages' array should have at least 2 entries (user and assistant)"]

    errors = []
    roles = set()
    for message in messages:
        if not isinstance(message, dict) or not message.get("role"):
            errors.append(f"Line {line_number}: Message missing 'role' field")
            continue
        if message.get("content") is None:
            errors.append(f"Line {line_number}: Message missing 'content' field")
            continue

        role = message["role"]
        if role not in VALID_MESSAGE_ROLES:
            errors.append(
                f"Line {line_number}: Invalid role '{role}'. Must be one of {', '.join(VALID_MESSAGE_ROLES)}"
            )
            continue
        roles.add(role)

    if "user" not in roles:
        errors.append(f"Line {line_number}: Missing 'user' message")
    if "assistant" not in roles:
        errors.append(f"Line {line_number}: Missing 'assistant' message")

    return errors


def validate_jsonl(lines: Iterable[Union[str, bytes]]) -> ValidationReport:
    """
    Validate chat-format training examples, one JSON object per line

    Blank lines are counted but otherwise ignored.

    Args:
        lines: Lines of the dataset

    Returns:
        ValidationReport listing every problem found
    """
    report = ValidationReport()

    for line_number, raw in enumerate(lines, start=1):
        report.total_lines = line_number
        line = raw.decode("utf-8") if isinstance(raw, bytes) else raw
        if not line.strip():
            continue

        try:
            data = json.loads(line)
        except json.JSONDecodeError as e:
            report.errors.append(f"Line {line_number}: Invalid JSON - {e.msg}")
            continue

        line_errors = _check_example(data, line_number)
        if line_errors:
            report.errors.extend(line_errors)
        else:
            report.valid_examples += 1

    return report


def validate_jsonl_bytes(content: bytes) -> ValidationReport:
    """Validate an in-memory dataset"""
    return validate_jsonl(content.decode("utf-8", errors="replace").splitlines())


def validate_jsonl_file(path: Union[str, Path]) -> ValidationReport:
    """Validate a dataset on disk"""
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return validate_jsonl(line.rstrip("\n") for line in f)
