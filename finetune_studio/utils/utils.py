"""
Utility functions
"""

import os
import tempfile
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union


def epoch_to_iso(timestamp: Optional[Union[int, float]]) -> Optional[str]:
    """
    Convert provider epoch seconds to an ISO-8601 UTC string

    Args:
        timestamp: Seconds since the epoch, or None

    Returns:
        String like ``2024-01-01T00:00:00.000Z`` or None when no timestamp was given
    """
    if timestamp is None:
        return None
    moment = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def generate_request_id() -> str:
    """Generate an id that groups the log entries of one request"""
    return uuid.uuid4().hex


def safe_filename(name: str, default: str = "file") -> str:
    """
    Strip directory components so a client supplied name stays inside its target directory

    Args:
        name: File name as received from the client
        default: Name used when nothing usable is left

    Returns:
        Bare file name
    """
    cleaned = os.path.basename(name.replace("\\", "/")).strip()
    if cleaned in ("", ".", ".."):
        return default
    return cleaned


def temp_file_path(filename: str) -> Path:
    """
    Create a new private temporary directory and return a path for ``filename`` inside it

    Args:
        filename: Desired file name (directory parts are dropped)

    Returns:
        Path of a file that does not exist yet
    """
    directory = Path(tempfile.mkdtemp(prefix="finetune-studio-"))
    return directory / safe_filename(filename)


def write_temp_file(content: bytes, filename: str) -> Path:
    """Write bytes to ``filename`` inside a new private temporary directory"""
    file_path = temp_file_path(filename)
    file_path.write_bytes(content)
    return file_path


def remove_temp_file(file_path: Path) -> None:
    """Remove a file created by ``write_temp_file`` together with its directory"""
    file_path = Path(file_path)
    file_path.unlink(missing_ok=True)
    try:
        file_path.parent.rmdir()
    except OSError:
        # Directory not empty or already gone
        pass
