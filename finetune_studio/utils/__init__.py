"""
Shared configuration, logging and helpers
"""

from finetune_studio.utils.config import ProviderConfig, serving_settings, settings
from finetune_studio.utils.logging import get_logger, set_level, setup_logger
from finetune_studio.utils.utils import (
    epoch_to_iso,
    generate_request_id,
    remove_temp_file,
    safe_filename,
    temp_file_path,
    write_temp_file,
)

logger = setup_logger(level=serving_settings.LOG_LEVEL)

__all__ = [
    # Config
    "settings",
    "serving_settings",
    "ProviderConfig",
    # Logging
    "logger",
    "setup_logger",
    "get_logger",
    "set_level",
    # Utils
    "epoch_to_iso",
    "generate_request_id",
    "safe_filename",
    "temp_file_path",
    "write_temp_file",
    "remove_temp_file",
]
