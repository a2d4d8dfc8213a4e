"""
API package for Finetune Studio
"""

from finetune_studio.app.api.dependencies import get_fine_tuning_service, get_log_store, get_provider_config
from finetune_studio.utils.config import serving_settings

__all__ = ["serving_settings", "get_fine_tuning_service", "get_log_store", "get_provider_config"]
