"""
Dependencies for FastAPI routes
"""

from functools import lru_cache

from finetune_studio.core import FineTuningService, GenerationLogStore, ProviderClient
from finetune_studio.utils.config import ProviderConfig, settings


@lru_cache()
def get_provider_config() -> ProviderConfig:
    """
    Build the provider config once per process

    Raises:
        ConfigurationError: If the API key is not set (not cached, so a later call retries)
    """
    return ProviderConfig.from_settings(settings)


@lru_cache()
def get_fine_tuning_service() -> FineTuningService:
    """
    Get fine-tuning service instance (cached singleton)

    Returns:
        FineTuningService bound to the process-wide provider config
    """
    return FineTuningService(ProviderClient(get_provider_config()))


@lru_cache()
def get_log_store() -> GenerationLogStore:
    """
    Get generation log store instance (cached singleton)

    Returns:
        GenerationLogStore, disabled when Supabase credentials are absent
    """
    return GenerationLogStore(settings.SUPABASE_URL, settings.SUPABASE_KEY)


async def close_dependencies() -> None:
    """Close HTTP clients of singletons that were created"""
    if get_fine_tuning_service.cache_info().currsize:
        await get_fine_tuning_service().client.close()
    if get_log_store.cache_info().currsize:
        await get_log_store().close()
