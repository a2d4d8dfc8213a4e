from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

from finetune_studio.app.exceptions.base import ConfigurationError
from finetune_studio.utils.constants import DEFAULT_BASE_URL, DEFAULT_REQUEST_TIMEOUT

load_dotenv()


class Settings(BaseSettings):
    PROJECT: str = "finetune-studio"
    NEBIUS_API_KEY: Optional[str] = None
    NEBIUS_API_ENDPOINT: str = DEFAULT_BASE_URL
    SUPABASE_URL: Optional[str] = None
    SUPABASE_KEY: Optional[str] = None

    # Fail uploads whose first processing wait does not finish
    STRICT_FILE_PROCESSING: bool = False
    # Run the JSONL validator on uploads before any remote call
    VALIDATE_UPLOADS: bool = False
    REQUEST_TIMEOUT: float = DEFAULT_REQUEST_TIMEOUT

    model_config = SettingsConfigDict(case_sensitive=False)


class ServingSettings(BaseSettings):
    """Settings for serving API"""

    # API Settings
    API_V1_PREFIX: str = "/api/v1"
    API_TITLE: str = "Finetune Studio"
    API_DESCRIPTION: str = "API for orchestrating provider fine-tuning jobs"
    API_VERSION: str = "1.0.0"

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    RELOAD: bool = False

    # CORS Settings
    CORS_ORIGINS: list[str] = ["*"]
    CORS_METHODS: list[str] = ["*"]
    CORS_HEADERS: list[str] = ["*"]

    # Logging
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="SERVING_", case_sensitive=False)


class ProviderConfig(BaseModel):
    """Connection parameters for the fine-tuning provider.

    Built once at startup and passed to every client, so nothing below the
    application layer reads the environment.
    """

    api_key: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_REQUEST_TIMEOUT
    strict_file_processing: bool = False

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProviderConfig":
        """
        Build provider config from application settings

        Args:
            settings: Loaded settings

        Returns:
            ProviderConfig instance

        Raises:
            ConfigurationError: If the API key is not set
        """
        if not settings.NEBIUS_API_KEY:
            raise ConfigurationError("NEBIUS_API_KEY environment variable is not set")

        base_url = settings.NEBIUS_API_ENDPOINT or DEFAULT_BASE_URL
        if not base_url.endswith("/"):
            base_url += "/"

        return cls(
            api_key=settings.NEBIUS_API_KEY,
            base_url=base_url,
            timeout=settings.REQUEST_TIMEOUT,
            strict_file_processing=settings.STRICT_FILE_PROCESSING,
        )


settings = Settings()
serving_settings = ServingSettings()
