from pydantic_settings import BaseSettings, SettingsConfigDict

CURRENCY_SYMBOL = "₹"


class Settings(BaseSettings):
    """Application settings read from ``FMS_*`` environment variables."""

    model_config = SettingsConfigDict(env_prefix="FMS_", env_file=".env", env_ignore_empty=True, extra="ignore")

    app_name: str = "FMS Payments"
    api_version: str = "1.0.0"
    environment: str = "development"
    database_url: str = "sqlite:///./fms.db"
    # Base URL the stage clients talk to
    api_base_url: str = "http://localhost:5000/api"
    api_prefix: str = "/api"
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]


_settings_instance = None


def get_settings() -> Settings:
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance


def reset_settings() -> None:
    """Drop the cached instance so the next call re-reads the environment."""
    global _settings_instance
    _settings_instance = None
