"""
Application Settings
Load from environment variables
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service settings from environment"""

    # ======================
    # Application
    # ======================
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"
    TIMEZONE: str = "Africa/Nairobi"

    # ======================
    # Succession rules
    # ======================
    LEGAL_RULES_PATH: str = "config/legal_rules.yml"
    DEFAULT_CURRENCY: str = "KES"
    POLYGAMOUS_ALLOCATION_RULE: str = "PROPORTIONAL_TO_HOUSE_SIZE"

    # ======================
    # Pydantic v2 config
    # ======================
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="forbid",
    )


settings = Settings()
