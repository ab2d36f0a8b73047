"""Application settings using Pydantic BaseSettings."""

import logging
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from jira_helper.config.constants import DEFAULT_COMMENT_TAG

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

_DEFAULT_ENCRYPTION_KEY = "jira-helper-default-key-change-in-production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Jira Helper"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        upper = v.upper()
        if upper not in _VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {_VALID_LOG_LEVELS}, got '{v}'")
        return upper

    @model_validator(mode="after")
    def validate_timeouts_positive(self) -> "Settings":
        for field_name in ("jira_timeout", "jira_retry_delay", "retry_backoff_factor"):
            value = getattr(self, field_name)
            if value <= 0:
                raise ValueError(f"{field_name} must be positive, got {value}")
        return self

    @model_validator(mode="after")
    def warn_default_encryption_key(self) -> "Settings":
        if self.encryption_key == _DEFAULT_ENCRYPTION_KEY:
            logging.getLogger(__name__).warning(
                "encryption_key is the built-in default; set ENCRYPTION_KEY to protect stored API tokens"
            )
        return self

    # CORS
    allowed_origins: list[str] = ["*"]

    # Flat-file storage
    config_dir: str = "config"
    encryption_key: str = _DEFAULT_ENCRYPTION_KEY

    # Verification checks
    checks_dir: str = "verification_checks"
    default_comment_tag: str = DEFAULT_COMMENT_TAG

    # Jira HTTP client
    jira_api_version: str = "2"
    jira_timeout: float = 30.0
    jira_max_retries: int = 3
    jira_retry_delay: float = 1.0
    retry_backoff_factor: float = 2.0
    comments_page_size: int = 100

    # Bulk creation
    bulk_create_delay: float = 0.1
    max_csv_bytes: int = 5 * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
