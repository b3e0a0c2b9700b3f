"""Settings configuration"""
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Value shipped in .env.example; treated as "no key".
GEMINI_PLACEHOLDER_KEY = "your_gemini_api_key_here"


class Settings(BaseSettings):
    """Application settings, resolved once at process start."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
        frozen=True,
    )

    # Application
    app_name: str = Field(default="User Bio Service", validation_alias="APP_NAME")
    environment: str = Field(default="development", validation_alias="ENVIRONMENT")
    api_prefix: str = Field(default="/api", validation_alias="API_PREFIX")

    # Server
    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=3001, validation_alias="PORT", ge=1, le=65535)
    workers: int = Field(default=1, validation_alias="WORKERS", ge=1)
    reload: bool = Field(default=False, validation_alias="RELOAD")

    # API Keys
    openai_api_key: Optional[SecretStr] = Field(default=None, validation_alias="OPENAI_API_KEY")
    gemini_api_key: Optional[SecretStr] = Field(default=None, validation_alias="GEMINI_API_KEY")

    # Bio generation
    openai_model: str = Field(default="gpt-3.5-turbo", validation_alias="OPENAI_MODEL")
    gemini_model: str = Field(default="gemini-2.5-flash", validation_alias="GEMINI_MODEL")
    bio_max_attempts: int = Field(default=3, validation_alias="BIO_MAX_ATTEMPTS", ge=1)
    bio_base_delay: float = Field(default=1.0, validation_alias="BIO_BASE_DELAY", ge=0)
    request_timeout: int = Field(default=30, validation_alias="REQUEST_TIMEOUT", ge=1)

    # Database
    mongodb_uri: Optional[str] = Field(default=None, validation_alias="MONGODB_URI")
    mongodb_database: str = Field(default="node-ai-integration", validation_alias="MONGODB_DATABASE")
    mongodb_server_selection_timeout_ms: int = Field(
        default=30000, validation_alias="MONGODB_SERVER_SELECTION_TIMEOUT_MS"
    )
    mongodb_max_pool_size: int = Field(default=10, validation_alias="MONGODB_MAX_POOL_SIZE")

    # Security
    cors_origins: str = Field(default="*", validation_alias="CORS_ORIGINS")

    # Rate Limiting
    rate_limit_enabled: bool = Field(default=True, validation_alias="RATE_LIMIT_ENABLED")
    rate_limit_api: str = Field(default="10000/hour", validation_alias="RATE_LIMIT_API")
    rate_limit_create_user: str = Field(default="10/hour", validation_alias="RATE_LIMIT_CREATE_USER")
    rate_limit_ai: str = Field(default="10/minute", validation_alias="RATE_LIMIT_AI")

    # Logging
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_format: str = Field(default="json", validation_alias="LOG_FORMAT")

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        if v not in ("json", "console"):
            raise ValueError("LOG_FORMAT must be 'json' or 'console'")
        return v

    # Properties
    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def cors_origin_list(self) -> List[str]:
        if self.cors_origins.strip() == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def has_openai_key(self) -> bool:
        return bool(self.openai_api_key and self.openai_api_key.get_secret_value())

    @property
    def has_gemini_key(self) -> bool:
        if not self.gemini_api_key:
            return False
        key = self.gemini_api_key.get_secret_value()
        return bool(key) and key != GEMINI_PLACEHOLDER_KEY


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
