"""Configuration management - loads environment variables into typed settings."""

from functools import lru_cache
from urllib.parse import urlparse

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from transcription_gateway import GatewayConfig
from transcription_gateway.core.config import DEFAULT_AI_BASE_URL, DEFAULT_WHISPER_MODEL


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Gateway Server Configuration
    gateway_host: str = Field(default="127.0.0.1", description="Host for the gateway to listen on")
    gateway_port: int = Field(default=8090, description="Port for the gateway to listen on")

    # Transcription Model
    cloudflare_account_id: str | None = Field(
        default=None,
        description="Cloudflare account id that owns the Workers AI model",
    )
    cloudflare_api_token: str | None = Field(
        default=None,
        description="Cloudflare API token with Workers AI permission",
    )
    whisper_model: str = Field(
        default=DEFAULT_WHISPER_MODEL,
        description="Workers AI model used for transcription",
    )
    ai_base_url: str = Field(
        default=DEFAULT_AI_BASE_URL,
        description="Base URL of the Cloudflare REST API",
    )
    served_model_id: str = Field(
        default="whisper-1",
        description="Model id reported by GET /v1/models",
    )

    # Object Store
    object_store_base_url: str | None = Field(
        default=None,
        description="Base URL audio objects are fetched from by r2_key (e.g. https://audio.example.com)",
    )
    object_store_token: str | None = Field(
        default=None,
        description="Optional bearer token sent to the object store",
    )
    object_store_dir: str | None = Field(
        default=None,
        description="Local directory used as object store when OBJECT_STORE_BASE_URL is empty",
    )

    # Timeout Configuration
    upstream_timeout_s: float = Field(
        default=300.0,
        description="Total timeout for model and object store requests (seconds)",
    )
    upstream_connect_timeout_s: float = Field(
        default=10.0,
        description="Connection timeout for model and object store requests (seconds)",
    )

    # Security Configuration
    api_key: str | None = Field(
        default=None,
        description="API key required as Authorization: Bearer <API_KEY> on /v1 endpoints. Unset rejects every /v1 call",
    )
    allow_origins: str = Field(
        default="",
        description="CORS allowed origins (comma-separated list, empty = no CORS)",
    )
    audio_max_upload_bytes: int = Field(
        default=25_000_000,
        description="Maximum request body size for /v1/audio/transcriptions (bytes)",
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )

    @field_validator("gateway_port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port is in valid range."""
        if not (1 <= v <= 65535):
            raise ValueError(f"gateway_port must be between 1 and 65535, got {v}")
        return v

    @field_validator("upstream_timeout_s", "upstream_connect_timeout_s")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError(f"Timeout must be positive, got {v}")
        return v

    @field_validator("audio_max_upload_bytes")
    @classmethod
    def validate_upload_limit(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"audio_max_upload_bytes must be positive, got {v}")
        return v

    @field_validator("ai_base_url", "object_store_base_url")
    @classmethod
    def validate_url(cls, v: str | None) -> str | None:
        """Validate URL format if provided."""
        if v is None or v == "":
            return None
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https"):
            raise ValueError(f"URL must use http or https scheme, got {v}")
        if not parsed.netloc:
            raise ValueError(f"URL must have a valid host, got {v}")
        return v

    @field_validator("api_key", "cloudflare_account_id", "cloudflare_api_token", "object_store_token", "object_store_dir")
    @classmethod
    def empty_as_unset(cls, v: str | None) -> str | None:
        """Treat blank values from .env files as not configured."""
        if v is None or not v.strip():
            return None
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}, got {v}")
        return v.upper()

    @property
    def allow_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if not self.allow_origins:
            return []
        return [origin.strip() for origin in self.allow_origins.split(",") if origin.strip()]

    def to_gateway_config(self) -> GatewayConfig:
        """Build the core library configuration from these settings."""
        return GatewayConfig(
            account_id=self.cloudflare_account_id,
            api_token=self.cloudflare_api_token,
            whisper_model=self.whisper_model,
            ai_base_url=self.ai_base_url or DEFAULT_AI_BASE_URL,
            timeout_s=self.upstream_timeout_s,
            connect_timeout_s=self.upstream_connect_timeout_s,
            object_store_base_url=self.object_store_base_url,
            object_store_token=self.object_store_token,
            object_store_dir=self.object_store_dir,
            served_model_id=self.served_model_id,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Settings are loaded from environment variables and .env file on first call.
    Subsequent calls return the cached instance.

    Raises:
        ValueError: If settings are invalid.

    Returns:
        Settings: The validated settings instance.
    """
    try:
        return Settings()
    except Exception as e:
        raise ValueError(
            f"Failed to load configuration: {e}\n"
            "Please check your .env file and ensure all settings are valid."
        ) from e
