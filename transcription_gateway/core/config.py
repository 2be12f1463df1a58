"""Simple configuration for core library usage."""

from dataclasses import dataclass

DEFAULT_WHISPER_MODEL = "@cf/openai/whisper-large-v3-turbo"
DEFAULT_AI_BASE_URL = "https://api.cloudflare.com/client/v4"


@dataclass
class GatewayConfig:
    """Configuration for transcription gateway core library.

    This is a simplified config suitable for library usage without
    environment variable loading.

    Args:
        account_id: Cloudflare account that owns the Workers AI model
        api_token: API token with Workers AI access
        whisper_model: Workers AI model identifier used for transcription
        ai_base_url: Base URL of the Cloudflare REST API
        timeout_s: Total timeout for upstream requests in seconds
        connect_timeout_s: Connection timeout for upstream requests in seconds
        object_store_base_url: Base URL objects are fetched from (e.g. an R2 public bucket)
        object_store_token: Optional bearer token sent to the object store
        object_store_dir: Local directory used as object store when no base URL is set
        served_model_id: Model id advertised to OpenAI clients
    """

    account_id: str | None = None
    api_token: str | None = None
    whisper_model: str = DEFAULT_WHISPER_MODEL
    ai_base_url: str = DEFAULT_AI_BASE_URL
    timeout_s: float = 300.0
    connect_timeout_s: float = 10.0

    # Object store settings
    object_store_base_url: str | None = None
    object_store_token: str | None = None
    object_store_dir: str | None = None

    served_model_id: str = "whisper-1"

    @property
    def model_run_url(self) -> str:
        """Return the Workers AI run endpoint for the configured model."""
        return f"{self.ai_base_url.rstrip('/')}/accounts/{self.account_id}/ai/run/{self.whisper_model}"
