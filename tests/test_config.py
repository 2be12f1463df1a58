"""Tests for configuration management."""

import pytest

from app.config import Settings, get_settings


def test_settings_loads_from_env_file(tmp_path, monkeypatch):
    """Settings are read from a .env file."""
    monkeypatch.delenv("API_KEY", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text(
        "GATEWAY_PORT=9000\n"
        "API_KEY=sk-test\n"
        "CLOUDFLARE_ACCOUNT_ID=acc123\n"
        "CLOUDFLARE_API_TOKEN=cf-token\n"
        "OBJECT_STORE_BASE_URL=https://audio.example.test\n"
        "SERVED_MODEL_ID=whisper-large\n"
    )

    settings = Settings(_env_file=env_file)

    assert settings.gateway_port == 9000
    assert settings.api_key == "sk-test"
    assert settings.cloudflare_account_id == "acc123"
    assert settings.cloudflare_api_token == "cf-token"
    assert settings.object_store_base_url == "https://audio.example.test"
    assert settings.served_model_id == "whisper-large"


def test_settings_defaults():
    settings = Settings(_env_file=None)

    assert settings.whisper_model == "@cf/openai/whisper-large-v3-turbo"
    assert settings.ai_base_url == "https://api.cloudflare.com/client/v4"
    assert settings.served_model_id == "whisper-1"
    assert settings.audio_max_upload_bytes == 25_000_000


def test_blank_secrets_are_unset():
    """Blank values in .env mean "not configured"."""
    settings = Settings(api_key="", cloudflare_api_token="   ", object_store_dir="")

    assert settings.api_key is None
    assert settings.cloudflare_api_token is None
    assert settings.object_store_dir is None


def test_settings_validates_url_format():
    """Test that URLs are validated for proper format."""
    with pytest.raises(ValueError, match="URL must use http or https scheme"):
        Settings(object_store_base_url="ftp://example.com")

    with pytest.raises(ValueError, match="URL must have a valid host"):
        Settings(ai_base_url="http://")

    settings = Settings(object_store_base_url="")
    assert settings.object_store_base_url is None


def test_settings_validates_port_range():
    """Test that port numbers are validated."""
    with pytest.raises(ValueError, match="gateway_port must be between 1 and 65535"):
        Settings(gateway_port=0)

    with pytest.raises(ValueError, match="gateway_port must be between 1 and 65535"):
        Settings(gateway_port=65536)

    assert Settings(gateway_port=8090).gateway_port == 8090


def test_settings_validates_timeouts_and_limits():
    with pytest.raises(ValueError, match="Timeout must be positive"):
        Settings(upstream_timeout_s=0)

    with pytest.raises(ValueError, match="audio_max_upload_bytes must be positive"):
        Settings(audio_max_upload_bytes=-1)


def test_settings_validates_log_level():
    """Test that log level is validated."""
    with pytest.raises(ValueError, match="log_level must be one of"):
        Settings(log_level="INVALID")

    settings = Settings(log_level="debug")
    assert settings.log_level == "DEBUG"


def test_settings_allow_origins_list():
    """Test that CORS origins are parsed correctly."""
    settings = Settings(allow_origins="http://localhost:3000, https://example.com,")

    assert settings.allow_origins_list == ["http://localhost:3000", "https://example.com"]
    assert Settings(allow_origins="").allow_origins_list == []


def test_to_gateway_config():
    settings = Settings(
        cloudflare_account_id="acc123",
        cloudflare_api_token="cf-token",
        whisper_model="@cf/openai/whisper",
        upstream_timeout_s=42.0,
        upstream_connect_timeout_s=3.0,
        object_store_dir="/srv/audio",
        served_model_id="whisper-1",
    )

    config = settings.to_gateway_config()

    assert config.account_id == "acc123"
    assert config.api_token == "cf-token"
    assert config.whisper_model == "@cf/openai/whisper"
    assert config.timeout_s == 42.0
    assert config.connect_timeout_s == 3.0
    assert config.object_store_dir == "/srv/audio"
    assert config.object_store_base_url is None
    assert config.model_run_url.endswith("/accounts/acc123/ai/run/@cf/openai/whisper")


def test_get_settings_singleton():
    """Test that get_settings returns a singleton."""
    get_settings.cache_clear()
    try:
        assert get_settings() is get_settings()
    finally:
        get_settings.cache_clear()
