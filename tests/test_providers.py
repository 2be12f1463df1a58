"""Tests for the Workers AI transcription provider."""

import base64
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from transcription_gateway import (
    ConfigurationError,
    GatewayConfig,
    UpstreamResponseError,
    UpstreamTimeoutError,
    UpstreamUnreachableError,
)
from transcription_gateway.core.providers import WorkersAIProvider, build_model_input, unwrap_result


@pytest.fixture
def config():
    return GatewayConfig(
        account_id="acc123",
        api_token="cf-token",
        ai_base_url="https://api.example.test/client/v4",
        timeout_s=30.0,
        connect_timeout_s=5.0,
    )


def test_model_run_url(config):
    assert config.model_run_url == (
        "https://api.example.test/client/v4/accounts/acc123/ai/run/@cf/openai/whisper-large-v3-turbo"
    )


def test_build_model_input_with_hints():
    payload = build_model_input(b"\x00\x01", "en", "Speaker names: Ada")

    assert payload == {
        "audio": base64.b64encode(b"\x00\x01").decode("ascii"),
        "task": "transcribe",
        "language": "en",
        "initial_prompt": "Speaker names: Ada",
    }


def test_build_model_input_omits_unset_hints():
    payload = build_model_input(b"abc", None, None)

    assert set(payload) == {"audio", "task"}


def test_unwrap_result_envelope():
    assert unwrap_result({"success": True, "result": {"text": "hi"}, "errors": []}) == {"text": "hi"}


def test_unwrap_result_bare_object():
    assert unwrap_result({"text": "hi"}) == {"text": "hi"}


def test_unwrap_result_failure_reports_errors():
    with pytest.raises(UpstreamResponseError, match="bad audio"):
        unwrap_result({"success": False, "errors": [{"code": 5006, "message": "bad audio"}], "result": None})


@pytest.mark.parametrize("body", [[], "text", {"success": True, "result": None}])
def test_unwrap_result_rejects_unexpected_shapes(body):
    with pytest.raises(UpstreamResponseError):
        unwrap_result(body)


@pytest.mark.asyncio
async def test_transcribe_success(config, hello_result):
    mock_response = httpx.Response(200, json={"success": True, "result": hello_result, "errors": []})

    with patch("httpx.AsyncClient.post", new_callable=AsyncMock, return_value=mock_response) as mock_post:
        result = await WorkersAIProvider(config).transcribe(b"audio", language="en", prompt=None)

    assert result.text == "hello"
    assert result.transcription_info.duration == 2.4
    assert len(result.segments) == 1

    url = mock_post.call_args[0][0]
    assert url == config.model_run_url
    kwargs = mock_post.call_args.kwargs
    assert kwargs["headers"]["Authorization"] == "Bearer cf-token"
    assert kwargs["json"]["language"] == "en"
    assert "initial_prompt" not in kwargs["json"]


@pytest.mark.asyncio
async def test_transcribe_requires_credentials():
    provider = WorkersAIProvider(GatewayConfig())

    with pytest.raises(ConfigurationError) as exc_info:
        await provider.transcribe(b"audio")

    assert exc_info.value.status_code == 500
    assert exc_info.value.error_type == "configuration_error"


@pytest.mark.asyncio
async def test_transcribe_connection_error(config):
    with patch("httpx.AsyncClient.post", new_callable=AsyncMock, side_effect=httpx.ConnectError("refused")):
        with pytest.raises(UpstreamUnreachableError) as exc_info:
            await WorkersAIProvider(config).transcribe(b"audio")

    assert exc_info.value.status_code == 502
    assert exc_info.value.upstream == config.ai_base_url


@pytest.mark.asyncio
async def test_transcribe_timeout(config):
    with patch("httpx.AsyncClient.post", new_callable=AsyncMock, side_effect=httpx.ReadTimeout("slow")):
        with pytest.raises(UpstreamTimeoutError) as exc_info:
            await WorkersAIProvider(config).transcribe(b"audio")

    assert exc_info.value.status_code == 504


@pytest.mark.asyncio
async def test_transcribe_http_error_status(config):
    mock_response = httpx.Response(401, json={"success": False, "errors": [{"message": "Authentication error"}]})

    with patch("httpx.AsyncClient.post", new_callable=AsyncMock, return_value=mock_response):
        with pytest.raises(UpstreamResponseError, match="HTTP 401"):
            await WorkersAIProvider(config).transcribe(b"audio")


@pytest.mark.asyncio
async def test_transcribe_invalid_json(config):
    mock_response = httpx.Response(200, content=b"<html>oops</html>")

    with patch("httpx.AsyncClient.post", new_callable=AsyncMock, return_value=mock_response):
        with pytest.raises(UpstreamResponseError, match="invalid JSON"):
            await WorkersAIProvider(config).transcribe(b"audio")
