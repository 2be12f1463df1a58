"""Transcription providers: the model invocation behind the gateway."""

import base64
import json
import logging
from typing import Any, Protocol

import httpx
from pydantic import ValidationError

from transcription_gateway.core.config import GatewayConfig
from transcription_gateway.core.exceptions import (
    ConfigurationError,
    UpstreamResponseError,
    UpstreamTimeoutError,
    UpstreamUnreachableError,
)
from transcription_gateway.core.models import ProviderResult

logger = logging.getLogger(__name__)


class TranscriptionProvider(Protocol):
    """Anything that turns audio bytes into a provider result."""

    async def transcribe(
        self,
        audio: bytes,
        *,
        language: str | None = None,
        prompt: str | None = None,
    ) -> ProviderResult: ...


def build_model_input(audio: bytes, language: str | None, prompt: str | None) -> dict[str, Any]:
    """Build the Workers AI whisper input; unset hints are left out."""
    payload: dict[str, Any] = {
        "audio": base64.b64encode(audio).decode("ascii"),
        "task": "transcribe",
    }
    if language:
        payload["language"] = language
    if prompt:
        # Closest whisper equivalent of OpenAI's prompt parameter
        payload["initial_prompt"] = prompt
    return payload


def unwrap_result(body: Any) -> dict[str, Any]:
    """
    Extract the model output from a Workers AI REST response.

    The REST API wraps output as ``{"result": {...}, "success": true}``.
    A bare result object is accepted as well.

    Raises:
        UpstreamResponseError: If the envelope reports failure or has no result
    """
    if not isinstance(body, dict):
        raise UpstreamResponseError("Model returned an unexpected response structure")

    if "success" not in body and "result" not in body:
        return body

    if body.get("success") is False:
        errors = body.get("errors") or []
        detail = "; ".join(str(e.get("message", e)) if isinstance(e, dict) else str(e) for e in errors)
        raise UpstreamResponseError(f"Model invocation failed: {detail or 'unknown error'}")

    result = body.get("result")
    if not isinstance(result, dict):
        raise UpstreamResponseError("Model returned an unexpected response structure")
    return result


class WorkersAIProvider:
    """Runs a Cloudflare Workers AI whisper model over its REST API."""

    def __init__(self, config: GatewayConfig):
        self.config = config

    async def transcribe(
        self,
        audio: bytes,
        *,
        language: str | None = None,
        prompt: str | None = None,
    ) -> ProviderResult:
        """
        Transcribe audio with the configured whisper model.

        Args:
            audio: Raw audio bytes in any format the model accepts
            language: Optional language hint
            prompt: Optional initial prompt

        Returns:
            Parsed ProviderResult

        Raises:
            UpstreamUnreachableError: If connection to the model API fails
            UpstreamTimeoutError: If the model API does not answer in time
            ConfigurationError: If account id or API token are not configured
            UpstreamResponseError: On error statuses or unparseable bodies
        """
        if not self.config.account_id or not self.config.api_token:
            raise ConfigurationError(
                "Workers AI requires an account id and API token. "
                "Please set CLOUDFLARE_ACCOUNT_ID and CLOUDFLARE_API_TOKEN."
            )

        url = self.config.model_run_url
        upstream = self.config.ai_base_url
        timeout = httpx.Timeout(self.config.timeout_s, connect=self.config.connect_timeout_s)

        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                logger.debug("Running %s on %d audio bytes", self.config.whisper_model, len(audio))
                response = await client.post(
                    url,
                    json=build_model_input(audio, language, prompt),
                    headers={"Authorization": f"Bearer {self.config.api_token}"},
                )

        except httpx.TimeoutException as e:
            logger.error(f"Timeout calling model at {url}: {e}")
            raise UpstreamTimeoutError(
                "Transcription model did not respond in time",
                upstream=upstream,
            ) from e

        except (httpx.ConnectError, httpx.NetworkError) as e:
            logger.error(f"Connection error to model at {url}: {e}")
            raise UpstreamUnreachableError(
                f"Connection to transcription model failed: {str(e)}",
                upstream=upstream,
            ) from e

        if response.status_code >= 400:
            logger.error("Model call failed with HTTP %s: %s", response.status_code, response.text[:500])
            raise UpstreamResponseError(
                f"Transcription model returned HTTP {response.status_code}",
                upstream=upstream,
            )

        try:
            body = response.json()
        except (json.JSONDecodeError, ValueError) as e:
            raise UpstreamResponseError("Transcription model returned invalid JSON", upstream=upstream) from e

        try:
            return ProviderResult.model_validate(unwrap_result(body))
        except ValidationError as e:
            raise UpstreamResponseError(
                "Transcription model returned an unexpected response structure",
                upstream=upstream,
            ) from e


def build_provider(config: GatewayConfig) -> TranscriptionProvider:
    """Create the transcription provider described by the configuration."""
    return WorkersAIProvider(config)
