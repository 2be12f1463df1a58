"""High-level operations API for the transcription gateway library."""

from collections.abc import Iterable
from typing import Any

from transcription_gateway.core.config import GatewayConfig
from transcription_gateway.core.dispatch import parse_transcription_request, transcribe
from transcription_gateway.core.models import TranscriptionOutput
from transcription_gateway.core.providers import TranscriptionProvider, build_provider
from transcription_gateway.core.storage import AudioStore, build_audio_store


async def transcribe_audio(
    audio_bytes: bytes,
    config: GatewayConfig,
    *,
    response_format: str = "json",
    timestamp_granularities: Iterable[str] = (),
    language: str | None = None,
    prompt: str | None = None,
    provider: TranscriptionProvider | None = None,
) -> TranscriptionOutput:
    """Transcribe audio bytes and render them in the requested response format."""
    request = parse_transcription_request(
        model=config.served_model_id,
        response_format=response_format,
        timestamp_granularities=timestamp_granularities,
        language=language,
        prompt=prompt,
        file=audio_bytes,
    )
    return await transcribe(request, build_audio_store(config), provider or build_provider(config))


async def transcribe_object(
    key: str,
    config: GatewayConfig,
    *,
    response_format: str = "json",
    timestamp_granularities: Iterable[str] = (),
    language: str | None = None,
    prompt: str | None = None,
    store: AudioStore | None = None,
    provider: TranscriptionProvider | None = None,
) -> TranscriptionOutput:
    """Transcribe audio already uploaded to the object store under ``key``."""
    request = parse_transcription_request(
        model=config.served_model_id,
        response_format=response_format,
        timestamp_granularities=timestamp_granularities,
        language=language,
        prompt=prompt,
        object_key=key,
    )
    return await transcribe(
        request,
        store or build_audio_store(config),
        provider or build_provider(config),
    )


def list_models(config: GatewayConfig) -> dict[str, Any]:
    """Static model list; OpenAI SDKs probe it before transcribing."""
    return {
        "object": "list",
        "data": [{"id": config.served_model_id, "object": "model"}],
    }
