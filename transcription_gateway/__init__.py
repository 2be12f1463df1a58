"""Transcription Gateway - OpenAI-compatible speech-to-text adapter.

Validates OpenAI ``/v1/audio/transcriptions`` parameters, runs a whisper
model (Cloudflare Workers AI by default) and reshapes its output into the
OpenAI response formats: ``json``, ``text``, ``vtt``, ``srt`` and
``verbose_json``.

Usage:
    >>> from transcription_gateway import GatewayConfig, transcribe_audio
    >>>
    >>> config = GatewayConfig(account_id="...", api_token="...")
    >>> audio_bytes = open("recording.mp3", "rb").read()
    >>> output = await transcribe_audio(audio_bytes, config, response_format="srt")
    >>> print(output.body)
"""

__version__ = "0.1.0"

# Public library API exports
from transcription_gateway.core.config import GatewayConfig
from transcription_gateway.core.dispatch import (
    parse_transcription_request,
    render_transcription,
    resolve_audio,
    transcribe,
)
from transcription_gateway.core.models import (
    ProviderResult,
    ResponseFormat,
    TranscriptionOutput,
    TranscriptionRequest,
    VerboseTranscription,
)
from transcription_gateway.core.normalizer import to_verbose_json
from transcription_gateway.core.operations import list_models, transcribe_audio, transcribe_object
from transcription_gateway.core.subtitles import vtt_to_srt

# Export exceptions for library users
from transcription_gateway.core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    GatewayError,
    InvalidRequestError,
    UpstreamError,
    UpstreamResponseError,
    UpstreamTimeoutError,
    UpstreamUnreachableError,
)

__all__ = [
    "__version__",
    # Configuration
    "GatewayConfig",
    # Operations
    "transcribe_audio",
    "transcribe_object",
    "list_models",
    # Core steps
    "parse_transcription_request",
    "resolve_audio",
    "render_transcription",
    "transcribe",
    "to_verbose_json",
    "vtt_to_srt",
    # Models
    "ProviderResult",
    "ResponseFormat",
    "TranscriptionOutput",
    "TranscriptionRequest",
    "VerboseTranscription",
    # Exceptions
    "GatewayError",
    "AuthenticationError",
    "ConfigurationError",
    "InvalidRequestError",
    "UpstreamError",
    "UpstreamResponseError",
    "UpstreamTimeoutError",
    "UpstreamUnreachableError",
]
