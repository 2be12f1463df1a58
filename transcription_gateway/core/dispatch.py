"""Request validation and response-format dispatch for audio transcriptions.

A call goes through three steps:

1. ``parse_transcription_request`` checks the parameters against the OpenAI
   compatibility rules and returns a TranscriptionRequest.
2. ``resolve_audio`` picks the audio source (upload first, then object key).
3. ``render_transcription`` encodes the provider result in the requested format.

``transcribe`` chains them with the provider call. Every rejection is an
InvalidRequestError naming the offending parameter.
"""

import logging
from collections.abc import Iterable

from transcription_gateway.core.exceptions import InvalidRequestError
from transcription_gateway.core.models import (
    MEDIA_TYPE_JSON,
    MEDIA_TYPE_SRT,
    MEDIA_TYPE_TEXT,
    MEDIA_TYPE_VTT,
    ProviderResult,
    ResponseFormat,
    TranscriptionOutput,
    TranscriptionRequest,
    TranscriptionText,
)
from transcription_gateway.core.normalizer import to_verbose_json
from transcription_gateway.core.providers import TranscriptionProvider
from transcription_gateway.core.storage import AudioStore
from transcription_gateway.core.subtitles import vtt_to_srt

logger = logging.getLogger(__name__)

GRANULARITIES_PARAM = "timestamp_granularities[]"
OBJECT_KEY_PARAM = "r2_key"


def parse_transcription_request(
    *,
    model: str | None,
    response_format: str | None = None,
    timestamp_granularities: Iterable[str] = (),
    language: str | None = None,
    prompt: str | None = None,
    file: bytes | None = None,
    object_key: str | None = None,
) -> TranscriptionRequest:
    """
    Validate raw transcription parameters.

    Empty strings count as missing. An unknown ``response_format`` is not
    rejected; it is served as ``json``.

    Raises:
        InvalidRequestError: If ``model`` is missing, or timestamp
            granularities are requested without ``verbose_json``
    """
    if not model:
        raise InvalidRequestError('Missing required field "model"', param="model")

    fmt = ResponseFormat.parse(response_format)
    granularities = tuple(timestamp_granularities)

    if granularities and fmt is not ResponseFormat.VERBOSE_JSON:
        raise InvalidRequestError(
            'timestamp_granularities requires response_format="verbose_json"',
            param=GRANULARITIES_PARAM,
        )

    return TranscriptionRequest(
        model=model,
        response_format=fmt,
        timestamp_granularities=granularities,
        language=language or None,
        prompt=prompt or None,
        file=file,
        object_key=object_key or None,
    )


async def resolve_audio(request: TranscriptionRequest, store: AudioStore) -> bytes:
    """
    Return the audio for a request: the upload if present, else the stored object.

    Raises:
        InvalidRequestError: If neither source is given or the key does not exist
    """
    if request.file is not None:
        return request.file

    if request.object_key:
        audio = await store.fetch(request.object_key)
        if audio is None:
            logger.info("Object not found: %s", request.object_key)
            raise InvalidRequestError(f"Object not found: {request.object_key}", param="file")
        return audio

    raise InvalidRequestError(
        f'Missing "file" (multipart file) or "{OBJECT_KEY_PARAM}" (string)',
        param="file",
    )


def _require_vtt(result: ProviderResult, fmt: ResponseFormat) -> str:
    if not result.vtt:
        raise InvalidRequestError(
            f"{fmt.value.upper()} not available from model output",
            param="response_format",
        )
    return result.vtt


def render_transcription(request: TranscriptionRequest, result: ProviderResult) -> TranscriptionOutput:
    """
    Encode a provider result in the request's response format.

    Raises:
        InvalidRequestError: If ``vtt``/``srt`` is requested and the model produced no VTT
    """
    fmt = request.response_format

    if fmt is ResponseFormat.TEXT:
        return TranscriptionOutput(result.text, MEDIA_TYPE_TEXT)

    if fmt is ResponseFormat.VTT:
        return TranscriptionOutput(_require_vtt(result, fmt), MEDIA_TYPE_VTT)

    if fmt is ResponseFormat.SRT:
        return TranscriptionOutput(vtt_to_srt(_require_vtt(result, fmt)), MEDIA_TYPE_SRT)

    if fmt is ResponseFormat.VERBOSE_JSON:
        verbose = to_verbose_json(
            result,
            want_segments=request.want_segments,
            want_words=request.want_words,
            fallback_language=request.language,
        )
        return TranscriptionOutput(verbose.model_dump(mode="json"), MEDIA_TYPE_JSON)

    return TranscriptionOutput(TranscriptionText(text=result.text).model_dump(), MEDIA_TYPE_JSON)


async def transcribe(
    request: TranscriptionRequest,
    store: AudioStore,
    provider: TranscriptionProvider,
) -> TranscriptionOutput:
    """Resolve audio, run the provider and render the result for one request."""
    audio = await resolve_audio(request, store)
    logger.info(
        "Transcribing %d bytes (model=%s, format=%s)",
        len(audio),
        request.model,
        request.response_format.value,
    )
    result = await provider.transcribe(audio, language=request.language, prompt=request.prompt)
    return render_transcription(request, result)
