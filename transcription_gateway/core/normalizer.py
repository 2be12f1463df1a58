"""Reshape a provider result into the OpenAI ``verbose_json`` transcription schema."""

import logging
import math

from transcription_gateway.core.models import (
    SEGMENT_SCORES,
    ProviderResult,
    ProviderSegment,
    Usage,
    VerboseSegment,
    VerboseTranscription,
    Word,
)

logger = logging.getLogger(__name__)

UNKNOWN_LANGUAGE = "unknown"


def _finite_or_zero(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def billable_seconds(duration: float) -> int:
    """Whole seconds billed for a transcription; never less than one."""
    return max(1, math.ceil(_finite_or_zero(duration)))


def _to_verbose_segment(index: int, segment: ProviderSegment) -> VerboseSegment:
    fields = {
        "id": index,
        "seek": 0,
        "start": _finite_or_zero(segment.start),
        "end": _finite_or_zero(segment.end),
        "text": segment.text,
    }
    # Scores the provider did not send stay out of the output entirely
    for key in SEGMENT_SCORES:
        if key in segment.model_fields_set:
            fields[key] = getattr(segment, key)
    return VerboseSegment(**fields)


def collect_words(segments: list[ProviderSegment]) -> list[Word]:
    """Flatten the words of all segments, in order, dropping unusable ones."""
    words = []
    for segment in segments:
        for word in segment.words:
            if word.is_valid:
                words.append(Word(word=word.word, start=word.start, end=word.end))
    return words


def to_verbose_json(
    result: ProviderResult,
    *,
    want_segments: bool,
    want_words: bool,
    fallback_language: str | None = None,
) -> VerboseTranscription:
    """
    Build the ``verbose_json`` body for a provider result.

    Args:
        result: Parsed provider output
        want_segments: Include the segment list; when False ``segments`` is empty
        want_words: Include the flattened word list if at least one word is usable
        fallback_language: Language reported when the provider does not detect one

    Returns:
        VerboseTranscription ready to serialize
    """
    info = result.transcription_info
    duration = _finite_or_zero(info.duration)

    if info.language is not None:
        language = info.language
    elif fallback_language is not None:
        language = fallback_language
    else:
        language = UNKNOWN_LANGUAGE

    segments = (
        [_to_verbose_segment(idx, seg) for idx, seg in enumerate(result.segments)]
        if want_segments
        else []
    )

    fields = {
        "task": "transcribe",
        "language": language,
        "duration": duration,
        "text": result.text,
        "segments": segments,
        "usage": Usage(type="duration", seconds=billable_seconds(duration)),
    }

    if want_words:
        words = collect_words(result.segments)
        if words:
            fields["words"] = words
        else:
            logger.debug("Word timestamps requested but provider returned none usable")

    return VerboseTranscription(**fields)
