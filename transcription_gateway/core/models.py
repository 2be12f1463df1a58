"""Data model: the parsed request, the provider's raw result and the OpenAI-shaped outputs.

Provider results are loosely typed. Parsing them never fails: numbers are
coerced leniently (null and blank are 0, anything unusable becomes ``nan``),
non-list sequences become empty lists, and unknown keys are kept. Output models keep the
difference between a key that is absent and a key that is ``null``.
"""

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    model_serializer,
)

MEDIA_TYPE_JSON = "application/json"
MEDIA_TYPE_TEXT = "text/plain; charset=utf-8"
MEDIA_TYPE_VTT = "text/vtt; charset=utf-8"
MEDIA_TYPE_SRT = "application/x-subrip; charset=utf-8"

_DECIMAL_RE = re.compile(r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)", re.ASCII)
_PREFIXED_RE = re.compile(r"0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+", re.ASCII)


def coerce_number(value: Any) -> float:
    """
    Convert a loosely typed model value to float.

    ``None`` and blank strings are 0. Strings must be plain decimal, signed
    ``Infinity`` or 0x/0o/0b integer literals; anything else is ``nan``.
    """
    if value is None:
        return 0.0
    if isinstance(value, (bool, int, float)):
        return float(value)
    if not isinstance(value, str):
        return math.nan

    text = value.strip()
    if not text:
        return 0.0
    if _PREFIXED_RE.fullmatch(text):
        return float(int(text, 0))
    if _DECIMAL_RE.fullmatch(text):
        return float(text.replace("Infinity", "inf"))
    return math.nan


def coerce_text(value: Any) -> str:
    return "" if value is None else str(value)


def _optional_text(value: Any) -> str | None:
    return None if value is None else str(value)


def _as_records(value: Any) -> list[dict[str, Any]]:
    # Keeps list positions so segment ids stay aligned with the provider's order
    if not isinstance(value, list):
        return []
    return [item if isinstance(item, dict) else {} for item in value]


def _as_record(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


LooseFloat = Annotated[float, BeforeValidator(coerce_number)]
LooseText = Annotated[str, BeforeValidator(coerce_text)]
OptionalText = Annotated[str | None, BeforeValidator(_optional_text)]


# ---------------------------------------------------------------------------
# Provider result (input)
# ---------------------------------------------------------------------------


class ProviderWord(BaseModel):
    model_config = ConfigDict(extra="allow")

    word: LooseText = ""
    start: LooseFloat = math.nan
    end: LooseFloat = math.nan

    @property
    def is_valid(self) -> bool:
        return bool(self.word) and math.isfinite(self.start) and math.isfinite(self.end)


class ProviderSegment(BaseModel):
    """One segment as returned by the model; confidence scores stay untyped."""

    model_config = ConfigDict(extra="allow")

    start: LooseFloat = math.nan
    end: LooseFloat = math.nan
    text: LooseText = ""
    temperature: Any = None
    avg_logprob: Any = None
    compression_ratio: Any = None
    no_speech_prob: Any = None
    words: Annotated[list[ProviderWord], BeforeValidator(_as_records)] = Field(default_factory=list)


class TranscriptionInfo(BaseModel):
    model_config = ConfigDict(extra="allow")

    duration: LooseFloat = 0.0
    language: OptionalText = None


class ProviderResult(BaseModel):
    """Raw transcription result from the model provider."""

    model_config = ConfigDict(extra="allow")

    text: LooseText = ""
    vtt: OptionalText = None
    transcription_info: Annotated[TranscriptionInfo, BeforeValidator(_as_record)] = Field(
        default_factory=TranscriptionInfo
    )
    segments: Annotated[list[ProviderSegment], BeforeValidator(_as_records)] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------


class ResponseFormat(str, Enum):
    JSON = "json"
    TEXT = "text"
    SRT = "srt"
    VTT = "vtt"
    VERBOSE_JSON = "verbose_json"

    @classmethod
    def parse(cls, value: str | None) -> "ResponseFormat":
        """Case-insensitive lookup. Unknown values are served as plain JSON."""
        if not value:
            return cls.JSON
        try:
            return cls(value.lower())
        except ValueError:
            return cls.JSON


class TranscriptionRequest(BaseModel):
    """A validated ``/v1/audio/transcriptions`` call."""

    model_config = ConfigDict(frozen=True)

    model: str
    response_format: ResponseFormat = ResponseFormat.JSON
    timestamp_granularities: tuple[str, ...] = ()
    language: str | None = None
    prompt: str | None = None
    file: bytes | None = Field(default=None, repr=False)
    object_key: str | None = None

    @property
    def want_words(self) -> bool:
        return "word" in self.timestamp_granularities

    @property
    def want_segments(self) -> bool:
        # Segments are included unless the caller asked for words only
        return not self.timestamp_granularities or "segment" in self.timestamp_granularities


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------

SEGMENT_SCORES = ("temperature", "avg_logprob", "compression_ratio", "no_speech_prob")


class Word(BaseModel):
    word: str
    start: float
    end: float


class VerboseSegment(BaseModel):
    id: int
    seek: int = 0
    start: float
    end: float
    text: str
    temperature: Any = None
    avg_logprob: Any = None
    compression_ratio: Any = None
    no_speech_prob: Any = None

    @model_serializer(mode="wrap")
    def _drop_missing_scores(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        for key in SEGMENT_SCORES:
            if key not in self.model_fields_set:
                data.pop(key, None)
        return data


class Usage(BaseModel):
    type: Literal["duration"] = "duration"
    seconds: int


class VerboseTranscription(BaseModel):
    """The ``verbose_json`` response body."""

    task: Literal["transcribe"] = "transcribe"
    language: str
    duration: float
    text: str
    segments: list[VerboseSegment] = Field(default_factory=list)
    words: list[Word] | None = None
    usage: Usage

    @model_serializer(mode="wrap")
    def _drop_missing_words(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        if self.words is None:
            data.pop("words", None)
        return data


class TranscriptionText(BaseModel):
    """The default ``json`` response body."""

    text: str


@dataclass(frozen=True)
class TranscriptionOutput:
    """A rendered response: either a text document or a JSON-ready mapping."""

    body: str | dict[str, Any]
    media_type: str

    @property
    def is_json(self) -> bool:
        return isinstance(self.body, dict)
