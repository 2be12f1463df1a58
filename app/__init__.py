"""FastAPI service exposing the OpenAI audio transcription API."""

from transcription_gateway import __version__

__all__ = ["__version__"]
