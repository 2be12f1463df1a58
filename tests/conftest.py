"""Shared fixtures: sample model output."""

import os
from typing import Any

import pytest

from tests.fakes import TEST_API_KEY

# The app module reads its settings at import time
os.environ["API_KEY"] = TEST_API_KEY

SAMPLE_VTT_TEXT = """WEBVTT

00:00:00.000 --> 00:00:01.500
hello there

00:00:01.500 --> 00:00:03.250 align:start position:10%
general
kenobi
"""


@pytest.fixture
def sample_vtt() -> str:
    return SAMPLE_VTT_TEXT


@pytest.fixture
def hello_result() -> dict[str, Any]:
    """Provider output for a single spoken word."""
    return {
        "text": "hello",
        "vtt": "WEBVTT\n\n00:00:00.000 --> 00:00:02.400\nhello\n",
        "transcription_info": {"duration": 2.4, "language": "en"},
        "segments": [
            {
                "start": 0,
                "end": 2.4,
                "text": "hello",
                "words": [{"word": "hello", "start": 0, "end": 1.0}],
            }
        ],
    }
