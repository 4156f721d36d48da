"""
Data models for the speech-recognition streaming adapter.

Recognition streams yield two kinds of events: transcript results and
provider-side errors. Both are plain pydantic models so that mock and real
providers produce identical shapes.
"""

from typing import Any

from pydantic import BaseModel, Field

SAMPLE_RATE_HZ = 16000
CHANNELS = 1
ENCODING = "linear16"  # PCM signed 16-bit little-endian


class WordTiming(BaseModel):
    """Word-level timing reported by the provider (seconds from stream start)."""

    word: str
    start: float = Field(ge=0)
    end: float = Field(ge=0)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)


class TranscriptEvent(BaseModel):
    """One recognition result for the utterance currently being spoken.

    Interim results (is_final=False) may be revised by later events; a final
    result closes the utterance.
    """

    text: str
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    is_final: bool = False
    words: list[WordTiming] = Field(default_factory=list)


class RecognitionErrorEvent(BaseModel):
    """A provider-side failure surfaced on the event sequence.

    The stream is not closed by the adapter; the consumer decides.
    """

    message: str = Field(min_length=1)
    details: dict[str, Any] | None = None


RecognitionEvent = TranscriptEvent | RecognitionErrorEvent
