"""
Speech-Recognition Streaming Module.

Wraps a continuous PCM audio stream into a sequence of transcript events.

Public API:
-----------
Components:
    - DeepgramRecognizer: Live recognizer over Deepgram's WebSocket API
    - MockRecognizer: Deterministic mock for testing
    - create_recognizer: Factory function for recognizer creation

Interface:
    - Recognizer: Protocol defining the recognizer contract
    - BaseRecognizer, BaseRecognitionStream: Abstract base classes

Models:
    - TranscriptEvent, RecognitionErrorEvent: Stream events
    - RecognitionError, RecognitionStartError: Exceptions

Example Usage:
--------------
    recognizer = MockRecognizer()
    stream = await recognizer.open("en")
    await stream.send(pcm_frame)
    async for event in stream:
        ...
"""

from .errors import (
    RecognitionError,
    RecognitionErrorType,
    RecognitionStartError,
    classify_error,
    create_start_error,
    is_retryable,
)
from .factory import create_recognizer
from .interface import BaseRecognitionStream, BaseRecognizer, Recognizer, StreamState
from .mock import MockRecognitionStream, MockRecognizer, MockRecognizerConfig
from .models import RecognitionErrorEvent, RecognitionEvent, TranscriptEvent, WordTiming

__all__ = [
    # Components
    "DeepgramRecognizer",
    "MockRecognizer",
    "MockRecognizerConfig",
    "MockRecognitionStream",
    "create_recognizer",
    # Interface
    "Recognizer",
    "BaseRecognizer",
    "BaseRecognitionStream",
    "StreamState",
    # Models
    "TranscriptEvent",
    "RecognitionErrorEvent",
    "RecognitionEvent",
    "WordTiming",
    # Errors
    "RecognitionError",
    "RecognitionErrorType",
    "RecognitionStartError",
    "classify_error",
    "create_start_error",
    "is_retryable",
]


# Lazy attribute for DeepgramRecognizer
def __getattr__(name: str) -> type:
    if name == "DeepgramRecognizer":
        from .deepgram_provider import DeepgramRecognizer
        return DeepgramRecognizer
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
