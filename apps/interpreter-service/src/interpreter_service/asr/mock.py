"""
Mock Recognizer for testing.

Provides deterministic behavior without a real speech-recognition service.
Events can be scripted (released as audio frames arrive) or injected directly.
"""

import asyncio
from dataclasses import dataclass, field

from .errors import RecognitionErrorType, RecognitionStartError
from .interface import BaseRecognitionStream, BaseRecognizer
from .models import RecognitionErrorEvent, RecognitionEvent, TranscriptEvent


@dataclass
class MockRecognizerConfig:
    """Configuration for MockRecognizer behavior.

    Used for deterministic testing without real transcription.
    """

    # Events released in order, one per `frames_per_event` audio frames
    script: list[RecognitionEvent] = field(default_factory=list)
    frames_per_event: int = 1
    fail_on_open: bool = False
    # Time spent opening a stream, like a provider handshake
    open_delay_ms: int = 0


class MockRecognitionStream(BaseRecognitionStream):
    """Recognition stream whose events come from a script or from `inject`."""

    def __init__(
        self,
        language: str,
        script: list[RecognitionEvent] | None = None,
        frames_per_event: int = 1,
    ):
        super().__init__(language)
        self._script = list(script or [])
        self._frames_per_event = max(1, frames_per_event)
        self.frames_received: list[bytes] = []
        self.close_calls = 0

    async def _send_frame(self, frame: bytes) -> None:
        self.frames_received.append(frame)
        if self._script and len(self.frames_received) % self._frames_per_event == 0:
            self._publish(self._script.pop(0))

    async def _shutdown(self) -> None:
        self.close_calls += 1

    def inject(self, event: RecognitionEvent) -> None:
        """Publish an event as if the provider had produced it."""
        self._publish(event)

    def inject_transcript(self, text: str, is_final: bool, confidence: float = 0.95) -> None:
        self._publish(TranscriptEvent(text=text, confidence=confidence, is_final=is_final))

    def inject_error(self, message: str) -> None:
        self._publish(RecognitionErrorEvent(message=message))

    def end(self) -> None:
        """Simulate the provider closing the stream."""
        self._finish()


class MockRecognizer(BaseRecognizer):
    """Deterministic mock recognizer.

    Records every stream it opens so tests can drive them.
    """

    def __init__(self, config: MockRecognizerConfig | None = None):
        self._config = config or MockRecognizerConfig()
        self.streams: list[MockRecognitionStream] = []

    @property
    def component_instance(self) -> str:
        """Return mock instance identifier."""
        return "mock-asr"

    @property
    def last_stream(self) -> MockRecognitionStream | None:
        return self.streams[-1] if self.streams else None

    async def open(self, language: str) -> MockRecognitionStream:
        if self._config.open_delay_ms > 0:
            await asyncio.sleep(self._config.open_delay_ms / 1000)

        if self._config.fail_on_open:
            raise RecognitionStartError(
                f"Mock failure opening recognition stream for '{language}'",
                error_type=RecognitionErrorType.CONNECTION_FAILED,
            )

        stream = MockRecognitionStream(
            language,
            script=self._config.script,
            frames_per_event=self._config.frames_per_event,
        )
        stream._mark_open()
        self.streams.append(stream)
        return stream
