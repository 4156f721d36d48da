"""
Mock Synthesizer for testing.

Returns a fixed audio buffer, optionally slow or failing.
"""

import asyncio
from dataclasses import dataclass

from .errors import SynthesisError, SynthesisErrorType
from .interface import BaseSynthesizer

MOCK_AUDIO = b"ID3" + b"\x00" * 125


@dataclass
class MockSynthesizerConfig:
    """Configuration for mock synthesizer behavior."""

    audio: bytes = MOCK_AUDIO
    simulate_latency_ms: int = 0
    fail: bool = False
    failure_type: SynthesisErrorType = SynthesisErrorType.PROVIDER_ERROR
    audio_format: str = "mock-mp3"


class MockSynthesizer(BaseSynthesizer):
    """Deterministic mock synthesizer that records every request."""

    def __init__(self, config: MockSynthesizerConfig | None = None, name: str = "mock-tts"):
        self._config = config or MockSynthesizerConfig()
        self._name = name
        self.calls: list[str] = []
        self.shutdown_calls = 0

    @property
    def component_instance(self) -> str:
        """Return mock instance identifier."""
        return self._name

    @property
    def audio_format(self) -> str:
        return self._config.audio_format

    async def synthesize(self, text: str) -> bytes:
        self.calls.append(text)

        if self._config.simulate_latency_ms > 0:
            await asyncio.sleep(self._config.simulate_latency_ms / 1000)

        if self._config.fail:
            raise SynthesisError(
                f"Mock synthesis failure: {self._config.failure_type.value}",
                error_type=self._config.failure_type,
            )

        return self._config.audio

    async def shutdown(self) -> None:
        self.shutdown_calls += 1
