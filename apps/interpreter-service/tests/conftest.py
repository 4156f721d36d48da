"""Shared test fixtures for Interpreter Service tests.

Provides PCM audio generation, a recording Socket.IO mock, mock providers
and a runtime wired entirely with mocks.
"""

import asyncio
import math
import struct
from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from interpreter_service.asr.mock import MockRecognizer
from interpreter_service.config import (
    InterpreterConfig,
    ObservabilityConfig,
    PipelineConfig,
    ProviderConfig,
    ServerConfig,
)
from interpreter_service.runtime import InterpreterRuntime
from interpreter_service.session.registry import SessionRegistry
from interpreter_service.translation.mock import MockStreamingTranslator
from interpreter_service.tts.mock import MockSynthesizer

# =============================================================================
# Audio Fixtures
# =============================================================================


def generate_test_audio(
    frequency_hz: float = 440.0,
    duration_ms: int = 100,
    sample_rate_hz: int = 16000,
    amplitude: float = 0.5,
) -> bytes:
    """Generate a mono sine wave as PCM S16LE.

    Args:
        frequency_hz: Frequency of the sine wave in Hz.
        duration_ms: Duration of the audio in milliseconds.
        sample_rate_hz: Sample rate in Hz.
        amplitude: Amplitude of the wave (0.0 to 1.0).

    Returns:
        Raw little-endian 16-bit PCM bytes.
    """
    num_samples = int(sample_rate_hz * duration_ms / 1000)
    samples = []
    for i in range(num_samples):
        value = amplitude * math.sin(2 * math.pi * frequency_hz * i / sample_rate_hz)
        samples.append(max(-32768, min(32767, int(value * 32767))))
    return struct.pack(f"<{len(samples)}h", *samples)


@pytest.fixture
def pcm_frame() -> bytes:
    """100ms of 16kHz mono PCM."""
    return generate_test_audio(duration_ms=100)


# =============================================================================
# Socket.IO Fixtures
# =============================================================================


@pytest.fixture
def mock_sio():
    """Create a mock Socket.IO server that records emits."""
    sio = MagicMock()
    sio.emit = AsyncMock()
    return sio


@pytest.fixture
def emitted() -> Callable[..., list[tuple[str, Any, str | None]]]:
    """Return a helper listing (event, payload, to) emitted on a mock server.

    Optional filters: event name and target connection.
    """

    def _emitted(sio: MagicMock, event: str | None = None, to: str | None = None):
        result = []
        for call in sio.emit.await_args_list:
            name, payload = call.args[0], call.args[1]
            target = call.kwargs.get("to")
            if event is not None and name != event:
                continue
            if to is not None and target != to:
                continue
            result.append((name, payload, target))
        return result

    return _emitted


@pytest.fixture
def wait_until() -> Callable[..., Any]:
    """Return a coroutine helper polling a predicate until true (or failing)."""

    async def _wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
        async def poll() -> None:
            while not predicate():
                await asyncio.sleep(0.005)

        await asyncio.wait_for(poll(), timeout=timeout)

    return _wait_until


# =============================================================================
# Provider and Runtime Fixtures
# =============================================================================


def make_config(no_peer_audio_policy: str = "echo") -> InterpreterConfig:
    """Build a mock-mode configuration without touching the environment."""
    return InterpreterConfig(
        server=ServerConfig(host="127.0.0.1", port=3001, cors_origin="*"),
        observability=ObservabilityConfig(log_level="DEBUG", log_format="console"),
        providers=ProviderConfig(mode="mock"),
        pipeline=PipelineConfig(no_peer_audio_policy=no_peer_audio_policy),
    )


@pytest.fixture
def config() -> InterpreterConfig:
    return make_config()


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry()


@pytest.fixture
def recognizer() -> MockRecognizer:
    return MockRecognizer()


@pytest.fixture
def translator() -> MockStreamingTranslator:
    return MockStreamingTranslator()


@pytest.fixture
def synthesizers() -> dict[str, MockSynthesizer]:
    return {
        "en-to-zh": MockSynthesizer(name="mock-azure"),
        "zh-to-en": MockSynthesizer(name="mock-elevenlabs"),
    }


@pytest.fixture
def runtime(config, recognizer, translator, synthesizers, registry) -> InterpreterRuntime:
    """Runtime backed entirely by mock providers."""
    return InterpreterRuntime(
        config=config,
        recognizer=recognizer,
        translator=translator,
        synthesizers=synthesizers,
        registry=registry,
    )
