"""
Speech-Synthesis Module.

Turns translated text into encoded speech audio, with one synthesizer bound
to each translation direction.

Public API:
    - AzureSynthesizer: Traditional Chinese voices via Azure Speech (en-to-zh)
    - ElevenLabsSynthesizer: English voices via ElevenLabs (zh-to-en)
    - MockSynthesizer: Deterministic mock for testing
    - create_synthesizers: Factory building the per-direction mapping
    - SynthesisError, SynthesisErrorType: Exceptions
"""

from .errors import (
    SynthesisError,
    SynthesisErrorType,
    classify_exception,
    classify_status,
    create_synthesis_error,
    is_retryable,
)
from .factory import create_synthesizer, create_synthesizers
from .interface import BaseSynthesizer, Synthesizer
from .mock import MOCK_AUDIO, MockSynthesizer, MockSynthesizerConfig

__all__ = [
    "AzureSynthesizer",
    "ElevenLabsSynthesizer",
    "MockSynthesizer",
    "MockSynthesizerConfig",
    "MOCK_AUDIO",
    "create_synthesizer",
    "create_synthesizers",
    "Synthesizer",
    "BaseSynthesizer",
    "SynthesisError",
    "SynthesisErrorType",
    "classify_exception",
    "classify_status",
    "create_synthesis_error",
    "is_retryable",
]


def __getattr__(name: str) -> type:
    if name == "AzureSynthesizer":
        from .azure_provider import AzureSynthesizer
        return AzureSynthesizer
    if name == "ElevenLabsSynthesizer":
        from .elevenlabs_provider import ElevenLabsSynthesizer
        return ElevenLabsSynthesizer
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
