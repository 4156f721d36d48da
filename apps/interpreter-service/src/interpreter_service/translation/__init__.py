"""
Translation Streaming Module.

Translates one finalized utterance at a time, delivering text fragments as
the provider generates them.

Public API:
    - OpenAIStreamingTranslator: Live translator over OpenAI chat completions
    - MockStreamingTranslator: Deterministic mock for testing
    - create_translator: Factory function
    - PROFILES, GLOSSARY, get_profile: Counseling instruction profiles
    - TranslationError, TranslationErrorType: Exceptions
"""

from .errors import (
    TranslationError,
    TranslationErrorType,
    classify_error,
    create_translation_error,
    is_retryable,
)
from .factory import create_translator
from .interface import BaseStreamingTranslator, FragmentCallback, StreamingTranslator
from .mock import MockStreamingTranslator, MockTranslatorConfig, split_fragments
from .profiles import GLOSSARY, PROFILES, InstructionProfile, get_profile

__all__ = [
    "OpenAIStreamingTranslator",
    "MockStreamingTranslator",
    "MockTranslatorConfig",
    "create_translator",
    "split_fragments",
    "StreamingTranslator",
    "BaseStreamingTranslator",
    "FragmentCallback",
    "GLOSSARY",
    "PROFILES",
    "InstructionProfile",
    "get_profile",
    "TranslationError",
    "TranslationErrorType",
    "classify_error",
    "create_translation_error",
    "is_retryable",
]


def __getattr__(name: str) -> type:
    if name == "OpenAIStreamingTranslator":
        from .openai_provider import OpenAIStreamingTranslator
        return OpenAIStreamingTranslator
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
