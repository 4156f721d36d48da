"""
Mock Streaming Translator for testing.

Provides deterministic behavior without a real translation service.
"""

import asyncio
from dataclasses import dataclass, field

from .errors import TranslationError, TranslationErrorType
from .interface import BaseStreamingTranslator, FragmentCallback


@dataclass
class MockTranslatorConfig:
    """Configuration for mock translator behavior.

    Used for deterministic testing without real translation.
    """

    # Fixed fragments to emit; None means echo the input word by word
    fragments: list[str] | None = None
    simulate_latency_ms: int = 0
    fail: bool = False
    failure_type: TranslationErrorType = TranslationErrorType.PROVIDER_ERROR
    # Fail after emitting this many fragments (only with fail=True)
    fail_after_fragments: int = 0


def split_fragments(text: str) -> list[str]:
    """Split text into word-sized fragments that concatenate back to the input."""
    fragments: list[str] = []
    current = ""
    for char in text:
        current += char
        if char.isspace():
            fragments.append(current)
            current = ""
    if current:
        fragments.append(current)
    return fragments


class MockStreamingTranslator(BaseStreamingTranslator):
    """Deterministic mock translator.

    Without scripted fragments it performs an identity translation, emitting
    the source text one word at a time.
    """

    def __init__(self, config: MockTranslatorConfig | None = None):
        self._config = config or MockTranslatorConfig()
        self.calls: list[tuple[str, str]] = []

    @property
    def component_instance(self) -> str:
        """Return mock instance identifier."""
        return "mock-streaming-v1"

    async def translate_streaming(
        self,
        text: str,
        direction: str,
        on_fragment: FragmentCallback,
    ) -> str:
        self.calls.append((text, direction))

        if self._config.fragments is not None:
            fragments = list(self._config.fragments)
        else:
            fragments = split_fragments(text)

        delivered: list[str] = []
        for index, fragment in enumerate(fragments):
            if self._config.fail and index >= self._config.fail_after_fragments:
                break
            if self._config.simulate_latency_ms > 0:
                await asyncio.sleep(self._config.simulate_latency_ms / 1000)
            delivered.append(fragment)
            await on_fragment(fragment)

        if self._config.fail:
            raise TranslationError(
                f"Mock translation failure: {self._config.failure_type.value}",
                error_type=self._config.failure_type,
            )

        return "".join(delivered)
