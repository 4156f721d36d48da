"""
Streaming Translator Interface Contract.

Defines the interface that all streaming translators follow. A translator
turns one finalized utterance into target-language text, handing each text
fragment to a callback as soon as the provider produces it.
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Protocol, runtime_checkable

FragmentCallback = Callable[[str], Awaitable[None]]


@runtime_checkable
class StreamingTranslator(Protocol):
    """Protocol defining the streaming translator contract."""

    @property
    def component_name(self) -> str:
        """Return the component name (always 'translate')."""
        ...

    @property
    def component_instance(self) -> str:
        """Return the provider identifier (e.g., 'openai-gpt-4o')."""
        ...

    async def translate_streaming(
        self,
        text: str,
        direction: str,
        on_fragment: FragmentCallback,
    ) -> str:
        """Translate text, delivering fragments in provider order.

        Args:
            text: Finalized source-language transcript
            direction: Translation direction name (e.g., "en-to-zh")
            on_fragment: Awaited once per non-empty fragment

        Returns:
            The full translation, equal to the concatenation of all fragments

        Raises:
            TranslationError: On provider failure or empty output.
        """
        ...

    async def shutdown(self) -> None:
        """Release resources (HTTP clients, etc.)."""
        ...


class BaseStreamingTranslator(ABC):
    """Abstract base class for streaming translators."""

    _component_name: str = "translate"

    @property
    def component_name(self) -> str:
        """Return the component name (always 'translate')."""
        return self._component_name

    @property
    @abstractmethod
    def component_instance(self) -> str:
        """Subclasses must provide their instance identifier."""
        pass

    @abstractmethod
    async def translate_streaming(
        self,
        text: str,
        direction: str,
        on_fragment: FragmentCallback,
    ) -> str:
        """Subclasses must implement streaming translation."""
        pass

    async def shutdown(self) -> None:
        """Default implementation does nothing. Override if cleanup needed."""
        return  # noqa: B027 - intentionally empty default implementation
