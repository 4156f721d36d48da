"""
Speech-Synthesis Interface Contract.

Defines the interface that all synthesizers follow. A synthesizer turns one
translated utterance into a complete encoded audio buffer; the codec is
provider-specific and opaque to the pipeline.
"""

from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable


@runtime_checkable
class Synthesizer(Protocol):
    """Protocol defining the synthesizer contract."""

    @property
    def component_name(self) -> str:
        """Return the component name (always 'tts')."""
        ...

    @property
    def component_instance(self) -> str:
        """Return the provider identifier (e.g., 'azure-zh-TW-HsiaoChenNeural')."""
        ...

    @property
    def audio_format(self) -> str:
        """Describe the encoded output (e.g., 'mp3_44100_128')."""
        ...

    async def synthesize(self, text: str) -> bytes:
        """Synthesize speech for text.

        Raises:
            SynthesisError: If the provider fails or returns no audio.
        """
        ...

    async def shutdown(self) -> None:
        """Release resources (HTTP sessions, etc.)."""
        ...


class BaseSynthesizer(ABC):
    """Abstract base class for synthesizers."""

    _component_name: str = "tts"

    @property
    def component_name(self) -> str:
        """Return the component name (always 'tts')."""
        return self._component_name

    @property
    @abstractmethod
    def component_instance(self) -> str:
        """Subclasses must provide their instance identifier."""
        pass

    @property
    @abstractmethod
    def audio_format(self) -> str:
        """Subclasses must describe their output codec."""
        pass

    @abstractmethod
    async def synthesize(self, text: str) -> bytes:
        """Subclasses must implement synthesis."""
        pass

    async def shutdown(self) -> None:
        """Default implementation does nothing. Override if cleanup needed."""
        return  # noqa: B027 - intentionally empty default implementation
