"""
Factory function for creating recognizers.

Provides a unified interface for creating recognizer instances.
"""

from interpreter_service.config import ProviderConfig

from .interface import BaseRecognizer
from .mock import MockRecognizer


def create_recognizer(
    config: ProviderConfig | None = None,
    mock: bool | None = None,
) -> BaseRecognizer:
    """Create a streaming recognizer.

    Args:
        config: Provider configuration (loaded from the environment if not provided)
        mock: If True, return MockRecognizer. Defaults to PROVIDER_MODE=mock.

    Returns:
        BaseRecognizer instance (either DeepgramRecognizer or MockRecognizer)

    Raises:
        ValueError: If DEEPGRAM_API_KEY is missing for the live provider
    """
    if config is None:
        config = ProviderConfig()
    if mock is None:
        mock = config.use_mocks

    if mock:
        return MockRecognizer()

    if not config.deepgram_api_key:
        raise ValueError(
            "Deepgram API key required. Set DEEPGRAM_API_KEY environment variable "
            "or use PROVIDER_MODE=mock for testing."
        )

    from .deepgram_provider import DeepgramRecognizer

    return DeepgramRecognizer(api_key=config.deepgram_api_key, model=config.deepgram_model)
