"""
Factory function for creating streaming translators.
"""

from interpreter_service.config import ProviderConfig

from .interface import BaseStreamingTranslator
from .mock import MockStreamingTranslator


def create_translator(
    config: ProviderConfig | None = None,
    mock: bool | None = None,
    timeout_ms: int = 10000,
) -> BaseStreamingTranslator:
    """Create a streaming translator.

    Args:
        config: Provider configuration (loaded from the environment if not provided)
        mock: If True, return MockStreamingTranslator. Defaults to PROVIDER_MODE=mock.
        timeout_ms: Upper bound for one streamed translation

    Returns:
        BaseStreamingTranslator instance

    Raises:
        ValueError: If OPENAI_API_KEY is missing for the live provider
    """
    if config is None:
        config = ProviderConfig()
    if mock is None:
        mock = config.use_mocks

    if mock:
        return MockStreamingTranslator()

    if not config.openai_api_key:
        raise ValueError(
            "OpenAI API key required. Set OPENAI_API_KEY environment variable "
            "or use PROVIDER_MODE=mock for testing."
        )

    from .openai_provider import OpenAIStreamingTranslator

    return OpenAIStreamingTranslator(
        api_key=config.openai_api_key,
        model=config.openai_model,
        timeout_ms=timeout_ms,
    )
