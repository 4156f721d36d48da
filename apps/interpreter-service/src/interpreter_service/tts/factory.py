"""
Factory function for creating the per-direction synthesizers.
"""

from interpreter_service.config import ProviderConfig
from interpreter_service.pipeline.directions import DIRECTIONS

from .interface import BaseSynthesizer
from .mock import MockSynthesizer


def create_synthesizer(
    kind: str,
    config: ProviderConfig,
    timeout_ms: int = 15000,
) -> BaseSynthesizer:
    """Create one live synthesizer.

    Args:
        kind: "azure" or "elevenlabs"
        config: Provider configuration
        timeout_ms: Upper bound for one synthesis request

    Raises:
        ValueError: If the kind is unknown or its credential is missing
    """
    if kind == "azure":
        if not config.azure_speech_key:
            raise ValueError(
                "Azure Speech key required. Set AZURE_SPEECH_KEY environment variable "
                "or use PROVIDER_MODE=mock for testing."
            )
        from .azure_provider import AzureSynthesizer

        return AzureSynthesizer(
            subscription_key=config.azure_speech_key,
            region=config.azure_speech_region,
            voice_name=config.azure_voice_name,
            timeout_ms=timeout_ms,
        )

    if kind == "elevenlabs":
        if not config.elevenlabs_api_key:
            raise ValueError(
                "ElevenLabs API key required. Set ELEVENLABS_API_KEY environment variable "
                "or use PROVIDER_MODE=mock for testing."
            )
        from .elevenlabs_provider import ElevenLabsSynthesizer

        return ElevenLabsSynthesizer(
            api_key=config.elevenlabs_api_key,
            voice_id=config.elevenlabs_voice_id,
            model_id=config.elevenlabs_model_id,
            timeout_ms=timeout_ms,
        )

    raise ValueError(f"Unknown synthesizer: {kind}. Supported: azure, elevenlabs")


def create_synthesizers(
    config: ProviderConfig | None = None,
    mock: bool | None = None,
    timeout_ms: int = 15000,
) -> dict[str, BaseSynthesizer]:
    """Create the synthesizer each direction is bound to.

    Returns:
        Mapping of direction name to synthesizer
    """
    if config is None:
        config = ProviderConfig()
    if mock is None:
        mock = config.use_mocks

    if mock:
        return {
            direction.name: MockSynthesizer(name=f"mock-{direction.synthesizer}")
            for direction in DIRECTIONS.values()
        }

    return {
        direction.name: create_synthesizer(direction.synthesizer, config, timeout_ms)
        for direction in DIRECTIONS.values()
    }
