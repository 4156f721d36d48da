"""Environment-based configuration for the Interpreter Service.

All configuration is loaded from environment variables with sensible defaults.
Missing provider credentials cause startup to fail fast in live mode.
"""

import os
from dataclasses import dataclass, field

PROVIDER_MODES = ("live", "mock")
NO_PEER_AUDIO_POLICIES = ("echo", "drop")


@dataclass(frozen=True)
class ServerConfig:
    """Server configuration for the Interpreter Service."""

    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "3001")))
    cors_origin: str = field(default_factory=lambda: os.getenv("CORS_ORIGIN", "*"))

    # Socket.IO transport
    ping_interval: int = field(default_factory=lambda: int(os.getenv("WS_PING_INTERVAL", "25")))
    ping_timeout: int = field(default_factory=lambda: int(os.getenv("WS_PING_TIMEOUT", "60")))
    max_buffer_size: int = field(
        default_factory=lambda: int(os.getenv("WS_MAX_BUFFER_SIZE", str(10 * 1024 * 1024)))
    )  # 10MB default

    @property
    def cors_origins(self) -> str | list[str]:
        """CORS origins in the form python-socketio and Starlette accept."""
        if self.cors_origin == "*":
            return "*"
        return [origin.strip() for origin in self.cors_origin.split(",") if origin.strip()]


@dataclass(frozen=True)
class ObservabilityConfig:
    """Logging configuration."""

    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_format: str = field(default_factory=lambda: os.getenv("LOG_FORMAT", "json"))


@dataclass(frozen=True)
class ProviderConfig:
    """Credentials and model selection for the speech and translation providers."""

    mode: str = field(default_factory=lambda: os.getenv("PROVIDER_MODE", "live").lower())

    # Deepgram (speech recognition)
    deepgram_api_key: str | None = field(default_factory=lambda: os.getenv("DEEPGRAM_API_KEY"))
    deepgram_model: str = field(default_factory=lambda: os.getenv("DEEPGRAM_MODEL", "nova-2"))

    # OpenAI (translation)
    openai_api_key: str | None = field(default_factory=lambda: os.getenv("OPENAI_API_KEY"))
    openai_model: str = field(default_factory=lambda: os.getenv("OPENAI_MODEL", "gpt-4o"))

    # Azure Speech (en -> zh synthesis)
    azure_speech_key: str | None = field(default_factory=lambda: os.getenv("AZURE_SPEECH_KEY"))
    azure_speech_region: str = field(
        default_factory=lambda: os.getenv("AZURE_SPEECH_REGION", "eastasia")
    )
    azure_voice_name: str = field(
        default_factory=lambda: os.getenv("AZURE_VOICE_NAME", "zh-TW-HsiaoChenNeural")
    )

    # ElevenLabs (zh -> en synthesis)
    elevenlabs_api_key: str | None = field(
        default_factory=lambda: os.getenv("ELEVENLABS_API_KEY")
    )
    elevenlabs_voice_id: str = field(
        default_factory=lambda: os.getenv("ELEVENLABS_VOICE_ID", "21m00Tcm4TlvDq8ikWAM")
    )
    elevenlabs_model_id: str = field(
        default_factory=lambda: os.getenv("ELEVENLABS_MODEL_ID", "eleven_turbo_v2_5")
    )

    @property
    def use_mocks(self) -> bool:
        """True when deterministic mock providers replace the vendor APIs."""
        return self.mode == "mock"

    def validate(self) -> None:
        """Validate provider configuration.

        Raises:
            ValueError: If the mode is unknown or a required credential is missing.
        """
        if self.mode not in PROVIDER_MODES:
            raise ValueError(
                f"PROVIDER_MODE must be one of {', '.join(PROVIDER_MODES)}, got {self.mode!r}"
            )

        if self.use_mocks:
            return

        required = {
            "DEEPGRAM_API_KEY": self.deepgram_api_key,
            "OPENAI_API_KEY": self.openai_api_key,
            "AZURE_SPEECH_KEY": self.azure_speech_key,
            "ELEVENLABS_API_KEY": self.elevenlabs_api_key,
        }
        missing = [name for name, value in required.items() if not value]
        if missing:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing)}. "
                "Set them or use PROVIDER_MODE=mock for local testing."
            )


@dataclass(frozen=True)
class PipelineConfig:
    """Interpretation pipeline behavior."""

    # What to do with synthesized audio when the listener has not joined yet
    no_peer_audio_policy: str = field(
        default_factory=lambda: os.getenv("NO_PEER_AUDIO_POLICY", "echo").lower()
    )
    translation_timeout_ms: int = field(
        default_factory=lambda: int(os.getenv("TRANSLATION_TIMEOUT_MS", "10000"))
    )
    tts_timeout_ms: int = field(default_factory=lambda: int(os.getenv("TTS_TIMEOUT_MS", "15000")))

    def validate(self) -> None:
        """Validate pipeline configuration.

        Raises:
            ValueError: If a value is out of range.
        """
        if self.no_peer_audio_policy not in NO_PEER_AUDIO_POLICIES:
            raise ValueError(
                "NO_PEER_AUDIO_POLICY must be one of "
                f"{', '.join(NO_PEER_AUDIO_POLICIES)}, got {self.no_peer_audio_policy!r}"
            )
        if self.translation_timeout_ms <= 0:
            raise ValueError(
                f"TRANSLATION_TIMEOUT_MS must be positive, got {self.translation_timeout_ms}"
            )
        if self.tts_timeout_ms <= 0:
            raise ValueError(f"TTS_TIMEOUT_MS must be positive, got {self.tts_timeout_ms}")


@dataclass(frozen=True)
class InterpreterConfig:
    """Complete configuration for the Interpreter Service."""

    server: ServerConfig
    observability: ObservabilityConfig
    providers: ProviderConfig
    pipeline: PipelineConfig

    @classmethod
    def from_env(cls) -> "InterpreterConfig":
        """Create configuration from environment variables.

        Returns:
            InterpreterConfig instance with all settings loaded.

        Raises:
            ValueError: If required configuration is missing or invalid.
        """
        config = cls(
            server=ServerConfig(),
            observability=ObservabilityConfig(),
            providers=ProviderConfig(),
            pipeline=PipelineConfig(),
        )

        config.providers.validate()
        config.pipeline.validate()

        return config


# Global singleton configuration
_config: InterpreterConfig | None = None


def get_config() -> InterpreterConfig:
    """Get the global configuration instance.

    Raises:
        ValueError: If configuration validation fails.
    """
    global _config
    if _config is None:
        _config = InterpreterConfig.from_env()
    return _config


def reset_config() -> None:
    """Reset the global configuration (for testing)."""
    global _config
    _config = None


def set_config(config: InterpreterConfig) -> None:
    """Set the global configuration (for testing)."""
    global _config
    _config = config
