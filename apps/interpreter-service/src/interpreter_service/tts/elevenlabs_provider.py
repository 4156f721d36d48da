"""
ElevenLabs TTS Provider.

Synthesizes English speech with the ElevenLabs async client. The SDK streams
the MP3 response in chunks; they are joined into one buffer per utterance.
"""

import asyncio
import logging

from elevenlabs import VoiceSettings
from elevenlabs.client import AsyncElevenLabs
from elevenlabs.core.api_error import ApiError

from .errors import SynthesisError, SynthesisErrorType, create_synthesis_error
from .interface import BaseSynthesizer

logger = logging.getLogger(__name__)

# ============================================================================
# Constants
# ============================================================================

DEFAULT_MODEL_ID = "eleven_turbo_v2_5"
DEFAULT_VOICE_ID = "21m00Tcm4TlvDq8ikWAM"  # Rachel (English)
OUTPUT_FORMAT = "mp3_44100_128"
DEFAULT_TIMEOUT_MS = 15000

DEFAULT_VOICE_SETTINGS = VoiceSettings(
    stability=0.5,
    similarity_boost=0.75,
    style=0.0,
    use_speaker_boost=True,
)


class ElevenLabsSynthesizer(BaseSynthesizer):
    """Synthesizer backed by the ElevenLabs API.

    Environment Variables:
    - ELEVENLABS_API_KEY: Required. API key for ElevenLabs service.
    - ELEVENLABS_VOICE_ID: Voice to use (default Rachel).
    """

    def __init__(
        self,
        api_key: str | None = None,
        voice_id: str = DEFAULT_VOICE_ID,
        model_id: str = DEFAULT_MODEL_ID,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        client: AsyncElevenLabs | None = None,
    ):
        if client is None and not api_key:
            raise ValueError("ElevenLabs API key is required")
        self._client = client or AsyncElevenLabs(api_key=api_key)
        self._voice_id = voice_id
        self._model_id = model_id
        self._timeout_s = timeout_ms / 1000

    @property
    def component_instance(self) -> str:
        return f"elevenlabs-{self._model_id}"

    @property
    def audio_format(self) -> str:
        return OUTPUT_FORMAT

    async def synthesize(self, text: str) -> bytes:
        if not text.strip():
            raise SynthesisError("Cannot synthesize empty text", SynthesisErrorType.EMPTY_INPUT)

        try:
            audio = await asyncio.wait_for(self._collect(text), timeout=self._timeout_s)
        except (ApiError, TimeoutError, ConnectionError) as e:
            logger.error(f"ElevenLabs TTS failed: {e!r}")
            raise create_synthesis_error(e, "elevenlabs") from e

        if not audio:
            raise SynthesisError("ElevenLabs returned no audio", SynthesisErrorType.EMPTY_AUDIO)

        logger.debug(f"ElevenLabs synthesized {len(audio)} bytes for {len(text)} chars")
        return audio

    async def _collect(self, text: str) -> bytes:
        chunks: list[bytes] = []
        async for chunk in self._client.text_to_speech.convert(
            voice_id=self._voice_id,
            text=text,
            model_id=self._model_id,
            output_format=OUTPUT_FORMAT,
            voice_settings=DEFAULT_VOICE_SETTINGS,
        ):
            if chunk:
                chunks.append(chunk)
        return b"".join(chunks)
