"""
Azure Speech TTS Provider.

Synthesizes Traditional Chinese (Taiwan) speech through the Azure Speech
REST endpoint. Requests are SSML documents; the response body is the
complete MP3 buffer.
"""

import logging

import aiohttp

from .errors import SynthesisError, SynthesisErrorType, classify_status, create_synthesis_error
from .interface import BaseSynthesizer

logger = logging.getLogger(__name__)

# ============================================================================
# Constants
# ============================================================================

DEFAULT_REGION = "eastasia"
DEFAULT_VOICE = "zh-TW-HsiaoChenNeural"
OUTPUT_FORMAT = "audio-16khz-32kbitrate-mono-mp3"
DEFAULT_TIMEOUT_MS = 15000

_SSML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&apos;",
}


def escape_ssml(text: str) -> str:
    """Escape the five XML special characters."""
    return "".join(_SSML_ESCAPES.get(char, char) for char in text)


def build_ssml(text: str, voice_name: str = DEFAULT_VOICE) -> str:
    """Wrap text in an SSML document for the given voice."""
    return (
        "<speak version='1.0' xml:lang='zh-TW'>"
        f"<voice name='{voice_name}'>{escape_ssml(text)}</voice>"
        "</speak>"
    )


class AzureSynthesizer(BaseSynthesizer):
    """Synthesizer backed by the Azure Speech REST API.

    Environment Variables:
    - AZURE_SPEECH_KEY: Required. Subscription key.
    - AZURE_SPEECH_REGION: Service region (default eastasia).
    """

    def __init__(
        self,
        subscription_key: str,
        region: str = DEFAULT_REGION,
        voice_name: str = DEFAULT_VOICE,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        session: aiohttp.ClientSession | None = None,
    ):
        if not subscription_key:
            raise ValueError("Azure Speech subscription key is required")
        self._subscription_key = subscription_key
        self._region = region
        self._voice_name = voice_name
        self._timeout = aiohttp.ClientTimeout(total=timeout_ms / 1000)
        self._session = session

    @property
    def component_instance(self) -> str:
        return f"azure-{self._voice_name}"

    @property
    def audio_format(self) -> str:
        return OUTPUT_FORMAT

    @property
    def endpoint(self) -> str:
        return f"https://{self._region}.tts.speech.microsoft.com/cognitiveservices/v1"

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    async def synthesize(self, text: str) -> bytes:
        if not text.strip():
            raise SynthesisError("Cannot synthesize empty text", SynthesisErrorType.EMPTY_INPUT)

        headers = {
            "Ocp-Apim-Subscription-Key": self._subscription_key,
            "Content-Type": "application/ssml+xml",
            "X-Microsoft-OutputFormat": OUTPUT_FORMAT,
            "User-Agent": "interpreter-service",
        }
        ssml = build_ssml(text, self._voice_name)

        try:
            async with self._get_session().post(
                self.endpoint, data=ssml.encode("utf-8"), headers=headers
            ) as response:
                if response.status != 200:
                    body = await response.text()
                    logger.error(f"Azure TTS error: status={response.status}, body={body[:200]}")
                    raise SynthesisError(
                        f"Azure TTS returned HTTP {response.status}",
                        error_type=classify_status(response.status),
                        details={"provider": "azure", "status": response.status},
                    )
                audio = await response.read()
        except SynthesisError:
            raise
        except (aiohttp.ClientError, TimeoutError) as e:
            logger.error(f"Azure TTS request failed: {e!r}")
            raise create_synthesis_error(e, "azure") from e

        if not audio:
            raise SynthesisError("Azure TTS returned no audio", SynthesisErrorType.EMPTY_AUDIO)

        logger.debug(f"Azure TTS synthesized {len(audio)} bytes for {len(text)} chars")
        return audio

    async def shutdown(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
