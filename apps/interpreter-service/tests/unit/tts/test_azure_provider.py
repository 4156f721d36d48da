"""Unit tests for AzureSynthesizer.

Uses a fake aiohttp session; no network access.
"""

import pytest

from interpreter_service.tts.azure_provider import (
    OUTPUT_FORMAT,
    AzureSynthesizer,
    build_ssml,
    escape_ssml,
)
from interpreter_service.tts.errors import SynthesisError, SynthesisErrorType


class FakeResponse:
    def __init__(self, status: int, body: bytes):
        self.status = status
        self._body = body

    async def read(self) -> bytes:
        return self._body

    async def text(self) -> str:
        return self._body.decode("utf-8", errors="replace")

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None):
        self._response = response
        self._error = error
        self.requests: list[dict] = []
        self.closed = False

    def post(self, url, data=None, headers=None):
        self.requests.append({"url": url, "data": data, "headers": headers})
        if self._error is not None:
            raise self._error
        return self._response

    async def close(self) -> None:
        self.closed = True


class TestSSML:
    def test_escapes_special_characters(self):
        assert escape_ssml("""a & b < c > d "e" 'f'""") == (
            "a &amp; b &lt; c &gt; d &quot;e&quot; &apos;f&apos;"
        )

    def test_build_ssml_wraps_voice(self):
        ssml = build_ssml("你好 <3", "zh-TW-YunJheNeural")

        assert ssml.startswith("<speak version='1.0' xml:lang='zh-TW'>")
        assert "<voice name='zh-TW-YunJheNeural'>你好 &lt;3</voice>" in ssml
        assert ssml.endswith("</speak>")


class TestAzureSynthesizer:
    def test_requires_key(self):
        with pytest.raises(ValueError):
            AzureSynthesizer(subscription_key="")

    def test_endpoint_and_format(self):
        synthesizer = AzureSynthesizer(subscription_key="key", region="westus")

        assert synthesizer.endpoint == (
            "https://westus.tts.speech.microsoft.com/cognitiveservices/v1"
        )
        assert synthesizer.audio_format == "audio-16khz-32kbitrate-mono-mp3"
        assert synthesizer.component_instance == "azure-zh-TW-HsiaoChenNeural"

    @pytest.mark.asyncio
    async def test_synthesize_returns_audio(self):
        session = FakeSession(FakeResponse(200, b"\xff\xfbmp3"))
        synthesizer = AzureSynthesizer(subscription_key="key", session=session)

        audio = await synthesizer.synthesize("我很焦慮")

        assert audio == b"\xff\xfbmp3"
        (request,) = session.requests
        assert request["headers"]["Ocp-Apim-Subscription-Key"] == "key"
        assert request["headers"]["Content-Type"] == "application/ssml+xml"
        assert request["headers"]["X-Microsoft-OutputFormat"] == OUTPUT_FORMAT
        assert "我很焦慮" in request["data"].decode("utf-8")

    @pytest.mark.asyncio
    async def test_http_error_is_classified(self):
        session = FakeSession(FakeResponse(401, b"Unauthorized"))
        synthesizer = AzureSynthesizer(subscription_key="bad", session=session)

        with pytest.raises(SynthesisError) as exc_info:
            await synthesizer.synthesize("你好")

        assert exc_info.value.error_type is SynthesisErrorType.AUTHENTICATION_FAILED
        assert exc_info.value.retryable is False

    @pytest.mark.asyncio
    async def test_server_error_is_retryable(self):
        session = FakeSession(FakeResponse(503, b"busy"))
        synthesizer = AzureSynthesizer(subscription_key="key", session=session)

        with pytest.raises(SynthesisError) as exc_info:
            await synthesizer.synthesize("你好")

        assert exc_info.value.retryable is True

    @pytest.mark.asyncio
    async def test_timeout(self):
        session = FakeSession(error=TimeoutError())
        synthesizer = AzureSynthesizer(subscription_key="key", session=session)

        with pytest.raises(SynthesisError) as exc_info:
            await synthesizer.synthesize("你好")

        assert exc_info.value.error_type is SynthesisErrorType.TIMEOUT

    @pytest.mark.asyncio
    async def test_empty_audio(self):
        session = FakeSession(FakeResponse(200, b""))
        synthesizer = AzureSynthesizer(subscription_key="key", session=session)

        with pytest.raises(SynthesisError) as exc_info:
            await synthesizer.synthesize("你好")

        assert exc_info.value.error_type is SynthesisErrorType.EMPTY_AUDIO

    @pytest.mark.asyncio
    async def test_empty_text(self):
        session = FakeSession(FakeResponse(200, b"audio"))
        synthesizer = AzureSynthesizer(subscription_key="key", session=session)

        with pytest.raises(SynthesisError):
            await synthesizer.synthesize(" ")
        assert session.requests == []

    @pytest.mark.asyncio
    async def test_shutdown_closes_session(self):
        session = FakeSession(FakeResponse(200, b"audio"))
        synthesizer = AzureSynthesizer(subscription_key="key", session=session)

        await synthesizer.shutdown()

        assert session.closed
