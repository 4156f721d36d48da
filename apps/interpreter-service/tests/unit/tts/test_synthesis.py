"""Unit tests for the mock synthesizer, factory and error helpers."""

import pytest

from interpreter_service.config import ProviderConfig
from interpreter_service.pipeline.directions import DIRECTIONS, Direction
from interpreter_service.translation.profiles import PROFILES
from interpreter_service.tts.errors import (
    SynthesisError,
    SynthesisErrorType,
    classify_status,
    create_synthesis_error,
)
from interpreter_service.tts.factory import create_synthesizers
from interpreter_service.tts.interface import Synthesizer
from interpreter_service.tts.mock import MOCK_AUDIO, MockSynthesizer, MockSynthesizerConfig


class TestMockSynthesizer:
    def test_conforms_to_protocol(self):
        assert isinstance(MockSynthesizer(), Synthesizer)

    @pytest.mark.asyncio
    async def test_returns_fixed_audio(self):
        synthesizer = MockSynthesizer()

        audio = await synthesizer.synthesize("你好")

        assert audio == MOCK_AUDIO
        assert synthesizer.calls == ["你好"]

    @pytest.mark.asyncio
    async def test_failure(self):
        synthesizer = MockSynthesizer(MockSynthesizerConfig(fail=True))

        with pytest.raises(SynthesisError) as exc_info:
            await synthesizer.synthesize("你好")

        assert exc_info.value.error_type is SynthesisErrorType.PROVIDER_ERROR


class TestFactory:
    def test_mock_mode_binds_one_synthesizer_per_direction(self):
        synthesizers = create_synthesizers(ProviderConfig(mode="mock"))

        assert set(synthesizers) == {"en-to-zh", "zh-to-en"}
        assert synthesizers["en-to-zh"].component_instance == "mock-azure"
        assert synthesizers["zh-to-en"].component_instance == "mock-elevenlabs"

    def test_synthesizers_follow_direction_table(self, monkeypatch):
        ja_to_en = Direction(
            name="ja-to-en",
            source_language="ja",
            target_language="en",
            synthesizer="elevenlabs",
        )
        monkeypatch.setitem(DIRECTIONS, "ja", ja_to_en)

        synthesizers = create_synthesizers(ProviderConfig(mode="mock"))

        assert set(synthesizers) == {direction.name for direction in DIRECTIONS.values()}
        assert synthesizers["ja-to-en"].component_instance == "mock-elevenlabs"

    def test_every_direction_has_profile(self):
        for direction in DIRECTIONS.values():
            assert direction.name in PROFILES

    def test_live_mode_requires_credentials(self):
        config = ProviderConfig(mode="live", azure_speech_key=None, elevenlabs_api_key="k")

        with pytest.raises(ValueError, match="AZURE_SPEECH_KEY"):
            create_synthesizers(config)

    def test_live_mode_providers(self):
        config = ProviderConfig(
            mode="live",
            azure_speech_key="azure-key",
            azure_speech_region="eastasia",
            elevenlabs_api_key="el-key",
        )

        synthesizers = create_synthesizers(config)

        assert synthesizers["en-to-zh"].audio_format == "audio-16khz-32kbitrate-mono-mp3"
        assert synthesizers["zh-to-en"].audio_format == "mp3_44100_128"


class TestErrors:
    @pytest.mark.parametrize(
        ("status", "expected"),
        [
            (401, SynthesisErrorType.AUTHENTICATION_FAILED),
            (403, SynthesisErrorType.AUTHENTICATION_FAILED),
            (429, SynthesisErrorType.RATE_LIMITED),
            (504, SynthesisErrorType.TIMEOUT),
            (500, SynthesisErrorType.PROVIDER_ERROR),
            (400, SynthesisErrorType.UNKNOWN),
        ],
    )
    def test_classify_status(self, status, expected):
        assert classify_status(status) is expected

    def test_create_synthesis_error(self):
        error = create_synthesis_error(TimeoutError(), "azure")

        assert error.error_type is SynthesisErrorType.TIMEOUT
        assert error.retryable is True
        assert error.details == {"provider": "azure", "exception_type": "TimeoutError"}
