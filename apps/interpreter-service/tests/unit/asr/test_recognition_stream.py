"""Unit tests for the recognition stream contract, exercised via the mock."""

import pytest

from interpreter_service.asr.errors import RecognitionErrorType, RecognitionStartError
from interpreter_service.asr.interface import Recognizer, StreamState
from interpreter_service.asr.mock import (
    MockRecognitionStream,
    MockRecognizer,
    MockRecognizerConfig,
)
from interpreter_service.asr.models import RecognitionErrorEvent, TranscriptEvent


async def drain(stream) -> list:
    return [event async for event in stream]


class TestMockRecognizer:
    """Tests for MockRecognizer."""

    def test_conforms_to_protocol(self):
        recognizer = MockRecognizer()
        assert isinstance(recognizer, Recognizer)
        assert recognizer.component_name == "asr"
        assert recognizer.component_instance == "mock-asr"

    @pytest.mark.asyncio
    async def test_open_returns_open_stream(self):
        recognizer = MockRecognizer()

        stream = await recognizer.open("zh")

        assert stream.state is StreamState.OPEN
        assert stream.language == "zh"
        assert recognizer.last_stream is stream

    @pytest.mark.asyncio
    async def test_open_failure(self):
        recognizer = MockRecognizer(MockRecognizerConfig(fail_on_open=True))

        with pytest.raises(RecognitionStartError) as exc_info:
            await recognizer.open("en")

        assert exc_info.value.error_type is RecognitionErrorType.CONNECTION_FAILED
        assert exc_info.value.retryable is True
        assert recognizer.streams == []

    @pytest.mark.asyncio
    async def test_scripted_events_follow_audio(self, pcm_frame):
        script = [
            TranscriptEvent(text="I feel", is_final=False),
            TranscriptEvent(text="I feel fine", is_final=True),
        ]
        recognizer = MockRecognizer(MockRecognizerConfig(script=script, frames_per_event=2))
        stream = await recognizer.open("en")

        for _ in range(4):
            await stream.send(pcm_frame)
        await stream.close()

        events = await drain(stream)
        assert [e.text for e in events] == ["I feel", "I feel fine"]
        assert [e.is_final for e in events] == [False, True]


class TestStreamBehavior:
    """Behavior shared by all recognition streams."""

    @pytest.mark.asyncio
    async def test_send_before_open_is_ignored(self, pcm_frame):
        stream = MockRecognitionStream("en")

        await stream.send(pcm_frame)

        assert stream.frames_received == []

    @pytest.mark.asyncio
    async def test_send_after_close_is_ignored(self, pcm_frame):
        stream = await MockRecognizer().open("en")
        await stream.close()

        await stream.send(pcm_frame)

        assert stream.frames_received == []

    @pytest.mark.asyncio
    async def test_empty_frame_is_ignored(self):
        stream = await MockRecognizer().open("en")

        await stream.send(b"")

        assert stream.frames_received == []

    @pytest.mark.asyncio
    async def test_empty_transcripts_are_filtered(self):
        stream = await MockRecognizer().open("en")

        stream.inject_transcript("", is_final=False)
        stream.inject_transcript("   ", is_final=True)
        stream.inject_transcript("hello", is_final=True)
        stream.end()

        events = await drain(stream)
        assert [e.text for e in events] == ["hello"]

    @pytest.mark.asyncio
    async def test_error_events_are_delivered(self):
        stream = await MockRecognizer().open("en")

        stream.inject_error("provider hiccup")
        stream.end()

        (event,) = await drain(stream)
        assert isinstance(event, RecognitionErrorEvent)
        assert event.message == "provider hiccup"

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self):
        stream = await MockRecognizer().open("en")

        await stream.close()
        await stream.close()

        assert stream.close_calls == 1
        assert stream.state is StreamState.CLOSED

    @pytest.mark.asyncio
    async def test_events_after_close_are_dropped(self):
        stream = await MockRecognizer().open("en")
        stream.inject_transcript("before", is_final=True)
        await stream.close()

        stream.inject_transcript("after", is_final=True)

        events = await drain(stream)
        assert [e.text for e in events] == ["before"]

    @pytest.mark.asyncio
    async def test_iteration_is_single_pass(self):
        stream = await MockRecognizer().open("en")
        stream.end()
        await drain(stream)

        with pytest.raises(RuntimeError):
            stream.__aiter__()
