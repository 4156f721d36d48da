"""Unit tests for the Deepgram live transcription provider.

Uses a fake WebSocket connection; no network access.
"""

import asyncio
import json
from unittest.mock import AsyncMock, patch
from urllib.parse import parse_qs, urlparse

import pytest

from interpreter_service.asr.deepgram_provider import (
    DeepgramRecognizer,
    DeepgramStream,
    language_code,
    parse_transcript_message,
)
from interpreter_service.asr.errors import RecognitionErrorType, RecognitionStartError
from interpreter_service.asr.interface import StreamState
from interpreter_service.asr.models import RecognitionErrorEvent, TranscriptEvent


def results(transcript: str, is_final: bool, confidence: float = 0.9) -> str:
    return json.dumps(
        {
            "type": "Results",
            "is_final": is_final,
            "channel": {
                "alternatives": [
                    {
                        "transcript": transcript,
                        "confidence": confidence,
                        "words": [
                            {"word": w, "start": i * 0.5, "end": i * 0.5 + 0.4, "confidence": 0.9}
                            for i, w in enumerate(transcript.split())
                        ],
                    }
                ]
            },
        }
    )


class FakeWebSocket:
    """Minimal stand-in for a websockets ClientConnection."""

    def __init__(self, messages: list[str | bytes]):
        self._messages = list(messages)
        self._closed = asyncio.Event()
        self.sent: list = []

    async def send(self, data) -> None:
        self.sent.append(data)

    async def close(self) -> None:
        self._closed.set()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for message in self._messages:
            yield message
        await self._closed.wait()


class TestParsing:
    """Tests for message parsing helpers."""

    def test_language_codes(self):
        assert language_code("en") == "en-US"
        assert language_code("zh") == "zh-TW"

    def test_parse_final_result(self):
        event = parse_transcript_message(json.loads(results("I feel anxious", True, 0.97)))

        assert event.text == "I feel anxious"
        assert event.is_final is True
        assert event.confidence == pytest.approx(0.97)
        assert [w.word for w in event.words] == ["I", "feel", "anxious"]

    def test_parse_without_alternatives(self):
        assert parse_transcript_message({"type": "Results", "channel": {"alternatives": []}}) is None


class TestDeepgramRecognizer:
    """Tests for DeepgramRecognizer."""

    def test_requires_api_key(self):
        with pytest.raises(ValueError):
            DeepgramRecognizer(api_key="")

    def test_build_url(self):
        recognizer = DeepgramRecognizer(api_key="dg-key")

        url = urlparse(recognizer.build_url("zh"))
        params = {k: v[0] for k, v in parse_qs(url.query).items()}

        assert url.netloc == "api.deepgram.com"
        assert params["model"] == "nova-2"
        assert params["language"] == "zh-TW"
        assert params["interim_results"] == "true"
        assert params["endpointing"] == "300"
        assert params["utterance_end_ms"] == "1000"
        assert params["encoding"] == "linear16"
        assert params["sample_rate"] == "16000"
        assert params["channels"] == "1"

    @pytest.mark.asyncio
    async def test_open_sends_token_header(self):
        ws = FakeWebSocket([])
        recognizer = DeepgramRecognizer(api_key="dg-key")

        with patch(
            "interpreter_service.asr.deepgram_provider.connect", AsyncMock(return_value=ws)
        ) as connect:
            stream = await recognizer.open("en")

        assert connect.await_args.kwargs["additional_headers"] == {"Authorization": "Token dg-key"}
        assert stream.state is StreamState.OPEN
        await stream.close()

    @pytest.mark.asyncio
    async def test_open_failure_raises_start_error(self):
        recognizer = DeepgramRecognizer(api_key="dg-key")

        with patch(
            "interpreter_service.asr.deepgram_provider.connect",
            AsyncMock(side_effect=OSError("connection refused")),
        ):
            with pytest.raises(RecognitionStartError) as exc_info:
                await recognizer.open("en")

        assert exc_info.value.error_type is RecognitionErrorType.CONNECTION_FAILED
        assert exc_info.value.retryable is True


class TestDeepgramStream:
    """Tests for DeepgramStream message handling and shutdown."""

    @pytest.mark.asyncio
    async def test_results_and_errors_become_events(self):
        ws = FakeWebSocket(
            [
                results("I feel", False),
                results("", True),
                json.dumps({"type": "UtteranceEnd"}),
                b"\x00\x01",
                "not json",
                results("I feel fine", True),
                json.dumps({"type": "Error", "description": "bad audio"}),
            ]
        )
        stream = DeepgramStream("en", ws)
        stream.start()

        events = stream.__aiter__()
        received = [await asyncio.wait_for(events.__anext__(), 1.0) for _ in range(3)]

        assert isinstance(received[0], TranscriptEvent)
        assert (received[0].text, received[0].is_final) == ("I feel", False)
        assert (received[1].text, received[1].is_final) == ("I feel fine", True)
        assert isinstance(received[2], RecognitionErrorEvent)
        assert received[2].message == "bad audio"
        await stream.close()

    @pytest.mark.asyncio
    async def test_close_sends_close_stream(self, pcm_frame):
        ws = FakeWebSocket([])
        stream = DeepgramStream("en", ws)
        stream.start()

        await stream.send(pcm_frame)
        await stream.close()
        await stream.close()

        assert ws.sent[0] == pcm_frame
        assert json.loads(ws.sent[1]) == {"type": "CloseStream"}
        assert len(ws.sent) == 2
        assert ws.closed
        assert stream.state is StreamState.CLOSED

    @pytest.mark.asyncio
    async def test_remote_close_ends_iteration(self):
        ws = FakeWebSocket([results("bye", True)])
        stream = DeepgramStream("en", ws)
        stream.start()

        await ws.close()
        events = await asyncio.wait_for(_collect(stream), 1.0)

        assert [e.text for e in events] == ["bye"]
        assert stream.state is StreamState.CLOSED


async def _collect(stream) -> list:
    return [event async for event in stream]
