"""
Deepgram Live Transcription Provider.

Implements the streaming recognizer contract over Deepgram's live WebSocket
API. Audio is sent as raw linear16 PCM (16kHz mono); Deepgram answers with
JSON "Results" messages carrying interim and final transcripts.

Features:
- nova-2 model with interim results and 300ms endpointing for low latency
- Language mapping (en -> en-US, zh -> zh-TW)
- KeepAlive messages while the speaker is silent
- Error surfacing as RecognitionErrorEvent without closing the stream
"""

import asyncio
import contextlib
import json
import logging
from typing import Any
from urllib.parse import urlencode

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed, ConnectionClosedError, WebSocketException

from .errors import create_start_error
from .interface import BaseRecognitionStream, BaseRecognizer
from .models import CHANNELS, ENCODING, SAMPLE_RATE_HZ, TranscriptEvent, WordTiming

logger = logging.getLogger(__name__)

# ============================================================================
# Constants
# ============================================================================

DEEPGRAM_LISTEN_URL = "wss://api.deepgram.com/v1/listen"
DEFAULT_MODEL = "nova-2"

# Deepgram closes idle streams after ~10s without audio
KEEPALIVE_INTERVAL_S = 8.0
OPEN_TIMEOUT_S = 10.0
CLOSE_TIMEOUT_S = 2.0

LANGUAGE_CODES: dict[str, str] = {
    "en": "en-US",
    "zh": "zh-TW",
}


def language_code(language: str) -> str:
    """Map a session language to a Deepgram language code."""
    return LANGUAGE_CODES.get(language, language)


def parse_transcript_message(data: dict[str, Any]) -> TranscriptEvent | None:
    """Convert a Deepgram "Results" message into a TranscriptEvent.

    Returns None for messages that carry no alternative.
    """
    alternatives = (data.get("channel") or {}).get("alternatives") or []
    if not alternatives:
        return None

    best = alternatives[0]
    words = [
        WordTiming(
            word=w.get("word", ""),
            start=w.get("start", 0.0),
            end=w.get("end", 0.0),
            confidence=w.get("confidence", 0.0),
        )
        for w in best.get("words") or []
    ]

    return TranscriptEvent(
        text=best.get("transcript") or "",
        confidence=best.get("confidence") or 0.0,
        is_final=bool(data.get("is_final", False)),
        words=words,
    )


class DeepgramStream(BaseRecognitionStream):
    """One live Deepgram WebSocket session."""

    def __init__(self, language: str, websocket: ClientConnection):
        super().__init__(language)
        self._ws = websocket
        self._receiver: asyncio.Task | None = None
        self._keepalive: asyncio.Task | None = None

    def start(self) -> None:
        """Start the receive and keepalive loops and mark the stream open."""
        self._mark_open()
        self._receiver = asyncio.create_task(self._receive_loop())
        self._keepalive = asyncio.create_task(self._keepalive_loop())

    async def _send_frame(self, frame: bytes) -> None:
        try:
            await self._ws.send(frame)
        except ConnectionClosed as e:
            logger.warning(f"Dropped audio frame on closed Deepgram connection: {e}")

    async def _receive_loop(self) -> None:
        try:
            async for message in self._ws:
                if isinstance(message, bytes):
                    continue
                self._handle_message(message)
        except ConnectionClosedError as e:
            logger.error(f"Deepgram connection lost: code={e.code}, reason={e.reason}")
            self._publish_error("Speech recognition connection lost", code=e.code, reason=e.reason)
        finally:
            logger.info(f"Deepgram connection closed: language={self.language}")
            if self._keepalive is not None:
                self._keepalive.cancel()
            self._finish()

    def _handle_message(self, raw: str) -> None:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Ignoring non-JSON Deepgram message: {raw[:100]}")
            return

        message_type = data.get("type")
        if message_type == "Results":
            event = parse_transcript_message(data)
            if event is not None and event.text.strip():
                logger.debug(f"Transcript received: is_final={event.is_final}, text={event.text!r}")
                self._publish(event)
        elif message_type == "UtteranceEnd":
            logger.debug("Utterance end detected")
        elif message_type == "Error" or "err_code" in data:
            message = data.get("description") or data.get("err_msg") or "Deepgram error"
            logger.error(f"Deepgram error: {data}")
            self._publish_error(message, provider_error=data)

    async def _keepalive_loop(self) -> None:
        keepalive = json.dumps({"type": "KeepAlive"})
        with contextlib.suppress(ConnectionClosed):
            while True:
                await asyncio.sleep(KEEPALIVE_INTERVAL_S)
                await self._ws.send(keepalive)

    async def _shutdown(self) -> None:
        if self._keepalive is not None:
            self._keepalive.cancel()

        try:
            await self._ws.send(json.dumps({"type": "CloseStream"}))
        except ConnectionClosed:
            logger.debug("Deepgram connection already closed")

        try:
            await asyncio.wait_for(self._ws.close(), timeout=CLOSE_TIMEOUT_S)
        except (TimeoutError, WebSocketException) as e:
            logger.warning(f"Error closing Deepgram connection: {e}")

        if self._receiver is not None and not self._receiver.done():
            self._receiver.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._receiver

        logger.info("Deepgram connection close requested")


class DeepgramRecognizer(BaseRecognizer):
    """Streaming recognizer backed by Deepgram live transcription.

    Environment Variables:
    - DEEPGRAM_API_KEY: Required. API key for Deepgram.
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        url: str = DEEPGRAM_LISTEN_URL,
    ):
        if not api_key:
            raise ValueError("Deepgram API key is required")
        self._api_key = api_key
        self._model = model
        self._url = url

    @property
    def component_instance(self) -> str:
        return f"deepgram-{self._model}"

    def build_url(self, language: str) -> str:
        """Build the listen URL with live transcription options."""
        params = {
            "model": self._model,
            "language": language_code(language),
            "smart_format": "true",
            "punctuate": "true",
            "interim_results": "true",
            "utterance_end_ms": 1000,
            "vad_events": "true",
            "endpointing": 300,
            "encoding": ENCODING,
            "sample_rate": SAMPLE_RATE_HZ,
            "channels": CHANNELS,
        }
        return f"{self._url}?{urlencode(params)}"

    async def open(self, language: str) -> DeepgramStream:
        """Open a live transcription stream.

        Raises:
            RecognitionStartError: If the WebSocket cannot be established.
        """
        url = self.build_url(language)
        logger.info(f"Creating live transcription connection: language={language_code(language)}")

        try:
            websocket = await connect(
                url,
                additional_headers={"Authorization": f"Token {self._api_key}"},
                open_timeout=OPEN_TIMEOUT_S,
                max_size=None,
            )
        except (OSError, TimeoutError, WebSocketException) as e:
            logger.error(f"Failed to open Deepgram connection: {e}")
            raise create_start_error(e, language) from e

        stream = DeepgramStream(language, websocket)
        stream.start()
        logger.info("Deepgram connection opened")
        return stream
