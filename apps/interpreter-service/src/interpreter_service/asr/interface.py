"""
Speech-Recognition Streaming Interface Contract.

This module defines the interface that all streaming recognizers follow.
Both the Deepgram implementation and the mock implementation conform to it.

A recognizer opens one stream per utterance sequence (one per pipeline). The
stream accepts raw PCM frames and yields recognition events until closed:

    stream = await recognizer.open("en")
    await stream.send(frame)
    async for event in stream:
        ...
    await stream.close()
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from enum import Enum
from typing import Protocol, runtime_checkable

from .models import RecognitionErrorEvent, RecognitionEvent, TranscriptEvent

logger = logging.getLogger(__name__)


class StreamState(str, Enum):
    """Lifecycle of a recognition stream."""

    CONNECTING = "connecting"
    OPEN = "open"
    CLOSING = "closing"
    CLOSED = "closed"


class BaseRecognitionStream(ABC):
    """Abstract base for recognition streams.

    Provides the event queue, empty-result filtering, not-ready tolerance for
    `send`, idempotent `close`, and single-pass iteration. Subclasses supply
    the transport in `_send_frame` and `_shutdown`.
    """

    def __init__(self, language: str):
        self.language = language
        self._state = StreamState.CONNECTING
        self._events: asyncio.Queue[RecognitionEvent | None] = asyncio.Queue()
        self._iterated = False

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state is StreamState.OPEN

    def _mark_open(self) -> None:
        if self._state is StreamState.CONNECTING:
            self._state = StreamState.OPEN

    async def send(self, frame: bytes) -> None:
        """Forward one PCM frame. Silently ignored unless the stream is open."""
        if self._state is not StreamState.OPEN or not frame:
            return
        await self._send_frame(frame)

    async def close(self) -> None:
        """Request shutdown. Safe to call repeatedly and while already closing."""
        if self._state in (StreamState.CLOSING, StreamState.CLOSED):
            return
        self._state = StreamState.CLOSING
        try:
            await self._shutdown()
        finally:
            self._finish()

    def _finish(self) -> None:
        """Mark the stream closed and end iteration."""
        if self._state is StreamState.CLOSED:
            return
        self._state = StreamState.CLOSED
        self._events.put_nowait(None)

    def _publish(self, event: RecognitionEvent) -> None:
        """Queue an event for consumers, dropping empty transcripts."""
        if self._state is StreamState.CLOSED:
            return
        if isinstance(event, TranscriptEvent) and not event.text.strip():
            return
        self._events.put_nowait(event)

    def _publish_error(self, message: str, **details: object) -> None:
        self._publish(RecognitionErrorEvent(message=message, details=details or None))

    def __aiter__(self) -> AsyncIterator[RecognitionEvent]:
        if self._iterated:
            raise RuntimeError("Recognition stream events can only be iterated once")
        self._iterated = True
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[RecognitionEvent]:
        while True:
            event = await self._events.get()
            if event is None:
                return
            yield event

    @abstractmethod
    async def _send_frame(self, frame: bytes) -> None:
        """Transport-specific frame delivery."""

    @abstractmethod
    async def _shutdown(self) -> None:
        """Transport-specific shutdown."""


@runtime_checkable
class Recognizer(Protocol):
    """Protocol defining the streaming recognizer contract."""

    @property
    def component_instance(self) -> str:
        """Return the provider identifier (e.g., 'deepgram-nova-2')."""
        ...

    async def open(self, language: str) -> BaseRecognitionStream:
        """Open a recognition stream for a language.

        Raises:
            RecognitionStartError: If the provider cannot open a stream.
        """
        ...


class BaseRecognizer(ABC):
    """Abstract base class for streaming recognizers."""

    _component_name: str = "asr"

    @property
    def component_name(self) -> str:
        """Return the component name (always 'asr')."""
        return self._component_name

    @property
    @abstractmethod
    def component_instance(self) -> str:
        """Subclasses must provide their instance identifier."""
        pass

    @abstractmethod
    async def open(self, language: str) -> BaseRecognitionStream:
        """Subclasses must open a stream in the OPEN state."""
        pass

    async def shutdown(self) -> None:
        """Default implementation does nothing. Override if cleanup needed."""
        return  # noqa: B027 - intentionally empty default implementation
