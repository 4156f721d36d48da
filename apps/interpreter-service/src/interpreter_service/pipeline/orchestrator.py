"""Interpretation pipeline for one speaking connection.

Consumes the connection's recognition stream and, for every final
transcript, runs translation inline and synthesis in the background:

    audio frames -> recognition -> transcript:final -> translation:chunk*
                 -> translation:complete -> (background) tts:chunk -> status:latency

The counterpart connection is resolved through the session registry at every
dispatch, so a peer that joins, leaves or reconnects mid-utterance is picked
up without any pipeline bookkeeping.
"""

import asyncio
import contextlib
import time
from dataclasses import dataclass
from typing import Any

from interpreter_service.asr.errors import RecognitionStartError
from interpreter_service.asr.interface import BaseRecognitionStream, BaseRecognizer
from interpreter_service.asr.models import RecognitionErrorEvent, RecognitionEvent, TranscriptEvent
from interpreter_service.models.error import ErrorCode, ErrorResponse
from interpreter_service.models.events import (
    ProcessingStatusPayload,
    Role,
    Stage,
    TranscriptPayload,
    TranslationChunkPayload,
    TranslationCompletePayload,
    TTSChunkPayload,
    TTSEventPayload,
    UtteranceRef,
)
from interpreter_service.models.utterance import Utterance
from interpreter_service.observability.logger import bind_session_context, get_logger
from interpreter_service.observability.metrics import (
    record_error,
    record_stage_timing,
    record_utterance_latency,
)
from interpreter_service.session.registry import SessionRegistry
from interpreter_service.translation.errors import TranslationError
from interpreter_service.translation.interface import BaseStreamingTranslator
from interpreter_service.tts.errors import SynthesisError
from interpreter_service.tts.interface import BaseSynthesizer

from .directions import Direction


@dataclass
class SynthesisHandle:
    """Background synthesis of one utterance.

    A stale handle may still be running but must not deliver anything.
    """

    utterance_id: str
    task: asyncio.Task
    stale: bool = False


class InterpretationPipeline:
    """Streaming STT -> translation -> TTS pipeline bound to one connection.

    Features:
    - Interim transcripts to the speaker only
    - Final transcripts, translation fragments and completion to both sides
    - Background synthesis delivered to the peer (or per the no-peer policy)
    - Per-utterance latency report to the speaker
    - Idempotent stop that silences every late completion
    """

    def __init__(
        self,
        sio: Any,
        sid: str,
        session_id: str,
        role: Role,
        direction: Direction,
        recognizer: BaseRecognizer,
        translator: BaseStreamingTranslator,
        synthesizer: BaseSynthesizer,
        registry: SessionRegistry,
        no_peer_audio_policy: str = "echo",
    ):
        """Initialize the pipeline. Nothing is opened until `start()`.

        Args:
            sio: Socket.IO server used for emission.
            sid: Connection whose audio this pipeline processes.
            session_id: Session the connection belongs to.
            role: Role of the connection within the session.
            direction: Source/target languages and synthesizer binding.
            recognizer: Speech-recognition provider.
            translator: Streaming translation provider.
            synthesizer: Synthesizer bound to the direction.
            registry: Session registry used to resolve the peer.
            no_peer_audio_policy: "echo" returns audio to the speaker when no
                peer is present; "drop" discards it.
        """
        self._sio = sio
        self.sid = sid
        self.session_id = session_id
        self.role = Role(role)
        self.direction = direction
        self._recognizer = recognizer
        self._translator = translator
        self._synthesizer = synthesizer
        self._registry = registry
        self._no_peer_audio_policy = no_peer_audio_policy

        self._stream: BaseRecognitionStream | None = None
        self._reader: asyncio.Task | None = None
        self._synthesis: dict[str, SynthesisHandle] = {}
        self._stopped = False
        self._recognition_failed = False
        self._sequence = 0
        # perf_counter of the first recognition event of the utterance in progress
        self._utterance_started_at: float | None = None

        self.logger = bind_session_context(get_logger(__name__), session_id, connection_id=sid)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    @property
    def is_active(self) -> bool:
        return self._stream is not None and not self._stopped

    @property
    def pending_synthesis(self) -> int:
        """Number of synthesis tasks still tracked."""
        return len(self._synthesis)

    async def start(self) -> None:
        """Open the recognition stream and begin consuming its events.

        Raises:
            RecognitionStartError: If the provider cannot open a stream.
            RuntimeError: If the pipeline was already started or stopped.
        """
        if self._stream is not None or self._stopped:
            raise RuntimeError("Pipeline can only be started once")

        try:
            self._stream = await self._recognizer.open(self.direction.source_language)
        except RecognitionStartError as e:
            self.logger.error(
                "recognition_start_failed",
                error=e.message,
                error_type=e.error_type.value,
            )
            raise

        self._reader = asyncio.create_task(self._read_events())
        self.logger.info(
            "pipeline_started",
            direction=self.direction.name,
            recognizer=self._recognizer.component_instance,
            translator=self._translator.component_instance,
            synthesizer=self._synthesizer.component_instance,
        )

    async def push_audio(self, frame: bytes) -> None:
        """Forward one PCM frame. No-op when the stream is not open."""
        if self._stopped or self._stream is None:
            return
        await self._stream.send(frame)

    async def stop(self) -> None:
        """Close the stream, cancel the reader and silence in-flight synthesis.

        Safe to call repeatedly and on a pipeline that never started.
        """
        if self._stopped:
            return
        self._stopped = True

        for handle in self._synthesis.values():
            handle.stale = True
            handle.task.cancel()
        await self.wait_for_synthesis()

        if self._stream is not None:
            await self._stream.close()

        reader = self._reader
        if reader is not None and not reader.done() and reader is not asyncio.current_task():
            reader.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await reader

        self.logger.info("pipeline_stopped", direction=self.direction.name)

    async def wait_for_synthesis(self) -> None:
        """Wait until every tracked synthesis task has finished."""
        tasks = [handle.task for handle in self._synthesis.values()]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    # -------------------------------------------------------------------------
    # Recognition events
    # -------------------------------------------------------------------------

    async def _read_events(self) -> None:
        assert self._stream is not None
        try:
            async for event in self._stream:
                if self._stopped:
                    break
                await self.handle_event(event)
        except Exception as e:
            self.logger.exception("recognition_reader_failed", error=str(e))
            await self._emit_error(ErrorCode.STT_ERROR, details=str(e) or type(e).__name__)
            await self._emit_status(Stage.STT, False)
            return

        if self._stopped:
            self.logger.debug("recognition_stream_ended")
            return

        # Provider closed the stream on its own; audio sent from now on goes nowhere
        self.logger.warning("recognition_stream_closed_by_provider")
        if not self._recognition_failed:
            await self._emit_error(ErrorCode.STT_ERROR, details="Speech recognition stream closed")
        await self._emit_status(Stage.STT, False)

    async def handle_event(self, event: RecognitionEvent) -> None:
        """Dispatch one recognition event."""
        if self._stopped:
            return

        if isinstance(event, RecognitionErrorEvent):
            self.logger.error("recognition_error", error=event.message, details=event.details)
            self._recognition_failed = True
            await self._emit_error(ErrorCode.STT_ERROR, details=event.message)
            return

        if isinstance(event, TranscriptEvent):
            if self._utterance_started_at is None:
                self._utterance_started_at = time.perf_counter()
            if event.is_final:
                await self._handle_final(event)
            else:
                await self._handle_interim(event)

    async def _handle_interim(self, event: TranscriptEvent) -> None:
        payload = TranscriptPayload(
            id=f"interim-{self._sequence + 1}",
            text=event.text,
            speaker=self.role,
            language=self.direction.source_language,
            is_final=False,
        )
        await self._emit("transcript:interim", payload.to_wire(), self.sid)

    async def _handle_final(self, event: TranscriptEvent) -> None:
        self._sequence += 1
        utterance = Utterance(
            original_text=event.text,
            source_language=self.direction.source_language,
            target_language=self.direction.target_language,
            direction=self.direction.name,
            sequence_number=self._sequence,
        )
        stt_ms = utterance.mark_recognized(self._utterance_started_at)
        self._utterance_started_at = None
        record_stage_timing("stt", stt_ms)

        logger = self.logger.bind(utterance_id=utterance.id)
        logger.info("transcript_final", text=event.text, stt_ms=stt_ms)

        payload = TranscriptPayload(
            id=utterance.id,
            text=utterance.original_text,
            speaker=self.role,
            language=utterance.source_language,
            is_final=True,
        )
        await self._emit_to_both("transcript:final", payload.to_wire())

        if await self._translate(utterance):
            self._dispatch_synthesis(utterance)

    # -------------------------------------------------------------------------
    # Translation
    # -------------------------------------------------------------------------

    async def _translate(self, utterance: Utterance) -> bool:
        """Stream the translation of an utterance. Returns False on failure."""
        logger = self.logger.bind(utterance_id=utterance.id)

        await self._emit_to_both("translation:start", UtteranceRef(id=utterance.id).to_wire())
        await self._emit_status(Stage.TRANSLATION, True)

        async def forward_fragment(fragment: str) -> None:
            chunk = TranslationChunkPayload(id=utterance.id, chunk=fragment)
            await self._emit_to_both("translation:chunk", chunk.to_wire())

        utterance.mark_translation_started()
        try:
            translated = await self._translator.translate_streaming(
                utterance.original_text,
                self.direction.name,
                forward_fragment,
            )
        except TranslationError as e:
            logger.error(
                "translation_failed",
                error=e.message,
                error_type=e.error_type.value,
                retryable=e.retryable,
            )
            await self._emit_status(Stage.TRANSLATION, False)
            await self._emit_error(ErrorCode.PIPELINE_ERROR, details=e.message)
            return False
        except Exception as e:
            logger.exception("translation_failed_unexpectedly", error=str(e))
            await self._emit_status(Stage.TRANSLATION, False)
            await self._emit_error(ErrorCode.PIPELINE_ERROR, details=str(e) or type(e).__name__)
            return False

        translation_ms = utterance.mark_translated(translated)
        record_stage_timing("translation", translation_ms)
        logger.info("translation_complete", translated_text=translated, translation_ms=translation_ms)

        await self._emit_status(Stage.TRANSLATION, False)
        complete = TranslationCompletePayload(
            id=utterance.id,
            original_text=utterance.original_text,
            translated_text=utterance.translated_text,
            direction=utterance.direction,
        )
        await self._emit_to_both("translation:complete", complete.to_wire())
        return True

    # -------------------------------------------------------------------------
    # Synthesis
    # -------------------------------------------------------------------------

    def _dispatch_synthesis(self, utterance: Utterance) -> SynthesisHandle | None:
        """Start background synthesis, superseding any earlier one."""
        if self._stopped:
            return None

        for older in self._synthesis.values():
            if not older.stale:
                older.stale = True
                older.task.cancel()
                self.logger.debug("synthesis_superseded", utterance_id=older.utterance_id)

        task = asyncio.create_task(self._synthesize(utterance))
        handle = SynthesisHandle(utterance_id=utterance.id, task=task)
        self._synthesis[utterance.id] = handle
        task.add_done_callback(lambda _: self._forget(handle))
        return handle

    def _forget(self, handle: SynthesisHandle) -> None:
        if self._synthesis.get(handle.utterance_id) is handle:
            del self._synthesis[handle.utterance_id]

    def _is_stale(self, utterance_id: str) -> bool:
        handle = self._synthesis.get(utterance_id)
        return self._stopped or handle is None or handle.stale

    async def _close_superseded(self, utterance_id: str) -> None:
        """End an abandoned utterance's audio on both sides. Silent once stopped."""
        await self._emit_to_both("tts:complete", TTSEventPayload(id=utterance_id).to_wire())

    async def _synthesize(self, utterance: Utterance) -> None:
        logger = self.logger.bind(utterance_id=utterance.id)

        await self._emit_to_both("tts:start", TTSEventPayload(id=utterance.id).to_wire())
        await self._emit_status(Stage.TTS, True)

        utterance.mark_synthesis_started()
        try:
            audio = await self._synthesizer.synthesize(utterance.translated_text)
        except asyncio.CancelledError:
            await self._close_superseded(utterance.id)
            raise
        except SynthesisError as e:
            if self._is_stale(utterance.id):
                await self._close_superseded(utterance.id)
                return
            logger.error(
                "synthesis_failed",
                error=e.message,
                error_type=e.error_type.value,
                retryable=e.retryable,
            )
            await self._emit_status(Stage.TTS, False)
            await self._emit_error(ErrorCode.TTS_ERROR, details=e.message)
            return
        except Exception as e:
            if self._is_stale(utterance.id):
                await self._close_superseded(utterance.id)
                return
            logger.exception("synthesis_failed_unexpectedly", error=str(e))
            await self._emit_status(Stage.TTS, False)
            await self._emit_error(ErrorCode.TTS_ERROR, details=str(e) or type(e).__name__)
            return

        if self._is_stale(utterance.id):
            logger.debug("synthesis_result_discarded")
            await self._close_superseded(utterance.id)
            return

        tts_ms = utterance.mark_synthesized()
        record_stage_timing("tts", tts_ms)

        chunk = TTSChunkPayload(id=utterance.id, chunk=audio).to_wire()
        complete = TTSEventPayload(id=utterance.id).to_wire()

        peer = self._peer()
        if peer is not None:
            await self._emit("tts:chunk", chunk, peer)
            await self._emit("tts:complete", complete, peer)
        elif self._no_peer_audio_policy == "echo":
            await self._emit("tts:chunk", chunk, self.sid)
        else:
            logger.info("synthesis_dropped_no_peer", bytes=len(audio))
        await self._emit("tts:complete", complete, self.sid)
        await self._emit_status(Stage.TTS, False)

        metrics = utterance.latency.snapshot()
        record_utterance_latency(metrics.total)
        await self._emit("status:latency", metrics.to_wire(), self.sid)

        logger.info(
            "utterance_complete",
            audio_bytes=len(audio),
            audio_format=self._synthesizer.audio_format,
            delivered_to="peer" if peer is not None else self._no_peer_audio_policy,
            stt_ms=metrics.stt,
            translation_ms=metrics.translation,
            tts_ms=metrics.tts,
            total_ms=metrics.total,
        )

    # -------------------------------------------------------------------------
    # Emission
    # -------------------------------------------------------------------------

    def _peer(self) -> str | None:
        return self._registry.lookup_peer(self.session_id, self.role)

    async def _emit(self, event: str, payload: dict[str, Any], to: str) -> None:
        if self._stopped:
            return
        await self._sio.emit(event, payload, to=to)

    async def _emit_to_both(self, event: str, payload: dict[str, Any]) -> None:
        await self._emit(event, payload, self.sid)
        peer = self._peer()
        if peer is not None and peer != self.sid:
            await self._emit(event, payload, peer)

    async def _emit_status(self, stage: Stage, active: bool) -> None:
        payload = ProcessingStatusPayload(stage=stage, active=active)
        await self._emit("status:processing", payload.to_wire(), self.sid)

    async def _emit_error(self, code: ErrorCode, details: Any | None = None) -> None:
        if self._stopped:
            return
        record_error(code.value)
        error = ErrorResponse.from_error_code(code, details=details)
        await self._emit("connection:error", error.to_wire(), self.sid)
