"""Shared runtime state for the Interpreter Service.

One InterpreterRuntime is created per application. It owns the session
registry, the per-connection state, the active pipelines and the shared
provider clients, and is handed explicitly to every handler.
"""

import logging
from typing import Any

from interpreter_service.asr.factory import create_recognizer
from interpreter_service.asr.interface import BaseRecognizer
from interpreter_service.config import InterpreterConfig
from interpreter_service.observability.metrics import (
    decrement_active_pipelines,
    increment_active_pipelines,
    set_active_sessions,
)
from interpreter_service.pipeline.directions import resolve_direction
from interpreter_service.pipeline.orchestrator import InterpretationPipeline
from interpreter_service.session.connection import ConnectionState, ConnectionStore
from interpreter_service.session.registry import SessionRegistry
from interpreter_service.translation.factory import create_translator
from interpreter_service.translation.interface import BaseStreamingTranslator
from interpreter_service.tts.factory import create_synthesizers
from interpreter_service.tts.interface import BaseSynthesizer

logger = logging.getLogger(__name__)


class InterpreterRuntime:
    """Registry, connections, pipelines and providers for one server."""

    def __init__(
        self,
        config: InterpreterConfig,
        recognizer: BaseRecognizer,
        translator: BaseStreamingTranslator,
        synthesizers: dict[str, BaseSynthesizer],
        registry: SessionRegistry | None = None,
        connections: ConnectionStore | None = None,
    ):
        self.config = config
        self.recognizer = recognizer
        self.translator = translator
        self.synthesizers = synthesizers
        self.registry = registry or SessionRegistry()
        self.connections = connections or ConnectionStore()
        self.pipelines: dict[str, InterpretationPipeline] = {}
        # Bumped whenever a connection's pipeline is stopped; an audio:start that
        # began under an older epoch must not register its pipeline
        self._pipeline_epochs: dict[str, int] = {}

    @classmethod
    def from_config(cls, config: InterpreterConfig) -> "InterpreterRuntime":
        """Build the runtime with providers selected by PROVIDER_MODE."""
        providers = config.providers
        return cls(
            config=config,
            recognizer=create_recognizer(providers),
            translator=create_translator(
                providers, timeout_ms=config.pipeline.translation_timeout_ms
            ),
            synthesizers=create_synthesizers(providers, timeout_ms=config.pipeline.tts_timeout_ms),
        )

    def create_pipeline(self, sio: Any, state: ConnectionState, language: str) -> InterpretationPipeline:
        """Build (but do not start) a pipeline for a joined connection.

        Raises:
            ValueError: If the connection is not in a session or the language
                has no direction.
        """
        if not state.in_session:
            raise ValueError("Connection must join a session before starting audio")

        direction = resolve_direction(language)
        synthesizer = self.synthesizers.get(direction.name)
        if synthesizer is None:
            raise ValueError(f"No synthesizer configured for direction '{direction.name}'")

        return InterpretationPipeline(
            sio=sio,
            sid=state.sid,
            session_id=state.session_id,
            role=state.role,
            direction=direction,
            recognizer=self.recognizer,
            translator=self.translator,
            synthesizer=synthesizer,
            registry=self.registry,
            no_peer_audio_policy=self.config.pipeline.no_peer_audio_policy,
        )

    def add_pipeline(self, sid: str, pipeline: InterpretationPipeline) -> None:
        """Track a started pipeline as the connection's active one."""
        self.pipelines[sid] = pipeline
        increment_active_pipelines()

    def get_pipeline(self, sid: str) -> InterpretationPipeline | None:
        return self.pipelines.get(sid)

    def pipeline_epoch(self, sid: str) -> int:
        return self._pipeline_epochs.get(sid, 0)

    def forget_connection(self, sid: str) -> None:
        """Drop the epoch of a disconnected connection."""
        self._pipeline_epochs.pop(sid, None)

    async def stop_pipeline(self, sid: str) -> bool:
        """Stop and forget a connection's pipeline.

        Also invalidates any audio:start still opening a stream for it.

        Returns:
            True if a pipeline was stopped.
        """
        self._pipeline_epochs[sid] = self.pipeline_epoch(sid) + 1
        pipeline = self.pipelines.pop(sid, None)
        if pipeline is None:
            return False
        decrement_active_pipelines()
        await pipeline.stop()
        return True

    def update_session_gauge(self) -> None:
        set_active_sessions(self.registry.count())

    async def shutdown(self) -> None:
        """Stop all pipelines and release provider resources."""
        for sid in list(self.pipelines):
            await self.stop_pipeline(sid)

        await self.recognizer.shutdown()
        await self.translator.shutdown()
        for synthesizer in self.synthesizers.values():
            await synthesizer.shutdown()

        logger.info("Interpreter runtime shut down")
