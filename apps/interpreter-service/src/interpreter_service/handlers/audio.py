"""Audio streaming handlers for the Interpreter Service.

Handles audio:start, audio:chunk and audio:stop events.
"""

import logging
from typing import Any

from pydantic import ValidationError

from interpreter_service.asr.errors import RecognitionStartError
from interpreter_service.models.error import ErrorCode
from interpreter_service.models.events import AudioStartPayload, ProcessingStatusPayload, Stage
from interpreter_service.runtime import InterpreterRuntime

from .errors import emit_error

logger = logging.getLogger(__name__)


def extract_frame(data: Any) -> bytes | None:
    """Get the PCM bytes out of an audio:chunk payload.

    Accepts raw binary, or an object carrying it under "bytes" or "chunk".
    """
    if isinstance(data, dict):
        data = data.get("bytes", data.get("chunk"))
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    return None


async def handle_audio_start(
    sio: Any,
    sid: str,
    data: dict[str, Any] | None,
    runtime: InterpreterRuntime,
) -> None:
    """Handle audio:start event.

    Builds and starts a pipeline for the announced language, replacing any
    pipeline the connection already had.

    Args:
        sio: Socket.IO server instance.
        sid: Socket.IO session ID.
        data: The audio:start payload ({language}).
        runtime: Shared runtime state.
    """
    state = runtime.connections.get(sid)
    if state is None or not state.in_session:
        await emit_error(sio, sid, ErrorCode.NOT_IN_SESSION)
        return

    try:
        payload = AudioStartPayload.model_validate(data if isinstance(data, dict) else {})
    except ValidationError as e:
        await emit_error(
            sio,
            sid,
            ErrorCode.PIPELINE_START_ERROR,
            details=[error["msg"] for error in e.errors()],
        )
        return

    await runtime.stop_pipeline(sid)
    epoch = runtime.pipeline_epoch(sid)

    try:
        pipeline = runtime.create_pipeline(sio, state, payload.language)
        await pipeline.start()
    except ValueError as e:
        logger.warning(f"Rejected audio:start: sid={sid}, language={payload.language}, error={e}")
        await emit_error(sio, sid, ErrorCode.PIPELINE_START_ERROR, details=str(e))
        return
    except RecognitionStartError as e:
        logger.error(f"Failed to start pipeline: sid={sid}, error={e.message}")
        await emit_error(sio, sid, ErrorCode.PIPELINE_START_ERROR, details=e.message)
        return

    # The connection may have moved on while the stream was opening
    if runtime.pipeline_epoch(sid) != epoch or runtime.connections.get(sid) is not state:
        logger.info(f"Discarding superseded audio:start: sid={sid}, language={payload.language}")
        await pipeline.stop()
        return

    runtime.add_pipeline(sid, pipeline)
    state.language = payload.language

    status = ProcessingStatusPayload(stage=Stage.STT, active=True)
    await sio.emit("status:processing", status.to_wire(), to=sid)
    logger.info(
        f"Audio started: sid={sid}, session_id={state.session_id}, "
        f"direction={pipeline.direction.name}"
    )


async def handle_audio_chunk(
    sio: Any,
    sid: str,
    data: Any,
    runtime: InterpreterRuntime,
) -> None:
    """Handle audio:chunk event.

    Chunks outside a session are rejected; chunks before audio:start are
    ignored.
    """
    state = runtime.connections.get(sid)
    if state is None or not state.in_session:
        await emit_error(sio, sid, ErrorCode.NOT_IN_SESSION)
        return

    pipeline = runtime.get_pipeline(sid)
    if pipeline is None:
        return

    frame = extract_frame(data)
    if frame is None:
        logger.debug(f"Ignoring audio:chunk without binary data: sid={sid}")
        return

    await pipeline.push_audio(frame)


async def handle_audio_stop(
    sio: Any,
    sid: str,
    runtime: InterpreterRuntime,
) -> None:
    """Handle audio:stop event."""
    stopped = await runtime.stop_pipeline(sid)

    state = runtime.connections.get(sid)
    if state is not None:
        state.language = None

    status = ProcessingStatusPayload(stage=Stage.STT, active=False)
    await sio.emit("status:processing", status.to_wire(), to=sid)
    if stopped:
        logger.info(f"Audio stopped: sid={sid}")


def register_audio_handlers(
    sio: Any,
    runtime: InterpreterRuntime,
) -> None:
    """Register audio streaming event handlers.

    Args:
        sio: Socket.IO server instance.
        runtime: Shared runtime state.
    """

    @sio.on("audio:start")
    async def on_audio_start(sid: str, data: Any = None) -> None:
        await handle_audio_start(sio, sid, data, runtime)

    @sio.on("audio:chunk")
    async def on_audio_chunk(sid: str, data: Any = None) -> None:
        await handle_audio_chunk(sio, sid, data, runtime)

    @sio.on("audio:stop")
    async def on_audio_stop(sid: str, data: Any = None) -> None:
        await handle_audio_stop(sio, sid, runtime)
