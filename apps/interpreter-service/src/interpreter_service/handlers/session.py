"""Session membership handlers for the Interpreter Service.

Handles session:join, session:leave, control:mute and control:unmute.
"""

import logging
from typing import Any

from pydantic import ValidationError

from interpreter_service.models.error import ErrorCode
from interpreter_service.models.events import (
    ParticipantEventPayload,
    Role,
    SessionJoinedPayload,
    SessionJoinPayload,
)
from interpreter_service.runtime import InterpreterRuntime
from interpreter_service.session.connection import ConnectionState

from .errors import emit_error

logger = logging.getLogger(__name__)


async def detach_from_session(
    sio: Any,
    state: ConnectionState,
    runtime: InterpreterRuntime,
    stop_pipeline: bool = True,
) -> None:
    """Remove a connection from its session and notify the remaining peer.

    Args:
        sio: Socket.IO server instance.
        state: The leaving connection's state.
        runtime: Shared runtime state.
        stop_pipeline: Also stop the connection's pipeline.
    """
    if not state.in_session:
        return

    session_id, role = state.session_id, state.role
    removed = runtime.registry.unregister(session_id, role, connection=state.sid)
    state.leave()

    if removed:
        peer = runtime.registry.lookup_peer(session_id, role)
        if peer is not None:
            payload = ParticipantEventPayload(role=role, connection_id=state.sid)
            await sio.emit("session:participant-left", payload.to_wire(), to=peer)
        logger.info(f"Participant left: session_id={session_id}, role={role.value}, sid={state.sid}")

    runtime.update_session_gauge()

    if stop_pipeline:
        await runtime.stop_pipeline(state.sid)


async def handle_session_join(
    sio: Any,
    sid: str,
    data: dict[str, Any],
    runtime: InterpreterRuntime,
) -> None:
    """Handle session:join event.

    Validates the payload, leaves any previous session, registers the
    connection for its role and announces it to both sides.

    Args:
        sio: Socket.IO server instance.
        sid: Socket.IO session ID.
        data: The session:join payload.
        runtime: Shared runtime state.
    """
    try:
        payload = SessionJoinPayload.model_validate(data if isinstance(data, dict) else {})
    except ValidationError as e:
        logger.warning(f"Invalid session:join payload: sid={sid}, errors={e.error_count()}")
        await emit_error(
            sio,
            sid,
            ErrorCode.INVALID_PAYLOAD,
            details=[error["msg"] for error in e.errors()],
            event="session:error",
        )
        return

    state = runtime.connections.get_or_create(sid)
    if state.in_session:
        await detach_from_session(sio, state, runtime)

    role = Role(payload.role)
    replaced = runtime.registry.register(payload.session_id, role, sid)
    state.join(payload.session_id, role)

    if replaced is not None:
        # The replaced socket no longer owns the role
        old_state = runtime.connections.get(replaced)
        if old_state is not None:
            old_state.leave()
        await runtime.stop_pipeline(replaced)

    joined = SessionJoinedPayload(
        session_id=payload.session_id,
        participants=runtime.registry.list_participants(payload.session_id),
    )
    await sio.emit("session:joined", joined.to_wire(), to=sid)

    peer = runtime.registry.lookup_peer(payload.session_id, role)
    if peer is not None:
        announcement = ParticipantEventPayload(role=role, connection_id=sid)
        await sio.emit("session:participant-joined", announcement.to_wire(), to=peer)

    runtime.update_session_gauge()
    logger.info(
        f"Participant joined: session_id={payload.session_id}, role={role.value}, sid={sid}, "
        f"peer_present={peer is not None}"
    )


async def handle_session_leave(
    sio: Any,
    sid: str,
    runtime: InterpreterRuntime,
) -> None:
    """Handle session:leave event. A no-op when not in a session."""
    state = runtime.connections.get(sid)
    if state is None or not state.in_session:
        logger.debug(f"session:leave outside a session: sid={sid}")
        return
    await detach_from_session(sio, state, runtime)


async def handle_mute(
    sio: Any,
    sid: str,
    runtime: InterpreterRuntime,
    muted: bool,
) -> None:
    """Handle control:mute / control:unmute events."""
    state = runtime.connections.get(sid)
    if state is None:
        return
    state.is_muted = muted
    logger.info(f"Mute state changed: sid={sid}, muted={muted}")


def register_session_handlers(
    sio: Any,
    runtime: InterpreterRuntime,
) -> None:
    """Register session membership event handlers.

    Args:
        sio: Socket.IO server instance.
        runtime: Shared runtime state.
    """

    @sio.on("session:join")
    async def on_session_join(sid: str, data: Any = None) -> None:
        await handle_session_join(sio, sid, data, runtime)

    @sio.on("session:leave")
    async def on_session_leave(sid: str, data: Any = None) -> None:
        await handle_session_leave(sio, sid, runtime)

    @sio.on("control:mute")
    async def on_mute(sid: str, data: Any = None) -> None:
        await handle_mute(sio, sid, runtime, muted=True)

    @sio.on("control:unmute")
    async def on_unmute(sid: str, data: Any = None) -> None:
        await handle_mute(sio, sid, runtime, muted=False)
