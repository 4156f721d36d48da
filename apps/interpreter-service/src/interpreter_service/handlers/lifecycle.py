"""Connection lifecycle handlers for the Interpreter Service.

Handles connect and disconnect events.
"""

import logging
from typing import Any

from interpreter_service.models.events import ConnectionEstablishedPayload
from interpreter_service.runtime import InterpreterRuntime

from .session import detach_from_session

logger = logging.getLogger(__name__)


async def handle_connect(
    sio: Any,
    sid: str,
    environ: dict[str, Any],
    runtime: InterpreterRuntime,
) -> None:
    """Handle connect event.

    Creates the connection state and acknowledges with connection:established.

    Args:
        sio: Socket.IO server instance.
        sid: Socket.IO session ID.
        environ: ASGI environ dict containing headers.
        runtime: Shared runtime state.
    """
    runtime.connections.create(sid)
    origin = environ.get("HTTP_ORIGIN", "unknown")
    logger.info(f"Client connected: sid={sid}, origin={origin}")

    payload = ConnectionEstablishedPayload(connection_id=sid)
    await sio.emit("connection:established", payload.to_wire(), to=sid)


async def handle_disconnect(
    sio: Any,
    sid: str,
    runtime: InterpreterRuntime,
) -> None:
    """Handle disconnect event.

    Leaves the session first so the peer is told right away, then stops the
    pipeline and releases the connection state.

    Args:
        sio: Socket.IO server instance.
        sid: Socket.IO session ID.
        runtime: Shared runtime state.
    """
    state = runtime.connections.get(sid)
    if state is None:
        logger.debug(f"Disconnect from unknown connection: sid={sid}")
        await runtime.stop_pipeline(sid)
        runtime.forget_connection(sid)
        return

    logger.info(
        f"Client disconnected: sid={sid}, session_id={state.session_id}, "
        f"role={state.role.value if state.role else None}"
    )

    if state.in_session:
        await detach_from_session(sio, state, runtime, stop_pipeline=False)

    await runtime.stop_pipeline(sid)
    runtime.connections.delete(sid)
    runtime.forget_connection(sid)


def register_lifecycle_handlers(
    sio: Any,
    runtime: InterpreterRuntime,
) -> None:
    """Register connection lifecycle event handlers.

    Args:
        sio: Socket.IO server instance.
        runtime: Shared runtime state.
    """

    @sio.on("connect")
    async def on_connect(sid: str, environ: dict[str, Any], auth: Any = None) -> None:
        await handle_connect(sio, sid, environ, runtime)

    @sio.on("disconnect")
    async def on_disconnect(sid: str, reason: Any = None) -> None:
        await handle_disconnect(sio, sid, runtime)
