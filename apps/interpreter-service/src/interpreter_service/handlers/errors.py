"""Error emission shared by the event handlers."""

import logging
from typing import Any

from interpreter_service.models.error import ErrorCode, ErrorResponse
from interpreter_service.observability.metrics import record_error

logger = logging.getLogger(__name__)


async def emit_error(
    sio: Any,
    sid: str,
    code: ErrorCode,
    message: str | None = None,
    details: Any | None = None,
    event: str = "connection:error",
) -> None:
    """Send an error payload to one connection.

    Args:
        sio: Socket.IO server instance.
        sid: Target connection.
        code: Error code.
        message: Optional override of the code's default message.
        details: Optional extra information.
        event: "connection:error" (default) or "session:error".
    """
    record_error(code.value)
    error = ErrorResponse.from_error_code(code, message=message, details=details)
    logger.warning(f"Emitting {event}: code={code.value}, sid={sid}, details={details}")
    await sio.emit(event, error.to_wire(), to=sid)
