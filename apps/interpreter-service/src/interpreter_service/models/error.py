"""Error handling models for the Interpreter Service.

Defines typed models for error payloads sent to clients:
- ErrorCode enum for the `connection:error` codes
- ErrorResponse for `connection:error` and `session:error` events
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCode(str, Enum):
    """Standardized error codes sent in `connection:error` / `session:error`.

    Ingress-state errors leave the connection open; stage errors are
    reported only to the connection whose audio produced them.
    """

    # Stage errors
    STT_ERROR = "STT_ERROR"
    PIPELINE_ERROR = "PIPELINE_ERROR"
    TTS_ERROR = "TTS_ERROR"

    # Ingress-state errors
    PIPELINE_START_ERROR = "PIPELINE_START_ERROR"
    NOT_IN_SESSION = "NOT_IN_SESSION"

    # session:error only
    INVALID_PAYLOAD = "INVALID_PAYLOAD"

    @property
    def default_message(self) -> str:
        """Get default human-readable message for this error code."""
        return ERROR_MESSAGES.get(self, f"Error: {self.value}")


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.STT_ERROR: "Speech recognition error",
    ErrorCode.PIPELINE_ERROR: "Translation error",
    ErrorCode.TTS_ERROR: "TTS synthesis failed",
    ErrorCode.PIPELINE_START_ERROR: "Failed to start audio processing",
    ErrorCode.NOT_IN_SESSION: "Must join a session before starting audio",
    ErrorCode.INVALID_PAYLOAD: "Invalid event payload",
}


class ErrorResponse(BaseModel):
    """Error payload for `connection:error` and `session:error` events."""

    code: str = Field(description="Error code identifier")
    message: str = Field(min_length=1, description="Human-readable error description")
    details: Any | None = Field(default=None, description="Additional error details")

    @classmethod
    def from_error_code(
        cls,
        code: ErrorCode,
        message: str | None = None,
        details: Any | None = None,
    ) -> "ErrorResponse":
        """Create error response from standardized error code.

        Args:
            code: ErrorCode enum value
            message: Optional custom message (defaults to code's default)
            details: Optional additional details

        Returns:
            ErrorResponse instance
        """
        return cls(
            code=code.value,
            message=message or code.default_message,
            details=details,
        )

    def to_wire(self) -> dict[str, Any]:
        """Serialize for Socket.IO, omitting empty details."""
        return self.model_dump(exclude_none=True)
