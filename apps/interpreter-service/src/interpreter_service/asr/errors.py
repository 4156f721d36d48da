"""
Error classification and handling for the speech-recognition adapter.

Maps Python and websockets exceptions to recognition error types with
retryable classification.
"""

from enum import Enum
from typing import Any

from websockets.exceptions import InvalidHandshake, InvalidStatus


class RecognitionErrorType(str, Enum):
    """Classification of recognition failures."""

    AUTHENTICATION_FAILED = "authentication_failed"
    CONNECTION_FAILED = "connection_failed"
    TIMEOUT = "timeout"
    PROVIDER_ERROR = "provider_error"
    UNKNOWN = "unknown"


# Set of retryable error types
_RETRYABLE_ERRORS = {
    RecognitionErrorType.CONNECTION_FAILED,
    RecognitionErrorType.TIMEOUT,
    RecognitionErrorType.PROVIDER_ERROR,
}


class RecognitionError(Exception):
    """Speech recognition failed."""

    def __init__(
        self,
        message: str,
        error_type: RecognitionErrorType = RecognitionErrorType.UNKNOWN,
        retryable: bool | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.retryable = is_retryable(error_type) if retryable is None else retryable
        self.details = details


class RecognitionStartError(RecognitionError):
    """The provider could not open a recognition stream."""


def _status_code(exception: InvalidStatus) -> int | None:
    response = getattr(exception, "response", None)
    return getattr(response, "status_code", None)


def classify_error(exception: Exception) -> RecognitionErrorType:
    """Classify a Python exception to a RecognitionErrorType.

    Args:
        exception: The exception to classify

    Returns:
        The corresponding RecognitionErrorType
    """
    if isinstance(exception, InvalidStatus):
        if _status_code(exception) in (401, 403):
            return RecognitionErrorType.AUTHENTICATION_FAILED
        return RecognitionErrorType.PROVIDER_ERROR
    elif isinstance(exception, InvalidHandshake):
        return RecognitionErrorType.PROVIDER_ERROR
    elif isinstance(exception, TimeoutError):
        return RecognitionErrorType.TIMEOUT
    elif isinstance(exception, OSError):
        return RecognitionErrorType.CONNECTION_FAILED
    else:
        return RecognitionErrorType.UNKNOWN


def is_retryable(error_type: RecognitionErrorType) -> bool:
    """Determine if an error type is worth retrying.

    Retryable errors are transient: connection failures, timeouts and
    provider-side 5xx responses. Authentication failures and unknown errors
    are permanent.
    """
    return error_type in _RETRYABLE_ERRORS


def create_start_error(exception: Exception, language: str) -> RecognitionStartError:
    """Create a RecognitionStartError from the exception raised while connecting.

    Args:
        exception: The exception to convert
        language: Language the stream was opened for

    Returns:
        RecognitionStartError with appropriate type and retryable flag
    """
    error_type = classify_error(exception)
    message = str(exception) if str(exception) else f"{type(exception).__name__}"

    return RecognitionStartError(
        f"Failed to open recognition stream for '{language}': {message}",
        error_type=error_type,
        details={"exception_type": type(exception).__name__, "language": language},
    )
