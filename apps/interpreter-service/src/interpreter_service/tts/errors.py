"""
Error classification and handling for the speech-synthesis adapter.

Errors are classified as retryable or non-retryable from HTTP status codes
and Python exception types, shared by the Azure and ElevenLabs providers.
"""

from enum import Enum
from typing import Any


class SynthesisErrorType(str, Enum):
    """Classification of synthesis failures."""

    EMPTY_INPUT = "empty_input"
    EMPTY_AUDIO = "empty_audio"  # Provider answered with no audio bytes
    AUTHENTICATION_FAILED = "authentication_failed"
    RATE_LIMITED = "rate_limited"
    TIMEOUT = "timeout"
    PROVIDER_ERROR = "provider_error"
    UNKNOWN = "unknown"


# Set of retryable error types
_RETRYABLE_ERRORS = {
    SynthesisErrorType.RATE_LIMITED,
    SynthesisErrorType.TIMEOUT,
    SynthesisErrorType.PROVIDER_ERROR,
}


class SynthesisError(Exception):
    """Speech synthesis failed."""

    def __init__(
        self,
        message: str,
        error_type: SynthesisErrorType = SynthesisErrorType.UNKNOWN,
        retryable: bool | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.retryable = is_retryable(error_type) if retryable is None else retryable
        self.details = details


def is_retryable(error_type: SynthesisErrorType) -> bool:
    """Determine if an error type is worth retrying."""
    return error_type in _RETRYABLE_ERRORS


def classify_status(status_code: int | None) -> SynthesisErrorType:
    """Classify a provider HTTP status code.

    Args:
        status_code: HTTP status from the provider, if any

    Returns:
        SynthesisErrorType for the status
    """
    if status_code is None:
        return SynthesisErrorType.UNKNOWN
    if status_code in (401, 403):
        return SynthesisErrorType.AUTHENTICATION_FAILED
    if status_code == 429:
        return SynthesisErrorType.RATE_LIMITED
    if status_code in (408, 504):
        return SynthesisErrorType.TIMEOUT
    if status_code >= 500:
        return SynthesisErrorType.PROVIDER_ERROR
    return SynthesisErrorType.UNKNOWN


def classify_exception(exception: Exception) -> SynthesisErrorType:
    """Classify a Python exception raised while talking to a provider."""
    status_code = getattr(exception, "status_code", None) or getattr(exception, "status", None)
    if isinstance(status_code, int):
        return classify_status(status_code)
    if isinstance(exception, TimeoutError):
        return SynthesisErrorType.TIMEOUT
    if isinstance(exception, (ConnectionError, OSError)):
        return SynthesisErrorType.PROVIDER_ERROR
    return SynthesisErrorType.UNKNOWN


def create_synthesis_error(exception: Exception, provider: str) -> SynthesisError:
    """Create a SynthesisError from a provider exception.

    Args:
        exception: The exception to convert
        provider: Provider name for the message and details

    Returns:
        SynthesisError with appropriate type and retryable flag
    """
    error_type = classify_exception(exception)
    message = str(exception) if str(exception) else f"{type(exception).__name__}"

    return SynthesisError(
        f"{provider} synthesis failed: {message}",
        error_type=error_type,
        details={"provider": provider, "exception_type": type(exception).__name__},
    )
