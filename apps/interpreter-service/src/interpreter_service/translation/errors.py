"""
Error classification and handling for the streaming translator.

Maps Python and OpenAI SDK exceptions to translation error types with
retryable classification.
"""

from enum import Enum
from typing import Any

import openai


class TranslationErrorType(str, Enum):
    """Classification of translation failures."""

    EMPTY_INPUT = "empty_input"
    EMPTY_OUTPUT = "empty_output"
    UNSUPPORTED_DIRECTION = "unsupported_direction"
    AUTHENTICATION_FAILED = "authentication_failed"
    RATE_LIMITED = "rate_limited"
    TIMEOUT = "timeout"
    PROVIDER_ERROR = "provider_error"
    UNKNOWN = "unknown"


# Set of retryable error types
_RETRYABLE_ERRORS = {
    TranslationErrorType.RATE_LIMITED,
    TranslationErrorType.TIMEOUT,
    TranslationErrorType.PROVIDER_ERROR,
}


class TranslationError(Exception):
    """Translation of an utterance failed."""

    def __init__(
        self,
        message: str,
        error_type: TranslationErrorType = TranslationErrorType.UNKNOWN,
        retryable: bool | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.retryable = is_retryable(error_type) if retryable is None else retryable
        self.details = details


def classify_error(exception: Exception) -> TranslationErrorType:
    """Classify a Python exception to a TranslationErrorType.

    Args:
        exception: The exception to classify

    Returns:
        The corresponding TranslationErrorType
    """
    # APITimeoutError subclasses APIConnectionError, check it first
    if isinstance(exception, openai.APITimeoutError):
        return TranslationErrorType.TIMEOUT
    elif isinstance(exception, openai.APIConnectionError):
        return TranslationErrorType.PROVIDER_ERROR
    elif isinstance(exception, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return TranslationErrorType.AUTHENTICATION_FAILED
    elif isinstance(exception, openai.RateLimitError):
        return TranslationErrorType.RATE_LIMITED
    elif isinstance(exception, openai.APIStatusError):
        if exception.status_code >= 500:
            return TranslationErrorType.PROVIDER_ERROR
        return TranslationErrorType.UNKNOWN
    elif isinstance(exception, TimeoutError):
        return TranslationErrorType.TIMEOUT
    elif isinstance(exception, ConnectionError):
        return TranslationErrorType.PROVIDER_ERROR
    else:
        return TranslationErrorType.UNKNOWN


def is_retryable(error_type: TranslationErrorType) -> bool:
    """Determine if an error type is worth retrying.

    Retryable errors are transient and may succeed on retry:
    - RATE_LIMITED: May succeed after backoff
    - TIMEOUT: May succeed with more time
    - PROVIDER_ERROR: May succeed if provider recovers

    Everything else (empty input or output, bad credentials, unknown) is
    permanent.
    """
    return error_type in _RETRYABLE_ERRORS


def create_translation_error(exception: Exception) -> TranslationError:
    """Create a TranslationError from a Python exception.

    Args:
        exception: The exception to convert

    Returns:
        TranslationError with appropriate type and retryable flag
    """
    error_type = classify_error(exception)
    message = str(exception) if str(exception) else f"{type(exception).__name__}"

    return TranslationError(
        message,
        error_type=error_type,
        details={"exception_type": type(exception).__name__},
    )
