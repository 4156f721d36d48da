"""Unit tests for translation error classification."""

import httpx
import openai

from interpreter_service.translation.errors import (
    TranslationErrorType,
    classify_error,
    create_translation_error,
    is_retryable,
)


def status_error(cls, status: int):
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    response = httpx.Response(status, request=request)
    return cls("error", response=response, body=None)


class TestClassifyError:
    def test_authentication(self):
        error = status_error(openai.AuthenticationError, 401)
        assert classify_error(error) is TranslationErrorType.AUTHENTICATION_FAILED

    def test_rate_limit(self):
        error = status_error(openai.RateLimitError, 429)
        assert classify_error(error) is TranslationErrorType.RATE_LIMITED

    def test_server_error(self):
        error = status_error(openai.InternalServerError, 503)
        assert classify_error(error) is TranslationErrorType.PROVIDER_ERROR

    def test_builtin_timeout(self):
        assert classify_error(TimeoutError()) is TranslationErrorType.TIMEOUT

    def test_unknown(self):
        assert classify_error(KeyError("x")) is TranslationErrorType.UNKNOWN


def test_retryable_types():
    assert is_retryable(TranslationErrorType.RATE_LIMITED)
    assert is_retryable(TranslationErrorType.PROVIDER_ERROR)
    assert not is_retryable(TranslationErrorType.AUTHENTICATION_FAILED)
    assert not is_retryable(TranslationErrorType.EMPTY_OUTPUT)


def test_create_translation_error():
    error = create_translation_error(TimeoutError())

    assert error.error_type is TranslationErrorType.TIMEOUT
    assert error.retryable is True
    assert error.message == "TimeoutError"
