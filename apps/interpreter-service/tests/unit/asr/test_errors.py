"""Unit tests for recognition error classification."""

from interpreter_service.asr.errors import (
    RecognitionErrorType,
    RecognitionStartError,
    classify_error,
    create_start_error,
    is_retryable,
)


class TestClassifyError:
    def test_timeout(self):
        assert classify_error(TimeoutError()) is RecognitionErrorType.TIMEOUT

    def test_os_error(self):
        assert classify_error(ConnectionRefusedError()) is RecognitionErrorType.CONNECTION_FAILED

    def test_unknown(self):
        assert classify_error(RuntimeError("x")) is RecognitionErrorType.UNKNOWN


class TestRetryable:
    def test_transient_errors_are_retryable(self):
        assert is_retryable(RecognitionErrorType.TIMEOUT)
        assert is_retryable(RecognitionErrorType.CONNECTION_FAILED)

    def test_permanent_errors_are_not(self):
        assert not is_retryable(RecognitionErrorType.AUTHENTICATION_FAILED)
        assert not is_retryable(RecognitionErrorType.UNKNOWN)


def test_create_start_error():
    error = create_start_error(TimeoutError(), "zh")

    assert isinstance(error, RecognitionStartError)
    assert error.error_type is RecognitionErrorType.TIMEOUT
    assert error.retryable is True
    assert "zh" in error.message
    assert error.details == {"exception_type": "TimeoutError", "language": "zh"}
