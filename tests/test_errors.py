"""
Tests for the error hierarchy and logging helpers

Tests cover:
- Error categories and messages
- Error reporting
- Sensitive data masking
- JSON log records
"""
import json
import logging

from numberdesk.utils.errors import (
    ApiError,
    BatchInProgressError,
    EmptyBatchError,
    ErrorCategory,
    ErrorHandler,
    NetworkError,
    format_error_message,
)
from numberdesk.utils.logging import JSONFormatter, SensitiveDataMasker, get_logger


class TestErrorHierarchy:
    """Tests for custom exceptions"""

    def test_default_message(self):
        error = BatchInProgressError()
        assert error.message == BatchInProgressError.user_message
        assert error.category is ErrorCategory.BATCH

    def test_api_error_is_network_error(self):
        error = ApiError("Gone", status_code=410)
        assert isinstance(error, NetworkError)
        assert error.status_code == 410

    def test_to_dict(self):
        data = EmptyBatchError("Nothing to do", details={"action": "delete"}).to_dict()
        assert data["error_type"] == "EmptyBatchError"
        assert data["category"] == "validation"
        assert data["details"] == {"action": "delete"}

    def test_format_error_message(self):
        assert format_error_message(ApiError("Locked")) == "Locked"
        assert format_error_message(RuntimeError("plain")) == "plain"
        assert format_error_message(TimeoutError()) == "TimeoutError"


class TestErrorHandling:
    """Tests for reported errors"""

    def test_handle_unknown_error(self):
        result = ErrorHandler.handle(RuntimeError("boom"), "Listener", log_traceback=False)
        assert result["error_type"] == "UnknownError"
        assert result["details"] == {"context": "Listener"}

    def test_handle_known_error(self):
        result = ErrorHandler.handle(ApiError("Down", status_code=503), "Reload", log_traceback=False)
        assert result["error_type"] == "ApiError"
        assert result["details"] == {"status_code": 503}


class TestLogging:
    """Tests for logging helpers"""

    def test_token_masked(self):
        masker = SensitiveDataMasker()
        text = masker.mask_string("Authorization: Bearer abc.def token=xyz")
        assert "abc.def" not in text
        assert "xyz" not in text

    def test_sensitive_fields_masked_in_dict(self):
        masked = SensitiveDataMasker().mask_dict({"token": "abc", "page": 2})
        assert masked == {"token": "[REDACTED]", "page": 2}

    def test_json_formatter_includes_event(self):
        record = logging.LogRecord("numberdesk", logging.INFO, __file__, 1, "done", None, None)
        record.event_type = "batch_completed"
        record.context = {"total": 3}

        entry = json.loads(JSONFormatter().format(record))
        assert entry["event_type"] == "batch_completed"
        assert entry["context"] == {"total": 3}

    def test_logger_names_not_prefixed_twice(self):
        assert get_logger("numberdesk.core.batch").name == "numberdesk.core.batch"
        assert get_logger("tests").name == "numberdesk.tests"
