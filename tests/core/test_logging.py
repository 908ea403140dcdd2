"""Tests for log processors and logging setup."""

import logging
from logging.handlers import RotatingFileHandler

from learnease.config import Settings
from learnease.core.context import RequestContext, clear_context
from learnease.core.logging import (
    add_context_processor,
    configure_structlog,
    filter_sensitive_data,
)


class TestFilterSensitiveData:
    def test_masks_credentials(self) -> None:
        event = filter_sensitive_data(None, "info", {"event": "x", "token": "abcdefgh"})
        assert event["token"] == "ab****gh"

    def test_short_secret_fully_masked(self) -> None:
        event = filter_sensitive_data(None, "info", {"password": "abc"})
        assert event["password"] == "***"

    def test_redacts_answer_keys(self) -> None:
        event = filter_sensitive_data(
            None,
            "info",
            {
                "event": "quiz_submitted",
                "answers": {"qq1": 0},
                "question": {"id": "qq1", "correct_index": 1},
                "score": 50,
            },
        )
        assert event["answers"] == "[redacted]"
        assert event["question"] == {"id": "qq1", "correct_index": "[redacted]"}
        assert event["score"] == 50


class TestContextProcessor:
    def test_adds_request_context(self) -> None:
        with RequestContext(request_id="req-1", user_id="u-1", course_id="c-1"):
            event = add_context_processor(None, "info", {"event": "x"})
        assert event["request_id"] == "req-1"
        assert event["user_id"] == "u-1"
        assert event["course_id"] == "c-1"

    def test_explicit_values_win(self) -> None:
        with RequestContext(request_id="req-1", course_id="c-1"):
            event = add_context_processor(None, "info", {"course_id": "other"})
        assert event["course_id"] == "other"

    def test_empty_context(self) -> None:
        clear_context()
        assert add_context_processor(None, "info", {"event": "x"}) == {"event": "x"}


class TestConfigureStructlog:
    def test_writes_rotating_files_outside_testing(self, tmp_path) -> None:
        settings = Settings(environment="development", log_level="INFO")
        try:
            configure_structlog(settings, log_dir=tmp_path)
            handlers = logging.getLogger().handlers
            assert sum(isinstance(h, RotatingFileHandler) for h in handlers) == 2
            assert (tmp_path / "learnease.log").exists()
            assert (tmp_path / "learnease.error.log").exists()
        finally:
            configure_structlog(Settings(environment="testing", log_level="WARNING"))

    def test_no_files_in_testing(self, tmp_path) -> None:
        configure_structlog(Settings(environment="testing", log_level="WARNING"), log_dir=tmp_path)

        handlers = logging.getLogger().handlers
        assert not any(isinstance(h, RotatingFileHandler) for h in handlers)
        assert list(tmp_path.iterdir()) == []
