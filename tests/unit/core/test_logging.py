import json
import logging

import pytest

from mbc_cms.core.config import Settings
from mbc_cms.core.logging import (
    LOG_FILE_NAME,
    LoggingContext,
    bind_correlation_id,
    clear_context,
    configure_logging,
    get_logger,
    rename_message_field,
)


def _read_log_lines(log_dir) -> list[dict]:
    for handler in logging.getLogger().handlers:
        handler.flush()
    content = (log_dir / LOG_FILE_NAME).read_text(encoding="utf-8")
    return [json.loads(line) for line in content.splitlines() if line.strip()]


@pytest.fixture
def file_logging(tmp_path, reset_logging):
    log_dir = tmp_path / "logs"
    configure_logging(
        Settings(
            environment="testing",
            log_format="json",
            log_dir=str(log_dir),
            log_file_enabled=True,
        )
    )
    return log_dir


def test_rename_message_field():
    event_dict = rename_message_field(None, "info", {"event": "hello", "role_id": "r-1"})
    assert event_dict == {"message": "hello", "role_id": "r-1"}


def test_log_file_receives_json_events(file_logging):
    get_logger("tests.logging").info("Role created", role_id="r-1")

    lines = _read_log_lines(file_logging)
    entry = next(line for line in lines if line.get("message") == "Role created")
    assert entry["role_id"] == "r-1"
    assert entry["level"] == "info"
    assert entry["logger"] == "tests.logging"
    assert "timestamp" in entry


def test_log_file_includes_bound_context(file_logging):
    logger = get_logger("tests.logging")
    bind_correlation_id("cid_test")
    try:
        with LoggingContext(role_id="r-2"):
            logger.info("Inside context")
        logger.info("Outside context")
    finally:
        clear_context()

    lines = _read_log_lines(file_logging)
    inside = next(line for line in lines if line.get("message") == "Inside context")
    outside = next(line for line in lines if line.get("message") == "Outside context")
    assert inside["correlation_id"] == "cid_test"
    assert inside["role_id"] == "r-2"
    assert outside["correlation_id"] == "cid_test"
    assert "role_id" not in outside


def test_stdlib_loggers_reach_log_file(file_logging):
    logging.getLogger("uvicorn.error").warning("Server warning")

    lines = _read_log_lines(file_logging)
    assert any(line.get("message") == "Server warning" for line in lines)


def test_debug_events_filtered_at_info_level(file_logging):
    get_logger("tests.logging").debug("Too chatty")

    lines = _read_log_lines(file_logging)
    assert not any(line.get("message") == "Too chatty" for line in lines)


def test_file_logging_disabled(tmp_path, reset_logging):
    log_dir = tmp_path / "no-logs"
    configure_logging(Settings(environment="testing", log_dir=str(log_dir), log_file_enabled=False))

    get_logger("tests.logging").info("Console only")

    assert not (log_dir / LOG_FILE_NAME).exists()
