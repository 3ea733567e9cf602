"""Tests for structured log events and event loggers."""

import logging

import pytest

from request_facade.events import (
    REQUEST_TITLE,
    RESPONSE_ERROR_TITLE,
    CallbackEventLogger,
    EventLogger,
    LogEvent,
    LoggingEventLogger,
)
from request_facade.testing import RecordingEventLogger


@pytest.mark.unit
def test_to_dict_leaves_out_unset_fields():
    event = LogEvent(title=REQUEST_TITLE, level="INFO", request_id="req-1", method="GET", url="https://x")

    assert event.to_dict() == {
        "title": "HTTP Request",
        "level": "INFO",
        "requestId": "req-1",
        "method": "GET",
        "url": "https://x",
    }


@pytest.mark.unit
def test_logging_event_logger_writes_at_event_level(caplog):
    event_logger = LoggingEventLogger()

    with caplog.at_level(logging.INFO, logger="request_facade.events"):
        event_logger.emit(LogEvent(title=REQUEST_TITLE, level="INFO", request_id="req-1", method="GET"))
        event_logger.emit(LogEvent(title="HTTP Request Error", level="WARN", request_id="req-2"))

    assert [record.levelno for record in caplog.records] == [logging.INFO, logging.WARNING]
    assert caplog.records[0].getMessage() == "HTTP Request"
    assert caplog.records[0].request_id == "req-1"
    assert caplog.records[0].http_method == "GET"
    assert caplog.records[1].request_id == "req-2"


@pytest.mark.unit
def test_logging_event_logger_attaches_exception(caplog):
    event_logger = LoggingEventLogger(logging.getLogger("test.events"))
    error = ConnectionError("Connection refused")

    with caplog.at_level(logging.INFO, logger="test.events"):
        event_logger.emit(LogEvent(title=RESPONSE_ERROR_TITLE, level="INFO", request_id="req-1", exception=error))

    assert caplog.records[0].exc_info[1] is error
    assert "Connection refused" in caplog.text


@pytest.mark.unit
def test_callback_event_logger_forwards_events():
    received = []
    event = LogEvent(title=REQUEST_TITLE, level="INFO", request_id="req-1")

    CallbackEventLogger(received.append).emit(event)

    assert received == [event]


@pytest.mark.unit
@pytest.mark.parametrize(
    "event_logger",
    [LoggingEventLogger(), CallbackEventLogger(print), RecordingEventLogger()],
)
def test_event_loggers_satisfy_protocol(event_logger):
    assert isinstance(event_logger, EventLogger)
