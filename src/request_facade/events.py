"""Structured log events emitted around each HTTP call.

HttpClient emits one event when a request is sent and one when a call fails.
Events are handed to an ``EventLogger``, a single-method sink supplied at
construction. The default sink forwards events to the standard ``logging``
module, so they end up wherever the application's logging is configured.

Example:
    ```python
    from request_facade import HttpClient
    from request_facade.events import CallbackEventLogger

    events = []
    client = HttpClient(event_logger=CallbackEventLogger(events.append))
    ```
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Literal, Protocol, runtime_checkable

LogLevel = Literal["INFO", "WARN"]

REQUEST_TITLE = "HTTP Request"
REQUEST_ERROR_TITLE = "HTTP Request Error"
RESPONSE_ERROR_TITLE = "HTTP Response Error"
TOKEN_ERROR_TITLE = "HTTP call skipped due to a token error"

_LEVELS = {
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
}


@dataclass(frozen=True)
class LogEvent:
    """A structured log event for one request/response cycle."""

    title: str
    level: LogLevel
    request_id: str | None
    method: str | None = None
    url: str | None = None
    exception: BaseException | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the event fields, leaving out the ones that are not set."""
        fields = {
            "title": self.title,
            "level": self.level,
            "requestId": self.request_id,
            "method": self.method,
            "url": self.url,
            "exception": self.exception,
        }
        return {key: value for key, value in fields.items() if value is not None}


@runtime_checkable
class EventLogger(Protocol):
    """Sink for structured log events."""

    def emit(self, event: LogEvent) -> None: ...


class LoggingEventLogger:
    """Write events to a standard library logger.

    The event title is the log message; the remaining fields are passed as
    ``extra`` so formatters and handlers can pick them up.

    Args:
        logger: Logger to write to (default: ``request_facade.events``)
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("request_facade.events")

    def emit(self, event: LogEvent) -> None:
        extra = {
            "request_id": event.request_id,
            "http_method": event.method,
            "http_url": event.url,
        }
        self._logger.log(
            _LEVELS[event.level],
            event.title,
            extra=extra,
            exc_info=event.exception,
        )


class CallbackEventLogger:
    """Adapt a plain function taking a LogEvent into an EventLogger."""

    def __init__(self, callback: Callable[[LogEvent], Any]) -> None:
        self._callback = callback

    def emit(self, event: LogEvent) -> None:
        self._callback(event)
