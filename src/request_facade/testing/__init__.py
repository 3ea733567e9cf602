"""Testing utilities for code built on HttpClient.

Example:
    ```python
    import httpx

    from request_facade import HttpClient
    from request_facade.testing import CountingHandler, RecordingEventLogger


    async def test_fetches_items():
        handler = CountingHandler(lambda request: httpx.Response(200, json=[]))
        events = RecordingEventLogger()
        client = HttpClient(transport=httpx.MockTransport(handler), event_logger=events)

        await client.get("https://api.example.com/items")

        assert handler.call_count == 1
        assert events.titles == ["HTTP Request"]
    ```
"""

from collections.abc import Awaitable, Callable

import httpx

from request_facade.events import LogEvent

Handler = Callable[[httpx.Request], httpx.Response | Awaitable[httpx.Response]]


class RecordingEventLogger:
    """EventLogger keeping every emitted event in memory."""

    def __init__(self) -> None:
        self.events: list[LogEvent] = []

    def emit(self, event: LogEvent) -> None:
        self.events.append(event)

    @property
    def titles(self) -> list[str]:
        return [event.title for event in self.events]


class CountingHandler:
    """MockTransport handler recording the requests it receives.

    Args:
        handler: Handler producing the response (sync or async)
    """

    def __init__(self, handler: Handler) -> None:
        self._handler = handler
        self.requests: list[httpx.Request] = []

    @property
    def call_count(self) -> int:
        return len(self.requests)

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self._handler(request)
        if isinstance(response, Awaitable):
            response = await response
        return response


__all__ = ["CountingHandler", "RecordingEventLogger"]
