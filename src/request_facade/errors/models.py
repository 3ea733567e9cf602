"""Serialized view of a failed HTTP response."""

from dataclasses import dataclass
from typing import Any

import httpx


@dataclass
class SerializedError:
    """Status, reason phrase and body of a response that failed a call."""

    status: int
    status_text: str
    data: Any = None

    @classmethod
    def from_response(cls, response: httpx.Response) -> "SerializedError":
        """Build a SerializedError from an HTTP response.

        The body is decoded as JSON when possible, otherwise kept as text.

        Args:
            response: HTTP response object

        Returns:
            SerializedError for the response
        """
        try:
            data = response.json()
        except (ValueError, TypeError, httpx.ResponseNotRead):
            # Not JSON, or a streamed body that was never read
            try:
                data = response.text or None
            except httpx.ResponseNotRead:
                data = None

        return cls(
            status=response.status_code,
            status_text=response.reason_phrase,
            data=data,
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the ``{status, statusText, data}`` mapping."""
        return {
            "status": self.status,
            "statusText": self.status_text,
            "data": self.data,
        }
