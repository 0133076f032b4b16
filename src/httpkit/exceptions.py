"""Exception hierarchy for httpkit.

All exceptions inherit from :class:`HttpkitError`. Errors raised while
assembling a request happen synchronously, before any network activity.
Transport-level failures (DNS, connect, TLS, timeouts) are *not* part of
this hierarchy: they are :class:`httpx.TransportError` subclasses and are
passed through to the caller untouched.

Subclass hierarchy::

    HttpkitError
    +-- InvalidRequestError     (body on GET/DELETE, bad options)
    |   +-- EncodingError       (body could not be serialised)
    |   +-- MalformedURLError   (URL could not be parsed)
    +-- HttpError               (non-2xx response)
    +-- DecodeError             (2xx body could not be decoded)
    +-- ConfigError             (invalid configuration source)
"""

from __future__ import annotations

from typing import Optional

import httpx

_SNIPPET_LENGTH = 200


class HttpkitError(Exception):
    """Base exception for all httpkit errors."""


class InvalidRequestError(HttpkitError):
    """Raised when the caller violates a request precondition."""


class EncodingError(InvalidRequestError):
    """Raised when a request body does not fit its Content-Type or cannot be serialised.

    Serialisation failures are chained to the underlying exception via
    ``raise ... from``.
    """


class MalformedURLError(InvalidRequestError):
    """Raised when the request URL cannot be parsed or is not an absolute http(s) URL."""


class DecodeError(HttpkitError):
    """Raised when a successful response body cannot be decoded into the requested type."""


class ConfigError(HttpkitError):
    """Raised for configuration problems (unreadable file, invalid JSON, bad env values)."""


class HttpError(HttpkitError):
    """Raised for any response whose status code is outside 200-299.

    The response body has already been drained and the response closed by
    the time this error exists, so every field is a detached snapshot.

    Attributes:
        status_code: Numeric HTTP status (e.g. ``404``).
        status: Reason phrase (e.g. ``"Not Found"``).
        body: Raw response body bytes, exactly as received.
        headers: Copy of the response headers.
        method: HTTP method of the originating request.
        url: URL of the originating request.
    """

    def __init__(
        self,
        status_code: int,
        status: str,
        body: bytes,
        headers: httpx.Headers,
        method: str,
        url: str,
    ) -> None:
        self.status_code = status_code
        self.status = status
        self.body = body
        self.headers = headers
        self.method = method
        self.url = url
        super().__init__(self._format_message())

    @classmethod
    def from_response(cls, response: httpx.Response, body: Optional[bytes] = None) -> HttpError:
        """Build an error from a response whose body has been read.

        Args:
            response: The classified response.
            body: The drained body. Defaults to ``response.content``.
        """
        request = response.request
        return cls(
            status_code=response.status_code,
            status=response.reason_phrase,
            body=response.content if body is None else body,
            headers=httpx.Headers(response.headers),
            method=request.method,
            url=str(request.url),
        )

    def _format_message(self) -> str:
        snippet = self.body.decode("utf-8", errors="replace")
        if len(snippet) > _SNIPPET_LENGTH:
            snippet = snippet[:_SNIPPET_LENGTH] + "..."
        return f"{self.method} {self.url} returned {self.status_code} ({snippet})"
