"""Request assembly: resolved headers + encoded body + query-augmented URL.

:func:`build_request` turns a method, URL and per-request options into a
ready-to-send :class:`httpx.Request`. Every precondition is checked here,
before any network activity.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

import httpx

from httpkit.encoding import JSON, encode_body
from httpkit.exceptions import InvalidRequestError, MalformedURLError

BODYLESS_METHODS = frozenset({"GET", "DELETE"})
"""Methods that must never carry a request body."""


def build_request(
    method: str,
    url: str,
    headers: httpx.Headers,
    params: Optional[Mapping[str, str]] = None,
    body: Any = None,
) -> httpx.Request:
    """Assemble a transport-ready request.

    Args:
        method: HTTP method; case-insensitive.
        url: Absolute ``http`` or ``https`` URL, possibly with a query string.
        headers: Resolved headers. Updated in place with the default
            Content-Type and, for multipart bodies, the boundary.
        params: Query parameters; they replace same-named parameters
            already present in *url*.
        body: Payload, or ``None`` for no body.

    Raises:
        InvalidRequestError: If a body is given for GET or DELETE.
        MalformedURLError: If *url* cannot be parsed or is not absolute.
        EncodingError: If the body cannot be encoded.
    """
    method = method.upper()
    if body is not None and method in BODYLESS_METHODS:
        raise InvalidRequestError(f"{method} requests must not carry a body")

    target = merge_query(url, params)

    if body is not None and "content-type" not in headers:
        headers["Content-Type"] = JSON
    content = encode_body(headers, body)

    return httpx.Request(method, target, headers=headers, content=content)


def merge_query(url: str, params: Optional[Mapping[str, str]] = None) -> httpx.URL:
    """Parse *url* and merge *params* into its query string.

    Raises:
        MalformedURLError: If *url* cannot be parsed or is not an absolute
            ``http``/``https`` URL.
    """
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise MalformedURLError(f"Invalid URL {url!r}: {exc}") from exc

    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise MalformedURLError(f"Invalid URL {url!r}: expected an absolute http(s) URL")

    if params:
        parsed = parsed.copy_merge_params({key: str(value) for key, value in params.items()})
    return parsed
