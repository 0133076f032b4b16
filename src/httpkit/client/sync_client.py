"""Synchronous HTTP client.

This module provides :class:`Client`, the entry point of httpkit. It owns
one :class:`httpx.Client` (and therefore one connection pool) configured
from a :class:`~httpkit.models.ClientConfig`, and layers on:

- **Header precedence** -- client defaults merged with per-request
  headers, see :func:`~httpkit.headers.resolve_headers`.
- **Body encoding** -- driven by the resolved Content-Type, see
  :mod:`httpkit.encoding`.
- **Query merging** -- per-request params merged into the URL.
- **Response helpers** -- :meth:`Client.read_bytes`, :meth:`Client.read_text`,
  :meth:`Client.decode_json` and :meth:`Client.decode_xml`.

Responses are returned with their body stream still open; the helpers in
:mod:`httpkit.client.response` drain and close it. Callers that read a
response some other way must close it themselves.

No retries are attempted and transport errors (:class:`httpx.TransportError`)
propagate unchanged.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

import httpx

from httpkit.client import response as helpers
from httpkit.client.request import build_request
from httpkit.headers import resolve_headers
from httpkit.models import ClientConfig, HeaderMapping, RequestOptions
from httpkit.output import get_output


class Client:
    """HTTP client bound to one configuration and one connection pool.

    Safe to share between threads: the only mutable state is the httpx
    connection pool, which handles its own locking. Default headers are
    copied at construction and never re-read from *config*.

    Args:
        config: Client-wide settings. Defaults to ``ClientConfig()``.
        transport: Optional :class:`httpx.BaseTransport` to send requests
            through instead of the default HTTP transport (e.g.
            :class:`httpx.MockTransport` in tests).

    Example::

        with Client(ClientConfig(default_headers={"Authorization": "Bearer ABC-123"})) as client:
            carts = client.decode_json(client.get("https://dummyjson.com/carts"))
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._config = config or ClientConfig()
        # Snapshot, so later edits to the config's header dict are not sent.
        self._default_headers = resolve_headers(self._config.default_headers, None)
        self._client = httpx.Client(
            timeout=self._config.to_httpx_timeout(),
            limits=self._config.to_httpx_limits(),
            transport=transport,
        )

    @property
    def config(self) -> ClientConfig:
        """The immutable configuration this client was built with."""
        return self._config

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    def close(self) -> None:
        """Close the underlying connection pool."""
        self._client.close()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    # ------------------------------------------------------------------ #
    # Public request methods
    # ------------------------------------------------------------------ #

    def request(
        self,
        method: str,
        url: str,
        options: Optional[RequestOptions] = None,
        *,
        headers: Optional[HeaderMapping] = None,
        params: Optional[Mapping[str, str]] = None,
        body: Any = None,
    ) -> httpx.Response:
        """Assemble, send and return a request.

        Keyword arguments replace the matching fields of *options*.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH, DELETE, ...).
            url: Absolute URL, optionally with a query string.
            options: Per-request overrides.
            headers: Per-request headers, overriding the client defaults.
            params: Query parameters merged into the URL.
            body: Payload encoded according to the resolved Content-Type.

        Returns:
            The :class:`httpx.Response`, whatever its status code, with
            the body not yet read.

        Raises:
            InvalidRequestError: On a body for GET / DELETE.
            EncodingError: If the body cannot be encoded.
            MalformedURLError: If the URL cannot be parsed.
            httpx.TransportError: On network-level failures.
        """
        opts = (options or RequestOptions()).merge(headers=headers, params=params, body=body)

        resolved = resolve_headers(self._default_headers, opts.headers)
        request = build_request(method, url, resolved, opts.params, opts.body)
        # send() only honours timeouts carried by the request itself.
        request.extensions["timeout"] = self._client.timeout.as_dict()

        output = get_output()
        output.debug(f"{request.method} {request.url}")
        response = self._client.send(request, stream=True)
        output.debug(f"{request.method} {request.url} -> {response.status_code} {response.reason_phrase}")
        return response

    def get(
        self,
        url: str,
        options: Optional[RequestOptions] = None,
        *,
        headers: Optional[HeaderMapping] = None,
        params: Optional[Mapping[str, str]] = None,
    ) -> httpx.Response:
        """Send a GET request. GET requests cannot carry a body."""
        return self.request("GET", url, options, headers=headers, params=params)

    def post(
        self,
        url: str,
        options: Optional[RequestOptions] = None,
        *,
        headers: Optional[HeaderMapping] = None,
        params: Optional[Mapping[str, str]] = None,
        body: Any = None,
    ) -> httpx.Response:
        """Send a POST request."""
        return self.request("POST", url, options, headers=headers, params=params, body=body)

    def put(
        self,
        url: str,
        options: Optional[RequestOptions] = None,
        *,
        headers: Optional[HeaderMapping] = None,
        params: Optional[Mapping[str, str]] = None,
        body: Any = None,
    ) -> httpx.Response:
        """Send a PUT request. Encoding behaves exactly as for :meth:`post`."""
        return self.request("PUT", url, options, headers=headers, params=params, body=body)

    def patch(
        self,
        url: str,
        options: Optional[RequestOptions] = None,
        *,
        headers: Optional[HeaderMapping] = None,
        params: Optional[Mapping[str, str]] = None,
        body: Any = None,
    ) -> httpx.Response:
        """Send a PATCH request. Encoding behaves exactly as for :meth:`post`."""
        return self.request("PATCH", url, options, headers=headers, params=params, body=body)

    def delete(
        self,
        url: str,
        options: Optional[RequestOptions] = None,
        *,
        headers: Optional[HeaderMapping] = None,
        params: Optional[Mapping[str, str]] = None,
    ) -> httpx.Response:
        """Send a DELETE request. DELETE requests cannot carry a body."""
        return self.request("DELETE", url, options, headers=headers, params=params)

    # ------------------------------------------------------------------ #
    # Response helpers
    # ------------------------------------------------------------------ #

    def read_bytes(self, response: httpx.Response) -> bytes:
        """See :func:`httpkit.client.response.read_bytes`."""
        return helpers.read_bytes(response)

    def read_text(self, response: httpx.Response) -> str:
        """See :func:`httpkit.client.response.read_text`."""
        return helpers.read_text(response)

    def decode_json(self, response: httpx.Response, target: Optional[Any] = None) -> Any:
        """See :func:`httpkit.client.response.decode_json`."""
        return helpers.decode_json(response, target)

    def decode_xml(self, response: httpx.Response, target: Optional[Any] = None) -> Any:
        """See :func:`httpkit.client.response.decode_xml`."""
        return helpers.decode_xml(response, target)
