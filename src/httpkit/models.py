"""Data models shared across httpkit.

**Client-wide configuration** -- :class:`ClientConfig`, a frozen Pydantic
model attached to one :class:`~httpkit.client.Client` for its whole
lifetime. It is validated once at construction and translated into the
``httpx`` timeout and pool-limit objects that configure the transport.

**Per-request overrides** -- :class:`RequestOptions`, a plain frozen
dataclass carrying headers, query parameters and an arbitrary body. It is
a dataclass rather than a Pydantic model because the body is an untyped
payload (mappings, models, byte streams...) that must not be coerced.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, is_dataclass, replace
from typing import Any, Mapping, Optional, Sequence, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field

HeaderValue = Union[str, Sequence[str]]
"""A single header value, or several values of which only the first is used."""

HeaderMapping = Union[Mapping[str, HeaderValue], httpx.Headers]
"""Anything the header resolver accepts as an input mapping."""

DEFAULT_MAX_IDLE_CONNECTIONS_PER_HOST = 5


def as_builtin(value: Any) -> Any:
    """Dump Pydantic models and dataclass instances to plain Python data.

    Any other value is returned unchanged.
    """
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    return value


class ClientConfig(BaseModel):
    """Process-lifetime settings for one :class:`~httpkit.client.Client`.

    Timeouts are expressed in seconds; ``0`` means no limit.

    Example::

        ClientConfig(
            default_headers={"Authorization": "Bearer ABC-123"},
            request_timeout=10,
        )
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    default_headers: dict[str, Union[str, list[str]]] = Field(
        default_factory=dict,
        description="Headers sent with every request; per-request headers override them",
    )
    max_idle_connections_per_host: int = Field(
        default=DEFAULT_MAX_IDLE_CONNECTIONS_PER_HOST,
        ge=0,
        description="Idle keep-alive connections kept in the pool",
    )
    connection_timeout: float = Field(
        default=0, ge=0, description="Connection establishment timeout in seconds (0 = unbounded)"
    )
    request_timeout: float = Field(
        default=0, ge=0, description="Request timeout in seconds (0 = unbounded)"
    )

    def to_httpx_timeout(self) -> httpx.Timeout:
        """Translate the timeout fields into an :class:`httpx.Timeout`.

        httpx has no single whole-request timeout, so ``request_timeout``
        bounds each read, write and pool wait while ``connection_timeout``
        bounds connection establishment.
        """
        request = self.request_timeout or None
        connect = self.connection_timeout or None
        return httpx.Timeout(request, connect=connect)

    def to_httpx_limits(self) -> httpx.Limits:
        """Translate the pool settings into :class:`httpx.Limits`."""
        return httpx.Limits(max_keepalive_connections=self.max_idle_connections_per_host)


@dataclass(frozen=True)
class RequestOptions:
    """Per-call override bundle.

    Attributes:
        headers: Request headers; they win over the client's defaults.
        params: Query parameters merged into the URL's query string.
        body: Request payload, encoded according to the resolved
            Content-Type. ``None`` means no body at all.
    """

    headers: Optional[HeaderMapping] = None
    params: Optional[Mapping[str, str]] = None
    body: Any = None

    def merge(
        self,
        headers: Optional[HeaderMapping] = None,
        params: Optional[Mapping[str, str]] = None,
        body: Any = None,
    ) -> RequestOptions:
        """Return a copy with every non-``None`` argument replacing the current field."""
        changes: dict[str, Any] = {}
        if headers is not None:
            changes["headers"] = headers
        if params is not None:
            changes["params"] = params
        if body is not None:
            changes["body"] = body
        return replace(self, **changes) if changes else self
