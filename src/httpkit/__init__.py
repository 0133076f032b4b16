"""httpkit -- an ergonomic request/response layer on top of httpx.

Given a URL, a method and optional headers, query parameters and body,
httpkit builds a correctly encoded request, sends it over a pooled
:class:`httpx.Client`, and hands back the response or a typed error.

Typical usage::

    import httpkit

    client = httpkit.new(httpkit.ClientConfig(default_headers={"Authorization": "Bearer ABC-123"}))
    response = client.post(
        "https://dummyjson.com/users/add",
        headers={"Content-Type": "application/json"},
        body={"firstname": "Yousef", "lastname": "Hejazi"},
    )
    user = httpkit.decode_json(response, User)

Modules:
    models: Client configuration and per-request option models.
    headers: Header precedence resolution.
    encoding: Content-Type driven body encoders.
    xmlcodec: Plain data <-> XML conversion.
    client: The client, request assembly and response helpers.
    config: Configuration loading from files and environment variables.
    exceptions: Exception hierarchy.
    output: stderr diagnostics with Rich support.
"""

from typing import Optional

from httpkit.client import Client, decode_json, decode_xml, read_body, read_bytes, read_text
from httpkit.config import load_client_config
from httpkit.exceptions import (
    ConfigError,
    DecodeError,
    EncodingError,
    HttpError,
    HttpkitError,
    InvalidRequestError,
    MalformedURLError,
)
from httpkit.models import ClientConfig, RequestOptions

__version__ = "0.1.0"


def new(config: Optional[ClientConfig] = None) -> Client:
    """Create a :class:`Client` with its own connection pool."""
    return Client(config)


__all__ = [
    "Client",
    "ClientConfig",
    "ConfigError",
    "DecodeError",
    "EncodingError",
    "HttpError",
    "HttpkitError",
    "InvalidRequestError",
    "MalformedURLError",
    "RequestOptions",
    "decode_json",
    "decode_xml",
    "load_client_config",
    "new",
    "read_body",
    "read_bytes",
    "read_text",
]
