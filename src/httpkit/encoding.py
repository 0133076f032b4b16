"""Content-Type driven request body encoding.

:func:`encode_body` looks at the resolved ``Content-Type`` header (lower
cased, parameters such as ``charset`` stripped) and picks an encoder from
:data:`ENCODERS`:

==================================== ==========================================
Content-Type                         Accepted body
==================================== ==========================================
``application/json``                 any JSON-serialisable value
``application/xml``, ``text/xml``    any value, see :mod:`httpkit.xmlcodec`
``application/x-www-form-urlencoded`` mapping or sequence of ``(key, value)``
``multipart/form-data``              mapping of field -> ``str`` | ``bytes``
``text/plain``                       bytes-like as-is, anything else via str()
``application/octet-stream``         bytes-like or readable binary stream
==================================== ==========================================

Any other media type falls back to JSON. Multipart encoding rewrites the
``Content-Type`` header so that it carries the generated boundary.
"""

from __future__ import annotations

import json
import os
from typing import Any, Callable, Mapping, Optional
from urllib.parse import urlencode

import httpx

from httpkit import xmlcodec
from httpkit.exceptions import EncodingError
from httpkit.models import as_builtin

JSON = "application/json"
XML = "application/xml"
TEXT_XML = "text/xml"
FORM = "application/x-www-form-urlencoded"
MULTIPART = "multipart/form-data"
TEXT = "text/plain"
OCTET_STREAM = "application/octet-stream"

_FORM_SCALARS = (str, int, float)


def media_type(content_type: Optional[str]) -> str:
    """Normalise a Content-Type value to its bare, lower-case media type."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def encode_body(headers: httpx.Headers, body: Any) -> Optional[bytes]:
    """Encode *body* according to ``headers["Content-Type"]``.

    Args:
        headers: Resolved request headers. Updated in place when the
            encoder needs to change the Content-Type (multipart boundary).
        body: The payload. ``None`` means no body.

    Returns:
        The encoded payload, or ``None`` when *body* is ``None``.

    Raises:
        EncodingError: If the body does not have the shape the content
            type requires, or cannot be serialised.
    """
    if body is None:
        return None
    encoder = ENCODERS.get(media_type(headers.get("content-type")), _encode_json)
    return encoder(headers, body)


# ------------------------------------------------------------------ #
# Encoders
# ------------------------------------------------------------------ #


def _json_default(value: Any) -> Any:
    converted = as_builtin(value)
    if converted is value:
        raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
    return converted


def _encode_json(headers: httpx.Headers, body: Any) -> bytes:
    try:
        return json.dumps(body, default=_json_default, ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError, RecursionError) as exc:
        raise EncodingError(f"Cannot encode body as JSON: {exc}") from exc


def _encode_xml(headers: httpx.Headers, body: Any) -> bytes:
    try:
        return xmlcodec.to_xml(body)
    except (TypeError, ValueError, RecursionError) as exc:
        raise EncodingError(f"Cannot encode body as XML: {exc}") from exc


def _encode_form(headers: httpx.Headers, body: Any) -> bytes:
    if isinstance(body, Mapping):
        pairs = list(body.items())
    elif isinstance(body, (list, tuple)) and all(
        isinstance(pair, (list, tuple)) and len(pair) == 2 for pair in body
    ):
        pairs = [tuple(pair) for pair in body]
    else:
        raise EncodingError(
            f"{FORM} body must be a mapping of str to str or a sequence of "
            f"(key, value) pairs, got {type(body).__name__}"
        )
    for key, value in pairs:
        if not isinstance(key, str) or not _is_form_value(value):
            raise EncodingError(
                f"{FORM} body must map str to str, got {key!r}: {type(value).__name__}"
            )
    return urlencode([(key, str(value)) for key, value in pairs]).encode("ascii")


def _is_form_value(value: Any) -> bool:
    # bool is an int subclass but would be sent as "True".
    return isinstance(value, _FORM_SCALARS) and not isinstance(value, bool)


def _encode_multipart(headers: httpx.Headers, body: Any) -> bytes:
    if not isinstance(body, Mapping):
        raise EncodingError(
            f"{MULTIPART} body must be a mapping of field name to str or bytes, "
            f"got {type(body).__name__}"
        )
    if not body:
        # httpx sends no body at all for empty files; emit the closing boundary only.
        boundary = os.urandom(16).hex()
        headers["Content-Type"] = f"{MULTIPART}; boundary={boundary}"
        return f"--{boundary}--\r\n".encode("ascii")
    # A part with no filename renders as a plain form field.
    files: dict[str, tuple[Optional[str], Any]] = {}
    for name, value in body.items():
        if isinstance(value, str):
            files[name] = (None, value)
        elif isinstance(value, (bytes, bytearray, memoryview)):
            files[name] = (name, bytes(value))
        else:
            raise EncodingError(
                f"{MULTIPART} field {name!r} must be str or bytes, got {type(value).__name__}"
            )
    # Let httpx build the body and boundary on a throwaway request.
    staged = httpx.Request("POST", "http://localhost", files=files)
    headers["Content-Type"] = staged.headers["Content-Type"]
    return staged.read()


def _encode_text(headers: httpx.Headers, body: Any) -> bytes:
    if isinstance(body, (bytes, bytearray, memoryview)):
        return bytes(body)
    return str(body).encode("utf-8")


def _encode_octet_stream(headers: httpx.Headers, body: Any) -> bytes:
    if isinstance(body, (bytes, bytearray, memoryview)):
        return bytes(body)
    read = getattr(body, "read", None)
    if callable(read):
        data = read()
        if isinstance(data, (bytes, bytearray)):
            return bytes(data)
        raise EncodingError(
            f"{OCTET_STREAM} stream must yield bytes, got {type(data).__name__}"
        )
    raise EncodingError(
        f"{OCTET_STREAM} body must be bytes or a readable binary stream, "
        f"got {type(body).__name__}"
    )


ENCODERS: dict[str, Callable[[httpx.Headers, Any], bytes]] = {
    JSON: _encode_json,
    XML: _encode_xml,
    TEXT_XML: _encode_xml,
    FORM: _encode_form,
    MULTIPART: _encode_multipart,
    TEXT: _encode_text,
    OCTET_STREAM: _encode_octet_stream,
}
"""Encoders keyed by normalised media type. Unknown types use JSON."""
