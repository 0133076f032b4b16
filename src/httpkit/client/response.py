"""Response classification and typed decoding helpers.

Every helper here is built on :func:`read_body`, which drains the body of
a (possibly still streaming) :class:`httpx.Response`, closes it on every
exit path, and raises :class:`~httpkit.exceptions.HttpError` for any
status outside 200-299.

Typed decoding uses a Pydantic :class:`~pydantic.TypeAdapter`, so
``target`` can be a model, a dataclass, a ``TypedDict`` or any type
annotation Pydantic understands::

    user = decode_json(response, User)
    ids = decode_json(response, list[int])
"""

from __future__ import annotations

import json
from typing import Any, Optional, TypeVar, overload
from xml.etree.ElementTree import ParseError

import httpx
from pydantic import TypeAdapter, ValidationError

from httpkit.exceptions import DecodeError, HttpError
from httpkit.xmlcodec import conform, from_xml

T = TypeVar("T")


def is_success(status_code: int) -> bool:
    """Return ``True`` for 2xx status codes."""
    return 200 <= status_code <= 299


def read_body(response: httpx.Response) -> bytes:
    """Read the full body, close the response, and classify its status.

    Raises:
        HttpError: If the status code is outside 200-299.
        httpx.TransportError: If reading the body fails mid-stream.
    """
    try:
        body = response.read()
    finally:
        response.close()

    if not is_success(response.status_code):
        raise HttpError.from_response(response, body)
    return body


def read_bytes(response: httpx.Response) -> bytes:
    """Return the raw body of a successful response."""
    return read_body(response)


def read_text(response: httpx.Response) -> str:
    """Return the body of a successful response decoded as UTF-8."""
    body = read_body(response)
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodeError(f"Response body is not valid UTF-8: {exc}") from exc


@overload
def decode_json(response: httpx.Response, target: type[T]) -> T: ...


@overload
def decode_json(response: httpx.Response, target: None = None) -> Any: ...


def decode_json(response: httpx.Response, target: Optional[Any] = None) -> Any:
    """Decode a successful JSON response, optionally validating it as *target*.

    An empty body is not decoded: the zero value of *target* is returned
    instead (see :func:`zero_value`).

    Raises:
        HttpError: For non-2xx responses.
        DecodeError: If the body is not valid JSON or does not match *target*.
    """
    body = read_body(response)
    if not body:
        return zero_value(target)
    try:
        data = json.loads(body)
    except (ValueError, RecursionError) as exc:
        raise DecodeError(f"Failed to decode JSON: {exc}") from exc
    return _validate(data, target, "JSON")


@overload
def decode_xml(response: httpx.Response, target: type[T]) -> T: ...


@overload
def decode_xml(response: httpx.Response, target: None = None) -> Any: ...


def decode_xml(response: httpx.Response, target: Optional[Any] = None) -> Any:
    """Decode a successful XML response, optionally validating it as *target*.

    The root element is dropped; its content is what gets validated. Leaf
    values are strings, so Pydantic's lax coercion turns ``"1"`` into ``1``
    for ``int`` fields. List fields of *target* are restored first, see
    :func:`httpkit.xmlcodec.conform`.

    Raises:
        HttpError: For non-2xx responses.
        DecodeError: If the body is not well-formed XML or does not match *target*.
    """
    body = read_body(response)
    if not body:
        return zero_value(target)
    try:
        data = from_xml(body)
    except (ParseError, RecursionError) as exc:
        raise DecodeError(f"Failed to decode XML: {exc}") from exc
    if target is not None:
        data = conform(data, target)
    return _validate(data, target, "XML")


def zero_value(target: Optional[Any]) -> Any:
    """Return the default value of *target*.

    That is ``target()`` when the type can be built without arguments
    (``dict()``, ``int()``, a model whose fields all have defaults...),
    otherwise ``None``.
    """
    if target is None or not callable(target):
        return None
    try:
        return target()
    except (TypeError, ValueError):
        # ValidationError is a ValueError: required fields are missing.
        return None


def _validate(data: Any, target: Optional[Any], kind: str) -> Any:
    if target is None:
        return data
    try:
        return TypeAdapter(target).validate_python(data)
    except ValidationError as exc:
        raise DecodeError(f"{kind} payload does not match {_type_name(target)}: {exc}") from exc


def _type_name(target: Any) -> str:
    return getattr(target, "__name__", repr(target))
