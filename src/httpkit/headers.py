"""Header precedence resolution.

:func:`resolve_headers` merges the client's default headers with a
request's own headers into a single case-insensitive
:class:`httpx.Headers`. Only the first value of each header is kept on
both sides; multi-value request headers are not supported.
"""

from __future__ import annotations

from typing import Iterator, Optional

import httpx

from httpkit.models import HeaderMapping


def resolve_headers(
    defaults: Optional[HeaderMapping],
    overrides: Optional[HeaderMapping],
) -> httpx.Headers:
    """Merge *defaults* and *overrides*, the latter winning on shared names.

    Args:
        defaults: Client-wide headers.
        overrides: Per-request headers.

    Returns:
        A new :class:`httpx.Headers`; neither input is modified.
    """
    resolved = httpx.Headers()
    for source in (defaults, overrides):
        for name, value in _first_values(source):
            resolved[name] = value
    return resolved


def _first_values(headers: Optional[HeaderMapping]) -> Iterator[tuple[str, str]]:
    """Yield ``(name, first_value)`` for each header name with at least one value."""
    if not headers:
        return
    if isinstance(headers, httpx.Headers):
        for name in headers.keys():
            values = headers.get_list(name)
            if values:
                yield name, values[0]
        return
    for name, value in headers.items():
        if isinstance(value, str):
            yield name, value
        elif value:
            yield name, str(value[0])
