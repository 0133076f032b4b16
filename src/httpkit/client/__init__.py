"""HTTP client module for httpkit.

Provides :class:`Client`, a blocking client backed by :class:`httpx.Client`,
and the response helpers that drain, classify and decode its responses.

Example::

    from httpkit.client import Client, decode_json

    with Client() as client:
        user = decode_json(client.get("https://api.example.com/users/1"), User)
"""

from httpkit.client.response import decode_json, decode_xml, read_body, read_bytes, read_text
from httpkit.client.sync_client import Client

__all__ = [
    "Client",
    "decode_json",
    "decode_xml",
    "read_body",
    "read_bytes",
    "read_text",
]
