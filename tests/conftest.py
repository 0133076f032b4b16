"""Shared test fixtures for httpkit.

Provides a silent global output manager for every test and helpers for
building clients backed by :class:`httpx.MockTransport`, so no test ever
touches the network.
"""

from __future__ import annotations

from typing import Callable

import httpx
import pytest

from httpkit.client import Client
from httpkit.models import ClientConfig
from httpkit.output import OutputManager, reset_output, set_output

Handler = Callable[[httpx.Request], httpx.Response]


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests():
    """Install a silent OutputManager and reset it after every test."""
    set_output(OutputManager(no_color=True))
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Client fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def make_client():
    """Factory building a Client whose transport is the given handler.

    Every client created through the factory is closed after the test.
    """
    clients: list[Client] = []

    def _make(handler: Handler, config: ClientConfig | None = None) -> Client:
        client = Client(config, transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()


@pytest.fixture
def recorded_requests() -> list[httpx.Request]:
    """A list handlers can append captured requests to."""
    return []
