"""Tests for httpkit.models -- ClientConfig and RequestOptions."""

from __future__ import annotations

from dataclasses import dataclass

import httpx
import pytest
from pydantic import BaseModel, ValidationError

from httpkit.models import ClientConfig, RequestOptions, as_builtin


class TestClientConfig:
    def test_defaults(self) -> None:
        config = ClientConfig()
        assert config.default_headers == {}
        assert config.max_idle_connections_per_host == 5
        assert config.connection_timeout == 0
        assert config.request_timeout == 0

    def test_is_immutable(self) -> None:
        config = ClientConfig()
        with pytest.raises(ValidationError):
            config.request_timeout = 3  # type: ignore[misc]

    def test_rejects_negative_values(self) -> None:
        with pytest.raises(ValidationError):
            ClientConfig(max_idle_connections_per_host=-1)
        with pytest.raises(ValidationError):
            ClientConfig(request_timeout=-0.5)

    def test_rejects_unknown_fields(self) -> None:
        with pytest.raises(ValidationError):
            ClientConfig(retries=3)  # type: ignore[call-arg]

    def test_zero_timeouts_are_unbounded(self) -> None:
        timeout = ClientConfig().to_httpx_timeout()
        assert timeout == httpx.Timeout(None)

    def test_timeouts_translate(self) -> None:
        timeout = ClientConfig(connection_timeout=2, request_timeout=10).to_httpx_timeout()
        assert timeout.connect == 2
        assert timeout.read == 10
        assert timeout.write == 10
        assert timeout.pool == 10

    def test_limits_translate(self) -> None:
        limits = ClientConfig(max_idle_connections_per_host=7).to_httpx_limits()
        assert limits.max_keepalive_connections == 7


class TestRequestOptions:
    def test_merge_replaces_given_fields(self) -> None:
        base = RequestOptions(headers={"A": "1"}, params={"page": "1"})
        merged = base.merge(params={"page": "2"}, body={"x": 1})
        assert merged.headers == {"A": "1"}
        assert merged.params == {"page": "2"}
        assert merged.body == {"x": 1}
        assert base.params == {"page": "1"}

    def test_merge_without_changes_returns_same_instance(self) -> None:
        base = RequestOptions()
        assert base.merge() is base


class TestAsBuiltin:
    def test_model(self) -> None:
        class Item(BaseModel):
            id: int

        assert as_builtin(Item(id=1)) == {"id": 1}

    def test_dataclass_instance_but_not_class(self) -> None:
        @dataclass
        class Item:
            id: int

        assert as_builtin(Item(1)) == {"id": 1}
        assert as_builtin(Item) is Item

    def test_other_values_unchanged(self) -> None:
        value = {"a": 1}
        assert as_builtin(value) is value
