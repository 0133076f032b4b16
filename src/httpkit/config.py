"""Client configuration loading with precedence resolution.

:func:`load_client_config` builds a :class:`~httpkit.models.ClientConfig`
from several layers. Precedence (high to low):

1. Keyword overrides passed by the caller.
2. Environment variables (:data:`ENV_VARS`).
3. A JSON config file -- the explicit ``path`` argument, or the file
   named by ``$HTTPKIT_CONFIG``.
4. Model defaults.

Every failure (missing file, invalid JSON, malformed environment value,
Pydantic validation error) is reported as
:class:`~httpkit.exceptions.ConfigError`.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import ValidationError

from httpkit.exceptions import ConfigError
from httpkit.models import ClientConfig

CONFIG_ENV_VAR = "HTTPKIT_CONFIG"

ENV_VARS: dict[str, str] = {
    "HTTPKIT_MAX_IDLE_CONNECTIONS_PER_HOST": "max_idle_connections_per_host",
    "HTTPKIT_CONNECTION_TIMEOUT": "connection_timeout",
    "HTTPKIT_REQUEST_TIMEOUT": "request_timeout",
}
"""Environment variable name -> :class:`ClientConfig` field."""


def load_config_file(path: Union[str, Path]) -> dict[str, Any]:
    """Read a JSON config file and return its top-level object.

    Raises:
        ConfigError: If the file is missing, unreadable, not JSON, or not
            a JSON object.
    """
    path = Path(path).expanduser()
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config at {path}: expected a JSON object")
    return data


def config_from_env() -> dict[str, str]:
    """Collect the configuration fields set through environment variables.

    Values stay strings; Pydantic converts them during validation.
    """
    values: dict[str, str] = {}
    for var, field_name in ENV_VARS.items():
        value = os.environ.get(var)
        if value:
            values[field_name] = value.strip()
    return values


def load_client_config(path: Optional[Union[str, Path]] = None, **overrides: Any) -> ClientConfig:
    """Resolve a :class:`ClientConfig` from overrides, environment, file and defaults.

    Args:
        path: JSON config file. Falls back to ``$HTTPKIT_CONFIG``; when
            neither is set no file is read.
        **overrides: Field values that win over every other source.
            ``None`` values are ignored.

    Raises:
        ConfigError: If any source is invalid.
    """
    data: dict[str, Any] = {}

    file_path = path or os.environ.get(CONFIG_ENV_VAR)
    if file_path:
        data.update(load_config_file(file_path))

    data.update(config_from_env())
    data.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return ClientConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid client configuration: {exc}") from exc
