"""
Adapter configuration.

The host framework supplies the configuration as named properties. For
local use the same values can be read from the environment or a ``.env``
file::

    sp_username=alice@contoso.com
    sp_password=secret
    sp_server_url=https://contoso.sharepoint.com/sites/demo
    sp_timeout=30
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping

import dotenv

from sharepoint_bridge.transport import DEFAULT_TIMEOUT


class Properties:
    """Property names used by the host framework."""

    USERNAME = "Username"
    PASSWORD = "Password"
    SERVER_URL = "Server URL"


REQUIRED_PROPERTIES = (Properties.USERNAME, Properties.PASSWORD, Properties.SERVER_URL)


@dataclass(frozen=True)
class AdapterConfig:
    """Static per-adapter configuration, set once and read-only afterwards."""

    username: str
    password: str = field(repr=False)
    server_url: str
    timeout: float = DEFAULT_TIMEOUT
    scoped_field_lookup: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "server_url", self.server_url.rstrip("/"))

    @classmethod
    def from_properties(
        cls, properties: Mapping[str, str], **options
    ) -> "AdapterConfig":
        missing = [name for name in REQUIRED_PROPERTIES if not properties.get(name)]
        if missing:
            raise ValueError(f"Missing required properties: {', '.join(missing)}")
        return cls(
            username=properties[Properties.USERNAME],
            password=properties[Properties.PASSWORD],
            server_url=properties[Properties.SERVER_URL],
            **options,
        )

    @classmethod
    def from_env(
        cls, *, load_dotenv: bool = True, dotenv_path: str | None = None
    ) -> "AdapterConfig":
        if load_dotenv:
            dotenv.load_dotenv(dotenv_path or dotenv.find_dotenv(usecwd=True))
        timeout = os.getenv("sp_timeout")
        return cls(
            username=_get_required_env("sp_username"),
            password=_get_required_env("sp_password"),
            server_url=_get_required_env("sp_server_url"),
            timeout=float(timeout) if timeout else DEFAULT_TIMEOUT,
        )


def _get_required_env(key: str) -> str:
    value = os.getenv(key)
    if not value:
        raise ValueError(f"Missing required environment variable: {key}")
    return value
