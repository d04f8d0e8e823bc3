"""Client configuration for pycarapp."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pycarapp._constants import BASE_URL, TOKEN_STORAGE_KEY, USER_AGENT
from pycarapp.exceptions import CarAppConfigError


def _env_float(name: str, value: str) -> float | None:
    normalized = value.strip().lower()
    if normalized in {"", "none", "off", "0"}:
        return None
    try:
        return float(normalized)
    except ValueError as exc:
        raise CarAppConfigError(f"{name} must be a number of seconds, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class CarAppConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        Root URL of the car service. Endpoint paths are appended verbatim.
    token_storage_path : str or None
        JSON file used to persist the access token across restarts.
        ``None`` keeps the token in memory only.
    token_storage_key : str
        Key the access token is stored under.
    request_timeout : float or None
        Total per-request timeout in seconds. ``None`` (the default) waits
        until the request completes or the connection fails.
    user_agent : str
        ``User-Agent`` header sent with every request.
    """

    base_url: str = BASE_URL
    token_storage_path: str | None = None
    token_storage_key: str = TOKEN_STORAGE_KEY
    request_timeout: float | None = None
    user_agent: str = USER_AGENT

    def __post_init__(self) -> None:
        if not self.base_url.startswith(("http://", "https://")):
            raise CarAppConfigError(f"base_url must be an http(s) URL, got {self.base_url!r}")
        if not self.token_storage_key:
            raise CarAppConfigError("token_storage_key must be non-empty")
        if self.request_timeout is not None and self.request_timeout <= 0:
            raise CarAppConfigError("request_timeout must be positive or None")
        # Endpoint paths start with "/"; avoid "//" in joined URLs.
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def from_env(cls, **overrides: Any) -> CarAppConfig:
        """Create configuration from ``CARAPP_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "CARAPP_BASE_URL": "base_url",
            "CARAPP_TOKEN_STORAGE_PATH": "token_storage_path",
            "CARAPP_TOKEN_STORAGE_KEY": "token_storage_key",
            "CARAPP_USER_AGENT": "user_agent",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        timeout_env = env.get("CARAPP_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            config_kwargs["request_timeout"] = _env_float("CARAPP_REQUEST_TIMEOUT", timeout_env)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
