"""Client configuration for pylayzspa."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pylayzspa._constants import APPLICATION_ID, BASE_URL, CACHE_TTL_SECONDS, POLL_INTERVAL_SECONDS
from pylayzspa.exceptions import LayzConfigError


@dataclasses.dataclass(frozen=True)
class LayzConfig:
    """Engine configuration for a single spa.

    Parameters
    ----------
    api_token : str
        Gizwits user token obtained at login in the Bestway app.
    device_id : str
        Gizwits device id (``did``) of the spa.
    base_url : str
        API base URL. Defaults to the EU Gizwits endpoint.
    application_id : str
        Gizwits application id sent with every request.
    cache_ttl : float
        Seconds a successful fetch is considered fresh.  Non-forced
        refreshes inside this window are served from the cache.
    poll_interval : float
        Seconds between background poll ticks.  Ticks are cheap: the
        cache TTL decides whether a tick reaches the cloud.
    """

    api_token: str
    device_id: str
    base_url: str = BASE_URL
    application_id: str = APPLICATION_ID
    cache_ttl: float = CACHE_TTL_SECONDS
    poll_interval: float = POLL_INTERVAL_SECONDS

    def __post_init__(self) -> None:
        if not self.api_token or not self.api_token.strip():
            raise LayzConfigError("api_token must be non-empty")
        if not self.device_id or not self.device_id.strip():
            raise LayzConfigError("device_id must be non-empty")
        if self.cache_ttl < 0:
            raise LayzConfigError(f"cache_ttl must be >= 0, got {self.cache_ttl}")
        if self.poll_interval <= 0:
            raise LayzConfigError(f"poll_interval must be > 0, got {self.poll_interval}")
        # Endpoint paths are appended with a leading slash.
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def from_env(cls, **overrides: Any) -> LayzConfig:
        """Create configuration from environment variables.

        Reads ``LAYZ_API_TOKEN``, ``LAYZ_DEVICE_ID`` and the optional
        ``LAYZ_BASE_URL``, ``LAYZ_APPLICATION_ID``, ``LAYZ_CACHE_TTL`` and
        ``LAYZ_POLL_INTERVAL``.  Explicit keyword arguments override
        environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "LAYZ_API_TOKEN": "api_token",
            "LAYZ_DEVICE_ID": "device_id",
            "LAYZ_BASE_URL": "base_url",
            "LAYZ_APPLICATION_ID": "application_id",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        # numeric fields, handled separately
        ttl_env = env.get("LAYZ_CACHE_TTL")
        if ttl_env is not None and "cache_ttl" not in overrides:
            config_kwargs["cache_ttl"] = _env_float("LAYZ_CACHE_TTL", ttl_env)

        interval_env = env.get("LAYZ_POLL_INTERVAL")
        if interval_env is not None and "poll_interval" not in overrides:
            config_kwargs["poll_interval"] = _env_float("LAYZ_POLL_INTERVAL", interval_env)

        config_kwargs.update(overrides)
        for required in ("api_token", "device_id"):
            if required not in config_kwargs:
                raise LayzConfigError(f"missing {required} (set LAYZ_{required.upper()})")

        return cls(**config_kwargs)


def _env_float(name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise LayzConfigError(f"{name} must be a number, got {value!r}") from exc
