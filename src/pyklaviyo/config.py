"""Client configuration for pyklaviyo."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any

from pyklaviyo._constants import (
    API_REVISION,
    BASE_URL,
    DEFAULT_CACHE_DIR,
    DEFAULT_CACHE_TTL,
    DEFAULT_LOG_FILE,
    DEFAULT_NUM_RETRIES,
    DEFAULT_RATE_LIMIT,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_USER_AGENT_SUFFIX,
)
from pyklaviyo.exceptions import KlaviyoConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


# Option names accepted by ``KlaviyoConfig.from_options`` (helper-style camelCase).
_OPTION_FIELD_MAP: dict[str, str] = {
    "debug": "debug",
    "logFile": "log_file",
    "numRetries": "num_retries",
    "userAgentSuffix": "user_agent_suffix",
    "cacheEnabled": "cache_enabled",
    "cacheDir": "cache_dir",
    "cacheTTL": "cache_ttl",
    "rateLimit": "rate_limit",
    "baseUrl": "base_url",
    "revision": "revision",
    "requestTimeout": "request_timeout",
}


@dataclasses.dataclass(frozen=True)
class KlaviyoConfig:
    """Client configuration.

    Parameters
    ----------
    api_key : str
        Klaviyo private API key.
    debug : bool
        Write log lines to ``log_file`` and echo errors to stdout.
    log_file : str
        Path of the append-only debug log.
    num_retries : int
        Transport-level retries for network failures, 429 and 5xx
        responses.  The helper layer itself never retries.
    user_agent_suffix : str
        Appended to the ``User-Agent`` header.
    cache_enabled : bool
        Enable the filesystem cache for read operations.
    cache_dir : str
        Directory holding ``<key>.cache`` files.
    cache_ttl : float
        Default time-to-live of a cache entry, in seconds.
    rate_limit : float
        Requests per second.  Converted to a minimum interval of
        ``ceil(1000 / rate_limit)`` milliseconds between requests.
    base_url : str
        API base URL.
    revision : str
        Value of the ``revision`` header pinning the API version.
    request_timeout : float
        Total timeout of a single HTTP request, in seconds.
    """

    api_key: str
    debug: bool = False
    log_file: str = DEFAULT_LOG_FILE
    num_retries: int = DEFAULT_NUM_RETRIES
    user_agent_suffix: str = DEFAULT_USER_AGENT_SUFFIX
    cache_enabled: bool = True
    cache_dir: str = DEFAULT_CACHE_DIR
    cache_ttl: float = DEFAULT_CACHE_TTL
    rate_limit: float = DEFAULT_RATE_LIMIT
    base_url: str = BASE_URL
    revision: str = API_REVISION
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    def __post_init__(self) -> None:
        if not self.api_key or not self.api_key.strip():
            raise KlaviyoConfigError("api_key must be non-empty")
        if self.rate_limit <= 0:
            raise KlaviyoConfigError(f"rate_limit must be positive, got {self.rate_limit}")
        if self.cache_ttl < 0:
            raise KlaviyoConfigError(f"cache_ttl must not be negative, got {self.cache_ttl}")
        if self.num_retries < 0:
            raise KlaviyoConfigError(f"num_retries must not be negative, got {self.num_retries}")
        if self.request_timeout <= 0:
            raise KlaviyoConfigError(f"request_timeout must be positive, got {self.request_timeout}")

    @classmethod
    def from_options(cls, api_key: str, options: Mapping[str, Any] | None = None) -> KlaviyoConfig:
        """Create configuration from helper-style option names.

        Accepts ``debug``, ``logFile``, ``numRetries``, ``userAgentSuffix``,
        ``cacheEnabled``, ``cacheDir``, ``cacheTTL``, ``rateLimit``,
        ``baseUrl``, ``revision`` and ``requestTimeout``.  Unknown names
        raise :class:`KlaviyoConfigError` rather than being ignored.
        """
        kwargs: dict[str, Any] = {}
        for name, value in (options or {}).items():
            field_name = _OPTION_FIELD_MAP.get(name)
            if field_name is None:
                raise KlaviyoConfigError(f"Unknown option: {name}")
            kwargs[field_name] = str(value) if field_name in {"cache_dir", "log_file"} else value
        return cls(api_key=api_key, **kwargs)

    @classmethod
    def from_env(cls, **overrides: Any) -> KlaviyoConfig:
        """Create configuration from environment variables.

        Reads ``KLAVIYO_API_KEY`` and optional ``KLAVIYO_*`` variables.
        Explicit keyword arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        KlaviyoConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "KLAVIYO_API_KEY": "api_key",
            "KLAVIYO_LOG_FILE": "log_file",
            "KLAVIYO_USER_AGENT_SUFFIX": "user_agent_suffix",
            "KLAVIYO_CACHE_DIR": "cache_dir",
            "KLAVIYO_BASE_URL": "base_url",
            "KLAVIYO_REVISION": "revision",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        try:
            retries_env = env.get("KLAVIYO_NUM_RETRIES")
            if retries_env is not None:
                config_kwargs["num_retries"] = int(retries_env)

            for env_key, field_name in (
                ("KLAVIYO_CACHE_TTL", "cache_ttl"),
                ("KLAVIYO_RATE_LIMIT", "rate_limit"),
                ("KLAVIYO_REQUEST_TIMEOUT", "request_timeout"),
            ):
                val = env.get(env_key)
                if val is not None:
                    config_kwargs[field_name] = float(val)
        except ValueError as exc:
            raise KlaviyoConfigError(f"Invalid numeric environment value: {exc}") from exc

        config_kwargs["debug"] = _env_bool(env.get("KLAVIYO_DEBUG"), False)
        config_kwargs["cache_enabled"] = _env_bool(env.get("KLAVIYO_CACHE_ENABLED"), True)

        config_kwargs.update(overrides)
        if "api_key" not in config_kwargs:
            raise KlaviyoConfigError("KLAVIYO_API_KEY is not set")

        return cls(**config_kwargs)
