"""Client configuration for pystarline."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pystarline._constants import BASE_URL, DEFAULT_WINDOW_COUNT
from pystarline.exceptions import StarlineConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class StarlineConfig:
    """Dashboard configuration.

    Parameters
    ----------
    device_id : str
        StarLine device identifier.
    slnet_token : str
        Value of the ``slnet`` session cookie.  Obtaining it is outside
        the scope of this library.
    base_url : str
        API base URL.
    window_count : int
        Number of 24-hour event windows shown (today plus history).
    request_timeout : float
        Total timeout per HTTP request, in seconds.
    refetch_history_on_rollover : bool
        Re-fetch historical windows once the local day rolls over.  Off by
        default: history is fetched once at startup and kept.
    """

    device_id: str
    slnet_token: str
    base_url: str = BASE_URL
    window_count: int = DEFAULT_WINDOW_COUNT
    request_timeout: float = 30.0
    refetch_history_on_rollover: bool = False

    def validate(self) -> StarlineConfig:
        """Return ``self`` or raise :class:`StarlineConfigError`."""
        if not self.device_id.strip():
            raise StarlineConfigError("device_id must be non-empty")
        if not self.slnet_token.strip():
            raise StarlineConfigError("slnet_token must be non-empty")
        if self.window_count < 1:
            raise StarlineConfigError(f"window_count must be >= 1, got {self.window_count}")
        if self.request_timeout <= 0:
            raise StarlineConfigError(f"request_timeout must be positive, got {self.request_timeout}")
        return self

    @classmethod
    def from_env(cls, **overrides: Any) -> StarlineConfig:
        """Create configuration from ``STARLINE_*`` environment variables.

        Explicit keyword arguments override environment values.  Overrides
        whose value is ``None`` are ignored so CLI flags can be passed
        through unconditionally.
        """
        env = os.environ
        overrides = {key: value for key, value in overrides.items() if value is not None}

        _ENV_CONFIG_MAP = {
            "STARLINE_DEVICE_ID": "device_id",
            "STARLINE_SLNET_TOKEN": "slnet_token",
            "STARLINE_BASE_URL": "base_url",
        }
        config_kwargs: dict[str, Any] = {"device_id": "", "slnet_token": ""}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        count_env = env.get("STARLINE_WINDOW_COUNT")
        if count_env is not None and "window_count" not in overrides:
            try:
                config_kwargs["window_count"] = int(count_env)
            except ValueError as exc:
                raise StarlineConfigError(f"STARLINE_WINDOW_COUNT is not an integer: {count_env!r}") from exc

        timeout_env = env.get("STARLINE_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            try:
                config_kwargs["request_timeout"] = float(timeout_env)
            except ValueError as exc:
                raise StarlineConfigError(f"STARLINE_REQUEST_TIMEOUT is not a number: {timeout_env!r}") from exc

        if "refetch_history_on_rollover" not in overrides:
            config_kwargs["refetch_history_on_rollover"] = _env_bool(env.get("STARLINE_REFETCH_HISTORY"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
