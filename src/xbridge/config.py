"""Configuration helpers for bridge sessions."""

import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .cache import LRUCacheStore
from .context import BridgeEnvironment, BridgeProviderContext, TimeoutHeightResolver

_ENVIRONMENTS = ("mainnet", "testnet")


def _env_choice(key: str, choices: tuple[str, ...], default: str) -> str:
    value = (os.getenv(key) or default).strip().lower()
    if value not in choices:
        raise ValueError(
            f"{key} must be one of {', '.join(choices)}, got '{value}'"
        )
    return value


def _positive_float_from_env(key: str, default: float) -> float:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be a number, got '{raw}'") from exc
    if not value > 0:
        raise ValueError(f"{key} must be greater than 0, got {raw}")
    return value


def _positive_int_from_env(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be an integer, got '{raw}'") from exc
    if value <= 0:
        raise ValueError(f"{key} must be greater than 0, got {raw}")
    return value


@dataclass(slots=True)
class BridgeConfig:
    env: BridgeEnvironment = "mainnet"
    quote_timeout_s: float = 15.0
    cache_maxsize: int = 1000
    cache_ttl_s: float = 30.0
    status_poll_interval_s: float = 10.0
    status_max_tracking_s: float = 86400.0

    @classmethod
    def from_env(cls) -> "BridgeConfig":
        return cls(
            env=_env_choice("XBRIDGE_ENV", _ENVIRONMENTS, "mainnet"),  # type: ignore[arg-type]
            quote_timeout_s=_positive_float_from_env("XBRIDGE_QUOTE_TIMEOUT_S", 15.0),
            cache_maxsize=_positive_int_from_env("XBRIDGE_CACHE_MAXSIZE", 1000),
            cache_ttl_s=_positive_float_from_env("XBRIDGE_CACHE_TTL_S", 30.0),
            status_poll_interval_s=_positive_float_from_env(
                "XBRIDGE_STATUS_POLL_INTERVAL_S", 10.0
            ),
            status_max_tracking_s=_positive_float_from_env(
                "XBRIDGE_STATUS_MAX_TRACKING_S", 86400.0
            ),
        )

    @property
    def testnet(self) -> bool:
        return self.env == "testnet"

    def validate(self) -> None:
        if self.env not in _ENVIRONMENTS:
            raise ValueError(f"Invalid environment: {self.env}. Use mainnet or testnet")
        for name in (
            "quote_timeout_s",
            "cache_ttl_s",
            "status_poll_interval_s",
            "status_max_tracking_s",
        ):
            if not getattr(self, name) > 0:
                raise ValueError(f"{name} must be greater than 0")
        if self.cache_maxsize <= 0:
            raise ValueError("cache_maxsize must be greater than 0")


def load_config() -> BridgeConfig:
    config = BridgeConfig.from_env()
    config.validate()
    return config


def build_context(
    config: BridgeConfig,
    asset_lists: Optional[List[Dict[str, Any]]] = None,
    chain_list: Optional[List[Dict[str, Any]]] = None,
    get_timeout_height: Optional[TimeoutHeightResolver] = None,
) -> BridgeProviderContext:
    """Create a provider context with a fresh shared cache sized from ``config``."""
    return BridgeProviderContext(
        env=config.env,
        cache=LRUCacheStore(maxsize=config.cache_maxsize, default_ttl=config.cache_ttl_s),
        asset_lists=list(asset_lists or []),
        chain_list=list(chain_list or []),
        get_timeout_height=get_timeout_height,
    )
