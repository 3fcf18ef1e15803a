"""Environment shared by every provider queried in one session."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, Awaitable, Callable, Dict, List, Literal, Optional

from .cache import CacheStore, NamespacedCache
from .registry import AssetRegistry

BridgeEnvironment = Literal["mainnet", "testnet"]


@dataclass(frozen=True)
class TimeoutHeight:
    """IBC revision number/height pair used to set a packet timeout."""

    revision_height: str
    revision_number: Optional[str] = None


TimeoutHeightResolver = Callable[[str], Awaitable[TimeoutHeight]]


@dataclass
class BridgeProviderContext:
    env: BridgeEnvironment
    cache: CacheStore
    asset_lists: List[Dict[str, Any]] = field(default_factory=list)
    chain_list: List[Dict[str, Any]] = field(default_factory=list)
    # Resolves the timeout height of the chain owning a bech32 destination address.
    get_timeout_height: Optional[TimeoutHeightResolver] = None

    def __post_init__(self) -> None:
        if self.env not in ("mainnet", "testnet"):
            raise ValueError(f"Unknown bridge environment: {self.env!r}")

    @property
    def is_testnet(self) -> bool:
        return self.env == "testnet"

    @cached_property
    def registry(self) -> AssetRegistry:
        return AssetRegistry(self.asset_lists, self.chain_list)

    def cache_for(self, provider_name: str) -> NamespacedCache:
        return NamespacedCache(self.cache, provider_name)

    async def resolve_timeout_height(self, destination_address: str) -> TimeoutHeight:
        if self.get_timeout_height is None:
            raise RuntimeError("No timeout height resolver configured for this context")
        return await self.get_timeout_height(destination_address)
