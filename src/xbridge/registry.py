"""Read-only lookups over the asset lists and chain list."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Tuple

from .errors import AssetNotFoundError, ChainNotFoundError
from .models import BridgeAsset

ChainId = str | int


@dataclass(frozen=True)
class Counterparty:
    """Representation of a registered asset on another chain."""

    chain_id: ChainId
    chain_type: str
    denom: str
    address: Optional[str]
    decimals: int


@dataclass(frozen=True)
class RegisteredAsset:
    """An asset as listed by its host chain's asset list."""

    source_denom: str
    coin_minimal_denom: str
    decimals: int
    chain_name: str
    symbol: Optional[str] = None
    counterparties: Tuple[Counterparty, ...] = ()


@dataclass(frozen=True)
class RegisteredChain:
    chain_id: str
    chain_name: str
    bech32_prefix: Optional[str] = None


class AssetRegistry:
    """Maps source denoms to per-chain representations.

    ``asset_lists`` entries look like::

        {"chainName": "osmosis",
         "assets": [{"coinMinimalDenom": "ibc/...", "sourceDenom": "uatom",
                     "decimals": 6, "symbol": "ATOM",
                     "counterparty": [{"chainId": "cosmoshub-4",
                                       "chainType": "cosmos",
                                       "sourceDenom": "uatom",
                                       "decimals": 6}]}]}

    ``chain_list`` entries carry ``chain_id``, ``chain_name`` and
    ``bech32_config.bech32PrefixAccAddr``.
    """

    def __init__(
        self,
        asset_lists: Iterable[Dict[str, Any]],
        chain_list: Iterable[Dict[str, Any]],
    ) -> None:
        self._assets: Dict[str, RegisteredAsset] = {}
        self._chains_by_id: Dict[str, RegisteredChain] = {}
        self._chains_by_name: Dict[str, RegisteredChain] = {}
        self._chains_by_prefix: Dict[str, RegisteredChain] = {}
        self._load_chains(chain_list)
        self._load_assets(asset_lists)

    def _load_chains(self, chain_list: Iterable[Dict[str, Any]]) -> None:
        for chain in chain_list:
            chain_id = chain.get("chain_id")
            chain_name = chain.get("chain_name")
            if not chain_id or not chain_name:
                continue
            prefix = (chain.get("bech32_config") or {}).get("bech32PrefixAccAddr")
            registered = RegisteredChain(
                chain_id=chain_id, chain_name=chain_name, bech32_prefix=prefix
            )
            self._chains_by_id[chain_id] = registered
            self._chains_by_name[chain_name] = registered
            if prefix:
                self._chains_by_prefix[prefix] = registered

    def _load_assets(self, asset_lists: Iterable[Dict[str, Any]]) -> None:
        for asset_list in asset_lists:
            chain_name = asset_list.get("chainName") or ""
            for asset in asset_list.get("assets") or []:
                source_denom = asset.get("sourceDenom")
                minimal_denom = asset.get("coinMinimalDenom")
                decimals = asset.get("decimals")
                if not source_denom or not minimal_denom or decimals is None:
                    continue
                if source_denom in self._assets:
                    # First listing wins; later lists only add missing assets.
                    continue
                self._assets[source_denom] = RegisteredAsset(
                    source_denom=source_denom,
                    coin_minimal_denom=minimal_denom,
                    decimals=decimals,
                    chain_name=chain_name,
                    symbol=asset.get("symbol"),
                    counterparties=tuple(
                        self._parse_counterparty(entry, decimals)
                        for entry in asset.get("counterparty") or []
                        if entry.get("chainId") is not None
                    ),
                )

    @staticmethod
    def _parse_counterparty(entry: Dict[str, Any], default_decimals: int) -> Counterparty:
        denom = entry.get("sourceDenom") or entry.get("address") or ""
        return Counterparty(
            chain_id=entry["chainId"],
            chain_type=entry.get("chainType", "cosmos"),
            denom=denom,
            address=entry.get("address"),
            decimals=entry.get("decimals", default_decimals),
        )

    def find_asset(self, source_denom: str) -> RegisteredAsset:
        asset = self._assets.get(source_denom)
        if asset is None:
            raise AssetNotFoundError(source_denom)
        return asset

    def decimals_for(self, source_denom: str, chain_id: Optional[ChainId] = None) -> int:
        """Authoritative decimals for ``source_denom``, optionally on a given chain."""
        if chain_id is None:
            return self.find_asset(source_denom).decimals
        return self.representation_on(source_denom, chain_id).decimals

    def representation_on(self, source_denom: str, chain_id: ChainId) -> BridgeAsset:
        """Return how ``source_denom`` is denominated on ``chain_id``.

        Chain ids compare by type too: ``"1"`` never matches EVM chain ``1``.
        """
        asset = self.find_asset(source_denom)
        host = self._chains_by_name.get(asset.chain_name)
        if host is not None and host.chain_id == chain_id:
            return BridgeAsset(
                denom=asset.coin_minimal_denom,
                address=asset.coin_minimal_denom,
                decimals=asset.decimals,
                source_denom=asset.source_denom,
            )
        for counterparty in asset.counterparties:
            if type(counterparty.chain_id) is type(chain_id) and counterparty.chain_id == chain_id:
                return BridgeAsset(
                    denom=counterparty.denom,
                    address=counterparty.address or counterparty.denom,
                    decimals=counterparty.decimals,
                    source_denom=asset.source_denom,
                )
        raise AssetNotFoundError(source_denom, chain_id=chain_id)

    def find_chain(self, chain_id: str) -> RegisteredChain:
        chain = self._chains_by_id.get(chain_id)
        if chain is None:
            raise ChainNotFoundError(chain_id)
        return chain

    def chain_for_address(self, address: str) -> RegisteredChain:
        """Resolve the chain owning a bech32 address by its human-readable prefix."""
        prefix, separator, _ = address.strip().lower().rpartition("1")
        if not separator or not prefix:
            raise ChainNotFoundError(address)
        chain = self._chains_by_prefix.get(prefix)
        if chain is None:
            raise ChainNotFoundError(address)
        return chain
