"""Tests for the AssetRegistry helper."""

import pytest

from xbridge.errors import AssetNotFoundError, ChainNotFoundError
from xbridge.models import BridgeAsset
from xbridge.registry import AssetRegistry


class TestAssetRegistry:
    """Unit tests for AssetRegistry."""

    @pytest.fixture
    def registry(self, asset_lists, chain_list):
        return AssetRegistry(asset_lists, chain_list)

    def test_decimals_for_source_denom(self, registry):
        assert registry.decimals_for("uusdc") == 6
        assert registry.decimals_for("weth-wei") == 18

    def test_representation_on_host_chain(self, registry):
        asset = registry.representation_on("uosmo", "osmosis-1")
        assert asset == BridgeAsset(
            denom="uosmo", address="uosmo", decimals=6, source_denom="uosmo"
        )

    def test_representation_on_cosmos_counterparty(self, registry):
        asset = registry.representation_on("uusdc", "noble-1")
        assert asset.denom == "uusdc"
        assert asset.address == "uusdc"
        assert asset.source_denom == "uusdc"

    def test_representation_on_evm_counterparty(self, registry):
        asset = registry.representation_on("uusdc", 1)
        assert asset.denom == "USDC"
        assert asset.address == "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"

    def test_chain_id_type_must_match(self, registry):
        with pytest.raises(AssetNotFoundError):
            registry.representation_on("uusdc", "1")

    def test_unknown_source_denom(self, registry):
        with pytest.raises(AssetNotFoundError):
            registry.find_asset("uatom")

    def test_first_listing_wins(self, chain_list):
        lists = [
            {
                "chainName": "osmosis",
                "assets": [{"coinMinimalDenom": "uosmo", "sourceDenom": "uosmo", "decimals": 6}],
            },
            {
                "chainName": "other",
                "assets": [{"coinMinimalDenom": "x", "sourceDenom": "uosmo", "decimals": 9}],
            },
        ]
        registry = AssetRegistry(lists, chain_list)
        assert registry.decimals_for("uosmo") == 6

    def test_incomplete_entries_are_skipped(self, chain_list):
        lists = [{"chainName": "osmosis", "assets": [{"sourceDenom": "uion"}]}]
        registry = AssetRegistry(lists, chain_list)
        with pytest.raises(AssetNotFoundError):
            registry.find_asset("uion")

    def test_find_chain(self, registry):
        assert registry.find_chain("noble-1").chain_name == "noble"
        with pytest.raises(ChainNotFoundError):
            registry.find_chain("juno-1")

    def test_chain_for_bech32_address(self, registry):
        chain = registry.chain_for_address("osmo1qyqszqgpqyqszqgpqyqszqgpqyqszqgpjnp7du")
        assert chain.chain_id == "osmosis-1"
        assert registry.chain_for_address("noble1abcd").chain_id == "noble-1"

    def test_chain_for_unknown_address(self, registry):
        with pytest.raises(ChainNotFoundError):
            registry.chain_for_address("cosmos1abcd")
        with pytest.raises(ChainNotFoundError):
            registry.chain_for_address("not-bech32")
