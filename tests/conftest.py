"""Pytest configuration and shared fixtures for testing."""

import os

import pytest

from stubs import RecordingReceiver
from xbridge.cache import LRUCacheStore
from xbridge.context import BridgeProviderContext, TimeoutHeight
from xbridge.validation import GetBridgeQuoteParams, validate_quote_request


# Configure pytest-asyncio
pytest_plugins = ("pytest_asyncio",)


@pytest.fixture
def cosmos_chain() -> dict:
    return {"chainType": "cosmos", "chainId": "osmosis-1", "chainName": "Osmosis"}


@pytest.fixture
def evm_chain() -> dict:
    return {"chainType": "evm", "chainId": 1, "chainName": "Ethereum"}


@pytest.fixture
def usdc_on_ethereum() -> dict:
    return {
        "denom": "USDC",
        "address": "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48",
        "decimals": 6,
        "sourceDenom": "uusdc",
    }


@pytest.fixture
def usdc_on_osmosis() -> dict:
    return {
        "denom": "ibc/498A0751C798A0D9A389AA3691123DADA57DAA4FE165D5C75894505B876BA6E4",
        "address": "ibc/498A0751C798A0D9A389AA3691123DADA57DAA4FE165D5C75894505B876BA6E4",
        "decimals": 6,
        "sourceDenom": "uusdc",
    }


@pytest.fixture
def quote_payload(evm_chain, cosmos_chain, usdc_on_ethereum, usdc_on_osmosis) -> dict:
    """A valid camelCase quote request from Ethereum to Osmosis."""
    return {
        "fromChain": evm_chain,
        "toChain": cosmos_chain,
        "fromAsset": usdc_on_ethereum,
        "toAsset": usdc_on_osmosis,
        "fromAmount": "1000000",
        "fromAddress": "0x5ce9454909639D2D17A3F753ce7d93fa0b9aB12E",
        "toAddress": "osmo1qyqszqgpqyqszqgpqyqszqgpqyqszqgpjnp7du",
        "slippage": 1,
    }


@pytest.fixture
def quote_params(quote_payload) -> GetBridgeQuoteParams:
    return validate_quote_request(quote_payload)


@pytest.fixture
def asset_lists() -> list[dict]:
    return [
        {
            "chainName": "osmosis",
            "assets": [
                {
                    "coinMinimalDenom": "ibc/498A0751C798A0D9A389AA3691123DADA57DAA4FE165D5C75894505B876BA6E4",
                    "sourceDenom": "uusdc",
                    "symbol": "USDC",
                    "decimals": 6,
                    "counterparty": [
                        {
                            "chainId": "noble-1",
                            "chainType": "cosmos",
                            "sourceDenom": "uusdc",
                            "decimals": 6,
                        },
                        {
                            "chainId": 1,
                            "chainType": "evm",
                            "sourceDenom": "USDC",
                            "address": "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48",
                            "decimals": 6,
                        },
                    ],
                },
                {
                    "coinMinimalDenom": "uosmo",
                    "sourceDenom": "uosmo",
                    "symbol": "OSMO",
                    "decimals": 6,
                },
                {
                    "coinMinimalDenom": "ibc/EA1D43981D5C9A1C4AAEA9C23BB1D4FA126BA9BC7020A25E0AE4AA841EA25DC5",
                    "sourceDenom": "weth-wei",
                    "symbol": "WETH.axl",
                    "decimals": 18,
                    "counterparty": [
                        {
                            "chainId": 1,
                            "chainType": "evm",
                            "sourceDenom": "ETH",
                            "address": "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2",
                            "decimals": 18,
                        }
                    ],
                },
            ],
        }
    ]


@pytest.fixture
def chain_list() -> list[dict]:
    return [
        {
            "chain_id": "osmosis-1",
            "chain_name": "osmosis",
            "bech32_config": {"bech32PrefixAccAddr": "osmo"},
        },
        {
            "chain_id": "noble-1",
            "chain_name": "noble",
            "bech32_config": {"bech32PrefixAccAddr": "noble"},
        },
    ]


@pytest.fixture
def provider_context(asset_lists, chain_list) -> BridgeProviderContext:
    """Provider context with a real LRU cache and a fixed timeout height."""

    async def get_timeout_height(destination_address: str) -> TimeoutHeight:
        return TimeoutHeight(revision_number="1", revision_height="1000")

    return BridgeProviderContext(
        env="mainnet",
        cache=LRUCacheStore(maxsize=100, default_ttl=30),
        asset_lists=asset_lists,
        chain_list=chain_list,
        get_timeout_height=get_timeout_height,
    )


@pytest.fixture
def receiver() -> RecordingReceiver:
    return RecordingReceiver()


@pytest.fixture(autouse=True)
def clean_env():
    """Clean environment variables before each test."""
    original_env = os.environ.copy()

    for key in list(os.environ.keys()):
        if key.startswith("XBRIDGE_"):
            del os.environ[key]

    yield

    os.environ.clear()
    os.environ.update(original_env)
