"""Tests for the shared cache and provider context."""

from unittest.mock import AsyncMock

import pytest

from stubs import StubBridgeProvider
from xbridge.cache import CacheEntry, CacheStore, LRUCacheStore, NamespacedCache, cached
from xbridge.context import BridgeProviderContext, TimeoutHeight
from xbridge.provider import BridgeProvider


class TestLRUCacheStore:
    def test_set_get_has(self):
        store = LRUCacheStore(maxsize=10)
        assert store.get("missing") is None
        assert not store.has("missing")
        store.set("gas:1", {"price": "30"})
        assert store.has("gas:1")
        assert store.get("gas:1") == {"price": "30"}

    def test_last_write_wins(self):
        store = LRUCacheStore(maxsize=10)
        store.set("key", 1)
        store.set("key", 2)
        assert store.get("key") == 2

    def test_expired_entries_are_dropped(self):
        store = LRUCacheStore(maxsize=10)
        store.set("key", "value", ttl=0)
        assert store.get("key") is None
        assert len(store) == 0

    def test_eviction_by_size(self):
        store = LRUCacheStore(maxsize=2)
        store.set("a", 1)
        store.set("b", 2)
        store.set("c", 3)
        assert store.get("a") is None
        assert store.get("c") == 3

    def test_delete(self):
        store = LRUCacheStore()
        store.set("a", 1)
        store.delete("a")
        store.delete("never-set")
        assert not store.has("a")

    def test_satisfies_protocol(self):
        assert isinstance(LRUCacheStore(), CacheStore)

    def test_entry_freshness(self):
        entry = CacheEntry(value=1, created_at=100.0, ttl=10)
        assert entry.is_fresh(now=105.0)
        assert not entry.is_fresh(now=110.0)
        assert CacheEntry(value=1, created_at=0.0).is_fresh(now=10**9)


class TestNamespacedCache:
    def test_keys_are_namespaced(self):
        store = LRUCacheStore()
        axelar = NamespacedCache(store, "axelar")
        skip = NamespacedCache(store, "skip")

        axelar.set("gas", "1")
        skip.set("gas", "2")

        assert axelar.get("gas") == "1"
        assert skip.get("gas") == "2"
        assert store.get("axelar:gas") == "1"

    def test_empty_namespace_rejected(self):
        with pytest.raises(ValueError):
            NamespacedCache(LRUCacheStore(), "")

    def test_separator_in_namespace_rejected(self):
        store = LRUCacheStore()
        NamespacedCache(store, "a").set("b:c", "from a")
        with pytest.raises(ValueError, match="cannot contain ':'"):
            NamespacedCache(store, "a:b")

    def test_provider_name_with_separator_rejected(self, provider_context):
        with pytest.raises(ValueError):
            StubBridgeProvider(provider_context, "skip:go")


class TestCachedHelper:
    @pytest.mark.asyncio
    async def test_fetches_once(self):
        store = LRUCacheStore()
        fetch = AsyncMock(return_value={"height": "10"})

        first = await cached(store, "height", fetch, ttl=60)
        second = await cached(store, "height", fetch, ttl=60)

        assert first == second == {"height": "10"}
        assert fetch.await_count == 1

    @pytest.mark.asyncio
    async def test_refetches_after_expiry(self):
        store = LRUCacheStore()
        fetch = AsyncMock(side_effect=["old", "new"])

        assert await cached(store, "k", fetch, ttl=0) == "old"
        assert await cached(store, "k", fetch, ttl=0) == "new"


class TestProviderContext:
    def test_unknown_environment_rejected(self):
        with pytest.raises(ValueError):
            BridgeProviderContext(env="devnet", cache=LRUCacheStore())

    def test_registry_is_built_from_lists(self, provider_context):
        assert provider_context.registry.decimals_for("uusdc") == 6
        assert provider_context.registry is provider_context.registry

    def test_provider_cache_is_namespaced(self, provider_context):
        provider = StubBridgeProvider(provider_context, "axelar")
        provider.cache.set("fee", "5")
        assert provider_context.cache.get("axelar:fee") == "5"

    @pytest.mark.asyncio
    async def test_resolve_timeout_height_calls_resolver_once(self):
        resolver = AsyncMock(return_value=TimeoutHeight(revision_height="55", revision_number="4"))
        ctx = BridgeProviderContext(
            env="testnet", cache=LRUCacheStore(), get_timeout_height=resolver
        )
        height = await ctx.resolve_timeout_height("osmo1abc")
        assert height.revision_height == "55"
        resolver.assert_awaited_once_with("osmo1abc")
        assert ctx.is_testnet

    @pytest.mark.asyncio
    async def test_resolve_without_resolver(self):
        ctx = BridgeProviderContext(env="mainnet", cache=LRUCacheStore())
        with pytest.raises(RuntimeError):
            await ctx.resolve_timeout_height("osmo1abc")


class TestProviderBase:
    def test_provider_name_required(self, provider_context):
        class Nameless(BridgeProvider):
            async def get_quote(self, params):
                raise NotImplementedError

            async def get_transaction_data(self, params):
                raise NotImplementedError

            async def get_external_url(self, params):
                return None

        with pytest.raises(TypeError):
            Nameless(provider_context)
