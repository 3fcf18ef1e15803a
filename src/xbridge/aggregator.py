"""Concurrent quote aggregation across bridge providers."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Union

from .amounts import net_output
from .errors import (
    MaintenanceModeError,
    NoQuotesAvailableError,
    ProviderIneligibleError,
    ProviderTimeoutError,
    UnknownProviderError,
    UnsupportedCapabilityError,
)
from .models import (
    BridgeDepositAddress,
    BridgeExternalUrl,
    BridgeQuote,
    BridgeTransactionRequest,
)
from .provider import BridgeProvider, DepositAddressProvider, supports_deposit_address
from .registry import AssetRegistry
from .validation import (
    GetBridgeExternalUrlParams,
    GetBridgeQuoteParams,
    GetDepositAddressParams,
    ensure_params_decimals,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 15.0


@dataclass(frozen=True)
class ProviderQuote:
    provider_name: str
    quote: BridgeQuote

    @property
    def net_output(self) -> int:
        return net_output(self.quote)


@dataclass
class AggregationResult:
    """Successful quotes (best first) and the reason each other provider was excluded."""

    quotes: List[ProviderQuote] = field(default_factory=list)
    excluded: Dict[str, str] = field(default_factory=dict)

    @property
    def best(self) -> ProviderQuote:
        if not self.quotes:
            raise NoQuotesAvailableError(self.excluded)
        return self.quotes[0]


def rank_quotes(quotes: Sequence[ProviderQuote]) -> List[ProviderQuote]:
    """Order quotes best first.

    Highest net output wins, then the lower estimated time. ``sorted`` is
    stable, so remaining ties keep the providers' registration order.
    """
    return sorted(quotes, key=lambda item: (-item.net_output, item.quote.estimated_time))


def select_best(quotes: Sequence[ProviderQuote]) -> ProviderQuote:
    if not quotes:
        raise NoQuotesAvailableError({})
    return rank_quotes(quotes)[0]


class QuoteAggregator:
    """Fans a quote request out to every eligible provider and picks the best."""

    def __init__(
        self,
        providers: Sequence[BridgeProvider],
        timeout_s: float = DEFAULT_TIMEOUT_S,
        registry: Optional[AssetRegistry] = None,
    ) -> None:
        """
        Args:
            providers: Providers in registration order
            timeout_s: Per-provider time limit for each call
            registry: When given, request asset decimals are checked against
                it before any provider is called
        """
        if timeout_s <= 0:
            raise ValueError("timeout_s must be positive")
        self.registry = registry
        self._providers: Dict[str, BridgeProvider] = {}
        for provider in providers:
            if provider.provider_name in self._providers:
                raise ValueError(f"Duplicate provider name: {provider.provider_name}")
            self._providers[provider.provider_name] = provider
        self.timeout_s = timeout_s

    @property
    def provider_names(self) -> List[str]:
        return list(self._providers)

    def get_provider(self, provider_name: str) -> BridgeProvider:
        provider = self._providers.get(provider_name)
        if provider is None:
            raise UnknownProviderError(provider_name)
        return provider

    def _check_decimals(
        self,
        params: Union[GetBridgeQuoteParams, GetBridgeExternalUrlParams, GetDepositAddressParams],
    ) -> None:
        if self.registry is not None:
            ensure_params_decimals(params, self.registry)

    async def _quote_one(
        self, provider: BridgeProvider, params: GetBridgeQuoteParams
    ) -> ProviderQuote:
        async def run() -> ProviderQuote:
            status = await provider.get_status()
            if status.is_in_maintenance_mode:
                raise MaintenanceModeError(provider.provider_name, status.maintenance_message)
            quote = await provider.get_quote(params)
            return ProviderQuote(provider_name=provider.provider_name, quote=quote)

        try:
            return await asyncio.wait_for(run(), timeout=self.timeout_s)
        except asyncio.TimeoutError as exc:
            raise ProviderTimeoutError(provider.provider_name, self.timeout_s) from exc

    async def aggregate(self, params: GetBridgeQuoteParams) -> AggregationResult:
        """Query every eligible provider concurrently.

        A provider that is ineligible, in maintenance, failing or slow is
        excluded; the others are unaffected.
        """
        self._check_decimals(params)
        result = AggregationResult()
        eligible: List[BridgeProvider] = []
        for provider in self._providers.values():
            name = provider.provider_name
            try:
                supported = provider.supports(params)
            except Exception as exc:
                logger.warning("Support check for %s failed: %s", name, exc)
                result.excluded[name] = str(exc) or type(exc).__name__
                continue
            if supported:
                eligible.append(provider)
            else:
                result.excluded[name] = "unsupported pair"

        outcomes = await asyncio.gather(
            *(self._quote_one(provider, params) for provider in eligible),
            return_exceptions=True,
        )

        quotes: List[ProviderQuote] = []
        for provider, outcome in zip(eligible, outcomes):
            name = provider.provider_name
            if isinstance(outcome, ProviderQuote):
                quotes.append(outcome)
            elif isinstance(outcome, (ProviderIneligibleError, MaintenanceModeError)):
                logger.info("Excluding %s from quotes: %s", name, outcome.message)
                result.excluded[name] = outcome.message
            elif isinstance(outcome, Exception):
                logger.warning("Quote from %s failed: %s", name, outcome)
                result.excluded[name] = str(outcome) or type(outcome).__name__
            else:
                raise outcome

        result.quotes = rank_quotes(quotes)
        return result

    async def get_quotes(self, params: GetBridgeQuoteParams) -> List[ProviderQuote]:
        """Return successful quotes best first; raise if there are none."""
        result = await self.aggregate(params)
        if not result.quotes:
            raise NoQuotesAvailableError(result.excluded)
        return result.quotes

    async def get_best_quote(self, params: GetBridgeQuoteParams) -> ProviderQuote:
        return (await self.aggregate(params)).best

    async def get_transaction_data(
        self, provider_name: str, params: GetBridgeQuoteParams
    ) -> BridgeTransactionRequest:
        provider = self.get_provider(provider_name)
        self._check_decimals(params)
        await provider.ensure_operational()
        return await provider.get_transaction_data(params)

    async def get_deposit_address(
        self, provider_name: str, params: GetDepositAddressParams
    ) -> BridgeDepositAddress:
        provider = self.get_provider(provider_name)
        if not supports_deposit_address(provider):
            raise UnsupportedCapabilityError(provider_name, "deposit addresses")
        self._check_decimals(params)
        await provider.ensure_operational()
        deposit_provider: DepositAddressProvider = provider  # type: ignore[assignment]
        return await deposit_provider.get_deposit_address(params)

    async def get_external_urls(
        self, params: GetBridgeExternalUrlParams
    ) -> List[BridgeExternalUrl]:
        """Collect external bridge links, skipping providers without one."""
        self._check_decimals(params)
        providers = list(self._providers.values())
        outcomes = await asyncio.gather(
            *(
                asyncio.wait_for(provider.get_external_url(params), timeout=self.timeout_s)
                for provider in providers
            ),
            return_exceptions=True,
        )
        urls: List[BridgeExternalUrl] = []
        for provider, outcome in zip(providers, outcomes):
            if isinstance(outcome, Exception):
                logger.warning(
                    "External URL from %s failed: %s", provider.provider_name, outcome
                )
            elif isinstance(outcome, BaseException):
                raise outcome
            elif outcome is not None:
                urls.append(outcome)
        return urls

    def deposit_address_providers(self) -> List[str]:
        return [
            name
            for name, provider in self._providers.items()
            if supports_deposit_address(provider)
        ]


def first_executable(quotes: Sequence[ProviderQuote]) -> Optional[ProviderQuote]:
    """Best quote that already embeds a transaction request, if any."""
    for item in quotes:
        if item.quote.is_executable:
            return item
    return None
