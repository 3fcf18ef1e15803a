"""The contract implemented by every bridge backend."""

from abc import ABC, abstractmethod
from typing import Optional, Protocol, runtime_checkable

from .cache import NamespacedCache
from .context import BridgeProviderContext
from .errors import MaintenanceModeError
from .models import (
    BridgeDepositAddress,
    BridgeExternalUrl,
    BridgeQuote,
    BridgeStatus,
    BridgeTransactionRequest,
)
from .validation import (
    GetBridgeExternalUrlParams,
    GetBridgeQuoteParams,
    GetDepositAddressParams,
)


class BridgeProvider(ABC):
    """Base bridge provider interface"""

    provider_name: str

    def __init__(self, ctx: BridgeProviderContext) -> None:
        if not getattr(self, "provider_name", None):
            raise TypeError(f"{type(self).__name__} must define provider_name")
        self.ctx = ctx
        self._cache = ctx.cache_for(self.provider_name)

    @property
    def cache(self) -> NamespacedCache:
        """Shared cache, namespaced with this provider's name."""
        return self._cache

    def supports(self, params: GetBridgeQuoteParams) -> bool:
        """Whether this provider declares support for the chain/asset pair.

        Providers that can only tell by asking their backend leave this
        returning True and raise ``ProviderIneligibleError`` from ``get_quote``.
        """
        return True

    async def get_status(self) -> BridgeStatus:
        """Return the bridge's maintenance status."""
        return BridgeStatus(is_in_maintenance_mode=False)

    async def ensure_operational(self) -> None:
        """Raise ``MaintenanceModeError`` when the bridge is in maintenance."""
        status = await self.get_status()
        if status.is_in_maintenance_mode:
            raise MaintenanceModeError(self.provider_name, status.maintenance_message)

    @abstractmethod
    async def get_quote(self, params: GetBridgeQuoteParams) -> BridgeQuote:
        """
        Request a quote for a cross-chain transfer.

        Raises:
            ProviderIneligibleError: The pair or amount cannot be serviced
            MaintenanceModeError: The bridge is in maintenance mode
        """

    @abstractmethod
    async def get_transaction_data(
        self, params: GetBridgeQuoteParams
    ) -> BridgeTransactionRequest:
        """
        Build the signable payload for the params of a prior quote.

        Repeated calls with identical params produce equivalent, independently
        valid transactions.
        """

    @abstractmethod
    async def get_external_url(
        self, params: GetBridgeExternalUrlParams
    ) -> Optional[BridgeExternalUrl]:
        """Return a link to an external bridge UI, or None when none applies."""


@runtime_checkable
class DepositAddressProvider(Protocol):
    """Capability of providers supporting address-triggered transfers."""

    provider_name: str

    async def get_deposit_address(
        self, params: GetDepositAddressParams
    ) -> BridgeDepositAddress:
        """Return an address that triggers the transfer once funded."""
        ...


def supports_deposit_address(provider: BridgeProvider) -> bool:
    return isinstance(provider, DepositAddressProvider)
