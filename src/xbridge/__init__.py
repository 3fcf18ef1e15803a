"""Uniform contract for quoting, building and tracking cross-chain transfers."""

from .aggregator import AggregationResult, ProviderQuote, QuoteAggregator, select_best
from .cache import CacheStore, LRUCacheStore, NamespacedCache
from .config import BridgeConfig, build_context, load_config
from .context import BridgeProviderContext, TimeoutHeight
from .errors import (
    BridgeError,
    MaintenanceModeError,
    NoQuotesAvailableError,
    ProviderIneligibleError,
    ValidationError,
    format_error_response,
)
from .models import (
    BridgeAsset,
    BridgeChain,
    BridgeChainSummary,
    BridgeCoin,
    BridgeDepositAddress,
    BridgeExternalUrl,
    BridgeQuote,
    BridgeQuoteOutput,
    BridgeStatus,
    BridgeTransactionRequest,
    BridgeTransferStatus,
    CosmosBridgeTransactionRequest,
    CosmosChain,
    EvmBridgeTransactionRequest,
    EvmChain,
    QRCodeBridgeTransactionRequest,
    TransferFailureReason,
    TransferStatus,
)
from .provider import BridgeProvider, DepositAddressProvider, supports_deposit_address
from .status import (
    PollingTransferStatusProvider,
    TransferStatusProvider,
    TransferStatusReceiver,
    TransferStatusRouter,
)
from .validation import (
    GetBridgeExternalUrlParams,
    GetBridgeQuoteParams,
    GetDepositAddressParams,
    validate_external_url_request,
    validate_quote_request,
)

__all__ = [
    "AggregationResult",
    "BridgeAsset",
    "BridgeChain",
    "BridgeChainSummary",
    "BridgeCoin",
    "BridgeConfig",
    "BridgeDepositAddress",
    "BridgeError",
    "BridgeExternalUrl",
    "BridgeProvider",
    "BridgeProviderContext",
    "BridgeQuote",
    "BridgeQuoteOutput",
    "BridgeStatus",
    "BridgeTransactionRequest",
    "BridgeTransferStatus",
    "CacheStore",
    "CosmosBridgeTransactionRequest",
    "CosmosChain",
    "DepositAddressProvider",
    "EvmBridgeTransactionRequest",
    "EvmChain",
    "GetBridgeExternalUrlParams",
    "GetBridgeQuoteParams",
    "GetDepositAddressParams",
    "LRUCacheStore",
    "MaintenanceModeError",
    "NamespacedCache",
    "NoQuotesAvailableError",
    "PollingTransferStatusProvider",
    "ProviderIneligibleError",
    "ProviderQuote",
    "QRCodeBridgeTransactionRequest",
    "QuoteAggregator",
    "TimeoutHeight",
    "TransferFailureReason",
    "TransferStatus",
    "TransferStatusProvider",
    "TransferStatusReceiver",
    "TransferStatusRouter",
    "ValidationError",
    "build_context",
    "format_error_response",
    "load_config",
    "select_best",
    "supports_deposit_address",
    "validate_external_url_request",
    "validate_quote_request",
]
