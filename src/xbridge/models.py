"""Data models shared by every bridge provider.

All models serialize to the camelCase wire form with
``model_dump(by_alias=True)`` and accept either the wire name or the Python
attribute name on input.
"""

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union
from urllib.parse import urlparse

from eth_utils import is_0x_prefixed, is_address, is_hexstr, to_checksum_address
from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    StrictStr,
    TypeAdapter,
    field_validator,
)
from pydantic.alias_generators import to_camel

BASE_UNIT_PATTERN = r"^[0-9]+$"
_EVM_QUANTITY_PATTERN = r"^([0-9]+|0x[0-9a-fA-F]+)$"

EvmQuantity = Annotated[StrictStr, Field(pattern=_EVM_QUANTITY_PATTERN)]


class WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
    )

    def to_wire(self) -> dict[str, Any]:
        """Return the camelCase representation, omitting unset optionals."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


# Chains


class CosmosChain(WireModel):
    """A Cosmos-SDK chain, identified by its string chain id (e.g. ``osmosis-1``)."""

    chain_type: Literal["cosmos"] = "cosmos"
    chain_id: StrictStr = Field(min_length=1)
    chain_name: Optional[str] = None
    network_name: Optional[str] = None

    def summary(self) -> "CosmosChainSummary":
        return CosmosChainSummary(chain_id=self.chain_id, chain_name=self.chain_name)


class EvmChain(WireModel):
    """An EVM chain, identified by its numeric chain id (e.g. ``1`` for Ethereum)."""

    chain_type: Literal["evm"] = "evm"
    chain_id: StrictInt
    chain_name: Optional[str] = None
    network_name: Optional[str] = None

    def summary(self) -> "EvmChainSummary":
        return EvmChainSummary(chain_id=self.chain_id, chain_name=self.chain_name)


BridgeChain = Annotated[Union[CosmosChain, EvmChain], Field(discriminator="chain_type")]


class CosmosChainSummary(WireModel):
    """Chain reference carried by quotes."""

    chain_type: Literal["cosmos"] = "cosmos"
    chain_id: StrictStr = Field(min_length=1)
    chain_name: Optional[str] = None


class EvmChainSummary(WireModel):
    chain_type: Literal["evm"] = "evm"
    chain_id: StrictInt
    chain_name: Optional[str] = None


BridgeChainSummary = Annotated[
    Union[CosmosChainSummary, EvmChainSummary], Field(discriminator="chain_type")
]


class BridgeStatus(WireModel):
    is_in_maintenance_mode: bool
    maintenance_message: Optional[str] = None


# Assets and coins


class BridgeAsset(WireModel):
    """An asset as represented on one particular chain."""

    denom: StrictStr
    address: StrictStr  # IBC denom or EVM contract address
    decimals: StrictInt = Field(ge=0)
    source_denom: StrictStr  # global identifier on the origin chain


class BridgeCoin(WireModel):
    """An amount of an asset in raw base units (no decimals applied)."""

    amount: StrictStr = Field(pattern=BASE_UNIT_PATTERN)
    denom: StrictStr
    source_denom: StrictStr
    decimals: StrictInt = Field(ge=0)

    @property
    def int_amount(self) -> int:
        return int(self.amount)


class BridgeQuoteOutput(BridgeCoin):
    """Expected output coin, annotated with its price impact percentage."""

    price_impact: StrictStr

    @field_validator("price_impact")
    @classmethod
    def validate_price_impact(cls, value: str) -> str:
        try:
            impact = Decimal(value)
        except InvalidOperation as exc:
            raise ValueError("priceImpact must be a decimal percentage string") from exc
        if not impact.is_finite() or impact < 0 or impact >= 100:
            raise ValueError("priceImpact must be within [0, 100)")
        return value


# Transaction requests


def _checksum_evm_address(value: str) -> str:
    if not is_address(value):
        raise ValueError("'to' must be a 20-byte hex address")
    return to_checksum_address(value)


def _ensure_hex_data(value: str) -> str:
    if not (is_0x_prefixed(value) and is_hexstr(value)):
        raise ValueError("'data' must be 0x-prefixed hex")
    return value


EvmAddress = Annotated[StrictStr, AfterValidator(_checksum_evm_address)]
HexData = Annotated[StrictStr, AfterValidator(_ensure_hex_data)]


class ApprovalTransactionRequest(WireModel):
    """Token approval that must be confirmed before the main transaction."""

    to: EvmAddress
    data: HexData


class EvmBridgeTransactionRequest(WireModel):
    type: Literal["evm"] = "evm"
    to: EvmAddress
    data: Optional[HexData] = None
    value: Optional[EvmQuantity] = None
    gas_price: Optional[EvmQuantity] = None
    max_priority_fee_per_gas: Optional[EvmQuantity] = None
    max_fee_per_gas: Optional[EvmQuantity] = None
    gas: Optional[EvmQuantity] = None  # gas limit
    approval_transaction_request: Optional[ApprovalTransactionRequest] = None


class CosmosBridgeTransactionRequest(WireModel):
    type: Literal["cosmos"] = "cosmos"
    msg_type_url: StrictStr = Field(min_length=1)
    msg: dict[str, Any]


class QRCodeBridgeTransactionRequest(WireModel):
    """No signable payload exists; the caller shows a QR code instead."""

    type: Literal["qrcode"] = "qrcode"


BridgeTransactionRequest = Annotated[
    Union[
        EvmBridgeTransactionRequest,
        CosmosBridgeTransactionRequest,
        QRCodeBridgeTransactionRequest,
    ],
    Field(discriminator="type"),
]


# Quote results


class BridgeQuote(WireModel):
    input: BridgeCoin
    expected_output: BridgeQuoteOutput
    from_chain: BridgeChainSummary
    to_chain: BridgeChainSummary
    transfer_fee: BridgeCoin
    estimated_time: StrictInt = Field(ge=0)  # seconds
    estimated_gas_fee: Optional[BridgeCoin] = None
    transaction_request: Optional[BridgeTransactionRequest] = None

    @property
    def is_executable(self) -> bool:
        """Whether the quote already carries a signable transaction."""
        return self.transaction_request is not None


class BridgeDepositAddress(WireModel):
    deposit_address: StrictStr = Field(min_length=1)


class BridgeExternalUrl(WireModel):
    url_provider_name: StrictStr
    url: StrictStr

    @field_validator("url")
    @classmethod
    def validate_url(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError("url must be an absolute http(s) URL")
        return value


# Transfer status


class TransferStatus(str, Enum):
    SUCCESS = "success"
    PENDING = "pending"
    FAILED = "failed"
    REFUNDED = "refunded"
    CONNECTION_ERROR = "connection-error"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATUSES


_TERMINAL_STATUSES = frozenset(
    {TransferStatus.SUCCESS, TransferStatus.FAILED, TransferStatus.REFUNDED}
)


class TransferFailureReason(str, Enum):
    INSUFFICIENT_FEE = "insufficientFee"


class BridgeTransferStatus(WireModel):
    id: StrictStr
    status: TransferStatus
    reason: Optional[TransferFailureReason] = None


class GetTransferStatusParams(WireModel):
    send_tx_hash: StrictStr = Field(min_length=1)
    from_chain_id: Union[StrictStr, StrictInt]
    to_chain_id: Union[StrictStr, StrictInt]


CHAIN_ADAPTER: TypeAdapter[Union[CosmosChain, EvmChain]] = TypeAdapter(BridgeChain)
TRANSACTION_REQUEST_ADAPTER: TypeAdapter[
    Union[
        EvmBridgeTransactionRequest,
        CosmosBridgeTransactionRequest,
        QRCodeBridgeTransactionRequest,
    ]
] = TypeAdapter(BridgeTransactionRequest)


def parse_chain(payload: Any) -> Union[CosmosChain, EvmChain]:
    """Decode a wire chain, dispatching on ``chainType``."""
    return CHAIN_ADAPTER.validate_python(payload)
