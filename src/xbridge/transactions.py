"""Dispatch on transaction-request variants."""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Mapping, Union

from .models import (
    TRANSACTION_REQUEST_ADAPTER,
    ApprovalTransactionRequest,
    CosmosBridgeTransactionRequest,
    EvmBridgeTransactionRequest,
    QRCodeBridgeTransactionRequest,
)

SignableStep = Union[
    ApprovalTransactionRequest,
    EvmBridgeTransactionRequest,
    CosmosBridgeTransactionRequest,
]
AnyTransactionRequest = Union[
    EvmBridgeTransactionRequest,
    CosmosBridgeTransactionRequest,
    QRCodeBridgeTransactionRequest,
]


@dataclass(frozen=True)
class TransactionPlan:
    """Ordered steps the caller signs and broadcasts, one after another."""

    steps: tuple[SignableStep, ...]
    requires_out_of_band: bool = False

    @property
    def needs_approval(self) -> bool:
        return bool(self.steps) and isinstance(self.steps[0], ApprovalTransactionRequest)


def parse_transaction_request(payload: Mapping[str, Any]) -> AnyTransactionRequest:
    """Decode a wire transaction request by its ``type`` tag."""
    return TRANSACTION_REQUEST_ADAPTER.validate_python(payload)


def plan_transaction(request: AnyTransactionRequest) -> TransactionPlan:
    if isinstance(request, EvmBridgeTransactionRequest):
        if request.approval_transaction_request is not None:
            # The approval must be confirmed before the transfer is sent.
            return TransactionPlan(steps=(request.approval_transaction_request, request))
        return TransactionPlan(steps=(request,))
    if isinstance(request, CosmosBridgeTransactionRequest):
        return TransactionPlan(steps=(request,))
    if isinstance(request, QRCodeBridgeTransactionRequest):
        return TransactionPlan(steps=(), requires_out_of_band=True)
    raise TypeError(f"Unknown transaction request type: {type(request).__name__}")


async def execute_plan(
    plan: TransactionPlan,
    broadcast: Callable[[SignableStep], Awaitable[str]],
) -> List[str]:
    """Broadcast each step in order, awaiting confirmation before the next.

    ``broadcast`` signs, submits and waits for the step, returning its hash.
    """
    if plan.requires_out_of_band:
        raise ValueError("This transfer has no signable transaction; show the QR code instead")
    tx_hashes: List[str] = []
    for step in plan.steps:
        tx_hashes.append(await broadcast(step))
    return tx_hashes
