"""Integer base-unit arithmetic helpers.

Amounts are always raw base-unit integers. ``Decimal`` is used only to parse
and render human-readable strings, never to compare or rank quotes.
"""

import re
from decimal import Decimal, InvalidOperation

from .models import BridgeCoin, BridgeQuote

_BASE_UNITS = re.compile(r"[0-9]+")
_HUMAN_AMOUNT = re.compile(r"[0-9]+(\.[0-9]+)?")


def parse_base_units(value: str) -> int:
    if not isinstance(value, str) or not _BASE_UNITS.fullmatch(value):
        raise ValueError(f"Amount {value!r} is not a base-unit integer string")
    return int(value)


def to_base_units(human_amount: str, decimals: int) -> int:
    """Convert ``"1.5"`` with 6 decimals into ``1500000`` exactly."""
    text = human_amount.strip()
    if not _HUMAN_AMOUNT.fullmatch(text):
        raise ValueError(f"Amount {human_amount!r} is not a non-negative decimal")
    whole, _, fraction = text.partition(".")
    fraction = fraction.rstrip("0")
    if len(fraction) > decimals:
        raise ValueError(
            f"Amount {human_amount!r} has more than {decimals} decimal places"
        )
    return int(whole) * 10**decimals + int(fraction.ljust(decimals, "0") or "0")


def format_base_units(amount: int, decimals: int) -> str:
    """Render base units for display, trimming trailing zeros."""
    if amount < 0:
        raise ValueError("Amount cannot be negative")
    if decimals == 0:
        return str(amount)
    whole, fraction = divmod(amount, 10**decimals)
    text = f"{whole}.{fraction:0{decimals}d}"
    return text.rstrip("0").rstrip(".")


def same_asset(a: BridgeCoin, b: BridgeCoin) -> bool:
    return a.source_denom == b.source_denom and a.decimals == b.decimals


def net_output(quote: BridgeQuote) -> int:
    """Expected output minus the transfer fee when the fee is paid in the output asset.

    A fee charged in another asset cannot be netted without a price, so the
    gross output is used in that case.
    """
    output = quote.expected_output.int_amount
    if same_asset(quote.transfer_fee, quote.expected_output):
        return output - quote.transfer_fee.int_amount
    return output


def apply_slippage(amount: int, slippage_percent: float | int | str) -> int:
    """Minimum amount received after ``slippage_percent`` slippage, rounded down."""
    try:
        slippage = Decimal(str(slippage_percent))
    except InvalidOperation as exc:
        raise ValueError(f"Invalid slippage {slippage_percent!r}") from exc
    if not slippage.is_finite() or slippage < 0 or slippage >= 100:
        raise ValueError("Slippage must be within [0, 100)")
    numerator, denominator = slippage.as_integer_ratio()
    return amount * (100 * denominator - numerator) // (100 * denominator)
