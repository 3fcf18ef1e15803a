"""Tests for base-unit amount helpers."""

import pytest

from stubs import make_quote
from xbridge.amounts import (
    apply_slippage,
    format_base_units,
    net_output,
    parse_base_units,
    to_base_units,
)


class TestParsing:
    def test_parse_base_units(self):
        assert parse_base_units("0") == 0
        assert parse_base_units("1000000000000000000000") == 10**21

    @pytest.mark.parametrize("value", ["", "1.0", "-5", "1e6", "12\n"])
    def test_parse_rejects_non_integers(self, value):
        with pytest.raises(ValueError):
            parse_base_units(value)

    def test_to_base_units(self):
        assert to_base_units("1.5", 6) == 1_500_000
        assert to_base_units("0.000000000000000001", 18) == 1
        assert to_base_units("42", 0) == 42
        assert to_base_units("2.50", 1) == 25

    def test_to_base_units_rejects_excess_precision(self):
        with pytest.raises(ValueError, match="more than 6 decimal places"):
            to_base_units("1.0000001", 6)

    def test_to_base_units_rejects_garbage(self):
        with pytest.raises(ValueError):
            to_base_units("-1", 6)
        with pytest.raises(ValueError):
            to_base_units("abc", 6)


class TestFormatting:
    def test_format_trims_trailing_zeros(self):
        assert format_base_units(1_500_000, 6) == "1.5"
        assert format_base_units(1_000_000, 6) == "1"
        assert format_base_units(1, 18) == "0.000000000000000001"
        assert format_base_units(7, 0) == "7"

    def test_format_rejects_negative(self):
        with pytest.raises(ValueError):
            format_base_units(-1, 6)


class TestQuoteArithmetic:
    def test_net_output_subtracts_fee_in_output_asset(self, quote_params):
        quote = make_quote(quote_params, "1000", fee_amount="25")
        assert net_output(quote) == 975

    def test_net_output_ignores_fee_in_other_asset(self, quote_params):
        quote = make_quote(quote_params, "1000", fee_amount="25")
        other_fee = quote.transfer_fee.model_copy(
            update={"source_denom": "uosmo", "denom": "uosmo"}
        )
        quote = quote.model_copy(update={"transfer_fee": other_fee})
        assert net_output(quote) == 1000

    def test_apply_slippage(self):
        assert apply_slippage(1000, 1) == 990
        assert apply_slippage(1000, 0.5) == 995
        assert apply_slippage(10**18, "0.3") == 997 * 10**15
        assert apply_slippage(999, 0) == 999

    def test_apply_slippage_rounds_down(self):
        assert apply_slippage(3, 50) == 1

    def test_apply_slippage_keeps_every_digit(self):
        assert apply_slippage(10**18, "0.0000001") == 10**18 - 10**9
        assert apply_slippage(10**10, "0.00000001") == 10**10 - 1

    def test_apply_slippage_bounds(self):
        with pytest.raises(ValueError):
            apply_slippage(1000, 100)
        with pytest.raises(ValueError):
            apply_slippage(1000, -1)
