"""
Tests for metaswap.utils.

Форматирование сумм и цен, slippage, deadline, сортировка токенов.
"""

import pytest
from unittest.mock import patch

from metaswap.utils import (
    calculate_deadline,
    calculate_percentage,
    calculate_slippage,
    format_price,
    format_token_amount,
    format_usd,
    is_valid_address,
    is_zero_for_one,
    parse_token_amount,
    shorten_address,
    sort_tokens,
)


TOKEN_A = "0x1111111111111111111111111111111111111111"
TOKEN_B = "0x9999999999999999999999999999999999999999"
MN_TOKEN_A = "0x4798388e3adE569570Df626040F07DF71135C48E"
MN_TOKEN_B = "0x5A4eA3a013D42Cfd1B1609d19f6eA998EeE06D30"


# ============================================================
# format_price
# ============================================================

class TestFormatPrice:

    @pytest.mark.parametrize(
        "price, expected",
        [
            (0, "0"),
            (0.0000001, "<0.000001"),
            (0.5, "0.500000"),
            (0.000123, "0.000123"),
            (12.3456789, "12.3457"),
            (999.5, "999.5000"),
            (1500, "1.50K"),
            (2500000, "2.50M"),
        ],
        ids=["zero", "dust", "below-one", "small", "units", "hundreds", "thousands", "millions"],
    )
    def test_thresholds(self, price, expected):
        assert format_price(price) == expected

    def test_custom_decimals(self):
        assert format_price(0.5, decimals=2) == "0.50"


# ============================================================
# format_token_amount / parse_token_amount
# ============================================================

class TestFormatTokenAmount:

    def test_thousands_separator_and_trailing_zeros(self):
        assert format_token_amount(1234500000000000000000) == "1,234.5"

    def test_whole_number(self):
        assert format_token_amount(10 ** 18) == "1"

    def test_zero(self):
        assert format_token_amount(0) == "0"

    def test_six_decimals_token(self):
        assert format_token_amount(1_500_000, decimals=6) == "1.5"

    def test_max_decimals_truncates_display(self):
        assert format_token_amount(1_234_567_890_000_000_000, max_decimals=2) == "1.23"

    def test_dust_uses_scientific_notation(self):
        assert format_token_amount(1) == "1.0000e-18"

    def test_accepts_string_amount(self):
        assert format_token_amount("2000000000000000000") == "2"


class TestParseTokenAmount:

    @pytest.mark.parametrize(
        "text, decimals, expected",
        [
            ("1.5", 18, 1_500_000_000_000_000_000),
            ("100", 6, 100_000_000),
            ("0.000001", 6, 1),
            ("  2  ", 18, 2 * 10 ** 18),
            ("", 18, 0),
        ],
        ids=["fraction", "usdc", "smallest-unit", "whitespace", "empty"],
    )
    def test_valid(self, text, decimals, expected):
        assert parse_token_amount(text, decimals) == expected

    @pytest.mark.parametrize("text", ["abc", "1.2.3", "inf", "NaN"])
    def test_malformed_is_zero(self, text):
        assert parse_token_amount(text) == 0

    def test_too_many_decimals_is_zero(self):
        assert parse_token_amount("1.1234567", 6) == 0

    def test_none_is_zero(self):
        assert parse_token_amount(None) == 0

    def test_round_trip_with_format(self):
        assert format_token_amount(parse_token_amount("1234.5")) == "1,234.5"


# ============================================================
# slippage / deadline
# ============================================================

class TestSlippage:

    def test_minimum(self):
        assert calculate_slippage(1000, 0.5) == 995

    def test_maximum(self):
        assert calculate_slippage(1000, 0.5, is_minimum=False) == 1005

    def test_one_percent_of_one_token(self):
        assert calculate_slippage(10 ** 18, 1.0) == 99 * 10 ** 16

    def test_zero_slippage(self):
        assert calculate_slippage(12345, 0) == 12345

    def test_rounds_down_adjustment(self):
        # 0.5% of 199 = 0.995 -> 0
        assert calculate_slippage(199, 0.5) == 199

    def test_integer_math_for_large_amounts(self):
        amount = 2 ** 200
        assert calculate_slippage(amount, 0.5) == amount - amount * 50 // 10000


class TestDeadline:

    def test_default_twenty_minutes(self):
        with patch("metaswap.utils.time.time", return_value=1_700_000_000.7):
            assert calculate_deadline() == 1_700_000_000 + 1200

    def test_custom_minutes(self):
        with patch("metaswap.utils.time.time", return_value=1000):
            assert calculate_deadline(5) == 1300


# ============================================================
# Display helpers
# ============================================================

class TestDisplayHelpers:

    def test_shorten_address(self):
        assert shorten_address("0x1234567890123456789012345678901234567890") == "0x1234...7890"

    def test_shorten_address_custom_chars(self):
        assert shorten_address(MN_TOKEN_A, chars=6) == "0x479838...35C48E"

    def test_shorten_empty(self):
        assert shorten_address("") == ""

    @pytest.mark.parametrize(
        "amount, expected",
        [(1234.5, "$1,234.50"), (0, "$0.00"), (-1234.56, "-$1,234.56")],
    )
    def test_format_usd(self, amount, expected):
        assert format_usd(amount) == expected

    def test_calculate_percentage(self):
        assert calculate_percentage(1, 4) == "25.00"

    def test_calculate_percentage_zero_total(self):
        assert calculate_percentage(5, 0) == "0"


# ============================================================
# Token ordering / addresses
# ============================================================

class TestTokenOrdering:

    def test_sort_tokens_already_sorted(self):
        assert sort_tokens(TOKEN_A, TOKEN_B) == (TOKEN_A, TOKEN_B)

    def test_sort_tokens_swapped(self):
        assert sort_tokens(TOKEN_B, TOKEN_A) == (TOKEN_A, TOKEN_B)

    def test_sort_tokens_case_insensitive(self):
        # 0x47... < 0x5a... regardless of checksum casing
        assert sort_tokens(MN_TOKEN_B, MN_TOKEN_A.lower()) == (MN_TOKEN_A.lower(), MN_TOKEN_B)

    def test_is_zero_for_one(self):
        assert is_zero_for_one(TOKEN_A, TOKEN_B) is True
        assert is_zero_for_one(TOKEN_B, TOKEN_A) is False


class TestIsValidAddress:

    @pytest.mark.parametrize("address", [TOKEN_A, MN_TOKEN_A, MN_TOKEN_A.lower(), MN_TOKEN_A.upper().replace("0X", "0x")])
    def test_valid(self, address):
        assert is_valid_address(address) is True

    @pytest.mark.parametrize(
        "address",
        ["", "0x123", "1111111111111111111111111111111111111111", "0x" + "g" * 40, None, 123],
        ids=["empty", "short", "no-prefix", "non-hex", "none", "int"],
    )
    def test_invalid(self, address):
        assert is_valid_address(address) is False
