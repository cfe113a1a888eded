"""
Tests for the console pool setup calculator (main.py).
"""

import pytest
from unittest.mock import patch

from main import describe_pool_setup, interactive_calculator
from metaswap.math.ticks import InvalidArgument


class TestDescribePoolSetup:

    def test_price_one_default_fee(self):
        text = describe_pool_setup(1.0, 3000, 10)
        assert "Tick spacing:  60" in text
        assert "Current tick:  0" in text
        assert "Tick range:    [-1080, 960]" in text
        assert f"sqrtPriceX96:  {2 ** 96}" in text
        assert "Range:         OK" in text

    def test_fee_label(self):
        assert "0.05% (500)" in describe_pool_setup(2.0, 500, 5)

    def test_hundred_percent_reports_unaligned_lower_tick(self):
        text = describe_pool_setup(1.0, 3000, 100)
        assert "INVALID (Ticks must be multiples of 60)" in text

    def test_invalid_price_raises(self):
        with pytest.raises(InvalidArgument):
            describe_pool_setup(0, 3000, 10)


class TestInteractiveCalculator:

    def test_prompts_and_prints(self, capsys):
        # price, fee choice (3 -> 1.00%), range, no repeat
        answers = iter(["abc", "1", "3", "", "n"])
        with patch("builtins.input", lambda _: next(answers)):
            interactive_calculator()

        out = capsys.readouterr().out
        assert "Введите число" in out
        assert "Tick spacing:  200" in out
        assert "1.00% (10000)" in out
