"""
Display and amount helpers shared by the contract wrappers and the calculator.

Includes:
- Token amount parsing / formatting (base units <-> decimal strings)
- Price and USD formatting
- Slippage and deadline calculation
- Token ordering and address checks
"""

import logging
import math
import time
from decimal import Context, Decimal, InvalidOperation
from typing import Tuple, Union

from web3 import Web3

logger = logging.getLogger(__name__)

MAX_DECIMALS_DISPLAY = 6

# Wide enough for uint256 amounts scaled by 18 decimals
_AMOUNT_CONTEXT = Context(prec=100)


def format_price(price: float, decimals: int = 6) -> str:
    """
    Форматирование цены для отображения.

    <1 keeps `decimals` places, <1000 keeps 4, larger values are
    abbreviated with K / M.
    """
    if price == 0:
        return "0"
    if price < 0.000001:
        return "<0.000001"
    if price < 1:
        return f"{price:.{decimals}f}"
    if price < 1000:
        return f"{price:.4f}"
    if price < 1000000:
        return f"{price / 1000:.2f}K"
    return f"{price / 1000000:.2f}M"


def _strip_zeros(text: str) -> str:
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_token_amount(
    amount: Union[int, str],
    decimals: int = 18,
    max_decimals: int = MAX_DECIMALS_DISPLAY
) -> str:
    """
    Форматирование количества токена (base units -> строка).

    Args:
        amount: Количество в wei / smallest unit
        decimals: Decimals токена
        max_decimals: Максимум знаков после запятой

    Returns:
        "1,234.5" style string; dust below 1e-6 in scientific notation

    Example:
        >>> format_token_amount(1234500000000000000000)
        '1,234.5'
    """
    value = Decimal(int(amount)).scaleb(-decimals, context=_AMOUNT_CONTEXT)

    if value == 0:
        return "0"

    if abs(value) < Decimal("0.000001"):
        return f"{float(value):.4e}"

    return _strip_zeros(f"{value:,.{max_decimals}f}")


def parse_token_amount(amount: str, decimals: int = 18) -> int:
    """
    Парсинг пользовательского ввода в base units.

    Empty input means zero. Input that is not a number, or that carries more
    fractional digits than the token supports, also yields zero so a form
    field never raises mid-typing.

    Example:
        >>> parse_token_amount("1.5", 18)
        1500000000000000000
    """
    text = (amount or "0").strip()

    try:
        value = Decimal(text)
    except InvalidOperation:
        logger.debug(f"Cannot parse token amount: {amount!r}")
        return 0

    if not value.is_finite():
        logger.debug(f"Non-finite token amount: {amount!r}")
        return 0

    scaled = value.scaleb(decimals, context=_AMOUNT_CONTEXT)
    if scaled != scaled.to_integral_value():
        logger.debug(f"Too many decimals for {decimals}-decimal token: {amount!r}")
        return 0

    return int(scaled)


def calculate_slippage(
    amount: int,
    slippage_percent: float,
    is_minimum: bool = True
) -> int:
    """
    Применение slippage к сумме.

    slippage_percent is converted to whole basis points (0.5% -> 50 bps).

    Returns:
        amount - adjustment for a minimum bound, amount + adjustment for a maximum
    """
    slippage_bps = math.floor(slippage_percent * 100)
    adjustment = amount * slippage_bps // 10000

    return amount - adjustment if is_minimum else amount + adjustment


def calculate_deadline(minutes_from_now: float = 20) -> int:
    """Unix timestamp `minutes_from_now` minutes ahead."""
    return int(time.time()) + int(minutes_from_now * 60)


def shorten_address(address: str, chars: int = 4) -> str:
    if not address:
        return ""
    return f"{address[:chars + 2]}...{address[-chars:]}"


def format_usd(amount: float) -> str:
    """$1,234.56 style formatting."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def calculate_percentage(value: float, total: float) -> str:
    if total == 0:
        return "0"
    return f"{value / total * 100:.2f}"


def sort_tokens(token_a: str, token_b: str) -> Tuple[str, str]:
    """
    Сортировка токенов по адресу (token0 < token1).

    Comparison is case-insensitive; the input strings are returned unchanged.
    """
    if token_a.lower() < token_b.lower():
        return token_a, token_b
    return token_b, token_a


def is_zero_for_one(token_in: str, token_out: str) -> bool:
    """True when the swap sells token0 for token1."""
    return token_in.lower() < token_out.lower()


def is_valid_address(address: str) -> bool:
    """
    0x-prefixed 40-hex-digit address check.

    Case is not validated against the EIP-55 checksum, so addresses typed
    in any case are accepted.
    """
    if not isinstance(address, str) or len(address) != 42 or not address.startswith("0x"):
        return False
    return Web3.is_address(address.lower())
