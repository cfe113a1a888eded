"""
Tick / Price / sqrtPriceX96 Mathematics

Единственная реализация ценовой математики пула. Все остальные модули
(pool_manager, position_manager, swap_router, main) импортируют её отсюда.

Основные формулы:
- price(i) = 1.0001^i
- i = round(ln(price) / ln(1.0001))
- sqrtPriceX96 = floor(sqrt(price) * 2^96)

Tick spacing по fee tier:
- 0.05% (500)   -> spacing 10
- 0.30% (3000)  -> spacing 60
- 1.00% (10000) -> spacing 200

Boundary policy: price_to_tick, round_tick_to_spacing and
price_to_sqrt_price_x96 saturate at the int24 / uint160 limits instead of
raising. tick_to_price never clamps.
"""

import math
from dataclasses import dataclass
from decimal import Context, Decimal
from enum import Enum
from typing import Optional, Tuple, Union

# Константы
Q96 = 2 ** 96
MIN_TICK = -887272
MAX_TICK = 887272
MIN_SQRT_RATIO = 4295128739
MAX_SQRT_RATIO = 1461446703485210103287273052203988822378723970342

# Swap limits must be strictly inside the ratio bounds
MIN_SQRT_PRICE_LIMIT = MIN_SQRT_RATIO + 1
MAX_SQRT_PRICE_LIMIT = MAX_SQRT_RATIO - 1

# Fee tier -> tick spacing
FEE_TO_TICK_SPACING = {
    500: 10,     # 0.05%
    3000: 60,    # 0.30%
    10000: 200,  # 1.00%
}
DEFAULT_TICK_SPACING = 60

TICK_BASE = 1.0001
_LOG_TICK_BASE = math.log(TICK_BASE)

# 80 significant digits cover the whole uint160 range with fractional room.
# Private context: the global decimal context is left alone.
_SQRT_CONTEXT = Context(prec=80)

PriceLike = Union[float, int, Decimal]


class InvalidArgument(ValueError):
    """Argument outside the mathematical domain of a conversion."""


class TickRangeError(Enum):
    """Reasons a (tick_lower, tick_upper) pair is unusable for a pool."""
    LOWER_NOT_BELOW_UPPER = "lower_not_below_upper"
    OUT_OF_BOUNDS = "out_of_bounds"
    NOT_ALIGNED_TO_SPACING = "not_aligned_to_spacing"

    def message(self, tick_spacing: int) -> str:
        """User-facing text for this error."""
        if self is TickRangeError.LOWER_NOT_BELOW_UPPER:
            return "Lower tick must be less than upper tick"
        if self is TickRangeError.OUT_OF_BOUNDS:
            return "Tick out of valid range"
        return f"Ticks must be multiples of {tick_spacing}"


def _round_half_away(value: float) -> int:
    """round() with half-away-from-zero semantics (Python's round() is banker's)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _clamp_tick(tick: int) -> int:
    return max(MIN_TICK, min(MAX_TICK, tick))


def price_to_tick(price: PriceLike) -> int:
    """
    Конвертация цены в тик.

    tick = round(ln(price) / ln(1.0001)), rounding half away from zero.

    Prices whose tick falls outside [MIN_TICK, MAX_TICK] saturate to the
    boundary tick rather than raising: the result always fits int24.

    Args:
        price: Цена token1/token0 (float, int or Decimal)

    Returns:
        Tick (целое число)

    Raises:
        InvalidArgument: price <= 0 or NaN

    Example:
        >>> price_to_tick(1.0001)
        1
        >>> price_to_tick(1e300)
        887272
    """
    if isinstance(price, Decimal) and price.is_nan():
        raise InvalidArgument("Price must be positive")
    if not price > 0:
        raise InvalidArgument("Price must be positive")

    if isinstance(price, Decimal):
        # Decimal range exceeds float: 1e-400 would become 0.0 in math.log
        log_price = float(price.ln(_SQRT_CONTEXT))
    else:
        log_price = math.log(price)
    raw_tick = log_price / _LOG_TICK_BASE

    # Clamp before rounding so that inf never reaches math.floor
    raw_tick = max(float(MIN_TICK), min(float(MAX_TICK), raw_tick))
    return _round_half_away(raw_tick)


def tick_to_price(tick: int) -> float:
    """
    Конвертация тика в цену: price = 1.0001^tick.

    No clamping: any integer tick is accepted and the exact exponential is
    returned. A tick so large that the float overflows yields inf; a tick
    small enough to underflow yields 0.0.
    """
    try:
        return TICK_BASE ** tick
    except OverflowError:
        return math.inf


# Smallest price representable on the tick ladder
MIN_PRICE = tick_to_price(MIN_TICK)
MAX_PRICE = tick_to_price(MAX_TICK)


def _to_decimal(price: PriceLike) -> Decimal:
    if isinstance(price, Decimal):
        return price
    # str() keeps the human-entered value (0.1 stays 0.1, not its binary expansion)
    return Decimal(str(price))


def price_to_sqrt_price_x96(price: PriceLike) -> int:
    """
    Конвертация цены в sqrtPriceX96.

    sqrtPriceX96 = floor(sqrt(price) * 2^96)

    The square root is taken in Decimal arithmetic, so the result is exact to
    the integer across the full [MIN_SQRT_RATIO, MAX_SQRT_RATIO] range (a
    plain float would already be off by thousands of units at price=1).
    Results outside that range saturate to the nearest bound.

    Args:
        price: Цена token1/token0 (float, int or Decimal)

    Returns:
        sqrtPriceX96 (целое число, fits uint160)

    Raises:
        InvalidArgument: price <= 0 or NaN
    """
    value = _to_decimal(price)
    if value.is_nan() or value <= 0:
        raise InvalidArgument("Price must be positive")

    if value.is_infinite():
        return MAX_SQRT_RATIO

    root = _SQRT_CONTEXT.sqrt(value)
    # int() truncates toward zero == floor for positive values
    sqrt_price_x96 = int(_SQRT_CONTEXT.multiply(root, Decimal(Q96)))

    return max(MIN_SQRT_RATIO, min(MAX_SQRT_RATIO, sqrt_price_x96))


def sqrt_price_x96_to_price(sqrt_price_x96: int) -> float:
    """
    Конвертация sqrtPriceX96 в цену.

    price = (sqrtPriceX96 / 2^96)^2

    A zero sqrtPriceX96 marks an uninitialised pool and maps to 0.0.

    Raises:
        InvalidArgument: negative sqrtPriceX96
    """
    if sqrt_price_x96 < 0:
        raise InvalidArgument("sqrtPriceX96 must be non-negative")
    if sqrt_price_x96 == 0:
        return 0.0

    sqrt_price = sqrt_price_x96 / Q96
    return sqrt_price * sqrt_price


def tick_to_sqrt_price_x96(tick: int) -> int:
    """sqrtPriceX96 for a tick, via tick_to_price (clamped like any price)."""
    return price_to_sqrt_price_x96(tick_to_price(tick))


def sqrt_price_x96_to_tick(sqrt_price_x96: int) -> int:
    """Nearest tick for a sqrtPriceX96. Zero (uninitialised) is rejected."""
    return price_to_tick(sqrt_price_x96_to_price(sqrt_price_x96))


def sqrt_price_x96_to_human_price(
    sqrt_price_x96: int,
    decimals0: int,
    decimals1: int
) -> float:
    """
    Цена в человеческих единицах с учётом decimals токенов.

    Raw pool price is token1 base units per token0 base unit; the human
    price multiplies it by 10^(decimals0 - decimals1).
    """
    return sqrt_price_x96_to_price(sqrt_price_x96) * 10 ** (decimals0 - decimals1)


def human_price_to_sqrt_price_x96(
    price: PriceLike,
    decimals0: int,
    decimals1: int
) -> int:
    """Inverse of sqrt_price_x96_to_human_price; scaling is done in Decimal."""
    raw_price = _to_decimal(price).scaleb(decimals1 - decimals0, context=_SQRT_CONTEXT)
    return price_to_sqrt_price_x96(raw_price)


def get_tick_spacing(fee: int, strict: bool = False) -> int:
    """
    Получение tick_spacing по fee tier.

    Unknown fee tiers fall back to DEFAULT_TICK_SPACING (the 0.30% spacing),
    which is what every existing pool-creation screen relies on. Pass
    strict=True to get an error instead.

    Args:
        fee: Fee в сотых долях базисного пункта (500 = 0.05%, 3000 = 0.3%)
        strict: Raise for fee tiers not in FEE_TO_TICK_SPACING

    Returns:
        tick_spacing

    Raises:
        InvalidArgument: unknown fee with strict=True
    """
    if fee in FEE_TO_TICK_SPACING:
        return FEE_TO_TICK_SPACING[fee]

    if strict:
        valid_fees = sorted(FEE_TO_TICK_SPACING.keys())
        raise InvalidArgument(f"Unknown fee tier: {fee}. Valid fee tiers are: {valid_fees}")

    return DEFAULT_TICK_SPACING


def round_tick_to_spacing(tick: int, tick_spacing: int) -> int:
    """
    Округление тика до ближайшего кратного tick_spacing.

    Halfway ticks round away from zero (15 -> 20 and -15 -> -20 for
    spacing 10). The result is clamped into [MIN_TICK, MAX_TICK]; note
    that the boundary ticks themselves are not multiples of most spacings.
    """
    if tick_spacing <= 0:
        raise InvalidArgument("Tick spacing must be positive")

    # Integer arithmetic: tick / spacing in float would misround large ticks
    quotient, remainder = divmod(abs(tick), tick_spacing)
    if 2 * remainder >= tick_spacing:
        quotient += 1

    rounded = quotient * tick_spacing
    if tick < 0:
        rounded = -rounded

    return _clamp_tick(rounded)


@dataclass(frozen=True)
class TickRange:
    """Position bounds. Price bounds are always derived from the ticks."""
    tick_lower: int
    tick_upper: int

    @property
    def min_price(self) -> float:
        return tick_to_price(self.tick_lower)

    @property
    def max_price(self) -> float:
        return tick_to_price(self.tick_upper)

    def validate(self, tick_spacing: int) -> Optional[TickRangeError]:
        return validate_tick_range(self.tick_lower, self.tick_upper, tick_spacing)


def calculate_tick_range(
    current_price: float,
    range_percent: float,
    tick_spacing: int
) -> TickRange:
    """
    Расчёт диапазона тиков вокруг текущей цены.

    min_price = current_price * (1 - range_percent / 100)
    max_price = current_price * (1 + range_percent / 100)

    Each bound goes through price_to_tick and round_tick_to_spacing; the
    returned TickRange reports min_price / max_price from the rounded ticks,
    i.e. the prices that will actually be used on-chain.

    For range_percent >= 100 the lower bound would be zero or negative, so
    it is raised to MIN_PRICE (the lowest price on the tick ladder).

    Args:
        current_price: Текущая цена token1/token0
        range_percent: Half-width of the band in percent (10 means ±10%)
        tick_spacing: Шаг тиков пула

    Returns:
        TickRange

    Example:
        >>> r = calculate_tick_range(1.0, 10, 60)
        >>> r.tick_lower, r.tick_upper
        (-1080, 960)
    """
    if not current_price > 0:
        raise InvalidArgument("Price must be positive")
    if not range_percent > 0:
        raise InvalidArgument("Range percent must be positive")

    min_price = current_price * (1 - range_percent / 100)
    max_price = current_price * (1 + range_percent / 100)
    min_price = max(min_price, MIN_PRICE)

    tick_lower = round_tick_to_spacing(price_to_tick(min_price), tick_spacing)
    tick_upper = round_tick_to_spacing(price_to_tick(max_price), tick_spacing)

    return TickRange(tick_lower=tick_lower, tick_upper=tick_upper)


def validate_tick_range(
    tick_lower: int,
    tick_upper: int,
    tick_spacing: int
) -> Optional[TickRangeError]:
    """
    Проверка диапазона тиков.

    Checks, in order, stopping at the first failure:
        1. tick_lower < tick_upper
        2. tick_lower >= MIN_TICK and tick_upper <= MAX_TICK
        3. both ticks are multiples of tick_spacing

    Returns:
        None if the range is usable, otherwise the first TickRangeError hit.
        Range problems are returned, not raised.

    Raises:
        InvalidArgument: tick_spacing <= 0
    """
    if tick_spacing <= 0:
        raise InvalidArgument("Tick spacing must be positive")

    if tick_lower >= tick_upper:
        return TickRangeError.LOWER_NOT_BELOW_UPPER

    if tick_lower < MIN_TICK or tick_upper > MAX_TICK:
        return TickRangeError.OUT_OF_BOUNDS

    if tick_lower % tick_spacing != 0 or tick_upper % tick_spacing != 0:
        return TickRangeError.NOT_ALIGNED_TO_SPACING

    return None


def get_price_range_from_ticks(tick_lower: int, tick_upper: int) -> Tuple[float, float]:
    """
    Получение диапазона цен для диапазона тиков.

    Returns:
        (min_price, max_price)
    """
    return tick_to_price(tick_lower), tick_to_price(tick_upper)


def get_sqrt_price_limit(zero_for_one: bool) -> int:
    """Loosest sqrtPriceLimitX96 the router accepts for the swap direction."""
    return MIN_SQRT_PRICE_LIMIT if zero_for_one else MAX_SQRT_PRICE_LIMIT
