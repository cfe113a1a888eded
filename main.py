"""
MetaNode Swap - Pool Setup Calculator

Консольный калькулятор для создания пула:
- Tick spacing по fee tier
- Диапазон тиков вокруг начальной цены
- sqrtPriceX96 для инициализации пула
"""

import logging

from metaswap.math.ticks import (
    InvalidArgument,
    calculate_tick_range,
    get_tick_spacing,
    price_to_sqrt_price_x96,
    price_to_tick,
    validate_tick_range,
)
from metaswap.utils import format_price
from config import DEFAULT_FEE_TIER, DEFAULT_RANGE_PERCENT, FEE_TIERS, PRESET_RANGES

logger = logging.getLogger(__name__)


def describe_pool_setup(price: float, fee: int, range_percent: float) -> str:
    """
    Текстовое описание параметров пула.

    Args:
        price: Начальная цена (token1 за 1 token0)
        fee: Fee tier (500, 3000, 10000)
        range_percent: Ширина диапазона в % от цены

    Returns:
        Многострочный текст для вывода в консоль

    Raises:
        InvalidArgument: price <= 0 или range_percent <= 0
    """
    tick_spacing = get_tick_spacing(fee)
    tick_range = calculate_tick_range(price, range_percent, tick_spacing)
    error = validate_tick_range(tick_range.tick_lower, tick_range.tick_upper, tick_spacing)
    fee_label = FEE_TIERS.get(fee, f"{fee / 10000:.2f}%")

    lines = [
        f"Fee tier:      {fee_label} ({fee})",
        f"Tick spacing:  {tick_spacing}",
        f"Current tick:  {price_to_tick(price)}",
        f"Tick range:    [{tick_range.tick_lower}, {tick_range.tick_upper}]",
        f"Price range:   {format_price(tick_range.min_price)} - {format_price(tick_range.max_price)}",
        f"sqrtPriceX96:  {price_to_sqrt_price_x96(price)}",
    ]
    if error is None:
        lines.append("Range:         OK")
    else:
        lines.append(f"Range:         INVALID ({error.message(tick_spacing)})")

    return "\n".join(lines)


def _ask_float(prompt: str, default: float = None) -> float:
    while True:
        raw = input(prompt).strip()
        if not raw and default is not None:
            return default
        try:
            value = float(raw)
        except ValueError:
            print("Введите число")
            continue
        if value > 0:
            return value
        print("Значение должно быть > 0")


def interactive_calculator():
    """Интерактивный расчёт параметров пула."""
    print("\n" + "=" * 70)
    print("POOL SETUP CALCULATOR")
    print("=" * 70)

    price = _ask_float("\nНачальная цена (token1 за 1 token0): ")

    print("\nFee tier пула:")
    fees = list(FEE_TIERS)
    for i, fee in enumerate(fees, 1):
        print(f"{i}. {FEE_TIERS[fee]} ({fee})")
    default_choice = str(fees.index(DEFAULT_FEE_TIER) + 1)
    fee_choice = input(f"Выбор (1-{len(fees)}) [{default_choice}]: ").strip() or default_choice
    try:
        fee = fees[int(fee_choice) - 1]
    except (ValueError, IndexError):
        fee = DEFAULT_FEE_TIER

    presets = ", ".join(f"{name} ±{pct}%" for name, pct in PRESET_RANGES.items())
    print(f"\nПресеты диапазона: {presets}")
    range_percent = _ask_float(
        f"Диапазон ±% [{DEFAULT_RANGE_PERCENT}]: ",
        default=DEFAULT_RANGE_PERCENT
    )

    print("\n" + "=" * 70)
    print("РЕЗУЛЬТАТ")
    print("=" * 70)
    try:
        print(describe_pool_setup(price, fee, range_percent))
    except InvalidArgument as e:
        logger.error(f"Invalid input: {e}")
        print(f"Ошибка: {e}")

    again = input("\nПересчитать с другими параметрами? (y/n): ")
    if again.lower() == "y":
        interactive_calculator()


def main():
    """Главная функция."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s'
    )

    print("""
    MetaNode Swap - Pool Setup Calculator
    """)

    try:
        interactive_calculator()
    except (KeyboardInterrupt, EOFError):
        print("\nВыход")


if __name__ == "__main__":
    main()
