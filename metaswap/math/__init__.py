from .ticks import (
    price_to_tick,
    tick_to_price,
    price_to_sqrt_price_x96,
    sqrt_price_x96_to_price,
    get_tick_spacing,
    round_tick_to_spacing,
    calculate_tick_range,
    validate_tick_range,
    get_price_range_from_ticks,
    InvalidArgument,
    TickRange,
    TickRangeError,
)
