"""
Display helpers for quote values.

Presentation rounding lives here so the engine never feeds a rounded
value back into a later calculation.
"""
import math
from decimal import Decimal, ROUND_HALF_UP, localcontext


def round_half_up(value: float, places: int) -> float:
    """Round to `places` decimals, halves away from zero."""
    if not math.isfinite(value):
        return value
    d = Decimal(repr(value))
    quantum = Decimal(1).scaleb(-places)
    # Default 28-digit precision can't hold the quantized result of large values
    with localcontext() as ctx:
        ctx.prec = max(28, d.adjusted() + places + 2)
        return float(d.quantize(quantum, rounding=ROUND_HALF_UP))


def format_currency(amount: float, currency: str = "PLN") -> str:
    """Format an amount with two decimals and a currency suffix, e.g. '2360.00 PLN'."""
    return f"{round_half_up(amount, 2):.2f} {currency}"


def format_duration(hours: float) -> str:
    """
    Format a print time in human-readable form.

    Under an hour renders minutes, under a day renders hours to one
    decimal, anything longer renders whole days plus remaining hours.
    """
    if not math.isfinite(hours) or hours < 0:
        raise ValueError(f"Duration must be a non-negative number of hours, got {hours!r}")

    if hours < 1:
        return f"{int(round_half_up(hours * 60, 0))} min"
    if hours < 24:
        return f"{round_half_up(hours, 1):.1f} hours"

    days = int(hours // 24)
    remaining = round_half_up(hours % 24, 1)
    if remaining >= 24:
        days += 1
        remaining = 0.0
    return f"{days}d {remaining:.1f}h"
