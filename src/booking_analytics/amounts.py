"""Monetary coercion and rounding helpers.

Fare fields arrive from the document database as numbers, numeric strings,
empty strings or nulls. Everything here is total: no input raises.
"""

import math
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any

_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_CENT = Decimal("0.01")


def parse_amount(value: Any) -> float:
    """Coerce a raw fare value to a float, yielding 0.0 when unparsable.

    Strings contribute their leading decimal literal, so "150.5 PKR" is 150.5.
    NaN and infinities count as unparsable.
    """
    if value is None or isinstance(value, bool):
        return 0.0

    if isinstance(value, str):
        match = _LEADING_NUMBER.match(value)
        if not match:
            return 0.0
        value = match.group(1)
    elif not isinstance(value, int | float):
        return 0.0

    try:
        number = float(value)
    except (OverflowError, ValueError):
        return 0.0

    if not math.isfinite(number):
        return 0.0
    return number


def is_truthy(value: Any) -> bool:
    """Truthiness as the dashboard's `a || b` fallbacks see it (NaN is falsy)."""
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)


def first_truthy(*values: Any) -> Any:
    """Return the first truthy value, or the last one when none is."""
    for value in values:
        if is_truthy(value):
            return value
    return values[-1] if values else None


def first_present(*values: Any) -> Any:
    """Nullish coalescing: return the first value that is not None."""
    for value in values:
        if value is not None:
            return value
    return None


def round_money(value: float) -> float:
    """Round to cents, half-up (half away from zero for negatives).

    Values that cannot be quantized (NaN, infinities) come back unchanged.
    """
    amount = Decimal(repr(float(value)))
    if not amount.is_finite():
        return float(value)
    with localcontext() as ctx:
        # Enough digits to keep every integer digit plus two decimals
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        try:
            return float(amount.quantize(_CENT, rounding=ROUND_HALF_UP))
        except InvalidOperation:
            return float(value)
