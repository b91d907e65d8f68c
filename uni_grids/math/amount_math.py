"""
Amount Math - raw <-> decimal token amounts

A raw amount is an integer in the token's smallest unit (wei for 18
decimals). Decimal amounts are `decimal.Decimal` values built exactly from
the raw integer, so converting back never overstates a balance.
"""

import math
from decimal import Context, Decimal, InvalidOperation, ROUND_DOWN, ROUND_FLOOR
from typing import Union

from ..constants import DEFAULT_TOKEN_DECIMALS

Number = Union[Decimal, int, float, str]


def from_raw_token_amount(amount: int, decimals: int = DEFAULT_TOKEN_DECIMALS) -> Decimal:
    """Raw integer amount -> human decimal amount

    amount / 10^decimals, exact. The result carries at most `decimals`
    fractional digits.

    Args:
        amount: raw amount (>= 0)
        decimals: token decimals

    Returns:
        Decimal amount

    Example:
        >>> from_raw_token_amount(1500000, 6)
        Decimal('1.500000')
    """
    _check_decimals(decimals)
    amount = int(amount)
    if amount < 0:
        raise ValueError(f"Token amount must be non-negative: {amount}")

    # String construction is exact regardless of the context precision
    return Decimal(f"{amount}E-{decimals}")


def to_raw_token_amount(amount: Number, decimals: int = DEFAULT_TOKEN_DECIMALS) -> int:
    """Human decimal amount -> raw integer amount

    amount * 10^decimals, floored so the raw amount never exceeds the
    amount the user entered. Floats are read through their shortest repr
    (1.1 -> "1.1"), not their binary expansion.

    Args:
        amount: Decimal, int, float or numeric string (>= 0)
        decimals: token decimals

    Returns:
        raw amount

    Raises:
        ValueError: negative, NaN, infinite or non-numeric amount

    Example:
        >>> to_raw_token_amount(1.5, 6)
        1500000
    """
    _check_decimals(decimals)
    value = _to_decimal(amount)

    if not value.is_finite():
        raise ValueError(f"Token amount must be finite: {amount}")
    if value < 0:
        raise ValueError(f"Token amount must be non-negative: {amount}")

    scaled = value.scaleb(decimals, context=_exact_context(value, decimals))
    return int(scaled.to_integral_value(rounding=ROUND_FLOOR))


def truncate_amount(amount: Number, places: int) -> Decimal:
    """Cut an amount to `places` fractional digits, rounding toward zero

    For display only; never rounds a balance up.
    """
    if places < 0:
        raise ValueError(f"places must be non-negative: {places}")
    value = _to_decimal(amount)
    if not value.is_finite():
        raise ValueError(f"Token amount must be finite: {amount}")
    quantum = Decimal(1).scaleb(-places)
    return value.quantize(quantum, rounding=ROUND_DOWN, context=_exact_context(value, places))


def _to_decimal(amount: Number) -> Decimal:
    if isinstance(amount, Decimal):
        return amount
    if isinstance(amount, bool):
        raise ValueError(f"Not a token amount: {amount!r}")
    if isinstance(amount, int):
        return Decimal(amount)
    if isinstance(amount, float):
        if not math.isfinite(amount):
            raise ValueError(f"Token amount must be finite: {amount}")
        return Decimal(repr(amount))
    try:
        return Decimal(str(amount).strip())
    except InvalidOperation as e:
        raise ValueError(f"Not a token amount: {amount!r}") from e


def _exact_context(value: Decimal, places: int) -> Context:
    # Enough digits that scaling or quantizing never rounds
    digits = len(value.as_tuple().digits) + abs(value.as_tuple().exponent) + places + 2
    return Context(prec=max(digits, 28))


def _check_decimals(decimals: int) -> None:
    if decimals < 0:
        raise ValueError(f"Token decimals must be non-negative: {decimals}")
