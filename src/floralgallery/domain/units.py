"""
Conversion between ledger base units (wei) and display units (ETH).
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, localcontext
from typing import Union

from floralgallery.core.errors import ValidationError

DECIMALS = 18
_SCALE = Decimal(10) ** DECIMALS

Amount = Union[Decimal, int, str]


def to_display_units(base_units: int) -> Decimal:
    if base_units < 0:
        raise ValidationError(f"Amount cannot be negative: {base_units}")
    with localcontext() as ctx:
        ctx.prec = 80
        value = (Decimal(base_units) / _SCALE).normalize()
        # normalize() turns 100 into 1E+2
        if value == value.to_integral_value():
            value = value.quantize(Decimal(1))
        return value


def to_base_units(amount: Amount) -> int:
    """Exact conversion; amounts finer than one base unit are rejected."""
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount).strip())
    except InvalidOperation:
        raise ValidationError(f"Not a valid amount: {amount!r}") from None
    if not value.is_finite():
        raise ValidationError(f"Not a valid amount: {amount!r}")

    with localcontext() as ctx:
        ctx.prec = 80
        scaled = value * _SCALE
        if scaled != scaled.to_integral_value():
            raise ValidationError(f"Amount has more than {DECIMALS} decimal places: {amount}")
        return int(scaled)
