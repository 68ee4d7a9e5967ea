"""Points-to-money conversion.

There is exactly one formula: money is proportional to the quantity of
bottles, ``quantity / bottles_per_unit * money_per_unit``. Two rounding
policies sit on top of it and agree on every whole-unit-aligned quantity:

* ``PROPORTIONAL`` keeps the fractional unit (quantized to 4 places). Used
  when crediting recycling submissions so that the money recorded for many
  small submissions adds up to the value of their total.
* ``WHOLE_UNITS`` drops the incomplete unit. Used for redemptions, which are
  always aligned, and for showing what a balance can currently be redeemed for.
"""

from __future__ import annotations

import enum
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Protocol, Union

from ..core.errors import InvalidQuantity

MONEY_QUANTUM = Decimal("0.0001")


class RateLike(Protocol):
    bottles_per_unit: int
    money_per_unit: Union[Decimal, int, float]


class RoundingPolicy(str, enum.Enum):
    """How an incomplete unit contributes to a money amount."""

    PROPORTIONAL = "PROPORTIONAL"
    WHOLE_UNITS = "WHOLE_UNITS"


def to_decimal(value: Union[Decimal, int, float, str]) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantity_to_money(
    quantity: int,
    rate: RateLike,
    policy: RoundingPolicy = RoundingPolicy.PROPORTIONAL,
) -> Decimal:
    """Return the money value of ``quantity`` bottles at ``rate``."""

    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 0:
        raise InvalidQuantity("Quantity must be a non-negative whole number.")

    money_per_unit = to_decimal(rate.money_per_unit)
    if quantity == 0:
        return Decimal("0")

    if policy is RoundingPolicy.WHOLE_UNITS:
        units = quantity // rate.bottles_per_unit
        return (units * money_per_unit).quantize(MONEY_QUANTUM)

    money = Decimal(quantity) * money_per_unit / Decimal(rate.bottles_per_unit)
    return money.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_EVEN)


def whole_units(quantity: int, rate: RateLike) -> int:
    """Number of complete units contained in ``quantity``."""

    return max(quantity, 0) // rate.bottles_per_unit

