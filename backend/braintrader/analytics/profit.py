"""Profit calculation for new trade records."""

from datetime import date, datetime, time, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

from braintrader.schemas.journal import Direction

Number = Union[int, float, str, Decimal]

CONTRACT_MULTIPLIER = Decimal(100)  # units per lot
_CENTS = Decimal("0.01")


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps float literals like 0.1 exact
    return Decimal(str(value))


def calculate_profit(
    direction: Direction,
    entry_price: Number,
    exit_price: Number,
    size: Number,
    multiplier: Number = CONTRACT_MULTIPLIER,
) -> Decimal:
    """
    Profit of a closed trade, rounded to cents.

    LONG earns ``exit - entry``, SHORT earns ``entry - exit``; the move is
    scaled by lot size and the contract multiplier.
    """
    entry = to_decimal(entry_price)
    exit_ = to_decimal(exit_price)
    raw = exit_ - entry if Direction(direction) is Direction.LONG else entry - exit_
    profit = raw * to_decimal(size) * to_decimal(multiplier)
    return profit.quantize(_CENTS, rounding=ROUND_HALF_UP)


def recorded_at_for(occurred_on: date) -> int:
    """Milliseconds since epoch for midnight UTC of ``occurred_on``"""
    moment = datetime.combine(occurred_on, time.min, tzinfo=timezone.utc)
    return int(moment.timestamp() * 1000)
