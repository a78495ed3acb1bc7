"""Seat Class Enum"""

from decimal import Decimal
from enum import StrEnum


class SeatClass(StrEnum):
    ECONOMY = 'economy'
    BUSINESS = 'business'
    FIRST = 'first'

    @property
    def price_multiplier(self) -> Decimal:
        return _CLASS_PRICE_MULTIPLIERS[self]


_CLASS_PRICE_MULTIPLIERS = {
    SeatClass.ECONOMY: Decimal('1'),
    SeatClass.BUSINESS: Decimal('2.5'),
    SeatClass.FIRST: Decimal('4'),
}
