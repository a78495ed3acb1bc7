from datetime import datetime
from decimal import Decimal

import attrs

from flight_booking.service.shared_kernel.domain.enum import SeatClass


@attrs.define(frozen=True)
class PriceMultipliers:
    time: Decimal
    demand: Decimal
    route: Decimal
    day: Decimal
    seasonal: Decimal

    @property
    def product(self) -> Decimal:
        return self.time * self.demand * self.route * self.day * self.seasonal


@attrs.define(frozen=True)
class PriceQuote:
    flight_id: str
    seat_class: SeatClass
    base_price: Decimal  # flight base price x class multiplier, unrounded
    final_price: int  # smallest currency unit
    multipliers: PriceMultipliers
    occupancy_rate: float
    computed_at: datetime
