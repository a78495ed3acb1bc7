"""
Dynamic pricing rules.

final = flight base x class multiplier x time x demand x route x day x seasonal,
rounded half-up to the smallest currency unit once, at the end. Every function
here is pure: the same flight snapshot, time and occupancy give the same price.
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from flight_booking.service.inventory.domain.class_availability import ClassAvailability
from flight_booking.service.inventory.domain.flight_entity import Flight
from flight_booking.service.pricing.domain.price_quote import PriceMultipliers, PriceQuote
from flight_booking.service.pricing.domain.route_pricing import RoutePricing, SeasonalRange
from flight_booking.service.shared_kernel.domain.enum import SeatClass


ONE = Decimal('1')
MAX_ROUTE_MULTIPLIER = Decimal('2')

# (hours until departure <= threshold, multiplier), checked in order
TIME_STEPS = (
    (6, Decimal('1.8')),
    (24, Decimal('1.5')),
    (72, Decimal('1.3')),
    (168, Decimal('1.1')),
)

# (occupancy percent >= threshold, multiplier), checked in order
DEMAND_STEPS = (
    (90, Decimal('2.0')),
    (80, Decimal('1.7')),
    (70, Decimal('1.4')),
    (60, Decimal('1.2')),
    (50, Decimal('1.1')),
)

# datetime.weekday(): Monday is 0
DAY_MULTIPLIERS = {
    4: Decimal('1.1'),
    5: Decimal('1.2'),
    6: Decimal('1.2'),
}


def class_base_price(base_price: int, seat_class: SeatClass) -> Decimal:
    return Decimal(base_price) * seat_class.price_multiplier


def time_multiplier(departure_time: datetime, now: datetime) -> Decimal:
    seconds = (departure_time - now).total_seconds()
    if seconds < 0:
        return ONE  # departed
    hours = int(seconds // 3600)
    for threshold, multiplier in TIME_STEPS:
        if hours <= threshold:
            return multiplier
    return ONE


def demand_multiplier(occupancy_rate: float) -> Decimal:
    for threshold, multiplier in DEMAND_STEPS:
        if occupancy_rate >= threshold:
            return multiplier
    return ONE


def route_multiplier(route_pricing: RoutePricing | None) -> Decimal:
    if route_pricing is None:
        return ONE
    return min(route_pricing.popularity, MAX_ROUTE_MULTIPLIER)


def day_multiplier(departure_time: datetime) -> Decimal:
    return DAY_MULTIPLIERS.get(departure_time.weekday(), ONE)


def is_date_in_range(month_day: str, start: str, end: str) -> bool:
    """MM-DD strings compare correctly as text."""
    if start > end:
        return month_day >= start or month_day <= end
    return start <= month_day <= end


def seasonal_multiplier(
    route_pricing: RoutePricing | None, now: datetime
) -> tuple[Decimal, SeasonalRange | None]:
    if route_pricing is None:
        return ONE, None
    today = now.strftime('%m-%d')
    for seasonal_range in route_pricing.seasonal_ranges:
        if is_date_in_range(today, seasonal_range.start, seasonal_range.end):
            return seasonal_range.multiplier, seasonal_range
    return ONE, None


def round_to_minor_unit(amount: Decimal) -> int:
    return int(amount.quantize(ONE, rounding=ROUND_HALF_UP))


def quote_price(
    *,
    flight: Flight,
    seat_class: SeatClass,
    availability: ClassAvailability,
    route_pricing: RoutePricing | None,
    now: datetime,
) -> PriceQuote:
    base = class_base_price(flight.base_price, seat_class)
    seasonal, _ = seasonal_multiplier(route_pricing, now)
    multipliers = PriceMultipliers(
        time=time_multiplier(flight.departure_time, now),
        demand=demand_multiplier(availability.occupancy_rate),
        route=route_multiplier(route_pricing),
        day=day_multiplier(flight.departure_time),
        seasonal=seasonal,
    )
    return PriceQuote(
        flight_id=flight.id,
        seat_class=seat_class,
        base_price=base,
        final_price=round_to_minor_unit(base * multipliers.product),
        multipliers=multipliers,
        occupancy_rate=availability.occupancy_rate,
        computed_at=now,
    )
