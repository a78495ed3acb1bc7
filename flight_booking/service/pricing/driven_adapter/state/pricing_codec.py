from decimal import Decimal
from typing import Any

from flight_booking.service.inventory.domain.flight_entity import RouteKey
from flight_booking.service.pricing.domain.price_quote import PriceMultipliers, PriceQuote
from flight_booking.service.pricing.domain.route_pricing import RoutePricing, SeasonalRange
from flight_booking.service.shared_kernel.domain.enum import SeatClass
from flight_booking.service.shared_kernel.driven_adapter.json_codec import parse_datetime


def price_quote_from_dict(data: dict[str, Any]) -> PriceQuote:
    return PriceQuote(
        flight_id=data['flight_id'],
        seat_class=SeatClass(data['seat_class']),
        base_price=Decimal(data['base_price']),
        final_price=int(data['final_price']),
        multipliers=PriceMultipliers(
            **{name: Decimal(value) for name, value in data['multipliers'].items()}
        ),
        occupancy_rate=float(data['occupancy_rate']),
        computed_at=parse_datetime(data['computed_at']),  # type: ignore[arg-type]
    )


def route_pricing_from_dict(data: dict[str, Any]) -> RoutePricing:
    return RoutePricing(
        route=RouteKey(**data['route']),
        popularity=data['popularity'],
        seasonal_ranges=[SeasonalRange(**item) for item in data['seasonal_ranges']],
    )
