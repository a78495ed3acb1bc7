from typing import Any

from flight_booking.service.inventory.domain.flight_entity import Flight, RouteKey
from flight_booking.service.shared_kernel.domain.enum import FlightStatus
from flight_booking.service.shared_kernel.driven_adapter.json_codec import parse_datetime


def flight_from_dict(data: dict[str, Any]) -> Flight:
    return Flight(
        id=data['id'],
        flight_number=data['flight_number'],
        route=RouteKey(**data['route']),
        departure_time=parse_datetime(data['departure_time']),  # type: ignore[arg-type]
        base_price=int(data['base_price']),
        status=FlightStatus(data['status']),
    )
