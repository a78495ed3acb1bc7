from datetime import datetime, timedelta, timezone

from flight_booking.service.booking.domain.passenger import Passenger
from flight_booking.service.inventory.domain.flight_entity import Flight, RouteKey
from flight_booking.service.inventory.domain.seat_entity import Seat
from flight_booking.service.shared_kernel.app.interface.i_clock import IClock
from flight_booking.service.shared_kernel.domain.enum import SeatClass


# Monday
T0 = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


class FrozenClock(IClock):
    """Manually advanced clock; expiry in the in-memory store follows it."""

    def __init__(self, start: datetime = T0) -> None:
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, *, seconds: float = 0, hours: float = 0) -> None:
        self.current += timedelta(seconds=seconds, hours=hours)


def build_flight(
    *,
    flight_id: str = 'FL100',
    departure_time: datetime | None = None,
    base_price: int = 10000,
    source: str = 'tpe',
    destination: str = 'nrt',
) -> Flight:
    return Flight(
        id=flight_id,
        flight_number='FB100',
        route=RouteKey(source=source, destination=destination),
        # Thursday, more than a week out: time and day multipliers are 1
        departure_time=departure_time or T0 + timedelta(days=10),
        base_price=base_price,
    )


def build_seats(
    *, flight_id: str = 'FL100', economy_rows: range = range(10, 15), business_rows: range = range(1, 3)
) -> list[Seat]:
    """Business rows A-B, economy rows A-D."""
    seats = [
        Seat(flight_id=flight_id, seat_id=f'{row}{letter}', seat_class=SeatClass.BUSINESS)
        for row in business_rows
        for letter in 'AB'
    ]
    seats += [
        Seat(flight_id=flight_id, seat_id=f'{row}{letter}', seat_class=SeatClass.ECONOMY)
        for row in economy_rows
        for letter in 'ABCD'
    ]
    return seats


def passengers_for(seat_ids: list[str]) -> list[Passenger]:
    return [
        Passenger(first_name='Mei', last_name=f'Lin{i}', seat_id=seat_id, email='mei@example.com')
        for i, seat_id in enumerate(seat_ids)
    ]
