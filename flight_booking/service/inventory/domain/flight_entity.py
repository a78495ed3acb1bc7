from datetime import datetime

import attrs

from flight_booking.platform.exception.exceptions import DomainError
from flight_booking.service.shared_kernel.domain.enum import FlightStatus


def _upper_code(value: str) -> str:
    return value.strip().upper()


@attrs.define(frozen=True)
class RouteKey:
    source: str = attrs.field(converter=_upper_code)
    destination: str = attrs.field(converter=_upper_code)

    def __str__(self) -> str:
        return f'{self.source}-{self.destination}'


def _must_be_tz_aware(instance: 'Flight', attribute: attrs.Attribute, value: datetime) -> None:
    if value.tzinfo is None:
        raise DomainError(f'{attribute.name} must be timezone-aware')


def _non_negative(instance: 'Flight', attribute: attrs.Attribute, value: int) -> None:
    if value < 0:
        raise DomainError(f'{attribute.name} must not be negative')


@attrs.define
class Flight:
    """Flight snapshot. Prices are integers in the smallest currency unit."""

    id: str
    flight_number: str
    route: RouteKey
    departure_time: datetime = attrs.field(validator=_must_be_tz_aware)
    base_price: int = attrs.field(validator=_non_negative)
    status: FlightStatus = FlightStatus.SCHEDULED

    def seconds_until_departure(self, now: datetime) -> float:
        return (self.departure_time - now).total_seconds()
