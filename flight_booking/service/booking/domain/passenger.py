import attrs

from flight_booking.platform.exception.exceptions import DomainError


def _not_blank(instance: 'Passenger', attribute: attrs.Attribute, value: str) -> None:
    if not value or not value.strip():
        raise DomainError(f'Passenger {attribute.name} is required')


@attrs.define(frozen=True)
class Passenger:
    first_name: str = attrs.field(validator=_not_blank)
    last_name: str = attrs.field(validator=_not_blank)
    seat_id: str = attrs.field(validator=_not_blank)
    age: int | None = None
    gender: str | None = None
    email: str | None = None
    phone: str | None = None
    meal_preference: str | None = None
