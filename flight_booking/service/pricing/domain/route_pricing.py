from decimal import Decimal
import re

import attrs

from flight_booking.platform.exception.exceptions import DomainError
from flight_booking.service.inventory.domain.flight_entity import RouteKey


_MONTH_DAY_PATTERN = re.compile(r'^(0[1-9]|1[0-2])-(0[1-9]|[12]\d|3[01])$')


def _month_day(instance: 'SeasonalRange', attribute: attrs.Attribute, value: str) -> None:
    if not _MONTH_DAY_PATTERN.match(value):
        raise DomainError(f'{attribute.name} must be MM-DD, got {value!r}')


def _positive(instance: object, attribute: attrs.Attribute, value: Decimal) -> None:
    if value <= 0:
        raise DomainError(f'{attribute.name} must be positive')


@attrs.define(frozen=True)
class SeasonalRange:
    """Month-day range, inclusive at both ends; wraps the year when start > end."""

    name: str
    start: str = attrs.field(validator=_month_day)
    end: str = attrs.field(validator=_month_day)
    multiplier: Decimal = attrs.field(converter=Decimal, validator=_positive)


@attrs.define(frozen=True)
class RoutePricing:
    route: RouteKey
    popularity: Decimal = attrs.field(default=Decimal('1'), converter=Decimal, validator=_positive)
    seasonal_ranges: tuple[SeasonalRange, ...] = attrs.field(default=(), converter=tuple)
