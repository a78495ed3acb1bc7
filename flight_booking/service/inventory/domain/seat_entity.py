import re

import attrs

from flight_booking.service.shared_kernel.domain.enum import SeatClass, SeatState


_SEAT_ID_PATTERN = re.compile(r'^(\d+)([A-Za-z]*)$')


def seat_sort_key(seat_id: str) -> tuple[int, int, str, str]:
    """
    Canonical seat order: row number, then letter ("2A" < "10A" < "10B"),
    then the raw id so ids differing only in letter case still have a fixed
    order. Identifiers that are not row+letter sort after those,
    lexicographically.
    """
    match = _SEAT_ID_PATTERN.match(seat_id)
    if match:
        return (0, int(match.group(1)), match.group(2).upper(), seat_id)
    return (1, 0, seat_id, seat_id)


def canonical_seat_order(seat_ids: list[str]) -> list[str]:
    """Deduplicate and sort seat ids into canonical order."""
    return sorted(set(seat_ids), key=seat_sort_key)


@attrs.define
class Seat:
    flight_id: str
    seat_id: str
    seat_class: SeatClass
    state: SeatState = SeatState.AVAILABLE
    price: int | None = None  # snapshot of the price charged, set at commit
