from datetime import datetime

import attrs

from flight_booking.service.shared_kernel.domain.enum import SeatClass


@attrs.define(frozen=True)
class SeatLock:
    """Value stored under the per-seat lock key while a seat is held."""

    flight_id: str
    seat_id: str
    holder_id: str
    session_id: str
    held_at: datetime
    expires_at: datetime

    def is_owned_by(self, *, holder_id: str, session_id: str) -> bool:
        return self.holder_id == holder_id and self.session_id == session_id


@attrs.define
class Hold:
    """
    One hold session: the seats a holder claimed together and the prices
    quoted for them. Destroyed by release of its last seat, by expiry or by
    a successful commit.
    """

    session_id: str
    flight_id: str
    holder_id: str
    seat_ids: list[str]
    created_at: datetime
    expires_at: datetime
    seat_prices: dict[str, int] = attrs.field(factory=dict)
    seat_classes: dict[str, SeatClass] = attrs.field(factory=dict)

    @property
    def total_price(self) -> int:
        return sum(self.seat_prices.get(seat_id, 0) for seat_id in self.seat_ids)

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at
