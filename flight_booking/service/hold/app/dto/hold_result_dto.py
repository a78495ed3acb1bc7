from datetime import datetime
from enum import StrEnum

import attrs


class BlockSeatOutcome(StrEnum):
    HELD = 'held'
    CONFLICT = 'conflict'


class SeatFailureReason(StrEnum):
    HELD_BY_OTHER = 'held_by_other'
    BOOKED = 'booked'


@attrs.define(frozen=True)
class SeatFailure:
    seat_id: str
    reason: SeatFailureReason
    holder_id: str | None = None
    expires_at: datetime | None = None


@attrs.define(frozen=True)
class BlockSeatResult:
    """HELD carries our session; CONFLICT carries the current holder and expiry."""

    outcome: BlockSeatOutcome
    flight_id: str
    seat_id: str
    session_id: str | None = None
    expires_at: datetime | None = None
    price: int | None = None
    holder_id: str | None = None
    reason: SeatFailureReason | None = None

    @property
    def is_held(self) -> bool:
        return self.outcome == BlockSeatOutcome.HELD


@attrs.define(frozen=True)
class BlockSeatsResult:
    """All seats held, or none: on failure `released` lists the seats rolled back."""

    success: bool
    flight_id: str
    session_id: str | None = None
    expires_at: datetime | None = None
    held: list[str] = attrs.field(factory=list)
    seat_prices: dict[str, int] = attrs.field(factory=dict)
    failed: list[SeatFailure] = attrs.field(factory=list)
    released: list[str] = attrs.field(factory=list)

    @property
    def total_price(self) -> int:
        return sum(self.seat_prices.values())


class ReleaseOutcome(StrEnum):
    RELEASED = 'released'
    NOT_FOUND = 'not_found'
    UNAUTHORIZED = 'unauthorized'


class ExtendOutcome(StrEnum):
    EXTENDED = 'extended'
    NOT_FOUND = 'not_found'
    UNAUTHORIZED = 'unauthorized'


@attrs.define(frozen=True)
class ExtendSeatBlockResult:
    outcome: ExtendOutcome
    flight_id: str
    seat_id: str
    session_id: str
    expires_at: datetime | None = None


@attrs.define(frozen=True)
class SweepResult:
    flights_checked: int = 0
    reverted: list[tuple[str, str]] = attrs.field(factory=list)  # (flight_id, seat_id)
    skipped: list[tuple[str, str]] = attrs.field(factory=list)  # re-locked before we got there
