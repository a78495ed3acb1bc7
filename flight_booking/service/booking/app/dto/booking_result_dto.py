from enum import StrEnum

import attrs

from flight_booking.service.booking.domain.booking_entity import Booking


class CommitOutcome(StrEnum):
    OK = 'ok'
    ALREADY_COMMITTED = 'already_committed'
    DUPLICATE_REFERENCE = 'duplicate_reference'
    HOLD_EXPIRED = 'hold_expired'
    HOLD_MISMATCH = 'hold_mismatch'
    INVENTORY_CONFLICT = 'inventory_conflict'


@attrs.define(frozen=True)
class CommitResult:
    outcome: CommitOutcome
    reference: str | None = None  # ours on OK, the earlier booking's on ALREADY_COMMITTED
    seat_id: str | None = None  # the offending seat, when one is to blame


class CancelOutcome(StrEnum):
    OK = 'ok'
    ALREADY_CANCELLED = 'already_cancelled'
    NOT_CANCELLABLE = 'not_cancellable'
    NOT_FOUND = 'not_found'


@attrs.define(frozen=True)
class CancelResult:
    outcome: CancelOutcome
    booking: Booking | None = None  # as stored after the call
