from enum import StrEnum

import attrs

from flight_booking.service.hold.domain.hold_entity import SeatLock


@attrs.define(frozen=True)
class LockAcquisition:
    acquired: bool
    lock: SeatLock | None  # ours when acquired, the current holder's otherwise


class LockReleaseOutcome(StrEnum):
    RELEASED = 'released'
    NOT_FOUND = 'not_found'
    NOT_OWNER = 'not_owner'


class LockExtendOutcome(StrEnum):
    EXTENDED = 'extended'
    NOT_FOUND = 'not_found'
    NOT_OWNER = 'not_owner'


@attrs.define(frozen=True)
class LockExtension:
    outcome: LockExtendOutcome
    lock: SeatLock | None
