"""Hold Service DTOs"""

from flight_booking.service.hold.app.dto.hold_result_dto import (
    BlockSeatOutcome,
    BlockSeatResult,
    BlockSeatsResult,
    ExtendOutcome,
    ExtendSeatBlockResult,
    ReleaseOutcome,
    SeatFailure,
    SeatFailureReason,
    SweepResult,
)
from flight_booking.service.hold.app.dto.lock_dto import (
    LockAcquisition,
    LockExtendOutcome,
    LockExtension,
    LockReleaseOutcome,
)

__all__ = [
    'BlockSeatOutcome',
    'BlockSeatResult',
    'BlockSeatsResult',
    'ExtendOutcome',
    'ExtendSeatBlockResult',
    'LockAcquisition',
    'LockExtendOutcome',
    'LockExtension',
    'LockReleaseOutcome',
    'ReleaseOutcome',
    'SeatFailure',
    'SeatFailureReason',
    'SweepResult',
]
