"""Booking Service DTOs"""

from flight_booking.service.booking.app.dto.booking_result_dto import (
    CancelOutcome,
    CancelResult,
    CommitOutcome,
    CommitResult,
)

__all__ = ['CancelOutcome', 'CancelResult', 'CommitOutcome', 'CommitResult']
