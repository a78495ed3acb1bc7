"""
Booking Command Repo Interface

The only writer of bookings. commit_hold and cancel_and_release are single
atomic steps spanning seat inventory and the booking record: either every
change is visible or none is.
"""

from abc import ABC, abstractmethod

from flight_booking.service.booking.app.dto import CancelResult, CommitResult
from flight_booking.service.booking.domain.booking_entity import Booking
from flight_booking.service.hold.domain.hold_entity import Hold
from flight_booking.service.shared_kernel.domain.enum import BookingStatus


class IBookingCommandRepo(ABC):
    @abstractmethod
    async def commit_hold(self, *, hold: Hold, booking: Booking) -> CommitResult:
        """
        Check, in order: session already committed, reference already used,
        hold record and every seat lock present, every lock owned by the hold
        session, every seat held. Then mark seats booked with their price,
        adjust counters, insert the booking and its indexes, delete the seat
        locks and the hold record.
        """
        pass

    @abstractmethod
    async def cancel_and_release(self, *, booking: Booking) -> CancelResult:
        """
        Store the cancelled booking and return its booked seats to available,
        only while the stored booking is still pending or confirmed.
        """
        pass

    @abstractmethod
    async def update_status(self, *, booking: Booking, expected_status: BookingStatus) -> bool:
        """Compare-and-set on status. False when the stored status moved on."""
        pass
