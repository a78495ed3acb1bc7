"""Booking Service Interfaces"""

from flight_booking.service.booking.app.interface.i_booking_command_repo import (
    IBookingCommandRepo,
)
from flight_booking.service.booking.app.interface.i_booking_query_repo import IBookingQueryRepo

__all__ = ['IBookingCommandRepo', 'IBookingQueryRepo']
