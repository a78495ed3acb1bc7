"""Shared Kernel Enums"""

from flight_booking.service.shared_kernel.domain.enum.booking_status import BookingStatus
from flight_booking.service.shared_kernel.domain.enum.flight_status import FlightStatus
from flight_booking.service.shared_kernel.domain.enum.payment_status import PaymentStatus
from flight_booking.service.shared_kernel.domain.enum.seat_class import SeatClass
from flight_booking.service.shared_kernel.domain.enum.seat_state import SeatState

__all__ = ['BookingStatus', 'FlightStatus', 'PaymentStatus', 'SeatClass', 'SeatState']
