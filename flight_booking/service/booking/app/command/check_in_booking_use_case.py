from datetime import timedelta

from opentelemetry import trace

from flight_booking.platform.exception.exceptions import (
    ConflictError,
    DomainError,
    NotCheckinWindowError,
)
from flight_booking.platform.logging.loguru_io import Logger
from flight_booking.service.booking.app.interface import IBookingCommandRepo, IBookingQueryRepo
from flight_booking.service.booking.domain.booking_entity import Booking
from flight_booking.service.inventory.app.interface import ISeatInventoryStore
from flight_booking.service.shared_kernel.app.interface.i_clock import IClock
from flight_booking.service.shared_kernel.domain.enum import BookingStatus


class CheckInBookingUseCase:
    """Confirmed bookings only, between window_opens and window_closes before departure."""

    def __init__(
        self,
        *,
        booking_command_repo: IBookingCommandRepo,
        booking_query_repo: IBookingQueryRepo,
        inventory_store: ISeatInventoryStore,
        clock: IClock,
        window_opens_hours: float,
        window_closes_hours: float,
    ) -> None:
        self.booking_command_repo = booking_command_repo
        self.booking_query_repo = booking_query_repo
        self.inventory_store = inventory_store
        self.clock = clock
        self.window_opens = timedelta(hours=window_opens_hours)
        self.window_closes = timedelta(hours=window_closes_hours)
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def execute(self, *, booking_id: str) -> Booking:
        with self.tracer.start_as_current_span(
            'booking.check_in', attributes={'booking.reference': booking_id}
        ):
            booking = await self.booking_query_repo.get(reference=booking_id)
            if booking.status != BookingStatus.CONFIRMED:
                raise DomainError(f'Only confirmed bookings can check in; {booking_id} is {booking.status}')

            flight = await self.inventory_store.get_flight(flight_id=booking.flight_id)
            now = self.clock.now()
            until_departure = flight.departure_time - now
            if until_departure > self.window_opens:
                raise NotCheckinWindowError(
                    f'Check-in opens {self.window_opens} before departure'
                )
            if until_departure < self.window_closes:
                raise NotCheckinWindowError(
                    f'Check-in closed {self.window_closes} before departure'
                )

            checked_in = booking.check_in(now=now)
            if not await self.booking_command_repo.update_status(
                booking=checked_in, expected_status=BookingStatus.CONFIRMED
            ):
                raise ConflictError(f'Booking {booking_id} changed while checking in')

            Logger.base.info(f'🛫 [CHECK-IN] {booking_id} checked in')
            return checked_in
