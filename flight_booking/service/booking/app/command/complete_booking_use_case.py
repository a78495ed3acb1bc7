from flight_booking.platform.exception.exceptions import ConflictError
from flight_booking.platform.logging.loguru_io import Logger
from flight_booking.service.booking.app.interface import IBookingCommandRepo, IBookingQueryRepo
from flight_booking.service.booking.domain.booking_entity import Booking
from flight_booking.service.shared_kernel.app.interface.i_clock import IClock
from flight_booking.service.shared_kernel.domain.enum import BookingStatus


class CompleteBookingUseCase:
    def __init__(
        self,
        *,
        booking_command_repo: IBookingCommandRepo,
        booking_query_repo: IBookingQueryRepo,
        clock: IClock,
    ) -> None:
        self.booking_command_repo = booking_command_repo
        self.booking_query_repo = booking_query_repo
        self.clock = clock

    @Logger.io
    async def execute(self, *, booking_id: str) -> Booking:
        booking = await self.booking_query_repo.get(reference=booking_id)
        completed = booking.complete(now=self.clock.now())
        if not await self.booking_command_repo.update_status(
            booking=completed, expected_status=BookingStatus.CHECKED_IN
        ):
            raise ConflictError(f'Booking {booking_id} changed while completing')
        Logger.base.info(f'🏁 [COMPLETE] {booking_id}')
        return completed
