from flight_booking.platform.logging.loguru_io import Logger
from flight_booking.service.booking.app.interface import IBookingQueryRepo
from flight_booking.service.booking.domain.booking_entity import Booking


class GetBookingUseCase:
    def __init__(self, *, booking_query_repo: IBookingQueryRepo) -> None:
        self.booking_query_repo = booking_query_repo

    @Logger.io
    async def execute(self, *, booking_id: str) -> Booking:
        return await self.booking_query_repo.get(reference=booking_id)

    @Logger.io
    async def list_by_user(self, *, user_id: str) -> list[Booking]:
        return await self.booking_query_repo.list_by_user(user_id=user_id)

    @Logger.io
    async def list_by_flight(self, *, flight_id: str) -> list[Booking]:
        return await self.booking_query_repo.list_by_flight(flight_id=flight_id)
