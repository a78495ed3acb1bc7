from flight_booking.platform.logging.loguru_io import Logger
from flight_booking.service.hold.app.interface import ILockService
from flight_booking.service.hold.domain.hold_entity import SeatLock
from flight_booking.service.inventory.domain.seat_entity import seat_sort_key


class ListFlightHeldSeatsUseCase:
    def __init__(self, *, lock_service: ILockService) -> None:
        self.lock_service = lock_service

    @Logger.io
    async def execute(self, *, flight_id: str) -> list[SeatLock]:
        locks = await self.lock_service.list_locks(flight_id=flight_id)
        return sorted(locks, key=lambda lock: seat_sort_key(lock.seat_id))
