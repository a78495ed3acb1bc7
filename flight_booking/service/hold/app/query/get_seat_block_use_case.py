from flight_booking.platform.logging.loguru_io import Logger
from flight_booking.service.hold.app.interface import IHoldStore, ILockService
from flight_booking.service.hold.domain.hold_entity import Hold, SeatLock


class GetSeatBlockUseCase:
    def __init__(self, *, lock_service: ILockService, hold_store: IHoldStore) -> None:
        self.lock_service = lock_service
        self.hold_store = hold_store

    @Logger.io
    async def execute(self, *, flight_id: str, seat_id: str) -> SeatLock | None:
        """Current lock on the seat, or None when nobody holds it."""
        return await self.lock_service.get(flight_id=flight_id, seat_id=seat_id)

    @Logger.io
    async def get_hold(self, *, session_id: str) -> Hold | None:
        return await self.hold_store.get(session_id=session_id)
