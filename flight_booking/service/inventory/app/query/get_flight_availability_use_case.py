from flight_booking.platform.logging.loguru_io import Logger
from flight_booking.service.inventory.app.interface import ISeatInventoryStore
from flight_booking.service.inventory.domain.class_availability import ClassAvailability
from flight_booking.service.inventory.domain.seat_entity import Seat
from flight_booking.service.shared_kernel.domain.enum import SeatClass, SeatState


class GetFlightAvailabilityUseCase:
    def __init__(self, *, inventory_store: ISeatInventoryStore) -> None:
        self.inventory_store = inventory_store

    @Logger.io
    async def execute(self, *, flight_id: str) -> dict[SeatClass, ClassAvailability]:
        await self.inventory_store.get_flight(flight_id=flight_id)  # NotFound for unknown flights
        return {
            seat_class: await self.inventory_store.get_class_availability(
                flight_id=flight_id, seat_class=seat_class
            )
            for seat_class in SeatClass
        }

    @Logger.io
    async def list_seats(self, *, flight_id: str, state: SeatState | None = None) -> list[Seat]:
        return await self.inventory_store.list_seats(flight_id=flight_id, state=state)
