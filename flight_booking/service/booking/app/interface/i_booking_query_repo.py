from abc import ABC, abstractmethod

from flight_booking.service.booking.domain.booking_entity import Booking


class IBookingQueryRepo(ABC):
    @abstractmethod
    async def get(self, *, reference: str) -> Booking:
        """Raises NotFoundError for an unknown reference."""
        pass

    @abstractmethod
    async def get_by_hold_session(self, *, session_id: str) -> Booking | None:
        pass

    @abstractmethod
    async def reference_exists(self, *, reference: str) -> bool:
        pass

    @abstractmethod
    async def list_by_flight(self, *, flight_id: str) -> list[Booking]:
        pass

    @abstractmethod
    async def list_by_user(self, *, user_id: str) -> list[Booking]:
        pass
