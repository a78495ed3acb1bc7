from abc import ABC, abstractmethod
from datetime import datetime

from flight_booking.service.hold.domain.hold_entity import Hold


class IHoldStore(ABC):
    """Hold records keyed by session id, expiring with the hold."""

    @abstractmethod
    async def save(self, *, hold: Hold) -> None:
        pass

    @abstractmethod
    async def get(self, *, session_id: str) -> Hold | None:
        """None once the hold has expired, been released or been committed."""
        pass

    @abstractmethod
    async def delete(self, *, session_id: str) -> bool:
        pass

    @abstractmethod
    async def remove_seat(self, *, session_id: str, seat_id: str) -> None:
        """Drop one seat; the record goes away with its last seat."""
        pass

    @abstractmethod
    async def update_expiry(self, *, session_id: str, expires_at: datetime) -> bool:
        """False when the hold is already gone. Never recreates a hold."""
        pass
