from abc import ABC, abstractmethod

from flight_booking.service.pricing.domain.price_quote import PriceQuote
from flight_booking.service.shared_kernel.domain.enum import SeatClass


class IPriceCache(ABC):
    """Short-lived quote cache keyed by (flight, class). Never authoritative."""

    @abstractmethod
    async def get(self, *, flight_id: str, seat_class: SeatClass) -> PriceQuote | None:
        pass

    @abstractmethod
    async def set(self, *, quote: PriceQuote, ttl_seconds: int) -> None:
        pass

    @abstractmethod
    async def invalidate(self, *, flight_id: str, seat_class: SeatClass | None = None) -> int:
        """Drop one class, or every class when seat_class is None. Returns entries removed."""
        pass

    @abstractmethod
    async def clear(self) -> int:
        pass
