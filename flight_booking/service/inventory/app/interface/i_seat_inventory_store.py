"""
Seat Inventory Store Interface

Authoritative per-seat state and per-class availability counters. Every state
change adjusts the counters in the same atomic step.
"""

from abc import ABC, abstractmethod

from flight_booking.service.inventory.domain.class_availability import (
    ClassAvailability,
    SeatTransition,
)
from flight_booking.service.inventory.domain.flight_entity import Flight
from flight_booking.service.inventory.domain.seat_entity import Seat
from flight_booking.service.shared_kernel.domain.enum import SeatClass, SeatState


class ISeatInventoryStore(ABC):
    @abstractmethod
    async def save_flight(self, *, flight: Flight, seats: list[Seat]) -> None:
        """Create or replace a flight and its whole seat map."""
        pass

    @abstractmethod
    async def update_flight(self, *, flight: Flight) -> None:
        """Replace the flight snapshot only; seats are untouched. NotFound if absent."""
        pass

    @abstractmethod
    async def get_flight(self, *, flight_id: str) -> Flight:
        """Raises NotFoundError for an unknown flight."""
        pass

    @abstractmethod
    async def list_flight_ids(self) -> list[str]:
        pass

    @abstractmethod
    async def get_seat_state(self, *, flight_id: str, seat_id: str) -> SeatState:
        """Raises NotFoundError for an unknown flight or seat."""
        pass

    @abstractmethod
    async def get_seat(self, *, flight_id: str, seat_id: str) -> Seat:
        pass

    @abstractmethod
    async def set_seat_state(
        self, *, flight_id: str, seat_id: str, new_state: SeatState
    ) -> SeatState:
        """Unconditional state change. Returns the previous state."""
        pass

    @abstractmethod
    async def transition_seat_state(
        self,
        *,
        flight_id: str,
        seat_id: str,
        allowed_from: set[SeatState],
        new_state: SeatState,
    ) -> SeatTransition:
        """Compare-and-set: change only when the current state is in allowed_from."""
        pass

    @abstractmethod
    async def get_class_availability(
        self, *, flight_id: str, seat_class: SeatClass
    ) -> ClassAvailability:
        pass

    @abstractmethod
    async def list_seats(self, *, flight_id: str, state: SeatState | None = None) -> list[Seat]:
        pass

    @abstractmethod
    async def recompute_availability(self, *, flight_id: str) -> dict[SeatClass, ClassAvailability]:
        """Rebuild every class counter from the seat states."""
        pass
