"""
Seat Inventory Store - in-memory implementation

Stores domain objects in an InMemoryStateStore under the same keys the
Kvrocks adapter uses. The module-level helpers expect the caller to hold
`store.lock`; the in-memory booking repo reuses them inside its own atomic
commit and cancel.
"""

import attrs

from flight_booking.platform.exception.exceptions import NotFoundError
from flight_booking.platform.logging.loguru_io import Logger
from flight_booking.platform.state.in_memory_state_store import InMemoryStateStore
from flight_booking.service.inventory.app.interface.i_seat_inventory_store import (
    ISeatInventoryStore,
)
from flight_booking.service.inventory.domain.class_availability import (
    ClassAvailability,
    SeatTransition,
)
from flight_booking.service.inventory.domain.flight_entity import Flight
from flight_booking.service.inventory.domain.seat_entity import Seat, seat_sort_key
from flight_booking.service.shared_kernel.domain.enum import SeatClass, SeatState
from flight_booking.service.shared_kernel.driven_adapter.key_str_generator import (
    make_flight_index_key,
    make_flight_key,
    make_seat_stats_key,
    make_seat_state_key,
)


def seat_map(store: InMemoryStateStore, flight_id: str) -> dict[str, Seat]:
    """seat_id -> Seat; raises NotFoundError for an unknown flight."""
    seats = store.get(make_seat_state_key(flight_id=flight_id))
    if seats is None:
        raise NotFoundError(f'Flight {flight_id} not found')
    return seats


def get_seat_locked(store: InMemoryStateStore, flight_id: str, seat_id: str) -> Seat:
    seat = seat_map(store, flight_id).get(seat_id)
    if seat is None:
        raise NotFoundError(f'Seat {seat_id} not found on flight {flight_id}')
    return seat


def apply_seat_state(
    store: InMemoryStateStore,
    flight_id: str,
    seat_id: str,
    new_state: SeatState,
    *,
    price: int | None = None,
    clear_price: bool = False,
) -> SeatState:
    """Set a seat's state and move the class counters with it. Returns the previous state."""
    seats = seat_map(store, flight_id)
    seat = get_seat_locked(store, flight_id, seat_id)
    changes: dict = {'state': new_state}
    if price is not None:
        changes['price'] = price
    elif clear_price:
        changes['price'] = None
    seats[seat_id] = attrs.evolve(seat, **changes)

    if seat.state != new_state:
        stats = store.setdefault(make_seat_stats_key(flight_id=flight_id), dict)
        old_field = f'{seat.seat_class.value}:{seat.state.value}'
        new_field = f'{seat.seat_class.value}:{new_state.value}'
        stats[old_field] = stats.get(old_field, 0) - 1
        stats[new_field] = stats.get(new_field, 0) + 1
    return seat.state


def recompute_counters(store: InMemoryStateStore, flight_id: str) -> None:
    seats = seat_map(store, flight_id).values()
    stats: dict[str, int] = {}
    for seat_class in SeatClass:
        availability = ClassAvailability.count(
            seat_class, [seat.state for seat in seats if seat.seat_class == seat_class]
        )
        for counter in ('capacity', 'available', 'held', 'booked'):
            stats[f'{seat_class.value}:{counter}'] = getattr(availability, counter)
    store.set(make_seat_stats_key(flight_id=flight_id), stats)


class InMemorySeatInventoryStoreImpl(ISeatInventoryStore):
    def __init__(self, *, store: InMemoryStateStore) -> None:
        self.store = store

    @Logger.io
    async def save_flight(self, *, flight: Flight, seats: list[Seat]) -> None:
        async with self.store.lock:
            self.store.set(make_flight_key(flight_id=flight.id), flight)
            self.store.set(
                make_seat_state_key(flight_id=flight.id),
                {seat.seat_id: attrs.evolve(seat, flight_id=flight.id) for seat in seats},
            )
            self.store.setdefault(make_flight_index_key(), set).add(flight.id)
            recompute_counters(self.store, flight.id)
        Logger.base.info(f'✈️ [INVENTORY] Saved flight {flight.id} with {len(seats)} seats')

    @Logger.io
    async def update_flight(self, *, flight: Flight) -> None:
        async with self.store.lock:
            if not self.store.exists(make_flight_key(flight_id=flight.id)):
                raise NotFoundError(f'Flight {flight.id} not found')
            self.store.set(make_flight_key(flight_id=flight.id), flight)

    @Logger.io
    async def get_flight(self, *, flight_id: str) -> Flight:
        async with self.store.lock:
            flight = self.store.get(make_flight_key(flight_id=flight_id))
        if flight is None:
            raise NotFoundError(f'Flight {flight_id} not found')
        return flight

    async def list_flight_ids(self) -> list[str]:
        async with self.store.lock:
            return sorted(self.store.get(make_flight_index_key(), set()))

    @Logger.io
    async def get_seat_state(self, *, flight_id: str, seat_id: str) -> SeatState:
        async with self.store.lock:
            return get_seat_locked(self.store, flight_id, seat_id).state

    @Logger.io
    async def get_seat(self, *, flight_id: str, seat_id: str) -> Seat:
        async with self.store.lock:
            return get_seat_locked(self.store, flight_id, seat_id)

    @Logger.io
    async def set_seat_state(
        self, *, flight_id: str, seat_id: str, new_state: SeatState
    ) -> SeatState:
        async with self.store.lock:
            return apply_seat_state(self.store, flight_id, seat_id, new_state)

    @Logger.io
    async def transition_seat_state(
        self,
        *,
        flight_id: str,
        seat_id: str,
        allowed_from: set[SeatState],
        new_state: SeatState,
    ) -> SeatTransition:
        if not allowed_from:
            raise ValueError('allowed_from must name at least one state')
        async with self.store.lock:
            current = get_seat_locked(self.store, flight_id, seat_id).state
            if current not in allowed_from:
                return SeatTransition(success=False, previous=current)
            apply_seat_state(self.store, flight_id, seat_id, new_state)
            return SeatTransition(success=True, previous=current)

    @Logger.io
    async def get_class_availability(
        self, *, flight_id: str, seat_class: SeatClass
    ) -> ClassAvailability:
        async with self.store.lock:
            stats = self.store.get(make_seat_stats_key(flight_id=flight_id), {})
            return ClassAvailability(
                seat_class=seat_class,
                capacity=stats.get(f'{seat_class.value}:capacity', 0),
                available=stats.get(f'{seat_class.value}:available', 0),
                held=stats.get(f'{seat_class.value}:held', 0),
                booked=stats.get(f'{seat_class.value}:booked', 0),
            )

    @Logger.io
    async def list_seats(self, *, flight_id: str, state: SeatState | None = None) -> list[Seat]:
        async with self.store.lock:
            seats = [
                seat
                for seat in seat_map(self.store, flight_id).values()
                if state is None or seat.state == state
            ]
        return sorted(seats, key=lambda seat: seat_sort_key(seat.seat_id))

    @Logger.io
    async def recompute_availability(self, *, flight_id: str) -> dict[SeatClass, ClassAvailability]:
        async with self.store.lock:
            recompute_counters(self.store, flight_id)
        return {
            seat_class: await self.get_class_availability(
                flight_id=flight_id, seat_class=seat_class
            )
            for seat_class in SeatClass
        }
