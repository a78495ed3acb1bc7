from collections import Counter

import attrs
from opentelemetry import trace

from flight_booking.platform.exception.exceptions import DomainError
from flight_booking.platform.logging.loguru_io import Logger
from flight_booking.service.inventory.app.interface import ISeatInventoryStore
from flight_booking.service.inventory.domain.flight_entity import Flight
from flight_booking.service.inventory.domain.seat_entity import Seat
from flight_booking.service.pricing.app.command.invalidate_price_cache_use_case import (
    InvalidatePriceCacheUseCase,
)
from flight_booking.service.shared_kernel.domain.enum import SeatState


class InitializeFlightUseCase:
    """Create or replace a flight with its seat map (every seat starts available)."""

    def __init__(
        self,
        *,
        inventory_store: ISeatInventoryStore,
        price_cache_invalidator: InvalidatePriceCacheUseCase,
    ) -> None:
        self.inventory_store = inventory_store
        self.price_cache_invalidator = price_cache_invalidator
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def execute(self, *, flight: Flight, seats: list[Seat]) -> Flight:
        with self.tracer.start_as_current_span(
            'inventory.initialize_flight',
            attributes={'flight.id': flight.id, 'seat.count': len(seats)},
        ):
            duplicates = [seat_id for seat_id, n in Counter(s.seat_id for s in seats).items() if n > 1]
            if duplicates:
                raise DomainError(f'Duplicate seat ids: {sorted(duplicates)}')

            fresh = [
                attrs.evolve(seat, flight_id=flight.id, state=SeatState.AVAILABLE, price=None)
                for seat in seats
            ]
            await self.inventory_store.save_flight(flight=flight, seats=fresh)
            await self.price_cache_invalidator.invalidate(flight_id=flight.id)
            return flight
