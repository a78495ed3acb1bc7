from flight_booking.platform.logging.loguru_io import Logger
from flight_booking.service.inventory.app.interface import ISeatInventoryStore
from flight_booking.service.inventory.domain.flight_entity import Flight
from flight_booking.service.pricing.app.command.invalidate_price_cache_use_case import (
    InvalidatePriceCacheUseCase,
)


class UpdateFlightUseCase:
    """Admin change to a flight snapshot (status, schedule, base price); seats untouched."""

    def __init__(
        self,
        *,
        inventory_store: ISeatInventoryStore,
        price_cache_invalidator: InvalidatePriceCacheUseCase,
    ) -> None:
        self.inventory_store = inventory_store
        self.price_cache_invalidator = price_cache_invalidator

    @Logger.io
    async def execute(self, *, flight: Flight) -> Flight:
        await self.inventory_store.update_flight(flight=flight)
        await self.price_cache_invalidator.invalidate(flight_id=flight.id)
        Logger.base.info(f'✈️ [INVENTORY] Updated flight {flight.id} status={flight.status}')
        return flight
