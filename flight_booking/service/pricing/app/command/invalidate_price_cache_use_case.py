from flight_booking.platform.exception.exceptions import TransientStoreError
from flight_booking.platform.logging.loguru_io import Logger
from flight_booking.service.pricing.app.interface import IPriceCache
from flight_booking.service.shared_kernel.domain.enum import SeatClass


class InvalidatePriceCacheUseCase:
    """Called whenever booked/available counts or admin flight data change."""

    def __init__(self, *, price_cache: IPriceCache) -> None:
        self.price_cache = price_cache

    async def invalidate(self, *, flight_id: str, seat_class: SeatClass | None = None) -> None:
        try:
            removed = await self.price_cache.invalidate(flight_id=flight_id, seat_class=seat_class)
        except TransientStoreError as e:
            # Entries still expire on their TTL
            Logger.base.warning(f'⚠️ [PRICE-CACHE] invalidate failed for {flight_id}: {e}')
            return
        Logger.base.debug(
            f'🧹 [PRICE-CACHE] invalidated {removed} entries for {flight_id}'
            f'{f":{seat_class}" if seat_class else ""}'
        )

    async def invalidate_classes(self, *, flight_id: str, seat_classes: set[SeatClass]) -> None:
        for seat_class in sorted(seat_classes):
            await self.invalidate(flight_id=flight_id, seat_class=seat_class)

    @Logger.io
    async def clear(self) -> int:
        removed = await self.price_cache.clear()
        Logger.base.info(f'🧹 [PRICE-CACHE] cleared {removed} entries')
        return removed
