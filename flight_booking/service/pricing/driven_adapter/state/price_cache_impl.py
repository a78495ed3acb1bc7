from flight_booking.platform.logging.loguru_io import Logger
from flight_booking.platform.state.kvrocks_client import kvrocks_client, translate_store_errors
from flight_booking.service.pricing.app.interface import IPriceCache
from flight_booking.service.pricing.domain.price_quote import PriceQuote
from flight_booking.service.pricing.driven_adapter.state.pricing_codec import (
    price_quote_from_dict,
)
from flight_booking.service.shared_kernel.domain.enum import SeatClass
from flight_booking.service.shared_kernel.driven_adapter.json_codec import dumps, loads
from flight_booking.service.shared_kernel.driven_adapter.key_str_generator import (
    make_price_cache_key,
    make_price_cache_pattern,
)


class PriceCacheImpl(IPriceCache):
    """price:{flight}:{class} -> PriceQuote JSON with a TTL"""

    @translate_store_errors
    async def get(self, *, flight_id: str, seat_class: SeatClass) -> PriceQuote | None:
        raw = await kvrocks_client.get_client().get(
            make_price_cache_key(flight_id=flight_id, seat_class=seat_class.value)
        )
        return price_quote_from_dict(loads(raw)) if raw else None

    @translate_store_errors
    async def set(self, *, quote: PriceQuote, ttl_seconds: int) -> None:
        await kvrocks_client.get_client().set(
            make_price_cache_key(flight_id=quote.flight_id, seat_class=quote.seat_class.value),
            dumps(quote),
            ex=ttl_seconds,
        )

    @translate_store_errors
    async def invalidate(self, *, flight_id: str, seat_class: SeatClass | None = None) -> int:
        client = kvrocks_client.get_client()
        if seat_class is not None:
            return await client.delete(
                make_price_cache_key(flight_id=flight_id, seat_class=seat_class.value)
            )
        return await self._delete_matching(make_price_cache_pattern(flight_id=flight_id))

    @Logger.io
    @translate_store_errors
    async def clear(self) -> int:
        return await self._delete_matching(make_price_cache_pattern())

    async def _delete_matching(self, pattern: str) -> int:
        client = kvrocks_client.get_client()
        keys = [key async for key in client.scan_iter(match=pattern, count=500)]
        if not keys:
            return 0
        return await client.delete(*keys)
