import asyncio

from opentelemetry import trace

from flight_booking.platform.exception.exceptions import TransientStoreError
from flight_booking.platform.logging.loguru_io import Logger
from flight_booking.service.inventory.app.interface import ISeatInventoryStore
from flight_booking.service.pricing.app.interface import IPriceCache, IRoutePricingRepo
from flight_booking.service.pricing.domain.price_quote import PriceQuote
from flight_booking.service.pricing.domain.pricing_policy import quote_price
from flight_booking.service.shared_kernel.app.interface.i_clock import IClock
from flight_booking.service.shared_kernel.domain.enum import SeatClass


class CalculatePriceUseCase:
    """
    Quote a seat-class price for a flight.

    Flow:
    1. Cache read (a cache outage degrades to recomputation)
    2. On miss: flight snapshot + class availability + route pricing -> pure policy
    3. Cache write with a short TTL, then a re-read of the class counters:
       if bookings moved them since the snapshot, the entry just written is
       dropped (a quote never outlives an invalidation it raced)

    Route pricing lookup failures propagate: a quote without its route
    multiplier would be silently wrong.
    """

    def __init__(
        self,
        *,
        inventory_store: ISeatInventoryStore,
        price_cache: IPriceCache,
        route_pricing_repo: IRoutePricingRepo,
        clock: IClock,
        cache_ttl_seconds: int,
    ) -> None:
        self.inventory_store = inventory_store
        self.price_cache = price_cache
        self.route_pricing_repo = route_pricing_repo
        self.clock = clock
        self.cache_ttl_seconds = cache_ttl_seconds
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def calculate_price(self, *, flight_id: str, seat_class: SeatClass) -> PriceQuote:
        with self.tracer.start_as_current_span(
            'pricing.calculate_price',
            attributes={'flight.id': flight_id, 'seat.class': seat_class.value},
        ) as span:
            cached = await self._read_cache(flight_id=flight_id, seat_class=seat_class)
            span.set_attribute('pricing.cache_hit', cached is not None)
            if cached is not None:
                return cached

            flight = await self.inventory_store.get_flight(flight_id=flight_id)
            availability = await self.inventory_store.get_class_availability(
                flight_id=flight_id, seat_class=seat_class
            )
            route_pricing = await self.route_pricing_repo.get_route_pricing(route=flight.route)

            quote = quote_price(
                flight=flight,
                seat_class=seat_class,
                availability=availability,
                route_pricing=route_pricing,
                now=self.clock.now(),
            )
            await self._write_cache(quote=quote)
            await self._drop_if_superseded(quote=quote, booked=availability.booked)
            return quote

    @Logger.io
    async def calculate_prices(
        self, *, flight_ids: list[str], seat_class: SeatClass = SeatClass.ECONOMY
    ) -> dict[str, PriceQuote]:
        quotes = await asyncio.gather(
            *(
                self.calculate_price(flight_id=flight_id, seat_class=seat_class)
                for flight_id in flight_ids
            )
        )
        return dict(zip(flight_ids, quotes))

    async def _read_cache(self, *, flight_id: str, seat_class: SeatClass) -> PriceQuote | None:
        try:
            return await self.price_cache.get(flight_id=flight_id, seat_class=seat_class)
        except TransientStoreError as e:
            Logger.base.warning(f'⚠️ [PRICE-CACHE] read failed, recomputing: {e}')
            return None

    async def _write_cache(self, *, quote: PriceQuote) -> None:
        try:
            await self.price_cache.set(quote=quote, ttl_seconds=self.cache_ttl_seconds)
        except TransientStoreError as e:
            Logger.base.warning(f'⚠️ [PRICE-CACHE] write failed for {quote.flight_id}: {e}')

    async def _drop_if_superseded(self, *, quote: PriceQuote, booked: int) -> None:
        current = await self.inventory_store.get_class_availability(
            flight_id=quote.flight_id, seat_class=quote.seat_class
        )
        if current.booked == booked:
            return
        Logger.base.debug(
            f'🔄 [PRICE-CACHE] {quote.flight_id}/{quote.seat_class} booked {booked} -> '
            f'{current.booked} while pricing, dropping the new entry'
        )
        try:
            await self.price_cache.invalidate(flight_id=quote.flight_id, seat_class=quote.seat_class)
        except TransientStoreError as e:
            Logger.base.warning(f'⚠️ [PRICE-CACHE] drop failed for {quote.flight_id}: {e}')
