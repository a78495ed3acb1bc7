"""In-memory price cache and route pricing repo over InMemoryStateStore."""

from datetime import timedelta

from flight_booking.platform.state.in_memory_state_store import InMemoryStateStore
from flight_booking.service.inventory.domain.flight_entity import RouteKey
from flight_booking.service.pricing.app.interface import IPriceCache, IRoutePricingRepo
from flight_booking.service.pricing.domain.price_quote import PriceQuote
from flight_booking.service.pricing.domain.route_pricing import RoutePricing
from flight_booking.service.shared_kernel.domain.enum import SeatClass
from flight_booking.service.shared_kernel.driven_adapter.key_str_generator import (
    make_price_cache_key,
    make_route_pricing_key,
)


class InMemoryPriceCacheImpl(IPriceCache):
    def __init__(self, *, store: InMemoryStateStore) -> None:
        self.store = store

    async def get(self, *, flight_id: str, seat_class: SeatClass) -> PriceQuote | None:
        async with self.store.lock:
            return self.store.get(
                make_price_cache_key(flight_id=flight_id, seat_class=seat_class.value)
            )

    async def set(self, *, quote: PriceQuote, ttl_seconds: int) -> None:
        async with self.store.lock:
            self.store.set(
                make_price_cache_key(flight_id=quote.flight_id, seat_class=quote.seat_class.value),
                quote,
                expires_at=self.store.clock.now() + timedelta(seconds=ttl_seconds),
            )

    async def invalidate(self, *, flight_id: str, seat_class: SeatClass | None = None) -> int:
        async with self.store.lock:
            if seat_class is not None:
                key = make_price_cache_key(flight_id=flight_id, seat_class=seat_class.value)
                return int(self.store.delete(key))
            prefix = make_price_cache_key(flight_id=flight_id, seat_class='')
            return sum(self.store.delete(key) for key in self.store.keys(prefix))

    async def clear(self) -> int:
        async with self.store.lock:
            prefix = make_price_cache_key(flight_id='', seat_class='').removesuffix(':')
            return sum(self.store.delete(key) for key in self.store.keys(prefix))


class InMemoryRoutePricingRepoImpl(IRoutePricingRepo):
    def __init__(self, *, store: InMemoryStateStore) -> None:
        self.store = store

    async def get_route_pricing(self, *, route: RouteKey) -> RoutePricing | None:
        async with self.store.lock:
            return self.store.get(
                make_route_pricing_key(source=route.source, destination=route.destination)
            )

    async def save_route_pricing(self, *, route_pricing: RoutePricing) -> None:
        route = route_pricing.route
        async with self.store.lock:
            self.store.set(
                make_route_pricing_key(source=route.source, destination=route.destination),
                route_pricing,
            )
