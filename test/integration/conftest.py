"""
Kvrocks integration fixtures

Every test gets a fresh connection on its own event loop and removes the
keys under the test prefix afterwards. Tests skip when Kvrocks is not
reachable on KVROCKS_HOST:KVROCKS_PORT.
"""

from collections.abc import AsyncGenerator

import pytest
from redis.asyncio import Redis
from redis.exceptions import ConnectionError as RedisConnectionError, TimeoutError as RedisTimeoutError

from flight_booking.platform.config.core_setting import settings
from flight_booking.platform.state.kvrocks_client import kvrocks_client
from flight_booking.service.booking.app.command.cancel_booking_use_case import (
    CancelBookingUseCase,
)
from flight_booking.service.booking.app.command.commit_booking_use_case import (
    CommitBookingUseCase,
)
from flight_booking.service.booking.driven_adapter.state.booking_command_repo_impl import (
    BookingCommandRepoImpl,
)
from flight_booking.service.booking.driven_adapter.state.booking_query_repo_impl import (
    BookingQueryRepoImpl,
)
from flight_booking.service.hold.app.command.block_seats_use_case import BlockSeatsUseCase
from flight_booking.service.hold.app.command.release_seat_use_case import ReleaseSeatUseCase
from flight_booking.service.hold.driven_adapter.state.hold_store_impl import HoldStoreImpl
from flight_booking.service.hold.driven_adapter.state.lock_service_impl import LockServiceImpl
from flight_booking.service.inventory.domain.flight_entity import Flight
from flight_booking.service.inventory.driven_adapter.state.seat_inventory_store_impl import (
    SeatInventoryStoreImpl,
)
from flight_booking.service.pricing.app.command.invalidate_price_cache_use_case import (
    InvalidatePriceCacheUseCase,
)
from flight_booking.service.pricing.app.query.calculate_price_use_case import (
    CalculatePriceUseCase,
)
from flight_booking.service.pricing.driven_adapter.state.price_cache_impl import PriceCacheImpl
from flight_booking.service.pricing.driven_adapter.state.route_pricing_repo_impl import (
    RoutePricingRepoImpl,
)
from test.shared.utils import FrozenClock, build_flight, build_seats


@pytest.fixture
async def kvrocks() -> AsyncGenerator[Redis, None]:
    try:
        client = await kvrocks_client.initialize()
    except (RedisConnectionError, RedisTimeoutError, OSError) as e:
        await kvrocks_client.disconnect()
        pytest.skip(f'Kvrocks not reachable: {e}')

    yield client

    keys = [key async for key in client.scan_iter(match=f'{settings.KVROCKS_KEY_PREFIX}*')]
    if keys:
        await client.delete(*keys)
    await kvrocks_client.disconnect()


@pytest.fixture
def kv_inventory_store(kvrocks: Redis) -> SeatInventoryStoreImpl:
    return SeatInventoryStoreImpl()


@pytest.fixture
def kv_lock_service(kvrocks: Redis, clock: FrozenClock) -> LockServiceImpl:
    return LockServiceImpl(clock=clock)


@pytest.fixture
def kv_hold_store(kvrocks: Redis, clock: FrozenClock) -> HoldStoreImpl:
    return HoldStoreImpl(clock=clock)


@pytest.fixture
def kv_price_cache(kvrocks: Redis) -> PriceCacheImpl:
    return PriceCacheImpl()


@pytest.fixture
def kv_booking_command_repo(kvrocks: Redis) -> BookingCommandRepoImpl:
    return BookingCommandRepoImpl()


@pytest.fixture
def kv_booking_query_repo(kvrocks: Redis) -> BookingQueryRepoImpl:
    return BookingQueryRepoImpl()


@pytest.fixture
def kv_invalidator(kv_price_cache: PriceCacheImpl) -> InvalidatePriceCacheUseCase:
    return InvalidatePriceCacheUseCase(price_cache=kv_price_cache)


@pytest.fixture
def kv_calculate_price(
    kv_inventory_store: SeatInventoryStoreImpl,
    kv_price_cache: PriceCacheImpl,
    clock: FrozenClock,
) -> CalculatePriceUseCase:
    return CalculatePriceUseCase(
        inventory_store=kv_inventory_store,
        price_cache=kv_price_cache,
        route_pricing_repo=RoutePricingRepoImpl(),
        clock=clock,
        cache_ttl_seconds=300,
    )


@pytest.fixture
def kv_block_seats(
    kv_lock_service: LockServiceImpl,
    kv_hold_store: HoldStoreImpl,
    kv_inventory_store: SeatInventoryStoreImpl,
    kv_calculate_price: CalculatePriceUseCase,
    clock: FrozenClock,
) -> BlockSeatsUseCase:
    return BlockSeatsUseCase(
        lock_service=kv_lock_service,
        hold_store=kv_hold_store,
        inventory_store=kv_inventory_store,
        price_calculator=kv_calculate_price,
        clock=clock,
        default_hold_seconds=300,
        max_hold_seconds=1800,
        max_seats_per_hold=9,
        retry_attempts=3,
        retry_backoff_seconds=0,
    )


@pytest.fixture
def kv_release_seat(
    kv_lock_service: LockServiceImpl,
    kv_hold_store: HoldStoreImpl,
    kv_inventory_store: SeatInventoryStoreImpl,
    kv_invalidator: InvalidatePriceCacheUseCase,
) -> ReleaseSeatUseCase:
    return ReleaseSeatUseCase(
        lock_service=kv_lock_service,
        hold_store=kv_hold_store,
        inventory_store=kv_inventory_store,
        price_cache_invalidator=kv_invalidator,
        retry_attempts=3,
        retry_backoff_seconds=0,
    )


@pytest.fixture
def kv_commit_booking(
    kv_hold_store: HoldStoreImpl,
    kv_booking_command_repo: BookingCommandRepoImpl,
    kv_booking_query_repo: BookingQueryRepoImpl,
    kv_release_seat: ReleaseSeatUseCase,
    kv_invalidator: InvalidatePriceCacheUseCase,
    clock: FrozenClock,
) -> CommitBookingUseCase:
    return CommitBookingUseCase(
        hold_store=kv_hold_store,
        booking_command_repo=kv_booking_command_repo,
        booking_query_repo=kv_booking_query_repo,
        release_seat_use_case=kv_release_seat,
        price_cache_invalidator=kv_invalidator,
        clock=clock,
        reference_prefix='FB',
        reference_max_attempts=5,
        retry_attempts=3,
        retry_backoff_seconds=0,
    )


@pytest.fixture
def kv_cancel_booking(
    kv_booking_command_repo: BookingCommandRepoImpl,
    kv_booking_query_repo: BookingQueryRepoImpl,
    kv_inventory_store: SeatInventoryStoreImpl,
    kv_invalidator: InvalidatePriceCacheUseCase,
    clock: FrozenClock,
) -> CancelBookingUseCase:
    return CancelBookingUseCase(
        booking_command_repo=kv_booking_command_repo,
        booking_query_repo=kv_booking_query_repo,
        inventory_store=kv_inventory_store,
        price_cache_invalidator=kv_invalidator,
        clock=clock,
        cancellation_cutoff_hours=2.0,
    )


@pytest.fixture
async def kv_flight(kv_inventory_store: SeatInventoryStoreImpl) -> Flight:
    flight = build_flight()
    await kv_inventory_store.save_flight(flight=flight, seats=build_seats())
    return flight
