"""
Test Configuration and Fixtures

- Environment is set before any application import (settings and key
  prefixes are read at import time)
- Unit tests run every use case against the in-memory adapters, all sharing
  one InMemoryStateStore driven by a FrozenClock
- Kvrocks integration tests live in test/integration and skip when no
  server is reachable
"""

# =============================================================================
# Environment setup MUST happen before any other imports
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    worker_id = os.environ.get('PYTEST_XDIST_WORKER', 'master')
    if worker_id == 'master':
        os.environ['KVROCKS_KEY_PREFIX'] = 'test_'
    else:
        os.environ['KVROCKS_KEY_PREFIX'] = f'test_{worker_id}_'

    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ.setdefault('STATE_BACKEND', 'memory')
    os.environ.setdefault('STORE_RETRY_BACKOFF_SECONDS', '0')


_early_setup_test_environment()

import pytest  # noqa: E402

from flight_booking.platform.state.in_memory_state_store import InMemoryStateStore  # noqa: E402
from flight_booking.service.booking.app.command.cancel_booking_use_case import (  # noqa: E402
    CancelBookingUseCase,
)
from flight_booking.service.booking.app.command.check_in_booking_use_case import (  # noqa: E402
    CheckInBookingUseCase,
)
from flight_booking.service.booking.app.command.commit_booking_use_case import (  # noqa: E402
    CommitBookingUseCase,
)
from flight_booking.service.booking.app.command.complete_booking_use_case import (  # noqa: E402
    CompleteBookingUseCase,
)
from flight_booking.service.booking.app.command.confirm_booking_payment_use_case import (  # noqa: E402
    ConfirmBookingPaymentUseCase,
)
from flight_booking.service.booking.app.query.get_booking_use_case import (  # noqa: E402
    GetBookingUseCase,
)
from flight_booking.service.booking.driven_adapter.state.in_memory_booking_repo_impl import (  # noqa: E402
    InMemoryBookingCommandRepoImpl,
    InMemoryBookingQueryRepoImpl,
)
from flight_booking.service.hold.app.command.block_seats_use_case import (  # noqa: E402
    BlockSeatsUseCase,
)
from flight_booking.service.hold.app.command.extend_seat_block_use_case import (  # noqa: E402
    ExtendSeatBlockUseCase,
)
from flight_booking.service.hold.app.command.release_seat_use_case import (  # noqa: E402
    ReleaseSeatUseCase,
)
from flight_booking.service.hold.app.command.sweep_expired_holds_use_case import (  # noqa: E402
    SweepExpiredHoldsUseCase,
)
from flight_booking.service.hold.app.query.get_seat_block_use_case import (  # noqa: E402
    GetSeatBlockUseCase,
)
from flight_booking.service.hold.app.query.list_flight_held_seats_use_case import (  # noqa: E402
    ListFlightHeldSeatsUseCase,
)
from flight_booking.service.hold.driven_adapter.state.in_memory_hold_impl import (  # noqa: E402
    InMemoryHoldStoreImpl,
    InMemoryLockServiceImpl,
)
from flight_booking.service.inventory.app.command.initialize_flight_use_case import (  # noqa: E402
    InitializeFlightUseCase,
)
from flight_booking.service.inventory.app.command.update_flight_use_case import (  # noqa: E402
    UpdateFlightUseCase,
)
from flight_booking.service.inventory.app.query.get_flight_availability_use_case import (  # noqa: E402
    GetFlightAvailabilityUseCase,
)
from flight_booking.service.inventory.domain.flight_entity import Flight  # noqa: E402
from flight_booking.service.inventory.driven_adapter.state.in_memory_seat_inventory_store_impl import (  # noqa: E402
    InMemorySeatInventoryStoreImpl,
)
from flight_booking.service.pricing.app.command.invalidate_price_cache_use_case import (  # noqa: E402
    InvalidatePriceCacheUseCase,
)
from flight_booking.service.pricing.app.command.update_route_pricing_use_case import (  # noqa: E402
    UpdateRoutePricingUseCase,
)
from flight_booking.service.pricing.app.query.calculate_price_use_case import (  # noqa: E402
    CalculatePriceUseCase,
)
from flight_booking.service.pricing.driven_adapter.state.in_memory_pricing_impl import (  # noqa: E402
    InMemoryPriceCacheImpl,
    InMemoryRoutePricingRepoImpl,
)
from test.shared.utils import FrozenClock, build_flight, build_seats  # noqa: E402


HOLD_DEFAULT_SECONDS = 300
HOLD_MAX_SECONDS = 1800
HOLD_MAX_SEATS = 9
PRICE_CACHE_TTL_SECONDS = 300


# =============================================================================
# Clock and shared state
# =============================================================================
@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def state_store(clock: FrozenClock) -> InMemoryStateStore:
    return InMemoryStateStore(clock=clock)


# =============================================================================
# Driven adapters
# =============================================================================
@pytest.fixture
def inventory_store(state_store: InMemoryStateStore) -> InMemorySeatInventoryStoreImpl:
    return InMemorySeatInventoryStoreImpl(store=state_store)


@pytest.fixture
def lock_service(state_store: InMemoryStateStore) -> InMemoryLockServiceImpl:
    return InMemoryLockServiceImpl(store=state_store)


@pytest.fixture
def hold_store(state_store: InMemoryStateStore) -> InMemoryHoldStoreImpl:
    return InMemoryHoldStoreImpl(store=state_store)


@pytest.fixture
def price_cache(state_store: InMemoryStateStore) -> InMemoryPriceCacheImpl:
    return InMemoryPriceCacheImpl(store=state_store)


@pytest.fixture
def route_pricing_repo(state_store: InMemoryStateStore) -> InMemoryRoutePricingRepoImpl:
    return InMemoryRoutePricingRepoImpl(store=state_store)


@pytest.fixture
def booking_command_repo(state_store: InMemoryStateStore) -> InMemoryBookingCommandRepoImpl:
    return InMemoryBookingCommandRepoImpl(store=state_store)


@pytest.fixture
def booking_query_repo(state_store: InMemoryStateStore) -> InMemoryBookingQueryRepoImpl:
    return InMemoryBookingQueryRepoImpl(store=state_store)


# =============================================================================
# Pricing use cases
# =============================================================================
@pytest.fixture
def invalidate_price_cache_use_case(
    price_cache: InMemoryPriceCacheImpl,
) -> InvalidatePriceCacheUseCase:
    return InvalidatePriceCacheUseCase(price_cache=price_cache)


@pytest.fixture
def calculate_price_use_case(
    inventory_store: InMemorySeatInventoryStoreImpl,
    price_cache: InMemoryPriceCacheImpl,
    route_pricing_repo: InMemoryRoutePricingRepoImpl,
    clock: FrozenClock,
) -> CalculatePriceUseCase:
    return CalculatePriceUseCase(
        inventory_store=inventory_store,
        price_cache=price_cache,
        route_pricing_repo=route_pricing_repo,
        clock=clock,
        cache_ttl_seconds=PRICE_CACHE_TTL_SECONDS,
    )


@pytest.fixture
def update_route_pricing_use_case(
    route_pricing_repo: InMemoryRoutePricingRepoImpl,
    invalidate_price_cache_use_case: InvalidatePriceCacheUseCase,
) -> UpdateRoutePricingUseCase:
    return UpdateRoutePricingUseCase(
        route_pricing_repo=route_pricing_repo,
        price_cache_invalidator=invalidate_price_cache_use_case,
    )


# =============================================================================
# Inventory use cases
# =============================================================================
@pytest.fixture
def initialize_flight_use_case(
    inventory_store: InMemorySeatInventoryStoreImpl,
    invalidate_price_cache_use_case: InvalidatePriceCacheUseCase,
) -> InitializeFlightUseCase:
    return InitializeFlightUseCase(
        inventory_store=inventory_store,
        price_cache_invalidator=invalidate_price_cache_use_case,
    )


@pytest.fixture
def update_flight_use_case(
    inventory_store: InMemorySeatInventoryStoreImpl,
    invalidate_price_cache_use_case: InvalidatePriceCacheUseCase,
) -> UpdateFlightUseCase:
    return UpdateFlightUseCase(
        inventory_store=inventory_store,
        price_cache_invalidator=invalidate_price_cache_use_case,
    )


@pytest.fixture
def get_flight_availability_use_case(
    inventory_store: InMemorySeatInventoryStoreImpl,
) -> GetFlightAvailabilityUseCase:
    return GetFlightAvailabilityUseCase(inventory_store=inventory_store)


@pytest.fixture
async def flight(initialize_flight_use_case: InitializeFlightUseCase) -> Flight:
    """FL100: 4 business seats (1A-2B), 20 economy seats (10A-14D), base price 10000."""
    return await initialize_flight_use_case.execute(flight=build_flight(), seats=build_seats())


# =============================================================================
# Hold use cases
# =============================================================================
@pytest.fixture
def block_seats_use_case(
    lock_service: InMemoryLockServiceImpl,
    hold_store: InMemoryHoldStoreImpl,
    inventory_store: InMemorySeatInventoryStoreImpl,
    calculate_price_use_case: CalculatePriceUseCase,
    clock: FrozenClock,
) -> BlockSeatsUseCase:
    return BlockSeatsUseCase(
        lock_service=lock_service,
        hold_store=hold_store,
        inventory_store=inventory_store,
        price_calculator=calculate_price_use_case,
        clock=clock,
        default_hold_seconds=HOLD_DEFAULT_SECONDS,
        max_hold_seconds=HOLD_MAX_SECONDS,
        max_seats_per_hold=HOLD_MAX_SEATS,
        retry_attempts=3,
        retry_backoff_seconds=0,
    )


@pytest.fixture
def release_seat_use_case(
    lock_service: InMemoryLockServiceImpl,
    hold_store: InMemoryHoldStoreImpl,
    inventory_store: InMemorySeatInventoryStoreImpl,
    invalidate_price_cache_use_case: InvalidatePriceCacheUseCase,
) -> ReleaseSeatUseCase:
    return ReleaseSeatUseCase(
        lock_service=lock_service,
        hold_store=hold_store,
        inventory_store=inventory_store,
        price_cache_invalidator=invalidate_price_cache_use_case,
        retry_attempts=3,
        retry_backoff_seconds=0,
    )


@pytest.fixture
def extend_seat_block_use_case(
    lock_service: InMemoryLockServiceImpl,
    hold_store: InMemoryHoldStoreImpl,
    clock: FrozenClock,
) -> ExtendSeatBlockUseCase:
    return ExtendSeatBlockUseCase(
        lock_service=lock_service,
        hold_store=hold_store,
        clock=clock,
        max_hold_seconds=HOLD_MAX_SECONDS,
    )


@pytest.fixture
def sweep_expired_holds_use_case(
    lock_service: InMemoryLockServiceImpl,
    inventory_store: InMemorySeatInventoryStoreImpl,
    invalidate_price_cache_use_case: InvalidatePriceCacheUseCase,
) -> SweepExpiredHoldsUseCase:
    return SweepExpiredHoldsUseCase(
        lock_service=lock_service,
        inventory_store=inventory_store,
        price_cache_invalidator=invalidate_price_cache_use_case,
        sweep_lock_seconds=5,
    )


@pytest.fixture
def get_seat_block_use_case(
    lock_service: InMemoryLockServiceImpl, hold_store: InMemoryHoldStoreImpl
) -> GetSeatBlockUseCase:
    return GetSeatBlockUseCase(lock_service=lock_service, hold_store=hold_store)


@pytest.fixture
def list_flight_held_seats_use_case(
    lock_service: InMemoryLockServiceImpl,
) -> ListFlightHeldSeatsUseCase:
    return ListFlightHeldSeatsUseCase(lock_service=lock_service)


# =============================================================================
# Booking use cases
# =============================================================================
@pytest.fixture
def commit_booking_use_case(
    hold_store: InMemoryHoldStoreImpl,
    booking_command_repo: InMemoryBookingCommandRepoImpl,
    booking_query_repo: InMemoryBookingQueryRepoImpl,
    release_seat_use_case: ReleaseSeatUseCase,
    invalidate_price_cache_use_case: InvalidatePriceCacheUseCase,
    clock: FrozenClock,
) -> CommitBookingUseCase:
    return CommitBookingUseCase(
        hold_store=hold_store,
        booking_command_repo=booking_command_repo,
        booking_query_repo=booking_query_repo,
        release_seat_use_case=release_seat_use_case,
        price_cache_invalidator=invalidate_price_cache_use_case,
        clock=clock,
        reference_prefix='FB',
        reference_max_attempts=5,
        retry_attempts=3,
        retry_backoff_seconds=0,
    )


@pytest.fixture
def cancel_booking_use_case(
    booking_command_repo: InMemoryBookingCommandRepoImpl,
    booking_query_repo: InMemoryBookingQueryRepoImpl,
    inventory_store: InMemorySeatInventoryStoreImpl,
    invalidate_price_cache_use_case: InvalidatePriceCacheUseCase,
    clock: FrozenClock,
) -> CancelBookingUseCase:
    return CancelBookingUseCase(
        booking_command_repo=booking_command_repo,
        booking_query_repo=booking_query_repo,
        inventory_store=inventory_store,
        price_cache_invalidator=invalidate_price_cache_use_case,
        clock=clock,
        cancellation_cutoff_hours=2.0,
    )


@pytest.fixture
def check_in_booking_use_case(
    booking_command_repo: InMemoryBookingCommandRepoImpl,
    booking_query_repo: InMemoryBookingQueryRepoImpl,
    inventory_store: InMemorySeatInventoryStoreImpl,
    clock: FrozenClock,
) -> CheckInBookingUseCase:
    return CheckInBookingUseCase(
        booking_command_repo=booking_command_repo,
        booking_query_repo=booking_query_repo,
        inventory_store=inventory_store,
        clock=clock,
        window_opens_hours=24.0,
        window_closes_hours=1.0,
    )


@pytest.fixture
def confirm_booking_payment_use_case(
    booking_command_repo: InMemoryBookingCommandRepoImpl,
    booking_query_repo: InMemoryBookingQueryRepoImpl,
    cancel_booking_use_case: CancelBookingUseCase,
    clock: FrozenClock,
) -> ConfirmBookingPaymentUseCase:
    return ConfirmBookingPaymentUseCase(
        booking_command_repo=booking_command_repo,
        booking_query_repo=booking_query_repo,
        cancel_booking_use_case=cancel_booking_use_case,
        clock=clock,
    )


@pytest.fixture
def complete_booking_use_case(
    booking_command_repo: InMemoryBookingCommandRepoImpl,
    booking_query_repo: InMemoryBookingQueryRepoImpl,
    clock: FrozenClock,
) -> CompleteBookingUseCase:
    return CompleteBookingUseCase(
        booking_command_repo=booking_command_repo,
        booking_query_repo=booking_query_repo,
        clock=clock,
    )


@pytest.fixture
def get_booking_use_case(booking_query_repo: InMemoryBookingQueryRepoImpl) -> GetBookingUseCase:
    return GetBookingUseCase(booking_query_repo=booking_query_repo)
