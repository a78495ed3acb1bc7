"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/providers/selector.html
"""

from dependency_injector import containers, providers

from flight_booking.platform.config.core_setting import Settings
from flight_booking.platform.state.in_memory_state_store import InMemoryStateStore
from flight_booking.platform.time.clock import SystemClock
from flight_booking.service.booking.app.command.cancel_booking_use_case import (
    CancelBookingUseCase,
)
from flight_booking.service.booking.app.command.check_in_booking_use_case import (
    CheckInBookingUseCase,
)
from flight_booking.service.booking.app.command.commit_booking_use_case import (
    CommitBookingUseCase,
)
from flight_booking.service.booking.app.command.complete_booking_use_case import (
    CompleteBookingUseCase,
)
from flight_booking.service.booking.app.command.confirm_booking_payment_use_case import (
    ConfirmBookingPaymentUseCase,
)
from flight_booking.service.booking.app.query.get_booking_use_case import GetBookingUseCase
from flight_booking.service.booking.driven_adapter.state.booking_command_repo_impl import (
    BookingCommandRepoImpl,
)
from flight_booking.service.booking.driven_adapter.state.booking_query_repo_impl import (
    BookingQueryRepoImpl,
)
from flight_booking.service.booking.driven_adapter.state.in_memory_booking_repo_impl import (
    InMemoryBookingCommandRepoImpl,
    InMemoryBookingQueryRepoImpl,
)
from flight_booking.service.hold.app.command.block_seats_use_case import BlockSeatsUseCase
from flight_booking.service.hold.app.command.extend_seat_block_use_case import (
    ExtendSeatBlockUseCase,
)
from flight_booking.service.hold.app.command.release_seat_use_case import ReleaseSeatUseCase
from flight_booking.service.hold.app.command.sweep_expired_holds_use_case import (
    SweepExpiredHoldsUseCase,
)
from flight_booking.service.hold.app.query.get_seat_block_use_case import GetSeatBlockUseCase
from flight_booking.service.hold.app.query.list_flight_held_seats_use_case import (
    ListFlightHeldSeatsUseCase,
)
from flight_booking.service.hold.driven_adapter.state.hold_store_impl import HoldStoreImpl
from flight_booking.service.hold.driven_adapter.state.in_memory_hold_impl import (
    InMemoryHoldStoreImpl,
    InMemoryLockServiceImpl,
)
from flight_booking.service.hold.driven_adapter.state.lock_service_impl import LockServiceImpl
from flight_booking.service.inventory.app.command.initialize_flight_use_case import (
    InitializeFlightUseCase,
)
from flight_booking.service.inventory.app.command.update_flight_use_case import (
    UpdateFlightUseCase,
)
from flight_booking.service.inventory.app.query.get_flight_availability_use_case import (
    GetFlightAvailabilityUseCase,
)
from flight_booking.service.inventory.driven_adapter.state.in_memory_seat_inventory_store_impl import (
    InMemorySeatInventoryStoreImpl,
)
from flight_booking.service.inventory.driven_adapter.state.seat_inventory_store_impl import (
    SeatInventoryStoreImpl,
)
from flight_booking.service.pricing.app.command.invalidate_price_cache_use_case import (
    InvalidatePriceCacheUseCase,
)
from flight_booking.service.pricing.app.command.update_route_pricing_use_case import (
    UpdateRoutePricingUseCase,
)
from flight_booking.service.pricing.app.query.calculate_price_use_case import (
    CalculatePriceUseCase,
)
from flight_booking.service.pricing.driven_adapter.state.in_memory_pricing_impl import (
    InMemoryPriceCacheImpl,
    InMemoryRoutePricingRepoImpl,
)
from flight_booking.service.pricing.driven_adapter.state.price_cache_impl import PriceCacheImpl
from flight_booking.service.pricing.driven_adapter.state.route_pricing_repo_impl import (
    RoutePricingRepoImpl,
)


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)
    state_backend = config_service.provided.STATE_BACKEND

    # Time source (tests override with a frozen clock)
    clock = providers.Singleton(SystemClock)

    # Shared in-process state for STATE_BACKEND=memory
    in_memory_state_store = providers.Singleton(InMemoryStateStore, clock=clock)

    # Driven adapters: Kvrocks or in-memory, picked by STATE_BACKEND
    inventory_store = providers.Selector(
        state_backend,
        kvrocks=providers.Singleton(SeatInventoryStoreImpl),
        memory=providers.Singleton(InMemorySeatInventoryStoreImpl, store=in_memory_state_store),
    )
    lock_service = providers.Selector(
        state_backend,
        kvrocks=providers.Singleton(LockServiceImpl, clock=clock),
        memory=providers.Singleton(InMemoryLockServiceImpl, store=in_memory_state_store),
    )
    hold_store = providers.Selector(
        state_backend,
        kvrocks=providers.Singleton(HoldStoreImpl, clock=clock),
        memory=providers.Singleton(InMemoryHoldStoreImpl, store=in_memory_state_store),
    )
    price_cache = providers.Selector(
        state_backend,
        kvrocks=providers.Singleton(PriceCacheImpl),
        memory=providers.Singleton(InMemoryPriceCacheImpl, store=in_memory_state_store),
    )
    route_pricing_repo = providers.Selector(
        state_backend,
        kvrocks=providers.Singleton(RoutePricingRepoImpl),
        memory=providers.Singleton(InMemoryRoutePricingRepoImpl, store=in_memory_state_store),
    )
    booking_command_repo = providers.Selector(
        state_backend,
        kvrocks=providers.Singleton(BookingCommandRepoImpl),
        memory=providers.Singleton(InMemoryBookingCommandRepoImpl, store=in_memory_state_store),
    )
    booking_query_repo = providers.Selector(
        state_backend,
        kvrocks=providers.Singleton(BookingQueryRepoImpl),
        memory=providers.Singleton(InMemoryBookingQueryRepoImpl, store=in_memory_state_store),
    )

    # Pricing Use Cases
    invalidate_price_cache_use_case = providers.Singleton(
        InvalidatePriceCacheUseCase, price_cache=price_cache
    )
    calculate_price_use_case = providers.Singleton(
        CalculatePriceUseCase,
        inventory_store=inventory_store,
        price_cache=price_cache,
        route_pricing_repo=route_pricing_repo,
        clock=clock,
        cache_ttl_seconds=config_service.provided.PRICE_CACHE_TTL_SECONDS,
    )
    update_route_pricing_use_case = providers.Singleton(
        UpdateRoutePricingUseCase,
        route_pricing_repo=route_pricing_repo,
        price_cache_invalidator=invalidate_price_cache_use_case,
    )

    # Inventory Use Cases
    initialize_flight_use_case = providers.Singleton(
        InitializeFlightUseCase,
        inventory_store=inventory_store,
        price_cache_invalidator=invalidate_price_cache_use_case,
    )
    update_flight_use_case = providers.Singleton(
        UpdateFlightUseCase,
        inventory_store=inventory_store,
        price_cache_invalidator=invalidate_price_cache_use_case,
    )
    get_flight_availability_use_case = providers.Singleton(
        GetFlightAvailabilityUseCase, inventory_store=inventory_store
    )

    # Hold Use Cases
    block_seats_use_case = providers.Singleton(
        BlockSeatsUseCase,
        lock_service=lock_service,
        hold_store=hold_store,
        inventory_store=inventory_store,
        price_calculator=calculate_price_use_case,
        clock=clock,
        default_hold_seconds=config_service.provided.HOLD_DEFAULT_SECONDS,
        max_hold_seconds=config_service.provided.HOLD_MAX_SECONDS,
        max_seats_per_hold=config_service.provided.HOLD_MAX_SEATS,
        retry_attempts=config_service.provided.STORE_RETRY_ATTEMPTS,
        retry_backoff_seconds=config_service.provided.STORE_RETRY_BACKOFF_SECONDS,
    )
    release_seat_use_case = providers.Singleton(
        ReleaseSeatUseCase,
        lock_service=lock_service,
        hold_store=hold_store,
        inventory_store=inventory_store,
        price_cache_invalidator=invalidate_price_cache_use_case,
        retry_attempts=config_service.provided.STORE_RETRY_ATTEMPTS,
        retry_backoff_seconds=config_service.provided.STORE_RETRY_BACKOFF_SECONDS,
    )
    extend_seat_block_use_case = providers.Singleton(
        ExtendSeatBlockUseCase,
        lock_service=lock_service,
        hold_store=hold_store,
        clock=clock,
        max_hold_seconds=config_service.provided.HOLD_MAX_SECONDS,
    )
    sweep_expired_holds_use_case = providers.Singleton(
        SweepExpiredHoldsUseCase,
        lock_service=lock_service,
        inventory_store=inventory_store,
        price_cache_invalidator=invalidate_price_cache_use_case,
        sweep_lock_seconds=config_service.provided.HOLD_SWEEP_LOCK_SECONDS,
    )
    get_seat_block_use_case = providers.Singleton(
        GetSeatBlockUseCase, lock_service=lock_service, hold_store=hold_store
    )
    list_flight_held_seats_use_case = providers.Singleton(
        ListFlightHeldSeatsUseCase, lock_service=lock_service
    )

    # Booking Use Cases
    commit_booking_use_case = providers.Singleton(
        CommitBookingUseCase,
        hold_store=hold_store,
        booking_command_repo=booking_command_repo,
        booking_query_repo=booking_query_repo,
        release_seat_use_case=release_seat_use_case,
        price_cache_invalidator=invalidate_price_cache_use_case,
        clock=clock,
        reference_prefix=config_service.provided.BOOKING_REFERENCE_PREFIX,
        reference_max_attempts=config_service.provided.BOOKING_REFERENCE_MAX_ATTEMPTS,
        retry_attempts=config_service.provided.STORE_RETRY_ATTEMPTS,
        retry_backoff_seconds=config_service.provided.STORE_RETRY_BACKOFF_SECONDS,
    )
    cancel_booking_use_case = providers.Singleton(
        CancelBookingUseCase,
        booking_command_repo=booking_command_repo,
        booking_query_repo=booking_query_repo,
        inventory_store=inventory_store,
        price_cache_invalidator=invalidate_price_cache_use_case,
        clock=clock,
        cancellation_cutoff_hours=config_service.provided.CANCELLATION_CUTOFF_HOURS,
    )
    check_in_booking_use_case = providers.Singleton(
        CheckInBookingUseCase,
        booking_command_repo=booking_command_repo,
        booking_query_repo=booking_query_repo,
        inventory_store=inventory_store,
        clock=clock,
        window_opens_hours=config_service.provided.CHECKIN_OPENS_HOURS,
        window_closes_hours=config_service.provided.CHECKIN_CLOSES_HOURS,
    )
    confirm_booking_payment_use_case = providers.Singleton(
        ConfirmBookingPaymentUseCase,
        booking_command_repo=booking_command_repo,
        booking_query_repo=booking_query_repo,
        cancel_booking_use_case=cancel_booking_use_case,
        clock=clock,
    )
    complete_booking_use_case = providers.Singleton(
        CompleteBookingUseCase,
        booking_command_repo=booking_command_repo,
        booking_query_repo=booking_query_repo,
        clock=clock,
    )
    get_booking_use_case = providers.Singleton(
        GetBookingUseCase, booking_query_repo=booking_query_repo
    )


container = Container()
