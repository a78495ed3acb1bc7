"""
Unit tests for SweepExpiredHoldsUseCase and the HoldSweeper driver

Seats whose lock expired without release still read "held" until swept.
"""

from unittest.mock import AsyncMock

import pytest

from flight_booking.service.hold.app.command.block_seats_use_case import BlockSeatsUseCase
from flight_booking.service.hold.app.command.sweep_expired_holds_use_case import (
    SweepExpiredHoldsUseCase,
)
from flight_booking.service.hold.app.dto import SweepResult
from flight_booking.service.hold.app.query.list_flight_held_seats_use_case import (
    ListFlightHeldSeatsUseCase,
)
from flight_booking.service.hold.driven_adapter.state.in_memory_hold_impl import (
    InMemoryLockServiceImpl,
)
from flight_booking.service.hold.driving_adapter.hold_sweeper import HoldSweeper
from flight_booking.service.inventory.domain.flight_entity import Flight
from flight_booking.service.inventory.driven_adapter.state.in_memory_seat_inventory_store_impl import (
    InMemorySeatInventoryStoreImpl,
)
from flight_booking.service.pricing.app.command.invalidate_price_cache_use_case import (
    InvalidatePriceCacheUseCase,
)
from flight_booking.service.shared_kernel.domain.enum import SeatClass, SeatState
from test.shared.utils import FrozenClock


@pytest.mark.unit
class TestSweepExpiredHolds:
    async def test_expired_markers_are_reverted(
        self,
        block_seats_use_case: BlockSeatsUseCase,
        sweep_expired_holds_use_case: SweepExpiredHoldsUseCase,
        inventory_store: InMemorySeatInventoryStoreImpl,
        lock_service: InMemoryLockServiceImpl,
        clock: FrozenClock,
        flight: Flight,
    ) -> None:
        await block_seats_use_case.block_seats(
            flight_id=flight.id, seat_ids=['12A', '12B'], holder_id='alice', hold_seconds=60
        )
        await block_seats_use_case.block_seat(flight_id=flight.id, seat_id='13A', holder_id='bob')
        clock.advance(seconds=61)

        result = await sweep_expired_holds_use_case.execute()

        assert result.flights_checked == 1
        assert sorted(result.reverted) == [(flight.id, '12A'), (flight.id, '12B')]
        assert result.skipped == []
        states = {
            seat_id: await inventory_store.get_seat_state(flight_id=flight.id, seat_id=seat_id)
            for seat_id in ('12A', '12B', '13A')
        }
        assert states == {'12A': SeatState.AVAILABLE, '12B': SeatState.AVAILABLE, '13A': SeatState.HELD}
        availability = await inventory_store.get_class_availability(
            flight_id=flight.id, seat_class=SeatClass.ECONOMY
        )
        assert (availability.available, availability.held) == (19, 1)
        # The sweeper's own short locks are gone
        assert [lock.seat_id for lock in await lock_service.list_locks(flight_id=flight.id)] == ['13A']

    async def test_nothing_to_sweep(
        self,
        sweep_expired_holds_use_case: SweepExpiredHoldsUseCase,
        flight: Flight,
    ) -> None:
        result = await sweep_expired_holds_use_case.execute(flight_id=flight.id)
        assert result == SweepResult(flights_checked=1)

    async def test_seat_relocked_mid_sweep_is_skipped(
        self,
        inventory_store: InMemorySeatInventoryStoreImpl,
        invalidate_price_cache_use_case: InvalidatePriceCacheUseCase,
        flight: Flight,
    ) -> None:
        await inventory_store.set_seat_state(
            flight_id=flight.id, seat_id='12A', new_state=SeatState.HELD
        )
        lock_service = AsyncMock()
        lock_service.get = AsyncMock(return_value=None)
        lock_service.acquire = AsyncMock(return_value=AsyncMock(acquired=False))
        use_case = SweepExpiredHoldsUseCase(
            lock_service=lock_service,
            inventory_store=inventory_store,
            price_cache_invalidator=invalidate_price_cache_use_case,
            sweep_lock_seconds=5,
        )

        result = await use_case.execute(flight_id=flight.id)

        assert result.skipped == [(flight.id, '12A')]
        assert result.reverted == []
        assert (
            await inventory_store.get_seat_state(flight_id=flight.id, seat_id='12A')
            == SeatState.HELD
        )


@pytest.mark.unit
class TestListFlightHeldSeats:
    async def test_lists_live_locks_only(
        self,
        block_seats_use_case: BlockSeatsUseCase,
        list_flight_held_seats_use_case: ListFlightHeldSeatsUseCase,
        clock: FrozenClock,
        flight: Flight,
    ) -> None:
        await block_seats_use_case.block_seat(
            flight_id=flight.id, seat_id='12A', holder_id='alice', hold_seconds=60
        )
        await block_seats_use_case.block_seat(flight_id=flight.id, seat_id='1A', holder_id='bob')
        clock.advance(seconds=61)

        locks = await list_flight_held_seats_use_case.execute(flight_id=flight.id)
        assert [(lock.seat_id, lock.holder_id) for lock in locks] == [('1A', 'bob')]


@pytest.mark.unit
class TestHoldSweeper:
    async def test_run_once_returns_the_sweep(
        self, sweep_expired_holds_use_case: SweepExpiredHoldsUseCase, flight: Flight
    ) -> None:
        sweeper = HoldSweeper(sweep_use_case=sweep_expired_holds_use_case, interval_seconds=0.01)
        result = await sweeper.run_once()
        assert result is not None and result.flights_checked == 1

    async def test_failed_pass_does_not_raise(self) -> None:
        use_case = AsyncMock()
        use_case.execute = AsyncMock(side_effect=RuntimeError('store down'))
        sweeper = HoldSweeper(sweep_use_case=use_case, interval_seconds=0.01)

        assert await sweeper.run_once() is None

    async def test_stop_ends_the_loop(self) -> None:
        use_case = AsyncMock()
        use_case.execute = AsyncMock(return_value=SweepResult())
        sweeper = HoldSweeper(sweep_use_case=use_case, interval_seconds=0.01)
        sweeper.stop()

        await sweeper.start()

        use_case.execute.assert_not_awaited()
