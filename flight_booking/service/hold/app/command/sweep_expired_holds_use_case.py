from opentelemetry import trace
import uuid_utils

from flight_booking.platform.logging.loguru_io import Logger
from flight_booking.service.hold.app.interface import ILockService
from flight_booking.service.inventory.app.interface import ISeatInventoryStore
from flight_booking.service.pricing.app.command.invalidate_price_cache_use_case import (
    InvalidatePriceCacheUseCase,
)
from flight_booking.service.hold.app.dto import SweepResult
from flight_booking.service.shared_kernel.domain.enum import SeatState


SWEEPER_HOLDER_ID = '__sweeper__'


class SweepExpiredHoldsUseCase:
    """
    Revert seats still marked held whose lock has expired.

    The store deletes expired locks on its own but cannot touch the seat
    marker. For each orphaned marker the sweeper takes the seat lock itself
    for a few seconds, so a new holder can never be racing the revert.
    """

    def __init__(
        self,
        *,
        lock_service: ILockService,
        inventory_store: ISeatInventoryStore,
        price_cache_invalidator: InvalidatePriceCacheUseCase,
        sweep_lock_seconds: int,
    ) -> None:
        self.lock_service = lock_service
        self.inventory_store = inventory_store
        self.price_cache_invalidator = price_cache_invalidator
        self.sweep_lock_seconds = sweep_lock_seconds
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def execute(self, *, flight_id: str | None = None) -> SweepResult:
        with self.tracer.start_as_current_span('hold.sweep_expired') as span:
            flight_ids = (
                [flight_id] if flight_id else await self.inventory_store.list_flight_ids()
            )
            reverted: list[tuple[str, str]] = []
            skipped: list[tuple[str, str]] = []
            for current_flight in flight_ids:
                flight_reverted, flight_skipped = await self._sweep_flight(current_flight)
                reverted += [(current_flight, seat_id) for seat_id in flight_reverted]
                skipped += [(current_flight, seat_id) for seat_id in flight_skipped]

            span.set_attribute('sweep.reverted', len(reverted))
            if reverted:
                Logger.base.info(f'🧹 [SWEEP] reverted {len(reverted)} expired holds')
            return SweepResult(flights_checked=len(flight_ids), reverted=reverted, skipped=skipped)

    async def _sweep_flight(self, flight_id: str) -> tuple[list[str], list[str]]:
        reverted: list[str] = []
        skipped: list[str] = []
        held = await self.inventory_store.list_seats(flight_id=flight_id, state=SeatState.HELD)
        for seat in held:
            if await self.lock_service.get(flight_id=flight_id, seat_id=seat.seat_id):
                continue  # live hold

            session_id = str(uuid_utils.uuid7())
            acquisition = await self.lock_service.acquire(
                flight_id=flight_id,
                seat_id=seat.seat_id,
                holder_id=SWEEPER_HOLDER_ID,
                session_id=session_id,
                ttl_seconds=self.sweep_lock_seconds,
            )
            if not acquisition.acquired:
                skipped.append(seat.seat_id)
                continue
            try:
                transition = await self.inventory_store.transition_seat_state(
                    flight_id=flight_id,
                    seat_id=seat.seat_id,
                    allowed_from={SeatState.HELD},
                    new_state=SeatState.AVAILABLE,
                )
            finally:
                await self.lock_service.release_if_owner(
                    flight_id=flight_id,
                    seat_id=seat.seat_id,
                    holder_id=SWEEPER_HOLDER_ID,
                    session_id=session_id,
                )
            if transition.success:
                reverted.append(seat.seat_id)

        if held:
            await self.inventory_store.recompute_availability(flight_id=flight_id)
        if reverted:
            await self.price_cache_invalidator.invalidate(flight_id=flight_id)
        return reverted, skipped
