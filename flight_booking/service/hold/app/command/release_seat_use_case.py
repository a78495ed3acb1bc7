from opentelemetry import trace

from flight_booking.platform.logging.loguru_io import Logger
from flight_booking.platform.state.retry import retry_transient
from flight_booking.service.hold.app.dto import LockReleaseOutcome, ReleaseOutcome
from flight_booking.service.hold.app.interface import IHoldStore, ILockService
from flight_booking.service.inventory.app.interface import ISeatInventoryStore
from flight_booking.service.pricing.app.command.invalidate_price_cache_use_case import (
    InvalidatePriceCacheUseCase,
)
from flight_booking.service.shared_kernel.domain.enum import SeatState


class ReleaseSeatUseCase:
    """
    Give back one held seat. Only the holder+session that owns the lock may
    release it. A lock that is already gone is NOT_FOUND, which callers treat
    as success: they cannot tell "expired" from "we just removed it".
    """

    def __init__(
        self,
        *,
        lock_service: ILockService,
        hold_store: IHoldStore,
        inventory_store: ISeatInventoryStore,
        price_cache_invalidator: InvalidatePriceCacheUseCase,
        retry_attempts: int,
        retry_backoff_seconds: float,
    ) -> None:
        self.lock_service = lock_service
        self.hold_store = hold_store
        self.inventory_store = inventory_store
        self.price_cache_invalidator = price_cache_invalidator
        self.retry_attempts = retry_attempts
        self.retry_backoff_seconds = retry_backoff_seconds
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def execute(
        self, *, flight_id: str, seat_id: str, holder_id: str, session_id: str
    ) -> ReleaseOutcome:
        with self.tracer.start_as_current_span(
            'hold.release_seat',
            attributes={'flight.id': flight_id, 'seat.id': seat_id, 'holder.id': holder_id},
        ) as span:
            lock = await self.lock_service.get(flight_id=flight_id, seat_id=seat_id)
            if lock is None:
                span.set_attribute('hold.outcome', ReleaseOutcome.NOT_FOUND)
                return ReleaseOutcome.NOT_FOUND
            if not lock.is_owned_by(holder_id=holder_id, session_id=session_id):
                Logger.base.warning(
                    f'⚠️ [RELEASE] {flight_id}/{seat_id} session mismatch for {holder_id}'
                )
                span.set_attribute('hold.outcome', ReleaseOutcome.UNAUTHORIZED)
                return ReleaseOutcome.UNAUTHORIZED

            # Revert the marker while the lock is still ours, then drop the lock
            await self.inventory_store.transition_seat_state(
                flight_id=flight_id,
                seat_id=seat_id,
                allowed_from={SeatState.HELD},
                new_state=SeatState.AVAILABLE,
            )
            released = await retry_transient(
                lambda: self.lock_service.release_if_owner(
                    flight_id=flight_id,
                    seat_id=seat_id,
                    holder_id=holder_id,
                    session_id=session_id,
                ),
                attempts=self.retry_attempts,
                backoff_seconds=self.retry_backoff_seconds,
                operation_name='lock.release',
            )
            if released == LockReleaseOutcome.NOT_OWNER:
                # Our lock expired and someone else took the seat in between
                await self.inventory_store.transition_seat_state(
                    flight_id=flight_id,
                    seat_id=seat_id,
                    allowed_from={SeatState.AVAILABLE},
                    new_state=SeatState.HELD,
                )
                span.set_attribute('hold.outcome', ReleaseOutcome.UNAUTHORIZED)
                return ReleaseOutcome.UNAUTHORIZED

            await self.hold_store.remove_seat(session_id=session_id, seat_id=seat_id)
            seat = await self.inventory_store.get_seat(flight_id=flight_id, seat_id=seat_id)
            await self.price_cache_invalidator.invalidate(
                flight_id=flight_id, seat_class=seat.seat_class
            )

            span.set_attribute('hold.outcome', ReleaseOutcome.RELEASED)
            Logger.base.info(f'🔓 [RELEASE] {flight_id}/{seat_id} released by {holder_id}')
            return ReleaseOutcome.RELEASED
