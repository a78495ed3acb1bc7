from datetime import timedelta

from opentelemetry import trace

from flight_booking.platform.exception.exceptions import DomainError
from flight_booking.platform.logging.loguru_io import Logger
from flight_booking.service.hold.app.dto import (
    ExtendOutcome,
    ExtendSeatBlockResult,
    LockExtendOutcome,
)
from flight_booking.service.hold.app.interface import IHoldStore, ILockService
from flight_booking.service.shared_kernel.app.interface.i_clock import IClock


class ExtendSeatBlockUseCase:
    """
    Push a held seat's expiry out by extra_seconds, keeping the session id.
    The new expiry never lies more than max_hold_seconds past now.
    """

    def __init__(
        self,
        *,
        lock_service: ILockService,
        hold_store: IHoldStore,
        clock: IClock,
        max_hold_seconds: int,
    ) -> None:
        self.lock_service = lock_service
        self.hold_store = hold_store
        self.clock = clock
        self.max_hold_seconds = max_hold_seconds
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def execute(
        self,
        *,
        flight_id: str,
        seat_id: str,
        holder_id: str,
        session_id: str,
        extra_seconds: int,
    ) -> ExtendSeatBlockResult:
        if extra_seconds <= 0:
            raise DomainError('extra_seconds must be positive')

        with self.tracer.start_as_current_span(
            'hold.extend_seat_block',
            attributes={'flight.id': flight_id, 'seat.id': seat_id, 'holder.id': holder_id},
        ):
            result = ExtendSeatBlockResult(
                outcome=ExtendOutcome.NOT_FOUND,
                flight_id=flight_id,
                seat_id=seat_id,
                session_id=session_id,
            )
            lock = await self.lock_service.get(flight_id=flight_id, seat_id=seat_id)
            if lock is None:
                return result
            if not lock.is_owned_by(holder_id=holder_id, session_id=session_id):
                return ExtendSeatBlockResult(
                    outcome=ExtendOutcome.UNAUTHORIZED,
                    flight_id=flight_id,
                    seat_id=seat_id,
                    session_id=session_id,
                )

            ceiling = self.clock.now() + timedelta(seconds=self.max_hold_seconds)
            expires_at = min(lock.expires_at + timedelta(seconds=extra_seconds), ceiling)

            extension = await self.lock_service.extend_if_owner(
                flight_id=flight_id,
                seat_id=seat_id,
                holder_id=holder_id,
                session_id=session_id,
                expires_at=expires_at,
            )
            if extension.outcome == LockExtendOutcome.NOT_FOUND:
                return result
            if extension.outcome == LockExtendOutcome.NOT_OWNER:
                return ExtendSeatBlockResult(
                    outcome=ExtendOutcome.UNAUTHORIZED,
                    flight_id=flight_id,
                    seat_id=seat_id,
                    session_id=session_id,
                )

            # The hold record lives as long as its longest-lived seat
            hold = await self.hold_store.get(session_id=session_id)
            if hold is not None and expires_at > hold.expires_at:
                await self.hold_store.update_expiry(session_id=session_id, expires_at=expires_at)

            Logger.base.info(
                f'⏱️ [EXTEND] {flight_id}/{seat_id} session={session_id} '
                f'now expires {expires_at.isoformat()}'
            )
            return ExtendSeatBlockResult(
                outcome=ExtendOutcome.EXTENDED,
                flight_id=flight_id,
                seat_id=seat_id,
                session_id=session_id,
                expires_at=expires_at,
            )
