from datetime import timedelta

from opentelemetry import trace
import uuid_utils

from flight_booking.platform.exception.exceptions import DomainError
from flight_booking.platform.logging.loguru_io import Logger
from flight_booking.platform.state.retry import retry_transient
from flight_booking.service.hold.app.dto import (
    BlockSeatOutcome,
    BlockSeatResult,
    BlockSeatsResult,
    SeatFailure,
    SeatFailureReason,
)
from flight_booking.service.hold.app.interface import IHoldStore, ILockService
from flight_booking.service.hold.domain.hold_entity import Hold
from flight_booking.service.inventory.app.interface import ISeatInventoryStore
from flight_booking.service.inventory.domain.seat_entity import Seat, canonical_seat_order
from flight_booking.service.pricing.app.query.calculate_price_use_case import (
    CalculatePriceUseCase,
)
from flight_booking.service.shared_kernel.app.interface.i_clock import IClock
from flight_booking.service.shared_kernel.domain.enum import SeatClass, SeatState


class BlockSeatsUseCase:
    """
    Hold one or more seats for a holder, all-or-nothing.

    Flow:
    1. Validate request, flight status and seat ids (before any lock is taken)
    2. Quote a price per seat class
    3. Acquire per-seat locks one at a time in canonical seat order, marking
       each seat held as soon as its lock is ours
    4. Any seat unavailable -> roll back every lock taken in this attempt
    5. Save the hold record (session, seats, quoted prices)

    Canonical order means two callers asking for overlapping seats always
    contend on the lowest shared seat first, so neither can wait on the other.
    Lock contention is a result, never an exception, and is never retried.
    """

    def __init__(
        self,
        *,
        lock_service: ILockService,
        hold_store: IHoldStore,
        inventory_store: ISeatInventoryStore,
        price_calculator: CalculatePriceUseCase,
        clock: IClock,
        default_hold_seconds: int,
        max_hold_seconds: int,
        max_seats_per_hold: int,
        retry_attempts: int,
        retry_backoff_seconds: float,
    ) -> None:
        self.lock_service = lock_service
        self.hold_store = hold_store
        self.inventory_store = inventory_store
        self.price_calculator = price_calculator
        self.clock = clock
        self.default_hold_seconds = default_hold_seconds
        self.max_hold_seconds = max_hold_seconds
        self.max_seats_per_hold = max_seats_per_hold
        self.retry_attempts = retry_attempts
        self.retry_backoff_seconds = retry_backoff_seconds
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def block_seat(
        self,
        *,
        flight_id: str,
        seat_id: str,
        holder_id: str,
        hold_seconds: int | None = None,
    ) -> BlockSeatResult:
        result = await self.block_seats(
            flight_id=flight_id, seat_ids=[seat_id], holder_id=holder_id, hold_seconds=hold_seconds
        )
        if result.success:
            return BlockSeatResult(
                outcome=BlockSeatOutcome.HELD,
                flight_id=flight_id,
                seat_id=seat_id,
                session_id=result.session_id,
                expires_at=result.expires_at,
                price=result.seat_prices.get(seat_id),
            )
        failure = result.failed[0]
        return BlockSeatResult(
            outcome=BlockSeatOutcome.CONFLICT,
            flight_id=flight_id,
            seat_id=seat_id,
            expires_at=failure.expires_at,
            holder_id=failure.holder_id,
            reason=failure.reason,
        )

    @Logger.io
    async def block_seats(
        self,
        *,
        flight_id: str,
        seat_ids: list[str],
        holder_id: str,
        hold_seconds: int | None = None,
    ) -> BlockSeatsResult:
        with self.tracer.start_as_current_span(
            'hold.block_seats',
            attributes={'flight.id': flight_id, 'holder.id': holder_id, 'seat.count': len(seat_ids)},
        ) as span:
            ordered = canonical_seat_order(seat_ids)
            hold_seconds = self._validate(ordered=ordered, hold_seconds=hold_seconds)

            flight = await self.inventory_store.get_flight(flight_id=flight_id)
            if not flight.status.accepts_holds:
                raise DomainError(f'Flight {flight_id} is {flight.status}; seats cannot be held')

            seats = [
                await self.inventory_store.get_seat(flight_id=flight_id, seat_id=seat_id)
                for seat_id in ordered
            ]
            seat_prices = await self._quote(flight_id=flight_id, seats=seats)

            session_id = str(uuid_utils.uuid7())
            now = self.clock.now()
            expires_at = now + timedelta(seconds=hold_seconds)

            acquired, failure = await self._acquire_all(
                flight_id=flight_id,
                ordered=ordered,
                holder_id=holder_id,
                session_id=session_id,
                hold_seconds=hold_seconds,
            )
            if failure is not None:
                released = await self._rollback(
                    flight_id=flight_id,
                    seat_ids=acquired,
                    holder_id=holder_id,
                    session_id=session_id,
                )
                span.set_attribute('hold.outcome', 'conflict')
                Logger.base.info(
                    f'🚫 [HOLD] {flight_id} seat {failure.seat_id} {failure.reason}; '
                    f'rolled back {released}'
                )
                return BlockSeatsResult(
                    success=False, flight_id=flight_id, failed=[failure], released=released
                )

            hold = Hold(
                session_id=session_id,
                flight_id=flight_id,
                holder_id=holder_id,
                seat_ids=ordered,
                created_at=now,
                expires_at=expires_at,
                seat_prices=seat_prices,
                seat_classes={seat.seat_id: seat.seat_class for seat in seats},
            )
            try:
                await retry_transient(
                    lambda: self.hold_store.save(hold=hold),
                    attempts=self.retry_attempts,
                    backoff_seconds=self.retry_backoff_seconds,
                    operation_name='hold.save',
                )
            except Exception:
                await self._rollback(
                    flight_id=flight_id,
                    seat_ids=acquired,
                    holder_id=holder_id,
                    session_id=session_id,
                )
                raise

            span.set_attribute('hold.outcome', 'held')
            span.set_attribute('hold.session_id', session_id)
            Logger.base.info(
                f'✅ [HOLD] {flight_id} {ordered} held by {holder_id} '
                f'session={session_id} until {expires_at.isoformat()}'
            )
            return BlockSeatsResult(
                success=True,
                flight_id=flight_id,
                session_id=session_id,
                expires_at=expires_at,
                held=ordered,
                seat_prices=seat_prices,
            )

    def _validate(self, *, ordered: list[str], hold_seconds: int | None) -> int:
        if not ordered:
            raise DomainError('At least one seat is required')
        if len(ordered) > self.max_seats_per_hold:
            raise DomainError(f'At most {self.max_seats_per_hold} seats can be held at once')
        if hold_seconds is None:
            return self.default_hold_seconds
        if hold_seconds <= 0 or hold_seconds > self.max_hold_seconds:
            raise DomainError(f'hold_seconds must be between 1 and {self.max_hold_seconds}')
        return hold_seconds

    async def _quote(self, *, flight_id: str, seats: list[Seat]) -> dict[str, int]:
        quotes: dict[SeatClass, int] = {}
        for seat_class in sorted({seat.seat_class for seat in seats}):
            quote = await self.price_calculator.calculate_price(
                flight_id=flight_id, seat_class=seat_class
            )
            quotes[seat_class] = quote.final_price
        return {seat.seat_id: quotes[seat.seat_class] for seat in seats}

    async def _acquire_all(
        self,
        *,
        flight_id: str,
        ordered: list[str],
        holder_id: str,
        session_id: str,
        hold_seconds: int,
    ) -> tuple[list[str], SeatFailure | None]:
        acquired: list[str] = []
        try:
            for seat_id in ordered:
                acquisition = await retry_transient(
                    lambda: self.lock_service.acquire(
                        flight_id=flight_id,
                        seat_id=seat_id,
                        holder_id=holder_id,
                        session_id=session_id,
                        ttl_seconds=hold_seconds,
                    ),
                    attempts=self.retry_attempts,
                    backoff_seconds=self.retry_backoff_seconds,
                    operation_name='lock.acquire',
                )
                if not acquisition.acquired:
                    current = acquisition.lock
                    return acquired, SeatFailure(
                        seat_id=seat_id,
                        reason=SeatFailureReason.HELD_BY_OTHER,
                        holder_id=current.holder_id if current else None,
                        expires_at=current.expires_at if current else None,
                    )
                acquired.append(seat_id)

                # HELD -> HELD is fine: we own the lock, the old marker is stale
                transition = await self.inventory_store.transition_seat_state(
                    flight_id=flight_id,
                    seat_id=seat_id,
                    allowed_from={SeatState.AVAILABLE, SeatState.HELD},
                    new_state=SeatState.HELD,
                )
                if not transition.success:
                    return acquired, SeatFailure(seat_id=seat_id, reason=SeatFailureReason.BOOKED)
        except Exception:
            await self._rollback(
                flight_id=flight_id, seat_ids=acquired, holder_id=holder_id, session_id=session_id
            )
            raise
        return acquired, None

    async def _rollback(
        self, *, flight_id: str, seat_ids: list[str], holder_id: str, session_id: str
    ) -> list[str]:
        """Revert each seat we marked held, then drop our lock. Returns seats released."""
        released: list[str] = []
        for seat_id in reversed(seat_ids):
            try:
                await self.inventory_store.transition_seat_state(
                    flight_id=flight_id,
                    seat_id=seat_id,
                    allowed_from={SeatState.HELD},
                    new_state=SeatState.AVAILABLE,
                )
                await retry_transient(
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
            except Exception as e:
                # The lock still expires on its TTL and the sweeper reverts the seat
                Logger.base.error(f'❌ [HOLD-ROLLBACK] {flight_id}/{seat_id} left for expiry: {e}')
                continue
            released.append(seat_id)
        released.reverse()
        return released
