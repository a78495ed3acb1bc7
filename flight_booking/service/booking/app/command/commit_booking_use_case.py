from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from flight_booking.platform.exception.exceptions import (
    CustomBaseError,
    HoldExpiredError,
    HoldMismatchError,
    InventoryConflictError,
    PaymentFailedError,
    StoreUnavailableError,
)
from flight_booking.platform.logging.loguru_io import Logger
from flight_booking.platform.state.retry import retry_transient
from flight_booking.service.booking.app.dto import CommitOutcome
from flight_booking.service.booking.app.interface import IBookingCommandRepo, IBookingQueryRepo
from flight_booking.service.booking.domain.booking_entity import Booking
from flight_booking.service.booking.domain.booking_reference import generate_booking_reference
from flight_booking.service.booking.domain.passenger import Passenger
from flight_booking.service.booking.domain.payment_result import PaymentResult
from flight_booking.service.hold.app.command.release_seat_use_case import ReleaseSeatUseCase
from flight_booking.service.hold.app.interface import IHoldStore
from flight_booking.service.hold.domain.hold_entity import Hold
from flight_booking.service.pricing.app.command.invalidate_price_cache_use_case import (
    InvalidatePriceCacheUseCase,
)
from flight_booking.service.shared_kernel.app.interface.i_clock import IClock
from flight_booking.service.shared_kernel.domain.enum import PaymentStatus


class CommitBookingUseCase:
    """
    Turn a live hold into a booking.

    Flow:
    1. Same session committed before -> return that booking (retry-safe)
    2. Load the hold; gone or past its expiry -> HoldExpiredError
    3. Payment failed -> release the hold, PaymentFailedError
    4. One atomic step: seats held -> booked, booking + indexes written,
       locks and hold record deleted
    5. Invalidate cached prices for the booked classes

    The price charged is the price quoted when the seats were held.
    """

    def __init__(
        self,
        *,
        hold_store: IHoldStore,
        booking_command_repo: IBookingCommandRepo,
        booking_query_repo: IBookingQueryRepo,
        release_seat_use_case: ReleaseSeatUseCase,
        price_cache_invalidator: InvalidatePriceCacheUseCase,
        clock: IClock,
        reference_prefix: str,
        reference_max_attempts: int,
        retry_attempts: int,
        retry_backoff_seconds: float,
    ) -> None:
        self.hold_store = hold_store
        self.booking_command_repo = booking_command_repo
        self.booking_query_repo = booking_query_repo
        self.release_seat_use_case = release_seat_use_case
        self.price_cache_invalidator = price_cache_invalidator
        self.clock = clock
        self.reference_prefix = reference_prefix
        self.reference_max_attempts = reference_max_attempts
        self.retry_attempts = retry_attempts
        self.retry_backoff_seconds = retry_backoff_seconds
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def execute(
        self,
        *,
        hold_session_id: str,
        passengers: list[Passenger],
        payment_result: PaymentResult,
    ) -> Booking:
        with self.tracer.start_as_current_span(
            'booking.commit', attributes={'hold.session_id': hold_session_id}
        ) as span:
            try:
                booking = await self._commit(
                    hold_session_id=hold_session_id,
                    passengers=passengers,
                    payment_result=payment_result,
                )
            except CustomBaseError as e:
                span.set_status(Status(StatusCode.ERROR, type(e).__name__))
                raise
            span.set_attribute('booking.reference', booking.reference)
            return booking

    async def _commit(
        self,
        *,
        hold_session_id: str,
        passengers: list[Passenger],
        payment_result: PaymentResult,
    ) -> Booking:
        existing = await self.booking_query_repo.get_by_hold_session(session_id=hold_session_id)
        if existing is not None:
            Logger.base.info(
                f'♻️ [COMMIT] session {hold_session_id} already committed as {existing.reference}'
            )
            return existing

        hold = await self.hold_store.get(session_id=hold_session_id)
        now = self.clock.now()
        if hold is None or hold.is_expired(now):
            raise HoldExpiredError(f'Hold {hold_session_id} has expired')

        if payment_result.status == PaymentStatus.FAILED:
            await self._release_hold(hold)
            raise PaymentFailedError(f'Payment failed for hold {hold_session_id}; seats released')

        for _ in range(self.reference_max_attempts):
            booking = Booking.create_from_hold(
                reference=generate_booking_reference(prefix=self.reference_prefix, now=now),
                hold=hold,
                passengers=passengers,
                payment=payment_result,
                now=now,
            )
            result = await retry_transient(
                lambda: self.booking_command_repo.commit_hold(hold=hold, booking=booking),
                attempts=self.retry_attempts,
                backoff_seconds=self.retry_backoff_seconds,
                operation_name='booking.commit_hold',
            )

            if result.outcome == CommitOutcome.DUPLICATE_REFERENCE:
                Logger.base.warning(f'⚠️ [COMMIT] reference {booking.reference} taken, regenerating')
                continue
            if result.outcome == CommitOutcome.ALREADY_COMMITTED:
                return await self.booking_query_repo.get(reference=result.reference)  # type: ignore[arg-type]
            if result.outcome == CommitOutcome.HOLD_EXPIRED:
                raise HoldExpiredError(f'Hold {hold_session_id} has expired')
            if result.outcome == CommitOutcome.HOLD_MISMATCH:
                raise HoldMismatchError(
                    f'Seat {result.seat_id} is no longer held by session {hold_session_id}'
                )
            if result.outcome == CommitOutcome.INVENTORY_CONFLICT:
                raise InventoryConflictError(
                    f'Seat {result.seat_id} on {hold.flight_id} is not held at commit',
                    seat_id=result.seat_id,
                )

            await self.price_cache_invalidator.invalidate_classes(
                flight_id=booking.flight_id, seat_classes=booking.seat_class_set
            )
            Logger.base.info(
                f'✅ [COMMIT] {booking.reference} {booking.status} flight={booking.flight_id} '
                f'seats={booking.seat_ids} total={booking.total_price}'
            )
            return booking

        raise StoreUnavailableError(
            f'No unique booking reference after {self.reference_max_attempts} attempts'
        )

    async def _release_hold(self, hold: Hold) -> None:
        for seat_id in hold.seat_ids:
            await self.release_seat_use_case.execute(
                flight_id=hold.flight_id,
                seat_id=seat_id,
                holder_id=hold.holder_id,
                session_id=hold.session_id,
            )
        await self.hold_store.delete(session_id=hold.session_id)
        Logger.base.info(f'↩️ [COMMIT] payment failed, released hold {hold.session_id}')
