from datetime import timedelta

from opentelemetry import trace

from flight_booking.platform.exception.exceptions import (
    ForbiddenError,
    NotCancellableError,
    NotFoundError,
)
from flight_booking.platform.logging.loguru_io import Logger
from flight_booking.service.booking.app.dto import CancelOutcome
from flight_booking.service.booking.app.interface import IBookingCommandRepo, IBookingQueryRepo
from flight_booking.service.booking.domain.booking_entity import Booking
from flight_booking.service.inventory.app.interface import ISeatInventoryStore
from flight_booking.service.pricing.app.command.invalidate_price_cache_use_case import (
    InvalidatePriceCacheUseCase,
)
from flight_booking.service.shared_kernel.app.interface.i_clock import IClock
from flight_booking.service.shared_kernel.domain.enum import BookingStatus, PaymentStatus


class CancelBookingUseCase:
    """
    Cancel a pending or confirmed booking and give its seats back.

    Non-admin actors must own the booking and cancel more than the cutoff
    before departure. Cancelling an already-cancelled booking returns it
    unchanged.
    """

    def __init__(
        self,
        *,
        booking_command_repo: IBookingCommandRepo,
        booking_query_repo: IBookingQueryRepo,
        inventory_store: ISeatInventoryStore,
        price_cache_invalidator: InvalidatePriceCacheUseCase,
        clock: IClock,
        cancellation_cutoff_hours: float,
    ) -> None:
        self.booking_command_repo = booking_command_repo
        self.booking_query_repo = booking_query_repo
        self.inventory_store = inventory_store
        self.price_cache_invalidator = price_cache_invalidator
        self.clock = clock
        self.cancellation_cutoff = timedelta(hours=cancellation_cutoff_hours)
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def execute(
        self,
        *,
        booking_id: str,
        actor_id: str,
        reason: str | None = None,
        is_admin: bool = False,
    ) -> Booking:
        with self.tracer.start_as_current_span(
            'booking.cancel',
            attributes={'booking.reference': booking_id, 'actor.id': actor_id, 'actor.admin': is_admin},
        ):
            booking = await self.booking_query_repo.get(reference=booking_id)
            if booking.status == BookingStatus.CANCELLED:
                Logger.base.info(f'♻️ [CANCEL] {booking_id} already cancelled')
                return booking
            if not is_admin and actor_id != booking.user_id:
                raise ForbiddenError(f'{actor_id} may not cancel booking {booking_id}')
            if not booking.is_cancellable:
                raise NotCancellableError(f'Booking {booking_id} is {booking.status}')

            now = self.clock.now()
            if not is_admin:
                flight = await self.inventory_store.get_flight(flight_id=booking.flight_id)
                if flight.departure_time - now <= self.cancellation_cutoff:
                    raise NotCancellableError(
                        f'Booking {booking_id} can no longer be cancelled this close to departure'
                    )

            return await self.cancel_and_release(
                booking=booking, actor_id=actor_id, reason=reason
            )

    async def cancel_and_release(
        self,
        *,
        booking: Booking,
        actor_id: str,
        reason: str | None,
        payment_status: PaymentStatus | None = None,
    ) -> Booking:
        """Rules already checked; apply the cancellation atomically and tidy up."""
        cancelled = booking.cancel(
            actor_id=actor_id, reason=reason, now=self.clock.now(), payment_status=payment_status
        )
        result = await self.booking_command_repo.cancel_and_release(booking=cancelled)
        if result.outcome == CancelOutcome.NOT_FOUND:
            raise NotFoundError(f'Booking {booking.reference} not found')
        if result.outcome == CancelOutcome.NOT_CANCELLABLE:
            raise NotCancellableError(f'Booking {booking.reference} changed state; not cancellable')
        if result.outcome == CancelOutcome.ALREADY_CANCELLED:
            return result.booking  # type: ignore[return-value]

        await self.inventory_store.recompute_availability(flight_id=booking.flight_id)
        await self.price_cache_invalidator.invalidate_classes(
            flight_id=booking.flight_id, seat_classes=booking.seat_class_set
        )
        Logger.base.info(
            f'🗑️ [CANCEL] {booking.reference} by {actor_id}; released {booking.seat_ids}'
        )
        return cancelled
