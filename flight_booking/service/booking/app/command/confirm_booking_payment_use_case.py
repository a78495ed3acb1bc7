from opentelemetry import trace

from flight_booking.platform.exception.exceptions import ConflictError, PaymentFailedError
from flight_booking.platform.logging.loguru_io import Logger
from flight_booking.service.booking.app.command.cancel_booking_use_case import (
    CancelBookingUseCase,
)
from flight_booking.service.booking.app.interface import IBookingCommandRepo, IBookingQueryRepo
from flight_booking.service.booking.domain.booking_entity import Booking
from flight_booking.service.booking.domain.payment_result import PaymentResult
from flight_booking.service.shared_kernel.app.interface.i_clock import IClock
from flight_booking.service.shared_kernel.domain.enum import BookingStatus, PaymentStatus


PAYMENT_SYSTEM_ACTOR = 'payment'


class ConfirmBookingPaymentUseCase:
    """
    Settle a pending booking once the payment collaborator reports back.

    completed -> confirmed
    failed    -> cancelled with its seats released, then PaymentFailedError
    pending   -> unchanged
    """

    def __init__(
        self,
        *,
        booking_command_repo: IBookingCommandRepo,
        booking_query_repo: IBookingQueryRepo,
        cancel_booking_use_case: CancelBookingUseCase,
        clock: IClock,
    ) -> None:
        self.booking_command_repo = booking_command_repo
        self.booking_query_repo = booking_query_repo
        self.cancel_booking_use_case = cancel_booking_use_case
        self.clock = clock
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def execute(self, *, booking_id: str, payment_result: PaymentResult) -> Booking:
        with self.tracer.start_as_current_span(
            'booking.confirm_payment',
            attributes={'booking.reference': booking_id, 'payment.status': payment_result.status},
        ):
            booking = await self.booking_query_repo.get(reference=booking_id)

            if payment_result.status == PaymentStatus.PENDING:
                return booking

            if payment_result.status == PaymentStatus.FAILED:
                if booking.status == BookingStatus.PENDING:
                    await self.cancel_booking_use_case.cancel_and_release(
                        booking=booking,
                        actor_id=PAYMENT_SYSTEM_ACTOR,
                        reason='payment_failed',
                        payment_status=PaymentStatus.FAILED,
                    )
                raise PaymentFailedError(f'Payment failed for booking {booking_id}')

            confirmed = booking.confirm_payment(payment=payment_result, now=self.clock.now())
            if not await self.booking_command_repo.update_status(
                booking=confirmed, expected_status=BookingStatus.PENDING
            ):
                raise ConflictError(f'Booking {booking_id} changed while confirming payment')
            Logger.base.info(f'💳 [PAYMENT] {booking_id} confirmed')
            return confirmed
