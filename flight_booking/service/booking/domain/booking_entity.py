from datetime import datetime

import attrs

from flight_booking.platform.exception.exceptions import DomainError, NotCancellableError
from flight_booking.service.booking.domain.passenger import Passenger
from flight_booking.service.booking.domain.payment_result import PaymentResult
from flight_booking.service.hold.domain.hold_entity import Hold
from flight_booking.service.shared_kernel.domain.enum import BookingStatus, PaymentStatus, SeatClass


CANCELLABLE_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED})


@attrs.define
class Booking:
    """
    Durable booking created from a committed hold.

    pending -> confirmed -> checked_in -> completed
    pending | confirmed -> cancelled
    completed and cancelled are terminal.
    """

    reference: str
    flight_id: str
    user_id: str
    hold_session_id: str
    seat_ids: list[str]
    passengers: list[Passenger]
    seat_prices: dict[str, int]
    seat_classes: dict[str, SeatClass]
    total_price: int
    status: BookingStatus
    payment_status: PaymentStatus
    created_at: datetime
    updated_at: datetime
    payment_method: str | None = None
    transaction_id: str | None = None
    paid_at: datetime | None = None
    checked_in_at: datetime | None = None
    completed_at: datetime | None = None
    cancelled_at: datetime | None = None
    cancelled_by: str | None = None
    cancellation_reason: str | None = None

    @classmethod
    def create_from_hold(
        cls,
        *,
        reference: str,
        hold: Hold,
        passengers: list[Passenger],
        payment: PaymentResult,
        now: datetime,
    ) -> 'Booking':
        passenger_seats = [passenger.seat_id for passenger in passengers]
        if sorted(passenger_seats) != sorted(hold.seat_ids):
            raise DomainError('Each held seat needs exactly one passenger')
        if payment.status not in (PaymentStatus.COMPLETED, PaymentStatus.PENDING):
            raise DomainError(f'Cannot create a booking with payment {payment.status}')

        paid = payment.status == PaymentStatus.COMPLETED
        seat_prices = {seat_id: hold.seat_prices[seat_id] for seat_id in hold.seat_ids}
        return cls(
            reference=reference,
            flight_id=hold.flight_id,
            user_id=hold.holder_id,
            hold_session_id=hold.session_id,
            seat_ids=list(hold.seat_ids),
            passengers=list(passengers),
            seat_prices=seat_prices,
            seat_classes={seat_id: hold.seat_classes[seat_id] for seat_id in hold.seat_ids},
            total_price=sum(seat_prices.values()),
            status=BookingStatus.CONFIRMED if paid else BookingStatus.PENDING,
            payment_status=payment.status,
            payment_method=payment.method,
            transaction_id=payment.transaction_id,
            created_at=now,
            updated_at=now,
            paid_at=now if paid else None,
        )

    @property
    def is_cancellable(self) -> bool:
        return self.status in CANCELLABLE_STATUSES

    def confirm_payment(self, *, payment: PaymentResult, now: datetime) -> 'Booking':
        if self.status != BookingStatus.PENDING:
            raise DomainError(f'Booking {self.reference} is {self.status}, not pending')
        return attrs.evolve(
            self,
            status=BookingStatus.CONFIRMED,
            payment_status=PaymentStatus.COMPLETED,
            payment_method=payment.method or self.payment_method,
            transaction_id=payment.transaction_id or self.transaction_id,
            paid_at=now,
            updated_at=now,
        )

    def check_in(self, *, now: datetime) -> 'Booking':
        if self.status != BookingStatus.CONFIRMED:
            raise DomainError(f'Only confirmed bookings can check in; {self.reference} is {self.status}')
        return attrs.evolve(
            self, status=BookingStatus.CHECKED_IN, checked_in_at=now, updated_at=now
        )

    def complete(self, *, now: datetime) -> 'Booking':
        if self.status != BookingStatus.CHECKED_IN:
            raise DomainError(f'Only checked-in bookings can complete; {self.reference} is {self.status}')
        return attrs.evolve(self, status=BookingStatus.COMPLETED, completed_at=now, updated_at=now)

    def cancel(
        self,
        *,
        actor_id: str,
        reason: str | None,
        now: datetime,
        payment_status: PaymentStatus | None = None,
    ) -> 'Booking':
        if not self.is_cancellable:
            raise NotCancellableError(f'Booking {self.reference} is {self.status}')
        if payment_status is None:
            payment_status = (
                PaymentStatus.REFUNDED
                if self.payment_status == PaymentStatus.COMPLETED
                else self.payment_status
            )
        return attrs.evolve(
            self,
            status=BookingStatus.CANCELLED,
            payment_status=payment_status,
            cancelled_at=now,
            cancelled_by=actor_id,
            cancellation_reason=reason,
            updated_at=now,
        )

    @property
    def seat_class_set(self) -> set[SeatClass]:
        return set(self.seat_classes.values())
