"""
Booking Command Repo - Kvrocks implementation

commit_hold.lua and cancel_booking.lua touch the hold, seat locks, seat
inventory hashes and booking keys of one flight in a single script run, so a
failure leaves either the whole change or none of it.
"""

from opentelemetry import trace

from flight_booking.platform.exception.exceptions import NotFoundError
from flight_booking.platform.logging.loguru_io import Logger
from flight_booking.platform.state.kvrocks_client import kvrocks_client, translate_store_errors
from flight_booking.platform.state.lua_script_executor import lua_scripts
from flight_booking.service.booking.app.dto import (
    CancelOutcome,
    CancelResult,
    CommitOutcome,
    CommitResult,
)
from flight_booking.service.booking.app.interface import IBookingCommandRepo
from flight_booking.service.booking.domain.booking_entity import Booking
from flight_booking.service.booking.driven_adapter.state.booking_codec import booking_from_dict
from flight_booking.service.hold.domain.hold_entity import Hold
from flight_booking.service.shared_kernel.domain.enum import BookingStatus
from flight_booking.service.shared_kernel.driven_adapter.json_codec import dumps, loads
from flight_booking.service.shared_kernel.driven_adapter.key_str_generator import (
    make_booking_key,
    make_booking_session_key,
    make_flight_bookings_key,
    make_hold_key,
    make_seat_class_key,
    make_seat_lock_key,
    make_seat_price_key,
    make_seat_state_key,
    make_seat_stats_key,
    make_user_bookings_key,
)


class BookingCommandRepoImpl(IBookingCommandRepo):
    def __init__(self) -> None:
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    @translate_store_errors
    async def commit_hold(self, *, hold: Hold, booking: Booking) -> CommitResult:
        with self.tracer.start_as_current_span(
            'booking_repo.commit_hold',
            attributes={'booking.reference': booking.reference, 'hold.session_id': hold.session_id},
        ):
            flight_id = hold.flight_id
            keys = [
                make_hold_key(session_id=hold.session_id),
                make_booking_key(reference=booking.reference),
                make_booking_session_key(session_id=hold.session_id),
                make_seat_state_key(flight_id=flight_id),
                make_seat_class_key(flight_id=flight_id),
                make_seat_stats_key(flight_id=flight_id),
                make_seat_price_key(flight_id=flight_id),
                make_flight_bookings_key(flight_id=flight_id),
                make_user_bookings_key(user_id=booking.user_id),
                *(
                    make_seat_lock_key(flight_id=flight_id, seat_id=seat_id)
                    for seat_id in booking.seat_ids
                ),
            ]
            args = [
                hold.session_id,
                dumps(booking),
                booking.reference,
                len(booking.seat_ids),
                *booking.seat_ids,
                *(booking.seat_prices[seat_id] for seat_id in booking.seat_ids),
            ]
            outcome, detail = await lua_scripts.run(
                'commit_hold', client=kvrocks_client.get_client(), keys=keys, args=args
            )
            commit_outcome = CommitOutcome(outcome.lower())
            if commit_outcome in (CommitOutcome.OK, CommitOutcome.ALREADY_COMMITTED):
                return CommitResult(outcome=commit_outcome, reference=detail)
            return CommitResult(outcome=commit_outcome, seat_id=detail or None)

    @Logger.io
    @translate_store_errors
    async def cancel_and_release(self, *, booking: Booking) -> CancelResult:
        flight_id = booking.flight_id
        outcome, detail = await lua_scripts.run(
            'cancel_booking',
            client=kvrocks_client.get_client(),
            keys=[
                make_booking_key(reference=booking.reference),
                make_seat_state_key(flight_id=flight_id),
                make_seat_class_key(flight_id=flight_id),
                make_seat_stats_key(flight_id=flight_id),
                make_seat_price_key(flight_id=flight_id),
            ],
            args=[dumps(booking), *booking.seat_ids],
        )
        cancel_outcome = CancelOutcome(outcome.lower())
        if cancel_outcome in (CancelOutcome.OK, CancelOutcome.ALREADY_CANCELLED):
            return CancelResult(outcome=cancel_outcome, booking=booking_from_dict(loads(detail)))
        return CancelResult(outcome=cancel_outcome)

    @Logger.io
    @translate_store_errors
    async def update_status(self, *, booking: Booking, expected_status: BookingStatus) -> bool:
        outcome, _ = await lua_scripts.run(
            'update_booking_status',
            client=kvrocks_client.get_client(),
            keys=[make_booking_key(reference=booking.reference)],
            args=[expected_status.value, dumps(booking)],
        )
        if outcome == 'NOT_FOUND':
            raise NotFoundError(f'Booking {booking.reference} not found')
        return outcome == 'OK'
