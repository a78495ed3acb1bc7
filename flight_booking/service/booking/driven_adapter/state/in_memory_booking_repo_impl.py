"""
In-memory booking repos over InMemoryStateStore.

commit_hold and cancel_and_release run entirely under the store lock and
validate everything before the first write, which gives them the same
all-or-nothing visibility as the Kvrocks scripts.
"""

from flight_booking.platform.exception.exceptions import NotFoundError
from flight_booking.platform.state.in_memory_state_store import InMemoryStateStore
from flight_booking.service.booking.app.dto import (
    CancelOutcome,
    CancelResult,
    CommitOutcome,
    CommitResult,
)
from flight_booking.service.booking.app.interface import IBookingCommandRepo, IBookingQueryRepo
from flight_booking.service.booking.domain.booking_entity import CANCELLABLE_STATUSES, Booking
from flight_booking.service.hold.domain.hold_entity import Hold, SeatLock
from flight_booking.service.inventory.driven_adapter.state.in_memory_seat_inventory_store_impl import (
    apply_seat_state,
    seat_map,
)
from flight_booking.service.shared_kernel.domain.enum import BookingStatus, SeatState
from flight_booking.service.shared_kernel.driven_adapter.key_str_generator import (
    make_booking_key,
    make_booking_session_key,
    make_flight_bookings_key,
    make_hold_key,
    make_seat_lock_key,
    make_user_bookings_key,
)


class InMemoryBookingCommandRepoImpl(IBookingCommandRepo):
    def __init__(self, *, store: InMemoryStateStore) -> None:
        self.store = store

    async def commit_hold(self, *, hold: Hold, booking: Booking) -> CommitResult:
        store = self.store
        flight_id = hold.flight_id
        async with store.lock:
            existing = store.get(make_booking_session_key(session_id=hold.session_id))
            if existing is not None:
                return CommitResult(outcome=CommitOutcome.ALREADY_COMMITTED, reference=existing)
            if store.exists(make_booking_key(reference=booking.reference)):
                return CommitResult(outcome=CommitOutcome.DUPLICATE_REFERENCE)
            if not store.exists(make_hold_key(session_id=hold.session_id)):
                return CommitResult(outcome=CommitOutcome.HOLD_EXPIRED)

            lock_keys = {
                seat_id: make_seat_lock_key(flight_id=flight_id, seat_id=seat_id)
                for seat_id in booking.seat_ids
            }
            for seat_id, key in lock_keys.items():
                lock: SeatLock | None = store.get(key)
                if lock is None:
                    return CommitResult(outcome=CommitOutcome.HOLD_EXPIRED, seat_id=seat_id)
                if lock.session_id != hold.session_id:
                    return CommitResult(outcome=CommitOutcome.HOLD_MISMATCH, seat_id=seat_id)

            seats = seat_map(store, flight_id)
            for seat_id in booking.seat_ids:
                seat = seats.get(seat_id)
                if seat is None or seat.state != SeatState.HELD:
                    return CommitResult(outcome=CommitOutcome.INVENTORY_CONFLICT, seat_id=seat_id)

            for seat_id, key in lock_keys.items():
                apply_seat_state(
                    store, flight_id, seat_id, SeatState.BOOKED, price=booking.seat_prices[seat_id]
                )
                store.delete(key)
            store.set(make_booking_key(reference=booking.reference), booking)
            store.set(make_booking_session_key(session_id=hold.session_id), booking.reference)
            store.setdefault(make_flight_bookings_key(flight_id=flight_id), set).add(
                booking.reference
            )
            store.setdefault(make_user_bookings_key(user_id=booking.user_id), set).add(
                booking.reference
            )
            store.delete(make_hold_key(session_id=hold.session_id))
            return CommitResult(outcome=CommitOutcome.OK, reference=booking.reference)

    async def cancel_and_release(self, *, booking: Booking) -> CancelResult:
        store = self.store
        key = make_booking_key(reference=booking.reference)
        async with store.lock:
            stored: Booking | None = store.get(key)
            if stored is None:
                return CancelResult(outcome=CancelOutcome.NOT_FOUND)
            if stored.status == BookingStatus.CANCELLED:
                return CancelResult(outcome=CancelOutcome.ALREADY_CANCELLED, booking=stored)
            if stored.status not in CANCELLABLE_STATUSES:
                return CancelResult(outcome=CancelOutcome.NOT_CANCELLABLE)

            seats = seat_map(store, booking.flight_id)
            for seat_id in booking.seat_ids:
                seat = seats.get(seat_id)
                if seat is not None and seat.state == SeatState.BOOKED:
                    apply_seat_state(
                        store, booking.flight_id, seat_id, SeatState.AVAILABLE, clear_price=True
                    )
            store.set(key, booking)
            return CancelResult(outcome=CancelOutcome.OK, booking=booking)

    async def update_status(self, *, booking: Booking, expected_status: BookingStatus) -> bool:
        key = make_booking_key(reference=booking.reference)
        async with self.store.lock:
            stored: Booking | None = self.store.get(key)
            if stored is None:
                raise NotFoundError(f'Booking {booking.reference} not found')
            if stored.status != expected_status:
                return False
            self.store.set(key, booking)
            return True


class InMemoryBookingQueryRepoImpl(IBookingQueryRepo):
    def __init__(self, *, store: InMemoryStateStore) -> None:
        self.store = store

    async def get(self, *, reference: str) -> Booking:
        async with self.store.lock:
            booking = self.store.get(make_booking_key(reference=reference))
        if booking is None:
            raise NotFoundError(f'Booking {reference} not found')
        return booking

    async def get_by_hold_session(self, *, session_id: str) -> Booking | None:
        async with self.store.lock:
            reference = self.store.get(make_booking_session_key(session_id=session_id))
            if reference is None:
                return None
            return self.store.get(make_booking_key(reference=reference))

    async def reference_exists(self, *, reference: str) -> bool:
        async with self.store.lock:
            return self.store.exists(make_booking_key(reference=reference))

    async def list_by_flight(self, *, flight_id: str) -> list[Booking]:
        return await self._load_index(make_flight_bookings_key(flight_id=flight_id))

    async def list_by_user(self, *, user_id: str) -> list[Booking]:
        return await self._load_index(make_user_bookings_key(user_id=user_id))

    async def _load_index(self, index_key: str) -> list[Booking]:
        async with self.store.lock:
            references = sorted(self.store.get(index_key, set()))
            return [self.store.get(make_booking_key(reference=ref)) for ref in references]
