"""In-memory lock service and hold store over InMemoryStateStore."""

from datetime import datetime, timedelta

import attrs

from flight_booking.platform.logging.loguru_io import Logger
from flight_booking.platform.state.in_memory_state_store import InMemoryStateStore
from flight_booking.service.hold.app.dto.lock_dto import (
    LockAcquisition,
    LockExtendOutcome,
    LockExtension,
    LockReleaseOutcome,
)
from flight_booking.service.hold.app.interface.i_hold_store import IHoldStore
from flight_booking.service.hold.app.interface.i_lock_service import ILockService
from flight_booking.service.hold.domain.hold_entity import Hold, SeatLock
from flight_booking.service.shared_kernel.driven_adapter.key_str_generator import (
    make_hold_key,
    make_seat_lock_key,
)


class InMemoryLockServiceImpl(ILockService):
    def __init__(self, *, store: InMemoryStateStore) -> None:
        self.store = store

    async def acquire(
        self,
        *,
        flight_id: str,
        seat_id: str,
        holder_id: str,
        session_id: str,
        ttl_seconds: float,
    ) -> LockAcquisition:
        key = make_seat_lock_key(flight_id=flight_id, seat_id=seat_id)
        async with self.store.lock:
            now = self.store.clock.now()
            lock = SeatLock(
                flight_id=flight_id,
                seat_id=seat_id,
                holder_id=holder_id,
                session_id=session_id,
                held_at=now,
                expires_at=now + timedelta(seconds=ttl_seconds),
            )
            if self.store.set(key, lock, expires_at=lock.expires_at, nx=True):
                return LockAcquisition(acquired=True, lock=lock)
            current: SeatLock = self.store.get(key)
            if current.is_owned_by(holder_id=holder_id, session_id=session_id):
                return LockAcquisition(acquired=True, lock=current)
        Logger.base.debug(f'🔒 [LOCK] {flight_id}/{seat_id} already held')
        return LockAcquisition(acquired=False, lock=current)

    async def release_if_owner(
        self, *, flight_id: str, seat_id: str, holder_id: str, session_id: str
    ) -> LockReleaseOutcome:
        key = make_seat_lock_key(flight_id=flight_id, seat_id=seat_id)
        async with self.store.lock:
            current: SeatLock | None = self.store.get(key)
            if current is None:
                return LockReleaseOutcome.NOT_FOUND
            if not current.is_owned_by(holder_id=holder_id, session_id=session_id):
                return LockReleaseOutcome.NOT_OWNER
            self.store.delete(key)
            return LockReleaseOutcome.RELEASED

    async def extend_if_owner(
        self,
        *,
        flight_id: str,
        seat_id: str,
        holder_id: str,
        session_id: str,
        expires_at: datetime,
    ) -> LockExtension:
        key = make_seat_lock_key(flight_id=flight_id, seat_id=seat_id)
        async with self.store.lock:
            current: SeatLock | None = self.store.get(key)
            if current is None:
                return LockExtension(outcome=LockExtendOutcome.NOT_FOUND, lock=None)
            if not current.is_owned_by(holder_id=holder_id, session_id=session_id):
                return LockExtension(outcome=LockExtendOutcome.NOT_OWNER, lock=current)
            extended = attrs.evolve(current, expires_at=expires_at)
            self.store.set(key, extended, expires_at=expires_at)
            return LockExtension(outcome=LockExtendOutcome.EXTENDED, lock=extended)

    async def get(self, *, flight_id: str, seat_id: str) -> SeatLock | None:
        async with self.store.lock:
            return self.store.get(make_seat_lock_key(flight_id=flight_id, seat_id=seat_id))

    async def list_locks(self, *, flight_id: str) -> list[SeatLock]:
        prefix = make_seat_lock_key(flight_id=flight_id, seat_id='')
        async with self.store.lock:
            return [self.store.get(key) for key in self.store.keys(prefix)]


class InMemoryHoldStoreImpl(IHoldStore):
    def __init__(self, *, store: InMemoryStateStore) -> None:
        self.store = store

    async def save(self, *, hold: Hold) -> None:
        async with self.store.lock:
            self.store.set(
                make_hold_key(session_id=hold.session_id), hold, expires_at=hold.expires_at
            )

    async def get(self, *, session_id: str) -> Hold | None:
        async with self.store.lock:
            return self.store.get(make_hold_key(session_id=session_id))

    async def delete(self, *, session_id: str) -> bool:
        async with self.store.lock:
            return self.store.delete(make_hold_key(session_id=session_id))

    async def remove_seat(self, *, session_id: str, seat_id: str) -> None:
        key = make_hold_key(session_id=session_id)
        async with self.store.lock:
            hold: Hold | None = self.store.get(key)
            if hold is None:
                return
            remaining = [other for other in hold.seat_ids if other != seat_id]
            if not remaining:
                self.store.delete(key)
                return
            updated = attrs.evolve(
                hold,
                seat_ids=remaining,
                seat_prices={k: v for k, v in hold.seat_prices.items() if k != seat_id},
                seat_classes={k: v for k, v in hold.seat_classes.items() if k != seat_id},
            )
            self.store.set(key, updated, keep_expiry=True)

    async def update_expiry(self, *, session_id: str, expires_at: datetime) -> bool:
        key = make_hold_key(session_id=session_id)
        async with self.store.lock:
            hold: Hold | None = self.store.get(key)
            if hold is None:
                return False
            self.store.set(key, attrs.evolve(hold, expires_at=expires_at), expires_at=expires_at)
            return True
