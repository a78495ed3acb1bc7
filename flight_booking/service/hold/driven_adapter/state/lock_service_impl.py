"""
Distributed Lock Service - Kvrocks implementation

acquire:  SET seat_hold:{flight}:{seat} <SeatLock JSON> NX PX <ttl>
release:  release_lock_if_owner.lua (compare holder+session, then DEL)
extend:   extend_lock_if_owner.lua (compare holder+session, then SET PX)
"""

from datetime import datetime, timedelta

from opentelemetry import trace

from flight_booking.platform.logging.loguru_io import Logger
from flight_booking.platform.state.kvrocks_client import kvrocks_client, translate_store_errors
from flight_booking.platform.state.lua_script_executor import lua_scripts
from flight_booking.service.hold.app.dto.lock_dto import (
    LockAcquisition,
    LockExtendOutcome,
    LockExtension,
    LockReleaseOutcome,
)
from flight_booking.service.hold.app.interface.i_lock_service import ILockService
from flight_booking.service.hold.domain.hold_entity import SeatLock
from flight_booking.service.hold.driven_adapter.state.hold_codec import seat_lock_from_dict
from flight_booking.service.shared_kernel.app.interface.i_clock import IClock
from flight_booking.service.shared_kernel.driven_adapter.json_codec import dumps, loads
from flight_booking.service.shared_kernel.driven_adapter.key_str_generator import (
    make_seat_lock_key,
    make_seat_lock_pattern,
)


def _ttl_ms(expires_at: datetime, now: datetime) -> int:
    return max(1, int((expires_at - now).total_seconds() * 1000))


class LockServiceImpl(ILockService):
    def __init__(self, *, clock: IClock) -> None:
        self.clock = clock
        self.tracer = trace.get_tracer(__name__)

    @translate_store_errors
    async def acquire(
        self,
        *,
        flight_id: str,
        seat_id: str,
        holder_id: str,
        session_id: str,
        ttl_seconds: float,
    ) -> LockAcquisition:
        with self.tracer.start_as_current_span(
            'lock.acquire', attributes={'flight.id': flight_id, 'seat.id': seat_id}
        ):
            now = self.clock.now()
            lock = SeatLock(
                flight_id=flight_id,
                seat_id=seat_id,
                holder_id=holder_id,
                session_id=session_id,
                held_at=now,
                expires_at=now + timedelta(seconds=ttl_seconds),
            )
            client = kvrocks_client.get_client()
            key = make_seat_lock_key(flight_id=flight_id, seat_id=seat_id)
            if await client.set(key, dumps(lock), nx=True, px=_ttl_ms(lock.expires_at, now)):
                return LockAcquisition(acquired=True, lock=lock)

            raw = await client.get(key)
            current = seat_lock_from_dict(loads(raw)) if raw else None
            if current is not None and current.is_owned_by(
                holder_id=holder_id, session_id=session_id
            ):
                # An earlier attempt of this same call landed before its reply was lost
                return LockAcquisition(acquired=True, lock=current)
            Logger.base.debug(f'🔒 [LOCK] {flight_id}/{seat_id} already held')
            return LockAcquisition(acquired=False, lock=current)

    @translate_store_errors
    async def release_if_owner(
        self, *, flight_id: str, seat_id: str, holder_id: str, session_id: str
    ) -> LockReleaseOutcome:
        result = await lua_scripts.run(
            'release_lock_if_owner',
            client=kvrocks_client.get_client(),
            keys=[make_seat_lock_key(flight_id=flight_id, seat_id=seat_id)],
            args=[holder_id, session_id],
        )
        return {
            'RELEASED': LockReleaseOutcome.RELEASED,
            'NOT_FOUND': LockReleaseOutcome.NOT_FOUND,
            'NOT_OWNER': LockReleaseOutcome.NOT_OWNER,
        }[result]

    @translate_store_errors
    async def extend_if_owner(
        self,
        *,
        flight_id: str,
        seat_id: str,
        holder_id: str,
        session_id: str,
        expires_at: datetime,
    ) -> LockExtension:
        outcome, raw = await lua_scripts.run(
            'extend_lock_if_owner',
            client=kvrocks_client.get_client(),
            keys=[make_seat_lock_key(flight_id=flight_id, seat_id=seat_id)],
            args=[
                holder_id,
                session_id,
                expires_at.isoformat(),
                _ttl_ms(expires_at, self.clock.now()),
            ],
        )
        return LockExtension(
            outcome=LockExtendOutcome(outcome.lower()),
            lock=seat_lock_from_dict(loads(raw)) if raw else None,
        )

    @translate_store_errors
    async def get(self, *, flight_id: str, seat_id: str) -> SeatLock | None:
        raw = await kvrocks_client.get_client().get(
            make_seat_lock_key(flight_id=flight_id, seat_id=seat_id)
        )
        return seat_lock_from_dict(loads(raw)) if raw else None

    @Logger.io
    @translate_store_errors
    async def list_locks(self, *, flight_id: str) -> list[SeatLock]:
        client = kvrocks_client.get_client()
        keys = [
            key
            async for key in client.scan_iter(
                match=make_seat_lock_pattern(flight_id=flight_id), count=500
            )
        ]
        if not keys:
            return []
        # A key may expire between SCAN and MGET
        return [seat_lock_from_dict(loads(raw)) for raw in await client.mget(keys) if raw]
